# Path: catalog_validator/tests/test_discovery.py
"""
Catalog Discovery Tests

Catalogs are recognized by their root element, never by file name.
"""

import pytest

from catalog_validator.engine.catalog.discovery import is_xml_catalog, read_root_tag, scan_catalogs
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.tests.fixtures import (
    EXAMPLE_NS,
    write_catalog,
    write_order,
    write_order_schema,
    write_text,
)


def test_scan_finds_only_catalogs(tmp_path):
    """Three catalogs among schemas, documents and non-XML files."""
    root = tmp_path / 'schemas'
    expected = [
        write_catalog(root / 'a' / 'catalog.xml', f'<uri name="{EXAMPLE_NS}" uri="x.xsd"/>'),
        write_catalog(root / 'b' / 'mapping.xml', '<system systemId="http://x/y.dtd" uri="y.dtd"/>'),
        write_catalog(root / 'z.xml', ''),
    ]
    write_order_schema(root / 'a' / 'order.xsd')
    write_order(root / 'b' / 'order.xml')
    write_text(root / 'readme.txt', 'not xml')
    write_text(root / 'catalog.txt', '<catalog/>')

    found = scan_catalogs(root)

    assert sorted(found) == sorted(expected), f"Unexpected catalogs: {found}"


def test_scan_skips_malformed_xml(tmp_path):
    write_text(tmp_path / 'broken.xml', '<catalog xmlns="urn:oasis:names:tc:entity:xmlns:xml:catalog"')
    write_text(tmp_path / 'empty.xml', '')
    good = write_catalog(tmp_path / 'good.xml', '')

    assert scan_catalogs(tmp_path) == [good]


def test_scan_ignores_catalog_element_in_other_namespace(tmp_path):
    write_text(tmp_path / 'plain.xml', '<catalog><uri name="a" uri="b"/></catalog>')

    assert scan_catalogs(tmp_path) == []


def test_scan_missing_directory_is_configuration_error(tmp_path):
    with pytest.raises(CatalogConfigurationError):
        scan_catalogs(tmp_path / 'missing')


def test_read_root_tag(tmp_path):
    catalog = write_catalog(tmp_path / 'c.xml', '')
    document = write_order(tmp_path / 'o.xml')

    assert read_root_tag(catalog) == '{urn:oasis:names:tc:entity:xmlns:xml:catalog}catalog'
    assert read_root_tag(document) == f'{{{EXAMPLE_NS}}}order'
    assert is_xml_catalog(catalog)
    assert not is_xml_catalog(document)
