# Path: catalog_validator/tests/test_catalog_model.py
"""
Catalog Model Tests

Entry types, lookup precedence, chaining, delegation and the frozen state.
"""

import pytest

from catalog_validator.engine.catalog.model import CatalogModel
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.tests.fixtures import write_catalog, write_text

ORDER_PUBLIC_ID = '-//Example//DTD Order//EN'


def uri_of(path):
    return path.resolve().as_uri()


def load(*catalogs, **options) -> CatalogModel:
    model = CatalogModel(**options)
    for catalog in catalogs:
        model.parse_catalog(catalog)
    return model.freeze()


def test_system_entry(tmp_path):
    catalog = write_catalog(
        tmp_path / 'catalog.xml',
        '<system systemId="http://example.com/order.dtd" uri="dtd/order.dtd"/>'
    )
    model = load(catalog)

    assert model.resolve_system('http://example.com/order.dtd') == uri_of(tmp_path / 'dtd' / 'order.dtd')
    assert model.resolve_system('http://example.com/other.dtd') is None


def test_uri_entry(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', '<uri name="urn:example:v1" uri="order.xsd"/>')
    model = load(catalog)

    assert model.resolve_uri('urn:example:v1') == uri_of(tmp_path / 'order.xsd')
    assert model.resolve_uri('urn:example:v2') is None
    assert model.resolve_system('urn:example:v1') is None, "uri entries must not answer system lookups"


def test_rewrite_uses_longest_prefix(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', """
        <rewriteSystem systemIdStartString="http://example.com/" rewritePrefix="all/"/>
        <rewriteSystem systemIdStartString="http://example.com/schemas/" rewritePrefix="schemas/"/>
        <rewriteURI uriStartString="http://example.com/ns/" rewritePrefix="ns/"/>
    """)
    model = load(catalog)

    assert model.resolve_system('http://example.com/schemas/a/b.xsd') == \
        uri_of(tmp_path / 'schemas') + '/a/b.xsd'
    assert model.resolve_system('http://example.com/c.xsd') == uri_of(tmp_path / 'all') + '/c.xsd'
    assert model.resolve_uri('http://example.com/ns/v1.xsd') == uri_of(tmp_path / 'ns') + '/v1.xsd'


def test_exact_match_wins_over_rewrite(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', """
        <rewriteSystem systemIdStartString="http://example.com/" rewritePrefix="all/"/>
        <system systemId="http://example.com/order.dtd" uri="exact.dtd"/>
    """)
    model = load(catalog)

    assert model.resolve_system('http://example.com/order.dtd') == uri_of(tmp_path / 'exact.dtd')


def test_suffix_entries(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', """
        <systemSuffix systemIdSuffix="order.dtd" uri="local/order.dtd"/>
        <uriSuffix uriSuffix="/order.xsd" uri="local/order.xsd"/>
    """)
    model = load(catalog)

    assert model.resolve_system('http://anywhere.example.org/dtds/order.dtd') == \
        uri_of(tmp_path / 'local' / 'order.dtd')
    assert model.resolve_uri('http://anywhere.example.org/xsd/order.xsd') == \
        uri_of(tmp_path / 'local' / 'order.xsd')


def test_public_entry_and_prefer(tmp_path):
    public = write_catalog(
        tmp_path / 'public.xml',
        f'<public publicId="{ORDER_PUBLIC_ID}" uri="order.dtd"/>'
    )
    system = write_catalog(
        tmp_path / 'system.xml',
        f'<public publicId="{ORDER_PUBLIC_ID}" uri="order.dtd"/>',
        prefer='system'
    )
    expected = uri_of(tmp_path / 'order.dtd')

    prefers_public = load(public)
    assert prefers_public.resolve_public(ORDER_PUBLIC_ID) == expected
    assert prefers_public.resolve_public(ORDER_PUBLIC_ID, 'http://example.com/order.dtd') == expected

    prefers_system = load(system)
    assert prefers_system.resolve_public(ORDER_PUBLIC_ID) == expected, \
        "prefer=system only matters when a system identifier is present"
    assert prefers_system.resolve_public(ORDER_PUBLIC_ID, 'http://example.com/order.dtd') is None


def test_public_id_whitespace_is_normalized(tmp_path):
    catalog = write_catalog(
        tmp_path / 'catalog.xml',
        f'<public publicId="{ORDER_PUBLIC_ID}" uri="order.dtd"/>'
    )
    model = load(catalog)

    assert model.resolve_public('  -//Example//DTD   Order//EN ') == uri_of(tmp_path / 'order.dtd')


def test_publicid_urn_is_unwrapped(tmp_path):
    catalog = write_catalog(
        tmp_path / 'catalog.xml',
        f'<public publicId="{ORDER_PUBLIC_ID}" uri="order.dtd"/>'
    )
    model = load(catalog)

    assert model.resolve_system('urn:publicid:-:Example:DTD+Order:EN') == uri_of(tmp_path / 'order.dtd')


def test_resolve_entity_order(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', f"""
        <public publicId="{ORDER_PUBLIC_ID}" uri="by-public.dtd"/>
        <system systemId="http://example.com/order.dtd" uri="by-system.dtd"/>
        <uri name="http://example.com/order.xsd" uri="by-uri.xsd"/>
    """)
    model = load(catalog)

    assert model.resolve_entity(ORDER_PUBLIC_ID, 'http://example.com/order.dtd') == \
        uri_of(tmp_path / 'by-system.dtd')
    assert model.resolve_entity(ORDER_PUBLIC_ID, 'http://example.com/unknown.dtd') == \
        uri_of(tmp_path / 'by-public.dtd')
    assert model.resolve_entity(None, 'http://example.com/order.xsd') == uri_of(tmp_path / 'by-uri.xsd')
    assert model.resolve_entity(None, 'http://example.com/none') is None


def test_public_beats_uri_when_preferring_public(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', f"""
        <uri name="http://example.com/order.dtd" uri="by-uri.dtd"/>
        <public publicId="{ORDER_PUBLIC_ID}" uri="by-public.dtd"/>
    """)
    model = load(catalog, prefer_public=True)

    assert model.resolve_entity(ORDER_PUBLIC_ID, 'http://example.com/order.dtd') == \
        uri_of(tmp_path / 'by-public.dtd')


def test_first_loaded_catalog_wins(tmp_path):
    first = write_catalog(tmp_path / 'one' / 'catalog.xml', '<uri name="urn:example:v1" uri="first.xsd"/>')
    second = write_catalog(tmp_path / 'two' / 'catalog.xml', '<uri name="urn:example:v1" uri="second.xsd"/>')
    model = load(first, second)

    assert model.resolve_uri('urn:example:v1') == uri_of(tmp_path / 'one' / 'first.xsd')
    assert len(model) == 2, "conflicting entries are kept, not overwritten"


def test_next_catalog_chain(tmp_path):
    write_catalog(tmp_path / 'next' / 'catalog.xml', '<uri name="urn:example:v2" uri="v2.xsd"/>')
    main = write_catalog(tmp_path / 'catalog.xml', """
        <uri name="urn:example:v1" uri="v1.xsd"/>
        <nextCatalog catalog="next/catalog.xml"/>
    """)
    model = load(main)

    assert model.resolve_uri('urn:example:v1') == uri_of(tmp_path / 'v1.xsd')
    assert model.resolve_uri('urn:example:v2') == uri_of(tmp_path / 'next' / 'v2.xsd')
    assert len(model.catalog_locations) == 2


def test_next_catalog_cycle_terminates(tmp_path):
    write_catalog(tmp_path / 'b.xml', '<nextCatalog catalog="a.xml"/>')
    a = write_catalog(tmp_path / 'a.xml', '<nextCatalog catalog="b.xml"/>')
    model = load(a)

    assert model.resolve_uri('urn:example:v1') is None


def test_missing_next_catalog_is_skipped(tmp_path):
    main = write_catalog(tmp_path / 'catalog.xml', """
        <nextCatalog catalog="missing.xml"/>
        <uri name="urn:example:v1" uri="v1.xsd"/>
    """)
    model = load(main)

    assert model.resolve_uri('urn:example:v1') == uri_of(tmp_path / 'v1.xsd')


def test_delegation_ends_the_search(tmp_path):
    write_catalog(tmp_path / 'delegated.xml', '<uri name="urn:example:v2" uri="v2.xsd"/>')
    write_catalog(tmp_path / 'next.xml', '<uri name="urn:example:v3" uri="v3.xsd"/>')
    main = write_catalog(tmp_path / 'catalog.xml', """
        <delegateURI uriStartString="urn:example:" catalog="delegated.xml"/>
        <nextCatalog catalog="next.xml"/>
    """)
    model = load(main)

    assert model.resolve_uri('urn:example:v2') == uri_of(tmp_path / 'v2.xsd')
    assert model.resolve_uri('urn:example:v3') is None, \
        "a matching delegate must not fall through to nextCatalog"
    assert model.resolve_uri('urn:other:v1') is None


def test_xml_base_on_group(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', """
        <group xml:base="http://cdn.example.com/schemas/">
          <uri name="urn:example:v1" uri="order.xsd"/>
        </group>
        <uri name="urn:example:v2" uri="local.xsd"/>
    """)
    model = load(catalog)

    assert model.resolve_uri('urn:example:v1') == 'http://cdn.example.com/schemas/order.xsd'
    assert model.resolve_uri('urn:example:v2') == uri_of(tmp_path / 'local.xsd')


def test_group_prefer_overrides_catalog(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', f"""
        <group prefer="system">
          <public publicId="{ORDER_PUBLIC_ID}" uri="order.dtd"/>
        </group>
    """)
    model = load(catalog)

    assert model.entries[0].prefer_public is False
    assert model.resolve_public(ORDER_PUBLIC_ID, 'http://example.com/order.dtd') is None


def test_missing_attribute_ignored_by_default(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', """
        <uri name="urn:example:v1"/>
        <system uri="x.dtd"/>
        <uri name="urn:example:v2" uri="v2.xsd"/>
    """)
    model = load(catalog)

    assert len(model) == 1
    assert model.resolve_uri('urn:example:v1') is None


def test_missing_attribute_rejected_when_strict(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', '<uri name="urn:example:v1"/>')

    with pytest.raises(CatalogConfigurationError):
        load(catalog, ignore_missing_properties=False)


def test_malformed_catalog(tmp_path):
    catalog = write_text(
        tmp_path / 'catalog.xml',
        '<catalog xmlns="urn:oasis:names:tc:entity:xmlns:xml:catalog"><uri name="a"'
    )

    with pytest.raises(CatalogConfigurationError):
        load(catalog)


def test_non_catalog_and_missing_files(tmp_path):
    other = write_text(tmp_path / 'other.xml', '<root/>')

    with pytest.raises(CatalogConfigurationError):
        load(other)
    with pytest.raises(CatalogConfigurationError):
        load(tmp_path / 'missing.xml')


def test_frozen_model_rejects_catalogs(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', '')
    model = load(catalog)

    assert model.frozen
    with pytest.raises(RuntimeError):
        model.parse_catalog(catalog)


def test_entry_identifiers(tmp_path):
    catalog = write_catalog(tmp_path / 'catalog.xml', f"""
        <public publicId="{ORDER_PUBLIC_ID}" uri="order.dtd"/>
        <uri name="urn:example:v1" uri="v1.xsd"/>
    """)
    public, uri = load(catalog).entries

    assert public.public_id == ORDER_PUBLIC_ID and public.system_id is None
    assert uri.system_id == 'urn:example:v1' and uri.public_id is None
    assert uri.resolved_location == uri_of(tmp_path / 'v1.xsd')
    assert uri.source == uri_of(tmp_path / 'catalog.xml')
