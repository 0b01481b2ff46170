# Path: catalog_validator/tests/test_resolver.py
"""
Resource Resolver Tests

Schema-resource and entity resolution through the catalog, and the
rewriting of schema references served to lxml.
"""

from lxml import etree

from catalog_validator.engine.catalog.model import CatalogModel
from catalog_validator.engine.resolver import (
    ResolvedResource,
    ResourceResolution,
    ResourceResolver,
    SchemaResourceRequest,
    rewrite_schema_references,
)
from catalog_validator.tests.fixtures import (
    EXAMPLE_NS,
    write_catalog,
    write_order_schema,
    write_schema_bundle,
    write_text,
)


def build_resolver(*catalogs) -> ResourceResolver:
    model = CatalogModel()
    for catalog in catalogs:
        model.parse_catalog(catalog)
    return ResourceResolver(model)


def test_resolver_freezes_catalog(tmp_path):
    resolver = build_resolver(write_schema_bundle(tmp_path))

    assert resolver.catalog.frozen
    assert isinstance(resolver, ResourceResolution)


def test_resolve_by_namespace(tmp_path):
    resolver = build_resolver(write_schema_bundle(tmp_path))

    resource = resolver.resolve_schema_resource(SchemaResourceRequest(namespace_uri=EXAMPLE_NS))

    assert resource is not None, "namespace mapped by a uri entry should resolve"
    with resource:
        content = resource.read()
    assert b'targetNamespace="urn:example:v1"' in content
    assert resource.system_id == (tmp_path / 'order.xsd').resolve().as_uri()
    assert resource.base_uri == resource.system_id
    assert resource.character_stream is None


def test_system_id_takes_precedence_over_namespace(tmp_path):
    write_order_schema(tmp_path / 'by-system.xsd')
    write_order_schema(tmp_path / 'by-namespace.xsd')
    catalog = write_catalog(tmp_path / 'catalog.xml', f"""
        <system systemId="http://example.com/order.xsd" uri="by-system.xsd"/>
        <uri name="{EXAMPLE_NS}" uri="by-namespace.xsd"/>
    """)
    resolver = build_resolver(catalog)

    resource = resolver.resolve_schema_resource(SchemaResourceRequest(
        namespace_uri=EXAMPLE_NS,
        system_id='http://example.com/order.xsd'
    ))
    resource.close()

    assert resource.system_id.endswith('/by-system.xsd')


def test_relative_system_id_resolved_against_base_uri(tmp_path):
    write_order_schema(tmp_path / 'local.xsd')
    catalog = write_catalog(
        tmp_path / 'catalog.xml',
        '<system systemId="http://example.com/xsd/order.xsd" uri="local.xsd"/>'
    )
    resolver = build_resolver(catalog)

    resource = resolver.resolve_schema_resource(SchemaResourceRequest(
        system_id='order.xsd',
        base_uri='http://example.com/xsd/main.xsd'
    ))
    resource.close()

    assert resource.system_id.endswith('/local.xsd')


def test_unresolved_returns_none(tmp_path):
    resolver = build_resolver(write_schema_bundle(tmp_path))

    assert resolver.resolve_schema_resource(SchemaResourceRequest(namespace_uri='urn:unknown')) is None
    assert resolver.resolve_schema_resource(SchemaResourceRequest(
        system_id='http://example.com/unknown.xsd'
    )) is None


def test_non_local_mapping_counts_as_unresolved(tmp_path):
    catalog = write_catalog(
        tmp_path / 'catalog.xml',
        f'<uri name="{EXAMPLE_NS}" uri="http://schemas.example.com/order.xsd"/>'
    )
    resolver = build_resolver(catalog)

    assert resolver.resolve_schema_resource(SchemaResourceRequest(namespace_uri=EXAMPLE_NS)) is None


def test_resolve_entity(tmp_path):
    write_text(tmp_path / 'order.dtd', '<!ELEMENT order (#PCDATA)>')
    catalog = write_catalog(
        tmp_path / 'catalog.xml',
        '<public publicId="-//Example//DTD Order//EN" uri="order.dtd"/>'
    )
    resolver = build_resolver(catalog)

    resource = resolver.resolve_entity('-//Example//DTD Order//EN', 'http://example.com/order.dtd')

    assert isinstance(resource, ResolvedResource)
    with resource:
        assert resource.read() == b'<!ELEMENT order (#PCDATA)>'
    assert resource.public_id == '-//Example//DTD Order//EN'
    assert resolver.resolve_entity(None, None) is None
    assert resolver.resolve_entity(None, 'http://example.com/unknown.dtd') is None


def test_rewrite_schema_references(tmp_path):
    write_order_schema(tmp_path / 'order.xsd')
    catalog = write_catalog(tmp_path / 'catalog.xml', f"""
        <uri name="{EXAMPLE_NS}" uri="order.xsd"/>
        <system systemId="http://example.com/common.xsd" uri="common.xsd"/>
    """)
    write_text(tmp_path / 'common.xsd', '<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"/>')
    resolver = build_resolver(catalog)

    main = f"""<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema" targetNamespace="urn:main">
      <xs:import namespace="{EXAMPLE_NS}" schemaLocation="http://schemas.example.com/order.xsd"/>
      <xs:include schemaLocation="http://example.com/common.xsd"/>
      <xs:include schemaLocation="parts.xsd"/>
    </xs:schema>""".encode('utf-8')

    rewritten = rewrite_schema_references(main, 'http://example.com/main/main.xsd', resolver)
    root = etree.fromstring(rewritten)
    locations = [child.get('schemaLocation') for child in root]

    assert locations == [
        (tmp_path / 'order.xsd').resolve().as_uri(),
        (tmp_path / 'common.xsd').resolve().as_uri(),
        'http://example.com/main/parts.xsd',
    ]


def test_rewrite_leaves_non_schema_untouched(tmp_path):
    resolver = build_resolver(write_schema_bundle(tmp_path))

    for data in (b'<!ELEMENT order (#PCDATA)>', b'<root/>'):
        assert rewrite_schema_references(data, 'file:///x', resolver) == data
