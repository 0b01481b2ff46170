# Path: catalog_validator/tests/fixtures.py
"""
Test Fixtures for Catalog Validator

Builders that write small catalogs, schemas and documents to a directory.

Contains:
- OASIS catalogs from raw entry markup
- An 'order' schema in urn:example:v1 (count must be an integer)
- Order documents, valid or not
- Schema artifact ZIP files laid out like a local artifact repository
"""

import textwrap
import zipfile
from pathlib import Path
from typing import Optional

from catalog_validator.artifacts.coordinates import ArtifactCoordinate

EXAMPLE_NS = 'urn:example:v1'
CATALOG_NS = 'urn:oasis:names:tc:entity:xmlns:xml:catalog'

ORDER_SCHEMA = """\
<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           targetNamespace="{namespace}"
           xmlns="{namespace}"
           elementFormDefault="qualified">
  <xs:element name="order">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="name" type="xs:string"/>
        <xs:element name="count" type="xs:int"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

ORDER_DOCUMENT = """\
<?xml version="1.0" encoding="UTF-8"?>
<order xmlns="{namespace}"{attributes}>
  <name>widgets</name>
  <count>{count}</count>
</order>
"""


def write_text(path: Path, text: str) -> Path:
    """Write text to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


def catalog_xml(entries: str, prefer: Optional[str] = None) -> str:
    prefer_attr = f' prefer="{prefer}"' if prefer else ''
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<catalog xmlns="{CATALOG_NS}"{prefer_attr}>\n'
        f'{textwrap.indent(textwrap.dedent(entries).strip(), "  ")}\n'
        '</catalog>\n'
    )


def write_catalog(path: Path, entries: str, prefer: Optional[str] = None) -> Path:
    """Write an OASIS catalog holding the given entry markup."""
    return write_text(path, catalog_xml(entries, prefer))


def write_order_schema(path: Path, namespace: str = EXAMPLE_NS) -> Path:
    return write_text(path, ORDER_SCHEMA.format(namespace=namespace))


def write_order(
    path: Path,
    count: str = '3',
    namespace: str = EXAMPLE_NS,
    attributes: str = ''
) -> Path:
    """Write an order document; a non-integer count violates the schema."""
    return write_text(path, ORDER_DOCUMENT.format(
        namespace=namespace,
        count=count,
        attributes=attributes
    ))


def write_schema_bundle(directory: Path, namespace: str = EXAMPLE_NS) -> Path:
    """
    Schema directory with order.xsd and a catalog mapping the namespace to it.

    Returns:
        Path of the catalog file
    """
    write_order_schema(directory / 'order.xsd', namespace)
    return write_catalog(
        directory / 'catalog.xml',
        f'<uri name="{namespace}" uri="order.xsd"/>'
    )


def write_zip(path: Path, members: dict[str, str]) -> Path:
    """ZIP archive holding the given member name -> text content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, 'w') as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


def write_schema_artifact(
    repository: Path,
    coordinate: ArtifactCoordinate,
    namespace: str = EXAMPLE_NS
) -> Path:
    """Schema artifact archive placed in a local repository layout."""
    return write_zip(repository / coordinate.repository_path, {
        'catalog.xml': catalog_xml(f'<uri name="{namespace}" uri="xsd/order.xsd"/>'),
        'xsd/order.xsd': ORDER_SCHEMA.format(namespace=namespace),
    })
