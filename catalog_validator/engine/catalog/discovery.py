# Path: catalog_validator/engine/catalog/discovery.py
"""
Catalog Discovery

Finds OASIS catalog documents in a directory tree.

A file is a catalog when its root element is {urn:oasis:names:tc:entity:xmlns:xml:catalog}catalog.
The filename is irrelevant beyond the .xml extension. Only the first start
element is parsed, so large schema files cost almost nothing to reject.
Unreadable or malformed files are skipped.
"""

import os
from pathlib import Path
from typing import Optional, Union

from lxml import etree

from catalog_validator.core.logger import get_logger
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.constants import (
    OASIS_CATALOG_ROOT,
    XML_FILE_SUFFIX,
    LOG_INPUT,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')


def read_root_tag(path: Path) -> Optional[str]:
    """
    Clark-notation tag of the document's first start element.

    Args:
        path: XML file path

    Returns:
        '{namespace}local' tag, or None if the file has no element or
        cannot be parsed up to its first element
    """
    try:
        with open(path, 'rb') as stream:
            for _event, element in etree.iterparse(
                stream,
                events=('start',),
                no_network=True,
                load_dtd=False,
                resolve_entities=False
            ):
                return element.tag
    except (etree.XMLSyntaxError, OSError) as e:
        logger.debug(f"Not parseable as XML, skipped: {path} ({e})")
    return None


def is_xml_catalog(path: Path) -> bool:
    """True if the file's root element is the OASIS catalog element."""
    return read_root_tag(path) == OASIS_CATALOG_ROOT


def iter_xml_files(directory: Path) -> list[Path]:
    """Regular .xml files under a directory, depth-first in sorted name order."""
    found = []
    for current, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for filename in sorted(filenames):
            candidate = Path(current) / filename
            if candidate.suffix == XML_FILE_SUFFIX and candidate.is_file():
                found.append(candidate)
    return found


def scan_catalogs(directory: Union[str, Path]) -> list[Path]:
    """
    Find every catalog document under a directory.

    Args:
        directory: Root directory to scan (must exist)

    Returns:
        Catalog file paths in traversal order

    Raises:
        CatalogConfigurationError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise CatalogConfigurationError(f"Catalog directory not found: {directory}")

    logger.info(f"{LOG_INPUT} Scanning for catalogs in {directory}")

    catalogs = [path for path in iter_xml_files(directory) if is_xml_catalog(path)]

    logger.info(f"{LOG_OUTPUT} Found {len(catalogs)} catalog(s) in {directory}")
    return catalogs


__all__ = ['read_root_tag', 'is_xml_catalog', 'iter_xml_files', 'scan_catalogs']
