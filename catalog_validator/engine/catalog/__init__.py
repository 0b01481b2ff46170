# Path: catalog_validator/engine/catalog/__init__.py
"""
OASIS XML Catalog support: discovery of catalog files and the catalog model.
"""

from .model import CatalogEntry, CatalogDocument, CatalogModel
from .discovery import scan_catalogs, is_xml_catalog

__all__ = [
    'CatalogEntry',
    'CatalogDocument',
    'CatalogModel',
    'scan_catalogs',
    'is_xml_catalog',
]
