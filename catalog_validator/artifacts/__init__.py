# Path: catalog_validator/artifacts/__init__.py
"""
Schema artifact collaborators: document enumeration, artifact selection,
fetching and unpacking.
"""

from .file_enumerator import enumerate_files, match_path
from .coordinates import (
    ArtifactCoordinate,
    SchemaDependency,
    ArtifactSelectionPolicy,
    select_artifacts,
)
from .result import DownloadResult, ExtractionResult
from .extractor import ZipExtractor
from .fetcher import ArtifactFetcher
from .supplier import SchemaArtifactSupplier

__all__ = [
    'enumerate_files',
    'match_path',
    'ArtifactCoordinate',
    'SchemaDependency',
    'ArtifactSelectionPolicy',
    'select_artifacts',
    'DownloadResult',
    'ExtractionResult',
    'ZipExtractor',
    'ArtifactFetcher',
    'SchemaArtifactSupplier',
]
