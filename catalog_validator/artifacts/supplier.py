# Path: catalog_validator/artifacts/supplier.py
"""
Schema Artifact Supplier

Turns artifact coordinates into unpacked schema directories, which the
engine scans for catalogs.

Unpack location:
    <unpack_dir or build_dir/schemas>/<artifact>-<version>

A configured schema_dir bypasses artifacts entirely.
"""

from pathlib import Path
from typing import Optional

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.core.logger import get_logger
from catalog_validator.artifacts.coordinates import ArtifactCoordinate, select_artifacts
from catalog_validator.artifacts.extractor import ZipExtractor
from catalog_validator.artifacts.fetcher import ArtifactFetcher
from catalog_validator.engine.errors import ArtifactResolutionError
from catalog_validator.constants import (
    DEFAULT_ARTIFACT_EXTENSION,
    DEFAULT_SCHEMA_ARTIFACT_ID,
    DEFAULT_SCHEMA_ARTIFACT_IDS,
    DEFAULT_SCHEMA_GROUP_ID,
    POLICY_EXPLICIT_VERSION,
    SCHEMAS_DIRNAME,
    LOG_INPUT,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'artifacts')


class SchemaArtifactSupplier:
    """
    Fetch and unpack schema artifacts.

    Example:
        supplier = SchemaArtifactSupplier(build_dir=Path('build'))
        root = supplier.supply(ArtifactCoordinate('com.example', 'catalog', '1.2.0'))
        # root == build/schemas/catalog-1.2.0
    """

    def __init__(
        self,
        fetcher: Optional[ArtifactFetcher] = None,
        extractor: Optional[ZipExtractor] = None,
        unpack_dir: Optional[Path] = None,
        build_dir: Optional[Path] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize supplier.

        Args:
            fetcher: Artifact fetcher (built from config if None)
            extractor: Archive extractor (built from config if None)
            unpack_dir: Parent directory for unpacked artifacts
            build_dir: Build directory; '<build_dir>/schemas' when unpack_dir is None
            config: Configuration source for options not passed explicitly
        """
        self.config = config if config else ConfigLoader()
        self.fetcher = fetcher if fetcher else ArtifactFetcher(config=self.config)
        self.extractor = extractor if extractor else ZipExtractor(config=self.config)

        unpack_dir = unpack_dir if unpack_dir is not None else self.config.get('unpack_dir')
        if unpack_dir is None:
            build_dir = build_dir if build_dir is not None else \
                self.config.get('build_dir', Path.cwd() / 'build')
            unpack_dir = Path(build_dir) / SCHEMAS_DIRNAME
        self.unpack_dir = Path(unpack_dir)

    def unpack_directory(self, coordinate: ArtifactCoordinate) -> Path:
        return self.unpack_dir / coordinate.unpack_name

    def supply(self, coordinate: ArtifactCoordinate) -> Path:
        """
        Local directory holding the unpacked artifact.

        Raises:
            ArtifactResolutionError: Artifact could not be fetched or unpacked
        """
        logger.info(f"{LOG_INPUT} Supplying schema artifact {coordinate}")

        download = self.fetcher.fetch_sync(coordinate)
        if not download.success:
            raise ArtifactResolutionError(
                f"Cannot resolve schema artifact {coordinate}: {download.error_message}"
            )

        target = self.unpack_directory(coordinate)
        extraction = self.extractor.extract(download.file_path, target)
        if not extraction.success:
            raise ArtifactResolutionError(
                f"Cannot unpack schema artifact {coordinate}: {extraction.error_message}"
            )

        logger.info(f"{LOG_OUTPUT} Schema artifact {coordinate} unpacked to {target}")
        return target

    def schema_roots(
        self,
        schema_dir: Optional[Path] = None,
        schema_version: Optional[str] = None,
        dependencies: Optional[list[str]] = None,
        selection_policy: Optional[str] = None
    ) -> list[Path]:
        """
        Directories to scan for catalogs.

        schema_dir wins when set; otherwise the selected artifacts are
        supplied in order. Arguments left as None come from configuration.
        """
        schema_dir = schema_dir or self.config.get('schema_dir')
        if schema_dir:
            logger.info(f"{LOG_INPUT} Using schema directory {schema_dir}")
            return [Path(schema_dir)]

        coordinates = select_artifacts(
            policy=selection_policy or self.config.get('selection_policy', POLICY_EXPLICIT_VERSION),
            schema_version=schema_version or self.config.get('schema_version'),
            dependencies=dependencies or self.config.get('dependencies', []),
            group_id=self.config.get('schema_group_id', DEFAULT_SCHEMA_GROUP_ID),
            artifact_id=self.config.get('schema_artifact_id', DEFAULT_SCHEMA_ARTIFACT_ID),
            artifact_ids=self.config.get('schema_artifact_ids', DEFAULT_SCHEMA_ARTIFACT_IDS),
            extension=self.config.get('artifact_extension', DEFAULT_ARTIFACT_EXTENSION),
            dependency_excludes=self.config.get('dependency_excludes', []),
            apply_dependency_excludes=self.config.get('apply_dependency_excludes', False)
        )
        return [self.supply(coordinate) for coordinate in coordinates]


__all__ = ['SchemaArtifactSupplier']
