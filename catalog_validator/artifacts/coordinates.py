# Path: catalog_validator/artifacts/coordinates.py
"""
Artifact Coordinates and Selection Policy

Decides which schema artifacts a run needs.

Two policies:
- explicit-version: one catalog artifact; the explicit schema version wins,
  otherwise the version of the first declared schema dependency is used
- declared-dependencies: every declared schema dependency is an artifact

Dependency exclude patterns are matched and logged, but they do not remove
anything unless apply_dependency_excludes is set.
"""

from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase
from typing import Iterable, Optional, Union

from catalog_validator.core.logger import get_logger
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.constants import (
    DEFAULT_ARTIFACT_EXTENSION,
    DEFAULT_SCHEMA_ARTIFACT_ID,
    DEFAULT_SCHEMA_ARTIFACT_IDS,
    DEFAULT_SCHEMA_GROUP_ID,
    POLICY_DECLARED_DEPENDENCIES,
    POLICY_EXPLICIT_VERSION,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'artifacts')


@dataclass(frozen=True)
class ArtifactCoordinate:
    """Repository coordinate of one schema archive."""

    group_id: str
    artifact_id: str
    version: str
    extension: str = DEFAULT_ARTIFACT_EXTENSION

    @property
    def file_name(self) -> str:
        return f"{self.artifact_id}-{self.version}.{self.extension}"

    @property
    def repository_path(self) -> str:
        """Path of the archive relative to a repository root."""
        group_path = self.group_id.replace('.', '/')
        return f"{group_path}/{self.artifact_id}/{self.version}/{self.file_name}"

    @property
    def unpack_name(self) -> str:
        return f"{self.artifact_id}-{self.version}"

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.extension}:{self.version}"


@dataclass(frozen=True)
class SchemaDependency:
    """Declared dependency, written 'group:artifact:version'."""

    group_id: str
    artifact_id: str
    version: str

    @classmethod
    def parse(cls, value: str) -> 'SchemaDependency':
        """
        Parse 'group:artifact:version' (or 'group:artifact:type:version').

        Raises:
            CatalogConfigurationError: Malformed dependency
        """
        parts = [part.strip() for part in value.strip().split(':')]
        if len(parts) == 4:
            parts = [parts[0], parts[1], parts[3]]
        if len(parts) != 3 or not all(parts):
            raise CatalogConfigurationError(
                f"Invalid dependency '{value}', expected group:artifact:version"
            )
        return cls(*parts)

    def matches(self, pattern: str) -> bool:
        """Match a 'group[:artifact]' exclude pattern; '*' wildcards allowed."""
        group_pattern, _, artifact_pattern = pattern.strip().partition(':')
        if not fnmatchcase(self.group_id, group_pattern or '*'):
            return False
        return fnmatchcase(self.artifact_id, artifact_pattern or '*')

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class ArtifactSelectionPolicy(str, Enum):
    """How the schema artifacts of a run are chosen."""

    EXPLICIT_VERSION = POLICY_EXPLICIT_VERSION
    DECLARED_DEPENDENCIES = POLICY_DECLARED_DEPENDENCIES

    @classmethod
    def from_value(cls, value: Union[str, 'ArtifactSelectionPolicy']) -> 'ArtifactSelectionPolicy':
        try:
            return cls(value)
        except ValueError:
            allowed = ', '.join(policy.value for policy in cls)
            raise CatalogConfigurationError(
                f"Unknown selection policy '{value}' (expected one of: {allowed})"
            ) from None


def select_artifacts(
    policy: Union[str, 'ArtifactSelectionPolicy'] = ArtifactSelectionPolicy.EXPLICIT_VERSION,
    schema_version: Optional[str] = None,
    dependencies: Iterable[Union[str, SchemaDependency]] = (),
    group_id: str = DEFAULT_SCHEMA_GROUP_ID,
    artifact_id: str = DEFAULT_SCHEMA_ARTIFACT_ID,
    artifact_ids: Iterable[str] = DEFAULT_SCHEMA_ARTIFACT_IDS,
    extension: str = DEFAULT_ARTIFACT_EXTENSION,
    dependency_excludes: Iterable[str] = (),
    apply_dependency_excludes: bool = False
) -> list[ArtifactCoordinate]:
    """
    Schema artifacts to supply for a run.

    Args:
        policy: Selection policy
        schema_version: Explicit schema version; wins over declared dependencies
        dependencies: Declared dependencies ('group:artifact:version')
        group_id: Group of the schema artifacts
        artifact_id: Catalog artifact used by the explicit-version policy
        artifact_ids: Artifact ids that count as schema dependencies
        extension: Archive extension
        dependency_excludes: 'group:artifact' patterns
        apply_dependency_excludes: Actually drop excluded dependencies

    Returns:
        Artifact coordinates, in declaration order

    Raises:
        CatalogConfigurationError: No schema version can be determined
    """
    policy = ArtifactSelectionPolicy.from_value(policy)

    if schema_version:
        logger.info(f"{LOG_PROCESS} Using explicit schema version {schema_version}")
        return [ArtifactCoordinate(group_id, artifact_id, schema_version, extension)]

    artifact_ids = set(artifact_ids)
    candidates = [
        dependency if isinstance(dependency, SchemaDependency) else SchemaDependency.parse(dependency)
        for dependency in dependencies
    ]
    candidates = [
        dependency for dependency in candidates
        if dependency.group_id == group_id and dependency.artifact_id in artifact_ids
    ]
    candidates = _filter_excluded(candidates, list(dependency_excludes), apply_dependency_excludes)

    if not candidates:
        raise CatalogConfigurationError("Cannot determine the XML schema version")

    if policy is ArtifactSelectionPolicy.EXPLICIT_VERSION:
        version = candidates[0].version
        logger.info(f"{LOG_PROCESS} Schema version {version} taken from dependency {candidates[0]}")
        return [ArtifactCoordinate(group_id, artifact_id, version, extension)]

    coordinates = [
        ArtifactCoordinate(dependency.group_id, dependency.artifact_id, dependency.version, extension)
        for dependency in candidates
    ]
    logger.info(f"{LOG_PROCESS} Selected {len(coordinates)} schema artifact(s) from dependencies")
    return coordinates


def _filter_excluded(
    dependencies: list[SchemaDependency],
    patterns: list[str],
    apply: bool
) -> list[SchemaDependency]:
    if not patterns:
        return dependencies

    kept = []
    for dependency in dependencies:
        matched = next((pattern for pattern in patterns if dependency.matches(pattern)), None)
        if matched is None:
            kept.append(dependency)
        elif apply:
            logger.info(f"Excluding dependency {dependency} (pattern {matched})")
        else:
            # Exclude filtering has never removed anything; kept until confirmed
            logger.warning(
                f"Dependency {dependency} matches exclude pattern {matched} "
                f"but exclude filtering is disabled"
            )
            kept.append(dependency)
    return kept


__all__ = [
    'ArtifactCoordinate',
    'SchemaDependency',
    'ArtifactSelectionPolicy',
    'select_artifacts',
]
