# Path: catalog_validator/core/config_loader.py
"""
Configuration Loader for Catalog Validator

Loads configuration from .env file for the catalog validation system.
Singleton pattern ensures consistent configuration across all components.

NO hardcoded paths, NO magic numbers.
All configuration comes from environment variables; every key has a default
so a run can also be described entirely by explicit arguments.
"""

import os
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from catalog_validator.constants import (
    DEFAULT_SCHEMA_GROUP_ID,
    DEFAULT_SCHEMA_ARTIFACT_ID,
    DEFAULT_SCHEMA_ARTIFACT_IDS,
    DEFAULT_ARTIFACT_EXTENSION,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_MAX_ARCHIVE_SIZE,
    POLICY_EXPLICIT_VERSION,
    ENV_BASE_DIR,
    ENV_SCHEMA_DIR,
    ENV_UNPACK_DIR,
    ENV_BUILD_DIR,
    ENV_CATALOG_FILES,
    ENV_SCHEMA_VERSION,
    ENV_SCHEMA_GROUP_ID,
    ENV_SCHEMA_ARTIFACT_ID,
    ENV_SCHEMA_ARTIFACT_IDS,
    ENV_ARTIFACT_EXTENSION,
    ENV_SELECTION_POLICY,
    ENV_DEPENDENCIES,
    ENV_DEPENDENCY_EXCLUDES,
    ENV_APPLY_DEPENDENCY_EXCLUDES,
    ENV_LOCAL_REPOSITORY,
    ENV_REMOTE_REPOSITORIES,
    ENV_INCLUDES,
    ENV_EXCLUDES,
    ENV_SKIP,
    ENV_PREFER_PUBLIC,
    ENV_IGNORE_MISSING_PROPERTIES,
    ENV_REQUEST_TIMEOUT,
    ENV_CONNECT_TIMEOUT,
    ENV_RETRY_ATTEMPTS,
    ENV_CHUNK_SIZE,
    ENV_MAX_ARCHIVE_SIZE,
    ENV_LOG_LEVEL,
    ENV_LOG_DIR,
    ENV_LOG_CONSOLE,
)


class ConfigLoader:
    """
    Singleton configuration loader for the catalog validator.

    Loads configuration from environment variables with type conversion
    and sensible defaults.

    Example:
        config = ConfigLoader()
        base_dir = config.get('base_dir')  # Returns Path object
        prefer_public = config.get('prefer_public')  # Returns bool
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern. Loads the .env file from the
        working directory, falling back to the project root.
        """
        if ConfigLoader._initialized:
            return

        # catalog_validator/core/config_loader.py -> go up 3 levels to project root
        project_root = Path(__file__).resolve().parent.parent.parent
        for env_path in (Path.cwd() / '.env', project_root / '.env'):
            if env_path.exists():
                load_dotenv(dotenv_path=env_path, interpolate=True)
                break

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load all configuration from environment.

        Returns:
            Dictionary of configuration values with proper types
        """
        config = {
            # ================================================================
            # INPUT PATHS
            # ================================================================
            'base_dir': self._get_path(ENV_BASE_DIR) or Path.cwd(),
            'schema_dir': self._get_path(ENV_SCHEMA_DIR),
            'catalog_files': [Path(p) for p in self._get_list(ENV_CATALOG_FILES)],
            'includes': self._get_list(ENV_INCLUDES),
            'excludes': self._get_list(ENV_EXCLUDES),

            # ================================================================
            # OUTPUT PATHS (WRITE)
            # ================================================================
            'unpack_dir': self._get_path(ENV_UNPACK_DIR),
            'build_dir': self._get_path(ENV_BUILD_DIR) or Path.cwd() / 'build',

            # ================================================================
            # SCHEMA ARTIFACT SELECTION
            # ================================================================
            'schema_version': self._get_env(ENV_SCHEMA_VERSION),
            'schema_group_id': self._get_env(ENV_SCHEMA_GROUP_ID, DEFAULT_SCHEMA_GROUP_ID),
            'schema_artifact_id': self._get_env(
                ENV_SCHEMA_ARTIFACT_ID, DEFAULT_SCHEMA_ARTIFACT_ID
            ),
            'schema_artifact_ids': self._get_list(
                ENV_SCHEMA_ARTIFACT_IDS, list(DEFAULT_SCHEMA_ARTIFACT_IDS)
            ),
            'artifact_extension': self._get_env(
                ENV_ARTIFACT_EXTENSION, DEFAULT_ARTIFACT_EXTENSION
            ),
            'selection_policy': self._get_env(ENV_SELECTION_POLICY, POLICY_EXPLICIT_VERSION),
            'dependencies': self._get_list(ENV_DEPENDENCIES),
            'dependency_excludes': self._get_list(ENV_DEPENDENCY_EXCLUDES),
            'apply_dependency_excludes': self._get_bool(ENV_APPLY_DEPENDENCY_EXCLUDES, False),

            # ================================================================
            # REPOSITORIES
            # ================================================================
            'local_repository': self._get_path(ENV_LOCAL_REPOSITORY)
                                or Path.home() / '.m2' / 'repository',
            'remote_repositories': self._get_list(ENV_REMOTE_REPOSITORIES),
            'request_timeout': self._get_int(ENV_REQUEST_TIMEOUT, DEFAULT_TIMEOUT),
            'connect_timeout': self._get_int(ENV_CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT),
            'retry_attempts': self._get_int(ENV_RETRY_ATTEMPTS, DEFAULT_RETRY_ATTEMPTS),
            'chunk_size': self._get_int(ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            'max_archive_size': self._get_int(ENV_MAX_ARCHIVE_SIZE, DEFAULT_MAX_ARCHIVE_SIZE),

            # ================================================================
            # VALIDATION
            # ================================================================
            'skip': self._get_bool(ENV_SKIP, False),
            'prefer_public': self._get_bool(ENV_PREFER_PUBLIC, True),
            'ignore_missing_properties': self._get_bool(ENV_IGNORE_MISSING_PROPERTIES, True),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_level': self._get_env(ENV_LOG_LEVEL, 'INFO'),
            'log_dir': self._get_path(ENV_LOG_DIR),
            'log_console': self._get_bool(ENV_LOG_CONSOLE, True),
        }

        return config

    def _get_env(
        self,
        key: str,
        default: Optional[str] = None,
        required: bool = False
    ) -> Optional[str]:
        """Get string environment variable."""
        value = os.getenv(key)

        if value is None or not value.strip():
            if required:
                raise ValueError(f"Required environment variable '{key}' is not set")
            return default

        return value.strip()

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(key)
        if value is None:
            return default

        return value.strip().lower() in ('true', '1', 'yes', 'on')

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value.strip())
        except ValueError:
            return default

    def _get_path(self, key: str, required: bool = False) -> Optional[Path]:
        """Get path environment variable."""
        value = self._get_env(key, required=required)
        return Path(value) if value else None

    def _get_list(self, key: str, default: Optional[list[str]] = None) -> list[str]:
        """Get comma-separated list environment variable."""
        value = os.getenv(key)
        if value is None:
            return list(default) if default else []

        return [item.strip() for item in value.split(',') if item.strip()]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        value = self._config.get(key)
        return default if value is None else value

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using dictionary syntax."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config

    def keys(self):
        """Get all configuration keys."""
        return self._config.keys()

    def items(self):
        """Get all configuration key-value pairs."""
        return self._config.items()

    @classmethod
    def reset(cls):
        """Reset singleton for testing purposes."""
        cls._instance = None
        cls._initialized = False


__all__ = ['ConfigLoader']
