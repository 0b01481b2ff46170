# Path: catalog_validator/constants.py
"""
Catalog Validator Constants

Module-wide constants for catalog-driven XML schema validation.

No hardcoded paths - all paths come from .env via config_loader.
"""

# ============================================================================
# OASIS XML CATALOG VOCABULARY
# ============================================================================
OASIS_CATALOG_NS: str = 'urn:oasis:names:tc:entity:xmlns:xml:catalog'
OASIS_CATALOG_ROOT: str = f'{{{OASIS_CATALOG_NS}}}catalog'

ENTRY_PUBLIC: str = 'public'
ENTRY_SYSTEM: str = 'system'
ENTRY_REWRITE_SYSTEM: str = 'rewriteSystem'
ENTRY_SYSTEM_SUFFIX: str = 'systemSuffix'
ENTRY_DELEGATE_PUBLIC: str = 'delegatePublic'
ENTRY_DELEGATE_SYSTEM: str = 'delegateSystem'
ENTRY_URI: str = 'uri'
ENTRY_REWRITE_URI: str = 'rewriteURI'
ENTRY_URI_SUFFIX: str = 'uriSuffix'
ENTRY_DELEGATE_URI: str = 'delegateURI'
ENTRY_NEXT_CATALOG: str = 'nextCatalog'
ENTRY_GROUP: str = 'group'

# Required attributes per entry element: (match attribute, target attribute)
ENTRY_ATTRIBUTES: dict[str, tuple[str, str]] = {
    ENTRY_PUBLIC: ('publicId', 'uri'),
    ENTRY_SYSTEM: ('systemId', 'uri'),
    ENTRY_REWRITE_SYSTEM: ('systemIdStartString', 'rewritePrefix'),
    ENTRY_SYSTEM_SUFFIX: ('systemIdSuffix', 'uri'),
    ENTRY_DELEGATE_PUBLIC: ('publicIdStartString', 'catalog'),
    ENTRY_DELEGATE_SYSTEM: ('systemIdStartString', 'catalog'),
    ENTRY_URI: ('name', 'uri'),
    ENTRY_REWRITE_URI: ('uriStartString', 'rewritePrefix'),
    ENTRY_URI_SUFFIX: ('uriSuffix', 'uri'),
    ENTRY_DELEGATE_URI: ('uriStartString', 'catalog'),
}

PREFER_PUBLIC: str = 'public'
PREFER_SYSTEM: str = 'system'

PUBLICID_URN_PREFIX: str = 'urn:publicid:'

XML_NS: str = 'http://www.w3.org/XML/1998/namespace'
XML_BASE_ATTR: str = f'{{{XML_NS}}}base'

# ============================================================================
# XML SCHEMA VOCABULARY
# ============================================================================
XSD_NS: str = 'http://www.w3.org/2001/XMLSchema'
XSI_NS: str = 'http://www.w3.org/2001/XMLSchema-instance'
XSI_SCHEMA_LOCATION: str = f'{{{XSI_NS}}}schemaLocation'
XSI_NO_NS_SCHEMA_LOCATION: str = f'{{{XSI_NS}}}noNamespaceSchemaLocation'

XSD_SCHEMA_TAG: str = f'{{{XSD_NS}}}schema'
XSD_IMPORT_TAG: str = f'{{{XSD_NS}}}import'
XSD_INCLUDE_TAG: str = f'{{{XSD_NS}}}include'
XSD_REDEFINE_TAG: str = f'{{{XSD_NS}}}redefine'
XSD_OVERRIDE_TAG: str = f'{{{XSD_NS}}}override'

# Namespaces that never need a schema of their own
BUILTIN_NAMESPACES: frozenset = frozenset({XSI_NS, XML_NS})

# Resource type reported for schema requests
RESOURCE_TYPE_SCHEMA: str = XSD_NS

# ============================================================================
# FILE DISCOVERY
# ============================================================================
XML_FILE_SUFFIX: str = '.xml'
DEFAULT_INCLUDES: tuple[str, ...] = ('**',)

# Mirrors the SCM/editor default excludes of directory scanners
DEFAULT_EXCLUDES: tuple[str, ...] = (
    '**/*~',
    '**/#*#',
    '**/.#*',
    '**/%*%',
    '**/._*',
    '**/CVS',
    '**/CVS/**',
    '**/.cvsignore',
    '**/.svn',
    '**/.svn/**',
    '**/.git',
    '**/.git/**',
    '**/.gitignore',
    '**/.gitattributes',
    '**/.hg',
    '**/.hg/**',
    '**/.bzr',
    '**/.bzr/**',
    '**/.DS_Store',
)

# ============================================================================
# SCHEMA ARTIFACTS
# ============================================================================
DEFAULT_SCHEMA_GROUP_ID: str = 'com.openapi.doc.schemas'
DEFAULT_SCHEMA_ARTIFACT_ID: str = 'catalog'
DEFAULT_SCHEMA_ARTIFACT_IDS: tuple[str, ...] = ('xsd', 'catalog')
DEFAULT_ARTIFACT_EXTENSION: str = 'zip'
SCHEMAS_DIRNAME: str = 'schemas'
DEFAULT_CATALOG_FILENAME: str = 'catalog.xml'

POLICY_EXPLICIT_VERSION: str = 'explicit-version'
POLICY_DECLARED_DEPENDENCIES: str = 'declared-dependencies'

# ============================================================================
# DOWNLOAD CONFIGURATION DEFAULTS
# ============================================================================
HTTP_OK: int = 200
HTTP_NOT_FOUND: int = 404
HTTP_TOO_MANY_REQUESTS: int = 429
HTTP_SERVER_ERROR: int = 500
HTTP_BAD_GATEWAY: int = 502
HTTP_SERVICE_UNAVAILABLE: int = 503
HTTP_GATEWAY_TIMEOUT: int = 504
RETRYABLE_STATUS_CODES: tuple[int, ...] = (
    HTTP_TOO_MANY_REQUESTS,
    HTTP_SERVER_ERROR,
    HTTP_BAD_GATEWAY,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_GATEWAY_TIMEOUT,
)

DEFAULT_CHUNK_SIZE: int = 8192
DEFAULT_TIMEOUT: int = 300
DEFAULT_CONNECT_TIMEOUT: int = 30
DEFAULT_RETRY_ATTEMPTS: int = 3
DEFAULT_RETRY_MIN_WAIT: int = 2
DEFAULT_RETRY_MAX_WAIT: int = 10
DEFAULT_USER_AGENT: str = 'catalog-validator/1.0'

MAX_EXTRACTION_DEPTH: int = 25
DEFAULT_MAX_ARCHIVE_SIZE: int = 524288000  # 500MB

# ============================================================================
# LOGGING
# ============================================================================
LOG_INPUT: str = '[INPUT]'
LOG_PROCESS: str = '[PROCESS]'
LOG_OUTPUT: str = '[OUTPUT]'

LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

LOGGER_ROOT: str = 'catalog_validator'
LOGGER_CORE: str = f'{LOGGER_ROOT}.core'
LOGGER_ENGINE: str = f'{LOGGER_ROOT}.engine'
LOGGER_ARTIFACTS: str = f'{LOGGER_ROOT}.artifacts'
LOGGER_CLI: str = f'{LOGGER_ROOT}.cli'

ACTIVITY_LOG_FILENAME: str = 'activity.log'
ERROR_LOG_FILENAME: str = 'errors.log'

# ============================================================================
# CLI EXIT CODES
# ============================================================================
EXIT_PASSED: int = 0
EXIT_VALIDATION_FAILED: int = 1
EXIT_CONFIGURATION_ERROR: int = 2
EXIT_INFRASTRUCTURE_ERROR: int = 3
EXIT_INTERRUPTED: int = 130

# ============================================================================
# ENVIRONMENT VARIABLE KEYS
# ============================================================================
ENV_PREFIX: str = 'CATALOG_VALIDATOR_'
ENV_BASE_DIR: str = f'{ENV_PREFIX}BASE_DIR'
ENV_SCHEMA_DIR: str = f'{ENV_PREFIX}SCHEMA_DIR'
ENV_UNPACK_DIR: str = f'{ENV_PREFIX}UNPACK_DIR'
ENV_BUILD_DIR: str = f'{ENV_PREFIX}BUILD_DIR'
ENV_CATALOG_FILES: str = f'{ENV_PREFIX}CATALOG_FILES'
ENV_SCHEMA_VERSION: str = f'{ENV_PREFIX}SCHEMA_VERSION'
ENV_SCHEMA_GROUP_ID: str = f'{ENV_PREFIX}SCHEMA_GROUP_ID'
ENV_SCHEMA_ARTIFACT_ID: str = f'{ENV_PREFIX}SCHEMA_ARTIFACT_ID'
ENV_SCHEMA_ARTIFACT_IDS: str = f'{ENV_PREFIX}SCHEMA_ARTIFACT_IDS'
ENV_ARTIFACT_EXTENSION: str = f'{ENV_PREFIX}ARTIFACT_EXTENSION'
ENV_SELECTION_POLICY: str = f'{ENV_PREFIX}SELECTION_POLICY'
ENV_DEPENDENCIES: str = f'{ENV_PREFIX}DEPENDENCIES'
ENV_DEPENDENCY_EXCLUDES: str = f'{ENV_PREFIX}DEPENDENCY_EXCLUDES'
ENV_APPLY_DEPENDENCY_EXCLUDES: str = f'{ENV_PREFIX}APPLY_DEPENDENCY_EXCLUDES'
ENV_LOCAL_REPOSITORY: str = f'{ENV_PREFIX}LOCAL_REPOSITORY'
ENV_REMOTE_REPOSITORIES: str = f'{ENV_PREFIX}REMOTE_REPOSITORIES'
ENV_INCLUDES: str = f'{ENV_PREFIX}INCLUDES'
ENV_EXCLUDES: str = f'{ENV_PREFIX}EXCLUDES'
ENV_SKIP: str = f'{ENV_PREFIX}SKIP'
ENV_PREFER_PUBLIC: str = f'{ENV_PREFIX}PREFER_PUBLIC'
ENV_IGNORE_MISSING_PROPERTIES: str = f'{ENV_PREFIX}IGNORE_MISSING_PROPERTIES'
ENV_REQUEST_TIMEOUT: str = f'{ENV_PREFIX}REQUEST_TIMEOUT'
ENV_CONNECT_TIMEOUT: str = f'{ENV_PREFIX}CONNECT_TIMEOUT'
ENV_RETRY_ATTEMPTS: str = f'{ENV_PREFIX}RETRY_ATTEMPTS'
ENV_CHUNK_SIZE: str = f'{ENV_PREFIX}CHUNK_SIZE'
ENV_MAX_ARCHIVE_SIZE: str = f'{ENV_PREFIX}MAX_ARCHIVE_SIZE'
ENV_LOG_LEVEL: str = f'{ENV_PREFIX}LOG_LEVEL'
ENV_LOG_DIR: str = f'{ENV_PREFIX}LOG_DIR'
ENV_LOG_CONSOLE: str = f'{ENV_PREFIX}LOG_CONSOLE'
