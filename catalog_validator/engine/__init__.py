# Path: catalog_validator/engine/__init__.py
"""
Catalog Validator Engine

Catalog-driven schema resolution and batch validation:
catalog model and discovery, resource resolver, validator factory,
error aggregator, report, and the run orchestrator.
"""

from .errors import (
    CatalogValidatorError,
    CatalogConfigurationError,
    ArtifactResolutionError,
    ValidationInfrastructureError,
    ValidationDiagnostic,
)
from .catalog import CatalogModel, CatalogEntry, scan_catalogs, is_xml_catalog
from .resolver import (
    SchemaResourceRequest,
    ResolvedResource,
    ResourceResolution,
    ResourceResolver,
    LxmlResolverBridge,
)
from .error_aggregator import (
    Severity,
    SourceLocator,
    ErrorRecord,
    ErrorAggregator,
    StrictErrorHandler,
)
from .validator_factory import ValidatorFactory, CatalogXMLValidator
from .report import ErrorsSerializer
from .orchestrator import RunState, RunResult, ValidationRun, run_validation

__all__ = [
    'CatalogValidatorError',
    'CatalogConfigurationError',
    'ArtifactResolutionError',
    'ValidationInfrastructureError',
    'ValidationDiagnostic',
    'CatalogModel',
    'CatalogEntry',
    'scan_catalogs',
    'is_xml_catalog',
    'SchemaResourceRequest',
    'ResolvedResource',
    'ResourceResolution',
    'ResourceResolver',
    'LxmlResolverBridge',
    'Severity',
    'SourceLocator',
    'ErrorRecord',
    'ErrorAggregator',
    'StrictErrorHandler',
    'ValidatorFactory',
    'CatalogXMLValidator',
    'ErrorsSerializer',
    'RunState',
    'RunResult',
    'ValidationRun',
    'run_validation',
]
