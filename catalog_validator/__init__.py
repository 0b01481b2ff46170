# Path: catalog_validator/__init__.py
"""
Catalog Validator
=================
Validates XML documents against XML Schemas located through OASIS XML Catalogs.
"""
from .engine import (
    ValidatorFactory,
    ValidationRun,
    RunResult,
    run_validation,
    ErrorAggregator,
    ErrorsSerializer,
)
__all__ = [
'ValidatorFactory',
'ValidationRun',
'RunResult',
'run_validation',
'ErrorAggregator',
'ErrorsSerializer',
]
__version__ = '1.0.0'
