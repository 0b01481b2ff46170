# Path: catalog_validator/engine/errors.py
"""
Catalog Validator Exceptions

Error taxonomy:
- Configuration errors: broken catalog or schema artifact, abort the run
- Infrastructure errors: I/O or resolver failure on a target file, abort the run
- Validation diagnostics: schema-rule findings, recorded per document
"""

from typing import Optional


class CatalogValidatorError(Exception):
    """Base class for all catalog validator errors."""


class CatalogConfigurationError(CatalogValidatorError):
    """Catalog descriptor or schema artifact location is unusable."""


class ArtifactResolutionError(CatalogConfigurationError):
    """Schema artifact could not be located, fetched, or unpacked."""


class ValidationInfrastructureError(CatalogValidatorError):
    """Target file or resolver failed for reasons unrelated to schema rules."""


class ValidationDiagnostic(CatalogValidatorError):
    """
    A single diagnostic reported while compiling a schema or validating a document.

    Carries its source locator; unknown line/column are -1.
    """

    def __init__(
        self,
        message: str,
        public_id: Optional[str] = None,
        system_id: Optional[str] = None,
        line: int = -1,
        column: int = -1
    ):
        super().__init__(message)
        self.message = message
        self.public_id = public_id
        self.system_id = system_id
        self.line = line
        self.column = column


__all__ = [
    'CatalogValidatorError',
    'CatalogConfigurationError',
    'ArtifactResolutionError',
    'ValidationInfrastructureError',
    'ValidationDiagnostic',
]
