# Path: catalog_validator/engine/error_aggregator.py
"""
Error Aggregator

Diagnostic sinks following the three-severity callback contract of
SAX-style validation APIs (warning / error / fatal_error).

- ErrorAggregator: records everything; only fatal diagnostics are re-raised,
  which ends validation of the current document
- StrictErrorHandler: raises on every diagnostic, warnings included
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from catalog_validator.engine.errors import ValidationDiagnostic


class Severity(str, Enum):
    """Diagnostic classification."""

    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


@dataclass(frozen=True)
class SourceLocator:
    """Where a diagnostic occurred; unknown line/column are -1."""

    public_id: Optional[str] = None
    system_id: Optional[str] = None
    line: int = -1
    column: int = -1

    @classmethod
    def from_diagnostic(cls, diagnostic: ValidationDiagnostic) -> 'SourceLocator':
        return cls(
            public_id=diagnostic.public_id,
            system_id=diagnostic.system_id,
            line=diagnostic.line,
            column=diagnostic.column
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.public_id is None
            and self.system_id is None
            and self.line < 0
            and self.column < 0
        )


@dataclass(frozen=True)
class ErrorRecord:
    """One classified diagnostic, immutable once recorded."""

    severity: Severity
    locator: SourceLocator
    message: str

    def __str__(self) -> str:
        return f"{self.severity.value.upper()}: {self.message}"


class ValidationErrorHandler(Protocol):
    """Callback contract the validator reports diagnostics to."""

    def warning(self, diagnostic: ValidationDiagnostic) -> None:
        ...

    def error(self, diagnostic: ValidationDiagnostic) -> None:
        ...

    def fatal_error(self, diagnostic: ValidationDiagnostic) -> None:
        ...


class StrictErrorHandler:
    """Treats every diagnostic, warnings included, as immediately fatal."""

    def warning(self, diagnostic: ValidationDiagnostic) -> None:
        raise diagnostic

    def error(self, diagnostic: ValidationDiagnostic) -> None:
        raise diagnostic

    def fatal_error(self, diagnostic: ValidationDiagnostic) -> None:
        raise diagnostic


class ErrorAggregator:
    """
    Stateful collector for one validation run.

    Records are kept in order of occurrence across all documents of the run.
    `error_count` and `fatal_count` exclude warnings; a run fails iff
    their sum is positive.

    Example:
        aggregator = factory.create_error_handler()
        validator = factory.build()
        for path in files:
            try:
                validator.validate(path)
            except ValidationDiagnostic:
                pass  # already recorded
        failed = aggregator.has_failures
    """

    def __init__(self):
        self._records: list[ErrorRecord] = []
        self._warnings = 0
        self._errors = 0
        self._fatals = 0

    def warning(self, diagnostic: ValidationDiagnostic) -> None:
        """Record a warning. Never raises."""
        self._record(Severity.WARNING, diagnostic)
        self._warnings += 1

    def error(self, diagnostic: ValidationDiagnostic) -> None:
        """Record an error. Validation of the document continues."""
        self._record(Severity.ERROR, diagnostic)
        self._errors += 1

    def fatal_error(self, diagnostic: ValidationDiagnostic) -> None:
        """Record a fatal diagnostic, then raise it to end the current document."""
        self._record(Severity.FATAL, diagnostic)
        self._fatals += 1
        raise diagnostic

    def get_errors(self) -> tuple[ErrorRecord, ...]:
        """Snapshot of all records in order of occurrence."""
        return tuple(self._records)

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        return self.get_errors()

    @property
    def warning_count(self) -> int:
        return self._warnings

    @property
    def error_count(self) -> int:
        return self._errors

    @property
    def fatal_count(self) -> int:
        return self._fatals

    @property
    def has_failures(self) -> bool:
        return self._errors + self._fatals > 0

    def __len__(self) -> int:
        return len(self._records)

    def _record(self, severity: Severity, diagnostic: ValidationDiagnostic) -> None:
        self._records.append(ErrorRecord(
            severity=severity,
            locator=SourceLocator.from_diagnostic(diagnostic),
            message=diagnostic.message
        ))


__all__ = [
    'Severity',
    'SourceLocator',
    'ErrorRecord',
    'ValidationErrorHandler',
    'StrictErrorHandler',
    'ErrorAggregator',
]
