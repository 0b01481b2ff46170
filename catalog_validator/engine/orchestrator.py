# Path: catalog_validator/engine/orchestrator.py
"""
Validation Orchestrator

Drives one validation run through its states:

    Idle -> CatalogsLoaded -> ValidatorBuilt -> Validating -> Reported

Any configuration or infrastructure error moves the run to Aborted and
propagates. A fatal diagnostic only ends the current document; the run
continues with the next file. The run fails iff at least one error or
fatal diagnostic was recorded.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.core.logger import get_logger
from catalog_validator.engine.error_aggregator import ErrorAggregator, ErrorRecord
from catalog_validator.engine.errors import ValidationDiagnostic
from catalog_validator.engine.report import ErrorsSerializer
from catalog_validator.engine.validator_factory import CatalogXMLValidator, ValidatorFactory
from catalog_validator.constants import LOG_INPUT, LOG_PROCESS, LOG_OUTPUT

logger = get_logger(__name__, 'engine')

PathLike = Union[str, Path]


class RunState(str, Enum):
    """Lifecycle state of a validation run."""

    IDLE = "idle"
    CATALOGS_LOADED = "catalogs_loaded"
    VALIDATOR_BUILT = "validator_built"
    VALIDATING = "validating"
    REPORTED = "reported"
    ABORTED = "aborted"


_TRANSITIONS: dict[RunState, frozenset] = {
    RunState.IDLE: frozenset({RunState.CATALOGS_LOADED, RunState.REPORTED, RunState.ABORTED}),
    RunState.CATALOGS_LOADED: frozenset({RunState.VALIDATOR_BUILT, RunState.ABORTED}),
    RunState.VALIDATOR_BUILT: frozenset({RunState.VALIDATING, RunState.ABORTED}),
    RunState.VALIDATING: frozenset({RunState.REPORTED, RunState.ABORTED}),
    RunState.REPORTED: frozenset(),
    RunState.ABORTED: frozenset(),
}


@dataclass(frozen=True)
class RunResult:
    """Outcome of a completed run."""

    passed: bool
    records: tuple[ErrorRecord, ...] = ()
    warning_count: int = 0
    error_count: int = 0
    fatal_count: int = 0
    files_validated: int = 0
    message: Optional[str] = None
    skipped: bool = False

    @property
    def failed(self) -> bool:
        return not self.passed

    def summary(self) -> str:
        if self.skipped:
            return "Validation skipped"
        status = "passed" if self.passed else "failed"
        return (
            f"Validation {status}: {self.files_validated} file(s), "
            f"{self.error_count} error(s), {self.fatal_count} fatal, "
            f"{self.warning_count} warning(s)"
        )


class ValidationRun:
    """
    One validation run: catalogs, a validator over them, and the target files.

    Example:
        run = ValidationRun(
            target_files=[Path('docs/a.xml'), Path('docs/b.xml')],
            catalog_dirs=[Path('build/schemas/catalog-1.2.0')]
        )
        result = run.execute()
        if result.failed:
            print(result.message)
    """

    def __init__(
        self,
        target_files: Iterable[PathLike],
        catalog_files: Iterable[PathLike] = (),
        catalog_dirs: Iterable[PathLike] = (),
        prefer_public: Optional[bool] = None,
        ignore_missing_properties: Optional[bool] = None,
        skip: bool = False,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize run.

        Args:
            target_files: Documents to validate, in validation order
            catalog_files: Catalog files loaded first, in order
            catalog_dirs: Directories scanned for further catalogs
            prefer_public: Default 'prefer' policy (config value if None)
            ignore_missing_properties: Tolerate incomplete catalog entries
                (config value if None)
            skip: Report success without loading or validating anything
            config: Configuration source for options not passed explicitly
        """
        self.target_files = [Path(p) for p in target_files]
        self.catalog_files = [Path(p) for p in catalog_files]
        self.catalog_dirs = [Path(p) for p in catalog_dirs]
        self.prefer_public = prefer_public
        self.ignore_missing_properties = ignore_missing_properties
        self.skip = skip
        self.config = config

        self._state = RunState.IDLE
        self._factory: Optional[ValidatorFactory] = None
        self._validator: Optional[CatalogXMLValidator] = None
        self._aggregator: Optional[ErrorAggregator] = None
        self._files_validated = 0
        self._result: Optional[RunResult] = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def aggregator(self) -> Optional[ErrorAggregator]:
        return self._aggregator

    @property
    def result(self) -> Optional[RunResult]:
        return self._result

    def execute(self) -> RunResult:
        """Run every phase in order and return the result."""
        if self.skip:
            logger.info("XML validation skipped by configuration")
            self._transition(RunState.REPORTED)
            self._result = RunResult(passed=True, skipped=True)
            return self._result

        self.load_catalogs()
        self.build_validator()
        self.validate_files()
        return self.report()

    def load_catalogs(self) -> None:
        """Idle -> CatalogsLoaded: load explicit catalogs, then discover the rest."""
        self._require(RunState.IDLE)
        with self._aborting():
            factory = ValidatorFactory(
                config=self.config,
                prefer_public=self.prefer_public,
                ignore_missing_properties=self.ignore_missing_properties
            )
            factory.add_catalogs(self.catalog_files)
            for directory in self.catalog_dirs:
                factory.scan_catalogs(directory)

        logger.info(
            f"{LOG_INPUT} Loaded {len(factory.catalog.catalog_locations)} catalog(s) "
            f"with {len(factory.catalog)} entries"
        )
        self._factory = factory
        self._transition(RunState.CATALOGS_LOADED)

    def build_validator(self) -> None:
        """CatalogsLoaded -> ValidatorBuilt: fresh aggregator, frozen catalog, validator."""
        self._require(RunState.CATALOGS_LOADED)
        with self._aborting():
            self._aggregator = self._factory.create_error_handler()
            self._validator = self._factory.build()
        self._transition(RunState.VALIDATOR_BUILT)

    def validate_files(self) -> None:
        """ValidatorBuilt -> Validating: validate every target file in order."""
        self._require(RunState.VALIDATOR_BUILT)
        self._transition(RunState.VALIDATING)

        logger.info(f"{LOG_PROCESS} Validating {len(self.target_files)} file(s)")
        with self._aborting():
            for path in self.target_files:
                try:
                    self._validator.validate(path)
                except ValidationDiagnostic as e:
                    logger.warning(f"Validation of {path} stopped: {e.message}")
                self._files_validated += 1

    def report(self) -> RunResult:
        """Validating -> Reported: decide pass/fail and format the report."""
        self._require(RunState.VALIDATING)
        aggregator = self._aggregator

        self._result = RunResult(
            passed=not aggregator.has_failures,
            records=aggregator.get_errors(),
            warning_count=aggregator.warning_count,
            error_count=aggregator.error_count,
            fatal_count=aggregator.fatal_count,
            files_validated=self._files_validated,
            message=ErrorsSerializer.serialize(aggregator)
        )
        self._transition(RunState.REPORTED)

        logger.info(f"{LOG_OUTPUT} {self._result.summary()}")
        return self._result

    def _require(self, state: RunState) -> None:
        if self._state != state:
            raise RuntimeError(f"Run is {self._state.value}, expected {state.value}")

    def _transition(self, target: RunState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal run transition {self._state.value} -> {target.value}")
        logger.debug(f"Run state {self._state.value} -> {target.value}")
        self._state = target

    @contextmanager
    def _aborting(self):
        """Move the run to Aborted when an exception leaves the block."""
        try:
            yield
        except Exception as e:
            logger.error(f"Validation run aborted: {e}")
            self._transition(RunState.ABORTED)
            raise


def run_validation(
    target_files: Iterable[PathLike],
    catalog_files: Iterable[PathLike] = (),
    catalog_dirs: Iterable[PathLike] = (),
    **options
) -> RunResult:
    """Build and execute a ValidationRun in one call."""
    return ValidationRun(
        target_files,
        catalog_files=catalog_files,
        catalog_dirs=catalog_dirs,
        **options
    ).execute()


__all__ = ['RunState', 'RunResult', 'ValidationRun', 'run_validation']
