# Path: catalog_validator/engine/validator_factory.py
"""
Validator Factory

Builds validators with no fixed schema root. For each document the schema
is assembled from what the document declares:

1. Parse the document (well-formedness errors are fatal diagnostics)
2. Collect the namespaces it needs (root element namespace, namespaces of
   other elements, xsi:schemaLocation / xsi:noNamespaceSchemaLocation hints)
3. Resolve each through the catalog; a hint naming an existing local file
   is used as-is (unresolved root or hinted namespaces are fatal diagnostics)
4. Compile an in-memory driver schema importing the resolved locations, with
   the resolver bridge installed so nested imports go through the catalog too
   (a nested schema the catalogs cannot supply is a fatal diagnostic)
5. Validate and route every libxml2 log entry to the error handler

Compiled schemas are cached per validator, keyed by the resolved
namespace/location set.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from lxml import etree

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.core.logger import get_logger
from catalog_validator.engine.catalog.discovery import scan_catalogs
from catalog_validator.engine.catalog.locations import absolutize, location_to_path, path_to_uri
from catalog_validator.engine.catalog.model import CatalogModel
from catalog_validator.engine.error_aggregator import (
    ErrorAggregator,
    StrictErrorHandler,
    ValidationErrorHandler,
)
from catalog_validator.engine.errors import (
    CatalogValidatorError,
    ValidationDiagnostic,
    ValidationInfrastructureError,
)
from catalog_validator.engine.resolver import (
    LxmlResolverBridge,
    ResourceResolution,
    ResourceResolver,
    SchemaResourceRequest,
)
from catalog_validator.constants import (
    BUILTIN_NAMESPACES,
    XSD_NS,
    XSD_SCHEMA_TAG,
    XSD_IMPORT_TAG,
    XSD_INCLUDE_TAG,
    XSI_SCHEMA_LOCATION,
    XSI_NO_NS_SCHEMA_LOCATION,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')


@dataclass
class SchemaRequirement:
    """A namespace the document needs a schema for."""
    namespace: Optional[str]
    location: Optional[str]
    line: int
    required: bool


@dataclass
class _CompiledSchema:
    schema: etree.XMLSchema
    # Compile-time warnings, replayed on every validation using the schema
    warnings: list[ValidationDiagnostic]


def collect_schema_requirements(root: etree._Element) -> list[SchemaRequirement]:
    """
    Namespaces a document needs schemas for, in document order.

    The root element namespace and every hinted namespace are required.
    Namespaces of other elements are optional: they are used when the
    catalog maps them and otherwise left to the schemas already loaded.
    """
    requirements: dict[Optional[str], SchemaRequirement] = {}

    def need(namespace, location, line, required):
        if namespace in BUILTIN_NAMESPACES:
            return
        existing = requirements.get(namespace)
        if existing is None:
            requirements[namespace] = SchemaRequirement(namespace, location, line, required)
            return
        if location and not existing.location:
            existing.location = location
        existing.required = existing.required or required

    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        line = element.sourceline or -1
        namespace = etree.QName(element).namespace

        if element is root:
            if namespace is not None:
                need(namespace, None, line, True)
        elif namespace is not None:
            need(namespace, None, line, False)

        hints = element.get(XSI_SCHEMA_LOCATION)
        if hints:
            tokens = hints.split()
            for hinted_namespace, location in zip(tokens[0::2], tokens[1::2]):
                need(hinted_namespace, location, line, True)

        no_namespace_hint = element.get(XSI_NO_NS_SCHEMA_LOCATION)
        if no_namespace_hint:
            need(None, no_namespace_hint.strip(), line, True)

    return list(requirements.values())


def build_driver_schema(locations: Iterable[tuple[Optional[str], str]]) -> etree._Element:
    """
    Schema document that pulls in every resolved location.

    Namespaced schemas are imported; a no-namespace schema is included.
    """
    driver = etree.Element(XSD_SCHEMA_TAG, nsmap={'xs': XSD_NS})
    for namespace, location in locations:
        if namespace is None:
            etree.SubElement(driver, XSD_INCLUDE_TAG, schemaLocation=location)
        else:
            etree.SubElement(driver, XSD_IMPORT_TAG, namespace=namespace, schemaLocation=location)
    return driver


def _column(value: int) -> int:
    return value if value and value > 0 else -1


class CatalogXMLValidator:
    """
    Reusable validator bound to a resource resolver and an error handler.

    Not safe for concurrent use; one validator serves one sequential run.
    """

    def __init__(self, resolver: ResourceResolution, handler: ValidationErrorHandler):
        self.resolver = resolver
        self.handler = handler
        self._schemas: dict[tuple, _CompiledSchema] = {}

    def validate(self, path: Union[str, Path]) -> None:
        """
        Validate one document, reporting every diagnostic to the handler.

        Args:
            path: Document to validate

        Raises:
            ValidationDiagnostic: The handler raised for a diagnostic (always
                the case for fatal diagnostics with ErrorAggregator)
            ValidationInfrastructureError: The file could not be read or the
                resolver failed
        """
        path = Path(path)
        logger.info(f"{LOG_INPUT} Validating {path}")
        try:
            self._validate(path)
        except CatalogValidatorError:
            raise
        except Exception as e:
            raise ValidationInfrastructureError(f"While parsing {path}: {e}") from e

    def _validate(self, path: Path) -> None:
        system_id = path_to_uri(path)

        with open(path, 'rb') as stream:
            data = stream.read()

        tree = self._parse(data, path, system_id)
        if tree is None:
            return

        requirements = collect_schema_requirements(tree.getroot())
        locations = self._resolve_requirements(requirements, system_id)
        if locations is None:
            return
        if not locations:
            logger.debug(f"{LOG_PROCESS} {path.name}: no schema needed")
            return

        compiled = self._compiled_schema(tuple(locations), path, system_id)
        if compiled is None:
            return

        for warning in compiled.warnings:
            self.handler.warning(warning)

        compiled.schema.validate(tree)
        self._dispatch(compiled.schema.error_log, system_id)

        logger.info(f"{LOG_OUTPUT} Validated {path.name}")

    def _parse(self, data: bytes, path: Path, system_id: str) -> Optional[etree._ElementTree]:
        bridge = LxmlResolverBridge(self.resolver)
        parser = etree.XMLParser(load_dtd=True, no_network=True)
        parser.resolvers.add(bridge)

        try:
            root = etree.fromstring(data, parser, base_url=system_id)
        except etree.XMLSyntaxError as e:
            self._raise_bridge_failure(bridge, path)
            line, column = e.position
            self.handler.fatal_error(ValidationDiagnostic(
                e.msg,
                system_id=system_id,
                line=line if line else -1,
                column=_column(column)
            ))
            return None

        self._raise_bridge_failure(bridge, path)
        self._dispatch(parser.error_log, system_id)
        return root.getroottree()

    def _resolve_requirements(
        self,
        requirements: list[SchemaRequirement],
        system_id: str
    ) -> Optional[list[tuple[Optional[str], str]]]:
        locations = []
        for requirement in requirements:
            resource = self.resolver.resolve_schema_resource(SchemaResourceRequest(
                namespace_uri=requirement.namespace,
                system_id=requirement.location,
                base_uri=system_id
            ))
            if resource is not None:
                resource.close()
                locations.append((requirement.namespace, resource.system_id))
                continue

            local = self._local_hint(requirement.location, system_id)
            if local is not None:
                logger.debug(f"No catalog entry for {requirement.location}, using local file {local}")
                locations.append((requirement.namespace, local))
                continue

            if not requirement.required:
                logger.debug(f"No catalog entry for optional namespace {requirement.namespace}")
                continue

            logger.error(
                f"Unresolved schema for namespace {requirement.namespace!r} "
                f"(schemaLocation {requirement.location!r}) in {system_id}"
            )
            message = f"Cannot resolve the schema for namespace '{requirement.namespace or ''}'"
            if requirement.location:
                message += f" (schemaLocation '{requirement.location}')"
            message += ": no catalog entry, network access is disabled"
            self.handler.fatal_error(ValidationDiagnostic(
                message,
                system_id=system_id,
                line=requirement.line
            ))
            return None
        return locations

    @staticmethod
    def _local_hint(location: Optional[str], system_id: str) -> Optional[str]:
        """Schema hint pointing at an existing local file, made absolute."""
        if not location:
            return None
        absolute = absolutize(location, system_id)
        path = location_to_path(absolute)
        if path is None or not path.is_file():
            return None
        return absolute

    def _compiled_schema(
        self,
        locations: tuple[tuple[Optional[str], str], ...],
        path: Path,
        system_id: str
    ) -> Optional[_CompiledSchema]:
        compiled = self._schemas.get(locations)
        if compiled is not None:
            return compiled

        logger.info(f"{LOG_PROCESS} Compiling schema for {', '.join(loc for _, loc in locations)}")

        bridge = LxmlResolverBridge(self.resolver)
        parser = etree.XMLParser(no_network=True)
        parser.resolvers.add(bridge)
        driver = etree.fromstring(
            etree.tostring(build_driver_schema(locations)),
            parser,
            base_url=system_id
        )

        try:
            schema = etree.XMLSchema(driver)
        except etree.XMLSchemaParseError as e:
            self._raise_bridge_failure(bridge, path)
            if bridge.unresolved:
                self._report_unresolved(bridge.unresolved, system_id)
            else:
                self._report_compile_failure(e, system_id)
            return None

        self._raise_bridge_failure(bridge, path)
        if bridge.unresolved:
            # Not cached: every document needing these schemas fails the same way
            self._report_unresolved(bridge.unresolved, system_id)
            return None

        warnings = [
            self._diagnostic(entry, system_id)
            for entry in schema.error_log
            if entry.level == etree.ErrorLevels.WARNING
        ]

        compiled = _CompiledSchema(schema=schema, warnings=warnings)
        self._schemas[locations] = compiled
        return compiled

    def _report_unresolved(self, urls: list[str], system_id: str) -> None:
        """One fatal diagnostic naming every schema the catalogs could not supply."""
        unique = list(dict.fromkeys(urls))
        logger.error(f"Unresolved schema documents for {system_id}: {', '.join(unique)}")
        quoted = ', '.join(f"'{url}'" for url in unique)
        self.handler.fatal_error(ValidationDiagnostic(
            f"schema_reference: Failed to read schema document {quoted}: "
            f"no catalog entry, network access is disabled",
            system_id=system_id
        ))

    def _report_compile_failure(self, error: etree.XMLSchemaParseError, system_id: str) -> None:
        entries = [
            entry for entry in error.error_log
            if entry.level >= etree.ErrorLevels.ERROR
        ]
        message = f"Schema compilation failed: {entries[0].message if entries else error}"

        first = entries[0] if entries else None
        self.handler.fatal_error(ValidationDiagnostic(
            message,
            system_id=(first.filename if first and first.filename else system_id),
            line=(first.line if first and first.line else -1),
            column=_column(first.column) if first else -1
        ))

    def _dispatch(self, error_log, system_id: str) -> None:
        entries = list(error_log)
        for entry in entries:
            diagnostic = self._diagnostic(entry, system_id)
            if entry.level == etree.ErrorLevels.WARNING:
                self.handler.warning(diagnostic)
            elif entry.level == etree.ErrorLevels.ERROR:
                self.handler.error(diagnostic)
            elif entry.level == etree.ErrorLevels.FATAL:
                self.handler.fatal_error(diagnostic)

    @staticmethod
    def _diagnostic(entry, system_id: str) -> ValidationDiagnostic:
        return ValidationDiagnostic(
            entry.message,
            system_id=entry.filename or system_id,
            line=entry.line if entry.line else -1,
            column=_column(entry.column)
        )

    @staticmethod
    def _raise_bridge_failure(bridge: LxmlResolverBridge, path: Path) -> None:
        if bridge.failures:
            failure = bridge.failures[0]
            raise ValidationInfrastructureError(f"While parsing {path}: {failure}") from failure


class ValidatorFactory:
    """
    Builder for CatalogXMLValidator.

    Example:
        factory = ValidatorFactory(prefer_public=True)
        factory.scan_catalogs(Path('build/schemas/catalog-1.2.0'))
        aggregator = factory.create_error_handler()
        validator = factory.build()
        validator.validate(Path('docs/api.xml'))
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        prefer_public: Optional[bool] = None,
        ignore_missing_properties: Optional[bool] = None
    ):
        """
        Initialize factory.

        Args:
            config: Configuration source for options not passed explicitly
            prefer_public: Default 'prefer' policy of the catalog model
            ignore_missing_properties: Tolerate catalog entries with missing attributes
        """
        if prefer_public is None or ignore_missing_properties is None:
            config = config or ConfigLoader()
            if prefer_public is None:
                prefer_public = config.get('prefer_public', True)
            if ignore_missing_properties is None:
                ignore_missing_properties = config.get('ignore_missing_properties', True)

        self.catalog = CatalogModel(
            prefer_public=prefer_public,
            ignore_missing_properties=ignore_missing_properties
        )
        self._error_handler: Optional[ValidationErrorHandler] = None

    def add_catalogs(self, paths: Iterable[Union[str, Path]]) -> 'ValidatorFactory':
        """Load catalog files into the model, in order."""
        for path in paths:
            self.catalog.parse_catalog(path)
        return self

    def scan_catalogs(self, directory: Union[str, Path]) -> list[Path]:
        """Discover catalogs under a directory and load them; returns the catalog paths."""
        found = scan_catalogs(directory)
        self.add_catalogs(found)
        return found

    def create_error_handler(self) -> ErrorAggregator:
        """Install and return a fresh ErrorAggregator."""
        aggregator = ErrorAggregator()
        self._error_handler = aggregator
        return aggregator

    @property
    def error_handler(self) -> Optional[ValidationErrorHandler]:
        return self._error_handler

    @error_handler.setter
    def error_handler(self, handler: Optional[ValidationErrorHandler]) -> None:
        self._error_handler = handler

    def build(self) -> CatalogXMLValidator:
        """
        Freeze the catalog model and build a validator over it.

        Without an installed error handler, a StrictErrorHandler is used.
        """
        resolver = ResourceResolver(self.catalog)
        handler = self._error_handler if self._error_handler is not None else StrictErrorHandler()
        logger.info(
            f"{LOG_PROCESS} Validator built over {len(self.catalog.catalog_locations)} catalog(s), "
            f"{len(self.catalog)} entries"
        )
        return CatalogXMLValidator(resolver, handler)


__all__ = [
    'SchemaRequirement',
    'collect_schema_requirements',
    'build_driver_schema',
    'CatalogXMLValidator',
    'ValidatorFactory',
]
