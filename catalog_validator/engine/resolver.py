# Path: catalog_validator/engine/resolver.py
"""
Resource Resolver

Answers the two resolution requests issued during schema compilation and
document validation:

1. Schema-resource resolution (type, namespace, public id, system id, base URI)
   - system id first, then the namespace URI, both against the catalog model
2. Entity resolution (public id, system id)
   - the catalog model's combined public/system lookup

Resolved resources are opened as byte streams only. Nothing is fetched over
the network: a resolved location that is not local counts as unresolved.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, runtime_checkable

from lxml import etree

from catalog_validator.core.logger import get_logger
from catalog_validator.engine.catalog.model import CatalogModel
from catalog_validator.engine.catalog.locations import absolutize, location_to_path
from catalog_validator.constants import (
    RESOURCE_TYPE_SCHEMA,
    XSD_SCHEMA_TAG,
    XSD_IMPORT_TAG,
    XSD_INCLUDE_TAG,
    XSD_REDEFINE_TAG,
    XSD_OVERRIDE_TAG,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'engine')


@dataclass(frozen=True)
class SchemaResourceRequest:
    """
    External schema reference met while compiling a schema or validating a document.

    Attributes:
        namespace_uri: Target namespace of the requested schema
        public_id: Public identifier, rarely present for schemas
        system_id: schemaLocation as written in the referencing document
        base_uri: Location of the referencing document
        resource_type: Requested resource type (the XML Schema namespace)
    """
    namespace_uri: Optional[str] = None
    public_id: Optional[str] = None
    system_id: Optional[str] = None
    base_uri: Optional[str] = None
    resource_type: str = RESOURCE_TYPE_SCHEMA


@dataclass
class ResolvedResource:
    """
    Resolved resource handle: an open byte stream plus its effective identifiers.

    The resolved location is both the system id and the base URI of the stream.
    """
    public_id: Optional[str]
    system_id: str
    byte_stream: BinaryIO = field(repr=False)
    encoding: Optional[str] = None

    @property
    def base_uri(self) -> str:
        return self.system_id

    @property
    def character_stream(self) -> None:
        """Character streams are not provided; encoding comes from the XML declaration."""
        return None

    def read(self) -> bytes:
        return self.byte_stream.read()

    def close(self) -> None:
        self.byte_stream.close()

    def __enter__(self) -> 'ResolvedResource':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@runtime_checkable
class ResourceResolution(Protocol):
    """Resolution capability handed to the schema engine."""

    def resolve_schema_resource(self, request: SchemaResourceRequest) -> Optional[ResolvedResource]:
        ...

    def resolve_entity(
        self,
        public_id: Optional[str],
        system_id: Optional[str]
    ) -> Optional[ResolvedResource]:
        ...


class ResourceResolver:
    """
    Catalog-backed implementation of ResourceResolution.

    Example:
        resolver = ResourceResolver(model)
        resource = resolver.resolve_schema_resource(
            SchemaResourceRequest(namespace_uri='urn:example:v1')
        )
        if resource is not None:
            with resource:
                schema_bytes = resource.read()
    """

    def __init__(self, catalog: CatalogModel):
        """
        Initialize resolver.

        Args:
            catalog: Catalog model; frozen here if it is not already
        """
        self.catalog = catalog if catalog.frozen else catalog.freeze()

    def resolve_schema_resource(self, request: SchemaResourceRequest) -> Optional[ResolvedResource]:
        """
        Resolve a schema import/include request through the catalog.

        Args:
            request: Schema resource request

        Returns:
            Open resource, or None if neither the system id nor the namespace
            is mapped by the catalog

        Raises:
            OSError: The catalog maps the request to a local file that cannot be read
        """
        logger.debug(
            f"{LOG_PROCESS} resolveResource type: {request.resource_type}, "
            f"namespaceURI: {request.namespace_uri}, publicId: {request.public_id}, "
            f"systemId: {request.system_id}, baseURI: {request.base_uri}"
        )

        if request.system_id:
            logger.debug(f"Resolving by systemId: {request.system_id}")
            resolved = self._resolve_system(request.system_id, request.base_uri)
            if resolved is not None:
                logger.debug(f"Successfully resolved by systemId as {resolved}")
                return self._open(request.public_id, resolved)
            logger.debug("systemId resolution failed")

        if request.namespace_uri:
            logger.debug(f"Resolving by uri: {request.namespace_uri}")
            resolved = self.catalog.resolve_uri(request.namespace_uri)
            if resolved is not None:
                logger.debug(f"Successfully resolved by URI as {resolved}")
                return self._open(request.public_id, resolved)

        logger.debug(
            f"Resolution failed for namespace {request.namespace_uri!r}, "
            f"systemId {request.system_id!r}"
        )
        return None

    def resolve_entity(
        self,
        public_id: Optional[str],
        system_id: Optional[str]
    ) -> Optional[ResolvedResource]:
        """
        Resolve an external entity (DTD, external parsed entity) through the catalog.

        Returns:
            Open resource, or None if the catalog has no mapping
        """
        if not public_id and not system_id:
            return None

        resolved = self.catalog.resolve_entity(public_id, system_id)
        if resolved is None:
            logger.debug(f"No catalog entry for entity publicId {public_id!r}, systemId {system_id!r}")
            return None
        return self._open(public_id, resolved)

    def _resolve_system(self, system_id: str, base_uri: Optional[str]) -> Optional[str]:
        resolved = self.catalog.resolve_system(system_id)
        if resolved is None and base_uri:
            absolute = absolutize(system_id, base_uri)
            if absolute != system_id:
                resolved = self.catalog.resolve_system(absolute)
        return resolved

    @staticmethod
    def _open(public_id: Optional[str], location: str) -> Optional[ResolvedResource]:
        path = location_to_path(location)
        if path is None:
            logger.error(f"Catalog maps to non-local location {location}; network access refused")
            return None
        return ResolvedResource(
            public_id=public_id,
            system_id=location,
            byte_stream=open(Path(path), 'rb')
        )


_SCHEMA_REFERENCE_TAGS = frozenset({
    XSD_IMPORT_TAG,
    XSD_INCLUDE_TAG,
    XSD_REDEFINE_TAG,
    XSD_OVERRIDE_TAG,
})


def rewrite_schema_references(
    data: bytes,
    base_uri: str,
    resolution: ResourceResolution
) -> bytes:
    """
    Point every import/include/redefine/override of a schema document at its
    catalog-resolved location.

    Imports are resolved by schemaLocation, then by namespace. Includes,
    redefines and overrides are resolved by schemaLocation only, since they
    share the including schema's namespace. Unmapped relative locations are
    made absolute against the document's base URI.

    Args:
        data: Raw schema document
        base_uri: Location the document was served from
        resolution: Resolver consulted for each reference

    Returns:
        The rewritten document, or the input unchanged if it is not a schema
        or needs no rewriting
    """
    parser = etree.XMLParser(no_network=True, load_dtd=False, resolve_entities=False)
    try:
        root = etree.fromstring(data, parser, base_url=base_uri)
    except etree.XMLSyntaxError:
        # libxml2 reports the syntax error when the schema is compiled
        return data

    if root.tag != XSD_SCHEMA_TAG:
        return data

    changed = False
    for child in root:
        if child.tag not in _SCHEMA_REFERENCE_TAGS:
            continue

        location = child.get('schemaLocation')
        namespace = child.get('namespace') if child.tag == XSD_IMPORT_TAG else None
        if not location and not namespace:
            continue

        resource = resolution.resolve_schema_resource(SchemaResourceRequest(
            namespace_uri=namespace,
            system_id=location,
            base_uri=base_uri
        ))
        if resource is not None:
            resource.close()
            new_location = resource.system_id
        elif location:
            new_location = absolutize(location, base_uri)
        else:
            continue

        if new_location != location:
            logger.debug(f"{LOG_PROCESS} {base_uri}: {location or namespace} -> {new_location}")
            child.set('schemaLocation', new_location)
            changed = True

    if not changed:
        return data
    return etree.tostring(root.getroottree(), xml_declaration=True, encoding='UTF-8')


class LxmlResolverBridge(etree.Resolver):
    """
    Plugs a ResourceResolution into lxml's resolver hook.

    Every URL libxml2 asks for (schemas, DTDs, external entities) goes
    through the catalog first. Local files are served directly. Remote URLs
    without a catalog entry are recorded in `unresolved` and answered with
    an empty document, so libxml2 never reaches the network. Failures inside
    the hook are kept in `failures` for the caller to re-raise once lxml
    returns.
    """

    def __init__(self, resolution: ResourceResolution):
        super().__init__()
        self.resolution = resolution
        self.unresolved: list[str] = []
        self.failures: list[Exception] = []

    def resolve(self, system_url, public_id, context):
        logger.debug(f"{LOG_PROCESS} resolve publicId: {public_id}, systemId: {system_url}")
        try:
            resource = self.resolution.resolve_entity(public_id, system_url)
            if resource is None:
                path = location_to_path(system_url)
                if path is None:
                    logger.error(f"No catalog entry for {system_url}; network access refused")
                    self.unresolved.append(system_url)
                    return self.resolve_empty(context)
                if not path.is_file():
                    # libxml2 reports the missing file itself
                    return None
                resource = ResolvedResource(
                    public_id=public_id,
                    system_id=system_url,
                    byte_stream=open(path, 'rb')
                )

            with resource:
                data = resource.read()
            data = rewrite_schema_references(data, resource.system_id, self.resolution)
            return self.resolve_string(data, context, base_url=resource.system_id)

        except Exception as e:
            logger.error(f"Resolver failure for {system_url}: {e}")
            self.failures.append(e)
            return self.resolve_empty(context)


__all__ = [
    'SchemaResourceRequest',
    'ResolvedResource',
    'ResourceResolution',
    'ResourceResolver',
    'LxmlResolverBridge',
    'rewrite_schema_references',
]
