# Path: catalog_validator/engine/catalog/model.py
"""
Catalog Model

Parsed representation of one or more OASIS XML Catalog files.

Loading is cumulative and order-preserving: every parsed catalog document
keeps its own ordered entries, and lookups consult the documents in load
order, so conflicting entries stay visible instead of overwriting each other.

Lookup order inside one catalog document:
1. exact match (system / public / uri)
2. longest rewrite prefix
3. longest suffix
4. delegation (delegated catalogs only, no fall-through)
5. the document's nextCatalog chain

Once frozen, the model is read-only.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from lxml import etree

from catalog_validator.core.logger import get_logger
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.engine.catalog.locations import (
    absolutize,
    is_publicid_urn,
    location_to_path,
    normalize_public_id,
    normalize_system_id,
    path_to_uri,
    unwrap_urn,
)
from catalog_validator.constants import (
    OASIS_CATALOG_NS,
    OASIS_CATALOG_ROOT,
    ENTRY_ATTRIBUTES,
    ENTRY_PUBLIC,
    ENTRY_SYSTEM,
    ENTRY_REWRITE_SYSTEM,
    ENTRY_SYSTEM_SUFFIX,
    ENTRY_DELEGATE_PUBLIC,
    ENTRY_DELEGATE_SYSTEM,
    ENTRY_URI,
    ENTRY_REWRITE_URI,
    ENTRY_URI_SUFFIX,
    ENTRY_DELEGATE_URI,
    ENTRY_NEXT_CATALOG,
    ENTRY_GROUP,
    PREFER_PUBLIC,
    PREFER_SYSTEM,
    XML_BASE_ATTR,
    LOG_INPUT,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'engine')

_PUBLIC_MATCH_ENTRIES = frozenset({ENTRY_PUBLIC, ENTRY_DELEGATE_PUBLIC})
_DELEGATE_ENTRIES = frozenset({ENTRY_DELEGATE_PUBLIC, ENTRY_DELEGATE_SYSTEM, ENTRY_DELEGATE_URI})

# Returned by a lookup step when delegation matched but found nothing;
# delegation ends the search.
_DELEGATION_EXHAUSTED = object()

LookupStep = Callable[['CatalogDocument'], object]


@dataclass(frozen=True)
class CatalogEntry:
    """
    One mapping entry of a catalog document.

    Attributes:
        entry_type: OASIS element name ('public', 'system', 'uri', ...)
        match: Normalized identifier, prefix or suffix the entry matches
        target: Absolute resolved location, rewrite prefix or delegate catalog
        prefer_public: Effective 'prefer' setting of the entry
        source: URI of the catalog document that declared the entry
    """
    entry_type: str
    match: str
    target: str
    prefer_public: bool = True
    source: Optional[str] = None

    @property
    def public_id(self) -> Optional[str]:
        return self.match if self.entry_type == ENTRY_PUBLIC else None

    @property
    def system_id(self) -> Optional[str]:
        return self.match if self.entry_type in (ENTRY_SYSTEM, ENTRY_URI) else None

    @property
    def resolved_location(self) -> str:
        return self.target


@dataclass
class CatalogDocument:
    """Entries of one parsed catalog file, plus the catalogs it chains to."""
    location: str
    entries: list[CatalogEntry] = field(default_factory=list)
    next_catalogs: list['CatalogDocument'] = field(default_factory=list)
    delegates: dict[str, 'CatalogDocument'] = field(default_factory=dict)

    def entries_of(self, entry_type: str) -> list[CatalogEntry]:
        return [entry for entry in self.entries if entry.entry_type == entry_type]


class CatalogModel:
    """
    Resolution table built from one or more OASIS catalog files.

    Example:
        model = CatalogModel(prefer_public=True)
        model.parse_catalog(Path('schemas/catalog.xml'))
        model.freeze()
        model.resolve_uri('urn:example:v1')
    """

    def __init__(self, prefer_public: bool = True, ignore_missing_properties: bool = True):
        """
        Initialize an empty catalog model.

        Args:
            prefer_public: Default 'prefer' policy for entries without one
            ignore_missing_properties: Skip entries lacking required attributes
                instead of failing
        """
        self.prefer_public = prefer_public
        self.ignore_missing_properties = ignore_missing_properties
        self._documents: list[CatalogDocument] = []
        self._loaded: dict[str, CatalogDocument] = {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def parse_catalog(self, path: Union[str, Path]) -> CatalogDocument:
        """
        Parse a catalog file and append its entries to the model.

        Args:
            path: Catalog file path

        Returns:
            The parsed catalog document

        Raises:
            CatalogConfigurationError: Unreadable, malformed or non-catalog file
            RuntimeError: The model is frozen
        """
        if self._frozen:
            raise RuntimeError("Catalog model is frozen; no further catalogs can be loaded")

        logger.info(f"{LOG_INPUT} Adding catalog {path}")
        document = self._load_document(path_to_uri(path), required=True)
        self._documents.append(document)
        return document

    def freeze(self) -> 'CatalogModel':
        """Mark the model read-only for the rest of the run."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def documents(self) -> tuple[CatalogDocument, ...]:
        return tuple(self._documents)

    @property
    def catalog_locations(self) -> tuple[str, ...]:
        """URIs of every loaded catalog, including chained and delegated ones."""
        return tuple(self._loaded)

    @property
    def entries(self) -> tuple[CatalogEntry, ...]:
        """All entries in lookup order (documents, then their nextCatalog chains)."""
        collected: list[CatalogEntry] = []
        seen: set[int] = set()

        def walk(document: CatalogDocument) -> None:
            if id(document) in seen:
                return
            seen.add(id(document))
            collected.extend(document.entries)
            for next_document in document.next_catalogs:
                walk(next_document)

        for document in self._documents:
            walk(document)
        return tuple(collected)

    def __len__(self) -> int:
        return len(self.entries)

    def _load_document(self, location: str, required: bool) -> Optional[CatalogDocument]:
        if location in self._loaded:
            return self._loaded[location]

        path = location_to_path(location)
        if path is None:
            if required:
                raise CatalogConfigurationError(f"Catalog is not a local file: {location}")
            logger.warning(f"Skipping non-local catalog {location}")
            return None

        parser = etree.XMLParser(
            no_network=True,
            load_dtd=False,
            resolve_entities=False
        )
        try:
            tree = etree.parse(str(path), parser)
        except etree.XMLSyntaxError as e:
            raise CatalogConfigurationError(f"Malformed catalog {path}: {e}") from e
        except OSError as e:
            if required:
                raise CatalogConfigurationError(f"Cannot read catalog {path}: {e}") from e
            logger.warning(f"Skipping missing catalog {path}: {e}")
            return None

        root = tree.getroot()
        if root.tag != OASIS_CATALOG_ROOT:
            raise CatalogConfigurationError(
                f"Not an OASIS catalog: {path} (root element {root.tag})"
            )

        document = CatalogDocument(location=location)
        # Registered before walking so that catalog cycles terminate
        self._loaded[location] = document

        base = self._base_of(root, location)
        prefer = self._prefer_of(root, self.prefer_public)
        self._collect_entries(root, document, base, prefer)

        logger.debug(f"{LOG_PROCESS} Catalog {path}: {len(document.entries)} entries")
        return document

    def _collect_entries(
        self,
        element: etree._Element,
        document: CatalogDocument,
        base: str,
        prefer_public: bool
    ) -> None:
        for child in element:
            if not isinstance(child.tag, str):
                continue
            qname = etree.QName(child)
            if qname.namespace != OASIS_CATALOG_NS:
                continue

            name = qname.localname
            child_base = self._base_of(child, base)

            if name == ENTRY_GROUP:
                self._collect_entries(
                    child, document, child_base, self._prefer_of(child, prefer_public)
                )
                continue

            if name == ENTRY_NEXT_CATALOG:
                target = child.get('catalog')
                if not target:
                    self._missing_attribute(document, name, 'catalog', child)
                    continue
                next_document = self._load_document(absolutize(target, child_base), required=False)
                if next_document is not None and next_document is not document:
                    document.next_catalogs.append(next_document)
                continue

            attributes = ENTRY_ATTRIBUTES.get(name)
            if attributes is None:
                logger.debug(f"Ignoring unsupported catalog element '{name}' in {document.location}")
                continue

            match_attr, target_attr = attributes
            match = child.get(match_attr)
            target = child.get(target_attr)
            if not match:
                self._missing_attribute(document, name, match_attr, child)
                continue
            if target is None:
                self._missing_attribute(document, name, target_attr, child)
                continue

            entry = CatalogEntry(
                entry_type=name,
                match=self._normalize_match(name, match),
                target=absolutize(target, child_base),
                prefer_public=prefer_public,
                source=document.location
            )
            document.entries.append(entry)

            if name in _DELEGATE_ENTRIES and entry.target not in document.delegates:
                delegate = self._load_document(entry.target, required=False)
                if delegate is not None:
                    document.delegates[entry.target] = delegate

    def _missing_attribute(
        self,
        document: CatalogDocument,
        entry_type: str,
        attribute: str,
        element: etree._Element
    ) -> None:
        message = (
            f"Catalog entry '{entry_type}' without '{attribute}' "
            f"in {document.location} line {element.sourceline}"
        )
        if not self.ignore_missing_properties:
            raise CatalogConfigurationError(message)
        logger.warning(f"{message}; entry ignored")

    @staticmethod
    def _base_of(element: etree._Element, inherited: str) -> str:
        xml_base = element.get(XML_BASE_ATTR)
        return absolutize(xml_base, inherited) if xml_base else inherited

    @staticmethod
    def _prefer_of(element: etree._Element, inherited: bool) -> bool:
        prefer = element.get('prefer')
        if prefer == PREFER_PUBLIC:
            return True
        if prefer == PREFER_SYSTEM:
            return False
        return inherited

    @staticmethod
    def _normalize_match(entry_type: str, match: str) -> str:
        if entry_type in _PUBLIC_MATCH_ENTRIES:
            return normalize_public_id(unwrap_urn(match))
        return normalize_system_id(match)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_system(self, system_id: str) -> Optional[str]:
        """
        Resolve a system identifier.

        Args:
            system_id: System identifier as written in the referencing document

        Returns:
            Resolved location, or None if no catalog maps it
        """
        if is_publicid_urn(system_id):
            return self.resolve_public(unwrap_urn(system_id))
        return self._resolve(self._system_step(normalize_system_id(system_id)))

    def resolve_public(self, public_id: str, system_id: Optional[str] = None) -> Optional[str]:
        """
        Resolve an external identifier by public id, honouring 'prefer'.

        When a system identifier is supplied, system entries are consulted
        first and public entries only apply where the entry prefers public.
        """
        public_id = normalize_public_id(unwrap_urn(public_id))
        if system_id is not None:
            if is_publicid_urn(system_id):
                system_id = None
            else:
                system_id = normalize_system_id(system_id)
        return self._resolve(self._external_step(public_id, system_id))

    def resolve_uri(self, uri: str) -> Optional[str]:
        """Resolve a URI reference (namespace names, schema locations)."""
        if is_publicid_urn(uri):
            return self.resolve_public(unwrap_urn(uri))
        return self._resolve(self._uri_step(normalize_system_id(uri)))

    def resolve_entity(self, public_id: Optional[str], system_id: Optional[str]) -> Optional[str]:
        """
        Combined public/system lookup used for external entity resolution.

        Order: system entries, public entries (prefer-gated when a system id
        is present), then uri entries matching the system id.
        """
        if is_publicid_urn(system_id):
            unwrapped = unwrap_urn(system_id)
            if public_id is None or normalize_public_id(unwrap_urn(public_id)) == unwrapped:
                public_id = unwrapped
            system_id = None

        resolved = None
        if public_id:
            resolved = self.resolve_public(public_id, system_id)
        elif system_id:
            resolved = self.resolve_system(system_id)

        if resolved is None and system_id:
            resolved = self.resolve_uri(system_id)
        return resolved

    def _resolve(self, step: LookupStep) -> Optional[str]:
        visited: set[int] = set()
        for document in self._documents:
            result = self._search(document, step, visited)
            if result is _DELEGATION_EXHAUSTED:
                return None
            if result is not None:
                return result
        return None

    def _search(self, document: CatalogDocument, step: LookupStep, visited: set[int]) -> object:
        if id(document) in visited:
            return None
        visited.add(id(document))

        result = step(document)
        if result is not None:
            return result

        for next_document in document.next_catalogs:
            result = self._search(next_document, step, visited)
            if result is not None:
                return result
        return None

    def _delegate(
        self,
        document: CatalogDocument,
        entries: list[CatalogEntry],
        identifier: str,
        step: LookupStep
    ) -> object:
        matching = [entry for entry in entries if identifier.startswith(entry.match)]
        if not matching:
            return None

        matching.sort(key=lambda entry: len(entry.match), reverse=True)
        for entry in matching:
            delegate = document.delegates.get(entry.target)
            if delegate is None:
                continue
            result = self._search(delegate, step, set())
            if result is not None and result is not _DELEGATION_EXHAUSTED:
                return result
        return _DELEGATION_EXHAUSTED

    @staticmethod
    def _longest(entries: list[CatalogEntry], predicate: Callable[[CatalogEntry], bool]):
        best = None
        for entry in entries:
            if predicate(entry) and (best is None or len(entry.match) > len(best.match)):
                best = entry
        return best

    def _system_step(self, system_id: str) -> LookupStep:
        def step(document: CatalogDocument) -> object:
            for entry in document.entries_of(ENTRY_SYSTEM):
                if entry.match == system_id:
                    return entry.target

            rewrite = self._longest(
                document.entries_of(ENTRY_REWRITE_SYSTEM),
                lambda entry: system_id.startswith(entry.match)
            )
            if rewrite is not None:
                return rewrite.target + system_id[len(rewrite.match):]

            suffix = self._longest(
                document.entries_of(ENTRY_SYSTEM_SUFFIX),
                lambda entry: system_id.endswith(entry.match)
            )
            if suffix is not None:
                return suffix.target

            return self._delegate(
                document, document.entries_of(ENTRY_DELEGATE_SYSTEM), system_id, step
            )

        return step

    def _external_step(self, public_id: str, system_id: Optional[str]) -> LookupStep:
        system_step = self._system_step(system_id) if system_id is not None else None

        def applies(entry: CatalogEntry) -> bool:
            return system_id is None or entry.prefer_public

        def step(document: CatalogDocument) -> object:
            if system_step is not None:
                result = system_step(document)
                if result is not None:
                    return result

            for entry in document.entries_of(ENTRY_PUBLIC):
                if entry.match == public_id and applies(entry):
                    return entry.target

            delegating = [
                entry for entry in document.entries_of(ENTRY_DELEGATE_PUBLIC)
                if applies(entry)
            ]
            return self._delegate(
                document, delegating, public_id, self._external_step(public_id, None)
            )

        return step

    def _uri_step(self, uri: str) -> LookupStep:
        def step(document: CatalogDocument) -> object:
            for entry in document.entries_of(ENTRY_URI):
                if entry.match == uri:
                    return entry.target

            rewrite = self._longest(
                document.entries_of(ENTRY_REWRITE_URI),
                lambda entry: uri.startswith(entry.match)
            )
            if rewrite is not None:
                return rewrite.target + uri[len(rewrite.match):]

            suffix = self._longest(
                document.entries_of(ENTRY_URI_SUFFIX),
                lambda entry: uri.endswith(entry.match)
            )
            if suffix is not None:
                return suffix.target

            return self._delegate(
                document, document.entries_of(ENTRY_DELEGATE_URI), uri, step
            )

        return step


__all__ = ['CatalogEntry', 'CatalogDocument', 'CatalogModel']
