# Path: catalog_validator/engine/catalog/locations.py
"""
Location Helpers

Identifier normalization and location <-> filesystem conversion shared by
the catalog model and the resource resolver.

Only file: URIs and plain paths count as local. Everything else is remote
and is never opened by this package.
"""

import os
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote, urljoin, urlparse
from urllib.request import url2pathname

from catalog_validator.constants import PUBLICID_URN_PREFIX

# Characters kept as-is when normalizing system identifiers and URIs
_SYSTEM_ID_SAFE = "!#$%&'()*+,/:;=?@[]~"

_URN_ESCAPES = {
    '%2B': '+',
    '%3A': ':',
    '%2F': '/',
    '%3B': ';',
    '%27': "'",
    '%3F': '?',
    '%23': '#',
    '%25': '%',
}


def normalize_public_id(public_id: str) -> str:
    """Collapse whitespace runs and trim, as required for public identifiers."""
    return ' '.join(public_id.split())


def normalize_system_id(system_id: str) -> str:
    """Percent-encode characters that are not allowed in system identifiers or URIs."""
    return quote(system_id, safe=_SYSTEM_ID_SAFE)


def is_publicid_urn(value: Optional[str]) -> bool:
    return bool(value) and value.lower().startswith(PUBLICID_URN_PREFIX)


def unwrap_urn(value: str) -> str:
    """
    Unwrap a urn:publicid: URN into the public identifier it encodes.

    Values that are not publicid URNs are returned unchanged.
    """
    if not is_publicid_urn(value):
        return value

    body = value[len(PUBLICID_URN_PREFIX):]
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == '%' and body[i:i + 3].upper() in _URN_ESCAPES:
            out.append(_URN_ESCAPES[body[i:i + 3].upper()])
            i += 3
            continue
        if ch == '+':
            out.append(' ')
        elif ch == ':':
            out.append('//')
        elif ch == ';':
            out.append('::')
        else:
            out.append(ch)
        i += 1
    return ''.join(out)


def path_to_uri(path: Union[str, Path]) -> str:
    """Absolute file: URI for a filesystem path."""
    return Path(path).resolve().as_uri()


def absolutize(location: str, base: Optional[str]) -> str:
    """Resolve a possibly relative location against a base URI or path."""
    if not base:
        return location
    return urljoin(base, location)


def location_to_path(location: Optional[str]) -> Optional[Path]:
    """
    Filesystem path for a local location, None for remote ones.

    Args:
        location: file: URI, absolute/relative path, or any other URI

    Returns:
        Path if the location is local, otherwise None
    """
    if not location:
        return None

    parsed = urlparse(location)
    if parsed.scheme == 'file':
        if parsed.netloc and parsed.netloc != 'localhost':
            return None
        return Path(url2pathname(parsed.path))

    # Windows drive letters parse as one-letter schemes
    if not parsed.scheme or (os.name == 'nt' and len(parsed.scheme) == 1):
        return Path(location)

    return None


__all__ = [
    'normalize_public_id',
    'normalize_system_id',
    'is_publicid_urn',
    'unwrap_urn',
    'path_to_uri',
    'absolutize',
    'location_to_path',
]
