# Path: catalog_validator/artifacts/file_enumerator.py
"""
File Enumerator

Selects the documents to validate under a base directory with
directory-scanner style include/exclude patterns:

- '**' matches any number of directories
- '*' and '?' match within one path segment
- a pattern ending in '/' means '<pattern>/**'
- patterns are matched against '/'-separated paths relative to the base

Default SCM/editor excludes always apply unless disabled.
"""

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Union

from catalog_validator.core.logger import get_logger
from catalog_validator.engine.errors import CatalogConfigurationError
from catalog_validator.constants import (
    DEFAULT_INCLUDES,
    DEFAULT_EXCLUDES,
    LOG_INPUT,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'artifacts')


def tokenize_pattern(pattern: str) -> tuple[str, ...]:
    """Split a pattern into segments, expanding a trailing '/' to '/**'."""
    pattern = pattern.strip().replace('\\', '/')
    if pattern.endswith('/'):
        pattern += '**'
    return tuple(segment for segment in pattern.split('/') if segment)


@lru_cache(maxsize=256)
def _segment_regex(segment: str) -> re.Pattern:
    parts = []
    for ch in segment:
        if ch == '*':
            parts.append('.*')
        elif ch == '?':
            parts.append('.')
        else:
            parts.append(re.escape(ch))
    return re.compile(''.join(parts) + r'\Z', re.DOTALL)


def _match_segments(pattern: tuple[str, ...], parts: tuple[str, ...]) -> bool:
    if not pattern:
        return not parts

    head = pattern[0]
    if head == '**':
        rest = pattern[1:]
        return any(_match_segments(rest, parts[i:]) for i in range(len(parts) + 1))

    if not parts or not _segment_regex(head).match(parts[0]):
        return False
    return _match_segments(pattern[1:], parts[1:])


def match_path(pattern: str, relative_path: str) -> bool:
    """
    True if a '/'-separated relative path matches the pattern.

    Example:
        match_path('**/*.xml', 'docs/api/v1.xml')    # True
        match_path('docs/*.xml', 'docs/api/v1.xml')  # False
    """
    parts = tuple(part for part in relative_path.replace('\\', '/').split('/') if part)
    return _match_segments(tokenize_pattern(pattern), parts)


def enumerate_files(
    base_dir: Union[str, Path],
    includes: Optional[Iterable[str]] = None,
    excludes: Optional[Iterable[str]] = None,
    default_excludes: bool = True
) -> list[Path]:
    """
    Absolute paths of the files under base_dir selected by the patterns.

    Args:
        base_dir: Directory to scan
        includes: Include patterns (all files when empty)
        excludes: Exclude patterns
        default_excludes: Also apply the SCM/editor default excludes

    Returns:
        Sorted absolute file paths

    Raises:
        CatalogConfigurationError: base_dir is not a directory
    """
    base = Path(base_dir).resolve()
    if not base.is_dir():
        raise CatalogConfigurationError(f"Base directory not found: {base}")

    include_patterns = list(includes or []) or list(DEFAULT_INCLUDES)
    exclude_patterns = list(excludes or [])
    if default_excludes:
        exclude_patterns.extend(DEFAULT_EXCLUDES)

    logger.info(f"{LOG_INPUT} Scanning {base} (includes={include_patterns}, excludes={list(excludes or [])})")

    selected = []
    for current, dirnames, filenames in os.walk(base):
        dirnames.sort()
        for filename in filenames:
            path = Path(current) / filename
            relative = path.relative_to(base).as_posix()
            if not any(match_path(pattern, relative) for pattern in include_patterns):
                continue
            if any(match_path(pattern, relative) for pattern in exclude_patterns):
                continue
            selected.append(path)

    selected.sort()
    logger.info(f"{LOG_OUTPUT} Total files found: {len(selected)}")
    return selected


__all__ = ['tokenize_pattern', 'match_path', 'enumerate_files']
