# Path: catalog_validator/artifacts/result.py
"""
Artifact Result Objects

Structured results for schema artifact operations.

- DownloadResult: single artifact download
- ExtractionResult: single archive extraction
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


@dataclass
class DownloadResult:
    """
    Result of a single artifact download.

    Attributes:
        success: Whether download succeeded
        file_path: Path where the artifact was written
        file_size: Size of downloaded file in bytes
        url: Source URL
        duration: Download duration in seconds
        error_message: Error message if failed
        status_code: HTTP status code
        attempts: Number of attempts made
    """
    success: bool
    file_path: Optional[Path] = None
    file_size: int = 0
    url: str = ''
    duration: float = 0.0
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    attempts: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            'success': self.success,
            'file_path': str(self.file_path) if self.file_path else None,
            'file_size': self.file_size,
            'url': self.url,
            'duration': self.duration,
            'error_message': self.error_message,
            'status_code': self.status_code,
            'attempts': self.attempts,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class ExtractionResult:
    """
    Result of archive extraction.

    Attributes:
        success: Whether extraction succeeded
        extract_directory: Directory the archive was extracted into
        files_extracted: Number of archive members extracted
        archive_path: Path to archive file
        duration: Extraction duration in seconds
        error_message: Error message if failed
        members: Archive member names
    """
    success: bool
    extract_directory: Optional[Path] = None
    files_extracted: int = 0
    archive_path: Optional[Path] = None
    duration: float = 0.0
    error_message: Optional[str] = None
    members: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            'success': self.success,
            'extract_directory': str(self.extract_directory) if self.extract_directory else None,
            'files_extracted': self.files_extracted,
            'archive_path': str(self.archive_path) if self.archive_path else None,
            'duration': self.duration,
            'error_message': self.error_message,
            'timestamp': self.timestamp.isoformat(),
        }


__all__ = ['DownloadResult', 'ExtractionResult']
