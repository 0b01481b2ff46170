# Path: catalog_validator/artifacts/extractor.py
"""
Schema Archive Extractor

Unpacks schema artifact ZIP files into the unpack directory.

Safety checks before anything is written:
- no member may escape the target directory
- member paths are limited in depth
- total uncompressed size is limited
"""

import time
import zipfile
from pathlib import Path
from typing import Optional

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.core.logger import get_logger
from catalog_validator.artifacts.result import ExtractionResult
from catalog_validator.constants import (
    DEFAULT_MAX_ARCHIVE_SIZE,
    MAX_EXTRACTION_DEPTH,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'artifacts')


class ZipExtractor:
    """
    ZIP extractor for schema artifacts.

    Example:
        extractor = ZipExtractor(max_archive_size=50 * 1024 * 1024)
        result = extractor.extract(
            archive_path=Path('~/.m2/repository/.../catalog-1.2.0.zip'),
            target_dir=Path('build/schemas/catalog-1.2.0')
        )
    """

    def __init__(
        self,
        max_archive_size: Optional[int] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize extractor.

        Args:
            max_archive_size: Maximum total uncompressed size (bytes)
            config: Configuration source when max_archive_size is not given
        """
        if max_archive_size is None:
            config = config if config else ConfigLoader()
            max_archive_size = config.get('max_archive_size', DEFAULT_MAX_ARCHIVE_SIZE)
        self.max_archive_size = max_archive_size

    def extract(self, archive_path: Path, target_dir: Path) -> ExtractionResult:
        """
        Extract a ZIP archive.

        The archive itself is left in place; it usually lives in the local
        artifact repository.

        Args:
            archive_path: Path to ZIP file
            target_dir: Target directory (created if missing)

        Returns:
            ExtractionResult
        """
        logger.info(f"{LOG_INPUT} Extracting ZIP: {archive_path.name}")

        start_time = time.time()
        result = ExtractionResult(
            success=False,
            archive_path=archive_path,
            extract_directory=target_dir
        )

        if not archive_path.is_file():
            result.error_message = f"ZIP file not found: {archive_path}"
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result

        try:
            with zipfile.ZipFile(archive_path, 'r') as zf:
                unsafe = self._find_unsafe_member(zf, target_dir)
                if unsafe is not None:
                    result.error_message = f"ZIP contains unsafe path: {unsafe}"
                    logger.error(f"{LOG_OUTPUT} {result.error_message}")
                    return result

                total_size = sum(info.file_size for info in zf.infolist())
                if total_size > self.max_archive_size:
                    result.error_message = (
                        f"ZIP too large: {total_size} bytes (limit {self.max_archive_size})"
                    )
                    logger.error(f"{LOG_OUTPUT} {result.error_message}")
                    return result

                target_dir.mkdir(parents=True, exist_ok=True)
                logger.info(f"{LOG_PROCESS} Extracting {len(zf.namelist())} members...")
                zf.extractall(target_dir)

                result.members = zf.namelist()
                result.files_extracted = len(result.members)

        except zipfile.BadZipFile as e:
            result.error_message = f"Invalid ZIP file: {e}"
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result

        except OSError as e:
            result.error_message = f"ZIP extraction failed: {e}"
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} {result.error_message}")
            return result

        result.success = True
        result.duration = time.time() - start_time
        logger.info(
            f"{LOG_OUTPUT} ZIP extraction complete: {result.files_extracted} members "
            f"in {result.duration:.2f}s"
        )
        return result

    def _find_unsafe_member(self, zip_file: zipfile.ZipFile, target_dir: Path) -> Optional[str]:
        """First member that escapes the target directory or is nested too deep."""
        root = target_dir.resolve()
        for member in zip_file.namelist():
            depth = len(Path(member).parts)
            if depth > MAX_EXTRACTION_DEPTH:
                logger.error(f"Path too deep: {member} (depth={depth})")
                return member
            try:
                (root / member).resolve().relative_to(root)
            except ValueError:
                logger.error(f"Unsafe path detected: {member}")
                return member
        return None


__all__ = ['ZipExtractor']
