# Path: catalog_validator/artifacts/fetcher.py
"""
Artifact Fetcher

Locates schema archives in the local artifact repository and downloads
missing ones from the configured remote repositories.

Archive layout (local and remote):
    <repo>/<group path>/<artifact>/<version>/<artifact>-<version>.<ext>

Downloads stream to a '.part' file with aiofiles and are renamed into place
once complete. Client errors, timeouts and retryable HTTP statuses are
retried with exponential backoff.
"""

import asyncio
import time
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.core.logger import get_logger
from catalog_validator.artifacts.coordinates import ArtifactCoordinate
from catalog_validator.artifacts.result import DownloadResult
from catalog_validator.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_MAX_WAIT,
    DEFAULT_RETRY_MIN_WAIT,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    HTTP_OK,
    RETRYABLE_STATUS_CODES,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'artifacts')


class HTTPStatusError(Exception):
    """Non-retryable HTTP status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP {status} for {url}")
        self.status = status


class ArtifactFetcher:
    """
    Local repository lookup plus remote download.

    Example:
        fetcher = ArtifactFetcher(
            repositories=['https://repo.example.com/maven2'],
            local_repository=Path('~/.m2/repository').expanduser()
        )
        result = fetcher.fetch_sync(coordinate)
        if result.success:
            archive = result.file_path
    """

    def __init__(
        self,
        repositories: Optional[list[str]] = None,
        local_repository: Optional[Path] = None,
        timeout: Optional[int] = None,
        connect_timeout: Optional[int] = None,
        retry_attempts: Optional[int] = None,
        chunk_size: Optional[int] = None,
        retry_min_wait: float = DEFAULT_RETRY_MIN_WAIT,
        retry_max_wait: float = DEFAULT_RETRY_MAX_WAIT,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize fetcher.

        Args:
            repositories: Remote repository base URLs, tried in order
            local_repository: Local repository root
            timeout: Total request timeout (seconds)
            connect_timeout: Connect timeout (seconds)
            retry_attempts: Attempts per repository
            chunk_size: Streaming chunk size (bytes)
            retry_min_wait: Minimum backoff (seconds)
            retry_max_wait: Maximum backoff (seconds)
            config: Configuration source for options not passed explicitly
        """
        self.config = config if config else ConfigLoader()

        self.repositories = repositories if repositories is not None else \
            self.config.get('remote_repositories', [])
        self.local_repository = Path(
            local_repository if local_repository is not None else
            self.config.get('local_repository', Path.home() / '.m2' / 'repository')
        )
        self.timeout = timeout if timeout is not None else \
            self.config.get('request_timeout', DEFAULT_TIMEOUT)
        self.connect_timeout = connect_timeout if connect_timeout is not None else \
            self.config.get('connect_timeout', DEFAULT_CONNECT_TIMEOUT)
        self.retry_attempts = retry_attempts if retry_attempts is not None else \
            self.config.get('retry_attempts', DEFAULT_RETRY_ATTEMPTS)
        self.chunk_size = chunk_size if chunk_size is not None else \
            self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait

    def local_path(self, coordinate: ArtifactCoordinate) -> Path:
        return self.local_repository / coordinate.repository_path

    @staticmethod
    def artifact_url(repository: str, coordinate: ArtifactCoordinate) -> str:
        return f"{repository.rstrip('/')}/{coordinate.repository_path}"

    def fetch_sync(self, coordinate: ArtifactCoordinate) -> DownloadResult:
        """Blocking wrapper around fetch()."""
        return asyncio.run(self.fetch(coordinate))

    async def fetch(
        self,
        coordinate: ArtifactCoordinate,
        session: Optional[aiohttp.ClientSession] = None
    ) -> DownloadResult:
        """
        Local archive for a coordinate, downloading it first if needed.

        Args:
            coordinate: Artifact to fetch
            session: Existing session to use instead of a new one

        Returns:
            DownloadResult; file_path is the local archive on success
        """
        target = self.local_path(coordinate)
        logger.info(f"{LOG_INPUT} Resolving artifact {coordinate}")

        if target.is_file():
            logger.info(f"{LOG_OUTPUT} Found in local repository: {target}")
            return DownloadResult(
                success=True,
                file_path=target,
                file_size=target.stat().st_size,
                url=target.as_uri()
            )

        if not self.repositories:
            message = f"{coordinate} not in local repository {self.local_repository} " \
                      f"and no remote repositories configured"
            logger.error(f"{LOG_OUTPUT} {message}")
            return DownloadResult(success=False, file_path=target, error_message=message)

        if session is not None:
            return await self._fetch_from_repositories(session, coordinate, target)

        async with aiohttp.ClientSession(headers={'User-Agent': DEFAULT_USER_AGENT}) as own_session:
            return await self._fetch_from_repositories(own_session, coordinate, target)

    async def _fetch_from_repositories(
        self,
        session: aiohttp.ClientSession,
        coordinate: ArtifactCoordinate,
        target: Path
    ) -> DownloadResult:
        result = None
        for repository in self.repositories:
            result = await self.download(session, self.artifact_url(repository, coordinate), target)
            if result.success:
                return result
        return result

    async def download(
        self,
        session: aiohttp.ClientSession,
        url: str,
        target: Path
    ) -> DownloadResult:
        """
        Download one URL to target with retry.

        Returns:
            DownloadResult (never raises for HTTP or network failures)
        """
        logger.info(f"{LOG_INPUT} Downloading: {url}")

        start_time = time.time()
        result = DownloadResult(success=False, url=url, file_path=target)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=1, min=self.retry_min_wait, max=self.retry_max_wait),
            retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
            reraise=True
        )

        try:
            async for attempt in retrying:
                with attempt:
                    result.attempts += 1
                    result.file_size = await self._stream(session, url, target, result)

        except HTTPStatusError as e:
            result.error_message = str(e)
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Download failed: {e}")
            return result

        except asyncio.TimeoutError as e:
            result.error_message = f"Timeout: {e}"
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Download timeout: {url}")
            return result

        except aiohttp.ClientError as e:
            result.error_message = f"HTTP error: {e}"
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Download failed: {e}")
            return result

        result.success = True
        result.duration = time.time() - start_time
        logger.info(
            f"{LOG_OUTPUT} Download complete: {result.file_size} bytes "
            f"in {result.duration:.2f}s"
        )
        return result

    async def _stream(
        self,
        session: aiohttp.ClientSession,
        url: str,
        target: Path,
        result: DownloadResult
    ) -> int:
        async with session.get(
            url,
            timeout=aiohttp.ClientTimeout(total=self.timeout, connect=self.connect_timeout)
        ) as response:
            result.status_code = response.status

            if response.status in RETRYABLE_STATUS_CODES:
                logger.warning(f"Server error {response.status} - will retry")
                raise aiohttp.ClientError(f"Server error: {response.status}")

            if response.status != HTTP_OK:
                raise HTTPStatusError(response.status, url)

            target.parent.mkdir(parents=True, exist_ok=True)
            partial = target.with_name(target.name + '.part')

            written = 0
            async with aiofiles.open(partial, 'wb') as f:
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    if chunk:
                        await f.write(chunk)
                        written += len(chunk)

            partial.replace(target)
            logger.debug(f"{LOG_PROCESS} Wrote {written} bytes to {target}")
            return written


__all__ = ['ArtifactFetcher', 'HTTPStatusError']
