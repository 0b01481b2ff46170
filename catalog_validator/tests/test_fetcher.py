# Path: catalog_validator/tests/test_fetcher.py
"""
Artifact Fetcher Tests

The remote side is a stubbed session; no test touches the network.
"""

import asyncio

from catalog_validator.artifacts.coordinates import ArtifactCoordinate
from catalog_validator.artifacts.fetcher import ArtifactFetcher
from catalog_validator.tests.fixtures import write_zip

COORDINATE = ArtifactCoordinate('com.example.schemas', 'catalog', '1.2.0')
ARCHIVE_PATH = 'com/example/schemas/catalog/1.2.0/catalog-1.2.0.zip'


class StubContent:
    def __init__(self, body: bytes):
        self.body = body

    async def iter_chunked(self, size: int):
        for start in range(0, len(self.body), size):
            yield self.body[start:start + size]


class StubResponse:
    def __init__(self, status: int, body: bytes = b''):
        self.status = status
        self.content = StubContent(body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class StubSession:
    """Answers get() with canned responses, in order."""

    def __init__(self, *responses: StubResponse):
        self.responses = list(responses)
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        return self.responses.pop(0)


def make_fetcher(tmp_path, repositories=('https://repo.example.com/maven2/',)) -> ArtifactFetcher:
    return ArtifactFetcher(
        repositories=list(repositories),
        local_repository=tmp_path / 'repository',
        timeout=5,
        connect_timeout=1,
        retry_attempts=3,
        chunk_size=4,
        retry_min_wait=0,
        retry_max_wait=0
    )


def test_artifact_url():
    assert ArtifactFetcher.artifact_url('https://repo.example.com/maven2/', COORDINATE) == \
        f'https://repo.example.com/maven2/{ARCHIVE_PATH}'


def test_local_repository_hit(tmp_path):
    archive = write_zip(tmp_path / 'repository' / ARCHIVE_PATH, {'catalog.xml': '<catalog/>'})
    fetcher = make_fetcher(tmp_path, repositories=())

    result = fetcher.fetch_sync(COORDINATE)

    assert result.success
    assert result.file_path == archive
    assert result.attempts == 0, "nothing is downloaded for a local hit"


def test_missing_without_repositories(tmp_path):
    result = make_fetcher(tmp_path, repositories=()).fetch_sync(COORDINATE)

    assert not result.success
    assert 'no remote repositories' in result.error_message


def test_download_retries_server_errors(tmp_path):
    fetcher = make_fetcher(tmp_path)
    session = StubSession(StubResponse(503), StubResponse(200, b'zip-bytes'))

    result = asyncio.run(fetcher.fetch(COORDINATE, session=session))

    target = tmp_path / 'repository' / ARCHIVE_PATH
    assert result.success, result.error_message
    assert result.attempts == 2
    assert result.file_size == len(b'zip-bytes')
    assert target.read_bytes() == b'zip-bytes'
    assert not target.with_name(target.name + '.part').exists()
    assert session.requested == [f'https://repo.example.com/maven2/{ARCHIVE_PATH}'] * 2


def test_download_gives_up_after_retry_attempts(tmp_path):
    fetcher = make_fetcher(tmp_path)
    session = StubSession(StubResponse(500), StubResponse(502), StubResponse(503))

    result = asyncio.run(fetcher.fetch(COORDINATE, session=session))

    assert not result.success
    assert result.attempts == 3
    assert 'HTTP error' in result.error_message


def test_not_found_falls_through_to_next_repository(tmp_path):
    fetcher = make_fetcher(tmp_path, repositories=(
        'https://first.example.com/repo',
        'https://second.example.com/repo',
    ))
    session = StubSession(StubResponse(404), StubResponse(200, b'archive'))

    result = asyncio.run(fetcher.fetch(COORDINATE, session=session))

    assert result.success
    assert result.url == f'https://second.example.com/repo/{ARCHIVE_PATH}'
    assert session.requested[0] == f'https://first.example.com/repo/{ARCHIVE_PATH}'
    assert len(session.requested) == 2, "404 is not retried"


def test_not_found_everywhere(tmp_path):
    session = StubSession(StubResponse(404))

    result = asyncio.run(make_fetcher(tmp_path).fetch(COORDINATE, session=session))

    assert not result.success
    assert result.status_code == 404
    assert result.error_message.startswith('HTTP 404')
