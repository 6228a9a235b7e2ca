import pytest
from httpx import ASGITransport, AsyncClient

from blobtree import api
from blobtree.config import get_settings
from blobtree.connections import CONNECTIONS, _close_http, _start_http
from blobtree.objectstorage.s3bucket import create_or_get_bucket
from tests.tools import FakeS3Client

STORE_URL = "https://store.example.com"

TEST_FILES = {
    "docs/2023/report.pdf": b"%PDF-1.4 report",
    "docs/manual.pdf": b"%PDF-1.4 manual",
    "images/logo.png": b"\x89PNG logo",
    "readme.txt": b"hello world",
}


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def my_setup():
    settings = get_settings()
    settings.public_storage_url = STORE_URL
    settings.storage_containers = ["documents", "archive"]
    settings.reindex_url = None
    settings.reindex_api_key = None
    yield


@pytest.fixture(scope="function")
async def s3_client():
    """Replace the S3 client (and start a http client) for the duration of a test"""
    fake = FakeS3Client({"documents": dict(TEST_FILES), "archive": {}})
    create_or_get_bucket.cache_clear()
    CONNECTIONS.s3_client = fake  # type: ignore
    await _start_http()
    yield fake
    CONNECTIONS.s3_client = None
    await _close_http()
    create_or_get_bucket.cache_clear()


@pytest.fixture(scope="function")
async def client(s3_client):
    async with AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test", follow_redirects=False) as client:
        yield client
