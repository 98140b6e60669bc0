import httpx
import pytest
from fastapi.testclient import TestClient

from controllers.fetcher import UpstreamFetcher
from src.app import app
from tests.upstream import RecordingSleep, ScriptedUpstream


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream():
    return ScriptedUpstream()


@pytest.fixture
def sleeps():
    return RecordingSleep()


@pytest.fixture
def fetcher(upstream, sleeps):
    return UpstreamFetcher(max_retries=3, timeout=5, transport=httpx.MockTransport(upstream), sleep=sleeps)


@pytest.fixture
def client(fetcher):
    app.state.fetcher = fetcher
    with TestClient(app) as test_client:
        yield test_client
    del app.state.fetcher
