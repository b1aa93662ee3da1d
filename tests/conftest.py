"""Shared test fixtures and sample data."""

import asyncio

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gist_proxy.config import Settings
from gist_proxy.main import app
from gist_proxy.routers import gists
from gist_proxy.services.github_client import GitHubClient

# Trimmed GitHub API response item for octocat
SAMPLE_GIST_DATA = {
    "id": "6cad326836d38bd3a7ae",
    "url": "https://api.github.com/gists/6cad326836d38bd3a7ae",
    "html_url": "https://gist.github.com/octocat/6cad326836d38bd3a7ae",
    "description": "Hello world!",
    "public": True,
    "created_at": "2014-10-01T16:19:34Z",
    "comments": 291,
    "files": {
        "hello_world.rb": {
            "filename": "hello_world.rb",
            "type": "application/x-ruby",
            "language": "Ruby",
            "raw_url": "https://gist.githubusercontent.com/octocat/6cad326836d38bd3a7ae/raw/hello_world.rb",
            "size": 175,
        }
    },
    "owner": {"login": "octocat", "id": 583231},
}


class FakeGitHub:
    """Stand-in for the GitHub API, served through httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json_body = [SAMPLE_GIST_DATA]
        self.content: bytes | None = None
        self.stream: httpx.AsyncByteStream | None = None
        self.error: Exception | None = None
        self.delay = 0.0
        # request path -> Location answered with a 301
        self.redirects: dict[str, str] = {}

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if request.url.path in self.redirects:
            return httpx.Response(301, headers={"Location": self.redirects[request.url.path]})
        if self.stream is not None:
            return httpx.Response(self.status_code, stream=self.stream)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)


@pytest.fixture
def settings():
    """Test settings."""
    return Settings(github_api_timeout=5.0, user_agent="gist-proxy-tests")


@pytest.fixture
def sample_gist_data():
    """Sample gist data for testing."""
    return SAMPLE_GIST_DATA


@pytest.fixture
def fake_github():
    """Fresh fake upstream for each test."""
    return FakeGitHub()


@pytest_asyncio.fixture
async def github_client(settings, fake_github):
    """GitHubClient wired to the fake upstream."""
    client = GitHubClient(settings, transport=httpx.MockTransport(fake_github))
    await client.start()
    yield client
    await client.close()


@pytest_asyncio.fixture
async def test_client(github_client):
    """AsyncClient for the app with the GitHub client pointed at the fake upstream."""
    previous = app.dependency_overrides.get(gists.get_github_client)
    app.dependency_overrides[gists.get_github_client] = lambda: github_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    if previous is None:
        del app.dependency_overrides[gists.get_github_client]
    else:
        app.dependency_overrides[gists.get_github_client] = previous
