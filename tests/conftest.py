
import httpx
import pytest
import pytest_asyncio

from obsidian_github_mcp.config import GitHubConfig, SearchConfig, HistoryConfig, ServerConfig
from obsidian_github_mcp.github import GitHubClient


@pytest.fixture
def github_config():
    return GitHubConfig(token="test-token", owner="test-owner", repo="test-repo")


@pytest.fixture
def server_config(github_config):
    return ServerConfig(github=github_config, search=SearchConfig(), history=HistoryConfig())


class FakeGitHub:
    """Routes requests to canned JSON responses and records what was asked."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path, body=None, status=200, headers=None, text=None):
        self.routes[path] = (status, body, headers or {}, text)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"message": "Not Found"})
        status, body, headers, text = self.routes[request.url.path]
        if callable(body):
            body = body(request)
        if text is not None:
            return httpx.Response(status, text=text, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    def params(self, path):
        return [dict(r.url.params) for r in self.requests if r.url.path == path]


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest_asyncio.fixture
async def client(github_config, fake_github):
    client = GitHubClient(github_config, transport=httpx.MockTransport(fake_github))
    yield client
    await client.aclose()
