"""Shared fixtures: a patched environment resolver and client factory."""

from unittest.mock import MagicMock, patch

import pytest

from .models import GitHubEnv


class FakePaginatedList:
    """Stand-in for PyGithub's PaginatedList that records how much was consumed."""

    def __init__(self, items, total=None):
        self._items = list(items)
        self.totalCount = len(self._items) if total is None else total
        self.consumed = 0

    def __iter__(self):
        for item in self._items:
            self.consumed += 1
            yield item


@pytest.fixture
def paginated():
    return FakePaginatedList


@pytest.fixture
def env():
    return GitHubEnv(token="ghp_abcdefghijklmnop", repository="acme/other")


@pytest.fixture
def resolve_env(env):
    with patch("github_mcp_tools.gateway.resolve_environment", return_value=env) as mock:
        yield mock


@pytest.fixture
def factory(resolve_env):
    with patch("github_mcp_tools.gateway.create_client", return_value=MagicMock()) as mock:
        yield mock


@pytest.fixture
def github(factory):
    return factory.return_value


@pytest.fixture
def repo(github):
    return github.get_repo.return_value
