"""E2E tests for read-only operations.

No mocks. Real GitHub API against a long-lived public repository.
Skip if GITHUB_TOKEN is not set.
"""

import os

import pytest

pytestmark = pytest.mark.skipif(
    not os.environ.get("GITHUB_TOKEN"),
    reason="GITHUB_TOKEN required for E2E tests",
)


def test_env_redacts_the_token(cli):
    result = cli("env")

    assert result.returncode == 0, f"stderr: {result.stderr}"
    assert os.environ["GITHUB_TOKEN"] not in result.stdout
    assert "Token:" in result.stdout


def test_get_repository(operation, public_repository):
    code, body = operation("get_repository", repository=public_repository)

    assert code == 0, body
    assert body["result"]["repository"]["full_name"] == public_repository


def test_list_branches_respects_limit(operation, public_repository):
    code, body = operation("list_branches", repository=public_repository, limit=1)

    assert code == 0, body
    assert len(body["result"]["branches"]) == 1
    assert body["result"]["total_count"] >= 1


def test_list_commits(operation, public_repository):
    code, body = operation("list_commits", repository=public_repository, limit=3)

    assert code == 0, body
    assert 1 <= body["result"]["count"] <= 3
    assert all(len(c["sha"]) == 40 for c in body["result"]["commits"])


def test_get_file_contents(operation, public_repository):
    code, body = operation("get_file_contents", repository=public_repository, path="README")

    assert code == 0, body
    assert "Hello World" in body["result"]["file"]["content"]


def test_directory_path_is_an_invalid_state(operation, public_repository):
    code, body = operation("list_directory_contents", repository=public_repository, path="README")

    assert code == 1
    assert body["error"]["kind"] == "invalid_state"


def test_unknown_repository_is_not_found(operation):
    code, body = operation("get_repository", repository="octocat/this-repository-does-not-exist-42")

    assert code == 1
    assert body["error"]["kind"] == "not_found"


def test_search_repositories(operation, public_repository):
    code, body = operation("search_repositories", query=f"repo:{public_repository}", limit=1)

    assert code == 0, body
    assert body["result"]["repositories"][0]["full_name"] == public_repository
