"""Unit tests for file content operations."""

import base64
from unittest.mock import MagicMock, PropertyMock

import pytest
import requests
from github import GithubException

from ..envelope import ErrorKind
from ..models import GitHubEnv
from .contents import (
    CONTENT_UNAVAILABLE,
    create_or_update_file,
    decode_content,
    get_file_contents,
    list_directory_contents,
    search_code,
    snippet,
)


def _file(path, text="print('hi')\n", type="file"):
    content = MagicMock()
    content.name = path.rsplit("/", 1)[-1]
    content.path = path
    content.sha = "f" * 40
    content.size = len(text)
    content.type = type
    content.encoding = "base64"
    content.content = base64.b64encode(text.encode()).decode()
    content.html_url = f"https://github.com/acme/other/blob/main/{path}"
    content.download_url = f"https://raw.githubusercontent.com/acme/other/main/{path}"
    return content


def describe_decode_content():
    def it_decodes_base64():
        assert decode_content(_file("a.txt", "hello")) == "hello"

    def it_returns_nothing_for_large_files():
        content = _file("big.bin")
        content.encoding = "none"
        content.content = ""

        assert decode_content(content) == ""


def describe_snippet():
    def it_leaves_short_text_alone():
        assert snippet("short") == "short"

    def it_truncates_long_text():
        assert snippet("x" * 250) == "x" * 200 + "..."


def describe_get_file_contents():
    def it_requires_a_path(factory: MagicMock):
        assert get_file_contents().kind == ErrorKind.INVALID_ARGUMENT
        factory.assert_not_called()

    def it_returns_the_decoded_file(repo: MagicMock):
        repo.get_contents.return_value = _file("src/app.py")

        data = get_file_contents(path="src/app.py", ref="dev").payload["file"]

        repo.get_contents.assert_called_once_with("src/app.py", ref="dev")
        assert data["content"] == "print('hi')\n"
        assert data["type"] == "file"
        assert data["name"] == "app.py"

    def it_refuses_directories(repo: MagicMock):
        repo.get_contents.return_value = [_file("src/a.py"), _file("src/b.py")]

        result = get_file_contents(path="src")

        assert result.kind == ErrorKind.INVALID_STATE
        assert "directory" in result.message


def describe_list_directory_contents():
    def it_lists_the_root_by_default(repo: MagicMock):
        repo.get_contents.return_value = [_file("src", type="dir"), _file("README.md")]

        result = list_directory_contents(path="/")

        repo.get_contents.assert_called_once_with("")
        entries = result.payload["contents"]
        assert [e["type"] for e in entries] == ["directory", "file"]
        assert "download_url" not in entries[0]
        assert entries[1]["download_url"].endswith("README.md")

    def it_refuses_files(repo: MagicMock):
        repo.get_contents.return_value = _file("README.md")

        result = list_directory_contents(path="README.md")

        assert result.kind == ErrorKind.INVALID_STATE
        assert "file" in result.message


def _write_response(path):
    commit = MagicMock(sha="c" * 40, html_url="https://github.com/acme/other/commit/ccc")
    return {"commit": commit, "content": _file(path)}


def describe_create_or_update_file():
    def it_requires_a_message(factory: MagicMock):
        result = create_or_update_file(path="a.txt", content="x")

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert result.message == "Commit message is required"
        factory.assert_not_called()

    def it_requires_content(factory: MagicMock):
        result = create_or_update_file(path="a.txt", message="Add")

        assert result.message == "File content is required"
        factory.assert_not_called()

    def it_accepts_empty_content(repo: MagicMock):
        repo.default_branch = "main"
        repo.create_file.return_value = _write_response(".keep")

        result = create_or_update_file(path=".keep", content="", message="Keep dir")

        assert result.ok
        repo.create_file.assert_called_once_with(".keep", "Keep dir", "", branch="main")

    def it_creates_without_a_sha(repo: MagicMock):
        repo.create_file.return_value = _write_response("docs/new.md")

        result = create_or_update_file(path="docs/new.md", content="# New", message="Add docs", branch="dev")

        repo.create_file.assert_called_once_with("docs/new.md", "Add docs", "# New", branch="dev")
        repo.update_file.assert_not_called()
        assert result.payload["operation"] == "create"
        assert result.payload["file"]["commit"]["message"] == "Add docs"

    def it_updates_with_a_sha(repo: MagicMock):
        repo.default_branch = "main"
        repo.update_file.return_value = _write_response("README.md")

        result = create_or_update_file(path="README.md", content="v2", message="Update", sha="e" * 40)

        repo.update_file.assert_called_once_with("README.md", "Update", "v2", "e" * 40, branch="main")
        assert result.payload["operation"] == "update"

    def it_reports_a_stale_sha_as_a_transport_failure(repo: MagicMock):
        repo.update_file.side_effect = GithubException(409, {"message": "README.md does not match"}, {})

        result = create_or_update_file(path="README.md", content="v2", message="Update", sha="0" * 40)

        assert result.kind == ErrorKind.TRANSPORT
        assert result.message == "Failed to write file: README.md does not match (HTTP 409)"


def _hit(path, text):
    hit = _file(path, text)
    hit.repository.full_name = "acme/widgets"
    return hit


def describe_search_code():
    def it_adds_repository_and_extension_qualifiers(github: MagicMock, paginated):
        github.search_code.return_value = paginated([])

        result = search_code(query="parse", repository="acme/widgets", extension=".py")

        github.search_code.assert_called_once_with("parse repo:acme/widgets extension:py")
        assert result.payload["query"] == "parse repo:acme/widgets extension:py"

    def it_does_not_need_a_default_repository(github: MagicMock, resolve_env: MagicMock, paginated):
        resolve_env.return_value = GitHubEnv(token="t")
        github.search_code.return_value = paginated([])

        assert search_code(query="parse").ok

    def it_truncates_snippets(github: MagicMock, paginated):
        github.search_code.return_value = paginated([_hit("a.py", "y" * 300)], total=7)

        result = search_code(query="y")

        item = result.payload["items"][0]
        assert item["text_matches"] == "y" * 200 + "..."
        assert item["repository"] == "acme/widgets"
        assert result.payload["count"] == 1
        assert result.payload["total_count"] == 7

    def it_marks_unreadable_content(github: MagicMock, paginated):
        hit = _hit("a.py", "")
        type(hit).encoding = PropertyMock(side_effect=GithubException(500, None, {}))
        github.search_code.return_value = paginated([hit])

        result = search_code(query="y")

        assert result.payload["items"][0]["text_matches"] == CONTENT_UNAVAILABLE

    @pytest.mark.parametrize("error", [requests.ConnectionError("reset"), OSError("broken pipe")])
    def it_keeps_searching_when_a_snippet_fetch_fails(github: MagicMock, paginated, error):
        hit = _hit("a.py", "")
        type(hit).encoding = PropertyMock(side_effect=error)
        github.search_code.return_value = paginated([hit, _hit("b.py", "ok")])

        result = search_code(query="y")

        assert result.ok
        assert [i["text_matches"] for i in result.payload["items"]] == [CONTENT_UNAVAILABLE, "ok"]

    def it_never_raises_on_a_non_string_extension(factory: MagicMock):
        result = search_code(query="y", extension=3)

        assert result.kind == ErrorKind.INTERNAL

    def it_defaults_to_twenty_results(github: MagicMock, paginated):
        github.search_code.return_value = paginated([_hit(f"{i}.py", "z") for i in range(30)])

        assert search_code(query="z").payload["count"] == 20
