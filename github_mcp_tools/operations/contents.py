"""File content operations: read, list, write and code search."""

import base64
import binascii
import logging

import requests
from github import GithubException

from ..envelope import Envelope
from ..errors import InvalidStateError
from ..gateway import OperationContext, run_operation, take, with_qualifiers
from ..models import DEFAULT_CODE_SEARCH_LIMIT, SNIPPET_LENGTH

logger = logging.getLogger(__name__)

CONTENT_UNAVAILABLE = "[Content unavailable]"


def _details(content) -> dict:
    return {
        "name": content.name,
        "path": content.path,
        "sha": content.sha,
        "size": content.size,
    }


def decode_content(content) -> str:
    """Decode a ContentFile body; large files come back without inline content."""
    if content.encoding != "base64" or not content.content:
        return ""
    return base64.b64decode(content.content).decode("utf-8", errors="replace")


def snippet(text: str, length: int = SNIPPET_LENGTH) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."


def _ref_kwargs(ref: str | None) -> dict:
    return {"ref": ref} if ref else {}


def get_file_contents(
    repository: str | None = None,
    path: str | None = None,
    ref: str | None = None,
) -> Envelope:
    """Get a file's decoded content and metadata (size, sha, urls).

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        path: Path of the file in the repository.
        ref: Branch, tag or commit SHA (defaults to the default branch).
    """

    def work(ctx: OperationContext) -> dict:
        content = ctx.repo().get_contents(path, **_ref_kwargs(ref))
        if isinstance(content, list):
            raise InvalidStateError(f"Path '{path}' points to a directory, not a file")
        data = _details(content)
        data.update(
            {
                "type": content.type,
                "url": content.html_url,
                "download_url": content.download_url,
                "content": decode_content(content),
            }
        )
        return {"file": data}

    return run_operation(
        "get file contents",
        work,
        repository=repository,
        required={"File path": path},
        subject="File or repository",
    )


def list_directory_contents(
    repository: str | None = None,
    path: str | None = None,
    ref: str | None = None,
) -> Envelope:
    """List the files and directories at a path.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        path: Directory path (empty or '/' for the repository root).
        ref: Branch, tag or commit SHA (defaults to the default branch).
    """

    def work(ctx: OperationContext) -> dict:
        dir_path = (path or "").strip().strip("/")
        contents = ctx.repo().get_contents(dir_path, **_ref_kwargs(ref))
        if not isinstance(contents, list):
            raise InvalidStateError(f"Path '{dir_path}' points to a file, not a directory")
        entries = []
        for content in contents:
            data = _details(content)
            is_dir = content.type == "dir"
            data["type"] = "directory" if is_dir else "file"
            data["url"] = content.html_url
            if not is_dir:
                data["download_url"] = content.download_url
            entries.append(data)
        return {"contents": entries, "path": dir_path}

    return run_operation(
        "list directory contents",
        work,
        repository=repository,
        subject="Directory or repository",
    )


def create_or_update_file(
    repository: str | None = None,
    path: str | None = None,
    content: str | None = None,
    message: str | None = None,
    branch: str | None = None,
    sha: str | None = None,
) -> Envelope:
    """Create a file, or update it when the current blob sha is supplied.

    A stale sha is rejected by GitHub and reported as a transport failure.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        path: Path of the file in the repository.
        content: New file content.
        message: Commit message.
        branch: Branch to commit to (defaults to the default branch).
        sha: Current blob sha of the file; required for updates, omit for new files.
    """

    def work(ctx: OperationContext) -> dict:
        repo = ctx.repo()
        target_branch = branch or repo.default_branch
        if sha:
            response = repo.update_file(path, message, content, sha, branch=target_branch)
        else:
            response = repo.create_file(path, message, content, branch=target_branch)
        commit = response["commit"]
        written = response["content"]
        return {
            "operation": "update" if sha else "create",
            "file": {
                "path": path,
                "sha": written.sha,
                "name": written.name,
                "url": written.html_url,
                "commit": {"sha": commit.sha, "url": commit.html_url, "message": message},
            },
        }

    return run_operation(
        "write file",
        work,
        repository=repository,
        required={"File path": path, "Commit message": message},
        present={"File content": content},
    )


def _text_matches(item) -> str:
    try:
        return snippet(decode_content(item))
    except (GithubException, requests.RequestException, OSError, binascii.Error) as e:
        logger.debug("No snippet for %s: %s", item.path, e)
        return CONTENT_UNAVAILABLE


def search_code(
    query: str | None = None,
    repository: str | None = None,
    extension: str | None = None,
    limit: int | None = None,
) -> Envelope:
    """Search code across GitHub or within one repository.

    Args:
        query: Search query, using GitHub's code search syntax.
        repository: Restrict the search to this 'owner/repo'.
        extension: Restrict to files with this extension (e.g. 'py').
        limit: Maximum number of results to return (default 20).
    """

    def work(ctx: OperationContext) -> dict:
        full_query = with_qualifiers(
            query,
            repo=repository.strip() if repository else None,
            extension=extension.strip().lstrip(".") if extension else None,
        )
        results = ctx.github.search_code(full_query)
        items = []
        for item in take(results, ctx.limit):
            items.append(
                {
                    "name": item.name,
                    "path": item.path,
                    "sha": item.sha,
                    "repository": item.repository.full_name,
                    "html_url": item.html_url,
                    "text_matches": _text_matches(item),
                }
            )
        return {
            "items": items,
            "count": len(items),
            "total_count": results.totalCount,
            "query": full_query,
        }

    return run_operation(
        "search code",
        work,
        repository_scoped=False,
        required={"Search query": query},
        limit=limit,
        default_limit=DEFAULT_CODE_SEARCH_LIMIT,
    )
