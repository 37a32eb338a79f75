"""Commit operations."""

from ..envelope import Envelope
from ..gateway import OperationContext, iso, run_operation, take
from ..models import DEFAULT_COMMIT_LIST_LIMIT, DEFAULT_COMMIT_SEARCH_LIMIT


def _person(person) -> dict:
    return {
        "name": person.name if person else None,
        "email": person.email if person else None,
        "date": iso(person.date) if person else None,
    }


def _stats(commit) -> dict:
    stats = commit.stats
    return {"additions": stats.additions, "deletions": stats.deletions, "total": stats.total}


def _commit_summary(commit) -> dict:
    info = commit.commit
    return {
        "sha": commit.sha,
        "message": info.message,
        "author": info.author.name if info.author else None,
        "author_email": info.author.email if info.author else None,
        "date": iso(info.author.date) if info.author else None,
        "stats": _stats(commit),
        "html_url": commit.html_url,
    }


def get_commit(repository: str | None = None, sha: str | None = None) -> Envelope:
    """Get a commit with author, committer, parents, file changes and stats.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        sha: Commit SHA.
    """

    def work(ctx: OperationContext) -> dict:
        commit = ctx.repo().get_commit(sha)
        info = commit.commit
        return {
            "commit": {
                "sha": commit.sha,
                "message": info.message,
                "html_url": commit.html_url,
                "author": _person(info.author),
                "committer": _person(info.committer),
                "parents": [{"sha": p.sha, "url": p.html_url} for p in commit.parents],
                "files": [
                    {
                        "filename": f.filename,
                        "status": f.status,
                        "additions": f.additions,
                        "deletions": f.deletions,
                        "changes": f.changes,
                        "patch": f.patch,
                    }
                    for f in commit.files
                ],
                "stats": _stats(commit),
            }
        }

    return run_operation(
        "get commit",
        work,
        repository=repository,
        required={"Commit SHA": sha},
        subject="Commit or repository",
    )


def list_commits(
    repository: str | None = None,
    branch: str | None = None,
    author: str | None = None,
    path: str | None = None,
    limit: int | None = None,
) -> Envelope:
    """List commits, newest first, optionally by branch, author or touched path.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        branch: Branch, tag or SHA to start listing from.
        author: GitHub login or email address of the author.
        path: Only commits touching this path.
        limit: Maximum number of commits to return (default 30).
    """
    filters = {"sha": branch, "author": author, "path": path}
    filters = {k: v for k, v in filters.items() if v}

    def work(ctx: OperationContext) -> dict:
        commits = ctx.repo().get_commits(**filters)
        items = [_commit_summary(c) for c in take(commits, ctx.limit)]
        result = {"commits": items, "count": len(items), "total_count": commits.totalCount}
        if branch:
            result["branch"] = branch
        if author:
            result["author"] = author
        if path:
            result["path"] = path
        return result

    return run_operation(
        "list commits",
        work,
        repository=repository,
        limit=limit,
        default_limit=DEFAULT_COMMIT_LIST_LIMIT,
    )


def find_commits_by_message(
    text: str | None = None,
    repository: str | None = None,
    branch: str | None = None,
    limit: int | None = None,
) -> Envelope:
    """Find commits whose message contains the given text (case-insensitive).

    Walks the history from the branch head until enough matches are found.

    Args:
        text: Text to look for in commit messages.
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        branch: Branch, tag or SHA to search from (defaults to the default branch).
        limit: Maximum number of matches to return (default 20).
    """

    def work(ctx: OperationContext) -> dict:
        needle = text.lower()
        kwargs = {"sha": branch} if branch else {}
        matches = (c for c in ctx.repo().get_commits(**kwargs) if needle in (c.commit.message or "").lower())
        items = [_commit_summary(c) for c in take(matches, ctx.limit)]
        result = {"commits": items, "count": len(items), "search_text": text}
        if branch:
            result["branch"] = branch
        return result

    return run_operation(
        "search commits",
        work,
        repository=repository,
        required={"Search text": text},
        limit=limit,
        default_limit=DEFAULT_COMMIT_SEARCH_LIMIT,
    )
