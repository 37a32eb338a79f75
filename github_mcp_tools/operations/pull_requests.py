"""Pull request operations."""

from ..envelope import Envelope
from ..errors import InvalidArgumentError, InvalidStateError
from ..gateway import OperationContext, iso, login, run_operation, take
from ..models import DEFAULT_LIST_LIMIT
from .issues import comment_data, created_comment, normalize_state

MERGE_METHODS = ("merge", "squash", "rebase")


def _pr_summary(pr) -> dict:
    return {
        "number": pr.number,
        "title": pr.title,
        "state": pr.state,
        "html_url": pr.html_url,
        "created_at": iso(pr.created_at),
        "updated_at": iso(pr.updated_at),
        "closed_at": iso(pr.closed_at),
        "merged_at": iso(pr.merged_at),
        # `merged` is absent from list responses; merged_at is always there
        "is_merged": pr.merged_at is not None,
        "user": login(pr.user),
        "base_branch": pr.base.ref,
        "head_branch": pr.head.ref,
    }


def list_pull_requests(
    repository: str | None = None,
    state: str | None = None,
    limit: int | None = None,
) -> Envelope:
    """List pull requests in a repository.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        state: open, closed or all (default open).
        limit: Maximum number of pull requests to return (default 30).
    """

    def work(ctx: OperationContext) -> dict:
        pulls = ctx.repo().get_pulls(state=normalize_state(state))
        return {
            "pull_requests": [_pr_summary(pr) for pr in take(pulls, ctx.limit)],
            "total_count": pulls.totalCount,
        }

    return run_operation(
        "list pull requests",
        work,
        repository=repository,
        limit=limit,
        default_limit=DEFAULT_LIST_LIMIT,
    )


def get_pull_request(repository: str | None = None, pr_number: int | None = None) -> Envelope:
    """Get a pull request with its conversation comments and changed files.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        pr_number: Pull request number.
    """

    def work(ctx: OperationContext) -> dict:
        pr = ctx.repo().get_pull(pr_number)
        data = _pr_summary(pr)
        data["body"] = pr.body
        data["is_merged"] = pr.merged
        data["comments"] = [comment_data(c) for c in pr.get_issue_comments()]
        data["files"] = [
            {
                "filename": f.filename,
                "status": f.status,
                "additions": f.additions,
                "deletions": f.deletions,
                "changes": f.changes,
            }
            for f in pr.get_files()
        ]
        return {"pull_request": data}

    return run_operation(
        "get pull request",
        work,
        repository=repository,
        required={"Pull request number": pr_number},
        subject="Pull request or repository",
    )


def add_pull_request_comment(
    repository: str | None = None,
    pr_number: int | None = None,
    body: str | None = None,
) -> Envelope:
    """Add a conversation comment to a pull request.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        pr_number: Pull request number.
        body: Comment text.
    """

    def work(ctx: OperationContext) -> dict:
        comment = ctx.repo().get_pull(pr_number).create_issue_comment(body)
        return {"comment": created_comment(comment)}

    return run_operation(
        "comment on pull request",
        work,
        repository=repository,
        required={"Pull request number": pr_number, "Comment body": body},
        subject="Pull request or repository",
    )


def _merge_method(merge_method: str | None) -> str:
    return (merge_method or "merge").strip().lower() or "merge"


def merge_pull_request(
    repository: str | None = None,
    pr_number: int | None = None,
    commit_message: str | None = None,
    merge_method: str | None = None,
) -> Envelope:
    """Merge a pull request. Refuses pull requests that are already merged.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        pr_number: Pull request number.
        commit_message: Extra detail for the merge commit.
        merge_method: merge, squash or rebase (default merge).
    """

    def check_method() -> None:
        if _merge_method(merge_method) not in MERGE_METHODS:
            raise InvalidArgumentError(
                f"Merge method must be one of {', '.join(MERGE_METHODS)}, got {merge_method!r}"
            )

    def work(ctx: OperationContext) -> dict:
        pr = ctx.repo().get_pull(pr_number)
        if pr.merged:
            raise InvalidStateError(f"Pull request #{pr_number} is already merged")
        method = _merge_method(merge_method)
        kwargs = {"merge_method": method}
        if commit_message:
            kwargs["commit_message"] = commit_message
        status = pr.merge(**kwargs)
        if not status.merged:
            raise InvalidStateError(f"Pull request #{pr_number} was not merged: {status.message}")
        return {
            "merged": True,
            "method": method,
            "sha": status.sha,
            "pull_request_number": pr_number,
            "repository": ctx.target.full_name,
        }

    return run_operation(
        "merge pull request",
        work,
        repository=repository,
        required={"Pull request number": pr_number},
        checks=[check_method],
        subject="Pull request or repository",
    )
