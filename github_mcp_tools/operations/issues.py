"""Issue operations."""

from ..envelope import Envelope
from ..errors import InvalidArgumentError
from ..gateway import OperationContext, iso, login, run_operation, take, with_qualifiers
from ..models import DEFAULT_LIST_LIMIT, DEFAULT_SEARCH_LIMIT

STATES = ("open", "closed", "all")


def normalize_state(state: str | None) -> str:
    """Map a free-form state argument onto open/closed/all, defaulting to open."""
    if not state:
        return "open"
    state = state.strip().lower()
    return state if state in STATES else "open"


def _labels(issue) -> list[str]:
    return [label.name for label in issue.labels]


def _issue_summary(issue) -> dict:
    data = {
        "number": issue.number,
        "title": issue.title,
        "state": issue.state,
        "html_url": issue.html_url,
        "labels": _labels(issue),
        "created_at": iso(issue.created_at),
        "updated_at": iso(issue.updated_at),
        "closed_at": iso(issue.closed_at),
    }
    if issue.assignee:
        data["assignee"] = issue.assignee.login
    return data


def comment_data(comment) -> dict:
    return {
        "id": comment.id,
        "user": login(comment.user),
        "body": comment.body,
        "created_at": iso(comment.created_at),
        "updated_at": iso(comment.updated_at),
    }


def created_comment(comment) -> dict:
    return {
        "id": comment.id,
        "body": comment.body,
        "html_url": comment.html_url,
        "created_at": iso(comment.created_at),
    }


def list_issues(repository: str | None = None, state: str | None = None, limit: int | None = None) -> Envelope:
    """List issues in a repository.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        state: open, closed or all (default open).
        limit: Maximum number of issues to return (default 30).
    """

    def work(ctx: OperationContext) -> dict:
        issues = ctx.repo().get_issues(state=normalize_state(state))
        return {
            "issues": [_issue_summary(i) for i in take(issues, ctx.limit)],
            "total_count": issues.totalCount,
        }

    return run_operation(
        "list issues",
        work,
        repository=repository,
        limit=limit,
        default_limit=DEFAULT_LIST_LIMIT,
    )


def get_issue(repository: str | None = None, issue_number: int | None = None) -> Envelope:
    """Get an issue with its comments.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        issue_number: Issue number.
    """

    def work(ctx: OperationContext) -> dict:
        issue = ctx.repo().get_issue(issue_number)
        data = _issue_summary(issue)
        data["body"] = issue.body
        comments = [comment_data(c) for c in issue.get_comments()]
        data["comments"] = comments
        data["comments_count"] = len(comments)
        return {"issue": data}

    return run_operation(
        "get issue",
        work,
        repository=repository,
        required={"Issue number": issue_number},
        subject="Issue or repository",
    )


def create_issue(
    repository: str | None = None,
    title: str | None = None,
    body: str | None = None,
    labels: str | None = None,
) -> Envelope:
    """Create an issue.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        title: Issue title.
        body: Issue description.
        labels: Comma-separated list of labels.
    """

    def work(ctx: OperationContext) -> dict:
        kwargs = {"title": title}
        if body:
            kwargs["body"] = body
        label_names = [name.strip() for name in (labels or "").split(",") if name.strip()]
        if label_names:
            kwargs["labels"] = label_names
        issue = ctx.repo().create_issue(**kwargs)
        return {
            "issue": {
                "number": issue.number,
                "title": issue.title,
                "body": issue.body,
                "html_url": issue.html_url,
            }
        }

    return run_operation(
        "create issue",
        work,
        repository=repository,
        required={"Issue title": title},
    )


def add_issue_comment(
    repository: str | None = None,
    issue_number: int | None = None,
    body: str | None = None,
) -> Envelope:
    """Add a comment to an issue.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        issue_number: Issue number.
        body: Comment text.
    """

    def work(ctx: OperationContext) -> dict:
        comment = ctx.repo().get_issue(issue_number).create_comment(body)
        return {"comment": created_comment(comment)}

    return run_operation(
        "add issue comment",
        work,
        repository=repository,
        required={"Issue number": issue_number, "Comment body": body},
        subject="Issue or repository",
    )


def _check_search_state(state: str | None):
    def check() -> None:
        if state and state.strip().lower() not in ("open", "closed"):
            raise InvalidArgumentError(f"State must be 'open' or 'closed', got {state!r}")

    return check


def search_issues(
    query: str | None = None,
    repository: str | None = None,
    state: str | None = None,
    limit: int | None = None,
) -> Envelope:
    """Search issues across GitHub or within one repository, newest first.

    Args:
        query: Search query, using GitHub's issue search syntax.
        repository: Restrict the search to this 'owner/repo'.
        state: open or closed.
        limit: Maximum number of results to return (default 10).
    """

    def work(ctx: OperationContext) -> dict:
        full_query = with_qualifiers(
            query,
            repo=repository.strip() if repository else None,
            **{"is": state.strip().lower() if state else None},
        )
        results = ctx.github.search_issues(full_query, sort="created", order="desc")
        issues = []
        for issue in take(results, ctx.limit):
            issues.append(
                {
                    "number": issue.number,
                    "title": issue.title,
                    "state": issue.state,
                    "repository": issue.repository.full_name,
                    "html_url": issue.html_url,
                    "created_at": iso(issue.created_at),
                }
            )
        return {"issues": issues, "total_count": results.totalCount, "query": full_query}

    return run_operation(
        "search issues",
        work,
        repository_scoped=False,
        required={"Search query": query},
        checks=[_check_search_state(state)],
        limit=limit,
        default_limit=DEFAULT_SEARCH_LIMIT,
    )
