"""Branch operations."""

from github import GithubException, UnknownObjectException

from ..envelope import Envelope
from ..errors import InvalidArgumentError, InvalidStateError
from ..gateway import OperationContext, iso, run_operation
from ..models import DEFAULT_LIST_LIMIT


def filter_by_prefix(branches, prefix: str | None):
    """Yield branches whose name starts with `prefix`, in source order."""
    for branch in branches:
        if not prefix or branch.name.startswith(prefix):
            yield branch


def _branch_data(branch, default_branch: str) -> dict:
    commit = branch.commit.commit
    return {
        "name": branch.name,
        "sha": branch.commit.sha,
        "latest_commit": {
            "message": commit.message,
            "author": commit.author.name if commit.author else None,
            "date": iso(commit.author.date) if commit.author else None,
        },
        "is_default": branch.name == default_branch,
        "protected": branch.protected,
    }


def list_branches(
    repository: str | None = None,
    filter: str | None = None,  # noqa: A002 tool argument name
    limit: int | None = None,
) -> Envelope:
    """List branches in a repository, optionally only those starting with a prefix.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        filter: Only return branches whose name starts with this prefix.
        limit: Maximum number of branches to return (default 30).
    """

    def work(ctx: OperationContext) -> dict:
        repo = ctx.repo()
        default_branch = repo.default_branch
        branches = []
        matched = 0
        for branch in filter_by_prefix(repo.get_branches(), filter):
            matched += 1
            if len(branches) < ctx.limit:
                branches.append(_branch_data(branch, default_branch))
        return {"branches": branches, "total_count": matched}

    return run_operation(
        "list branches",
        work,
        repository=repository,
        limit=limit,
        default_limit=DEFAULT_LIST_LIMIT,
    )


def _resolve_ref(repo, from_ref: str | None) -> str:
    """Resolve a branch name or commit SHA to a commit SHA."""
    if not from_ref:
        return repo.get_git_ref(f"heads/{repo.default_branch}").object.sha
    try:
        return repo.get_git_ref(f"heads/{from_ref}").object.sha
    except UnknownObjectException:
        pass
    try:
        return repo.get_commit(from_ref).sha
    except GithubException as e:
        raise InvalidArgumentError(f"Invalid reference: {from_ref}") from e


def create_branch(
    repository: str | None = None,
    branch_name: str | None = None,
    from_ref: str | None = None,
) -> Envelope:
    """Create a branch from another branch or a commit SHA.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
        branch_name: Name of the new branch.
        from_ref: Branch name or commit SHA to branch from (defaults to the default branch).
    """

    def work(ctx: OperationContext) -> dict:
        repo = ctx.repo()
        try:
            repo.get_branch(branch_name)
        except UnknownObjectException:
            pass
        else:
            raise InvalidStateError(f"Branch '{branch_name}' already exists")

        sha = _resolve_ref(repo, from_ref)
        ref = repo.create_git_ref(ref=f"refs/heads/{branch_name}", sha=sha)
        return {"branch": {"name": branch_name, "sha": sha, "url": ref.url}}

    return run_operation(
        "create branch",
        work,
        repository=repository,
        required={"Branch name": branch_name},
    )
