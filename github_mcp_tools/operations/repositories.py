"""Repository operations."""

from ..envelope import Envelope
from ..gateway import OperationContext, iso, run_operation, take
from ..models import DEFAULT_LIST_LIMIT, DEFAULT_SEARCH_LIMIT


def _repo_summary(repo) -> dict:
    return {
        "name": repo.name,
        "full_name": repo.full_name,
        "description": repo.description,
        "url": repo.html_url,
        "stars": repo.stargazers_count,
        "forks": repo.forks_count,
        "private": repo.private,
    }


def list_repositories(limit: int | None = None) -> Envelope:
    """List repositories the authenticated user has access to.

    Args:
        limit: Maximum number of repositories to return (default 30).
    """

    def work(ctx: OperationContext) -> dict:
        repos = ctx.github.get_user().get_repos()
        return {
            "repositories": [_repo_summary(r) for r in take(repos, ctx.limit)],
            "total_count": repos.totalCount,
        }

    return run_operation(
        "list repositories",
        work,
        repository_scoped=False,
        limit=limit,
        default_limit=DEFAULT_LIST_LIMIT,
    )


def get_repository(repository: str | None = None) -> Envelope:
    """Get details about a repository: description, stars, forks, license and more.

    Args:
        repository: Repository in 'owner/repo' format (defaults to GITHUB_REPOSITORY).
    """

    def work(ctx: OperationContext) -> dict:
        repo = ctx.repo()
        data = _repo_summary(repo)
        data.update(
            {
                "open_issues": repo.open_issues_count,
                "watchers": repo.watchers_count,
                "license": repo.license.name if repo.license else None,
                "default_branch": repo.default_branch,
                "created_at": iso(repo.created_at),
                "updated_at": iso(repo.updated_at),
            }
        )
        return {"repository": data}

    return run_operation("get repository", work, repository=repository)


def search_repositories(query: str | None = None, limit: int | None = None) -> Envelope:
    """Search GitHub for repositories, most starred first.

    Args:
        query: Search query, using GitHub's repository search syntax.
        limit: Maximum number of results to return (default 10).
    """

    def work(ctx: OperationContext) -> dict:
        results = ctx.github.search_repositories(query, sort="stars", order="desc")
        repositories = []
        for repo in take(results, ctx.limit):
            data = _repo_summary(repo)
            data["language"] = repo.language
            repositories.append(data)
        return {
            "repositories": repositories,
            "total_count": results.totalCount,
            "query": query,
        }

    return run_operation(
        "search repositories",
        work,
        repository_scoped=False,
        required={"Search query": query},
        limit=limit,
        default_limit=DEFAULT_SEARCH_LIMIT,
    )
