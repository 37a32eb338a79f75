"""Create authenticated PyGithub handles for public or enterprise hosts."""

import logging

import requests
from github import Auth, BadCredentialsException, Github, GithubException

from .errors import ClientConnectionError
from .models import PER_PAGE, GitHubEnv

logger = logging.getLogger(__name__)

ENTERPRISE_API_PATH = "/api/v3"


def enterprise_base_url(host: str) -> str:
    """Build the REST endpoint of a GitHub Enterprise Server instance."""
    url = host.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    if not url.endswith(ENTERPRISE_API_PATH):
        url = f"{url}{ENTERPRISE_API_PATH}"
    return url


def create_client(env: GitHubEnv) -> Github:
    """Create a client bound to `env`.

    The caller owns the handle and must close it. Automatic retries are
    disabled so each remote step is attempted exactly once.

    Raises:
        ClientConnectionError: if the client cannot be built, or if token
            verification is enabled and GitHub refuses the credential.
    """
    kwargs = {
        "auth": Auth.Token(env.token),
        "timeout": env.timeout,
        "per_page": PER_PAGE,
        "retry": None,
    }
    if env.is_enterprise:
        kwargs["base_url"] = enterprise_base_url(env.host)
        logger.debug("Connecting to GitHub Enterprise at %s", kwargs["base_url"])

    try:
        github = Github(**kwargs)
    except (AssertionError, ValueError) as e:
        raise ClientConnectionError(f"Invalid GitHub host {env.host!r}: {e}") from e

    if env.verify_token:
        try:
            github.get_user().login
        except BadCredentialsException as e:
            github.close()
            raise ClientConnectionError(f"GitHub rejected the token for {env.host}") from e
        except (GithubException, requests.RequestException) as e:
            github.close()
            raise ClientConnectionError(f"Could not reach GitHub at {env.host}: {e}") from e

    return github
