"""Resolve GitHub credentials and default target from layered sources."""

import logging
from collections.abc import Mapping, Sequence

from .models import DEFAULT_TIMEOUT, PUBLIC_HOST, GitHubEnv
from .settings import get_settings

logger = logging.getLogger(__name__)

TOKEN_NAMES = ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN")
HOST_NAMES = ("GITHUB_HOST", "GH_HOST")
REPOSITORY_NAME = "GITHUB_REPOSITORY"
TIMEOUT_NAME = "GITHUB_TIMEOUT"
VERIFY_TOKEN_NAME = "GITHUB_VERIFY_TOKEN"

_TRUTHY = {"1", "true", "yes", "on"}

# Process-local override tier, populated once at startup (e.g. from CLI flags)
_overrides: dict[str, str] = {}


def set_overrides(values: Mapping[str, str | None]) -> None:
    """Replace the process-local override tier. Empty values are dropped."""
    _overrides.clear()
    _overrides.update({k: v for k, v in values.items() if v})


def default_sources() -> list[Mapping[str, str | None]]:
    return [dict(_overrides), get_settings().as_source()]


def redact_token(token: str) -> str:
    """Return a preview safe to log: first and last four characters only."""
    if len(token) > 8:
        return f"{token[:4]}...{token[-4:]}"
    return "****"


def lookup(names: Sequence[str], sources: Sequence[Mapping[str, str | None]]) -> str | None:
    """Return the first non-empty value, trying each name across every source in turn."""
    for name in names:
        for source in sources:
            value = source.get(name)
            if value:
                return value
    return None


def _parse_timeout(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", TIMEOUT_NAME, raw)
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning("Ignoring %s=%r: must be positive", TIMEOUT_NAME, raw)
        return DEFAULT_TIMEOUT
    return timeout


def resolve_environment(sources: Sequence[Mapping[str, str | None]] | None = None) -> GitHubEnv | None:
    """Build the environment for one call, or None when no credential is set.

    Args:
        sources: Ordered lookup tiers. Defaults to the process overrides
            followed by the ambient settings (process env and .env file).
    """
    if sources is None:
        sources = default_sources()

    token = lookup(TOKEN_NAMES, sources)
    if not token:
        logger.warning("GitHub token not found in %s", " or ".join(TOKEN_NAMES))
        return None

    host = lookup(HOST_NAMES, sources) or PUBLIC_HOST
    repository = lookup((REPOSITORY_NAME,), sources)
    verify = (lookup((VERIFY_TOKEN_NAME,), sources) or "").strip().lower() in _TRUTHY

    logger.info(
        "GitHub configuration: host=%s, token=%s, default repository=%s",
        host,
        redact_token(token),
        repository,
    )
    return GitHubEnv(
        token=token,
        host=host,
        repository=repository,
        timeout=_parse_timeout(lookup((TIMEOUT_NAME,), sources)),
        verify_token=verify,
    )
