"""Shared request skeleton for every GitHub operation.

Each operation hands `run_operation` a unit of work plus the arguments the
skeleton needs to validate. The skeleton then:

1. checks required arguments, before anything touches the network;
2. resolves the environment (fresh for every call);
3. resolves the target repository, explicit argument first;
4. creates a client handle, owned by this call and closed afterwards;
5. runs the work and wraps its payload, or classifies whatever it raised.

Nothing raised inside the skeleton escapes it: callers always get an
envelope back.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from typing import Any

import requests
from github import Github, GithubException, UnknownObjectException
from github.Repository import Repository

from .client import create_client
from .envelope import Envelope, ErrorKind, Failure, Success
from .environment import resolve_environment
from .errors import ClientConnectionError, InvalidArgumentError, InvalidStateError
from .models import RepositoryRef

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "GitHub is not configured correctly"


@dataclass
class OperationContext:
    """What a unit of work receives: a live handle, its target and its limit."""

    github: Github
    target: RepositoryRef | None = None
    limit: int | None = None

    def repo(self) -> Repository:
        return self.github.get_repo(self.target.full_name)


Work = Callable[[OperationContext], dict[str, Any]]


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_required(required: Mapping[str, Any] | None, present: Mapping[str, Any] | None = None) -> None:
    """Raise InvalidArgumentError for the first absent argument.

    `required` values must be non-empty; `present` values only need to be
    non-null (an empty file body is legitimate content).
    """
    for label, value in (required or {}).items():
        if is_missing(value):
            raise InvalidArgumentError(f"{label} is required")
    for label, value in (present or {}).items():
        if value is None:
            raise InvalidArgumentError(f"{label} is required")


def effective_limit(limit: Any, default: int) -> int:
    """Apply the per-operation default to an optional limit argument."""
    if limit is None:
        return default
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgumentError(f"Limit must be an integer, got {limit!r}")
    return limit if limit > 0 else default


def resolve_repository(explicit: str | None, default: str | None) -> RepositoryRef:
    """Explicit argument wins over the configured default."""
    name = explicit if not is_missing(explicit) else default
    if is_missing(name):
        raise InvalidArgumentError("Repository name is required (pass 'owner/repo' or set GITHUB_REPOSITORY)")
    try:
        return RepositoryRef.parse(name)
    except ValueError as e:
        raise InvalidArgumentError(str(e)) from e


def take(items: Iterable, limit: int) -> list:
    """Consume at most `limit` items, regardless of how many the source would yield."""
    return list(islice(items, limit))


def with_qualifiers(query: str, **qualifiers: str | None) -> str:
    """Append `key:value` search qualifiers to a free-text query."""
    parts = [query]
    for key, value in qualifiers.items():
        if not is_missing(value):
            parts.append(f"{key}:{value}")
    return " ".join(parts)


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def login(user: Any) -> str | None:
    return user.login if user else None


def remote_message(e: GithubException) -> str:
    if isinstance(e.data, dict) and e.data.get("message"):
        return f"{e.data['message']} (HTTP {e.status})"
    return str(e)


def run_operation(
    action: str,
    work: Work,
    *,
    repository: str | None = None,
    repository_scoped: bool = True,
    required: Mapping[str, Any] | None = None,
    present: Mapping[str, Any] | None = None,
    limit: Any = None,
    default_limit: int | None = None,
    checks: Iterable[Callable[[], None]] = (),
    subject: str = "Repository",
) -> Envelope:
    """Run one operation through the shared skeleton.

    Args:
        action: What is being attempted, used in failure messages ("list issues").
        work: Callable receiving an OperationContext and returning the payload.
        repository: Explicit 'owner/repo' argument, if any.
        repository_scoped: Whether a target repository must be resolved.
        required: Label -> value pairs that must be non-empty.
        present: Label -> value pairs that must be non-null.
        limit: Caller-supplied limit; only consulted when `default_limit` is set.
        default_limit: Limit applied when `limit` is absent or not positive.
        checks: Extra argument validators, run before any remote access.
        subject: Resource named in not-found messages.
    """
    try:
        check_required(required, present)
        resolved_limit = effective_limit(limit, default_limit) if default_limit is not None else None
        for check in checks:
            check()

        env = resolve_environment()
        if env is None:
            return Failure(ErrorKind.CONFIGURATION, NOT_CONFIGURED)

        target = resolve_repository(repository, env.repository) if repository_scoped else None

        try:
            github = create_client(env)
        except ClientConnectionError as e:
            logger.info("Could not %s: %s", action, e)
            return Failure(ErrorKind.REMOTE_UNAVAILABLE, f"Failed to {action}: {e}")

        logger.debug("Running %s against %s", action, target or env.host)
        try:
            payload = work(OperationContext(github=github, target=target, limit=resolved_limit))
        finally:
            github.close()
        return Success(payload)

    except InvalidArgumentError as e:
        return Failure(ErrorKind.INVALID_ARGUMENT, str(e))
    except InvalidStateError as e:
        logger.info("Could not %s: %s", action, e)
        return Failure(ErrorKind.INVALID_STATE, str(e))
    except UnknownObjectException as e:
        logger.info("Could not %s: not found", action)
        return Failure(ErrorKind.NOT_FOUND, f"{subject} not found: {remote_message(e)}")
    except GithubException as e:
        logger.info("Could not %s: %s", action, e)
        return Failure(ErrorKind.TRANSPORT, f"Failed to {action}: {remote_message(e)}")
    except (requests.RequestException, OSError) as e:
        logger.info("Could not %s: %s", action, e)
        return Failure(ErrorKind.TRANSPORT, f"Failed to {action}: {e}")
    except Exception as e:
        logger.exception("Unexpected error while trying to %s", action)
        return Failure(ErrorKind.INTERNAL, f"Unexpected error while trying to {action}: {e}")
