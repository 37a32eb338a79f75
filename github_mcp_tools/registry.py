"""Static registry mapping operation names to their handlers."""

import inspect
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .envelope import Envelope, ErrorKind, Failure, encode
from .operations import branches, commits, contents, issues, pull_requests, repositories


@dataclass(frozen=True)
class Operation:
    name: str
    handler: Callable[..., Envelope]

    @property
    def description(self) -> str:
        return inspect.getdoc(self.handler) or ""

    @property
    def summary(self) -> str:
        return self.description.splitlines()[0] if self.description else ""

    @property
    def signature(self) -> inspect.Signature:
        return inspect.signature(self.handler)

    @property
    def parameters(self) -> list[str]:
        return list(self.signature.parameters)


_HANDLERS = (
    repositories.list_repositories,
    repositories.get_repository,
    repositories.search_repositories,
    issues.list_issues,
    issues.get_issue,
    issues.create_issue,
    issues.add_issue_comment,
    issues.search_issues,
    pull_requests.list_pull_requests,
    pull_requests.get_pull_request,
    pull_requests.add_pull_request_comment,
    pull_requests.merge_pull_request,
    branches.list_branches,
    branches.create_branch,
    commits.get_commit,
    commits.list_commits,
    commits.find_commits_by_message,
    contents.get_file_contents,
    contents.list_directory_contents,
    contents.create_or_update_file,
    contents.search_code,
)

OPERATIONS: dict[str, Operation] = {h.__name__: Operation(h.__name__, h) for h in _HANDLERS}


def _expects_int(annotation: Any) -> bool:
    return annotation is int or int in typing.get_args(annotation)


def _expects_str(annotation: Any) -> bool:
    return annotation is str or str in typing.get_args(annotation)


def coerce_arguments(operation: Operation, arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Check argument names and types, turning numeric strings into ints where expected.

    Raises:
        ValueError: on an unknown argument, a non-numeric integer value or a
            non-string value for a text argument.
    """
    params = operation.signature.parameters
    unknown = sorted(set(arguments) - set(params))
    if unknown:
        raise ValueError(f"Unknown argument(s) for {operation.name}: {', '.join(unknown)}")

    coerced = {}
    for name, value in arguments.items():
        if isinstance(value, str) and _expects_int(params[name].annotation):
            value = value.strip()
            if not value:
                value = None
            else:
                try:
                    value = int(value)
                except ValueError:
                    raise ValueError(f"Argument '{name}' must be an integer, got {value!r}") from None
        elif value is not None and _expects_str(params[name].annotation) and not isinstance(value, str):
            raise ValueError(f"Argument '{name}' must be a string, got {value!r}")
        coerced[name] = value
    return coerced


def invoke(name: str, arguments: Mapping[str, Any] | None = None) -> Envelope:
    operation = OPERATIONS.get(name)
    if operation is None:
        return Failure(ErrorKind.INVALID_ARGUMENT, f"Unknown operation: {name}")
    try:
        kwargs = coerce_arguments(operation, arguments or {})
    except ValueError as e:
        return Failure(ErrorKind.INVALID_ARGUMENT, str(e))
    return operation.handler(**kwargs)


def call(name: str, arguments: Mapping[str, Any] | None = None) -> str:
    """Invoke an operation by name and return the encoded envelope."""
    return encode(invoke(name, arguments))
