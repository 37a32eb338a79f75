"""Uniform success/failure envelope returned by every operation."""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    TRANSPORT = "transport"
    INTERNAL = "internal"


@dataclass
class Success:
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True


@dataclass
class Failure:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Envelope = Success | Failure


def _default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def to_dict(envelope: Envelope) -> dict[str, Any]:
    if isinstance(envelope, Success):
        return {"status": "success", "result": envelope.payload}
    return {
        "status": "error",
        "error": {"kind": envelope.kind.value, "message": envelope.message},
    }


def encode(envelope: Envelope) -> str:
    """Serialize an envelope to the JSON text handed back to the transport."""
    return json.dumps(to_dict(envelope), indent=2, default=_default, ensure_ascii=False)


def decode(text: str) -> Envelope:
    """Parse JSON produced by `encode` back into an envelope."""
    data = json.loads(text)
    if data.get("status") == "success":
        return Success(data.get("result") or {})
    error = data.get("error") or {}
    return Failure(ErrorKind(error.get("kind", ErrorKind.INTERNAL.value)), error.get("message", ""))
