"""Unit tests for the result envelope codec."""

import json
from datetime import datetime, timezone

from .envelope import ErrorKind, Failure, Success, decode, encode


def describe_encode():
    def it_wraps_success_payloads():
        data = json.loads(encode(Success({"issues": [], "total_count": 0})))

        assert data == {"status": "success", "result": {"issues": [], "total_count": 0}}

    def it_wraps_failures_with_kind_and_message():
        data = json.loads(encode(Failure(ErrorKind.NOT_FOUND, "Repository not found: Not Found")))

        assert data == {
            "status": "error",
            "error": {"kind": "not_found", "message": "Repository not found: Not Found"},
        }

    def it_preserves_key_order():
        text = encode(Success({"zeta": 1, "alpha": 2}))

        assert text.index('"zeta"') < text.index('"alpha"')

    def it_serializes_datetimes_as_iso_strings():
        moment = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        data = json.loads(encode(Success({"created_at": moment})))

        assert data["result"]["created_at"] == "2024-05-01T12:30:00+00:00"

    def it_keeps_non_ascii_text():
        assert "héllo" in encode(Success({"body": "héllo"}))


def describe_decode():
    def it_reads_back_a_failure():
        envelope = decode(encode(Failure(ErrorKind.INVALID_STATE, "already merged")))

        assert envelope == Failure(ErrorKind.INVALID_STATE, "already merged")
        assert envelope.ok is False

    def it_reads_back_nested_success():
        payload = {"pull_request": {"number": 7, "files": [{"filename": "a.py"}]}}
        envelope = decode(encode(Success(payload)))

        assert envelope == Success(payload)
        assert envelope.ok is True
