"""E2E test fixtures: real API, real CLI process."""

import json
import subprocess
import sys

import pytest

PUBLIC_REPOSITORY = "octocat/Hello-World"


def run_cli(*args, timeout=120):
    """Run the github-mcp CLI and return CompletedProcess."""
    cmd = [sys.executable, "-m", "github_mcp_tools.cli", *args]
    return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)


def call_operation(name, **arguments):
    """Invoke one operation through the CLI and return (returncode, decoded body)."""
    args = ["call", name]
    for key, value in arguments.items():
        args.extend(["--arg", f"{key}={value}"])
    result = run_cli(*args)
    return result.returncode, json.loads(result.stdout)


@pytest.fixture
def cli():
    return run_cli


@pytest.fixture
def operation():
    return call_operation


@pytest.fixture
def public_repository():
    return PUBLIC_REPOSITORY
