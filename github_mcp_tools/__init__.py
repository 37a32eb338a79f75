"""Expose the GitHub REST API as uniform, envelope-returning agent operations.

Every operation resolves its configuration, target repository and client
per call, and always returns a Success or Failure envelope.
"""

from .cli import main
from .envelope import ErrorKind, Failure, Success, decode, encode
from .registry import OPERATIONS, call, invoke

__all__ = ["main", "ErrorKind", "Failure", "Success", "decode", "encode", "OPERATIONS", "call", "invoke"]

if __name__ == "__main__":
    main()
