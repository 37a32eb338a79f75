"""CLI commands for the GitHub operation gateway."""

import argparse
import logging
import sys

from .environment import redact_token, resolve_environment, set_overrides


def configure_logging(verbose: bool = False) -> None:
    """Log to stderr; stdout belongs to the MCP stdio transport."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("github").setLevel(logging.ERROR)
    logging.getLogger("github.Requester").setLevel(logging.ERROR)
    logging.getLogger("urllib3").setLevel(logging.ERROR)


def parse_arguments(pairs: list[str]) -> dict[str, str]:
    """Turn repeated KEY=VALUE flags into a mapping."""
    arguments = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        arguments[key.strip()] = value
    return arguments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-mcp",
        description="Expose GitHub repositories, issues, pull requests and files as agent tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--token", default=None, help="GitHub token (overrides GITHUB_TOKEN)")
    parser.add_argument("--host", default=None, help="GitHub host (overrides GITHUB_HOST, default github.com)")
    parser.add_argument(
        "--repository",
        default=None,
        help="Default 'owner/repo' (overrides GITHUB_REPOSITORY)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("serve", help="Run the MCP server on stdio")

    call_parser = subparsers.add_parser("call", help="Invoke one operation and print its result")
    call_parser.add_argument("operation", help="Operation name (see `operations`)")
    call_parser.add_argument(
        "--arg",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Operation argument (repeatable, e.g., --arg limit=5)",
    )

    subparsers.add_parser("operations", help="List available operations")
    subparsers.add_parser("env", help="Show the resolved configuration (token redacted)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    set_overrides({"GITHUB_TOKEN": args.token, "GITHUB_HOST": args.host, "GITHUB_REPOSITORY": args.repository})

    if args.command == "serve":
        from .server import serve

        serve()
    elif args.command == "call":
        from .envelope import Success, encode
        from .registry import invoke

        try:
            arguments = parse_arguments(args.arg)
        except ValueError as e:
            parser.error(str(e))
        envelope = invoke(args.operation, arguments)
        sys.stdout.write(encode(envelope) + "\n")
        return 0 if isinstance(envelope, Success) else 1
    elif args.command == "operations":
        from .registry import OPERATIONS

        width = max(len(name) for name in OPERATIONS)
        for name, operation in OPERATIONS.items():
            print(f"{name:<{width}}  {operation.summary}")
    elif args.command == "env":
        env = resolve_environment()
        if env is None:
            print("Not configured: set GITHUB_TOKEN or GITHUB_PERSONAL_ACCESS_TOKEN")
            return 1
        print(f"Host:               {env.host} ({'enterprise' if env.is_enterprise else 'public'})")
        print(f"Token:              {redact_token(env.token)}")
        print(f"Default repository: {env.repository or '(none)'}")
        print(f"Timeout:            {env.timeout}s")
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
