"""MCP stdio server exposing every registered operation as a tool."""

import inspect

from mcp.server.fastmcp import FastMCP

from .envelope import encode
from .registry import OPERATIONS, Operation

SERVER_NAME = "github"


def as_tool(operation: Operation):
    """Wrap a handler so the transport receives the encoded envelope string.

    The wrapper advertises the handler's own parameters so FastMCP builds
    the same argument schema.
    """

    def tool(**kwargs) -> str:
        return encode(operation.handler(**kwargs))

    tool.__name__ = operation.name
    tool.__doc__ = operation.description
    tool.__signature__ = operation.signature.replace(return_annotation=str)
    return tool


def build_server() -> FastMCP:
    server = FastMCP(SERVER_NAME)
    for operation in OPERATIONS.values():
        server.add_tool(as_tool(operation), name=operation.name, description=operation.description)
    return server


def serve() -> None:
    build_server().run()
