"""
MCP (Model Context Protocol) server for IT Glue.

Exposes read-only IT Glue tools (organizations, configurations, passwords,
documents, flexible assets and a health check) to any MCP client.

### For Claude Desktop / local MCP clients
Run in stdio mode with ITGLUE_API_KEY set:
    python run_servers.py mcp --transport stdio

### For Docker / hosted deployments
Run the stateless Streamable HTTP transport:
    python run_servers.py mcp --transport http --port 8080

With ``--auth-mode gateway`` the API key is taken from the
X-ITGlue-API-Key header of each request instead of the environment.
"""

from .mcp_server import (
    create_server,
    create_app,
    run_server,
    run_http_server,
    SERVER_NAME,
)
from .dispatcher import dispatch, HANDLERS, MissingArgumentError, UnknownToolError
from .tools import TOOLS, get_tools, get_tool_by_name

__all__ = [
    # MCP Server
    "create_server",
    "create_app",
    "run_server",
    "run_http_server",
    "SERVER_NAME",
    # Dispatcher
    "dispatch",
    "HANDLERS",
    "MissingArgumentError",
    "UnknownToolError",
    # Tool catalog
    "TOOLS",
    "get_tools",
    "get_tool_by_name",
]
