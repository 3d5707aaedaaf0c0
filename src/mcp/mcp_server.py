"""
MCP Server for the IT Glue API, built on the low-level MCP Python SDK server.

This server implements the MCP specification:
- tools/list returns the static IT Glue tool catalog with inputSchema
- tools/call dispatches to the IT Glue client and returns a text content block
- errors are reported as tool results with isError: true, never as faults

Transports:
- stdio: one long-lived session, credentials from the environment
- HTTP (Streamable HTTP, stateless): every POST to /mcp gets a fresh server
  and transport. Credentials come from the environment ("env" auth mode) or
  from per-request gateway headers ("gateway" auth mode). Header credentials
  are bound to that one request only.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Message, Receive, Scope, Send

from src.config import ServerSettings
from src.itglue.credentials import API_KEY_HEADER, Credentials
from .dispatcher import dispatch
from .tools import list_mcp_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "itglue-mcp"
SERVER_VERSION = "1.0.0"

MCP_PATH = "/mcp"
HEALTH_PATH = "/health"

CredentialsSource = Callable[[], Credentials]


def create_server(
    credentials_source: CredentialsSource = Credentials.from_env,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Server:
    """
    Create an MCP server with the IT Glue tool handlers registered.

    Args:
        credentials_source: Called on every tool call to obtain credentials
        transport: Optional httpx transport for the IT Glue client (tests)

    Returns:
        Configured low-level MCP server
    """
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return list_mcp_tools()

    # Arguments are validated per tool by the dispatcher
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        return await dispatch(name, arguments, credentials_source(), transport=transport)

    return server


# =============================================================================
# stdio transport
# =============================================================================

async def _serve_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def run_server():
    """Run the MCP server with stdio transport (default for MCP)."""
    server = create_server(Credentials.from_env)
    logger.info("IT Glue MCP server running on stdio")
    asyncio.run(_serve_stdio(server))


# =============================================================================
# HTTP transport
# =============================================================================

def _jsonrpc_error(code: int, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {
            "jsonrpc": "2.0",
            "error": {"code": code, "message": message},
            "id": None,
        },
        status_code=status_code,
    )


class MCPEndpoint:
    """
    ASGI app for the /mcp path.

    Stateless: each POST builds its own MCP server, session manager and
    credentials, so nothing is shared between requests.
    """

    def __init__(
        self,
        settings: ServerSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        self.transport = transport

    def _resolve_credentials(self, request: Request) -> Optional[Credentials]:
        """Return request credentials, or None if gateway headers are missing."""
        if not self.settings.is_gateway_mode:
            return Credentials.from_env()
        credentials = Credentials.from_headers(request.headers)
        if not credentials.api_key:
            return None
        return credentials

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)

        if request.method != "POST":
            response = _jsonrpc_error(-32000, "Method not allowed", 405)
            await response(scope, receive, send)
            return

        credentials = self._resolve_credentials(request)
        if credentials is None:
            logger.warning("Rejected gateway request without %s header", API_KEY_HEADER)
            response = JSONResponse(
                {
                    "error": "Missing credentials",
                    "message": f"Gateway mode requires {API_KEY_HEADER} header",
                    "required": [API_KEY_HEADER],
                },
                status_code=401,
            )
            await response(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            server = create_server(lambda: credentials, transport=self.transport)
            session_manager = StreamableHTTPSessionManager(
                app=server,
                json_response=True,
                stateless=True,
            )
            async with session_manager.run():
                await session_manager.handle_request(scope, receive, tracking_send)
        except Exception:
            logger.exception("MCP transport error")
            if not response_started:
                response = _jsonrpc_error(-32603, "Internal error", 500)
                await response(scope, receive, send)


def create_app(
    settings: Optional[ServerSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Starlette:
    """
    Create the Starlette app for the HTTP transport.

    Routes:
        GET /health: liveness, no authentication
        POST /mcp: MCP Streamable HTTP endpoint
        anything else: 404 listing the valid endpoints
    """
    settings = settings or ServerSettings(transport="http")

    async def health(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "ok",
            "transport": "http",
            "authMode": "gateway" if settings.is_gateway_mode else "env",
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        })

    async def not_found(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            {"error": "Not found", "endpoints": [MCP_PATH, HEALTH_PATH]},
            status_code=404,
        )

    return Starlette(
        routes=[
            Route(HEALTH_PATH, health),
            Route(MCP_PATH, endpoint=MCPEndpoint(settings, transport=transport)),
        ],
        exception_handlers={404: not_found},
    )


def run_http_server(settings: Optional[ServerSettings] = None):
    """Run the MCP server with the stateless Streamable HTTP transport."""
    settings = settings or ServerSettings(transport="http")
    app = create_app(settings)
    logger.info(f"IT Glue MCP server listening on http://{settings.host}:{settings.port}{MCP_PATH}")
    logger.info(f"Health check available at http://{settings.host}:{settings.port}{HEALTH_PATH}")
    logger.info(
        "Authentication mode: %s",
        "gateway (header-based)" if settings.is_gateway_mode else "env (environment variables)",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
