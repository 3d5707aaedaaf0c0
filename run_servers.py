"""
Main entry point for running the IT Glue MCP server.

Transport and authentication defaults come from the environment
(MCP_TRANSPORT, MCP_HTTP_HOST, MCP_HTTP_PORT, AUTH_MODE, LOG_LEVEL, also read
from a .env file); command-line flags override them.
"""

import argparse
import dataclasses
import logging
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from src.config import AUTH_MODES, TRANSPORTS, ServerSettings


def configure_logging(level: str = "INFO"):
    """Log to stderr; stdout belongs to the stdio MCP transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run_mcp_server(settings: ServerSettings):
    """Run the MCP server."""
    from src.mcp.mcp_server import run_server, run_http_server

    if settings.transport == "stdio":
        run_server()
    elif settings.transport == "http":
        try:
            run_http_server(settings)
        except KeyboardInterrupt:
            logging.getLogger(__name__).info("Shutting down IT Glue MCP server...")
    else:
        print(f"Unknown transport: {settings.transport}. Use 'stdio' or 'http'", file=sys.stderr)
        sys.exit(1)


def main():
    """Main entry point with CLI argument parsing."""
    try:
        defaults = ServerSettings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    parser = argparse.ArgumentParser(
        description="Run the IT Glue MCP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run MCP server with stdio (for MCP clients like Claude Desktop)
  ITGLUE_API_KEY=... python run_servers.py mcp

  # Run MCP server with HTTP transport
  python run_servers.py mcp --transport http --port 8080

  # Run behind an MCP gateway that injects X-ITGlue-API-Key headers
  python run_servers.py mcp --transport http --auth-mode gateway
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    mcp_parser = subparsers.add_parser("mcp", help="Run the MCP server")
    mcp_parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=defaults.transport,
        help=f"Transport type (default: {defaults.transport})"
    )
    mcp_parser.add_argument("--host", default=defaults.host, help="Host for HTTP transport")
    mcp_parser.add_argument("--port", type=int, default=defaults.port, help="Port for HTTP transport")
    mcp_parser.add_argument(
        "--auth-mode",
        choices=AUTH_MODES,
        default=defaults.auth_mode,
        help="Credential source for HTTP transport: environment or gateway headers"
    )
    mcp_parser.add_argument("--log-level", default=defaults.log_level, help="Logging level")

    args = parser.parse_args()

    if args.command == "mcp":
        settings = dataclasses.replace(
            defaults,
            transport=args.transport,
            host=args.host,
            port=args.port,
            auth_mode=args.auth_mode,
            log_level=args.log_level.upper(),
        )
        configure_logging(settings.log_level)
        run_mcp_server(settings)
    else:
        parser.print_help()
        print("\nNo command specified. Use: mcp", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
