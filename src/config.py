"""
Server configuration.

Settings are read from environment variables, optionally loaded from a
``.env`` file in the working directory. Command-line flags in
``run_servers.py`` take precedence over these values.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

TRANSPORTS = ("stdio", "http")
AUTH_MODES = ("env", "gateway")


@dataclass(frozen=True)
class ServerSettings:
    """Process-wide server settings (never credentials)."""
    transport: str = "stdio"
    host: str = "0.0.0.0"
    port: int = 8080
    auth_mode: str = "env"
    log_level: str = "INFO"

    @property
    def is_gateway_mode(self) -> bool:
        return self.auth_mode == "gateway"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        """
        Build settings from the environment.

        Args:
            environ: Mapping to read instead of ``os.environ``. When omitted,
                ``.env`` is loaded first.

        Raises:
            ValueError: On an unknown transport or auth mode, or a
                non-numeric port
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        transport = environ.get("MCP_TRANSPORT", "stdio").lower()
        if transport not in TRANSPORTS:
            raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'http'")

        auth_mode = environ.get("AUTH_MODE", "env").lower()
        if auth_mode not in AUTH_MODES:
            raise ValueError(f"Unknown auth mode: {auth_mode}. Use 'env' or 'gateway'")

        return cls(
            transport=transport,
            host=environ.get("MCP_HTTP_HOST", "0.0.0.0"),
            port=int(environ.get("MCP_HTTP_PORT", "8080")),
            auth_mode=auth_mode,
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        )
