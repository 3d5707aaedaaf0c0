"""
IT Glue API access.

Exposes the read-only JSON:API client together with the key casing helpers
and credential resolution used by the MCP server.
"""

from .casing import to_camel, to_kebab, normalize_keys_deep
from .client import (
    ITGlueClient,
    ITGlueError,
    UpstreamHttpError,
    UpstreamApiError,
    REGION_URLS,
    build_query_string,
)
from .credentials import Credentials, MissingCredentialsError, create_client

__all__ = [
    # Casing
    "to_camel",
    "to_kebab",
    "normalize_keys_deep",
    # Client
    "ITGlueClient",
    "ITGlueError",
    "UpstreamHttpError",
    "UpstreamApiError",
    "REGION_URLS",
    "build_query_string",
    # Credentials
    "Credentials",
    "MissingCredentialsError",
    "create_client",
]
