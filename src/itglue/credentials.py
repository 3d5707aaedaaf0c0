"""
Credential resolution for the IT Glue client.

Credentials come from one of two places:

- **env** (ambient) mode: process environment variables, read on every
  tool call so a long-lived stdio session picks up the current values.
- **gateway** mode: HTTP headers injected by an MCP gateway in front of this
  server. Header credentials are bound to a single request and are never
  written back into the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

import httpx

from .client import DEFAULT_REGION, ITGlueClient

# Environment variables
API_KEY_ENV = "ITGLUE_API_KEY"
API_KEY_FALLBACK_ENV = "X_API_KEY"
REGION_ENV = "ITGLUE_REGION"
BASE_URL_ENV = "ITGLUE_BASE_URL"

# Gateway headers
API_KEY_HEADER = "X-ITGlue-API-Key"
API_KEY_FALLBACK_HEADER = "X-API-Key"
BASE_URL_HEADER = "X-ITGlue-Base-URL"
REGION_HEADER = "X-ITGlue-Region"


class MissingCredentialsError(Exception):
    """Raised when no IT Glue API key could be resolved."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "No API credentials provided. Please configure your IT Glue API key "
            f"via the {API_KEY_ENV} or {API_KEY_FALLBACK_ENV} environment variable."
        )


@dataclass(frozen=True)
class Credentials:
    """IT Glue credentials for a single request."""
    api_key: Optional[str] = None
    region: str = DEFAULT_REGION
    base_url: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        """Read credentials from the environment (or the given mapping)."""
        environ = os.environ if environ is None else environ
        return cls(
            api_key=environ.get(API_KEY_ENV) or environ.get(API_KEY_FALLBACK_ENV) or None,
            region=environ.get(REGION_ENV) or DEFAULT_REGION,
            base_url=environ.get(BASE_URL_ENV) or None,
        )

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        fallback: Optional["Credentials"] = None
    ) -> "Credentials":
        """
        Read credentials from gateway request headers.

        Args:
            headers: Inbound HTTP headers (any casing)
            fallback: Ambient credentials supplying region and base URL when
                the matching headers are absent (default: from_env())

        Returns:
            Credentials for this request. The API key only ever comes from
            the headers.
        """
        fallback = Credentials.from_env() if fallback is None else fallback
        lowered = {key.lower(): value for key, value in headers.items()}
        return cls(
            api_key=(
                lowered.get(API_KEY_HEADER.lower())
                or lowered.get(API_KEY_FALLBACK_HEADER.lower())
                or None
            ),
            region=lowered.get(REGION_HEADER.lower()) or fallback.region,
            base_url=lowered.get(BASE_URL_HEADER.lower()) or fallback.base_url,
        )

    def __repr__(self) -> str:
        masked = "***" if self.api_key else None
        return (
            f"Credentials(api_key={masked!r}, region={self.region!r}, "
            f"base_url={self.base_url!r})"
        )


def create_client(
    credentials: Credentials,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> ITGlueClient:
    """
    Build an IT Glue client from resolved credentials.

    Raises:
        MissingCredentialsError: If no API key is present
    """
    if not credentials.api_key:
        raise MissingCredentialsError()
    return ITGlueClient(
        api_key=credentials.api_key,
        region=credentials.region or DEFAULT_REGION,
        base_url=credentials.base_url,
        transport=transport,
    )
