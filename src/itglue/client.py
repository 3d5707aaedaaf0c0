"""
Minimal asynchronous client for the IT Glue REST API.

IT Glue speaks JSON:API: every response is an envelope of the form
``{"data": ..., "meta": ..., "errors": ...}`` with kebab-case attribute
names. This client issues a single GET per call, flattens each resource into
a plain dictionary with camelCase keys and normalises pagination metadata so
callers never have to deal with the envelope directly.

The client is read-only and keeps no state between calls: every request
opens its own ``httpx.AsyncClient``.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from .casing import normalize_keys_deep, to_kebab

logger = logging.getLogger(__name__)

REGION_URLS: Dict[str, str] = {
    "us": "https://api.itglue.com",
    "eu": "https://api.eu.itglue.com",
    "au": "https://api.au.itglue.com",
}

DEFAULT_REGION = "us"

JSON_API_MEDIA_TYPE = "application/vnd.api+json"


class ITGlueError(Exception):
    """Base class for errors reported by the IT Glue API."""


class UpstreamHttpError(ITGlueError):
    """
    Raised when IT Glue answers with a non-2xx status.
    Carries the status code and the raw response body.
    """

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"IT Glue API error ({status}): {body}")


class UpstreamApiError(ITGlueError):
    """
    Raised when the response envelope carries JSON:API error objects,
    regardless of the HTTP status.
    """

    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__(f"IT Glue API error: {', '.join(messages)}")


def _stringify(value: Any) -> str:
    """Render a query value the way the IT Glue API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


def build_filter_params(filter_: Dict[str, Any]) -> Dict[str, str]:
    """Kebab-case filter keys and stringify their values, dropping ``None``."""
    return {
        to_kebab(key): _stringify(value)
        for key, value in filter_.items()
        if value is not None
    }


def build_query_string(params: Dict[str, Any]) -> str:
    """
    Serialize request parameters into a JSON:API query string.

    Args:
        params: Mapping that may contain a ``filter`` dict, a ``page`` dict
            with ``size``/``number`` and any scalar top-level values
            (``sort``, ``show_password``, ...)

    Returns:
        The encoded query string prefixed with ``?``, or an empty string
        when there is nothing to send
    """
    pairs: List[Tuple[str, str]] = []

    for key, value in params.items():
        if value is None:
            continue

        if key == "filter" and isinstance(value, dict):
            for filter_key, filter_value in build_filter_params(value).items():
                pairs.append((f"filter[{filter_key}]", filter_value))
        elif key == "page" and isinstance(value, dict):
            # Zero is treated like "not set", matching the upstream defaults
            if value.get("size"):
                pairs.append(("page[size]", _stringify(value["size"])))
            if value.get("number"):
                pairs.append(("page[number]", _stringify(value["number"])))
        elif isinstance(value, (str, int, float)):
            pairs.append((key, _stringify(value)))

    if not pairs:
        return ""
    return f"?{urlencode(pairs)}"


def deserialize_resource(resource: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a JSON:API resource into ``{id, type, **camelCaseAttributes}``."""
    result: Dict[str, Any] = {
        "id": resource.get("id"),
        "type": resource.get("type"),
    }
    attributes = resource.get("attributes")
    if attributes:
        result.update(normalize_keys_deep(attributes))
    return result


def parse_pagination(meta: Optional[Dict[str, Any]], item_count: int) -> Dict[str, Any]:
    """Normalise JSON:API pagination metadata, filling in defaults."""
    meta = meta or {}
    return {
        "currentPage": meta.get("current-page") or 1,
        "nextPage": meta.get("next-page") or None,
        "prevPage": meta.get("prev-page") or None,
        "totalPages": meta.get("total-pages") or 1,
        "totalCount": meta.get("total-count") or item_count,
    }


class ITGlueClient:
    """
    Client for a single IT Glue account.

    The API key is sent as the ``x-api-key`` header. The base URL comes from
    the region table unless ``base_url`` overrides it.
    """

    def __init__(
        self,
        api_key: str,
        region: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: IT Glue API key
            region: One of ``us``, ``eu`` or ``au`` (default: us)
            base_url: Explicit API root, overrides the region lookup
            transport: Optional httpx transport (mostly for tests)

        Raises:
            ValueError: If the region is not one of the known regions and
                no base URL was given
        """
        self.api_key = api_key
        self.region = region or DEFAULT_REGION
        if base_url:
            self.base_url = base_url.rstrip("/")
        elif self.region in REGION_URLS:
            self.base_url = REGION_URLS[self.region]
        else:
            raise ValueError(
                f"Unsupported IT Glue region '{self.region}'. "
                f"Use one of: {', '.join(REGION_URLS)}"
            )
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "Content-Type": JSON_API_MEDIA_TYPE,
            "Accept": JSON_API_MEDIA_TYPE,
        }

    async def request(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        GET a collection or resource and normalise the envelope.

        Args:
            path: API path, e.g. ``/organizations``
            params: Query parameters (see ``build_query_string``)

        Returns:
            ``{"data": [resource, ...], "meta": pagination}``. A single
            resource response is wrapped into a one-element list.

        Raises:
            UpstreamHttpError: On a non-2xx status
            UpstreamApiError: When the envelope reports errors
            httpx.HTTPError: On transport failures
        """
        query = build_query_string(params or {})
        url = f"{self.base_url}{path}{query}"
        logger.debug("GET %s%s", path, query)

        async with httpx.AsyncClient(transport=self._transport) as http:
            response = await http.get(url, headers=self._headers())

        if not response.is_success:
            raise UpstreamHttpError(response.status_code, response.text)

        payload = response.json()

        errors = payload.get("errors")
        if errors:
            raise UpstreamApiError(
                [error.get("detail") or error.get("title") or "" for error in errors]
            )

        raw = payload.get("data")
        if raw is None:
            resources = []
        elif isinstance(raw, list):
            resources = raw
        else:
            resources = [raw]

        data = [deserialize_resource(resource) for resource in resources]
        return {
            "data": data,
            "meta": parse_pagination(payload.get("meta"), len(data)),
        }

    async def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        GET a single resource.

        Returns:
            The normalised resource, or None if IT Glue returned no data
        """
        result = await self.request(path, params)
        if not result["data"]:
            return None
        return result["data"][0]
