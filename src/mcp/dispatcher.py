"""
Tool dispatcher for the IT Glue MCP server.

Maps a tools/call request (tool name + argument mapping) onto a single IT Glue
API call and renders the outcome as MCP text content. Each tool has:

- an argument record (dataclass) that picks the known fields out of the raw
  argument mapping and checks required ones before any network access;
- a handler coroutine that performs the API call.

Every failure is returned as an ``isError`` result; ``dispatch`` never raises.
"""

import json
import logging
from dataclasses import dataclass, fields
from typing import Any, Awaitable, Callable, ClassVar, Dict, Optional, Tuple, Type
from urllib.parse import quote

import httpx
from mcp import types

from src.itglue.casing import to_camel
from src.itglue.client import ITGlueClient
from src.itglue.credentials import Credentials, MissingCredentialsError, create_client

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
DEFAULT_PAGE_NUMBER = 1


class MissingArgumentError(Exception):
    """Raised when a tool is called without one of its required arguments."""

    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(message)


class UnknownToolError(Exception):
    """Raised for a tool name that is not in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ResourceNotFoundError(Exception):
    """Raised when a by-ID lookup comes back empty."""


# =============================================================================
# Argument records
# =============================================================================

@dataclass
class ToolArguments:
    """Base record; subclasses declare their fields as optional attributes."""

    # argument name -> error message when missing
    required: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_arguments(cls, arguments: Dict[str, Any]) -> "ToolArguments":
        """
        Build the record from a raw argument mapping.

        Unknown keys are dropped. Required arguments must be present and
        truthy.

        Raises:
            MissingArgumentError: If a required argument is absent
        """
        known = {field.name for field in fields(cls)}
        record = cls(**{key: value for key, value in arguments.items() if key in known})
        for name, message in cls.required.items():
            if not getattr(record, name):
                raise MissingArgumentError(name, message)
        return record


@dataclass
class SearchArguments(ToolArguments):
    """Paging and sorting shared by every search tool."""
    page_size: Optional[int] = None
    page_number: Optional[int] = None
    sort: Optional[str] = None

    path: ClassVar[str] = ""
    # fields consumed elsewhere (path, paging) instead of the filter
    non_filter_fields: ClassVar[frozenset] = frozenset({"page_size", "page_number", "sort"})

    def collection_path(self) -> str:
        return self.path

    def filters(self) -> Dict[str, Any]:
        """Truthy filter fields keyed by their camelCase filter name."""
        result = {}
        for field in fields(self):
            if field.name in self.non_filter_fields:
                continue
            value = getattr(self, field.name)
            if value:
                result[to_camel(field.name.replace("_", "-"))] = value
        return result

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        filter_ = self.filters()
        if filter_:
            params["filter"] = filter_
        if self.sort:
            params["sort"] = self.sort
        params["page"] = {
            "size": self.page_size or DEFAULT_PAGE_SIZE,
            "number": self.page_number or DEFAULT_PAGE_NUMBER,
        }
        return params


@dataclass
class OrganizationSearch(SearchArguments):
    name: Optional[str] = None
    organization_type_id: Optional[int] = None
    organization_status_id: Optional[int] = None
    psa_id: Optional[str] = None

    path: ClassVar[str] = "/organizations"


@dataclass
class ConfigurationSearch(SearchArguments):
    organization_id: Optional[int] = None
    name: Optional[str] = None
    configuration_type_id: Optional[int] = None
    configuration_status_id: Optional[int] = None
    serial_number: Optional[str] = None
    rmm_id: Optional[str] = None
    psa_id: Optional[str] = None

    path: ClassVar[str] = "/configurations"


@dataclass
class PasswordSearch(SearchArguments):
    organization_id: Optional[int] = None
    name: Optional[str] = None
    password_category_id: Optional[int] = None
    url: Optional[str] = None
    username: Optional[str] = None

    path: ClassVar[str] = "/passwords"

    def to_params(self) -> Dict[str, Any]:
        params = super().to_params()
        # Search results never carry the secret itself
        params["show_password"] = False
        return params


@dataclass
class DocumentSearch(SearchArguments):
    """Documents are only listed through their organization."""
    organization_id: Optional[int] = None
    name: Optional[str] = None

    required: ClassVar[Dict[str, str]] = {
        "organization_id": "organization_id is required",
    }
    non_filter_fields: ClassVar[frozenset] = (
        SearchArguments.non_filter_fields | {"organization_id"}
    )

    def collection_path(self) -> str:
        org_id = quote(str(self.organization_id), safe="")
        return f"/organizations/{org_id}/relationships/documents"


@dataclass
class FlexibleAssetSearch(SearchArguments):
    flexible_asset_type_id: Optional[int] = None
    organization_id: Optional[int] = None
    name: Optional[str] = None

    path: ClassVar[str] = "/flexible_assets"
    required: ClassVar[Dict[str, str]] = {
        "flexible_asset_type_id": "flexible_asset_type_id is required",
    }


@dataclass
class GetArguments(ToolArguments):
    id: Optional[str] = None

    kind: ClassVar[str] = "Resource"
    path: ClassVar[str] = ""

    def resource_path(self) -> str:
        return f"{self.path}/{quote(str(self.id), safe='')}"

    def query_params(self) -> Dict[str, Any]:
        return {}


@dataclass
class OrganizationGet(GetArguments):
    kind: ClassVar[str] = "Organization"
    path: ClassVar[str] = "/organizations"
    required: ClassVar[Dict[str, str]] = {"id": "Organization ID is required"}


@dataclass
class ConfigurationGet(GetArguments):
    kind: ClassVar[str] = "Configuration"
    path: ClassVar[str] = "/configurations"
    required: ClassVar[Dict[str, str]] = {"id": "Configuration ID is required"}


@dataclass
class PasswordGet(GetArguments):
    show_password: Optional[bool] = None

    kind: ClassVar[str] = "Password"
    path: ClassVar[str] = "/passwords"
    required: ClassVar[Dict[str, str]] = {"id": "Password ID is required"}

    def query_params(self) -> Dict[str, Any]:
        # Only an explicit False hides the secret
        return {"show_password": self.show_password is not False}


@dataclass
class HealthCheckArguments(ToolArguments):
    pass


# =============================================================================
# Handlers
# =============================================================================

Handler = Callable[[ITGlueClient, Any], Awaitable[Any]]


async def _search(client: ITGlueClient, arguments: SearchArguments) -> Dict[str, Any]:
    return await client.request(arguments.collection_path(), arguments.to_params())


async def _get(client: ITGlueClient, arguments: GetArguments) -> Dict[str, Any]:
    resource = await client.get(arguments.resource_path(), arguments.query_params())
    if resource is None:
        raise ResourceNotFoundError(f"{arguments.kind} {arguments.id} not found")
    return resource


async def _health_check(client: ITGlueClient, arguments: HealthCheckArguments) -> Dict[str, Any]:
    result = await client.request("/organization_types", {"page": {"size": 1}})
    return {
        "status": "ok",
        "message": "IT Glue API is reachable",
        "region": client.region,
        "organizationTypesFound": result["meta"]["totalCount"],
    }


HANDLERS: Dict[str, Tuple[Type[ToolArguments], Handler]] = {
    "search_organizations": (OrganizationSearch, _search),
    "get_organization": (OrganizationGet, _get),
    "search_configurations": (ConfigurationSearch, _search),
    "get_configuration": (ConfigurationGet, _get),
    "search_passwords": (PasswordSearch, _search),
    "get_password": (PasswordGet, _get),
    "search_documents": (DocumentSearch, _search),
    "search_flexible_assets": (FlexibleAssetSearch, _search),
    "itglue_health_check": (HealthCheckArguments, _health_check),
}


# =============================================================================
# Dispatch
# =============================================================================

def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    """Wrap text into a single-block MCP tool result."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def error_result(message: str) -> types.CallToolResult:
    return text_result(message, is_error=True)


async def dispatch(
    name: str,
    arguments: Optional[Dict[str, Any]],
    credentials: Credentials,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> types.CallToolResult:
    """
    Execute a tool call.

    Args:
        name: Tool name from the catalog
        arguments: Raw tool arguments (may be None)
        credentials: Credentials resolved for this request
        transport: Optional httpx transport handed to the API client

    Returns:
        CallToolResult with one text block; ``isError`` is set on failure
    """
    arguments = arguments or {}

    try:
        client = create_client(credentials, transport=transport)

        route = HANDLERS.get(name)
        if route is None:
            raise UnknownToolError(name)
        record_type, handler = route

        record = record_type.from_arguments(arguments)
        result = await handler(client, record)
    except MissingCredentialsError as e:
        logger.warning("Tool %s called without IT Glue credentials", name)
        return error_result(f"Error: {e}")
    except UnknownToolError as e:
        logger.warning("Unknown tool requested: %s", name)
        return error_result(str(e))
    except MissingArgumentError as e:
        return error_result(f"Error: {e}")
    except Exception as e:
        logger.error(f"MCP tool error: {name} - {e}")
        return error_result(f"Error: {e}")

    return text_result(json.dumps(result, indent=2, ensure_ascii=False))
