"""
MCP Tool Definitions for IT Glue.

Static catalog returned for tools/list. Every schema follows JSON Schema and
the MCP tool format (name, description, inputSchema).
"""

from typing import Any, Dict, List, Optional

from mcp import types


def _paging_properties(sort_description: str) -> Dict[str, Any]:
    return {
        "page_size": {
            "type": "number",
            "description": "Number of results per page (max 1000, default 50)",
        },
        "page_number": {
            "type": "number",
            "description": "Page number to retrieve (default 1)",
        },
        "sort": {
            "type": "string",
            "description": sort_description,
        },
    }


_SORT = "Sort field (prefix with - for descending)"


TOOLS: List[Dict[str, Any]] = [
    # Organizations
    {
        "name": "search_organizations",
        "description": "Search for organizations in IT Glue with optional filtering",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Filter by organization name (partial match)",
                },
                "organization_type_id": {
                    "type": "number",
                    "description": "Filter by organization type ID",
                },
                "organization_status_id": {
                    "type": "number",
                    "description": "Filter by organization status ID",
                },
                "psa_id": {
                    "type": "string",
                    "description": "Filter by PSA integration ID",
                },
                **_paging_properties("Sort field (prefix with - for descending, e.g., '-name')"),
            },
            "required": [],
        },
    },
    {
        "name": "get_organization",
        "description": "Get a specific organization by ID from IT Glue",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The organization ID"},
            },
            "required": ["id"],
        },
    },
    # Configurations
    {
        "name": "search_configurations",
        "description": "Search for configurations (devices/assets) in IT Glue",
        "inputSchema": {
            "type": "object",
            "properties": {
                "organization_id": {
                    "type": "number",
                    "description": "Filter by organization ID",
                },
                "name": {
                    "type": "string",
                    "description": "Filter by configuration name (partial match)",
                },
                "configuration_type_id": {
                    "type": "number",
                    "description": "Filter by configuration type ID",
                },
                "configuration_status_id": {
                    "type": "number",
                    "description": "Filter by configuration status ID",
                },
                "serial_number": {
                    "type": "string",
                    "description": "Filter by serial number",
                },
                "rmm_id": {
                    "type": "string",
                    "description": "Filter by RMM integration ID",
                },
                "psa_id": {
                    "type": "string",
                    "description": "Filter by PSA integration ID",
                },
                **_paging_properties(_SORT),
            },
            "required": [],
        },
    },
    {
        "name": "get_configuration",
        "description": "Get a specific configuration (device/asset) by ID from IT Glue",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The configuration ID"},
            },
            "required": ["id"],
        },
    },
    # Passwords
    {
        "name": "search_passwords",
        "description": (
            "Search for password entries in IT Glue "
            "(returns metadata only, not actual passwords)"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "organization_id": {
                    "type": "number",
                    "description": "Filter by organization ID",
                },
                "name": {
                    "type": "string",
                    "description": "Filter by password entry name (partial match)",
                },
                "password_category_id": {
                    "type": "number",
                    "description": "Filter by password category ID",
                },
                "url": {"type": "string", "description": "Filter by URL"},
                "username": {"type": "string", "description": "Filter by username"},
                **_paging_properties(_SORT),
            },
            "required": [],
        },
    },
    {
        "name": "get_password",
        "description": (
            "Get a specific password entry by ID from IT Glue "
            "(includes the actual password value)"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The password entry ID"},
                "show_password": {
                    "type": "boolean",
                    "description": "Whether to include the actual password value (default true)",
                },
            },
            "required": ["id"],
        },
    },
    # Documents
    {
        "name": "search_documents",
        "description": "Search for documents belonging to an organization in IT Glue",
        "inputSchema": {
            "type": "object",
            "properties": {
                "organization_id": {
                    "type": "number",
                    "description": "Required: The organization whose documents to search",
                },
                "name": {
                    "type": "string",
                    "description": "Filter by document name (partial match)",
                },
                **_paging_properties(_SORT),
            },
            "required": ["organization_id"],
        },
    },
    # Flexible Assets
    {
        "name": "search_flexible_assets",
        "description": (
            "Search for flexible assets in IT Glue "
            "(requires flexible_asset_type_id filter)"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "flexible_asset_type_id": {
                    "type": "number",
                    "description": "Required: The flexible asset type ID to search within",
                },
                "organization_id": {
                    "type": "number",
                    "description": "Filter by organization ID",
                },
                "name": {
                    "type": "string",
                    "description": "Filter by flexible asset name (partial match)",
                },
                **_paging_properties(_SORT),
            },
            "required": ["flexible_asset_type_id"],
        },
    },
    # Health check
    {
        "name": "itglue_health_check",
        "description": "Check connectivity to IT Glue API by fetching organization types",
        "inputSchema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
]


def get_tools() -> List[Dict[str, Any]]:
    """Get all available MCP tools."""
    return TOOLS


def get_tool_by_name(name: str) -> Optional[Dict[str, Any]]:
    """Get a specific tool definition by name."""
    for tool in TOOLS:
        if tool["name"] == name:
            return tool
    return None


def list_mcp_tools() -> List[types.Tool]:
    """Return the catalog as MCP SDK ``Tool`` objects for tools/list."""
    return [
        types.Tool(
            name=tool["name"],
            description=tool["description"],
            inputSchema=tool["inputSchema"],
        )
        for tool in TOOLS
    ]
