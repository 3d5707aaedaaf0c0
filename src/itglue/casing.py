"""
Key casing helpers for the IT Glue JSON:API.

IT Glue uses kebab-case attribute names ("organization-type-id") while the
tool-facing side of this server speaks camelCase ("organizationTypeId").
"""

import re
from typing import Any, Dict

_KEBAB_SEGMENT = re.compile(r"-([a-z])")
_UPPERCASE = re.compile(r"[A-Z]")


def to_camel(value: str) -> str:
    """Convert a kebab-case string to camelCase."""
    return _KEBAB_SEGMENT.sub(lambda match: match.group(1).upper(), value)


def to_kebab(value: str) -> str:
    """Convert a camelCase string to kebab-case."""
    return _UPPERCASE.sub(lambda match: f"-{match.group(0).lower()}", value)


def normalize_keys_deep(mapping: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``mapping`` with every key converted to camelCase.

    Nested dictionaries are converted recursively. Lists are kept as-is,
    including any dictionaries inside them.
    """
    result: Dict[str, Any] = {}
    for key, value in mapping.items():
        if isinstance(value, dict):
            result[to_camel(key)] = normalize_keys_deep(value)
        else:
            result[to_camel(key)] = value
    return result
