"""
Validation Module - Black Box Interface

Purpose: Guard handler entry points against malformed caller input
Interface: require_*() checks, optional(), ArgumentError
Hidden: Format patterns

Checks return the value unchanged or raise ArgumentError.
"""

from twentyi_mcp.errors import ArgumentError

from .validators import (
    optional,
    require_boolean,
    require_domain_name,
    require_email,
    require_enum_member,
    require_ip_address,
    require_object,
    require_password,
    require_positive_number,
    require_string,
    require_string_array,
    require_url,
)

__all__ = [
    "ArgumentError",
    "optional",
    "require_boolean",
    "require_domain_name",
    "require_email",
    "require_enum_member",
    "require_ip_address",
    "require_object",
    "require_password",
    "require_positive_number",
    "require_string",
    "require_string_array",
    "require_url",
]
