"""
Argument validators for capability handlers.

Every check is synchronous and side-effect free. It either returns the value
it was given, unchanged, or raises exactly one ArgumentError naming the field.
Object-shaped arguments are validated field by field by calling these in
sequence, using dotted field names such as "contact.email".
"""

import ipaddress
import math
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar
from urllib.parse import urlparse

from twentyi_mcp.errors import ArgumentError

T = TypeVar("T")

# Labels of 1-63 chars, no leading/trailing hyphen, alphabetic TLD of 2+ chars
DOMAIN_PATTERN = re.compile(
    r"^(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$"
)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 8


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def require_string(value: Any, field_name: str) -> str:
    """Non-empty string (whitespace-only counts as empty)."""
    if not isinstance(value, str):
        raise ArgumentError(field_name, f"must be a non-empty string, got {_type_name(value)}")
    if not value.strip():
        raise ArgumentError(field_name, "must be a non-empty string")
    return value


def require_domain_name(value: Any, field_name: str) -> str:
    domain = require_string(value, field_name)
    if len(domain) > 253 or not DOMAIN_PATTERN.match(domain):
        raise ArgumentError(
            field_name,
            "must be a valid domain name (dot-separated labels of letters, digits "
            "and hyphens, ending in an alphabetic TLD)",
        )
    return value


def require_email(value: Any, field_name: str) -> str:
    email = require_string(value, field_name)
    if not EMAIL_PATTERN.match(email):
        raise ArgumentError(field_name, "must be a valid email address (local@domain.tld)")
    return value


def require_positive_number(value: Any, field_name: str) -> float:
    """Finite int or float greater than zero. Booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArgumentError(field_name, f"must be a positive number, got {_type_name(value)}")
    if (isinstance(value, float) and not math.isfinite(value)) or value <= 0:
        raise ArgumentError(field_name, "must be a finite number greater than zero")
    return value


def require_boolean(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ArgumentError(field_name, f"must be a boolean, got {_type_name(value)}")
    return value


def require_string_array(value: Any, field_name: str, min_length: int = 0) -> List[str]:
    """List of strings. Elements are checked with require_string."""
    if not isinstance(value, (list, tuple)):
        raise ArgumentError(field_name, f"must be an array of strings, got {_type_name(value)}")
    if len(value) < min_length:
        raise ArgumentError(field_name, f"must contain at least {min_length} items")
    for index, item in enumerate(value):
        require_string(item, f"{field_name}[{index}]")
    return value


def require_enum_member(value: Any, allowed_values: Sequence[Any], field_name: str) -> Any:
    """
    Value must equal one of allowed_values, with matching type.

    True == 1 in Python, so a plain membership test would let booleans
    through for integer enums; the type check closes that.
    """
    for allowed in allowed_values:
        if type(value) is type(allowed) and value == allowed:
            return value
    allowed_text = ", ".join(str(v) for v in allowed_values)
    raise ArgumentError(field_name, f"must be one of: {allowed_text}")


def require_object(value: Any, field_name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ArgumentError(field_name, f"must be an object, got {_type_name(value)}")
    return value


def require_password(value: Any, field_name: str, min_length: int = MIN_PASSWORD_LENGTH) -> str:
    password = require_string(value, field_name)
    if len(password) < min_length:
        raise ArgumentError(field_name, f"must be at least {min_length} characters long")
    return value


def require_ip_address(value: Any, field_name: str) -> str:
    address = require_string(value, field_name)
    try:
        ipaddress.ip_address(address)
    except ValueError:
        raise ArgumentError(field_name, "must be a valid IPv4 or IPv6 address")
    return value


def require_url(value: Any, field_name: str) -> str:
    url = require_string(value, field_name)
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ArgumentError(field_name, "must be a valid URL with scheme and host")
    return value


def optional(
    value: Any,
    inner_check: Callable[[Any, str], T],
    field_name: str,
) -> Optional[T]:
    """Pass None through untouched, otherwise delegate to inner_check."""
    if value is None:
        return None
    return inner_check(value, field_name)
