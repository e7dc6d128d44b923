"""
Upstream response normalization.

The 20i API answers the same semantic outcome in several encodings. The
observed cases, and what each becomes:

    1. JSON success body                  -> ok, data=body
    2. Empty body / {} / null             -> ok, data=<call default> (or {})
    3. Bare ID (number or string) body    -> ok, data={"id": value}
    4. One-element array, singular call   -> ok, data=array[0]
    5. HTML page (any status)             -> UpstreamProtocolError, tag-free excerpt
    6. Transport failure / timeout        -> TransportError (see client.py)
    7. Error status with a body           -> UpstreamRejected, cause={status, upstream_message}

A 2xx body of the form {"error": ...} or {"status": "error"} is also
UpstreamRejected. Non-JSON text on a 2xx status is UpstreamProtocolError:
it is never guessed at.

Everything here is a pure function of the response, so classification is
deterministic.
"""

import copy
import html
import json
import re
from typing import Any, Collection, Optional

import httpx

from twentyi_mcp.errors import ErrorKind

from .responses import UpstreamResponse


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()

EXCERPT_LENGTH = 200

# 20i reseller ids are UUIDs; created resources come back as numeric ids
ID_PATTERN = re.compile(r"^(?:[a-f0-9-]{36}|\d+)$", re.IGNORECASE)

_HTML_START = re.compile(r"^\s*<(?:!doctype\s+html|html|head|body)\b", re.IGNORECASE)
_SCRIPT_OR_STYLE = re.compile(r"<(script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def looks_like_html(content_type: str, text: str) -> bool:
    if "text/html" in (content_type or "").lower():
        return True
    return bool(_HTML_START.match(text or ""))


def strip_markup(text: str, limit: int = EXCERPT_LENGTH) -> str:
    """Collapse an HTML document to a short plain-text excerpt."""
    cleaned = _SCRIPT_OR_STYLE.sub(" ", text or "")
    cleaned = _TAG.sub(" ", cleaned)
    # Unescaping can produce new tags (&lt;b&gt;), so strip once more after it
    cleaned = _TAG.sub(" ", html.unescape(cleaned))
    cleaned = cleaned.replace("<", " ").replace(">", " ")
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if len(cleaned) > limit:
        cleaned = cleaned[:limit].rstrip() + "..."
    return cleaned


def _excerpt(text: str, limit: int = EXCERPT_LENGTH) -> str:
    text = _WHITESPACE.sub(" ", text or "").strip()
    if len(text) > limit:
        return text[:limit].rstrip() + "..."
    return text


def extract_upstream_message(body: Any) -> Optional[str]:
    """Best-effort error message from a structured upstream body."""
    if isinstance(body, str):
        return _excerpt(body) or None
    if not isinstance(body, dict):
        return None

    for key in ("message", "error_description", "error", "errors", "detail"):
        value = body.get(key)
        if not value:
            continue
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            nested = extract_upstream_message(value)
            if nested:
                return nested
        if isinstance(value, list):
            parts = [extract_upstream_message(v) or str(v) for v in value]
            return "; ".join(p for p in parts if p)
        return str(value)
    return None


def _is_empty(body: Any) -> bool:
    return body is None or body == {} or (isinstance(body, str) and not body.strip())


def _is_error_body(body: Any) -> bool:
    if not isinstance(body, dict):
        return False
    return bool(body.get("error")) or body.get("status") == "error"


def normalize_response(
    response: httpx.Response,
    default: Any = NO_DEFAULT,
    singular: bool = False,
    default_on_status: Collection[int] = (),
) -> UpstreamResponse:
    """
    Collapse an upstream HTTP response into an UpstreamResponse.

    Args:
        response: Raw httpx response
        default: Data to return when the body is empty, for operations where
            "no data" is a valid success (e.g. a zero balance)
        singular: The operation returns one object; unwrap one-element arrays
        default_on_status: Error statuses that also mean "no data" for this
            operation; they return default instead of failing

    Returns:
        UpstreamResponse
    """
    status = response.status_code
    content_type = response.headers.get("content-type", "")
    text = response.text
    has_default = default is not NO_DEFAULT

    if has_default and status in default_on_status:
        return UpstreamResponse.success(copy.deepcopy(default))

    if looks_like_html(content_type, text):
        excerpt = strip_markup(text)
        return UpstreamResponse.failure(
            ErrorKind.UPSTREAM_PROTOCOL_ERROR,
            f"Upstream returned an HTML page instead of JSON (HTTP {status}): {excerpt}",
            {"status": status},
        )

    if not text.strip():
        body: Any = None
    else:
        try:
            body = json.loads(text)
        except ValueError:
            if status >= 400 or ID_PATTERN.match(text.strip()):
                body = text
            else:
                return UpstreamResponse.failure(
                    ErrorKind.UPSTREAM_PROTOCOL_ERROR,
                    f"Upstream returned an unparseable response (HTTP {status}): {_excerpt(text, 100)}",
                    {"status": status},
                )

    if status >= 400:
        upstream_message = (
            extract_upstream_message(body) or response.reason_phrase or "Unknown upstream error"
        )
        return UpstreamResponse.failure(
            ErrorKind.UPSTREAM_REJECTED,
            f"Upstream rejected the request (HTTP {status}): {upstream_message}",
            {"status": status, "upstream_message": upstream_message},
        )

    if _is_error_body(body):
        upstream_message = extract_upstream_message(body) or "Unknown upstream error"
        return UpstreamResponse.failure(
            ErrorKind.UPSTREAM_REJECTED,
            f"Upstream reported an error: {upstream_message}",
            {"status": status, "upstream_message": upstream_message},
        )

    if singular and isinstance(body, list):
        body = body[0] if body else None

    if _is_empty(body):
        return UpstreamResponse.success(copy.deepcopy(default) if has_default else {})

    if isinstance(body, str) and ID_PATTERN.match(body.strip()):
        return UpstreamResponse.success({"id": body.strip()})

    if isinstance(body, int) and not isinstance(body, bool) and ID_PATTERN.match(text.strip()):
        return UpstreamResponse.success({"id": body})

    return UpstreamResponse.success(body)
