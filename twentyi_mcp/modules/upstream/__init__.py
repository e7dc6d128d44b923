"""
Upstream Module - Black Box Interface

Purpose: Talk to the 20i REST API
Interface: UpstreamClient.get/post/put/patch/delete -> UpstreamResponse
Hidden: httpx, auth header encoding, response-shape sniffing

The only module permitted to speak HTTP to 20i.
"""

from .client import UpstreamClient, build_auth_header
from .normalize import NO_DEFAULT, normalize_response, strip_markup
from .responses import UpstreamResponse

__all__ = [
    "NO_DEFAULT",
    "UpstreamClient",
    "UpstreamResponse",
    "build_auth_header",
    "normalize_response",
    "strip_markup",
]
