"""
API Module - Black Box Interface

Purpose: Serve discovery and invocation over HTTP
Interface: create_app(), STATUS_BY_KIND, request/response models
Hidden: Route wiring, API-key dependency, error status mapping

The app holds no state besides the dispatcher and auth module it is
built with.
"""

from .app import STATUS_BY_KIND, create_app
from .models import (
    CapabilitiesResponse,
    CapabilityInfo,
    ErrorBody,
    HealthResponse,
    InvokeRequest,
    InvokeResponse,
)

__all__ = [
    "STATUS_BY_KIND",
    "CapabilitiesResponse",
    "CapabilityInfo",
    "ErrorBody",
    "HealthResponse",
    "InvokeRequest",
    "InvokeResponse",
    "create_app",
]
