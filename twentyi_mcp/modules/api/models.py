"""
twentyi-mcp HTTP binding data models.

These models define the request and response bodies of the HTTP
surface. Capability data itself is passed through untyped.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from twentyi_mcp.errors import ErrorKind

# Request Models (API Input)


class InvokeRequest(BaseModel):
    """Request to invoke a capability."""

    name: str = Field(..., description="Capability name", min_length=1)
    arguments: Dict[str, Any] = Field(
        default_factory=dict, description="Named arguments for the capability"
    )


# Response Models (API Output)


class ArgumentSchema(BaseModel):
    """JSON Schema of a capability's arguments."""

    type: str = "object"
    properties: Dict[str, Any] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


class CapabilityInfo(BaseModel):
    """Advertised metadata of one capability."""

    name: str
    description: str
    inputSchema: ArgumentSchema


class CapabilitiesResponse(BaseModel):
    """Discovery response."""

    capabilities: List[CapabilityInfo]
    count: int


class ErrorBody(BaseModel):
    """Failure detail of an invocation."""

    kind: ErrorKind
    message: str
    details: Optional[Dict[str, Any]] = None


class InvokeResponse(BaseModel):
    """Invocation response; exactly one of data or error is meaningful."""

    ok: bool
    data: Any = None
    error: Optional[ErrorBody] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status", pattern="^(healthy|unhealthy)$")
    capabilities: int = Field(..., description="Number of registered capabilities")
    modules: List[str] = Field(default_factory=list, description="Loaded capability modules")
    version: str
