"""
Base class for capability modules.

A module is built from an UpstreamClient alone and holds no other state, so
tests can construct one around a client with a mock transport.
"""

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from twentyi_mcp.errors import ErrorKind, InvocationError
from twentyi_mcp.modules.registry import CapabilityDescriptor, Handler
from twentyi_mcp.modules.upstream import UpstreamClient, UpstreamResponse


def segment(value: str) -> str:
    """Encode a caller-supplied value for use as one URL path segment."""
    return quote(value.strip(), safe="")


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None (unset optional arguments)."""
    return {key: value for key, value in data.items() if value is not None}


def explain_status(response: UpstreamResponse, messages: Mapping[int, str]) -> UpstreamResponse:
    """
    Replace the message of a rejected response for specific statuses.

    The kind and cause are kept, so callers still see the upstream status.
    """
    if response.ok or response.kind != ErrorKind.UPSTREAM_REJECTED:
        return response
    message = messages.get(response.status)
    if message is None:
        return response
    return UpstreamResponse.failure(response.kind, message, response.cause)


class BaseCapabilityModule:
    """Shared plumbing for capability modules."""

    name: str = ""

    def __init__(self, client: UpstreamClient):
        """
        Initialize module.

        Args:
            client: Shared upstream client
        """
        self.client = client

    def descriptors(self) -> List[CapabilityDescriptor]:
        raise NotImplementedError

    def handlers(self) -> Dict[str, Handler]:
        raise NotImplementedError

    async def reseller_info(self) -> UpstreamResponse:
        """GET /reseller. 20i may answer with an object, a one-element array or a bare UUID."""
        return await self.client.get("/reseller", singular=True)

    async def reseller_id(self) -> str:
        """
        Resolve the reseller id for reseller-scoped endpoints.

        Looked up per call; nothing is cached between invocations.

        Raises:
            InvocationError: If the lookup fails or carries no id
        """
        info = (await self.reseller_info()).unwrap()
        reseller_id: Optional[Any] = info.get("id") if isinstance(info, dict) else None
        if not reseller_id:
            raise InvocationError(
                ErrorKind.UPSTREAM_PROTOCOL_ERROR,
                "Unable to determine reseller ID from account information",
            )
        return segment(str(reseller_id))
