"""
Normalized upstream response.

The only shape that crosses the upstream client boundary. Handlers either
return it as-is (the dispatcher unwraps it) or call unwrap() when they need
the data to drive a follow-up request.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from twentyi_mcp.errors import ErrorKind, InvocationError


@dataclass(frozen=True)
class UpstreamResponse:
    """Tagged union: ok=True carries data, ok=False carries kind/message/cause."""

    ok: bool
    data: Any = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    cause: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, data: Any) -> "UpstreamResponse":
        return cls(ok=True, data=data)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        cause: Optional[Dict[str, Any]] = None,
    ) -> "UpstreamResponse":
        return cls(ok=False, kind=ErrorKind(kind), message=message, cause=cause)

    @property
    def status(self) -> Optional[int]:
        """Upstream HTTP status for failures that carry one."""
        if self.cause:
            return self.cause.get("status")
        return None

    def unwrap(self) -> Any:
        """
        Return data, or raise InvocationError with this failure's kind.

        Raises:
            InvocationError: If ok is False
        """
        if self.ok:
            return self.data
        raise InvocationError(self.kind, self.message or "Upstream request failed", self.cause)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {
            "ok": False,
            "kind": self.kind.value,
            "message": self.message,
            "cause": self.cause,
        }
