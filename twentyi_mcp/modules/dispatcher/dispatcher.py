"""
Protocol dispatcher: discovery and invocation over a frozen registry.

Transport-agnostic. The MCP and HTTP bindings both call list_capabilities()
and invoke(); neither keeps state of its own between calls.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from twentyi_mcp.errors import ArgumentError, ErrorKind, InvocationError
from twentyi_mcp.modules.registry import CapabilityDescriptor, CapabilityRegistry
from twentyi_mcp.modules.upstream import UpstreamResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one invocation."""

    ok: bool
    data: Any = None
    error: Optional[InvocationError] = None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @classmethod
    def success(cls, data: Any) -> "InvocationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "InvocationResult":
        return cls(ok=False, error=InvocationError(kind, message, details))

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error.to_dict()}


class ProtocolDispatcher:
    """
    Routes invocations to capability handlers.

    Failure translation:
        unknown name          -> UnknownCapability (no handler runs)
        ArgumentError         -> InvalidArgument, with the field name
        InvocationError       -> its own kind
        UpstreamResponse(ok=False) -> the response's kind
        anything else         -> InternalError, logged here with traceback
    """

    def __init__(self, registry: CapabilityRegistry):
        self.registry = registry.freeze()

    def list_capabilities(self) -> List[CapabilityDescriptor]:
        """Every registered descriptor, in registration order."""
        return self.registry.descriptors()

    async def invoke(self, name: Any, arguments: Any = None) -> InvocationResult:
        """
        Invoke a capability by name.

        Args:
            name: Capability name
            arguments: Named arguments (None is treated as no arguments)

        Returns:
            InvocationResult; this method does not raise for handler failures
        """
        entry = self.registry.get(name) if isinstance(name, str) else None
        if entry is None:
            logger.info(f"Unknown capability requested: {name!r}")
            return InvocationResult.failure(
                ErrorKind.UNKNOWN_CAPABILITY,
                f"Unknown capability: {name}",
                {"name": name},
            )

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return InvocationResult.failure(
                ErrorKind.INVALID_ARGUMENT,
                "Invalid argument 'arguments': must be an object",
                {"argument": "arguments", "reason": "must be an object"},
            )

        started = time.perf_counter()
        result = await self._run(name, entry.handler, dict(arguments))
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        status = "ok" if result.ok else result.kind.value
        logger.info(f"Invoked {name} -> {status} in {elapsed_ms}ms")
        return result

    async def _run(self, name: str, handler, arguments: Dict[str, Any]) -> InvocationResult:
        try:
            outcome = await handler(arguments)
        except ArgumentError as e:
            return InvocationResult.failure(
                ErrorKind.INVALID_ARGUMENT,
                f"Invalid argument '{e.argument_name}': {e.reason}",
                {"argument": e.argument_name, "reason": e.reason},
            )
        except InvocationError as e:
            return InvocationResult(ok=False, error=e)
        except Exception:
            logger.exception(f"Capability '{name}' raised an unexpected error")
            return InvocationResult.failure(
                ErrorKind.INTERNAL_ERROR,
                f"Capability '{name}' failed with an internal error",
            )

        if isinstance(outcome, UpstreamResponse):
            if outcome.ok:
                return InvocationResult.success(outcome.data)
            return InvocationResult.failure(outcome.kind, outcome.message, outcome.cause)

        return InvocationResult.success(outcome)
