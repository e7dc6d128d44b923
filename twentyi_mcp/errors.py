"""
Error vocabulary shared by every twentyi-mcp module.

Only the kinds listed in ErrorKind ever reach a caller. Modules convert
whatever they detect into one of these at the boundary where it happens.
"""

import json
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Machine-readable failure kinds surfaced to callers."""

    INVALID_ARGUMENT = "InvalidArgument"
    UNKNOWN_CAPABILITY = "UnknownCapability"
    TRANSPORT_ERROR = "TransportError"
    UPSTREAM_PROTOCOL_ERROR = "UpstreamProtocolError"
    UPSTREAM_REJECTED = "UpstreamRejected"
    INTERNAL_ERROR = "InternalError"


class ArgumentError(Exception):
    """A caller-supplied argument failed a semantic check."""

    def __init__(self, argument_name: str, reason: str):
        self.argument_name = argument_name
        self.reason = reason
        super().__init__(f"{argument_name} {reason}")


class InvocationError(Exception):
    """
    Structured invocation failure.

    Handlers raise this when they need to fail with a specific kind; the
    dispatcher produces it for every other failure path.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.kind = ErrorKind(kind)
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        # The MCP SDK renders str(exc) as the error tool result text
        return json.dumps({"error": self.to_dict()}, default=str)


class ConfigurationError(ValueError):
    """Process configuration is missing or invalid. Fatal at startup."""


class CapabilityLoadError(Exception):
    """Base class for fatal errors raised while building the registry."""


class DuplicateCapabilityError(CapabilityLoadError):
    """Two modules tried to register the same capability name."""

    def __init__(self, capability_name: str, module_name: str, existing_module: str):
        self.capability_name = capability_name
        self.module_name = module_name
        self.existing_module = existing_module
        super().__init__(
            f"Capability '{capability_name}' from module '{module_name}' "
            f"is already registered by module '{existing_module}'"
        )


class ModuleContractError(CapabilityLoadError):
    """A module's descriptors and handlers do not match one to one."""


class RegistryFrozenError(CapabilityLoadError):
    """Insertion attempted after the registry was frozen."""
