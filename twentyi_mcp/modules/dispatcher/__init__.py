"""
Dispatcher Module - Black Box Interface

Purpose: Answer discovery and invocation requests
Interface: ProtocolDispatcher.list_capabilities(), ProtocolDispatcher.invoke()
Hidden: Failure translation, handler execution

Protocol bindings (MCP, HTTP) sit on top of this module.
"""

from .dispatcher import InvocationResult, ProtocolDispatcher

__all__ = ["InvocationResult", "ProtocolDispatcher"]
