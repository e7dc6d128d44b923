"""
Authentication Module - Black Box Interface

Purpose: Validate API keys presented to the HTTP binding
Interface: verify_api_key()
Hidden: Key storage, comparison

The MCP stdio binding runs under the launching client's trust and does
not use this module.
"""

from .auth import AuthModule

__all__ = ["AuthModule"]
