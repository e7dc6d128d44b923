"""
twentyi-mcp - 20i Hosting Capability Server

Exposes 20i reseller hosting operations to MCP clients and HTTP callers.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- validation: Argument checks guarding every handler
- upstream: 20i HTTP client and response normalization
- registry: Capability descriptors and the frozen dispatch table
- dispatcher: Discovery and invocation
- auth: API key verification for the HTTP surface
- api: HTTP surface
- mcp_server: MCP stdio surface

Capabilities (account, domains, packages) live in twentyi_mcp.capabilities.
"""

__version__ = "1.6.0"
