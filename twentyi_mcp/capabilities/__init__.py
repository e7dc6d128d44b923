"""
Capabilities - Black Box Interface

Purpose: The 20i operations exposed to agents
Interface: DEFAULT_MODULES, AccountModule, DomainsModule, PackagesModule
Hidden: Endpoint paths, request bodies, status-specific messages

Each module is built from an UpstreamClient and contributes descriptors
plus handlers to the registry.
"""

from .account import AccountModule
from .base import BaseCapabilityModule
from .domains import DomainsModule
from .packages import PackagesModule

# Registration order is listing order
DEFAULT_MODULES = [AccountModule, DomainsModule, PackagesModule]

__all__ = [
    "DEFAULT_MODULES",
    "AccountModule",
    "BaseCapabilityModule",
    "DomainsModule",
    "PackagesModule",
]
