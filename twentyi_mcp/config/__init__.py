"""
Config Module - Black Box Interface

Purpose: Process configuration and credentials
Interface: ConfigProvider, EnvConfigProvider
Hidden: Environment parsing, defaults

Can be replaced with any provider that satisfies the ConfigProvider protocol.
"""

from .provider import (
    APIConfig,
    AuthConfig,
    ConfigProvider,
    Credentials,
    EnvConfigProvider,
    UpstreamConfig,
)

__all__ = [
    "APIConfig",
    "AuthConfig",
    "ConfigProvider",
    "Credentials",
    "EnvConfigProvider",
    "UpstreamConfig",
]
