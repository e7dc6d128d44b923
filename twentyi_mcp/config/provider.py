"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from twentyi_mcp import __version__
from twentyi_mcp.errors import ConfigurationError

CREDENTIAL_ENV_VARS = ("TWENTYI_API_KEY", "TWENTYI_OAUTH_KEY", "TWENTYI_COMBINED_KEY")

DEFAULT_BASE_URL = "https://api.20i.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class Credentials:
    """20i credentials. Read once at startup, never logged."""
    api_key: str = field(repr=False)
    oauth_key: str = field(repr=False)
    combined_key: str = field(repr=False)

    def secrets(self) -> List[str]:
        """All secret values, for log redaction."""
        return [v for v in (self.api_key, self.oauth_key, self.combined_key) if v]


@dataclass
class UpstreamConfig:
    """Upstream HTTP service configuration."""
    base_url: str
    timeout_seconds: float
    user_agent: str


@dataclass
class APIConfig:
    """HTTP surface configuration."""
    port: int
    host: str
    debug: bool
    cors_origins: List[str]


@dataclass
class AuthConfig:
    """HTTP surface authentication configuration."""
    api_keys: Dict[str, Optional[str]]

    @property
    def is_configured(self) -> bool:
        return bool(self.api_keys)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_credentials(self) -> Credentials:
        """Get upstream credentials."""
        ...

    def get_upstream_config(self) -> UpstreamConfig:
        """Get upstream client configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...

    def get_log_level(self) -> str:
        """Get the logging level name."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._env = os.environ if environ is None else environ

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._env.get(key, default)

    def get_credentials(self) -> Credentials:
        """
        Get upstream credentials from environment variables.

        Raises:
            ConfigurationError: If any of the three credential variables is unset
        """
        values = {name: (self._get(name) or "").strip() for name in CREDENTIAL_ENV_VARS}
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Missing required credentials: {', '.join(missing)}. "
                "Set TWENTYI_API_KEY, TWENTYI_OAUTH_KEY and TWENTYI_COMBINED_KEY "
                "in the environment or a .env file."
            )

        return Credentials(
            api_key=values["TWENTYI_API_KEY"],
            oauth_key=values["TWENTYI_OAUTH_KEY"],
            combined_key=values["TWENTYI_COMBINED_KEY"],
        )

    def get_upstream_config(self) -> UpstreamConfig:
        """Get upstream client configuration from environment variables."""
        raw_timeout = self._get("TWENTYI_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"TWENTYI_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ConfigurationError("TWENTYI_TIMEOUT must be greater than zero")

        return UpstreamConfig(
            base_url=self._get("TWENTYI_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=timeout,
            user_agent=self._get("TWENTYI_USER_AGENT", f"twentyi-mcp/{__version__}"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(self._get("API_PORT", "8080")),
            host=self._get("API_HOST", "0.0.0.0"),
            debug=self._get("API_DEBUG", "false").lower() == "true",
            cors_origins=self._get("CORS_ORIGINS", "*").split(","),
        )

    def get_auth_config(self) -> AuthConfig:
        """
        Get authentication configuration from environment variables.

        API_KEYS format: "key1,service1:key2" (service identity is optional).
        """
        keys: Dict[str, Optional[str]] = {}
        for entry in self._get("API_KEYS", "").split(","):
            entry = entry.strip()
            if not entry:
                continue
            if ":" in entry:
                service, key = entry.split(":", 1)
                keys[key.strip()] = service.strip() or None
            else:
                keys[entry] = None
        return AuthConfig(api_keys=keys)

    def get_log_level(self) -> str:
        return self._get("LOG_LEVEL", "INFO").upper()
