"""
Authentication module for the twentyi-mcp HTTP binding.

Keys come from API_KEYS ("key1,service1:key2"); a key may carry the
identity of the calling service.
"""

import logging
import secrets
from typing import Dict, Optional, Tuple

from twentyi_mcp.config import AuthConfig

logger = logging.getLogger(__name__)


class AuthModule:
    """
    Authentication module for validating API keys.

    Keys are compared in constant time against every configured key.
    """

    def __init__(self, auth_config: AuthConfig):
        """
        Initialize auth module.

        Args:
            auth_config: Configured keys mapped to optional service identities
        """
        self.api_keys: Dict[str, Optional[str]] = dict(auth_config.api_keys)

    async def verify_api_key(self, api_key: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Verify an API key.

        Args:
            api_key: API key from X-API-Key header

        Returns:
            Tuple of (is_valid, service_identity)
        """
        if not api_key:
            return False, None

        matched = None
        for known_key in self.api_keys:
            if secrets.compare_digest(api_key.encode(), known_key.encode()):
                matched = known_key

        if matched is None:
            logger.warning("Rejected request with an unknown API key")
            return False, None

        service_identity = self.api_keys[matched]
        logger.debug(f"API key verified for service: {service_identity or 'anonymous'}")
        return True, service_identity

