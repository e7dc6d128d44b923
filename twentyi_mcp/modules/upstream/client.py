"""
20i API client.

One httpx.AsyncClient per process, built from the startup credentials and
passed to every capability module. Each verb returns an UpstreamResponse;
raw httpx responses and exceptions never leave this module.

There is no retry. A timed-out POST may still have created the resource
upstream, so retrying is left to the caller.

The configured timeout bounds the whole call. httpx applies it to each
phase (connect, read, write, pool) and asyncio.wait_for caps the total.
"""

import asyncio
import base64
import logging
from typing import Any, Collection, Dict, Optional

import httpx

from twentyi_mcp.config.provider import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    Credentials,
    UpstreamConfig,
)
from twentyi_mcp.errors import ErrorKind

from .normalize import NO_DEFAULT, normalize_response
from .responses import UpstreamResponse

logger = logging.getLogger(__name__)


def build_auth_header(credentials: Credentials) -> str:
    """20i expects the general API key base64-encoded as a bearer token."""
    token = base64.b64encode(credentials.api_key.encode("utf-8")).decode("ascii")
    return f"Bearer {token}"


class UpstreamClient:
    """
    Uniform calling convention over the 20i REST API.

    Per-call options understood by every verb:
        default: data returned when the body is empty
        singular: unwrap one-element arrays
        default_on_status: error statuses that mean "no data" for this call
    """

    def __init__(
        self,
        credentials: Credentials,
        config: Optional[UpstreamConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            credentials: Startup credentials, attached to every request
            config: Base URL, timeout and user agent
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.config = config or UpstreamConfig(
            base_url=DEFAULT_BASE_URL,
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
            user_agent="twentyi-mcp",
        )
        self._credentials = credentials
        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers={
                "Authorization": build_auth_header(credentials),
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": self.config.user_agent,
            },
            timeout=httpx.Timeout(self.config.timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        default: Any = NO_DEFAULT,
        singular: bool = False,
        default_on_status: Collection[int] = (),
    ) -> UpstreamResponse:
        """
        Issue one request and normalize the outcome.

        Returns:
            UpstreamResponse (never raises for transport or upstream failures)
        """
        method = method.upper()
        try:
            response = await asyncio.wait_for(
                self._http.request(method, path, json=json, params=params),
                timeout=self.config.timeout_seconds,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.warning(f"{method} {path} timed out after {self.config.timeout_seconds}s")
            return UpstreamResponse.failure(
                ErrorKind.TRANSPORT_ERROR,
                f"{method} {path} timed out after {self.config.timeout_seconds:g} seconds",
                {"method": method, "path": path},
            )
        except httpx.DecodingError as e:
            logger.warning(f"{method} {path} undecodable response: {e}")
            return UpstreamResponse.failure(
                ErrorKind.UPSTREAM_PROTOCOL_ERROR,
                f"{method} {path} returned a body that could not be decoded: {e}",
                {"method": method, "path": path},
            )
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} transport failure: {e.__class__.__name__}: {e}")
            return UpstreamResponse.failure(
                ErrorKind.TRANSPORT_ERROR,
                f"{method} {path} failed: {e.__class__.__name__}: {e}",
                {"method": method, "path": path},
            )

        result = normalize_response(
            response,
            default=default,
            singular=singular,
            default_on_status=default_on_status,
        )
        if result.ok:
            logger.debug(f"{method} {path} -> {response.status_code}")
        else:
            logger.info(f"{method} {path} -> {response.status_code} ({result.kind.value})")
        return result

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, **options) -> UpstreamResponse:
        return await self.request("GET", path, params=params, **options)

    async def post(self, path: str, json: Any = None, **options) -> UpstreamResponse:
        return await self.request("POST", path, json=json, **options)

    async def put(self, path: str, json: Any = None, **options) -> UpstreamResponse:
        return await self.request("PUT", path, json=json, **options)

    async def patch(self, path: str, json: Any = None, **options) -> UpstreamResponse:
        return await self.request("PATCH", path, json=json, **options)

    async def delete(self, path: str, **options) -> UpstreamResponse:
        return await self.request("DELETE", path, **options)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
