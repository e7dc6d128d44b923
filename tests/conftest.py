"""
Shared pytest fixtures for twentyi-mcp tests.

This module provides common fixtures including:
- UpstreamMocker: Mock 20i HTTP calls with canned responses via httpx.MockTransport
- Credentials and UpstreamClient builders
- Fake capability modules for registry/dispatcher tests
"""

import json
import os
import re
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Union

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from twentyi_mcp.config import Credentials, UpstreamConfig
from twentyi_mcp.modules.registry import CapabilityDescriptor, string_arg
from twentyi_mcp.modules.upstream import UpstreamClient
from twentyi_mcp.modules.validation import require_string

RESELLER_ID = "0a1b2c3d-4e5f-6a7b-8c9d-0e1f2a3b4c5d"
TEST_BASE_URL = "https://api.20i.test"


def reseller_path(suffix: str) -> Pattern:
    """Regex matching any verb on a path under the test reseller."""
    return re.compile(rf"^[A-Z]+ /reseller/{RESELLER_ID}{re.escape(suffix)}$")


# =============================================================================
# Upstream Mocking Infrastructure
# =============================================================================


@dataclass
class UpstreamReply:
    """Represents a mocked 20i HTTP response."""

    status: int = 200
    body: Any = None
    text: Optional[str] = None
    content_type: str = "application/json"
    raises: Optional[Exception] = None

    def to_response(self, request: httpx.Request) -> httpx.Response:
        if self.raises is not None:
            raise self.raises
        if self.text is not None:
            content = self.text.encode("utf-8")
        elif self.body is None:
            content = b""
        else:
            content = json.dumps(self.body).encode("utf-8")
        return httpx.Response(
            self.status,
            content=content,
            headers={"content-type": self.content_type},
            request=request,
        )


@dataclass
class UpstreamCall:
    """Record of an HTTP call made during testing."""

    method: str
    path: str
    params: Dict[str, str]
    headers: Dict[str, str]
    body: Any = None
    matched_pattern: Optional[str] = None


class UpstreamMocker:
    """
    Mock 20i API calls with pattern-matched responses.

    Patterns match "METHOD /raw/path" (exact string or compiled regex). Unmatched
    requests get a 404 JSON error.

    Usage:
        def test_list_domains(upstream, client):
            upstream.register("GET /domain", UpstreamReply(body=[{"id": "1"}]))
            ...
            assert upstream.was_called_with("GET /domain")
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._call_history: List[UpstreamCall] = []
        self._default_reply = UpstreamReply(status=404, body={"error": "mock not configured"})

    def register(
        self,
        pattern: Union[str, Pattern],
        reply: UpstreamReply,
        priority: int = 0,
    ) -> "UpstreamMocker":
        """
        Register a reply for requests matching the pattern.

        Args:
            pattern: String (exact "METHOD /path" match) or regex pattern
            reply: UpstreamReply to return when matched
            priority: Higher priority patterns are checked first

        Returns:
            self for chaining
        """
        self._responses.append((pattern, reply, priority))
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def register_reseller(self, reseller_id: str = RESELLER_ID) -> "UpstreamMocker":
        """Register GET /reseller answering with the reseller object."""
        return self.register("GET /reseller", UpstreamReply(body={"id": reseller_id}))

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Transport handler for httpx.MockTransport."""
        path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        key = f"{request.method} {path}"
        matched_pattern = None
        reply = self._default_reply

        for pattern, candidate, _ in self._responses:
            if isinstance(pattern, str):
                if pattern == key:
                    matched_pattern = pattern
                    reply = candidate
                    break
            elif pattern.search(key):
                matched_pattern = pattern.pattern
                reply = candidate
                break

        body = json.loads(request.content) if request.content else None
        self._call_history.append(
            UpstreamCall(
                method=request.method,
                path=path,
                params=dict(request.url.params),
                headers=dict(request.headers),
                body=body,
                matched_pattern=matched_pattern,
            )
        )
        return reply.to_response(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def calls(self) -> List[UpstreamCall]:
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    def was_called_with(self, key: str) -> bool:
        """Check if any call matched "METHOD /path" exactly."""
        return any(f"{c.method} {c.path}" == key for c in self._call_history)

    def last_call(self) -> UpstreamCall:
        return self._call_history[-1]

    def calls_to(self, key: str) -> List[UpstreamCall]:
        return [c for c in self._call_history if f"{c.method} {c.path}" == key]


@pytest.fixture
def credentials():
    return Credentials(
        api_key="test-general-key",
        oauth_key="test-oauth-key",
        combined_key="test-general-key+test-oauth-key",
    )


@pytest.fixture
def upstream_config():
    return UpstreamConfig(base_url=TEST_BASE_URL, timeout_seconds=5.0, user_agent="twentyi-mcp-tests")


@pytest.fixture
def upstream():
    """Fresh UpstreamMocker with no registered replies."""
    return UpstreamMocker()


@pytest_asyncio.fixture
async def client(credentials, upstream_config, upstream):
    """UpstreamClient whose requests are answered by the upstream mocker."""
    upstream_client = UpstreamClient(credentials, upstream_config, transport=upstream.transport())
    yield upstream_client
    await upstream_client.aclose()


@pytest_asyncio.fixture
async def make_client(credentials, upstream_config):
    """Build UpstreamClients around arbitrary transport handlers; closed after the test."""
    created = []

    def _make(handler) -> UpstreamClient:
        upstream_client = UpstreamClient(
            credentials, upstream_config, transport=httpx.MockTransport(handler)
        )
        created.append(upstream_client)
        return upstream_client

    yield _make
    for upstream_client in created:
        await upstream_client.aclose()


# =============================================================================
# Fake Capability Modules
# =============================================================================


class FakeModule:
    """
    Minimal capability module built from a name -> handler mapping.

    Descriptors are generated with one optional string argument so
    discovery output is predictable.
    """

    def __init__(self, name: str, handlers: Dict[str, Any], descriptors=None):
        self.name = name
        self._handlers = dict(handlers)
        self._descriptors = descriptors

    def descriptors(self) -> List[CapabilityDescriptor]:
        if self._descriptors is not None:
            return list(self._descriptors)
        return [
            CapabilityDescriptor(
                name=capability_name,
                description=f"Fake capability {capability_name}",
                arguments=[string_arg("value", "Any value", required=False)],
            )
            for capability_name in self._handlers
        ]

    def handlers(self) -> Dict[str, Any]:
        return dict(self._handlers)


async def echo_handler(args):
    return {"echo": args}


async def failing_handler(args):
    raise RuntimeError("secret internal detail: db password is hunter2")


async def validating_handler(args):
    return {"value": require_string(args.get("value"), "value")}


@pytest.fixture
def fake_module_factory():
    return FakeModule


@pytest.fixture
def echo_module():
    return FakeModule(
        "echo",
        {
            "echo": echo_handler,
            "explode": failing_handler,
            "needs_value": validating_handler,
        },
    )


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests that exercise several modules together"
    )

