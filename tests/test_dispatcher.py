"""
Tests for the protocol dispatcher.

Discovery, routing and failure translation over a frozen registry of fake
modules and of the real capability modules.
"""

import logging

import pytest

from conftest import RESELLER_ID, FakeModule, UpstreamReply, echo_handler
from twentyi_mcp.capabilities import DEFAULT_MODULES
from twentyi_mcp.errors import ErrorKind, InvocationError
from twentyi_mcp.modules.dispatcher import InvocationResult, ProtocolDispatcher
from twentyi_mcp.modules.registry import CapabilityRegistry, load_modules
from twentyi_mcp.modules.upstream import UpstreamResponse


@pytest.fixture
def dispatcher(echo_module):
    return ProtocolDispatcher(CapabilityRegistry.from_modules([echo_module]))


@pytest.fixture
def twentyi_dispatcher(client):
    return ProtocolDispatcher(load_modules(DEFAULT_MODULES, client))


class TestDiscovery:
    """Tests for list_capabilities."""

    def test_lists_in_registration_order(self, dispatcher):
        names = [d.name for d in dispatcher.list_capabilities()]
        assert names == ["echo", "explode", "needs_value"]

    def test_dispatcher_freezes_registry(self, echo_module):
        registry = CapabilityRegistry()
        registry.register_module(echo_module)
        ProtocolDispatcher(registry)
        assert registry.frozen


class TestInvoke:
    """Tests for invoke routing and failure translation."""

    @pytest.mark.asyncio
    async def test_success_returns_handler_data(self, dispatcher):
        result = await dispatcher.invoke("echo", {"value": "hi"})
        assert result.ok
        assert result.data == {"echo": {"value": "hi"}}

    @pytest.mark.asyncio
    async def test_missing_arguments_treated_as_empty(self, dispatcher):
        result = await dispatcher.invoke("echo")
        assert result.data == {"echo": {}}

    @pytest.mark.asyncio
    async def test_handler_cannot_mutate_caller_arguments(self, fake_module_factory):
        async def mutating(args):
            args["injected"] = True
            return args

        dispatcher = ProtocolDispatcher(
            CapabilityRegistry.from_modules([fake_module_factory("m", {"mutate": mutating})])
        )
        arguments = {"value": "x"}
        await dispatcher.invoke("mutate", arguments)
        assert arguments == {"value": "x"}

    @pytest.mark.asyncio
    async def test_unknown_capability(self, dispatcher):
        result = await dispatcher.invoke("does_not_exist", {})
        assert not result.ok
        assert result.kind == ErrorKind.UNKNOWN_CAPABILITY
        assert result.error.details == {"name": "does_not_exist"}

    @pytest.mark.asyncio
    async def test_non_string_name_is_unknown(self, dispatcher):
        result = await dispatcher.invoke(None, {})
        assert result.kind == ErrorKind.UNKNOWN_CAPABILITY

    @pytest.mark.asyncio
    async def test_non_object_arguments(self, dispatcher):
        result = await dispatcher.invoke("echo", ["not", "an", "object"])
        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert result.error.details["argument"] == "arguments"

    @pytest.mark.asyncio
    async def test_argument_error_names_field(self, dispatcher):
        result = await dispatcher.invoke("needs_value", {"value": ""})
        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert result.error.details["argument"] == "value"
        assert "'value'" in result.error.message

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_internal_error(self, dispatcher, caplog):
        with caplog.at_level(logging.ERROR, logger="twentyi_mcp"):
            result = await dispatcher.invoke("explode", {})

        assert result.kind == ErrorKind.INTERNAL_ERROR
        assert "hunter2" not in result.error.message
        assert "hunter2" not in str(result.to_dict())
        assert any("explode" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_invocation_error_kind_preserved(self, fake_module_factory):
        async def rejecting(args):
            raise InvocationError(ErrorKind.UPSTREAM_REJECTED, "nope", {"status": 409})

        dispatcher = ProtocolDispatcher(
            CapabilityRegistry.from_modules([fake_module_factory("m", {"reject": rejecting})])
        )
        result = await dispatcher.invoke("reject", {})
        assert result.kind == ErrorKind.UPSTREAM_REJECTED
        assert result.error.details == {"status": 409}

    @pytest.mark.asyncio
    async def test_failed_upstream_response_becomes_failure(self, fake_module_factory):
        async def timing_out(args):
            return UpstreamResponse.failure(ErrorKind.TRANSPORT_ERROR, "timed out", {"path": "/x"})

        dispatcher = ProtocolDispatcher(
            CapabilityRegistry.from_modules([fake_module_factory("m", {"slow": timing_out})])
        )
        result = await dispatcher.invoke("slow", {})
        assert result.kind == ErrorKind.TRANSPORT_ERROR
        assert result.error.message == "timed out"


class TestInvocationResult:
    """Tests for the serialized invocation outcome."""

    def test_success_dict(self):
        assert InvocationResult.success([1]).to_dict() == {"ok": True, "data": [1]}

    def test_failure_dict(self):
        result = InvocationResult.failure(ErrorKind.INVALID_ARGUMENT, "bad", {"argument": "x"})
        assert result.to_dict() == {
            "ok": False,
            "error": {"kind": "InvalidArgument", "message": "bad", "details": {"argument": "x"}},
        }


@pytest.mark.integration
class TestTwentyiScenarios:
    """End-to-end dispatch through the real capability modules."""

    @pytest.mark.asyncio
    async def test_reseller_info_from_single_element_array(self, twentyi_dispatcher, upstream):
        upstream.register("GET /reseller", UpstreamReply(body=[{"id": RESELLER_ID, "name": "Acme"}]))

        result = await twentyi_dispatcher.invoke("get_reseller_info", {})

        assert result.ok
        assert result.data == {"id": RESELLER_ID, "name": "Acme"}

    @pytest.mark.asyncio
    async def test_reseller_info_from_bare_uuid(self, twentyi_dispatcher, upstream):
        upstream.register("GET /reseller", UpstreamReply(text=RESELLER_ID, content_type="text/plain"))

        result = await twentyi_dispatcher.invoke("get_reseller_info", {})

        assert result.data == {"id": RESELLER_ID}

    @pytest.mark.asyncio
    async def test_zero_balance_on_empty_body(self, twentyi_dispatcher, upstream):
        upstream.register_reseller()
        upstream.register(f"GET /reseller/{RESELLER_ID}/accountBalance", UpstreamReply(body=None))

        result = await twentyi_dispatcher.invoke("get_account_balance", {})

        assert result.ok
        assert result.data["balance"] == 0
        assert result.data["currency"] == "USD"
        assert result.data["message"]

    @pytest.mark.asyncio
    async def test_invalid_domain_never_reaches_upstream(self, twentyi_dispatcher, upstream):
        result = await twentyi_dispatcher.invoke(
            "register_domain",
            {"name": "not a domain", "years": 1, "contact": {}},
        )

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert result.error.details["argument"] == "name"
        assert upstream.call_count == 0

    @pytest.mark.asyncio
    async def test_html_login_page_is_protocol_error(self, twentyi_dispatcher, upstream):
        upstream.register(
            "GET /package",
            UpstreamReply(status=200, text="<html><body><h1>Sign in</h1></body></html>", content_type="text/html"),
        )

        result = await twentyi_dispatcher.invoke("list_hosting_packages", {})

        assert result.kind == ErrorKind.UPSTREAM_PROTOCOL_ERROR
        assert "Sign in" in result.error.message
        assert "<" not in result.error.message

    @pytest.mark.asyncio
    async def test_reseller_lookup_failure_propagates(self, twentyi_dispatcher, upstream):
        upstream.register("GET /reseller", UpstreamReply(status=401, body={"error": "Unauthorised"}))

        result = await twentyi_dispatcher.invoke("get_package_types", {})

        assert result.kind == ErrorKind.UPSTREAM_REJECTED
        assert result.error.details["status"] == 401

    @pytest.mark.asyncio
    async def test_empty_registry_lists_nothing(self):
        empty = ProtocolDispatcher(CapabilityRegistry.from_modules([]))

        assert empty.list_capabilities() == []
        result = await empty.invoke("get_reseller_info", {})
        assert result.kind == ErrorKind.UNKNOWN_CAPABILITY

    @pytest.mark.asyncio
    async def test_zero_balance_on_empty_object_body(self, twentyi_dispatcher, upstream):
        upstream.register_reseller()
        upstream.register(f"GET /reseller/{RESELLER_ID}/accountBalance", UpstreamReply(text="{}"))

        result = await twentyi_dispatcher.invoke("get_account_balance", {})

        assert result.ok
        assert result.data["balance"] == 0
        assert result.data["currency"] == "USD"
        assert result.data["resellerId"] == RESELLER_ID

    @pytest.mark.asyncio
    async def test_unknown_capability_runs_no_handler(self, fake_module_factory):
        ran = []

        async def recording_handler(args):
            ran.append(args)
            return {}

        module = fake_module_factory("recording", {"known": recording_handler})
        dispatcher = ProtocolDispatcher(CapabilityRegistry.from_modules([module]))

        result = await dispatcher.invoke("unknown", {"value": "x"})

        assert result.kind == ErrorKind.UNKNOWN_CAPABILITY
        assert ran == []

    @pytest.mark.asyncio
    async def test_empty_domain_id_never_reaches_upstream(self, twentyi_dispatcher, upstream):
        result = await twentyi_dispatcher.invoke("get_domain_info", {"domain_id": ""})

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert result.error.details["argument"] == "domain_id"
        assert upstream.call_count == 0

    @pytest.mark.asyncio
    async def test_huge_years_is_invalid_argument(self, twentyi_dispatcher, upstream):
        result = await twentyi_dispatcher.invoke(
            "register_domain",
            {"name": "example.com", "years": -(10**400), "contact": {}},
        )

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert result.error.details["argument"] == "years"
        assert upstream.call_count == 0

    @pytest.mark.asyncio
    async def test_bare_numeric_id_from_add_web(self, twentyi_dispatcher, upstream):
        upstream.register_reseller()
        upstream.register(f"POST /reseller/{RESELLER_ID}/addWeb", UpstreamReply(text="98765"))

        result = await twentyi_dispatcher.invoke(
            "create_hosting_package",
            {
                "domain_name": "example.com",
                "package_type": "linux-basic",
                "username": "acme",
                "password": "correct horse",
            },
        )

        assert result.ok
        assert result.data == {"id": 98765}
