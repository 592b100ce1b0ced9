"""Tests for the API gateway: caching policy, cookies, errors and metrics."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pystorefront._cache import ResponseCache
from pystorefront._performance import PerformanceTracker
from pystorefront._transport import TransportResponse
from pystorefront.config import RenderMode
from pystorefront.exceptions import GraphQLResponseError, RemoteApiError
from pystorefront.gateway import (
    NO_CACHE,
    ApiGateway,
    RequestContext,
    RequestOptions,
    is_mutation,
    is_sensitive,
    operation_name,
)

PRODUCTS = "query GetProducts($options: ProductListOptions) { products(options: $options) { totalItems } }"
LOGIN = "mutation Authenticate($input: AuthenticationInput!) { authenticate(input: $input) { id } }"
ADD_ITEM = "mutation AddItemToOrder($productVariantId: ID!) { addItemToOrder(productVariantId: $productVariantId) { id } }"
PASSWORD_QUERY = "query CheckPassword { passwordPolicy }"


@dataclass
class FakeTransport:
    body: dict[str, Any] = field(default_factory=lambda: {"data": {"products": {"totalItems": 3}}})
    set_cookies: list[str] = field(default_factory=list)
    error: Exception | None = None
    calls: list[tuple[dict[str, Any], dict[str, str]]] = field(default_factory=list)

    async def post_graphql(self, payload: Mapping[str, Any], headers: Mapping[str, str]) -> TransportResponse:
        self.calls.append((dict(payload), dict(headers)))
        if self.error is not None:
            raise self.error
        return TransportResponse(body=self.body, set_cookies=list(self.set_cookies))


def _gateway(transport: FakeTransport, render_mode: RenderMode = RenderMode.CLIENT) -> ApiGateway:
    return ApiGateway(
        transport,
        ResponseCache(),
        PerformanceTracker(),
        render_mode=render_mode,
        endpoint="fake://shop-api",
    )


# ------------------------------------------------------------------
# Document inspection
# ------------------------------------------------------------------


def test_operation_name_and_kind() -> None:
    assert operation_name(PRODUCTS) == "GetProducts"
    assert operation_name("  mutation Logout { logout { success } }") == "Logout"
    assert operation_name("{ products { totalItems } }") == "anonymous"
    assert operation_name("query { me { id } }") == "anonymous"
    assert is_mutation(LOGIN)
    assert not is_mutation(PRODUCTS)


def test_sensitive_queries() -> None:
    assert is_sensitive(LOGIN)
    assert is_sensitive(PASSWORD_QUERY)
    assert is_sensitive("mutation Login { login { id } }")
    assert not is_sensitive(PRODUCTS)


# ------------------------------------------------------------------
# Caching
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_client_mode_serves_repeat_query_from_cache() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport)

    first = await gateway.request(PRODUCTS, {"options": {"take": 12}})
    second = await gateway.request(PRODUCTS, {"options": {"take": 12}})

    assert first == second == {"products": {"totalItems": 3}}
    assert len(transport.calls) == 1
    assert [m.cache_hit for m in gateway.tracker.recent()] == [False, True]


@pytest.mark.asyncio
async def test_different_variables_miss_the_cache() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport)

    await gateway.request(PRODUCTS, {"options": {"take": 12}})
    await gateway.request(PRODUCTS, {"options": {"take": 24}})

    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_server_mode_never_writes_the_cache() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport, RenderMode.SERVER)

    await gateway.request(PRODUCTS)
    await gateway.request(PRODUCTS)

    assert len(gateway.cache) == 0
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_server_mode_reads_entries_already_cached() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport, RenderMode.SERVER)
    gateway.cache.set(gateway.cache.create_key(PRODUCTS, None), {"products": {"totalItems": 99}})

    assert await gateway.request(PRODUCTS) == {"products": {"totalItems": 99}}
    assert transport.calls == []


@pytest.mark.asyncio
async def test_request_context_prevents_cache_writes() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport)

    await gateway.request(PRODUCTS, None, RequestContext(cookie="session=abc"))

    assert len(gateway.cache) == 0


@pytest.mark.asyncio
async def test_sensitive_query_is_not_cached() -> None:
    transport = FakeTransport(body={"data": {"passwordPolicy": "strong"}})
    gateway = _gateway(transport)

    await gateway.request(PASSWORD_QUERY)
    await gateway.request(PASSWORD_QUERY)

    assert len(transport.calls) == 2
    assert len(gateway.cache) == 0


@pytest.mark.asyncio
async def test_cache_disabled_by_options() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport)

    await gateway.request(PRODUCTS, options=NO_CACHE)
    await gateway.request(PRODUCTS, options=RequestOptions(skip_cache=True))

    assert len(transport.calls) == 2
    assert len(gateway.cache) == 0


@pytest.mark.asyncio
async def test_fresh_skips_read_but_refreshes_entry() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport)
    await gateway.request(PRODUCTS)

    transport.body = {"data": {"products": {"totalItems": 4}}}
    refreshed = await gateway.request(PRODUCTS, options=RequestOptions(fresh=True))
    cached = await gateway.request(PRODUCTS)

    assert refreshed == {"products": {"totalItems": 4}}
    assert cached == {"products": {"totalItems": 4}}
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_per_call_ttl_is_used() -> None:
    now = [0.0]
    transport = FakeTransport()
    gateway = ApiGateway(
        transport,
        ResponseCache(clock=lambda: now[0]),
        PerformanceTracker(),
        render_mode=RenderMode.CLIENT,
    )

    await gateway.request(PRODUCTS, options=RequestOptions(ttl=10))
    now[0] = 11.0
    await gateway.request(PRODUCTS)

    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_mutation_clears_cache_in_client_mode() -> None:
    transport = FakeTransport()
    gateway = _gateway(transport)
    await gateway.request(PRODUCTS)
    assert len(gateway.cache) == 1

    transport.body = {"data": {"addItemToOrder": {"id": "1"}}}
    await gateway.request(ADD_ITEM, {"productVariantId": "V1"})
    await gateway.request(ADD_ITEM, {"productVariantId": "V1"})

    assert len(gateway.cache) == 0
    assert len(transport.calls) == 3


@pytest.mark.asyncio
async def test_invalidate_drops_everything() -> None:
    gateway = _gateway(FakeTransport())
    await gateway.request(PRODUCTS)
    gateway.invalidate()
    assert len(gateway.cache) == 0


# ------------------------------------------------------------------
# Cookies and payload
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_forwards_cookie_and_relays_set_cookie() -> None:
    transport = FakeTransport(set_cookies=["session=new; Path=/; HttpOnly"])
    gateway = _gateway(transport, RenderMode.SERVER)
    context = RequestContext.from_headers({"Cookie": "session=abc"})

    await gateway.request(PRODUCTS, {"options": {}}, context)

    payload, headers = transport.calls[0]
    assert headers == {"cookie": "session=abc"}
    assert payload["operationName"] == "GetProducts"
    assert payload["variables"] == {"options": {}}
    assert context.set_cookies == ["session=new; Path=/; HttpOnly"]


@pytest.mark.asyncio
async def test_no_context_sends_no_cookie() -> None:
    transport = FakeTransport(set_cookies=["session=new"])
    gateway = _gateway(transport)

    await gateway.request(PRODUCTS)

    payload, headers = transport.calls[0]
    assert headers == {}
    assert payload["variables"] == {}


def test_context_from_headers_without_cookie() -> None:
    context = RequestContext.from_headers({"accept": "text/html"})
    assert context.cookie is None
    assert context.set_cookies == []


@pytest.mark.asyncio
async def test_anonymous_document_has_no_operation_name() -> None:
    transport = FakeTransport()
    await _gateway(transport).request("{ products { totalItems } }")
    assert "operationName" not in transport.calls[0][0]


# ------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_graphql_errors_are_logged_and_raised(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="pystorefront.gateway")
    transport = FakeTransport(body={"errors": [{"message": "Forbidden"}], "data": None})
    gateway = _gateway(transport)

    with pytest.raises(GraphQLResponseError) as exc_info:
        await gateway.request(LOGIN, {"input": {"native": {"username": "ada", "password": "hunter2"}}})

    assert exc_info.value.errors == [{"message": "Forbidden"}]
    assert "Forbidden" in str(exc_info.value)
    assert isinstance(exc_info.value, RemoteApiError)
    assert "Authenticate" in caplog.text
    assert "hunter2" not in caplog.text
    assert "<redacted>" in caplog.text
    assert gateway.tracker.recent()[-1].cache_hit is False


@pytest.mark.asyncio
async def test_transport_errors_are_logged_and_reraised(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="pystorefront.gateway")
    transport = FakeTransport(error=RemoteApiError("connection refused", endpoint="fake://shop-api"))
    gateway = _gateway(transport)

    with pytest.raises(RemoteApiError, match="connection refused"):
        await gateway.request(PRODUCTS)

    assert "GetProducts" in caplog.text
    assert len(gateway.tracker.recent()) == 1


@pytest.mark.asyncio
async def test_unexpected_transport_errors_are_tracked_and_reraised(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="pystorefront.gateway")
    transport = FakeTransport(error=TypeError("Object of type set is not JSON serializable"))
    gateway = _gateway(transport)

    with pytest.raises(TypeError):
        await gateway.request(PRODUCTS, {"options": {"take": 3}})

    assert "GetProducts" in caplog.text
    metrics = gateway.tracker.recent()
    assert len(metrics) == 1
    assert metrics[0].cache_hit is False


@pytest.mark.asyncio
async def test_missing_data_object_is_an_error() -> None:
    gateway = _gateway(FakeTransport(body={"data": None}))
    with pytest.raises(RemoteApiError, match="no data"):
        await gateway.request(PRODUCTS)


@pytest.mark.asyncio
async def test_failed_response_is_not_cached() -> None:
    transport = FakeTransport(body={"errors": [{"message": "boom"}]})
    gateway = _gateway(transport)
    with pytest.raises(GraphQLResponseError):
        await gateway.request(PRODUCTS)
    assert len(gateway.cache) == 0
