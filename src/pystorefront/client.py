"""High-level async client for the shop API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pystorefront._cache import CacheSweeper, ResponseCache
from pystorefront._client import account as _account
from pystorefront._client import cart as _cart
from pystorefront._client import catalog as _catalog
from pystorefront._client.catalog import CatalogPage, CollectionPage
from pystorefront._performance import PerformanceTracker
from pystorefront._transport import HttpTransport, Transport
from pystorefront.checkout import CheckoutOrchestrator
from pystorefront.config import StorefrontConfig
from pystorefront.exceptions import StorefrontError
from pystorefront.filters import FilterState, PriceBounds
from pystorefront.gateway import ApiGateway, RequestContext
from pystorefront.models.catalog import Collection, CollectionList, FacetList, Product, ProductList, SearchResponse
from pystorefront.models.customer import (
    AddressInput,
    Country,
    CurrentUser,
    CustomerAddress,
    CustomerProfile,
    RegisterCustomerInput,
    UpdateAddressInput,
    UpdateCustomerInput,
)
from pystorefront.models.order import Order, OrderList
from pystorefront.query_builder import CategoryNode, ListQueryOptions

_logger = logging.getLogger(__name__)


class StorefrontClient:
    """Async client for the shop API.

    The client owns the process-wide :class:`ResponseCache` and
    :class:`PerformanceTracker` and hands them to its :class:`ApiGateway`.
    In a long-lived host (``RenderMode.CLIENT``) it also keeps the session
    cookie between calls and sweeps expired cache entries in the
    background.

    Usage::

        async with StorefrontClient(StorefrontConfig.from_env()) as client:
            page = await client.browse(filters.parse(request.query_string))
    """

    def __init__(
        self,
        config: StorefrontConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        self._config = config or StorefrontConfig.from_env()
        self._external_session = session is not None
        self._http_session = session
        self._custom_transport = transport
        self._cache = cache if cache is not None else ResponseCache(default_ttl=self._config.cache_ttl)
        self._tracker = PerformanceTracker(
            slow_threshold_ms=self._config.slow_query_threshold_ms,
            verbose=self._config.debug,
        )
        self._gateway: ApiGateway | None = None
        self._sweeper: CacheSweeper | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> StorefrontClient:
        transport = self._custom_transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(
                self._config,
                self._http_session,
                persist_cookies=self._config.is_long_lived,
            )
        self._gateway = ApiGateway(
            transport,
            self._cache,
            self._tracker,
            render_mode=self._config.render_mode,
            endpoint=self._config.api_url,
        )
        if self._config.is_long_lived and self._config.cache_sweep_interval > 0:
            self._sweeper = CacheSweeper(self._cache, interval=self._config.cache_sweep_interval)
            self._sweeper.start()
        _logger.debug("Storefront client ready for %s (%s)", self._config.api_url, self._config.render_mode)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._sweeper is not None:
            await self._sweeper.stop()
            self._sweeper = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._gateway = None

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def config(self) -> StorefrontConfig:
        return self._config

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def tracker(self) -> PerformanceTracker:
        return self._tracker

    @property
    def sweeper(self) -> CacheSweeper | None:
        return self._sweeper

    @property
    def gateway(self) -> ApiGateway:
        if self._gateway is None:
            raise StorefrontError("Client not initialized. Use 'async with StorefrontClient(...) as client:'")
        return self._gateway

    def checkout(self, context: RequestContext | None = None) -> CheckoutOrchestrator:
        """Checkout orchestrator bound to one shopper's request."""
        return CheckoutOrchestrator(self.gateway, context)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def get_products(
        self,
        options: ListQueryOptions | None = None,
        *,
        context: RequestContext | None = None,
    ) -> ProductList:
        return await _catalog.get_products(self, options, context=context)

    async def get_product(
        self,
        *,
        slug: str | None = None,
        product_id: str | None = None,
        context: RequestContext | None = None,
    ) -> Product | None:
        return await _catalog.get_product(self, slug=slug, product_id=product_id, context=context)

    async def get_collections(self, *, context: RequestContext | None = None) -> CollectionList:
        return await _catalog.get_collections(self, context=context)

    async def get_collection(self, slug: str, *, context: RequestContext | None = None) -> Collection | None:
        return await _catalog.get_collection(self, slug, context=context)

    async def get_collection_with_products(
        self,
        slug: str,
        state: FilterState | None = None,
        *,
        page_size: int | None = None,
        context: RequestContext | None = None,
    ) -> CollectionPage | None:
        return await _catalog.get_collection_with_products(
            self,
            slug,
            state or FilterState(),
            page_size=page_size,
            context=context,
        )

    async def search(
        self,
        search_input: dict[str, Any],
        *,
        context: RequestContext | None = None,
    ) -> SearchResponse:
        return await _catalog.search(self, search_input, context=context)

    async def browse(
        self,
        state: FilterState,
        *,
        collection_slug: str | None = None,
        page_size: int | None = None,
        context: RequestContext | None = None,
    ) -> CatalogPage:
        return await _catalog.browse(
            self,
            state,
            collection_slug=collection_slug,
            page_size=page_size,
            context=context,
        )

    async def get_facets(self, *, context: RequestContext | None = None) -> FacetList:
        return await _catalog.get_facets(self, context=context)

    async def get_category_tree(self, *, context: RequestContext | None = None) -> list[CategoryNode]:
        return await _catalog.get_category_tree(self, context=context)

    async def get_price_range(
        self,
        *,
        collection_slug: str | None = None,
        term: str | None = None,
        context: RequestContext | None = None,
    ) -> PriceBounds:
        return await _catalog.get_price_range(self, collection_slug=collection_slug, term=term, context=context)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    async def get_active_order(self, *, context: RequestContext | None = None) -> Order | None:
        return await _cart.get_active_order(self, context=context)

    async def add_item_to_order(
        self,
        variant_id: str,
        quantity: int = 1,
        *,
        context: RequestContext | None = None,
    ) -> Order:
        return await _cart.add_item_to_order(self, variant_id, quantity, context=context)

    async def adjust_order_line(
        self,
        line_id: str,
        quantity: int,
        *,
        context: RequestContext | None = None,
    ) -> Order:
        return await _cart.adjust_order_line(self, line_id, quantity, context=context)

    async def remove_order_line(self, line_id: str, *, context: RequestContext | None = None) -> Order:
        return await _cart.remove_order_line(self, line_id, context=context)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def authenticate(
        self,
        username: str,
        password: str,
        *,
        remember_me: bool = False,
        context: RequestContext | None = None,
    ) -> CurrentUser:
        return await _account.authenticate(self, username, password, remember_me=remember_me, context=context)

    async def register_customer_account(
        self,
        registration: RegisterCustomerInput,
        *,
        context: RequestContext | None = None,
    ) -> bool:
        return await _account.register_customer_account(self, registration, context=context)

    async def verify_customer_account(
        self,
        token: str,
        password: str | None = None,
        *,
        context: RequestContext | None = None,
    ) -> CurrentUser:
        return await _account.verify_customer_account(self, token, password, context=context)

    async def request_password_reset(self, email_address: str, *, context: RequestContext | None = None) -> bool:
        return await _account.request_password_reset(self, email_address, context=context)

    async def reset_password(
        self,
        token: str,
        password: str,
        *,
        context: RequestContext | None = None,
    ) -> CurrentUser:
        return await _account.reset_password(self, token, password, context=context)

    async def logout(self, *, context: RequestContext | None = None) -> bool:
        return await _account.logout(self, context=context)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def get_current_user(self, *, context: RequestContext | None = None) -> CurrentUser | None:
        return await _account.get_current_user(self, context=context)

    async def update_customer(
        self,
        update: UpdateCustomerInput,
        *,
        context: RequestContext | None = None,
    ) -> CustomerProfile:
        return await _account.update_customer(self, update, context=context)

    async def update_customer_password(
        self,
        current_password: str,
        new_password: str,
        *,
        context: RequestContext | None = None,
    ) -> bool:
        return await _account.update_customer_password(self, current_password, new_password, context=context)

    async def update_customer_email_address(
        self,
        password: str,
        new_email_address: str,
        *,
        context: RequestContext | None = None,
    ) -> bool:
        return await _account.update_customer_email_address(self, password, new_email_address, context=context)

    async def get_customer_addresses(self, *, context: RequestContext | None = None) -> list[CustomerAddress]:
        return await _account.get_customer_addresses(self, context=context)

    async def create_customer_address(
        self,
        address: AddressInput,
        *,
        context: RequestContext | None = None,
    ) -> CustomerAddress:
        return await _account.create_customer_address(self, address, context=context)

    async def update_customer_address(
        self,
        address: UpdateAddressInput,
        *,
        context: RequestContext | None = None,
    ) -> CustomerAddress:
        return await _account.update_customer_address(self, address, context=context)

    async def delete_customer_address(self, address_id: str, *, context: RequestContext | None = None) -> bool:
        return await _account.delete_customer_address(self, address_id, context=context)

    async def get_customer_orders(
        self,
        *,
        take: int = 10,
        skip: int = 0,
        context: RequestContext | None = None,
    ) -> OrderList:
        return await _account.get_customer_orders(self, take=take, skip=skip, context=context)

    async def get_available_countries(self, *, context: RequestContext | None = None) -> list[Country]:
        return await _account.get_available_countries(self, context=context)
