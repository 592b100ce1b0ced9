"""Active order (cart) operations for :class:`pystorefront.client.StorefrontClient`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pystorefront.gateway import NO_CACHE, RequestContext
from pystorefront.models.order import Order
from pystorefront.models.results import unwrap
from pystorefront.queries import ADD_ITEM_TO_ORDER, ADJUST_ORDER_LINE, GET_ACTIVE_ORDER, REMOVE_ORDER_LINE

if TYPE_CHECKING:
    from pystorefront.client import StorefrontClient


def _require_quantity(quantity: int) -> None:
    if quantity < 1:
        raise ValueError(f"quantity must be >= 1, got {quantity}")


async def _mutate(
    client: StorefrontClient,
    query: str,
    field: str,
    variables: dict[str, Any],
    context: RequestContext | None,
) -> Order:
    data = await client.gateway.request(query, variables, context)
    return Order.model_validate(unwrap(data.get(field), field))


async def get_active_order(client: StorefrontClient, *, context: RequestContext | None = None) -> Order | None:
    # Cart contents change under other tabs; always read through.
    data = await client.gateway.request(GET_ACTIVE_ORDER, None, context, NO_CACHE)
    raw = data.get("activeOrder")
    return Order.model_validate(raw) if isinstance(raw, dict) else None


async def add_item_to_order(
    client: StorefrontClient,
    variant_id: str,
    quantity: int = 1,
    *,
    context: RequestContext | None = None,
) -> Order:
    _require_quantity(quantity)
    return await _mutate(
        client,
        ADD_ITEM_TO_ORDER,
        "addItemToOrder",
        {"productVariantId": variant_id, "quantity": quantity},
        context,
    )


async def adjust_order_line(
    client: StorefrontClient,
    line_id: str,
    quantity: int,
    *,
    context: RequestContext | None = None,
) -> Order:
    _require_quantity(quantity)
    return await _mutate(
        client,
        ADJUST_ORDER_LINE,
        "adjustOrderLine",
        {"orderLineId": line_id, "quantity": quantity},
        context,
    )


async def remove_order_line(
    client: StorefrontClient,
    line_id: str,
    *,
    context: RequestContext | None = None,
) -> Order:
    return await _mutate(client, REMOVE_ORDER_LINE, "removeOrderLine", {"orderLineId": line_id}, context)
