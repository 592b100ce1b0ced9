"""pystorefront - Async Python client for a headless e-commerce shop API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pystorefront")
except PackageNotFoundError:
    __version__ = "0+local"
from pystorefront._cache import CacheSweeper, ResponseCache, create_key, memoize
from pystorefront._performance import PerformanceTracker, QueryMetrics
from pystorefront.checkout import (
    CheckoutOrchestrator,
    CheckoutSession,
    CheckoutStep,
    ErrorKind,
    StepOutcome,
    advance,
    initial_step,
    next_step,
)
from pystorefront.client import StorefrontClient
from pystorefront.config import RenderMode, StorefrontConfig
from pystorefront.exceptions import (
    CheckoutError,
    EmptyCartError,
    ErrorResultError,
    GraphQLResponseError,
    InvalidTransitionError,
    RemoteApiError,
    StorefrontConfigError,
    StorefrontError,
)
from pystorefront.filters import FilterState, Navigation, PriceBounds, SortKey
from pystorefront.gateway import ApiGateway, RequestContext, RequestOptions
from pystorefront.messages import error_message_for
from pystorefront.query_builder import ListQueryOptions, PageInfo, Pagination, Scope

__all__ = [
    "__version__",
    "ApiGateway",
    "CacheSweeper",
    "CheckoutError",
    "CheckoutOrchestrator",
    "CheckoutSession",
    "CheckoutStep",
    "EmptyCartError",
    "ErrorKind",
    "ErrorResultError",
    "FilterState",
    "GraphQLResponseError",
    "InvalidTransitionError",
    "ListQueryOptions",
    "Navigation",
    "PageInfo",
    "Pagination",
    "PerformanceTracker",
    "PriceBounds",
    "QueryMetrics",
    "RemoteApiError",
    "RenderMode",
    "RequestContext",
    "RequestOptions",
    "ResponseCache",
    "Scope",
    "SortKey",
    "StepOutcome",
    "StorefrontClient",
    "StorefrontConfig",
    "StorefrontConfigError",
    "StorefrontError",
    "advance",
    "create_key",
    "error_message_for",
    "initial_step",
    "memoize",
    "next_step",
]
