"""Internal constants shared across the library."""

DEFAULT_API_URL = "http://localhost:3000/shop-api"
USER_AGENT = "pystorefront/1"

# ------------------------------------------------------------------
# Response cache
# ------------------------------------------------------------------

DEFAULT_CACHE_TTL: float = 5 * 60
DEFAULT_SWEEP_INTERVAL: float = 10 * 60
CACHE_KEY_PREFIX_LENGTH = 50

#: Query text fragments that mark a document as sensitive. Responses to
#: these are never written to the response cache.
SENSITIVE_QUERY_MARKERS: tuple[str, ...] = ("password", "login", "authenticate")

# ------------------------------------------------------------------
# Diagnostics
# ------------------------------------------------------------------

SLOW_QUERY_THRESHOLD_MS: float = 1000.0
METRICS_HISTORY_SIZE = 200

# ------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------

DEFAULT_PAGE_SIZE = 12
FACET_LIST_TAKE = 100
PRICE_FILTER_MAX: int = 999_999_999
EMPTY_PRICE_RANGE_MAX: int = 1_000_000
ROOT_COLLECTION_NAME = "__root_collection__"
BRAND_FACET_CODE = "brand"
PRODUCT_TYPE_FACET_CODE = "product-type"

# ------------------------------------------------------------------
# Checkout
# ------------------------------------------------------------------

UPSELL_LIMIT = 3
UPSELL_CANDIDATES = 12
DEFAULT_PAYMENT_METADATA: dict[str, bool] = {"demo": True}
