"""Client configuration for pystorefront."""

from __future__ import annotations

import dataclasses
import enum
import os
from typing import Any

from pystorefront._constants import (
    DEFAULT_API_URL,
    DEFAULT_CACHE_TTL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SWEEP_INTERVAL,
    SLOW_QUERY_THRESHOLD_MS,
)
from pystorefront.exceptions import StorefrontConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


class RenderMode(enum.StrEnum):
    """Where the client runs.

    ``SERVER`` is a per-request server render: responses are never written
    to the shared response cache. ``CLIENT`` is a long-lived single-user
    process (browser-like) where caching is safe.
    """

    SERVER = "server"
    CLIENT = "client"


@dataclasses.dataclass(frozen=True)
class StorefrontConfig:
    """Client configuration.

    Parameters
    ----------
    api_url : str
        Shop API GraphQL endpoint.
    render_mode : RenderMode
        Host type; decides response cache writes and the periodic sweep.
    debug : bool
        Verbose diagnostics (slow query warnings).
    cache_ttl : float
        Default response cache time-to-live in seconds.
    cache_sweep_interval : float
        Seconds between expired-entry sweeps in long-lived hosts.
        ``0`` disables the sweep.
    slow_query_threshold_ms : float
        Latency above which a query is reported as slow.
    page_size : int
        Default catalog page size.
    """

    api_url: str = DEFAULT_API_URL
    render_mode: RenderMode = RenderMode.SERVER
    debug: bool = False
    cache_ttl: float = DEFAULT_CACHE_TTL
    cache_sweep_interval: float = DEFAULT_SWEEP_INTERVAL
    slow_query_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if not self.api_url:
            raise StorefrontConfigError("api_url must not be empty")
        if self.page_size < 1:
            raise StorefrontConfigError(f"page_size must be >= 1, got {self.page_size}")
        if self.cache_ttl < 0:
            raise StorefrontConfigError(f"cache_ttl must be >= 0, got {self.cache_ttl}")

    @property
    def is_long_lived(self) -> bool:
        """Whether the host process outlives a single request."""
        return self.render_mode == RenderMode.CLIENT

    @classmethod
    def from_env(cls, **overrides: Any) -> StorefrontConfig:
        """Create configuration from environment variables.

        Reads ``STOREFRONT_API_URL`` (falling back to
        ``VENDURE_SHOP_API_URL``) and optional ``STOREFRONT_*`` variables.
        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        api_url = env.get("STOREFRONT_API_URL") or env.get("VENDURE_SHOP_API_URL")
        if api_url:
            config_kwargs["api_url"] = api_url

        mode_env = env.get("STOREFRONT_RENDER_MODE")
        if mode_env is not None and "render_mode" not in overrides:
            try:
                config_kwargs["render_mode"] = RenderMode(mode_env.strip().lower())
            except ValueError as exc:
                raise StorefrontConfigError(f"Unknown STOREFRONT_RENDER_MODE: {mode_env!r}") from exc

        if "debug" not in overrides:
            config_kwargs["debug"] = _env_bool(env.get("STOREFRONT_DEBUG"), False)

        _ENV_FLOAT_MAP = {
            "STOREFRONT_CACHE_TTL": "cache_ttl",
            "STOREFRONT_CACHE_SWEEP_INTERVAL": "cache_sweep_interval",
            "STOREFRONT_SLOW_QUERY_MS": "slow_query_threshold_ms",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        page_size_env = env.get("STOREFRONT_PAGE_SIZE")
        if page_size_env is not None and "page_size" not in overrides:
            config_kwargs["page_size"] = int(page_size_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
