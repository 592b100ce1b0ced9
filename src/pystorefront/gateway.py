"""Gateway for every call to the remote shop API.

The gateway is the only component that talks to the transport. It:

* forwards the browser's session cookie during server renders,
* consults and fills the :class:`~pystorefront._cache.ResponseCache`,
* records :class:`~pystorefront._performance.QueryMetrics` for every call,
* turns transport faults and top-level GraphQL errors into
  :class:`~pystorefront.exceptions.RemoteApiError` after logging them.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from pystorefront._cache import ResponseCache
from pystorefront._constants import SENSITIVE_QUERY_MARKERS
from pystorefront._performance import PerformanceTracker, now_ms
from pystorefront._redact import redact_for_log
from pystorefront._transport import Transport
from pystorefront.config import RenderMode
from pystorefront.exceptions import GraphQLResponseError, RemoteApiError

_logger = logging.getLogger(__name__)

_OPERATION_RE = re.compile(r"^\s*(query|mutation|subscription)\s*(\w*)", re.IGNORECASE)


def operation_name(query: str) -> str:
    """Name of the first operation in *query* (``"anonymous"`` if unnamed)."""
    match = _OPERATION_RE.match(query)
    if match is None or not match.group(2):
        return "anonymous"
    return match.group(2)


def is_mutation(query: str) -> bool:
    match = _OPERATION_RE.match(query)
    return match is not None and match.group(1).lower() == "mutation"


def is_sensitive(query: str) -> bool:
    """Whether *query* touches credentials and must never be cached."""
    lowered = query.lower()
    return any(marker in lowered for marker in SENSITIVE_QUERY_MARKERS)


def _payload_size(data: Any) -> int:
    try:
        return len(json.dumps(data, separators=(",", ":"), default=str))
    except (TypeError, ValueError):
        return 0


@dataclass(slots=True)
class RequestContext:
    """The incoming request a server render is handling.

    ``cookie`` is forwarded verbatim so the remote API sees the browser's
    session. ``set_cookies`` collects ``Set-Cookie`` headers from the remote
    API that the caller must relay back to the browser.
    """

    cookie: str | None = None
    set_cookies: list[str] = field(default_factory=list)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RequestContext:
        for key, value in headers.items():
            if key.lower() == "cookie":
                return cls(cookie=value)
        return cls()


class RequestOptions(BaseModel):
    """Per-call cache behaviour.

    ``skip_cache`` bypasses the cache entirely. ``fresh`` skips the read but
    still refreshes the stored entry.
    """

    model_config = ConfigDict(frozen=True)

    cache: bool = True
    skip_cache: bool = False
    fresh: bool = False
    ttl: float | None = None


DEFAULT_OPTIONS = RequestOptions()
NO_CACHE = RequestOptions(cache=False)


class ApiGateway:
    """Issue GraphQL documents against the shop API."""

    def __init__(
        self,
        transport: Transport,
        cache: ResponseCache,
        tracker: PerformanceTracker,
        *,
        render_mode: RenderMode = RenderMode.SERVER,
        endpoint: str = "",
    ) -> None:
        self._transport = transport
        self._cache = cache
        self._tracker = tracker
        self._render_mode = render_mode
        self._endpoint = endpoint

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def tracker(self) -> PerformanceTracker:
        return self._tracker

    def invalidate(self) -> None:
        """Drop every cached response."""
        self._cache.clear()

    def _may_store(self, query: str, context: RequestContext | None) -> bool:
        # Server renders share the process-wide cache across users, so
        # only a client host may write.
        if self._render_mode != RenderMode.CLIENT or context is not None:
            return False
        return not is_sensitive(query)

    async def request(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        context: RequestContext | None = None,
        options: RequestOptions | None = None,
    ) -> dict[str, Any]:
        """Execute *query* and return its ``data`` object.

        Raises
        ------
        RemoteApiError
            Transport failure, or (as :class:`GraphQLResponseError`) a
            response with a top-level ``errors`` array.
        """
        opts = options or DEFAULT_OPTIONS
        name = operation_name(query)
        mutation = is_mutation(query)
        start = now_ms()

        cacheable = opts.cache and not opts.skip_cache and not mutation
        key = self._cache.create_key(query, dict(variables) if variables else None) if cacheable else ""

        if cacheable and not opts.fresh:
            cached = self._cache.get(key)
            if cached is not None:
                self._tracker.record(name, start, True, _payload_size(cached))
                return cached  # type: ignore[no-any-return]

        headers: dict[str, str] = {}
        if context is not None and context.cookie:
            headers["cookie"] = context.cookie

        payload: dict[str, Any] = {"query": query, "variables": dict(variables) if variables else {}}
        if name != "anonymous":
            payload["operationName"] = name

        try:
            response = await self._transport.post_graphql(payload, headers)
        except Exception:
            self._tracker.record(name, start, False)
            _logger.error(
                "GraphQL request %s to %s failed (variables=%s, request_context=%s)",
                name,
                self._endpoint,
                redact_for_log(variables),
                context is not None,
                exc_info=True,
            )
            raise

        if context is not None and response.set_cookies:
            context.set_cookies.extend(response.set_cookies)

        body = response.body
        errors = body.get("errors")
        if errors:
            self._tracker.record(name, start, False)
            error_list = [e for e in errors if isinstance(e, dict)] if isinstance(errors, list) else []
            first = error_list[0].get("message", "unknown error") if error_list else str(errors)
            _logger.error(
                "GraphQL errors from %s for %s (variables=%s, request_context=%s): %s",
                self._endpoint,
                name,
                redact_for_log(variables),
                context is not None,
                redact_for_log(error_list),
            )
            raise GraphQLResponseError(f"{name} failed: {first}", errors=error_list, endpoint=self._endpoint)

        data = body.get("data")
        if not isinstance(data, dict):
            self._tracker.record(name, start, False)
            _logger.error("GraphQL response for %s from %s has no data object", name, self._endpoint)
            raise RemoteApiError(f"{name} returned no data", endpoint=self._endpoint)

        self._tracker.record(name, start, False, _payload_size(data))

        if mutation and self._render_mode == RenderMode.CLIENT:
            # Cart and account reads are stale once a mutation lands.
            self._cache.clear()
        elif cacheable and self._may_store(query, context):
            self._cache.set(key, data, opts.ttl)

        return data
