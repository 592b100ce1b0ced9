"""HTTP transport for GraphQL documents, with cookie management."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from http.cookies import CookieError, SimpleCookie
from typing import Any, Protocol

import aiohttp

from pystorefront._constants import USER_AGENT
from pystorefront.config import StorefrontConfig
from pystorefront.exceptions import RemoteApiError

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransportResponse:
    """Decoded response body plus any ``Set-Cookie`` headers to relay."""

    body: dict[str, Any]
    set_cookies: list[str] = field(default_factory=list)


class Transport(Protocol):
    """Structural transport interface used by the gateway.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def post_graphql(self, payload: Mapping[str, Any], headers: Mapping[str, str]) -> TransportResponse:
        ...


class HttpTransport:
    """POST GraphQL payloads to the shop API over aiohttp.

    With ``persist_cookies`` the transport behaves like a browser and keeps
    the session cookie between calls. That is only correct for a
    single-user, long-lived host; server renders forward the incoming
    cookie instead.
    """

    def __init__(
        self,
        config: StorefrontConfig,
        http_session: aiohttp.ClientSession,
        *,
        persist_cookies: bool = False,
    ) -> None:
        self._config = config
        self._http = http_session
        self._persist_cookies = persist_cookies
        self._cookies: dict[str, str] = {}
        self._cookie_header: str = ""

    @property
    def endpoint(self) -> str:
        return self._config.api_url

    def _update_cookies(self, raw_cookies: list[str]) -> None:
        """Store Set-Cookie values for later requests."""
        changed = False
        for raw in raw_cookies:
            cookie: SimpleCookie = SimpleCookie()
            try:
                cookie.load(raw)
            except CookieError:
                _logger.debug("Ignoring unparseable Set-Cookie header")
                continue
            for key, morsel in cookie.items():
                value = morsel.value
                if self._cookies.get(key) != value:
                    self._cookies[key] = value
                    changed = True

        if changed:
            self._cookie_header = "; ".join(f"{k}={v}" for k, v in self._cookies.items())

    def _build_cookie_header(self) -> str:
        return self._cookie_header

    async def post_graphql(self, payload: Mapping[str, Any], headers: Mapping[str, str]) -> TransportResponse:
        """Send a GraphQL payload and return the decoded JSON body."""
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        request_headers.update(headers)

        if self._persist_cookies and "cookie" not in request_headers:
            cookie = self._build_cookie_header()
            if cookie:
                request_headers["cookie"] = cookie

        url = self._config.api_url
        body = json.dumps(payload, separators=(",", ":"))

        _logger.debug("POST %s", url)

        try:
            async with self._http.post(url, data=body, headers=request_headers) as resp:
                set_cookies = list(resp.headers.getall("Set-Cookie", []))
                if self._persist_cookies:
                    self._update_cookies(set_cookies)
                text = await resp.text()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise RemoteApiError(f"Request to {url} failed: {exc}", endpoint=url) from exc
        except TimeoutError as exc:
            raise RemoteApiError(f"Request to {url} timed out", endpoint=url) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RemoteApiError(
                f"HTTP {status} from {url} with invalid JSON: {text[:200]}",
                status_code=status,
                endpoint=url,
            ) from exc

        if not isinstance(body_json, dict):
            raise RemoteApiError(
                f"Unexpected response shape from {url}",
                status_code=status,
                endpoint=url,
            )

        # GraphQL servers report resolver errors with a 200 (or 4xx with a
        # parseable body); only a body without data or errors is a transport fault.
        if status >= 400 and "errors" not in body_json:
            raise RemoteApiError(
                f"HTTP {status} from {url}: {text[:200]}",
                status_code=status,
                endpoint=url,
            )

        return TransportResponse(body=body_json, set_cookies=set_cookies)
