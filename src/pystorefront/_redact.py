"""Helpers for safe logging of GraphQL traffic.

Operation variables carry passwords, reset and verification tokens, and
payment metadata; error entries from a development server carry stack
traces. :func:`redact_for_log` returns a JSON-shaped copy with those values
replaced before it reaches a log record.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "<redacted>"
OMITTED = "<omitted>"

# Matched against the lower-cased key: any key naming a password, and
# token, resetToken, verificationToken and the like.
_SENSITIVE_SUFFIX = "token"
_SENSITIVE_KEYS: frozenset[str] = frozenset({"authorization", "cookie", "set-cookie", "metadata"})
_NOISY_KEYS: frozenset[str] = frozenset({"stacktrace"})

_MAX_DEPTH = 20


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return lowered in _SENSITIVE_KEYS or "password" in lowered or lowered.endswith(_SENSITIVE_SUFFIX)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a redacted copy of GraphQL *value* (variables or errors) for logs."""

    def walk(node: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        if node is None or isinstance(node, (bool, int, float)):
            return node
        if isinstance(node, str):
            return f"{node[:max_string]}…<truncated>" if len(node) > max_string else node
        if isinstance(node, Mapping):
            redacted: dict[str, Any] = {}
            for k, v in node.items():
                key = str(k)
                if is_sensitive_key(key):
                    redacted[key] = REDACTED
                elif key.lower() in _NOISY_KEYS:
                    redacted[key] = OMITTED
                else:
                    redacted[key] = walk(v, depth + 1)
            return redacted
        if isinstance(node, Sequence) and not isinstance(node, (bytes, bytearray)):
            return [walk(item, depth + 1) for item in node]
        return repr(node)

    return walk(value, 0)
