#!/usr/bin/env python3
"""Dump what the storefront client sees for one catalog listing.

This script parses a listing query string, runs the filtered search and
the scope-only options search, loads the category tree, and prints the
parsed results alongside the request metrics so you can check filter
translation and cache behaviour against a live shop API.

Usage
-----
Point it at a shop API and run::

    export STOREFRONT_API_URL="http://localhost:3000/shop-api"
    python scripts/dump_catalog.py --query "brands=1,2&sort=price-asc&page=2"

Options::

    --query QS           Listing query string (default: empty)
    --collection SLUG    Browse inside this collection
    --repeat N           Run the listing N times (client render mode, shows cache hits)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pystorefront import RemoteApiError, RenderMode, StorefrontClient, StorefrontConfig  # noqa: E402
from pystorefront import filters  # noqa: E402
from pystorefront.query_builder import CategoryNode  # noqa: E402


def _section(title: str) -> str:
    return f"\n{'=' * 60}\n  {title}\n{'=' * 60}"


def _tree_lines(nodes: list[CategoryNode], depth: int = 0) -> list[str]:
    lines: list[str] = []
    for node in nodes:
        lines.append(f"  {'  ' * depth}- {node.name} ({node.slug}) [{node.product_count}]")
        lines.extend(_tree_lines(list(node.children), depth + 1))
    return lines


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump a catalog listing as pystorefront parses it.",
    )
    parser.add_argument("--query", default="", help="Listing query string")
    parser.add_argument("--collection", help="Collection slug to browse")
    parser.add_argument("--repeat", type=int, default=1, help="Run the listing N times")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {"debug": True}
    if args.repeat > 1:
        overrides["render_mode"] = RenderMode.CLIENT
    config = StorefrontConfig.from_env(**overrides)
    state = filters.parse(args.query)

    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "api_url": config.api_url,
        "render_mode": str(config.render_mode),
        "filters": state.model_dump(mode="json"),
    }
    out: list[str] = [_section("pystorefront dump_catalog")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  api       : {config.api_url} ({config.render_mode})")
    out.append(f"  filters   : {state!r}")

    async with StorefrontClient(config) as client:
        try:
            for _ in range(max(args.repeat, 1)):
                page = await client.browse(state, collection_slug=args.collection)
            tree = await client.get_category_tree()
        except RemoteApiError as exc:
            print(f"!! request failed: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc

        info = page.page_info
        result["page"] = {
            "current": info.current_page,
            "total_pages": info.total_pages,
            "total_items": info.total_items,
        }
        result["items"] = [item.model_dump(mode="json") for item in page.items]
        result["price_bounds"] = {"min": page.price_bounds.min, "max": page.price_bounds.max}
        result["brands"] = [option.__dict__ for option in page.brands]
        result["product_types"] = [option.__dict__ for option in page.product_types]
        result["facet_types"] = page.facet_types
        result["metrics"] = [metric.model_dump() for metric in client.tracker.recent()]
        result["summary"] = client.tracker.summary().model_dump()

        out.append(_section("RESULTS"))
        out.append(f"  page {info.current_page}/{info.total_pages}, {info.total_items} items")
        for item in page.items:
            price = item.price_with_tax
            shown = "-" if price is None else f"{price.low}..{price.high}"
            out.append(f"  - {item.product_name} ({item.slug}) {shown}")
        out.append(_section("OPTIONS"))
        out.append(f"  price     : {page.price_bounds.min}..{page.price_bounds.max}")
        out.append(f"  facets    : {', '.join(page.facet_types) or '-'}")
        for option in page.brands:
            out.append(f"  brand     : {option.name} [{option.product_count}]")
        for option in page.product_types:
            out.append(f"  type      : {option.name} [{option.product_count}]")
        out.append(_section("CATEGORIES"))
        out.extend(_tree_lines(tree))
        out.append(_section("METRICS"))
        for metric in client.tracker.recent():
            hit = "hit " if metric.cache_hit else "miss"
            out.append(f"  {hit} {metric.name:<28} {metric.query_time_ms:8.1f}ms {metric.query_size:>8}b")
        summary = client.tracker.summary()
        out.append(f"  hit ratio {summary.hit_ratio:.0%}, mean {summary.mean_query_time_ms:.1f}ms")

    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    elif args.output:
        Path(args.output).write_text("\n".join(out), encoding="utf-8")
        print(f"Output written to {args.output}")
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
