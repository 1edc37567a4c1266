"""Rule-based summary used whenever the generative tier is unavailable.

Pure and deterministic: the same events and context always produce the same
text, and nothing here performs I/O.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

from festquest.models import UserContext
from festquest.summary.digest import normalize_event

#: Statistics are computed over this many leading events.
STATS_WINDOW = 10
TIP = "Tip: narrow down by neighborhood or add a price filter (e.g., free, under €20)."


def _scope(ctx: UserContext) -> str:
    parts = [p for p in (ctx.city, ctx.keyword) if p]
    return " · ".join(parts) or "your filters"


def filter_echo(ctx: UserContext) -> str:
    meta: list[str] = []
    if ctx.city:
        meta.append(f"📍 {ctx.city}")
    if ctx.keyword:
        meta.append(f"🎯 {ctx.keyword}")
    if ctx.start_date or ctx.end_date:
        meta.append(f"🗓️ {ctx.start_date or '?'} → {ctx.end_date or '?'}")
    return "  |  ".join(meta)


def rule_based_summary(events: Sequence[Any], ctx: UserContext | None = None) -> str:
    """Count, earliest date, top-3 hotspots, top-3 picks, and the active filters."""
    ctx = ctx or UserContext()
    if not events:
        return (
            f"No events to summarize yet for {_scope(ctx)}. "
            "Try adjusting dates or keywords."
        )

    normalized = [normalize_event(e) for e in events]
    top = normalized[:STATS_WINDOW]

    by_city = Counter(e["city"] or "TBA" for e in top)
    hotspots = ", ".join(f"{city} ({n})" for city, n in by_city.most_common(3))

    dates = [e["date"] for e in top if e["date"]]
    earliest = min(dates) if dates else None

    picks = " • ".join(e["name"] for e in top[:3] if e["name"])

    found = f"Found {len(normalized)} events."
    if earliest:
        found += f" Earliest: {earliest}."

    lines = [
        filter_echo(ctx),
        found,
        f"Hotspots: {hotspots}." if hotspots else "",
        f"Top picks: {picks}." if picks else "",
        TIP,
    ]
    return "\n".join(line for line in lines if line)
