"""System instructions and user-message builders for the generative tier."""

from __future__ import annotations

import json
from typing import Sequence

from festquest.models import CompactEvent, UserContext

SUMMARY_SYSTEM = " ".join([
    "You are an energetic but concise festival & events planner.",
    "Given a city, date range, keyword, and a list of events, produce a short, helpful plan.",
    "Always output with these sections in this order:",
    "1) Top Picks: 2-3 bullets with event name, date, and a why-it's-cool note.",
    "2) Suggested Itinerary: a compact day or weekend flow (Morning / Afternoon / Evening).",
    "3) Pro Tips: 1-2 short tips (tickets, transit, budget).",
    "Keep under 180 words. Prefer concrete details over fluff. Use simple emojis sparingly.",
    "Adapt to tone if provided: Fun (party vibe), Family (kid-friendly), "
    "Cultural (museums, heritage), Budget (low-cost, free).",
])

PLAN_SYSTEM = (
    "You are a meticulous, concise travel-planning assistant.\n"
    "Return output as **GitHub-flavored Markdown** (no code fences).\n"
    "Follow this structure EXACTLY:\n"
    "# Day-by-Day Plan\n"
    "For each day, print a level-3 heading: \n"
    "### 📅 {YYYY-MM-DD} — {City}\n"
    "Then three subsections:\n"
    "#### Morning\n- one-line bullets (use emojis like 🚶‍♂️ 🚌 🎟️ 🍽️ 🕒 💡) "
    "with a price bracket (€, €€, €€€ or free)\n"
    "#### Afternoon\n- one-line bullets (same rules)\n"
    "#### Evening\n- one-line bullets (same rules)\n"
    "After the last day include:\n"
    "## 🎯 Top Picks\n- 3-5 best items with 1-line reasons\n"
    "## 🧭 Pro Tips\n- 3-6 bullets on transport/booking/timing/weather\n"
    "Rules: Respect given dates; if dates are missing, cluster sensibly by location; "
    "avoid overlaps; mark uncertain info as (approx). Keep **max 5 bullets per day** "
    "total. Keep lines short."
)

PLAN_NOTES = (
    "Prefer walking/transit; keep hops ≤30 minutes when possible; "
    "include links if provided."
)

SECTION_SYSTEM = (
    "You are a concise travel planner.\n"
    "Return **GitHub-flavored Markdown** only (no code fences).\n"
    'Preserve the first heading line exactly if present (e.g., "### 📅 2025-09-26 — Berlin").\n'
    "Use short, single-line bullets with emojis (🚶‍♂️ 🚌 🎟️ 🍽️ 🕒 💡) and price brackets "
    "(€, €€, €€€, free).\n"
    "Avoid overlaps; mark uncertain info as (approx).\n"
)

SECTION_ACTIONS = {
    "shorten": (
        "Shorten this itinerary day to 2-3 concise one-line bullets. "
        "Keep original date/city heading."
    ),
    "expand": (
        "Expand this itinerary day with 2-3 extra relevant bullets "
        "(venues, food, logistics). Keep concise one-liners."
    ),
}
SECTION_REGENERATE = (
    "Regenerate this itinerary day with fresh, realistic suggestions. "
    "Keep format and heading."
)


def summary_messages(digest: str, ctx: UserContext) -> list[dict[str, str]]:
    lines = []
    if ctx.city:
        lines.append(f"City: {ctx.city}")
    if ctx.keyword:
        lines.append(f"Keyword: {ctx.keyword}")
    if ctx.start_date or ctx.end_date:
        lines.append(f"Dates: {ctx.start_date or '?'} to {ctx.end_date or '?'}")
    if ctx.tone:
        lines.append(f"Tone: {ctx.tone}")
    lines.append("\nEvents:\n" + digest)
    return [
        {"role": "system", "content": SUMMARY_SYSTEM},
        {"role": "user", "content": "\n".join(lines)},
    ]


def plan_messages(items: Sequence[CompactEvent], ctx: UserContext) -> list[dict[str, str]]:
    payload = {
        "city": ctx.city or "",
        "dateWindow": {"startDate": ctx.start_date or "", "endDate": ctx.end_date or ""},
        "tone": ctx.tone or "Default",
        "items": [item.model_dump() for item in items],
        "notes": PLAN_NOTES,
    }
    return [
        {"role": "system", "content": PLAN_SYSTEM},
        {"role": "user", "content": json.dumps(payload, indent=2, ensure_ascii=False)},
    ]


def section_messages(action: str | None, text: str) -> list[dict[str, str]]:
    instruction = SECTION_ACTIONS.get((action or "").lower(), SECTION_REGENERATE)
    return [
        {"role": "system", "content": SECTION_SYSTEM},
        {"role": "user", "content": f"{instruction}\n\n---\n{text}\n---"},
    ]
