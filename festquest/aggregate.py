"""Fan a search out to providers concurrently, then merge, dedupe, and sort.

Every adapter call settles independently into an :class:`Outcome`; one
provider failing (HTTP error, timeout, bad payload) never costs the others'
results. Outcomes are joined in enumeration order, not completion order, so
"first occurrence wins" during deduplication is reproducible.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

import httpx

import festquest.sources  # noqa: F401  (registers providers)
from festquest.base import BaseProvider, build_client, get_providers
from festquest.config import Settings, get_settings
from festquest.models import SearchQuery, UnifiedEvent

log = logging.getLogger(__name__)

DedupKey = Callable[[UnifiedEvent], tuple]


@dataclass(frozen=True)
class Outcome:
    """Result of one adapter call: events on success, the error otherwise."""

    source: str
    events: list[UnifiedEvent] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def dedup_key(event: UnifiedEvent) -> tuple[str, str, str]:
    """Case-insensitive ``(name, date, city)`` fingerprint."""
    return (
        (event.name or "").lower(),
        event.date or "",
        (event.city or "").lower(),
    )


def dedupe(
    events: Iterable[UnifiedEvent], key: DedupKey = dedup_key
) -> list[UnifiedEvent]:
    """Keep the first event seen for each key."""
    seen: set = set()
    unique: list[UnifiedEvent] = []
    for event in events:
        k = key(event)
        if k in seen:
            continue
        seen.add(k)
        unique.append(event)
    return unique


def sort_events(events: Iterable[UnifiedEvent]) -> list[UnifiedEvent]:
    """Stable ascending sort on the ISO date; dateless events come first."""
    return sorted(events, key=lambda e: e.date or "")


def merge(outcomes: Sequence[Outcome], key: DedupKey = dedup_key) -> list[UnifiedEvent]:
    """Flatten successful outcomes in order, dedupe, and sort."""
    flat = [event for outcome in outcomes if outcome.ok for event in outcome.events]
    return sort_events(dedupe(flat, key=key))


def resolve_providers(
    names: Sequence[str] | None,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> list[BaseProvider]:
    """Instantiate requested providers in enumeration order.

    ``None`` means every registered provider; unknown names are ignored.
    """
    registry = get_providers()
    wanted = set(registry) if names is None else set(names)
    unknown = wanted - set(registry)
    if unknown:
        log.info("Ignoring unknown provider(s): %s", ", ".join(sorted(unknown)))
    return [
        cls(client=client, settings=settings)
        for name, cls in registry.items()
        if name in wanted
    ]


async def _settle(provider: BaseProvider, query: SearchQuery) -> Outcome:
    try:
        events = await provider.fetch(query)
    except Exception as exc:
        log.warning("[%s] search failed: %s", provider.name, exc)
        return Outcome(source=provider.name, error=exc)
    return Outcome(source=provider.name, events=events)


async def gather_outcomes(
    providers: Sequence[BaseProvider], query: SearchQuery
) -> list[Outcome]:
    """Run every provider concurrently; results keep the input order."""
    return list(await asyncio.gather(*(_settle(p, query) for p in providers)))


async def aggregate_outcomes(
    query: SearchQuery,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    providers: Sequence[BaseProvider] | None = None,
) -> list[Outcome]:
    """Per-provider outcomes for *query*, for callers that want diagnostics."""
    settings = settings or get_settings()
    if providers is not None:
        return await gather_outcomes(providers, query)
    if client is not None:
        return await gather_outcomes(
            resolve_providers(query.providers, client, settings), query
        )
    async with build_client(settings) as shared:
        return await gather_outcomes(
            resolve_providers(query.providers, shared, settings), query
        )


async def aggregate(
    query: SearchQuery,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    providers: Sequence[BaseProvider] | None = None,
    key: DedupKey = dedup_key,
) -> list[UnifiedEvent]:
    """Search all requested providers and return merged, sorted events.

    Never raises for provider failures: with every provider down the result
    is simply empty.
    """
    outcomes = await aggregate_outcomes(query, settings, client, providers)
    events = merge(outcomes, key=key)
    failed = [o.source for o in outcomes if not o.ok]
    log.info(
        "Aggregated %d event(s) from %d provider(s)%s",
        len(events),
        len(outcomes),
        f", failed: {', '.join(failed)}" if failed else "",
    )
    return events
