"""Normalize summary inputs and build the compact digests sent to the LLM.

Summary requests carry whatever the client holds: usually ``UnifiedEvent``
JSON, sometimes raw provider records. Everything is read through the same
candidate-path tables so both shapes summarize identically.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from festquest.fields import first, first_str, iso_date
from festquest.models import CompactEvent, UnifiedEvent

DIGEST_LIMIT = 20
PLAN_LIMIT = 30

NAME = ("name", "title", "name.text")
DATE = (
    "date",
    "start",
    "dates.start.dateTime",
    "dates.start.localDate",
    "start.utc",
    "start.local",
)
VENUE = ("venueName", "venue.name", "_embedded.venues.0.name", "location.name", "venue")
CITY = (
    "city",
    "venue.city",
    "_embedded.venues.0.city.name",
    "location.city",
    "venue.address.city",
)
COUNTRY = (
    "country",
    "_embedded.venues.0.country.name",
    "_embedded.venues.0.country.countryCode",
    "venue.address.country",
)
URL = ("url", "link", "resource_url")
PROVIDER = ("provider", "source", "classifications.0.segment.name")
IMAGE = ("image", "images.0.url", "logo.url")


def _as_mapping(event: Any) -> Mapping:
    if isinstance(event, UnifiedEvent):
        return event.to_json()
    return event if isinstance(event, Mapping) else {}


def _price(raw: Mapping) -> Any:
    price = first(raw, ("price",))
    if price is not None:
        return price
    if raw.get("is_free"):
        return "free"
    return first(raw, ("priceRanges.0.min",))


def normalize_event(event: Any) -> dict[str, Any]:
    """Flatten a unified or raw provider event into summary fields."""
    raw = _as_mapping(event)
    date_raw = first_str(raw, DATE)
    return {
        "id": first_str(raw, ("id",)),
        "name": first_str(raw, NAME, default="Unknown event"),
        # unparseable dates are kept verbatim for display
        "date": iso_date(date_raw) or date_raw,
        "venueName": first_str(raw, VENUE),
        "city": first_str(raw, CITY),
        "country": first_str(raw, COUNTRY, default=""),
        "url": first_str(raw, URL),
        "price": _price(raw),
        "provider": first_str(raw, PROVIDER),
        "source": first_str(raw, ("source",)),
        "image": first_str(raw, IMAGE),
    }


def digest_line(event: Mapping[str, Any]) -> str:
    where = ", ".join(
        p for p in (event["venueName"], event["city"], event["country"]) if p
    )
    price = event["price"]
    if isinstance(price, (int, float)) and not isinstance(price, bool):
        price_label = f"from {price}"
    else:
        price_label = str(price) if price else ""
    line = f"{event['name']} - {event['date'] or 'Unknown date'} - {where}"
    if event["provider"]:
        line += f" · {event['provider']}"
    if price_label:
        line += f" - {price_label}"
    return line


def event_digest(events: Iterable[Any], limit: int = DIGEST_LIMIT) -> str:
    """One line per event for the first *limit* events; ``""`` when empty."""
    lines = []
    for i, event in enumerate(events or ()):
        if i >= limit:
            break
        lines.append(digest_line(normalize_event(event)))
    return "\n".join(lines)


def compact_events(items: Iterable[Any], limit: int = PLAN_LIMIT) -> list[CompactEvent]:
    """Token-friendly view of a saved itinerary for the planner."""
    compact = []
    for i, item in enumerate(items or ()):
        if i >= limit:
            break
        e = normalize_event(item)
        compact.append(CompactEvent(
            id=e["id"],
            name=e["name"],
            date=e["date"],
            venue=e["venueName"],
            city=e["city"],
            country=e["country"] or None,
            url=e["url"],
            source=e["source"],
        ))
    return compact
