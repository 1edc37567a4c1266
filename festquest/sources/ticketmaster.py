"""Ticketmaster events via the Discovery API v2."""

from __future__ import annotations

from typing import Any

from festquest.base import BaseProvider, clean_params, register
from festquest.fields import dig, first, first_str, iso_date
from festquest.models import EventSource, SearchQuery, UnifiedEvent

_ENDPOINT = "https://app.ticketmaster.com/discovery/v2/events.json"
_PAGE_SIZE = 20

NAME = ("name",)
DATE = ("dates.start.localDate", "dates.start.dateTime")
VENUE = ("_embedded.venues.0.name",)
CITY = ("_embedded.venues.0.city.name",)
COUNTRY = ("_embedded.venues.0.country.name", "_embedded.venues.0.country.countryCode")
IMAGE = ("images.0.url",)
CATEGORY = ("classifications.0.segment.name", "classifications.0.genre.name")


def format_price(price_ranges: Any) -> str | None:
    """Render the first price range, e.g. ``"USD 20-85"`` or ``"From EUR 15"``."""
    pr = dig(price_ranges, "0")
    if not isinstance(pr, dict):
        return None
    lo = pr.get("min")
    hi = pr.get("max")
    currency = pr.get("currency") or "USD"
    try:
        if lo is not None and hi is not None:
            return f"{currency} {float(lo):.0f}-{float(hi):.0f}"
        if lo is not None:
            return f"From {currency} {float(lo):.0f}"
    except (TypeError, ValueError):
        return None
    return None


@register
class TicketmasterProvider(BaseProvider):
    source = EventSource.TICKETMASTER
    id_prefix = "tm"

    def is_configured(self) -> bool:
        return bool(self.settings.tm_api_key)

    def request(self, query: SearchQuery) -> tuple[str, dict[str, str], dict[str, str]]:
        params = clean_params({
            "apikey": self.settings.tm_api_key,
            "size": _PAGE_SIZE,
            "sort": "date,asc",
            "keyword": query.keyword,
            "city": query.city,
            "countryCode": query.country_code.upper() if query.country_code else None,
            "startDateTime": f"{query.start_date}T00:00:00Z" if query.start_date else None,
            "endDateTime": f"{query.end_date}T23:59:59Z" if query.end_date else None,
        })
        return _ENDPOINT, params, {}

    def extract_items(self, payload: Any) -> list[dict]:
        items = dig(payload, "_embedded.events")
        return items if isinstance(items, list) else []

    def parse_event(self, item: dict) -> UnifiedEvent:
        name = first_str(item, NAME, default="Event")
        date = iso_date(first(item, DATE))
        city = first_str(item, CITY)
        return UnifiedEvent(
            id=self.make_id(item.get("id"), name, date, city),
            name=name,
            date=date,
            venue_name=first_str(item, VENUE),
            city=city,
            country=first_str(item, COUNTRY),
            url=first_str(item, ("url",)),
            image=first_str(item, IMAGE),
            source=self.source,
            price=format_price(item.get("priceRanges")),
            provider=first_str(item, CATEGORY),
        )
