"""SeatGeek events via the Platform API v2."""

from __future__ import annotations

from typing import Any

from festquest.base import BaseProvider, clean_params, register
from festquest.fields import first, first_match, first_str, iso_date
from festquest.models import EventSource, SearchQuery, UnifiedEvent

_ENDPOINT = "https://api.seatgeek.com/2/events"

NAME = ("title", "short_title")
DATE = ("datetime_local", "datetime_utc")
VENUE = ("venue.name",)
CITY = ("venue.city",)
COUNTRY = ("venue.country",)


def _performer_image(item: dict) -> str | None:
    performer = first_match(
        item.get("performers"), lambda p: first_str(p, ("image",)) is not None
    )
    return first_str(performer, ("image",))


def _price(item: dict) -> str | None:
    lowest = first(item, ("stats.lowest_price", "stats.lowest_sg_base_price"))
    if lowest is None:
        return None
    try:
        return f"From USD {float(lowest):.0f}"
    except (TypeError, ValueError):
        return None


@register
class SeatGeekProvider(BaseProvider):
    source = EventSource.SEATGEEK
    id_prefix = "sg"

    def is_configured(self) -> bool:
        return bool(self.settings.seatgeek_client_id)

    def request(self, query: SearchQuery) -> tuple[str, dict[str, str], dict[str, str]]:
        params = clean_params({
            "client_id": self.settings.seatgeek_client_id,
            "per_page": 20,
            "sort": "datetime_utc.asc",
            "q": query.keyword,
            "venue.city": query.city,
            "datetime_utc.gte": f"{query.start_date}T00:00:00Z" if query.start_date else None,
            "datetime_utc.lte": f"{query.end_date}T23:59:59Z" if query.end_date else None,
        })
        return _ENDPOINT, params, {}

    def extract_items(self, payload: Any) -> list[dict]:
        items = payload.get("events") if isinstance(payload, dict) else None
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
            image=_performer_image(item),
            source=self.source,
            price=_price(item),
            provider=first_str(item, ("type", "taxonomies.0.name")),
        )
