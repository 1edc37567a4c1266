"""Eventbrite events via the v3 search API."""

from __future__ import annotations

from typing import Any

from festquest.base import BaseProvider, clean_params, register
from festquest.fields import first, first_str, iso_date
from festquest.models import EventSource, SearchQuery, UnifiedEvent

_ENDPOINT = "https://www.eventbriteapi.com/v3/events/search/"

NAME = ("name.text", "name.html")
DATE = ("start.local", "start.utc")
VENUE = ("venue.name",)
CITY = ("venue.address.city",)
COUNTRY = ("venue.address.country",)
IMAGE = ("logo.url", "logo.original.url")


def _price(item: dict) -> str | None:
    if item.get("is_free"):
        return "Free"
    return first_str(item, ("ticket_availability.minimum_ticket_price.display",))


@register
class EventbriteProvider(BaseProvider):
    source = EventSource.EVENTBRITE
    id_prefix = "eb"

    def is_configured(self) -> bool:
        return bool(self.settings.eventbrite_token)

    def request(self, query: SearchQuery) -> tuple[str, dict[str, str], dict[str, str]]:
        params = clean_params({
            "expand": "venue",
            "page_size": 20,
            "q": query.keyword,
            "location.address": query.city,
            "start_date.range_start": (
                f"{query.start_date}T00:00:00Z" if query.start_date else None
            ),
            "start_date.range_end": (
                f"{query.end_date}T23:59:59Z" if query.end_date else None
            ),
        })
        headers = {"Authorization": f"Bearer {self.settings.eventbrite_token}"}
        return _ENDPOINT, params, headers

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
            image=first_str(item, IMAGE),
            source=self.source,
            price=_price(item),
            provider=first_str(item, ("category.name",)),
        )
