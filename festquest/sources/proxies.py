"""Konzertkasse and Reservix via self-hosted JSON proxies.

Neither catalog has a public API. Each is expected behind a proxy (e.g. a
serverless function that scrapes and caches listings) configured through
``KONZERTKASSE_PROXY_URL`` / ``RESERVIX_PROXY_URL``. The proxy answers
``GET <base>?q=&city=&start=&end=`` with either ``{"events": [...]}`` or a
bare JSON array of loosely shaped records.
"""

from __future__ import annotations

import abc
from typing import Any

from festquest.base import BaseProvider, clean_params, register
from festquest.fields import first, first_str, iso_date
from festquest.models import EventSource, SearchQuery, UnifiedEvent

NAME = ("name", "title")
DATE = ("date", "start")
VENUE = ("venueName", "venue", "location.name")
CITY = ("city", "location.city")


class ProxyProvider(BaseProvider):
    """Shared mapping for catalogs served through a JSON proxy."""

    #: Country reported when the proxy omits one.
    default_country = "DE"

    @abc.abstractmethod
    def base_url(self) -> str | None:
        """Proxy endpoint, or ``None`` when the catalog is not configured."""

    def is_configured(self) -> bool:
        return bool(self.base_url())

    def request(self, query: SearchQuery) -> tuple[str, dict[str, str], dict[str, str]]:
        params = clean_params({
            "q": query.keyword,
            "city": query.city,
            "start": query.start_date,
            "end": query.end_date,
        })
        return self.base_url() or "", params, {}

    def extract_items(self, payload: Any) -> list[dict]:
        if isinstance(payload, dict) and isinstance(payload.get("events"), list):
            return payload["events"]
        if isinstance(payload, list):
            return payload
        return []

    def parse_event(self, item: dict) -> UnifiedEvent:
        date = iso_date(first(item, DATE))
        city = first_str(item, CITY)
        # "venue" is sometimes an object rather than a name
        venue = first(item, VENUE)
        if isinstance(venue, dict):
            venue = venue.get("name")
        return UnifiedEvent(
            id=self.make_id(item.get("id"), first_str(item, ("name",), default=""), date, city),
            name=first_str(item, NAME, default="Event"),
            date=date,
            venue_name=str(venue) if venue else None,
            city=city,
            country=first_str(item, ("country",), default=self.default_country),
            url=first_str(item, ("url",)),
            image=first_str(item, ("image",)),
            source=self.source,
            price=first_str(item, ("price",)),
            provider=first_str(item, ("category", "genre")),
        )


@register
class KonzertkasseProvider(ProxyProvider):
    source = EventSource.KONZERTKASSE
    id_prefix = "kk"

    def base_url(self) -> str | None:
        return self.settings.konzertkasse_proxy_url


@register
class ReservixProvider(ProxyProvider):
    source = EventSource.RESERVIX
    id_prefix = "rx"

    def base_url(self) -> str | None:
        return self.settings.reservix_proxy_url
