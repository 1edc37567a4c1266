"""Abstract provider adapter with a shared httpx client and a registry."""

from __future__ import annotations

import abc
import logging
from typing import Any

import httpx

from festquest.config import Settings, get_settings
from festquest.errors import ProviderError
from festquest.models import EventSource, SearchQuery, UnifiedEvent

log = logging.getLogger(__name__)

USER_AGENT = "FestQuest/1.0 (+https://festquest.app)"


def build_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Create the client shared by every adapter for one aggregate call."""
    timeout = (settings or get_settings()).http_timeout
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        timeout=timeout,
    )


def clean_params(params: dict[str, Any]) -> dict[str, str]:
    """Drop ``None`` and blank values before they reach a query string."""
    return {
        k: str(v)
        for k, v in params.items()
        if v is not None and str(v).strip()
    }


class BaseProvider(abc.ABC):
    """Abstract adapter that every catalog source must subclass.

    Subclasses map a :class:`SearchQuery` onto the provider's query
    conventions (:meth:`request`) and convert one raw record into a
    :class:`UnifiedEvent` (:meth:`parse_event`, pure). :meth:`fetch` glues the
    two together and owns the HTTP contract:

    * not configured -> ``[]`` without touching the network;
    * non-2xx -> :class:`ProviderError` with the status and a truncated body;
    * transport errors propagate unchanged.
    """

    #: Source tag, e.g. ``EventSource.TICKETMASTER``.
    source: EventSource

    #: Short prefix used when building event ids, e.g. ``"tm"``.
    id_prefix: str = ""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        if not getattr(self, "source", None) or not self.id_prefix:
            raise ValueError("Provider subclass must set 'source' and 'id_prefix'")
        self.settings = settings or get_settings()
        self._client = client

    @property
    def name(self) -> str:
        return self.source.value

    # ------------------------------------------------------------------
    # Provider contract
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def is_configured(self) -> bool:
        """Whether the credential or base URL this provider needs is set."""

    @abc.abstractmethod
    def request(self, query: SearchQuery) -> tuple[str, dict[str, str], dict[str, str]]:
        """Return ``(url, params, headers)`` for one search."""

    @abc.abstractmethod
    def extract_items(self, payload: Any) -> list[dict]:
        """Pull the raw event records out of a decoded response body."""

    @abc.abstractmethod
    def parse_event(self, item: dict) -> UnifiedEvent:
        """Map one raw record onto :class:`UnifiedEvent`."""

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET *url* once and decode JSON; non-2xx raises ProviderError."""
        if self._client is None:
            async with build_client(self.settings) as client:
                resp = await client.get(url, params=params, headers=headers)
        else:
            resp = await self._client.get(url, params=params, headers=headers)
        if not resp.is_success:
            raise ProviderError(self.name, resp.status_code, resp.text)
        return resp.json()

    async def fetch(self, query: SearchQuery) -> list[UnifiedEvent]:
        """Search this provider and return normalized events."""
        if not self.is_configured():
            log.debug("[%s] not configured, skipping", self.name)
            return []
        url, params, headers = self.request(query)
        payload = await self.get_json(url, params=params, headers=headers)
        events: list[UnifiedEvent] = []
        for item in self.extract_items(payload):
            if not isinstance(item, dict):
                continue
            try:
                events.append(self.parse_event(item))
            except (ValueError, TypeError) as exc:
                log.warning("[%s] skipping malformed record %r: %s", self.name, item.get("id"), exc)
        return events

    def make_id(self, native_id: Any, name: str, date: str | None, city: str | None) -> str:
        """``<prefix>_<nativeId>``, or a name/date/city fingerprint."""
        if native_id is not None and str(native_id).strip():
            return f"{self.id_prefix}_{native_id}"
        return f"{self.id_prefix}_{name[:24]}_{date or ''}_{city or ''}"


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

_registry: dict[str, type[BaseProvider]] = {}


def register(cls: type[BaseProvider]) -> type[BaseProvider]:
    """Class decorator that registers a provider by its source tag."""
    _registry[cls.source.value] = cls
    return cls


def get_providers() -> dict[str, type[BaseProvider]]:
    """Return a copy of the provider registry in enumeration order.

    Enumeration follows the declaration order of :class:`EventSource`, not
    import order, so duplicate resolution is reproducible.
    """
    order = list(EventSource)
    return {
        name: _registry[name]
        for name in sorted(_registry, key=lambda n: order.index(EventSource(n)))
    }

