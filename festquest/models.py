"""Shared Pydantic models for FestQuest."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class EventSource(str, Enum):
    TICKETMASTER = "ticketmaster"
    EVENTBRITE = "eventbrite"
    SEATGEEK = "seatgeek"
    KONZERTKASSE = "konzertkasse"
    RESERVIX = "reservix"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> dict:
        """Dump with camelCase keys, leaving out absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UnifiedEvent(_CamelModel):
    """Provider-agnostic event shared across adapters, summarizer, and API."""

    id: str
    name: str
    date: str | None = None
    venue_name: str | None = None
    city: str | None = None
    country: str | None = None
    url: str | None = None
    image: str | None = None
    source: EventSource
    price: str | None = None
    provider: str | None = None


def split_providers(value: object) -> list[str] | None:
    """Accept a list of tags or a comma-separated string.

    A blank string means "no selection" (all providers); an explicit empty
    list selects none.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()] or None
    return [str(p).strip() for p in value if str(p).strip()]


class SearchQuery(_CamelModel):
    """One inbound search, immutable for the lifetime of a request."""

    keyword: str | None = None
    city: str | None = None
    country_code: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    providers: list[str] | None = None
    tone: str | None = None

    @field_validator("providers", mode="before")
    @classmethod
    def _split(cls, value: object) -> list[str] | None:
        return split_providers(value)

    @field_validator(
        "keyword", "city", "country_code", "start_date", "end_date", "tone",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    def context(self) -> UserContext:
        return UserContext(
            city=self.city,
            keyword=self.keyword,
            start_date=self.start_date,
            end_date=self.end_date,
            tone=self.tone,
        )


class UserContext(_CamelModel):
    city: str | None = None
    keyword: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    tone: str | None = None


class SummaryResult(BaseModel):
    text: str
    degraded: bool = False
    error_detail: str | None = None


class CompactEvent(BaseModel):
    """Token-friendly event shape sent to the itinerary planner."""

    id: str | None = None
    name: str | None = None
    date: str | None = None
    venue: str | None = None
    city: str | None = None
    country: str | None = None
    url: str | None = None
    source: str | None = None

    model_config = ConfigDict(extra="ignore")
