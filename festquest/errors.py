"""Exception types raised across adapters and the summarization tiers."""

from __future__ import annotations

#: Upstream response bodies are cut to this many characters for diagnostics.
BODY_LIMIT = 500


def truncate_body(text: str | None, limit: int = BODY_LIMIT) -> str:
    return (text or "")[:limit]


class FestQuestError(Exception):
    """Base class for all FestQuest errors."""


class ProviderError(FestQuestError):
    """A provider answered with a non-success HTTP status."""

    def __init__(self, source: str, status_code: int, body: str | None = None) -> None:
        self.source = source
        self.status_code = status_code
        self.body = truncate_body(body)
        super().__init__(f"[{source}] {status_code} {self.body}".rstrip())


class GenerativeError(FestQuestError):
    """The text-generation backend failed (HTTP status or network error)."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class GenerativeUnavailable(FestQuestError):
    """No credential is configured for the text-generation backend."""


class PlanningError(FestQuestError):
    """Itinerary planning failed after exhausting the model fallback list."""

    def __init__(self, detail: str, attempted: list[str] | None = None) -> None:
        self.detail = detail
        self.attempted = list(attempted or [])
        super().__init__(detail)
