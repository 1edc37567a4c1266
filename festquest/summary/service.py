"""Two-tier summarization: Groq when available, rule-based otherwise."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from festquest.config import Settings, get_settings
from festquest.errors import GenerativeError, GenerativeUnavailable
from festquest.models import SummaryResult, UserContext
from festquest.summary.digest import compact_events, event_digest
from festquest.summary.fallback import rule_based_summary
from festquest.summary.groq import GroqClient
from festquest.summary.prompts import plan_messages, section_messages, summary_messages

log = logging.getLogger(__name__)


async def summarize(
    events: Sequence[Any],
    context: UserContext | None = None,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> SummaryResult:
    """Summarize *events* for the user, degrading to the rule-based text.

    A missing credential or an empty digest is a normal outcome; only an
    upstream failure or an empty completion marks the result degraded.
    This never raises for backend problems.
    """
    settings = settings or get_settings()
    context = context or UserContext()
    fallback = rule_based_summary(events, context)

    if not settings.groq_api_key:
        return SummaryResult(text=fallback)

    digest = event_digest(events)
    if not digest:
        return SummaryResult(text=fallback)

    groq = GroqClient(settings, client)
    try:
        text = await groq.chat(summary_messages(digest, context), temperature=0.5)
    except GenerativeError as exc:
        log.warning("AI summary failed, using rule-based summary: %s", exc.detail)
        return SummaryResult(text=fallback, degraded=True, error_detail=exc.detail)

    if not text.strip():
        log.warning("AI summary came back empty, using rule-based summary")
        return SummaryResult(text=fallback, degraded=True)
    return SummaryResult(text=text)


async def plan_itinerary(
    items: Sequence[Any],
    context: UserContext | None = None,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Day-by-day Markdown plan for a saved itinerary.

    There is no rule-based equivalent: raises :class:`ValueError` for an
    empty itinerary, :class:`GenerativeUnavailable` without a credential,
    and :class:`PlanningError` once every model has been tried.
    """
    if not items:
        raise ValueError("Itinerary is required and cannot be empty.")
    settings = settings or get_settings()
    groq = GroqClient(settings, client)
    if not groq.configured:
        raise GenerativeUnavailable("Missing GROQ_API_KEY environment variable")

    messages = plan_messages(compact_events(items), context or UserContext())
    return await groq.chat_with_fallback(messages, temperature=0.6, max_tokens=1200)


async def revise_section(
    action: str | None,
    text: str,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Shorten, expand, or regenerate one day of a generated plan."""
    if not text or not text.strip():
        raise ValueError("No section text provided.")
    settings = settings or get_settings()
    groq = GroqClient(settings, client)
    if not groq.configured:
        raise GenerativeUnavailable("Missing GROQ_API_KEY")
    return await groq.chat_with_fallback(
        section_messages(action, text), temperature=0.6, max_tokens=600
    )
