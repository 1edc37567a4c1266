"""FestQuest API."""

import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Depends, FastAPI, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from festquest.aggregate import aggregate
from festquest.base import get_providers
from festquest.calendar import to_ics
from festquest.config import Settings, configure_logging, get_settings
from festquest.errors import GenerativeUnavailable, PlanningError
from festquest.models import SearchQuery, UserContext
from festquest.summary import plan_itinerary, revise_section, summarize

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(title="FestQuest", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------
# Dependencies
# ------------------------------------------------------------------


def settings_dep() -> Settings:
    return get_settings()


def http_client_dep() -> httpx.AsyncClient | None:
    """Outbound client override; ``None`` lets each service build its own."""
    return None


# ------------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------------


class SummaryRequest(UserContext):
    events: list[dict[str, Any]] = Field(default_factory=list)


class PlanRequest(UserContext):
    itinerary: list[dict[str, Any]] | None = None


class SectionRequest(BaseModel):
    action: str | None = None
    text: str | None = None


class CalendarRequest(BaseModel):
    events: list[dict[str, Any]] = Field(default_factory=list)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


# ------------------------------------------------------------------
# Routes
# ------------------------------------------------------------------


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/providers")
async def list_providers(settings: Settings = Depends(settings_dep)):
    """List known providers and whether each one is configured."""
    return [
        {"source": name, "configured": cls(settings=settings).is_configured()}
        for name, cls in get_providers().items()
    ]


@app.get("/api/events")
async def search_events(
    city: str | None = None,
    keyword: str | None = None,
    country_code: str | None = Query(None, alias="countryCode"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    providers: str | None = Query(None, description="Comma-separated provider list"),
    settings: Settings = Depends(settings_dep),
    client: httpx.AsyncClient | None = Depends(http_client_dep),
):
    """Search every requested provider and return merged events."""
    query = SearchQuery(
        city=city,
        keyword=keyword,
        country_code=country_code,
        start_date=start_date,
        end_date=end_date,
        providers=providers,
    )
    events = await aggregate(query, settings=settings, client=client)
    return {"events": [e.to_json() for e in events]}


@app.post("/api/events")
async def search_events_post(
    query: SearchQuery | None = None,
    settings: Settings = Depends(settings_dep),
    client: httpx.AsyncClient | None = Depends(http_client_dep),
):
    events = await aggregate(query or SearchQuery(), settings=settings, client=client)
    return {"events": [e.to_json() for e in events]}


@app.post("/api/ai-recommend")
async def ai_recommend(
    body: SummaryRequest,
    settings: Settings = Depends(settings_dep),
    client: httpx.AsyncClient | None = Depends(http_client_dep),
):
    """Summarize events; a generative failure still answers 200."""
    result = await summarize(body.events, body, settings=settings, client=client)
    payload: dict[str, Any] = {"summary": result.text}
    if result.error_detail:
        payload["error"] = result.error_detail
    return payload


@app.post("/api/search")
async def search_and_summarize(
    query: SearchQuery | None = None,
    settings: Settings = Depends(settings_dep),
    client: httpx.AsyncClient | None = Depends(http_client_dep),
):
    """Aggregate, then summarize the merged result in one round trip."""
    query = query or SearchQuery()
    events = await aggregate(query, settings=settings, client=client)
    result = await summarize(events, query.context(), settings=settings, client=client)
    payload: dict[str, Any] = {
        "events": [e.to_json() for e in events],
        "summary": result.text,
        "degraded": result.degraded,
    }
    if result.error_detail:
        payload["error"] = result.error_detail
    return payload


@app.post("/api/plan-itinerary")
async def plan(
    body: PlanRequest,
    settings: Settings = Depends(settings_dep),
    client: httpx.AsyncClient | None = Depends(http_client_dep),
):
    """Day-by-day Markdown plan for a saved itinerary."""
    if not body.itinerary:
        return _error("Itinerary is required and cannot be empty.", 400)
    try:
        summary = await plan_itinerary(
            body.itinerary, body, settings=settings, client=client
        )
    except GenerativeUnavailable as exc:
        return _error(str(exc), 503)
    except PlanningError as exc:
        log.error("Planning failed after %s: %s", exc.attempted, exc.detail)
        return _error(exc.detail or "Groq API error", 502)
    return {"summary": summary}


@app.post("/api/plan-section")
async def plan_section(
    body: SectionRequest,
    settings: Settings = Depends(settings_dep),
    client: httpx.AsyncClient | None = Depends(http_client_dep),
):
    """Shorten, expand, or regenerate one day of a plan."""
    if not body.text or not body.text.strip():
        return _error("No section text provided.", 400)
    try:
        summary = await revise_section(
            body.action, body.text, settings=settings, client=client
        )
    except GenerativeUnavailable as exc:
        return _error(str(exc), 503)
    except PlanningError as exc:
        return _error(exc.detail or "Groq API error", 502)
    return {"summary": summary}


@app.post("/api/calendar")
async def export_calendar(body: CalendarRequest):
    """Download saved events as an .ics file."""
    if not body.events:
        return _error("No events to export.", 400)
    return Response(
        content=to_ics(body.events),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="festquest-itinerary.ics"'},
    )
