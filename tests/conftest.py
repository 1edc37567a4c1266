"""Shared pytest fixtures for the FestQuest test suite."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from festquest.config import Settings
from festquest.models import EventSource, UnifiedEvent


class Recorder:
    """httpx.MockTransport handler that records requests and replays routes.

    Routes map a substring of the request URL to either an ``httpx.Response``
    or a callable ``(request) -> httpx.Response``; the first match wins.
    """

    def __init__(self, routes: dict[str, object] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        for fragment, answer in self.routes.items():
            if fragment in url:
                if callable(answer):
                    return answer(request)
                return answer
        return httpx.Response(404, text="no route")

    def calls_to(self, fragment: str) -> list[httpx.Request]:
        return [r for r in self.requests if fragment in str(r.url)]

    def json_bodies(self, fragment: str) -> list[dict]:
        return [json.loads(r.content) for r in self.calls_to(fragment)]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client(recorder: Recorder) -> Callable[[], httpx.AsyncClient]:
    """Return a factory for AsyncClients backed by the shared recorder."""

    def _make() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(recorder))

    return _make


@pytest.fixture
def settings() -> Settings:
    """Settings with every credential configured."""
    return Settings(
        tm_api_key="tm-key",
        eventbrite_token="eb-token",
        seatgeek_client_id="sg-id",
        konzertkasse_proxy_url="https://kk.example/api",
        reservix_proxy_url="https://rx.example/api",
        groq_api_key="groq-key",
    )


@pytest.fixture
def bare_settings() -> Settings:
    """Settings with nothing configured."""
    return Settings()


@pytest.fixture
def groq_reply() -> Callable[[str], httpx.Response]:
    """Build a successful chat-completions response."""

    def _reply(text: str) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": text}}]})

    return _reply


@pytest.fixture
def create_event():
    """Factory fixture for UnifiedEvent with sensible defaults."""

    def _create_event(
        name: str = "Test Event",
        date: str | None = "2025-06-15",
        city: str | None = "Berlin",
        source: EventSource = EventSource.TICKETMASTER,
        **kwargs,
    ) -> UnifiedEvent:
        defaults = {
            "id": f"{source.value}_{name}_{date}",
            "name": name,
            "date": date,
            "city": city,
            "source": source,
        }
        defaults.update(kwargs)
        return UnifiedEvent(**defaults)

    return _create_event
