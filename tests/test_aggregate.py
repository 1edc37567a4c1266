import asyncio

import httpx

from festquest.aggregate import (
    Outcome,
    aggregate,
    aggregate_outcomes,
    dedupe,
    resolve_providers,
    sort_events,
)
from festquest.base import BaseProvider
from festquest.models import EventSource, SearchQuery


class FakeProvider(BaseProvider):
    """Provider returning canned events (or raising) after an optional delay."""

    id_prefix = "fk"

    def __init__(self, source, events=(), error=None, delay=0.0, settings=None):
        self.source = source
        super().__init__(settings=settings)
        self._events = list(events)
        self._error = error
        self._delay = delay
        self.calls = 0

    def is_configured(self):
        return True

    def request(self, query):
        return "", {}, {}

    def extract_items(self, payload):
        return []

    def parse_event(self, item):
        raise NotImplementedError

    async def fetch(self, query):
        self.calls += 1
        await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._events)


def run(coro):
    return asyncio.run(coro)


def test_duplicate_across_providers_keeps_earlier_provider(create_event, bare_settings):
    tm_event = create_event(name="Jazz Night", source=EventSource.TICKETMASTER, id="tm_1")
    sg_event = create_event(name="Jazz Night", source=EventSource.SEATGEEK, id="sg_9")
    providers = [
        FakeProvider(EventSource.TICKETMASTER, [tm_event], settings=bare_settings),
        FakeProvider(EventSource.SEATGEEK, [sg_event], settings=bare_settings),
    ]
    events = run(aggregate(SearchQuery(), settings=bare_settings, providers=providers))
    assert [e.id for e in events] == ["tm_1"]


def test_tie_break_follows_enumeration_order_not_completion(create_event, bare_settings):
    a = create_event(name="Jazz Night", id="a")
    b = create_event(name="JAZZ NIGHT", city="BERLIN", id="b")

    # A is enumerated first but answers last
    slow_a = FakeProvider(EventSource.TICKETMASTER, [a], delay=0.05, settings=bare_settings)
    fast_b = FakeProvider(EventSource.EVENTBRITE, [b], settings=bare_settings)
    events = run(aggregate(SearchQuery(), settings=bare_settings, providers=[slow_a, fast_b]))
    assert [e.id for e in events] == ["a"]

    slow_a = FakeProvider(EventSource.TICKETMASTER, [a], delay=0.05, settings=bare_settings)
    fast_b = FakeProvider(EventSource.EVENTBRITE, [b], settings=bare_settings)
    events = run(aggregate(SearchQuery(), settings=bare_settings, providers=[fast_b, slow_a]))
    assert [e.id for e in events] == ["b"]


def test_sort_puts_dateless_events_first(create_event):
    events = [
        create_event(name="March", date="2025-03-01"),
        create_event(name="Undated", date=None),
        create_event(name="Xmas", date="2024-12-25"),
    ]
    assert [e.name for e in sort_events(events)] == ["Undated", "Xmas", "March"]


def test_sort_is_stable_for_equal_dates(create_event):
    events = [create_event(name=n, date="2025-01-01") for n in ("b", "a", "c")]
    assert [e.name for e in sort_events(events)] == ["b", "a", "c"]


def test_dedupe_key_treats_missing_fields_as_empty(create_event):
    events = [
        create_event(name="Gig", date=None, city=None, id="1"),
        create_event(name="gig", date=None, city=None, id="2"),
        create_event(name="Gig", date="2025-01-01", city=None, id="3"),
    ]
    assert [e.id for e in dedupe(events)] == ["1", "3"]


def test_dedupe_accepts_custom_key(create_event):
    events = [
        create_event(name="Gig", city="Berlin", id="1"),
        create_event(name="Gig", city="Hamburg", id="2"),
    ]
    by_name = dedupe(events, key=lambda e: e.name.lower())
    assert [e.id for e in by_name] == ["1"]


def test_failed_provider_does_not_block_others(create_event, bare_settings):
    ok = FakeProvider(
        EventSource.EVENTBRITE, [create_event(name="Survivor")], settings=bare_settings
    )
    broken = FakeProvider(
        EventSource.TICKETMASTER, error=RuntimeError("503"), settings=bare_settings
    )
    hung = FakeProvider(
        EventSource.SEATGEEK, error=httpx.ReadTimeout("slow"), settings=bare_settings
    )
    outcomes = run(aggregate_outcomes(SearchQuery(), providers=[broken, ok, hung]))
    assert [o.source for o in outcomes] == ["ticketmaster", "eventbrite", "seatgeek"]
    assert [o.ok for o in outcomes] == [False, True, False]
    assert isinstance(outcomes[0].error, RuntimeError)

    events = run(aggregate(SearchQuery(), providers=[broken, ok, hung]))
    assert [e.name for e in events] == ["Survivor"]


def test_all_providers_down_yields_empty_list(bare_settings):
    providers = [
        FakeProvider(EventSource.TICKETMASTER, error=RuntimeError("x"), settings=bare_settings),
        FakeProvider(EventSource.SEATGEEK, error=RuntimeError("y"), settings=bare_settings),
    ]
    assert run(aggregate(SearchQuery(), providers=providers)) == []


def test_no_active_providers_yields_empty_list(bare_settings):
    assert run(aggregate(SearchQuery(), settings=bare_settings, providers=[])) == []


def test_unconfigured_registry_makes_no_requests(bare_settings, recorder, make_client):
    events = run(aggregate(SearchQuery(city="Berlin"), settings=bare_settings, client=make_client()))
    assert events == []
    assert recorder.requests == []


def test_resolve_providers_ignores_unknown_and_keeps_enumeration_order(bare_settings):
    providers = resolve_providers(["reservix", "bogus", "ticketmaster"], settings=bare_settings)
    assert [p.name for p in providers] == ["ticketmaster", "reservix"]

    every = resolve_providers(None, settings=bare_settings)
    assert [p.name for p in every] == [s.value for s in EventSource]


def test_only_requested_providers_are_called(settings, recorder, make_client):
    recorder.routes["seatgeek.com"] = httpx.Response(
        200,
        json={"events": [{"id": 1, "title": "Derby", "datetime_local": "2025-05-01T20:00:00",
                          "venue": {"city": "Berlin"}}]},
    )
    query = SearchQuery(providers="seatgeek, unknown")
    events = run(aggregate(query, settings=settings, client=make_client()))
    assert [e.id for e in events] == ["sg_1"]
    assert len(recorder.requests) == 1


def test_merge_across_real_adapters(settings, recorder, make_client):
    recorder.routes["ticketmaster.com"] = httpx.Response(500, text="upstream exploded")
    recorder.routes["eventbriteapi.com"] = httpx.Response(200, json={"events": [
        {"id": "1", "name": {"text": "Open Air"}, "start": {"local": "2025-05-02T12:00:00"},
         "venue": {"address": {"city": "Berlin"}}},
    ]})
    recorder.routes["seatgeek.com"] = httpx.Response(200, json={"events": [
        {"id": 2, "title": "open air", "datetime_local": "2025-05-02T12:00:00",
         "venue": {"city": "berlin"}},
        {"id": 3, "title": "Matinee", "venue": {"city": "Berlin"}},
    ]})
    recorder.routes["kk.example"] = httpx.Response(200, json=[
        {"id": "k1", "name": "Early Bird", "date": "2025-04-01", "city": "Berlin"},
    ])
    recorder.routes["rx.example"] = httpx.Response(200, json={"events": []})

    events = run(aggregate(SearchQuery(city="Berlin"), settings=settings, client=make_client()))
    assert [e.id for e in events] == ["sg_3", "kk_k1", "eb_1"]
    assert len(recorder.requests) == 5


def test_outcome_ok_flag():
    assert Outcome(source="x").ok
    assert not Outcome(source="x", error=ValueError()).ok
