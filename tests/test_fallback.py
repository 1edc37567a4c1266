from festquest.models import EventSource, UserContext
from festquest.summary.digest import event_digest, normalize_event
from festquest.summary.fallback import TIP, rule_based_summary


def test_empty_input_reports_scope():
    assert rule_based_summary([], UserContext(city="Berlin", keyword="jazz")) == (
        "No events to summarize yet for Berlin · jazz. Try adjusting dates or keywords."
    )
    assert rule_based_summary([], UserContext(keyword="jazz")).startswith(
        "No events to summarize yet for jazz."
    )
    assert "for your filters." in rule_based_summary([])


def test_summary_lines(create_event):
    events = [
        create_event(name="A", date="2025-03-02", city="Berlin"),
        create_event(name="B", date="2025-03-01", city="Hamburg"),
        create_event(name="C", date=None, city="Berlin"),
        create_event(name="D", date="2025-03-04", city=None),
    ]
    ctx = UserContext(city="Berlin", start_date="2025-03-01")
    text = rule_based_summary(events, ctx)
    assert text.split("\n") == [
        "📍 Berlin  |  🗓️ 2025-03-01 → ?",
        "Found 4 events. Earliest: 2025-03-01.",
        "Hotspots: Berlin (2), Hamburg (1), TBA (1).",
        "Top picks: A • B • C.",
        TIP,
    ]


def test_without_filters_or_dates(create_event):
    text = rule_based_summary([create_event(name="Solo", date=None, city=None)])
    assert text.split("\n") == [
        "Found 1 events.",
        "Hotspots: TBA (1).",
        "Top picks: Solo.",
        TIP,
    ]


def test_stats_cover_first_ten_events_only(create_event):
    events = [create_event(name=f"E{i}", city="Berlin") for i in range(10)]
    events += [create_event(name="Late", city="Munich", date="2000-01-01")]
    text = rule_based_summary(events)
    assert "Found 11 events. Earliest: 2025-06-15." in text
    assert "Munich" not in text


def test_deterministic_output(create_event):
    events = [
        create_event(name="A", city="Köln"),
        create_event(name="B", city="Bonn", source=EventSource.SEATGEEK),
    ]
    ctx = UserContext(city="Köln", keyword="karneval", tone="Fun")
    assert rule_based_summary(events, ctx) == rule_based_summary(list(events), ctx)


def test_accepts_raw_provider_records():
    raw = {
        "name": "Raw Gig",
        "dates": {"start": {"localDate": "2025-07-01"}},
        "_embedded": {"venues": [{"name": "Club", "city": {"name": "Leipzig"}}]},
    }
    text = rule_based_summary([raw])
    assert "Earliest: 2025-07-01." in text
    assert "Hotspots: Leipzig (1)." in text


def test_normalize_event_reads_unified_json(create_event):
    event = create_event(name="X", venue_name="Hall", price="EUR 10", provider="Music")
    flat = normalize_event(event)
    assert flat["venueName"] == "Hall"
    assert flat["provider"] == "Music"
    assert flat["source"] == "ticketmaster"


def test_digest_lines_and_limit(create_event):
    events = [
        create_event(name="A", venue_name="Hall", country="DE", provider="Music", price="EUR 10"),
        {"title": "Loose", "priceRanges": [{"min": 12}]},
    ]
    lines = event_digest(events).split("\n")
    assert lines[0] == "A - 2025-06-15 - Hall, Berlin, DE · Music - EUR 10"
    assert lines[1] == "Loose - Unknown date -  - from 12"

    many = [create_event(name=str(i)) for i in range(25)]
    assert len(event_digest(many).split("\n")) == 20
    assert event_digest([]) == ""
