from festquest.calendar import escape_ics, to_ics


def test_all_day_event_fields(create_event):
    event = create_event(
        name="Jazz; Night",
        date="2025-12-31",
        venue_name="Hall",
        city="Berlin",
        country="DE",
        url="https://tm.example/e/1",
        id="tm_1",
    )
    text = to_ics([event])
    lines = text.split("\r\n")
    assert lines[:4] == ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//FestQuest//EN", "CALSCALE:GREGORIAN"]
    assert "UID:tm_1@festquest" in lines
    assert "DTSTART;VALUE=DATE:20251231" in lines
    assert "DTEND;VALUE=DATE:20260101" in lines
    assert "SUMMARY:Jazz\\; Night" in lines
    assert "LOCATION:Hall\\, Berlin\\, DE" in lines
    assert "DESCRIPTION:https://tm.example/e/1" in lines
    assert text.endswith("END:VCALENDAR\r\n")


def test_undated_event_has_no_date_lines():
    text = to_ics([{"name": "Someday"}])
    assert "DTSTART" not in text
    assert "SUMMARY:Someday" in text
    assert "LOCATION" not in text
    assert "UID:" in text


def test_escape_ics():
    assert escape_ics("a\\b,c;d\ne") == "a\\\\b\\,c\\;d\\ne"
