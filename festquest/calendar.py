"""iCalendar export of saved events as all-day entries."""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import Any, Iterable

from festquest.summary.digest import normalize_event

CRLF = "\r\n"


def escape_ics(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\n", "\\n")
    )


def _day_range(iso: str | None) -> tuple[str, str] | None:
    if not iso:
        return None
    try:
        start = date.fromisoformat(iso[:10])
    except ValueError:
        return None
    end = start + timedelta(days=1)
    return start.strftime("%Y%m%d"), end.strftime("%Y%m%d")


def to_ics(events: Iterable[Any]) -> str:
    """Render events as a VCALENDAR document.

    name -> SUMMARY, date -> one-day all-day DTSTART/DTEND, venue/city/country
    -> LOCATION, url -> DESCRIPTION.
    """
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//FestQuest//EN",
        "CALSCALE:GREGORIAN",
    ]
    for raw in events:
        ev = normalize_event(raw)
        name = ev["name"] if ev["name"] != "Unknown event" else "Untitled Event"
        where = ", ".join(p for p in (ev["venueName"], ev["city"], ev["country"]) if p)
        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{ev['id'] or uuid.uuid4()}@festquest")
        days = _day_range(ev["date"])
        if days:
            lines.append(f"DTSTART;VALUE=DATE:{days[0]}")
            lines.append(f"DTEND;VALUE=DATE:{days[1]}")
        lines.append(f"SUMMARY:{escape_ics(name)}")
        if where:
            lines.append(f"LOCATION:{escape_ics(where)}")
        if ev["url"]:
            lines.append(f"DESCRIPTION:{escape_ics(ev['url'])}")
        lines.append("END:VEVENT")
    lines.append("END:VCALENDAR")
    return CRLF.join(lines) + CRLF
