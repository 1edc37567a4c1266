"""First-present-wins field resolution over loosely typed provider payloads.

Provider schemas drift between API versions, so adapters describe each target
attribute as an ordered tuple of dotted paths, e.g.::

    DATE = ("dates.start.localDate", "dates.start.dateTime")

and :func:`first` returns the value at the first path that is present and
non-empty. Numeric path segments index into lists. Missing keys, ``None``
intermediates, and type mismatches all resolve to ``None``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Iterable

_MISSING = object()


def dig(obj: Any, path: str) -> Any:
    """Follow a dotted *path* through dicts and lists, or return ``None``."""
    cur = obj
    for part in path.split("."):
        if isinstance(cur, dict):
            cur = cur.get(part, _MISSING)
        elif isinstance(cur, (list, tuple)) and part.isdigit():
            idx = int(part)
            cur = cur[idx] if idx < len(cur) else _MISSING
        else:
            return None
        if cur is _MISSING or cur is None:
            return None
    return cur


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def first(obj: Any, paths: Iterable[str], default: Any = None) -> Any:
    """Return the first present, non-empty value among *paths*."""
    for path in paths:
        value = dig(obj, path)
        if _present(value):
            return value
    return default


def first_str(obj: Any, paths: Iterable[str], default: str | None = None) -> str | None:
    """Like :func:`first` but only accepts scalars, returned as stripped text.

    Object-valued candidates are skipped, so ``("name", "name.text")`` reads
    either a plain name or Eventbrite's ``{"text": ...}`` wrapper.
    """
    for path in paths:
        value = dig(obj, path)
        if isinstance(value, (dict, list, tuple)) or not _present(value):
            continue
        return str(value).strip()
    return default


def first_match(items: Any, predicate: Callable[[Any], bool]) -> Any:
    """Return the first list element satisfying *predicate*."""
    if not isinstance(items, list):
        return None
    for item in items:
        if predicate(item):
            return item
    return None


def iso_date(value: Any) -> str | None:
    """Normalize a date-ish value to ``YYYY-MM-DD``.

    Accepts ISO dates and datetimes (``Z`` suffix included). Values that do
    not parse are dropped rather than passed through.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None
