"""Auto-import all source providers to trigger @register decorators."""

from festquest.sources import (  # noqa: F401
    eventbrite,
    proxies,
    seatgeek,
    ticketmaster,
)
