"""Summaries and itineraries for merged event sets."""

from festquest.summary.fallback import rule_based_summary
from festquest.summary.service import plan_itinerary, revise_section, summarize

__all__ = ["plan_itinerary", "revise_section", "rule_based_summary", "summarize"]
