"""FestQuest: multi-source event search with AI summaries."""

__version__ = "0.1.0"
