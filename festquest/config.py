"""Centralised configuration for FestQuest.

Environment variables are loaded once from ``.env`` (if present). Services
accept an explicit :class:`Settings` and fall back to :func:`get_settings`.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"
DEFAULT_FALLBACK_MODELS = (
    "llama-3.1-8b-instant",
    "mixtral-8x7b-32768",
    "llama-3.2-90b-text-preview",
)
# Error-text fragments meaning "this model id is gone", not "request failed".
DEFAULT_MODEL_ERROR_SIGNALS = (
    "model_decommissioned",
    "deprecations",
    "invalid_model",
    "unsupported",
)
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _csv(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        return default
    items = tuple(v.strip() for v in value.split(",") if v.strip())
    return items or default


def _blank(value: str | None) -> str | None:
    return value.strip() or None if value else None


class Settings(BaseModel):
    # provider credentials / proxy base URLs
    tm_api_key: str | None = None
    eventbrite_token: str | None = None
    seatgeek_client_id: str | None = None
    konzertkasse_proxy_url: str | None = None
    reservix_proxy_url: str | None = None

    # generative backend
    groq_api_key: str | None = None
    groq_model: str = DEFAULT_GROQ_MODEL
    groq_fallback_models: tuple[str, ...] = DEFAULT_FALLBACK_MODELS
    groq_model_error_signals: tuple[str, ...] = DEFAULT_MODEL_ERROR_SIGNALS
    groq_base_url: str = "https://api.groq.com/openai/v1"

    http_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            tm_api_key=_blank(env.get("TM_API_KEY")),
            eventbrite_token=_blank(env.get("EVENTBRITE_TOKEN")),
            seatgeek_client_id=_blank(env.get("SEATGEEK_CLIENT_ID")),
            konzertkasse_proxy_url=_blank(env.get("KONZERTKASSE_PROXY_URL")),
            reservix_proxy_url=_blank(env.get("RESERVIX_PROXY_URL")),
            groq_api_key=_blank(env.get("GROQ_API_KEY")),
            groq_model=_blank(env.get("GROQ_MODEL")) or DEFAULT_GROQ_MODEL,
            groq_fallback_models=_csv(
                env.get("GROQ_FALLBACK_MODELS"), DEFAULT_FALLBACK_MODELS
            ),
            groq_model_error_signals=_csv(
                env.get("GROQ_MODEL_ERROR_SIGNALS"), DEFAULT_MODEL_ERROR_SIGNALS
            ),
            http_timeout=float(env.get("HTTP_TIMEOUT") or 30.0),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings.from_env()


def configure_logging(level: str | int = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
