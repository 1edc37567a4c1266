"""Groq chat-completions client (OpenAI-compatible) over httpx."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

from festquest.config import Settings, get_settings
from festquest.errors import (
    GenerativeError,
    GenerativeUnavailable,
    PlanningError,
    truncate_body,
)

log = logging.getLogger(__name__)

Messages = list[dict[str, str]]


@dataclass(frozen=True)
class ModelRetryPolicy:
    """Classifies upstream errors that mean "try another model id".

    The signals are plain substrings matched case-insensitively against the
    error text, configured through ``GROQ_MODEL_ERROR_SIGNALS``.
    """

    signals: tuple[str, ...]

    def is_model_unavailable(self, error_text: str | None) -> bool:
        text = (error_text or "").lower()
        return any(s.lower() in text for s in self.signals if s)


class GroqClient:
    """Thin async wrapper around ``POST /chat/completions``."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client
        self.retry_policy = ModelRetryPolicy(self.settings.groq_model_error_signals)

    @property
    def configured(self) -> bool:
        return bool(self.settings.groq_api_key)

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self.settings.groq_base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.settings.groq_api_key}",
            "Content-Type": "application/json",
        }
        if self._client is not None:
            return await self._client.post(url, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self.settings.http_timeout) as client:
            return await client.post(url, json=payload, headers=headers)

    async def chat(
        self,
        messages: Messages,
        *,
        model: str | None = None,
        temperature: float = 0.5,
        max_tokens: int | None = None,
    ) -> str:
        """Return the stripped completion text (possibly empty).

        Raises :class:`GenerativeUnavailable` without a credential and
        :class:`GenerativeError` on non-2xx responses or network failures.
        """
        if not self.configured:
            raise GenerativeUnavailable("Missing GROQ_API_KEY")

        payload: dict[str, Any] = {
            "model": model or self.settings.groq_model,
            "temperature": temperature,
            "messages": messages,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        try:
            resp = await self._post(payload)
        except httpx.HTTPError as exc:
            raise GenerativeError(f"Groq request failed: {exc}") from exc

        if not resp.is_success:
            raise GenerativeError(
                f"Groq {resp.status_code}: {truncate_body(resp.text)}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise GenerativeError("Groq returned a non-JSON body") from exc
        content = _message_content(data)
        return content.strip()

    async def chat_with_fallback(
        self,
        messages: Messages,
        *,
        fallback_models: Iterable[str] | None = None,
        **kwargs: Any,
    ) -> str:
        """Like :meth:`chat`, retrying other models when one is retired.

        Only a first failure classified by :attr:`retry_policy` triggers the
        fallback list; each model is attempted at most once, in order.
        Raises :class:`PlanningError` when nothing succeeds.
        """
        primary = self.settings.groq_model
        attempted = [primary]
        try:
            return await self.chat(messages, model=primary, **kwargs)
        except GenerativeError as exc:
            first_error = exc
            if not self.retry_policy.is_model_unavailable(exc.detail):
                raise PlanningError(exc.detail, attempted) from exc

        log.warning("Model %s unavailable, trying fallbacks", primary)
        models = self.settings.groq_fallback_models if fallback_models is None else fallback_models
        for model in models:
            if model in attempted:
                continue
            attempted.append(model)
            try:
                return await self.chat(messages, model=model, **kwargs)
            except GenerativeError as exc:
                log.warning("Fallback model %s failed: %s", model, exc.detail)

        raise PlanningError(first_error.detail, attempted)


def _message_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    if isinstance(content, list):
        content = " ".join(str(part) for part in content)
    return content if isinstance(content, str) else ""
