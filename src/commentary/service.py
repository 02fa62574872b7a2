"""
Gala Showdown - Host Commentary

Asks the Gemini text-generation API for a short, upbeat line of MC
commentary. Commentary is decoration: any failure falls back to a fixed
line and the tournament carries on.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.config.settings import Settings

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

FALLBACK_COMMENTARY = "Good luck is on its way, keep cheering everyone!"
EMPTY_COMMENTARY = "Let's keep these great matches coming!"

PROMPT_TEMPLATE = (
    "You are the energetic, funny host of a year-end company party. "
    "In under 30 words, write one short, festive and encouraging line for this moment. "
    "Moment: {context}"
)


class CommentaryService:
    """Generates MC lines through the Gemini REST API.

    Args:
        api_key: Gemini API key; without one every call returns the fallback
        model: Model name used in the generateContent endpoint
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "gemini-2.0-flash",
        timeout: float = 8.0,
        temperature: float = 0.8,
        base_url: str = GEMINI_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._timeout = httpx.Timeout(timeout)
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "CommentaryService":
        return cls(
            settings.gemini_api_key,
            model=settings.commentary_model,
            timeout=settings.commentary_timeout,
        )

    async def generate(self, context: str) -> str:
        """Return a line of commentary for ``context``; never raises."""
        if not self.api_key:
            return FALLBACK_COMMENTARY

        body = {
            "contents": [{"parts": [{"text": PROMPT_TEMPLATE.format(context=context)}]}],
            "generationConfig": {"temperature": self.temperature},
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self._base_url}/models/{self.model}:generateContent",
                    params={"key": self.api_key},
                    json=body,
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Commentary request failed: %s", e)
            return FALLBACK_COMMENTARY

        return _extract_text(data) or EMPTY_COMMENTARY


def _extract_text(data: Any) -> str:
    """Join the text parts of the first candidate."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts).strip()
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""
