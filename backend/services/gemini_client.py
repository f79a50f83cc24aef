"""Google Gemini API wrapper with error handling."""

import asyncio
import logging

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


class EnrichmentUnavailableError(RuntimeError):
    """Gemini could not produce a usable response (disabled, timed out or failed)."""


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def is_configured() -> bool:
    return bool(settings.gemini_api_key) and settings.enrichment_enabled


async def generate_text(prompt: str, timeout: float | None = None) -> str:
    """Send a prompt to Gemini and return the plain-text reply.

    Raises EnrichmentUnavailableError on any failure, including the timeout.
    """
    if not settings.enrichment_enabled:
        raise EnrichmentUnavailableError("Gemini enrichment disabled")
    client = get_client()
    if client is None:
        raise EnrichmentUnavailableError("Gemini client not configured")

    timeout = settings.enrichment_timeout_seconds if timeout is None else timeout
    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=0.3,
                    max_output_tokens=2048,
                ),
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        logger.error("Gemini request timed out after %.1fs", timeout)
        raise EnrichmentUnavailableError("Gemini request timed out") from e
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        raise EnrichmentUnavailableError(str(e)) from e

    text = (response.text or "").strip()
    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    if not text:
        raise EnrichmentUnavailableError("Gemini returned an empty response")
    return text
