"""
ChartChat Core - Gemini Developer API Integration.

Uses the Gemini Developer API (API key) to turn chat messages into JSON
chart actions.
"""

import logging
import os

from chartchat.config import get_settings
from chartchat.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

_client = None


def _get_api_key() -> str:
    """
    Get Gemini API key.

    Resolution order:
    1. GEMINI_API_KEY environment variable
    2. Settings (.env)
    """
    api_key = os.environ.get("GEMINI_API_KEY")
    if api_key:
        logger.info("Using Gemini API key from environment variable")
        return api_key

    api_key = get_settings().gemini.api_key.strip()
    if api_key:
        logger.info("Using Gemini API key from settings")
        return api_key

    raise ExternalServiceException(
        "Gemini API",
        "No API key found. Set GEMINI_API_KEY environment variable.",
    )


def get_gemini_client():
    """
    Get configured Gemini client.

    Uses API key authentication (Gemini Developer API).
    """
    global _client

    if _client is not None:
        return _client

    from google import genai

    api_key = _get_api_key()
    _client = genai.Client(api_key=api_key)

    logger.info("Gemini client initialized with API key")
    return _client


async def generate_json(system_prompt: str, message: str, model: str | None = None) -> str:
    """
    Ask the model for a JSON reply.

    Args:
        system_prompt: Instructions, schema and chart context
        message: The user's chat message
        model: Model override (defaults to settings)

    Returns:
        Raw response text (expected to be a JSON object)
    """
    from google.genai import types

    client = get_gemini_client()
    model = model or get_settings().gemini.model

    try:
        response = await client.aio.models.generate_content(
            model=model,
            contents=message,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                response_mime_type="application/json",
            ),
        )
    except Exception as e:
        logger.error(f"Gemini request failed: {e}")
        raise ExternalServiceException("Gemini API", str(e))

    return response.text or ""
