"""
Language model gateway client.

Sends a system instruction plus a user prompt to the configured provider and
returns the model's raw text. Two providers are supported, selected by
settings.LLM_PROVIDER:

- "gateway": OpenAI-compatible chat completions endpoint over HTTP (httpx).
  The reply text is choices[0].message.content.
- "gemini": Google Gen AI SDK (google-genai), generate_content with a
  system instruction.

Both providers report failures through the same exception types so the
recommendation route can map them to HTTP responses:

- HTTP 429 -> RateLimitExceededError
- HTTP 402 -> CreditsExhaustedError
- any other non-success status -> AIGatewayError("AI Gateway error: <status>")

No retries are attempted.
"""

from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from storefront.config import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
CREDITS_EXHAUSTED_MESSAGE = "AI credits exhausted. Please add credits to continue."

# Lazily created Gemini client
_gemini_client: Optional[genai.Client] = None


class AIGatewayError(Exception):
    """Base error for language model gateway failures."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RateLimitExceededError(AIGatewayError):
    """The gateway answered 429."""

    def __init__(self):
        super().__init__(RATE_LIMIT_MESSAGE, status_code=429)


class CreditsExhaustedError(AIGatewayError):
    """The gateway answered 402."""

    def __init__(self):
        super().__init__(CREDITS_EXHAUSTED_MESSAGE, status_code=402)


def raise_for_gateway_status(status_code: int) -> None:
    """Translate a non-success gateway status into the matching exception."""
    if status_code == 429:
        raise RateLimitExceededError()
    if status_code == 402:
        raise CreditsExhaustedError()
    raise AIGatewayError(f"AI Gateway error: {status_code}")


def _get_gemini_client() -> Optional[genai.Client]:
    """
    Lazy initialization of the Gemini client.

    Returns None when GOOGLE_API_KEY is not configured.
    """
    global _gemini_client

    if _gemini_client is not None:
        return _gemini_client

    if not settings.GOOGLE_API_KEY:
        logger.warning(
            "GOOGLE_API_KEY not configured. Gemini provider will not work. "
            "Please set GOOGLE_API_KEY in your .env file."
        )
        return None

    _gemini_client = genai.Client(api_key=settings.GOOGLE_API_KEY)
    logger.info("Gemini client initialized successfully for recommendations")
    return _gemini_client


def _extract_gateway_content(payload: Dict[str, Any]) -> str:
    """Pull choices[0].message.content out of a chat completion payload."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise AIGatewayError(f"AI Gateway returned an unexpected response: {e}") from e
    return content or ""


async def complete_via_gateway(
    system_prompt: str,
    user_prompt: str,
    http_client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Call the OpenAI-compatible AI gateway.

    Args:
        system_prompt: Fixed system instruction
        user_prompt: Task prompt
        http_client: Optional client to reuse (tests pass one with a mock transport)

    Returns:
        The first choice's message text
    """
    request_body = {
        "model": settings.AI_MODEL,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
    }
    headers = {
        "Authorization": f"Bearer {settings.AI_GATEWAY_API_KEY}",
        "Content-Type": "application/json",
    }

    logger.info(f"Calling AI gateway with model={settings.AI_MODEL}")

    if http_client is None:
        async with httpx.AsyncClient(timeout=settings.AI_GATEWAY_TIMEOUT_SECONDS) as client:
            response = await client.post(settings.AI_GATEWAY_URL, headers=headers, json=request_body)
    else:
        response = await http_client.post(settings.AI_GATEWAY_URL, headers=headers, json=request_body)

    if not response.is_success:
        logger.error(f"AI gateway returned status {response.status_code}")
        raise_for_gateway_status(response.status_code)

    payload = response.json()
    logger.debug(f"AI gateway response: {payload}")

    return _extract_gateway_content(payload)


async def complete_via_gemini(system_prompt: str, user_prompt: str) -> str:
    """
    Call Gemini through the Google Gen AI SDK.

    SDK errors carry the HTTP status in APIError.code, which is mapped the
    same way as gateway statuses.
    """
    client = _get_gemini_client()
    if client is None:
        raise AIGatewayError("Gemini client is not configured")

    config = types.GenerateContentConfig(
        system_instruction=system_prompt,
        temperature=0.3,
    )

    logger.info(f"Calling Gemini with model={settings.GEMINI_MODEL}")

    try:
        response = client.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=user_prompt,
            config=config,
        )
    except genai_errors.APIError as e:
        logger.error(f"Gemini API error: code={e.code}")
        raise_for_gateway_status(e.code)

    return response.text or ""


async def complete_chat(system_prompt: str, user_prompt: str) -> str:
    """
    Send a prompt to the configured provider and return the reply text.

    Raises:
        RateLimitExceededError: provider answered 429
        CreditsExhaustedError: provider answered 402
        AIGatewayError: any other provider failure
    """
    if settings.LLM_PROVIDER == "gemini":
        return await complete_via_gemini(system_prompt, user_prompt)
    return await complete_via_gateway(system_prompt, user_prompt)
