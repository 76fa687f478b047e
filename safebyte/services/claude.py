"""
Chat proxy — forwards an assembled conversation to the Anthropic Messages API.

One request per chat turn: no retries, no fallback model, no state kept between
calls. The blocking HTTP call runs in a worker thread.

Error policy:
  * upstream non-2xx  → ChatProxyError(status 500) carrying the upstream
                        error.message when present, else a generic message
  * network failure   → ChatProxyError(status 500)
  * 2xx with no text  → ChatProxyError(status 502); a placeholder reply is
                        never substituted for a real answer
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from safebyte.config import settings
from safebyte.services.conversation import ConversationContext

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to get response from the assistant"
MALFORMED_REPLY = "The assistant returned an empty or malformed reply"


class ChatProxyError(Exception):
    """Raised when the upstream model call fails; status_code is the HTTP status to return."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _build_payload(context: ConversationContext) -> dict[str, Any]:
    return {
        "model": settings.chat_model,
        "max_tokens": settings.chat_max_tokens,
        "system": context.system_prompt,
        "messages": context.messages,
    }


def _build_headers() -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-api-key": settings.anthropic_api_key,
        "anthropic-version": settings.anthropic_version,
    }


def _extract_error_message(response: requests.Response) -> str:
    """Pull error.message out of an upstream error body, or fall back to a generic string."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_FAILURE
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return GENERIC_FAILURE


def extract_reply_text(body: Any) -> str:
    """
    Return the text of the first text-typed content block.
    Raises ChatProxyError(502) when the payload has no usable text.
    """
    if not isinstance(body, dict):
        raise ChatProxyError(MALFORMED_REPLY, status_code=502)
    for block in body.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str) and text.strip():
                return text
    raise ChatProxyError(MALFORMED_REPLY, status_code=502)


def _post_messages(context: ConversationContext) -> str:
    """Blocking upstream call. Runs inside asyncio.to_thread."""
    try:
        response = requests.post(
            settings.anthropic_api_url,
            headers=_build_headers(),
            json=_build_payload(context),
            timeout=settings.chat_timeout_seconds,
        )
    except requests.RequestException as exc:
        logger.error("Chat API request failed: %s", exc)
        raise ChatProxyError(GENERIC_FAILURE) from exc

    if not response.ok:
        message = _extract_error_message(response)
        logger.error("Chat API error (%s): %s", response.status_code, message)
        raise ChatProxyError(message)

    try:
        body = response.json()
    except ValueError as exc:
        logger.error("Chat API returned non-JSON body: %s", exc)
        raise ChatProxyError(MALFORMED_REPLY, status_code=502) from exc

    return extract_reply_text(body)


async def send_chat(context: ConversationContext) -> str:
    """Send one conversation turn upstream and return the assistant's reply text."""
    logger.debug(
        "Chat call (%s): %d messages, system prompt %d chars",
        settings.chat_model,
        len(context.messages),
        len(context.system_prompt),
    )
    return await asyncio.to_thread(_post_messages, context)
