"""
Chat endpoint — proxies one conversation turn to the text-generation API.
The API key stays on the server; clients only ever talk to this endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from safebyte.routers.deps import get_profile_store
from safebyte.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from safebyte.services.claude import ChatProxyError, send_chat
from safebyte.services.conversation import build_context
from safebyte.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(
    body: ChatRequest,
    store: ProfileStore = Depends(get_profile_store),
):
    """
    Return the assistant's reply to `message`.

    The profile in the body wins; when the client omits userProfile the
    locally stored profile is used. Only the last 10 history turns are sent.
    """
    if not body.message or not body.message.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Message is required"},
        )

    profile = body.user_profile if "user_profile" in body.model_fields_set else store.profile
    context = build_context(profile, body.conversation_history, body.message)

    try:
        reply = await send_chat(context)
    except ChatProxyError as exc:
        logger.error("Chat proxy failed: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    return ChatResponse(response=reply)
