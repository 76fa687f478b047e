"""Pydantic schemas for the chat endpoint."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from safebyte.schemas.profile import UserProfile


class ChatMessage(BaseModel):
    """A single turn in the conversation history."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: Optional[datetime] = None


class ChatRequest(BaseModel):
    """
    Body for POST /api/chat — sent by the Frontend.
    message is optional at the schema level so a missing or blank message can
    be answered with a 400 {"error": ...} body instead of a validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user_profile: UserProfile = Field(default_factory=UserProfile, alias="userProfile")
    conversation_history: list[ChatMessage] = Field(
        default_factory=list, alias="conversationHistory"
    )


class ChatResponse(BaseModel):
    """Successful chat reply."""

    response: str


class ErrorResponse(BaseModel):
    """Error body shared by the chat and dish endpoints."""

    error: str
