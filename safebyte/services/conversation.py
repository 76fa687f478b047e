"""
Conversation context builder — turns the profile and chat history into the
system prompt plus the bounded message window sent to the model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from safebyte.schemas.chat import ChatMessage
from safebyte.schemas.profile import UserProfile
from safebyte.utils.prompts import build_system_prompt

# Prior turns forwarded upstream per request
HISTORY_WINDOW = 10


@dataclass
class ConversationContext:
    """System prompt plus the ordered messages for a single model call."""

    system_prompt: str
    messages: list[dict[str, str]] = field(default_factory=list)


def window_history(history: Sequence[ChatMessage], size: int = HISTORY_WINDOW) -> list[ChatMessage]:
    """Return the last `size` turns, oldest first."""
    if size <= 0:
        return []
    return list(history[-size:])


def build_context(
    profile: UserProfile,
    history: Sequence[ChatMessage],
    latest_message: str,
) -> ConversationContext:
    """
    Assemble the context for one chat turn.

    messages = last HISTORY_WINDOW turns of `history` in their original order,
    followed by `latest_message` as a user turn. Timestamps are dropped; the
    upstream API only accepts role/content.
    """
    messages = [
        {"role": turn.role, "content": turn.content}
        for turn in window_history(history)
    ]
    messages.append({"role": "user", "content": latest_message})

    return ConversationContext(
        system_prompt=build_system_prompt(profile),
        messages=messages,
    )
