"""Prompt construction for grounded answers."""

from docchat.core.chat.chat_prompt import (
    CHAT_PROMPT,
    EMPTY_ANSWER_FALLBACK,
    NO_CONTEXT_ANSWER,
    build_messages,
)

__all__ = ["CHAT_PROMPT", "EMPTY_ANSWER_FALLBACK", "NO_CONTEXT_ANSWER", "build_messages"]
