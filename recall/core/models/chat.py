"""Chat domain models."""
from dataclasses import dataclass

CONVERSATION_ROLES = ("user", "assistant")


@dataclass
class ChatMessage:
    """Chat message."""
    role: str  # "user" | "assistant" | "system" | "tool"
    content: str


def message_to_text(message: ChatMessage) -> str:
    return f"{message.role}: {message.content}"


def messages_to_query(messages: list[ChatMessage]) -> str:
    """Build a semantic search query from recent messages.

    The most recent message is included twice to overweight it.
    """
    if not messages:
        return ""
    return "\n".join(message_to_text(m) for m in [*messages, messages[-1]])
