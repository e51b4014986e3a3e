"""Judge (structured-output LLM) protocol for dependency injection."""
from typing import Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


@runtime_checkable
class JudgeProtocol(Protocol):
    """Protocol for a language model invoked in structured-output mode."""

    async def generate_object(
        self,
        system: str,
        schema: type[T],
        messages: list[dict],
    ) -> T:
        """Generate an object matching schema.

        Args:
            system: System instruction.
            schema: Pydantic model describing the expected object.
            messages: Conversation messages (role + content dicts).

        Returns:
            Validated schema instance.

        Raises:
            JudgeError: If the call fails or the response violates the schema.
        """
        ...
