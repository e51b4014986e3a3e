import logging
from typing import Optional, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from recall.core.exceptions import JudgeError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def response_format_for(schema: type[BaseModel]) -> dict:
    """JSON-schema response_format for a pydantic model."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": schema.__name__,
            "schema": schema.model_json_schema(),
        },
    }


class OpenAIJudge:
    """Structured-output LLM client (OpenAI-compatible API)."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
        client: Optional[AsyncOpenAI] = None,
    ):
        """Initialize judge client.

        Args:
            model: Model name.
            base_url: API URL; None uses the OpenAI default.
            api_key: API key; None reads OPENAI_API_KEY.
            temperature: Sampling temperature.
            max_tokens: Max response tokens.
            client: Preconfigured client (tests).
        """
        self._client = client or AsyncOpenAI(base_url=base_url, api_key=api_key)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate_object(
        self,
        system: str,
        schema: type[T],
        messages: list[dict],
    ) -> T:
        """Ask the model for an object matching schema.

        Args:
            system: System instruction.
            schema: Expected response model.
            messages: Conversation messages.

        Returns:
            Validated schema instance.

        Raises:
            JudgeError: On API failure, empty output or schema violation.
        """
        payload = [{"role": "system", "content": system}, *messages]

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                response_format=response_format_for(schema),
            )
        except OpenAIError as e:
            raise JudgeError(f"Judge call failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise JudgeError("Judge returned an empty response")

        try:
            result = schema.model_validate_json(content)
        except ValidationError as e:
            logger.error(f"[judge] Schema violation: {content[:200]}")
            raise JudgeError(f"Judge response does not match {schema.__name__}") from e

        logger.info(f"[judge] model={self._model} chars_out={len(content)}")
        return result
