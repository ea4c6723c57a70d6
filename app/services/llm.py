import json
import time
from typing import Annotated, Any

import openai
from fastapi import Depends
from loguru import logger
from openai import AsyncOpenAI
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import (
    CompletionParseError,
    EmptyCompletionError,
    GenerationTimeoutError,
    GenerationTransportError,
    RetryableError,
)
from app.core.llm import get_openai_client
from app.utils.retry import with_retry
from app.utils.validation import validate_with_schema

_decoder = json.JSONDecoder()


def extract_json_object(content: str) -> dict[str, Any]:
    """Parse a completion as a JSON object.

    Falls back to the first well-formed ``{...}`` block when the model wrapped
    its JSON in prose or code fences.
    """
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        parsed = None
        start = content.find("{")
        while start != -1:
            try:
                parsed, _ = _decoder.raw_decode(content, start)
                break
            except json.JSONDecodeError:
                start = content.find("{", start + 1)

    if not isinstance(parsed, dict):
        preview = content[:100]
        msg = f"Response is not a JSON object: {preview!r}"
        raise CompletionParseError(msg)
    return parsed


class LLMClient:
    """Prompted JSON requests against an OpenAI-compatible API (OpenRouter)."""

    def __init__(self, client: Annotated[AsyncOpenAI, Depends(get_openai_client)]) -> None:
        self.client = client

    async def complete_json(self, prompt: str, model: str) -> dict[str, Any]:
        """Single request, no retries."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
                timeout=settings.llm_timeout_seconds,
            )
        except openai.APITimeoutError as e:
            msg = f"{model} did not respond within {settings.llm_timeout_seconds}s"
            raise GenerationTimeoutError(msg) from e
        except openai.APIError as e:
            msg = f"{model} request failed: {e}"
            raise GenerationTransportError(msg) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not isinstance(content, str):
            raise EmptyCompletionError

        return extract_json_object(content)

    async def request_structured[T: BaseModel](
        self,
        prompt: str,
        schema: type[T],
        model: str,
        max_retries: int | None = None,
    ) -> T:
        """Request, parse and validate as one unit, retried on any retryable failure."""

        async def attempt() -> T:
            data = await self.complete_json(prompt, model)
            return validate_with_schema(data, schema)

        start = time.perf_counter()
        result = await with_retry(
            attempt,
            max_retries=settings.llm_max_retries if max_retries is None else max_retries,
            delay=settings.llm_retry_delay_seconds,
            retry_on=(RetryableError,),
        )
        logger.info(
            f"{model} returned a valid {schema.__name__} in {time.perf_counter() - start:.2f}s"
        )
        return result
