from functools import cache

from openai import AsyncOpenAI

from app.core.config import settings


@cache
def get_openai_client() -> AsyncOpenAI:
    # Retries are handled per structured request, not per HTTP call.
    return AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )
