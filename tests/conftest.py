import os

# Settings are read at import time; provide what Config() requires.
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("GENERATOR_MODEL", "test/generator-model")
os.environ.setdefault("JUDGE_MODEL", "test/judge-model")
os.environ.setdefault("LLM_RETRY_DELAY_SECONDS", "0")

import pytest  # noqa: E402
from loguru import logger  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
