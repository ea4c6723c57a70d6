import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger


async def with_retry[T](
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    delay: float = 1.0,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Run ``operation`` until it succeeds or ``max_retries`` attempts have failed.

    Waits ``delay`` seconds between attempts, never after the last one. Exceptions
    not listed in ``retry_on`` propagate immediately. When every attempt fails, the
    exception from the last attempt is raised.
    """
    if max_retries < 1:
        msg = f"max_retries must be at least 1, got {max_retries}"
        raise ValueError(msg)

    last_error: Exception | None = None

    for attempt in range(1, max_retries + 1):
        try:
            return await operation()
        except retry_on as e:
            last_error = e
            will_retry = attempt < max_retries
            suffix = f" (retrying in {delay}s)" if will_retry else ""
            logger.warning(f"Attempt {attempt}/{max_retries} failed: {e}{suffix}")

            if will_retry:
                await asyncio.sleep(delay)

    if last_error is None:
        msg = "Max retries exceeded"
        raise RuntimeError(msg)
    raise last_error
