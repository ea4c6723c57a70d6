from collections.abc import AsyncGenerator

import httpx

from app.core.config import settings


def create_pokeapi_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.pokeapi_base_url,
        timeout=settings.pokeapi_timeout_seconds,
        headers={"Accept": "application/json"},
    )


async def get_pokeapi_client() -> AsyncGenerator[httpx.AsyncClient]:
    async with create_pokeapi_client() as client:
        yield client
