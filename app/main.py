from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException

from app.core.config import settings
from app.core.exceptions import BattleStageError, CatalogError, InvalidRequestError
from app.core.http import create_pokeapi_client
from app.core.rate_limit import limiter
from app.services.pokeapi import PokeAPIService
from app.services.type_chart import TypeChart
from app.utils.exception_handlers import (
    battle_exception_handler,
    catalog_exception_handler,
    general_exception_handler,
    http_exception_handler,
    invalid_request_exception_handler,
    rate_limit_exception_handler,
    validation_exception_handler,
)
from app.utils.router_discovery import register_routers


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None]:
    # Loaded once; every later lookup reads this table without re-fetching.
    app.state.type_chart = TypeChart()
    async with create_pokeapi_client() as client:
        await app.state.type_chart.load(PokeAPIService(client))

    yield


app = FastAPI(title="PokeFusion Battle API", lifespan=app_lifespan)
app.state.limiter = limiter


# CORS is added last so it also wraps 429 responses
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


register_routers(app)

app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(InvalidRequestError, invalid_request_exception_handler)
app.add_exception_handler(CatalogError, catalog_exception_handler)
app.add_exception_handler(BattleStageError, battle_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/")
@limiter.exempt
async def healthz() -> str:
    return "OK"
