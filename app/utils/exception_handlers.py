from collections.abc import Sequence
from typing import cast

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from app.core.exceptions import BattleStageError, CatalogError, InvalidRequestError
from app.schemas.common import ErrorResponse

VALIDATION_MESSAGES = {
    "body": "Invalid request body",
    "path": "Invalid path parameter",
    "query": "Invalid query parameter",
}


def _error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(exclude_none=True),
    )


def _format_loc(loc: Sequence[int | str]) -> str:
    parts = loc[1:] if loc and loc[0] in VALIDATION_MESSAGES else loc
    return ".".join(str(part) for part in parts) or "(root)"


def http_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(HTTPException, exc)
    return _error_response(exc.status_code, str(exc.detail))


def rate_limit_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else '?'}")
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests, please try again later"
    )


def validation_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(RequestValidationError, exc)
    errors = exc.errors()
    location = errors[0]["loc"][0] if errors and errors[0]["loc"] else "body"
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        VALIDATION_MESSAGES.get(str(location), "Invalid request"),
        ", ".join(f"{_format_loc(err['loc'])}: {err['msg']}" for err in errors),
    )


def invalid_request_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(InvalidRequestError, exc)
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.details)


def catalog_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(CatalogError, exc)
    logger.error(f"PokeAPI request failed: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.summary, str(exc))


def battle_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(BattleStageError, exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to complete battle", str(exc)
    )


def general_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unexpected error occurred")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))
