"""Exception handlers mapping domain errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from manuscript.app.db.repositories import InvalidStatusTransitionError
from manuscript.app.llm.errors import AggregateProviderError, ProviderError, ResponseParseError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are a 400 with field-level detail."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


async def status_transition_handler(
    request: Request, exc: InvalidStatusTransitionError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "message": str(exc),
            "changeId": exc.change_id,
            "status": exc.current.value,
        },
    )


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Vendor failures surface as 502 with the vendor error attached."""
    if isinstance(exc, ResponseParseError):
        message = "Failed to parse AI response"
    else:
        message = "AI provider request failed"

    logger.error(f"{request.method} {request.url.path}: {message} ({exc.provider}): {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"message": message, "provider": exc.provider, "error": str(exc)},
    )


async def aggregate_error_handler(request: Request, exc: AggregateProviderError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "message": "All AI providers failed to complete analysis",
            "error": str(exc),
            "failures": [
                {"provider": provider, "error": str(error)} for provider, error in exc.failures
            ],
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidStatusTransitionError, status_transition_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AggregateProviderError, aggregate_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ProviderError, provider_error_handler)  # type: ignore[arg-type]
