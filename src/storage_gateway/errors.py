"""Error types and app-level exception handlers."""

import logging
from typing import Optional

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for every error raised inside the gateway."""


class RequestShapeError(GatewayError):
    """Malformed or missing required input (wrong content type, missing field)."""


class BackendError(GatewayError):
    """A backend capability call failed (network, permission, not found)."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(detail)


class AggregationError(GatewayError):
    """One of the stats sub-queries failed; the whole report is aborted."""


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": error["msg"],
                    "input": error.get("input"),
                }
                for error in errors
            ]
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Last line of defence: anything escaping a handler becomes an opaque 500."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def handle_aggregation_errors(request: Request, exc: AggregationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)},
    )
