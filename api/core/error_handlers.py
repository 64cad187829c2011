# Maps repository error kinds to HTTP responses with a single error shape.
# Routers raise domain errors and let these handlers render them. Request
# body/path validation failures are rendered as `invalid_input` too.

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import ErrorKind, RepositoryError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INSERT_FAILED: 400,
    ErrorKind.UPDATE_FAILED: 400,
    ErrorKind.DELETE_FAILED: 400,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_AUTHORIZED: 403,
    ErrorKind.CONSTRAINT_VIOLATION: 409,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, 500)


def register_error_handlers(app: FastAPI) -> None:
    """Register the repository error handler on the app."""

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
        status_code = status_for(exc.kind)
        logger.info(
            "repository_error kind=%s status=%s path=%s",
            exc.kind.value,
            status_code,
            request.url.path,
        )
        return JSONResponse(
            status_code=status_code,
            content={"error_code": exc.kind.value, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        status_code = status_for(ErrorKind.INVALID_INPUT)
        logger.info("request_invalid status=%s path=%s", status_code, request.url.path)
        return JSONResponse(
            status_code=status_code,
            content={
                "error_code": ErrorKind.INVALID_INPUT.value,
                "message": "Invalid request parameters.",
                "details": jsonable_encoder(exc.errors()),
            },
        )
