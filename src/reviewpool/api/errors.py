"""Translation of classified errors into the JSON error envelope.

Every error response has the shape ``{"error": {"code": ..., "message": ...}}``.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import ErrorCode, ReviewPoolError

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: ErrorCode, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code.value, "message": message}},
        headers=headers,
    )


async def handle_reviewpool_error(request: Request, exc: ReviewPoolError) -> JSONResponse:
    if exc.status_code >= 500:
        # details were logged where the failure happened
        return error_response(exc.status_code, exc.code, "internal server error")
    return error_response(exc.status_code, exc.code, exc.message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        code = ErrorCode.NOT_FOUND
    elif exc.status_code >= 500:
        code = ErrorCode.INTERNAL_ERROR
    else:
        code = ErrorCode.INVALID_REQUEST
    return error_response(exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return error_response(400, ErrorCode.INVALID_REQUEST, problems or "invalid request")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return error_response(500, ErrorCode.INTERNAL_ERROR, "internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReviewPoolError, handle_reviewpool_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
