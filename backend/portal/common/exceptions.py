from __future__ import annotations

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from portal.common.responses import ApiResponse
from portal.common.request_context import get_request_id


class ApiException(StarletteHTTPException):
    def __init__(
        self,
        status_code: int = 400,
        code: int = 40000,
        message: str = "Bad Request",
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.details = details


class ValidationError(ApiException):
    """Malformed input: a non-Friday date, an unknown status value."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(status_code=400, code=40001, message=message, details=details)


class NotFoundError(ApiException):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(status_code=404, code=40400, message=message, details=details)


class ConflictError(ApiException):
    """The requested period collides with one that already exists."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(status_code=409, code=40900, message=message, details=details)


class StateError(ApiException):
    """The operation is not allowed in the record's current lifecycle state."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(status_code=409, code=40910, message=message, details=details)


class InternalError(ApiException):
    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(status_code=500, code=50000, message=message)


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    logger = logging.getLogger(__name__)

    @app.exception_handler(ApiException)
    async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
        request_id = get_request_id() or getattr(request.state, "request_id", None)
        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn(
            "api_exception request_id=%s method=%s path=%s status=%s code=%s message=%s",
            request_id,
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
            exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse.fail(
                code=exc.code,
                message=exc.message,
                data=jsonable_encoder(exc.details),
            ).as_json(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = get_request_id() or getattr(request.state, "request_id", None)
        logger.warning(
            "validation_error request_id=%s method=%s path=%s errors=%s",
            request_id,
            request.method,
            request.url.path,
            exc.errors(),
        )
        return JSONResponse(
            status_code=422,
            content=ApiResponse.fail(
                code=42200,
                message="Validation Error",
                data=jsonable_encoder(exc.errors()),
            ).as_json(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail) if exc.detail is not None else "HTTP Error"
        request_id = get_request_id() or getattr(request.state, "request_id", None)
        logger.warning(
            "http_exception request_id=%s method=%s path=%s status=%s message=%s",
            request_id,
            request.method,
            request.url.path,
            exc.status_code,
            message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiResponse.fail(code=exc.status_code, message=message).as_json(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = get_request_id() or getattr(request.state, "request_id", None)
        logger.exception(
            "unhandled_exception request_id=%s method=%s path=%s",
            request_id,
            request.method,
            request.url.path,
        )
        details: Any | None = None
        if debug:
            details = {
                "requestId": request_id,
                "type": exc.__class__.__name__,
                "message": str(exc),
                "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            }
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=ApiResponse.fail(code=50000, message="Internal Server Error", data=details).as_json(),
        )
