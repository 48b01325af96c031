"""API error taxonomy and the exception handlers that render it."""

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.logging_utils import log_error

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base class for errors rendered as {"message", "errors"}."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[list[dict]] = None,
        headers: Optional[dict] = None
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message
        self.errors = errors or [{"msg": message}]


class ValidationError(APIError):
    """400 with per-field messages."""

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, errors)


class AuthError(APIError):
    """401; the message never says why the credentials were rejected."""

    def __init__(self):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            "Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"}
        )


class NotFoundError(APIError):
    """404 for records that are missing or owned by someone else."""

    def __init__(self, resource: str):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found")


class UpstreamError(APIError):
    """Failure of the external text-generation call."""

    def __init__(self, message: str, status_code: int = status.HTTP_502_BAD_GATEWAY):
        super().__init__(status_code, message)


class InternalError(APIError):
    """500 with a generic message; details stay in the server log."""

    def __init__(self):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def _error_body(exc: APIError) -> dict:
    return {"message": exc.message, "errors": exc.errors}


def _field_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        if err.get("type") == "value_error" and "error" in err.get("ctx", {}):
            msg = str(err["ctx"]["error"])
        else:
            msg = err.get("msg", "Invalid value")
        errors.append({"field": ".".join(loc) or "body", "msg": msg})
    return errors


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _field_errors(exc)
    error = ValidationError(errors[0]["msg"] if errors else "Invalid request", errors)
    return JSONResponse(status_code=error.status_code, content=_error_body(error))


async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    log_error(f"Store error on {request.method} {request.url.path}: {exc}", prefix="STORE")
    logger.error(f"[STORE] Full traceback: {traceback.format_exc()}")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=_error_body(error))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework errors such as unknown routes or wrong methods."""
    error = APIError(exc.status_code, str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=_error_body(error), headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(f"Unhandled error on {request.method} {request.url.path}: {exc}", prefix="SERVER")
    logger.error(f"[SERVER] Full traceback: {traceback.format_exc()}")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=_error_body(error))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PyMongoError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
