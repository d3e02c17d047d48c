# citizen_portal/core/errors.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PortalError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "InternalError"

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "ValidationError"


class AuthenticationError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AuthenticationError"


class AuthorizationError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "AuthorizationError"


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NotFoundError"


class ConflictError(PortalError):
    status_code = status.HTTP_409_CONFLICT
    code = "ConflictError"


class InternalError(PortalError):
    pass


@contextmanager
def failure_message(message: str):
    """
    Run a handler body; domain errors pass through, anything else is logged
    and replaced by an InternalError carrying ``message``.
    """
    try:
        yield
    except PortalError:
        raise
    except Exception as exc:
        logger.exception(message)
        raise InternalError(message) from exc


def _error_body(message: str, code: str) -> dict:
    return {"detail": message, "code": code}


async def portal_error_handler(request: Request, exc: PortalError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.code),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "args"))
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(message, ValidationError.code),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", InternalError.code),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
