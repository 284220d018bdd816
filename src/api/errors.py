"""
Domain error translation - maps AccountError kinds to HTTP responses.

Response body is always {"detail": message, "kind": kind}. Messages come
from the domain and never include storage or transport detail. Request
bodies that fail schema validation use the same shape with kind
"validation" and keep FastAPI's 422 status.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import AccountError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_409_CONFLICT,
    "not_found": status.HTTP_404_NOT_FOUND,
    "expired": status.HTTP_400_BAD_REQUEST,
    "auth": status.HTTP_401_UNAUTHORIZED,
    "server": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind == "auth" else None
    logger.debug("%s %s -> %d (%s)", request.method, request.url.path, status_code, exc.kind)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "kind": exc.kind},
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first schema violation as a validation error."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg")
    else:
        detail = "Invalid request"
    logger.debug("%s %s -> 422 (validation)", request.method, request.url.path)
    return JSONResponse(
        status_code=422,
        content={"detail": detail, "kind": "validation"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and request validation handlers on an application."""
    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
