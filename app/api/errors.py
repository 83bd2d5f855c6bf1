from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.core.i18n import message, normalize_locale

logger = logging.getLogger(__name__)


class ToolRequestError(Exception):
    """Error surfaced to the client as a localized `{success: false, error}` envelope."""

    def __init__(self, status_code: int, message_key: str, **params: object):
        super().__init__(message_key)
        self.status_code = status_code
        self.message_key = message_key
        self.params = params


def request_locale(request: Request) -> str:
    return normalize_locale(request.headers.get("accept-language"))


def error_envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def tool_request_error_handler(request: Request, exc: ToolRequestError) -> JSONResponse:
    return error_envelope(exc.status_code, message(exc.message_key, request_locale(request), **exc.params))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    locale = request_locale(request)
    field = ""
    if errors and errors[0].get("type") != "json_invalid":
        loc = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(loc)
    logger.info("request_validation_failed path=%s errors=%s", request.url.path, len(errors))
    if field:
        return error_envelope(status.HTTP_400_BAD_REQUEST, message("invalid_field", locale, field=field))
    return error_envelope(status.HTTP_400_BAD_REQUEST, message("invalid_request", locale))


async def rate_limit_error_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.info("rate_limited path=%s limit=%s", request.url.path, exc.detail)
    return error_envelope(status.HTTP_429_TOO_MANY_REQUESTS, message("rate_limited", request_locale(request)))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error path=%s: %s", request.url.path, exc)
    return error_envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, message("internal_error", request_locale(request)))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ToolRequestError, tool_request_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
