"""Error taxonomy and the uniform JSON failure envelope."""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Base class for every failure surfaced to the browser."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        details: Any = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(self.message)


class ValidationError(ProxyError):
    """Required input is missing or invalid; never forwarded upstream."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(ProxyError):
    """The identity service rejected credentials or a token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class UpstreamUnavailable(ProxyError):
    """Connection to an upstream service was refused or timed out."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Cannot connect to OpenStack server"


class MalformedUpstreamResponse(AuthError):
    """Upstream answered with success but without an expected header or field.

    A login that returns no token is still a failed login, so this is an
    AuthError; it answers 502 rather than the upstream status.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Malformed response from OpenStack"


class UpstreamError(ProxyError):
    """A compute, network or image call returned a non-success status."""


def upstream_message(body: Any) -> Optional[str]:
    """Pull a human readable message out of the common OpenStack error shapes."""
    if isinstance(body, str):
        return body or None
    if not isinstance(body, dict):
        return None

    for key in ("forbidden", "badRequest", "itemNotFound", "conflictingRequest", "NeutronError", "error"):
        inner = body.get(key)
        if isinstance(inner, dict) and inner.get("message"):
            return inner["message"]
        if isinstance(inner, str) and inner:
            return inner

    message = body.get("message")
    return message if isinstance(message, str) and message else None


def error_envelope(exc: ProxyError) -> JSONResponse:
    """Map a ProxyError onto the `{success: false, ...}` response."""
    content = {"success": False, "message": exc.message}
    if exc.error is not None:
        content["error"] = exc.error
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope mapping for the whole application."""

    @app.exception_handler(ProxyError)
    async def _proxy_error(request: Request, exc: ProxyError):
        logger.warning(
            "%s %s failed with %s (%d): %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc.status_code,
            exc.error or exc.message,
        )
        return error_envelope(exc)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.exception("%s %s failed unexpectedly", request.method, request.url.path)
        return error_envelope(ProxyError(error=str(exc) or type(exc).__name__))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        fields = []
        for err in exc.errors():
            name = ".".join(str(part) for part in err["loc"] if part != "body")
            if name:
                fields.append(name)
        message = "Missing or invalid fields: " + ", ".join(fields) if fields else None
        wrapped = ValidationError(
            message=message,
            details=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()],
        )
        return error_envelope(wrapped)
