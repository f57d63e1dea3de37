"""Proxy error taxonomy and centralized FastAPI error handlers."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote, quote_plus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

REDACTED = "***"


class ErrorKind(str, Enum):
    MISSING_ENDPOINT = "MissingEndpoint"
    MISSING_CREDENTIAL = "MissingCredential"
    ENDPOINT_NOT_ALLOWED = "EndpointNotAllowed"
    UPSTREAM_RATE_LIMITED = "UpstreamRateLimited"
    UPSTREAM_ERROR = "UpstreamError"
    NETWORK_ERROR = "NetworkError"
    PROXY_INTERNAL_ERROR = "ProxyInternalError"


def redact(text: str, secret: Optional[str]) -> str:
    """Mask every occurrence of ``secret`` in ``text``, raw or URL-encoded."""
    if not secret:
        return text
    for form in {secret, quote(secret, safe=""), quote_plus(secret)}:
        text = text.replace(form, REDACTED)
    return text


class ProxyError(RuntimeError):
    """A failed proxy lookup, already shaped for the HTTP response."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int = 500,
        error: str = "Proxy error",
        endpoint: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.error = error
        self.endpoint = endpoint

    def to_body(self) -> Dict[str, Any]:
        if self.kind is ErrorKind.MISSING_ENDPOINT:
            return {"error": self.error}
        body: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.endpoint is not None:
            body["endpoint"] = self.endpoint
        return body

    # ------------ constructors ------------
    @classmethod
    def missing_endpoint(cls) -> "ProxyError":
        return cls(
            ErrorKind.MISSING_ENDPOINT,
            "Endpoint is required",
            status_code=400,
            error="Endpoint is required",
        )

    @classmethod
    def missing_credential(cls) -> "ProxyError":
        return cls(ErrorKind.MISSING_CREDENTIAL, "SPORTRADAR_API_KEY not configured")

    @classmethod
    def endpoint_not_allowed(cls, endpoint: str) -> "ProxyError":
        return cls(
            ErrorKind.ENDPOINT_NOT_ALLOWED,
            f"Endpoint '{endpoint}' is not allowed",
            status_code=403,
            endpoint=endpoint,
        )

    @classmethod
    def upstream(cls, status_code: int, body: str, endpoint: str, secret: Optional[str]) -> "ProxyError":
        kind = ErrorKind.UPSTREAM_RATE_LIMITED if status_code == 429 else ErrorKind.UPSTREAM_ERROR
        return cls(
            kind,
            redact(body, secret),
            status_code=status_code,
            error=f"API Error: {status_code}",
            endpoint=endpoint,
        )

    @classmethod
    def network(cls, exc: Exception, endpoint: str, secret: Optional[str]) -> "ProxyError":
        detail = str(exc) or type(exc).__name__
        return cls(
            ErrorKind.NETWORK_ERROR,
            redact(detail, secret),
            endpoint=endpoint,
        )

    @classmethod
    def internal(cls, exc: Exception, secret: Optional[str]) -> "ProxyError":
        detail = str(exc) or type(exc).__name__
        return cls(ErrorKind.PROXY_INTERNAL_ERROR, redact(detail, secret))


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(ProxyError)
    async def handle_proxy_error(_request: Request, exc: ProxyError):
        return JSONResponse(exc.to_body(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError):
        messages = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()]
        return JSONResponse(
            {"error": "Invalid request body", "message": "; ".join(messages)},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        secret = request.app.state.settings.sportradar_api_key
        logger.error("Unhandled error: %s", redact(str(exc), secret))
        return JSONResponse(
            {"error": "Proxy error", "message": redact(str(exc), secret)},
            status_code=500,
        )
