"""Request-id propagation, request logging, and uniform JSON error payloads."""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from abm_portal.core.config import settings
from abm_portal.core.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"
_HEALTH_PATHS = frozenset({"/health", "/healthz", "/readyz"})


def _get_request_id(request: Request) -> str:
    state_value = getattr(request.state, "request_id", None)
    if isinstance(state_value, str) and state_value:
        return state_value
    header_value = request.headers.get(REQUEST_ID_HEADER, "").strip()
    request_id = header_value or uuid4().hex
    request.state.request_id = request_id
    return request_id


def _error_payload(*, detail: Any, request_id: str) -> dict[str, Any]:
    return {"detail": detail, "request_id": request_id}


def _json_error(request: Request, *, status_code: int, detail: Any) -> JSONResponse:
    request_id = _get_request_id(request)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(_error_payload(detail=detail, request_id=request_id)),
        headers={REQUEST_ID_HEADER: request_id},
    )


def _sanitize_validation_errors(errors: Any) -> list[dict[str, Any]]:
    # Raw bodies (bytes) can sneak into `input`; keep the payload JSON-safe.
    cleaned: list[dict[str, Any]] = []
    for error in errors:
        item = dict(error)
        raw_input = item.get("input")
        if isinstance(raw_input, bytes | bytearray):
            item["input"] = raw_input.decode("utf-8", errors="replace")
        item.pop("ctx", None)
        cleaned.append(item)
    return cleaned


async def _request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        return await _unhandled_exception_handler(request, exc)
    return _json_error(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=_sanitize_validation_errors(exc.errors()),
    )


async def _response_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.error(
        "http.response_validation_failed",
        extra={"path": request.url.path, "request_id": _get_request_id(request)},
    )
    return _json_error(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )


async def _http_exception_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        return await _unhandled_exception_handler(request, exc)
    response = _json_error(request, status_code=exc.status_code, detail=exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "http.unhandled_exception",
        extra={"path": request.url.path, "request_id": _get_request_id(request)},
        exc_info=exc,
    )
    return _json_error(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )


class RequestContextMiddleware:
    """Assign a request id, echo it on responses, and log each request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request_id = _get_request_id(request)
        started = perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = int(message["status"])
                headers = list(message.get("headers", []))
                if not any(key.lower() == b"x-request-id" for key, _ in headers):
                    headers.append((b"x-request-id", request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            _log_request(
                method=scope.get("method", ""),
                path=scope.get("path", ""),
                status_code=status_code,
                duration_ms=(perf_counter() - started) * 1000,
                request_id=request_id,
            )


def _log_request(
    *,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    request_id: str,
) -> None:
    if path in _HEALTH_PATHS and not settings.request_log_include_health:
        return
    extra = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
        "request_id": request_id,
    }
    if duration_ms >= settings.request_log_slow_ms:
        logger.warning("http.request.slow", extra=extra)
    else:
        logger.info("http.request", extra=extra)


def install_error_handling(app: FastAPI) -> None:
    """Attach request-id middleware and JSON error handlers to an app."""
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError, _request_validation_exception_handler)
    app.add_exception_handler(ResponseValidationError, _response_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
