from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger

log = get_logger(__name__)

_REQUEST_PARTS = ("body", "path", "query", "header", "cookie")


class AppError(Exception):
    """Base application error rendered as the failure envelope."""

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationFailedError(AppError):
    def __init__(self, message: str, field: str):
        self.field = field
        super().__init__(message, code="VALIDATION_ERROR", status_code=status.HTTP_400_BAD_REQUEST)


class MissingApiKeyError(AppError):
    def __init__(self, message: str = "API key is required"):
        super().__init__(message, code="MISSING_API_KEY", status_code=status.HTTP_401_UNAUTHORIZED)


class InvalidApiKeyError(AppError):
    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message, code="INVALID_API_KEY", status_code=status.HTTP_401_UNAUTHORIZED)


class ServerConfigError(AppError):
    def __init__(self, message: str = "Server configuration error"):
        super().__init__(message, code="SERVER_CONFIG_ERROR", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class InvalidSignatureError(AppError):
    def __init__(self, message: str = "Invalid payment signature"):
        super().__init__(message, code="INVALID_SIGNATURE", status_code=status.HTTP_400_BAD_REQUEST)


class PaymentOperationError(AppError):
    """A gateway call was rejected; status and description come from upstream."""


class GatewayTransportError(AppError):
    def __init__(self, message: str = "Payment gateway is unreachable"):
        super().__init__(message, code="GATEWAY_UNAVAILABLE", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class GatewayError(Exception):
    """Non-2xx response from the payment gateway."""

    def __init__(self, status_code: int, payload: dict[str, Any]):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"gateway responded with HTTP {status_code}")

    @property
    def upstream_code(self) -> str | None:
        error = self.payload.get("error")
        return error.get("code") if isinstance(error, dict) else None

    @property
    def description(self) -> str | None:
        error = self.payload.get("error")
        return error.get("description") if isinstance(error, dict) else None


def _envelope(request: Request, message: str, code: str, details: dict[str, Any] | None = None) -> dict:
    body: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = details
    if hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return body


def error_response(request: Request, exc: AppError) -> ORJSONResponse:
    body = _envelope(request, exc.message, exc.code, exc.details)
    if isinstance(exc, ValidationFailedError):
        body["field"] = exc.field
    return ORJSONResponse(status_code=exc.status_code, content=body)


async def app_exception_handler(request: Request, exc: AppError) -> ORJSONResponse:
    if exc.status_code >= 500:
        log.error("app_error", code=exc.code, error=exc.message, path=request.url.path)
    return error_response(request, exc)


def first_error(errors: list[dict[str, Any]], strip_location: bool = False) -> tuple[str, str]:
    """Return (field path, message) of the first pydantic error."""
    if not errors:
        return "body", "Invalid request"
    err = errors[0]
    loc = [str(p) for p in err.get("loc", ())]
    if strip_location and loc and loc[0] in _REQUEST_PARTS:
        loc = loc[1:]
    field = ".".join(loc) or "body"
    return field, f"{field}: {err.get('msg', 'Invalid value')}"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    field, message = first_error(list(exc.errors()), strip_location=True)
    log.warning("validation_error", field=field, error=message, path=request.url.path, method=request.method)
    return error_response(request, ValidationFailedError(message, field))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        log.warning(
            "route_not_found",
            path=request.url.path,
            method=request.method,
            user_agent=request.headers.get("user-agent"),
        )
        body = _envelope(request, "Route not found", "ROUTE_NOT_FOUND")
        body["path"] = request.url.path
        body["method"] = request.method
        return ORJSONResponse(status_code=exc.status_code, content=body)
    return ORJSONResponse(
        status_code=exc.status_code,
        content=_envelope(request, str(exc.detail), "HTTP_ERROR"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    log.exception("unhandled_exception", exc_info=exc, path=request.url.path)
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(request, "Internal server error", "INTERNAL_ERROR"),
    )
