"""Shared FastAPI dependencies."""

import json
from decimal import Decimal
from typing import Awaitable, Callable, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError

from app.core.config import Settings
from app.core.exceptions import (
    InvalidApiKeyError,
    MissingApiKeyError,
    ServerConfigError,
    ValidationFailedError,
    first_error,
)
from app.core.logging import get_logger
from app.core.security import api_keys_match, extract_api_key
from app.services.razorpay import RazorpayGateway

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> RazorpayGateway:
    return request.app.state.gateway


async def require_api_key(request: Request, settings: Settings = Depends(get_app_settings)) -> None:
    """Dependency: authorize the request against the configured shared API key."""
    client = request.client.host if request.client else None
    api_key = extract_api_key(request.headers)
    if not api_key:
        log.warning(
            "api_key_missing",
            ip=client,
            user_agent=request.headers.get("user-agent"),
            path=request.url.path,
        )
        raise MissingApiKeyError()
    if not settings.api_key:
        log.error("api_key_not_configured")
        raise ServerConfigError()
    if not api_keys_match(api_key, settings.api_key):
        log.warning(
            "api_key_invalid",
            ip=client,
            user_agent=request.headers.get("user-agent"),
            path=request.url.path,
        )
        raise InvalidApiKeyError()
    log.debug("api_key_valid", ip=client, path=request.url.path)


def validated_body(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """
    Dependency factory: parse the JSON body into `model`.

    Floats are decoded as Decimal so money amounts stay exact. Runs after
    router dependencies, so unauthenticated requests never get this far.
    """

    async def dependency(request: Request) -> ModelT:
        raw = await request.body()
        try:
            payload = json.loads(raw or b"null", parse_float=Decimal)
        except ValueError:
            log.warning("validation_error", field="body", error="malformed JSON", path=request.url.path)
            raise ValidationFailedError("Request body must be valid JSON", "body")
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            field, message = first_error(exc.errors())
            log.warning(
                "validation_error",
                field=field,
                error=message,
                path=request.url.path,
                method=request.method,
                body=payload if isinstance(payload, dict) else None,
            )
            raise ValidationFailedError(message, field) from exc

    return dependency
