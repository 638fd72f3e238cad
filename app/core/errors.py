"""Errores tipados de la API y su serialización al sobre {success, message, data, error}."""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base para todos los errores que la API devuelve al cliente."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, error=None, headers=None):
        self.message = message or self.default_message
        self.error = error
        self.headers = headers
        super().__init__(self.message)


class ValidationError(ApiError):
    """Una o más reglas de validación fallaron (400)."""
    status_code = 400
    default_message = "Validation failed"


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request"


class Unauthorized(ApiError):
    """Token ausente, inválido o expirado, o credenciales incorrectas."""
    status_code = 401
    default_message = "Unauthorized"


class NotFound(ApiError):
    """El recurso no existe o pertenece a otro usuario."""
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    # El cliente móvil espera 400, no 409
    status_code = 400
    default_message = "Resource already exists"


class RateLimited(ApiError):
    status_code = 429
    default_message = "Too many requests"


def envelope(success: bool, message=None, data=None, error=None) -> dict:
    body = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


# Mensajes de validación por tipo de error de pydantic
def _validation_message(err: dict) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
    field_name = loc[0] if loc else "body"
    err_type = err.get("type", "")
    ctx = err.get("ctx") or {}

    if err_type == "missing":
        return f"{field_name} is required"
    if err_type == "string_too_short":
        return f"{field_name} must be at least {ctx.get('min_length')} characters"
    if err_type == "string_too_long":
        return f"{field_name} must be at most {ctx.get('max_length')} characters"
    if err_type in ("greater_than_equal", "greater_than"):
        limit = ctx.get("ge", ctx.get("gt"))
        return f"{field_name} must be at least {limit}"
    if err_type in ("less_than_equal", "less_than"):
        limit = ctx.get("le", ctx.get("lt"))
        return f"{field_name} must be at most {limit}"
    if err_type == "enum":
        expected = ctx.get("expected", "").replace("'", "").replace(" or ", ", ")
        return f"{field_name} must be one of: {expected}"
    if err_type.startswith(("date", "datetime")):
        return f"{field_name} must be a valid date"
    if err_type.startswith(("float", "int", "decimal", "finite_number")):
        return f"{field_name} must be a number"
    if err_type.startswith("string"):
        return f"{field_name} must be a string"
    if err_type == "value_error" and "email" in err.get("msg", "").lower():
        return f"{field_name} must be a valid email"
    if err_type == "json_invalid":
        return "Request body must be valid JSON"
    return f"{field_name} is invalid"


def validation_messages(errors) -> list:
    messages = []
    for err in errors:
        message = _validation_message(err)
        if message not in messages:
            messages.append(message)
    return messages


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(False, message=exc.message, error=exc.error),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = validation_messages(exc.errors())
    return await api_error_handler(request, ValidationError(error=", ".join(messages)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = f"Route {request.url.path} not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(False, message=message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = envelope(False, message="Internal server error")
    app_settings = getattr(request.app.state, "settings", settings)
    if not app_settings.is_production:
        body["error"] = str(exc)
        body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=500, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
