import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BaseAPIException(Exception):
    status_code: int = 500
    detail: str = "Server Error"
    error: Optional[str] = None

    def __init__(self, detail: str = None, status_code: int = None, error: str = None):
        if detail:
            self.detail = detail
        if status_code:
            self.status_code = status_code
        if error:
            self.error = error
        super().__init__(self.detail)


class BadRequestException(BaseAPIException):
    status_code = 400
    detail = "Bad Request"


class InvalidIdentifierException(BadRequestException):
    detail = "Invalid ID format"


class NotFoundException(BaseAPIException):
    status_code = 404
    detail = "Not Found"


class StoreException(BaseAPIException):
    """The record store failed; carries the driver's message"""
    status_code = 500
    detail = "Database error"


def error_body(message: str, error: Optional[str] = None) -> Dict[str, Any]:
    return {"success": False, "data": None, "message": message, "error": error}


_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def _field_name(loc) -> str:
    names = [str(part) for part in loc if isinstance(part, str) and part not in ("body", "query", "path")]
    if not names:
        return "body"
    return _CAMEL.sub("_", names[-1]).lower()


def _error_message(err: Dict[str, Any], field: str) -> str:
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    if err.get("type") == "json_invalid":
        return "Invalid JSON in request body"
    return f"{field}: {err.get('msg')}"


def describe_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    """Collapse pydantic errors into an envelope message naming the fields.

    Missing required fields are reported together and take precedence over
    every other kind of error.
    """
    missing = []
    for err in errors:
        if err.get("type") == "missing":
            field = _field_name(err.get("loc", ()))
            if field not in missing:
                missing.append(field)
    if missing:
        fields = " and ".join(missing)
        verb = "is" if len(missing) == 1 else "are"
        return {"message": f"{fields} {verb} required", "error": fields}

    fields, messages = [], []
    for err in errors:
        field = _field_name(err.get("loc", ()))
        message = _error_message(err, field)
        if field not in fields:
            fields.append(field)
        if message not in messages:
            messages.append(message)
    return {"message": "; ".join(messages), "error": ", ".join(fields)}


async def api_exception_handler(request: Request, exc: BaseAPIException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail, exc.error or exc.detail),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    described = describe_validation_errors(exc.errors())
    logger.info(f"Validation failed on {request.method} {request.url.path}: {described['message']}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(described["message"], described["error"]),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(str(exc) or "Internal server error", exc.__class__.__name__),
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
