"""Validation error type and the exception handlers shared by every router."""

from typing import Dict, List

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from talentpool.config import settings

logger = structlog.get_logger(__name__)

VALIDATION_MESSAGE = "The given data was invalid."


class FieldValidationError(Exception):
    """Raised by hand-written request checks (multipart payloads, uploaded files)."""

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__(VALIDATION_MESSAGE)
        self.errors = errors


def _field_name(loc) -> str:
    # ("body", "salary_max") -> "salary_max"; ("query", "limit") -> "limit"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "form")]
    return parts[-1] if parts else "body"


def _clean_message(message: str) -> str:
    # pydantic prefixes errors raised from validators with "Value error, "
    prefix = "Value error, "
    if message.startswith(prefix):
        return message[len(prefix):]
    return message


def format_validation_errors(raw_errors) -> Dict[str, List[str]]:
    """Group pydantic error dicts into {field: [message, ...]}."""
    grouped: Dict[str, List[str]] = {}
    for error in raw_errors:
        field = _field_name(error.get("loc", ()))
        ctx = error.get("ctx") or {}
        # model validators name the offending field explicitly
        field = ctx.get("field", field) if isinstance(ctx, dict) else field
        grouped.setdefault(field, []).append(_clean_message(error.get("msg", "Invalid value")))
    return grouped


def validation_response(errors: Dict[str, List[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({"message": VALIDATION_MESSAGE, "errors": errors}),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc.errors())
    logger.info("request_validation_failed", path=request.url.path, fields=sorted(errors))
    return validation_response(errors)


async def field_validation_exception_handler(request: Request, exc: FieldValidationError):
    logger.info("request_validation_failed", path=request.url.path, fields=sorted(exc.errors))
    return validation_response(exc.errors)


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(FieldValidationError, field_validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
