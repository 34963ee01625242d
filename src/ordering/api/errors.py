"""Exception-to-response mapping for the Ordering API.

Every failure leaves the API as one of a closed set of error kinds with a
public message. Validation messages are authored by the domain and safe to
return; anything unexpected is logged with its full cause and answered with a
generic message.
"""

from enum import Enum

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from ordering.access.policy import AccessDenied

logger = structlog.get_logger(__name__)


class ErrorKind(Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_TRANSITION = "invalid_transition"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.INTERNAL: 500,
}

PUBLIC_MESSAGES = {
    ErrorKind.INVALID_INPUT: "Invalid input",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.FORBIDDEN: "Not allowed to access this order",
    ErrorKind.INVALID_TRANSITION: "Invalid status transition",
    ErrorKind.INTERNAL: "Internal server error",
}


def error_response(kind: ErrorKind, message: str | None = None, errors: dict | None = None) -> JSONResponse:
    content = {"message": message or PUBLIC_MESSAGES[kind], "kind": kind.value}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=STATUS_CODES[kind], content=content)


def _first_message(errors: dict) -> str | None:
    for messages in errors.values():
        if isinstance(messages, (list, tuple)) and messages:
            return str(messages[0])
        if messages:
            return str(messages)
    return None


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    errors = {
        str(field): [str(m) for m in (messages if isinstance(messages, (list, tuple)) else [messages])]
        for field, messages in (exc.messages or {}).items()
    }
    logger.info("Request rejected", path=request.url.path, errors=errors)
    return error_response(ErrorKind.INVALID_INPUT, _first_message(errors), errors)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        errors.setdefault(field, []).append(str(error.get("msg", "Invalid value")))

    logger.info("Request body rejected", path=request.url.path, errors=errors)
    return error_response(ErrorKind.INVALID_INPUT, errors=errors)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("Object not found", path=request.url.path, detail=str(exc))
    return error_response(ErrorKind.NOT_FOUND)


async def _access_denied(request: Request, exc: AccessDenied) -> JSONResponse:
    logger.warning("Access denied", path=request.url.path, detail=str(exc))
    return error_response(ErrorKind.FORBIDDEN)


async def _invalid_transition(request: Request, exc: InvalidOperationError) -> JSONResponse:
    # Transition messages name only the two statuses involved
    logger.info("Invalid status transition", path=request.url.path, detail=str(exc))
    return error_response(ErrorKind.INVALID_TRANSITION, str(exc))


async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, method=request.method, exc_info=exc)
    return error_response(ErrorKind.INTERNAL)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and framework exceptions onto error responses for `app`."""
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(AccessDenied, _access_denied)
    app.add_exception_handler(InvalidOperationError, _invalid_transition)
    app.add_exception_handler(Exception, _internal_error)
