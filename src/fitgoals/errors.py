"""Error taxonomy and the JSON error handlers that render it.

Learn: handlers branch on ErrorKind, never on message text. Every error
response is a JSON object with a `message` field; validation errors add
an `errors` map of field name → message.

Store faults are never shown to clients: anything that is not an AppError
becomes a 500 with a fixed message, and the real exception goes to the log.
"""

import enum
from contextlib import contextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()

INVALID_INPUT_MESSAGE = "Invalid input data"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class ErrorKind(enum.Enum):
    VALIDATION = 400
    AUTH = 401
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


class AppError(Exception):
    """An error with a kind, a client-safe message and optional field errors."""

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        errors: Optional[dict[str, str]] = None,
        kind: Optional[ErrorKind] = None,
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class AuthError(AppError):
    kind = ErrorKind.AUTH


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class InternalError(AppError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)


def field_errors(exc: RequestValidationError) -> dict[str, str]:
    """Flatten pydantic error dicts into {field: message}.

    The location prefix ("body", "query", ...) is dropped; nested fields are
    dotted (`progress.0.value`). The first error per field wins.
    """
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        # a bare position (JSON decode errors) is about the body as a whole
        if all(isinstance(part, int) for part in loc):
            loc = []
        field = ".".join(str(part) for part in loc) or "body"
        msg = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.setdefault(field, msg)
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if exc.kind is ErrorKind.AUTH:
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.kind is ErrorKind.INTERNAL:
        logger.error("request.internal_error", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=exc.kind.status_code, content=exc.to_dict(), headers=headers
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=ErrorKind.VALIDATION.status_code,
        content={"message": INVALID_INPUT_MESSAGE, "errors": field_errors(exc)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=ErrorKind.INTERNAL.status_code,
        content={"message": INTERNAL_ERROR_MESSAGE},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


@contextmanager
def store_faults(operation: str):
    """Downgrade database driver errors to a client-safe InternalError.

    Usage: `with store_faults("goals.create"): ...` around service calls.
    AppErrors raised inside pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError:
        logger.exception("store.error", operation=operation)
        raise InternalError()
