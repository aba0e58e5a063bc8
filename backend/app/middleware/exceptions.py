"""Custom exception handlers for consistent error responses.

Every failure leaves the API in the same envelope the success path uses:

    {"success": false, "message": "...", "code": "ERROR_CODE", ...}

Internal details (tracebacks, driver messages) are logged, never returned.
"""

import logging
import traceback
from typing import Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Driver messages that mean "the table is missing a column we expect":
# SQLite, MySQL and PostgreSQL respectively.
_MISSING_COLUMN_MARKERS = ("no such column", "unknown column", "does not exist")

SCHEMA_OUTDATED_MESSAGE = (
    "Banco de dados não tem as colunas necessárias. "
    "Execute as migrations com `alembic upgrade head`."
)


class FretesException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        field: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.field = field
        super().__init__(self.message)


class BusinessRuleError(FretesException):
    """A request that is well formed but breaks a business rule."""

    def __init__(self, message: str, error_code: str = "BUSINESS_RULE_VIOLATION"):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
        )


class PaymentLockedError(BusinessRuleError):
    """The shipment already belongs to a payment; its costs are frozen."""

    def __init__(self, message: str):
        super().__init__(message, error_code="PAYMENT_LOCKED")


class ResourceNotFoundError(FretesException):
    """The resource addressed by the request does not exist."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
        )


class ReferenceNotFoundError(FretesException):
    """A body field points at a row that does not exist."""

    def __init__(self, message: str, field: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="REFERENCE_NOT_FOUND",
            field=field,
        )


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "ERROR",
    field: str | None = None,
    errors: list | None = None,
) -> JSONResponse:
    """Create the standard error envelope."""
    content = {
        "success": False,
        "message": message,
        "code": error_code,
    }
    if field:
        content["field"] = field
    if errors:
        content["errors"] = errors

    return JSONResponse(status_code=status_code, content=content)


def is_missing_column_error(exc: Exception) -> bool:
    error_msg = str(getattr(exc, "orig", exc)).lower()
    if "column" not in error_msg:
        return False
    return any(marker in error_msg for marker in _MISSING_COLUMN_MARKERS)


async def fretes_exception_handler(
    request: Request,
    exc: FretesException,
) -> JSONResponse:
    """Handle application exceptions."""
    logger.warning(
        f"Application exception: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        field=exc.field,
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions."""
    if exc.status_code >= 500:
        logger.error(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
    )


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, ValidationError],
) -> JSONResponse:
    """Handle Pydantic validation errors with one entry per bad field."""
    logger.warning(
        f"Validation error on {request.url.path}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        },
    )

    errors = []
    for error in exc.errors():
        # Drop the "body" / "query" prefix FastAPI puts in front of the field
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc),
            "message": error["msg"],
        })

    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message="Dados invalidos",
        error_code="VALIDATION_ERROR",
        errors=errors,
    )


async def database_exception_handler(
    request: Request,
    exc: IntegrityError,
) -> JSONResponse:
    """Handle database integrity errors (unique violations, foreign key, etc.)."""
    logger.error(
        f"Database integrity error on {request.url.path}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    error_msg = str(exc.orig) if hasattr(exc, "orig") else str(exc)

    if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
        message = "Ja existe um registro com este valor"
        error_code = "DUPLICATE_RECORD"
    elif "foreign key" in error_msg.lower():
        message = "Registro referenciado nao existe ou ainda esta em uso"
        error_code = "FOREIGN_KEY_VIOLATION"
    elif "not null" in error_msg.lower():
        message = "Campo obrigatorio ausente"
        error_code = "NULL_VALUE_NOT_ALLOWED"
    else:
        message = "Violacao de restricao do banco de dados"
        error_code = "INTEGRITY_ERROR"

    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=message,
        error_code=error_code,
    )


async def schema_exception_handler(
    request: Request,
    exc: Union[OperationalError, ProgrammingError],
) -> JSONResponse:
    """Handle driver errors: missing columns get a migration hint.

    Anything else operational (connection refused, timeouts) is a 503;
    other programming errors are bugs and surface as a generic 500.
    """
    if is_missing_column_error(exc):
        logger.error(
            f"Database schema outdated on {request.url.path}: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )
        return create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=SCHEMA_OUTDATED_MESSAGE,
            error_code="DB_SCHEMA_OUTDATED",
        )

    if isinstance(exc, OperationalError):
        logger.error(
            f"Database operational error on {request.url.path}: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )
        return create_error_response(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            message="Banco de dados indisponivel. Tente novamente.",
            error_code="DATABASE_UNAVAILABLE",
        )

    return await general_exception_handler(request, exc)


async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "traceback": traceback.format_exc(),
        },
        exc_info=exc,
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Erro inesperado. Tente novamente mais tarde.",
        error_code="INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app):
    """Register all custom exception handlers with FastAPI app."""
    app.add_exception_handler(FretesException, fretes_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, database_exception_handler)
    app.add_exception_handler(OperationalError, schema_exception_handler)
    app.add_exception_handler(ProgrammingError, schema_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
