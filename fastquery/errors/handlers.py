"""
Exception handlers for FastQuery applications.

Every handler answers with the ErrorResponse envelope, so list endpoints
and their clients see one error shape whether a query parameter failed
validation, a cursor could not be decoded or the database was unreachable.
"""

from functools import partial
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from fastquery.errors.exceptions import AppError
from fastquery.logging import Logger, ensure_logger
from fastquery.schemas import ErrorInfo, ErrorResponse
from fastquery.schemas.metadata import ResponseMetadata

# Location prefixes FastAPI puts in front of the parameter name
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


def create_error_response(
    message: str,
    code: str = "ERROR",
    errors: Optional[List[ErrorInfo]] = None,
    metadata: Optional[ResponseMetadata] = None,
) -> ErrorResponse:
    """
    Create a standardized error response.

    Args:
        message: Error message
        code: Error code identifier, used when ``errors`` is empty
        errors: Detailed error information list
        metadata: Additional metadata for the response

    Returns:
        Standardized error response
    """
    return ErrorResponse(
        success=False,
        message=message,
        errors=errors or [ErrorInfo(code=code, message=message)],
        metadata=metadata or ResponseMetadata(),
    )


def _json_error(status_code: int, response: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(response))


def validation_error_info(
    errors_data: Iterable[Dict[str, Any]], strip: Sequence[str] = ()
) -> List[ErrorInfo]:
    """
    Convert pydantic error dictionaries into ErrorInfo entries.

    Args:
        errors_data: Dictionaries as returned by ``exc.errors()``
        strip: Leading location parts dropped from the field path, so
            ``("query", "page_size")`` is reported as ``page_size``

    Returns:
        One VALIDATION_ERROR entry per error
    """
    info = []
    for error in errors_data:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in strip:
            loc = loc[1:]
        info.append(
            ErrorInfo(
                code="VALIDATION_ERROR",
                message=error.get("msg", "Validation error"),
                field=".".join(str(part) for part in loc),
            )
        )
    return info


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Handler for AppError and its subclasses.

    Errors carrying per-field entries (ValidationError) report one entry
    per field; everything else reports a single entry with its details.
    """
    fields = getattr(exc, "fields", None)
    if fields:
        errors = [
            ErrorInfo(
                code=item.get("code", exc.code),
                message=item.get("message", exc.message),
                field=item.get("field", ""),
            )
            for item in fields
        ]
    else:
        errors = [ErrorInfo(code=exc.code, message=exc.message, details=exc.details or None)]

    return _json_error(exc.status_code, create_error_response(exc.message, exc.code, errors))


def _validation_handler(message: str, strip: Sequence[str]):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        response = create_error_response(
            message,
            code="VALIDATION_ERROR",
            errors=validation_error_info(exc.errors(), strip),
        )
        return _json_error(status.HTTP_422_UNPROCESSABLE_ENTITY, response)

    return handler


# Query, path and body parameters are reported by name alone
validation_exception_handler = _validation_handler(
    "Request validation error", REQUEST_LOCATIONS
)

# Model errors raised inside endpoints keep their full path
pydantic_validation_handler = _validation_handler("Data validation error", ())


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
    logger: Optional[Logger] = None,
    debug: bool = False,
) -> JSONResponse:
    """
    Generic exception handler for unhandled exceptions.

    Args:
        request: FastAPI request
        exc: Unhandled exception
        logger: Optional logger to use instead of the module logger
        debug: Include the exception text in the response details

    Returns:
        JSON response with a generic 500 error
    """
    log = ensure_logger(logger, __name__)
    log.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )

    details = {"exception": str(exc)} if debug else None
    errors = [ErrorInfo(code="INTERNAL_ERROR", message="Internal server error", details=details)]
    return _json_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        create_error_response("Internal server error", errors=errors),
    )


def register_exception_handlers(
    app: FastAPI, logger: Optional[Logger] = None, debug: bool = False
) -> None:
    """
    Register all exception handlers with a FastAPI application.

    Args:
        app: FastAPI application instance
        logger: Optional logger for logging exceptions
        debug: Whether to include exception text in 500 responses
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(PydanticValidationError)(pydantic_validation_handler)
    app.exception_handler(Exception)(
        partial(unhandled_exception_handler, logger=logger, debug=debug)
    )
