import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizdesk.utils.exceptions import CustomException
from quizdesk.core.logging import get_logger
from quizdesk.core.config import settings

logger = get_logger(__name__)


def correlation_id_for(request: Request, fallback: Optional[str] = None) -> str:
    return getattr(request.state, "correlation_id", None) or fallback or str(uuid.uuid4())


def error_response(
        request: Request,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Build the error envelope shared by every handler:
    {"error": {code, message, status, timestamp, correlation_id, path, ...}}
    """
    correlation_id = correlation_id or correlation_id_for(request)
    body: Dict[str, Any] = {
        "code": error_code,
        "message": message,
        "status": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "correlation_id": correlation_id,
        "path": request.url.path,
        "type": "error",
    }
    if details:
        body["details"] = details
    if settings.ENVIRONMENT == "development" and status_code >= 500:
        body["debug"] = {"traceback": traceback.format_exc().split("\n")}

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"error": body}),
        headers={**(headers or {}), "X-Correlation-ID": correlation_id},
    )


def _log_extra(request: Request, status_code: int) -> Dict[str, Any]:
    return {
        "correlation_id": correlation_id_for(request),
        "endpoint": request.url.path,
        "method": request.method,
        "status_code": status_code,
    }


async def handle_custom_exception(request: Request, exc: CustomException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Server error: {exc.message}", extra=_log_extra(request, exc.status_code), exc_info=exc)
    else:
        logger.warning(f"Client error: {exc.message}", extra=_log_extra(request, exc.status_code))

    correlation_id = correlation_id_for(request, exc.correlation_id)
    exc.correlation_id = correlation_id
    return error_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.user_message,
        details=exc.details,
        correlation_id=correlation_id,
        headers=exc.get_response_headers(),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(f"HTTP exception: {exc.detail}", extra=_log_extra(request, exc.status_code))
    return error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": error["loc"][-1] if error.get("loc") else "unknown",
            "message": error.get("msg", "Validation failed"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Validation error: {len(errors)} validation failures", extra=_log_extra(request, 400))

    # Malformed bodies are invalid input, reported as 400 rather than 422
    return error_response(
        request,
        400,
        "VALIDATION_ERROR",
        "Request validation failed",
        details={"validation_errors": errors, "error_count": len(errors)},
    )


async def handle_database_exception(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    if isinstance(exc, IntegrityError):
        status_code, error_code, message = 409, "DATABASE_INTEGRITY_ERROR", "The operation conflicts with existing data"
    else:
        status_code, error_code, message = 500, "DATABASE_ERROR", "A database error occurred"

    logger.error(f"Database error: {exc}", extra=_log_extra(request, status_code), exc_info=exc)
    return error_response(request, status_code, error_code, message)


async def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error: {exc}", extra=_log_extra(request, 500), exc_info=exc)

    # Internal details stay out of production responses
    if settings.ENVIRONMENT == "production":
        message = "An unexpected error occurred"
    else:
        message = f"Unexpected error: {exc}"
    return error_response(request, 500, "INTERNAL_SERVER_ERROR", message)


EXCEPTION_HANDLERS = (
    (CustomException, handle_custom_exception),
    (StarletteHTTPException, handle_http_exception),
    (RequestValidationError, handle_validation_exception),
    (SQLAlchemyError, handle_database_exception),
    (Exception, handle_generic_exception),
)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on the app"""
    for exc_class, handler in EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, handler)
