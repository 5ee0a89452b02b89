"""
Error handling service for consistent error response formatting and logging.

Every failure leaves the API as
{"error": {"code", "message", "timestamp", "request_id", "details"?}}; the
request id is also written to the log line so a client report can be traced.
"""

from typing import Dict, Any, Optional, List, Mapping
from datetime import datetime, timezone
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from househunt.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred. Please try again later."


class ErrorHandlerService:
    """
    Turns exceptions into JSON error responses for the global exception handlers.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the error envelope.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional per-field error information
            request_id: Optional request identifier for log correlation

        Returns:
            Error envelope dictionary
        """
        body: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if request_id:
            body["request_id"] = request_id
        if details:
            body["details"] = details
        return {"error": body}

    @classmethod
    def _respond(
        cls,
        status_code: int,
        error_code: str,
        message: str,
        request: Optional[Request] = None,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Mapping[str, str]] = None,
        exc: Optional[BaseException] = None
    ) -> JSONResponse:
        request_id = uuid.uuid4().hex[:8]
        path = request.url.path if request else None
        log_line = f"[{request_id}] {status_code} {error_code} on {path}: {message}"

        if status_code >= 500:
            logger.error(log_line, exc_info=exc)
        else:
            logger.warning(log_line)

        return JSONResponse(
            status_code=status_code,
            content=cls.format_error_response(error_code, message, details, request_id),
            headers=dict(headers) if headers else None
        )

    @classmethod
    def handle_api_exception(cls, exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        details = exception.field_errors if isinstance(exception, ValidationError) else None
        return cls._respond(
            exception.status_code,
            exception.error_code,
            exception.detail,
            request,
            details=details,
            headers=exception.headers
        )

    @classmethod
    def handle_validation_error(
        cls,
        errors: List[Dict[str, Any]],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Render request validation failures with per-field details.

        Args:
            errors: Error list from a pydantic or FastAPI validation error
            request: Optional FastAPI request object
        """
        details = [
            {
                "field": " -> ".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
                "input": jsonable_encoder(error.get("input"), custom_encoder={Exception: str}),
            }
            for error in errors
        ]
        return cls._respond(422, "VALIDATION_ERROR", "Request validation failed", request, details=details)

    @classmethod
    def handle_database_error(cls, exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        """Render persistence failures without exposing statements or driver messages."""
        if isinstance(exception, IntegrityError):
            return cls._respond(409, "INTEGRITY_ERROR", "Data integrity constraint violation", request, exc=exception)
        return cls._respond(500, "DATABASE_ERROR", "Database operation failed", request, exc=exception)

    @classmethod
    def handle_http_exception(cls, exception: StarletteHTTPException, request: Optional[Request] = None) -> JSONResponse:
        return cls._respond(
            exception.status_code,
            f"HTTP_{exception.status_code}",
            str(exception.detail),
            request,
            headers=getattr(exception, "headers", None)
        )

    @classmethod
    def handle_unexpected_error(cls, exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        return cls._respond(500, "INTERNAL_SERVER_ERROR", GENERIC_FAILURE_MESSAGE, request, exc=exception)
