"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error")
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier")
    input: Optional[Any] = Field(None, description="Input value that caused the error")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["UNAUTHORIZED"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Request identifier for log correlation")
    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Detailed error information for validation errors"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


def _error_example(description: str, code: str, message: str) -> Dict[str, Any]:
    return {
        "description": description,
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": code,
                        "message": message,
                        "timestamp": "2024-01-01T00:00:00Z",
                        "request_id": "abc12345"
                    }
                }
            }
        }
    }


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    401: _error_example("Unauthorized - missing, invalid or expired token", "UNAUTHORIZED", "Token is not valid"),
    422: _error_example("Validation Error", "VALIDATION_ERROR", "Request validation failed"),
    500: _error_example("Internal Server Error", "INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
}

FORBIDDEN_RESPONSE = {
    403: _error_example("Forbidden - role or ownership check failed", "FORBIDDEN", "Access denied. Owner role required."),
}

NOT_FOUND_RESPONSE = {
    404: _error_example("Not Found", "NOT_FOUND", "Listing not found"),
}


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    return dict(COMMON_ERROR_RESPONSES)


def get_owner_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for owner-gated endpoints."""
    return {**COMMON_ERROR_RESPONSES, **FORBIDDEN_RESPONSE}


def get_mutation_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for update/delete of a specific listing."""
    return {**COMMON_ERROR_RESPONSES, **FORBIDDEN_RESPONSE, **NOT_FOUND_RESPONSE}
