"""
Custom exceptions for the line subscription manager.
Handles HTTP exceptions, validation errors, and business logic errors.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.logging import get_logger

logger = get_logger(__name__)


class ErrorDetail(BaseModel):
    """Standard error detail structure"""
    code: str
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class BaseCustomException(HTTPException):
    """Base class for all custom exceptions"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
        field: Optional[str] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.field = field


# =============================================================================
# HTTP EXCEPTIONS
# =============================================================================

class NotFoundError(BaseCustomException):
    """Resource not found exception"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} with identifier '{identifier}' not found",
            error_code="RESOURCE_NOT_FOUND"
        )


class UnauthorizedError(BaseCustomException):
    """Unauthorized access exception"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(BaseCustomException):
    """Forbidden access exception"""

    def __init__(self, message: str = "Access denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message,
            error_code="FORBIDDEN"
        )


class InternalServerError(BaseCustomException):
    """Internal server error exception"""

    def __init__(self, message: str = "Internal server error occurred"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
            error_code="INTERNAL_SERVER_ERROR"
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(BaseCustomException):
    """Base validation error"""

    def __init__(self, message: str, field: str = None, errors: List[ErrorDetail] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=message,
            error_code="VALIDATION_ERROR",
            field=field
        )
        self.errors = errors or []


class InvalidMobileNumberError(ValidationError):
    """Mobile number used as a login or lookup key is not numeric"""

    def __init__(self, mobile_number: str):
        super().__init__(
            message=f"Invalid mobile number: {mobile_number}",
            field="mobile_number",
            errors=[
                ErrorDetail(
                    code="INVALID_MOBILE_NUMBER",
                    message="Mobile number must contain digits only",
                    field="mobile_number",
                    details={"provided_value": mobile_number}
                )
            ]
        )


# =============================================================================
# BUSINESS LOGIC ERRORS
# =============================================================================

class BusinessLogicError(BaseCustomException):
    """Base business logic error"""

    def __init__(self, message: str, error_code: str, field: str = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=message,
            error_code=error_code,
            field=field
        )


class BulkLimitExceededError(BusinessLogicError):
    """Too many rows in a bulk insert"""

    def __init__(self, submitted: int, limit: int):
        super().__init__(
            message=f"Bulk insert accepts at most {limit} customers per batch, got {submitted}",
            error_code="BULK_LIMIT_EXCEEDED",
            field="customers"
        )


class EmptyBulkBatchError(BusinessLogicError):
    """No row in a bulk insert has both a name and a mobile number"""

    def __init__(self):
        super().__init__(
            message="At least one customer with a name and a mobile number is required",
            error_code="EMPTY_BULK_BATCH",
            field="customers"
        )


class NoCustomersSelectedError(BusinessLogicError):
    """Bulk edit without any target ids"""

    def __init__(self):
        super().__init__(
            message="Select at least one customer to edit",
            error_code="NO_CUSTOMERS_SELECTED",
            field="ids"
        )


class NoFieldsToUpdateError(BusinessLogicError):
    """Every field of an edit is unset or marked as no-change"""

    def __init__(self):
        super().__init__(
            message="Set at least one field to change",
            error_code="NO_FIELDS_TO_UPDATE",
            field="changes"
        )


class DatabaseOperationError(InternalServerError):
    """A store operation failed and was rolled back"""

    def __init__(self, operation: str = "database operation"):
        super().__init__(
            message=f"Database operation failed during {operation}"
        )
        self.error_code = "DATABASE_OPERATION_ERROR"


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def format_error_response(error: HTTPException) -> Dict[str, Any]:
    """Format error response for consistent API responses"""
    response = {
        "error": True,
        "error_code": getattr(error, 'error_code', None) or 'HTTP_ERROR',
        "message": error.detail,
        "status_code": error.status_code
    }

    if getattr(error, 'field', None):
        response["field"] = error.field

    if getattr(error, 'errors', None):
        response["errors"] = [err.model_dump() for err in error.errors]

    return response


async def custom_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTP exceptions with the standard error body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc),
        headers=getattr(exc, "headers", None)
    )
