from datetime import datetime, timezone
from typing import Optional, Dict, Any
import uuid


class CustomException(Exception):

    def __init__(self,
                 message: str,
                 status_code: int = 500,
                 error_code: str = "INTERNAL_SERVER_ERROR",
                 details: Optional[Dict[str, Any]] = None,
                 user_message: Optional[str] = None,
                 correlation_id: Optional[str] = None,
                 retry_after: Optional[int] = None,
                 ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.user_message = user_message or message
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.retry_after = retry_after
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        error_dict = {
            "code": self.error_code,
            "message": self.user_message,
            "status": self.status_code,
            "timestamp": self.timestamp.isoformat(),
            "correlation_id": self.correlation_id,
            "type": "error"
        }

        if self.retry_after:
            error_dict["retry_after"] = self.retry_after

        if self.details:
            error_dict["details"] = self.details
        return {"error": error_dict}

    def get_response_headers(self) -> Dict[str, str]:
        """Get additional response headers for this exception"""
        headers = {"X-Correlation-ID": self.correlation_id}

        if self.retry_after:
            headers["Retry-After"] = str(self.retry_after)

        return headers


class InvalidInputError(CustomException):
    """Missing or malformed request fields"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_INPUT",
            details={"field": field} if field else None
        )


class NotFoundError(CustomException):
    """Resource not found exception"""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )


class QuizUnavailableError(CustomException):
    """Quiz is unknown or not open for submissions"""

    def __init__(self, quiz_id: Any):
        super().__init__(
            message=f"Quiz {quiz_id} is not available",
            status_code=403,
            error_code="QUIZ_NOT_AVAILABLE",
            user_message="Quiz not available",
            details={"quiz_id": quiz_id}
        )


class ConflictError(CustomException):
    """Resource conflict error"""

    def __init__(self, message: str, resource_type: str = "resource"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details={"resource_type": resource_type}
        )


class DatabaseError(CustomException):
    """Database operation error exception"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="DATABASE_ERROR",
            user_message="A database error occurred",
            details=details
        )


class RequestTimeoutError(CustomException):
    """Request timeout error"""

    def __init__(self, message: str = "Request timeout", timeout_seconds: float = 30):
        super().__init__(
            message=message,
            status_code=408,
            error_code="REQUEST_TIMEOUT",
            user_message="Request took too long to process",
            details={"timeout_seconds": timeout_seconds},
            retry_after=5
        )
