from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors that map onto the API error envelope."""

    status_code = 500
    code: Optional[str] = None
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": "error", "message": self.message}
        if self.code:
            body["code"] = self.code
        if self.errors:
            body["errors"] = self.errors
        return body


class DomainValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class PremiumRequiredError(AppError):
    status_code = 403
    code = "PREMIUM_REQUIRED"
    default_message = "Premium subscription required"


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Not authorized"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "The user doesn't have enough privileges"
