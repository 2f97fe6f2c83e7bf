"""
Custom exceptions for the application.

Four families of typed failures are surfaced to callers:
1. Validation errors - rejected before any write
2. State-conflict errors - the transition is illegal for the current state
3. Authorization errors - the actor does not own the resource
4. Not-found errors - a referenced id does not resolve
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception class for application-specific errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class AuthorizationError(AppException):
    """Raised when user doesn't have permission for an operation."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, status_code=403)


class NotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ConflictError(AppException):
    """Raised when operation conflicts with current state."""

    def __init__(
        self,
        message: str = "Conflict with current state",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status_code=409, details=details)


class ServiceError(AppException):
    """Raised when business logic operation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


# Validation


class KindMismatchError(ValidationError):
    """Profile variant does not match the owning user's kind."""

    def __init__(self, expected: Optional[str], received: str):
        super().__init__(
            f"Profile kind '{received}' does not match user kind '{expected}'",
            details={"user_kind": expected, "profile_kind": received},
        )


class InvalidActivityKindError(ValidationError):
    def __init__(self, kind: Any):
        super().__init__(
            f"Unknown activity kind: {kind}", details={"activity_kind": str(kind)}
        )


class NoOpUpdateError(ValidationError):
    def __init__(self, message: str = "No valid updates provided"):
        super().__init__(message)


class SelfFollowError(ValidationError):
    def __init__(self):
        super().__init__("Cannot follow yourself")


class SelfRequestError(ValidationError):
    def __init__(self):
        super().__init__("Cannot send training request to yourself")


class NotATrainerError(ValidationError):
    def __init__(self):
        super().__init__("Training requests can only be sent to individual users")


class NotAnIndividualError(ValidationError):
    def __init__(self):
        super().__init__("Workouts can only be logged by individual users")


class EmptyWorkoutError(ValidationError):
    def __init__(self):
        super().__init__("Workout log needs resistance, cardio or mobility details")


# State conflicts


class AlreadyExistsError(ConflictError):
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)


class AlreadyFollowingError(ConflictError):
    def __init__(self):
        super().__init__("Already following this user")


class NotFollowingError(ConflictError):
    def __init__(self):
        super().__init__("Not following this user")


class AlreadyRequestedError(ConflictError):
    def __init__(self):
        super().__init__("Training request already exists")


class TrainingNotOfferedError(ConflictError):
    def __init__(self):
        super().__init__("This user does not offer training")


class RequestNotPendingError(ConflictError):
    def __init__(self, status: str):
        super().__init__("Request is not pending", details={"status": status})
