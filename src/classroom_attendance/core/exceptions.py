from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidSessionParams(ValidationError):
    """Raised when a session is started without a subject or a known section."""


class AuthenticationError(DomainError):
    """Raised when login credentials or a bearer token are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class SourceUnavailable(DomainError):
    """Raised when no capture source is selected or the device/permission is denied."""


class InvalidSessionState(DomainError):
    """Raised when an operation is not legal in the controller's current state."""


class DetectionCycleFailed(DomainError):
    """Raised when one capture cycle cannot produce detections."""


class ApiError(DomainError):
    """Raised by the HTTP client on transport errors and non-success responses."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SubmissionFailed(DomainError):
    """Raised when a session aggregate could not be stored remotely."""

    def __init__(self, message: str, *, session_id: str, queued: bool):
        super().__init__(message)
        self.session_id = session_id
        self.queued = queued
