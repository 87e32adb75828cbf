"""
Exception classes for the grievance portal.

Every failure an operation can report derives from GrievanceError, which
carries the HTTP status the API layer answers with.
"""

from typing import Any, Dict, Optional

from fastapi import status


class GrievanceError(Exception):
    """Base exception for all grievance portal errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class DuplicateEmailError(GrievanceError):
    """A user with this email already exists"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email likely already exists"


class Unauthorized(GrievanceError):
    """No user matches the given credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class PersistenceError(GrievanceError):
    """The document store is unreachable or rejected the operation"""

    default_message = "Database error"


class NotificationError(GrievanceError):
    """The mail provider rejected the message or could not be reached"""

    default_message = "Email delivery failed"
