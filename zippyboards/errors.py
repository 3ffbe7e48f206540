"""Error types shared by the data service, the actions and the API layer."""
import enum
from typing import Optional

# PostgREST / Postgres error codes surfaced by the data service
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INTEGRITY_VIOLATION = "23000"
INSUFFICIENT_PRIVILEGE = "42501"
UNDEFINED_COLUMN = "42703"
UNDEFINED_TABLE = "42P01"
UNDEFINED_FUNCTION = "42883"
NO_SINGLE_ROW = "PGRST116"


class DataServiceError(Exception):
    """Raised when the data service rejects or fails a request."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def __repr__(self) -> str:
        return f"<DataServiceError code={self.code!r} message={self.message!r}>"


class AuthApiError(DataServiceError):
    """Raised by the authentication API (bad credentials, expired codes, ...)."""


class ActionErrorCode(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    ALREADY_MEMBER = "already_member"
    SELF_REMOVAL_FORBIDDEN = "self_removal_forbidden"
    VALIDATION_FAILURE = "validation_failure"
    REMOTE_SERVICE_ERROR = "remote_service_error"
    UNEXPECTED_ERROR = "unexpected_error"


class ActionError(Exception):
    """Base class for failures an action reports back as a result value."""

    code: ActionErrorCode = ActionErrorCode.UNEXPECTED_ERROR
    default_message = "An unexpected server error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ActionError):
    code = ActionErrorCode.UNAUTHENTICATED
    default_message = "Authentication required."


class PermissionDenied(ActionError):
    code = ActionErrorCode.PERMISSION_DENIED
    default_message = "Permission denied."


class NotFound(ActionError):
    code = ActionErrorCode.NOT_FOUND
    default_message = "Not found."


class AlreadyMember(ActionError):
    code = ActionErrorCode.ALREADY_MEMBER
    default_message = "User is already a member of this project."


class SelfRemovalForbidden(ActionError):
    code = ActionErrorCode.SELF_REMOVAL_FORBIDDEN
    default_message = "Project owners cannot remove themselves."


class ValidationFailure(ActionError):
    code = ActionErrorCode.VALIDATION_FAILURE
    default_message = "Invalid input."


class RemoteServiceError(ActionError):
    code = ActionErrorCode.REMOTE_SERVICE_ERROR
    default_message = "The data service request failed."


class UnexpectedError(ActionError):
    code = ActionErrorCode.UNEXPECTED_ERROR
