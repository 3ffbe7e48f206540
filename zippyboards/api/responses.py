"""Translate action results into HTTP responses."""
from typing import Any, Dict

from fastapi import HTTPException, status

from zippyboards.errors import ActionErrorCode
from zippyboards.schemas.action import ActionResult

STATUS_BY_CODE: Dict[ActionErrorCode, int] = {
    ActionErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ActionErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ActionErrorCode.SELF_REMOVAL_FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ActionErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ActionErrorCode.ALREADY_MEMBER: status.HTTP_409_CONFLICT,
    ActionErrorCode.VALIDATION_FAILURE: status.HTTP_400_BAD_REQUEST,
    ActionErrorCode.REMOTE_SERVICE_ERROR: status.HTTP_502_BAD_GATEWAY,
    ActionErrorCode.UNEXPECTED_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: ActionResult) -> Any:
    """Return the payload of a successful result, raise ``HTTPException`` otherwise."""
    if result.success:
        return result.data
    code = result.code or ActionErrorCode.UNEXPECTED_ERROR
    raise HTTPException(status_code=STATUS_BY_CODE[code], detail=result.error)
