"""Result value returned by server actions"""
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from zippyboards.errors import ActionError, ActionErrorCode


class ActionResult(BaseModel):
    success: bool
    error: Optional[str] = None
    code: Optional[ActionErrorCode] = None
    data: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, exc: ActionError) -> "ActionResult":
        return cls(success=False, error=exc.message, code=exc.code)


def validation_message(exc: ValidationError) -> str:
    """First readable message of a pydantic validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid input."
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid input.")
    return f"{field}: {message}" if field else message
