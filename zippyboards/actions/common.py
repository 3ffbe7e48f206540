"""Helpers shared by the server actions."""
import functools
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from zippyboards.cache import PageCache, project_path
from zippyboards.data_service import AuthUser, DataServiceClient
from zippyboards.errors import (
    INSUFFICIENT_PRIVILEGE,
    ActionError,
    DataServiceError,
    PermissionDenied,
    RemoteServiceError,
    Unauthenticated,
    UnexpectedError,
    ValidationFailure,
)
from zippyboards.models import MemberRole
from zippyboards.schemas.action import ActionResult, validation_message

logger = logging.getLogger(__name__)


def action(func: Callable) -> Callable[..., ActionResult]:
    """Turn a function that raises into one that returns an ``ActionResult``.

    The wrapped function returns its payload (or an ``ActionResult``) and
    signals failures with ``ActionError``. Nothing escapes the wrapper.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> ActionResult:
        try:
            data = func(*args, **kwargs)
        except ActionError as exc:
            logger.info("%s refused: %s", func.__name__, exc.message)
            return ActionResult.fail(exc)
        except ValidationError as exc:
            return ActionResult.fail(ValidationFailure(validation_message(exc)))
        except DataServiceError as exc:
            if exc.code == INSUFFICIENT_PRIVILEGE:
                return ActionResult.fail(PermissionDenied())
            logger.error("Data service error in %s: %s (code %s)", func.__name__, exc.message, exc.code)
            return ActionResult.fail(RemoteServiceError(exc.message))
        except Exception:
            logger.exception("Unexpected error in %s", func.__name__)
            return ActionResult.fail(UnexpectedError())
        if isinstance(data, ActionResult):
            return data
        return ActionResult.ok(data)

    return wrapper


def require_user(client: DataServiceClient) -> AuthUser:
    user = client.auth.get_user()
    if user is None:
        raise Unauthenticated()
    return user


def member_role(client: DataServiceClient, project_id: str, user_id: str) -> Optional[MemberRole]:
    row = (
        client.table("project_members")
        .eq("project_id", project_id)
        .eq("user_id", user_id)
        .maybe_single("role")
    )
    return MemberRole(row["role"]) if row else None


def require_owner(client: DataServiceClient, project_id: str, user_id: str, verb: str) -> None:
    role = member_role(client, project_id, user_id)
    if role is MemberRole.OWNER:
        return
    if role is MemberRole.MEMBER or role is None:
        raise PermissionDenied(f"Permission denied: Only project owners can {verb} members.")
    raise UnexpectedError(f"Unknown member role {role!r}")


def revalidate_project(cache: Optional[PageCache], project_id: str) -> None:
    if cache is not None:
        cache.revalidate_path(project_path(project_id))
