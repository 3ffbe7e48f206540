"""
Session guard.

Runs before every page request: anonymous visitors of protected pages are
sent to the login page, signed-in visitors of the login and signup pages are
sent to the dashboard. JSON endpoints under ``/api/v1`` answer 401 themselves
and are not redirected.
"""
import enum
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from zippyboards.data_service import create_client
from zippyboards.dependencies import RequestCookies, bearer_token
from zippyboards.errors import DataServiceError

logger = logging.getLogger(__name__)

AUTH_PATHS = {"/login", "/signup"}
PUBLIC_PATHS = {"/", "/health", "/docs", "/redoc", "/openapi.json"}
PUBLIC_PREFIXES = ("/auth/", "/api/auth/", "/static/", "/docs/")
API_PREFIX = "/api/v1/"


class PathKind(str, enum.Enum):
    PUBLIC = "public"
    AUTH = "auth"
    API = "api"
    PROTECTED = "protected"


def classify_path(path: str) -> PathKind:
    if path in AUTH_PATHS:
        return PathKind.AUTH
    if path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES):
        return PathKind.PUBLIC
    if path.startswith(API_PREFIX):
        return PathKind.API
    return PathKind.PROTECTED


def guard_redirect(path: str, authenticated: bool) -> Optional[str]:
    """Where to send the visitor instead, or ``None`` to let the request through."""
    kind = classify_path(path)
    if kind is PathKind.PROTECTED and not authenticated:
        return f"/login?{urlencode({'redirectedFrom': path})}"
    if kind is PathKind.AUTH and authenticated:
        return "/dashboard"
    return None


class SessionGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        kind = classify_path(path)
        if kind in (PathKind.PUBLIC, PathKind.API):
            return await call_next(request)

        cookies = RequestCookies(request)
        try:
            client = create_client(
                request.app.state.session_factory,
                settings=request.app.state.settings,
                cookies=cookies,
                access_token=bearer_token(request),
            )
        except DataServiceError as exc:
            logger.error("Guard could not create a data service client: %s", exc.message)
            return JSONResponse(
                {"detail": exc.message},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        session = await run_in_threadpool(client.auth.get_session)
        logger.debug("Guard: path=%s authenticated=%s kind=%s", path, session is not None, kind.value)

        target = guard_redirect(path, session is not None)
        if target is not None:
            return RedirectResponse(target, status_code=303)
        return await call_next(request)
