"""
Page routes.

Each page answers with the JSON payload its view renders. Authentication
callbacks answer with redirects and carry the freshly written session cookie.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse

from zippyboards.actions import auth as auth_actions
from zippyboards.actions import projects as project_actions
from zippyboards.api.responses import unwrap
from zippyboards.cache import PageCache
from zippyboards.config import Settings
from zippyboards.data_service import AuthUser, DataServiceClient
from zippyboards.dependencies import (
    RequestCookies,
    get_client,
    get_cookies,
    get_current_user,
    get_page_cache,
    get_settings,
)
from zippyboards.schemas import UserSummary

router = APIRouter()


def _redirect(target: str, cookies: RequestCookies) -> RedirectResponse:
    return cookies.apply_to(RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER))


@router.get("/")
def landing(settings: Settings = Depends(get_settings)):
    return {"page": "landing", "app_name": settings.APP_NAME, "waitlist": "/api/v1/waitlist"}


@router.get("/login")
def login_page(error: Optional[str] = None, redirectedFrom: Optional[str] = None):
    return {"page": "login", "error": error, "redirect_to": auth_actions.safe_next_path(redirectedFrom)}


@router.get("/signup")
def signup_page(error: Optional[str] = None):
    return {"page": "signup", "error": error}


@router.get("/dashboard")
def dashboard(user: AuthUser = Depends(get_current_user), client: DataServiceClient = Depends(get_client)):
    projects = unwrap(project_actions.list_projects(client))
    return {"page": "dashboard", "user": UserSummary(id=user.id, email=user.email), "projects": projects}


@router.get("/dashboard/projects")
def dashboard_projects(client: DataServiceClient = Depends(get_client)):
    return {"page": "projects", "projects": unwrap(project_actions.list_projects(client))}


@router.get("/projects/{project_id}")
def project_page(
    project_id: str,
    client: DataServiceClient = Depends(get_client),
    cache: PageCache = Depends(get_page_cache),
):
    return unwrap(project_actions.project_page(client, project_id, cache))


@router.get("/app")
def board_app(client: DataServiceClient = Depends(get_client), cookies: RequestCookies = Depends(get_cookies)):
    """Open the board of the most recent project."""
    projects = unwrap(project_actions.list_projects(client))
    if not projects:
        return _redirect("/dashboard/projects", cookies)
    return _redirect(f"/projects/{projects[0].id}", cookies)


@router.get("/settings")
def settings_page(user: AuthUser = Depends(get_current_user)):
    return {"page": "settings", "user": UserSummary(id=user.id, email=user.email)}


@router.get("/auth/callback")
def auth_callback(
    code: Optional[str] = None,
    next: Optional[str] = None,
    client: DataServiceClient = Depends(get_client),
    cookies: RequestCookies = Depends(get_cookies),
):
    return _redirect(auth_actions.exchange_code(client, code, next), cookies)


@router.get("/api/auth/callback")
def api_auth_callback(
    code: Optional[str] = None,
    redirectedFrom: Optional[str] = None,
    client: DataServiceClient = Depends(get_client),
    cookies: RequestCookies = Depends(get_cookies),
):
    if code and auth_actions.start_session_from_code(client, code) is not None:
        return _redirect(auth_actions.login_error_redirect("auth_error"), cookies)
    return _redirect(auth_actions.safe_next_path(redirectedFrom), cookies)


@router.post("/api/auth/validate")
def validate(client: DataServiceClient = Depends(get_client)):
    result = auth_actions.validate_session(client)
    if not result.success:
        return JSONResponse({"error": "Invalid session"}, status_code=status.HTTP_401_UNAUTHORIZED)
    return {"user": result.data.model_dump(), "authenticated": True}
