"""
Authentication actions behind the login, signup and callback pages.

``login`` and ``signup`` return plain dictionaries (``{"success": ...}`` or
``{"error": ...}``) because the forms render them directly. The session itself
travels through the client's cookie adapter.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from zippyboards.actions.common import action, require_user
from zippyboards.data_service import DataServiceClient
from zippyboards.errors import AuthApiError, DataServiceError
from zippyboards.schemas.user import UserSummary

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT = "/dashboard"
LOGIN_PATH = "/login"


def login_error_redirect(message: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({'error': message})}"


def safe_next_path(next_path: Optional[str]) -> str:
    """Only same-site absolute paths are followed after authentication."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return DEFAULT_REDIRECT
    return next_path


def login(
    client: DataServiceClient,
    email: Optional[str],
    password: Optional[str],
    redirect_to: Optional[str] = DEFAULT_REDIRECT,
) -> Dict[str, Any]:
    if not email or not password:
        return {"error": "Email and password are required"}
    try:
        client.auth.sign_in_with_password(email, password)
    except AuthApiError as exc:
        logger.warning("Login error: %s", exc.message)
        return {"error": exc.message}
    except DataServiceError as exc:
        logger.error("Server login error: %s", exc)
        return {"error": "An error occurred during login"}
    return {"success": True, "redirect_to": safe_next_path(redirect_to)}


def signup(
    client: DataServiceClient,
    email: Optional[str],
    password: Optional[str],
    site_url: Optional[str] = None,
) -> Dict[str, Any]:
    if not email or not password:
        return {"error": "Email and password are required"}
    site_url = (site_url or client.settings.SITE_URL).rstrip("/")
    try:
        result = client.auth.sign_up(email, password, redirect_to=f"{site_url}/auth/callback")
    except AuthApiError as exc:
        logger.warning("Signup error: %s", exc.message)
        return {"error": exc.message}
    except DataServiceError as exc:
        logger.error("Server signup error: %s", exc)
        return {"error": "An error occurred during signup"}
    # The link a confirmation mail would carry.
    confirmation_url = f"{result.redirect_to}?{urlencode({'code': result.confirmation_code})}"
    logger.info("Confirmation link for %s: %s", result.user.email, confirmation_url)
    return {
        "success": True,
        "message": "Check your email for the confirmation link!",
        "redirect_to": result.redirect_to,
        "confirmation_url": confirmation_url,
    }


def logout(client: DataServiceClient) -> str:
    """Sign out and return the page to redirect to."""
    client.auth.sign_out()
    return LOGIN_PATH


@action
def validate_session(client: DataServiceClient):
    user = require_user(client)
    return UserSummary(id=user.id, email=user.email)


def start_session_from_code(client: DataServiceClient, code: str) -> Optional[str]:
    """Exchange ``code`` for a session. Returns an error message on failure."""
    try:
        client.auth.exchange_code_for_session(code)
    except AuthApiError as exc:
        logger.warning("Auth callback error: %s", exc.message)
        return exc.message
    except DataServiceError as exc:
        logger.error("Unexpected auth callback error: %s", exc)
        return "An unexpected error occurred"
    return None


def exchange_code(client: DataServiceClient, code: Optional[str], next_path: Optional[str] = None) -> str:
    """Exchange a confirmation code for a session; return the redirect target."""
    if not code:
        return login_error_redirect("Missing authentication code")
    error = start_session_from_code(client, code)
    if error is not None:
        return login_error_redirect(error)
    return safe_next_path(next_path)
