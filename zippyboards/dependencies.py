"""FastAPI dependencies: per-request data service clients and shared state."""
from typing import List, Optional, Tuple

from fastapi import Depends, HTTPException, Request, Response, status

from zippyboards.cache import PageCache
from zippyboards.config import Settings
from zippyboards.data_service import (
    AuthUser,
    CookieAdapter,
    DataServiceClient,
    create_admin_client,
    create_client,
)
from zippyboards.data_service.cookies import COOKIE_PATH
from zippyboards.errors import DataServiceError


class RequestCookies(CookieAdapter):
    """Reads cookies from the request and writes them to the response.

    Writes are also remembered so they can be replayed onto a response the
    route builds itself (redirects).
    """

    def __init__(self, request: Request, response: Optional[Response] = None):
        self._values = dict(request.cookies)
        self._response = response
        self._pending: List[Tuple[str, Optional[str], Optional[int]]] = []

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def set(self, name: str, value: str, max_age: Optional[int] = None) -> None:
        self._values[name] = value
        self._pending.append((name, value, max_age))
        if self._response is not None:
            _write_cookie(self._response, name, value, max_age)

    def remove(self, name: str) -> None:
        self._values.pop(name, None)
        self._pending.append((name, None, None))
        if self._response is not None:
            _write_cookie(self._response, name, None, None)

    def apply_to(self, response: Response) -> Response:
        for name, value, max_age in self._pending:
            _write_cookie(response, name, value, max_age)
        return response


def _write_cookie(response: Response, name: str, value: Optional[str], max_age: Optional[int]) -> None:
    if value is None:
        response.delete_cookie(name, path=COOKIE_PATH)
    else:
        response.set_cookie(name, value, max_age=max_age, path=COOKIE_PATH, httponly=True, samesite="lax")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_cookies(request: Request, response: Response) -> RequestCookies:
    return RequestCookies(request, response)


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return None


def get_client(request: Request, cookies: RequestCookies = Depends(get_cookies)) -> DataServiceClient:
    try:
        return create_client(
            request.app.state.session_factory,
            settings=request.app.state.settings,
            cookies=cookies,
            access_token=bearer_token(request),
        )
    except DataServiceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)


def get_admin_client(request: Request) -> DataServiceClient:
    try:
        return create_admin_client(request.app.state.session_factory, settings=request.app.state.settings)
    except DataServiceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)


def get_current_user(client: DataServiceClient = Depends(get_client)) -> AuthUser:
    user = client.auth.get_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
