"""Data service: the system of record behind ZippyBoards."""
from zippyboards.data_service.auth import AuthUser, Session, SignUpResult, normalize_email
from zippyboards.data_service.client import DataServiceClient, create_admin_client, create_client
from zippyboards.data_service.cookies import CookieAdapter, MemoryCookies

__all__ = [
    "AuthUser",
    "CookieAdapter",
    "DataServiceClient",
    "MemoryCookies",
    "Session",
    "SignUpResult",
    "create_admin_client",
    "create_client",
    "normalize_email",
]
