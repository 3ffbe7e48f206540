"""
Authentication API of the data service.

Sessions are server-side ``AuthSession`` rows referenced by a signed access
token. The token travels either explicitly (``Authorization`` header) or in the
session cookie the client writes through its cookie adapter.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

import jwt

from zippyboards.errors import INSUFFICIENT_PRIVILEGE, AuthApiError, DataServiceError
from zippyboards.models import AuthCode, AuthSession, User
from zippyboards.security import (
    MAX_PASSWORD_BYTES,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from zippyboards.utils.primary_keys import new_id
from zippyboards.utils.timestamps import ensure_aware, utcnow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DBSession

    from zippyboards.data_service.client import DataServiceClient

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    """Addresses are stored and looked up lower-cased and stripped."""
    return email.strip().lower()


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str
    email_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: User) -> "AuthUser":
        return cls(
            id=user.id,
            email=user.email,
            email_confirmed_at=ensure_aware(user.email_confirmed_at),
            created_at=ensure_aware(user.created_at),
        )


@dataclass(frozen=True)
class Session:
    access_token: str
    expires_at: datetime
    user: AuthUser
    token_type: str = "bearer"


@dataclass(frozen=True)
class SignUpResult:
    user: AuthUser
    # Sent to the user by mail; delivery happens outside the data service.
    confirmation_code: str
    redirect_to: Optional[str] = None


class AuthClient:
    def __init__(self, client: "DataServiceClient"):
        self._client = client

    @property
    def admin(self) -> "AdminAuthClient":
        if not self._client.elevated:
            raise DataServiceError("User not allowed", code=INSUFFICIENT_PRIVILEGE)
        return AdminAuthClient(self._client)

    def sign_up(self, email: str, password: str, redirect_to: Optional[str] = None) -> SignUpResult:
        email = normalize_email(email)
        _check_password(password)
        settings = self._client.settings
        with self._client.connect() as db:
            if db.query(User).filter(User.email == email).first() is not None:
                raise AuthApiError("User already registered", code="user_already_exists")
            user = User(id=new_id(), email=email, password_hash=hash_password(password))
            code = AuthCode(
                code=secrets.token_urlsafe(32),
                user_id=user.id,
                expires_at=utcnow() + timedelta(minutes=settings.AUTH_CODE_EXPIRE_MINUTES),
            )
            db.add(user)
            db.add(code)
            db.commit()
            logger.info("Registered user %s, confirmation pending", user.id)
            return SignUpResult(user=AuthUser.from_model(user), confirmation_code=code.code, redirect_to=redirect_to)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        email = normalize_email(email)
        with self._client.connect() as db:
            user = db.query(User).filter(User.email == email).first()
            if user is None or not verify_password(password, user.password_hash):
                raise AuthApiError("Invalid login credentials", code="invalid_credentials")
            if user.email_confirmed_at is None:
                raise AuthApiError("Email not confirmed", code="email_not_confirmed")
            return self._client._start_session(db, user)

    def exchange_code_for_session(self, code: str) -> Session:
        with self._client.connect() as db:
            record = db.get(AuthCode, code)
            now = utcnow()
            if record is None or record.used_at is not None or ensure_aware(record.expires_at) <= now:
                raise AuthApiError("Invalid or expired authorization code", code="bad_code_verifier")
            record.used_at = now
            user = record.user
            if user.email_confirmed_at is None:
                user.email_confirmed_at = now
            return self._client._start_session(db, user)

    def get_session(self) -> Optional[Session]:
        return self._client.session()

    def get_user(self) -> Optional[AuthUser]:
        session = self._client.session()
        return session.user if session else None

    def sign_out(self) -> None:
        session = self._client.session()
        if session is not None:
            claims = decode_access_token(session.access_token, self._client.settings)
            with self._client.connect() as db:
                record = db.get(AuthSession, claims["sid"])
                if record is not None and record.revoked_at is None:
                    record.revoked_at = utcnow()
                    db.commit()
            logger.info("Signed out user %s", session.user.id)
        self._client._clear_session()


class AdminAuthClient:
    """User administration; only reachable from an elevated client."""

    def __init__(self, client: "DataServiceClient"):
        self._client = client

    def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        with self._client.connect() as db:
            user = db.query(User).filter(User.email == normalize_email(email)).first()
            return AuthUser.from_model(user) if user else None

    def get_user_by_id(self, user_id: str) -> Optional[AuthUser]:
        with self._client.connect() as db:
            user = db.get(User, user_id)
            return AuthUser.from_model(user) if user else None

    def create_user(self, email: str, password: str, email_confirm: bool = False) -> AuthUser:
        email = normalize_email(email)
        _check_password(password)
        with self._client.connect() as db:
            if db.query(User).filter(User.email == email).first() is not None:
                raise AuthApiError("User already registered", code="user_already_exists")
            user = User(
                id=new_id(),
                email=email,
                password_hash=hash_password(password),
                email_confirmed_at=utcnow() if email_confirm else None,
            )
            db.add(user)
            db.commit()
            return AuthUser.from_model(user)


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthApiError(
            f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
            code="weak_password",
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise AuthApiError(
            f"Password should be at most {MAX_PASSWORD_BYTES} bytes",
            code="weak_password",
        )


def resolve_session(client: "DataServiceClient", db: "DBSession", token: str) -> Optional[Session]:
    """Validate ``token`` against its server-side session record."""
    try:
        claims = decode_access_token(token, client.settings)
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None

    record = db.get(AuthSession, claims["sid"])
    if record is None or record.revoked_at is not None or record.user_id != claims["sub"]:
        return None
    expires_at = ensure_aware(record.expires_at)
    if expires_at <= utcnow():
        return None
    return Session(access_token=token, expires_at=expires_at, user=AuthUser.from_model(record.user))
