"""Data service client: authentication, table access and remote procedures."""
from __future__ import annotations

import inspect
import logging
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Callable, Dict, Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from zippyboards.config import Settings, settings as default_settings
from zippyboards.data_service.auth import AuthClient, Session, resolve_session
from zippyboards.data_service.cookies import CookieAdapter
from zippyboards.data_service.query import TableQuery
from zippyboards.data_service.rpc import PROCEDURES, RpcContext
from zippyboards.errors import (
    FOREIGN_KEY_VIOLATION,
    INTEGRITY_VIOLATION,
    UNDEFINED_FUNCTION,
    UNIQUE_VIOLATION,
    DataServiceError,
)
from zippyboards.models import AuthSession, User
from zippyboards.security import create_access_token
from zippyboards.utils.primary_keys import new_id
from zippyboards.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], DBSession]

_UNRESOLVED = object()


def _integrity_error(exc: IntegrityError) -> DataServiceError:
    origin = exc.orig
    code = getattr(origin, "pgcode", None) or getattr(origin, "sqlstate", None)
    text = str(origin)
    if code is None:
        if "UNIQUE" in text.upper():
            code = UNIQUE_VIOLATION
        elif "FOREIGN KEY" in text.upper():
            code = FOREIGN_KEY_VIOLATION
        else:
            code = INTEGRITY_VIOLATION
    if code == UNIQUE_VIOLATION:
        return DataServiceError("duplicate key value violates unique constraint", code=code, details=text)
    return DataServiceError(text, code=code)


class DataServiceClient:
    """One caller's connection to the data service.

    Construct one per request (or per script) with ``create_client`` or, for
    server-side code that has already checked permissions,
    ``create_admin_client``. Elevated clients bypass row-level security.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        settings: Settings = default_settings,
        cookies: Optional[CookieAdapter] = None,
        access_token: Optional[str] = None,
        elevated: bool = False,
    ):
        self._session_factory = session_factory
        self.settings = settings
        self._cookies = cookies
        self._access_token = access_token
        self._elevated = elevated
        self._session: Any = _UNRESOLVED
        self.auth = AuthClient(self)

    @property
    def elevated(self) -> bool:
        return self._elevated

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        func = PROCEDURES.get(name)
        if func is None:
            raise DataServiceError(f"Could not find the function public.{name}", code=UNDEFINED_FUNCTION)
        params = params or {}
        context = RpcContext(user_id=self.current_user_id(), elevated=self._elevated)
        try:
            inspect.signature(func).bind(None, context, **params)
        except TypeError as exc:
            raise DataServiceError(
                f"Could not find the function public.{name} with the given parameters",
                code=UNDEFINED_FUNCTION,
                details=str(exc),
            ) from None
        with self.connect() as db:
            return func(db, context, **params)

    @contextmanager
    def connect(self) -> Iterator[DBSession]:
        """Open a database session, translating driver failures."""
        db = self._session_factory()
        try:
            yield db
        except IntegrityError as exc:
            db.rollback()
            raise _integrity_error(exc) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Data service request failed: %s", exc)
            raise DataServiceError(str(exc)) from exc
        finally:
            db.close()

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    def session(self) -> Optional[Session]:
        if self._session is _UNRESOLVED:
            self._session = self._resolve_session()
        return self._session

    def current_user_id(self) -> Optional[str]:
        session = self.session()
        return session.user.id if session else None

    def _token(self) -> Optional[str]:
        if self._access_token:
            return self._access_token
        if self._cookies is not None:
            return self._cookies.get(self.settings.SESSION_COOKIE_NAME)
        return None

    def _resolve_session(self) -> Optional[Session]:
        token = self._token()
        if not token:
            return None
        with self.connect() as db:
            return resolve_session(self, db, token)

    def _start_session(self, db: DBSession, user: User) -> Session:
        lifetime = timedelta(minutes=self.settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        record = AuthSession(id=new_id(), user_id=user.id, expires_at=utcnow() + lifetime)
        db.add(record)
        db.commit()
        token = create_access_token(
            user_id=user.id,
            email=user.email,
            session_id=record.id,
            expires_delta=lifetime,
            settings=self.settings,
        )
        self._access_token = token
        if self._cookies is not None:
            self._cookies.set(
                self.settings.SESSION_COOKIE_NAME,
                token,
                max_age=int(lifetime.total_seconds()),
            )
        self._session = resolve_session(self, db, token)
        logger.info("Started session for user %s", user.id)
        return self._session

    def _clear_session(self) -> None:
        self._access_token = None
        self._session = None
        if self._cookies is not None:
            self._cookies.remove(self.settings.SESSION_COOKIE_NAME)


def _default_session_factory() -> SessionFactory:
    from zippyboards.database import SessionLocal

    return SessionLocal


def create_client(
    session_factory: Optional[SessionFactory] = None,
    *,
    settings: Settings = default_settings,
    cookies: Optional[CookieAdapter] = None,
    access_token: Optional[str] = None,
) -> DataServiceClient:
    """Create a client acting as whoever the cookie or token identifies."""
    if not settings.ANON_KEY:
        raise DataServiceError("Missing ANON_KEY")
    return DataServiceClient(
        session_factory or _default_session_factory(),
        settings=settings,
        cookies=cookies,
        access_token=access_token,
    )


def create_admin_client(
    session_factory: Optional[SessionFactory] = None,
    *,
    settings: Settings = default_settings,
) -> DataServiceClient:
    """Create an elevated client. Server-side only."""
    if not settings.SERVICE_ROLE_KEY:
        raise DataServiceError("Missing SERVICE_ROLE_KEY")
    return DataServiceClient(
        session_factory or _default_session_factory(),
        settings=settings,
        elevated=True,
    )
