import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import zippyboards.models  # noqa: F401
from zippyboards.actions.projects import create_project
from zippyboards.cache import PageCache
from zippyboards.config import Settings
from zippyboards.data_service import MemoryCookies, create_admin_client, create_client
from zippyboards.database import Base

TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def session_factory():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ANON_KEY="test-anon-key",
        SERVICE_ROLE_KEY="test-service-role-key",
        JWT_SECRET_KEY="test-secret-key-with-enough-length",
        SITE_URL="http://testserver",
    )


@pytest.fixture
def anon(session_factory, settings):
    return create_client(session_factory, settings=settings, cookies=MemoryCookies())


@pytest.fixture
def admin(session_factory, settings):
    return create_admin_client(session_factory, settings=settings)


@pytest.fixture
def cache() -> PageCache:
    return PageCache()


@pytest.fixture
def sign_in(session_factory, settings, admin):
    """Create a confirmed user and return a client signed in as them."""

    def _sign_in(email: str, password: str = PASSWORD):
        if admin.auth.admin.get_user_by_email(email) is None:
            admin.auth.admin.create_user(email, password, email_confirm=True)
        client = create_client(session_factory, settings=settings, cookies=MemoryCookies())
        client.auth.sign_in_with_password(email, password)
        return client

    return _sign_in


@pytest.fixture
def owner(sign_in):
    return sign_in("owner@example.com")


@pytest.fixture
def project(owner):
    result = create_project(owner, "Launch Plan", "Everything for the launch")
    assert result.success, result.error
    return result.data
