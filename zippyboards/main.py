"""ZippyBoards application factory."""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zippyboards import models  # noqa: F401  registers the tables on Base
from zippyboards.api.pages import router as pages_router
from zippyboards.api.v1 import api_router
from zippyboards.cache import PageCache
from zippyboards.config import Settings, settings as default_settings
from zippyboards.data_service.client import SessionFactory
from zippyboards.middleware import SessionGuardMiddleware

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[SessionFactory] = None,
) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if session_factory is None:
        from zippyboards.database import Base, SessionLocal, engine

        Base.metadata.create_all(bind=engine)
        session_factory = SessionLocal

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, debug=settings.DEBUG)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.page_cache = PageCache()

    app.add_middleware(SessionGuardMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "version": settings.APP_VERSION}

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(pages_router)

    logger.info("%s %s ready", settings.APP_NAME, settings.APP_VERSION)
    return app


app = create_app()
