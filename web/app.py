"""FastAPI application factory."""

import asyncio
import logging
import secrets
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from config import Config
from data.catalog_session import CatalogSession
from web.middleware import SecurityHeadersMiddleware
from web.routers.catalog import router as catalog_router
from web.routers.pages import router as pages_router
from web.routers.watch import router as watch_router
from web.shared import limiter, register_filters

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fetch the catalog once when the app comes up; drop late results on shutdown."""
    session: CatalogSession = app.state.catalog_session
    task = None
    if not session.loaded:
        task = asyncio.create_task(session.refresh())
    app.state.initial_fetch_task = task  # prevent GC of background task
    try:
        yield
    finally:
        session.close()
        if task and not task.done():
            task.cancel()


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse({"error": "rate_limited"}, status_code=429)


def create_app(config: Config, catalog_session: CatalogSession) -> FastAPI:
    """Build the web app around an existing CatalogSession."""
    app = FastAPI(title="Showreel", lifespan=lifespan)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    app.include_router(pages_router)
    app.include_router(catalog_router)
    app.include_router(watch_router)

    state = app.state
    state.catalog_session = catalog_session
    state.web_config = config.web
    state.catalog_config = config.catalog

    session_secret = config.web.session_secret
    if not session_secret:
        session_secret = secrets.token_hex(32)
        logger.info("No session secret configured, generated one for this process")

    # last added = first executed
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(SessionMiddleware, secret_key=session_secret, max_age=86400)

    register_filters()
    return app
