"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers exception handlers, mounts uploaded media and
includes all API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ytgify_share.core.cache import get_cache
from ytgify_share.core.database import get_session_factory, init_db
from ytgify_share.core.logging_config import get_logger, setup_logging
from ytgify_share.core.monitoring import initialize_logfire

from .api.v1 import (
    auth,
    collections,
    comments,
    feed,
    gifs,
    hashtags,
    health,
    likes,
    notifications,
    tags,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .jobs import build_scheduler
from .middleware import LogfireMiddleware, RateLimitMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup initializes the database and, when enabled, the periodic job
    scheduler. Shutdown stops the scheduler.
    """
    # Startup
    try:
        logger.info("Starting up ytgify-share server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    scheduler = None
    if settings.jobs.enabled:
        scheduler = build_scheduler(get_session_factory(), get_cache())
        scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down ytgify-share server...")
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ytgify-share API

    Backend for the YTgify browser extension and web app: accounts and tokens,
    GIF uploads and remixes, likes, comments, follows, collections, hashtags,
    feeds and notifications.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

app.add_middleware(RateLimitMiddleware, enabled=settings.rate_limit.enabled)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_origin_regex=cors.origin_regex,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
    expose_headers=["X-Process-Time", "Retry-After", "RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset"],
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

media_root = Path(settings.uploads.media_root)
media_root.mkdir(parents=True, exist_ok=True)
app.mount(settings.uploads.media_url, StaticFiles(directory=media_root), name="media")

API = constant.API_PREFIX

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{API}/auth", tags=["auth"])
app.include_router(gifs.router, prefix=f"{API}/gifs", tags=["gifs"])
app.include_router(likes.router, prefix=f"{API}/gifs", tags=["likes"])
app.include_router(comments.gif_comments_router, prefix=f"{API}/gifs", tags=["comments"])
app.include_router(comments.router, prefix=f"{API}/comments", tags=["comments"])
app.include_router(users.router, prefix=f"{API}/users", tags=["users"])
app.include_router(collections.router, prefix=f"{API}/collections", tags=["collections"])
app.include_router(hashtags.router, prefix=f"{API}/hashtags", tags=["hashtags"])
app.include_router(tags.router, prefix=f"{API}/tags", tags=["tags"])
app.include_router(feed.router, prefix=f"{API}/feed", tags=["feed"])
app.include_router(notifications.router, prefix=f"{API}/notifications", tags=["notifications"])
