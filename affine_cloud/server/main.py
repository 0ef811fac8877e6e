"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from affine_cloud.core.database import init_db
from affine_cloud.core.logging_config import get_logger, setup_logging
from affine_cloud.core.monitoring import initialize_logfire

from .api.v1 import auth, health, server_config, subscriptions, workspaces
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    try:
        logger.info(f"Starting up {settings.server_name} server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info(f"Shutting down {settings.server_name} server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    AFFiNE Cloud Server API

    Authentication (password and magic link), server configuration,
    subscriptions, workspaces and shared doc snapshots.
    """,
    version=settings.server_version,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_PREFIX}/auth")
app.include_router(server_config.router, prefix=f"{constant.API_PREFIX}/server-config")
app.include_router(subscriptions.router, prefix=f"{constant.API_PREFIX}/subscriptions")
app.include_router(workspaces.router, prefix=f"{constant.API_PREFIX}/workspaces")
