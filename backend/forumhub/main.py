"""
ForumHub Backend Application.

FastAPI application serving community forums: catalog,
follow / unfollow membership and engagement ranking.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from loguru import logger

from forumhub.api.errors import setup_exception_handlers
from forumhub.api.v1 import router as api_v1_router
from forumhub.core.config import settings
from forumhub.core.database import close_db, init_db
from forumhub.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging()
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")

    await init_db()

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ForumHub Backend

    ## Features

    - **Forums**: Create, list and browse community forums
    - **Membership**: Follow and unfollow forums
    - **Ranking**: Forums ordered by discussion activity
    """,
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include API router
app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


@app.get("/health", tags=["System"])
async def health_check() -> dict:
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


def main() -> None:
    """Serve the application with uvicorn (``forumhub`` console script)."""
    uvicorn.run(
        "forumhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
