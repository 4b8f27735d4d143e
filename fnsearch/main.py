"""
Main FastAPI application entry point for the function signature search service.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.health import router as health_router
from .api.search import router as search_router
from .core.cache import get_cache
from .core.config import get_settings
from .core.database import get_database

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def load_initial_index() -> bool:
    """Build the first signature index from the database."""
    try:
        pairs = await get_database().get_all_signatures()
    except Exception as e:
        logger.error(f"Failed to load function signatures, starting with an empty index: {e}")
        return False
    get_cache().rebuild(pairs)
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting function signature search...")
    settings = get_settings()
    logger.info(f"Configuration loaded for project: {settings.gcp_project_id}")

    await load_initial_index()

    yield

    logger.info("Shutting down function signature search...")


# Create FastAPI application
app = FastAPI(
    title=get_settings().app_name,
    description="Search the exported functions of published Elm packages by type signature",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(search_router, tags=["search"])


@app.get("/", tags=["root"])
async def root() -> Dict[str, Any]:
    """Root endpoint with system information."""
    return {
        "name": get_settings().app_name,
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "search": "/search/{type_signature}",
        "suggest": "/suggest/{type_signature}"
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred",
            "timestamp": datetime.utcnow().isoformat() + "Z"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fnsearch.main:app",
        host="0.0.0.0",
        port=8080,
        log_level="info"
    )
