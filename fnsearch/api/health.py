"""
Health check API endpoints.
"""

import time
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..core.cache import SignatureCache, get_cache

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    uptime: float
    version: str
    checks: Dict[str, Any]


# Track application start time
start_time = time.time()


@router.get("/", response_model=HealthResponse)
async def health_check(cache: SignatureCache = Depends(get_cache)) -> HealthResponse:
    """Basic health check endpoint."""
    index = cache.current()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat() + "Z",
        uptime=time.time() - start_time,
        version=__version__,
        checks={
            "api": "healthy",
            "index_generation": cache.generation,
            "index_signatures": index.signature_count,
            "index_functions": len(index),
            "index_replaced_at": cache.replaced_at
        }
    )


@router.get("/ready")
async def readiness_check(cache: SignatureCache = Depends(get_cache)) -> Dict[str, Any]:
    """Ready once a signature index has been installed."""
    if cache.generation == 0:
        raise HTTPException(
            status_code=503,
            detail="Signature index not loaded yet"
        )
    return {
        "status": "ready",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "generation": cache.generation
    }


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    """Liveness check."""
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "uptime": time.time() - start_time
    }
