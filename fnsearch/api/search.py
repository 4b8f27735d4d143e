"""
Signature search API endpoints.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ..core.cache import SignatureCache, get_cache
from ..core.config import get_settings
from ..core.database import FunctionDatabase, get_database
from ..core.signature_index import SignatureIndex
from ..models.function import CompleteFunction

logger = logging.getLogger(__name__)
router = APIRouter()


class UpdateFunctionsResponse(BaseModel):
    """Response model for an index rebuild."""
    success: bool = Field(..., description="Whether the new index was installed")
    signatures: int = Field(..., description="Distinct signatures in the new index")
    functions: int = Field(..., description="Functions in the new index")
    generation: int = Field(..., description="Number of indexes installed since startup")
    updated_at: str = Field(..., description="When the index was installed")


def _page_size(limit: Optional[int], default: int) -> int:
    settings = get_settings()
    return min(limit or default, settings.max_page_size)


@router.get("/search/{type_signature:path}", response_model=List[CompleteFunction])
async def search(
    type_signature: str,
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of functions"),
    offset: Optional[int] = Query(None, ge=0, description="Index of the first function"),
    cache: SignatureCache = Depends(get_cache),
    db: FunctionDatabase = Depends(get_database)
) -> List[CompleteFunction]:
    """Functions whose normalized signature is exactly ``type_signature``."""
    ids = cache.search(type_signature, _page_size(limit, get_settings().search_page_size), offset)
    if not ids:
        return []

    try:
        return await db.get_functions(ids)
    except Exception as e:
        logger.error(f"Error fetching functions for {type_signature!r}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching functions: {str(e)}"
        )


@router.get("/suggest/{type_signature:path}", response_model=List[str])
async def suggest(
    type_signature: str,
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of suggestions"),
    cache: SignatureCache = Depends(get_cache)
) -> List[str]:
    """Stored signatures that start with ``type_signature``."""
    suggestions = cache.suggest(type_signature, _page_size(limit, get_settings().suggest_limit))
    return suggestions or []


@router.post("/update_functions", response_model=UpdateFunctionsResponse)
async def update_functions(
    cache: SignatureCache = Depends(get_cache),
    db: FunctionDatabase = Depends(get_database)
) -> UpdateFunctionsResponse:
    """Reload all signatures from the database and swap in a fresh index."""
    try:
        pairs = await db.get_all_signatures()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error loading function signatures: {str(e)}"
        )

    index = await asyncio.to_thread(SignatureIndex.build, pairs)
    generation, updated_at = cache.replace(index)

    return UpdateFunctionsResponse(
        success=True,
        signatures=index.signature_count,
        functions=len(index),
        generation=generation,
        updated_at=updated_at
    )
