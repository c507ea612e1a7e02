"""
Collection and token volume endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.core.database import get_session
from tokenmarket.schemas.volume import (
    CollectionVolumeOut,
    TokenVolumeOut,
    TopCollectionsResponse,
    VolumeHistoryResponse,
    VolumePoint,
)
from tokenmarket.services.cache import CacheService
from tokenmarket.services.market_queries import market_queries

router = APIRouter(prefix="/volumes", tags=["volumes"])


@router.get("/collections", response_model=TopCollectionsResponse)
async def top_collections(
    limit: int = Query(20, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
):
    """Collections ranked by running volume. Cached until the next batch commit."""
    cached = await CacheService.get_cached("top_collections", limit=limit)
    if cached is not None:
        return cached

    rows = await market_queries.top_collections(session, limit=limit)
    response = TopCollectionsResponse(
        collections=[CollectionVolumeOut.model_validate(r) for r in rows],
        total=len(rows),
    )
    await CacheService.set_cached(
        "top_collections", response.model_dump(), limit=limit
    )
    return response


@router.get("/collections/{collection_data_id_hash}", response_model=CollectionVolumeOut)
async def get_collection_volume(
    collection_data_id_hash: str,
    session: AsyncSession = Depends(get_session),
):
    row = await market_queries.get_collection_volume(session, collection_data_id_hash)
    if row is None:
        raise HTTPException(status_code=404, detail="Collection volume not found")
    return row


@router.get(
    "/collections/{collection_data_id_hash}/history",
    response_model=VolumeHistoryResponse,
)
async def get_collection_history(
    collection_data_id_hash: str,
    since: Optional[int] = Query(None, ge=0, description="Lowest transaction version"),
    limit: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_session),
):
    rows = await market_queries.collection_volume_history(
        session, collection_data_id_hash, since=since, limit=limit
    )
    return VolumeHistoryResponse(
        data_id_hash=collection_data_id_hash,
        points=[VolumePoint.model_validate(r) for r in rows],
    )


@router.get("/tokens/{token_data_id_hash}", response_model=TokenVolumeOut)
async def get_token_volume(
    token_data_id_hash: str,
    session: AsyncSession = Depends(get_session),
):
    row = await market_queries.get_token_volume(session, token_data_id_hash)
    if row is None:
        raise HTTPException(status_code=404, detail="Token volume not found")
    return row


@router.get("/tokens/{token_data_id_hash}/history", response_model=VolumeHistoryResponse)
async def get_token_history(
    token_data_id_hash: str,
    since: Optional[int] = Query(None, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_session),
):
    rows = await market_queries.token_volume_history(
        session, token_data_id_hash, since=since, limit=limit
    )
    return VolumeHistoryResponse(
        data_id_hash=token_data_id_hash,
        points=[VolumePoint.model_validate(r) for r in rows],
    )
