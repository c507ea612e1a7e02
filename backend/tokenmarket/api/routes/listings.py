"""
Marketplace listing endpoints.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.core.database import get_session
from tokenmarket.schemas.listing import ListingListResponse, ListingOut
from tokenmarket.services.market_queries import market_queries

router = APIRouter(prefix="/listings", tags=["listings"])


@router.get("", response_model=ListingListResponse)
async def list_listings(
    collection: Optional[str] = Query(None, description="collection_data_id_hash"),
    seller: Optional[str] = Query(None, description="Seller address"),
    include_closed: bool = Query(False),
    limit: int = Query(100, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
):
    """
    Listings for one collection or one seller.

    Exactly one of ?collection= or ?seller= must be given. Closed listings
    (empty market_address) are hidden unless include_closed=true.
    """
    if (collection is None) == (seller is None):
        raise HTTPException(
            status_code=422, detail="Pass exactly one of 'collection' or 'seller'"
        )

    if collection is not None:
        rows = await market_queries.listings_for_collection(
            session, collection, open_only=not include_closed, limit=limit
        )
    else:
        rows = await market_queries.listings_by_seller(
            session, seller, open_only=not include_closed, limit=limit
        )

    return ListingListResponse(
        listings=[ListingOut.model_validate(r) for r in rows],
        total=len(rows),
    )


@router.get("/recent", response_model=ListingListResponse)
async def recent_listings(
    since: datetime = Query(..., description="Only rows written at or after this time"),
    limit: int = Query(100, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
):
    rows = await market_queries.recent_listings(session, since, limit=limit)
    return ListingListResponse(
        listings=[ListingOut.model_validate(r) for r in rows],
        total=len(rows),
    )


@router.get("/{token_data_id_hash}", response_model=ListingOut)
async def get_listing(
    token_data_id_hash: str,
    session: AsyncSession = Depends(get_session),
):
    row = await market_queries.get_listing(session, token_data_id_hash)
    if row is None:
        raise HTTPException(status_code=404, detail="Listing not found")
    return ListingOut.model_validate(row)
