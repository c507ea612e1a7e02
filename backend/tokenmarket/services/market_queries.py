"""
Read-side lookups over the volume and listing tables.

Every query here is a keyed lookup or a short ordered scan over one of the
declared indexes. Nothing joins across tables.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.models.listing import CurrentMarketplaceListing
from tokenmarket.models.volume import (
    CollectionVolume,
    CurrentCollectionVolume,
    CurrentTokenVolume,
    TokenVolume,
)

DEFAULT_HISTORY_LIMIT = 100
DEFAULT_TOP_LIMIT = 20
DEFAULT_LISTING_LIMIT = 100


class MarketQueryService:
    """Volume and listing lookups used by the API."""

    # ------------------------------------------------------------------
    # Volumes
    # ------------------------------------------------------------------

    async def get_collection_volume(
        self, session: AsyncSession, collection_data_id_hash: str
    ) -> Optional[CurrentCollectionVolume]:
        return await session.get(CurrentCollectionVolume, collection_data_id_hash)

    async def get_token_volume(
        self, session: AsyncSession, token_data_id_hash: str
    ) -> Optional[CurrentTokenVolume]:
        return await session.get(CurrentTokenVolume, token_data_id_hash)

    async def collection_volume_history(
        self,
        session: AsyncSession,
        collection_data_id_hash: str,
        since: Optional[int] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[CollectionVolume]:
        """
        Per-event volume rows for a collection, newest version first.

        since, when given, is an inclusive lower bound on last_transaction_version.
        """
        query = select(CollectionVolume).where(
            CollectionVolume.collection_data_id_hash == collection_data_id_hash
        )
        if since is not None:
            query = query.where(CollectionVolume.last_transaction_version >= since)
        query = query.order_by(
            CollectionVolume.last_transaction_version.desc(),
            CollectionVolume.event_index.desc(),
        ).limit(limit)
        result = await session.execute(query)
        return list(result.scalars())

    async def token_volume_history(
        self,
        session: AsyncSession,
        token_data_id_hash: str,
        since: Optional[int] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[TokenVolume]:
        query = select(TokenVolume).where(
            TokenVolume.token_data_id_hash == token_data_id_hash
        )
        if since is not None:
            query = query.where(TokenVolume.last_transaction_version >= since)
        query = query.order_by(
            TokenVolume.last_transaction_version.desc(),
            TokenVolume.event_index.desc(),
        ).limit(limit)
        result = await session.execute(query)
        return list(result.scalars())

    async def top_collections(
        self, session: AsyncSession, limit: int = DEFAULT_TOP_LIMIT
    ) -> list[CurrentCollectionVolume]:
        """Collections ranked by running volume."""
        result = await session.execute(
            select(CurrentCollectionVolume)
            .order_by(
                CurrentCollectionVolume.volume.desc(),
                CurrentCollectionVolume.collection_data_id_hash,
            )
            .limit(limit)
        )
        return list(result.scalars())

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_listing(
        self, session: AsyncSession, token_data_id_hash: str
    ) -> Optional[CurrentMarketplaceListing]:
        return await session.get(CurrentMarketplaceListing, token_data_id_hash)

    async def listings_for_collection(
        self,
        session: AsyncSession,
        collection_data_id_hash: str,
        open_only: bool = True,
        limit: int = DEFAULT_LISTING_LIMIT,
    ) -> list[CurrentMarketplaceListing]:
        query = select(CurrentMarketplaceListing).where(
            CurrentMarketplaceListing.collection_data_id_hash == collection_data_id_hash
        )
        return await self._listings(session, query, open_only, limit)

    async def listings_by_seller(
        self,
        session: AsyncSession,
        seller: str,
        open_only: bool = True,
        limit: int = DEFAULT_LISTING_LIMIT,
    ) -> list[CurrentMarketplaceListing]:
        query = select(CurrentMarketplaceListing).where(
            CurrentMarketplaceListing.seller == seller
        )
        return await self._listings(session, query, open_only, limit)

    async def recent_listings(
        self,
        session: AsyncSession,
        since: datetime,
        limit: int = DEFAULT_LISTING_LIMIT,
    ) -> list[CurrentMarketplaceListing]:
        """Listings whose row was written at or after since, newest first."""
        result = await session.execute(
            select(CurrentMarketplaceListing)
            .where(CurrentMarketplaceListing.inserted_at >= since)
            .order_by(CurrentMarketplaceListing.inserted_at.desc())
            .limit(limit)
        )
        return list(result.scalars())

    async def _listings(self, session, query, open_only: bool, limit: int):
        if open_only:
            query = query.where(CurrentMarketplaceListing.market_address != "")
        query = query.order_by(
            CurrentMarketplaceListing.last_transaction_version.desc(),
            CurrentMarketplaceListing.token_data_id_hash,
        ).limit(limit)
        result = await session.execute(query)
        return list(result.scalars())


market_queries = MarketQueryService()
