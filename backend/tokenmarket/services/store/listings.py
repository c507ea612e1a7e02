"""
Listing store — keeps one current_marketplace_listings row per token.

A row is replaced wholesale whenever an observation arrives with a
last_transaction_version at or above the stored one; older observations
are ignored.
"""

import logging
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.models.listing import CurrentMarketplaceListing
from tokenmarket.schemas.records import ListingRecord
from tokenmarket.services.store.common import dialect_insert, get_chunks

logger = logging.getLogger(__name__)

RowCleaner = Callable[[list[dict[str, Any]]], list[dict[str, Any]]]

# Every column except the key is overwritten on conflict
_UPDATE_COLUMNS = [
    c.name
    for c in CurrentMarketplaceListing.__table__.columns
    if c.name != "token_data_id_hash"
]


def latest_per_token(listings: list[ListingRecord]) -> list[ListingRecord]:
    """
    Keep the highest-version record per token, sorted by token hash.

    On equal versions the later record in the input wins, the same outcome
    the <= guard gives across batches.
    """
    latest: dict[str, ListingRecord] = {}
    for listing in listings:
        seen = latest.get(listing.token_data_id_hash)
        if seen is None or listing.last_transaction_version >= seen.last_transaction_version:
            latest[listing.token_data_id_hash] = listing
    return [latest[h] for h in sorted(latest)]


class ListingStore:
    """Upserts the latest listing state per token."""

    async def upsert_listings(
        self,
        session: AsyncSession,
        listings: list[ListingRecord],
        clean: Optional[RowCleaner] = None,
    ) -> int:
        """
        Upsert listings. Does not commit.

        Returns the number of distinct tokens sent to the database.
        """
        if not listings:
            return 0

        records = latest_per_token(listings)
        if len(records) < len(listings):
            logger.debug(
                "ListingStore: collapsed %d observations into %d tokens",
                len(listings),
                len(records),
            )

        rows = [record.model_dump() for record in records]
        if clean is not None:
            rows = clean(rows)

        table = CurrentMarketplaceListing
        for start, end in get_chunks(len(rows), len(table.__table__.columns)):
            stmt = dialect_insert(session, table).values(rows[start:end])
            stmt = stmt.on_conflict_do_update(
                index_elements=["token_data_id_hash"],
                set_={name: stmt.excluded[name] for name in _UPDATE_COLUMNS},
                where=table.last_transaction_version <= stmt.excluded.last_transaction_version,
            )
            await session.execute(stmt)

        return len(records)


listing_store = ListingStore()
