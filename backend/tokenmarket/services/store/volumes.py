"""
Volume store — appends buy/sell events to the history tables and folds them
into the running per-collection and per-token totals.

How totals stay exact across replays:
  Each event is first appended to collection_volumes / token_volumes with
  ON CONFLICT DO NOTHING. Only the rows that were actually inserted (read
  back through RETURNING) are summed into the current_* tables, so a version
  range that is written twice adds nothing the second time, while a late
  backfill of older versions is still counted.

The watermark (last_transaction_version, inserted_at) on a current row only
ever moves forward.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional

from sqlalchemy import case
from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.models.volume import (
    CollectionVolume,
    CurrentCollectionVolume,
    CurrentTokenVolume,
    TokenVolume,
)
from tokenmarket.schemas.records import VolumeEvent
from tokenmarket.services.store.common import dialect_insert, get_chunks

logger = logging.getLogger(__name__)

RowCleaner = Callable[[list[dict[str, Any]]], list[dict[str, Any]]]


@dataclass
class VolumeWriteResult:
    """Counts from one record_volume_events call."""

    collection_events: int = 0    # new collection history rows
    token_events: int = 0         # new token history rows
    collections_touched: int = 0
    tokens_touched: int = 0
    events_seen: int = 0          # events passed in, before dedupe

    @property
    def nothing_new(self) -> bool:
        """No history row was inserted, whether the input was empty or all replays."""
        return self.collection_events == 0 and self.token_events == 0


def _history_rows(events: list[VolumeEvent], key: str) -> list[dict]:
    """One row per distinct (hash, version, event_index), sorted by primary key."""
    rows: dict[tuple, dict] = {}
    for event in events:
        data_id_hash = getattr(event, key)
        pk = (data_id_hash, event.last_transaction_version, event.event_index)
        if pk in rows:
            continue
        rows[pk] = {
            key: data_id_hash,
            "last_transaction_version": event.last_transaction_version,
            "event_index": event.event_index,
            "volume": event.volume,
            "inserted_at": event.inserted_at,
        }
    return [rows[pk] for pk in sorted(rows)]


def fold_volumes(rows: list[dict], key: str) -> list[dict]:
    """
    Collapse history rows into one current row per hash.

    volume is the sum of the rows; the watermark comes from the row with the
    highest version. Output is sorted by hash so concurrent writers lock
    rows in the same order.
    """
    totals: dict[str, dict] = {}
    for row in rows:
        data_id_hash = row[key]
        current = totals.get(data_id_hash)
        if current is None:
            totals[data_id_hash] = {
                key: data_id_hash,
                "volume": Decimal(row["volume"]),
                "inserted_at": row["inserted_at"],
                "last_transaction_version": row["last_transaction_version"],
            }
            continue
        current["volume"] += row["volume"]
        if row["last_transaction_version"] >= current["last_transaction_version"]:
            current["last_transaction_version"] = row["last_transaction_version"]
            current["inserted_at"] = row["inserted_at"]
    return [totals[h] for h in sorted(totals)]


class VolumeStore:
    """Writes volume history and keeps the running totals in step with it."""

    async def record_volume_events(
        self,
        session: AsyncSession,
        events: list[VolumeEvent],
        clean: Optional[RowCleaner] = None,
    ) -> VolumeWriteResult:
        """
        Record events against both their collection and their token.

        Does not commit; the caller owns the transaction. clean, when given,
        is applied to every row list before it is sent.
        """
        result = VolumeWriteResult(events_seen=len(events))
        if not events:
            return result

        collection_rows = await self._append_history(
            session,
            CollectionVolume,
            "collection_data_id_hash",
            _history_rows(events, "collection_data_id_hash"),
            clean,
        )
        token_rows = await self._append_history(
            session,
            TokenVolume,
            "token_data_id_hash",
            _history_rows(events, "token_data_id_hash"),
            clean,
        )

        collection_totals = fold_volumes(collection_rows, "collection_data_id_hash")
        token_totals = fold_volumes(token_rows, "token_data_id_hash")

        await self._add_to_current(
            session, CurrentCollectionVolume, "collection_data_id_hash",
            collection_totals, clean,
        )
        await self._add_to_current(
            session, CurrentTokenVolume, "token_data_id_hash",
            token_totals, clean,
        )

        result.collection_events = len(collection_rows)
        result.token_events = len(token_rows)
        result.collections_touched = len(collection_totals)
        result.tokens_touched = len(token_totals)

        skipped = len(events) - result.collection_events
        if skipped:
            logger.debug(
                "VolumeStore: %d of %d events already recorded", skipped, len(events)
            )
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def _append_history(
        self,
        session: AsyncSession,
        model,
        key: str,
        rows: list[dict],
        clean: Optional[RowCleaner],
    ) -> list[dict]:
        """Insert history rows, returning only those that were new."""
        if clean is not None:
            rows = clean(rows)

        by_pk = {
            (row[key], row["last_transaction_version"], row["event_index"]): row
            for row in rows
        }
        inserted: list[dict] = []
        pk_columns = (
            getattr(model, key),
            model.last_transaction_version,
            model.event_index,
        )

        for start, end in get_chunks(len(rows), len(model.__table__.columns)):
            stmt = dialect_insert(session, model).values(rows[start:end])
            stmt = stmt.on_conflict_do_nothing(
                index_elements=[key, "last_transaction_version", "event_index"]
            ).returning(*pk_columns)
            returned = await session.execute(stmt)
            for pk in returned:
                inserted.append(by_pk[tuple(pk)])

        return inserted

    # ------------------------------------------------------------------
    # Running totals
    # ------------------------------------------------------------------

    async def _add_to_current(
        self,
        session: AsyncSession,
        model,
        key: str,
        totals: list[dict],
        clean: Optional[RowCleaner],
    ) -> None:
        if not totals:
            return
        if clean is not None:
            totals = clean(totals)

        for start, end in get_chunks(len(totals), len(model.__table__.columns)):
            stmt = dialect_insert(session, model).values(totals[start:end])
            newer = stmt.excluded.last_transaction_version > model.last_transaction_version
            stmt = stmt.on_conflict_do_update(
                index_elements=[key],
                set_={
                    "volume": model.volume + stmt.excluded.volume,
                    "last_transaction_version": case(
                        (newer, stmt.excluded.last_transaction_version),
                        else_=model.last_transaction_version,
                    ),
                    "inserted_at": case(
                        (newer, stmt.excluded.inserted_at),
                        else_=model.inserted_at,
                    ),
                },
            )
            await session.execute(stmt)


volume_store = VolumeStore()
