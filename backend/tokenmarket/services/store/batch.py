"""
Batch writer — commits everything observed for one version range in a
single transaction.

Write path:
  1. Volume history + running totals, then listings, then COMMIT.
  2. Transient failures (dropped connection, timeout) are retried with
     exponential backoff.
  3. If the write still fails, it is attempted once more with NUL
     characters stripped from every text value.
  4. If that fails too, BatchCommitError is raised for the range.

Read caches are invalidated after every successful commit.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tokenmarket.core.config import settings
from tokenmarket.schemas.records import MarketStateBatch
from tokenmarket.services.cache import CacheService
from tokenmarket.services.retry import TRANSIENT_ERRORS, retry_async
from tokenmarket.services.store.common import clean_data_for_db
from tokenmarket.services.store.errors import BatchCommitError, InvalidRecordError
from tokenmarket.services.store.listings import listing_store
from tokenmarket.services.store.volumes import VolumeWriteResult, volume_store

logger = logging.getLogger(__name__)

WRITE_ERRORS: tuple = (SQLAlchemyError,) + TRANSIENT_ERRORS


@dataclass
class BatchWriteResult:
    start_version: int
    end_version: int
    volumes: VolumeWriteResult = field(default_factory=VolumeWriteResult)
    listings: int = 0
    cleaned: bool = False  # True if the NUL-stripped retry was needed


def parse_batch(
    data: Any, model: type[MarketStateBatch] = MarketStateBatch
) -> MarketStateBatch:
    """
    Validate raw writer input into a batch.

    model may be a MarketStateBatch subclass such as BatchFile. Validation
    failures surface as InvalidRecordError rather than pydantic's
    ValidationError.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidRecordError(f"{e.error_count()} invalid field(s)\n{e}") from e


class BatchWriter:
    """Writes MarketStateBatch objects, one transaction per version range."""

    async def write_batch(
        self,
        session: AsyncSession,
        batch: MarketStateBatch,
        start_version: int,
        end_version: int,
    ) -> BatchWriteResult:
        """
        Persist batch atomically.

        Raises BatchCommitError if neither the plain nor the cleaned write
        could be committed. Nothing from the batch is visible in that case.
        """
        logger.debug(
            "Writing versions [%d, %d]: %d volume events, %d listings",
            start_version,
            end_version,
            len(batch.volume_events),
            len(batch.listings),
        )

        try:
            result = await self._write_with_retry(
                session, batch, start_version, end_version, cleaned=False
            )
        except WRITE_ERRORS as first_error:
            logger.warning(
                "Write of versions [%d, %d] failed (%s), retrying with cleaned data",
                start_version,
                end_version,
                first_error,
            )
            try:
                result = await self._write_with_retry(
                    session, batch, start_version, end_version, cleaned=True
                )
            except WRITE_ERRORS as exc:
                logger.error(
                    "Write of versions [%d, %d] failed after cleaning: %s",
                    start_version,
                    end_version,
                    exc,
                )
                raise BatchCommitError(start_version, end_version, exc) from exc

        await CacheService.invalidate()

        logger.info(
            "Committed versions [%d, %d]: %d collection events, %d token events, %d listings",
            start_version,
            end_version,
            result.volumes.collection_events,
            result.volumes.token_events,
            result.listings,
        )
        return result

    async def _write_with_retry(
        self,
        session: AsyncSession,
        batch: MarketStateBatch,
        start_version: int,
        end_version: int,
        cleaned: bool,
    ) -> BatchWriteResult:
        return await retry_async(
            self._write_once,
            session,
            batch,
            start_version,
            end_version,
            cleaned,
            max_retries=settings.WRITE_MAX_RETRIES,
            base_delay=settings.WRITE_RETRY_BASE_DELAY,
        )

    async def _write_once(
        self,
        session: AsyncSession,
        batch: MarketStateBatch,
        start_version: int,
        end_version: int,
        cleaned: bool,
    ) -> BatchWriteResult:
        clean = clean_data_for_db if cleaned else None
        try:
            volumes = await volume_store.record_volume_events(
                session, batch.volume_events, clean
            )
            listings = await listing_store.upsert_listings(
                session, batch.listings, clean
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        return BatchWriteResult(
            start_version=start_version,
            end_version=end_version,
            volumes=volumes,
            listings=listings,
            cleaned=cleaned,
        )


batch_writer = BatchWriter()


async def write_batch(
    session: AsyncSession,
    batch: MarketStateBatch,
    start_version: int,
    end_version: int,
) -> BatchWriteResult:
    """Module-level shortcut for batch_writer.write_batch."""
    return await batch_writer.write_batch(
        session, batch, start_version, end_version
    )
