"""Shared fixtures: an in-memory SQLite schema and factories for records."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tokenmarket.models import Base
from tokenmarket.schemas.records import ListingRecord, VolumeEvent
from tokenmarket.services.normalization import TokenDataId

MONKEY_1 = TokenDataId("0xcafe", "Aptos Monkeys", "Monkey #1")
MONKEY_2 = TokenDataId("0xcafe", "Aptos Monkeys", "Monkey #2")
TOAD_1 = TokenDataId("0xbeef", "Toads", "Toad #1")

SELLER = "0x" + "a" * 64
MARKET = "0x" + "b" * 64


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def no_redis():
    """Keep every test off Redis; the cache degrades to a miss."""
    with patch(
        "tokenmarket.services.cache.CacheService.invalidate", new=AsyncMock()
    ) as invalidate, patch(
        "tokenmarket.services.cache.CacheService.get_cached",
        new=AsyncMock(return_value=None),
    ), patch(
        "tokenmarket.services.cache.CacheService.set_cached", new=AsyncMock()
    ), patch(
        "tokenmarket.services.cache.CacheService.health_check",
        new=AsyncMock(return_value=False),
    ):
        yield invalidate


def volume_event(
    token: TokenDataId,
    volume: str,
    version: int,
    event_index: int = 0,
    inserted_at: datetime = datetime(2022, 11, 1, 12, 0, 0),
) -> VolumeEvent:
    return VolumeEvent.for_token(
        token,
        Decimal(volume),
        last_transaction_version=version,
        event_index=event_index,
        inserted_at=inserted_at,
    )


def listing(
    token: TokenDataId,
    version: int,
    price: str = "10",
    market_address: str = MARKET,
    seller: str = SELLER,
    event_type: str = "0x3::token_listing::ListTokenEvent",
    inserted_at: datetime = datetime(2022, 11, 1, 12, 0, 0),
) -> ListingRecord:
    return ListingRecord.for_token(
        token,
        market_address=market_address,
        seller=seller,
        amount=Decimal(1),
        price=Decimal(price),
        event_type=event_type,
        inserted_at=inserted_at,
        last_transaction_version=version,
    )
