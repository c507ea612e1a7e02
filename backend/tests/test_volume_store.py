from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from tokenmarket.models import (
    CollectionVolume,
    CurrentCollectionVolume,
    CurrentTokenVolume,
    TokenVolume,
)
from tokenmarket.services.store import volume_store
from tokenmarket.services.store.volumes import fold_volumes

from conftest import MONKEY_1, MONKEY_2, TOAD_1, volume_event


async def _current(session, model, key):
    return await session.get(model, key, populate_existing=True)


async def _count(session, model):
    return await session.scalar(select(func.count()).select_from(model))


@pytest.mark.asyncio
async def test_events_create_history_and_current_rows(session):
    events = [
        volume_event(MONKEY_1, "10", 100),
        volume_event(MONKEY_2, "5", 101),
        volume_event(TOAD_1, "1.5", 102),
    ]
    result = await volume_store.record_volume_events(session, events)
    await session.commit()

    assert result.collection_events == 3
    assert result.token_events == 3
    assert result.collections_touched == 2
    assert result.tokens_touched == 3

    monkeys = await _current(
        session, CurrentCollectionVolume, MONKEY_1.collection_data_id_hash
    )
    assert monkeys.volume == Decimal("15")
    assert monkeys.last_transaction_version == 101

    toad = await _current(session, CurrentTokenVolume, TOAD_1.to_hash())
    assert toad.volume == Decimal("1.5")
    assert await _count(session, CollectionVolume) == 3
    assert await _count(session, TokenVolume) == 3


@pytest.mark.asyncio
async def test_volume_accumulates_across_batches(session):
    await volume_store.record_volume_events(session, [volume_event(MONKEY_1, "10", 100)])
    await session.commit()
    later = datetime(2022, 11, 2)
    await volume_store.record_volume_events(
        session, [volume_event(MONKEY_1, "2.5", 200, inserted_at=later)]
    )
    await session.commit()

    token = await _current(session, CurrentTokenVolume, MONKEY_1.to_hash())
    assert token.volume == Decimal("12.5")
    assert token.last_transaction_version == 200
    assert token.inserted_at == later


@pytest.mark.asyncio
async def test_replayed_batch_does_not_double_count(session):
    events = [volume_event(MONKEY_1, "10", 100), volume_event(MONKEY_1, "4", 100, 1)]
    await volume_store.record_volume_events(session, events)
    await session.commit()

    replay = await volume_store.record_volume_events(session, events)
    await session.commit()

    assert replay.nothing_new
    assert replay.events_seen == 2
    assert replay.collections_touched == 0
    collection = await _current(
        session, CurrentCollectionVolume, MONKEY_1.collection_data_id_hash
    )
    assert collection.volume == Decimal("14")
    assert await _count(session, CollectionVolume) == 2


@pytest.mark.asyncio
async def test_overlapping_range_only_counts_new_events(session):
    await volume_store.record_volume_events(
        session, [volume_event(MONKEY_1, "10", 100), volume_event(MONKEY_1, "1", 110)]
    )
    await session.commit()
    # 110 already recorded, 120 is new
    await volume_store.record_volume_events(
        session, [volume_event(MONKEY_1, "1", 110), volume_event(MONKEY_1, "3", 120)]
    )
    await session.commit()

    token = await _current(session, CurrentTokenVolume, MONKEY_1.to_hash())
    assert token.volume == Decimal("14")
    assert token.last_transaction_version == 120


@pytest.mark.asyncio
async def test_backfilled_event_counts_without_moving_watermark_back(session):
    newest = datetime(2022, 11, 5)
    await volume_store.record_volume_events(
        session, [volume_event(MONKEY_1, "10", 500, inserted_at=newest)]
    )
    await session.commit()
    await volume_store.record_volume_events(
        session, [volume_event(MONKEY_1, "2", 50, inserted_at=datetime(2022, 10, 1))]
    )
    await session.commit()

    token = await _current(session, CurrentTokenVolume, MONKEY_1.to_hash())
    assert token.volume == Decimal("12")
    assert token.last_transaction_version == 500
    assert token.inserted_at == newest


@pytest.mark.asyncio
async def test_duplicate_events_within_batch_are_counted_once(session):
    event = volume_event(MONKEY_1, "7", 100)
    result = await volume_store.record_volume_events(session, [event, event])
    await session.commit()

    assert result.token_events == 1
    token = await _current(session, CurrentTokenVolume, MONKEY_1.to_hash())
    assert token.volume == Decimal("7")


@pytest.mark.asyncio
async def test_empty_events_is_a_noop(session):
    result = await volume_store.record_volume_events(session, [])
    assert result.nothing_new
    assert result.events_seen == 0
    assert await _count(session, CurrentCollectionVolume) == 0


def test_fold_volumes_keeps_latest_watermark():
    early, late = datetime(2022, 1, 1), datetime(2022, 1, 2)
    rows = [
        {"token_data_id_hash": "b", "volume": Decimal(1), "inserted_at": late,
         "last_transaction_version": 9},
        {"token_data_id_hash": "a", "volume": Decimal(2), "inserted_at": early,
         "last_transaction_version": 3},
        {"token_data_id_hash": "b", "volume": Decimal(4), "inserted_at": early,
         "last_transaction_version": 2},
    ]
    folded = fold_volumes(rows, "token_data_id_hash")

    assert [r["token_data_id_hash"] for r in folded] == ["a", "b"]
    assert folded[1]["volume"] == Decimal(5)
    assert folded[1]["last_transaction_version"] == 9
    assert folded[1]["inserted_at"] == late
