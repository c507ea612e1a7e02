from decimal import Decimal

import pytest
from pydantic import ValidationError

from tokenmarket.schemas.records import BatchFile, ListingRecord, MarketStateBatch, VolumeEvent
from tokenmarket.services.normalization import NAME_LENGTH, TokenDataId

from conftest import MONKEY_1, listing, volume_event


def test_volume_event_for_token_fills_both_hashes():
    event = volume_event(MONKEY_1, "12.5", 100, event_index=3)
    assert event.token_data_id_hash == MONKEY_1.to_hash()
    assert event.collection_data_id_hash == MONKEY_1.collection_data_id_hash
    assert event.volume == Decimal("12.5")
    assert event.event_index == 3


@pytest.mark.parametrize(
    "field,value",
    [
        ("collection_data_id_hash", "not-a-hash"),
        ("token_data_id_hash", "A" * 64),
        ("volume", Decimal("-1")),
        ("last_transaction_version", -5),
    ],
)
def test_volume_event_rejects_bad_fields(field, value):
    data = volume_event(MONKEY_1, "1", 1).model_dump()
    data[field] = value
    with pytest.raises(ValidationError):
        VolumeEvent(**data)


def test_listing_names_are_truncated():
    token = TokenDataId("0x1", "c" * 200, "n" * 200)
    record = listing(token, 10)
    assert len(record.collection_name) == NAME_LENGTH
    assert len(record.name) == NAME_LENGTH
    # Hash still covers the full name
    assert record.token_data_id_hash == token.to_hash()


def test_listing_open_closed():
    assert listing(MONKEY_1, 1).is_open
    assert not listing(MONKEY_1, 2, market_address="").is_open


def test_listing_rejects_long_address():
    with pytest.raises(ValidationError):
        listing(MONKEY_1, 1, seller="0x" + "f" * 80)


def test_listing_rejects_negative_price():
    data = listing(MONKEY_1, 1).model_dump()
    data["price"] = Decimal("-0.1")
    with pytest.raises(ValidationError):
        ListingRecord(**data)


def test_empty_batch():
    assert MarketStateBatch().is_empty()
    assert not MarketStateBatch(listings=[listing(MONKEY_1, 1)]).is_empty()


def test_batch_file_version_range():
    BatchFile(start_version=1, end_version=1)
    with pytest.raises(ValidationError):
        BatchFile(start_version=10, end_version=9)
