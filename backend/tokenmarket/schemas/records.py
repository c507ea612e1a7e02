"""
Writer-facing record schemas.

These are what an external ingestion process hands to the store. They are
validated on construction so nothing malformed reaches the upserts.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from tokenmarket.models.base import utcnow
from tokenmarket.services.normalization import (
    NAME_LENGTH,
    TokenDataId,
    is_identifier_hash,
    truncate_str,
)


def _check_hash(value: str) -> str:
    if not is_identifier_hash(value):
        raise ValueError("expected a 64-char lowercase hex sha256 digest")
    return value


IdentifierHash = Annotated[str, AfterValidator(_check_hash)]


class VolumeEvent(BaseModel):
    """One buy/sell observation, counted against both its collection and its token."""

    collection_data_id_hash: IdentifierHash
    token_data_id_hash: IdentifierHash
    volume: Decimal = Field(ge=0)
    inserted_at: datetime = Field(default_factory=utcnow)
    last_transaction_version: int = Field(ge=0)
    event_index: int = Field(default=0, ge=0)

    @classmethod
    def for_token(
        cls,
        token: TokenDataId,
        volume: Decimal,
        last_transaction_version: int,
        event_index: int = 0,
        inserted_at: Optional[datetime] = None,
    ) -> "VolumeEvent":
        return cls(
            collection_data_id_hash=token.collection_data_id_hash,
            token_data_id_hash=token.to_hash(),
            volume=volume,
            last_transaction_version=last_transaction_version,
            event_index=event_index,
            inserted_at=inserted_at or utcnow(),
        )


class ListingRecord(BaseModel):
    """Latest observed listing state for one token."""

    token_data_id_hash: IdentifierHash
    collection_data_id_hash: IdentifierHash
    market_address: str = Field(default="", max_length=66)  # "" = closed
    property_version: Decimal = Field(default=Decimal(0), ge=0)
    creator_address: str = Field(max_length=66)
    collection_name: str
    name: str
    seller: str = Field(default="", max_length=66)
    amount: Decimal = Field(ge=0)
    price: Decimal = Field(default=Decimal(0), ge=0)
    event_type: str = Field(max_length=150)
    inserted_at: datetime = Field(default_factory=utcnow)
    last_transaction_version: int = Field(ge=0)

    @field_validator("collection_name", "name")
    @classmethod
    def truncate_names(cls, value: str) -> str:
        return truncate_str(value, NAME_LENGTH)

    @property
    def is_open(self) -> bool:
        return bool(self.market_address)

    @classmethod
    def for_token(cls, token: TokenDataId, **fields) -> "ListingRecord":
        """Build a record whose hashes and name columns come from the token id."""
        return cls(
            token_data_id_hash=token.to_hash(),
            collection_data_id_hash=token.collection_data_id_hash,
            creator_address=token.creator,
            collection_name=token.collection,
            name=token.name,
            **fields,
        )


class MarketStateBatch(BaseModel):
    """Everything observed for one contiguous version range."""

    volume_events: list[VolumeEvent] = Field(default_factory=list)
    listings: list[ListingRecord] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.volume_events and not self.listings


class BatchFile(MarketStateBatch):
    """On-disk form of a batch: the records plus the version range they cover."""

    start_version: int = Field(ge=0)
    end_version: int = Field(ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "BatchFile":
        if self.end_version < self.start_version:
            raise ValueError("end_version must not be below start_version")
        return self
