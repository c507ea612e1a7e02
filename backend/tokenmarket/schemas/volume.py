"""
Volume response schemas.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CollectionVolumeOut(BaseModel):
    """Current running volume of one collection."""

    collection_data_id_hash: str
    volume: Decimal
    inserted_at: datetime
    last_transaction_version: int

    model_config = {"from_attributes": True}


class TokenVolumeOut(BaseModel):
    """Current running volume of one token."""

    token_data_id_hash: str
    volume: Decimal
    inserted_at: datetime
    last_transaction_version: int

    model_config = {"from_attributes": True}


class VolumePoint(BaseModel):
    """A single buy/sell event in a volume history."""

    volume: Decimal
    inserted_at: datetime
    last_transaction_version: int
    event_index: int

    model_config = {"from_attributes": True}


class VolumeHistoryResponse(BaseModel):
    data_id_hash: str
    points: list[VolumePoint] = Field(default_factory=list)


class TopCollectionsResponse(BaseModel):
    collections: list[CollectionVolumeOut]
    total: int
