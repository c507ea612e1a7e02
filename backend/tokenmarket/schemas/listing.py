from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ListingOut(BaseModel):
    """Current marketplace listing for one token."""

    token_data_id_hash: str
    collection_data_id_hash: str
    market_address: str
    property_version: Decimal
    creator_address: str
    collection_name: str
    name: str
    seller: str
    amount: Decimal
    price: Decimal
    event_type: str
    inserted_at: datetime
    last_transaction_version: int
    is_open: bool

    model_config = {"from_attributes": True}


class ListingListResponse(BaseModel):
    listings: list[ListingOut]
    total: int
