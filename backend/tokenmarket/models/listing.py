from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from tokenmarket.models.base import Base, utcnow


class CurrentMarketplaceListing(Base):
    """
    Latest known marketplace listing per token.

    One row per token_data_id_hash, upserted on every list / delist / buy /
    sell / price-change observation. market_address is empty once the
    listing is closed (bought, delisted, sent or cancelled).
    """

    __tablename__ = "current_marketplace_listings"

    # sha256 of creator + collection_name + name
    token_data_id_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    collection_data_id_hash: Mapped[str] = mapped_column(String(64))
    market_address: Mapped[str] = mapped_column(String(66))
    property_version: Mapped[Decimal] = mapped_column(Numeric)
    creator_address: Mapped[str] = mapped_column(String(66))
    collection_name: Mapped[str] = mapped_column(String(128))
    name: Mapped[str] = mapped_column(String(128))
    seller: Mapped[str] = mapped_column(String(66))
    amount: Mapped[Decimal] = mapped_column(Numeric)
    price: Mapped[Decimal] = mapped_column(Numeric)
    event_type: Mapped[str] = mapped_column(String(150))
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now()
    )
    last_transaction_version: Mapped[int] = mapped_column(BigInteger)

    __table_args__ = (
        Index("cml_tdih_pv_index", "token_data_id_hash", "property_version"),
        Index("cml_cdih_index", "collection_data_id_hash"),
        Index("cml_insat_index", "inserted_at"),
        Index("cml_tv_index", "last_transaction_version"),
        Index("cml_seller_index", "seller"),
    )

    @property
    def is_open(self) -> bool:
        return bool(self.market_address)
