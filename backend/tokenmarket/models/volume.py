"""
Collection and token volume tables.

Volume is the sum of coin amounts across a collection's (or token's) buy/sell
events. Each entity has a "current" row holding the running total and a
history table with one row per observed event, for price history.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from tokenmarket.models.base import Base, utcnow


class CurrentCollectionVolume(Base):
    """Running volume per collection. One row per collection, overwritten on update."""

    __tablename__ = "current_collection_volumes"

    collection_data_id_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    volume: Mapped[Decimal] = mapped_column(Numeric)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now()
    )
    # Last transaction version of the data in this row
    last_transaction_version: Mapped[int] = mapped_column(BigInteger)

    __table_args__ = (
        Index("ccv_index", "last_transaction_version"),
    )


class CollectionVolume(Base):
    """
    Collection volume at every buy/sell event.

    Keyed by (hash, version, event_index) so a collection keeps one row per
    event instead of a single overwritten row.
    """

    __tablename__ = "collection_volumes"

    collection_data_id_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_transaction_version: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    event_index: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    volume: Mapped[Decimal] = mapped_column(Numeric)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        Index("cv_tv_index", "last_transaction_version"),
        Index("cv_insat_index", "inserted_at"),
    )


class CurrentTokenVolume(Base):
    """Running volume per token. Mirrors CurrentCollectionVolume."""

    __tablename__ = "current_token_volumes"

    token_data_id_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    volume: Mapped[Decimal] = mapped_column(Numeric)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now()
    )
    last_transaction_version: Mapped[int] = mapped_column(BigInteger)

    __table_args__ = (
        Index("ctv_index", "last_transaction_version"),
    )


class TokenVolume(Base):
    """Token volume at every buy/sell event."""

    __tablename__ = "token_volumes"

    token_data_id_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_transaction_version: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    event_index: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    volume: Mapped[Decimal] = mapped_column(Numeric)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        Index("tv_tv_index", "last_transaction_version"),
        Index("tv_insat_index", "inserted_at"),
    )
