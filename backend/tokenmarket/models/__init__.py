from tokenmarket.models.base import Base
from tokenmarket.models.listing import CurrentMarketplaceListing
from tokenmarket.models.volume import (
    CollectionVolume,
    CurrentCollectionVolume,
    CurrentTokenVolume,
    TokenVolume,
)

__all__ = [
    "Base",
    "CurrentCollectionVolume",
    "CollectionVolume",
    "CurrentTokenVolume",
    "TokenVolume",
    "CurrentMarketplaceListing",
]
