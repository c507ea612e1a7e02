"""
Identifier hashes for collections and tokens.

A token is identified by (creator, collection, name) and a collection by
(creator, name). Both are stored under a 64-char SHA-256 hex digest of their
"::"-joined rendering so every table keys the same entity the same way.
"""

import hashlib
from dataclasses import dataclass

NAME_LENGTH = 128
HASH_LENGTH = 64
_HEX_DIGITS = frozenset("0123456789abcdef")


def hash_str(value: str) -> str:
    """Lowercase hex SHA-256 of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def truncate_str(value: str, max_chars: int) -> str:
    """Cut to at most max_chars characters (never splits a code point)."""
    return value[:max_chars]


def is_identifier_hash(value: str) -> bool:
    return len(value) == HASH_LENGTH and all(c in _HEX_DIGITS for c in value)


@dataclass(frozen=True)
class CollectionDataId:
    creator: str
    name: str

    def __str__(self) -> str:
        return f"{self.creator}::{self.name}"

    def to_hash(self) -> str:
        return hash_str(str(self))

    @property
    def name_trunc(self) -> str:
        return truncate_str(self.name, NAME_LENGTH)


@dataclass(frozen=True)
class TokenDataId:
    creator: str
    collection: str
    name: str

    def __str__(self) -> str:
        return f"{self.creator}::{self.collection}::{self.name}"

    def to_hash(self) -> str:
        return hash_str(str(self))

    @property
    def collection_data_id(self) -> CollectionDataId:
        return CollectionDataId(self.creator, self.collection)

    @property
    def collection_data_id_hash(self) -> str:
        return self.collection_data_id.to_hash()

    @property
    def collection_trunc(self) -> str:
        return truncate_str(self.collection, NAME_LENGTH)

    @property
    def name_trunc(self) -> str:
        return truncate_str(self.name, NAME_LENGTH)
