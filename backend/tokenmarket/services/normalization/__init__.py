"""
Identifier normalization utilities.
"""

from tokenmarket.services.normalization.identifiers import (
    HASH_LENGTH,
    NAME_LENGTH,
    CollectionDataId,
    TokenDataId,
    hash_str,
    is_identifier_hash,
    truncate_str,
)

__all__ = [
    "HASH_LENGTH",
    "NAME_LENGTH",
    "CollectionDataId",
    "TokenDataId",
    "hash_str",
    "is_identifier_hash",
    "truncate_str",
]
