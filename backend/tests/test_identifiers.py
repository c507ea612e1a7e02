import hashlib

from tokenmarket.services.normalization import (
    NAME_LENGTH,
    CollectionDataId,
    TokenDataId,
    hash_str,
    is_identifier_hash,
    truncate_str,
)


def test_token_hash_is_sha256_of_joined_id():
    token = TokenDataId("0x1", "Aptos Monkeys", "Monkey #1")
    assert str(token) == "0x1::Aptos Monkeys::Monkey #1"
    assert token.to_hash() == hashlib.sha256(b"0x1::Aptos Monkeys::Monkey #1").hexdigest()


def test_collection_hash_matches_token_collection():
    token = TokenDataId("0x1", "Aptos Monkeys", "Monkey #1")
    collection = CollectionDataId("0x1", "Aptos Monkeys")
    assert token.collection_data_id == collection
    assert token.collection_data_id_hash == collection.to_hash()
    assert collection.to_hash() == hash_str("0x1::Aptos Monkeys")


def test_hashes_differ_per_token():
    a = TokenDataId("0x1", "c", "a")
    b = TokenDataId("0x1", "c", "b")
    assert a.to_hash() != b.to_hash()
    assert a.collection_data_id_hash == b.collection_data_id_hash


def test_truncation_keeps_unicode_whole():
    name = "ü" * (NAME_LENGTH + 10)
    token = TokenDataId("0x1", name, name)
    assert token.name_trunc == "ü" * NAME_LENGTH
    assert token.collection_trunc == "ü" * NAME_LENGTH
    assert truncate_str("short", NAME_LENGTH) == "short"


def test_hash_is_computed_on_full_name():
    long_name = "x" * 300
    token = TokenDataId("0x1", "c", long_name)
    assert token.to_hash() == hash_str(f"0x1::c::{long_name}")


def test_is_identifier_hash():
    assert is_identifier_hash(hash_str("anything"))
    assert not is_identifier_hash("abc")
    assert not is_identifier_hash(hash_str("anything").upper())
    assert not is_identifier_hash("-" + "a" * 63)
    assert not is_identifier_hash("g" * 64)
