"""
Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- keccak256 / sha256 known values
- hash_pair width checks
- hash_canonical stability for dict key ordering differences
- to_hex/from_hex and fixed-width parsing
"""
import hashlib

import pytest

from core.crypto.hashing import (
    hash_canonical,
    hash_pair,
    int_to_word,
    keccak256,
    parse_fixed,
    sha256,
    short_hex,
    to_hex,
    from_hex,
    word_to_int,
)


class TestKeccak256:
    """Tests for keccak256()."""

    def test_keccak_empty_known_value(self):
        """keccak256 of empty input is the well-known Ethereum constant."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak_differs_from_sha3(self):
        """keccak-256 is the pre-standard padding, not FIPS SHA3-256."""
        assert keccak256(b"abc") != hashlib.sha3_256(b"abc").digest()

    def test_keccak_length(self):
        assert len(keccak256(b"anything")) == 32


class TestSha256:
    """Tests for sha256() function."""

    def test_sha256_known_value(self):
        expected = hashlib.sha256(b"hello").digest()
        assert sha256(b"hello") == expected

    def test_sha256_differs_from_keccak(self):
        assert sha256(b"hello") != keccak256(b"hello")


class TestHashPair:
    """Tests for hash_pair()."""

    def test_hash_pair_is_keccak_of_concat(self):
        left = b"\x01" * 32
        right = b"\x02" * 32
        assert hash_pair(left, right) == keccak256(left + right)

    def test_hash_pair_order_matters(self):
        left = b"\x01" * 32
        right = b"\x02" * 32
        assert hash_pair(left, right) != hash_pair(right, left)

    def test_hash_pair_rejects_short_child(self):
        with pytest.raises(ValueError, match="32 bytes"):
            hash_pair(b"\x01" * 31, b"\x02" * 32)


class TestHashCanonical:
    """Tests for hash_canonical()."""

    def test_key_order_irrelevant(self):
        assert hash_canonical({"a": 1, "b": 2}) == hash_canonical({"b": 2, "a": 1})

    def test_value_change_changes_hash(self):
        assert hash_canonical({"a": 1}) != hash_canonical({"a": 2})


class TestHexHelpers:
    """Tests for hex conversion and fixed-width parsing."""

    def test_to_hex_from_hex(self):
        data = bytes.fromhex("deadbeef")
        assert to_hex(data) == "0xdeadbeef"
        assert from_hex("0xdeadbeef") == data

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")

    def test_parse_fixed_accepts_bytes_and_hex(self):
        raw = b"\xab" * 20
        assert parse_fixed(raw, 20) == raw
        assert parse_fixed(to_hex(raw), 20) == raw

    def test_parse_fixed_wrong_length(self):
        with pytest.raises(ValueError, match="must be 32 bytes"):
            parse_fixed(b"\x00" * 31, 32, "leaf")

    def test_parse_fixed_wrong_type(self):
        with pytest.raises(ValueError, match="bytes or 0x-hex"):
            parse_fixed(123, 32)

    def test_word_roundtrip_for_large_int(self):
        value = 2**255 + 7
        assert word_to_int(int_to_word(value)) == value
        assert len(int_to_word(value)) == 32

    def test_short_hex(self):
        assert short_hex(b"\x01" * 32) == "0x01010101...0101"
        assert short_hex(b"\x01\x02") == "0x0102"
