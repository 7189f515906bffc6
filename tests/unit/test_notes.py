"""
Deposit Note Unit Tests
Tests for core/crypto/notes.py
"""
import pytest

from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import int_to_word, keccak256, to_hex, word_to_int
from core.crypto.notes import (
    NOTE_PREFIX,
    Note,
    compute_commitment,
    compute_leaf,
    compute_nullifier,
    generate_note,
    generate_secret,
    parse_note,
    serialize_note,
)
from core.crypto.pedersen import PedersenCommitments
from core.schemas.errors import NullifierAlreadySpentException

from fixtures import ALICE, DUMMY_PROOF, make_pool


NOTE = Note(value=1_000, secret=11, blinding=22)


class TestDerivation:
    """Tests for commitment, nullifier and leaf derivation."""

    def test_commitment_is_pedersen(self):
        assert NOTE.commitment() == PedersenCommitments().commit(1_000, 22)
        assert compute_commitment(1_000, 22) == NOTE.commitment()

    def test_nullifier_is_reduced_keccak(self):
        raw = keccak256(int_to_word(11) + int_to_word(3))
        assert compute_nullifier(11, 3) == int_to_word(word_to_int(raw) % CURVE_ORDER)

    def test_nullifier_deterministic(self):
        assert compute_nullifier(11, 3) == compute_nullifier(11, 3)

    def test_nullifier_bound_to_leaf_index(self):
        assert compute_nullifier(11, 3) != compute_nullifier(11, 4)

    def test_nullifier_bound_to_secret(self):
        assert compute_nullifier(11, 3) != compute_nullifier(12, 3)

    @pytest.mark.parametrize("secret,index", [(1, 0), (CURVE_ORDER - 1, 2**20 - 1), (123456789, 77)])
    def test_derived_words_are_canonical(self, secret, index):
        assert word_to_int(compute_nullifier(secret, index)) < CURVE_ORDER
        assert word_to_int(compute_leaf(NOTE.commitment(), secret)) < CURVE_ORDER

    def test_leaf_binds_commitment_and_secret(self):
        commitment = NOTE.commitment()
        assert NOTE.leaf() == compute_leaf(commitment, 11)
        assert compute_leaf(commitment, 12) != compute_leaf(commitment, 11)

    def test_nullifier_needs_leaf_index(self):
        with pytest.raises(ValueError, match="leaf index"):
            NOTE.nullifier()

    def test_at_index(self):
        placed = NOTE.at_index(5)
        assert placed.leaf_index == 5
        assert placed.nullifier() == compute_nullifier(11, 5)
        assert NOTE.leaf_index is None

    @pytest.mark.parametrize("index", [-1, True, "3"])
    def test_bad_leaf_index(self, index):
        with pytest.raises(ValueError):
            compute_nullifier(11, index)


class TestNoteValidation:

    @pytest.mark.parametrize("kwargs", [
        {"value": -1},
        {"value": True},
        {"secret": 0},
        {"secret": CURVE_ORDER},
        {"blinding": CURVE_ORDER + 1},
        {"leaf_index": -2},
    ])
    def test_rejects_bad_fields(self, kwargs):
        fields = {"value": 1, "secret": 2, "blinding": 3}
        fields.update(kwargs)
        with pytest.raises(ValueError):
            Note(**fields)

    def test_zero_value_allowed(self):
        assert Note(value=0, secret=1, blinding=1).value == 0


class TestGeneration:

    def test_secret_in_range(self):
        for _ in range(20):
            assert 1 <= generate_secret() < CURVE_ORDER

    def test_fresh_notes_differ(self):
        first, second = generate_note(10), generate_note(10)
        assert first.secret != second.secret
        assert first.commitment() != second.commitment()
        assert first.leaf_index is None


class TestTextForm:
    """Tests for serialize_note / parse_note."""

    def test_round_trip_without_index(self):
        text = serialize_note(NOTE)
        assert text == f"{NOTE_PREFIX}-1000-{to_hex(int_to_word(11))}-{to_hex(int_to_word(22))}"
        assert parse_note(text) == NOTE

    def test_round_trip_with_index(self):
        note = generate_note(42).at_index(9)
        parsed = parse_note(serialize_note(note))
        assert parsed == note
        assert parsed.nullifier() == note.nullifier()

    def test_surrounding_whitespace_ignored(self):
        assert parse_note("  " + serialize_note(NOTE) + "\n") == NOTE

    @pytest.mark.parametrize("text", [
        "",
        "laundry-note-1000-0x01-0x02",
        f"{NOTE_PREFIX}-1000-{to_hex(int_to_word(11))}",
        f"{NOTE_PREFIX}-abc-{to_hex(int_to_word(11))}-{to_hex(int_to_word(22))}",
        f"{NOTE_PREFIX}-1000-0x11-{to_hex(int_to_word(22))}",
        f"{NOTE_PREFIX}-1000-{to_hex(int_to_word(11))}-{to_hex(int_to_word(22))}-x",
        f"{NOTE_PREFIX}-1000-{to_hex(int_to_word(0))}-{to_hex(int_to_word(22))}",
        f"{NOTE_PREFIX}-1000-{to_hex(int_to_word(11))}-{to_hex(int_to_word(22))}-1-2",
    ])
    def test_malformed(self, text):
        with pytest.raises(ValueError):
            parse_note(text)

    def test_non_string(self):
        with pytest.raises(ValueError):
            parse_note(b"shielded-note-v1")


class TestPoolLifecycle:
    """A note deposited into the pool can be spent exactly once."""

    def test_deposit_then_withdraw(self):
        pool = make_pool()
        note = generate_note(500)
        fact = pool.deposit(note.commitment(), note.value)

        placed = parse_note(serialize_note(note.at_index(fact.leaf_index)))
        pool.withdraw(DUMMY_PROOF, placed.nullifier(), ALICE, note.value)
        assert pool.is_spent(placed.nullifier())
        assert pool.pool_balance() == 0

        with pytest.raises(NullifierAlreadySpentException):
            pool.withdraw(DUMMY_PROOF, placed.nullifier(), ALICE, note.value)
