"""
Shielded Pool Unit Tests
Tests for orchestrator/pool.py

Covers deposit, withdraw, transfer, range checks, fee accounting, admin
controls and the atomic rollback of rejected operations. Verifiers are
StaticVerifier doubles; the pairing engine is exercised in test_groth16.py.
"""
import pytest

from core.config.runtime import RuntimeConfig
from core.crypto.curve import CURVE_ORDER
from core.crypto.hashing import int_to_word, to_hex, word_to_int
from core.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from core.merkle.zero_hashes import EMPTY_ROOT
from core.schemas.errors import (
    ErrorCodes,
    InsufficientPoolBalanceException,
    InvalidAmountException,
    InvalidCommitmentException,
    InvalidDepositAmountException,
    InvalidFeeException,
    InvalidProofException,
    InvalidPublicInputException,
    InvalidRecipientException,
    NotOwnerException,
    NullifierAlreadySpentException,
    PayoutFailedException,
    PoolPausedException,
    RangeVerifierNotConfiguredException,
    RelayerNotAuthorizedException,
    TreeFullException,
)
from core.verifier.base import digest_to_field, transfer_inputs, withdrawal_inputs
from core.verifier.static import StaticVerifier
from orchestrator.ledger import InMemoryLedger
from orchestrator.pool import ShieldedPool

from fixtures import (
    ALICE,
    BOB,
    DUMMY_PROOF,
    FEE_SINK,
    OWNER,
    RELAYER,
    STRANGER,
    FakeClock,
    make_commitment,
    make_funded_pool,
    make_nullifier,
    make_pool,
)


def field_alias(word: bytes) -> bytes:
    """Same scalar field element as `word`, different bytes."""
    return int_to_word(word_to_int(word) + CURVE_ORDER)


def pool_state(pool: ShieldedPool) -> tuple:
    """Everything a rejected operation must leave untouched."""
    return (
        pool.current_root(),
        pool.next_leaf_index(),
        pool.pool_balance(),
        pool.status()["spent_nullifiers"],
        pool.fee_info(),
        len(pool.get_facts()),
        pool.ledger.history(),
    )


# =============================================================================
# Deposit
# =============================================================================

class TestDeposit:
    """Tests for ShieldedPool.deposit()."""

    def test_deposit_inserts_and_credits(self, pool, clock):
        c = make_commitment(1)
        fact = pool.deposit(c, 250)

        assert fact.kind == "deposit"
        assert fact.commitment == to_hex(c)
        assert fact.leaf_index == 0
        assert fact.timestamp == clock.now
        assert fact.value == 250
        assert fact.root == to_hex(pool.current_root())
        assert fact.sequence == 0
        assert pool.pool_balance() == 250
        assert pool.next_leaf_index() == 1

    def test_leaf_indices_dense(self, pool):
        facts = [pool.deposit(make_commitment(i), 1) for i in range(5)]
        assert [f.leaf_index for f in facts] == [0, 1, 2, 3, 4]

    def test_deposit_accepts_hex(self, pool):
        fact = pool.deposit(to_hex(make_commitment(1)), 10)
        assert fact.commitment == to_hex(make_commitment(1))

    def test_deposited_commitment_provable(self, pool):
        commitments = [make_commitment(i) for i in range(3)]
        for c in commitments:
            pool.deposit(c, 1)
        prover = MerkleProver.from_leaves(commitments)
        assert prover.root == pool.current_root()
        assert MerkleVerifier.verify(prover.prove(1))

    def test_old_roots_remain_known(self, pool):
        first = pool.current_root()
        pool.deposit(make_commitment(1), 1)
        assert first == EMPTY_ROOT
        assert pool.is_known_root(first)
        assert pool.is_known_root(to_hex(pool.current_root()))
        assert not pool.is_known_root("0x1234")

    @pytest.mark.parametrize("value", [0, -5, True, "10"])
    def test_invalid_value(self, pool, value):
        with pytest.raises(InvalidDepositAmountException):
            pool.deposit(make_commitment(1), value)
        assert pool.next_leaf_index() == 0

    def test_zero_commitment(self, pool):
        with pytest.raises(InvalidCommitmentException):
            pool.deposit(bytes(32), 10)

    def test_malformed_commitment(self, pool):
        with pytest.raises(InvalidCommitmentException):
            pool.deposit("0x1234", 10)

    def test_commitment_outside_field(self, pool):
        with pytest.raises(InvalidCommitmentException):
            pool.deposit(field_alias(make_commitment(1)), 10)
        assert pool.next_leaf_index() == 0
        assert pool.pool_balance() == 0

    def test_paused(self, pool):
        pool.pause(OWNER)
        before = pool_state(pool)
        with pytest.raises(PoolPausedException):
            pool.deposit(make_commitment(1), 10)
        assert pool_state(pool) == before

    def test_tree_full(self):
        pool = make_pool(depth=1)
        pool.deposit(make_commitment(0), 5)
        pool.deposit(make_commitment(1), 5)
        before = pool_state(pool)
        with pytest.raises(TreeFullException):
            pool.deposit(make_commitment(2), 5)
        assert pool_state(pool) == before


# =============================================================================
# Withdraw
# =============================================================================

class TestWithdraw:
    """Tests for ShieldedPool.withdraw()."""

    def test_withdraw_pays_recipient(self, funded_pool):
        null = make_nullifier(1)
        fact = funded_pool.withdraw(DUMMY_PROOF, null, ALICE, 400)

        assert fact.kind == "withdrawal"
        assert fact.nullifier == to_hex(null)
        assert fact.recipient == to_hex(ALICE)
        assert fact.amount == 400
        assert fact.relayer is None
        assert funded_pool.ledger.balance_of(ALICE) == 400
        assert funded_pool.pool_balance() == 600
        assert funded_pool.is_spent(null)
        assert funded_pool.is_spent(to_hex(null))

    def test_verifier_sees_current_root_inputs(self):
        verifier = StaticVerifier(True, arity=4)
        pool = make_funded_pool(withdraw_verifier=verifier)
        null = make_nullifier(1)
        root = pool.current_root()

        pool.withdraw(b"proof-bytes", null, ALICE, 100)

        proof, inputs = verifier.calls[0]
        assert proof == b"proof-bytes"
        assert inputs == withdrawal_inputs(root, null, ALICE, 100)
        assert inputs[0] == digest_to_field(root)

    def test_invalid_proof(self):
        pool = make_funded_pool(verify_result=False)
        null = make_nullifier(1)
        before = pool_state(pool)
        with pytest.raises(InvalidProofException) as exc_info:
            pool.withdraw(DUMMY_PROOF, null, ALICE, 100)
        assert exc_info.value.details["role"] == "withdrawal"
        assert not pool.is_spent(null)
        assert pool_state(pool) == before

    def test_double_spend_rejected_regardless_of_proof(self):
        verifier = StaticVerifier(True, arity=4)
        pool = make_funded_pool(withdraw_verifier=verifier)
        null = make_nullifier(1)
        pool.withdraw(DUMMY_PROOF, null, ALICE, 100)

        for result in (True, False):
            verifier.result = result
            with pytest.raises(NullifierAlreadySpentException):
                pool.withdraw(DUMMY_PROOF, null, BOB, 100)
        assert len(verifier.calls) == 1

    @pytest.mark.parametrize("amount", [0, -1, False])
    def test_invalid_amount(self, funded_pool, amount):
        with pytest.raises(InvalidAmountException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, amount)

    @pytest.mark.parametrize("recipient", [bytes(20), b"\x01" * 19, "0xzz", None])
    def test_invalid_recipient(self, funded_pool, recipient):
        with pytest.raises(InvalidRecipientException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), recipient, 10)

    def test_malformed_nullifier(self, funded_pool):
        with pytest.raises(InvalidPublicInputException) as exc_info:
            funded_pool.withdraw(DUMMY_PROOF, b"\x01" * 31, ALICE, 10)
        assert exc_info.value.details["index"] == 1

    def test_nullifier_alias_cannot_double_spend(self, funded_pool):
        null = make_nullifier(1)
        funded_pool.withdraw(DUMMY_PROOF, null, ALICE, 100)
        before = pool_state(funded_pool)

        with pytest.raises(InvalidPublicInputException) as exc_info:
            funded_pool.withdraw(DUMMY_PROOF, field_alias(null), ALICE, 100)

        assert exc_info.value.details["index"] == 1
        assert pool_state(funded_pool) == before
        assert funded_pool.pool_balance() == 900

    def test_out_of_field_nullifier_never_reaches_verifier(self):
        verifier = StaticVerifier(True, arity=4)
        pool = make_funded_pool(withdraw_verifier=verifier)
        with pytest.raises(InvalidPublicInputException):
            pool.withdraw(DUMMY_PROOF, b"\xff" * 32, ALICE, 10)
        assert verifier.calls == []

    def test_insufficient_balance(self, funded_pool):
        null = make_nullifier(1)
        with pytest.raises(InsufficientPoolBalanceException):
            funded_pool.withdraw(DUMMY_PROOF, null, ALICE, 1_001)
        assert not funded_pool.is_spent(null)
        assert funded_pool.pool_balance() == 1_000

    def test_paused(self, funded_pool):
        funded_pool.pause(OWNER)
        with pytest.raises(PoolPausedException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 10)
        funded_pool.unpause(OWNER)
        funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 10)

    def test_payout_failure_rolls_back(self):
        ledger = InMemoryLedger(blocked=[ALICE])
        pool = make_funded_pool(ledger=ledger)
        null = make_nullifier(1)
        before = pool_state(pool)

        with pytest.raises(PayoutFailedException) as exc_info:
            pool.withdraw(DUMMY_PROOF, null, ALICE, 100)

        assert exc_info.value.category == "payout"
        assert not pool.is_spent(null)
        assert pool_state(pool) == before

        ledger.unblock(ALICE)
        pool.withdraw(DUMMY_PROOF, null, ALICE, 100)
        assert ledger.balance_of(ALICE) == 100


# =============================================================================
# Fees
# =============================================================================

class TestFees:
    """Tests for relayer and protocol fee accounting."""

    def test_relayer_fee_paid_to_allowed_relayer(self):
        pool = make_funded_pool(relayers=[RELAYER])
        fact = pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, relayer=RELAYER, fee=7)

        assert fact.relayer == to_hex(RELAYER)
        assert fact.fee == 7
        assert pool.ledger.balance_of(ALICE) == 93
        assert pool.ledger.balance_of(RELAYER) == 7
        assert pool.pool_balance() == 900

        fee_facts = pool.get_facts("fee")
        assert len(fee_facts) == 1
        assert fee_facts[0].fee_recipient == to_hex(RELAYER)
        assert fee_facts[0].amount == 7
        assert fee_facts[0].fee_nonce == 1
        assert pool.fee_info().total_relayer_fees == 7

    def test_fee_without_relayer(self, funded_pool):
        with pytest.raises(InvalidFeeException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, fee=1)

    def test_unlisted_relayer(self, funded_pool):
        with pytest.raises(RelayerNotAuthorizedException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, relayer=STRANGER, fee=1)

    def test_unlisted_relayer_with_zero_fee(self, funded_pool):
        with pytest.raises(RelayerNotAuthorizedException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, relayer=STRANGER)

    def test_negative_fee(self, funded_pool):
        with pytest.raises(InvalidFeeException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, relayer=RELAYER, fee=-1)

    def test_protocol_fee(self):
        pool = make_funded_pool(protocol_fee_bps=250, fee_recipient=FEE_SINK)
        fact = pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 1_000)

        assert fact.protocol_fee == 25
        assert fact.amount == 1_000
        assert pool.ledger.balance_of(ALICE) == 975
        assert pool.ledger.balance_of(FEE_SINK) == 25
        assert pool.fee_info().total_fees_collected == 25
        assert pool.pool_balance() == 0

    def test_protocol_fee_rounds_down(self):
        pool = make_funded_pool(protocol_fee_bps=100, fee_recipient=FEE_SINK)
        fact = pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 99)
        assert fact.protocol_fee == 0
        assert pool.get_facts("fee") == []

    def test_no_recipient_no_protocol_fee(self):
        pool = make_funded_pool(protocol_fee_bps=500)
        fact = pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 1_000)
        assert fact.protocol_fee == 0
        assert pool.ledger.balance_of(ALICE) == 1_000

    def test_fees_exceeding_amount(self):
        pool = make_funded_pool(relayers=[RELAYER], protocol_fee_bps=500, fee_recipient=FEE_SINK)
        with pytest.raises(InvalidFeeException):
            pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, relayer=RELAYER, fee=96)
        fact = pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 100, relayer=RELAYER, fee=95)
        assert pool.ledger.balance_of(ALICE) == 0
        assert fact.fee + fact.protocol_fee == 100

    def test_fee_nonce_increments(self):
        pool = make_funded_pool(relayers=[RELAYER], protocol_fee_bps=100, fee_recipient=FEE_SINK)
        pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 200, relayer=RELAYER, fee=3)
        pool.withdraw(DUMMY_PROOF, make_nullifier(2), BOB, 300, relayer=RELAYER, fee=4)

        nonces = [f.fee_nonce for f in pool.get_facts("fee")]
        assert nonces == [1, 2, 3, 4]
        info = pool.fee_info()
        assert info.fee_nonce == 4
        assert info.total_relayer_fees == 7
        assert info.total_fees_collected == 5

    def test_rejected_withdraw_keeps_fee_nonce(self):
        ledger = InMemoryLedger(blocked=[FEE_SINK])
        pool = make_funded_pool(ledger=ledger, protocol_fee_bps=100, fee_recipient=FEE_SINK)
        with pytest.raises(PayoutFailedException):
            pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 500)
        assert pool.fee_info().fee_nonce == 0
        assert pool.get_facts("fee") == []


# =============================================================================
# Transfer
# =============================================================================

class TestTransfer:
    """Tests for ShieldedPool.transfer()."""

    def test_transfer_inserts_two_commitments(self, funded_pool):
        a, b = make_commitment("a"), make_commitment("b")
        null = make_nullifier(1)
        fact = funded_pool.transfer(DUMMY_PROOF, null, a, b)

        assert fact.kind == "transfer"
        assert (fact.leaf_index_a, fact.leaf_index_b) == (1, 2)
        assert fact.new_commitment_a == to_hex(a)
        assert fact.new_commitment_b == to_hex(b)
        assert fact.root == to_hex(funded_pool.current_root())
        assert funded_pool.next_leaf_index() == 3
        assert funded_pool.is_spent(null)
        assert funded_pool.pool_balance() == 1_000
        assert funded_pool.ledger.history() == []

    def test_root_read_after_second_insertion(self, funded_pool):
        a, b = make_commitment("a"), make_commitment("b")
        funded_pool.transfer(DUMMY_PROOF, make_nullifier(1), a, b)
        prover = MerkleProver.from_leaves([make_commitment("funding-0"), a, b])
        assert prover.root == funded_pool.current_root()

    def test_verifier_sees_pre_transfer_root(self):
        verifier = StaticVerifier(True, arity=4)
        pool = make_funded_pool(transfer_verifier=verifier)
        root = pool.current_root()
        a, b, null = make_commitment("a"), make_commitment("b"), make_nullifier(1)
        pool.transfer(DUMMY_PROOF, null, a, b)
        assert verifier.calls[0][1] == transfer_inputs(root, null, a, b)

    def test_rejected_transfer_leaves_state_unchanged(self):
        pool = make_funded_pool(verify_result=False)
        null = make_nullifier(1)
        before = pool_state(pool)
        with pytest.raises(InvalidProofException) as exc_info:
            pool.transfer(DUMMY_PROOF, null, make_commitment("a"), make_commitment("b"))
        assert exc_info.value.details["role"] == "transfer"
        assert not pool.is_spent(null)
        assert pool_state(pool) == before

    def test_double_spend(self, funded_pool):
        null = make_nullifier(1)
        funded_pool.transfer(DUMMY_PROOF, null, make_commitment("a"), make_commitment("b"))
        with pytest.raises(NullifierAlreadySpentException):
            funded_pool.transfer(DUMMY_PROOF, null, make_commitment("c"), make_commitment("d"))

    def test_withdraw_after_transfer_with_same_nullifier(self, funded_pool):
        null = make_nullifier(1)
        funded_pool.transfer(DUMMY_PROOF, null, make_commitment("a"), make_commitment("b"))
        with pytest.raises(NullifierAlreadySpentException):
            funded_pool.withdraw(DUMMY_PROOF, null, ALICE, 10)

    def test_needs_two_free_slots_before_verifying(self):
        verifier = StaticVerifier(True, arity=4)
        pool = make_pool(depth=2, transfer_verifier=verifier)
        for i in range(3):
            pool.deposit(make_commitment(i), 1)
        before = pool_state(pool)

        with pytest.raises(TreeFullException) as exc_info:
            pool.transfer(DUMMY_PROOF, make_nullifier(1), make_commitment("a"), make_commitment("b"))

        assert exc_info.value.details["requested"] == 2
        assert verifier.calls == []
        assert pool_state(pool) == before

    def test_zero_output_commitment(self, funded_pool):
        with pytest.raises(InvalidCommitmentException):
            funded_pool.transfer(DUMMY_PROOF, make_nullifier(1), make_commitment("a"), bytes(32))

    def test_output_commitment_alias_rejected(self, funded_pool):
        a = make_commitment("a")
        before = pool_state(funded_pool)
        with pytest.raises(InvalidCommitmentException):
            funded_pool.transfer(DUMMY_PROOF, make_nullifier(1), a, field_alias(a))
        assert not funded_pool.is_spent(make_nullifier(1))
        assert pool_state(funded_pool) == before

    def test_nullifier_alias_after_transfer(self, funded_pool):
        null = make_nullifier(1)
        funded_pool.transfer(DUMMY_PROOF, null, make_commitment("a"), make_commitment("b"))
        with pytest.raises(InvalidPublicInputException):
            funded_pool.transfer(DUMMY_PROOF, field_alias(null), make_commitment("c"), make_commitment("d"))

    def test_paused(self, funded_pool):
        funded_pool.pause(OWNER)
        with pytest.raises(PoolPausedException):
            funded_pool.transfer(DUMMY_PROOF, make_nullifier(1), make_commitment("a"), make_commitment("b"))


# =============================================================================
# Range proofs
# =============================================================================

class TestVerifyRange:
    """Tests for ShieldedPool.verify_range()."""

    def test_not_configured(self, pool):
        with pytest.raises(RangeVerifierNotConfiguredException):
            pool.verify_range(DUMMY_PROOF, make_commitment(1), 10)

    def test_delegates_to_range_verifier(self):
        verifier = StaticVerifier(True, arity=2)
        pool = make_pool(range_verifier=verifier)
        c = make_commitment(1)
        assert pool.verify_range(DUMMY_PROOF, c, 10) is True
        assert verifier.calls[0][1] == [digest_to_field(c), 10]
        assert pool.get_facts() == []

    def test_rejected(self):
        pool = make_pool(range_verifier=StaticVerifier(False, arity=2))
        assert pool.verify_range(DUMMY_PROOF, make_commitment(1), 10) is False

    def test_negative_min_value(self):
        pool = make_pool(range_verifier=StaticVerifier(True, arity=2))
        with pytest.raises(InvalidAmountException):
            pool.verify_range(DUMMY_PROOF, make_commitment(1), -1)

    def test_commitment_outside_field(self):
        verifier = StaticVerifier(True, arity=2)
        pool = make_pool(range_verifier=verifier)
        with pytest.raises(InvalidCommitmentException):
            pool.verify_range(DUMMY_PROOF, field_alias(make_commitment(1)), 10)
        assert verifier.calls == []


# =============================================================================
# Admin
# =============================================================================

class TestAdmin:
    """Tests for owner-only controls."""

    def test_non_owner_rejected(self, pool, assert_pool_error):
        for call in (
            lambda: pool.pause(STRANGER),
            lambda: pool.unpause(STRANGER),
            lambda: pool.set_protocol_fee(STRANGER, 10),
            lambda: pool.set_fee_recipient(STRANGER, FEE_SINK),
            lambda: pool.add_relayer(STRANGER, RELAYER),
            lambda: pool.remove_relayer(STRANGER, RELAYER),
            lambda: pool.transfer_ownership(STRANGER, STRANGER),
        ):
            with pytest.raises(NotOwnerException) as exc_info:
                call()
            assert_pool_error(exc_info, ErrorCodes.NOT_OWNER)

    def test_pause_toggles(self, pool):
        pool.pause(OWNER)
        assert pool.is_paused()
        pool.unpause(to_hex(OWNER))
        assert not pool.is_paused()

    def test_set_protocol_fee_bounds(self, pool):
        pool.set_protocol_fee(OWNER, 500)
        assert pool.fee_info().protocol_fee_bps == 500
        with pytest.raises(InvalidFeeException):
            pool.set_protocol_fee(OWNER, 501)
        assert pool.fee_info().protocol_fee_bps == 500

    def test_constructor_rejects_high_fee(self):
        with pytest.raises(InvalidFeeException):
            make_pool(protocol_fee_bps=501)

    def test_fee_recipient(self, pool):
        pool.set_fee_recipient(OWNER, FEE_SINK)
        assert pool.fee_info().fee_recipient == to_hex(FEE_SINK)
        with pytest.raises(InvalidRecipientException):
            pool.set_fee_recipient(OWNER, bytes(20))

    def test_relayer_allow_list(self, funded_pool):
        funded_pool.add_relayer(OWNER, RELAYER)
        assert funded_pool.relayers() == [to_hex(RELAYER)]
        funded_pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 10, relayer=RELAYER, fee=1)

        funded_pool.remove_relayer(OWNER, RELAYER)
        with pytest.raises(RelayerNotAuthorizedException):
            funded_pool.withdraw(DUMMY_PROOF, make_nullifier(2), ALICE, 10, relayer=RELAYER, fee=1)

    def test_transfer_ownership(self, pool):
        pool.transfer_ownership(OWNER, ALICE)
        assert pool.owner() == to_hex(ALICE)
        with pytest.raises(NotOwnerException):
            pool.pause(OWNER)
        pool.pause(ALICE)

    def test_no_owner_disables_admin(self, caplog):
        pool = make_pool(owner=None)
        assert "without an owner" in caplog.text
        assert pool.owner() is None
        with pytest.raises(NotOwnerException):
            pool.pause(OWNER)

    def test_malformed_caller(self, pool):
        with pytest.raises(NotOwnerException):
            pool.pause("not-an-address")


# =============================================================================
# Atomicity and construction
# =============================================================================

class ExplodingLedger(InMemoryLedger):
    """Ledger that fails with an unexpected error."""

    def payout(self, payouts):
        raise RuntimeError("ledger offline")


class TestAtomicity:
    """Unexpected failures restore state and propagate."""

    def test_unexpected_error_restores_state(self, caplog):
        pool = make_pool(ledger=ExplodingLedger())
        pool.deposit(make_commitment(0), 100)
        null = make_nullifier(1)
        before = pool_state(pool)

        with pytest.raises(RuntimeError):
            pool.withdraw(DUMMY_PROOF, null, ALICE, 50)

        assert not pool.is_spent(null)
        assert pool_state(pool) == before
        assert "state restored" in caplog.text

    def test_snapshot_reflects_state(self, funded_pool):
        snap = funded_pool.snapshot()
        assert snap.balance == 1_000
        assert snap.tree.next_index == 1
        assert snap.facts_length == 1


class TestConstruction:
    """Tests for defaults and from_config()."""

    def test_unconfigured_pool_fails_closed(self):
        pool = ShieldedPool(OWNER)
        pool.deposit(make_commitment(0), 10)
        with pytest.raises(InvalidProofException):
            pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 5)
        with pytest.raises(InvalidProofException):
            pool.transfer(DUMMY_PROOF, make_nullifier(2), make_commitment("a"), make_commitment("b"))

    def test_from_config_without_keys(self, caplog):
        config = RuntimeConfig.from_dict({
            "pool": {"owner": to_hex(OWNER), "tree_depth": 4, "root_history_size": 5},
            "fees": {"protocol_fee_bps": 30, "fee_recipient": to_hex(FEE_SINK), "relayers": [to_hex(RELAYER)]},
        })
        pool = ShieldedPool.from_config(config, clock=FakeClock())

        assert pool.tree.depth == 4
        assert pool.tree.root_history_size == 5
        assert pool.owner() == to_hex(OWNER)
        assert pool.relayers() == [to_hex(RELAYER)]
        assert pool.fee_info().protocol_fee_bps == 30
        assert "No withdraw verifying key configured" in caplog.text

        pool.deposit(make_commitment(0), 10)
        with pytest.raises(InvalidProofException):
            pool.withdraw(DUMMY_PROOF, make_nullifier(1), ALICE, 5)

    def test_status(self, funded_pool):
        status = funded_pool.status()
        assert status["next_leaf_index"] == 1
        assert status["balance"] == 1_000
        assert status["depth"] == 20
        assert status["capacity"] == 2**20
        assert status["paused"] is False
        assert status["owner"] == to_hex(OWNER)
        assert status["root"] == to_hex(funded_pool.current_root())
