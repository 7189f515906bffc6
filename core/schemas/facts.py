"""
Emitted Facts

Immutable records of accepted state transitions. The pool and the swap book
build a fact for every accepted operation; the FactLog then stamps it with a
sequence number and the canonical hash of its committed fields.

All digests and addresses are 0x-prefixed hex strings; amounts and
timestamps are integers.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


FactKind = Literal[
    "deposit",
    "withdrawal",
    "transfer",
    "fee",
    "swap_initiated",
    "swap_redeemed",
    "swap_refunded",
]

# Stamped by the fact log; excluded from the fact hash
LOG_FIELDS = {"sequence", "fact_hash"}


class Fact(BaseModel):
    """Base fact. Subclasses pin `kind`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: FactKind
    sequence: Optional[int] = Field(
        default=None,
        description="Position in the fact log, assigned on record",
    )
    fact_hash: Optional[str] = Field(
        default=None,
        description="keccak-256 of the canonical committed fields (0x-prefixed)",
    )

    def committed_fields(self) -> dict:
        return self.model_dump(mode="json", exclude=LOG_FIELDS, exclude_none=True)


class DepositFact(Fact):
    kind: Literal["deposit"] = "deposit"
    commitment: str
    leaf_index: int
    timestamp: int
    value: int = Field(..., description="Value credited to the pool")
    root: str = Field(..., description="Tree root after the insertion")


class WithdrawalFact(Fact):
    kind: Literal["withdrawal"] = "withdrawal"
    nullifier: str
    recipient: str
    amount: int = Field(..., description="Gross amount released, fees included")
    relayer: Optional[str] = None
    fee: int = 0
    protocol_fee: int = 0


class TransferFact(Fact):
    kind: Literal["transfer"] = "transfer"
    nullifier: str
    new_commitment_a: str
    new_commitment_b: str
    leaf_index_a: int
    leaf_index_b: int
    root: str = Field(..., description="Tree root after both insertions")


class FeeFact(Fact):
    kind: Literal["fee"] = "fee"
    fee_recipient: str
    amount: int
    fee_nonce: int


class SwapInitiatedFact(Fact):
    kind: Literal["swap_initiated"] = "swap_initiated"
    swap_id: str
    sender: str
    recipient: str
    amount: int
    hashlock: str
    timelock: int


class SwapRedeemedFact(Fact):
    kind: Literal["swap_redeemed"] = "swap_redeemed"
    swap_id: str
    preimage: str


class SwapRefundedFact(Fact):
    kind: Literal["swap_refunded"] = "swap_refunded"
    swap_id: str


AnyFact = Union[
    DepositFact,
    WithdrawalFact,
    TransferFact,
    FeeFact,
    SwapInitiatedFact,
    SwapRedeemedFact,
    SwapRefundedFact,
]


__all__ = [
    "FactKind",
    "LOG_FIELDS",
    "Fact",
    "DepositFact",
    "WithdrawalFact",
    "TransferFact",
    "FeeFact",
    "SwapInitiatedFact",
    "SwapRedeemedFact",
    "SwapRefundedFact",
    "AnyFact",
]
