"""
Verifying Keys

Immutable Groth16 verifying keys. Keys are produced offline by a trusted
setup and loaded once from snarkjs-style `verification_key.json` files.
Rotating a key means building a new verifier; a loaded key is frozen.

snarkjs layout:
    {
      "protocol": "groth16", "curve": "bn128", "nPublic": 4,
      "vk_alpha_1": ["x", "y", "1"],
      "vk_beta_2":  [["x_c0", "x_c1"], ["y_c0", "y_c1"], ["1", "0"]],
      "vk_gamma_2": ..., "vk_delta_2": ...,
      "IC": [["x", "y", "1"], ...]
    }
Coordinates are decimal strings; a zero z coordinate marks infinity.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.crypto.curve import (
    G1_INFINITY,
    G2_INFINITY,
    CurveProvider,
    G1Point,
    G2Point,
)
from core.crypto.hashing import hash_canonical, to_hex
from core.schemas.errors import CurveOperationFailedException


logger = logging.getLogger(__name__)


class VerifyingKey(BaseModel):
    """Groth16 verifying key in affine boundary encoding."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    alpha_g1: tuple[int, int]
    beta_g2: tuple[tuple[int, int], tuple[int, int]]
    gamma_g2: tuple[tuple[int, int], tuple[int, int]]
    delta_g2: tuple[tuple[int, int], tuple[int, int]]
    ic: tuple[tuple[int, int], ...] = Field(
        ...,
        min_length=1,
        description="IC[0] plus one point per public input",
    )
    label: str = Field(default="", description="Free-form name, e.g. the circuit role")

    @model_validator(mode="after")
    def _non_trivial(self) -> "VerifyingKey":
        if self.alpha_g1 == G1_INFINITY:
            raise ValueError("alpha_g1 must not be the point at infinity")
        return self

    @property
    def n_public(self) -> int:
        return len(self.ic) - 1

    def key_id(self) -> str:
        """Canonical hash of the key points, for logs and `vk-info`."""
        return to_hex(hash_canonical(self.model_dump(exclude={"label"})))

    def check_points(self, provider: CurveProvider) -> None:
        """
        Check every point against the curve and the G2 subgroup.

        Raises:
            CurveOperationFailedException: On the first invalid point
        """
        g1_points: list[tuple[str, G1Point]] = [("alpha_g1", self.alpha_g1)]
        g1_points += [(f"ic[{i}]", p) for i, p in enumerate(self.ic)]
        for name, point in g1_points:
            if not provider.is_on_g1(point):
                raise CurveOperationFailedException("load_verifying_key", f"{name} is not a valid G1 point")
        for name, point in (("beta_g2", self.beta_g2), ("gamma_g2", self.gamma_g2), ("delta_g2", self.delta_g2)):
            if not provider.is_on_g2(point):
                raise CurveOperationFailedException("load_verifying_key", f"{name} is not a valid G2 point")

    def to_snarkjs(self) -> dict[str, Any]:
        return {
            "protocol": "groth16",
            "curve": "bn128",
            "nPublic": self.n_public,
            "vk_alpha_1": _g1_to_json(self.alpha_g1),
            "vk_beta_2": _g2_to_json(self.beta_g2),
            "vk_gamma_2": _g2_to_json(self.gamma_g2),
            "vk_delta_2": _g2_to_json(self.delta_g2),
            "IC": [_g1_to_json(p) for p in self.ic],
        }


def _g1_from_json(raw: list[Any]) -> G1Point:
    x, y, *rest = (int(v) for v in raw)
    if rest and rest[0] == 0:
        return G1_INFINITY
    return (x, y)


def _g2_from_json(raw: list[list[Any]]) -> G2Point:
    x = tuple(int(v) for v in raw[0])
    y = tuple(int(v) for v in raw[1])
    if len(raw) > 2 and all(int(v) == 0 for v in raw[2]):
        return G2_INFINITY
    return ((x[0], x[1]), (y[0], y[1]))


def _g1_to_json(point: G1Point) -> list[str]:
    z = "0" if point == G1_INFINITY else "1"
    return [str(point[0]), str(point[1]), z]


def _g2_to_json(point: G2Point) -> list[list[str]]:
    z = ["0", "0"] if point == G2_INFINITY else ["1", "0"]
    return [[str(point[0][0]), str(point[0][1])], [str(point[1][0]), str(point[1][1])], z]


def verifying_key_from_snarkjs(data: dict[str, Any], label: str = "") -> VerifyingKey:
    """
    Build a VerifyingKey from a parsed snarkjs verification_key.json.

    Raises:
        ValueError: On an unsupported protocol/curve, missing fields or an
            nPublic that disagrees with the IC length
    """
    protocol = data.get("protocol", "groth16")
    curve = data.get("curve", "bn128")
    if protocol != "groth16":
        raise ValueError(f"Unsupported proof protocol: {protocol}")
    if curve not in ("bn128", "bn254", "alt_bn128"):
        raise ValueError(f"Unsupported curve: {curve}")

    try:
        ic = tuple(_g1_from_json(p) for p in data["IC"])
        key = VerifyingKey(
            alpha_g1=_g1_from_json(data["vk_alpha_1"]),
            beta_g2=_g2_from_json(data["vk_beta_2"]),
            gamma_g2=_g2_from_json(data["vk_gamma_2"]),
            delta_g2=_g2_from_json(data["vk_delta_2"]),
            ic=ic,
            label=label,
        )
    except KeyError as e:
        raise ValueError(f"Verifying key is missing field {e}") from e

    n_public = data.get("nPublic")
    if n_public is not None and int(n_public) != key.n_public:
        raise ValueError(f"nPublic={n_public} but IC has {len(ic)} points")
    return key


def load_verifying_key(path: Union[str, Path], label: str = "") -> VerifyingKey:
    """
    Load a verifying key from a snarkjs JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a valid verifying key
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    key = verifying_key_from_snarkjs(data, label=label or path.stem)
    logger.info(f"Loaded verifying key {key.key_id()[:18]} from {path} ({key.n_public} public inputs)")
    return key


__all__ = [
    "VerifyingKey",
    "verifying_key_from_snarkjs",
    "load_verifying_key",
]
