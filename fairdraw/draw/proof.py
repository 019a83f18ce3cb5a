"""The proof record embedded with every draw and its structural checks."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .algorithms import ALGORITHM_VERSION, DrawKind
from .digest import hash_data
from .errors import MalformedProof
from .timestamps import parse_timestamp

PROOF_VERSION = "1.0.0"

REQUIRED_FIELDS: dict[str, type] = {
    "seed": str,
    "timestamp": str,
    "type": str,
    "config": dict,
    "result": dict,
    "hash": str,
    "algorithm": str,
    "version": str,
}


def compute_proof_hash(
    seed: str,
    timestamp: str,
    draw_type: str,
    config: Mapping[str, Any],
    result: Mapping[str, Any],
) -> str:
    """Hash the fields a proof commits to."""
    return hash_data(
        {
            "seed": seed,
            "timestamp": timestamp,
            "type": draw_type,
            "config": dict(config),
            "result": dict(result),
        }
    )


@dataclass(frozen=True)
class Proof:
    """Self-contained record of a draw that anyone can re-verify.

    Attributes
    ----------
    seed : str
        Seed the draw was run with.
    timestamp : str
        ISO-8601 UTC time of the draw.
    type : str
        Draw kind (see :class:`~fairdraw.draw.algorithms.DrawKind`).
    config : dict
        Public (sanitized) configuration the draw was run with.
    result : dict
        Algorithm output.
    hash : str
        Eight-character digest over seed, timestamp, type, config and result.
    algorithm : str
        Algorithm label, ``"{type}-v1.0"``.
    version : str
        Proof format version.
    """

    seed: str
    timestamp: str
    type: str
    config: dict = field(default_factory=dict)
    result: dict = field(default_factory=dict)
    hash: str = ""
    algorithm: str = ""
    version: str = PROOF_VERSION

    def to_dict(self) -> dict:
        """Return a deep copy of the proof as a plain dictionary."""
        return {
            "seed": self.seed,
            "timestamp": self.timestamp,
            "type": self.type,
            "config": copy.deepcopy(self.config),
            "result": copy.deepcopy(self.result),
            "hash": self.hash,
            "algorithm": self.algorithm,
            "version": self.version,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Proof":
        """Build a proof from its JSON form.

        Raises
        ------
        MalformedProof
            If the mapping fails :func:`validate_proof_format`.
        """
        errors = validate_proof_format(data)
        if errors:
            raise MalformedProof("; ".join(errors))
        return cls(**{name: copy.deepcopy(data[name]) for name in REQUIRED_FIELDS})

    @classmethod
    def from_json(cls, text: str) -> "Proof":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise MalformedProof(f"Proof is not valid JSON: {exc}") from exc
        return cls.from_dict(data)


ProofLike = Union[Proof, Mapping[str, Any]]


def as_proof_dict(proof: ProofLike) -> Mapping[str, Any]:
    """Return the JSON form of ``proof`` whether it is a :class:`Proof` or a mapping."""
    return proof.to_dict() if isinstance(proof, Proof) else proof


def validate_proof_format(data: Any) -> list[str]:
    """Collect every structural problem with ``data``.

    Checks presence and type of the required fields, that ``type`` is a
    supported kind, that ``timestamp`` parses and that ``algorithm`` matches ``type``.

    Returns
    -------
    list[str]
        Human-readable problems; empty when the proof is well formed.
    """
    if isinstance(data, Proof):
        data = data.to_dict()
    if not isinstance(data, Mapping):
        return ["Proof must be an object"]

    errors: list[str] = []
    for name, expected in REQUIRED_FIELDS.items():
        if name not in data:
            errors.append(f"Missing required field: {name}")
        elif not isinstance(data[name], expected):
            errors.append(f"Field '{name}' must be of type {expected.__name__}")
    if errors:
        return errors

    if not data["seed"]:
        errors.append("Field 'seed' must not be empty")
    if data["type"] not in {kind.value for kind in DrawKind}:
        errors.append(f"Unsupported draw type: {data['type']}")
    try:
        parse_timestamp(data["timestamp"])
    except ValueError:
        errors.append("Field 'timestamp' is not a valid ISO-8601 timestamp")
    if not data["hash"]:
        errors.append("Field 'hash' must not be empty")
    expected_label = f"{data['type']}-{ALGORITHM_VERSION}"
    if data["algorithm"] != expected_label:
        errors.append(f"Field 'algorithm' must be '{expected_label}'")
    return errors


__all__ = [
    "PROOF_VERSION",
    "Proof",
    "ProofLike",
    "REQUIRED_FIELDS",
    "as_proof_dict",
    "compute_proof_hash",
    "validate_proof_format",
]
