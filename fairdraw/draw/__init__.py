"""Deterministic, re-verifiable draws.

The two entry points are :func:`perform_draw` and :func:`verify_proof`; both
build a fresh stateless service per call. Construct :class:`LotteryEngine` or
:class:`ProofVerifier` directly to inject a registry, entropy source or
verification policy.
"""

from typing import Any, Mapping

from .algorithms import (
    AlgorithmRegistry,
    DEFAULT_DRAW_REGISTRY,
    DrawAlgorithm,
    DrawKind,
    draw_bingo,
    draw_names,
    draw_numbers,
    draw_order,
    draw_teams,
)
from .codec import (
    format_for_sharing,
    parse_verification_code,
    to_qr_data,
    to_share_text,
    to_verification_url,
    verification_code,
)
from .digest import canonical_json, digest, hash_data
from .engine import DrawOutcome, LotteryEngine
from .errors import (
    DrawError,
    ExhaustedAttempts,
    HashMismatch,
    InvalidInput,
    MalformedProof,
    ProofError,
    ResultMismatch,
    StaleProof,
    UnsupportedType,
)
from .proof import Proof, validate_proof_format
from .rng import LinearCongruentialGenerator, seeded_random, shuffle
from .seed import EntropySource, SeedDeriver, seed_to_number
from .stats import extract_proof_info, get_security_stats, get_statistics
from .verify import ProofVerifier, VerificationResult


def perform_draw(draw_type: Any, config: Mapping[str, Any]) -> DrawOutcome:
    """Perform a draw with a default :class:`LotteryEngine`."""
    return LotteryEngine().perform_draw(draw_type, config)


def verify_proof(proof: Any) -> VerificationResult:
    """Verify ``proof`` with a default :class:`ProofVerifier`."""
    return ProofVerifier().verify(proof)


__all__ = [
    "AlgorithmRegistry",
    "DEFAULT_DRAW_REGISTRY",
    "DrawAlgorithm",
    "DrawError",
    "DrawKind",
    "DrawOutcome",
    "EntropySource",
    "ExhaustedAttempts",
    "HashMismatch",
    "InvalidInput",
    "LinearCongruentialGenerator",
    "LotteryEngine",
    "MalformedProof",
    "Proof",
    "ProofError",
    "ProofVerifier",
    "ResultMismatch",
    "SeedDeriver",
    "StaleProof",
    "UnsupportedType",
    "VerificationResult",
    "canonical_json",
    "digest",
    "draw_bingo",
    "draw_names",
    "draw_numbers",
    "draw_order",
    "draw_teams",
    "extract_proof_info",
    "format_for_sharing",
    "get_security_stats",
    "get_statistics",
    "hash_data",
    "parse_verification_code",
    "perform_draw",
    "seed_to_number",
    "seeded_random",
    "shuffle",
    "to_qr_data",
    "to_share_text",
    "to_verification_url",
    "validate_proof_format",
    "verification_code",
    "verify_proof",
]
