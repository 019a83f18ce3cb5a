"""Replay-and-compare verification of draw proofs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from .algorithms import AlgorithmRegistry, DEFAULT_DRAW_REGISTRY, DEFAULT_MAX_ATTEMPTS
from .digest import canonical_json
from .errors import (
    DrawError,
    HashMismatch,
    MalformedProof,
    ProofError,
    ResultMismatch,
    StaleProof,
)
from .proof import Proof, ProofLike, as_proof_dict, compute_proof_hash, validate_proof_format
from .rng import DEFAULT_GENERATOR, LinearCongruentialGenerator
from .timestamps import parse_timestamp, utcnow

logger = logging.getLogger(__name__)

DEFAULT_FUTURE_TOLERANCE = timedelta(minutes=5)


@dataclass(frozen=True)
class VerificationResult:
    """Verdict returned by :meth:`ProofVerifier.verify`.

    Attributes
    ----------
    valid : bool
        ``True`` when the proof replays to the same result and hash.
    reason : Optional[str]
        Failure kind: ``"MalformedProof"``, ``"ResultMismatch"``,
        ``"HashMismatch"`` or ``"StaleProof"``. ``None`` when valid.
    message : Optional[str]
        Detail of the failure.
    timestamp : Optional[datetime]
        Draw time recorded in a valid proof.
    algorithm : Optional[str]
        Algorithm label recorded in a valid proof.
    """

    valid: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    timestamp: Optional[datetime] = None
    algorithm: Optional[str] = None


class ProofVerifier:
    """Re-derives a draw from its proof and compares result and hash.

    No signature or ledger is involved: a proof is trusted when regenerating
    the draw from its own recorded seed and configuration reproduces the
    recorded result and hash exactly.
    """

    def __init__(
        self,
        *,
        registry: Optional[AlgorithmRegistry] = None,
        max_age: Optional[timedelta] = None,
        future_tolerance: Optional[timedelta] = DEFAULT_FUTURE_TOLERANCE,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
    ) -> None:
        """Create a verifier.

        Parameters
        ----------
        registry : Optional[AlgorithmRegistry], default: None
            Registry used to replay draws.
        max_age : Optional[timedelta], default: None
            Retention horizon. Older proofs are rejected as ``StaleProof``.
            ``None`` disables the check.
        future_tolerance : Optional[timedelta], default: 5 minutes
            Allowed clock skew for proofs dated in the future. ``None``
            disables the check.
        clock : Callable[[], datetime]
            Source of the current time for the staleness policy.
        max_attempts : int, default: 1000
            Floor of the retry ceiling used when replaying no-repeat draws.
        generator : LinearCongruentialGenerator
            Generator used to replay draws; must match the one that drew them.
        """
        self._registry = registry or DEFAULT_DRAW_REGISTRY
        self._max_age = max_age
        self._future_tolerance = future_tolerance
        self._clock = clock
        self._max_attempts = max_attempts
        self._generator = generator

    def check(self, proof: ProofLike) -> datetime:
        """Verify ``proof`` and return its draw time.

        Raises
        ------
        MalformedProof
            If a required field is missing or mistyped.
        ResultMismatch
            If the seed and configuration do not reproduce the result.
        HashMismatch
            If the recorded hash does not match the proof contents.
        StaleProof
            If the proof is outside the configured time window.
        """
        data = as_proof_dict(proof)
        errors = validate_proof_format(data)
        if errors:
            raise MalformedProof("; ".join(errors))

        try:
            recorded_result = canonical_json(data["result"])
            canonical_json(data["config"])
        except (TypeError, ValueError) as exc:
            raise MalformedProof(f"Proof contents are not JSON-serializable: {exc}") from exc

        try:
            replayed = self._registry.run(
                data["type"],
                data["config"],
                data["seed"],
                max_attempts=self._max_attempts,
                generator=self._generator,
            )
        except DrawError as exc:
            raise ResultMismatch(
                f"Configuration does not reproduce a draw ({exc.code}): {exc}"
            ) from exc
        if canonical_json(replayed) != recorded_result:
            raise ResultMismatch("Result does not match the seed and configuration")

        expected_hash = compute_proof_hash(
            data["seed"],
            data["timestamp"],
            data["type"],
            data["config"],
            data["result"],
        )
        if expected_hash != data["hash"]:
            raise HashMismatch("Hash does not match the proof contents")

        drawn_at = parse_timestamp(data["timestamp"])
        now = self._clock()
        if self._future_tolerance is not None and drawn_at > now + self._future_tolerance:
            raise StaleProof("Proof is dated in the future")
        if self._max_age is not None and drawn_at < now - self._max_age:
            raise StaleProof("Proof is older than the retention horizon")
        return drawn_at

    def verify(self, proof: ProofLike) -> VerificationResult:
        """Verify ``proof`` and return a verdict instead of raising."""
        try:
            drawn_at = self.check(proof)
        except ProofError as exc:
            logger.info(f"Proof rejected ({exc.code}): {exc}")
            return VerificationResult(valid=False, reason=exc.code, message=str(exc))
        algorithm = proof.algorithm if isinstance(proof, Proof) else proof["algorithm"]
        return VerificationResult(valid=True, timestamp=drawn_at, algorithm=algorithm)


__all__ = [
    "DEFAULT_FUTURE_TOLERANCE",
    "ProofVerifier",
    "VerificationResult",
]
