"""Draw orchestration: derive a seed, run the algorithm, assemble the proof."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .algorithms import (
    AlgorithmRegistry,
    DEFAULT_DRAW_REGISTRY,
    DEFAULT_MAX_ATTEMPTS,
    DrawKind,
)
from .digest import canonical_json
from .errors import DrawError, InvalidInput
from .proof import PROOF_VERSION, Proof, compute_proof_hash
from .rng import DEFAULT_GENERATOR, LinearCongruentialGenerator
from .seed import EntropySource, SeedDeriver
from .timestamps import format_timestamp

logger = logging.getLogger(__name__)

DEFAULT_PRIVATE_KEYS = ("privateData", "internalIds")

QUICK_DRAW_DEFAULTS: dict[DrawKind, dict[str, Any]] = {
    DrawKind.NAMES: {"items": ["Option 1", "Option 2", "Option 3"], "count": 1},
    DrawKind.NUMBERS: {"min": 1, "max": 10, "count": 1, "allowRepeats": False},
    DrawKind.TEAMS: {
        "players": ["Player 1", "Player 2", "Player 3", "Player 4"],
        "teamCount": 2,
        "balanceTeams": True,
    },
    DrawKind.ORDER: {"items": ["Item 1", "Item 2", "Item 3"]},
    DrawKind.BINGO: {"type": "75", "count": 1},
}


@dataclass(frozen=True)
class DrawOutcome:
    """Tagged result of :meth:`LotteryEngine.perform_draw`.

    Attributes
    ----------
    success : bool
        ``True`` when the draw completed.
    type : str
        Requested draw kind, as given by the caller.
    result : Optional[dict]
        Algorithm output; ``None`` on failure.
    proof : Optional[Proof]
        Proof of the draw; ``None`` on failure.
    timestamp : Optional[datetime]
        Time of the draw; ``None`` on failure.
    error : Optional[str]
        Failure message; ``None`` on success.
    error_code : Optional[str]
        Failure kind (``"InvalidInput"``, ``"ExhaustedAttempts"`` or
        ``"UnsupportedType"``); ``None`` on success.
    """

    success: bool
    type: str
    result: Optional[dict] = None
    proof: Optional[Proof] = None
    timestamp: Optional[datetime] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class LotteryEngine:
    """Stateless service that performs draws and produces their proofs."""

    def __init__(
        self,
        *,
        registry: Optional[AlgorithmRegistry] = None,
        entropy: Optional[EntropySource] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        private_keys: Iterable[str] = DEFAULT_PRIVATE_KEYS,
        generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
    ) -> None:
        """Create an engine.

        Parameters
        ----------
        registry : Optional[AlgorithmRegistry], default: None
            Registry of draw algorithms. The default registry is used when
            omitted.
        entropy : Optional[EntropySource], default: None
            Clock, token source and platform tag used to derive seeds.
        max_attempts : int, default: 1000
            Floor of the retry ceiling for no-repeat sampling.
        private_keys : Iterable[str]
            Configuration keys stripped before the configuration is embedded
            in a public proof.
        generator : LinearCongruentialGenerator
            Generator the algorithms draw from. Proofs only verify against a
            verifier using the same generator.
        """
        self._registry = registry or DEFAULT_DRAW_REGISTRY
        self._entropy = entropy or EntropySource()
        self._seeds = SeedDeriver(self._entropy)
        self._max_attempts = max_attempts
        self._private_keys = frozenset(private_keys)
        self._generator = generator

    def sanitize(self, config: Mapping[str, Any]) -> dict:
        """Return a deep copy of ``config`` without the private keys."""
        return {
            key: copy.deepcopy(value)
            for key, value in config.items()
            if key not in self._private_keys
        }

    def draw(self, draw_type: Any, config: Mapping[str, Any]) -> DrawOutcome:
        """Perform a draw and raise on failure.

        Notes
        -----
        The steps are:

        1. Resolve ``draw_type`` to a registered algorithm.
        2. Sanitize the configuration; the public copy is what the seed, the
           algorithm and the proof all see.
        3. Derive the seed from the configuration and the entropy source.
        4. Run the algorithm.
        5. Assemble the :class:`Proof` and hash it.

        Raises
        ------
        UnsupportedType
            If ``draw_type`` is not a supported kind.
        InvalidInput
            If the configuration is not a JSON-serializable object or violates
            the algorithm's preconditions.
        ExhaustedAttempts
            If no-repeat sampling ran out of attempts.
        """
        algorithm = self._registry.get(draw_type)
        if not isinstance(config, Mapping):
            raise InvalidInput("Draw configuration must be an object")
        public_config = self.sanitize(config)
        try:
            canonical_json(public_config)
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Draw configuration must be JSON-serializable: {exc}") from exc

        moment = self._entropy.clock()
        seed = self._seeds.derive(public_config, moment=moment)
        result = algorithm.run(
            public_config,
            seed,
            max_attempts=self._max_attempts,
            generator=self._generator,
        )

        timestamp = format_timestamp(moment)
        kind = algorithm.kind.value
        proof = Proof(
            seed=seed,
            timestamp=timestamp,
            type=kind,
            config=copy.deepcopy(public_config),
            result=copy.deepcopy(result),
            hash=compute_proof_hash(seed, timestamp, kind, public_config, result),
            algorithm=algorithm.label,
            version=PROOF_VERSION,
        )
        logger.debug(f"Completed {kind} draw with seed {seed} and hash {proof.hash}")
        return DrawOutcome(
            success=True,
            type=kind,
            result=copy.deepcopy(result),
            proof=proof,
            timestamp=moment,
        )

    def perform_draw(self, draw_type: Any, config: Mapping[str, Any]) -> DrawOutcome:
        """Perform a draw and report failures as a tagged outcome.

        Classified draw errors never cross this boundary; they are returned as
        ``DrawOutcome(success=False, error=..., error_code=...)``.
        """
        try:
            return self.draw(draw_type, config)
        except DrawError as exc:
            logger.warning(f"Draw of type {draw_type!r} failed ({exc.code}): {exc}")
            requested = draw_type.value if isinstance(draw_type, DrawKind) else str(draw_type)
            return DrawOutcome(
                success=False,
                type=requested,
                error=str(exc),
                error_code=exc.code,
            )

    def quick_draw(self, draw_type: Any, **overrides: Any) -> DrawOutcome:
        """Perform a draw from per-kind defaults, with ``overrides`` applied."""
        try:
            kind = DrawKind.parse(draw_type)
        except DrawError:
            return self.perform_draw(draw_type, overrides)
        config = {**copy.deepcopy(QUICK_DRAW_DEFAULTS[kind]), **overrides}
        return self.perform_draw(kind, config)


__all__ = [
    "DEFAULT_PRIVATE_KEYS",
    "DrawOutcome",
    "LotteryEngine",
    "QUICK_DRAW_DEFAULTS",
]
