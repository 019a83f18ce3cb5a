"""Seeded pseudo-random number generation and the shuffle primitive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar, Union

from .seed import seed_to_number

T = TypeVar("T")


@dataclass(frozen=True)
class LinearCongruentialGenerator:
    """Linear congruential generator ``state' = (a * state + c) mod m``.

    The generator keeps no state of its own. Draw algorithms seed it with
    ``base_seed + index (+ attempt)`` for every value they need, so the
    value used at any step can be recomputed in isolation without replaying
    the steps before it.

    Attributes
    ----------
    multiplier : int
        The ``a`` constant.
    increment : int
        The ``c`` constant.
    modulus : int
        The ``m`` constant; outputs are ``state' / m``.
    """

    multiplier: int = 1664525
    increment: int = 1013904223
    modulus: int = 2**32

    def next(self, state: int) -> tuple[float, int]:
        """Advance ``state`` once.

        Returns
        -------
        tuple[float, int]
            The output in ``[0, 1)`` and the new state.
        """
        new_state = (self.multiplier * state + self.increment) % self.modulus
        return new_state / self.modulus, new_state

    def random(self, state: int) -> float:
        """Return only the ``[0, 1)`` output of :meth:`next`."""
        return self.next(state)[0]

    @property
    def sweep(self) -> int:
        """Consecutive states needed for the outputs to wrap once around ``[0, 1)``."""
        return -(-self.modulus // self.multiplier)


DEFAULT_GENERATOR = LinearCongruentialGenerator()


def seeded_random(state: int) -> float:
    """Return the default generator's output for ``state``."""
    return DEFAULT_GENERATOR.random(state)


def shuffle(
    items: Sequence[T],
    seed: Union[str, int],
    *,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> list[T]:
    """Return a seeded Fisher-Yates permutation of ``items``.

    Walks from the last index down to 1 and swaps position ``i`` with
    ``j = floor(r(seed + i) * (i + 1))``. ``j`` depends only on ``i``, so the
    whole permutation is reproducible from ``(items, seed)`` alone.

    Parameters
    ----------
    items : Sequence[T]
        Items to permute. The input is never modified.
    seed : Union[str, int]
        A seed string, or the integer already derived from one.
    """
    seed_number = seed_to_number(seed) if isinstance(seed, str) else seed
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(generator.random(seed_number + i) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


__all__ = [
    "LinearCongruentialGenerator",
    "DEFAULT_GENERATOR",
    "seeded_random",
    "shuffle",
]
