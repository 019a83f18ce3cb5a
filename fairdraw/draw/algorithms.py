"""The five draw algorithms and the registry that dispatches between them.

Every algorithm is a pure function ``(config, seed) -> result``. Randomness is
taken from :class:`~fairdraw.draw.rng.LinearCongruentialGenerator` seeded with
``seed_number + index`` (plus an attempt offset for no-repeat retries), so each
individual output can be recomputed on its own. Results are plain JSON-shaped
dictionaries because they are embedded verbatim in proofs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ExhaustedAttempts, InvalidInput, UnsupportedType
from .rng import DEFAULT_GENERATOR, LinearCongruentialGenerator, shuffle
from .seed import seed_to_number

DEFAULT_MAX_ATTEMPTS = 1000
MAX_DRAW_COUNT = 10_000
ALGORITHM_VERSION = "v1.0"

BINGO_LETTERS = ("B", "I", "N", "G", "O")
BINGO_RANGES = {"75": 75, "90": 90}


class DrawKind(str, Enum):
    """Supported kinds of draw."""

    NAMES = "names"
    NUMBERS = "numbers"
    TEAMS = "teams"
    ORDER = "order"
    BINGO = "bingo"

    @classmethod
    def parse(cls, value: Any) -> "DrawKind":
        """Return the kind named by ``value``.

        Raises
        ------
        UnsupportedType
            If ``value`` does not name a supported kind.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedType(f"Unsupported draw type: {value!r}") from exc


# ---------------------------------------------------------------------------
# configuration helpers
# ---------------------------------------------------------------------------


def _require_mapping(config: Any) -> Mapping[str, Any]:
    if not isinstance(config, Mapping):
        raise InvalidInput("Draw configuration must be an object")
    return config


def _require_items(config: Mapping[str, Any], key: str) -> list:
    items = config.get(key)
    if not isinstance(items, list) or not items:
        raise InvalidInput(f"'{key}' must be a non-empty list")
    return items


def _int_option(config: Mapping[str, Any], key: str, default: int) -> int:
    value = config.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"'{key}' must be an integer")
    return value


def _bool_option(config: Mapping[str, Any], key: str, default: bool) -> bool:
    value = config.get(key, default)
    if not isinstance(value, bool):
        raise InvalidInput(f"'{key}' must be a boolean")
    return value


def _count_option(config: Mapping[str, Any]) -> int:
    count = _int_option(config, "count", 1)
    if count < 1:
        raise InvalidInput("'count' must be at least 1")
    if count > MAX_DRAW_COUNT:
        raise InvalidInput(f"'count' must be at most {MAX_DRAW_COUNT}")
    return count


def attempt_ceiling(
    range_size: int,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> int:
    """Return the retry ceiling for no-repeat sampling over ``range_size`` values.

    Retries walk consecutive generator states, whose outputs advance by
    ``a / m`` each step. One :attr:`~LinearCongruentialGenerator.sweep` covers
    every bucket of ranges up to ``sweep - 1`` values; ``range_size`` is added
    on top for wider ranges. ``max_attempts`` is the floor.
    """
    return max(max_attempts, generator.sweep + range_size)


def _sample_unique(
    seed_number: int,
    count: int,
    low: int,
    range_size: int,
    *,
    max_attempts: int,
    generator: LinearCongruentialGenerator,
) -> list[int]:
    ceiling = attempt_ceiling(range_size, max_attempts, generator)
    used: set[int] = set()
    drawn: list[int] = []
    for i in range(count):
        for attempt in range(ceiling):
            number = low + int(generator.random(seed_number + i + attempt) * range_size)
            if number not in used:
                break
        else:
            raise ExhaustedAttempts(
                f"Could not draw a fresh value for position {i + 1} "
                f"within {ceiling} attempts"
            )
        used.add(number)
        drawn.append(number)
    return drawn


# ---------------------------------------------------------------------------
# algorithms
# ---------------------------------------------------------------------------


def draw_names(
    config: Mapping[str, Any],
    seed: str,
    *,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> dict:
    """Pick ``count`` distinct entries of ``items`` without replacement.

    Parameters
    ----------
    config : Mapping[str, Any]
        ``{"items": [...], "count": int = 1}``.
    seed : str
        Seed string of the draw.

    Returns
    -------
    dict
        ``{"winners", "totalItems", "selectedCount"}`` with winners in draw
        order.

    Raises
    ------
    InvalidInput
        If ``items`` is empty or ``count`` exceeds the number of items.
    """
    config = _require_mapping(config)
    items = _require_items(config, "items")
    count = _count_option(config)
    if count > len(items):
        raise InvalidInput("Cannot draw more items than are available")

    seed_number = seed_to_number(seed)
    remaining = list(items)
    winners = []
    for i in range(count):
        index = int(generator.random(seed_number + i) * len(remaining))
        winners.append(remaining.pop(index))

    return {
        "winners": winners,
        "totalItems": len(items),
        "selectedCount": len(winners),
    }


def draw_numbers(
    config: Mapping[str, Any],
    seed: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> dict:
    """Draw ``count`` integers from ``[min, max]``, sorted ascending.

    With ``allowRepeats`` false, a value already drawn is retried with the
    next attempt offset (``seed + i + attempt``) up to :func:`attempt_ceiling`.

    Raises
    ------
    InvalidInput
        If ``min > max``, ``count`` exceeds :data:`MAX_DRAW_COUNT` or, without
        repeats, ``count`` exceeds the range size.
    ExhaustedAttempts
        If a fresh value could not be found within the retry ceiling.
    """
    config = _require_mapping(config)
    low = _int_option(config, "min", 1)
    high = _int_option(config, "max", 100)
    count = _count_option(config)
    allow_repeats = _bool_option(config, "allowRepeats", False)

    if low > high:
        raise InvalidInput("'min' must not be greater than 'max'")
    range_size = high - low + 1
    if not allow_repeats and count > range_size:
        raise InvalidInput("Not enough distinct numbers in the range for 'count'")

    seed_number = seed_to_number(seed)
    if allow_repeats:
        numbers = [
            low + int(generator.random(seed_number + i) * range_size)
            for i in range(count)
        ]
    else:
        numbers = _sample_unique(
            seed_number,
            count,
            low,
            range_size,
            max_attempts=max_attempts,
            generator=generator,
        )

    return {
        "numbers": sorted(numbers),
        "range": {"min": low, "max": high},
        "count": len(numbers),
        "allowRepeats": allow_repeats,
    }


def draw_teams(
    config: Mapping[str, Any],
    seed: str,
    *,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> dict:
    """Shuffle ``players`` and split them into ``teamCount`` teams.

    Balanced splits deal players round-robin; unbalanced splits cut
    contiguous chunks of ``len(players) // teamCount`` and give the remainder
    to the last team.

    Raises
    ------
    InvalidInput
        If ``players`` is empty, ``teamCount < 2`` or ``teamCount`` exceeds
        the number of players.
    """
    config = _require_mapping(config)
    players = _require_items(config, "players")
    team_count = _int_option(config, "teamCount", 2)
    balance = _bool_option(config, "balanceTeams", True)

    if team_count < 2:
        raise InvalidInput("At least 2 teams are required")
    if team_count > len(players):
        raise InvalidInput("'teamCount' cannot exceed the number of players")

    shuffled = shuffle(players, seed_to_number(seed), generator=generator)
    teams = [
        {"name": f"Team {number}", "number": number, "players": []}
        for number in range(1, team_count + 1)
    ]

    if balance:
        for index, player in enumerate(shuffled):
            teams[index % team_count]["players"].append(player)
    else:
        per_team = len(players) // team_count
        for index, team in enumerate(teams):
            start = index * per_team
            stop = len(shuffled) if index == team_count - 1 else start + per_team
            team["players"].extend(shuffled[start:stop])

    return {
        "teams": teams,
        "totalPlayers": len(players),
        "teamCount": team_count,
        "balanceTeams": balance,
        "averagePlayersPerTeam": math.floor(len(players) / team_count * 10 + 0.5) / 10,
    }


def draw_order(
    config: Mapping[str, Any],
    seed: str,
    *,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> dict:
    """Return a full seeded permutation of ``items`` as 1-indexed positions."""
    config = _require_mapping(config)
    items = _require_items(config, "items")
    shuffled = shuffle(items, seed_to_number(seed), generator=generator)
    return {
        "order": [
            {"position": position, "item": item}
            for position, item in enumerate(shuffled, start=1)
        ],
        "totalItems": len(items),
    }


def draw_bingo(
    config: Mapping[str, Any],
    seed: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
) -> dict:
    """Call ``count`` distinct bingo balls from a 75- or 90-ball set.

    75-ball calls carry the column letter ``B``/``I``/``N``/``G``/``O`` of
    ``(n - 1) // 15``. Calls are sorted ascending by number.

    Raises
    ------
    InvalidInput
        For an unknown ``type`` or a ``count`` larger than the ball set.
    ExhaustedAttempts
        If a fresh ball could not be found within the retry ceiling.
    """
    config = _require_mapping(config)
    raw_type = config.get("type", "75")
    bingo_type = raw_type if isinstance(raw_type, str) else None
    if isinstance(raw_type, int) and not isinstance(raw_type, bool):
        bingo_type = str(raw_type)
    if bingo_type not in BINGO_RANGES:
        raise InvalidInput("Bingo 'type' must be '75' or '90'")
    count = _count_option(config)
    highest = BINGO_RANGES[bingo_type]
    if count > highest:
        raise InvalidInput("Cannot call more balls than the set contains")

    balls = _sample_unique(
        seed_to_number(seed),
        count,
        1,
        highest,
        max_attempts=max_attempts,
        generator=generator,
    )

    calls = []
    for number in sorted(balls):
        if bingo_type == "75":
            letter = BINGO_LETTERS[min((number - 1) // 15, len(BINGO_LETTERS) - 1)]
            calls.append({"number": number, "letter": letter, "display": f"{letter}{number}"})
        else:
            calls.append({"number": number, "display": str(number)})

    return {
        "numbers": calls,
        "type": bingo_type,
        "count": len(calls),
        "range": {"min": 1, "max": highest},
    }


# ---------------------------------------------------------------------------
# registry
# ---------------------------------------------------------------------------

Drawer = Callable[..., dict]


@dataclass(frozen=True)
class DrawAlgorithm:
    """Definition of a draw algorithm.

    Attributes
    ----------
    kind : DrawKind
        Kind of draw the algorithm implements; also its registry key.
    drawer : Drawer
        Pure function ``(config, seed, *, generator) -> dict``. Drawers that
        retry for fresh values also take ``max_attempts``.
    retries : bool
        Whether ``drawer`` accepts ``max_attempts``.
    description : Optional[str]
        Human-readable summary of the algorithm.
    version : str
        Version tag recorded in proofs as ``"{kind}-{version}"``.
    """

    kind: DrawKind
    drawer: Drawer
    retries: bool = False
    description: Optional[str] = None
    version: str = ALGORITHM_VERSION

    @property
    def label(self) -> str:
        return f"{self.kind.value}-{self.version}"

    def run(
        self,
        config: Mapping[str, Any],
        seed: str,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
    ) -> dict:
        """Run the algorithm for ``config`` and ``seed``."""
        if self.retries:
            return self.drawer(
                config, seed, max_attempts=max_attempts, generator=generator
            )
        return self.drawer(config, seed, generator=generator)


class AlgorithmRegistry:
    """Mutable registry mapping draw kinds to algorithm definitions."""

    def __init__(self) -> None:
        self._algorithms: Dict[DrawKind, DrawAlgorithm] = {}

    def register(self, algorithm: DrawAlgorithm, *, replace: bool = False) -> None:
        """Register ``algorithm`` under its kind.

        Parameters
        ----------
        algorithm : DrawAlgorithm
            Algorithm to add to the registry.
        replace : bool, default: False
            When ``True`` an existing registration for the same kind is
            overwritten. Otherwise a duplicate raises :class:`ValueError`.
        """
        if not replace and algorithm.kind in self._algorithms:
            raise ValueError(f"Algorithm '{algorithm.kind.value}' is already registered")
        self._algorithms[algorithm.kind] = algorithm

    def get(self, kind: Any) -> DrawAlgorithm:
        """Return the algorithm registered for ``kind``.

        Raises
        ------
        UnsupportedType
            If ``kind`` is not a supported kind or has no registration.
        """
        parsed = DrawKind.parse(kind)
        try:
            return self._algorithms[parsed]
        except KeyError as exc:
            raise UnsupportedType(f"No algorithm registered for '{parsed.value}'") from exc

    def run(
        self,
        kind: Any,
        config: Mapping[str, Any],
        seed: str,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        generator: LinearCongruentialGenerator = DEFAULT_GENERATOR,
    ) -> dict:
        """Run the algorithm registered for ``kind``."""
        return self.get(kind).run(
            config, seed, max_attempts=max_attempts, generator=generator
        )

    def available_algorithms(self) -> Dict[DrawKind, DrawAlgorithm]:
        """Return a copy of the registered algorithms keyed by kind."""
        return dict(self._algorithms)

    def missing_kinds(self) -> list[DrawKind]:
        """Return the kinds that have no registered algorithm."""
        return [kind for kind in DrawKind if kind not in self._algorithms]


DEFAULT_DRAW_REGISTRY = AlgorithmRegistry()
DEFAULT_DRAW_REGISTRY.register(
    DrawAlgorithm(
        kind=DrawKind.NAMES,
        drawer=draw_names,
        description="Sample 'count' items without replacement.",
    )
)
DEFAULT_DRAW_REGISTRY.register(
    DrawAlgorithm(
        kind=DrawKind.NUMBERS,
        drawer=draw_numbers,
        retries=True,
        description="Draw integers from [min, max], optionally without repeats.",
    )
)
DEFAULT_DRAW_REGISTRY.register(
    DrawAlgorithm(
        kind=DrawKind.TEAMS,
        drawer=draw_teams,
        description="Shuffle players and split them into teams.",
    )
)
DEFAULT_DRAW_REGISTRY.register(
    DrawAlgorithm(
        kind=DrawKind.ORDER,
        drawer=draw_order,
        description="Fisher-Yates permutation with 1-indexed positions.",
    )
)
DEFAULT_DRAW_REGISTRY.register(
    DrawAlgorithm(
        kind=DrawKind.BINGO,
        drawer=draw_bingo,
        retries=True,
        description="Call distinct balls from a 75- or 90-ball set.",
    )
)

if DEFAULT_DRAW_REGISTRY.missing_kinds():
    raise RuntimeError(
        "Draw kinds without an algorithm: "
        + ", ".join(kind.value for kind in DEFAULT_DRAW_REGISTRY.missing_kinds())
    )

__all__ = [
    "ALGORITHM_VERSION",
    "AlgorithmRegistry",
    "DEFAULT_DRAW_REGISTRY",
    "DEFAULT_MAX_ATTEMPTS",
    "MAX_DRAW_COUNT",
    "DrawAlgorithm",
    "DrawKind",
    "attempt_ceiling",
    "draw_bingo",
    "draw_names",
    "draw_numbers",
    "draw_order",
    "draw_teams",
]
