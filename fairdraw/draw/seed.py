"""Seed derivation for draws."""

from __future__ import annotations

import base64
import re
import secrets
import string
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from .digest import canonical_json, hex_digest, signed_digest
from .timestamps import timestamp_millis, utcnow

SEED_LENGTH = 32
TOKEN_LENGTH = 8
BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def random_token(length: int = TOKEN_LENGTH) -> str:
    """Return ``length`` random base62 characters."""
    return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class EntropySource:
    """Clock and weak randomness mixed into every seed.

    Attributes
    ----------
    clock : Callable[[], datetime]
        Returns the current time. Also used by the engine for the proof
        timestamp.
    token_factory : Callable[[], str]
        Returns a short random token.
    platform : str
        Tag identifying the platform that ran the draw.
    """

    clock: Callable[[], datetime] = utcnow
    token_factory: Callable[[], str] = random_token
    platform: str = field(default=sys.platform)


class SeedDeriver:
    """Turns a draw configuration and entropy into an opaque seed string."""

    def __init__(self, entropy: Optional[EntropySource] = None) -> None:
        self.entropy = entropy or EntropySource()

    def derive(
        self, config: Mapping[str, Any], *, moment: Optional[datetime] = None
    ) -> str:
        """Derive a printable seed of :data:`SEED_LENGTH` alphanumeric characters.

        The token and a digest of the configuration lead the seed material so
        that they survive truncation; the seed is an identifier, not an
        entropy store.

        Parameters
        ----------
        config : Mapping[str, Any]
            JSON-serializable draw configuration.
        moment : Optional[datetime], default: None
            Time of the draw. Read from the entropy clock when omitted.
        """
        moment = moment or self.entropy.clock()
        config_json = canonical_json(dict(config))
        material = "-".join(
            [
                self.entropy.token_factory(),
                hex_digest(config_json),
                str(timestamp_millis(moment)),
                self.entropy.platform,
                config_json,
            ]
        )
        encoded = base64.b64encode(material.encode("utf-8")).decode("ascii")
        return _NON_ALPHANUMERIC.sub("", encoded)[:SEED_LENGTH]


def seed_to_number(seed: str) -> int:
    """Convert a seed string to the non-negative integer that feeds the generator.

    The 32-bit digest is read as a signed integer and its absolute value is
    taken, so results lie in ``[0, 2**31]``.
    """
    if not isinstance(seed, str):
        raise TypeError("seed must be a string")
    return abs(signed_digest(seed))


__all__ = [
    "EntropySource",
    "SeedDeriver",
    "SEED_LENGTH",
    "random_token",
    "seed_to_number",
]
