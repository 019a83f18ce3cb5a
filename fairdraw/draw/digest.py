"""Canonical serialization and the non-cryptographic digest used by proofs.

The same ``digest`` primitive backs two things: converting a seed string to
the integer that feeds the generator, and hashing proof contents. It is a
djb2 variant (``hash = hash * 33 ^ unit``) over the UTF-16 code units of the
text, wrapped to ``width`` bits.

The digest is a tamper *indicator*. It catches accidental or casual edits of
a proof but is not collision resistant; swapping in a cryptographic digest
only requires changing :func:`hash_data`.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

DJB2_INITIAL = 5381
DEFAULT_WIDTH = 32


def canonical_json(data: Any) -> str:
    """Serialize ``data`` as compact JSON with object keys sorted at every level.

    Raises
    ------
    TypeError
        If ``data`` contains values that are not JSON-serializable.
    ValueError
        If ``data`` contains NaN or infinite floats.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def _code_units(text: str) -> Iterator[int]:
    raw = text.encode("utf-16-le", "surrogatepass")
    for index in range(0, len(raw), 2):
        yield raw[index] | (raw[index + 1] << 8)


def digest(text: str, *, width: int = DEFAULT_WIDTH) -> int:
    """Return the unsigned ``width``-bit djb2 digest of ``text``."""
    if width <= 0:
        raise ValueError("width must be a positive number of bits")
    mask = (1 << width) - 1
    value = DJB2_INITIAL & mask
    for unit in _code_units(text):
        value = ((value * 33) ^ unit) & mask
    return value


def signed_digest(text: str, *, width: int = DEFAULT_WIDTH) -> int:
    """Return :func:`digest` reinterpreted as a two's complement integer."""
    value = digest(text, width=width)
    if value >= 1 << (width - 1):
        value -= 1 << width
    return value


def hex_digest(text: str, *, width: int = DEFAULT_WIDTH) -> str:
    """Return :func:`digest` as zero-padded lowercase hex (``width / 4`` chars)."""
    return format(digest(text, width=width), f"0{(width + 3) // 4}x")


def hash_data(data: Any) -> str:
    """Hash structured data independently of object key insertion order.

    Strings are hashed as-is; anything else is hashed through
    :func:`canonical_json`.

    Parameters
    ----------
    data : Any
        JSON-serializable value.

    Returns
    -------
    str
        Eight lowercase hexadecimal characters.
    """
    text = data if isinstance(data, str) else canonical_json(data)
    return hex_digest(text)


__all__ = [
    "canonical_json",
    "digest",
    "signed_digest",
    "hex_digest",
    "hash_data",
]
