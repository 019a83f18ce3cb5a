"""Short verification codes and shareable text/URLs derived from proofs."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from urllib.parse import quote

from .proof import ProofLike, as_proof_dict
from .timestamps import format_timestamp, parse_timestamp, timestamp_millis

DEFAULT_VERIFY_BASE_URL = "https://fairdraw.app/verify"

DRAW_TYPE_NAMES = {
    "names": "Name Draw",
    "numbers": "Number Draw",
    "teams": "Team Split",
    "order": "Random Order",
    "bingo": "Bingo",
}

_CODE_PATTERN = re.compile(r"^([0-9A-Fa-f]{4})-(\d{4})$")

# Characters left unescaped by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def verification_code(proof: ProofLike) -> str:
    """Return ``HHHH-TTTT``: the first four hash characters upper-cased and the
    last four digits of the draw time in epoch milliseconds.

    The code is a lookup key, not a security token; collisions across a large
    history are possible.
    """
    data = as_proof_dict(proof)
    hash_part = data["hash"][:4].upper()
    time_part = str(timestamp_millis(parse_timestamp(data["timestamp"])))[-4:]
    return f"{hash_part}-{time_part}"


def parse_verification_code(code: str) -> tuple[str, str]:
    """Split a verification code into its lower-cased hash prefix and time suffix.

    Raises
    ------
    ValueError
        If ``code`` is not of the form ``HHHH-TTTT``.
    """
    match = _CODE_PATTERN.match(code.strip()) if isinstance(code, str) else None
    if match is None:
        raise ValueError("Verification code must look like 'ABCD-1234'")
    return match.group(1).lower(), match.group(2)


def to_verification_url(proof: ProofLike, base_url: str = DEFAULT_VERIFY_BASE_URL) -> str:
    """Return ``{base_url}?code=...&proof=...`` with the URL-encoded proof JSON."""
    data = as_proof_dict(proof)
    encoded = quote(
        json.dumps(dict(data), separators=(",", ":"), ensure_ascii=False),
        safe=_URI_COMPONENT_SAFE,
    )
    return f"{base_url}?code={verification_code(data)}&proof={encoded}"


def to_qr_data(proof: ProofLike, base_url: str = DEFAULT_VERIFY_BASE_URL) -> str:
    """Payload for a verification QR code (the verification URL)."""
    return to_verification_url(proof, base_url)


def to_share_text(proof: ProofLike, base_url: str = DEFAULT_VERIFY_BASE_URL) -> str:
    """Return a short plain-text summary of the draw for sharing."""
    data = as_proof_dict(proof)
    drawn_at = parse_timestamp(data["timestamp"])
    lines = [
        DRAW_TYPE_NAMES.get(data["type"], "Draw"),
        f"Date: {format_timestamp(drawn_at)}",
        f"Code: {verification_code(data)}",
        "",
        "Verifiable and transparent draw",
        f"Verify at: {base_url}",
    ]
    return "\n".join(lines)


@dataclass(frozen=True)
class SharePayload:
    text: str
    url: str
    code: str


def format_for_sharing(
    proof: ProofLike, base_url: str = DEFAULT_VERIFY_BASE_URL
) -> SharePayload:
    return SharePayload(
        text=to_share_text(proof, base_url),
        url=to_verification_url(proof, base_url),
        code=verification_code(proof),
    )


__all__ = [
    "DEFAULT_VERIFY_BASE_URL",
    "DRAW_TYPE_NAMES",
    "SharePayload",
    "format_for_sharing",
    "parse_verification_code",
    "to_qr_data",
    "to_share_text",
    "to_verification_url",
    "verification_code",
]
