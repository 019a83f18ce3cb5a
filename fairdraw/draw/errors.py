"""Error taxonomy for draws and proof verification."""

from __future__ import annotations


class DrawError(Exception):
    """Base class for failures raised while performing a draw.

    Attributes
    ----------
    code : str
        Stable identifier of the failure kind, suitable for mapping to a
        localized message by the caller.
    """

    code = "DrawError"


class InvalidInput(DrawError, ValueError):
    """The draw configuration violates the algorithm's preconditions."""

    code = "InvalidInput"


class ExhaustedAttempts(DrawError, RuntimeError):
    """No-repeat sampling could not find a fresh value within its ceiling."""

    code = "ExhaustedAttempts"


class UnsupportedType(DrawError, ValueError):
    """The requested draw kind is not one of the supported kinds."""

    code = "UnsupportedType"


class ProofError(Exception):
    """Base class for verification verdicts that reject a proof."""

    code = "ProofError"


class MalformedProof(ProofError):
    """A required proof field is missing or has the wrong type."""

    code = "MalformedProof"


class ResultMismatch(ProofError):
    """Replaying the draw from the proof's seed and config gives another result."""

    code = "ResultMismatch"


class HashMismatch(ProofError):
    """The recorded hash does not match the proof contents."""

    code = "HashMismatch"


class StaleProof(ProofError):
    """The proof timestamp lies outside the accepted time window."""

    code = "StaleProof"


__all__ = [
    "DrawError",
    "InvalidInput",
    "ExhaustedAttempts",
    "UnsupportedType",
    "ProofError",
    "MalformedProof",
    "ResultMismatch",
    "HashMismatch",
    "StaleProof",
]
