"""Display statistics derived from proofs."""

from __future__ import annotations

import math
from typing import Any, Union

from .codec import DRAW_TYPE_NAMES, verification_code
from .proof import ProofLike, as_proof_dict
from .timestamps import parse_timestamp

VERY_LARGE = 10**15


def _percent(part: int, whole: int) -> str:
    return f"{part / whole * 100:.2f}%"


def get_statistics(proof: ProofLike) -> dict[str, Any]:
    """Summarize the outcome of a draw for display."""
    data = as_proof_dict(proof)
    kind = data.get("type")
    result = data.get("result") or {}
    label = DRAW_TYPE_NAMES.get(kind, "Unknown")

    if kind == "names":
        return {
            "type": label,
            "winners": len(result["winners"]),
            "total_options": result["totalItems"],
            "probability": _percent(len(result["winners"]), result["totalItems"]),
        }
    if kind == "numbers":
        low, high = result["range"]["min"], result["range"]["max"]
        return {
            "type": label,
            "numbers": len(result["numbers"]),
            "range": f"{low} - {high}",
            "probability": (
                "N/A (with repeats)"
                if result["allowRepeats"]
                else _percent(len(result["numbers"]), high - low + 1)
            ),
        }
    if kind == "teams":
        return {
            "type": label,
            "teams": len(result["teams"]),
            "players": result["totalPlayers"],
            "balanced": result["balanceTeams"],
        }
    if kind == "order":
        return {
            "type": label,
            "items": result["totalItems"],
            "permutations": math.factorial(result["totalItems"]),
        }
    if kind == "bingo":
        low, high = result["range"]["min"], result["range"]["max"]
        return {
            "type": f"{label} {result['type']}",
            "numbers": len(result["numbers"]),
            "range": f"{low} - {high}",
            "probability": _percent(len(result["numbers"]), high - low + 1),
        }
    return {"type": label}


def _possible_outcomes(kind: str, config: dict) -> tuple[int, int]:
    count = config.get("count", 1)
    if kind == "names":
        return math.perm(len(config.get("items", [])), count), count
    if kind == "numbers":
        span = config.get("max", 100) - config.get("min", 1) + 1
        if config.get("allowRepeats", False):
            return span**count, count
        return math.perm(span, count), count
    if kind == "teams":
        return config.get("teamCount", 2) ** len(config.get("players", [])), 1
    if kind == "order":
        return math.factorial(len(config.get("items", []))), 1
    if kind == "bingo":
        span = 90 if str(config.get("type", "75")) == "90" else 75
        return math.perm(span, count), count
    return 1, 1


def get_security_stats(proof: ProofLike) -> dict[str, Union[int, str]]:
    """Estimate how hard the outcome of the drawn configuration is to guess."""
    data = as_proof_dict(proof)
    total, selected = _possible_outcomes(data.get("type"), data.get("config") or {})
    if total > VERY_LARGE:
        return {
            "total_possibilities": "very large",
            "selected_items": selected,
            "probability": "practically impossible to predict",
        }
    return {
        "total_possibilities": total,
        "selected_items": selected,
        "probability": f"1 in {total}",
    }


def extract_proof_info(proof: ProofLike) -> dict[str, Any]:
    """Collect the fields shown when a proof is displayed."""
    data = as_proof_dict(proof)
    kind = data["type"]
    config = data["config"]
    result = data["result"]
    info: dict[str, Any] = {
        "type": DRAW_TYPE_NAMES.get(kind, "Unknown draw"),
        "date": parse_timestamp(data["timestamp"]),
        "algorithm": data.get("algorithm") or f"{kind}-v1.0",
        "verification_code": verification_code(data),
    }
    if kind == "names":
        info["details"] = {
            "total_items": len(config.get("items", [])),
            "winners": len(result.get("winners", [])),
            "items": config.get("items", [])[:3],
        }
    elif kind == "numbers":
        info["details"] = {
            "range": f"{config.get('min', 1)} - {config.get('max', 100)}",
            "count": config.get("count", 1),
            "allow_repeats": config.get("allowRepeats", False),
            "numbers": result.get("numbers", []),
        }
    elif kind == "teams":
        info["details"] = {
            "total_players": len(config.get("players", [])),
            "team_count": config.get("teamCount", 2),
            "balanced": config.get("balanceTeams", True),
        }
    elif kind == "order":
        info["details"] = {
            "total_items": len(config.get("items", [])),
            "items": config.get("items", [])[:3],
        }
    elif kind == "bingo":
        info["details"] = {
            "type": str(config.get("type", "75")),
            "count": config.get("count", 1),
            "numbers": result.get("numbers", []),
        }
    return info


__all__ = ["extract_proof_info", "get_security_stats", "get_statistics"]
