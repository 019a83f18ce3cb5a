"""Workflows that connect the draw engine to the draw history store.

The engine itself is pure; these functions add persistence on top of a
caller-supplied SQLAlchemy session. They flush but never commit, so the caller
owns the transaction.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, time, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .config import Settings, load_settings
from .db.utils import as_utc
from .draw import (
    DrawKind,
    DrawOutcome,
    EntropySource,
    LotteryEngine,
    ProofVerifier,
    VerificationResult,
    parse_verification_code,
    verification_code,
)
from .models import DrawList, DrawRecord
from .points import DrawPoints, MAX_STREAK_DAYS, calculate_draw_points, streak_length

logger = logging.getLogger(__name__)

# Config key that receives a saved list's entries, per draw kind.
LIST_ITEMS_KEY = {
    DrawKind.NAMES: "items",
    DrawKind.ORDER: "items",
    DrawKind.TEAMS: "players",
}

_HEX_PREFIX = re.compile(r"^[0-9a-fA-F]{1,8}$")


def build_engine(settings: Optional[Settings] = None) -> LotteryEngine:
    """Create a :class:`LotteryEngine` configured from ``settings``."""
    settings = settings or load_settings()
    return LotteryEngine(
        entropy=EntropySource(platform=settings.platform_tag),
        max_attempts=settings.max_attempts,
    )


def build_verifier(settings: Optional[Settings] = None) -> ProofVerifier:
    """Create a :class:`ProofVerifier` applying the configured staleness policy."""
    settings = settings or load_settings()
    return ProofVerifier(
        max_age=settings.proof_max_age,
        future_tolerance=settings.future_tolerance,
        max_attempts=settings.max_attempts,
    )


def create_draw_list(
    session: Session,
    name: str,
    items: Iterable[str],
    kind: str = "names",
    *,
    is_favorite: bool = False,
) -> DrawList:
    """Validate and persist a reusable list.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session used for persistence.
    name : str
        Display name; trimmed and limited to 50 characters.
    items : Iterable[str]
        Entries; trimmed, non-empty and unique regardless of case.
    kind : str, default: "names"
        Draw kind the list is used with. Must be one that consumes a list.

    Raises
    ------
    ValueError
        If the name, the entries or the kind are invalid.
    """
    draw_kind = DrawKind.parse(kind)
    if draw_kind not in LIST_ITEMS_KEY:
        raise ValueError(f"Lists cannot be used with '{draw_kind.value}' draws")

    draw_list = DrawList(
        name=name,
        items=list(items),
        kind=draw_kind.value,
        is_favorite=is_favorite,
    )
    session.add(draw_list)
    session.flush()
    logger.debug(f"Created draw list {draw_list.id} with {len(draw_list.items)} entries")
    return draw_list


def record_draw(
    session: Session,
    outcome: DrawOutcome,
    input_data: Mapping[str, Any],
    *,
    draw_list: Optional[DrawList] = None,
    points_earned: int = 0,
) -> DrawRecord:
    """Persist a successful draw outcome.

    Raises
    ------
    ValueError
        If ``outcome`` is a failed draw or the list has not been persisted.
    """
    if not outcome.success or outcome.proof is None or outcome.result is None:
        raise ValueError("Only successful draws can be recorded")
    if draw_list is not None and draw_list.id is None:
        raise ValueError("Draw list must be persisted before recording a draw")

    proof = outcome.proof
    record = DrawRecord(
        kind=proof.type,
        input_data=dict(input_data),
        result=outcome.result,
        proof=proof.to_dict(),
        proof_hash=proof.hash,
        verification_code=verification_code(proof),
        points_earned=points_earned,
        list_id=draw_list.id if draw_list is not None else None,
        created_at=outcome.timestamp,
    )
    session.add(record)
    if draw_list is not None:
        draw_list.increment_usage()
    session.flush()
    logger.debug(f"Recorded {proof.type} draw {record.id} as {record.verification_code}")
    return record


def award_draw_points(session: Session, draw_type: Any, moment: datetime) -> DrawPoints:
    """Compute the points for a draw performed at ``moment``, before it is recorded.

    The first-of-day and streak bonuses are derived from the UTC days of the
    draws already in the history.
    """
    moment = as_utc(moment)
    today = moment.date()
    since = datetime.combine(
        today - timedelta(days=MAX_STREAK_DAYS), time.min, tzinfo=timezone.utc
    )
    stmt = select(DrawRecord.created_at).where(
        DrawRecord.created_at >= since, DrawRecord.created_at <= moment
    )
    draw_days = {as_utc(created_at).date() for created_at in session.scalars(stmt)}
    return calculate_draw_points(
        draw_type,
        moment,
        is_first_today=today not in draw_days,
        current_streak=streak_length(draw_days, today),
    )


def run_draw(
    session: Session,
    draw_type: Any,
    config: Optional[Mapping[str, Any]] = None,
    *,
    draw_list: Optional[DrawList] = None,
    engine: Optional[LotteryEngine] = None,
) -> DrawRecord:
    """Perform a draw and persist it with its proof and the points it earned.

    When ``draw_list`` is given and the configuration does not already carry
    entries, the list's entries are used (``items`` for names and order,
    ``players`` for teams). Points follow :func:`award_draw_points`.

    Raises
    ------
    DrawError
        If the engine rejects the draw (``InvalidInput``, ``ExhaustedAttempts``
        or ``UnsupportedType``).
    ValueError
        If the list has not been persisted.
    """
    kind = DrawKind.parse(draw_type)
    draw_config = dict(config or {})
    if draw_list is not None:
        if draw_list.id is None:
            raise ValueError("Draw list must be persisted before running a draw")
        key = LIST_ITEMS_KEY.get(kind)
        if key is not None and key not in draw_config:
            draw_config[key] = list(draw_list.items)

    engine = engine or build_engine()
    outcome = engine.draw(kind, draw_config)
    points = award_draw_points(session, kind, outcome.timestamp)
    return record_draw(
        session,
        outcome,
        draw_config,
        draw_list=draw_list,
        points_earned=points.total,
    )


def get_draw_history(
    session: Session, limit: int = 50, offset: int = 0
) -> list[DrawRecord]:
    """Return recorded draws, newest first."""
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    if offset < 0:
        raise ValueError("offset must be non-negative")
    stmt = (
        select(DrawRecord)
        .order_by(DrawRecord.created_at.desc(), DrawRecord.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(session.scalars(stmt))


def find_draws_by_hash_prefix(
    session: Session, prefix: str, limit: int = 50
) -> list[DrawRecord]:
    """Return recorded draws whose proof hash starts with ``prefix``.

    Raises
    ------
    ValueError
        If ``prefix`` is not 1-8 hexadecimal characters.
    """
    if not isinstance(prefix, str) or not _HEX_PREFIX.match(prefix):
        raise ValueError("Hash prefix must be 1 to 8 hexadecimal characters")
    return DrawRecord.find_by_hash_prefix(session, prefix, limit=limit)


def find_draw_by_code(session: Session, code: str) -> Optional[DrawRecord]:
    """Look up a recorded draw by its ``HHHH-TTTT`` verification code.

    Candidates are narrowed by hash prefix and confirmed by recomputing the
    code from each stored proof.

    Raises
    ------
    ValueError
        If ``code`` is not a well-formed verification code.
    """
    hash_part, time_part = parse_verification_code(code)
    wanted = f"{hash_part.upper()}-{time_part}"
    for record in DrawRecord.find_by_hash_prefix(session, hash_part, limit=1000):
        if verification_code(record.proof) == wanted:
            return record
    return None


def verify_recorded_draw(
    record: DrawRecord, *, verifier: Optional[ProofVerifier] = None
) -> VerificationResult:
    """Verify the proof stored with ``record``."""
    verifier = verifier or build_verifier()
    verdict = verifier.verify(record.proof)
    logger.debug(
        f"Verified draw {record.id}: valid={verdict.valid} reason={verdict.reason}"
    )
    return verdict


def clean_old_history(
    session: Session,
    days_to_keep: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
) -> int:
    """Delete draw records older than ``days_to_keep`` days.

    Parameters
    ----------
    days_to_keep : Optional[int], default: None
        Retention in days; ``FAIRDRAW_HISTORY_DAYS`` (90 by default) when
        omitted.
    now : Optional[datetime], default: None
        Reference time; the current UTC time when omitted.

    Returns
    -------
    int
        Number of deleted records.
    """
    if days_to_keep is None:
        days_to_keep = load_settings().history_days
    if days_to_keep < 0:
        raise ValueError("days_to_keep must be non-negative")
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days_to_keep)
    result = session.execute(
        delete(DrawRecord)
        .where(DrawRecord.created_at < cutoff)
        .execution_options(synchronize_session=False)
    )
    session.flush()
    deleted = result.rowcount or 0
    logger.debug(f"Removed {deleted} draw records older than {days_to_keep} days")
    return deleted


__all__ = [
    "award_draw_points",
    "build_engine",
    "build_verifier",
    "clean_old_history",
    "create_draw_list",
    "find_draw_by_code",
    "find_draws_by_hash_prefix",
    "get_draw_history",
    "record_draw",
    "run_draw",
    "verify_recorded_draw",
]
