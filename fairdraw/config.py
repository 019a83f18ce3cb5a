"""Environment-driven settings.

Values are read from the process environment after loading a ``.env`` file
from the working directory, if present.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .db.utils import resolve_sqlite_url
from .draw.algorithms import DEFAULT_MAX_ATTEMPTS
from .draw.codec import DEFAULT_VERIFY_BASE_URL

# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes
    ----------
    db_url : str
        SQLAlchemy URL of the draw history store (``DB_URL``).
    verify_base_url : str
        Base of verification links (``FAIRDRAW_VERIFY_BASE_URL``).
    platform_tag : str
        Platform tag mixed into seeds (``FAIRDRAW_PLATFORM_TAG``).
    max_attempts : int
        Floor of the no-repeat retry ceiling (``FAIRDRAW_MAX_ATTEMPTS``).
    proof_max_age : Optional[timedelta]
        Retention horizon for verification (``FAIRDRAW_PROOF_MAX_AGE_DAYS``);
        ``None`` disables the staleness check.
    future_tolerance : timedelta
        Allowed clock skew for future-dated proofs
        (``FAIRDRAW_FUTURE_TOLERANCE_SECONDS``).
    history_days : int
        Days of draw history kept by ``clean_old_history``
        (``FAIRDRAW_HISTORY_DAYS``).
    """

    db_url: str
    verify_base_url: str = DEFAULT_VERIFY_BASE_URL
    platform_tag: str = sys.platform
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    proof_max_age: Optional[timedelta] = None
    future_tolerance: timedelta = timedelta(minutes=5)
    history_days: int = 90


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{name}' must be an integer") from exc
    if value < 0:
        raise ValueError(f"Environment variable '{name}' must not be negative")
    return value


def load_settings() -> Settings:
    """Load :class:`Settings` from the environment (and ``.env``)."""
    load_dotenv()
    max_age_days = _int_env("FAIRDRAW_PROOF_MAX_AGE_DAYS", None)
    return Settings(
        db_url=resolve_sqlite_url(os.getenv("DB_URL", "sqlite:///./dev.db"), ROOT_DIR),
        verify_base_url=os.getenv("FAIRDRAW_VERIFY_BASE_URL") or DEFAULT_VERIFY_BASE_URL,
        platform_tag=os.getenv("FAIRDRAW_PLATFORM_TAG") or sys.platform,
        max_attempts=_int_env("FAIRDRAW_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
        proof_max_age=timedelta(days=max_age_days) if max_age_days is not None else None,
        future_tolerance=timedelta(
            seconds=_int_env("FAIRDRAW_FUTURE_TOLERANCE_SECONDS", 300)
        ),
        history_days=_int_env("FAIRDRAW_HISTORY_DAYS", 90),
    )


__all__ = ["ROOT_DIR", "Settings", "load_settings"]
