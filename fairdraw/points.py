"""Points awarded for performing draws."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable

from .db.utils import as_utc
from .draw import DrawKind

BASE_DRAW_POINTS: dict[DrawKind, int] = {
    DrawKind.NAMES: 10,
    DrawKind.NUMBERS: 10,
    DrawKind.TEAMS: 15,
    DrawKind.ORDER: 12,
    DrawKind.BINGO: 20,
}

FIRST_DAILY_DRAW_BONUS = 25
STREAK_BONUS_BASE = 5
MAX_STREAK_DAYS = 30
WEEKEND_BONUS = 10
LUCKY_DRAW_BONUS = 50
LUCKY_HOURS = range(19, 22)


@dataclass(frozen=True)
class DrawPoints:
    """Breakdown of the points earned by one draw.

    Attributes
    ----------
    base : int
        Points for the kind of draw.
    first_daily : int
        Bonus for the first draw of the day.
    streak : int
        Bonus of ``STREAK_BONUS_BASE`` per consecutive day with a draw, for
        streaks longer than one day, capped at ``MAX_STREAK_DAYS`` days.
    weekend : int
        Bonus for draws on Saturday or Sunday.
    lucky : int
        Bonus for draws between 19:00 and 21:59.
    """

    base: int
    first_daily: int = 0
    streak: int = 0
    weekend: int = 0
    lucky: int = 0

    @property
    def total(self) -> int:
        return self.base + self.first_daily + self.streak + self.weekend + self.lucky


def calculate_draw_points(
    kind: Any,
    moment: datetime,
    *,
    is_first_today: bool = False,
    current_streak: int = 0,
) -> DrawPoints:
    """Return the points for a ``kind`` draw performed at ``moment`` (UTC).

    Raises
    ------
    UnsupportedType
        If ``kind`` is not a supported draw kind.
    """
    moment = as_utc(moment)
    return DrawPoints(
        base=BASE_DRAW_POINTS[DrawKind.parse(kind)],
        first_daily=FIRST_DAILY_DRAW_BONUS if is_first_today else 0,
        streak=(
            STREAK_BONUS_BASE * min(current_streak, MAX_STREAK_DAYS)
            if current_streak > 1
            else 0
        ),
        weekend=WEEKEND_BONUS if moment.weekday() >= 5 else 0,
        lucky=LUCKY_DRAW_BONUS if moment.hour in LUCKY_HOURS else 0,
    )


def streak_length(draw_days: Iterable[date], today: date) -> int:
    """Count consecutive days with a draw, ending with ``today``.

    ``today`` always counts, since the streak is computed for a draw being
    performed on it.
    """
    days = set(draw_days)
    days.add(today)
    length = 0
    day = today
    while day in days:
        length += 1
        day -= timedelta(days=1)
    return length


__all__ = [
    "BASE_DRAW_POINTS",
    "DrawPoints",
    "calculate_draw_points",
    "streak_length",
]
