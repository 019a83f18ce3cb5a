from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta, timezone

from fairdraw.draw import DrawKind, UnsupportedType
from fairdraw.points import (
    BASE_DRAW_POINTS,
    DrawPoints,
    calculate_draw_points,
    streak_length,
)

WEDNESDAY_NOON = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class CalculateDrawPointsTests(unittest.TestCase):
    def test_base_points_per_kind(self) -> None:
        for kind, base in BASE_DRAW_POINTS.items():
            points = calculate_draw_points(kind, WEDNESDAY_NOON)
            self.assertEqual(points, DrawPoints(base=base))
            self.assertEqual(points.total, base)
        self.assertEqual(calculate_draw_points("teams", WEDNESDAY_NOON).base, 15)

    def test_first_draw_and_streak_bonus(self) -> None:
        points = calculate_draw_points(
            DrawKind.NAMES, WEDNESDAY_NOON, is_first_today=True, current_streak=3
        )
        self.assertEqual(points.first_daily, 25)
        self.assertEqual(points.streak, 15)
        self.assertEqual(points.total, 50)

    def test_single_day_streak_earns_nothing(self) -> None:
        points = calculate_draw_points("names", WEDNESDAY_NOON, current_streak=1)
        self.assertEqual(points.streak, 0)

    def test_streak_bonus_is_capped(self) -> None:
        points = calculate_draw_points("names", WEDNESDAY_NOON, current_streak=40)
        self.assertEqual(points.streak, 150)

    def test_weekend_and_lucky_hours(self) -> None:
        saturday_evening = datetime(2024, 5, 4, 20, 0, tzinfo=timezone.utc)
        points = calculate_draw_points("bingo", saturday_evening, is_first_today=True)
        self.assertEqual(points.weekend, 10)
        self.assertEqual(points.lucky, 50)
        self.assertEqual(points.total, 105)

        self.assertEqual(
            calculate_draw_points("bingo", saturday_evening.replace(hour=22)).lucky, 0
        )
        self.assertEqual(
            calculate_draw_points("bingo", saturday_evening.replace(hour=19)).lucky, 50
        )

    def test_moment_is_read_in_utc(self) -> None:
        # Sunday 01:30 in UTC+9 is Saturday 16:30 in UTC.
        tokyo = timezone(timedelta(hours=9))
        points = calculate_draw_points("names", datetime(2024, 5, 5, 1, 30, tzinfo=tokyo))
        self.assertEqual(points.weekend, 10)
        self.assertEqual(points.lucky, 0)

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(UnsupportedType):
            calculate_draw_points("dice", WEDNESDAY_NOON)


class StreakLengthTests(unittest.TestCase):
    def test_today_alone_counts_as_one(self) -> None:
        self.assertEqual(streak_length([], date(2024, 5, 1)), 1)

    def test_counts_back_until_a_gap(self) -> None:
        days = [date(2024, 4, 27), date(2024, 4, 29), date(2024, 4, 30)]
        self.assertEqual(streak_length(days, date(2024, 5, 1)), 3)

    def test_later_days_are_ignored(self) -> None:
        days = [date(2024, 5, 2), date(2024, 5, 3)]
        self.assertEqual(streak_length(days, date(2024, 5, 1)), 1)


if __name__ == "__main__":
    unittest.main()
