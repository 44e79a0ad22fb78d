"""Streak Engine - Pure logic for habit streaks and completion eligibility.

This engine provides stateless, pure Python functions for:
- Current streak derivation over daily, weekly and monthly periods
- Completion eligibility (one completion per week/month period)
- Completed-date normalization and toggling
- Bounded daily streaks used by workout challenge participants

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
The cached `streak` on a habit record is written by HabitManager.

Streak rule:
    The run is anchored at the reference period when it is completed,
    otherwise at the period before it (a habit not yet done today keeps
    yesterday's run). Each earlier period must also be present. Dates after
    the reference date never count.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import TYPE_CHECKING

from .. import const
from ..utils import dt_utils

if TYPE_CHECKING:
    from ..type_defs import DayStatus


class StreakEngine:
    """Pure logic engine for streak calculation.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.
    """

    @staticmethod
    def streak_of(
        frequency: str,
        completed_dates: Iterable[str | date | None],
        reference_date: date | None = None,
    ) -> int:
        """Return the current streak in periods for a habit.

        Args:
            frequency: FREQUENCY_DAILY, FREQUENCY_WEEKLY or FREQUENCY_MONTHLY
            completed_dates: ISO day strings (malformed entries are skipped)
            reference_date: "Today" for the calculation (default: local today)

        Returns:
            Number of consecutive completed periods (0 when none)

        Examples:
            streak_of("daily", ["2024-01-01", "2024-01-02", "2024-01-03"],
                      date(2024, 1, 3)) → 3
            same dates, reference date(2024, 1, 5) → 0
        """
        reference = reference_date or dt_utils.dt_today_local()

        periods = {
            dt_utils.dt_period_start(day, frequency)
            for day in dt_utils.unique_sorted_dates(completed_dates)
            if day <= reference
        }
        if not periods:
            return 0

        anchor = dt_utils.dt_period_start(reference, frequency)
        if anchor not in periods:
            anchor = dt_utils.dt_previous_period_start(anchor, frequency)

        return dt_utils.trailing_run(
            periods,
            anchor,
            lambda period: dt_utils.dt_previous_period_start(period, frequency),
        )

    @staticmethod
    def can_complete_on(
        frequency: str,
        completed_dates: Iterable[str | date | None],
        day: date,
    ) -> bool:
        """Return True if day may be toggled for this habit.

        Daily habits accept any day (backfill allowed). Weekly and monthly
        habits accept a day only when no other day in its period is already
        completed; the completed day itself stays toggleable.
        """
        if frequency == const.FREQUENCY_DAILY:
            return True

        dates = dt_utils.unique_sorted_dates(completed_dates)
        if day in dates:
            return True
        period = dt_utils.dt_period_start(day, frequency)
        return all(
            dt_utils.dt_period_start(completed, frequency) != period
            for completed in dates
        )

    @staticmethod
    def normalize_dates(completed_dates: Iterable[str | date | None]) -> list[str]:
        """Return completed dates as sorted unique YYYY-MM-DD strings."""
        return [day.isoformat() for day in dt_utils.unique_sorted_dates(completed_dates)]

    @staticmethod
    def toggle_date(
        completed_dates: Iterable[str | date | None], day: date
    ) -> tuple[list[str], bool]:
        """Add or remove day from a completed-date list.

        Returns:
            (new normalized list, True if the day was added / False if removed)
        """
        days = set(dt_utils.unique_sorted_dates(completed_dates))
        if day in days:
            days.discard(day)
            added = False
        else:
            days.add(day)
            added = True
        return [d.isoformat() for d in sorted(days)], added

    @staticmethod
    def bounded_daily_streak(
        dates: Iterable[str | date | None],
        period_start: date,
        period_end: date | None,
        today: date | None = None,
    ) -> int:
        """Daily streak restricted to [period_start, min(today, period_end)].

        The upper bound doubles as the reference date of the daily algorithm.
        """
        reference = today or dt_utils.dt_today_local()
        upper = min(reference, period_end) if period_end else reference
        in_range = [
            day
            for day in dt_utils.unique_sorted_dates(dates)
            if period_start <= day <= upper
        ]
        return StreakEngine.streak_of(const.FREQUENCY_DAILY, in_range, upper)

    @staticmethod
    def last_n_days(
        completed_dates: Iterable[str | date | None],
        n: int = 7,
        today: date | None = None,
    ) -> list[DayStatus]:
        """Build the last-N-days strip shown on habit cards, oldest first."""
        reference = today or dt_utils.dt_today_local()
        done = set(dt_utils.unique_sorted_dates(completed_dates))
        return [
            {
                "date": day.isoformat(),
                "completed": day in done,
                "is_today": dt_utils.dt_is_today(day, reference),
            }
            for day in dt_utils.dt_last_n_days(n, reference)
        ]
