"""Pattern Engine - Behavioral alert detection over recent history.

This engine provides stateless, pure Python functions that scan a rolling
window of check-ins, habits and finance entries and emit positive/negative
patterns with a severity.

Windows (relative to the reference date R):
- Sample window: [R-14, R] for check-ins and finance entries
- Metric window: check-ins dated >= R-7 for mood/energy/sleep runs
- Presence window: the 7 days R-6..R for habit/check-in presence and
  profitable-day counts

Detectors (negative / positive):
- Mood <= 2 / >= 5 for 3+ consecutive days
- Energy <= 2 / >= 5 for 3+ consecutive days
- Days without any habit completion >= 3 / days with one >= 5
- Expense > 1.5x the sample mean for 3+ consecutive days (needs 3+ expenses)
- Days without a check-in >= 3 / days with one >= 5
- Sleep < 6h / >= 7h for 3+ consecutive days
- Days where income exceeds expenses >= 3 (positive only; needs both kinds)

Severity: count >= 5 is high, otherwise medium. No rule emits low.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies. Nothing
here is persisted; every call recomputes from the supplied records.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils
from ..utils.math_utils import mean, round_value

if TYPE_CHECKING:
    from ..type_defs import DetectedPattern


# Detector signature: (context) -> pattern or None
Detector = Callable[["_DetectionContext"], "DetectedPattern | None"]


def _metric(record: dict[str, Any], field: str) -> float | None:
    """Return a numeric metric, None when absent or not a number."""
    value = record.get(field)
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class PatternEngine:
    """Pure logic engine for pattern detection.

    All methods are static - no instance state.
    """

    @staticmethod
    def severity_of(count: int) -> str:
        """Bucket a consecutive-day or day count into a severity."""
        if count >= const.PATTERN_HIGH_SEVERITY_COUNT:
            return const.PATTERN_SEVERITY_HIGH
        return const.PATTERN_SEVERITY_MEDIUM

    @staticmethod
    def detect(
        check_ins: Iterable[dict[str, Any]],
        habits: Iterable[dict[str, Any]],
        finance_entries: Iterable[dict[str, Any]],
        reference_date: date | None = None,
        detected_at: str | None = None,
    ) -> list[DetectedPattern]:
        """Run every detector, negatives first.

        Args:
            check_ins: Check-in records (date + optional metrics)
            habits: Habit records (completed_dates)
            finance_entries: Income/expense records
            reference_date: "Today" for the windows (default: local today)
            detected_at: Timestamp stamped on each pattern (default: now)

        Returns:
            Detected patterns; empty when nothing qualifies
        """
        today = reference_date or dt_utils.dt_today_local()
        stamp = detected_at or dt_utils.dt_now_iso()

        sample_start = dt_utils.dt_add_days(today, -const.PATTERN_SAMPLE_WINDOW_DAYS)
        recent_check_ins = PatternEngine._in_window(check_ins, sample_start, today)
        recent_finances = PatternEngine._in_window(finance_entries, sample_start, today)
        habit_list = list(habits)

        ctx = _DetectionContext(
            today=today,
            check_ins=recent_check_ins,
            habits=habit_list,
            finances=recent_finances,
            detected_at=stamp,
        )
        PatternEngine._register_detectors()
        patterns: list[DetectedPattern] = []
        for detector in PatternEngine._DETECTORS:
            pattern = detector(ctx)
            if pattern is not None:
                patterns.append(pattern)
        return patterns

    # =========================================================================
    # WINDOW HELPERS
    # =========================================================================

    @staticmethod
    def _in_window(
        records: Iterable[dict[str, Any]], start: date, end: date
    ) -> list[tuple[date, dict[str, Any]]]:
        """Return (day, record) pairs dated within [start, end], oldest first."""
        selected: list[tuple[date, dict[str, Any]]] = []
        for record in records:
            day = dt_utils.dt_parse_date(record.get(const.DATA_DATE))
            if day is None:
                const.LOGGER.warning(
                    "WARNING: Skipping record %s with malformed date %r",
                    record.get(const.DATA_ID),
                    record.get(const.DATA_DATE),
                )
                continue
            if start <= day <= end:
                selected.append((day, record))
        selected.sort(key=lambda pair: pair[0])
        return selected

    @staticmethod
    def _metric_run(
        ctx: _DetectionContext, field: str, predicate: Callable[[float], bool]
    ) -> int:
        """Longest consecutive run of check-ins in the metric window matching predicate."""
        metric_start = dt_utils.dt_add_days(ctx.today, -const.PATTERN_METRIC_WINDOW_DAYS)
        days = []
        for day, record in ctx.check_ins:
            value = _metric(record, field)
            if day >= metric_start and value is not None and predicate(value):
                days.append(day)
        return dt_utils.max_consecutive_run(days)

    @staticmethod
    def _make_pattern(
        ctx: _DetectionContext,
        pattern_id: str,
        pattern_type: str,
        category: str,
        title: str,
        message: str,
        count: int,
        data: dict[str, Any],
    ) -> DetectedPattern:
        return {
            "id": f"{pattern_type}-{pattern_id}",
            "type": pattern_type,  # type: ignore[typeddict-item]
            "category": category,
            "title": title,
            "message": message,
            "severity": PatternEngine.severity_of(count),  # type: ignore[typeddict-item]
            "count": count,
            "detected_at": ctx.detected_at,
            "data": data,
        }

    # =========================================================================
    # NEGATIVE DETECTORS
    # =========================================================================

    @staticmethod
    def _low_mood(ctx: _DetectionContext) -> DetectedPattern | None:
        run = PatternEngine._metric_run(
            ctx, const.DATA_CHECK_IN_MOOD, lambda v: v <= const.PATTERN_LOW_MOOD_MAX
        )
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "low-mood",
            const.PATTERN_TYPE_NEGATIVE,
            const.PATTERN_CATEGORY_MOOD,
            "Low Mood Detected",
            f"You had {run} consecutive days of low mood. "
            "Consider doing things that make you feel good!",
            run,
            {"consecutive_days": run},
        )

    @staticmethod
    def _low_energy(ctx: _DetectionContext) -> DetectedPattern | None:
        run = PatternEngine._metric_run(
            ctx, const.DATA_CHECK_IN_ENERGY, lambda v: v <= const.PATTERN_LOW_ENERGY_MAX
        )
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "low-energy",
            const.PATTERN_TYPE_NEGATIVE,
            const.PATTERN_CATEGORY_ENERGY,
            "Low Energy Detected",
            f"You had {run} consecutive days of low energy. "
            "You may need more rest or a change in routine.",
            run,
            {"consecutive_days": run},
        )

    @staticmethod
    def _no_habits(ctx: _DetectionContext) -> DetectedPattern | None:
        missing = len(ctx.presence_days) - ctx.days_with_habits
        if missing < const.PATTERN_MIN_DAYS_MISSING:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "no-habits",
            const.PATTERN_TYPE_NEGATIVE,
            const.PATTERN_CATEGORY_HABITS,
            "Habits Neglected",
            f"You did not complete any habit on {missing} of the last 7 days. "
            "How about picking them back up?",
            missing,
            {"days_without_habits": missing},
        )

    @staticmethod
    def _high_expenses(ctx: _DetectionContext) -> DetectedPattern | None:
        expenses: list[tuple[date, float]] = []
        for day, record in ctx.finances:
            if record.get(const.DATA_FINANCE_TYPE) != const.FINANCE_TYPE_EXPENSE:
                continue
            amount = _metric(record, const.DATA_FINANCE_AMOUNT)
            if amount is not None:
                expenses.append((day, amount))
        if len(expenses) < const.PATTERN_MIN_EXPENSE_SAMPLES:
            return None
        average = mean([amount for _, amount in expenses])
        high_days = [
            day
            for day, amount in expenses
            if amount > average * const.PATTERN_HIGH_EXPENSE_FACTOR
        ]
        run = dt_utils.max_consecutive_run(high_days)
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "high-expenses",
            const.PATTERN_TYPE_NEGATIVE,
            const.PATTERN_CATEGORY_FINANCES,
            "High Spending",
            f"You had {run} consecutive days of above-average spending. "
            "Consider reviewing your expenses.",
            run,
            {"consecutive_days": run, "average_expense": round_value(average)},
        )

    @staticmethod
    def _missing_check_ins(ctx: _DetectionContext) -> DetectedPattern | None:
        missing = len(ctx.presence_days) - ctx.days_with_check_in
        if missing < const.PATTERN_MIN_DAYS_MISSING:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "no-checkin",
            const.PATTERN_TYPE_NEGATIVE,
            const.PATTERN_CATEGORY_CHECK_IN,
            "Missing Check-ins",
            f"You skipped your check-in on {missing} of the last 7 days. "
            "Keeping a record helps you follow your progress!",
            missing,
            {"days_without_check_in": missing},
        )

    @staticmethod
    def _low_sleep(ctx: _DetectionContext) -> DetectedPattern | None:
        run = PatternEngine._metric_run(
            ctx,
            const.DATA_CHECK_IN_SLEEP_HOURS,
            lambda v: v < const.PATTERN_LOW_SLEEP_BELOW,
        )
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "low-sleep",
            const.PATTERN_TYPE_NEGATIVE,
            const.PATTERN_CATEGORY_SLEEP,
            "Not Enough Sleep",
            f"You had {run} consecutive days with less than 6h of sleep. "
            "Proper rest is essential!",
            run,
            {"consecutive_days": run},
        )

    # =========================================================================
    # POSITIVE DETECTORS
    # =========================================================================

    @staticmethod
    def _high_mood(ctx: _DetectionContext) -> DetectedPattern | None:
        run = PatternEngine._metric_run(
            ctx, const.DATA_CHECK_IN_MOOD, lambda v: v >= const.PATTERN_HIGH_MOOD_MIN
        )
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "high-mood",
            const.PATTERN_TYPE_POSITIVE,
            const.PATTERN_CATEGORY_MOOD,
            "Excellent Mood!",
            f"You had {run} consecutive days of great mood. Keep it up!",
            run,
            {"consecutive_days": run},
        )

    @staticmethod
    def _high_energy(ctx: _DetectionContext) -> DetectedPattern | None:
        run = PatternEngine._metric_run(
            ctx, const.DATA_CHECK_IN_ENERGY, lambda v: v >= const.PATTERN_HIGH_ENERGY_MIN
        )
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "high-energy",
            const.PATTERN_TYPE_POSITIVE,
            const.PATTERN_CATEGORY_ENERGY,
            "Energy Is High!",
            f"You had {run} consecutive days of high energy. Keep the pace!",
            run,
            {"consecutive_days": run},
        )

    @staticmethod
    def _consistent_habits(ctx: _DetectionContext) -> DetectedPattern | None:
        present = ctx.days_with_habits
        if present < const.PATTERN_MIN_DAYS_PRESENT:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "consistent-habits",
            const.PATTERN_TYPE_POSITIVE,
            const.PATTERN_CATEGORY_HABITS,
            "Consistent Habits!",
            f"You completed habits on {present} of the last 7 days. "
            "Keep building your routine!",
            present,
            {"days_with_habits": present},
        )

    @staticmethod
    def _consistent_check_ins(ctx: _DetectionContext) -> DetectedPattern | None:
        present = ctx.days_with_check_in
        if present < const.PATTERN_MIN_DAYS_PRESENT:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "consistent-checkin",
            const.PATTERN_TYPE_POSITIVE,
            const.PATTERN_CATEGORY_CHECK_IN,
            "Consistent Tracking!",
            f"You checked in on {present} of the last 7 days. "
            "That really helps you follow along!",
            present,
            {"days_with_check_in": present},
        )

    @staticmethod
    def _profitable_days(ctx: _DetectionContext) -> DetectedPattern | None:
        income: dict[date, float] = defaultdict(float)
        expense: dict[date, float] = defaultdict(float)
        for day, record in ctx.finances:
            amount = _metric(record, const.DATA_FINANCE_AMOUNT)
            if amount is None:
                continue
            entry_type = record.get(const.DATA_FINANCE_TYPE)
            if entry_type == const.FINANCE_TYPE_INCOME:
                income[day] += amount
            elif entry_type == const.FINANCE_TYPE_EXPENSE:
                expense[day] += amount
        if not income or not expense:
            return None

        profitable = sum(
            1 for day in ctx.presence_days if income.get(day, 0.0) > expense.get(day, 0.0)
        )
        if profitable < const.PATTERN_MIN_PROFITABLE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "savings",
            const.PATTERN_TYPE_POSITIVE,
            const.PATTERN_CATEGORY_FINANCES,
            "Savings in Progress!",
            f"Your income beat your expenses on {profitable} of the last 7 days. "
            "Keep it up!",
            profitable,
            {"profitable_days": profitable},
        )

    @staticmethod
    def _good_sleep(ctx: _DetectionContext) -> DetectedPattern | None:
        run = PatternEngine._metric_run(
            ctx,
            const.DATA_CHECK_IN_SLEEP_HOURS,
            lambda v: v >= const.PATTERN_GOOD_SLEEP_MIN,
        )
        if run < const.PATTERN_MIN_CONSECUTIVE_DAYS:
            return None
        return PatternEngine._make_pattern(
            ctx,
            "good-sleep",
            const.PATTERN_TYPE_POSITIVE,
            const.PATTERN_CATEGORY_SLEEP,
            "Quality Sleep!",
            f"You had {run} consecutive days with 7h+ of sleep. "
            "That makes all the difference!",
            run,
            {"consecutive_days": run},
        )

    # =========================================================================
    # DETECTOR REGISTRY
    # =========================================================================

    # Negative detectors run first; order is the order of the returned list
    _DETECTORS: list[Detector] = []

    @classmethod
    def _register_detectors(cls) -> None:
        """Populate _DETECTORS once. New rules are added here."""
        if cls._DETECTORS:
            return  # Already registered

        cls._DETECTORS = [
            # Negative
            cls._low_mood,
            cls._low_energy,
            cls._no_habits,
            cls._high_expenses,
            cls._missing_check_ins,
            cls._low_sleep,
            # Positive
            cls._high_mood,
            cls._high_energy,
            cls._consistent_habits,
            cls._consistent_check_ins,
            cls._profitable_days,
            cls._good_sleep,
        ]


class _DetectionContext:
    """Pre-filtered inputs shared by every detector in one pass."""

    def __init__(
        self,
        today: date,
        check_ins: list[tuple[date, dict[str, Any]]],
        habits: list[dict[str, Any]],
        finances: list[tuple[date, dict[str, Any]]],
        detected_at: str,
    ) -> None:
        self.today = today
        self.check_ins = check_ins
        self.habits = habits
        self.finances = finances
        self.detected_at = detected_at
        self.presence_days = dt_utils.dt_last_n_days(
            const.PATTERN_PRESENCE_WINDOW_DAYS, today
        )

        habit_days: set[date] = set()
        for habit in habits:
            habit_days.update(
                dt_utils.unique_sorted_dates(
                    habit.get(const.DATA_HABIT_COMPLETED_DATES) or []
                )
            )
        check_in_days = {day for day, _ in check_ins}

        self.days_with_habits = sum(1 for day in self.presence_days if day in habit_days)
        self.days_with_check_in = sum(
            1 for day in self.presence_days if day in check_in_days
        )


