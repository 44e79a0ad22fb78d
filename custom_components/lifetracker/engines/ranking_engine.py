"""Ranking Engine - Workout challenge leaderboard logic.

Pure functions for:
- Deterministic leaderboard ordering
- Recomputing a participant's streak/volume from their workout history

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable
import copy
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils
from .streak_engine import StreakEngine

if TYPE_CHECKING:
    from ..type_defs import ChallengeParticipantData


class RankingEngine:
    """Static leaderboard calculations."""

    @staticmethod
    def rank(
        participants: Iterable[ChallengeParticipantData],
    ) -> list[ChallengeParticipantData]:
        """Order participants by current streak, then total workouts, descending.

        sorted() is stable, so exact ties keep their input order.
        """
        return sorted(
            participants,
            key=lambda p: (
                -int(p.get(const.DATA_PARTICIPANT_CURRENT_STREAK, 0) or 0),
                -int(p.get(const.DATA_PARTICIPANT_TOTAL_WORKOUTS, 0) or 0),
            ),
        )

    @staticmethod
    def filter_workouts(
        workouts: Iterable[dict[str, Any]],
        period_start: date,
        period_end: date | None,
        today: date,
        modality: str | None = None,
    ) -> list[date]:
        """Return workout days inside the challenge window, one per workout.

        The window is [period_start, min(today, period_end)]. Workouts with a
        malformed date are skipped.
        """
        upper = min(today, period_end) if period_end else today
        days: list[date] = []
        for workout in workouts:
            if modality and workout.get(const.DATA_WORKOUT_MODALITY) != modality:
                continue
            day = dt_utils.dt_parse_date(workout.get(const.DATA_DATE))
            if day is None:
                const.LOGGER.warning(
                    "WARNING: Skipping workout %s with malformed date %r",
                    workout.get(const.DATA_ID),
                    workout.get(const.DATA_DATE),
                )
                continue
            if period_start <= day <= upper:
                days.append(day)
        return days

    @staticmethod
    def update_participant(
        participant: ChallengeParticipantData,
        workouts: Iterable[dict[str, Any]],
        period_start: date,
        period_end: date | None,
        today: date,
        modality: str | None = None,
    ) -> ChallengeParticipantData:
        """Return participant with streak, total and last workout recomputed.

        The streak follows the daily habit algorithm bounded to the window.
        total_workouts counts filtered sessions, not distinct days.
        """
        days = RankingEngine.filter_workouts(
            workouts, period_start, period_end, today, modality
        )
        updated = copy.deepcopy(participant)
        updated[const.DATA_PARTICIPANT_CURRENT_STREAK] = StreakEngine.bounded_daily_streak(
            days, period_start, period_end, today
        )
        updated[const.DATA_PARTICIPANT_TOTAL_WORKOUTS] = len(days)
        updated[const.DATA_PARTICIPANT_LAST_WORKOUT_DATE] = (
            max(days).isoformat() if days else None
        )
        return updated

    @staticmethod
    def is_target_reached(streak: int, target_days: int) -> bool:
        """Return True when a streak satisfies the challenge target."""
        return target_days > 0 and streak >= target_days
