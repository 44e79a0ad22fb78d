"""Challenge Engine - Discipline challenge state machine.

This engine provides stateless, pure Python functions for:
- Creating a challenge with duration-keyed reward and tip catalogs
- Day completion with full-coverage completion detection
- Lazy expiry (active -> failed once the range has passed uncovered)
- Difficulty journal, reward unlocking, tip delivery
- Extension with day-offset merge of rewards and tips

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Every mutating method returns an updated deep copy and leaves its input
untouched, including when it raises. ChallengeManager persists the result.

States:
    active -> completed   (every day in [start_date, end_date] completed)
    active -> failed      (evaluated after end_date without full coverage)
    active -> active      (day completion, difficulty, rewards, tips, extension)
    completed / failed are terminal.
"""

from __future__ import annotations

from collections.abc import Iterable
import copy
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils
from ..utils.math_utils import calculate_percentage

if TYPE_CHECKING:
    from ..type_defs import ChallengeReward, ChallengeTip, DisciplineChallengeData


class ChallengeValidationError(Exception):
    """Raised when a challenge operation is rejected.

    Attributes:
        reason: Human-readable rejection reason
        value: The offending input value (if any)
    """

    def __init__(self, reason: str, value: Any = None) -> None:
        """Initialize ChallengeValidationError.

        Args:
            reason: Human-readable rejection reason
            value: The offending input value
        """
        self.reason = reason
        self.value = value
        super().__init__(reason if value is None else f"{reason}: {value!r}")


class ChallengeEngine:
    """Pure logic engine for discipline challenges.

    All methods are static - no instance state.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        const.CHALLENGE_STATUS_ACTIVE: [
            const.CHALLENGE_STATUS_ACTIVE,
            const.CHALLENGE_STATUS_COMPLETED,
            const.CHALLENGE_STATUS_FAILED,
        ],
        # Terminal states
        const.CHALLENGE_STATUS_COMPLETED: [],
        const.CHALLENGE_STATUS_FAILED: [],
    }

    @staticmethod
    def can_transition(current_status: str, target_status: str) -> bool:
        """Return True if current_status may move to target_status."""
        return target_status in ChallengeEngine.VALID_TRANSITIONS.get(
            current_status, []
        )

    @staticmethod
    def _transition(challenge: DisciplineChallengeData, target_status: str) -> bool:
        """Move challenge to target_status in place if the table allows it."""
        current = challenge.get(const.DATA_CHALLENGE_STATUS)
        if not ChallengeEngine.can_transition(current, target_status):  # type: ignore[arg-type]
            const.LOGGER.warning(
                "WARNING: Refused challenge %s transition %s -> %s",
                challenge.get(const.DATA_ID),
                current,
                target_status,
            )
            return False
        challenge[const.DATA_CHALLENGE_STATUS] = target_status  # type: ignore[typeddict-item]
        return True

    # =========================================================================
    # CATALOGS
    # =========================================================================

    @staticmethod
    def build_rewards(duration: int) -> list[ChallengeReward]:
        """Generate the reward catalog for a total duration.

        7/14/21 use their own tables. Other durations up to 21 use the
        smallest table that covers them, trimmed to offsets <= duration.
        Longer durations use the 21-day table plus one bonus reward every
        7 days from day 28, with XP of 100 per completed week.
        """
        tables = const.CHALLENGE_REWARD_TABLES
        largest = max(tables)
        if duration in tables:
            base = tables[duration]
        elif duration < largest:
            base = tables[min(size for size in tables if size >= duration)]
        else:
            base = tables[largest]

        rewards: list[ChallengeReward] = [
            {**entry, "unlocked": False}  # type: ignore[typeddict-item]
            for entry in base
            if entry["day"] <= duration
        ]

        interval = const.CHALLENGE_EXTRA_REWARD_INTERVAL
        for day in range(largest + interval, duration + 1, interval):
            rewards.append(
                {
                    "id": f"r-extra-{day}",
                    "day": day,
                    "title": f"{day} Days of Discipline",
                    "description": f"Incredible! You completed {day} days!",
                    "xp": const.CHALLENGE_EXTRA_REWARD_XP_PER_WEEK * (day // interval),
                    "unlocked": False,
                }
            )
        return rewards

    @staticmethod
    def build_tips(duration: int) -> list[ChallengeTip]:
        """Generate the tip catalog for a total duration (offsets <= duration)."""
        return [
            {
                "id": f"tip-{day}",
                "day": day,
                "title": title,
                "content": content,
                "shown": False,
            }
            for day, title, content in const.CHALLENGE_TIP_CATALOG
            if day <= duration
        ]

    @staticmethod
    def _merge_by_day(
        existing: Iterable[dict[str, Any]], generated: Iterable[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Keep existing entries wholesale; add generated entries for new offsets."""
        merged = {entry["day"]: entry for entry in generated}
        for entry in existing:
            merged[entry["day"]] = copy.deepcopy(entry)
        return [merged[day] for day in sorted(merged)]

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @staticmethod
    def create(
        challenge_id: str,
        user_id: str,
        habit_id: str,
        duration: int,
        start_date: date,
        created_at: str | None = None,
    ) -> DisciplineChallengeData:
        """Build a new active challenge.

        Raises:
            ChallengeValidationError: duration is not one of 7, 14, 21
        """
        if duration not in const.CHALLENGE_DURATIONS:
            raise ChallengeValidationError(
                f"Challenge duration must be one of {list(const.CHALLENGE_DURATIONS)}",
                duration,
            )
        end_date = dt_utils.dt_add_days(start_date, duration - 1)
        return {
            "id": challenge_id,
            "user_id": user_id,
            "habit_id": habit_id,
            "duration": duration,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "status": const.CHALLENGE_STATUS_ACTIVE,
            "completed_days": [],
            "difficulty_map": {},
            "rewards": ChallengeEngine.build_rewards(duration),
            "tips": ChallengeEngine.build_tips(duration),
            "created_at": created_at or dt_utils.dt_now_iso(),
            "completed_at": None,
        }

    @staticmethod
    def ensure_no_active(challenges: Iterable[DisciplineChallengeData], habit_id: str) -> None:
        """Reject starting a challenge while one is active for the habit.

        Raises:
            ChallengeValidationError: An active challenge already exists
        """
        for challenge in challenges:
            if (
                challenge.get(const.DATA_CHALLENGE_HABIT_ID) == habit_id
                and challenge.get(const.DATA_CHALLENGE_STATUS)
                == const.CHALLENGE_STATUS_ACTIVE
            ):
                raise ChallengeValidationError(
                    "An active challenge already exists for this habit",
                    challenge.get(const.DATA_ID),
                )

    @staticmethod
    def date_range(challenge: DisciplineChallengeData) -> tuple[date, date] | None:
        """Return (start, end) or None if either bound is malformed."""
        start = dt_utils.dt_parse_date(challenge.get(const.DATA_CHALLENGE_START_DATE))
        end = dt_utils.dt_parse_date(challenge.get(const.DATA_CHALLENGE_END_DATE))
        if start is None or end is None:
            return None
        return start, end

    @staticmethod
    def covers(challenge: DisciplineChallengeData, day: date) -> bool:
        """Return True if day lies within the challenge's date range."""
        bounds = ChallengeEngine.date_range(challenge)
        return bounds is not None and bounds[0] <= day <= bounds[1]

    @staticmethod
    def is_fully_covered(challenge: DisciplineChallengeData) -> bool:
        """Return True if every day of [start_date, end_date] is completed."""
        bounds = ChallengeEngine.date_range(challenge)
        if bounds is None:
            return False
        done = set(
            dt_utils.unique_sorted_dates(
                challenge.get(const.DATA_CHALLENGE_COMPLETED_DAYS, [])
            )
        )
        return all(day in done for day in dt_utils.dt_days_in_range(*bounds))

    @staticmethod
    def mark_day_complete(
        challenge: DisciplineChallengeData, day: date, now_iso: str | None = None
    ) -> DisciplineChallengeData:
        """Add day to completed_days and settle the completion verdict.

        No-op (returns an unchanged copy) if the challenge is not active, the
        day is outside its range, or the day is already completed.
        """
        updated = copy.deepcopy(challenge)
        if not ChallengeEngine.can_transition(
            updated.get(const.DATA_CHALLENGE_STATUS),  # type: ignore[arg-type]
            const.CHALLENGE_STATUS_ACTIVE,
        ):
            return updated
        if not ChallengeEngine.covers(updated, day):
            return updated

        completed = dt_utils.unique_sorted_dates(
            updated.get(const.DATA_CHALLENGE_COMPLETED_DAYS, [])
        )
        if day in completed:
            return updated

        completed.append(day)
        updated[const.DATA_CHALLENGE_COMPLETED_DAYS] = [
            d.isoformat() for d in sorted(completed)
        ]
        if ChallengeEngine.is_fully_covered(updated) and ChallengeEngine._transition(
            updated, const.CHALLENGE_STATUS_COMPLETED
        ):
            updated[const.DATA_CHALLENGE_COMPLETED_AT] = now_iso or dt_utils.dt_now_iso()
        return updated

    @staticmethod
    def evaluate_expiry(
        challenge: DisciplineChallengeData, today: date, now_iso: str | None = None
    ) -> DisciplineChallengeData:
        """Settle an active challenge evaluated strictly after its end date.

        Fully covered ranges complete (stamping completed_at), others fail.
        """
        updated = copy.deepcopy(challenge)
        if updated.get(const.DATA_CHALLENGE_STATUS) != const.CHALLENGE_STATUS_ACTIVE:
            return updated
        bounds = ChallengeEngine.date_range(updated)
        if bounds is None or today <= bounds[1]:
            return updated
        if not ChallengeEngine.is_fully_covered(updated):
            ChallengeEngine._transition(updated, const.CHALLENGE_STATUS_FAILED)
        elif ChallengeEngine._transition(updated, const.CHALLENGE_STATUS_COMPLETED):
            updated[const.DATA_CHALLENGE_COMPLETED_AT] = now_iso or dt_utils.dt_now_iso()
        return updated

    # =========================================================================
    # JOURNAL / REWARDS / TIPS
    # =========================================================================

    @staticmethod
    def record_difficulty(
        challenge: DisciplineChallengeData, day: date, score: int
    ) -> DisciplineChallengeData:
        """Upsert the difficulty score for a day, independent of status.

        Raises:
            ChallengeValidationError: score outside 1..10
        """
        if (
            isinstance(score, bool)
            or not isinstance(score, int)
            or not const.CHALLENGE_DIFFICULTY_SCORE_MIN
            <= score
            <= const.CHALLENGE_DIFFICULTY_SCORE_MAX
        ):
            raise ChallengeValidationError(
                "Difficulty score must be an integer from "
                f"{const.CHALLENGE_DIFFICULTY_SCORE_MIN} to "
                f"{const.CHALLENGE_DIFFICULTY_SCORE_MAX}",
                score,
            )
        updated = copy.deepcopy(challenge)
        journal = dict(updated.get(const.DATA_CHALLENGE_DIFFICULTY_MAP) or {})
        journal[day.isoformat()] = score
        updated[const.DATA_CHALLENGE_DIFFICULTY_MAP] = journal
        return updated

    @staticmethod
    def completed_count(challenge: DisciplineChallengeData) -> int:
        """Number of distinct completed days."""
        return len(
            dt_utils.unique_sorted_dates(
                challenge.get(const.DATA_CHALLENGE_COMPLETED_DAYS, [])
            )
        )

    @staticmethod
    def pending_rewards(challenge: DisciplineChallengeData) -> list[ChallengeReward]:
        """Rewards whose day offset is reached but which are still locked."""
        done = ChallengeEngine.completed_count(challenge)
        return [
            reward
            for reward in challenge.get(const.DATA_CHALLENGE_REWARDS, [])
            if not reward.get(const.DATA_REWARD_UNLOCKED)
            and done >= reward.get(const.DATA_REWARD_DAY, 0)
        ]

    @staticmethod
    def unlock_reward(
        challenge: DisciplineChallengeData, reward_id: str, now_iso: str | None = None
    ) -> tuple[DisciplineChallengeData, int]:
        """Unlock a reward once.

        Returns:
            (updated challenge, XP to grant). XP is 0 when the reward is
            unknown or was already unlocked, so a repeat call grants nothing.
        """
        updated = copy.deepcopy(challenge)
        for reward in updated.get(const.DATA_CHALLENGE_REWARDS, []):
            if reward.get(const.DATA_REWARD_ID) != reward_id:
                continue
            if reward.get(const.DATA_REWARD_UNLOCKED):
                return updated, 0
            reward[const.DATA_REWARD_UNLOCKED] = True
            reward[const.DATA_REWARD_UNLOCKED_AT] = now_iso or dt_utils.dt_now_iso()
            return updated, int(reward.get(const.DATA_REWARD_XP, 0))
        return updated, 0

    @staticmethod
    def next_tip(challenge: DisciplineChallengeData) -> ChallengeTip | None:
        """Return the unshown tip for the day about to be attempted, if any."""
        upcoming = ChallengeEngine.completed_count(challenge) + 1
        for tip in challenge.get(const.DATA_CHALLENGE_TIPS, []):
            if tip.get(const.DATA_TIP_DAY) == upcoming and not tip.get(
                const.DATA_TIP_SHOWN
            ):
                return tip
        return None

    @staticmethod
    def mark_tip_shown(
        challenge: DisciplineChallengeData, tip_id: str
    ) -> DisciplineChallengeData:
        """Set shown=True on a tip. One-way."""
        updated = copy.deepcopy(challenge)
        for tip in updated.get(const.DATA_CHALLENGE_TIPS, []):
            if tip.get(const.DATA_TIP_ID) == tip_id:
                tip[const.DATA_TIP_SHOWN] = True
        return updated

    # =========================================================================
    # EXTENSION
    # =========================================================================

    @staticmethod
    def extend(
        challenge: DisciplineChallengeData, extra_days: int
    ) -> DisciplineChallengeData:
        """Push end_date out by extra_days and regrow the catalogs.

        Existing rewards and tips keep their unlocked/shown state; only new
        day offsets get fresh entries.

        Raises:
            ChallengeValidationError: not active, extra_days <= 0, or the
                resulting duration exceeds 365 days
        """
        status = challenge.get(const.DATA_CHALLENGE_STATUS)
        if status != const.CHALLENGE_STATUS_ACTIVE:
            raise ChallengeValidationError(
                "Only an active challenge can be extended", status
            )
        if isinstance(extra_days, bool) or not isinstance(extra_days, int) or extra_days <= 0:
            raise ChallengeValidationError(
                "Extension must add at least one day", extra_days
            )
        new_duration = int(challenge.get(const.DATA_CHALLENGE_DURATION, 0)) + extra_days
        if new_duration > const.CHALLENGE_MAX_DURATION:
            raise ChallengeValidationError(
                f"Challenge cannot exceed {const.CHALLENGE_MAX_DURATION} days",
                new_duration,
            )
        bounds = ChallengeEngine.date_range(challenge)
        if bounds is None:
            raise ChallengeValidationError(
                "Challenge has no valid date range",
                challenge.get(const.DATA_CHALLENGE_END_DATE),
            )

        updated = copy.deepcopy(challenge)
        updated[const.DATA_CHALLENGE_DURATION] = new_duration
        updated[const.DATA_CHALLENGE_END_DATE] = dt_utils.dt_add_days(
            bounds[1], extra_days
        ).isoformat()
        updated[const.DATA_CHALLENGE_REWARDS] = ChallengeEngine._merge_by_day(
            challenge.get(const.DATA_CHALLENGE_REWARDS, []),
            ChallengeEngine.build_rewards(new_duration),
        )
        updated[const.DATA_CHALLENGE_TIPS] = ChallengeEngine._merge_by_day(
            challenge.get(const.DATA_CHALLENGE_TIPS, []),
            ChallengeEngine.build_tips(new_duration),
        )
        return updated

    # =========================================================================
    # VIEWS
    # =========================================================================

    @staticmethod
    def progress(challenge: DisciplineChallengeData, today: date) -> dict[str, Any]:
        """Summarize completion progress for display."""
        bounds = ChallengeEngine.date_range(challenge)
        duration = int(challenge.get(const.DATA_CHALLENGE_DURATION, 0))
        done = ChallengeEngine.completed_count(challenge)
        days_left = 0
        if bounds is not None and today <= bounds[1]:
            days_left = (bounds[1] - max(today, bounds[0])).days + 1
        return {
            "completed_days": done,
            "duration": duration,
            "percentage": calculate_percentage(done, duration),
            "days_remaining": days_left,
            "status": challenge.get(const.DATA_CHALLENGE_STATUS),
        }
