"""Habit Manager - Habit records and completion workflow.

This manager handles:
- Habit creation/deletion
- Completion and un-completion (one in-flight operation per habit)
- Streak cache upkeep and the user's cross-habit daily streak
- XP and habits-completed counter updates per completion

Completion flow:
    toggle date -> StreakEngine recomputes streak -> StatsManager XP/counter
    -> STATS_UPDATED (badges re-evaluated) -> active discipline challenge
    covering the date gets the same day -> persist

Un-completion subtracts the habit's XP and decrements the counter (both
clamped at 0). Earned badges are kept.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines.leveling_engine import LevelingEngine
from ..engines.streak_engine import StreakEngine
from ..utils import dt_utils
from .base_manager import BaseManager, guard_key

if TYPE_CHECKING:
    from ..type_defs import HabitData


class HabitManager(BaseManager):
    """Manager for habits and their completion state."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to; completion is driven by service calls."""

    # -------------------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------------------

    def get_habit(self, habit_id: str) -> HabitData:
        """Return a habit or raise HomeAssistantError."""
        habit = self.store.get(const.DATA_HABITS, habit_id)
        if habit is None:
            raise HomeAssistantError(const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id))
        return habit  # type: ignore[return-value]

    def habits_for(self, user_id: str) -> list[HabitData]:
        """Return all habits owned by user_id."""
        return self.store.query(const.DATA_HABITS, const.DATA_USER_ID, user_id)  # type: ignore[return-value]

    async def async_create_habit(
        self,
        user_id: str,
        name: str,
        frequency: str = const.FREQUENCY_DAILY,
        difficulty: str | None = None,
        xp: int | None = None,
        category: str | None = None,
    ) -> HabitData:
        """Create a habit. XP defaults from the difficulty table."""
        if frequency not in const.FREQUENCY_OPTIONS:
            raise HomeAssistantError(const.ERROR_INVALID_FREQUENCY_FMT.format(frequency))
        difficulty = difficulty or self.coordinator.config_entry.data.get(
            const.CONF_DEFAULT_DIFFICULTY, const.DEFAULT_DIFFICULTY
        )
        if difficulty not in const.DIFFICULTY_XP:
            raise HomeAssistantError(const.ERROR_INVALID_DIFFICULTY_FMT.format(difficulty))

        habit: HabitData = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "name": name,
            "frequency": frequency,  # type: ignore[typeddict-item]
            "completed_dates": [],
            "streak": 0,
            "xp_per_completion": int(xp) if xp is not None else LevelingEngine.xp_for_difficulty(difficulty),
            "difficulty": difficulty,
            "category": category,
            "created_at": dt_utils.dt_now_iso(),
        }
        self.store.put(const.DATA_HABITS, habit["id"], habit)
        self.coordinator.stats_manager.get_or_create(user_id)
        const.LOGGER.info("INFO: Created habit '%s' for user %s", name, user_id)
        await self.coordinator.async_persist()
        return habit

    async def async_delete_habit(self, habit_id: str) -> None:
        """Delete a habit and its discipline challenges."""
        habit = self.get_habit(habit_id)
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_HABIT, habit_id),
        ):
            self.store.delete(const.DATA_HABITS, habit_id)
            for challenge in self.store.query(
                const.DATA_DISCIPLINE_CHALLENGES, const.DATA_CHALLENGE_HABIT_ID, habit_id
            ):
                self.store.delete(const.DATA_DISCIPLINE_CHALLENGES, challenge[const.DATA_ID])
            self.refresh_user_streak(habit["user_id"])
            const.LOGGER.info("INFO: Deleted habit '%s'", habit.get(const.DATA_NAME))
            await self.coordinator.async_persist()

    # -------------------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------------------

    async def async_complete(self, habit_id: str, day: date | None = None) -> HabitData:
        """Mark day (default today) completed. No-op if already completed."""
        return await self._async_set_completion(habit_id, day, True)

    async def async_uncomplete(self, habit_id: str, day: date | None = None) -> HabitData:
        """Clear day (default today). No-op if not completed."""
        return await self._async_set_completion(habit_id, day, False)

    async def async_toggle(self, habit_id: str, day: date | None = None) -> HabitData:
        """Flip the completion state of day (default today)."""
        return await self._async_set_completion(habit_id, day, None)

    async def _async_set_completion(
        self, habit_id: str, day: date | None, completed: bool | None
    ) -> HabitData:
        with self.coordinator.aggregate_guard(guard_key(const.GUARD_PREFIX_HABIT, habit_id)):
            habit = self.apply_completion(
                habit_id, day or dt_utils.dt_today_local(), completed
            )
            await self.coordinator.async_persist()
        return habit

    def apply_completion(
        self, habit_id: str, day: date, completed: bool | None
    ) -> HabitData:
        """Apply a completion change in memory (caller persists).

        Args:
            habit_id: Habit to change
            day: Calendar day being marked
            completed: True to complete, False to clear, None to toggle

        Raises:
            HomeAssistantError: unknown habit, or a weekly/monthly period
                already completed on another day
        """
        habit = self.get_habit(habit_id)
        frequency = habit.get(const.DATA_HABIT_FREQUENCY, const.FREQUENCY_DAILY)
        dates = habit.get(const.DATA_HABIT_COMPLETED_DATES, [])
        is_done = day in dt_utils.unique_sorted_dates(dates)
        target = (not is_done) if completed is None else completed
        if target == is_done:
            return habit

        if target and not StreakEngine.can_complete_on(frequency, dates, day):
            raise HomeAssistantError(
                const.ERROR_PERIOD_ALREADY_COMPLETED_FMT.format(
                    habit.get(const.DATA_NAME, habit_id), frequency, day.isoformat()
                )
            )

        new_dates, added = StreakEngine.toggle_date(dates, day)
        habit[const.DATA_HABIT_COMPLETED_DATES] = new_dates
        habit[const.DATA_HABIT_STREAK] = StreakEngine.streak_of(frequency, new_dates)
        self.store.put(const.DATA_HABITS, habit_id, habit)

        user_id = habit[const.DATA_USER_ID]
        xp = int(habit.get(const.DATA_HABIT_XP, 0))
        stats_manager = self.coordinator.stats_manager
        stats_manager.add_xp(user_id, xp if added else -xp, const.XP_SOURCE_HABIT)
        stats_manager.adjust_counter(
            user_id, const.DATA_STATS_TOTAL_HABITS_COMPLETED, 1 if added else -1
        )
        self.refresh_user_streak(user_id)

        const.LOGGER.debug(
            "DEBUG: Habit %s %s on %s, streak now %s",
            habit_id,
            "completed" if added else "cleared",
            day.isoformat(),
            habit[const.DATA_HABIT_STREAK],
        )
        self.emit(
            const.SIGNAL_SUFFIX_HABIT_COMPLETED
            if added
            else const.SIGNAL_SUFFIX_HABIT_UNCOMPLETED,
            user_id=user_id,
            habit_id=habit_id,
            date=day.isoformat(),
            streak=habit[const.DATA_HABIT_STREAK],
        )

        if added:
            self.coordinator.challenge_manager.apply_habit_completion(habit_id, day)
        return habit

    # -------------------------------------------------------------------------------------
    # Streaks
    # -------------------------------------------------------------------------------------

    def refresh_user_streak(self, user_id: str, today: date | None = None) -> int:
        """Recompute the user's daily streak over all of their habits."""
        union: set[str] = set()
        for habit in self.habits_for(user_id):
            union.update(habit.get(const.DATA_HABIT_COMPLETED_DATES, []))
        streak = StreakEngine.streak_of(const.FREQUENCY_DAILY, union, today)
        self.coordinator.stats_manager.set_current_streak(user_id, streak)
        return streak

    def refresh_all_streaks(self, today: date | None = None) -> bool:
        """Recompute every cached streak for a new day. Returns True if any changed."""
        changed = False
        users: set[str] = set()
        for habit in self.store.all(const.DATA_HABITS):
            streak = StreakEngine.streak_of(
                habit.get(const.DATA_HABIT_FREQUENCY, const.FREQUENCY_DAILY),
                habit.get(const.DATA_HABIT_COMPLETED_DATES, []),
                today,
            )
            if streak != habit.get(const.DATA_HABIT_STREAK):
                habit[const.DATA_HABIT_STREAK] = streak
                self.store.put(const.DATA_HABITS, habit[const.DATA_ID], habit)
                changed = True
            users.add(habit[const.DATA_USER_ID])

        for user_id in users:
            before = self.coordinator.stats_manager.get_or_create(user_id).get(
                const.DATA_STATS_CURRENT_STREAK
            )
            if self.refresh_user_streak(user_id, today) != before:
                changed = True
        return changed

    def get_habit_view(self, habit_id: str, days: int = 7) -> dict[str, Any]:
        """Return the habit with a fresh streak and the last-N-days strip."""
        habit = self.get_habit(habit_id)
        today = dt_utils.dt_today_local()
        dates = habit.get(const.DATA_HABIT_COMPLETED_DATES, [])
        frequency = habit.get(const.DATA_HABIT_FREQUENCY, const.FREQUENCY_DAILY)
        view: dict[str, Any] = dict(habit)
        view[const.DATA_HABIT_STREAK] = StreakEngine.streak_of(frequency, dates, today)
        view["can_complete_today"] = StreakEngine.can_complete_on(frequency, dates, today)
        view["last_days"] = StreakEngine.last_n_days(dates, days, today)
        return view
