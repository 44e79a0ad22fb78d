"""Tests for HabitManager - habit CRUD and the completion workflow.

Runs against the loaded integration with the clock frozen at 2024-03-10.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from datetime import date
from typing import Any

import pytest
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from custom_components.lifetracker import const
from custom_components.lifetracker.coordinator import (
    AggregateBusyError,
    LifeTrackerCoordinator,
)
from custom_components.lifetracker.helpers.event_helpers import get_event_signal
from custom_components.lifetracker.managers.base_manager import guard_key

USER = "ana"


def capture(hass: HomeAssistant, entry_id: str, suffix: str) -> list[dict[str, Any]]:
    """Collect payloads of one instance-scoped signal."""
    events: list[dict[str, Any]] = []

    @callback
    def _collect(payload: dict[str, Any]) -> None:
        events.append(payload)

    async_dispatcher_connect(hass, get_event_signal(entry_id, suffix), _collect)
    return events


class TestHabitCrud:
    """Habit creation and deletion."""

    async def test_create_habit_defaults(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """A new habit starts empty with XP from the default difficulty."""
        habit = await coordinator.habit_manager.async_create_habit(USER, "Read")

        assert habit["completed_dates"] == []
        assert habit["streak"] == 0
        assert habit["frequency"] == const.FREQUENCY_DAILY
        assert habit["xp_per_completion"] == const.DIFFICULTY_XP[const.DEFAULT_DIFFICULTY]
        assert coordinator.store.get(const.DATA_HABITS, habit["id"]) is not None
        # The owner's stats record exists from the start
        assert coordinator.store.get(const.DATA_USER_STATS, USER) is not None

    async def test_create_habit_explicit_xp_and_difficulty(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Explicit XP overrides the difficulty table."""
        hard = await coordinator.habit_manager.async_create_habit(
            USER, "Run", difficulty=const.DIFFICULTY_HARD
        )
        custom = await coordinator.habit_manager.async_create_habit(
            USER, "Stretch", difficulty=const.DIFFICULTY_HARD, xp=7
        )
        assert hard["xp_per_completion"] == 100
        assert custom["xp_per_completion"] == 7

    async def test_create_habit_rejects_bad_frequency(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Unknown frequencies are rejected."""
        with pytest.raises(HomeAssistantError):
            await coordinator.habit_manager.async_create_habit(
                USER, "Read", frequency="hourly"
            )

    async def test_delete_habit_removes_challenges(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Deleting a habit deletes its discipline challenges."""
        habit = await coordinator.habit_manager.async_create_habit(USER, "Read")
        challenge = await coordinator.challenge_manager.async_start_challenge(
            habit["id"], 7
        )

        await coordinator.habit_manager.async_delete_habit(habit["id"])

        assert coordinator.store.get(const.DATA_HABITS, habit["id"]) is None
        assert coordinator.store.get(const.DATA_DISCIPLINE_CHALLENGES, challenge["id"]) is None
        with pytest.raises(HomeAssistantError):
            coordinator.habit_manager.get_habit(habit["id"])


class TestCompletion:
    """Completion, un-completion and toggling."""

    async def test_three_day_run_awards_xp_and_badges(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Three consecutive days give streak 3, XP and the first badges."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(USER, "Read")

        for day in (date(2024, 3, 8), date(2024, 3, 9), date(2024, 3, 10)):
            habit = await manager.async_complete(habit["id"], day)

        assert habit["streak"] == 3
        assert habit["completed_dates"] == ["2024-03-08", "2024-03-09", "2024-03-10"]

        stats = coordinator.stats_manager.get_stats(USER)
        assert stats["total_habits_completed"] == 3
        assert stats["current_streak"] == 3
        assert stats["longest_streak"] == 3
        badge_ids = {badge["id"] for badge in stats["badges"]}
        assert badge_ids == {"first-step", "streak-3"}
        # 3 x 50 per completion + first-step 10 + streak-3 30
        assert stats["xp"] == 190
        assert stats["level"] == 2

    async def test_complete_is_idempotent(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Completing an already completed day changes nothing."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(USER, "Read")
        await manager.async_complete(habit["id"])
        xp_after_first = coordinator.stats_manager.get_stats(USER)["xp"]

        habit = await manager.async_complete(habit["id"])

        assert habit["completed_dates"] == ["2024-03-10"]
        assert coordinator.stats_manager.get_stats(USER)["xp"] == xp_after_first

    async def test_uncomplete_reverses_xp_but_keeps_badges(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Clearing a day subtracts XP and the counter; badges stay."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(USER, "Read")
        await manager.async_complete(habit["id"])

        habit = await manager.async_uncomplete(habit["id"])

        stats = coordinator.stats_manager.get_stats(USER)
        assert habit["completed_dates"] == []
        assert stats["total_habits_completed"] == 0
        # 50 habit XP removed, first-step badge XP (10) kept
        assert stats["xp"] == 10
        assert [badge["id"] for badge in stats["badges"]] == ["first-step"]

    async def test_toggle_flips_state(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Toggle completes then clears the same day."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(USER, "Read")

        habit = await manager.async_toggle(habit["id"], date(2024, 3, 9))
        assert habit["completed_dates"] == ["2024-03-09"]
        habit = await manager.async_toggle(habit["id"], date(2024, 3, 9))
        assert habit["completed_dates"] == []

    async def test_weekly_habit_one_day_per_week(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """A second day in the same Sunday-start week is rejected."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(
            USER, "Long run", frequency=const.FREQUENCY_WEEKLY
        )
        await manager.async_complete(habit["id"], date(2024, 3, 4))

        with pytest.raises(HomeAssistantError):
            await manager.async_complete(habit["id"], date(2024, 3, 6))

        # Next week (starting Sunday 2024-03-10) is fine
        habit = await manager.async_complete(habit["id"], date(2024, 3, 10))
        assert habit["streak"] == 2

    async def test_completion_emits_event(
        self, hass: HomeAssistant, coordinator: LifeTrackerCoordinator
    ) -> None:
        """HABIT_COMPLETED carries the user, habit, date and streak."""
        events = capture(
            hass, coordinator.config_entry.entry_id, const.SIGNAL_SUFFIX_HABIT_COMPLETED
        )
        habit = await coordinator.habit_manager.async_create_habit(USER, "Read")

        await coordinator.habit_manager.async_complete(habit["id"])

        assert events == [
            {"user_id": USER, "habit_id": habit["id"], "date": "2024-03-10", "streak": 1}
        ]

    async def test_concurrent_completion_rejected(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """A second mutation on a busy habit is rejected, not queued."""
        habit = await coordinator.habit_manager.async_create_habit(USER, "Read")

        with coordinator.aggregate_guard(guard_key(const.GUARD_PREFIX_HABIT, habit["id"])):
            with pytest.raises(AggregateBusyError):
                await coordinator.habit_manager.async_complete(habit["id"])

        # The guard is released afterwards
        habit = await coordinator.habit_manager.async_complete(habit["id"])
        assert habit["completed_dates"] == ["2024-03-10"]

    async def test_unknown_habit(self, coordinator: LifeTrackerCoordinator) -> None:
        """Completing a missing habit raises."""
        with pytest.raises(HomeAssistantError):
            await coordinator.habit_manager.async_complete("missing")


class TestStreakUpkeep:
    """Cross-habit streak and view helpers."""

    async def test_user_streak_unions_habits(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Any habit completed on a day keeps the user's daily streak alive."""
        manager = coordinator.habit_manager
        read = await manager.async_create_habit(USER, "Read")
        walk = await manager.async_create_habit(USER, "Walk")

        await manager.async_complete(read["id"], date(2024, 3, 8))
        await manager.async_complete(walk["id"], date(2024, 3, 9))
        await manager.async_complete(read["id"], date(2024, 3, 10))

        assert coordinator.stats_manager.get_stats(USER)["current_streak"] == 3

    async def test_refresh_all_streaks_for_new_day(
        self, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Two days later the cached streaks drop to 0."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(USER, "Read")
        await manager.async_complete(habit["id"], date(2024, 3, 9))
        await manager.async_complete(habit["id"], date(2024, 3, 10))

        assert manager.refresh_all_streaks(date(2024, 3, 12)) is True
        assert manager.get_habit(habit["id"])["streak"] == 0
        stats = coordinator.stats_manager.get_stats(USER)
        assert stats["current_streak"] == 0
        assert stats["longest_streak"] == 2

        # Nothing changes on a second pass
        assert manager.refresh_all_streaks(date(2024, 3, 12)) is False

    async def test_habit_view(self, coordinator: LifeTrackerCoordinator) -> None:
        """The view carries the last-7-days strip and eligibility."""
        manager = coordinator.habit_manager
        habit = await manager.async_create_habit(USER, "Read")
        await manager.async_complete(habit["id"], date(2024, 3, 9))

        view = manager.get_habit_view(habit["id"])

        assert view["streak"] == 1
        assert view["can_complete_today"] is True
        assert len(view["last_days"]) == 7
        assert view["last_days"][-1]["is_today"] is True
        assert view["last_days"][-2]["completed"] is True
