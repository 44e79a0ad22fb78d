"""Tests for ChallengeManager - discipline challenges on top of habits.

The clock is frozen at 2024-03-10, so a 7-day challenge starting 2024-03-04
ends today.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from datetime import date
from typing import Any

import pytest
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from custom_components.lifetracker import const
from custom_components.lifetracker.coordinator import LifeTrackerCoordinator
from custom_components.lifetracker.helpers.event_helpers import get_event_signal
from custom_components.lifetracker.managers.base_manager import guard_key
from custom_components.lifetracker.utils import dt_utils

USER = "ana"
START = date(2024, 3, 4)


@pytest.fixture
async def habit(coordinator: LifeTrackerCoordinator) -> dict[str, Any]:
    """A daily habit worth 10 XP per completion."""
    return await coordinator.habit_manager.async_create_habit(USER, "Meditate", xp=10)


class TestStart:
    """Starting challenges."""

    async def test_start_builds_catalogs(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """A 7-day challenge gets its rewards and tips."""
        challenge = await coordinator.challenge_manager.async_start_challenge(
            habit["id"], 7, START
        )
        assert challenge["status"] == const.CHALLENGE_STATUS_ACTIVE
        assert challenge["end_date"] == "2024-03-10"
        assert [r["id"] for r in challenge["rewards"]] == ["r1", "r2"]
        assert len(challenge["tips"]) == 7

    async def test_one_active_per_habit(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """A second active challenge for the habit is rejected."""
        await coordinator.challenge_manager.async_start_challenge(habit["id"], 7)
        with pytest.raises(HomeAssistantError):
            await coordinator.challenge_manager.async_start_challenge(habit["id"], 14)

    async def test_expired_challenge_does_not_block(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """An elapsed challenge fails lazily and a new one can start."""
        manager = coordinator.challenge_manager
        old = await manager.async_start_challenge(habit["id"], 7, date(2024, 2, 1))

        new = await manager.async_start_challenge(habit["id"], 7)

        assert new["id"] != old["id"]
        stored = coordinator.store.get(const.DATA_DISCIPLINE_CHALLENGES, old["id"])
        assert stored is not None
        assert stored["status"] == const.CHALLENGE_STATUS_FAILED

    async def test_invalid_duration(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """Durations other than 7/14/21 are rejected."""
        with pytest.raises(HomeAssistantError):
            await coordinator.challenge_manager.async_start_challenge(habit["id"], 10)


class TestDayCompletion:
    """Day completion and rewards."""

    async def test_habit_completion_drives_challenge(
        self,
        hass: HomeAssistant,
        coordinator: LifeTrackerCoordinator,
        habit: dict[str, Any],
    ) -> None:
        """Completing the habit every day completes the challenge and its rewards."""
        completed: list[dict[str, Any]] = []

        @callback
        def _on_completed(payload: dict[str, Any]) -> None:
            completed.append(payload)

        async_dispatcher_connect(
            hass,
            get_event_signal(
                coordinator.config_entry.entry_id,
                const.SIGNAL_SUFFIX_CHALLENGE_COMPLETED,
            ),
            _on_completed,
        )

        challenge = await coordinator.challenge_manager.async_start_challenge(
            habit["id"], 7, START
        )
        xp_before = coordinator.stats_manager.get_stats(USER)["xp"]

        for offset in range(7):
            await coordinator.habit_manager.async_complete(
                habit["id"], dt_utils.dt_add_days(START, offset)
            )

        stored = coordinator.store.get(const.DATA_DISCIPLINE_CHALLENGES, challenge["id"])
        assert stored is not None
        assert stored["status"] == const.CHALLENGE_STATUS_COMPLETED
        assert stored["completed_at"] is not None
        assert all(reward["unlocked"] for reward in stored["rewards"])
        assert len(completed) == 1
        assert completed[0]["challenge_id"] == challenge["id"]

        # 7 x 10 habit XP + 50 + 150 reward XP + badges (first-step 10,
        # streak-3 30, streak-7 70)
        xp_after = coordinator.stats_manager.get_stats(USER)["xp"]
        assert xp_after - xp_before == 70 + 200 + 110

    async def test_complete_day_directly_is_idempotent(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """The same date counts once and grants reward XP once."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, START)

        for offset in range(3):
            await manager.async_complete_day(
                challenge["id"], dt_utils.dt_add_days(START, offset)
            )
        xp = coordinator.stats_manager.get_stats(USER)["xp"]
        challenge = await manager.async_complete_day(challenge["id"], START)

        assert len(challenge["completed_days"]) == 3
        assert challenge["rewards"][0]["unlocked"] is True
        assert coordinator.stats_manager.get_stats(USER)["xp"] == xp == 50

    async def test_busy_challenge_skips_habit_completion(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """A habit completion while the challenge is busy is not carried over."""
        challenge = await coordinator.challenge_manager.async_start_challenge(
            habit["id"], 7, START
        )

        with coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHALLENGE, challenge["id"])
        ):
            await coordinator.habit_manager.async_complete(habit["id"], START)

        stored = coordinator.store.get(const.DATA_DISCIPLINE_CHALLENGES, challenge["id"])
        assert stored is not None
        assert stored["completed_days"] == []
        assert coordinator.habit_manager.get_habit(habit["id"])["completed_dates"] == [
            "2024-03-04"
        ]

    async def test_partial_challenge_fails_after_end(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """Six of seven days is a failure once the range has passed."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, START)
        for offset in range(6):
            await manager.async_complete_day(
                challenge["id"], dt_utils.dt_add_days(START, offset)
            )

        assert manager.evaluate_all_expiry(date(2024, 3, 11)) is True
        stored = coordinator.store.get(const.DATA_DISCIPLINE_CHALLENGES, challenge["id"])
        assert stored is not None
        assert stored["status"] == const.CHALLENGE_STATUS_FAILED


class TestJournalTipsRewards:
    """Difficulty, tips, explicit reward unlock and extension."""

    async def test_record_difficulty(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """Scores upsert per day and must be 1..10."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, START)

        challenge = await manager.async_record_difficulty(challenge["id"], 6)
        challenge = await manager.async_record_difficulty(challenge["id"], 3)
        assert challenge["difficulty_map"] == {"2024-03-10": 3}

        with pytest.raises(HomeAssistantError):
            await manager.async_record_difficulty(challenge["id"], 11)

    async def test_next_tip_marks_shown(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """The first tip is returned once."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, START)

        tip = await manager.async_get_next_tip(challenge["id"])
        assert tip is not None
        assert tip["day"] == 1
        assert await manager.async_get_next_tip(challenge["id"]) is None

    async def test_unlock_reward_rules(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """Unknown or unreached rewards raise; unlocked ones grant nothing."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, START)

        with pytest.raises(HomeAssistantError):
            await manager.async_unlock_reward(challenge["id"], "r9")
        with pytest.raises(HomeAssistantError):
            await manager.async_unlock_reward(challenge["id"], "r1")

        for offset in range(3):
            await manager.async_complete_day(
                challenge["id"], dt_utils.dt_add_days(START, offset)
            )
        _, xp = await manager.async_unlock_reward(challenge["id"], "r1")
        assert xp == 0

    async def test_extend(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """Extension pushes the end date and adds reward offsets."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, START)

        extended = await manager.async_extend_challenge(challenge["id"], 7)

        assert extended["duration"] == 14
        assert extended["end_date"] == "2024-03-17"
        assert [r["day"] for r in extended["rewards"]] == [3, 7, 14]

    async def test_extend_expired_challenge_rejected(
        self, coordinator: LifeTrackerCoordinator, habit: dict[str, Any]
    ) -> None:
        """An elapsed challenge fails first and cannot be extended."""
        manager = coordinator.challenge_manager
        challenge = await manager.async_start_challenge(habit["id"], 7, date(2024, 2, 1))

        with pytest.raises(HomeAssistantError):
            await manager.async_extend_challenge(challenge["id"], 7)

        view = await manager.async_get_challenge(challenge["id"])
        assert view["status"] == const.CHALLENGE_STATUS_FAILED
        assert view["progress"]["days_remaining"] == 0
