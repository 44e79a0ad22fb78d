"""Tests for LifeTracker services.

Services are called through hass.services with blocking=True, the same way
automations and scripts call them.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names
# pylint: disable=unused-argument  # init_integration sets up the entry

from typing import Any

import pytest
import voluptuous as vol
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.lifetracker import const
from custom_components.lifetracker.const import DOMAIN


async def call(
    hass: HomeAssistant, service: str, data: dict[str, Any], response: bool = True
) -> Any:
    """Call a LifeTracker service and return its response."""
    return await hass.services.async_call(
        DOMAIN, service, data, blocking=True, return_response=response
    )


async def test_all_services_registered(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Every service is registered after setup."""
    for service in (
        const.SERVICE_CREATE_HABIT,
        const.SERVICE_COMPLETE_HABIT,
        const.SERVICE_GET_HABIT,
        const.SERVICE_GET_USER_STATS,
        const.SERVICE_START_CHALLENGE,
        const.SERVICE_GET_RANKING,
        const.SERVICE_RECORD_CHECK_IN,
        const.SERVICE_DETECT_PATTERNS,
    ):
        assert hass.services.has_service(DOMAIN, service)


async def test_habit_services_flow(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Create, complete and read stats through services."""
    habit = await call(
        hass,
        const.SERVICE_CREATE_HABIT,
        {"user_id": "ana", "name": "Read", "difficulty": "easy"},
    )
    assert habit["xp_per_completion"] == 25

    completed = await call(
        hass, const.SERVICE_COMPLETE_HABIT, {"habit_id": habit["id"], "date": "2024-03-10"}
    )
    assert completed["completed_dates"] == ["2024-03-10"]
    assert completed["streak"] == 1

    stats = await call(hass, const.SERVICE_GET_USER_STATS, {"user_id": "ana"})
    assert stats["total_habits_completed"] == 1
    assert stats["xp"] == 35  # 25 + first-step badge
    assert stats["level"] == 1
    assert stats["xp_to_next_level"] == 65
    progress = {entry["badge_id"]: entry for entry in stats["badge_progress"]}
    assert progress["first-step"]["earned"] is True
    assert progress["habit-10"]["progress"] == 10.0

    toggled = await call(hass, const.SERVICE_TOGGLE_HABIT, {"habit_id": habit["id"]})
    assert toggled["completed_dates"] == []


async def test_default_user(hass: HomeAssistant, init_integration: MockConfigEntry) -> None:
    """Calls without user_id and without a caller fall back to the default user."""
    habit = await call(hass, const.SERVICE_CREATE_HABIT, {"name": "Walk"})
    assert habit["user_id"] == const.DEFAULT_USER_ID


async def test_challenge_services(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Start a challenge, read its tip, complete a day and extend it."""
    habit = await call(hass, const.SERVICE_CREATE_HABIT, {"user_id": "ana", "name": "Read"})
    challenge = await call(
        hass,
        const.SERVICE_START_CHALLENGE,
        {"habit_id": habit["id"], "duration": "7", "start_date": "2024-03-10"},
    )
    assert challenge["end_date"] == "2024-03-16"

    tip = await call(hass, const.SERVICE_GET_NEXT_TIP, {"challenge_id": challenge["id"]})
    assert tip["tip"]["day"] == 1

    day = await call(
        hass, const.SERVICE_COMPLETE_CHALLENGE_DAY, {"challenge_id": challenge["id"]}
    )
    assert day["completed_days"] == ["2024-03-10"]

    await call(
        hass,
        const.SERVICE_RECORD_CHALLENGE_DIFFICULTY,
        {"challenge_id": challenge["id"], "score": 4},
        response=False,
    )

    extended = await call(
        hass,
        const.SERVICE_EXTEND_CHALLENGE,
        {"challenge_id": challenge["id"], "extra_days": 7},
    )
    assert extended["duration"] == 14
    assert extended["difficulty_map"] == {"2024-03-10": 4}


async def test_invalid_duration_rejected_by_schema(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Durations other than 7/14/21 never reach the manager."""
    habit = await call(hass, const.SERVICE_CREATE_HABIT, {"name": "Read"})
    with pytest.raises((vol.Invalid, HomeAssistantError)):
        await call(
            hass, const.SERVICE_START_CHALLENGE, {"habit_id": habit["id"], "duration": 10}
        )


async def test_workout_ranking_services(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Create a workout challenge, join, record workouts and read the ranking."""
    challenge = await call(
        hass,
        const.SERVICE_CREATE_WORKOUT_CHALLENGE,
        {"user_id": "ana", "name": "Gym", "target_days": 5, "start_date": "2024-03-01"},
    )
    await call(
        hass,
        const.SERVICE_JOIN_WORKOUT_CHALLENGE,
        {"user_id": "bia", "challenge_id": challenge["id"], "display_name": "Bia"},
    )
    for day in ("2024-03-09", "2024-03-10"):
        await call(
            hass, const.SERVICE_RECORD_WORKOUT, {"user_id": "bia", "date": day}
        )

    result = await call(hass, const.SERVICE_GET_RANKING, {"challenge_id": challenge["id"]})
    ranking = result["ranking"]
    assert [(p["user_id"], p["position"]) for p in ranking] == [("bia", 1), ("ana", 2)]
    assert ranking[0]["current_streak"] == 2


async def test_tracking_and_patterns(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Check-ins feed pattern detection."""
    for day in ("2024-03-08", "2024-03-09", "2024-03-10"):
        await call(
            hass,
            const.SERVICE_RECORD_CHECK_IN,
            {"user_id": "ana", "date": day, "mood": 5, "sleep_hours": 8},
        )
    await call(
        hass,
        const.SERVICE_RECORD_FINANCE_ENTRY,
        {"user_id": "ana", "amount": 20, "entry_type": "expense"},
    )

    result = await call(hass, const.SERVICE_DETECT_PATTERNS, {"user_id": "ana"})
    ids = {pattern["id"] for pattern in result["patterns"]}
    assert {"positive-high-mood", "positive-good-sleep"} <= ids


async def test_check_in_mood_out_of_range(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Mood must be 1..5."""
    with pytest.raises((vol.Invalid, HomeAssistantError)):
        await call(hass, const.SERVICE_RECORD_CHECK_IN, {"mood": 9})


async def test_invalid_date_rejected(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Malformed date fields raise a HomeAssistantError."""
    habit = await call(hass, const.SERVICE_CREATE_HABIT, {"name": "Read"})
    with pytest.raises(HomeAssistantError):
        await call(
            hass, const.SERVICE_COMPLETE_HABIT, {"habit_id": habit["id"], "date": "soon"}
        )


async def test_unknown_habit(hass: HomeAssistant, init_integration: MockConfigEntry) -> None:
    """Unknown ids surface as HomeAssistantError."""
    with pytest.raises(HomeAssistantError):
        await call(hass, const.SERVICE_COMPLETE_HABIT, {"habit_id": "missing"})


async def test_get_habit_returns_recent_days(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """get_habit returns the live streak and the recent-days strip."""
    habit = await call(hass, const.SERVICE_CREATE_HABIT, {"user_id": "ana", "name": "Read"})
    for day in ("2024-03-09", "2024-03-10"):
        await call(
            hass, const.SERVICE_COMPLETE_HABIT, {"habit_id": habit["id"], "date": day}
        )

    view = await call(hass, const.SERVICE_GET_HABIT, {"habit_id": habit["id"], "days": 3})

    assert view["streak"] == 2
    assert view["can_complete_today"] is True
    assert view["last_days"] == [
        {"date": "2024-03-08", "completed": False, "is_today": False},
        {"date": "2024-03-09", "completed": True, "is_today": False},
        {"date": "2024-03-10", "completed": True, "is_today": True},
    ]

    default_view = await call(hass, const.SERVICE_GET_HABIT, {"habit_id": habit["id"]})
    assert len(default_view["last_days"]) == 7

    with pytest.raises(HomeAssistantError):
        await call(hass, const.SERVICE_GET_HABIT, {"habit_id": "missing"})
