# File: services.py
"""Defines custom services for the LifeTracker integration.

These services expose habit tracking, discipline challenges, workout
rankings, daily tracking and pattern detection to scripts and automations.
Read-style services return a response; mutations optionally return the
changed record.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.helpers import config_validation as cv

from . import const
from .helpers.service_helpers import get_coordinator, parse_day, resolve_user_id

# --- Service Schemas ---
_USER = {vol.Optional(const.FIELD_USER_ID): cv.string}
_DATE = {vol.Optional(const.FIELD_DATE): cv.string}

CREATE_HABIT_SCHEMA = vol.Schema(
    {
        **_USER,
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_FREQUENCY, default=const.FREQUENCY_DAILY): vol.In(
            const.FREQUENCY_OPTIONS
        ),
        vol.Optional(const.FIELD_DIFFICULTY): vol.In(list(const.DIFFICULTY_XP)),
        vol.Optional(const.FIELD_XP): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional(const.FIELD_CATEGORY): cv.string,
    }
)

HABIT_ID_SCHEMA = vol.Schema({vol.Required(const.FIELD_HABIT_ID): cv.string})

HABIT_COMPLETION_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_HABIT_ID): cv.string, **_DATE}
)

GET_HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
        vol.Optional(const.FIELD_DAYS, default=7): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=31)
        ),
    }
)

USER_SCHEMA = vol.Schema({**_USER})

START_CHALLENGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
        vol.Required(const.FIELD_DURATION): vol.All(
            vol.Coerce(int), vol.In(const.CHALLENGE_DURATIONS)
        ),
        vol.Optional(const.FIELD_START_DATE): cv.string,
    }
)

CHALLENGE_DAY_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_CHALLENGE_ID): cv.string, **_DATE}
)

RECORD_DIFFICULTY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHALLENGE_ID): cv.string,
        vol.Required(const.FIELD_SCORE): vol.Coerce(int),
        **_DATE,
    }
)

EXTEND_CHALLENGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHALLENGE_ID): cv.string,
        vol.Required(const.FIELD_EXTRA_DAYS): vol.Coerce(int),
    }
)

CHALLENGE_ID_SCHEMA = vol.Schema({vol.Required(const.FIELD_CHALLENGE_ID): cv.string})

CREATE_WORKOUT_CHALLENGE_SCHEMA = vol.Schema(
    {
        **_USER,
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Required(const.FIELD_TARGET_DAYS): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=const.CHALLENGE_MAX_DURATION)
        ),
        vol.Optional(const.FIELD_MODALITY): cv.string,
        vol.Optional(const.FIELD_START_DATE): cv.string,
        vol.Optional(const.FIELD_END_DATE): cv.string,
        vol.Optional(const.FIELD_DISPLAY_NAME): cv.string,
    }
)

JOIN_WORKOUT_CHALLENGE_SCHEMA = vol.Schema(
    {
        **_USER,
        vol.Required(const.FIELD_CHALLENGE_ID): cv.string,
        vol.Optional(const.FIELD_DISPLAY_NAME): cv.string,
    }
)

RECORD_CHECK_IN_SCHEMA = vol.Schema(
    {
        **_USER,
        **_DATE,
        vol.Optional(const.FIELD_MOOD): vol.All(vol.Coerce(int), vol.Range(min=1, max=5)),
        vol.Optional(const.FIELD_ENERGY): vol.All(vol.Coerce(int), vol.Range(min=1, max=5)),
        vol.Optional(const.FIELD_PRODUCTIVITY): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=5)
        ),
        vol.Optional(const.FIELD_SLEEP_HOURS): vol.All(
            vol.Coerce(float), vol.Range(min=0, max=24)
        ),
        vol.Optional(const.FIELD_WATER_GLASSES): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional(const.FIELD_WORKOUT, default=False): cv.boolean,
        vol.Optional(const.FIELD_EXPENSES): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional(const.FIELD_NOTES): cv.string,
    }
)

RECORD_WORKOUT_SCHEMA = vol.Schema(
    {
        **_USER,
        **_DATE,
        vol.Optional(const.FIELD_MODALITY): cv.string,
        vol.Optional(const.FIELD_DURATION_MINUTES): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
    }
)

RECORD_FINANCE_ENTRY_SCHEMA = vol.Schema(
    {
        **_USER,
        **_DATE,
        vol.Required(const.FIELD_AMOUNT): vol.Coerce(float),
        vol.Required(const.FIELD_ENTRY_TYPE): vol.In(const.FINANCE_TYPE_OPTIONS),
        vol.Optional(const.FIELD_CATEGORY): cv.string,
    }
)

DETECT_PATTERNS_SCHEMA = vol.Schema({**_USER, **_DATE})

# Metric service fields copied onto the check-in record
_CHECK_IN_FIELDS = (
    const.FIELD_MOOD,
    const.FIELD_ENERGY,
    const.FIELD_PRODUCTIVITY,
    const.FIELD_SLEEP_HOURS,
    const.FIELD_WATER_GLASSES,
    const.FIELD_WORKOUT,
    const.FIELD_EXPENSES,
    const.FIELD_NOTES,
)


def async_setup_services(hass: HomeAssistant) -> None:
    """Register LifeTracker services."""

    # --- Habits ---

    async def handle_create_habit(call: ServiceCall) -> ServiceResponse:
        """Handle creating a habit."""
        coordinator = get_coordinator(hass)
        habit = await coordinator.habit_manager.async_create_habit(
            user_id=resolve_user_id(call),
            name=call.data[const.FIELD_NAME],
            frequency=call.data[const.FIELD_FREQUENCY],
            difficulty=call.data.get(const.FIELD_DIFFICULTY),
            xp=call.data.get(const.FIELD_XP),
            category=call.data.get(const.FIELD_CATEGORY),
        )
        return dict(habit)

    async def handle_delete_habit(call: ServiceCall) -> None:
        """Handle deleting a habit."""
        coordinator = get_coordinator(hass)
        await coordinator.habit_manager.async_delete_habit(call.data[const.FIELD_HABIT_ID])

    async def handle_complete_habit(call: ServiceCall) -> ServiceResponse:
        """Handle marking a habit completed for a day."""
        coordinator = get_coordinator(hass)
        habit = await coordinator.habit_manager.async_complete(
            call.data[const.FIELD_HABIT_ID], parse_day(call.data.get(const.FIELD_DATE))
        )
        return dict(habit)

    async def handle_uncomplete_habit(call: ServiceCall) -> ServiceResponse:
        """Handle clearing a habit completion."""
        coordinator = get_coordinator(hass)
        habit = await coordinator.habit_manager.async_uncomplete(
            call.data[const.FIELD_HABIT_ID], parse_day(call.data.get(const.FIELD_DATE))
        )
        return dict(habit)

    async def handle_toggle_habit(call: ServiceCall) -> ServiceResponse:
        """Handle flipping a habit completion."""
        coordinator = get_coordinator(hass)
        habit = await coordinator.habit_manager.async_toggle(
            call.data[const.FIELD_HABIT_ID], parse_day(call.data.get(const.FIELD_DATE))
        )
        return dict(habit)

    async def handle_get_habit(call: ServiceCall) -> ServiceResponse:
        """Return a habit with its live streak and the last-days strip."""
        coordinator = get_coordinator(hass)
        return coordinator.habit_manager.get_habit_view(
            call.data[const.FIELD_HABIT_ID], call.data[const.FIELD_DAYS]
        )

    async def handle_get_user_stats(call: ServiceCall) -> ServiceResponse:
        """Return XP, level, counters and badge progress for a user."""
        coordinator = get_coordinator(hass)
        user_id = resolve_user_id(call)
        stats = coordinator.stats_manager.get_stats(user_id)
        stats["badge_progress"] = coordinator.gamification_manager.get_badge_progress(
            user_id
        )
        return stats

    # --- Discipline challenges ---

    async def handle_start_challenge(call: ServiceCall) -> ServiceResponse:
        """Handle starting a discipline challenge."""
        coordinator = get_coordinator(hass)
        challenge = await coordinator.challenge_manager.async_start_challenge(
            call.data[const.FIELD_HABIT_ID],
            call.data[const.FIELD_DURATION],
            parse_day(call.data.get(const.FIELD_START_DATE)),
        )
        return dict(challenge)

    async def handle_complete_challenge_day(call: ServiceCall) -> ServiceResponse:
        """Handle completing a challenge day."""
        coordinator = get_coordinator(hass)
        challenge = await coordinator.challenge_manager.async_complete_day(
            call.data[const.FIELD_CHALLENGE_ID],
            parse_day(call.data.get(const.FIELD_DATE)),
        )
        return dict(challenge)

    async def handle_record_challenge_difficulty(call: ServiceCall) -> None:
        """Handle recording how hard a challenge day felt."""
        coordinator = get_coordinator(hass)
        await coordinator.challenge_manager.async_record_difficulty(
            call.data[const.FIELD_CHALLENGE_ID],
            call.data[const.FIELD_SCORE],
            parse_day(call.data.get(const.FIELD_DATE)),
        )

    async def handle_extend_challenge(call: ServiceCall) -> ServiceResponse:
        """Handle extending an active challenge."""
        coordinator = get_coordinator(hass)
        challenge = await coordinator.challenge_manager.async_extend_challenge(
            call.data[const.FIELD_CHALLENGE_ID], call.data[const.FIELD_EXTRA_DAYS]
        )
        return dict(challenge)

    async def handle_get_next_tip(call: ServiceCall) -> ServiceResponse:
        """Return (and mark shown) the tip for the upcoming challenge day."""
        coordinator = get_coordinator(hass)
        tip = await coordinator.challenge_manager.async_get_next_tip(
            call.data[const.FIELD_CHALLENGE_ID]
        )
        return {"tip": dict(tip) if tip else None}

    # --- Workout challenges ---

    async def handle_create_workout_challenge(call: ServiceCall) -> ServiceResponse:
        """Handle creating a workout challenge."""
        coordinator = get_coordinator(hass)
        challenge = await coordinator.ranking_manager.async_create_workout_challenge(
            creator_id=resolve_user_id(call),
            name=call.data[const.FIELD_NAME],
            target_days=call.data[const.FIELD_TARGET_DAYS],
            modality=call.data.get(const.FIELD_MODALITY),
            start_date=parse_day(call.data.get(const.FIELD_START_DATE)),
            end_date=parse_day(call.data.get(const.FIELD_END_DATE), default_today=False),
            display_name=call.data.get(const.FIELD_DISPLAY_NAME),
        )
        return dict(challenge)

    async def handle_join_workout_challenge(call: ServiceCall) -> ServiceResponse:
        """Handle joining a workout challenge."""
        coordinator = get_coordinator(hass)
        participant = await coordinator.ranking_manager.async_join(
            call.data[const.FIELD_CHALLENGE_ID],
            resolve_user_id(call),
            call.data.get(const.FIELD_DISPLAY_NAME),
        )
        return dict(participant)

    async def handle_get_ranking(call: ServiceCall) -> ServiceResponse:
        """Return the ordered leaderboard of a workout challenge."""
        coordinator = get_coordinator(hass)
        ranking = await coordinator.ranking_manager.async_get_ranking(
            call.data[const.FIELD_CHALLENGE_ID]
        )
        return {"ranking": ranking}

    # --- Tracking ---

    async def handle_record_check_in(call: ServiceCall) -> ServiceResponse:
        """Handle recording the daily check-in."""
        coordinator = get_coordinator(hass)
        metrics: dict[str, Any] = {
            field: call.data[field] for field in _CHECK_IN_FIELDS if field in call.data
        }
        check_in = await coordinator.tracking_manager.async_record_check_in(
            resolve_user_id(call), parse_day(call.data.get(const.FIELD_DATE)), **metrics
        )
        return dict(check_in)

    async def handle_record_workout(call: ServiceCall) -> ServiceResponse:
        """Handle recording a workout session."""
        coordinator = get_coordinator(hass)
        workout = await coordinator.tracking_manager.async_record_workout(
            resolve_user_id(call),
            parse_day(call.data.get(const.FIELD_DATE)),
            call.data.get(const.FIELD_MODALITY),
            call.data.get(const.FIELD_DURATION_MINUTES),
        )
        return dict(workout)

    async def handle_record_finance_entry(call: ServiceCall) -> ServiceResponse:
        """Handle recording an income or expense."""
        coordinator = get_coordinator(hass)
        entry = await coordinator.tracking_manager.async_record_finance_entry(
            resolve_user_id(call),
            call.data[const.FIELD_AMOUNT],
            call.data[const.FIELD_ENTRY_TYPE],
            parse_day(call.data.get(const.FIELD_DATE)),
            call.data.get(const.FIELD_CATEGORY),
        )
        return dict(entry)

    async def handle_detect_patterns(call: ServiceCall) -> ServiceResponse:
        """Return the user's detected behavior patterns."""
        coordinator = get_coordinator(hass)
        patterns = coordinator.insights_manager.detect_patterns(
            resolve_user_id(call), parse_day(call.data.get(const.FIELD_DATE))
        )
        return {"patterns": [dict(pattern) for pattern in patterns]}

    # (service, handler, schema, supports_response)
    registrations: list[tuple[str, Any, vol.Schema, SupportsResponse]] = [
        (
            const.SERVICE_CREATE_HABIT,
            handle_create_habit,
            CREATE_HABIT_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_DELETE_HABIT,
            handle_delete_habit,
            HABIT_ID_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_COMPLETE_HABIT,
            handle_complete_habit,
            HABIT_COMPLETION_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_UNCOMPLETE_HABIT,
            handle_uncomplete_habit,
            HABIT_COMPLETION_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_TOGGLE_HABIT,
            handle_toggle_habit,
            HABIT_COMPLETION_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_GET_HABIT,
            handle_get_habit,
            GET_HABIT_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_GET_USER_STATS,
            handle_get_user_stats,
            USER_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_START_CHALLENGE,
            handle_start_challenge,
            START_CHALLENGE_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_COMPLETE_CHALLENGE_DAY,
            handle_complete_challenge_day,
            CHALLENGE_DAY_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_RECORD_CHALLENGE_DIFFICULTY,
            handle_record_challenge_difficulty,
            RECORD_DIFFICULTY_SCHEMA,
            SupportsResponse.NONE,
        ),
        (
            const.SERVICE_EXTEND_CHALLENGE,
            handle_extend_challenge,
            EXTEND_CHALLENGE_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_GET_NEXT_TIP,
            handle_get_next_tip,
            CHALLENGE_ID_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_CREATE_WORKOUT_CHALLENGE,
            handle_create_workout_challenge,
            CREATE_WORKOUT_CHALLENGE_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_JOIN_WORKOUT_CHALLENGE,
            handle_join_workout_challenge,
            JOIN_WORKOUT_CHALLENGE_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_GET_RANKING,
            handle_get_ranking,
            CHALLENGE_ID_SCHEMA,
            SupportsResponse.ONLY,
        ),
        (
            const.SERVICE_RECORD_CHECK_IN,
            handle_record_check_in,
            RECORD_CHECK_IN_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_RECORD_WORKOUT,
            handle_record_workout,
            RECORD_WORKOUT_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_RECORD_FINANCE_ENTRY,
            handle_record_finance_entry,
            RECORD_FINANCE_ENTRY_SCHEMA,
            SupportsResponse.OPTIONAL,
        ),
        (
            const.SERVICE_DETECT_PATTERNS,
            handle_detect_patterns,
            DETECT_PATTERNS_SCHEMA,
            SupportsResponse.ONLY,
        ),
    ]

    for service, handler, schema, supports_response in registrations:
        if hass.services.has_service(const.DOMAIN, service):
            continue
        hass.services.async_register(
            const.DOMAIN,
            service,
            handler,
            schema=schema,
            supports_response=supports_response,
        )

    const.LOGGER.info("INFO: LifeTracker services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister LifeTracker services when unloading the integration."""
    services = [
        const.SERVICE_CREATE_HABIT,
        const.SERVICE_DELETE_HABIT,
        const.SERVICE_COMPLETE_HABIT,
        const.SERVICE_UNCOMPLETE_HABIT,
        const.SERVICE_TOGGLE_HABIT,
        const.SERVICE_GET_HABIT,
        const.SERVICE_GET_USER_STATS,
        const.SERVICE_START_CHALLENGE,
        const.SERVICE_COMPLETE_CHALLENGE_DAY,
        const.SERVICE_RECORD_CHALLENGE_DIFFICULTY,
        const.SERVICE_EXTEND_CHALLENGE,
        const.SERVICE_GET_NEXT_TIP,
        const.SERVICE_CREATE_WORKOUT_CHALLENGE,
        const.SERVICE_JOIN_WORKOUT_CHALLENGE,
        const.SERVICE_GET_RANKING,
        const.SERVICE_RECORD_CHECK_IN,
        const.SERVICE_RECORD_WORKOUT,
        const.SERVICE_RECORD_FINANCE_ENTRY,
        const.SERVICE_DETECT_PATTERNS,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: LifeTracker services have been unregistered")
