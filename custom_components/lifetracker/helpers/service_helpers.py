# File: helpers/service_helpers.py
"""Service call helpers: entry lookup, user resolution and date parsing."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..utils import dt_utils

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant, ServiceCall

    from ..coordinator import LifeTrackerCoordinator


def get_first_lifetracker_entry(hass: HomeAssistant) -> Optional[str]:
    """Retrieve the first LifeTracker config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def get_coordinator(hass: HomeAssistant) -> LifeTrackerCoordinator:
    """Return the coordinator of the loaded entry or raise."""
    entry_id = get_first_lifetracker_entry(hass)
    if not entry_id:
        raise HomeAssistantError(const.ERROR_NO_ENTRY_FOUND)
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def resolve_user_id(call: ServiceCall) -> str:
    """Pick the explicit user_id field, then the caller's HA user, then the default."""
    return (
        call.data.get(const.FIELD_USER_ID)
        or call.context.user_id
        or const.DEFAULT_USER_ID
    )


def parse_day(value: str | date | None, default_today: bool = True) -> date | None:
    """Parse an optional service date field.

    Raises:
        HomeAssistantError: value is present but malformed
    """
    if value is None or value == "":
        return dt_utils.dt_today_local() if default_today else None
    parsed = dt_utils.dt_parse_date(value)
    if parsed is None:
        raise HomeAssistantError(const.ERROR_INVALID_DATE_FMT.format(value))
    return parsed
