# File: config_flow.py
"""Single-step config flow for the LifeTracker integration.

Only one LifeTracker instance may exist; all users share its storage.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries

from . import const


class LifeTrackerConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for LifeTracker."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Pick the default habit difficulty and create the entry."""

        # Check if there's an existing LifeTracker entry
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            return self.async_create_entry(
                title=const.LIFETRACKER_TITLE,
                data={
                    const.CONF_DEFAULT_DIFFICULTY: user_input.get(
                        const.CONF_DEFAULT_DIFFICULTY, const.DEFAULT_DIFFICULTY
                    )
                },
            )

        schema = vol.Schema(
            {
                vol.Optional(
                    const.CONF_DEFAULT_DIFFICULTY, default=const.DEFAULT_DIFFICULTY
                ): vol.In(list(const.DIFFICULTY_XP)),
            }
        )
        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER, data_schema=schema
        )
