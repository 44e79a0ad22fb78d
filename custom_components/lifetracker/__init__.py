# File: __init__.py
"""Initialization file for the LifeTracker integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator and its managers.

Key Features:
- Config entry setup and unload support.
- Manager event wiring before the first refresh.
- Storage removal when the entry is deleted.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import LifeTrackerCoordinator
from .services import async_setup_services, async_unload_services
from .store import LifeTrackerStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for LifeTracker entry: %s", entry.entry_id)

    # Must run before anything computes "today"
    const.set_default_timezone(hass)

    store = LifeTrackerStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = LifeTrackerCoordinator(hass, entry, store)
    await coordinator.async_setup_managers()

    try:
        # Settles streak caches and expired challenges for the current day.
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    const.LOGGER.info("INFO: LifeTracker setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading LifeTracker entry: %s", entry.entry_id)

    hass.data[const.DOMAIN].pop(entry.entry_id, None)
    if not hass.data[const.DOMAIN]:
        await async_unload_services(hass)
    return True


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing LifeTracker entry: %s", entry.entry_id)

    # The entry is already unloaded here, so open the store directly.
    store = LifeTrackerStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: LifeTracker entry data cleared: %s", entry.entry_id)
