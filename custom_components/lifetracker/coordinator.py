# File: coordinator.py
"""Coordinator for the LifeTracker integration.

Owns the document store and the managers of one config entry, and provides:
- The explicit save/reload boundary (async_persist / async_reload)
- The per-aggregate in-flight guard: one outstanding mutation per habit,
  challenge or participant; a second request is rejected, not queued
- On-refresh housekeeping: stale streak caches and lazy challenge expiry

There is no polling interval; data only changes through service calls.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .managers import (
    ChallengeManager,
    GamificationManager,
    HabitManager,
    InsightsManager,
    RankingManager,
    StatsManager,
    TrackingManager,
)

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import LifeTrackerStore


class AggregateBusyError(HomeAssistantError):
    """Raised when an aggregate already has a mutation in flight.

    Attributes:
        key: Guard key of the busy aggregate (e.g. "habit:<id>")
    """

    def __init__(self, key: str) -> None:
        """Initialize AggregateBusyError."""
        self.key = key
        super().__init__(const.ERROR_AGGREGATE_BUSY_FMT.format(key))


class LifeTrackerCoordinator(DataUpdateCoordinator):
    """Coordinator for LifeTracker integration."""

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: LifeTrackerStore,
    ) -> None:
        """Initialize the LifeTrackerCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.config_entry = config_entry
        self.store = store
        self._in_flight: set[str] = set()

        self.stats_manager = StatsManager(hass, self)
        self.gamification_manager = GamificationManager(hass, self)
        self.habit_manager = HabitManager(hass, self)
        self.challenge_manager = ChallengeManager(hass, self)
        self.ranking_manager = RankingManager(hass, self)
        self.tracking_manager = TrackingManager(hass, self)
        self.insights_manager = InsightsManager(hass, self)

    @property
    def managers(self) -> tuple[Any, ...]:
        """All managers in setup order."""
        return (
            self.stats_manager,
            self.gamification_manager,
            self.habit_manager,
            self.challenge_manager,
            self.ranking_manager,
            self.tracking_manager,
            self.insights_manager,
        )

    async def async_setup_managers(self) -> None:
        """Run every manager's async_setup (event subscriptions)."""
        for manager in self.managers:
            await manager.async_setup()

    # -------------------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Recompute day-dependent caches and settle expired challenges."""
        try:
            changed = self.habit_manager.refresh_all_streaks()
            changed = self.challenge_manager.evaluate_all_expiry() or changed
        except (KeyError, TypeError, ValueError) as err:
            raise UpdateFailed(f"Error updating LifeTracker data: {err}") from err

        if changed:
            await self.store.async_save()
        return self.store.data

    # -------------------------------------------------------------------------------------
    # In-flight guard
    # -------------------------------------------------------------------------------------

    def is_busy(self, key: str) -> bool:
        """Return True if key has a mutation in flight."""
        return key in self._in_flight

    @contextmanager
    def aggregate_guard(self, *keys: str) -> Iterator[None]:
        """Hold the guard for keys for the duration of the block.

        Raises:
            AggregateBusyError: Any of the keys is already held
        """
        for key in keys:
            if key in self._in_flight:
                const.LOGGER.warning(
                    "WARNING: Rejected concurrent operation on %s", key
                )
                raise AggregateBusyError(key)
        self._in_flight.update(keys)
        try:
            yield
        finally:
            self._in_flight.difference_update(keys)

    # -------------------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------------------

    async def async_persist(self) -> None:
        """Save to persistent storage and notify listeners."""
        await self.store.async_save()
        self.async_set_updated_data(self.store.data)

    async def async_reload(self) -> None:
        """Drop in-memory state and reload it from storage."""
        await self.store.async_reload()
        self.async_set_updated_data(self.store.data)
