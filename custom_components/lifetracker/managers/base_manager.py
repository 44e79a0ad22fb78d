"""Shared plumbing for LifeTracker managers: entry-scoped signals and guard keys."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..helpers.event_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import LifeTrackerCoordinator
    from ..store import LifeTrackerStore


def guard_key(prefix: str, aggregate_id: str) -> str:
    """Return the in-flight guard key for one aggregate ("habit:<id>")."""
    return f"{prefix}:{aggregate_id}"


class BaseManager(ABC):
    """Base for the habit, challenge, ranking, tracking and stats managers.

    Managers never call each other for side effects. A habit completion, for
    example, is announced with emit(SIGNAL_SUFFIX_HABIT_COMPLETED) and the
    challenge and stats managers react in their own listeners.

    Signals are scoped to the config entry, so two LifeTracker entries never
    see each other's events. Listeners decorated with @callback run inline,
    inside the emitting operation and before it persists; the emitting
    operation's single async_persist() then saves every listener's writes.
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: LifeTrackerCoordinator
    ) -> None:
        """Bind the manager to its coordinator's entry."""
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    @property
    def store(self) -> LifeTrackerStore:
        """Document store of this entry."""
        return self.coordinator.store

    def emit(self, suffix: str, **payload: Any) -> None:
        """Send payload on this entry's signal for suffix.

        Listeners receive the keyword arguments as one dict, e.g.
        emit(SIGNAL_SUFFIX_BADGE_EARNED, user_id="ana", badge_id="streak-3").
        """
        const.LOGGER.debug(
            "DEBUG: %s emits '%s' (%s)",
            self.__class__.__name__,
            suffix,
            ", ".join(sorted(payload)),
        )
        async_dispatcher_send(self.hass, get_event_signal(self.entry_id, suffix), payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Connect callback to this entry's signal; disconnected on unload."""
        unsub = async_dispatcher_connect(
            self.hass, get_event_signal(self.entry_id, suffix), callback
        )
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "DEBUG: %s listens to '%s'", self.__class__.__name__, suffix
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Register listeners. Runs once, before the first refresh."""
