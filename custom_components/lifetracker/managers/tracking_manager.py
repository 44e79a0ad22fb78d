"""Tracking Manager - Check-ins, workouts and finance entries.

These records feed the badge counters (check-ins, workouts) and the
pattern detector. A user has at most one check-in per day: recording again
for the same date replaces that day's record without bumping the counter.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
import uuid

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..utils import dt_utils
from .base_manager import BaseManager, guard_key

if TYPE_CHECKING:
    from ..type_defs import CheckInData, FinanceEntryData, WorkoutData

# Optional metrics copied from the call onto the check-in record
_CHECK_IN_METRICS = (
    const.DATA_CHECK_IN_MOOD,
    const.DATA_CHECK_IN_ENERGY,
    const.DATA_CHECK_IN_PRODUCTIVITY,
    const.DATA_CHECK_IN_SLEEP_HOURS,
    const.DATA_CHECK_IN_WATER_GLASSES,
    const.DATA_CHECK_IN_EXPENSES,
    const.DATA_CHECK_IN_NOTES,
)


class TrackingManager(BaseManager):
    """Manager for daily tracking records."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to."""

    @staticmethod
    def check_in_id(user_id: str, day: date) -> str:
        """Check-in record id; one record per user and day."""
        return f"{user_id}_{day.isoformat()}"

    async def async_record_check_in(
        self, user_id: str, day: date | None = None, **metrics: Any
    ) -> CheckInData:
        """Create or replace the user's check-in for day (default today).

        Metrics left out of the call are stored as None (not recorded).
        """
        day = day or dt_utils.dt_today_local()
        record_id = self.check_in_id(user_id, day)
        with self.coordinator.aggregate_guard(
            guard_key(const.GUARD_PREFIX_CHECK_IN, record_id)
        ):
            is_new = self.store.get(const.DATA_CHECK_INS, record_id) is None
            check_in: CheckInData = {
                "id": record_id,
                "user_id": user_id,
                "date": day.isoformat(),
                "workout": bool(metrics.get(const.DATA_CHECK_IN_WORKOUT, False)),
            }
            for field in _CHECK_IN_METRICS:
                check_in[field] = metrics.get(field)  # type: ignore[literal-required]
            self.store.put(const.DATA_CHECK_INS, record_id, check_in)

            if is_new:
                self.coordinator.stats_manager.adjust_counter(
                    user_id, const.DATA_STATS_CHECK_INS_COMPLETED
                )
            const.LOGGER.debug(
                "DEBUG: %s check-in for user %s on %s",
                "Recorded" if is_new else "Updated",
                user_id,
                day.isoformat(),
            )
            self.emit(
                const.SIGNAL_SUFFIX_CHECK_IN_RECORDED,
                user_id=user_id,
                date=day.isoformat(),
                new=is_new,
            )
            await self.coordinator.async_persist()
        return check_in

    async def async_record_workout(
        self,
        user_id: str,
        day: date | None = None,
        modality: str | None = None,
        duration_minutes: int | None = None,
    ) -> WorkoutData:
        """Record one workout session. Several sessions per day are allowed."""
        day = day or dt_utils.dt_today_local()
        workout: WorkoutData = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "date": day.isoformat(),
            "modality": modality or None,
            "duration_minutes": duration_minutes,
        }
        self.store.put(const.DATA_WORKOUTS, workout["id"], workout)
        self.coordinator.stats_manager.adjust_counter(
            user_id, const.DATA_STATS_WORKOUTS_COMPLETED
        )
        self.emit(
            const.SIGNAL_SUFFIX_WORKOUT_RECORDED,
            user_id=user_id,
            workout_id=workout["id"],
            date=workout["date"],
            modality=workout["modality"],
        )
        await self.coordinator.async_persist()
        return workout

    async def async_record_finance_entry(
        self,
        user_id: str,
        amount: float,
        entry_type: str,
        day: date | None = None,
        category: str | None = None,
    ) -> FinanceEntryData:
        """Record an income or expense entry.

        Raises:
            HomeAssistantError: unknown entry type or negative amount
        """
        if entry_type not in const.FINANCE_TYPE_OPTIONS:
            raise HomeAssistantError(
                const.ERROR_INVALID_FINANCE_TYPE_FMT.format(entry_type)
            )
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount < 0:
            raise HomeAssistantError(const.ERROR_INVALID_AMOUNT_FMT.format(amount))

        entry: FinanceEntryData = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "date": (day or dt_utils.dt_today_local()).isoformat(),
            "amount": float(amount),
            "type": entry_type,  # type: ignore[typeddict-item]
            "category": category,
        }
        self.store.put(const.DATA_FINANCE_ENTRIES, entry["id"], entry)
        await self.coordinator.async_persist()
        return entry
