"""Gamification Manager - Badge awarding on top of GamificationEngine.

ARCHITECTURE:
- GamificationEngine = stateless "which badges are met" evaluation
- GamificationManager = diff against earned badges, persist the delta,
  grant each badge's XP exactly once, emit BADGE_EARNED

Re-evaluation is event driven: StatsManager emits STATS_UPDATED whenever a
badge counter or the streak changes. Badges are never revoked.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import callback

from .. import const
from ..engines.gamification_engine import GamificationEngine
from ..utils import dt_utils
from .base_manager import BaseManager


class GamificationManager(BaseManager):
    """Awards catalog badges for one integration instance."""

    async def async_setup(self) -> None:
        """Subscribe to counter changes."""
        self.listen(const.SIGNAL_SUFFIX_STATS_UPDATED, self._on_stats_updated)

    @callback
    def _on_stats_updated(self, payload: dict[str, Any]) -> None:
        """Re-evaluate badges for the user whose counters changed."""
        user_id = payload.get("user_id")
        if user_id:
            self.evaluate_badges(user_id)

    def evaluate_badges(self, user_id: str) -> list[str]:
        """Award every newly met badge for user_id.

        Returns:
            Ids of badges awarded by this call, in catalog order
        """
        stats_manager = self.coordinator.stats_manager
        stats = stats_manager.get_or_create(user_id)
        earned_ids = [
            badge.get(const.DATA_BADGE_ID) for badge in stats.get(const.DATA_STATS_BADGES, [])
        ]
        candidates = GamificationEngine.new_badges(
            earned_ids, stats_manager.counters_of(stats)
        )

        awarded: list[str] = []
        today_iso = dt_utils.dt_today_iso()
        for badge in candidates:
            record = GamificationEngine.build_earned_badge(badge, today_iso)
            if not stats_manager.add_badge(user_id, record):
                continue
            xp = int(badge.get(const.DATA_BADGE_XP, 0))
            if xp:
                stats_manager.add_xp(user_id, xp, const.XP_SOURCE_BADGE)
            awarded.append(badge[const.DATA_BADGE_ID])
            const.LOGGER.info(
                "INFO: User %s earned badge '%s' (+%s XP)",
                user_id,
                badge[const.DATA_BADGE_NAME],
                xp,
            )
            self.emit(
                const.SIGNAL_SUFFIX_BADGE_EARNED,
                user_id=user_id,
                badge_id=badge[const.DATA_BADGE_ID],
                badge_name=badge[const.DATA_BADGE_NAME],
                xp=xp,
            )
        return awarded

    def get_badge_progress(self, user_id: str) -> list[dict[str, Any]]:
        """Return per-badge progress for the user, with earned flags."""
        stats_manager = self.coordinator.stats_manager
        stats = stats_manager.get_or_create(user_id)
        earned = {
            badge.get(const.DATA_BADGE_ID): badge.get(const.DATA_BADGE_EARNED_DATE)
            for badge in stats.get(const.DATA_STATS_BADGES, [])
        }
        progress = []
        for result in GamificationEngine.evaluate_all(stats_manager.counters_of(stats)):
            entry: dict[str, Any] = dict(result)
            entry["earned"] = result["badge_id"] in earned
            entry["earned_date"] = earned.get(result["badge_id"])
            progress.append(entry)
        return progress
