"""Stats Manager - Owner of per-user XP, counters, streaks and badges.

This manager handles every write to the user_stats collection:
- Get-or-create with defaults (level 1, 0 XP, all counters 0)
- XP deltas, clamped at 0, with level recomputed from XP on every write
- Counter increments/decrements (habits, check-ins, workouts)
- Current/longest streak bookkeeping
- Badge recording (a badge id is stored at most once)

Events:
- SIGNAL_SUFFIX_XP_CHANGED / SIGNAL_SUFFIX_LEVEL_UP on XP changes
- SIGNAL_SUFFIX_STATS_UPDATED when badge counters change, which makes
  GamificationManager re-evaluate badges

Stored level/xp_to_next_level are caches of LevelingEngine.level_of(xp).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.leveling_engine import LevelingEngine
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import BadgeCounters, EarnedBadge, UserStatsData


class StatsManager(BaseManager):
    """Manager for UserStats records."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to; other managers call in directly."""

    # -------------------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------------------

    @staticmethod
    def default_stats(user_id: str) -> UserStatsData:
        """Return a fresh UserStats record."""
        return {
            "id": user_id,
            "xp": 0,
            "level": 1,
            "xp_to_next_level": LevelingEngine.xp_to_next(0),
            "total_habits_completed": 0,
            "current_streak": 0,
            "longest_streak": 0,
            "check_ins_completed": 0,
            "workouts_completed": 0,
            "badges": [],
        }

    def get_or_create(self, user_id: str) -> UserStatsData:
        """Return the user's stats, creating the default record if missing."""
        stats = self.store.get(const.DATA_USER_STATS, user_id)
        if stats is None:
            const.LOGGER.debug("DEBUG: Creating stats record for user %s", user_id)
            stats = self.default_stats(user_id)
            self._write(stats)
        return stats  # type: ignore[return-value]

    def get_stats(self, user_id: str) -> dict[str, Any]:
        """Return stats with the level view recomputed from XP."""
        stats = self.get_or_create(user_id)
        view: dict[str, Any] = dict(stats)
        view.update(LevelingEngine.snapshot(stats.get(const.DATA_STATS_XP, 0)))
        return view

    @staticmethod
    def counters_of(stats: UserStatsData | dict[str, Any]) -> BadgeCounters:
        """Map a stats record onto the badge counters."""
        return {
            "habits_completed": int(stats.get(const.DATA_STATS_TOTAL_HABITS_COMPLETED, 0)),
            "current_streak": int(stats.get(const.DATA_STATS_CURRENT_STREAK, 0)),
            "workouts_completed": int(stats.get(const.DATA_STATS_WORKOUTS_COMPLETED, 0)),
            "check_ins_completed": int(stats.get(const.DATA_STATS_CHECK_INS_COMPLETED, 0)),
        }

    # -------------------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------------------

    def _write(self, stats: UserStatsData | dict[str, Any]) -> None:
        xp = LevelingEngine.clamp_xp(stats.get(const.DATA_STATS_XP, 0))
        stats[const.DATA_STATS_XP] = xp
        stats[const.DATA_STATS_LEVEL] = LevelingEngine.level_of(xp)
        stats[const.DATA_STATS_XP_TO_NEXT_LEVEL] = LevelingEngine.xp_to_next(xp)
        stats[const.DATA_STATS_UPDATED_AT] = dt_utils.dt_now_iso()
        self.store.put(const.DATA_USER_STATS, stats[const.DATA_ID], stats)

    def add_xp(self, user_id: str, delta: int, source: str) -> int:
        """Apply an XP delta (negative allowed) clamped at 0.

        Returns:
            The new XP total
        """
        stats = self.get_or_create(user_id)
        old_xp = int(stats.get(const.DATA_STATS_XP, 0))
        old_level = LevelingEngine.level_of(old_xp)
        new_xp = LevelingEngine.clamp_xp(old_xp + delta)
        if new_xp == old_xp:
            return old_xp

        stats[const.DATA_STATS_XP] = new_xp
        self._write(stats)
        self.emit(
            const.SIGNAL_SUFFIX_XP_CHANGED,
            user_id=user_id,
            old_xp=old_xp,
            new_xp=new_xp,
            delta=new_xp - old_xp,
            source=source,
        )

        new_level = LevelingEngine.level_of(new_xp)
        if new_level > old_level:
            const.LOGGER.info(
                "INFO: User %s reached level %s (%s XP)", user_id, new_level, new_xp
            )
            self.emit(
                const.SIGNAL_SUFFIX_LEVEL_UP,
                user_id=user_id,
                old_level=old_level,
                new_level=new_level,
            )
        return new_xp

    def adjust_counter(self, user_id: str, field: str, delta: int = 1) -> int:
        """Change a counter by delta, clamped at 0. Returns the new value."""
        stats = self.get_or_create(user_id)
        new_value = max(0, int(stats.get(field, 0)) + delta)
        if new_value == stats.get(field, 0):
            return new_value
        stats[field] = new_value
        self._write(stats)
        self.emit(const.SIGNAL_SUFFIX_STATS_UPDATED, user_id=user_id)
        return new_value

    def set_current_streak(self, user_id: str, streak: int) -> None:
        """Store the current streak and raise longest_streak to match."""
        stats = self.get_or_create(user_id)
        streak = max(0, int(streak))
        longest = max(int(stats.get(const.DATA_STATS_LONGEST_STREAK, 0)), streak)
        if (
            stats.get(const.DATA_STATS_CURRENT_STREAK) == streak
            and stats.get(const.DATA_STATS_LONGEST_STREAK) == longest
        ):
            return
        stats[const.DATA_STATS_CURRENT_STREAK] = streak
        stats[const.DATA_STATS_LONGEST_STREAK] = longest
        self._write(stats)
        self.emit(const.SIGNAL_SUFFIX_STATS_UPDATED, user_id=user_id)

    def add_badge(self, user_id: str, badge: EarnedBadge) -> bool:
        """Record an earned badge. Returns False if the user already has it."""
        stats = self.get_or_create(user_id)
        badges = list(stats.get(const.DATA_STATS_BADGES, []))
        if any(b.get(const.DATA_BADGE_ID) == badge["id"] for b in badges):
            return False
        badges.append(badge)
        stats[const.DATA_STATS_BADGES] = badges
        self._write(stats)
        return True
