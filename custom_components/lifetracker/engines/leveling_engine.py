"""Leveling Engine - Pure XP to level mapping.

level = floor(sqrt(xp / 100)) + 1
xp_floor(level) = (level - 1)^2 * 100
xp_ceil(level) = level^2 * 100

The mapping is monotonic and recomputable, so any stored level is a cache.
Integer square roots keep level boundaries exact (levelOf(400) == 3).

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .. import const
from ..utils.math_utils import calculate_percentage

if TYPE_CHECKING:
    from ..type_defs import LevelSnapshot


class LevelingEngine:
    """Static XP/level calculations."""

    @staticmethod
    def clamp_xp(xp: float) -> int:
        """Return xp as a non-negative integer."""
        return max(0, int(xp))

    @staticmethod
    def level_of(xp: float) -> int:
        """Return the level for a total XP value (levelOf(0) == 1)."""
        return math.isqrt(LevelingEngine.clamp_xp(xp) // const.XP_LEVEL_BASE) + 1

    @staticmethod
    def xp_floor_of(level: int) -> int:
        """Return the XP at which level begins."""
        return (level - 1) ** 2 * const.XP_LEVEL_BASE

    @staticmethod
    def xp_ceil_of(level: int) -> int:
        """Return the XP at which the next level begins."""
        return level**2 * const.XP_LEVEL_BASE

    @staticmethod
    def xp_to_next(xp: float) -> int:
        """Return XP still needed to reach the next level."""
        current = LevelingEngine.clamp_xp(xp)
        return LevelingEngine.xp_ceil_of(LevelingEngine.level_of(current)) - current

    @staticmethod
    def snapshot(xp: float) -> LevelSnapshot:
        """Return the full level view for xp, including progress percentage."""
        current = LevelingEngine.clamp_xp(xp)
        level = LevelingEngine.level_of(current)
        floor = LevelingEngine.xp_floor_of(level)
        ceil = LevelingEngine.xp_ceil_of(level)
        return {
            "xp": current,
            "level": level,
            "xp_floor": floor,
            "xp_ceil": ceil,
            "xp_to_next_level": ceil - current,
            "progress": calculate_percentage(current - floor, ceil - floor),
        }

    @staticmethod
    def xp_for_difficulty(difficulty: str | None) -> int:
        """Return the per-completion XP for a habit difficulty.

        Unknown or missing difficulties fall back to the default ("normal").
        """
        return const.DIFFICULTY_XP.get(
            difficulty or const.DEFAULT_DIFFICULTY,
            const.DIFFICULTY_XP[const.DEFAULT_DIFFICULTY],
        )
