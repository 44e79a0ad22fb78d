"""Insights Manager - On-read pattern detection for a user."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from .. import const
from ..engines.pattern_engine import PatternEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import DetectedPattern


class InsightsManager(BaseManager):
    """Runs PatternEngine over a user's stored records. Nothing is persisted."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to; detection happens on read."""

    def detect_patterns(
        self, user_id: str, reference_date: date | None = None
    ) -> list[DetectedPattern]:
        """Return the user's current positive and negative patterns."""
        patterns = PatternEngine.detect(
            self.store.query(const.DATA_CHECK_INS, const.DATA_USER_ID, user_id),
            self.store.query(const.DATA_HABITS, const.DATA_USER_ID, user_id),
            self.store.query(const.DATA_FINANCE_ENTRIES, const.DATA_USER_ID, user_id),
            reference_date,
        )
        const.LOGGER.debug(
            "DEBUG: Detected %s patterns for user %s", len(patterns), user_id
        )
        return patterns
