"""Gamification Engine - Pure logic for badge evaluation.

This engine provides stateless, pure Python functions for:
- Badge threshold evaluation against aggregate counters
- Progress reporting toward each badge
- Diffing evaluated badges against already-earned ones
- Building earned-badge records

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.

The catalog is data (const.BADGE_CATALOG): each entry names one counter and a
threshold. evaluate() returns EVERY badge currently met, not only the newly
crossed ones; GamificationManager diffs against UserStats.badges and grants
each badge's XP once.

Counters:
- habits_completed, current_streak, workouts_completed, check_ins_completed
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import calculate_percentage, clamp

if TYPE_CHECKING:
    from ..type_defs import (
        BadgeCounters,
        BadgeDefinition,
        CriterionResult,
        EarnedBadge,
    )


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler function signature: (counters, badge) -> CriterionResult
CriterionHandler = Callable[["BadgeCounters", "BadgeDefinition"], "CriterionResult"]


# =============================================================================
# GAMIFICATION ENGINE
# =============================================================================


class GamificationEngine:
    """Pure logic engine for badge evaluation.

    All methods are static or class methods - no instance state.

    PURITY CONTRACT:
    - All data comes via `counters` and the catalog
    - No side effects, no storage access, no state mutation

    Properties:
    - Idempotent: identical counters always yield identical badge sets
    - Monotonic: raising any counter never removes a badge from the result
    """

    # =========================================================================
    # CRITERION HANDLER REGISTRY
    # =========================================================================

    # Maps badge counter name to handler function
    _CRITERION_HANDLERS: dict[str, CriterionHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all criterion handlers.

        Called lazily to populate _CRITERION_HANDLERS. New counters are added
        here and in the catalog, without touching evaluate().
        """
        if cls._CRITERION_HANDLERS:
            return  # Already registered

        cls._CRITERION_HANDLERS = {
            const.BADGE_COUNTER_CURRENT_STREAK: cls._evaluate_streak,
            const.BADGE_COUNTER_HABITS_COMPLETED: cls._evaluate_habits_completed,
            const.BADGE_COUNTER_WORKOUTS_COMPLETED: cls._evaluate_workouts,
            const.BADGE_COUNTER_CHECK_INS_COMPLETED: cls._evaluate_check_ins,
        }

    # =========================================================================
    # MAIN EVALUATION METHODS
    # =========================================================================

    @classmethod
    def evaluate(
        cls,
        counters: BadgeCounters,
        catalog: Iterable[BadgeDefinition] | None = None,
    ) -> set[str]:
        """Return the ids of every catalog badge whose threshold is met.

        Args:
            counters: Current aggregate counters (any may be 0)
            catalog: Badge definitions (default: const.BADGE_CATALOG)

        Returns:
            Set of badge ids
        """
        return {
            result["badge_id"]
            for result in cls.evaluate_all(counters, catalog)
            if result["met"]
        }

    @classmethod
    def evaluate_all(
        cls,
        counters: BadgeCounters,
        catalog: Iterable[BadgeDefinition] | None = None,
    ) -> list[CriterionResult]:
        """Evaluate every badge, returning per-badge progress in catalog order."""
        return [
            cls.evaluate_badge(counters, badge)
            for badge in (catalog if catalog is not None else cls.catalog())
        ]

    @classmethod
    def evaluate_badge(
        cls, counters: BadgeCounters, badge: BadgeDefinition
    ) -> CriterionResult:
        """Evaluate a single badge definition against counters."""
        cls._register_handlers()

        counter = badge.get(const.DATA_BADGE_COUNTER, "")
        handler = cls._CRITERION_HANDLERS.get(counter)
        if handler is None:
            const.LOGGER.warning(
                "WARNING: Unknown badge counter: %s for badge %s",
                counter,
                badge.get(const.DATA_BADGE_ID),
            )
            return cls._make_criterion_result(
                badge=badge, current_value=0, met_override=False
            )
        return handler(counters, badge)

    @classmethod
    def new_badges(
        cls,
        earned_ids: Iterable[str],
        counters: BadgeCounters,
        catalog: Iterable[BadgeDefinition] | None = None,
    ) -> list[BadgeDefinition]:
        """Return badges met by counters but not yet earned, in catalog order."""
        earned = set(earned_ids)
        definitions = list(catalog if catalog is not None else cls.catalog())
        met = cls.evaluate(counters, definitions)
        return [
            badge
            for badge in definitions
            if badge[const.DATA_BADGE_ID] in met
            and badge[const.DATA_BADGE_ID] not in earned
        ]

    # =========================================================================
    # CATALOG HELPERS
    # =========================================================================

    @staticmethod
    def catalog() -> list[BadgeDefinition]:
        """Return the built-in badge catalog."""
        return [dict(badge) for badge in const.BADGE_CATALOG]  # type: ignore[misc]

    @staticmethod
    def get_badge(badge_id: str) -> BadgeDefinition | None:
        """Look up a catalog badge by id."""
        for badge in const.BADGE_CATALOG:
            if badge[const.DATA_BADGE_ID] == badge_id:
                return dict(badge)  # type: ignore[return-value]
        return None

    @staticmethod
    def build_earned_badge(badge: BadgeDefinition, earned_date: str) -> EarnedBadge:
        """Return the persisted form of an earned badge."""
        return {
            "id": badge[const.DATA_BADGE_ID],
            "name": badge[const.DATA_BADGE_NAME],
            "icon": badge[const.DATA_BADGE_ICON],
            "description": badge[const.DATA_BADGE_DESCRIPTION],
            "earned_date": earned_date,
        }

    # =========================================================================
    # CRITERION HANDLERS
    # =========================================================================

    @classmethod
    def _evaluate_streak(
        cls, counters: BadgeCounters, badge: BadgeDefinition
    ) -> CriterionResult:
        """Consecutive-day streak threshold."""
        return cls._make_criterion_result(
            badge=badge,
            current_value=counters.get(const.BADGE_COUNTER_CURRENT_STREAK, 0),
        )

    @classmethod
    def _evaluate_habits_completed(
        cls, counters: BadgeCounters, badge: BadgeDefinition
    ) -> CriterionResult:
        """Lifetime habit completion threshold."""
        return cls._make_criterion_result(
            badge=badge,
            current_value=counters.get(const.BADGE_COUNTER_HABITS_COMPLETED, 0),
        )

    @classmethod
    def _evaluate_workouts(
        cls, counters: BadgeCounters, badge: BadgeDefinition
    ) -> CriterionResult:
        """Logged workout threshold."""
        return cls._make_criterion_result(
            badge=badge,
            current_value=counters.get(const.BADGE_COUNTER_WORKOUTS_COMPLETED, 0),
        )

    @classmethod
    def _evaluate_check_ins(
        cls, counters: BadgeCounters, badge: BadgeDefinition
    ) -> CriterionResult:
        """Check-in day threshold."""
        return cls._make_criterion_result(
            badge=badge,
            current_value=counters.get(const.BADGE_COUNTER_CHECK_INS_COMPLETED, 0),
        )

    # =========================================================================
    # RESULT BUILDERS
    # =========================================================================

    @staticmethod
    def _make_criterion_result(
        badge: BadgeDefinition | dict[str, Any],
        current_value: int,
        met_override: bool | None = None,
    ) -> CriterionResult:
        """Build a CriterionResult for one badge."""
        threshold = int(badge.get(const.DATA_BADGE_THRESHOLD, 0))
        value = max(0, int(current_value or 0))
        met = value >= threshold if met_override is None else met_override
        return {
            "badge_id": badge.get(const.DATA_BADGE_ID, "unknown"),
            "counter": badge.get(const.DATA_BADGE_COUNTER, "unknown"),
            "met": met,
            "progress": clamp(calculate_percentage(value, threshold), 0.0, 100.0)
            if threshold > 0
            else (100.0 if met else 0.0),
            "threshold": threshold,
            "current_value": value,
        }
