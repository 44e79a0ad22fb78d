"""Managers for LifeTracker stateful workflows.

Managers own the read-modify-write cycles on stored records and talk to
each other through instance-scoped dispatcher signals. The pure rules live
in engines/.
"""

from .base_manager import BaseManager
from .challenge_manager import ChallengeManager
from .gamification_manager import GamificationManager
from .habit_manager import HabitManager
from .insights_manager import InsightsManager
from .ranking_manager import RankingManager
from .stats_manager import StatsManager
from .tracking_manager import TrackingManager

__all__ = [
    "BaseManager",
    "ChallengeManager",
    "GamificationManager",
    "HabitManager",
    "InsightsManager",
    "RankingManager",
    "StatsManager",
    "TrackingManager",
]
