"""Engine modules for LifeTracker integration.

Contains pure computation engines (no Home Assistant imports):
- streak_engine: Habit streaks and completion eligibility
- leveling_engine: XP to level mapping
- gamification_engine: Badge catalog evaluation
- challenge_engine: Discipline challenge state machine
- ranking_engine: Workout challenge leaderboard
- pattern_engine: Behavioral pattern detection
"""

# Use relative imports within package to avoid mypy module resolution issues
from .challenge_engine import ChallengeEngine, ChallengeValidationError
from .gamification_engine import GamificationEngine
from .leveling_engine import LevelingEngine
from .pattern_engine import PatternEngine
from .ranking_engine import RankingEngine
from .streak_engine import StreakEngine

__all__ = [
    "ChallengeEngine",
    "ChallengeValidationError",
    "GamificationEngine",
    "LevelingEngine",
    "PatternEngine",
    "RankingEngine",
    "StreakEngine",
]
