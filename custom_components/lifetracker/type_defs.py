"""Type definitions for LifeTracker data structures.

ARCHITECTURE DECISION: HYBRID APPROACH (TypedDict + dict[str, Any])
===================================================================

1. **TypedDict for STATIC structures** (fixed keys known at design time):
   - Stored records: HabitData, UserStatsData, DisciplineChallengeData, ...
   - Engine results: CriterionResult, LevelSnapshot, DetectedPattern
   - Event payloads: HabitCompletedEvent, BadgeEarnedEvent, ...

2. **dict[str, Any] for DYNAMIC structures** (keys determined at runtime):
   - Storage collections: data[collection][record_id]
   - Difficulty journal: difficulty_map[iso_date]

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies. Only typing machinery is imported here.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Records loaded from storage are
plain dicts and every reader still uses .get() with defaults.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

UserId = str
HabitId = str  # UUID string
ChallengeId = str  # UUID string
BadgeId = str  # Catalog id, e.g. "streak-7"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

Frequency = Literal["daily", "weekly", "monthly"]
ChallengeStatus = Literal["active", "completed", "failed"]
FinanceType = Literal["income", "expense"]
PatternType = Literal["positive", "negative"]
PatternSeverity = Literal["low", "medium", "high"]


# =============================================================================
# Habits
# =============================================================================


class HabitData(TypedDict):
    """A user's habit. `streak` is a cache of completed_dates."""

    id: HabitId
    user_id: UserId
    name: str
    frequency: Frequency
    completed_dates: list[ISODate]
    streak: int
    xp_per_completion: int
    difficulty: str
    category: NotRequired[str | None]
    created_at: NotRequired[ISODatetime]


class DayStatus(TypedDict):
    """One cell of the last-N-days strip."""

    date: ISODate
    completed: bool
    is_today: bool


# =============================================================================
# User Stats / Leveling / Badges
# =============================================================================


class EarnedBadge(TypedDict):
    """Badge catalog entry stamped with the day it was earned."""

    id: BadgeId
    name: str
    icon: str
    description: str
    earned_date: ISODate


class UserStatsData(TypedDict):
    """Per-user aggregate. level/xp_to_next_level are recomputed from xp."""

    id: UserId
    xp: int
    level: int
    xp_to_next_level: int
    total_habits_completed: int
    current_streak: int
    longest_streak: int
    check_ins_completed: int
    workouts_completed: int
    badges: list[EarnedBadge]
    updated_at: NotRequired[ISODatetime]


class LevelSnapshot(TypedDict):
    """Level view derived from a total XP value."""

    xp: int
    level: int
    xp_floor: int
    xp_ceil: int
    xp_to_next_level: int
    progress: float


class BadgeCounters(TypedDict):
    """Counters the badge catalog thresholds are evaluated against."""

    habits_completed: int
    current_streak: int
    workouts_completed: int
    check_ins_completed: int


class BadgeDefinition(TypedDict):
    """Immutable catalog entry."""

    id: BadgeId
    name: str
    icon: str
    description: str
    counter: str
    threshold: int
    xp: int


class CriterionResult(TypedDict):
    """Result of evaluating one badge threshold."""

    badge_id: BadgeId
    counter: str
    met: bool
    progress: float
    threshold: int
    current_value: int


# =============================================================================
# Discipline Challenges
# =============================================================================


class ChallengeReward(TypedDict):
    """Milestone reward keyed by 1-indexed day offset."""

    id: str
    day: int
    title: str
    description: str
    xp: int
    unlocked: bool
    unlocked_at: NotRequired[ISODatetime | None]


class ChallengeTip(TypedDict):
    """Tip previewing the day about to be attempted."""

    id: str
    day: int
    title: str
    content: str
    shown: bool


class DisciplineChallengeData(TypedDict):
    """Single-habit fixed-range commitment."""

    id: ChallengeId
    user_id: UserId
    habit_id: HabitId
    duration: int
    start_date: ISODate
    end_date: ISODate
    status: ChallengeStatus
    completed_days: list[ISODate]
    difficulty_map: dict[ISODate, int]
    rewards: list[ChallengeReward]
    tips: list[ChallengeTip]
    created_at: NotRequired[ISODatetime]
    completed_at: NotRequired[ISODatetime | None]


# =============================================================================
# Workout Challenges / Ranking
# =============================================================================


class WorkoutChallengeData(TypedDict):
    """Multi-participant workout challenge."""

    id: ChallengeId
    name: str
    creator_id: UserId
    target_days: int
    modality: str | None
    start_date: ISODate
    end_date: ISODate | None
    current_streak: int
    completed: bool
    created_at: NotRequired[ISODatetime]


class ChallengeParticipantData(TypedDict):
    """One (challenge, user) pair. Record id is f"{challenge_id}_{user_id}"."""

    id: str
    challenge_id: ChallengeId
    user_id: UserId
    display_name: str
    current_streak: int
    total_workouts: int
    last_workout_date: ISODate | None


# =============================================================================
# Tracking Records
# =============================================================================


class CheckInData(TypedDict, total=False):
    """Daily check-in. Metric fields are optional; absent means not recorded."""

    id: str
    user_id: UserId
    date: ISODate
    mood: int | None
    energy: int | None
    productivity: int | None
    sleep_hours: float | None
    water_glasses: int | None
    workout: bool
    expenses: float | None
    notes: str | None


class WorkoutData(TypedDict):
    """Logged workout session."""

    id: str
    user_id: UserId
    date: ISODate
    modality: str | None
    duration_minutes: NotRequired[int | None]


class FinanceEntryData(TypedDict):
    """Income or expense entry."""

    id: str
    user_id: UserId
    date: ISODate
    amount: float
    type: FinanceType
    category: NotRequired[str | None]


# =============================================================================
# Pattern Detection
# =============================================================================


class DetectedPattern(TypedDict):
    """Ephemeral behavioral alert, recomputed on every detection pass."""

    id: str
    type: PatternType
    category: str
    title: str
    message: str
    severity: PatternSeverity
    count: int
    detected_at: ISODatetime
    data: dict[str, Any]


# =============================================================================
# Event Payloads
# =============================================================================


class HabitCompletedEvent(TypedDict):
    """Payload for SIGNAL_SUFFIX_HABIT_COMPLETED / _UNCOMPLETED."""

    user_id: UserId
    habit_id: HabitId
    date: ISODate
    streak: int


class XPChangedEvent(TypedDict):
    """Payload for SIGNAL_SUFFIX_XP_CHANGED."""

    user_id: UserId
    old_xp: int
    new_xp: int
    delta: int
    source: str


class LevelUpEvent(TypedDict):
    """Payload for SIGNAL_SUFFIX_LEVEL_UP."""

    user_id: UserId
    old_level: int
    new_level: int


class StatsUpdatedEvent(TypedDict):
    """Payload for SIGNAL_SUFFIX_STATS_UPDATED."""

    user_id: UserId


class BadgeEarnedEvent(TypedDict):
    """Payload for SIGNAL_SUFFIX_BADGE_EARNED."""

    user_id: UserId
    badge_id: BadgeId
    badge_name: str
    xp: int


class ChallengeEvent(TypedDict):
    """Payload for the discipline challenge lifecycle signals."""

    user_id: UserId
    challenge_id: ChallengeId
    habit_id: HabitId
    status: ChallengeStatus
    date: NotRequired[ISODate]
    reward_id: NotRequired[str]
    xp: NotRequired[int]


class WorkoutRecordedEvent(TypedDict):
    """Payload for SIGNAL_SUFFIX_WORKOUT_RECORDED."""

    user_id: UserId
    workout_id: str
    date: ISODate
    modality: str | None
