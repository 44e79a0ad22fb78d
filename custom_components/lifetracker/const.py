# File: const.py
"""Constants for the LifeTracker integration.

This file centralizes storage keys, record field names, defaults, event signal
suffixes and the data-driven catalogs (badges, challenge rewards, tips) used
across the integration.
"""

import logging
from typing import Final

import homeassistant.util.dt as dt_util


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration.

    The pure date utilities keep their own copy, so push it there too.
    """
    from .utils import dt_utils

    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
LIFETRACKER_TITLE = "LifeTracker"

# Integration Domain
DOMAIN = "lifetracker"

# Logger
LOGGER = logging.getLogger(__package__)

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "lifetracker_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# Used when a service call carries neither a user_id field nor a HA user context
DEFAULT_USER_ID = "default"
DEFAULT_DISPLAY_NAME = "User"


# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_DEFAULT_DIFFICULTY = "default_difficulty"

# Config flow
CONFIG_FLOW_STEP_USER = "user"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"


# ------------------------------------------------------------------------------------------------
# Storage Collections
# ------------------------------------------------------------------------------------------------
DATA_META: Final = "meta"
DATA_META_SCHEMA_VERSION: Final = "schema_version"

DATA_HABITS: Final = "habits"
DATA_USER_STATS: Final = "user_stats"
DATA_DISCIPLINE_CHALLENGES: Final = "discipline_challenges"
DATA_WORKOUT_CHALLENGES: Final = "workout_challenges"
DATA_CHALLENGE_PARTICIPANTS: Final = "challenge_participants"
DATA_CHECK_INS: Final = "check_ins"
DATA_WORKOUTS: Final = "workouts"
DATA_FINANCE_ENTRIES: Final = "finance_entries"

STORAGE_COLLECTIONS: Final = (
    DATA_HABITS,
    DATA_USER_STATS,
    DATA_DISCIPLINE_CHALLENGES,
    DATA_WORKOUT_CHALLENGES,
    DATA_CHALLENGE_PARTICIPANTS,
    DATA_CHECK_INS,
    DATA_WORKOUTS,
    DATA_FINANCE_ENTRIES,
)


# ------------------------------------------------------------------------------------------------
# Record Fields
# ------------------------------------------------------------------------------------------------
# Shared
DATA_ID: Final = "id"
DATA_USER_ID: Final = "user_id"
DATA_DATE: Final = "date"
DATA_NAME: Final = "name"
DATA_CREATED_AT: Final = "created_at"

# Habit
DATA_HABIT_FREQUENCY: Final = "frequency"
DATA_HABIT_COMPLETED_DATES: Final = "completed_dates"
DATA_HABIT_STREAK: Final = "streak"
DATA_HABIT_XP: Final = "xp_per_completion"
DATA_HABIT_DIFFICULTY: Final = "difficulty"
DATA_HABIT_CATEGORY: Final = "category"

# UserStats
DATA_STATS_XP: Final = "xp"
DATA_STATS_LEVEL: Final = "level"
DATA_STATS_XP_TO_NEXT_LEVEL: Final = "xp_to_next_level"
DATA_STATS_TOTAL_HABITS_COMPLETED: Final = "total_habits_completed"
DATA_STATS_CURRENT_STREAK: Final = "current_streak"
DATA_STATS_LONGEST_STREAK: Final = "longest_streak"
DATA_STATS_CHECK_INS_COMPLETED: Final = "check_ins_completed"
DATA_STATS_WORKOUTS_COMPLETED: Final = "workouts_completed"
DATA_STATS_BADGES: Final = "badges"
DATA_STATS_UPDATED_AT: Final = "updated_at"

# Badge
DATA_BADGE_ID: Final = "id"
DATA_BADGE_NAME: Final = "name"
DATA_BADGE_ICON: Final = "icon"
DATA_BADGE_DESCRIPTION: Final = "description"
DATA_BADGE_COUNTER: Final = "counter"
DATA_BADGE_THRESHOLD: Final = "threshold"
DATA_BADGE_XP: Final = "xp"
DATA_BADGE_EARNED_DATE: Final = "earned_date"

# DisciplineChallenge
DATA_CHALLENGE_HABIT_ID: Final = "habit_id"
DATA_CHALLENGE_DURATION: Final = "duration"
DATA_CHALLENGE_START_DATE: Final = "start_date"
DATA_CHALLENGE_END_DATE: Final = "end_date"
DATA_CHALLENGE_STATUS: Final = "status"
DATA_CHALLENGE_COMPLETED_DAYS: Final = "completed_days"
DATA_CHALLENGE_DIFFICULTY_MAP: Final = "difficulty_map"
DATA_CHALLENGE_REWARDS: Final = "rewards"
DATA_CHALLENGE_TIPS: Final = "tips"
DATA_CHALLENGE_COMPLETED_AT: Final = "completed_at"

# Reward / Tip entries
DATA_REWARD_ID: Final = "id"
DATA_REWARD_DAY: Final = "day"
DATA_REWARD_TITLE: Final = "title"
DATA_REWARD_DESCRIPTION: Final = "description"
DATA_REWARD_XP: Final = "xp"
DATA_REWARD_UNLOCKED: Final = "unlocked"
DATA_REWARD_UNLOCKED_AT: Final = "unlocked_at"

DATA_TIP_ID: Final = "id"
DATA_TIP_DAY: Final = "day"
DATA_TIP_TITLE: Final = "title"
DATA_TIP_CONTENT: Final = "content"
DATA_TIP_SHOWN: Final = "shown"

# WorkoutChallenge
DATA_WORKOUT_CHALLENGE_CREATOR_ID: Final = "creator_id"
DATA_WORKOUT_CHALLENGE_TARGET_DAYS: Final = "target_days"
DATA_WORKOUT_CHALLENGE_MODALITY: Final = "modality"
DATA_WORKOUT_CHALLENGE_START_DATE: Final = "start_date"
DATA_WORKOUT_CHALLENGE_END_DATE: Final = "end_date"
DATA_WORKOUT_CHALLENGE_CURRENT_STREAK: Final = "current_streak"
DATA_WORKOUT_CHALLENGE_COMPLETED: Final = "completed"

# ChallengeParticipant
DATA_PARTICIPANT_CHALLENGE_ID: Final = "challenge_id"
DATA_PARTICIPANT_DISPLAY_NAME: Final = "display_name"
DATA_PARTICIPANT_CURRENT_STREAK: Final = "current_streak"
DATA_PARTICIPANT_TOTAL_WORKOUTS: Final = "total_workouts"
DATA_PARTICIPANT_LAST_WORKOUT_DATE: Final = "last_workout_date"

# Check-in
DATA_CHECK_IN_MOOD: Final = "mood"
DATA_CHECK_IN_ENERGY: Final = "energy"
DATA_CHECK_IN_PRODUCTIVITY: Final = "productivity"
DATA_CHECK_IN_SLEEP_HOURS: Final = "sleep_hours"
DATA_CHECK_IN_WATER_GLASSES: Final = "water_glasses"
DATA_CHECK_IN_WORKOUT: Final = "workout"
DATA_CHECK_IN_EXPENSES: Final = "expenses"
DATA_CHECK_IN_NOTES: Final = "notes"

# Workout
DATA_WORKOUT_MODALITY: Final = "modality"
DATA_WORKOUT_DURATION_MINUTES: Final = "duration_minutes"

# Finance entry
DATA_FINANCE_AMOUNT: Final = "amount"
DATA_FINANCE_TYPE: Final = "type"
DATA_FINANCE_CATEGORY: Final = "category"


# ------------------------------------------------------------------------------------------------
# Enumerations
# ------------------------------------------------------------------------------------------------
FREQUENCY_DAILY: Final = "daily"
FREQUENCY_WEEKLY: Final = "weekly"
FREQUENCY_MONTHLY: Final = "monthly"
FREQUENCY_OPTIONS: Final = (FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_MONTHLY)

CHALLENGE_STATUS_ACTIVE: Final = "active"
CHALLENGE_STATUS_COMPLETED: Final = "completed"
CHALLENGE_STATUS_FAILED: Final = "failed"

FINANCE_TYPE_INCOME: Final = "income"
FINANCE_TYPE_EXPENSE: Final = "expense"
FINANCE_TYPE_OPTIONS: Final = (FINANCE_TYPE_INCOME, FINANCE_TYPE_EXPENSE)

PATTERN_TYPE_POSITIVE: Final = "positive"
PATTERN_TYPE_NEGATIVE: Final = "negative"

PATTERN_SEVERITY_LOW: Final = "low"
PATTERN_SEVERITY_MEDIUM: Final = "medium"
PATTERN_SEVERITY_HIGH: Final = "high"

PATTERN_CATEGORY_MOOD: Final = "humor"
PATTERN_CATEGORY_ENERGY: Final = "energia"
PATTERN_CATEGORY_HABITS: Final = "habitos"
PATTERN_CATEGORY_FINANCES: Final = "financas"
PATTERN_CATEGORY_CHECK_IN: Final = "checkin"
PATTERN_CATEGORY_SLEEP: Final = "sono"


# ------------------------------------------------------------------------------------------------
# Difficulty / XP
# ------------------------------------------------------------------------------------------------
DIFFICULTY_VERY_EASY: Final = "very_easy"
DIFFICULTY_EASY: Final = "easy"
DIFFICULTY_NORMAL: Final = "normal"
DIFFICULTY_HARD: Final = "hard"
DIFFICULTY_VERY_HARD: Final = "very_hard"
DIFFICULTY_EXTREME: Final = "extreme"

DIFFICULTY_XP: Final = {
    DIFFICULTY_VERY_EASY: 10,
    DIFFICULTY_EASY: 25,
    DIFFICULTY_NORMAL: 50,
    DIFFICULTY_HARD: 100,
    DIFFICULTY_VERY_HARD: 200,
    DIFFICULTY_EXTREME: 500,
}
DEFAULT_DIFFICULTY: Final = DIFFICULTY_NORMAL

# Leveling curve: level = floor(sqrt(xp / XP_LEVEL_BASE)) + 1
XP_LEVEL_BASE: Final = 100

# Challenge difficulty journal score bounds
CHALLENGE_DIFFICULTY_SCORE_MIN: Final = 1
CHALLENGE_DIFFICULTY_SCORE_MAX: Final = 10


# ------------------------------------------------------------------------------------------------
# Badge Catalog
# ------------------------------------------------------------------------------------------------
# Counters a badge threshold may target
BADGE_COUNTER_CURRENT_STREAK: Final = "current_streak"
BADGE_COUNTER_HABITS_COMPLETED: Final = "habits_completed"
BADGE_COUNTER_WORKOUTS_COMPLETED: Final = "workouts_completed"
BADGE_COUNTER_CHECK_INS_COMPLETED: Final = "check_ins_completed"

BADGE_CATALOG: Final = (
    {
        DATA_BADGE_ID: "streak-3",
        DATA_BADGE_NAME: "3 Day Streak",
        DATA_BADGE_ICON: "mdi:sprout",
        DATA_BADGE_DESCRIPTION: "Completed habits 3 days in a row",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CURRENT_STREAK,
        DATA_BADGE_THRESHOLD: 3,
        DATA_BADGE_XP: 30,
    },
    {
        DATA_BADGE_ID: "streak-7",
        DATA_BADGE_NAME: "7 Day Streak",
        DATA_BADGE_ICON: "mdi:fire",
        DATA_BADGE_DESCRIPTION: "Completed habits 7 days in a row",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CURRENT_STREAK,
        DATA_BADGE_THRESHOLD: 7,
        DATA_BADGE_XP: 70,
    },
    {
        DATA_BADGE_ID: "streak-30",
        DATA_BADGE_NAME: "30 Day Streak",
        DATA_BADGE_ICON: "mdi:diamond-stone",
        DATA_BADGE_DESCRIPTION: "Completed habits 30 days in a row",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CURRENT_STREAK,
        DATA_BADGE_THRESHOLD: 30,
        DATA_BADGE_XP: 300,
    },
    {
        DATA_BADGE_ID: "streak-100",
        DATA_BADGE_NAME: "100 Day Streak",
        DATA_BADGE_ICON: "mdi:star-shooting",
        DATA_BADGE_DESCRIPTION: "Completed habits 100 days in a row",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CURRENT_STREAK,
        DATA_BADGE_THRESHOLD: 100,
        DATA_BADGE_XP: 1000,
    },
    {
        DATA_BADGE_ID: "first-step",
        DATA_BADGE_NAME: "First Step",
        DATA_BADGE_ICON: "mdi:shoe-print",
        DATA_BADGE_DESCRIPTION: "Completed your first habit",
        DATA_BADGE_COUNTER: BADGE_COUNTER_HABITS_COMPLETED,
        DATA_BADGE_THRESHOLD: 1,
        DATA_BADGE_XP: 10,
    },
    {
        DATA_BADGE_ID: "habit-10",
        DATA_BADGE_NAME: "10 Habits",
        DATA_BADGE_ICON: "mdi:star",
        DATA_BADGE_DESCRIPTION: "Completed 10 habits",
        DATA_BADGE_COUNTER: BADGE_COUNTER_HABITS_COMPLETED,
        DATA_BADGE_THRESHOLD: 10,
        DATA_BADGE_XP: 50,
    },
    {
        DATA_BADGE_ID: "habit-50",
        DATA_BADGE_NAME: "50 Habits",
        DATA_BADGE_ICON: "mdi:star-four-points",
        DATA_BADGE_DESCRIPTION: "Completed 50 habits",
        DATA_BADGE_COUNTER: BADGE_COUNTER_HABITS_COMPLETED,
        DATA_BADGE_THRESHOLD: 50,
        DATA_BADGE_XP: 250,
    },
    {
        DATA_BADGE_ID: "habit-master",
        DATA_BADGE_NAME: "Habit Master",
        DATA_BADGE_ICON: "mdi:crown",
        DATA_BADGE_DESCRIPTION: "Completed 100 habits",
        DATA_BADGE_COUNTER: BADGE_COUNTER_HABITS_COMPLETED,
        DATA_BADGE_THRESHOLD: 100,
        DATA_BADGE_XP: 500,
    },
    {
        DATA_BADGE_ID: "athlete",
        DATA_BADGE_NAME: "Athlete",
        DATA_BADGE_ICON: "mdi:arm-flex",
        DATA_BADGE_DESCRIPTION: "Logged 20 workouts",
        DATA_BADGE_COUNTER: BADGE_COUNTER_WORKOUTS_COMPLETED,
        DATA_BADGE_THRESHOLD: 20,
        DATA_BADGE_XP: 200,
    },
    {
        DATA_BADGE_ID: "athlete-advanced",
        DATA_BADGE_NAME: "Advanced Athlete",
        DATA_BADGE_ICON: "mdi:trophy",
        DATA_BADGE_DESCRIPTION: "Logged 50 workouts",
        DATA_BADGE_COUNTER: BADGE_COUNTER_WORKOUTS_COMPLETED,
        DATA_BADGE_THRESHOLD: 50,
        DATA_BADGE_XP: 500,
    },
    {
        DATA_BADGE_ID: "first-checkin",
        DATA_BADGE_NAME: "First Check-in",
        DATA_BADGE_ICON: "mdi:creation",
        DATA_BADGE_DESCRIPTION: "Recorded your first check-in",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CHECK_INS_COMPLETED,
        DATA_BADGE_THRESHOLD: 1,
        DATA_BADGE_XP: 10,
    },
    {
        DATA_BADGE_ID: "checkin-week",
        DATA_BADGE_NAME: "Weekly Check-in",
        DATA_BADGE_ICON: "mdi:calendar-week",
        DATA_BADGE_DESCRIPTION: "Recorded check-ins on 7 days",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CHECK_INS_COMPLETED,
        DATA_BADGE_THRESHOLD: 7,
        DATA_BADGE_XP: 70,
    },
    {
        DATA_BADGE_ID: "checkin-month",
        DATA_BADGE_NAME: "Monthly Check-in",
        DATA_BADGE_ICON: "mdi:calendar-month",
        DATA_BADGE_DESCRIPTION: "Recorded check-ins on 30 days",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CHECK_INS_COMPLETED,
        DATA_BADGE_THRESHOLD: 30,
        DATA_BADGE_XP: 300,
    },
    {
        DATA_BADGE_ID: "checkin-master",
        DATA_BADGE_NAME: "Check-in Master",
        DATA_BADGE_ICON: "mdi:bullseye-arrow",
        DATA_BADGE_DESCRIPTION: "Recorded check-ins on 100 days",
        DATA_BADGE_COUNTER: BADGE_COUNTER_CHECK_INS_COMPLETED,
        DATA_BADGE_THRESHOLD: 100,
        DATA_BADGE_XP: 1000,
    },
)


# ------------------------------------------------------------------------------------------------
# Discipline Challenge Catalogs
# ------------------------------------------------------------------------------------------------
CHALLENGE_DURATIONS: Final = (7, 14, 21)
CHALLENGE_MAX_DURATION: Final = 365

# Offsets past the largest table get one bonus reward every N days
CHALLENGE_EXTRA_REWARD_INTERVAL: Final = 7
CHALLENGE_EXTRA_REWARD_XP_PER_WEEK: Final = 100

CHALLENGE_REWARD_TABLES: Final = {
    7: (
        {"id": "r1", "day": 3, "title": "First Steps", "description": "You completed 3 days!", "xp": 50},
        {"id": "r2", "day": 7, "title": "Full Week", "description": "Congratulations! You completed 7 days!", "xp": 150},
    ),
    14: (
        {"id": "r1", "day": 3, "title": "First Steps", "description": "You completed 3 days!", "xp": 50},
        {"id": "r2", "day": 7, "title": "One Week", "description": "Congratulations! You completed 7 days!", "xp": 100},
        {"id": "r3", "day": 14, "title": "Two Weeks", "description": "Amazing! You completed 14 days!", "xp": 300},
    ),
    21: (
        {"id": "r1", "day": 3, "title": "First Steps", "description": "You completed 3 days!", "xp": 50},
        {"id": "r2", "day": 7, "title": "One Week", "description": "Congratulations! You completed 7 days!", "xp": 100},
        {"id": "r3", "day": 14, "title": "Two Weeks", "description": "Excellent! You completed 14 days!", "xp": 200},
        {"id": "r4", "day": 21, "title": "Challenge Complete", "description": "Legendary! You completed 21 days!", "xp": 500},
    ),
}

CHALLENGE_TIP_CATALOG: Final = (
    (1, "Start small", "On day one, focus on completing the habit in its simplest form. It does not need to be perfect."),
    (2, "Set a reminder", "Set an alarm or leave a note somewhere visible so you do not forget."),
    (3, "Celebrate small wins", "Three days done! Every day counts and you are building a solid habit."),
    (4, "Focus on the process", "Doing it matters more than doing it perfectly. Keep going even when it is hard."),
    (5, "Find your best time", "Figure out the best moment of the day for this habit and stick to it."),
    (6, "Plan for obstacles", "Anticipate what could get in the way and keep a plan B so the run is not broken."),
    (7, "A full week!", "You completed a whole week. That is real progress."),
    (10, "Stay consistent", "You are halfway there. Stay firm, you can do it."),
    (14, "Two weeks of discipline", "You are building a real habit. Keep it up."),
    (18, "Almost there!", "Only a few days left. Do not give up now."),
    (21, "Challenge complete!", "You completed 21 days of discipline. That is an incredible achievement."),
)


# ------------------------------------------------------------------------------------------------
# Pattern Detection
# ------------------------------------------------------------------------------------------------
PATTERN_SAMPLE_WINDOW_DAYS: Final = 14
PATTERN_METRIC_WINDOW_DAYS: Final = 7
PATTERN_PRESENCE_WINDOW_DAYS: Final = 7

PATTERN_MIN_CONSECUTIVE_DAYS: Final = 3
PATTERN_MIN_DAYS_MISSING: Final = 3
PATTERN_MIN_DAYS_PRESENT: Final = 5
PATTERN_MIN_PROFITABLE_DAYS: Final = 3
PATTERN_MIN_EXPENSE_SAMPLES: Final = 3
PATTERN_HIGH_SEVERITY_COUNT: Final = 5

PATTERN_LOW_MOOD_MAX: Final = 2
PATTERN_HIGH_MOOD_MIN: Final = 5
PATTERN_LOW_ENERGY_MAX: Final = 2
PATTERN_HIGH_ENERGY_MIN: Final = 5
PATTERN_LOW_SLEEP_BELOW: Final = 6
PATTERN_GOOD_SLEEP_MIN: Final = 7
PATTERN_HIGH_EXPENSE_FACTOR: Final = 1.5

# Pattern data keys
DATA_PATTERN_ID: Final = "id"
DATA_PATTERN_TYPE: Final = "type"
DATA_PATTERN_CATEGORY: Final = "category"
DATA_PATTERN_TITLE: Final = "title"
DATA_PATTERN_MESSAGE: Final = "message"
DATA_PATTERN_SEVERITY: Final = "severity"
DATA_PATTERN_COUNT: Final = "count"
DATA_PATTERN_DETECTED_AT: Final = "detected_at"
DATA_PATTERN_DATA: Final = "data"


# ------------------------------------------------------------------------------------------------
# Event Signal Suffixes (instance-scoped via get_event_signal)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_HABIT_COMPLETED: Final = "habit_completed"
SIGNAL_SUFFIX_HABIT_UNCOMPLETED: Final = "habit_uncompleted"
SIGNAL_SUFFIX_XP_CHANGED: Final = "xp_changed"
SIGNAL_SUFFIX_LEVEL_UP: Final = "level_up"
SIGNAL_SUFFIX_BADGE_EARNED: Final = "badge_earned"
SIGNAL_SUFFIX_STATS_UPDATED: Final = "stats_updated"
SIGNAL_SUFFIX_CHECK_IN_RECORDED: Final = "check_in_recorded"
SIGNAL_SUFFIX_WORKOUT_RECORDED: Final = "workout_recorded"
SIGNAL_SUFFIX_CHALLENGE_STARTED: Final = "challenge_started"
SIGNAL_SUFFIX_CHALLENGE_DAY_COMPLETED: Final = "challenge_day_completed"
SIGNAL_SUFFIX_CHALLENGE_COMPLETED: Final = "challenge_completed"
SIGNAL_SUFFIX_CHALLENGE_FAILED: Final = "challenge_failed"
SIGNAL_SUFFIX_CHALLENGE_EXTENDED: Final = "challenge_extended"
SIGNAL_SUFFIX_CHALLENGE_REWARD_UNLOCKED: Final = "challenge_reward_unlocked"
SIGNAL_SUFFIX_PARTICIPANT_UPDATED: Final = "participant_updated"


# ------------------------------------------------------------------------------------------------
# XP Sources
# ------------------------------------------------------------------------------------------------
XP_SOURCE_HABIT: Final = "habit"
XP_SOURCE_BADGE: Final = "badge"
XP_SOURCE_CHALLENGE_REWARD: Final = "challenge_reward"


# ------------------------------------------------------------------------------------------------
# Aggregate Guard Keys
# ------------------------------------------------------------------------------------------------
GUARD_PREFIX_HABIT: Final = "habit"
GUARD_PREFIX_CHALLENGE: Final = "challenge"
GUARD_PREFIX_CHALLENGE_HABIT: Final = "challenge_habit"
GUARD_PREFIX_PARTICIPANT: Final = "participant"
GUARD_PREFIX_CHECK_IN: Final = "check_in"


# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_CREATE_HABIT: Final = "create_habit"
SERVICE_DELETE_HABIT: Final = "delete_habit"
SERVICE_COMPLETE_HABIT: Final = "complete_habit"
SERVICE_UNCOMPLETE_HABIT: Final = "uncomplete_habit"
SERVICE_TOGGLE_HABIT: Final = "toggle_habit"
SERVICE_GET_HABIT: Final = "get_habit"
SERVICE_GET_USER_STATS: Final = "get_user_stats"
SERVICE_START_CHALLENGE: Final = "start_challenge"
SERVICE_COMPLETE_CHALLENGE_DAY: Final = "complete_challenge_day"
SERVICE_RECORD_CHALLENGE_DIFFICULTY: Final = "record_challenge_difficulty"
SERVICE_EXTEND_CHALLENGE: Final = "extend_challenge"
SERVICE_GET_NEXT_TIP: Final = "get_next_tip"
SERVICE_CREATE_WORKOUT_CHALLENGE: Final = "create_workout_challenge"
SERVICE_JOIN_WORKOUT_CHALLENGE: Final = "join_workout_challenge"
SERVICE_GET_RANKING: Final = "get_ranking"
SERVICE_RECORD_CHECK_IN: Final = "record_check_in"
SERVICE_RECORD_WORKOUT: Final = "record_workout"
SERVICE_RECORD_FINANCE_ENTRY: Final = "record_finance_entry"
SERVICE_DETECT_PATTERNS: Final = "detect_patterns"

# Service fields
FIELD_USER_ID: Final = "user_id"
FIELD_HABIT_ID: Final = "habit_id"
FIELD_CHALLENGE_ID: Final = "challenge_id"
FIELD_NAME: Final = "name"
FIELD_FREQUENCY: Final = "frequency"
FIELD_DIFFICULTY: Final = "difficulty"
FIELD_XP: Final = "xp"
FIELD_CATEGORY: Final = "category"
FIELD_DATE: Final = "date"
FIELD_DAYS: Final = "days"
FIELD_DURATION: Final = "duration"
FIELD_EXTRA_DAYS: Final = "extra_days"
FIELD_SCORE: Final = "score"
FIELD_TARGET_DAYS: Final = "target_days"
FIELD_MODALITY: Final = "modality"
FIELD_START_DATE: Final = "start_date"
FIELD_END_DATE: Final = "end_date"
FIELD_DISPLAY_NAME: Final = "display_name"
FIELD_MOOD: Final = "mood"
FIELD_ENERGY: Final = "energy"
FIELD_PRODUCTIVITY: Final = "productivity"
FIELD_SLEEP_HOURS: Final = "sleep_hours"
FIELD_WATER_GLASSES: Final = "water_glasses"
FIELD_WORKOUT: Final = "workout"
FIELD_EXPENSES: Final = "expenses"
FIELD_NOTES: Final = "notes"
FIELD_DURATION_MINUTES: Final = "duration_minutes"
FIELD_AMOUNT: Final = "amount"
FIELD_ENTRY_TYPE: Final = "entry_type"


# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
ERROR_NO_ENTRY_FOUND: Final = "No LifeTracker entry is loaded"
ERROR_HABIT_NOT_FOUND_FMT: Final = "Habit '{}' not found"
ERROR_CHALLENGE_NOT_FOUND_FMT: Final = "Challenge '{}' not found"
ERROR_WORKOUT_CHALLENGE_NOT_FOUND_FMT: Final = "Workout challenge '{}' not found"
ERROR_PARTICIPANT_NOT_FOUND_FMT: Final = "Participant '{}' not found"
ERROR_REWARD_NOT_FOUND_FMT: Final = "Reward '{}' not found in challenge '{}'"
ERROR_REWARD_NOT_ELIGIBLE_FMT: Final = "Reward '{}' requires {} completed days"
ERROR_AGGREGATE_BUSY_FMT: Final = "Another operation on '{}' is still in progress"
ERROR_PERIOD_ALREADY_COMPLETED_FMT: Final = (
    "Habit '{}' is already completed in the {} period containing {}"
)
ERROR_INVALID_DATE_FMT: Final = "Invalid date '{}'"
ERROR_INVALID_FREQUENCY_FMT: Final = "Invalid frequency '{}'"
ERROR_INVALID_DIFFICULTY_FMT: Final = "Invalid difficulty '{}'"
ERROR_INVALID_FINANCE_TYPE_FMT: Final = "Invalid finance entry type '{}'"
ERROR_INVALID_AMOUNT_FMT: Final = "Invalid amount '{}'"
