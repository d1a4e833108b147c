# File: const.py
"""Constants for the KidsGrowth computation core.

This file centralizes data keys, enumerations, clinical cut points and the
default static catalogs (M-CHAT-R questions, star milestones, badges) so that
every engine reads the same values.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Frequency Periods
# ------------------------------------------------------------------------------------------------
FREQUENCY_PERIOD_DAILY = "daily"
FREQUENCY_PERIOD_WEEKLY = "weekly"
FREQUENCY_PERIOD_MONTHLY = "monthly"

FREQUENCY_PERIOD_OPTIONS: Final = (
    FREQUENCY_PERIOD_DAILY,
    FREQUENCY_PERIOD_WEEKLY,
    FREQUENCY_PERIOD_MONTHLY,
)

# Fallback for unknown periods
DEFAULT_FREQUENCY_PERIOD = FREQUENCY_PERIOD_DAILY

# ------------------------------------------------------------------------------------------------
# Data Integrity Warnings
# ------------------------------------------------------------------------------------------------
WARNING_INVALID_TARGET_FREQUENCY = "invalid_target_frequency"
WARNING_UNKNOWN_FREQUENCY_PERIOD = "unknown_frequency_period"
WARNING_NEGATIVE_STARS = "negative_stars_earned"
WARNING_UNPARSEABLE_EVENT_DATE = "unparseable_event_date"

# ------------------------------------------------------------------------------------------------
# Goal Data Keys
# ------------------------------------------------------------------------------------------------
DATA_GOAL_ID = "goal_id"
DATA_GOAL_TITLE = "title"
DATA_GOAL_TARGET_FREQUENCY = "target_frequency"
DATA_GOAL_FREQUENCY_PERIOD = "frequency_period"
DATA_GOAL_STATUS = "status"
DATA_GOAL_COMPLETED_AT = "completed_at"

GOAL_STATUS_ACTIVE = "active"
GOAL_STATUS_PAUSED = "paused"
GOAL_STATUS_COMPLETED = "completed"

GOAL_STATUS_OPTIONS: Final = (
    GOAL_STATUS_ACTIVE,
    GOAL_STATUS_PAUSED,
    GOAL_STATUS_COMPLETED,
)

# Goal validation error keys (field -> error)
CFOP_ERROR_GOAL_TARGET_FREQUENCY = "target_frequency"
CFOP_ERROR_GOAL_FREQUENCY_PERIOD = "frequency_period"
CFOP_ERROR_GOAL_STATUS = "status"
ERROR_INVALID_TARGET_FREQUENCY = "invalid_target_frequency"
ERROR_INVALID_FREQUENCY_PERIOD = "invalid_frequency_period"
ERROR_INVALID_GOAL_STATUS = "invalid_goal_status"

# ------------------------------------------------------------------------------------------------
# Log Event Data Keys
# ------------------------------------------------------------------------------------------------
DATA_LOG_GOAL_ID = "goal_id"
DATA_LOG_OCCURRED_ON = "occurred_on"
DATA_LOG_STARS_EARNED = "stars_earned"

# Stars credited per log when the caller does not say otherwise
DEFAULT_STARS_PER_LOG = 1

# ------------------------------------------------------------------------------------------------
# M-CHAT-R Screening
# ------------------------------------------------------------------------------------------------
MCHAT_QUESTION_COUNT = 20
MCHAT_FIRST_QUESTION = 1
MCHAT_LAST_QUESTION = 20

DATA_QUESTION_NUMBER = "number"
DATA_QUESTION_TEXT = "text"
DATA_QUESTION_EXAMPLES = "examples"
DATA_QUESTION_IS_CRITICAL = "is_critical"
DATA_QUESTION_YES_IS_AT_RISK = "yes_is_at_risk"

RISK_LEVEL_LOW = "low"
RISK_LEVEL_MEDIUM = "medium"
RISK_LEVEL_HIGH = "high"

# Ascending severity
RISK_LEVEL_ORDER: Final = (RISK_LEVEL_LOW, RISK_LEVEL_MEDIUM, RISK_LEVEL_HIGH)

# Published M-CHAT-R bands: 0-2 low, 3-7 medium, 8-20 high
MCHAT_MEDIUM_RISK_CUT = 3
MCHAT_HIGH_RISK_CUT = 8

# More than this many failed critical items raises risk to at least medium
MCHAT_CRITICAL_FAIL_MINIMUM = 1

# Items reverse-scored ("Yes" is the at-risk answer)
MCHAT_YES_AT_RISK_ITEMS: Final = frozenset({2, 5, 12})

# Six critical items (joint attention, social interest, name response, imitation)
MCHAT_CRITICAL_ITEMS: Final = frozenset({1, 7, 8, 9, 10, 15})

RISK_DISPLAY_TEXT: Final = {
    RISK_LEVEL_LOW: "Low Risk",
    RISK_LEVEL_MEDIUM: "Medium Risk",
    RISK_LEVEL_HIGH: "High Risk",
}

RISK_COLORS: Final = {
    RISK_LEVEL_LOW: "#4CAF50",
    RISK_LEVEL_MEDIUM: "#FF9800",
    RISK_LEVEL_HIGH: "#F44336",
}

RISK_MESSAGES: Final = {
    RISK_LEVEL_LOW: (
        "Low risk. If child is younger than 24 months, screen again after "
        "second birthday."
    ),
    RISK_LEVEL_MEDIUM: (
        "Medium risk. Administer the Follow-Up (M-CHAT-R/F) to get additional "
        "information about at-risk responses."
    ),
    RISK_LEVEL_HIGH: (
        "High risk. Immediate referral for diagnostic evaluation and "
        "eligibility evaluation for early intervention is recommended."
    ),
}

# Questionnaire session states
SESSION_STATE_UNANSWERED = "unanswered"
SESSION_STATE_IN_PROGRESS = "in_progress"
SESSION_STATE_COMPLETE = "complete"

# Question wording follows the published M-CHAT-R parent interview form.
MCHAT_R_QUESTIONS: Final = (
    (
        1,
        "If you point at something across the room, does your child look at it?",
        ("If you point at a toy or an animal, does your child look at the toy or animal?",),
    ),
    (2, "Have you ever wondered if your child might be deaf?", ()),
    (
        3,
        "Does your child play pretend or make-believe?",
        (
            "Pretend to drink from an empty cup",
            "Pretend to talk on a phone",
            "Pretend to feed a doll or stuffed animal",
        ),
    ),
    (
        4,
        "Does your child like climbing on things?",
        ("Furniture", "Playground equipment", "Stairs"),
    ),
    (
        5,
        "Does your child make unusual finger movements near his or her eyes?",
        ("Wiggling fingers close to eyes",),
    ),
    (
        6,
        "Does your child point with one finger to ask for something or to get help?",
        ("Pointing to a snack or toy out of reach",),
    ),
    (
        7,
        "Does your child point with one finger to show you something interesting?",
        ("Pointing at an airplane in the sky or a big truck in the road",),
    ),
    (
        8,
        "Is your child interested in other children?",
        (
            "Does your child watch other children?",
            "Smile at them?",
            "Go to them?",
        ),
    ),
    (
        9,
        "Does your child show you things by bringing them to you or holding "
        "them up for you to see?",
        ("Not to get help, but just to share",),
    ),
    (
        10,
        "Does your child respond when you call his or her name?",
        ("Does he or she look up, talk or babble, or stop what he or she is doing?",),
    ),
    (
        11,
        "When you smile at your child, does he or she smile back at you?",
        (),
    ),
    (
        12,
        "Does your child get upset by everyday noises?",
        ("Vacuum cleaner", "Blender", "Loud music"),
    ),
    (13, "Does your child walk?", ()),
    (
        14,
        "Does your child look you in the eye when you are talking to him or "
        "her, playing with him or her, or dressing him or her?",
        (),
    ),
    (
        15,
        "Does your child try to copy what you do?",
        ("Wave bye-bye", "Clap", "Make a funny noise when you make one"),
    ),
    (
        16,
        "If you turn your head to look at something, does your child look "
        "around to see what you are looking at?",
        (),
    ),
    (
        17,
        "Does your child try to get you to watch him or her?",
        ("Does your child look at you for praise, or say 'look' or 'watch me'?",),
    ),
    (
        18,
        "Does your child understand when you tell him or her to do something?",
        (
            "If you don't point, can your child understand 'put the book on "
            "the chair' or 'bring me the blanket'?",
        ),
    ),
    (
        19,
        "If something new happens, does your child look at your face to see "
        "how you feel about it?",
        ("If he or she hears a strange or funny noise", "Sees a new toy"),
    ),
    (
        20,
        "Does your child like movement activities?",
        ("Being swung", "Being bounced on your knee"),
    ),
)

# ------------------------------------------------------------------------------------------------
# Milestones
# ------------------------------------------------------------------------------------------------
DATA_MILESTONE_STARS_REQUIRED = "stars_required"
DATA_MILESTONE_LABEL = "label"
DATA_MILESTONE_EMOJI = "emoji"

DEFAULT_STAR_MILESTONES: Final = (
    (1, "First Star", "⭐"),
    (10, "Star Collector", "🌟"),
    (25, "Star Explorer", "✨"),
    (50, "Rising Star", "🌠"),
    (100, "Star Champion", "🏆"),
    (250, "Star Master", "👑"),
    (500, "Star Legend", "🚀"),
    (1000, "Superstar", "💫"),
)

# Levels
STARS_PER_LEVEL = 100

# ------------------------------------------------------------------------------------------------
# Badges
# ------------------------------------------------------------------------------------------------
DATA_BADGE_ID = "badge_id"
DATA_BADGE_NAME = "name"
DATA_BADGE_DESCRIPTION = "description"
DATA_BADGE_PREDICATE_NAME = "predicate_name"
DATA_BADGE_REQUIREMENT_VALUE = "requirement_value"
DATA_BADGE_TIER = "tier"

BADGE_TIER_BRONZE = "bronze"
BADGE_TIER_SILVER = "silver"
BADGE_TIER_GOLD = "gold"
BADGE_TIER_PLATINUM = "platinum"

BADGE_TIER_OPTIONS: Final = (
    BADGE_TIER_BRONZE,
    BADGE_TIER_SILVER,
    BADGE_TIER_GOLD,
    BADGE_TIER_PLATINUM,
)

# Badge predicates
BADGE_PREDICATE_STARS_TOTAL = "stars_total"
BADGE_PREDICATE_GOALS_COMPLETED = "goals_completed"
BADGE_PREDICATE_GOALS_COMPLETED_THIS_MONTH = "goals_completed_this_month"
BADGE_PREDICATE_STREAK_DAYS = "streak_days"

# Accumulated child state keys (badge predicate context)
DATA_STATE_TOTAL_STARS = "total_stars"
DATA_STATE_GOALS_COMPLETED = "goals_completed"
DATA_STATE_GOALS_COMPLETED_THIS_MONTH = "goals_completed_this_month"
DATA_STATE_STREAK_DAYS = "streak_days"
DATA_STATE_TODAY_ISO = "today_iso"

DEFAULT_BADGES: Final = (
    {
        DATA_BADGE_ID: "first_star",
        DATA_BADGE_NAME: "First Star",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 1,
        DATA_BADGE_TIER: BADGE_TIER_BRONZE,
    },
    {
        DATA_BADGE_ID: "star_collector",
        DATA_BADGE_NAME: "Star Collector",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 10,
        DATA_BADGE_TIER: BADGE_TIER_BRONZE,
    },
    {
        DATA_BADGE_ID: "star_explorer",
        DATA_BADGE_NAME: "Star Explorer",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 25,
        DATA_BADGE_TIER: BADGE_TIER_SILVER,
    },
    {
        DATA_BADGE_ID: "rising_star",
        DATA_BADGE_NAME: "Rising Star",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 50,
        DATA_BADGE_TIER: BADGE_TIER_SILVER,
    },
    {
        DATA_BADGE_ID: "star_champion",
        DATA_BADGE_NAME: "Star Champion",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 100,
        DATA_BADGE_TIER: BADGE_TIER_GOLD,
    },
    {
        DATA_BADGE_ID: "super_star",
        DATA_BADGE_NAME: "Super Star",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 250,
        DATA_BADGE_TIER: BADGE_TIER_GOLD,
    },
    {
        DATA_BADGE_ID: "star_legend",
        DATA_BADGE_NAME: "Star Legend",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STARS_TOTAL,
        DATA_BADGE_REQUIREMENT_VALUE: 500,
        DATA_BADGE_TIER: BADGE_TIER_PLATINUM,
    },
    {
        DATA_BADGE_ID: "goal_getter",
        DATA_BADGE_NAME: "Goal Getter",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_GOALS_COMPLETED,
        DATA_BADGE_REQUIREMENT_VALUE: 1,
        DATA_BADGE_TIER: BADGE_TIER_BRONZE,
    },
    {
        DATA_BADGE_ID: "goal_crusher",
        DATA_BADGE_NAME: "Goal Crusher",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_GOALS_COMPLETED,
        DATA_BADGE_REQUIREMENT_VALUE: 5,
        DATA_BADGE_TIER: BADGE_TIER_SILVER,
    },
    {
        DATA_BADGE_ID: "goal_master",
        DATA_BADGE_NAME: "Goal Master",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_GOALS_COMPLETED,
        DATA_BADGE_REQUIREMENT_VALUE: 10,
        DATA_BADGE_TIER: BADGE_TIER_GOLD,
    },
    {
        DATA_BADGE_ID: "goal_champion",
        DATA_BADGE_NAME: "Goal Champion",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_GOALS_COMPLETED,
        DATA_BADGE_REQUIREMENT_VALUE: 25,
        DATA_BADGE_TIER: BADGE_TIER_PLATINUM,
    },
    {
        DATA_BADGE_ID: "monthly_momentum",
        DATA_BADGE_NAME: "Monthly Momentum",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_GOALS_COMPLETED_THIS_MONTH,
        DATA_BADGE_REQUIREMENT_VALUE: 3,
        DATA_BADGE_TIER: BADGE_TIER_SILVER,
    },
    {
        DATA_BADGE_ID: "getting_started",
        DATA_BADGE_NAME: "Getting Started",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STREAK_DAYS,
        DATA_BADGE_REQUIREMENT_VALUE: 3,
        DATA_BADGE_TIER: BADGE_TIER_BRONZE,
    },
    {
        DATA_BADGE_ID: "on_fire",
        DATA_BADGE_NAME: "On Fire",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STREAK_DAYS,
        DATA_BADGE_REQUIREMENT_VALUE: 7,
        DATA_BADGE_TIER: BADGE_TIER_BRONZE,
    },
    {
        DATA_BADGE_ID: "committed",
        DATA_BADGE_NAME: "Committed",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STREAK_DAYS,
        DATA_BADGE_REQUIREMENT_VALUE: 14,
        DATA_BADGE_TIER: BADGE_TIER_SILVER,
    },
    {
        DATA_BADGE_ID: "dedication",
        DATA_BADGE_NAME: "Dedication",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STREAK_DAYS,
        DATA_BADGE_REQUIREMENT_VALUE: 30,
        DATA_BADGE_TIER: BADGE_TIER_GOLD,
    },
    {
        DATA_BADGE_ID: "unstoppable",
        DATA_BADGE_NAME: "Unstoppable",
        DATA_BADGE_PREDICATE_NAME: BADGE_PREDICATE_STREAK_DAYS,
        DATA_BADGE_REQUIREMENT_VALUE: 60,
        DATA_BADGE_TIER: BADGE_TIER_PLATINUM,
    },
)

# ------------------------------------------------------------------------------------------------
# Catalog File Sections
# ------------------------------------------------------------------------------------------------
CATALOG_SECTION_QUESTIONS = "questions"
CATALOG_SECTION_MILESTONES = "milestones"
CATALOG_SECTION_BADGES = "badges"
