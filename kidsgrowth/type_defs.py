"""Type definitions for KidsGrowth data structures.

Records crossing the library boundary are plain dicts, typed with TypedDict for
static analysis only. Keys mirror the DATA_* constants in const.py.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime checks (null checks, .get()
defaults) stay in the engines and builders.

IMPORTANT: This file must NOT import from engines or builders to avoid
circular dependencies. Only typing machinery is imported here.
"""

from datetime import date, datetime
from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

GoalId = str
BadgeId = str
ChildId = str
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

FrequencyPeriod = Literal["daily", "weekly", "monthly"]
RiskLevel = Literal["low", "medium", "high"]
BadgeTier = Literal["bronze", "silver", "gold", "platinum"]

# Moment an event happened, as stored or as received from the store
EventMoment = date | datetime | str


# =============================================================================
# Screening
# =============================================================================


class QuestionData(TypedDict):
    """One M-CHAT-R item from the static question table."""

    number: int  # 1..20
    text: str
    examples: list[str]
    is_critical: bool
    yes_is_at_risk: bool  # True when "Yes" is the risk-indicating answer


class ScreeningResult(TypedDict):
    """Scored outcome of one complete answer set. Never mutated."""

    total_score: int  # 0..20
    risk_level: RiskLevel
    follow_up_needed: bool
    critical_fail_count: int
    message: str  # Band guidance text
    item_scores: dict[int, int]  # question number -> 0 or 1


class ScreeningRecord(TypedDict):
    """Row handed to the persistence collaborator after a submission."""

    child_id: ChildId
    answers: dict[str, bool]  # stringified question numbers, as stored
    total_score: int
    risk_level: RiskLevel
    follow_up_requested: bool
    completed_at: ISODatetime


# =============================================================================
# Goals and Progress
# =============================================================================


class GoalData(TypedDict):
    """Goal fields read by the computation core."""

    target_frequency: int
    frequency_period: str  # Validated against FREQUENCY_PERIOD_OPTIONS at use
    goal_id: NotRequired[GoalId]
    title: NotRequired[str]
    status: NotRequired[str]
    completed_at: NotRequired[ISODatetime | None]


class LogEventData(TypedDict):
    """One completion event for a goal. Append-only."""

    goal_id: GoalId
    occurred_on: EventMoment
    stars_earned: int


class ProgressResult(TypedDict):
    """Completion ratio for one goal inside its current period window."""

    count: int
    target: int
    ratio: float  # 0.0..1.0
    window_start: datetime
    period: FrequencyPeriod
    warnings: list[str]  # WARNING_* codes, empty when the goal is well formed


# =============================================================================
# Gamification
# =============================================================================


class MilestoneThreshold(TypedDict):
    """Cumulative star threshold with a display label."""

    stars_required: int
    label: str
    emoji: NotRequired[str]


class MilestoneProgress(TypedDict):
    """Next unearned milestone and the distance to it."""

    next: MilestoneThreshold | None
    remaining: int
    progress: float  # 0.0..1.0


class LevelProgress(TypedDict):
    """Star level derived from the cumulative counter."""

    level: int
    stars_in_level: int
    level_progress: float


class BadgeData(TypedDict):
    """Badge definition from the catalog."""

    badge_id: BadgeId
    name: str
    predicate_name: str
    requirement_value: int
    tier: BadgeTier
    description: NotRequired[str]


class UnlockedBadge(TypedDict):
    """Permanent unlock record. Written once, never recomputed."""

    badge_id: BadgeId
    tier: BadgeTier
    unlocked_at: ISODatetime


class ChildState(TypedDict):
    """Accumulated child state that badge predicates read.

    Built by StatisticsEngine.build_child_state() from log events and goals.
    """

    total_stars: int
    goals_completed: int
    goals_completed_this_month: int
    streak_days: int
    today_iso: ISODate


class CriterionResult(TypedDict):
    """The result of a single badge predicate check.

    Returned by predicate handler functions (e.g., _evaluate_stars_total).
    """

    criterion_type: str  # Predicate name (e.g., "stars_total")
    met: bool  # True if the requirement is satisfied
    progress: float  # 0.0 to 1.0 (capped at 1.0)
    threshold: float  # Requirement value
    current_value: float  # Current achieved value
    reason: str  # Human-readable explanation


class BadgeEvaluation(TypedDict):
    """Dry-run outcome of one badge against the current child state."""

    badge_id: BadgeId
    criteria_met: bool
    progress: float  # 0.0 to 1.0
    current_value: float
    threshold: float
    reason: str


__all__ = [
    "BadgeData",
    "BadgeEvaluation",
    "BadgeId",
    "BadgeTier",
    "ChildId",
    "ChildState",
    "CriterionResult",
    "EventMoment",
    "FrequencyPeriod",
    "GoalData",
    "GoalId",
    "ISODate",
    "ISODatetime",
    "LevelProgress",
    "LogEventData",
    "MilestoneProgress",
    "MilestoneThreshold",
    "ProgressResult",
    "QuestionData",
    "RiskLevel",
    "ScreeningRecord",
    "ScreeningResult",
    "UnlockedBadge",
]
