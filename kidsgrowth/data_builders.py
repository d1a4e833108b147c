"""Record validation and building helpers.

This module is the SINGLE SOURCE OF TRUTH for the shapes the computation core
hands to (or accepts from) the persistence collaborators:

### Build Functions
Each record type has a `build_<record>()` function that:
- Applies field defaults
- Stamps timestamps
- Returns a complete dict ready for storage

### Validation Functions
`validate_goal_data()` takes a goal dict with DATA_* keys, applies the
business rules and returns a dict of errors (empty if valid). It never
raises, so list screens can show malformed goals instead of failing.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from . import const
from .utils.dt_utils import dt_now_iso, dt_today_iso

if TYPE_CHECKING:
    from .engines.scoring_engine import AnswerSet
    from .type_defs import (
        BadgeData,
        LogEventData,
        ScreeningRecord,
        ScreeningResult,
        UnlockedBadge,
    )


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information.

    Attributes:
        field: The data key that failed validation
        error_key: The ERROR_* constant describing the failure
        placeholders: Optional values for the error message
    """

    def __init__(
        self,
        field: str,
        error_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize EntityValidationError.

        Args:
            field: The data key that failed validation
            error_key: The ERROR_* constant for the error
            placeholders: Optional dict for message placeholders
        """
        self.field = field
        self.error_key = error_key
        self.placeholders = placeholders or {}
        super().__init__(f"{field}: {error_key}")


# ==============================================================================
# GOALS
# ==============================================================================


def validate_goal_data(data: dict[str, Any]) -> dict[str, str]:
    """Validate goal business rules.

    Args:
        data: Goal dict with DATA_GOAL_* keys

    Returns:
        Dict of errors: {error_field: error_key}
        Empty dict means validation passed.

    Validation Rules:
        1. target_frequency is an int > 0
        2. frequency_period is daily, weekly or monthly
        3. status (if present) is active, paused or completed
    """
    errors: dict[str, str] = {}

    # === 1. Target frequency ===
    target = data.get(const.DATA_GOAL_TARGET_FREQUENCY)
    if isinstance(target, bool) or not isinstance(target, int) or target <= 0:
        errors[const.CFOP_ERROR_GOAL_TARGET_FREQUENCY] = (
            const.ERROR_INVALID_TARGET_FREQUENCY
        )

    # === 2. Frequency period ===
    period = data.get(const.DATA_GOAL_FREQUENCY_PERIOD)
    if period not in const.FREQUENCY_PERIOD_OPTIONS:
        errors[const.CFOP_ERROR_GOAL_FREQUENCY_PERIOD] = (
            const.ERROR_INVALID_FREQUENCY_PERIOD
        )

    # === 3. Status ===
    if const.DATA_GOAL_STATUS in data:
        if data[const.DATA_GOAL_STATUS] not in const.GOAL_STATUS_OPTIONS:
            errors[const.CFOP_ERROR_GOAL_STATUS] = const.ERROR_INVALID_GOAL_STATUS

    return errors


# ==============================================================================
# LOG EVENTS
# ==============================================================================


def build_log_event(
    goal_id: str,
    occurred_on: date | datetime | str | None = None,
    stars_earned: int | None = None,
) -> LogEventData:
    """Build a log event for a goal completion.

    Args:
        goal_id: Goal the completion belongs to
        occurred_on: When it happened; defaults to today's local date
        stars_earned: Stars credited; defaults to DEFAULT_STARS_PER_LOG

    Raises:
        EntityValidationError: When stars_earned is negative
    """
    stars = const.DEFAULT_STARS_PER_LOG if stars_earned is None else stars_earned
    if stars < 0:
        raise EntityValidationError(
            field=const.DATA_LOG_STARS_EARNED,
            error_key=const.WARNING_NEGATIVE_STARS,
            placeholders={"value": str(stars)},
        )

    return {
        "goal_id": goal_id,
        "occurred_on": occurred_on if occurred_on is not None else dt_today_iso(),
        "stars_earned": stars,
    }


# ==============================================================================
# SCREENINGS
# ==============================================================================


def build_screening_record(
    child_id: str,
    answers: AnswerSet,
    result: ScreeningResult,
    completed_at: str | None = None,
) -> ScreeningRecord:
    """Build the persisted screening row from a scored answer set.

    Answers are stored with stringified question numbers.
    """
    return {
        "child_id": child_id,
        "answers": answers.to_record(),
        "total_score": result["total_score"],
        "risk_level": result["risk_level"],
        "follow_up_requested": result["follow_up_needed"],
        "completed_at": completed_at or dt_now_iso(),
    }


# ==============================================================================
# BADGES
# ==============================================================================


def build_unlocked_badge(badge: BadgeData, unlocked_at: datetime) -> UnlockedBadge:
    """Build the permanent unlock record for a badge."""
    return {
        "badge_id": badge[const.DATA_BADGE_ID],
        "tier": badge[const.DATA_BADGE_TIER],
        "unlocked_at": unlocked_at.isoformat(),
    }
