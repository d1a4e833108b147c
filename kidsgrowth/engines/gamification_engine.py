"""Gamification Engine - Pure logic for star milestones, levels and badges.

This engine provides stateless, pure Python functions for:
- Next star milestone and distance to it
- Star level derived from the cumulative counter
- Badge predicate evaluation against accumulated child state
- Permanent badge unlocking (an unlocked badge is never re-evaluated)

ARCHITECTURE: All functions are static/class methods that operate on passed-in
data. The caller builds the ChildState (see StatisticsEngine.build_child_state)
and stores the returned unlock records.

Badge predicates (predicate_name):
- stars_total: cumulative stars earned
- goals_completed: goals with status completed
- goals_completed_this_month: goals completed in the current calendar month
- streak_days: consecutive days with at least one log, ending today
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..catalog import default_milestones
from ..data_builders import build_unlocked_badge
from ..utils.dt_utils import dt_now_utc
from ..utils.math_utils import calculate_ratio

if TYPE_CHECKING:
    from ..type_defs import (
        BadgeData,
        BadgeEvaluation,
        ChildState,
        CriterionResult,
        LevelProgress,
        MilestoneProgress,
        MilestoneThreshold,
        UnlockedBadge,
    )


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler function signature: (state, requirement_value) -> CriterionResult
PredicateHandler = Callable[["ChildState", int], "CriterionResult"]


# =============================================================================
# GAMIFICATION ENGINE
# =============================================================================


class GamificationEngine:
    """Pure logic engine for gamification evaluation.

    All methods are static - no instance state.

    Unlock Flow:
        1. Caller builds ChildState from logs and goals
        2. evaluate_badges() checks every still-locked badge
        3. Caller persists the returned UnlockedBadge records
        4. Next call passes those ids in `unlocked`, so they are skipped
    """

    # =========================================================================
    # PREDICATE HANDLER REGISTRY
    # =========================================================================

    # Maps badge predicate_name to handler function
    _PREDICATE_HANDLERS: dict[str, PredicateHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all predicate handlers.

        Called lazily before the first evaluation.
        """
        if cls._PREDICATE_HANDLERS:
            return  # Already registered

        cls._PREDICATE_HANDLERS = {
            const.BADGE_PREDICATE_STARS_TOTAL: cls._evaluate_stars_total,
            const.BADGE_PREDICATE_GOALS_COMPLETED: cls._evaluate_goals_completed,
            const.BADGE_PREDICATE_GOALS_COMPLETED_THIS_MONTH: (
                cls._evaluate_goals_completed_this_month
            ),
            const.BADGE_PREDICATE_STREAK_DAYS: cls._evaluate_streak_days,
        }

    @classmethod
    def supported_predicates(cls) -> list[str]:
        """Return the registered predicate names."""
        cls._register_handlers()
        return sorted(cls._PREDICATE_HANDLERS)

    # =========================================================================
    # MILESTONES AND LEVELS
    # =========================================================================

    @staticmethod
    def next_milestone(
        total_stars: int,
        milestones: Iterable[MilestoneThreshold] | None = None,
    ) -> MilestoneProgress:
        """Return the first milestone not yet reached and the distance to it.

        Args:
            total_stars: Cumulative stars earned
            milestones: Threshold list (any order); defaults to the star ladder

        Returns:
            MilestoneProgress. When every milestone has been reached, next is
            None, remaining is 0 and progress is 1.0.

        Examples:
            thresholds [1, 10, 25, 50], total 7  -> next 10, remaining 3, 0.7
            thresholds [1, 10, 25, 50], total 10 -> next 25, remaining 15, 0.4
        """
        ladder = sorted(
            milestones if milestones is not None else default_milestones(),
            key=lambda m: m[const.DATA_MILESTONE_STARS_REQUIRED],
        )

        for milestone in ladder:
            required = milestone[const.DATA_MILESTONE_STARS_REQUIRED]
            if required > total_stars:
                return {
                    "next": milestone,
                    "remaining": max(required - total_stars, 0),
                    "progress": calculate_ratio(total_stars, required),
                }

        return {"next": None, "remaining": 0, "progress": 1.0}

    @staticmethod
    def reached_milestones(
        total_stars: int,
        milestones: Iterable[MilestoneThreshold] | None = None,
    ) -> list[MilestoneThreshold]:
        """Return milestones already reached, ascending."""
        ladder = milestones if milestones is not None else default_milestones()
        return sorted(
            (
                m
                for m in ladder
                if m[const.DATA_MILESTONE_STARS_REQUIRED] <= total_stars
            ),
            key=lambda m: m[const.DATA_MILESTONE_STARS_REQUIRED],
        )

    @staticmethod
    def level_for_stars(total_stars: int) -> LevelProgress:
        """Return the star level (starting at 1) and progress inside it.

        Every STARS_PER_LEVEL stars adds one level.
        """
        stars = max(total_stars, 0)
        stars_in_level = stars % const.STARS_PER_LEVEL
        return {
            "level": stars // const.STARS_PER_LEVEL + 1,
            "stars_in_level": stars_in_level,
            "level_progress": stars_in_level / const.STARS_PER_LEVEL,
        }

    # =========================================================================
    # BADGES
    # =========================================================================

    @classmethod
    def evaluate_badge(cls, badge: BadgeData, state: ChildState) -> BadgeEvaluation:
        """Evaluate one badge against the child state without unlocking it.

        Pure function - no side effects. Unknown predicates are logged and
        reported as not met.
        """
        cls._register_handlers()

        badge_id = badge.get(const.DATA_BADGE_ID, "unknown")
        predicate_name = badge.get(const.DATA_BADGE_PREDICATE_NAME)
        requirement = badge.get(const.DATA_BADGE_REQUIREMENT_VALUE, 0)

        handler = cls._PREDICATE_HANDLERS.get(predicate_name or "")
        if handler is None:
            const.LOGGER.warning(
                "Unknown badge predicate: %s for badge %s", predicate_name, badge_id
            )
            return cls._make_result(
                badge_id=badge_id,
                criterion=cls._make_criterion_result(
                    criterion_type=predicate_name or "unknown",
                    met=False,
                    progress=0.0,
                    threshold=requirement,
                    current_value=0,
                    reason=f"Unknown predicate: {predicate_name}",
                ),
            )

        return cls._make_result(badge_id=badge_id, criterion=handler(state, requirement))

    @classmethod
    def evaluate_badges(
        cls,
        badges: Iterable[BadgeData],
        state: ChildState,
        unlocked: Iterable[str],
        now: datetime | None = None,
    ) -> list[UnlockedBadge]:
        """Return the badges newly unlocked by the current state.

        Badges whose id is in `unlocked` are skipped without evaluating, so
        an unlocked badge is never revoked when the state later drops below
        its requirement. Calling again with the returned ids added to
        `unlocked` yields an empty list.

        Args:
            badges: Badge catalog
            state: Accumulated child state
            unlocked: Ids of badges already unlocked for this child
            now: Unlock timestamp; defaults to the current UTC time

        Returns:
            UnlockedBadge records, in catalog order
        """
        unlocked_at = now or dt_now_utc()
        already_unlocked = set(unlocked)
        newly_unlocked: list[UnlockedBadge] = []

        for badge in badges:
            badge_id = badge[const.DATA_BADGE_ID]
            if badge_id in already_unlocked:
                continue

            evaluation = cls.evaluate_badge(badge, state)
            if not evaluation["criteria_met"]:
                continue

            const.LOGGER.debug("Badge unlocked: %s (%s)", badge_id, evaluation["reason"])
            newly_unlocked.append(build_unlocked_badge(badge, unlocked_at))
            already_unlocked.add(badge_id)

        return newly_unlocked

    @staticmethod
    def next_badge(
        badges: Iterable[BadgeData],
        predicate_name: str,
        current_value: int,
    ) -> BadgeData | None:
        """Return the lowest-requirement badge of a predicate not yet reached.

        Returns None when every badge of that predicate has been earned.
        """
        candidates = sorted(
            (
                b
                for b in badges
                if b.get(const.DATA_BADGE_PREDICATE_NAME) == predicate_name
            ),
            key=lambda b: b[const.DATA_BADGE_REQUIREMENT_VALUE],
        )
        for badge in candidates:
            if current_value < badge[const.DATA_BADGE_REQUIREMENT_VALUE]:
                return badge
        return None

    # =========================================================================
    # PREDICATE HANDLERS
    # =========================================================================

    @staticmethod
    def _evaluate_counter(
        criterion_type: str,
        label: str,
        current_value: int,
        requirement: int,
    ) -> CriterionResult:
        """Shared logic for "counter reaches requirement" predicates."""
        met = current_value >= requirement
        return GamificationEngine._make_criterion_result(
            criterion_type=criterion_type,
            met=met,
            progress=calculate_ratio(current_value, requirement),
            threshold=requirement,
            current_value=current_value,
            reason=f"{label}: {current_value}/{requirement}",
        )

    @staticmethod
    def _evaluate_stars_total(state: ChildState, requirement: int) -> CriterionResult:
        """Cumulative stars reach the requirement."""
        return GamificationEngine._evaluate_counter(
            const.BADGE_PREDICATE_STARS_TOTAL,
            "Stars",
            state.get(const.DATA_STATE_TOTAL_STARS, 0),
            requirement,
        )

    @staticmethod
    def _evaluate_goals_completed(
        state: ChildState, requirement: int
    ) -> CriterionResult:
        """Completed goals reach the requirement."""
        return GamificationEngine._evaluate_counter(
            const.BADGE_PREDICATE_GOALS_COMPLETED,
            "Goals completed",
            state.get(const.DATA_STATE_GOALS_COMPLETED, 0),
            requirement,
        )

    @staticmethod
    def _evaluate_goals_completed_this_month(
        state: ChildState, requirement: int
    ) -> CriterionResult:
        """Goals completed in the current month reach the requirement."""
        return GamificationEngine._evaluate_counter(
            const.BADGE_PREDICATE_GOALS_COMPLETED_THIS_MONTH,
            "Goals completed this month",
            state.get(const.DATA_STATE_GOALS_COMPLETED_THIS_MONTH, 0),
            requirement,
        )

    @staticmethod
    def _evaluate_streak_days(state: ChildState, requirement: int) -> CriterionResult:
        """Current daily logging streak reaches the requirement."""
        return GamificationEngine._evaluate_counter(
            const.BADGE_PREDICATE_STREAK_DAYS,
            "Streak",
            state.get(const.DATA_STATE_STREAK_DAYS, 0),
            requirement,
        )

    # =========================================================================
    # RESULT BUILDERS
    # =========================================================================

    @staticmethod
    def _make_result(badge_id: str, criterion: CriterionResult) -> BadgeEvaluation:
        """Create a standardized BadgeEvaluation from a criterion result."""
        return {
            "badge_id": badge_id,
            "criteria_met": criterion["met"],
            "progress": criterion["progress"],
            "current_value": criterion["current_value"],
            "threshold": criterion["threshold"],
            "reason": criterion["reason"],
        }

    @staticmethod
    def _make_criterion_result(
        criterion_type: str,
        met: bool,
        progress: float,
        threshold: float,
        current_value: float,
        reason: str = "",
    ) -> CriterionResult:
        """Create a standardized CriterionResult.

        Args:
            criterion_type: Predicate name (e.g., "stars_total")
            met: Whether this criterion is satisfied
            progress: Progress toward threshold (0.0-1.0)
            threshold: Target value to reach
            current_value: Current achieved value
            reason: Human-readable explanation

        Returns:
            CriterionResult TypedDict
        """
        return {
            "criterion_type": criterion_type,
            "met": met,
            "progress": progress,
            "threshold": threshold,
            "current_value": current_value,
            "reason": reason,
        }
