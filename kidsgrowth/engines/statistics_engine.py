"""Statistics Engine - Aggregates log events and goals into child state.

This engine derives the counters that badge predicates read:
- Cumulative stars earned
- Current daily logging streak
- Completed goals (all time and in the current month)

Design Principles:
    - Stateless: operates on passed records, never mutates them
    - Local calendar: day and month boundaries use the default timezone
    - Tolerant: bad records are skipped with a warning instead of raising
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from dateutil.relativedelta import relativedelta

from .. import const
from ..utils.dt_utils import (
    as_local,
    as_utc,
    dt_now_utc,
    dt_parse,
    start_of_local_month,
)

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from ..type_defs import ChildState, EventMoment, GoalData


class StatisticsEngine:
    """Stateless aggregation helpers for child progress statistics.

    Example:
        state = StatisticsEngine.build_child_state(events, goals, now)
        newly = GamificationEngine.evaluate_badges(badges, state, unlocked, now)
    """

    # ────────────────────────────────────────────────────────────────
    # Stars
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def total_stars(events: Iterable[Mapping[str, Any]]) -> int:
        """Sum stars_earned over log events.

        Events without stars_earned count DEFAULT_STARS_PER_LOG. Negative or
        non-integer values are logged and counted as 0.
        """
        total = 0
        for event in events:
            stars = event.get(const.DATA_LOG_STARS_EARNED, const.DEFAULT_STARS_PER_LOG)
            if isinstance(stars, bool) or not isinstance(stars, int) or stars < 0:
                const.LOGGER.warning(
                    "Ignoring invalid stars_earned %r on log for goal %s",
                    stars,
                    event.get(const.DATA_LOG_GOAL_ID),
                )
                continue
            total += stars
        return total

    # ────────────────────────────────────────────────────────────────
    # Streaks
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def _local_date(moment: EventMoment, tz: ZoneInfo | None = None) -> date | None:
        """Return the local calendar date of an event moment, or None."""
        parsed = dt_parse(moment, tz)
        if parsed is None:
            return None
        return as_local(parsed, tz).date()

    @staticmethod
    def current_streak(
        event_dates: Iterable[EventMoment],
        today: date | None = None,
        tz: ZoneInfo | None = None,
    ) -> int:
        """Count consecutive local days with at least one log, ending today.

        Several logs on one day count once. A day without logs before today
        ends the streak; no log today means a streak of 0.

        Args:
            event_dates: occurred_on values of the child's log events
            today: Reference date; defaults to today in local time
            tz: Optional timezone override
        """
        reference = today or as_local(dt_now_utc(), tz).date()

        logged_days: set[date] = set()
        for moment in event_dates:
            day = StatisticsEngine._local_date(moment, tz)
            if day is None:
                const.LOGGER.warning("Skipping unparseable log date %r", moment)
                continue
            logged_days.add(day)

        streak = 0
        expected = reference
        while expected in logged_days:
            streak += 1
            expected -= timedelta(days=1)
        return streak

    # ────────────────────────────────────────────────────────────────
    # Goals
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def count_goals_completed(goals: Iterable[GoalData]) -> int:
        """Count goals whose status is completed."""
        return sum(
            1
            for goal in goals
            if goal.get(const.DATA_GOAL_STATUS) == const.GOAL_STATUS_COMPLETED
        )

    @staticmethod
    def count_goals_completed_in_month(
        goals: Iterable[GoalData],
        now: datetime | None = None,
        tz: ZoneInfo | None = None,
    ) -> int:
        """Count completed goals whose completed_at falls in now's local month.

        Completed goals without a parseable completed_at are not counted.
        """
        reference = dt_parse(now, tz) or dt_now_utc()
        month_start = start_of_local_month(reference, tz)
        next_month_start = as_utc(month_start + relativedelta(months=1))
        month_start = as_utc(month_start)

        count = 0
        for goal in goals:
            if goal.get(const.DATA_GOAL_STATUS) != const.GOAL_STATUS_COMPLETED:
                continue
            completed_at = dt_parse(goal.get(const.DATA_GOAL_COMPLETED_AT), tz)
            if completed_at is None:
                const.LOGGER.debug(
                    "Completed goal %s has no completed_at, not counted this month",
                    goal.get(const.DATA_GOAL_ID),
                )
                continue
            if month_start <= as_utc(completed_at) < next_month_start:
                count += 1
        return count

    # ────────────────────────────────────────────────────────────────
    # Child State
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def build_child_state(
        events: Iterable[Mapping[str, Any]],
        goals: Iterable[GoalData],
        now: datetime | None = None,
        tz: ZoneInfo | None = None,
    ) -> ChildState:
        """Build the accumulated state read by badge predicates.

        Args:
            events: All log events of the child
            goals: All goals of the child
            now: Reference instant; defaults to the current UTC time
            tz: Optional timezone override

        Returns:
            ChildState TypedDict
        """
        reference = dt_parse(now, tz) or dt_now_utc()
        today = as_local(reference, tz).date()
        event_list = list(events)
        goal_list = list(goals)

        return {
            "total_stars": StatisticsEngine.total_stars(event_list),
            "goals_completed": StatisticsEngine.count_goals_completed(goal_list),
            "goals_completed_this_month": (
                StatisticsEngine.count_goals_completed_in_month(
                    goal_list, reference, tz
                )
            ),
            "streak_days": StatisticsEngine.current_streak(
                (e.get(const.DATA_LOG_OCCURRED_ON) for e in event_list), today, tz
            ),
            "today_iso": today.isoformat(),
        }
