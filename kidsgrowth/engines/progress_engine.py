"""Progress Engine - Pure logic for goal period windows and completion ratios.

This engine provides stateless, pure Python functions for:
- Period window start (daily, weekly, monthly) in the local timezone
- Counting log events inside the current window
- Clamped completion ratios with data-integrity warnings
- Batch progress for goal list screens

Window rules (window is [start, now], inclusive of start):
    daily   -> local midnight of now's calendar day
    weekly  -> local midnight of the most recent Sunday on/before now
    monthly -> local midnight of the first day of now's month

Malformed goals never raise: an unknown period is treated as daily and a
target_frequency <= 0 yields ratio 1.0. Both add a WARNING_* code to the
result and log at WARNING level.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

from .. import const
from ..utils.dt_utils import (
    as_utc,
    dt_parse,
    start_of_local_day,
    start_of_local_month,
    start_of_local_week,
)
from ..utils.math_utils import calculate_ratio

if TYPE_CHECKING:
    from collections.abc import Callable
    from zoneinfo import ZoneInfo

    from ..type_defs import FrequencyPeriod, GoalData, ProgressResult


class ProgressEngine:
    """Pure logic engine for goal progress windows.

    All methods are static - no instance state. Inputs are never mutated.
    """

    # Maps each frequency period to its window-start function
    WINDOW_START: ClassVar[dict[str, Callable[..., datetime]]] = {
        const.FREQUENCY_PERIOD_DAILY: start_of_local_day,
        const.FREQUENCY_PERIOD_WEEKLY: start_of_local_week,
        const.FREQUENCY_PERIOD_MONTHLY: start_of_local_month,
    }

    # =========================================================================
    # WINDOW
    # =========================================================================

    @staticmethod
    def resolve_period(frequency_period: Any) -> tuple[FrequencyPeriod, list[str]]:
        """Return a usable period and any warnings raised while resolving it.

        Unknown periods fall back to DEFAULT_FREQUENCY_PERIOD (daily).
        """
        if frequency_period in const.FREQUENCY_PERIOD_OPTIONS:
            return frequency_period, []

        const.LOGGER.warning(
            "Unknown frequency period %r, treating as %s",
            frequency_period,
            const.DEFAULT_FREQUENCY_PERIOD,
        )
        return "daily", [const.WARNING_UNKNOWN_FREQUENCY_PERIOD]

    @staticmethod
    def window_start(
        frequency_period: str,
        now: datetime,
        tz: ZoneInfo | None = None,
    ) -> datetime:
        """Return the inclusive start of the period window containing `now`.

        Args:
            frequency_period: daily, weekly or monthly (unknown -> daily)
            now: Reference instant (naive values are taken as local time)
            tz: Optional timezone override for local midnight

        Returns:
            Timezone-aware datetime at local midnight
        """
        period, _ = ProgressEngine.resolve_period(frequency_period)
        reference = dt_parse(now, tz) or now
        return ProgressEngine.WINDOW_START[period](reference, tz)

    # =========================================================================
    # PROGRESS
    # =========================================================================

    @staticmethod
    def count_events_in_window(
        events: Iterable[Mapping[str, Any]],
        start: datetime,
        now: datetime,
        tz: ZoneInfo | None = None,
    ) -> tuple[int, list[str]]:
        """Count events with start <= occurred_on <= now.

        Date-only values are interpreted as local midnight of that date.
        Unparseable values are skipped with a warning.

        Returns:
            (count, warnings)
        """
        # Instants are compared in UTC; same-zone comparison ignores fold
        window_start = as_utc(start)
        window_end = as_utc(now)
        count = 0
        warnings: list[str] = []
        for event in events:
            raw_moment = event.get(const.DATA_LOG_OCCURRED_ON)
            moment = dt_parse(raw_moment, tz)
            if moment is None:
                const.LOGGER.warning(
                    "Skipping log event for goal %s with unparseable date %r",
                    event.get(const.DATA_LOG_GOAL_ID),
                    raw_moment,
                )
                if const.WARNING_UNPARSEABLE_EVENT_DATE not in warnings:
                    warnings.append(const.WARNING_UNPARSEABLE_EVENT_DATE)
                continue
            if window_start <= as_utc(moment) <= window_end:
                count += 1
        return count, warnings

    @staticmethod
    def compute_progress(
        frequency_period: str,
        now: datetime,
        events: Iterable[Mapping[str, Any]],
        target_frequency: int,
        tz: ZoneInfo | None = None,
    ) -> ProgressResult:
        """Compute the completion ratio of one goal for the current window.

        Pure function - called for every goal on every render.

        Args:
            frequency_period: daily, weekly or monthly
            now: Reference instant
            events: Log events of this goal (LogEventData-like mappings)
            target_frequency: Completions required per period
            tz: Optional timezone override

        Returns:
            ProgressResult with count, target, ratio (0..1), window_start,
            period and warnings
        """
        period, warnings = ProgressEngine.resolve_period(frequency_period)
        reference = dt_parse(now, tz) or now
        start = ProgressEngine.WINDOW_START[period](reference, tz)

        count, event_warnings = ProgressEngine.count_events_in_window(
            events, start, reference, tz
        )
        warnings.extend(event_warnings)

        target_valid = (
            isinstance(target_frequency, int)
            and not isinstance(target_frequency, bool)
            and target_frequency > 0
        )
        if not target_valid:
            const.LOGGER.warning(
                "Goal target_frequency %r is not positive, reporting as fully met",
                target_frequency,
            )
            warnings.append(const.WARNING_INVALID_TARGET_FREQUENCY)
            ratio = 1.0
        else:
            ratio = calculate_ratio(count, target_frequency)

        return {
            "count": count,
            "target": target_frequency,
            "ratio": ratio,
            "window_start": start,
            "period": period,
            "warnings": warnings,
        }

    @staticmethod
    def compute_goal_progress(
        goal: GoalData,
        events: Iterable[Mapping[str, Any]],
        now: datetime,
        tz: ZoneInfo | None = None,
    ) -> ProgressResult:
        """Compute progress for a goal record.

        When the goal carries a goal_id, only events with the same goal_id
        are counted.
        """
        goal_id = goal.get(const.DATA_GOAL_ID)
        if goal_id is not None:
            events = [e for e in events if e.get(const.DATA_LOG_GOAL_ID) == goal_id]

        return ProgressEngine.compute_progress(
            goal.get(const.DATA_GOAL_FREQUENCY_PERIOD, const.DEFAULT_FREQUENCY_PERIOD),
            now,
            events,
            goal.get(const.DATA_GOAL_TARGET_FREQUENCY, 0),
            tz,
        )

    @staticmethod
    def compute_progress_for_goals(
        goals: Iterable[GoalData],
        events: Iterable[Mapping[str, Any]],
        now: datetime,
        tz: ZoneInfo | None = None,
    ) -> dict[str, ProgressResult]:
        """Compute progress for many goals from one mixed event list.

        Events are grouped by goal_id once. Goals without a goal_id are
        skipped with a debug log.

        Returns:
            {goal_id: ProgressResult}
        """
        by_goal: dict[str, list[Mapping[str, Any]]] = defaultdict(list)
        for event in events:
            by_goal[event.get(const.DATA_LOG_GOAL_ID)].append(event)

        results: dict[str, ProgressResult] = {}
        for goal in goals:
            goal_id = goal.get(const.DATA_GOAL_ID)
            if goal_id is None:
                const.LOGGER.debug("Skipping goal without goal_id: %s", goal)
                continue
            results[goal_id] = ProgressEngine.compute_progress(
                goal.get(
                    const.DATA_GOAL_FREQUENCY_PERIOD, const.DEFAULT_FREQUENCY_PERIOD
                ),
                now,
                by_goal.get(goal_id, []),
                goal.get(const.DATA_GOAL_TARGET_FREQUENCY, 0),
                tz,
            )
        return results

    @staticmethod
    def is_goal_met(progress: ProgressResult) -> bool:
        """Return True when the current window's target has been reached."""
        return progress["ratio"] >= 1.0
