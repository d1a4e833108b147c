"""Unit tests for GamificationEngine - pure Python logic tests.

These tests verify the stateless milestone, level and badge evaluation.

Test Categories:
- Next milestone (next_milestone)
- Reached milestones (reached_milestones)
- Star levels (level_for_stars)
- Predicate handlers (_evaluate_*)
- Badge evaluation full flow (evaluate_badge, evaluate_badges)
- Next badge lookup (next_badge)
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from typing import Any, cast

from freezegun import freeze_time
import pytest

from kidsgrowth import const
from kidsgrowth.catalog import default_badges
from kidsgrowth.engines.gamification_engine import GamificationEngine
from kidsgrowth.type_defs import BadgeData, ChildState, MilestoneThreshold

NOW = datetime(2026, 2, 10, 18, 30, tzinfo=UTC)

# =============================================================================
# TEST FIXTURES - Minimal state and catalog builders
# =============================================================================


def make_state(
    *,
    total_stars: int = 0,
    goals_completed: int = 0,
    goals_completed_this_month: int = 0,
    streak_days: int = 0,
    today_iso: str = "2026-02-10",
) -> ChildState:
    """Build a minimal ChildState for testing."""
    return {
        "total_stars": total_stars,
        "goals_completed": goals_completed,
        "goals_completed_this_month": goals_completed_this_month,
        "streak_days": streak_days,
        "today_iso": today_iso,
    }


def make_badge(
    *,
    badge_id: str = "badge-123",
    name: str = "Test Badge",
    predicate_name: str = const.BADGE_PREDICATE_STARS_TOTAL,
    requirement_value: int = 10,
    tier: str = const.BADGE_TIER_BRONZE,
) -> BadgeData:
    """Build a minimal badge definition."""
    return cast(
        "BadgeData",
        {
            const.DATA_BADGE_ID: badge_id,
            const.DATA_BADGE_NAME: name,
            const.DATA_BADGE_PREDICATE_NAME: predicate_name,
            const.DATA_BADGE_REQUIREMENT_VALUE: requirement_value,
            const.DATA_BADGE_TIER: tier,
        },
    )


def make_milestones(*thresholds: int) -> list[MilestoneThreshold]:
    """Build milestones labelled by their threshold."""
    return [
        {
            "stars_required": threshold,
            "label": f"{threshold} stars",
        }
        for threshold in thresholds
    ]


# =============================================================================
# TEST: next_milestone
# =============================================================================


class TestNextMilestone:
    """Tests for the next unearned milestone."""

    def test_between_thresholds(self) -> None:
        """7 stars against [1, 10, 25, 50] -> next 10, remaining 3, 0.7."""
        result = GamificationEngine.next_milestone(7, make_milestones(1, 10, 25, 50))

        assert result["next"] is not None
        assert result["next"]["stars_required"] == 10
        assert result["remaining"] == 3
        assert result["progress"] == pytest.approx(0.7)

    def test_exactly_at_threshold_moves_to_next(self) -> None:
        """Reaching a threshold makes the following one next."""
        result = GamificationEngine.next_milestone(10, make_milestones(1, 10, 25, 50))

        assert result["next"] is not None
        assert result["next"]["stars_required"] == 25
        assert result["remaining"] == 15

    def test_remaining_zero_once_all_met(self) -> None:
        """Past the last threshold: no next, remaining 0, progress 1."""
        result = GamificationEngine.next_milestone(50, make_milestones(1, 10, 25, 50))

        assert result["next"] is None
        assert result["remaining"] == 0
        assert result["progress"] == 1.0

    def test_zero_stars(self) -> None:
        """No stars yet: the first milestone is next."""
        result = GamificationEngine.next_milestone(0, make_milestones(1, 10))

        assert result["next"] is not None
        assert result["next"]["stars_required"] == 1
        assert result["remaining"] == 1
        assert result["progress"] == 0.0

    def test_unsorted_thresholds(self) -> None:
        """Thresholds are considered in ascending order."""
        result = GamificationEngine.next_milestone(12, make_milestones(50, 10, 25))

        assert result["next"] is not None
        assert result["next"]["stars_required"] == 25

    def test_empty_milestones(self) -> None:
        """An empty ladder behaves like all milestones met."""
        result = GamificationEngine.next_milestone(3, [])

        assert result == {"next": None, "remaining": 0, "progress": 1.0}

    def test_remaining_never_negative(self) -> None:
        """remaining is >= 0 for every star count."""
        milestones = make_milestones(1, 10, 25, 50)
        for stars in range(0, 60):
            result = GamificationEngine.next_milestone(stars, milestones)
            assert result["remaining"] >= 0
            assert 0.0 <= result["progress"] <= 1.0

    def test_default_ladder(self) -> None:
        """The default ladder starts at 1 star."""
        result = GamificationEngine.next_milestone(0)

        assert result["next"] is not None
        assert result["next"]["stars_required"] == 1
        assert result["next"]["label"] == "First Star"


class TestReachedMilestones:
    """Tests for reached_milestones."""

    def test_returns_reached_in_order(self) -> None:
        """Only thresholds <= total are returned, ascending."""
        reached = GamificationEngine.reached_milestones(
            25, make_milestones(50, 1, 25, 10)
        )

        assert [m["stars_required"] for m in reached] == [1, 10, 25]


# =============================================================================
# TEST: level_for_stars
# =============================================================================


class TestLevelForStars:
    """Tests for star levels."""

    @pytest.mark.parametrize(
        ("stars", "level", "in_level"),
        [(0, 1, 0), (99, 1, 99), (100, 2, 0), (250, 3, 50)],
    )
    def test_levels(self, stars: int, level: int, in_level: int) -> None:
        """Every 100 stars adds a level."""
        result = GamificationEngine.level_for_stars(stars)

        assert result["level"] == level
        assert result["stars_in_level"] == in_level
        assert result["level_progress"] == in_level / 100


# =============================================================================
# TEST: Predicate handlers
# =============================================================================


class TestPredicateHandlers:
    """Tests for individual predicate handlers."""

    def test_stars_total_below_requirement(self) -> None:
        """Stars below requirement returns met=False."""
        result = GamificationEngine._evaluate_stars_total(make_state(total_stars=5), 10)

        assert result["met"] is False
        assert result["current_value"] == 5
        assert result["threshold"] == 10
        assert result["progress"] == 0.5

    def test_stars_total_at_requirement(self) -> None:
        """Stars at requirement returns met=True."""
        result = GamificationEngine._evaluate_stars_total(
            make_state(total_stars=10), 10
        )

        assert result["met"] is True
        assert result["progress"] == 1.0

    def test_goals_completed(self) -> None:
        """goals_completed reads the all-time counter."""
        result = GamificationEngine._evaluate_goals_completed(
            make_state(goals_completed=3, goals_completed_this_month=1), 3
        )

        assert result["met"] is True
        assert result["criterion_type"] == const.BADGE_PREDICATE_GOALS_COMPLETED

    def test_goals_completed_this_month(self) -> None:
        """goals_completed_this_month reads the monthly counter."""
        result = GamificationEngine._evaluate_goals_completed_this_month(
            make_state(goals_completed=10, goals_completed_this_month=2), 5
        )

        assert result["met"] is False
        assert result["current_value"] == 2

    def test_streak_days(self) -> None:
        """streak_days reads the current streak."""
        result = GamificationEngine._evaluate_streak_days(make_state(streak_days=7), 7)

        assert result["met"] is True
        assert "7/7" in result["reason"]

    def test_registry_has_all_predicates(self) -> None:
        """Every predicate used by the default catalog has a handler."""
        supported = set(GamificationEngine.supported_predicates())

        assert {b["predicate_name"] for b in default_badges()} <= supported


# =============================================================================
# TEST: evaluate_badge
# =============================================================================


class TestEvaluateBadge:
    """Tests for the dry-run badge evaluation."""

    def test_met(self) -> None:
        """A satisfied predicate reports criteria_met."""
        result = GamificationEngine.evaluate_badge(
            make_badge(requirement_value=10), make_state(total_stars=12)
        )

        assert result["badge_id"] == "badge-123"
        assert result["criteria_met"] is True
        assert result["progress"] == 1.0

    def test_not_met(self) -> None:
        """An unsatisfied predicate reports partial progress."""
        result = GamificationEngine.evaluate_badge(
            make_badge(requirement_value=10), make_state(total_stars=4)
        )

        assert result["criteria_met"] is False
        assert result["progress"] == 0.4

    def test_unknown_predicate_stays_locked(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Unknown predicates log a warning and are never met."""
        badge = make_badge(predicate_name="moon_phase", requirement_value=0)

        with caplog.at_level(logging.WARNING):
            result = GamificationEngine.evaluate_badge(badge, make_state())

        assert result["criteria_met"] is False
        assert "moon_phase" in caplog.text


# =============================================================================
# TEST: evaluate_badges
# =============================================================================


class TestEvaluateBadges:
    """Tests for permanent badge unlocking."""

    def test_returns_newly_unlocked_with_timestamp(self) -> None:
        """Met badges are returned with unlocked_at = now."""
        badges = [
            make_badge(badge_id="ten", requirement_value=10),
            make_badge(badge_id="fifty", requirement_value=50),
        ]

        unlocked = GamificationEngine.evaluate_badges(
            badges, make_state(total_stars=12), set(), NOW
        )

        assert unlocked == [
            {
                "badge_id": "ten",
                "tier": const.BADGE_TIER_BRONZE,
                "unlocked_at": NOW.isoformat(),
            }
        ]

    def test_idempotent(self) -> None:
        """Evaluating again with the returned ids yields nothing new."""
        badges = [make_badge(badge_id="ten", requirement_value=10)]
        state = make_state(total_stars=12)

        first = GamificationEngine.evaluate_badges(badges, state, set(), NOW)
        second = GamificationEngine.evaluate_badges(
            badges, state, {b["badge_id"] for b in first}, NOW
        )

        assert len(first) == 1
        assert second == []

    def test_unlocked_badges_are_not_re_evaluated(self) -> None:
        """A badge already unlocked is skipped even if state now fails it."""
        badges = [make_badge(badge_id="streak", predicate_name="streak_days")]

        result = GamificationEngine.evaluate_badges(
            badges, make_state(streak_days=0), {"streak"}, NOW
        )

        assert result == []

    def test_unknown_predicate_is_not_unlocked(self) -> None:
        """Unknown predicates never unlock."""
        badges = [make_badge(predicate_name="unknown", requirement_value=0)]

        result = GamificationEngine.evaluate_badges(badges, make_state(), [], NOW)

        assert result == []

    def test_catalog_order_preserved(self) -> None:
        """Several unlocks come back in catalog order."""
        badges = [
            make_badge(badge_id="b", requirement_value=1),
            make_badge(badge_id="a", requirement_value=2),
        ]

        result = GamificationEngine.evaluate_badges(
            badges, make_state(total_stars=5), [], NOW
        )

        assert [b["badge_id"] for b in result] == ["b", "a"]

    def test_duplicate_ids_unlock_once(self) -> None:
        """A repeated id in one catalog unlocks a single time."""
        badges = [make_badge(badge_id="dup"), make_badge(badge_id="dup")]

        result = GamificationEngine.evaluate_badges(
            badges, make_state(total_stars=100), [], NOW
        )

        assert len(result) == 1

    @freeze_time("2026-02-10 18:30:00")
    def test_default_timestamp_is_now(self) -> None:
        """Without an explicit now the current UTC time is stamped."""
        result = GamificationEngine.evaluate_badges(
            [make_badge(requirement_value=1)], make_state(total_stars=1), []
        )

        assert result[0]["unlocked_at"] == "2026-02-10T18:30:00+00:00"

    def test_default_catalog(self) -> None:
        """A first star unlocks the first-star badge of the default catalog."""
        result = GamificationEngine.evaluate_badges(
            default_badges(), make_state(total_stars=1), [], NOW
        )

        assert "first_star" in {b["badge_id"] for b in result}


# =============================================================================
# TEST: next_badge
# =============================================================================


class TestNextBadge:
    """Tests for next_badge."""

    def _badges(self) -> list[BadgeData]:
        return [
            make_badge(badge_id="fifty", requirement_value=50),
            make_badge(badge_id="ten", requirement_value=10),
            make_badge(
                badge_id="streak",
                predicate_name=const.BADGE_PREDICATE_STREAK_DAYS,
                requirement_value=3,
            ),
        ]

    def test_lowest_unreached_of_predicate(self) -> None:
        """Returns the lowest requirement still above the value."""
        badge = GamificationEngine.next_badge(
            self._badges(), const.BADGE_PREDICATE_STARS_TOTAL, 10
        )

        assert badge is not None
        assert badge["badge_id"] == "fifty"

    def test_none_when_all_earned(self) -> None:
        """Returns None once every badge of the predicate is reached."""
        badge = GamificationEngine.next_badge(
            self._badges(), const.BADGE_PREDICATE_STREAK_DAYS, 3
        )

        assert badge is None

    def test_unknown_predicate(self) -> None:
        """A predicate with no badges has no next badge."""
        badges: list[Any] = self._badges()

        assert GamificationEngine.next_badge(badges, "nothing", 0) is None
