"""Static catalogs for KidsGrowth: questions, milestones and badges.

The engines never read files. They receive tables built here, either from the
defaults in const.py or from a YAML catalog file validated with voluptuous.

Example catalog file:

    milestones:
      - stars_required: 5
        label: "High Five"
    badges:
      - badge_id: "first_star"
        name: "First Star"
        predicate_name: "stars_total"
        requirement_value: 1
        tier: "bronze"
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import voluptuous as vol
import yaml

from . import const

if TYPE_CHECKING:
    from .type_defs import BadgeData, MilestoneThreshold, QuestionData


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class CatalogValidationError(Exception):
    """Raised when a catalog section does not match its schema.

    Attributes:
        section: Catalog section that failed (questions, milestones, badges)
        detail: Human-readable validation message from voluptuous
    """

    def __init__(self, section: str, detail: str) -> None:
        """Initialize CatalogValidationError.

        Args:
            section: Catalog section that failed
            detail: Validation message
        """
        self.section = section
        self.detail = detail
        super().__init__(f"Invalid {section} catalog: {detail}")


# ==============================================================================
# SCHEMAS
# ==============================================================================

QUESTION_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_QUESTION_NUMBER): vol.All(
            int,
            vol.Range(min=const.MCHAT_FIRST_QUESTION, max=const.MCHAT_LAST_QUESTION),
        ),
        vol.Required(const.DATA_QUESTION_TEXT): vol.All(str, vol.Length(min=1)),
        vol.Optional(const.DATA_QUESTION_EXAMPLES, default=list): [str],
        vol.Required(const.DATA_QUESTION_IS_CRITICAL): bool,
        vol.Required(const.DATA_QUESTION_YES_IS_AT_RISK): bool,
    }
)

MILESTONE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_MILESTONE_STARS_REQUIRED): vol.All(
            int, vol.Range(min=1)
        ),
        vol.Required(const.DATA_MILESTONE_LABEL): vol.All(str, vol.Length(min=1)),
        vol.Optional(const.DATA_MILESTONE_EMOJI): str,
    }
)

BADGE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_BADGE_ID): vol.All(str, vol.Length(min=1)),
        vol.Required(const.DATA_BADGE_NAME): vol.All(str, vol.Length(min=1)),
        vol.Required(const.DATA_BADGE_PREDICATE_NAME): vol.All(
            str, vol.Length(min=1)
        ),
        vol.Required(const.DATA_BADGE_REQUIREMENT_VALUE): vol.All(
            int, vol.Range(min=0)
        ),
        vol.Required(const.DATA_BADGE_TIER): vol.In(const.BADGE_TIER_OPTIONS),
        vol.Optional(const.DATA_BADGE_DESCRIPTION): str,
    }
)


def _validate_list(
    section: str, schema: vol.Schema, items: Any
) -> list[dict[str, Any]]:
    """Validate every entry of a catalog section against its schema."""
    if not isinstance(items, list):
        raise CatalogValidationError(section, "expected a list of entries")
    validated: list[dict[str, Any]] = []
    for index, item in enumerate(items):
        try:
            validated.append(schema(item))
        except vol.Invalid as err:
            raise CatalogValidationError(
                section, f"entry {index}: {err}"
            ) from err
    return validated


# ==============================================================================
# QUESTIONS
# ==============================================================================


def build_question_table(items: list[dict[str, Any]]) -> tuple[QuestionData, ...]:
    """Validate a question table and return it ordered by question number.

    The table must hold exactly one entry for each number 1..20.

    Raises:
        CatalogValidationError: On schema errors, duplicates or gaps
    """
    section = const.CATALOG_SECTION_QUESTIONS
    validated = _validate_list(section, QUESTION_SCHEMA, items)

    numbers = [q[const.DATA_QUESTION_NUMBER] for q in validated]
    if len(set(numbers)) != len(numbers):
        raise CatalogValidationError(section, "duplicate question numbers")
    expected = set(range(const.MCHAT_FIRST_QUESTION, const.MCHAT_LAST_QUESTION + 1))
    if set(numbers) != expected:
        missing = sorted(expected - set(numbers))
        raise CatalogValidationError(section, f"missing questions {missing}")

    validated.sort(key=lambda q: q[const.DATA_QUESTION_NUMBER])
    return tuple(validated)  # type: ignore[arg-type]


def default_question_table() -> tuple[QuestionData, ...]:
    """Return the published M-CHAT-R question table."""
    return build_question_table(
        [
            {
                const.DATA_QUESTION_NUMBER: number,
                const.DATA_QUESTION_TEXT: text,
                const.DATA_QUESTION_EXAMPLES: list(examples),
                const.DATA_QUESTION_IS_CRITICAL: number in const.MCHAT_CRITICAL_ITEMS,
                const.DATA_QUESTION_YES_IS_AT_RISK: (
                    number in const.MCHAT_YES_AT_RISK_ITEMS
                ),
            }
            for number, text, examples in const.MCHAT_R_QUESTIONS
        ]
    )


def get_question(
    number: int, table: tuple[QuestionData, ...] | None = None
) -> QuestionData | None:
    """Return the question with the given number, or None."""
    for question in table or default_question_table():
        if question[const.DATA_QUESTION_NUMBER] == number:
            return question
    return None


def get_critical_questions(
    table: tuple[QuestionData, ...] | None = None,
) -> list[QuestionData]:
    """Return the critical items in question order."""
    return [
        question
        for question in table or default_question_table()
        if question[const.DATA_QUESTION_IS_CRITICAL]
    ]


# ==============================================================================
# MILESTONES
# ==============================================================================


def build_milestones(items: list[dict[str, Any]]) -> tuple[MilestoneThreshold, ...]:
    """Validate milestones and return them sorted ascending by stars_required.

    Raises:
        CatalogValidationError: On schema errors or repeated thresholds
    """
    section = const.CATALOG_SECTION_MILESTONES
    validated = _validate_list(section, MILESTONE_SCHEMA, items)

    thresholds = [m[const.DATA_MILESTONE_STARS_REQUIRED] for m in validated]
    if len(set(thresholds)) != len(thresholds):
        raise CatalogValidationError(section, "duplicate stars_required values")

    validated.sort(key=lambda m: m[const.DATA_MILESTONE_STARS_REQUIRED])
    return tuple(validated)  # type: ignore[arg-type]


def default_milestones() -> tuple[MilestoneThreshold, ...]:
    """Return the default star milestone ladder."""
    return build_milestones(
        [
            {
                const.DATA_MILESTONE_STARS_REQUIRED: stars,
                const.DATA_MILESTONE_LABEL: label,
                const.DATA_MILESTONE_EMOJI: emoji,
            }
            for stars, label, emoji in const.DEFAULT_STAR_MILESTONES
        ]
    )


# ==============================================================================
# BADGES
# ==============================================================================


def build_badges(items: list[dict[str, Any]]) -> tuple[BadgeData, ...]:
    """Validate a badge catalog.

    Unknown predicate names are accepted here; the gamification engine logs
    them and keeps such badges locked.

    Raises:
        CatalogValidationError: On schema errors or duplicate badge ids
    """
    section = const.CATALOG_SECTION_BADGES
    validated = _validate_list(section, BADGE_SCHEMA, items)

    badge_ids = [b[const.DATA_BADGE_ID] for b in validated]
    if len(set(badge_ids)) != len(badge_ids):
        raise CatalogValidationError(section, "duplicate badge ids")

    return tuple(validated)  # type: ignore[arg-type]


def default_badges() -> tuple[BadgeData, ...]:
    """Return the default badge catalog."""
    return build_badges([dict(badge) for badge in const.DEFAULT_BADGES])


# ==============================================================================
# YAML CATALOG FILES
# ==============================================================================


def load_catalog(data: dict[str, Any] | None) -> dict[str, tuple[Any, ...]]:
    """Build all catalog sections from a parsed mapping.

    Sections missing from `data` fall back to the defaults.

    Returns:
        Dict with "questions", "milestones" and "badges" tuples
    """
    data = data or {}
    if not isinstance(data, dict):
        raise CatalogValidationError("catalog", "top level must be a mapping")

    questions = data.get(const.CATALOG_SECTION_QUESTIONS)
    milestones = data.get(const.CATALOG_SECTION_MILESTONES)
    badges = data.get(const.CATALOG_SECTION_BADGES)

    return {
        const.CATALOG_SECTION_QUESTIONS: (
            build_question_table(questions)
            if questions is not None
            else default_question_table()
        ),
        const.CATALOG_SECTION_MILESTONES: (
            build_milestones(milestones)
            if milestones is not None
            else default_milestones()
        ),
        const.CATALOG_SECTION_BADGES: (
            build_badges(badges) if badges is not None else default_badges()
        ),
    }


def load_catalog_file(path: str | Path) -> dict[str, tuple[Any, ...]]:
    """Read a YAML catalog file and build all sections.

    Raises:
        CatalogValidationError: When the file content is invalid
        OSError: When the file cannot be read
    """
    catalog_path = Path(path)
    with catalog_path.open(encoding="utf-8") as catalog_file:
        try:
            data = yaml.safe_load(catalog_file)
        except yaml.YAMLError as err:
            raise CatalogValidationError("catalog", str(err)) from err

    const.LOGGER.debug("Loaded catalog file %s", catalog_path)
    return load_catalog(data)
