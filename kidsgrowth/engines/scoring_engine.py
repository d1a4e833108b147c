"""Scoring Engine - Pure logic for M-CHAT-R scoring and risk banding.

This engine provides stateless, pure Python functions for:
- Per-item scoring against each question's risk-indicating polarity
- Total score and critical-item fail count
- Risk band assignment with the critical-item floor
- Display helpers for risk levels (text, color, guidance message)

ARCHITECTURE: All functions are static methods that operate on passed-in data.
Submission and persistence belong to QuestionnaireSession and its caller.

Scoring rules:
    - An item scores 1 point when the answer matches its at-risk polarity
      ("Yes" for reverse-scored items 2, 5 and 12, "No" for all others)
    - total 0-2 -> low, 3-7 -> medium, 8-20 -> high
    - more than MCHAT_CRITICAL_FAIL_MINIMUM failed critical items raises
      the band to at least medium
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .. import const
from ..catalog import build_question_table, default_question_table

if TYPE_CHECKING:
    from ..type_defs import QuestionData, RiskLevel, ScreeningResult


# =============================================================================
# EXCEPTIONS
# =============================================================================


class IncompleteScreeningError(Exception):
    """Raised when scoring or submission is attempted before all 20 answers.

    Attributes:
        answered_count: Number of questions answered so far
        missing: Question numbers still unanswered, ascending
    """

    def __init__(self, answered_count: int, missing: list[int]) -> None:
        """Initialize IncompleteScreeningError.

        Args:
            answered_count: Number of questions answered so far
            missing: Question numbers still unanswered
        """
        self.answered_count = answered_count
        self.missing = missing
        super().__init__(
            f"Screening incomplete: {answered_count}/{const.MCHAT_QUESTION_COUNT} "
            f"answered, missing questions {missing}"
        )


# =============================================================================
# ANSWER SET VALUE TYPE
# =============================================================================


def _validate_question_number(number: int) -> None:
    """Reject question numbers outside 1..20."""
    if (
        isinstance(number, bool)
        or not isinstance(number, int)
        or not const.MCHAT_FIRST_QUESTION <= number <= const.MCHAT_LAST_QUESTION
    ):
        raise ValueError(
            f"Question number must be an int in "
            f"{const.MCHAT_FIRST_QUESTION}..{const.MCHAT_LAST_QUESTION}, got {number!r}"
        )


@dataclass(frozen=True)
class AnswerSet:
    """Immutable mapping of question number (1..20) to a Yes/No answer.

    Keys are ints. Stringified keys only appear in the persisted form
    returned by to_record().
    """

    answers: Mapping[int, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate and take a private copy of the answers."""
        copied: dict[int, bool] = {}
        for number, value in self.answers.items():
            _validate_question_number(number)
            if not isinstance(value, bool):
                raise TypeError(
                    f"Answer for question {number} must be a bool, got {value!r}"
                )
            copied[number] = value
        object.__setattr__(self, "answers", copied)

    @classmethod
    def from_record(cls, record: Mapping[str, bool]) -> AnswerSet:
        """Build an AnswerSet from the stored {"1": true, ...} form."""
        return cls({int(key): value for key, value in record.items()})

    def with_answer(self, number: int, value: bool) -> AnswerSet:
        """Return a new AnswerSet with slot `number` set (overwrite allowed)."""
        return AnswerSet({**self.answers, number: value})

    def get(self, number: int) -> bool | None:
        """Return the answer for `number`, or None when unanswered."""
        return self.answers.get(number)

    def is_complete(self) -> bool:
        """Return True when all 20 questions are answered."""
        return len(self.answers) == const.MCHAT_QUESTION_COUNT

    def missing(self) -> list[int]:
        """Return unanswered question numbers, ascending."""
        return [
            number
            for number in range(
                const.MCHAT_FIRST_QUESTION, const.MCHAT_LAST_QUESTION + 1
            )
            if number not in self.answers
        ]

    def to_record(self) -> dict[str, bool]:
        """Return the persisted form with stringified keys in question order."""
        return {str(number): self.answers[number] for number in sorted(self.answers)}

    def __len__(self) -> int:
        """Return the number of answered questions."""
        return len(self.answers)

    def __contains__(self, number: object) -> bool:
        """Return True when `number` has been answered."""
        return number in self.answers

    def __iter__(self) -> Iterator[int]:
        """Iterate answered question numbers in ascending order."""
        return iter(sorted(self.answers))

    def __hash__(self) -> int:
        """Hash by content so equal answer sets hash alike."""
        return hash(frozenset(self.answers.items()))


# =============================================================================
# SCORING ENGINE
# =============================================================================


class ScoringEngine:
    """Pure logic engine for M-CHAT-R scoring.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_at_risk_answer(question: QuestionData, answer: bool) -> bool:
        """Return True when `answer` is the risk-indicating response."""
        return answer is question[const.DATA_QUESTION_YES_IS_AT_RISK]

    @staticmethod
    def classify_risk(total_score: int, critical_fail_count: int) -> RiskLevel:
        """Map a total score and critical fail count to a risk band.

        Args:
            total_score: Sum of item points (0..20)
            critical_fail_count: Number of critical items that scored

        Returns:
            "low", "medium" or "high"
        """
        risk_level: RiskLevel
        if total_score >= const.MCHAT_HIGH_RISK_CUT:
            risk_level = "high"
        elif total_score >= const.MCHAT_MEDIUM_RISK_CUT:
            risk_level = "medium"
        else:
            risk_level = "low"

        if (
            risk_level == "low"
            and critical_fail_count > const.MCHAT_CRITICAL_FAIL_MINIMUM
        ):
            const.LOGGER.debug(
                "Raising risk to medium: %s critical items failed (score %s)",
                critical_fail_count,
                total_score,
            )
            risk_level = "medium"

        return risk_level

    @staticmethod
    def validate_question_table(
        questions: Iterable[QuestionData],
    ) -> tuple[QuestionData, ...]:
        """Return the table ordered by number if it holds exactly items 1..20.

        Raises:
            CatalogValidationError: On schema errors, duplicates or gaps
        """
        return build_question_table([dict(question) for question in questions])

    @staticmethod
    def risk_rank(risk_level: str) -> int:
        """Return the severity rank of a risk level (low=0, medium=1, high=2)."""
        return const.RISK_LEVEL_ORDER.index(risk_level)

    @staticmethod
    def score(
        answers: AnswerSet | Mapping[int, bool],
        questions: tuple[QuestionData, ...] | None = None,
    ) -> ScreeningResult:
        """Score a complete answer set.

        Pure function - deterministic, no side effects.

        Args:
            answers: AnswerSet (or plain int-keyed mapping) with all 20 answers
            questions: Question table; defaults to the published M-CHAT-R table

        Returns:
            ScreeningResult TypedDict

        Raises:
            IncompleteScreeningError: When fewer than 20 answers are present
        """
        answer_set = answers if isinstance(answers, AnswerSet) else AnswerSet(answers)
        if not answer_set.is_complete():
            raise IncompleteScreeningError(len(answer_set), answer_set.missing())

        table = (
            ScoringEngine.validate_question_table(questions)
            if questions is not None
            else default_question_table()
        )

        item_scores: dict[int, int] = {}
        total_score = 0
        critical_fail_count = 0

        for question in table:
            number = question[const.DATA_QUESTION_NUMBER]
            answer = answer_set.answers[number]
            points = 1 if ScoringEngine.is_at_risk_answer(question, answer) else 0
            item_scores[number] = points
            total_score += points
            if points and question[const.DATA_QUESTION_IS_CRITICAL]:
                critical_fail_count += 1

        risk_level = ScoringEngine.classify_risk(total_score, critical_fail_count)

        const.LOGGER.debug(
            "Scored screening: total=%s critical=%s risk=%s",
            total_score,
            critical_fail_count,
            risk_level,
        )

        return {
            "total_score": total_score,
            "risk_level": risk_level,
            "follow_up_needed": risk_level != const.RISK_LEVEL_LOW,
            "critical_fail_count": critical_fail_count,
            "message": const.RISK_MESSAGES[risk_level],
            "item_scores": item_scores,
        }

    @staticmethod
    def risk_display_text(risk_level: str) -> str:
        """Return the display label for a risk level ("Low Risk", ...)."""
        return const.RISK_DISPLAY_TEXT[risk_level]

    @staticmethod
    def risk_color(risk_level: str) -> str:
        """Return the hex color used to render a risk level."""
        return const.RISK_COLORS[risk_level]
