"""Questionnaire Engine - In-progress state for one screening attempt.

QuestionnaireSession holds the answer set and cursor for a single M-CHAT-R
attempt. It is owned by exactly one caller and must not be shared across
attempts or mutated concurrently.

States (derived, never stored):
    unanswered  -> 0 answers
    in_progress -> 1-19 answers
    complete    -> 20 answers

Completion is a predicate over the answers, so moving the cursor back into a
complete set does not change it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import build_screening_record
from .scoring_engine import AnswerSet, IncompleteScreeningError, ScoringEngine

if TYPE_CHECKING:
    from ..type_defs import QuestionData, ScreeningRecord, ScreeningResult

# Persistence callback supplied by the caller: record -> stored row (any shape)
PersistCallback = Callable[["ScreeningRecord"], Any]


class QuestionnaireSession:
    """Answer set plus navigation cursor for one screening attempt."""

    def __init__(
        self,
        questions: tuple[QuestionData, ...] | None = None,
        answers: AnswerSet | None = None,
    ) -> None:
        """Initialize an empty session (or resume from a saved answer set).

        Args:
            questions: Question table used when scoring; defaults to M-CHAT-R
            answers: Optional answers to resume from
        """
        self._questions = questions
        self._answers = answers or AnswerSet()
        self._cursor = const.MCHAT_FIRST_QUESTION
        self._result: ScreeningResult | None = None

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def answers(self) -> AnswerSet:
        """Current (immutable) answer set."""
        return self._answers

    @property
    def cursor(self) -> int:
        """Question number currently shown (1..20)."""
        return self._cursor

    @property
    def result(self) -> ScreeningResult | None:
        """Result of the last successful submit, if any."""
        return self._result

    @property
    def answered_count(self) -> int:
        """Number of distinct questions answered."""
        return len(self._answers)

    @property
    def state(self) -> str:
        """Derived session state (unanswered, in_progress, complete)."""
        if self._answers.is_complete():
            return const.SESSION_STATE_COMPLETE
        if len(self._answers) == 0:
            return const.SESSION_STATE_UNANSWERED
        return const.SESSION_STATE_IN_PROGRESS

    def is_complete(self) -> bool:
        """Return True iff all 20 questions are answered."""
        return self._answers.is_complete()

    def unanswered_numbers(self) -> list[int]:
        """Return question numbers still to answer, ascending."""
        return self._answers.missing()

    def current_answer(self) -> bool | None:
        """Return the answer at the cursor, or None."""
        return self._answers.get(self._cursor)

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def set_answer(self, number: int, value: bool) -> None:
        """Record (or overwrite) the answer for question `number`.

        Questions may be answered in any order.

        Raises:
            ValueError: If `number` is outside 1..20
            TypeError: If `value` is not a bool
        """
        self._answers = self._answers.with_answer(number, value)

    def advance(self) -> None:
        """Move the cursor forward; no-op on the last question."""
        if self._cursor < const.MCHAT_LAST_QUESTION:
            self._cursor += 1

    def retreat(self) -> None:
        """Move the cursor back; no-op on the first question."""
        if self._cursor > const.MCHAT_FIRST_QUESTION:
            self._cursor -= 1

    def go_to(self, number: int) -> None:
        """Jump to question `number`; out-of-range numbers are ignored."""
        if const.MCHAT_FIRST_QUESTION <= number <= const.MCHAT_LAST_QUESTION:
            self._cursor = number

    def reset(self) -> None:
        """Discard all answers and the last result; cursor back to 1."""
        self._answers = AnswerSet()
        self._cursor = const.MCHAT_FIRST_QUESTION
        self._result = None

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    def score(self) -> ScreeningResult:
        """Score the current answers without persisting.

        Raises:
            IncompleteScreeningError: When fewer than 20 answers are present
        """
        return ScoringEngine.score(self._answers, self._questions)

    def submit(self, child_id: str, persist: PersistCallback) -> Any:
        """Score the answers and hand the screening record to `persist`.

        `persist` is never called for an incomplete session. Errors raised by
        `persist` propagate unchanged and the answers are kept, so the caller
        can retry without asking the questions again.

        Args:
            child_id: Child the screening belongs to
            persist: Callback that stores the record and returns the stored row

        Returns:
            Whatever `persist` returns

        Raises:
            IncompleteScreeningError: When fewer than 20 answers are present
        """
        if not self._answers.is_complete():
            const.LOGGER.debug(
                "Refusing to submit screening for child %s: %s/%s answered",
                child_id,
                len(self._answers),
                const.MCHAT_QUESTION_COUNT,
            )
            raise IncompleteScreeningError(len(self._answers), self._answers.missing())

        result = self.score()
        record = build_screening_record(child_id, self._answers, result)
        stored = persist(record)

        self._result = result
        return stored
