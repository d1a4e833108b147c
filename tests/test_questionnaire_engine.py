"""Tests for QuestionnaireSession.

Tests cover:
- Derived session states (unanswered, in_progress, complete)
- Cursor navigation and clamping
- Out-of-order answering and overwrites
- Submission guard for incomplete sessions
- Persistence callback contract (record shape, failure handling)
- Reset
"""

from __future__ import annotations

from typing import Any

from freezegun import freeze_time
import pytest

from kidsgrowth import const
from kidsgrowth.engines.questionnaire_engine import QuestionnaireSession
from kidsgrowth.engines.scoring_engine import AnswerSet, IncompleteScreeningError
from kidsgrowth.type_defs import ScreeningRecord


def make_complete_session(at_risk: set[int] | None = None) -> QuestionnaireSession:
    """Return a session with all 20 questions answered."""
    at_risk = at_risk or set()
    session = QuestionnaireSession()
    for number in range(1, 21):
        risk_answer = number in const.MCHAT_YES_AT_RISK_ITEMS
        session.set_answer(number, risk_answer if number in at_risk else not risk_answer)
    return session


class RecordingStore:
    """Persistence callback that records what it was given."""

    def __init__(self, error: Exception | None = None) -> None:
        self.records: list[ScreeningRecord] = []
        self.error = error

    def __call__(self, record: ScreeningRecord) -> dict[str, Any]:
        self.records.append(record)
        if self.error is not None:
            raise self.error
        return {"id": "screening-1", **record}


class TestSessionState:
    """Tests for derived session state."""

    def test_new_session_is_unanswered(self) -> None:
        """A fresh session has no answers and the cursor on question 1."""
        session = QuestionnaireSession()

        assert session.state == const.SESSION_STATE_UNANSWERED
        assert session.cursor == 1
        assert session.answered_count == 0
        assert session.is_complete() is False

    def test_partial_session_is_in_progress(self) -> None:
        """1-19 answers means in progress."""
        session = QuestionnaireSession()
        session.set_answer(1, True)

        assert session.state == const.SESSION_STATE_IN_PROGRESS
        assert session.answered_count == 1

    def test_twenty_answers_is_complete(self) -> None:
        """All 20 answers means complete."""
        session = make_complete_session()

        assert session.state == const.SESSION_STATE_COMPLETE
        assert session.is_complete() is True
        assert session.unanswered_numbers() == []

    def test_moving_cursor_back_keeps_complete(self) -> None:
        """Completion does not depend on the cursor."""
        session = make_complete_session()
        session.go_to(20)
        session.retreat()
        session.retreat()

        assert session.is_complete() is True

    def test_resume_from_saved_answers(self) -> None:
        """A session can start from an existing answer set."""
        session = QuestionnaireSession(answers=AnswerSet({1: True, 2: False}))

        assert session.answered_count == 2
        assert session.unanswered_numbers() == list(range(3, 21))


class TestNavigation:
    """Tests for cursor movement."""

    def test_advance_and_retreat(self) -> None:
        """advance/retreat move the cursor by one."""
        session = QuestionnaireSession()
        session.advance()
        session.advance()
        session.retreat()

        assert session.cursor == 2

    def test_retreat_at_first_question_is_noop(self) -> None:
        """The cursor never goes below 1."""
        session = QuestionnaireSession()
        session.retreat()

        assert session.cursor == 1

    def test_advance_at_last_question_is_noop(self) -> None:
        """The cursor never goes above 20."""
        session = QuestionnaireSession()
        for _ in range(30):
            session.advance()

        assert session.cursor == 20

    def test_go_to_valid_question(self) -> None:
        """go_to jumps directly to a question."""
        session = QuestionnaireSession()
        session.go_to(14)

        assert session.cursor == 14

    @pytest.mark.parametrize("number", [0, 21])
    def test_go_to_out_of_range_is_ignored(self, number: int) -> None:
        """Out-of-range jumps leave the cursor unchanged."""
        session = QuestionnaireSession()
        session.go_to(5)
        session.go_to(number)

        assert session.cursor == 5

    def test_current_answer_follows_cursor(self) -> None:
        """current_answer returns the answer under the cursor, or None."""
        session = QuestionnaireSession()
        session.set_answer(2, True)

        assert session.current_answer() is None
        session.advance()
        assert session.current_answer() is True


class TestAnswering:
    """Tests for set_answer."""

    def test_answers_in_any_order(self) -> None:
        """Questions can be answered out of order."""
        session = QuestionnaireSession()
        session.set_answer(20, False)
        session.set_answer(1, True)
        session.set_answer(10, True)

        assert session.answered_count == 3
        assert session.answers.get(20) is False

    def test_overwrite_does_not_change_count(self) -> None:
        """Re-answering a question overwrites the previous answer."""
        session = QuestionnaireSession()
        session.set_answer(4, True)
        session.set_answer(4, False)

        assert session.answered_count == 1
        assert session.answers.get(4) is False

    def test_invalid_number_raises(self) -> None:
        """Question numbers outside 1..20 are rejected."""
        session = QuestionnaireSession()

        with pytest.raises(ValueError):
            session.set_answer(21, True)

    def test_invalid_value_raises(self) -> None:
        """Answers must be bools."""
        session = QuestionnaireSession()

        with pytest.raises(TypeError):
            session.set_answer(1, 1)  # type: ignore[arg-type]


class TestSubmit:
    """Tests for submission and the persistence callback."""

    def test_incomplete_submit_raises_without_persisting(self) -> None:
        """19 answers: IncompleteScreeningError and persist is never called."""
        session = QuestionnaireSession()
        for number in range(1, 20):
            session.set_answer(number, number in const.MCHAT_YES_AT_RISK_ITEMS)
        store = RecordingStore()

        with pytest.raises(IncompleteScreeningError) as err:
            session.submit("child-1", store)

        assert err.value.answered_count == 19
        assert err.value.missing == [20]
        assert store.records == []
        assert session.result is None

    @freeze_time("2026-03-04 10:00:00")
    def test_submit_persists_record(self) -> None:
        """A complete session hands one record to persist."""
        session = make_complete_session(at_risk={1, 7})
        store = RecordingStore()

        stored = session.submit("child-1", store)

        assert len(store.records) == 1
        record = store.records[0]
        assert record["child_id"] == "child-1"
        assert record["total_score"] == 2
        assert record["risk_level"] == const.RISK_LEVEL_MEDIUM
        assert record["follow_up_requested"] is True
        assert record["completed_at"] == "2026-03-04T10:00:00+00:00"
        assert set(record["answers"]) == {str(n) for n in range(1, 21)}
        assert stored["id"] == "screening-1"

    def test_submit_sets_result(self) -> None:
        """The scored result is available after a successful submit."""
        session = make_complete_session()

        session.submit("child-1", RecordingStore())

        assert session.result is not None
        assert session.result["total_score"] == 0

    def test_persist_failure_propagates_and_keeps_answers(self) -> None:
        """A failing store raises unchanged and the answers survive."""
        session = make_complete_session(at_risk={3})
        store = RecordingStore(error=ConnectionError("offline"))

        with pytest.raises(ConnectionError):
            session.submit("child-1", store)

        assert session.is_complete() is True
        assert session.answers.get(3) is False
        assert session.result is None

    def test_retry_after_failure(self) -> None:
        """The same session can be submitted again after a failure."""
        session = make_complete_session()
        failing = RecordingStore(error=ConnectionError("offline"))
        with pytest.raises(ConnectionError):
            session.submit("child-1", failing)

        working = RecordingStore()
        session.submit("child-1", working)

        assert len(working.records) == 1

    def test_score_without_submit(self) -> None:
        """score() returns a result without calling any store."""
        session = make_complete_session(at_risk={2, 3, 4})

        result = session.score()

        assert result["total_score"] == 3
        assert session.result is None


class TestReset:
    """Tests for reset."""

    def test_reset_clears_everything(self) -> None:
        """reset drops answers, result and cursor position."""
        session = make_complete_session()
        session.go_to(12)
        session.submit("child-1", RecordingStore())

        session.reset()

        assert session.state == const.SESSION_STATE_UNANSWERED
        assert session.cursor == 1
        assert session.result is None
