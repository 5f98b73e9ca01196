"""
Unit Tests for Answer and AnswerSet models

Tests validation, canonical ordering, grouping and display formatting.
"""

import pytest

from qcm_haptics.core.models import Answer, AnswerSet, QuestionGroup


class TestAnswer:
    """Tests for Answer dataclass."""

    def test_init_when_valid_values_then_creates_answer(self):
        """Valid answers should be created successfully."""
        a = Answer(3, "c", "3/c")
        assert a.question_number == 3
        assert a.letter == "c"
        assert a.source_span == "3/c"
        assert a.key == (3, "c")

    def test_init_when_zero_question_then_raises_error(self):
        """Question numbers must be positive."""
        with pytest.raises(ValueError, match="must be positive"):
            Answer(0, "a")

    def test_init_when_uppercase_letter_then_raises_error(self):
        """Letters must already be normalised to lowercase."""
        with pytest.raises(ValueError, match="Invalid answer letter"):
            Answer(1, "A")

    def test_init_when_letter_outside_range_then_raises_error(self):
        """Only a..e are valid."""
        with pytest.raises(ValueError, match="Invalid answer letter"):
            Answer(1, "f")

    def test_init_when_bool_question_then_raises_error(self):
        """bool is not accepted as a question number."""
        with pytest.raises(ValueError, match="must be an int"):
            Answer(True, "a")  # type: ignore[arg-type]

    def test_eq_when_spans_differ_then_still_equal(self):
        """source_span is diagnostic only."""
        assert Answer(1, "a", "1/a") == Answer(1, "a", "Q1: a")

    def test_init_when_frozen_then_immutable(self):
        """Answers should be immutable."""
        a = Answer(1, "a")
        with pytest.raises(AttributeError):
            a.letter = "b"  # type: ignore


class TestAnswerSet:
    """Tests for AnswerSet dataclass."""

    def test_from_answers_when_unsorted_then_sorts_by_question_then_letter(self):
        """from_answers() should produce canonical order."""
        s = AnswerSet.from_answers([Answer(2, "b"), Answer(1, "d"), Answer(1, "a")])
        assert s.pairs() == [(1, "a"), (1, "d"), (2, "b")]

    def test_from_answers_when_duplicates_then_first_span_wins(self):
        """Duplicates collapse and the earliest instance is kept."""
        s = AnswerSet.from_answers([Answer(1, "a", "1/a"), Answer(1, "a", "Q1 a")])
        assert len(s) == 1
        assert s[0].source_span == "1/a"

    def test_init_when_out_of_order_then_raises_error(self):
        """Direct construction must already be canonical."""
        with pytest.raises(ValueError, match="out of order"):
            AnswerSet((Answer(2, "a"), Answer(1, "a")))

    def test_init_when_duplicate_then_raises_error(self):
        """Direct construction rejects duplicate keys."""
        with pytest.raises(ValueError, match="Duplicate"):
            AnswerSet((Answer(1, "a"), Answer(1, "a")))

    def test_empty_when_called_then_falsy(self):
        """empty() gives an empty, falsy set."""
        s = AnswerSet.empty()
        assert not s
        assert len(s) == 0
        assert s.pairs() == []

    def test_question_numbers_when_called_then_distinct_ascending(self):
        s = AnswerSet.from_answers([Answer(3, "a"), Answer(1, "b"), Answer(3, "c")])
        assert s.question_numbers() == [1, 3]

    def test_group_by_question_when_multi_answer_then_groups_in_order(self):
        """Groups come out in question order, letters in letter order."""
        s = AnswerSet.from_answers([Answer(2, "c"), Answer(1, "b"), Answer(2, "a")])
        groups = s.group_by_question()
        assert [g.question_number for g in groups] == [1, 2]
        assert groups[1].letters == ["a", "c"]
        assert isinstance(groups[0], QuestionGroup)

    def test_group_by_question_when_empty_then_no_groups(self):
        assert AnswerSet.empty().group_by_question() == []

    def test_format_for_display_when_called_then_uppercase_lines(self):
        s = AnswerSet.from_answers([Answer(1, "c"), Answer(2, "b")])
        assert s.format_for_display() == "Q1: C\nQ2: B"

    def test_to_dict_when_called_then_lists_answers(self):
        s = AnswerSet.from_answers([Answer(1, "c", "1/c")])
        assert s.to_dict() == [{"question_number": 1, "letter": "c", "source_span": "1/c"}]
