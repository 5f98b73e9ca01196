"""
Module: answers

Purpose:
    Provides the Answer and AnswerSet dataclasses - the canonical result of
    answer extraction and the ordered input of the feedback sequencer.

Key Classes:
    - Answer: One (question number, letter) pair with its source text
    - AnswerSet: Sorted, duplicate-free sequence of answers
    - QuestionGroup: Answers of one question, in playback order

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - extractor.extractor: Builds AnswerSet from matches
    - sequencer.builder: Groups answers into the pulse timeline
    - cli: Display and JSON output
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple

VALID_LETTERS = "abcde"

AnswerKey = Tuple[int, str]


@dataclass(frozen=True, slots=True)
class Answer:
    """
    One extracted multiple-choice answer.

    Attributes:
        question_number: Positive question number as written in the text.
        letter: Lowercase answer letter, one of a..e.
        source_span: Exact substring that produced this answer. Diagnostic
            only, so it takes no part in equality.

    Invariants:
        - question_number >= 1
        - letter in "abcde"

    Example:
        >>> a = Answer(3, "c", "3/c")
        >>> a.key
        (3, 'c')
    """

    question_number: int
    letter: str
    source_span: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        """Validate answer on construction."""
        if isinstance(self.question_number, bool) or not isinstance(self.question_number, int):
            raise ValueError(f"Question number must be an int: {self.question_number!r}")
        if self.question_number < 1:
            raise ValueError(f"Question number must be positive: {self.question_number}")
        if not isinstance(self.letter, str) or len(self.letter) != 1 or self.letter not in VALID_LETTERS:
            raise ValueError(f"Invalid answer letter: {self.letter!r}")

    @property
    def key(self) -> AnswerKey:
        """Sort and dedup key: (question_number, letter)."""
        return (self.question_number, self.letter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_number": self.question_number,
            "letter": self.letter,
            "source_span": self.source_span,
        }

    def __repr__(self) -> str:
        return f"Answer({self.question_number}, {self.letter!r})"


@dataclass(frozen=True, slots=True)
class QuestionGroup:
    """All answers of one question, in AnswerSet order."""

    question_number: int
    answers: Tuple[Answer, ...]

    @property
    def letters(self) -> List[str]:
        return [a.letter for a in self.answers]


@dataclass(frozen=True)
class AnswerSet:
    """
    Ordered, duplicate-free collection of answers.

    Sorted by question number ascending, then letter ascending. This order
    is the playback order used by the sequencer.

    Use ``AnswerSet.from_answers()`` to build one from unsorted input;
    direct construction validates that the tuple is already canonical.

    Example:
        >>> s = AnswerSet.from_answers([Answer(2, "b"), Answer(1, "c"), Answer(2, "b")])
        >>> s.pairs()
        [(1, 'c'), (2, 'b')]
    """

    answers: Tuple[Answer, ...] = ()

    def __post_init__(self) -> None:
        """Validate ordering and uniqueness."""
        answers = tuple(self.answers)
        object.__setattr__(self, "answers", answers)
        for prev, curr in zip(answers, answers[1:]):
            if prev.key == curr.key:
                raise ValueError(f"Duplicate answer in set: {curr.key}")
            if prev.key > curr.key:
                raise ValueError(f"Answers out of order: {prev.key} before {curr.key}")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_answers(cls, answers: Iterable[Answer]) -> AnswerSet:
        """
        Build a canonical set from answers in any order.

        The first answer seen for a key is kept, so its source_span wins.

        Args:
            answers: Answers in encounter order, possibly with duplicates.

        Returns:
            AnswerSet sorted by (question_number, letter).
        """
        seen: Dict[AnswerKey, Answer] = {}
        for answer in answers:
            if answer.key not in seen:
                seen[answer.key] = answer
        return cls(tuple(sorted(seen.values(), key=lambda a: a.key)))

    @classmethod
    def empty(cls) -> AnswerSet:
        return cls(())

    # ─────────────────────────────────────────────────────────────────────────
    # Sequence protocol
    # ─────────────────────────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[Answer]:
        return iter(self.answers)

    def __len__(self) -> int:
        return len(self.answers)

    def __getitem__(self, index: int) -> Answer:
        return self.answers[index]

    def __bool__(self) -> bool:
        return bool(self.answers)

    # ─────────────────────────────────────────────────────────────────────────
    # Views
    # ─────────────────────────────────────────────────────────────────────────

    def pairs(self) -> List[AnswerKey]:
        """Return answers as (question_number, letter) tuples."""
        return [a.key for a in self.answers]

    def question_numbers(self) -> List[int]:
        """Distinct question numbers, ascending."""
        numbers: List[int] = []
        for answer in self.answers:
            if not numbers or numbers[-1] != answer.question_number:
                numbers.append(answer.question_number)
        return numbers

    def group_by_question(self) -> List[QuestionGroup]:
        """
        Group answers by question number.

        The set is already sorted, so groups come out in question order and
        answers inside each group keep letter order.
        """
        groups: List[QuestionGroup] = []
        current: List[Answer] = []
        for answer in self.answers:
            if current and current[0].question_number != answer.question_number:
                groups.append(QuestionGroup(current[0].question_number, tuple(current)))
                current = []
            current.append(answer)
        if current:
            groups.append(QuestionGroup(current[0].question_number, tuple(current)))
        return groups

    def format_for_display(self) -> str:
        """One "Q<n>: <LETTER>" line per answer."""
        return "\n".join(f"Q{a.question_number}: {a.letter.upper()}" for a in self.answers)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [a.to_dict() for a in self.answers]
