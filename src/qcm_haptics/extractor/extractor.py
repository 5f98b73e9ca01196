"""
Module: extractor.extractor

Purpose:
    Answer extraction - scans free-form text for answer notations
    ("1/c", "Q2: b", "3-a,d") and returns a canonical AnswerSet.

Key Classes:
    - Extractor: Stateless extractor (trivially constructible)

Key Functions:
    - extract_answers(): Module-level shortcut for Extractor().extract()
    - expand_payload(): Letter payload -> individual letters
    - contains_answers(), count_answers(): Convenience checks
    - format_answers_for_display(): "Q1: C" style listing

Dependencies:
    - extractor.patterns: The five notation grammars
    - core.models: Answer, AnswerSet

Used By:
    - extractor.sources: Extraction from files
    - cli: extract / timeline / play commands

Algorithm:
    1. Scan the text with each grammar in turn (all matches, all grammars)
    2. Expand every match payload into single letters
    3. Keep the first Answer per (question_number, letter)
    4. Sort by question number, then letter
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, List, Optional, Sequence

from qcm_haptics.core.models import Answer, AnswerSet

from .patterns import NOTATION_PATTERNS, NotationPattern

logger = logging.getLogger(__name__)


def expand_payload(payload: str) -> List[str]:
    """
    Expand a matched letter payload into individual lowercase letters.

    Comma-separated segments are trimmed and empty ones dropped; each
    segment then yields one letter per character, in text order.

    Args:
        payload: Letter part of a notation match, e.g. "b,c", "AB", "a, d".

    Returns:
        Letters in the order they appear. May contain repeats ("a,a").

    Example:
        >>> expand_payload("AB, c")
        ['a', 'b', 'c']
    """
    letters: List[str] = []
    for segment in payload.split(","):
        segment = segment.strip()
        if not segment:
            continue
        letters.extend(ch.lower() for ch in segment)
    return letters


class Extractor:
    """
    Stateless answer extractor.

    Holds only the grammar list, so one instance can be shared freely.

    Example:
        >>> Extractor().extract("1/c\\n2-a,b").pairs()
        [(1, 'c'), (2, 'a'), (2, 'b')]
    """

    def __init__(self, patterns: Sequence[NotationPattern] = NOTATION_PATTERNS) -> None:
        self.patterns = tuple(patterns)

    def extract(self, text: Optional[str]) -> AnswerSet:
        """
        Extract every answer notation from text.

        Never raises: empty, non-matching or non-string input gives an
        empty AnswerSet.

        Args:
            text: Free-form text.

        Returns:
            AnswerSet sorted by (question_number, letter), no duplicates.
        """
        if not isinstance(text, str) or not text:
            return AnswerSet.empty()

        answers = AnswerSet.from_answers(self._scan(text))
        logger.debug(f"Extracted {len(answers)} answer(s) from {len(text)} chars")
        return answers

    def _scan(self, text: str) -> Iterator[Answer]:
        for pattern in self.patterns:
            for match in pattern.regex.finditer(text):
                yield from self._answers_from_match(pattern, match)

    def _answers_from_match(self, pattern: NotationPattern, match: re.Match) -> List[Answer]:
        try:
            number = int(match.group("number"))
        except ValueError:
            # Exceeds the interpreter's int string conversion limit
            logger.debug(f"[{pattern.name}] Skipped oversized question number")
            return []

        if number < 1:
            logger.debug(f"[{pattern.name}] Skipped question number {number} in {match.group(0)!r}")
            return []

        span = match.group(0)
        return [
            Answer(question_number=number, letter=letter, source_span=span)
            for letter in expand_payload(match.group("letters"))
        ]


_DEFAULT_EXTRACTOR = Extractor()


def extract_answers(text: Optional[str]) -> AnswerSet:
    """Extract answers with the default grammars."""
    return _DEFAULT_EXTRACTOR.extract(text)


def contains_answers(text: Optional[str]) -> bool:
    """True if text holds at least one answer notation."""
    return bool(extract_answers(text))


def count_answers(text: Optional[str]) -> int:
    """Number of distinct answers found in text."""
    return len(extract_answers(text))


def format_answers_for_display(answers: Iterable[Answer]) -> str:
    """Format answers as "Q<n>: <LETTER>" lines."""
    if isinstance(answers, AnswerSet):
        return answers.format_for_display()
    return AnswerSet.from_answers(answers).format_for_display()
