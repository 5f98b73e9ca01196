"""
Module: sequencer.encoding

Purpose:
    Pulse encodings for answer letters and question numbers.

    - Letter: as many pulses as its position in the alphabet (a=1 .. e=5)
    - Question number N: one marker pulse, then min(N, cap) pulses

    Consecutive pulses of one encoding are separated by the configured
    pulse gap.

Key Functions:
    - letter_pulse_count(): a..e -> 1..5
    - encode_letter(): Steps for one answer letter
    - encode_question_number(): Steps for one question marker

Used By:
    - sequencer.builder
"""

from __future__ import annotations

from typing import List

from qcm_haptics.core.models import VALID_LETTERS, Pulse, Silence, Step

from .config import FeedbackConfiguration


def letter_pulse_count(letter: str) -> int:
    """
    Number of pulses that encode an answer letter.

    Raises:
        ValueError: If letter is not one of a..e (case-insensitive).

    Example:
        >>> letter_pulse_count("C")
        3
    """
    if not isinstance(letter, str) or len(letter) != 1 or letter.lower() not in VALID_LETTERS:
        raise ValueError(f"Cannot encode answer letter: {letter!r}")
    return VALID_LETTERS.index(letter.lower()) + 1


def pulse_train(count: int, config: FeedbackConfiguration) -> List[Step]:
    """``count`` identical pulses separated by the pulse gap."""
    steps: List[Step] = []
    for i in range(count):
        if i > 0 and config.pulse_gap_ms > 0:
            steps.append(Silence(config.pulse_gap_ms))
        steps.append(Pulse(config.pulse_ms, config.pulse_intensity))
    return steps


def encode_letter(letter: str, config: FeedbackConfiguration) -> List[Step]:
    """Steps encoding one answer letter."""
    return pulse_train(letter_pulse_count(letter), config)


def encode_question_number(question_number: int, config: FeedbackConfiguration) -> List[Step]:
    """
    Steps encoding a question number.

    A marker pulse announces the question, then the number itself follows
    as a pulse train capped at ``config.max_question_pulses``.

    Example:
        >>> cfg = FeedbackConfiguration()
        >>> [s.kind for s in encode_question_number(2, cfg)]
        ['pulse', 'silence', 'pulse', 'silence', 'pulse']
    """
    if question_number < 1:
        raise ValueError(f"Cannot encode question number: {question_number}")
    count = min(question_number, config.max_question_pulses)
    return pulse_train(1 + count, config)
