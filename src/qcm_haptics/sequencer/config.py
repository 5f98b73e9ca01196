"""
Module: sequencer.config

Purpose:
    Configuration dataclass for the feedback sequencer. Immutable, so a
    running playback always sees the configuration it started with;
    changes take effect on the next run only.

Key Classes:
    - FeedbackConfiguration: Channel switches, gaps and pulse encoding

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - sequencer.builder: Timeline gaps and channel switches
    - sequencer.encoding: Pulse length, gap and question cap
    - sequencer.settings: JSON persistence
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from qcm_haptics.core.models import Intensity
from qcm_haptics.errors import InvalidConfigurationError

DURATION_FIELDS = (
    "inter_answer_silence_ms",
    "inter_question_pause_ms",
    "separator_flash_ms",
    "separator_pause_ms",
    "question_answer_pause_ms",
    "pulse_ms",
    "pulse_gap_ms",
)


@dataclass(frozen=True)
class FeedbackConfiguration:
    """
    Configuration for building and playing a pulse timeline.

    Attributes:
        vibration_enabled: Attempt pulse playback (default True)
        flash_enabled: Attempt visual separator flashes (default True)
        inter_answer_silence_ms: Silence before each non-first answer of a
            question (default 500)
        inter_question_pause_ms: Silence between question groups (default 1200)
        separator_flash_ms: Separator flash duration (default 500)
        separator_pause_ms: Pause on each side of a separator flash (default 300)
        question_answer_pause_ms: Silence between a question number and its
            first answer (default 500)
        pulse_ms: Duration of each encoding pulse (default 1000)
        pulse_gap_ms: Gap between pulses of one letter or number (default 200)
        max_question_pulses: Cap on the question number pulse count (default 10)
        pulse_intensity: Intensity class of encoding pulses (default maximum)

    Raises:
        InvalidConfigurationError: On negative or non-integer durations,
            non-bool switches, or max_question_pulses < 1.
    """
    vibration_enabled: bool = True
    flash_enabled: bool = True
    inter_answer_silence_ms: int = 500
    inter_question_pause_ms: int = 1200
    separator_flash_ms: int = 500
    separator_pause_ms: int = 300
    question_answer_pause_ms: int = 500
    pulse_ms: int = 1000
    pulse_gap_ms: int = 200
    max_question_pulses: int = 10
    pulse_intensity: Intensity = Intensity.MAXIMUM

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("vibration_enabled", "flash_enabled"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidConfigurationError(f"{name} must be a bool, got {value!r}")

        for name in DURATION_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigurationError(f"{name} must be an int, got {value!r}")
            if value < 0:
                raise InvalidConfigurationError(f"{name} cannot be negative: {value}")

        cap = self.max_question_pulses
        if isinstance(cap, bool) or not isinstance(cap, int) or cap < 1:
            raise InvalidConfigurationError(f"max_question_pulses must be a positive int, got {cap!r}")

        try:
            object.__setattr__(self, "pulse_intensity", Intensity(self.pulse_intensity))
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid pulse_intensity: {self.pulse_intensity!r}") from e

    def with_overrides(self, **overrides: Any) -> FeedbackConfiguration:
        """
        Return a validated copy with some fields replaced.

        Raises:
            InvalidConfigurationError: On unknown field names or bad values.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidConfigurationError(f"Unknown configuration field(s): {', '.join(unknown)}")
        return replace(self, **overrides)
