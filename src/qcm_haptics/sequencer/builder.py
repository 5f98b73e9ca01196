"""
Module: sequencer.builder

Purpose:
    Deterministic translation of an AnswerSet into a PulseTimeline.

Key Functions:
    - build_timeline(): AnswerSet + configuration -> timeline
    - build_pattern_timeline(): Free letter/flash pattern -> timeline

Key Classes:
    - PatternItem: One letter of a free pattern

Dependencies:
    - sequencer.encoding: Letter and question number pulse trains

Used By:
    - sequencer.player: Builds the timeline before playback
    - cli: timeline command

Algorithm (per question group, in order):
    1. Question number encoding, then the question-to-answer pause
    2. For each answer: inter-answer silence unless first, the letter
       encoding, then a bracketed separator flash unless last
    3. Inter-question pause unless this is the last group
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from qcm_haptics.core.models import AnswerSet, PulseTimeline, Silence, Step, VisualFlash

from .channels import FeedbackChannelSet
from .config import FeedbackConfiguration
from .encoding import encode_letter, encode_question_number

logger = logging.getLogger(__name__)

# Fixed silence between items of a free pattern that have no flash after them
PATTERN_ITEM_GAP_MS = 200


@dataclass(frozen=True)
class ActiveChannels:
    """Channels that will actually produce output in a run."""
    pulse: bool
    flash: bool


def resolve_channels(
    config: FeedbackConfiguration,
    channels: Optional[FeedbackChannelSet] = None,
) -> ActiveChannels:
    """
    Combine configuration switches with channel availability.

    A channel requested by the configuration but missing from the channel
    set is skipped with a warning, not treated as an error.
    """
    pulse = config.vibration_enabled
    flash = config.flash_enabled
    if channels is not None:
        if pulse and not channels.pulse_available:
            logger.warning("Vibration requested but pulse channel unavailable, skipping pulses")
            pulse = False
        if flash and not channels.flash_available:
            logger.warning("Flash requested but flash channel unavailable, skipping flashes")
            flash = False
    return ActiveChannels(pulse=pulse, flash=flash)


class _TimelineWriter:
    """Accumulates steps, dropping empty silences and pulse output when muted."""

    def __init__(self, active: ActiveChannels) -> None:
        self.active = active
        self.steps: List[Step] = []

    def silence(self, duration_ms: int) -> None:
        if duration_ms > 0:
            self.steps.append(Silence(duration_ms))

    def pulses(self, encoded: List[Step]) -> None:
        # Intra-encoding gaps belong to the pulses; both go when muted
        if self.active.pulse:
            self.steps.extend(encoded)

    def separator(self, config: FeedbackConfiguration) -> None:
        if not self.active.flash:
            return
        self.silence(config.separator_pause_ms)
        self.steps.append(VisualFlash(config.separator_flash_ms))
        self.silence(config.separator_pause_ms)

    def timeline(self) -> PulseTimeline:
        return PulseTimeline(tuple(self.steps))


def build_timeline(
    answers: AnswerSet,
    config: FeedbackConfiguration,
    channels: Optional[FeedbackChannelSet] = None,
) -> PulseTimeline:
    """
    Build the pulse timeline for a set of answers.

    Args:
        answers: Answers in playback order.
        config: Feedback configuration.
        channels: If given, channels it lacks are skipped.

    Returns:
        Immutable timeline. Identical inputs give identical timelines.

    Example:
        >>> cfg = FeedbackConfiguration(vibration_enabled=False)
        >>> t = build_timeline(extract_answers("1-a,b"), cfg)
        >>> t.kinds()
        ['silence', 'silence', 'flash', 'silence', 'silence']
    """
    active = resolve_channels(config, channels)
    writer = _TimelineWriter(active)
    groups = answers.group_by_question()

    for g_idx, group in enumerate(groups):
        writer.pulses(encode_question_number(group.question_number, config))
        writer.silence(config.question_answer_pause_ms)

        for a_idx, answer in enumerate(group.answers):
            if a_idx > 0:
                writer.silence(config.inter_answer_silence_ms)
            writer.pulses(encode_letter(answer.letter, config))
            if a_idx < len(group.answers) - 1:
                writer.separator(config)

        if g_idx < len(groups) - 1:
            writer.silence(config.inter_question_pause_ms)

    timeline = writer.timeline()
    logger.debug(
        f"Built timeline: {len(groups)} question(s), {len(timeline)} steps, "
        f"{timeline.total_duration_ms}ms"
    )
    return timeline


@dataclass(frozen=True)
class PatternItem:
    """
    One letter of a free pattern.

    Attributes:
        letter: Answer letter a..e.
        flash_after: Emit a separator flash after this letter.
    """
    letter: str
    flash_after: bool = False


def build_pattern_timeline(
    items: Sequence[PatternItem],
    config: FeedbackConfiguration,
    channels: Optional[FeedbackChannelSet] = None,
) -> PulseTimeline:
    """
    Build a timeline from a free pattern such as "A B [flash] C".

    Each letter is encoded as usual. Items marked ``flash_after`` are
    followed by a bracketed separator flash; other items are followed by
    a short fixed gap unless they are last.

    Raises:
        ValueError: If an item holds a letter outside a..e.
    """
    active = resolve_channels(config, channels)
    writer = _TimelineWriter(active)

    for idx, item in enumerate(items):
        writer.pulses(encode_letter(item.letter, config))
        if item.flash_after:
            writer.separator(config)
        elif idx < len(items) - 1:
            writer.silence(PATTERN_ITEM_GAP_MS)

    return writer.timeline()
