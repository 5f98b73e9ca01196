"""
Core Models Package

Immutable, validated data models shared by the extractor and the sequencer.

All models are frozen dataclasses: an extraction result or a built timeline
can be handed to playback without any risk of it changing mid-run.
"""

from .answers import Answer, AnswerSet, QuestionGroup, VALID_LETTERS
from .timeline import Intensity, Pulse, PulseTimeline, Silence, Step, VisualFlash

__all__ = [
    "Answer",
    "AnswerSet",
    "QuestionGroup",
    "VALID_LETTERS",
    "Intensity",
    "Pulse",
    "Silence",
    "VisualFlash",
    "Step",
    "PulseTimeline",
]
