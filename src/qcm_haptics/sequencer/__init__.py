"""
Module: sequencer

Purpose:
    Feedback sequencing. Translates an AnswerSet into a deterministic pulse
    timeline and plays it step by step through caller-supplied effectors,
    with cancellation and flash-safe failure handling.

Key Functions:
    - build_timeline(): AnswerSet -> PulseTimeline
    - build_and_play(): Build and play in one call

Key Classes:
    - Sequencer: Cancellable player
    - FeedbackConfiguration: Run configuration
    - FeedbackChannelSet: Device effectors
    - SimulatedDevice: In-process device for dry runs and tests
"""

from .builder import PatternItem, build_pattern_timeline, build_timeline, resolve_channels
from .channels import CapabilityProbe, DeviceEvent, DeviceFault, FeedbackChannelSet, SimulatedDevice
from .config import FeedbackConfiguration
from .encoding import encode_letter, encode_question_number, letter_pulse_count
from .player import CompletionSignal, CompletionStatus, Sequencer, build_and_play
from .settings import load_feedback_config, save_feedback_config
from .timing import PlaybackTimingLog, StepTiming, timed_step

__all__ = [
    "build_timeline",
    "build_pattern_timeline",
    "resolve_channels",
    "PatternItem",
    "CapabilityProbe",
    "DeviceEvent",
    "DeviceFault",
    "FeedbackChannelSet",
    "SimulatedDevice",
    "FeedbackConfiguration",
    "encode_letter",
    "encode_question_number",
    "letter_pulse_count",
    "CompletionSignal",
    "CompletionStatus",
    "Sequencer",
    "build_and_play",
    "load_feedback_config",
    "save_feedback_config",
    "PlaybackTimingLog",
    "StepTiming",
    "timed_step",
]
