"""
Module: errors

Purpose:
    Exception hierarchy shared by the extractor and the sequencer.

Key Classes:
    - QcmHapticsError: Base class for every error raised by the package
    - SourceReadError: Answer source file could not be read
    - InvalidConfigurationError: Feedback configuration rejected
    - EffectorFailureError: A device effector failed during playback
    - SequencerBusyError: A second run was started while one is in flight

Used By:
    - extractor.sources, sequencer.config, sequencer.player, cli
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .sequencer.player import CompletionSignal


class QcmHapticsError(Exception):
    """Base error for the package."""
    pass


class SourceReadError(QcmHapticsError):
    """Answer source (text or PDF file) could not be read."""
    pass


class InvalidConfigurationError(QcmHapticsError, ValueError):
    """Feedback configuration holds negative or malformed values."""
    pass


class SequencerBusyError(QcmHapticsError, RuntimeError):
    """build_and_play() called while another run is still in flight."""
    pass


class EffectorFailureError(QcmHapticsError):
    """
    Terminal failure of a playback run.

    Raised once per run, chained from the effector exception that caused it.

    Attributes:
        completion: FAILED completion signal describing how far the run got.
    """

    def __init__(self, message: str, completion: Optional[CompletionSignal] = None) -> None:
        super().__init__(message)
        self.completion = completion
