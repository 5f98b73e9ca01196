"""
Module: sequencer.player

Purpose:
    Cancellable, strictly sequential playback of a PulseTimeline through
    a FeedbackChannelSet.

Key Classes:
    - Sequencer: Holds the in-flight run's cancellation flag
    - CompletionSignal: Terminal outcome of a run
    - CompletionStatus: COMPLETED / CANCELLED / FAILED

Key Functions:
    - build_and_play(): One-shot helper creating its own Sequencer

Dependencies:
    - asyncio (std): Step scheduling and cancellation
    - sequencer.builder: Timeline construction

Used By:
    - cli: play command

Guarantees:
    - One step at a time; each step has physically finished (its full
      duration has elapsed) before the next begins
    - Cancellation is observed at every step boundary and interrupts
      silences at once, so latency is at most one pulse or flash
    - On cancellation or failure the flash is driven off if it was used
    - An effector failure aborts the run and is raised exactly once
    - Pulse or flash steps whose channel is missing are skipped, matching
      what build_timeline emits for an unavailable channel
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from qcm_haptics.core.models import AnswerSet, Pulse, PulseTimeline, Silence, Step, VisualFlash
from qcm_haptics.errors import EffectorFailureError, InvalidConfigurationError, SequencerBusyError

from .builder import build_timeline
from .channels import FeedbackChannelSet
from .config import FeedbackConfiguration
from .timing import PlaybackTimingLog, timed_step

logger = logging.getLogger(__name__)


class CompletionStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class CompletionSignal:
    """
    Outcome of one playback run (immutable).

    Attributes:
        status: How the run ended.
        steps_executed: Steps that ran to completion.
        total_steps: Steps in the timeline.
        timeline: The timeline that was played.
        error: Underlying effector exception for FAILED runs.
    """
    status: CompletionStatus
    steps_executed: int
    total_steps: int
    timeline: PulseTimeline
    error: Optional[BaseException] = None

    @property
    def completed(self) -> bool:
        return self.status is CompletionStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status is CompletionStatus.CANCELLED

    @property
    def failed(self) -> bool:
        return self.status is CompletionStatus.FAILED


class _RunState:
    """Per-run bookkeeping."""

    def __init__(self, channels: FeedbackChannelSet) -> None:
        self.channels = channels
        self.cancel_event = asyncio.Event()
        self.flash_used = False
        self.executed = 0


class Sequencer:
    """
    Plays pulse timelines one step at a time.

    Only one run may be in flight per instance; starting a second raises
    SequencerBusyError. The instance holds no state between runs beyond an
    optional timing log.

    Example:
        >>> sequencer = Sequencer()
        >>> signal = await sequencer.build_and_play(answers, FeedbackConfiguration(), channels)
        >>> signal.completed
        True
    """

    def __init__(self, timing_log: Optional[PlaybackTimingLog] = None) -> None:
        self.timing_log = timing_log
        self._run: Optional[_RunState] = None

    @property
    def running(self) -> bool:
        return self._run is not None

    def cancel(self) -> None:
        """Request cancellation of the in-flight run (no-op when idle)."""
        if self._run is None:
            logger.debug("cancel() called with no run in flight")
            return
        logger.info("Cancellation requested")
        self._run.cancel_event.set()

    async def build_and_play(
        self,
        answers: AnswerSet,
        config: FeedbackConfiguration,
        channels: FeedbackChannelSet,
    ) -> CompletionSignal:
        """
        Build the timeline for ``answers`` and play it.

        Args:
            answers: Answers in playback order.
            config: Feedback configuration, fixed for this run.
            channels: Device effectors.

        Returns:
            COMPLETED or CANCELLED completion signal.

        Raises:
            InvalidConfigurationError: If config is not a FeedbackConfiguration.
            SequencerBusyError: If a run is already in flight.
            EffectorFailureError: If an effector fails (chained from the cause).
        """
        if self.running:
            raise SequencerBusyError("A playback run is already in flight")
        if not isinstance(config, FeedbackConfiguration):
            raise InvalidConfigurationError(f"Expected FeedbackConfiguration, got {type(config).__name__}")

        timeline = build_timeline(answers, config, channels)
        return await self.play(timeline, channels)

    async def play(self, timeline: PulseTimeline, channels: FeedbackChannelSet) -> CompletionSignal:
        """
        Play an already built timeline.

        Same guarantees and errors as build_and_play().
        """
        if self.running:
            raise SequencerBusyError("A playback run is already in flight")

        run = _RunState(channels)
        self._run = run
        total = len(timeline)
        logger.info(f"Playing {total} steps ({timeline.total_duration_ms}ms)")

        try:
            for index, step in enumerate(timeline):
                if run.cancel_event.is_set():
                    break
                try:
                    finished = await self._run_step(run, index, step)
                except Exception as e:
                    logger.error(f"Effector failed at step {index} ({step.kind}): {e}")
                    await self._drive_flash_off(run)
                    signal = CompletionSignal(CompletionStatus.FAILED, run.executed, total, timeline, e)
                    raise EffectorFailureError(
                        f"Playback failed at step {index}/{total} ({step.kind}): {e}", signal
                    ) from e
                if not finished:
                    break
                run.executed += 1

            if run.cancel_event.is_set():
                await self._drive_flash_off(run)
                logger.info(f"Playback cancelled after {run.executed}/{total} steps")
                return CompletionSignal(CompletionStatus.CANCELLED, run.executed, total, timeline)

            logger.info(f"Playback completed ({total} steps)")
            return CompletionSignal(CompletionStatus.COMPLETED, run.executed, total, timeline)

        except asyncio.CancelledError:
            logger.info(f"Playback task cancelled after {run.executed}/{total} steps")
            await self._drive_flash_off(run)
            raise
        finally:
            self._run = None

    # ─────────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────────

    async def _run_step(self, run: _RunState, index: int, step: Step) -> bool:
        """Run one step. Returns False if a silence was cut short by cancel()."""
        if self.timing_log is None:
            return await self._dispatch(run, step)
        with timed_step(self.timing_log, index, step.kind, step.duration_ms):
            return await self._dispatch(run, step)

    async def _dispatch(self, run: _RunState, step: Step) -> bool:
        channels = run.channels
        if isinstance(step, Silence):
            return await self._silence(run, step.duration_ms)

        if isinstance(step, Pulse):
            if channels.emit_pulse is None:
                logger.debug("Pulse channel unavailable, skipping pulse")
                return True
            await self._hold_for(channels.emit_pulse(step.intensity, step.duration_ms), step.duration_ms)
            return True

        if isinstance(step, VisualFlash):
            if channels.emit_flash is None:
                logger.debug("Flash channel unavailable, skipping flash")
                return True
            run.flash_used = True
            await self._hold_for(channels.emit_flash(step.duration_ms), step.duration_ms)
            return True

        raise TypeError(f"Unknown timeline step: {step!r}")

    @staticmethod
    async def _hold_for(effect, duration_ms: int) -> None:
        """Await an effector, then wait out whatever is left of its duration."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        await effect
        remaining = duration_ms / 1000.0 - (loop.time() - start)
        if remaining > 0:
            await asyncio.sleep(remaining)

    @staticmethod
    async def _silence(run: _RunState, duration_ms: int) -> bool:
        if duration_ms <= 0:
            return not run.cancel_event.is_set()
        try:
            await asyncio.wait_for(run.cancel_event.wait(), timeout=duration_ms / 1000.0)
        except asyncio.TimeoutError:
            return True
        return False

    @staticmethod
    async def _drive_flash_off(run: _RunState) -> None:
        if not run.flash_used:
            return
        if run.channels.flash_off is None:
            logger.warning("Flash was used but no flash_off effector was supplied")
            return
        try:
            await run.channels.flash_off()
            logger.debug("Flash driven off")
        except Exception as e:
            logger.warning(f"Failed to drive flash off during cleanup: {e}")


async def build_and_play(
    answers: AnswerSet,
    config: FeedbackConfiguration,
    channels: FeedbackChannelSet,
    timing_log: Optional[PlaybackTimingLog] = None,
) -> CompletionSignal:
    """Build and play with a fresh Sequencer (not cancellable from outside)."""
    return await Sequencer(timing_log).build_and_play(answers, config, channels)
