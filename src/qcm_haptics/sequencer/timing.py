"""
Module: sequencer.timing

Purpose:
    Timing instrumentation for playback, to check that each step took
    (at least) its planned duration and to spot scheduler overruns.

Key Classes:
    - StepTiming: Planned vs actual duration of one executed step
    - PlaybackTimingLog: Collects step timings for a run

Key Functions:
    - timed_step: Context manager for timing one step

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - sequencer.player: Optional per-run timing
    - cli: play --timing-out
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepTiming:
    """
    Timing of one executed step.

    Attributes:
        index: Position of the step in the timeline.
        kind: "pulse", "silence" or "flash".
        planned_ms: Duration the timeline asked for.
        actual_ms: Measured wall-clock duration.
    """
    index: int
    kind: str
    planned_ms: int
    actual_ms: float

    @property
    def overrun_ms(self) -> float:
        return self.actual_ms - self.planned_ms


@dataclass
class PlaybackTimingLog:
    """
    Timing metrics for one playback run.

    Example:
        >>> log = PlaybackTimingLog()
        >>> log.log_step(0, "pulse", 1000, 1003.2)
        >>> print(log.summary())
    """
    steps: List[StepTiming] = field(default_factory=list)

    def log_step(self, index: int, kind: str, planned_ms: int, actual_ms: float) -> None:
        """Record one executed step."""
        self.steps.append(StepTiming(index, kind, planned_ms, actual_ms))

    def total_planned_ms(self) -> int:
        return sum(s.planned_ms for s in self.steps)

    def total_actual_ms(self) -> float:
        return sum(s.actual_ms for s in self.steps)

    def max_overrun_ms(self) -> float:
        """Largest amount any step ran past its plan (0 if none did)."""
        if not self.steps:
            return 0.0
        return max(0.0, max(s.overrun_ms for s in self.steps))

    def get_kind_totals(self) -> Dict[str, float]:
        """Actual time spent per step kind."""
        totals: Dict[str, float] = {}
        for s in self.steps:
            totals[s.kind] = totals.get(s.kind, 0.0) + s.actual_ms
        return totals

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Playback Timing Summary ==="]
        lines.append(f"  {'steps':25s} {len(self.steps)}")
        lines.append(f"  {'planned':25s} {self.total_planned_ms() / 1000:.3f}s")
        lines.append(f"  {'actual':25s} {self.total_actual_ms() / 1000:.3f}s")
        lines.append(f"  {'max overrun':25s} {self.max_overrun_ms():.1f}ms")

        totals = self.get_kind_totals()
        if totals:
            lines.append("")
            lines.append("Time per step kind:")
            for kind, total in sorted(totals.items(), key=lambda x: -x[1]):
                lines.append(f"  {kind:25s} {total / 1000:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "steps": [
                {"index": s.index, "kind": s.kind, "planned_ms": s.planned_ms, "actual_ms": s.actual_ms}
                for s in self.steps
            ],
            "total_planned_ms": self.total_planned_ms(),
            "total_actual_ms": self.total_actual_ms(),
            "max_overrun_ms": self.max_overrun_ms(),
        }

    def save(self, path: Path) -> None:
        """Save timing data to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.debug(f"Saved timing data to {path}")


@contextmanager
def timed_step(
    log: PlaybackTimingLog,
    index: int,
    kind: str,
    planned_ms: int,
) -> Generator[None, None, None]:
    """
    Context manager for timing one step.

    The step is recorded even if it raises, so a failed run still shows
    how long its last step took.

    Example:
        >>> log = PlaybackTimingLog()
        >>> with timed_step(log, 0, "silence", 200):
        ...     await asyncio.sleep(0.2)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        log.log_step(index, kind, planned_ms, elapsed_ms)
