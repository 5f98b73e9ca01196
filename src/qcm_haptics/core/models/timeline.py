"""
Module: timeline

Purpose:
    Provides the typed steps of a pulse timeline and the immutable
    PulseTimeline container produced by the sequencer's builder.

Key Classes:
    - Intensity: Intensity class of a haptic pulse
    - Pulse, Silence, VisualFlash: Timeline steps
    - PulseTimeline: Ordered, immutable sequence of steps

Dependencies:
    - dataclasses, enum, hashlib, json (std)

Used By:
    - sequencer.encoding: Emits Pulse/Silence steps
    - sequencer.builder: Assembles PulseTimeline
    - sequencer.player: Plays steps in order
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Tuple, Union

StepKind = Literal["pulse", "silence", "flash"]


class Intensity(str, Enum):
    """Intensity class of a pulse, weakest to strongest."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    MAXIMUM = "maximum"


def _check_duration(duration_ms: int) -> None:
    if isinstance(duration_ms, bool) or not isinstance(duration_ms, int):
        raise ValueError(f"Step duration must be an int: {duration_ms!r}")
    if duration_ms < 0:
        raise ValueError(f"Step duration cannot be negative: {duration_ms}")


@dataclass(frozen=True, slots=True)
class Pulse:
    """A single haptic actuation."""

    duration_ms: int
    intensity: Intensity = Intensity.MAXIMUM

    def __post_init__(self) -> None:
        _check_duration(self.duration_ms)
        object.__setattr__(self, "intensity", Intensity(self.intensity))

    @property
    def kind(self) -> StepKind:
        return "pulse"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "pulse", "duration_ms": self.duration_ms, "intensity": self.intensity.value}


@dataclass(frozen=True, slots=True)
class Silence:
    """A pause with no device output."""

    duration_ms: int

    def __post_init__(self) -> None:
        _check_duration(self.duration_ms)

    @property
    def kind(self) -> StepKind:
        return "silence"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "silence", "duration_ms": self.duration_ms}


@dataclass(frozen=True, slots=True)
class VisualFlash:
    """A light flash used as a visual separator."""

    duration_ms: int

    def __post_init__(self) -> None:
        _check_duration(self.duration_ms)

    @property
    def kind(self) -> StepKind:
        return "flash"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "flash", "duration_ms": self.duration_ms}


Step = Union[Pulse, Silence, VisualFlash]


@dataclass(frozen=True)
class PulseTimeline:
    """
    Ordered sequence of steps derived from an AnswerSet and a configuration.

    Produced once by the builder, then played back strictly in order.
    Identical inputs always give identical timelines, which
    ``fingerprint()`` makes easy to check.

    Example:
        >>> t = PulseTimeline((Pulse(1000), Silence(200), Pulse(1000)))
        >>> t.total_duration_ms
        2200
        >>> t.kinds()
        ['pulse', 'silence', 'pulse']
    """

    steps: Tuple[Step, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def total_duration_ms(self) -> int:
        """Sum of all step durations (ideal playback time)."""
        return sum(step.duration_ms for step in self.steps)

    def count(self, kind: StepKind) -> int:
        """Number of steps of the given kind."""
        return sum(1 for step in self.steps if step.kind == kind)

    def kinds(self) -> List[StepKind]:
        return [step.kind for step in self.steps]

    def to_dict(self) -> List[Dict[str, Any]]:
        return [step.to_dict() for step in self.steps]

    def fingerprint(self) -> str:
        """sha256 of the canonical JSON form of the steps."""
        payload = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()
