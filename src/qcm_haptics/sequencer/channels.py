"""
Module: sequencer.channels

Purpose:
    The device seam of the sequencer. The core never talks to hardware;
    it calls the effectors of a FeedbackChannelSet supplied by the caller.

Key Classes:
    - FeedbackChannelSet: Pulse/flash effectors, None when unavailable
    - CapabilityProbe: Protocol answering "is pulse/flash available"
    - SimulatedDevice: In-process device that records and logs calls

Effector contract:
    - emit_pulse(intensity, duration_ms) and emit_flash(duration_ms) are
      awaitables that resolve once the physical effect has finished
    - flash_off() forces the light off; it must be safe to call at any time

Used By:
    - sequencer.builder: Channel gating
    - sequencer.player: Effector calls and flash cleanup
    - cli: Simulated playback
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Protocol

from qcm_haptics.core.models import Intensity

logger = logging.getLogger(__name__)

PulseEffector = Callable[[Intensity, int], Awaitable[None]]
FlashEffector = Callable[[int], Awaitable[None]]
FlashOff = Callable[[], Awaitable[None]]


class CapabilityProbe(Protocol):
    """Answers which feedback channels the device offers."""

    def is_pulse_available(self) -> bool: ...

    def is_flash_available(self) -> bool: ...


@dataclass(frozen=True)
class FeedbackChannelSet:
    """
    Effectors available to one playback run.

    Attributes:
        emit_pulse: Pulse effector, or None if vibration is unavailable.
        emit_flash: Flash effector, or None if the light is unavailable.
        flash_off: Forces the light off during cleanup. Optional.
    """
    emit_pulse: Optional[PulseEffector] = None
    emit_flash: Optional[FlashEffector] = None
    flash_off: Optional[FlashOff] = None

    @property
    def pulse_available(self) -> bool:
        return self.emit_pulse is not None

    @property
    def flash_available(self) -> bool:
        return self.emit_flash is not None

    @classmethod
    def from_probe(
        cls,
        probe: CapabilityProbe,
        emit_pulse: Optional[PulseEffector] = None,
        emit_flash: Optional[FlashEffector] = None,
        flash_off: Optional[FlashOff] = None,
    ) -> FeedbackChannelSet:
        """
        Gate effectors through a capability probe.

        Effectors for channels the probe reports as unavailable are dropped.
        """
        pulse_ok = probe.is_pulse_available()
        flash_ok = probe.is_flash_available()
        if not pulse_ok:
            logger.info("Pulse feedback unavailable on this device")
        if not flash_ok:
            logger.info("Flash feedback unavailable on this device")
        return cls(
            emit_pulse=emit_pulse if pulse_ok else None,
            emit_flash=emit_flash if flash_ok else None,
            flash_off=flash_off if flash_ok else None,
        )


# =============================================================================
# Simulated device
# =============================================================================

@dataclass(frozen=True)
class DeviceEvent:
    """One recorded effector call."""
    kind: str  # "pulse", "flash", "flash_off"
    duration_ms: int = 0
    intensity: Optional[Intensity] = None


class DeviceFault(RuntimeError):
    """Injected effector failure of a SimulatedDevice."""
    pass


@dataclass
class SimulatedDevice:
    """
    In-process stand-in for a vibrating, flashing device.

    Records every effector call, logs it, and waits out the physical
    duration scaled by ``time_scale`` (0 returns immediately).

    Attributes:
        time_scale: Multiplier applied to every wait.
        pulse_available: Reported by is_pulse_available().
        flash_available: Reported by is_flash_available().
        fail_on: Effector kind -> 1-based call number that raises DeviceFault.
        events: Recorded calls, in order.
        flash_on: Current light state.

    Example:
        >>> device = SimulatedDevice(time_scale=0)
        >>> channels = device.channels()
        >>> channels.pulse_available
        True
    """
    time_scale: float = 1.0
    pulse_available: bool = True
    flash_available: bool = True
    fail_on: Dict[str, int] = field(default_factory=dict)
    events: List[DeviceEvent] = field(default_factory=list)
    flash_on: bool = False
    _calls: Dict[str, int] = field(default_factory=dict, repr=False)

    def is_pulse_available(self) -> bool:
        return self.pulse_available

    def is_flash_available(self) -> bool:
        return self.flash_available

    def channels(self) -> FeedbackChannelSet:
        return FeedbackChannelSet.from_probe(
            self,
            emit_pulse=self.emit_pulse,
            emit_flash=self.emit_flash,
            flash_off=self.turn_flash_off,
        )

    def _count_call(self, kind: str) -> None:
        self._calls[kind] = self._calls.get(kind, 0) + 1
        if self.fail_on.get(kind) == self._calls[kind]:
            raise DeviceFault(f"Simulated {kind} failure on call {self._calls[kind]}")

    async def _hold(self, duration_ms: int) -> None:
        if self.time_scale > 0 and duration_ms > 0:
            await asyncio.sleep(duration_ms * self.time_scale / 1000.0)

    async def emit_pulse(self, intensity: Intensity, duration_ms: int) -> None:
        self._count_call("pulse")
        self.events.append(DeviceEvent("pulse", duration_ms, Intensity(intensity)))
        logger.debug(f"PULSE {Intensity(intensity).value} {duration_ms}ms")
        await self._hold(duration_ms)

    async def emit_flash(self, duration_ms: int) -> None:
        self._count_call("flash")
        self.events.append(DeviceEvent("flash", duration_ms))
        self.flash_on = True
        logger.debug(f"FLASH {duration_ms}ms")
        await self._hold(duration_ms)
        self.flash_on = False

    async def turn_flash_off(self) -> None:
        self._count_call("flash_off")
        self.events.append(DeviceEvent("flash_off"))
        self.flash_on = False
        logger.debug("FLASH OFF")

    def kinds(self) -> List[str]:
        """Recorded event kinds, in order."""
        return [e.kind for e in self.events]
