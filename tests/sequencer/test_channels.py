"""
Tests for sequencer.channels
"""
import pytest

from qcm_haptics.core.models import Intensity
from qcm_haptics.sequencer import DeviceFault, FeedbackChannelSet, SimulatedDevice


class _Probe:
    def __init__(self, pulse, flash):
        self.pulse = pulse
        self.flash = flash

    def is_pulse_available(self):
        return self.pulse

    def is_flash_available(self):
        return self.flash


async def _noop(*args):
    return None


class TestFeedbackChannelSet:

    def test_availability_when_no_effectors_then_unavailable(self):
        channels = FeedbackChannelSet()
        assert not channels.pulse_available
        assert not channels.flash_available

    def test_from_probe_when_flash_unavailable_then_flash_dropped(self):
        channels = FeedbackChannelSet.from_probe(
            _Probe(True, False), emit_pulse=_noop, emit_flash=_noop, flash_off=_noop
        )
        assert channels.pulse_available
        assert not channels.flash_available
        assert channels.flash_off is None

    def test_from_probe_when_pulse_unavailable_then_pulse_dropped(self):
        channels = FeedbackChannelSet.from_probe(_Probe(False, True), emit_pulse=_noop, emit_flash=_noop)
        assert not channels.pulse_available
        assert channels.flash_available


class TestSimulatedDevice:

    @pytest.mark.asyncio
    async def test_emit_when_called_then_events_recorded(self):
        device = SimulatedDevice(time_scale=0)
        await device.emit_pulse(Intensity.HEAVY, 100)
        await device.emit_flash(50)
        await device.turn_flash_off()
        assert device.kinds() == ["pulse", "flash", "flash_off"]
        assert device.events[0].intensity is Intensity.HEAVY
        assert device.events[1].duration_ms == 50
        assert device.flash_on is False

    @pytest.mark.asyncio
    async def test_emit_when_fail_on_then_raises_on_that_call(self):
        device = SimulatedDevice(time_scale=0, fail_on={"pulse": 2})
        await device.emit_pulse(Intensity.MAXIMUM, 1)
        with pytest.raises(DeviceFault, match="call 2"):
            await device.emit_pulse(Intensity.MAXIMUM, 1)
        await device.emit_pulse(Intensity.MAXIMUM, 1)
        assert device.kinds() == ["pulse", "pulse"]

    def test_channels_when_unavailable_then_gated(self):
        device = SimulatedDevice(pulse_available=False)
        channels = device.channels()
        assert not channels.pulse_available
        assert channels.flash_available
