import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import qcm_haptics
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from qcm_haptics.sequencer import FeedbackConfiguration, SimulatedDevice  # noqa: E402


# Common test fixtures
@pytest.fixture
def fast_config():
    """Configuration with millisecond-scale durations so playback tests stay quick."""
    return FeedbackConfiguration(
        inter_answer_silence_ms=2,
        inter_question_pause_ms=3,
        separator_flash_ms=2,
        separator_pause_ms=1,
        question_answer_pause_ms=2,
        pulse_ms=1,
        pulse_gap_ms=1,
    )


@pytest.fixture
def device():
    """Simulated device that does not sleep."""
    return SimulatedDevice(time_scale=0)


@pytest.fixture
def answers_file(tmp_path: Path):
    """A plain text answer sheet."""
    path = tmp_path / "answers.txt"
    path.write_text("Answers\n1/c\n2-a,b\nQ3: e\n", encoding="utf-8")
    return path
