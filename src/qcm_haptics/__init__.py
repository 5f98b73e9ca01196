"""Top-level package for QCM Haptics.

Provides subpackages:
- qcm_haptics.core – immutable answer and timeline models
- qcm_haptics.extractor – answer notation parsing from text and files
- qcm_haptics.sequencer – timeline building and cancellable playback
- qcm_haptics.cli – command line front-end
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
        return pkg_version("qcm-haptics")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()

from .core.models import Answer, AnswerSet, PulseTimeline  # noqa: E402
from .extractor import Extractor, extract_answers  # noqa: E402
from .sequencer import (  # noqa: E402
    CompletionSignal,
    CompletionStatus,
    FeedbackChannelSet,
    FeedbackConfiguration,
    Sequencer,
    build_timeline,
)

__all__: list[str] = [
    "__version__",
    "Answer",
    "AnswerSet",
    "PulseTimeline",
    "Extractor",
    "extract_answers",
    "CompletionSignal",
    "CompletionStatus",
    "FeedbackChannelSet",
    "FeedbackConfiguration",
    "Sequencer",
    "build_timeline",
]
