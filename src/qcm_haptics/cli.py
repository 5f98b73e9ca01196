"""
Command line front-end.

    qcm-haptics extract answers.txt
    qcm-haptics timeline answers.pdf --no-flash --json
    qcm-haptics play answers.txt --time-scale 0.1 --timing-out timing.json

Playback runs on a SimulatedDevice that logs every pulse and flash.
Ctrl-C during play cancels the run cleanly.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from qcm_haptics import __version__
from qcm_haptics.core.models import AnswerSet
from qcm_haptics.errors import EffectorFailureError, InvalidConfigurationError, SourceReadError
from qcm_haptics.extractor import extract_answers, read_source_text
from qcm_haptics.sequencer import (
    FeedbackConfiguration,
    PlaybackTimingLog,
    Sequencer,
    SimulatedDevice,
    build_timeline,
    load_feedback_config,
)
from qcm_haptics.sequencer.config import DURATION_FIELDS

logger = logging.getLogger("qcm_haptics")

EXIT_OK = 0
EXIT_NO_ANSWERS = 1
EXIT_INPUT_ERROR = 2
EXIT_PLAYBACK_FAILED = 3
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qcm-haptics",
        description="Extract multiple-choice answers from text and play them as pulses.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="List the answers found in a source")
    p_extract.add_argument("source", help="Text or PDF file, or - for stdin")
    p_extract.add_argument("--json", action="store_true", help="Print JSON instead of Q1: C lines")

    for name, help_text in (("timeline", "Print the pulse timeline"), ("play", "Play on a simulated device")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("source", help="Text or PDF file, or - for stdin")
        p.add_argument("--config", type=Path, help="Feedback settings JSON")
        p.add_argument("--no-vibration", action="store_true", help="Disable pulses")
        p.add_argument("--no-flash", action="store_true", help="Disable separator flashes")
        if name == "timeline":
            p.add_argument("--json", action="store_true", help="Print JSON steps")
        else:
            p.add_argument("--time-scale", type=float, default=1.0,
                           help="Multiply every duration by this factor (default 1.0)")
            p.add_argument("--timing-out", type=Path, help="Write step timing JSON here")

    return parser


def _read_answers(source: str) -> AnswerSet:
    text = sys.stdin.read() if source == "-" else read_source_text(source)
    return extract_answers(text)


def _load_config(args: argparse.Namespace) -> FeedbackConfiguration:
    config = load_feedback_config(args.config) if args.config else FeedbackConfiguration()
    overrides = {}
    if args.no_vibration:
        overrides["vibration_enabled"] = False
    if args.no_flash:
        overrides["flash_enabled"] = False
    return config.with_overrides(**overrides) if overrides else config


def _scale_config(config: FeedbackConfiguration, factor: float) -> FeedbackConfiguration:
    """Multiply every duration by factor, rounded to whole milliseconds."""
    if factor == 1.0:
        return config
    return config.with_overrides(
        **{name: int(round(getattr(config, name) * factor)) for name in DURATION_FIELDS}
    )


def cmd_extract(args: argparse.Namespace) -> int:
    answers = _read_answers(args.source)
    if not answers:
        logger.warning("No answers found")
        return EXIT_NO_ANSWERS
    if args.json:
        print(json.dumps(answers.to_dict(), indent=2))
    else:
        print(answers.format_for_display())
    return EXIT_OK


def cmd_timeline(args: argparse.Namespace) -> int:
    answers = _read_answers(args.source)
    if not answers:
        logger.warning("No answers found")
        return EXIT_NO_ANSWERS
    timeline = build_timeline(answers, _load_config(args))
    if args.json:
        print(json.dumps(timeline.to_dict(), indent=2))
    else:
        for index, step in enumerate(timeline):
            extra = f" {step.intensity.value}" if step.kind == "pulse" else ""
            print(f"{index:4d}  {step.kind:8s} {step.duration_ms:6d}ms{extra}")
        print(f"total {timeline.total_duration_ms}ms, {len(timeline)} steps")
    return EXIT_OK


async def _play(answers: AnswerSet, config: FeedbackConfiguration, args: argparse.Namespace) -> int:
    timing_log = PlaybackTimingLog() if args.timing_out else None
    sequencer = Sequencer(timing_log)
    device = SimulatedDevice()

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, sequencer.cancel)
    except (NotImplementedError, RuntimeError):
        logger.debug("Signal handlers not supported here, Ctrl-C will abort")

    try:
        result = await sequencer.build_and_play(answers, config, device.channels())
    except EffectorFailureError as e:
        logger.error(f"Playback failed: {e}")
        return EXIT_PLAYBACK_FAILED
    finally:
        if timing_log is not None:
            timing_log.save(args.timing_out)
            logger.info(timing_log.summary())

    logger.info(f"{result.status.value}: {result.steps_executed}/{result.total_steps} steps")
    return EXIT_CANCELLED if result.cancelled else EXIT_OK


def cmd_play(args: argparse.Namespace) -> int:
    if args.time_scale < 0:
        logger.error("--time-scale cannot be negative")
        return EXIT_INPUT_ERROR
    answers = _read_answers(args.source)
    if not answers:
        logger.warning("No answers found")
        return EXIT_NO_ANSWERS
    config = _scale_config(_load_config(args), args.time_scale)
    logger.info(f"Playing {len(answers)} answer(s)")
    return asyncio.run(_play(answers, config, args))


COMMANDS = {
    "extract": cmd_extract,
    "timeline": cmd_timeline,
    "play": cmd_play,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    try:
        return COMMANDS[args.command](args)
    except (SourceReadError, InvalidConfigurationError) as e:
        logger.error(str(e))
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
