"""
Tests for sequencer.builder

Test Coverage:
- build_timeline(): Group structure, separators, channel switches,
  channel availability, determinism
- build_pattern_timeline(): Free letter/flash patterns
"""
import pytest

from qcm_haptics.core.models import Answer, AnswerSet, Pulse, Silence, VisualFlash
from qcm_haptics.extractor import extract_answers
from qcm_haptics.sequencer import (
    FeedbackChannelSet,
    FeedbackConfiguration,
    PatternItem,
    build_pattern_timeline,
    build_timeline,
    encode_letter,
    encode_question_number,
)


@pytest.fixture
def cfg():
    return FeedbackConfiguration()


def _flash_positions(timeline):
    return [i for i, step in enumerate(timeline) if step.kind == "flash"]


class TestBuildTimeline:
    """Tests for build_timeline()."""

    def test_build_when_empty_then_empty_timeline(self, cfg):
        assert len(build_timeline(AnswerSet.empty(), cfg)) == 0

    def test_build_when_single_answer_then_question_pause_letter(self, cfg):
        timeline = build_timeline(extract_answers("2/b"), cfg)
        expected = (
            encode_question_number(2, cfg)
            + [Silence(cfg.question_answer_pause_ms)]
            + encode_letter("b", cfg)
        )
        assert list(timeline) == expected

    def test_build_when_two_answers_then_one_flash_between(self, cfg):
        """One flash between the two answer encodings, none after the last."""
        timeline = build_timeline(extract_answers("1-a,b"), cfg)
        steps = list(timeline)
        expected = (
            encode_question_number(1, cfg)
            + [Silence(cfg.question_answer_pause_ms)]
            + encode_letter("a", cfg)
            + [Silence(cfg.separator_pause_ms), VisualFlash(cfg.separator_flash_ms), Silence(cfg.separator_pause_ms)]
            + [Silence(cfg.inter_answer_silence_ms)]
            + encode_letter("b", cfg)
        )
        assert steps == expected
        assert timeline.count("flash") == 1
        assert steps[-1] == Pulse(cfg.pulse_ms)

    def test_build_when_two_questions_then_pause_between_groups(self, cfg):
        timeline = build_timeline(extract_answers("1/a\n2/a"), cfg)
        first_group_len = len(encode_question_number(1, cfg)) + 1 + len(encode_letter("a", cfg))
        assert timeline[first_group_len] == Silence(cfg.inter_question_pause_ms)
        assert timeline.count("flash") == 0

    def test_build_when_single_answer_groups_then_no_flash(self, cfg):
        """Separators only go between answers of the same question."""
        timeline = build_timeline(extract_answers("1/a 2/b 3/c"), cfg)
        assert timeline.count("flash") == 0

    def test_build_when_three_answers_then_two_flashes(self, cfg):
        timeline = build_timeline(extract_answers("3-c,b,e"), cfg)
        assert timeline.count("flash") == 2

    def test_build_when_flash_disabled_then_no_flash_steps(self, cfg):
        timeline = build_timeline(extract_answers("1-a,b,c"), cfg.with_overrides(flash_enabled=False))
        assert timeline.count("flash") == 0
        assert timeline.count("pulse") == (1 + 1) + 1 + 2 + 3

    def test_build_when_vibration_disabled_then_only_silences_and_flashes(self, cfg):
        """Pulses go, configured silences and flashes stay."""
        timeline = build_timeline(extract_answers("1-a,b"), cfg.with_overrides(vibration_enabled=False))
        assert timeline.count("pulse") == 0
        assert list(timeline) == [
            Silence(cfg.question_answer_pause_ms),
            Silence(cfg.separator_pause_ms),
            VisualFlash(cfg.separator_flash_ms),
            Silence(cfg.separator_pause_ms),
            Silence(cfg.inter_answer_silence_ms),
        ]

    def test_build_when_zero_silences_then_omitted(self):
        cfg = FeedbackConfiguration(
            inter_answer_silence_ms=0,
            inter_question_pause_ms=0,
            separator_pause_ms=0,
            question_answer_pause_ms=0,
            pulse_gap_ms=0,
        )
        timeline = build_timeline(extract_answers("1-a,b\n2/a"), cfg)
        assert timeline.count("silence") == 0
        assert timeline.count("flash") == 1

    def test_build_when_pulse_channel_missing_then_pulses_skipped(self, cfg):
        channels = FeedbackChannelSet(emit_flash=lambda ms: None)
        timeline = build_timeline(extract_answers("1-a,b"), cfg, channels)
        assert timeline.count("pulse") == 0
        assert timeline.count("flash") == 1

    def test_build_when_flash_channel_missing_then_flashes_skipped(self, cfg, caplog):
        channels = FeedbackChannelSet(emit_pulse=lambda i, ms: None)
        timeline = build_timeline(extract_answers("1-a,b"), cfg, channels)
        assert timeline.count("flash") == 0
        assert "flash channel unavailable" in caplog.text

    def test_build_when_called_twice_then_identical(self, cfg):
        """Same input, same timeline."""
        answers = extract_answers("Q1: a\n2-b,c\n12/AB")
        first = build_timeline(answers, cfg)
        second = build_timeline(extract_answers("Q1: a\n2-b,c\n12/AB"), cfg)
        assert first == second
        assert first.fingerprint() == second.fingerprint()

    def test_build_when_total_duration_then_matches_reference(self, cfg):
        """1/a with reference durations: marker+1 (2 pulses, 1 gap), pause, 1 pulse."""
        timeline = build_timeline(AnswerSet.from_answers([Answer(1, "a")]), cfg)
        assert timeline.total_duration_ms == 1000 + 200 + 1000 + 500 + 1000


class TestBuildPatternTimeline:
    """Tests for build_pattern_timeline()."""

    def test_pattern_when_flash_after_then_bracketed_flash(self, cfg):
        items = [PatternItem("a"), PatternItem("b", flash_after=True), PatternItem("c")]
        timeline = build_pattern_timeline(items, cfg)
        assert timeline.count("flash") == 1
        flash_idx = _flash_positions(timeline)[0]
        assert timeline[flash_idx - 1] == Silence(cfg.separator_pause_ms)
        assert timeline[flash_idx + 1] == Silence(cfg.separator_pause_ms)

    def test_pattern_when_no_flash_then_fixed_gap_between_items(self, cfg):
        timeline = build_pattern_timeline([PatternItem("a"), PatternItem("a")], cfg)
        assert list(timeline) == [Pulse(1000), Silence(200), Pulse(1000)]

    def test_pattern_when_bad_letter_then_raises(self, cfg):
        with pytest.raises(ValueError):
            build_pattern_timeline([PatternItem("z")], cfg)
