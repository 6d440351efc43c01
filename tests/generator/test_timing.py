"""
Unit Tests for generation timing
"""

import pytest

from adaptive_images.generator.config import GeneratorConfig
from adaptive_images.generator.pipeline import generate_derivatives
from adaptive_images.generator.timing import TimingLog, timed_phase


class TestTimingLog:
    """Tests for TimingLog."""

    def test_log_source_when_phase_repeats_then_accumulates(self):
        log = TimingLog()
        log.log_source("hero.jpg", "encode", 0.25)
        log.log_source("hero.jpg", "encode", 0.5)
        assert log.source_timings["hero.jpg"]["encode"] == pytest.approx(0.75)

    def test_slowest_when_several_sources_then_sorted_descending(self):
        log = TimingLog()
        log.log_source("a.jpg", "resize", 0.1)
        log.log_source("b.jpg", "resize", 0.4)
        log.log_source("c.jpg", "resize", 0.2)
        assert [s for s, _ in log.get_slowest_sources(2)] == ["b.jpg", "c.jpg"]

    def test_summary_when_populated_then_names_phases_and_sources(self):
        log = TimingLog()
        log.log_run("discovery", 0.01)
        log.log_source("hero.jpg", "decode", 0.02)
        summary = log.summary()
        assert "discovery" in summary
        assert "hero.jpg" in summary

    def test_timed_phase_when_body_raises_then_still_recorded(self):
        log = TimingLog()
        with pytest.raises(RuntimeError):
            with timed_phase(log, "generation"):
                raise RuntimeError("boom")
        assert "generation" in log.run_timings

    def test_generate_when_run_then_phases_recorded_per_source(self, asset_tree):
        result = generate_derivatives(GeneratorConfig(source_root=asset_tree, write_manifest=False))
        timings = result.timing.to_dict()
        assert {"discovery", "generation"} <= set(timings["run_timings"])
        assert set(timings["source_timings"]["hero.jpg"]) == {"decode", "resize", "encode"}
        assert set(timings["source_timings"]["icons/logo.png"]) == {"decode", "resize", "encode"}
        assert set(timings["source_timings"]["loader.gif"]) == {"copy"}
