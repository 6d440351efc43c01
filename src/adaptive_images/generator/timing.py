"""
Module: generator.timing

Purpose:
    Timing instrumentation for the generation pipeline, to spot slow
    sources and slow phases (decode, resize, encode).

Key Classes:
    - TimingLog: Collects run-level and per-source phase timings

Key Functions:
    - timed_phase: Context manager for timing code blocks

Used By:
    - generator.pipeline: Per-source timings, logged at DEBUG after a run
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Tuple


@dataclass
class TimingLog:
    """
    Timing metrics for a generation run.

    Attributes:
        run_timings: Dict of phase_name -> duration_seconds
        source_timings: Dict of source -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog()
        >>> log.log_run("discovery", 0.012)
        >>> log.log_source("hero.jpg", "encode", 0.31)
        >>> print(log.summary())
    """
    run_timings: Dict[str, float] = field(default_factory=dict)
    source_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def log_run(self, phase: str, duration: float) -> None:
        """Log a run-level timing metric."""
        with self._lock:
            self.run_timings[phase] = duration

    def log_source(self, source: str, phase: str, duration: float) -> None:
        """Accumulate a per-source timing metric (phases repeat per tier)."""
        with self._lock:
            phases = self.source_timings.setdefault(source, {})
            phases[phase] = phases.get(phase, 0.0) + duration

    def get_slowest_sources(self, n: int = 3) -> List[Tuple[str, float]]:
        totals = [(src, sum(p.values())) for src, p in self.source_timings.items()]
        totals.sort(key=lambda x: x[1], reverse=True)
        return totals[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Generation Timing Summary ==="]

        if self.run_timings:
            lines.append("Run-level:")
            for phase, duration in sorted(self.run_timings.items()):
                lines.append(f"  {phase:25s} {duration:.3f}s")

        slowest = self.get_slowest_sources(3)
        if slowest:
            lines.append("")
            lines.append("Slowest sources:")
            for source, total in slowest:
                lines.append(f"  {source}: {total:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "run_timings": dict(self.run_timings),
            "source_timings": {k: dict(v) for k, v in self.source_timings.items()},
            "slowest_sources": [
                {"source": src, "total": total}
                for src, total in self.get_slowest_sources(5)
            ],
        }


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    source: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        source: If provided, records as a per-source metric;
                otherwise records as a run-level metric
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if source:
            log.log_source(source, phase, elapsed)
        else:
            log.log_run(phase, elapsed)
