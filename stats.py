# stats.py

from dataclasses import dataclass
from typing import Optional, Tuple

from engine import SimulationStep, SimulationTrace


@dataclass(frozen=True)
class RunningStatistics:
    """Hit and miss counts over the trace prefix [0, cursor]."""
    hits: int = 0
    misses: int = 0

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_ratio(self) -> float:
        return round(self.hits / self.total, 4) if self.total else 0.0

    @property
    def fault_ratio(self) -> float:
        return round(self.misses / self.total, 4) if self.total else 0.0

    @property
    def fault_percent(self) -> float:
        return round(self.fault_ratio * 100, 2)


@dataclass(frozen=True)
class RunSummary:
    """Final figures for a whole trace."""
    total_references: int
    total_hits: int
    total_faults: int
    fault_ratio: float
    final_frames: Tuple[Optional[int], ...]


def compute_stats(trace: SimulationTrace, cursor: int) -> RunningStatistics:
    """
    Count hits and misses over the closed prefix [0, cursor].

    A cursor of -1 (not started) yields zero counts; a cursor past the end
    is clamped to the last step.
    """
    end = min(cursor, len(trace) - 1)
    if end < 0:
        return RunningStatistics()
    misses = sum(1 for step in trace[:end + 1] if step.is_fault)
    return RunningStatistics(hits=end + 1 - misses, misses=misses)


class StatisticsAggregator:
    """
    Incremental version of compute_stats for a cursor that mostly moves forward.

    The cache is rebuilt from scratch whenever the trace changes or the
    cursor moves backward, so hits + misses always equals cursor + 1.
    """

    def __init__(self):
        self.invalidate()

    def invalidate(self):
        self._trace: Optional[SimulationTrace] = None
        self._cursor = -1
        self._hits = 0
        self._misses = 0

    def stats(self, trace: SimulationTrace, cursor: int) -> RunningStatistics:
        cursor = min(cursor, len(trace) - 1)
        if trace is not self._trace or cursor < self._cursor:
            self.invalidate()
            self._trace = trace

        for step in trace[self._cursor + 1:cursor + 1]:
            if step.is_hit:
                self._hits += 1
            else:
                self._misses += 1
        self._cursor = max(cursor, -1)

        return RunningStatistics(hits=self._hits, misses=self._misses)


def summarize(trace: SimulationTrace) -> Optional[RunSummary]:
    """Summary of the complete run, None for an empty trace."""
    if not trace:
        return None
    final = compute_stats(trace, len(trace) - 1)
    return RunSummary(
        total_references=len(trace),
        total_hits=final.hits,
        total_faults=final.misses,
        fault_ratio=final.fault_ratio,
        final_frames=trace[-1].frames,
    )


def fault_details(step: SimulationStep) -> str:
    if not step.is_fault:
        return "No page fault occurred in this step."
    if step.replaced is not None:
        return f"Page fault occurred for page {step.reference}. Replaced page {step.replaced}."
    return f"Page fault occurred for page {step.reference}. Placed in an empty frame."
