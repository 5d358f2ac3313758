# engine.py

import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

# Next-use position of a page that is never referenced again.
NEVER = float('inf')

_TOKEN_SPLIT = re.compile(r"[,\s]+")
_INTEGER = re.compile(r"[+-]?\d+")


class Policy(Enum):
    """Page replacement policies understood by the engine."""
    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"

    @classmethod
    def parse(cls, value: Union["Policy", str]) -> "Policy":
        """
        Convert a selector value (enum member, value or name) to a Policy.

        Raises:
            ValueError: If the value names no known policy
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for policy in cls:
            if text.lower() in (policy.value.lower(), policy.name.lower()):
                return policy
        raise ValueError(f"Unknown replacement policy: {value!r}")

    @property
    def description(self) -> str:
        return POLICY_DESCRIPTIONS[self]


POLICY_DESCRIPTIONS = {
    Policy.FIFO: (
        "First-In-First-Out (FIFO) is the simplest page replacement algorithm. "
        "It replaces the oldest page in memory when a page fault occurs. The "
        "frames are reused in the order they were first filled, so a page that "
        "is referenced often is still evicted once its turn comes."
    ),
    Policy.LRU: (
        "Least Recently Used (LRU) replaces the page that hasn't been used for "
        "the longest time. It relies on temporal locality: a page used recently "
        "is likely to be used again soon."
    ),
    Policy.OPTIMAL: (
        "The Optimal algorithm (also called OPT or MIN) replaces the page that "
        "will not be used for the longest time in the future. It needs the whole "
        "reference string in advance, so real systems cannot run it, but it is "
        "the lower bound on page faults for any policy."
    ),
}


# -----------------------------
# Reference Parser
# -----------------------------
def reference_tokens(text: Optional[str]) -> List[str]:
    """Non-empty tokens of a reference string, split on commas and whitespace."""
    if not text:
        return []
    return [t for t in _TOKEN_SPLIT.split(text) if t]


def parse_reference_string(text: Optional[str]) -> Tuple[int, ...]:
    """
    Parse a page reference string such as "7, 0 1,2".

    Tokens are separated by commas and/or whitespace. If any token is not a
    base-10 integer the whole result is empty: a malformed workload is never
    simulated in truncated form.
    """
    tokens = reference_tokens(text)
    if not all(_INTEGER.fullmatch(t) for t in tokens):
        return ()
    try:
        return tuple(int(t, 10) for t in tokens)
    except ValueError:
        # Past the interpreter's int digit limit.
        return ()


# -----------------------------
# Trace data
# -----------------------------
@dataclass(frozen=True)
class SimulationStep:
    """
    One decision of the engine, recorded after processing a reference.

    Attributes:
        reference (int): The referenced page
        frames (Tuple[Optional[int], ...]): Frame contents after this step, None = empty
        is_hit (bool): True if the page was already resident
        replaced (Optional[int]): The evicted page, None if nothing was evicted
        details (str): Human-readable rationale for the decision
    """
    reference: int
    frames: Tuple[Optional[int], ...]
    is_hit: bool
    replaced: Optional[int] = None
    details: str = ""

    @property
    def is_fault(self) -> bool:
        return not self.is_hit


SimulationTrace = Tuple[SimulationStep, ...]


# -----------------------------
# Simulation Engine
# -----------------------------
class ReplacementEngine:
    """
    Runs one replacement policy over a reference sequence.

    All bookkeeping (frames, FIFO cursor, LRU recency, Optimal next-use
    table) is rebuilt by reset() at the start of every run, so run() is a
    pure function of its inputs.
    """

    def __init__(self, policy: Union[Policy, str], capacity: int):
        self.policy = Policy.parse(policy)
        self.capacity = capacity
        self.reset()

    def reset(self, references: Sequence[int] = ()):
        self.references = tuple(references)
        self.frames: List[Optional[int]] = [None] * max(0, self.capacity)
        self.fifo_cursor = 0
        self.last_used: Dict[int, int] = {}
        self.occurrences: Dict[int, List[int]] = {}
        if self.policy is Policy.OPTIMAL:
            for position, page in enumerate(self.references):
                self.occurrences.setdefault(page, []).append(position)

    def run(self, references: Sequence[int]) -> SimulationTrace:
        self.reset(references)
        if self.capacity <= 0 or not self.references:
            return ()
        return tuple(self._step(i, page) for i, page in enumerate(self.references))

    def _step(self, position: int, page: int) -> SimulationStep:
        # Recency is recorded before any victim is chosen.
        self.last_used[page] = position

        if page in self.frames:
            return SimulationStep(
                reference=page,
                frames=tuple(self.frames),
                is_hit=True,
                details=f"Page hit! Page {page} is already resident.",
            )

        if None in self.frames:
            index = self.frames.index(None)
            self.frames[index] = page
            return SimulationStep(
                reference=page,
                frames=tuple(self.frames),
                is_hit=False,
                details=f"Page fault! Placed page {page} in empty frame {index}.",
            )

        index, reason = self._select_victim(position)
        evicted = self.frames[index]
        self.frames[index] = page
        return SimulationStep(
            reference=page,
            frames=tuple(self.frames),
            is_hit=False,
            replaced=evicted,
            details=f"Page fault! Replaced page {evicted} in frame {index} ({reason}) with page {page}.",
        )

    # -----------------------------
    # Victim selection dispatcher
    # -----------------------------
    def _select_victim(self, position: int) -> Tuple[int, str]:
        if self.policy is Policy.FIFO:
            return self._fifo_victim()
        elif self.policy is Policy.LRU:
            return self._lru_victim()
        return self._optimal_victim(position)

    def _fifo_victim(self) -> Tuple[int, str]:
        # Insertion order only; hits never move the cursor.
        index = self.fifo_cursor
        self.fifo_cursor = (self.fifo_cursor + 1) % self.capacity
        return index, "first in"

    def _lru_victim(self) -> Tuple[int, str]:
        best_index = 0
        best_time = self.last_used[self.frames[0]]

        for i in range(1, len(self.frames)):
            used = self.last_used[self.frames[i]]
            if used < best_time:
                best_time = used
                best_index = i

        return best_index, f"least recently used, last at position {best_time}"

    def _next_use(self, page: int, position: int) -> float:
        positions = self.occurrences.get(page, [])
        k = bisect_right(positions, position)
        return positions[k] if k < len(positions) else NEVER

    def _optimal_victim(self, position: int) -> Tuple[int, str]:
        best_index = 0
        best_next = self._next_use(self.frames[0], position)

        for i in range(1, len(self.frames)):
            upcoming = self._next_use(self.frames[i], position)
            if upcoming > best_next:
                best_next = upcoming
                best_index = i

        if best_next == NEVER:
            return best_index, "optimal choice, never used again"
        return best_index, f"optimal choice, next used at position {best_next}"


def simulate(policy: Union[Policy, str], references: Sequence[int], capacity: int) -> SimulationTrace:
    """
    Compute the full trace for (policy, references, capacity).

    Returns an empty trace for an empty reference sequence or capacity <= 0.
    """
    return ReplacementEngine(policy, capacity).run(references)


def count_faults(trace: SimulationTrace) -> int:
    return sum(1 for step in trace if step.is_fault)


def compare_policies(references: Sequence[int], capacity: int) -> Dict[Policy, int]:
    """Fault count of every policy on the same workload, in Policy order."""
    return {policy: count_faults(simulate(policy, references, capacity)) for policy in Policy}
