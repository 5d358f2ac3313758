# session.py

import time
from typing import List, Optional, Tuple, Union

from engine import (Policy, SimulationStep, SimulationTrace, parse_reference_string,
                    reference_tokens, simulate)
from playback import Clock, PlaybackController, PlaybackState
from settings import (BASE_TICK_SECONDS, DEFAULT_FRAME_COUNT, DEFAULT_REFERENCE_STRING,
                      DEFAULT_SPEED, MAX_EVENT_LOG)
from stats import RunningStatistics, RunSummary, StatisticsAggregator, summarize


class SimulationSession:
    """
    Owns the simulation inputs, the current trace and its playback.

    Changing the reference string, the frame count or the policy goes
    through configure(), which rebuilds the trace and resets playback and
    statistics in one step. Nothing else replaces the trace.

    Attributes:
        reference_text (str): Raw reference string as typed
        capacity (int): Number of frames
        policy (Policy): Replacement policy
        references (Tuple[int, ...]): Parsed reference sequence
        trace (SimulationTrace): Steps for the current inputs
        controller (PlaybackController): Cursor over the trace
        event_log (List[str]): Bounded log of session events, oldest first
    """

    def __init__(self, reference_text: str = DEFAULT_REFERENCE_STRING,
                 capacity: int = DEFAULT_FRAME_COUNT,
                 policy: Union[Policy, str] = Policy.FIFO,
                 speed: float = DEFAULT_SPEED,
                 clock: Clock = time.monotonic,
                 base_period: float = BASE_TICK_SECONDS):
        self.reference_text = reference_text
        self.capacity = int(capacity)
        self.policy = Policy.parse(policy)
        self.controller = PlaybackController(speed=speed, clock=clock, base_period=base_period)
        self.aggregator = StatisticsAggregator()
        self.event_log: List[str] = []
        self.references: Tuple[int, ...] = ()
        self.trace: SimulationTrace = ()
        self._rebuild()

    # -----------------------------
    # Inputs
    # -----------------------------
    @property
    def parse_failed(self) -> bool:
        """True when the text has tokens but did not parse."""
        return bool(reference_tokens(self.reference_text)) and not self.references

    def configure(self, reference_text: Optional[str] = None, capacity: Optional[int] = None,
                  policy: Optional[Union[Policy, str]] = None) -> bool:
        """
        Apply any subset of the three inputs as a single update.

        Returns True if anything changed (and the trace was rebuilt).

        Raises:
            ValueError: If policy names no known policy
        """
        new_text = self.reference_text if reference_text is None else reference_text
        new_capacity = self.capacity if capacity is None else int(capacity)
        new_policy = self.policy if policy is None else Policy.parse(policy)

        if (new_text, new_capacity, new_policy) == (self.reference_text, self.capacity, self.policy):
            return False

        self.reference_text = new_text
        self.capacity = new_capacity
        self.policy = new_policy
        self._rebuild()
        return True

    def _rebuild(self):
        self.references = parse_reference_string(self.reference_text)
        self.trace = simulate(self.policy, self.references, self.capacity)
        self.controller.load(self.trace)
        self.aggregator.invalidate()

        if self.parse_failed:
            self.log(f"Invalid reference string {self.reference_text!r}: nothing to simulate")
        else:
            self.log(f"Simulated {self.policy.value} with {self.capacity} frame(s): "
                     f"{len(self.trace)} step(s)")

    # -----------------------------
    # Playback
    # -----------------------------
    def start(self):
        before = self.controller.mode
        self.controller.start()
        if self.controller.mode is not before:
            self.log(f"Play from step {self.controller.cursor + 1}")

    def pause(self):
        before = self.controller.mode
        self.controller.pause()
        if self.controller.mode is not before:
            self.log(f"Paused at step {self.controller.cursor + 1}")

    def toggle(self):
        """Play/pause button: pause while playing, otherwise start."""
        if self.controller.timer.armed:
            self.pause()
        else:
            self.start()

    def step(self):
        before = self.controller.cursor
        self.controller.step()
        if self.controller.cursor != before:
            self.log(f"Stepped to step {self.controller.cursor + 1}")

    def reset(self):
        self.controller.reset()
        self.aggregator.invalidate()
        self.log("Playback reset")

    def set_speed(self, speed: float):
        if float(speed) == self.controller.speed:
            return
        self.controller.set_speed(speed)
        self.log(f"Playback speed set to {self.controller.speed}x")

    def poll(self) -> int:
        advanced = self.controller.poll()
        if advanced:
            self.log(f"Advanced {advanced} step(s) to step {self.controller.cursor + 1}")
        return advanced

    # -----------------------------
    # Observers
    # -----------------------------
    @property
    def state(self) -> PlaybackState:
        return self.controller.state

    @property
    def current_step(self) -> Optional[SimulationStep]:
        return self.controller.current_step

    @property
    def statistics(self) -> RunningStatistics:
        return self.aggregator.stats(self.trace, self.controller.cursor)

    @property
    def summary(self) -> Optional[RunSummary]:
        return summarize(self.trace)

    def log(self, message: str):
        self.event_log.append(message)
        if len(self.event_log) > MAX_EVENT_LOG:
            del self.event_log[:-MAX_EVENT_LOG]
