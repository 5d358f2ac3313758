# playback.py

import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from engine import SimulationStep, SimulationTrace
from settings import BASE_TICK_SECONDS, DEFAULT_SPEED

Clock = Callable[[], float]


class PlaybackMode(Enum):
    STOPPED = "Stopped"
    PAUSED = "Paused"
    PLAYING = "Playing"
    FINISHED = "Finished"


@dataclass(frozen=True)
class PlaybackState:
    """
    Snapshot of the controller for observers.

    Attributes:
        cursor (int): Index of the current step, -1 when not started
        mode (PlaybackMode): Stopped, Paused, Playing or Finished
        speed (float): Positive playback speed multiplier
        length (int): Number of steps in the trace being played
    """
    cursor: int
    mode: PlaybackMode
    speed: float
    length: int

    @property
    def step_label(self) -> str:
        return f"Step {self.cursor + 1} of {self.length}"


# -----------------------------
# Cooperative interval timer
# -----------------------------
class IntervalTimer:
    """
    Single interval timer polled by its owner instead of running a thread.

    Each arm() starts a new generation; ticks are reported with the
    generation that produced them so a holder can drop ticks from a timer
    that was cancelled in the meantime.
    """

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self.generation = 0
        self.period: Optional[float] = None
        self._deadline: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    def arm(self, period: float) -> int:
        if self.armed:
            raise RuntimeError("Timer is already armed; cancel it first")
        self.generation += 1
        self.period = period
        self._deadline = self._clock() + period
        return self.generation

    def cancel(self):
        self.period = None
        self._deadline = None

    def poll(self) -> int:
        """Number of periods that elapsed since the last poll."""
        if not self.armed:
            return 0
        now = self._clock()
        if now < self._deadline:
            return 0
        due = int((now - self._deadline) // self.period) + 1
        self._deadline += due * self.period
        return due

    def remaining(self) -> Optional[float]:
        if not self.armed:
            return None
        return max(0.0, self._deadline - self._clock())


# -----------------------------
# Playback Controller
# -----------------------------
class PlaybackController:
    """
    Forward-only cursor over a simulation trace.

    Stopped   cursor == -1
    Paused    0 <= cursor < length - 1, no timer
    Playing   timer armed, cursor advancing one step per tick
    Finished  cursor == length - 1, no timer

    Playing is exactly "the timer is armed", so every transition out of
    Playing goes through _disarm().
    """

    def __init__(self, trace: SimulationTrace = (), speed: float = DEFAULT_SPEED,
                 clock: Clock = time.monotonic, base_period: float = BASE_TICK_SECONDS):
        self.speed = self._validate_speed(speed)
        self.base_period = base_period
        self.timer = IntervalTimer(clock)
        self.trace: SimulationTrace = trace
        self.cursor = -1

    @staticmethod
    def _validate_speed(speed: float) -> float:
        speed = float(speed)
        if not math.isfinite(speed) or speed <= 0:
            raise ValueError(f"Playback speed must be a positive number, got {speed}")
        return speed

    # -----------------------------
    # Observers
    # -----------------------------
    @property
    def length(self) -> int:
        return len(self.trace)

    @property
    def last_index(self) -> int:
        return self.length - 1

    @property
    def period(self) -> float:
        return self.base_period / self.speed

    @property
    def mode(self) -> PlaybackMode:
        if self.timer.armed:
            return PlaybackMode.PLAYING
        if self.cursor < 0:
            return PlaybackMode.STOPPED
        if self.cursor >= self.last_index:
            return PlaybackMode.FINISHED
        return PlaybackMode.PAUSED

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(cursor=self.cursor, mode=self.mode, speed=self.speed, length=self.length)

    @property
    def current_step(self) -> Optional[SimulationStep]:
        if 0 <= self.cursor < self.length:
            return self.trace[self.cursor]
        return None

    # -----------------------------
    # Transitions
    # -----------------------------
    def load(self, trace: SimulationTrace):
        """Replace the trace. Always resets, even while playing."""
        self.reset()
        self.trace = trace

    def reset(self):
        self._disarm()
        self.cursor = -1

    def start(self):
        mode = self.mode
        if mode is PlaybackMode.PLAYING or self.length == 0:
            return
        if mode in (PlaybackMode.STOPPED, PlaybackMode.FINISHED):
            self.cursor = 0
        if self.cursor < self.last_index:
            self.timer.arm(self.period)

    def pause(self):
        self._disarm()

    def step(self):
        if self.mode in (PlaybackMode.STOPPED, PlaybackMode.PAUSED) and self.cursor < self.last_index:
            self.cursor += 1

    def set_speed(self, speed: float):
        self.speed = self._validate_speed(speed)
        if self.timer.armed:
            self._disarm()
            self.timer.arm(self.period)

    # -----------------------------
    # Timer plumbing
    # -----------------------------
    def _disarm(self):
        self.timer.cancel()

    def tick(self, generation: int) -> bool:
        """Advance one step for a tick of the given timer generation."""
        if not self.timer.armed or generation != self.timer.generation:
            return False
        if self.cursor < self.last_index:
            self.cursor += 1
        if self.cursor >= self.last_index:
            self._disarm()
        return True

    def poll(self) -> int:
        """Deliver every tick that came due; returns how many advanced the cursor."""
        generation = self.timer.generation
        advanced = 0
        for _ in range(self.timer.poll()):
            if not self.tick(generation):
                break
            advanced += 1
        return advanced

    def seconds_until_tick(self) -> Optional[float]:
        return self.timer.remaining()
