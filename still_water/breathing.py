"""
Guided breathing session: a four-phase cycle driven by a fixed-rate tick.

    ready -> inhale -> hold -> exhale -> (inhale ... ) -> complete

The hold phase is skipped for patterns with hold == 0. Time that overshoots
a phase boundary on the tick that crosses it is dropped, not carried into
the next phase.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

TICK_SECONDS = 0.1          # 100 ms clock
_EPSILON = 1e-9             # ten 0.1 s ticks must add up to one second


class Phase(str, Enum):
    READY = "ready"
    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"
    COMPLETE = "complete"


@dataclass(frozen=True)
class BreathingPattern:
    name: str
    inhale: float
    hold: float
    exhale: float
    cycles: int

    def duration(self, phase: Phase) -> float:
        """Seconds spent in a phase (0 for ready/complete)."""
        if phase is Phase.INHALE:
            return self.inhale
        if phase is Phase.HOLD:
            return self.hold
        if phase is Phase.EXHALE:
            return self.exhale
        return 0

    @property
    def cycle_seconds(self) -> float:
        return self.inhale + self.hold + self.exhale

    @property
    def label(self) -> str:
        return f"{self.inhale:g}s-{self.hold:g}s-{self.exhale:g}s"


# ─── Pattern Catalog ──────────────────────────────────────────
BREATHING_PATTERNS = [
    BreathingPattern("4-7-8 Technique", 4, 7, 8, 4),
    BreathingPattern("Box Breathing",   4, 4, 4, 4),
    BreathingPattern("Equal Breathing", 4, 0, 4, 6),
    BreathingPattern("Calming Breath",  4, 2, 6, 5),
]

def get_pattern(name: str) -> BreathingPattern:
    """Look up a pattern by name, falling back to the first one."""
    for pattern in BREATHING_PATTERNS:
        if pattern.name == name:
            return pattern
    return BREATHING_PATTERNS[0]


PHASE_TEXT = {
    Phase.READY: "Ready to begin",
    Phase.INHALE: "Breathe In",
    Phase.HOLD: "Hold",
    Phase.EXHALE: "Breathe Out",
    Phase.COMPLETE: "Exercise Complete!",
}

# Circle scale the presentation animates towards in each phase
SCALE_TARGETS = {Phase.INHALE: 1.5, Phase.HOLD: 1.5, Phase.EXHALE: 1.0}
REST_SCALE = 1.0
FULL_SCALE = 1.5


class BreathingSession:
    """Mutable state of one breathing exercise, advanced by tick()."""

    def __init__(self, pattern: Optional[BreathingPattern] = None):
        self.pattern = pattern or BREATHING_PATTERNS[0]
        self.reset()

    # ─── Controls ─────────────────────────────────────────────
    def start(self, pattern: Optional[BreathingPattern] = None) -> None:
        if pattern is not None:
            self.pattern = pattern
        self.phase = Phase.INHALE
        self.cycle_index = 0
        self.phase_elapsed = 0.0
        self.total_elapsed = 0.0
        self.progress = 0.0
        self.running = True

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        # Nothing to resume before start or after the last cycle
        if self.phase in (Phase.READY, Phase.COMPLETE):
            return
        self.running = True

    def reset(self) -> None:
        self.phase = Phase.READY
        self.cycle_index = 0
        self.phase_elapsed = 0.0
        self.total_elapsed = 0.0
        self.progress = 0.0
        self.running = False

    def select_pattern(self, pattern: BreathingPattern) -> None:
        """Switch patterns. Always drops the session in progress."""
        self.pattern = pattern
        self.reset()

    # ─── Clock ────────────────────────────────────────────────
    def tick(self, delta: float = TICK_SECONDS) -> bool:
        """Advance by delta seconds. Returns True if the phase changed."""
        if not self.running:
            return False

        duration = self.phase_duration
        if duration <= 0:
            self._next_phase()
            return True

        self.total_elapsed += delta
        self.phase_elapsed += delta
        self.progress = min(100.0, self.phase_elapsed / duration * 100)

        if self.phase_elapsed >= duration - _EPSILON:
            self._next_phase()
            return True
        return False

    def _next_phase(self) -> None:
        self.phase_elapsed = 0.0
        self.progress = 0.0

        if self.phase is Phase.READY:
            self.phase = Phase.INHALE
        elif self.phase is Phase.INHALE:
            self.phase = Phase.HOLD if self.pattern.hold > 0 else Phase.EXHALE
        elif self.phase is Phase.HOLD:
            self.phase = Phase.EXHALE
        elif self.phase is Phase.EXHALE:
            self.cycle_index += 1
            if self.cycle_index >= self.pattern.cycles:
                self.phase = Phase.COMPLETE
                self.running = False
            else:
                self.phase = Phase.INHALE

    # ─── Readouts ─────────────────────────────────────────────
    @property
    def phase_duration(self) -> float:
        return self.pattern.duration(self.phase)

    @property
    def is_complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    @property
    def is_paused(self) -> bool:
        """True while a started session is on hold."""
        return not self.running and self.phase not in (Phase.READY, Phase.COMPLETE)

    @property
    def phase_text(self) -> str:
        return PHASE_TEXT[self.phase]

    @property
    def seconds_left(self) -> int:
        return max(0, math.ceil(self.phase_duration - self.phase_elapsed - _EPSILON))

    @property
    def scale_target(self) -> float:
        return SCALE_TARGETS.get(self.phase, REST_SCALE)

    @property
    def circle_scale(self) -> float:
        """Current circle scale, eased between rest and full size."""
        p = self.progress / 100
        eased = 0.5 - 0.5 * math.cos(math.pi * p)
        span = FULL_SCALE - REST_SCALE
        if self.phase is Phase.INHALE:
            return REST_SCALE + span * eased
        if self.phase is Phase.HOLD:
            return FULL_SCALE
        if self.phase is Phase.EXHALE:
            return FULL_SCALE - span * eased
        return REST_SCALE

    @property
    def cycle_label(self) -> str:
        shown = min(self.cycle_index + 1, self.pattern.cycles)
        return f"Cycle {shown} of {self.pattern.cycles}"

    @property
    def clock_text(self) -> str:
        secs = int(self.total_elapsed + _EPSILON)
        return f"{secs // 60}:{secs % 60:02d}"
