"""Drift-resistant countdown timer shared by the Pomodoro and full-screen views.

Remaining time is always derived as ``snapshot - (now - session_start)``
instead of being decremented per tick, so late or skipped ticks never
lose time. One :class:`Timer` class covers both uses; the difference is a
:class:`TimerConfig`:

- ``flip``: on reaching zero, switch focus <-> break and arm the next
  session. Completing a focus session reports the configured minutes.
- ``stop``: on reaching zero, stop. Every running interval reports the
  wall-clock minutes it actually ran when it ends.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

FOCUS = "focus"
BREAK = "break"
COUNTDOWN = "countdown"

FLIP = "flip"
STOP = "stop"
VALID_COMPLETIONS = {FLIP, STOP}

Clock = Callable[[], float]
FocusCallback = Callable[[int], Any]


@dataclass
class TimerConfig:
    durations: dict[str, float] = field(default_factory=dict)
    initial_mode: str = FOCUS
    completion: str = FLIP

    def __post_init__(self) -> None:
        if self.completion not in VALID_COMPLETIONS:
            raise ValueError(f"Invalid completion policy: {self.completion}")
        if self.initial_mode not in self.durations:
            raise ValueError(f"No duration configured for mode: {self.initial_mode}")
        if self.completion == FLIP and set(self.durations) != {FOCUS, BREAK}:
            raise ValueError("flip timers need exactly 'focus' and 'break' durations")

    def duration(self, mode: str) -> float:
        return max(0.0, float(self.durations[mode]))


def pomodoro_config(focus_minutes: int = 25, break_minutes: int = 5) -> TimerConfig:
    return TimerConfig(
        durations={FOCUS: focus_minutes * 60, BREAK: break_minutes * 60},
        initial_mode=FOCUS,
        completion=FLIP,
    )


def countdown_config(seconds: float) -> TimerConfig:
    return TimerConfig(durations={COUNTDOWN: seconds}, initial_mode=COUNTDOWN, completion=STOP)


@dataclass(frozen=True)
class TimerState:
    mode: str
    remaining: float
    running: bool

    @property
    def display_seconds(self) -> int:
        return int(math.floor(self.remaining))


def round_minutes(seconds: float) -> int:
    """Round seconds to whole minutes, halves rounding up."""
    return int(math.floor(seconds / 60 + 0.5))


class Timer:
    """A single timer state machine. Owned by exactly one view."""

    def __init__(
        self,
        config: TimerConfig,
        clock: Clock = time.monotonic,
        on_focus_time: FocusCallback | None = None,
    ) -> None:
        self.config = config
        self.clock = clock
        self.on_focus_time = on_focus_time
        self.mode = config.initial_mode
        self.remaining = config.duration(self.mode)
        self.running = False
        self.session_start: float | None = None
        self._session_duration = self.remaining
        self._run_started: float | None = None

    # ── Transitions ────────────────────────────────────────────

    def start(self) -> None:
        if self.running:
            return
        now = self.clock()
        self.running = True
        self.session_start = now
        self._session_duration = self.remaining
        self._run_started = now

    def pause(self) -> None:
        """Stop ticking; remaining stays at the last computed value."""
        if not self.running:
            return
        self._halt()

    def reset(self, mode: str | None = None) -> None:
        next_mode = self.mode if mode is None else mode
        if next_mode not in self.config.durations:
            raise ValueError(f"Unknown timer mode: {next_mode}")
        if self.running:
            self._halt()
        self.mode = next_mode
        self.remaining = self.config.duration(next_mode)
        self.session_start = None
        self._session_duration = self.remaining

    def tick(self) -> bool:
        """Recompute remaining from the clock. Returns True if a session completed."""
        if not self.running:
            return False
        now = self.clock()
        if self.session_start is None:
            self.session_start = now
            self._session_duration = self.remaining
        self.remaining = self._remaining_at(now)
        if self.remaining > 0:
            return False

        if self.config.completion == FLIP:
            self._flip()
        else:
            self.remaining = 0.0
            self._halt()
        return True

    def adjust_by(self, delta_seconds: float) -> None:
        """Add (or subtract) time, running or not, floored at zero."""
        if self.running and self.session_start is not None:
            now = self.clock()
            current = self._remaining_at(now)
            self.remaining = max(0.0, current + delta_seconds)
            self.session_start = now
            self._session_duration = self.remaining
        else:
            self.remaining = max(0.0, self.remaining + delta_seconds)
            self._session_duration = self.remaining

    def snapshot(self) -> TimerState:
        return TimerState(mode=self.mode, remaining=self.remaining, running=self.running)

    # ── Internals ──────────────────────────────────────────────

    def _remaining_at(self, now: float) -> float:
        elapsed = now - (self.session_start if self.session_start is not None else now)
        return max(0.0, self._session_duration - elapsed)

    def _flip(self) -> None:
        finished = self.mode
        self.mode = BREAK if finished == FOCUS else FOCUS
        self.remaining = self.config.duration(self.mode)
        self._session_duration = self.remaining
        # Re-armed by the next tick while still running.
        self.session_start = None
        if finished == FOCUS:
            self._report(round_minutes(self.config.duration(FOCUS)))

    def _halt(self) -> None:
        now = self.clock()
        self.running = False
        self.session_start = None
        started, self._run_started = self._run_started, None
        if self.config.completion == STOP and started is not None:
            minutes = round_minutes(now - started)
            if minutes > 0:
                self._report(minutes)

    def _report(self, minutes: int) -> None:
        if self.on_focus_time is None:
            return
        try:
            self.on_focus_time(minutes)
        except Exception:
            logger.exception("Focus time callback failed (%d min)", minutes)


class Presentation:
    """Full-screen flag for a timer view, orthogonal to running.

    *display* is any object with ``request_fullscreen()`` and
    ``release_fullscreen()``. Both are best-effort.
    """

    def __init__(self, display: Any = None) -> None:
        self.display = display
        self.open = False

    def enter(self) -> None:
        self.open = True
        if self.display is None:
            return
        try:
            self.display.request_fullscreen()
        except Exception as e:
            logger.debug("Fullscreen request ignored: %s", e)

    def exit(self) -> None:
        self.open = False
        if self.display is None:
            return
        try:
            self.display.release_fullscreen()
        except Exception as e:
            logger.debug("Fullscreen release ignored: %s", e)


def format_hms(total_seconds: float) -> str:
    """``MM:SS``, or ``HH:MM:SS`` past an hour. Negative input shows as zero."""
    s = max(0, int(math.floor(total_seconds)))
    h, rem = divmod(s, 3600)
    m, ss = divmod(rem, 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{ss:02d}"
    return f"{m:02d}:{ss:02d}"
