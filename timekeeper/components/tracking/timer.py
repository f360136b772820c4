"""Stopwatch and countdown timer.

Both read an injectable monotonic clock instead of counting ticks, so pausing,
resuming and long gaps between reads stay accurate.
"""

import math
import time
from collections.abc import Callable

from timekeeper.settings import settings

Clock = Callable[[], float]


def format_elapsed(seconds: int) -> str:
    """3725 -> "01:02:05" """
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def decimal_hours(seconds: float) -> float:
    return seconds / 3600


class Stopwatch:
    """Counts up from zero; pause keeps the elapsed time."""

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self._accumulated = 0.0
        self._started_at: float | None = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        if self.running:
            return
        self._started_at = self._clock()

    def pause(self) -> None:
        if not self.running:
            return
        self._accumulated += self._clock() - self._started_at
        self._started_at = None

    def reset(self) -> None:
        self._accumulated = 0.0
        self._started_at = None

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds elapsed, floored."""
        elapsed = self._accumulated
        if self._started_at is not None:
            elapsed += self._clock() - self._started_at
        return max(0, math.floor(elapsed))


class CountdownTimer:
    """Counts down from a configurable duration and stops itself at zero."""

    def __init__(self, duration_minutes: float | None = None, clock: Clock = time.monotonic):
        self._clock = clock
        minutes = settings.timer_default_minutes if duration_minutes is None else duration_minutes
        self._duration_seconds = self._clamp_seconds(minutes)
        self._remaining = float(self._duration_seconds)
        self._target_end: float | None = None

    @staticmethod
    def _clamp_seconds(minutes: float) -> int:
        minutes = min(settings.timer_max_minutes, max(settings.timer_min_minutes, minutes))
        return round(minutes * 60)

    @property
    def duration_seconds(self) -> int:
        return self._duration_seconds

    @property
    def running(self) -> bool:
        if self._target_end is not None and self._clock() >= self._target_end:
            self._finish()
        return self._target_end is not None

    @property
    def finished(self) -> bool:
        return self.remaining_seconds == 0

    def set_duration(self, minutes: float) -> None:
        """Change the duration; a running countdown keeps its current remaining time."""
        self._duration_seconds = self._clamp_seconds(minutes)
        if not self.running:
            self._remaining = float(self._duration_seconds)

    def start(self) -> None:
        if self.running:
            return
        baseline = self._remaining if self._remaining > 0 else float(self._duration_seconds)
        self._remaining = baseline
        self._target_end = self._clock() + baseline

    def pause(self) -> None:
        if not self.running:
            return
        self._remaining = max(0.0, self._target_end - self._clock())
        self._target_end = None

    def reset(self) -> None:
        self._target_end = None
        self._remaining = float(self._duration_seconds)

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left, rounded up, never negative."""
        if self.running:
            return max(0, math.ceil(self._target_end - self._clock()))
        return max(0, math.ceil(self._remaining))

    def _finish(self) -> None:
        self._target_end = None
        self._remaining = 0.0
