from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class TimerMode:
    name: str
    label: str
    minutes: int


TIMER_MODES: Dict[str, TimerMode] = {
    "focus": TimerMode("focus", "Deep Focus", 25),
    "shortBreak": TimerMode("shortBreak", "Short Break", 5),
    "longBreak": TimerMode("longBreak", "Long Break", 15),
}


# PUBLIC_INTERFACE
class FocusTimer:
    """
    Pomodoro countdown driven by explicit ticks.

    The owner calls tick() from its one-second timer and stops calling it on
    teardown. When a focus countdown reaches zero, tick() returns the
    completed duration in minutes so the owner can log a session.
    """

    def __init__(self, mode: str = "focus") -> None:
        self.mode: TimerMode = TIMER_MODES[mode]
        self.remaining_seconds: int = self.mode.minutes * 60
        self.running: bool = False

    def start(self) -> None:
        if self.remaining_seconds > 0:
            self.running = True

    def pause(self) -> None:
        self.running = False

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self.running = False
        self.remaining_seconds = self.mode.minutes * 60

    def switch_mode(self, mode: str) -> None:
        """Select another mode; the timer stops and is reset to its length."""
        self.mode = TIMER_MODES[mode]
        self.reset()

    def tick(self, seconds: int = 1) -> Optional[int]:
        if not self.running:
            return None
        self.remaining_seconds = max(self.remaining_seconds - seconds, 0)
        if self.remaining_seconds > 0:
            return None
        self.running = False
        return self.mode.minutes if self.mode.name == "focus" else None

    @property
    def remaining_display(self) -> str:
        mins, secs = divmod(self.remaining_seconds, 60)
        return f"{mins:02d}:{secs:02d}"
