"""
Read-only analytics computed from the raw logs.

Every function is deterministic given its inputs and the `now` instant
(epoch milliseconds). Results are recomputed per request and never stored.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import STATUS_ORDER, TaskStatus
from .utils import local_date, to_datetime

MINUTE_MS = 60 * 1000

DEFAULT_HALF_LIFE_MINUTES = 300.0
DEFAULT_PEAK_OFFSET_MINUTES = 45.0
DEFAULT_VELOCITY_DAYS = 7
DEFAULT_HEATMAP_DAYS = 180
DEFAULT_BAND_LIMITS = (25, 60, 120)

PAST_PEAK = "Past Peak"

STATUS_LABELS: Dict[TaskStatus, str] = {
    TaskStatus.TODO: "Todo",
    TaskStatus.IN_PROGRESS: "WIP",
    TaskStatus.CODE_REVIEW: "Review",
    TaskStatus.DONE: "Done",
}


def _valid_instant(ms: float) -> bool:
    try:
        to_datetime(ms, timezone.utc)
    except (OverflowError, OSError, ValueError):
        return False
    return True


def _well_formed(entry: Mapping[str, Any], *fields: str) -> bool:
    """
    True when every field holds a finite number and a timestamp field is a
    representable instant; imported logs are not validated.
    """
    for name in fields:
        value = entry.get(name)
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return False
        try:
            if not math.isfinite(value):
                return False
        except OverflowError:
            return False
        if name == "timestamp" and not _valid_instant(value):
            return False
    return True


# ---------------------------------------------------------------- caffeine


# PUBLIC_INTERFACE
def caffeine_contribution(
    entry: Mapping[str, Any],
    now: float,
    half_life_minutes: float = DEFAULT_HALF_LIFE_MINUTES,
) -> float:
    """
    Remaining amount of one intake at now, decaying exponentially with the
    given half-life. An entry dated after now contributes its full amount;
    a non-positive amount contributes nothing.
    """
    amount = max(0.0, float(entry["amount"]))
    elapsed = now - entry["timestamp"]
    if elapsed < 0:
        return amount
    return amount * 0.5 ** (elapsed / (half_life_minutes * MINUTE_MS))


# PUBLIC_INTERFACE
def active_caffeine(
    log: Iterable[Mapping[str, Any]],
    now: float,
    half_life_minutes: float = DEFAULT_HALF_LIFE_MINUTES,
) -> float:
    """Total active caffeine (mg) of the log at now."""
    return sum(
        caffeine_contribution(entry, now, half_life_minutes)
        for entry in log
        if _well_formed(entry, "amount", "timestamp")
    )


@dataclass(frozen=True)
class PeakEstimate:
    """Expected peak-effect instant of the latest intake."""

    peak_at: int
    past_peak: bool

    def display(self, tz: tzinfo = timezone.utc) -> str:
        """The PAST_PEAK sentinel, or the HH:MM clock time of the peak."""
        if self.past_peak:
            return PAST_PEAK
        return to_datetime(self.peak_at, tz).strftime("%H:%M")


# PUBLIC_INTERFACE
def peak_effect(
    log: Sequence[Mapping[str, Any]],
    now: float,
    offset_minutes: float = DEFAULT_PEAK_OFFSET_MINUTES,
) -> Optional[PeakEstimate]:
    """
    Peak estimate from the entry with the greatest timestamp; insertion order
    only decides between equal timestamps (the later entry wins). None for an
    empty log.
    """
    latest: Optional[Mapping[str, Any]] = None
    for entry in log:
        if not _well_formed(entry, "timestamp"):
            continue
        if latest is None or entry["timestamp"] >= latest["timestamp"]:
            latest = entry
    if latest is None:
        return None
    peak_at = int(latest["timestamp"] + offset_minutes * MINUTE_MS)
    return PeakEstimate(peak_at=peak_at, past_peak=now > peak_at)


# ---------------------------------------------------------------- focus


def _minutes_by_day(sessions: Iterable[Mapping[str, Any]], tz: tzinfo) -> Dict[date, float]:
    totals: Dict[date, float] = defaultdict(float)
    for session in sessions:
        if not _well_formed(session, "timestamp", "durationMinutes"):
            continue
        totals[local_date(session["timestamp"], tz)] += session["durationMinutes"]
    return totals


def _day_window(now: float, tz: tzinfo, days: int) -> List[date]:
    today = local_date(now, tz)
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


# PUBLIC_INTERFACE
def focus_velocity(
    sessions: Iterable[Mapping[str, Any]],
    now: float,
    tz: tzinfo = timezone.utc,
    days: int = DEFAULT_VELOCITY_DAYS,
) -> List[Dict[str, Any]]:
    """
    Focus minutes per calendar day for the `days` days ending today, oldest
    first. Each bucket is {date, label, minutes}; label is the weekday
    abbreviation. Days without sessions are zero buckets.
    """
    totals = _minutes_by_day(sessions, tz)
    return [
        {"date": day.isoformat(), "label": day.strftime("%a"), "minutes": totals.get(day, 0)}
        for day in _day_window(now, tz, days)
    ]


# PUBLIC_INTERFACE
def intensity_band(minutes: float, limits: Sequence[int] = DEFAULT_BAND_LIMITS) -> int:
    """
    Heatmap level of a daily total. Zero minutes is level 0; otherwise the
    level is one more than the number of limits the total has reached, so
    the default limits give <25 -> 1, <60 -> 2, <120 -> 3, >=120 -> 4.
    """
    if minutes <= 0:
        return 0
    return 1 + sum(1 for limit in limits if minutes >= limit)


# PUBLIC_INTERFACE
def focus_heatmap(
    sessions: Iterable[Mapping[str, Any]],
    now: float,
    tz: tzinfo = timezone.utc,
    days: int = DEFAULT_HEATMAP_DAYS,
    band_limits: Sequence[int] = DEFAULT_BAND_LIMITS,
) -> List[Dict[str, Any]]:
    """
    Daily focus totals for the `days` days ending today, oldest first, as
    {date, minutes, level} buckets.
    """
    totals = _minutes_by_day(sessions, tz)
    buckets = []
    for day in _day_window(now, tz, days):
        minutes = totals.get(day, 0)
        buckets.append({"date": day.isoformat(), "minutes": minutes, "level": intensity_band(minutes, band_limits)})
    return buckets


# ---------------------------------------------------------------- tasks


# PUBLIC_INTERFACE
def status_distribution(tasks: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Task count per status in board order. Every status is reported, zero
    counts included; tasks with an unrecognized status are not counted.
    """
    counts = {status.value: 0 for status in STATUS_ORDER}
    for task in tasks:
        status = task.get("status")
        if isinstance(status, str) and status in counts:
            counts[status] += 1
    return [
        {"status": status.value, "label": STATUS_LABELS[status], "count": counts[status.value]}
        for status in STATUS_ORDER
    ]


# PUBLIC_INTERFACE
def board_summary(
    tasks: Sequence[Mapping[str, Any]],
    sessions: Iterable[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Pending and completed task counts plus total focus minutes."""
    completed = sum(1 for t in tasks if t.get("status") == TaskStatus.DONE.value)
    return {
        "tasksPending": len(tasks) - completed,
        "tasksCompleted": completed,
        "totalFocusMinutes": sum(s["durationMinutes"] for s in sessions if _well_formed(s, "durationMinutes")),
    }
