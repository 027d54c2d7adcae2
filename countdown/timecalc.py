import math
import time
from dataclasses import dataclass
from typing import List, Optional

SECONDS_PER_YEAR = 31557600
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

EXPIRED = "Expired"


@dataclass
class Breakdown:
    years: int
    days: int
    hours: int
    minutes: int
    seconds: int


@dataclass
class Totals:
    seconds: int
    minutes: float
    hours: float
    days: float
    years: float


def _now_seconds(now: Optional[float]) -> int:
    if now is None:
        now = time.time()
    return int(math.floor(now))


def seconds_until(target: int, now: Optional[float] = None) -> int:
    return int(target) - _now_seconds(now)


def breakdown(diff: int) -> Breakdown:
    years = diff // SECONDS_PER_YEAR
    diff -= years * SECONDS_PER_YEAR
    days = diff // SECONDS_PER_DAY
    diff -= days * SECONDS_PER_DAY
    hours = diff // SECONDS_PER_HOUR
    diff -= hours * SECONDS_PER_HOUR
    minutes = diff // SECONDS_PER_MINUTE
    seconds = diff - minutes * SECONDS_PER_MINUTE
    return Breakdown(years=years, days=days, hours=hours, minutes=minutes, seconds=seconds)


def countdown(target: int, now: Optional[float] = None) -> Optional[Breakdown]:
    """Remaining time until ``target``, or None once it has passed."""
    diff = seconds_until(target, now)
    if diff < 0:
        return None
    return breakdown(diff)


def is_expired(target: int, now: Optional[float] = None) -> bool:
    return seconds_until(target, now) < 0


def _format_breakdown(parts: Breakdown) -> str:
    fields = [
        (parts.years, "y"),
        (parts.days, "d"),
        (parts.hours, "h"),
        (parts.minutes, "m"),
    ]
    out: List[str] = []
    for value, unit in fields:
        if value > 0 or out:
            out.append(f"{value}{unit}")
    out.append(f"{parts.seconds}s")
    return " ".join(out)


def format_countdown(target: int, now: Optional[float] = None) -> str:
    parts = countdown(target, now)
    if parts is None:
        return EXPIRED
    return _format_breakdown(parts)


def totals(target: int, now: Optional[float] = None) -> Totals:
    diff = seconds_until(target, now)
    return Totals(
        seconds=diff,
        minutes=diff / SECONDS_PER_MINUTE,
        hours=diff / SECONDS_PER_HOUR,
        days=diff / SECONDS_PER_DAY,
        years=diff / SECONDS_PER_YEAR,
    )
