from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import math

from dateutil.relativedelta import relativedelta

from .constants import DEFAULT_DATE_FORMAT

UNITS = ("seconds", "minutes", "hours", "days", "weeks", "months", "years")

UNIT_ALIASES = {
    "second": "seconds",
    "minute": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
    "month": "months",
    "year": "years",
}

FIXED_UNIT_SECONDS = {
    "seconds": 1,
    "minutes": 60,
    "hours": 3600,
    "days": 86400,
    "weeks": 604800,
}


def normalize_unit(unit: str | None, default: str = "days") -> str:
    name = str(unit or default).strip().lower()
    name = UNIT_ALIASES.get(name, name)
    if name not in UNITS:
        raise ValueError(f"Unknown time unit: {unit}")
    return name


def as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def add_units(instant: datetime, amount: int, unit: str) -> datetime:
    unit = normalize_unit(unit)
    return as_utc(instant) + relativedelta(**{unit: int(amount)})


def subtract_units(instant: datetime, amount: int, unit: str) -> datetime:
    return add_units(instant, -int(amount), unit)


def add_seconds(instant: datetime, seconds: float) -> datetime:
    return as_utc(instant) + timedelta(seconds=seconds)


def floor_to(instant: datetime, unit: str) -> datetime:
    unit = normalize_unit(unit)
    instant = as_utc(instant).replace(microsecond=0)
    if unit == "seconds":
        return instant
    instant = instant.replace(second=0)
    if unit == "minutes":
        return instant
    instant = instant.replace(minute=0)
    if unit == "hours":
        return instant
    instant = instant.replace(hour=0)
    if unit == "days":
        return instant
    if unit == "weeks":
        return instant - timedelta(days=instant.weekday())
    instant = instant.replace(day=1)
    if unit == "months":
        return instant
    return instant.replace(month=1)


def ceil_to(instant: datetime, unit: str) -> datetime:
    instant = as_utc(instant)
    floored = floor_to(instant, unit)
    if floored == instant:
        return instant
    return add_units(floored, 1, unit)


def seconds_between(start: datetime, end: datetime) -> float:
    return (as_utc(end) - as_utc(start)).total_seconds()


def units_between(start: datetime, end: datetime, unit: str) -> int:
    """Whole units from ``start`` to ``end``, truncated toward zero."""
    unit = normalize_unit(unit)
    if unit in FIXED_UNIT_SECONDS:
        return int(seconds_between(start, end) / FIXED_UNIT_SECONDS[unit])
    delta = relativedelta(as_utc(end), as_utc(start))
    if unit == "months":
        return delta.years * 12 + delta.months
    return delta.years


@dataclass(frozen=True)
class TimeRange:
    """Instants from ``start`` in ``step`` increments of ``unit``, stopping before ``end``.

    Iterating twice yields the same instants; the length is known up front.
    """

    start: datetime
    end: datetime
    unit: str
    step: int = 1

    @property
    def count(self) -> int:
        return units_between(self.start, self.end, self.unit)

    def __len__(self) -> int:
        count = self.count
        if count <= 0:
            return 0
        return math.ceil(count / self.step)

    def __iter__(self):
        for index in range(0, self.count, self.step):
            yield add_units(self.start, index, self.unit)


def enumerate_range(start: datetime, end: datetime, unit: str, step: int = 1) -> TimeRange:
    step = max(1, int(step or 1))
    return TimeRange(as_utc(start), as_utc(end), normalize_unit(unit), step)


def to_unix(instant: datetime) -> float:
    return as_utc(instant).timestamp()


def from_unix(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_instant(instant: datetime, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    return as_utc(instant).strftime(fmt)


def parse_instant(text: str, fmt: str = DEFAULT_DATE_FORMAT) -> datetime:
    return datetime.strptime(str(text).strip(), fmt).replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def duration_string(start: datetime, end: datetime) -> str:
    delta = relativedelta(as_utc(end), as_utc(start))
    if delta.years:
        return f"{delta.years} years"
    if delta.months:
        return f"{delta.months} months"
    if delta.days:
        return f"{delta.days} days"
    if delta.hours:
        return f"{delta.hours} hours"
    return f"{delta.minutes} minutes"
