from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_ROUND_TO, DEFAULT_TIME_PERIOD
from .dates import normalize_unit


@dataclass(frozen=True)
class PrimaryUnit:
    unit: str = "days"
    format: str = "%m/%Y %d"
    secondary_per_unit: int = 1

    def to_dict(self) -> dict:
        return {
            "unit": self.unit,
            "format": self.format,
            "secondary_per_unit": self.secondary_per_unit,
        }


@dataclass(frozen=True)
class SecondaryUnit:
    unit: str = "hours"
    format: str = "%H:%M"
    step: int = 1

    def to_dict(self) -> dict:
        return {"unit": self.unit, "format": self.format, "step": self.step}


@dataclass(frozen=True)
class Term:
    term: int
    unit: str

    def to_dict(self) -> dict:
        return {"term": self.term, "unit": self.unit}


@dataclass(frozen=True)
class TimePeriod:
    name: str
    primary: PrimaryUnit
    secondary: SecondaryUnit
    start_date: Term
    end_date: Term
    round_to: str = DEFAULT_ROUND_TO

    def __post_init__(self) -> None:
        normalize_unit(self.primary.unit)
        normalize_unit(self.secondary.unit)
        normalize_unit(self.start_date.unit)
        normalize_unit(self.end_date.unit)
        normalize_unit(self.round_to)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "primary": self.primary.to_dict(),
            "secondary": self.secondary.to_dict(),
            "start_date": self.start_date.to_dict(),
            "end_date": self.end_date.to_dict(),
            "round_to": self.round_to,
        }


def _preset(
    name: str,
    primary: PrimaryUnit,
    secondary: SecondaryUnit,
    before: Term,
    after: Term,
    round_to: str,
) -> TimePeriod:
    return TimePeriod(
        name=name,
        primary=primary,
        secondary=secondary,
        start_date=before,
        end_date=after,
        round_to=round_to,
    )


# Declaration order is the zoom order: offset +1 zooms out, -1 zooms in.
TIME_PERIODS: dict[str, TimePeriod] = {
    preset.name: preset
    for preset in (
        _preset(
            "hours",
            PrimaryUnit("hours", "%d/%m %H:00", 4),
            SecondaryUnit("minutes", ":%M", 15),
            Term(12, "hours"),
            Term(12, "hours"),
            "hours",
        ),
        _preset(
            "days",
            PrimaryUnit("days", "%m/%Y %d", 24),
            SecondaryUnit("hours", "%H:%M", 1),
            Term(1, "days"),
            Term(2, "days"),
            "days",
        ),
        _preset(
            "weeks",
            PrimaryUnit("weeks", "Week %V %Y", 7),
            SecondaryUnit("days", "%a %d", 1),
            Term(2, "weeks"),
            Term(6, "weeks"),
            "weeks",
        ),
        _preset(
            "months",
            PrimaryUnit("months", "%B %Y", 4),
            SecondaryUnit("weeks", "%d/%m", 1),
            Term(1, "months"),
            Term(5, "months"),
            "months",
        ),
        _preset(
            "years",
            PrimaryUnit("years", "%Y", 12),
            SecondaryUnit("months", "%b", 1),
            Term(1, "years"),
            Term(3, "years"),
            "years",
        ),
    )
}


def period_names() -> list[str]:
    return list(TIME_PERIODS)


def resolve_period(value: str | TimePeriod | None) -> TimePeriod | None:
    if isinstance(value, TimePeriod):
        if value.name not in TIME_PERIODS:
            return None
        return value
    if isinstance(value, str):
        return TIME_PERIODS.get(value.strip().lower())
    return None


def period_at_offset(current: TimePeriod, offset: int) -> TimePeriod | None:
    names = period_names()
    if current.name not in names:
        return None
    index = names.index(current.name) + int(offset)
    if index < 0 or index >= len(names):
        return None
    return TIME_PERIODS[names[index]]


def default_period() -> TimePeriod:
    return TIME_PERIODS[DEFAULT_TIME_PERIOD]
