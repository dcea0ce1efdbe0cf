from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from itertools import islice
import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .constants import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_TASK_HEIGHT,
    DEFAULT_TIME_UNIT_WIDTH,
    REFERENCE_DATE_FORMAT,
    SCROLL_SETTLE_MS,
    SCROLLBAR_ARROW_WIDTH,
)
from .dates import (
    add_seconds,
    add_units,
    as_utc,
    ceil_to,
    enumerate_range,
    floor_to,
    format_instant,
    parse_instant,
    seconds_between,
    subtract_units,
    utc_now,
)
from .periods import TimePeriod, default_period, period_at_offset, resolve_period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrimaryCell:
    name: str
    width: float
    left: float


@dataclass(frozen=True)
class SecondaryCell:
    name: str
    width: float


@dataclass(frozen=True)
class VerticalDivider:
    left: float
    emphasize: bool = False


@dataclass(frozen=True)
class HorizontalDivider:
    top: float
    emphasize: bool = True


@dataclass(frozen=True)
class TimePeriodData:
    start_date: datetime
    end_date: datetime
    primary: tuple[PrimaryCell, ...] = ()
    secondary: tuple[SecondaryCell, ...] = ()
    total_width: float = 0.0
    primary_unit_width: float = 0.0
    dividers_v: tuple[VerticalDivider, ...] = field(default_factory=tuple)
    dividers_h: tuple[HorizontalDivider, ...] = field(default_factory=tuple)


def window_bounds(period: TimePeriod, reference: datetime) -> tuple[datetime, datetime]:
    start = floor_to(
        subtract_units(reference, period.start_date.term, period.start_date.unit),
        period.round_to,
    )
    end = ceil_to(
        add_units(reference, period.end_date.term, period.end_date.unit),
        period.round_to,
    )
    return start, end


def compute_layout(
    period: TimePeriod,
    reference: datetime,
    time_unit_width: float = DEFAULT_TIME_UNIT_WIDTH,
) -> TimePeriodData:
    """Lay out the primary and secondary columns of ``period`` around ``reference``.

    Secondary columns are cut to what the primary row can hold; a window that
    yields more secondary instants than that loses the tail, and one that
    yields fewer is left short.
    """
    start_date, end_date = window_bounds(period, reference)
    per_unit = max(1, int(period.primary.secondary_per_unit or 1))
    primary_unit_width = time_unit_width * per_unit

    primary_source = enumerate_range(start_date, end_date, period.primary.unit)
    primary: list[PrimaryCell] = []
    widths_sum = 0.0
    for instant in primary_source:
        primary.append(
            PrimaryCell(
                name=format_instant(instant, period.primary.format),
                width=primary_unit_width,
                left=widths_sum,
            )
        )
        widths_sum += primary_unit_width

    secondary_source = enumerate_range(
        start_date, end_date, period.secondary.unit, step=period.secondary.step
    )
    expected_length = len(primary) * per_unit
    secondary = tuple(
        SecondaryCell(
            name=format_instant(instant, period.secondary.format),
            width=time_unit_width,
        )
        for instant in islice(secondary_source, expected_length)
    )

    return TimePeriodData(
        start_date=start_date,
        end_date=end_date,
        primary=tuple(primary),
        secondary=secondary,
        total_width=widths_sum,
        primary_unit_width=primary_unit_width,
    )


def compute_dividers(
    total_width: float,
    primary_unit_width: float,
    time_unit_width: float,
    resource_heights,
) -> tuple[tuple[VerticalDivider, ...], tuple[HorizontalDivider, ...]]:
    dividers_v: dict[float, VerticalDivider] = {}
    if primary_unit_width > 0:
        for index in range(int(total_width // primary_unit_width)):
            left = index * primary_unit_width
            dividers_v[left] = VerticalDivider(left=left, emphasize=True)
    if time_unit_width > 0:
        for index in range(int(total_width // time_unit_width)):
            left = index * time_unit_width
            if left in dividers_v:
                continue
            dividers_v[left] = VerticalDivider(left=left)

    dividers_h: list[HorizontalDivider] = []
    top = 0.0
    for height in resource_heights:
        top += height
        dividers_h.append(HorizontalDivider(top=top, emphasize=True))

    ordered = tuple(dividers_v[left] for left in sorted(dividers_v))
    return ordered, tuple(dividers_h)


class TimelineEngine(QObject):
    layout_changed = pyqtSignal()

    def __init__(
        self,
        chart=None,
        time_period: str | TimePeriod | None = None,
        reference: datetime | None = None,
        viewport=None,
        time_unit_width: float = DEFAULT_TIME_UNIT_WIDTH,
    ) -> None:
        super().__init__()
        self.chart = chart
        self.viewport = viewport
        self.time_unit_width = time_unit_width
        self.task_height = DEFAULT_TASK_HEIGHT
        self.time_period = resolve_period(time_period) or default_period()
        self.reference = as_utc(reference) if reference is not None else floor_to(utc_now(), "minutes")
        self._layout = compute_layout(self.time_period, self.reference, self.time_unit_width)
        self.update_dividers()
        self.scroll_to_reference()

    # ------------------------------------------------------------------
    # layout snapshot

    def get_layout(self) -> TimePeriodData:
        return self._layout

    @property
    def start_date(self) -> datetime:
        return self._layout.start_date

    @property
    def end_date(self) -> datetime:
        return self._layout.end_date

    @property
    def scroll_width(self) -> float:
        return self._layout.total_width

    def update(self, scroll: bool = True) -> TimePeriodData:
        self._layout = compute_layout(self.time_period, self.reference, self.time_unit_width)
        self.update_dividers()
        logger.debug(
            "timeline %s: %d primary, %d secondary, %.0fpx",
            self.time_period.name,
            len(self._layout.primary),
            len(self._layout.secondary),
            self._layout.total_width,
        )
        if scroll:
            self.scroll_to_reference()
        return self._layout

    def update_dividers(self) -> None:
        dividers_v, dividers_h = compute_dividers(
            self._layout.total_width,
            self._layout.primary_unit_width,
            self.time_unit_width,
            self._resource_heights(),
        )
        self._layout = replace(self._layout, dividers_v=dividers_v, dividers_h=dividers_h)
        self.layout_changed.emit()

    def _resource_heights(self) -> list[float]:
        chart = self.chart
        if chart is None:
            return []
        return [
            chart.get_resource_by_index(index).get_height_px()
            for index in range(len(chart.resources))
        ]

    # ------------------------------------------------------------------
    # time period

    def set_time_period(self, value: str | TimePeriod | int) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            period = period_at_offset(self.time_period, value)
        else:
            period = resolve_period(value)
        if period is None:
            return False
        self.time_period = period
        self.update()
        return True

    def zoom_in(self) -> bool:
        return self.set_time_period(-1)

    def zoom_out(self) -> bool:
        return self.set_time_period(1)

    def set_reference_instant(self, reference: datetime) -> None:
        self.reference = as_utc(reference)
        self.update()

    # ------------------------------------------------------------------
    # pixel <-> date

    def pixels_per_second(self) -> float:
        seconds = seconds_between(self.start_date, self.end_date)
        if seconds <= 0:
            return 0.0
        return self._layout.total_width / seconds

    def date_from_pixel(
        self,
        x: float,
        scroll_left: float | None = None,
        viewport_left: float | None = None,
    ) -> datetime:
        if scroll_left is None:
            scroll_left = self.viewport.scroll_left_px if self.viewport is not None else 0.0
        if viewport_left is None:
            viewport_left = self.viewport.left_edge_px if self.viewport is not None else 0.0
        pps = self.pixels_per_second()
        if pps == 0:
            return self.start_date
        delta = x - viewport_left + scroll_left
        return add_seconds(self.start_date, delta / pps)

    def pixel_from_date(self, instant: datetime) -> float:
        return seconds_between(self.start_date, instant) * self.pixels_per_second()

    # ------------------------------------------------------------------
    # viewport

    def scrollbar_thumb_width(self) -> float:
        if self.viewport is None or self.scroll_width <= 0:
            return 0.0
        viewable_ratio = self.viewport.width_px / self.scroll_width
        scrollbar_area = self.viewport.width_px - SCROLLBAR_ARROW_WIDTH * 2
        return scrollbar_area * viewable_ratio

    def scroll_to_reference(self, defer: bool = True) -> None:
        # The host only knows the new scroll extent after its own layout pass.
        if self.viewport is None:
            return
        if defer:
            QTimer.singleShot(SCROLL_SETTLE_MS, self._apply_scroll)
        else:
            self._apply_scroll()

    def _apply_scroll(self) -> None:
        if self.viewport is None:
            return
        self.viewport.scroll_left_px = (
            self.pixel_from_date(self.reference) - self.scrollbar_thumb_width()
        )

    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "time_period": self.time_period.name,
            "reference": format_instant(self.reference, REFERENCE_DATE_FORMAT),
        }

    @staticmethod
    def from_dict(data: dict, chart=None, viewport=None) -> "TimelineEngine":
        reference = data.get("reference")
        return TimelineEngine(
            chart=chart,
            time_period=data.get("time_period"),
            reference=_parse_reference(reference) if reference else None,
            viewport=viewport,
        )


def _parse_reference(text: str) -> datetime:
    # Files written before seconds were kept carry minute precision.
    try:
        return parse_instant(text, REFERENCE_DATE_FORMAT)
    except ValueError:
        return parse_instant(text, DEFAULT_DATE_FORMAT)
