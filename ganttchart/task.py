from __future__ import annotations

from enum import Enum
import logging
import uuid

from .constants import DEFAULT_DATE_FORMAT, RESOURCE_HEIGHT_PX
from .dates import duration_string, format_instant, from_unix, parse_instant, to_unix, utc_now

logger = logging.getLogger(__name__)


class TaskInteraction(str, Enum):
    NONE = "none"
    MOVE = "move"
    RESIZE = "resize"


def new_id() -> str:
    return uuid.uuid4().hex


def _timestamp(value, fallback: float) -> float:
    if value is None or value == "":
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    try:
        return to_unix(parse_instant(str(value), DEFAULT_DATE_FORMAT))
    except ValueError:
        pass
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


class Task:
    def __init__(self, data: dict | None = None, chart=None) -> None:
        data = dict(data or {})
        self.chart = chart if chart is not None else data.get("chart")
        self.id = str(data.get("id") or new_id())
        self.name = str(data.get("name") or "")
        now = to_unix(utc_now())
        self.start = _timestamp(data.get("start"), now)
        self.end = _timestamp(data.get("end"), now)
        try:
            self.row = float(data.get("row", 0) or 0)
        except (TypeError, ValueError):
            self.row = 0.0
        self.style = dict(data.get("style") or {})
        # Must be reset to NONE when a gesture ends, otherwise the task stays locked.
        self.interaction = TaskInteraction.NONE
        self._controller = None

    # ------------------------------------------------------------------
    # derived geometry

    @property
    def timeline(self):
        return self.chart.timeline

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def left(self) -> float:
        return self.timeline.pixel_from_date(from_unix(self.start))

    @property
    def width(self) -> float:
        width = self.duration * self.pixels_per_second()
        scroll_width = self.timeline.scroll_width
        left = self.left
        if width + left > scroll_width:
            return scroll_width - left
        return width

    @property
    def top(self) -> float:
        return self.row * RESOURCE_HEIGHT_PX

    @property
    def height(self) -> float:
        return self.timeline.task_height

    @property
    def visible(self) -> bool:
        left = self.left
        return left + self.width >= 0 and left <= self.timeline.scroll_width

    def pixels_per_second(self) -> float:
        return self.timeline.pixels_per_second()

    @property
    def controller(self):
        if self._controller is None:
            from .interaction import InteractionController

            self._controller = InteractionController(self)
        return self._controller

    # ------------------------------------------------------------------
    # formatting

    def start_date(self, fmt: str = DEFAULT_DATE_FORMAT) -> str:
        return format_instant(from_unix(self.start), fmt)

    def end_date(self, fmt: str = DEFAULT_DATE_FORMAT) -> str:
        return format_instant(from_unix(self.end), fmt)

    def duration_string(self) -> str:
        return duration_string(from_unix(self.start), from_unix(self.end))

    def say(self, *parts: str) -> str:
        return f"Task {self.id} says: {' '.join(parts)}"

    def warn(self, *parts: str) -> None:
        settings = getattr(self.chart, "settings", None)
        if settings is not None and settings.verbose:
            logger.warning(self.say(*parts))

    # ------------------------------------------------------------------
    # interaction flag

    def interaction_is(self, interaction: TaskInteraction) -> bool:
        return self.interaction == interaction

    def set_interaction(self, interaction: TaskInteraction) -> bool:
        if (
            self.interaction != TaskInteraction.NONE
            and interaction != TaskInteraction.NONE
        ):
            self.warn(
                f"can't set interaction to {interaction.value}",
                f"because {self.interaction.value} is already set",
            )
            return False
        self.interaction = interaction
        return True

    # ------------------------------------------------------------------
    # guarded setters

    def set_start(self, value: float) -> bool:
        value = float(value)
        if value < 0 or value > self.end:
            self.warn(f"start {value} is out of bound,", f"start must be between 0 and {self.end}")
            return False
        self.start = value
        return True

    def set_end(self, value: float) -> bool:
        value = float(value)
        upper = self._window_end()
        if value < self.start or (upper is not None and value > upper):
            self.warn(
                f"end {value} is out of bound,",
                f"end must be between {self.start} and {upper}",
            )
            return False
        self.end = value
        return True

    def set_row(self, value: float) -> bool:
        value = float(value)
        row_count = self._row_count()
        if value < 0 or (row_count is not None and value > row_count - 1):
            self.warn(f"row {value} is out of bound")
            return False
        self.row = value
        return True

    def _window_end(self) -> float | None:
        if self.chart is None:
            return None
        return to_unix(self.timeline.end_date)

    def _row_count(self) -> int | None:
        if self.chart is None or not self.chart.resources:
            return None
        return len(self.chart.resources)

    # ------------------------------------------------------------------

    def state(self) -> tuple[float, float, float]:
        return self.start, self.end, self.row

    def restore(self, state: tuple[float, float, float]) -> None:
        self.start, self.end, self.row = state

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "start": self.start,
            "end": self.end,
        }

    @staticmethod
    def from_dict(data: dict, chart=None) -> "Task":
        return Task(data, chart=chart)

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, name={self.name!r}, start={self.start}, end={self.end}, row={self.row})"
