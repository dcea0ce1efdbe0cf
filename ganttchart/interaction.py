from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math

from .constants import RESOURCE_HEIGHT_PX
from .task import TaskInteraction


class InteractionState(str, Enum):
    NONE = "none"
    RESIZING = "resizing"
    MOVING = "moving"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to_nearest(value: float, step: float) -> float:
    return round_half_up(value / step) * step


@dataclass
class InteractionSession:
    kind: TaskInteraction
    origin_x: float
    origin_y: float
    snap_to_grid: bool
    original_start: float
    original_end: float
    original_row: float
    side: Side | None = None
    release: object = None

    @property
    def original_state(self) -> tuple[float, float, float]:
        return self.original_start, self.original_end, self.original_row

    def close(self) -> None:
        release = self.release
        self.release = None
        if callable(release):
            release()


class InteractionController:
    """Drives the move and resize gestures of a single task.

    One session at a time: a second ``begin_*`` while a gesture is active is
    refused and leaves the active session untouched. Pointer positions are in
    viewport pixels; they are converted with the timeline's current
    pixels-per-second rate on every move.
    """

    def __init__(self, task, viewport=None) -> None:
        self.task = task
        self.viewport = viewport
        self.session: InteractionSession | None = None

    @property
    def state(self) -> InteractionState:
        if self.session is None:
            return InteractionState.NONE
        if self.session.kind == TaskInteraction.RESIZE:
            return InteractionState.RESIZING
        return InteractionState.MOVING

    @property
    def active(self) -> bool:
        return self.session is not None

    def _viewport(self):
        if self.viewport is not None:
            return self.viewport
        chart = self.task.chart
        if chart is None:
            return None
        return getattr(chart.timeline, "viewport", None)

    def _snap_to_grid(self) -> bool:
        chart = self.task.chart
        if chart is None:
            return False
        return bool(chart.get_setting("snap_to_grid", False))

    def _time_unit_width(self) -> float:
        return self.task.timeline.time_unit_width

    # ------------------------------------------------------------------
    # gesture start

    def begin_resize(self, side: Side | str, pointer_x: float, pointer_y: float = 0.0) -> bool:
        try:
            side = Side(side)
        except ValueError:
            self.task.warn("unknown resize side", repr(side))
            return False
        return self._open(TaskInteraction.RESIZE, side, pointer_x, pointer_y)

    def begin_move(self, pointer_x: float, pointer_y: float) -> bool:
        return self._open(TaskInteraction.MOVE, None, pointer_x, pointer_y)

    def _open(
        self,
        kind: TaskInteraction,
        side: Side | None,
        pointer_x: float,
        pointer_y: float,
    ) -> bool:
        if self.session is not None:
            self.task.warn(f"can't start {kind.value}, a {self.session.kind.value} is in progress")
            return False
        if not self.task.set_interaction(kind):
            return False
        task = self.task
        session = InteractionSession(
            kind=kind,
            side=side,
            origin_x=float(pointer_x),
            origin_y=float(pointer_y),
            snap_to_grid=self._snap_to_grid(),
            original_start=task.start,
            original_end=task.end,
            original_row=task.row,
        )
        viewport = self._viewport()
        if viewport is not None:
            session.release = viewport.subscribe_pointer(self.pointer_move, self.pointer_up)
        self.session = session
        return True

    # ------------------------------------------------------------------
    # pointer events

    def pointer_move(self, pointer_x: float, pointer_y: float | None = None) -> None:
        session = self.session
        if session is None or not self.task.interaction_is(session.kind):
            return
        if session.kind == TaskInteraction.RESIZE:
            self._resize(session, pointer_x)
        else:
            self._move(session, pointer_x, pointer_y)

    def _resize(self, session: InteractionSession, pointer_x: float) -> None:
        pps = self.task.pixels_per_second()
        if pps <= 0:
            return
        delta_px = pointer_x - session.origin_x
        if session.snap_to_grid:
            unit_width = self._time_unit_width()
            columns = int(delta_px / unit_width)
            if columns == 0:
                return
            delta_px = columns * unit_width
        delta = delta_px / pps
        if session.side == Side.LEFT:
            self.task.start = session.original_start + delta
        else:
            self.task.end = session.original_end + delta

    def _move(
        self, session: InteractionSession, pointer_x: float, pointer_y: float | None
    ) -> None:
        pps = self.task.pixels_per_second()
        delta_x = pointer_x - session.origin_x
        delta_y = (session.origin_y if pointer_y is None else pointer_y) - session.origin_y
        delta_time = 0.0
        delta_rows = 0.0
        if session.snap_to_grid:
            unit_width = self._time_unit_width()
            if abs(delta_x) >= unit_width and pps > 0:
                delta_time = round_to_nearest(delta_x, unit_width) / pps
            if abs(delta_y) >= RESOURCE_HEIGHT_PX:
                delta_rows = round_half_up(delta_y / RESOURCE_HEIGHT_PX)
        else:
            if pps > 0:
                delta_time = delta_x / pps
            delta_rows = delta_y / RESOURCE_HEIGHT_PX
        self.task.start = session.original_start + delta_time
        self.task.end = session.original_end + delta_time
        self.task.row = session.original_row + delta_rows

    # ------------------------------------------------------------------
    # gesture end

    def pointer_up(self, pointer_x: float | None = None, pointer_y: float | None = None) -> bool:
        session = self.session
        if session is None:
            return False
        session.close()
        self.session = None
        self._normalize(session)
        self.task.set_interaction(TaskInteraction.NONE)
        new_state = self.task.state()
        if new_state != session.original_state:
            self._record(session, new_state)
        return True

    def cancel(self) -> bool:
        session = self.session
        if session is None:
            return False
        session.close()
        self.session = None
        self.task.restore(session.original_state)
        self.task.set_interaction(TaskInteraction.NONE)
        return True

    def _normalize(self, session: InteractionSession) -> None:
        task = self.task
        task.start = float(round(task.start))
        task.end = float(round(task.end))
        if session.kind == TaskInteraction.RESIZE:
            # Live resizing may cross the edges; the dragged edge is clamped here.
            if task.start > task.end:
                if session.side == Side.LEFT:
                    task.start = task.end
                else:
                    task.end = task.start
            return
        row = float(round_half_up(task.row))
        chart = task.chart
        if chart is not None and chart.resources:
            row = max(0.0, min(row, float(len(chart.resources) - 1)))
        else:
            row = max(0.0, row)
        task.row = row

    def _record(self, session: InteractionSession, new_state: tuple[float, float, float]) -> None:
        chart = self.task.chart
        if chart is None:
            return
        description = "Resize Task" if session.kind == TaskInteraction.RESIZE else "Move Task"
        chart.commit_task_change(self.task.id, session.original_state, new_state, description)
