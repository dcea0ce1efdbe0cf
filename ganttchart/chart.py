from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QUndoStack

from .commands import AddTaskCommand, RemoveTaskCommand, SetTimePeriodCommand, UpdateTaskCommand
from .constants import RESOURCE_HEIGHT_PX
from .periods import TimePeriod, period_at_offset, resolve_period
from .settings import ChartSettings, to_bool
from .task import Task, new_id
from .timeline import TimelineEngine


@dataclass
class Resource:
    id: str
    name: str
    height_px: float = RESOURCE_HEIGHT_PX

    def get_height_px(self) -> float:
        return self.height_px

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "height_px": self.height_px}

    @staticmethod
    def from_dict(data: dict) -> "Resource":
        return Resource(
            id=data.get("id") or new_id(),
            name=data.get("name", ""),
            height_px=float(data.get("height_px", RESOURCE_HEIGHT_PX)),
        )


class GanttChart(QObject):
    tasks_changed = pyqtSignal()
    resources_changed = pyqtSignal()

    def __init__(
        self,
        settings: ChartSettings | None = None,
        time_period: str | TimePeriod | None = None,
        reference: datetime | None = None,
        viewport=None,
        undo_stack: QUndoStack | None = None,
        timeline: TimelineEngine | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings if settings is not None else ChartSettings()
        self.undo_stack = undo_stack if undo_stack is not None else QUndoStack(self)
        self.resources: list[Resource] = []
        self.tasks: dict[str, Task] = {}
        if timeline is None:
            timeline = TimelineEngine(
                time_period=time_period or self.settings.time_period,
                reference=reference,
                viewport=viewport,
            )
        timeline.chart = self
        self.timeline = timeline
        self.resources_changed.connect(self.timeline.update_dividers)

    # ------------------------------------------------------------------
    # settings

    def get_setting(self, key: str, default=None):
        value = self.settings.get(key, default)
        if isinstance(default, bool):
            return to_bool(value, default)
        return value

    # ------------------------------------------------------------------
    # resources

    def get_resource_by_index(self, index: int) -> Resource | None:
        if index < 0 or index >= len(self.resources):
            return None
        return self.resources[index]

    def add_resource(self, name: str, height_px: float = RESOURCE_HEIGHT_PX) -> Resource:
        resource = Resource(id=new_id(), name=name, height_px=float(height_px))
        self.insert_resource(resource)
        return resource

    def insert_resource(self, resource: Resource, index: int | None = None) -> None:
        if index is None:
            self.resources.append(resource)
        else:
            self.resources.insert(index, resource)
        self.resources_changed.emit()

    def remove_resource(self, resource_id: str) -> Resource | None:
        for index, resource in enumerate(self.resources):
            if resource.id == resource_id:
                removed = self.resources.pop(index)
                self.resources_changed.emit()
                return removed
        return None

    def set_resource_height(self, resource_id: str, height_px: float) -> bool:
        for resource in self.resources:
            if resource.id == resource_id:
                if resource.height_px == height_px:
                    return False
                resource.height_px = float(height_px)
                self.resources_changed.emit()
                return True
        return False

    # ------------------------------------------------------------------
    # tasks

    def get_task(self, task_id: str) -> Task | None:
        return self.tasks.get(task_id)

    def add_task(self, task: Task) -> None:
        task.chart = self
        self.tasks[task.id] = task
        self.tasks_changed.emit()

    def remove_task(self, task_id: str) -> Task | None:
        task = self.tasks.pop(task_id, None)
        if task is None:
            return None
        if task._controller is not None and task._controller.active:
            task._controller.cancel()
        self.tasks_changed.emit()
        return task

    def create_task(self, data: dict) -> Task:
        task = Task(data, chart=self)
        self.undo_stack.push(AddTaskCommand(self, task))
        return task

    def delete_task(self, task_id: str) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return False
        self.undo_stack.push(RemoveTaskCommand(self, task))
        return True

    def update_task_state(self, task_id: str, state) -> None:
        task = self.tasks.get(task_id)
        if task is None:
            return
        if task.state() == tuple(state):
            return
        task.restore(tuple(state))
        self.tasks_changed.emit()

    def commit_task_change(self, task_id: str, old_state, new_state, description: str) -> None:
        if task_id not in self.tasks:
            return
        self.undo_stack.push(UpdateTaskCommand(self, task_id, old_state, new_state, description))
        self.tasks_changed.emit()

    # ------------------------------------------------------------------
    # timeline

    def set_time_period(self, value: str | TimePeriod | int) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            period = period_at_offset(self.timeline.time_period, value)
        else:
            period = resolve_period(value)
        if period is None:
            return False
        old_name = self.timeline.time_period.name
        if period.name != old_name:
            self.undo_stack.push(SetTimePeriodCommand(self.timeline, old_name, period.name))
            self.settings.time_period = period.name
        return True

    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "timeline": self.timeline.to_dict(),
            "resources": [resource.to_dict() for resource in self.resources],
            "tasks": [task.to_dict() for task in self.tasks.values()],
        }
