from PyQt6.QtGui import QUndoCommand


class UpdateTaskCommand(QUndoCommand):
    def __init__(self, chart, task_id: str, old_state, new_state, description: str) -> None:
        super().__init__(description)
        self.chart = chart
        self.task_id = task_id
        self.old_state = old_state
        self.new_state = new_state

    def redo(self) -> None:
        self.chart.update_task_state(self.task_id, self.new_state)

    def undo(self) -> None:
        self.chart.update_task_state(self.task_id, self.old_state)


class AddTaskCommand(QUndoCommand):
    def __init__(self, chart, task, description: str = "Add Task") -> None:
        super().__init__(description)
        self.chart = chart
        self.task = task

    def redo(self) -> None:
        self.chart.add_task(self.task)

    def undo(self) -> None:
        self.chart.remove_task(self.task.id)


class RemoveTaskCommand(QUndoCommand):
    def __init__(self, chart, task, description: str = "Remove Task") -> None:
        super().__init__(description)
        self.chart = chart
        self.task = task

    def redo(self) -> None:
        self.chart.remove_task(self.task.id)

    def undo(self) -> None:
        self.chart.add_task(self.task)


class SetTimePeriodCommand(QUndoCommand):
    def __init__(self, timeline, old_name: str, new_name: str) -> None:
        super().__init__("Change Time Period")
        self.timeline = timeline
        self.old_name = old_name
        self.new_name = new_name

    def redo(self) -> None:
        self.timeline.set_time_period(self.new_name)

    def undo(self) -> None:
        self.timeline.set_time_period(self.old_name)
