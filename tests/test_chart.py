import json
from datetime import datetime, timezone

import pytest
from PyQt6.QtCore import QEventLoop, QTimer

from ganttchart.chart import GanttChart
from ganttchart.constants import SCROLL_SETTLE_MS
from ganttchart.persistence import load_chart, save_chart
from ganttchart.task import Task
from ganttchart.viewport import Viewport

REFERENCE = datetime(2022, 1, 13, 10, 0, tzinfo=timezone.utc)


def test_create_and_delete_task_are_undoable(chart):
    task = chart.create_task({"name": "Design", "start": "2022-01-13 00:00", "end": "2022-01-14 00:00"})

    assert chart.get_task(task.id) is task
    assert task.chart is chart

    assert chart.delete_task(task.id) is True
    assert chart.get_task(task.id) is None

    chart.undo_stack.undo()
    assert chart.get_task(task.id) is task

    chart.undo_stack.undo()
    assert chart.tasks == {}
    assert chart.delete_task("missing") is False


def test_tasks_changed_signal(chart):
    events = []
    chart.tasks_changed.connect(lambda: events.append("tasks"))

    chart.add_task(Task({"start": 0, "end": 10}))

    assert events == ["tasks"]


def test_time_period_change_is_undoable_and_remembered(chart):
    assert chart.set_time_period(1) is True
    assert chart.timeline.time_period.name == "weeks"
    assert chart.settings.time_period == "weeks"

    chart.undo_stack.undo()
    assert chart.timeline.time_period.name == "days"

    assert chart.set_time_period("centuries") is False
    assert chart.set_time_period(-5) is False


def test_get_setting_parses_booleans(chart):
    assert chart.get_setting("snap_to_grid", False) is False

    chart.settings.set("snap_to_grid", "true")

    assert chart.get_setting("snap_to_grid", False) is True
    assert chart.get_setting("unknown", 7) == 7


def test_resource_lookup(chart):
    assert chart.get_resource_by_index(1).name == "Bob"
    assert chart.get_resource_by_index(3) is None

    removed = chart.remove_resource(chart.resources[0].id)

    assert removed.name == "Alice"
    assert len(chart.timeline.get_layout().dividers_h) == 2


def test_save_and_load_round_trip(chart, settings, tmp_path):
    chart.timeline.set_time_period("weeks")
    chart.add_task(Task({"id": "t1", "name": "Ship", "start": "2022-01-13 00:00", "end": "2022-01-20 00:00"}))
    path = tmp_path / "chart.json"

    save_chart(path, chart)
    payload = json.loads(path.read_text(encoding="utf-8"))
    loaded = load_chart(path, settings=settings)

    assert payload["tasks"] == [
        {"id": "t1", "name": "Ship", "start": 1642032000.0, "end": 1642636800.0}
    ]
    assert loaded.timeline.time_period.name == "weeks"
    assert loaded.timeline.reference == chart.timeline.reference
    assert [resource.name for resource in loaded.resources] == ["Alice", "Bob", "Carol"]
    assert loaded.get_task("t1").left == chart.get_task("t1").left


def test_load_rejects_unknown_schema(tmp_path, settings):
    path = tmp_path / "chart.json"
    path.write_text(json.dumps({"schema_version": 99}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_chart(path, settings=settings)


def test_new_chart_scrolls_viewport_to_reference(settings):
    viewport = Viewport(width_px=800)
    chart = GanttChart(settings=settings, time_period="days", reference=REFERENCE, viewport=viewport)
    loop = QEventLoop()
    QTimer.singleShot(SCROLL_SETTLE_MS * 4, loop.quit)
    loop.exec()

    thumb = chart.timeline.scrollbar_thumb_width()
    assert viewport.scroll_left_px == pytest.approx(680 - thumb)


def test_reference_seconds_survive_round_trip(chart, settings, tmp_path):
    chart.timeline.set_reference_instant(datetime(2022, 1, 13, 10, 0, 42, tzinfo=timezone.utc))
    path = tmp_path / "chart.json"

    save_chart(path, chart)
    loaded = load_chart(path, settings=settings)

    assert loaded.timeline.reference == chart.timeline.reference
