import json
from pathlib import Path

from .chart import GanttChart, Resource
from .constants import SCHEMA_VERSION
from .settings import ChartSettings
from .task import Task
from .timeline import TimelineEngine


def save_chart(path: str | Path, chart: GanttChart) -> None:
    payload = chart.to_dict()
    payload["schema_version"] = SCHEMA_VERSION
    path = Path(path)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def chart_from_dict(data: dict, settings: ChartSettings | None = None, viewport=None) -> GanttChart:
    schema_version = data.get("schema_version", 0)
    if schema_version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {schema_version}")
    settings = settings if settings is not None else ChartSettings()
    timeline_data = dict(data.get("timeline", {}))
    timeline_data.setdefault("time_period", settings.time_period)
    timeline = TimelineEngine.from_dict(timeline_data, viewport=viewport)
    chart = GanttChart(settings=settings, timeline=timeline)
    for resource in data.get("resources", []):
        chart.insert_resource(Resource.from_dict(resource))
    for task in data.get("tasks", []):
        chart.add_task(Task.from_dict(task, chart=chart))
    return chart


def load_chart(path: str | Path, settings: ChartSettings | None = None, viewport=None) -> GanttChart:
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    return chart_from_dict(data, settings=settings, viewport=viewport)
