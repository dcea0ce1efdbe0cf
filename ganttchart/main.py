from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QSettings

from .chart import GanttChart
from .dates import format_instant, parse_instant
from .periods import period_names
from .persistence import load_chart
from .settings import ChartSettings


def _parse_reference(value: str):
    try:
        return parse_instant(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid reference '{value}', expected YYYY-MM-DD HH:MM"
        ) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ganttchart",
        description="Print the timeline layout and task geometry of a Gantt chart",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("chart", nargs="?", help="Path to a chart JSON file")
    parser.add_argument("--period", choices=period_names(), help="Time period preset")
    parser.add_argument("--reference", type=_parse_reference, help="Reference instant (UTC)")
    parser.add_argument("--settings", help="INI file holding chart settings")
    parser.add_argument("--verbose", action="store_true", help="Log diagnostics")
    return parser


def layout_summary(chart: GanttChart) -> dict:
    timeline = chart.timeline
    layout = timeline.get_layout()
    return {
        "time_period": timeline.time_period.name,
        "start": format_instant(layout.start_date),
        "end": format_instant(layout.end_date),
        "total_width": layout.total_width,
        "primary_unit_width": layout.primary_unit_width,
        "pixels_per_second": timeline.pixels_per_second(),
        "primary": [
            {"name": cell.name, "left": cell.left, "width": cell.width}
            for cell in layout.primary
        ],
        "secondary": [cell.name for cell in layout.secondary],
        "dividers_v": len(layout.dividers_v),
        "dividers_h": [divider.top for divider in layout.dividers_h],
    }


def task_geometry(chart: GanttChart) -> list[dict]:
    return [
        {
            "id": task.id,
            "name": task.name,
            "start": task.start_date(),
            "end": task.end_date(),
            "duration": task.duration_string(),
            "left": task.left,
            "width": task.width,
            "top": task.top,
            "visible": task.visible,
        }
        for task in chart.tasks.values()
    ]


def run(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.settings:
        settings = ChartSettings(QSettings(args.settings, QSettings.Format.IniFormat))
    else:
        settings = ChartSettings()
    if args.verbose:
        settings.override("verbose", True)

    if args.chart:
        path = Path(args.chart)
        try:
            chart = load_chart(path, settings=settings)
        except FileNotFoundError:
            print(f"Error: chart file not found: {path}", file=sys.stderr)
            return 1
        except (json.JSONDecodeError, ValueError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 2
    else:
        chart = GanttChart(settings=settings)

    if args.period:
        chart.timeline.set_time_period(args.period)
    if args.reference:
        chart.timeline.set_reference_instant(args.reference)

    payload = {"layout": layout_summary(chart), "tasks": task_geometry(chart)}
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
