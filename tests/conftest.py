import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import datetime, timezone

import pytest
from PyQt6.QtCore import QCoreApplication, QSettings

from ganttchart.chart import GanttChart
from ganttchart.settings import ChartSettings

REFERENCE = datetime(2022, 1, 13, 10, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def settings(tmp_path):
    return ChartSettings(QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat))


@pytest.fixture
def chart(settings):
    chart = GanttChart(settings=settings, time_period="days", reference=REFERENCE)
    chart.add_resource("Alice")
    chart.add_resource("Bob")
    chart.add_resource("Carol")
    return chart
