from __future__ import annotations

from PyQt6.QtCore import QSettings

from .constants import DEFAULT_TIME_PERIOD, SETTINGS_APPLICATION, SETTINGS_ORGANIZATION

SNAP_TO_GRID_KEY = "chart/snap_to_grid"
VERBOSE_KEY = "chart/verbose"
TIME_PERIOD_KEY = "timeline/time_period"

SETTING_KEYS = {
    "snap_to_grid": SNAP_TO_GRID_KEY,
    "verbose": VERBOSE_KEY,
    "time_period": TIME_PERIOD_KEY,
}


def to_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes")


class ChartSettings:
    def __init__(self, settings: QSettings | None = None) -> None:
        if settings is None:
            settings = QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)
        self.settings = settings
        # Session-only values; never written to the store.
        self.overrides: dict = {}

    def override(self, key: str, value) -> None:
        self.overrides[key] = value

    def get(self, key: str, default=None):
        if key in self.overrides:
            return self.overrides[key]
        return self.settings.value(SETTING_KEYS.get(key, key), default)

    def set(self, key: str, value) -> None:
        self.settings.setValue(SETTING_KEYS.get(key, key), value)

    @property
    def verbose(self) -> bool:
        if "verbose" in self.overrides:
            return bool(self.overrides["verbose"])
        return to_bool(self.settings.value(VERBOSE_KEY, False), False)

    @verbose.setter
    def verbose(self, value: bool) -> None:
        self.settings.setValue(VERBOSE_KEY, bool(value))

    @property
    def snap_to_grid(self) -> bool:
        return to_bool(self.settings.value(SNAP_TO_GRID_KEY, False), False)

    @snap_to_grid.setter
    def snap_to_grid(self, value: bool) -> None:
        self.settings.setValue(SNAP_TO_GRID_KEY, bool(value))

    @property
    def time_period(self) -> str:
        value = self.settings.value(TIME_PERIOD_KEY, DEFAULT_TIME_PERIOD)
        return str(value or DEFAULT_TIME_PERIOD)

    @time_period.setter
    def time_period(self, value: str) -> None:
        self.settings.setValue(TIME_PERIOD_KEY, str(value))

    def sync(self) -> None:
        self.settings.sync()
