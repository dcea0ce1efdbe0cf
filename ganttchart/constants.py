SCHEMA_VERSION = 1

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M"
REFERENCE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_TIME_UNIT_WIDTH = 20
DEFAULT_TASK_HEIGHT = 24
RESOURCE_HEIGHT_PX = 32

DEFAULT_TIME_PERIOD = "days"
DEFAULT_ROUND_TO = "days"

SCROLL_SETTLE_MS = 25
SCROLLBAR_ARROW_WIDTH = 20

SETTINGS_ORGANIZATION = "GanttChart"
SETTINGS_APPLICATION = "GanttChart"
