from datetime import datetime, timezone

import pytest

from ganttchart.periods import PrimaryUnit, SecondaryUnit, Term, TimePeriod, TIME_PERIODS
from ganttchart.timeline import TimelineEngine, compute_dividers, compute_layout
from ganttchart.viewport import Viewport

REFERENCE = datetime(2022, 1, 13, 10, 0, tzinfo=timezone.utc)


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _three_day_period():
    return TimePeriod(
        name="days",
        primary=PrimaryUnit("days", "%d/%m", 24),
        secondary=SecondaryUnit("hours", "%H:%M", 1),
        start_date=Term(0, "days"),
        end_date=Term(2, "days"),
        round_to="days",
    )


def test_three_day_window_fills_primary_and_secondary_rows():
    layout = compute_layout(_three_day_period(), REFERENCE, 20)

    assert len(layout.primary) == 3
    assert len(layout.secondary) <= 72
    assert len(layout.secondary) == 72
    assert layout.primary_unit_width == 480
    assert layout.total_width == 3 * layout.primary_unit_width
    assert [cell.left for cell in layout.primary] == [0, 480, 960]
    assert [cell.name for cell in layout.primary] == ["13/01", "14/01", "15/01"]
    assert layout.secondary[0].name == "00:00"
    assert all(cell.width == 20 for cell in layout.secondary)


def test_total_width_is_sum_of_primary_columns():
    for period in TIME_PERIODS.values():
        layout = compute_layout(period, REFERENCE, 20)

        assert layout.total_width == sum(cell.width for cell in layout.primary)
        assert len(layout.secondary) <= len(layout.primary) * period.primary.secondary_per_unit


def test_secondary_columns_are_truncated_to_primary_grid():
    period = TIME_PERIODS["months"]

    layout = compute_layout(period, REFERENCE, 20)

    # Dec 2021 .. Jun 2022 holds 30 weeks but only 7 * 4 fit under the months.
    assert len(layout.primary) == 7
    assert len(layout.secondary) == 28


def test_window_is_anchored_to_reference():
    layout = compute_layout(TIME_PERIODS["days"], REFERENCE, 20)
    shifted = compute_layout(TIME_PERIODS["days"], _utc(2022, 3, 1, 8), 20)

    assert layout.start_date == _utc(2022, 1, 12)
    assert layout.end_date == _utc(2022, 1, 16)
    assert shifted.start_date == _utc(2022, 2, 28)


def test_degenerate_window_produces_empty_layout():
    period = TimePeriod(
        name="days",
        primary=PrimaryUnit("days", "%d", 24),
        secondary=SecondaryUnit("hours", "%H", 1),
        start_date=Term(0, "days"),
        end_date=Term(0, "days"),
        round_to="days",
    )

    layout = compute_layout(period, _utc(2022, 1, 13), 20)

    assert layout.primary == ()
    assert layout.secondary == ()
    assert layout.total_width == 0


def test_vertical_dividers_are_unique_and_primary_wins():
    dividers_v, _ = compute_dividers(1920, 480, 20, [])
    lefts = [divider.left for divider in dividers_v]

    assert len(lefts) == len(set(lefts)) == 96
    assert lefts == sorted(lefts)
    emphasized = [divider.left for divider in dividers_v if divider.emphasize]
    assert emphasized == [0, 480, 960, 1440]


def test_horizontal_dividers_follow_resource_heights():
    _, dividers_h = compute_dividers(0, 0, 20, [32, 48, 20])

    assert [divider.top for divider in dividers_h] == [32, 80, 100]
    assert all(divider.emphasize for divider in dividers_h)


def test_engine_picks_up_resource_changes(chart):
    assert [d.top for d in chart.timeline.get_layout().dividers_h] == [32, 64, 96]

    chart.set_resource_height(chart.resources[1].id, 50)

    assert [d.top for d in chart.timeline.get_layout().dividers_h] == [32, 82, 114]


def test_pixels_per_second_covers_window():
    engine = TimelineEngine(time_period="days", reference=REFERENCE)

    assert engine.scroll_width == 1920
    assert engine.pixels_per_second() == pytest.approx(1920 / (4 * 86400))


def test_pixel_date_round_trip():
    engine = TimelineEngine(time_period="weeks", reference=REFERENCE)

    for x in range(0, int(engine.scroll_width) + 1, 37):
        date = engine.date_from_pixel(x, scroll_left=0, viewport_left=0)
        assert engine.pixel_from_date(date) == pytest.approx(x, abs=1e-3)


def test_date_from_pixel_accounts_for_scroll_and_viewport_edge():
    engine = TimelineEngine(time_period="days", reference=REFERENCE)

    assert engine.date_from_pixel(120, scroll_left=100, viewport_left=20) == _utc(2022, 1, 12, 10)
    assert engine.pixel_from_date(REFERENCE) == pytest.approx(680)


def test_date_from_pixel_reads_viewport_by_default():
    viewport = Viewport(width_px=800, left_edge_px=20)
    viewport.scroll_left_px = 100
    engine = TimelineEngine(time_period="days", reference=REFERENCE, viewport=viewport)

    assert engine.date_from_pixel(120) == _utc(2022, 1, 12, 10)


def test_set_time_period_by_name_and_offset():
    engine = TimelineEngine(time_period="days", reference=REFERENCE)
    changes = []
    engine.layout_changed.connect(lambda: changes.append(engine.time_period.name))

    assert engine.set_time_period(1) is True
    assert engine.time_period.name == "weeks"
    assert engine.set_time_period("hours") is True
    assert engine.time_period.name == "hours"
    assert engine.set_time_period(-1) is False
    assert engine.set_time_period("decades") is False
    assert engine.time_period.name == "hours"
    assert engine.zoom_out() is True
    assert engine.time_period.name == "days"
    assert changes == ["weeks", "hours", "days"]


def test_offset_past_last_preset_is_noop():
    engine = TimelineEngine(time_period="years", reference=REFERENCE)
    before = engine.get_layout()

    assert engine.set_time_period(1) is False
    assert engine.get_layout() is before


def test_set_time_period_accepts_registered_preset_object():
    engine = TimelineEngine(time_period="days", reference=REFERENCE)

    assert engine.set_time_period(TIME_PERIODS["months"]) is True
    assert engine.get_layout().primary_unit_width == 80


def test_reference_change_recenters_grid():
    engine = TimelineEngine(time_period="days", reference=REFERENCE)

    engine.set_reference_instant(_utc(2022, 6, 1, 12))

    assert engine.start_date == _utc(2022, 5, 31)
    assert engine.end_date == _utc(2022, 6, 4)


def test_degenerate_window_pins_conversions():
    period = TimePeriod(
        name="days",
        primary=PrimaryUnit("days", "%d", 24),
        secondary=SecondaryUnit("hours", "%H", 1),
        start_date=Term(0, "days"),
        end_date=Term(0, "days"),
        round_to="days",
    )
    engine = TimelineEngine(time_period=period, reference=_utc(2022, 1, 13))

    assert engine.pixels_per_second() == 0.0
    assert engine.date_from_pixel(50, 0, 0) == engine.start_date
    assert engine.pixel_from_date(REFERENCE) == 0.0


def test_scroll_to_reference_writes_viewport():
    viewport = Viewport(width_px=800, left_edge_px=0)
    engine = TimelineEngine(time_period="days", reference=REFERENCE, viewport=viewport)

    engine.scroll_to_reference(defer=False)

    thumb = (800 - 40) * (800 / 1920)
    assert engine.scrollbar_thumb_width() == pytest.approx(thumb)
    assert viewport.scroll_left_px == pytest.approx(680 - thumb)


def test_to_dict_records_period_and_reference():
    engine = TimelineEngine(time_period="weeks", reference=REFERENCE)

    assert engine.to_dict() == {"time_period": "weeks", "reference": "2022-01-13 10:00:00"}


def test_from_dict_restores_period_and_reference():
    viewport = Viewport(width_px=800)
    engine = TimelineEngine(time_period="weeks", reference=_utc(2022, 1, 13, 10, 0, 42))

    restored = TimelineEngine.from_dict(engine.to_dict(), viewport=viewport)

    assert restored.time_period.name == "weeks"
    assert restored.reference == engine.reference
    assert restored.viewport is viewport
    assert restored.get_layout() == engine.get_layout()


def test_from_dict_reads_minute_precision_reference():
    engine = TimelineEngine.from_dict({"time_period": "days", "reference": "2022-01-13 10:00"})

    assert engine.reference == REFERENCE
    assert engine.start_date == _utc(2022, 1, 12)
