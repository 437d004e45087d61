from __future__ import annotations

from datetime import date

from src.farm_hr.farm_hr.core.enums import MilkPeriod, WindowKind
from src.farm_hr.farm_hr.milk.aggregator import bucket_label, summarize
from src.farm_hr.farm_hr.milk.model import MilkMeasurement


def _m(tag: str, quantity: float, day: date, period: MilkPeriod = MilkPeriod.MORNING) -> MilkMeasurement:
    return MilkMeasurement(animal_tag=tag, quantity=quantity, record_date=day, period=period)


MON = date(2026, 10, 19)
TUE = date(2026, 10, 20)


def test_week_summary_totals_averages_and_trend():
    measurements = [_m("A", 10, MON), _m("A", 5, TUE), _m("B", 7, MON)]

    summary = summarize(measurements, kind=WindowKind.WEEK, previous_total=12.345)

    assert summary.total_quantity == 22
    assert summary.distinct_animals == 2
    assert summary.average_per_animal == 11
    assert summary.average_active_days_per_animal == 1.5
    assert summary.previous_total_quantity == 12.35
    assert [(b.label, b.total) for b in summary.trend] == [("Mon", 17), ("Tue", 5)]
    assert summary.animal is None


def test_trend_totals_add_up_to_the_window_total():
    measurements = [
        _m("A", 3.3, date(2026, 1, 5)),
        _m("A", 4.4, date(2026, 2, 5), MilkPeriod.EVENING),
        _m("B", 1.1, date(2026, 2, 6)),
    ]

    summary = summarize(measurements, kind="year")

    assert [b.label for b in summary.trend] == ["Jan", "Feb"]
    assert round(sum(b.total for b in summary.trend), 2) == summary.total_quantity


def test_empty_window_has_zero_averages():
    summary = summarize([], kind="month")

    assert summary.total_quantity == 0
    assert summary.distinct_animals == 0
    assert summary.average_per_animal == 0
    assert summary.average_active_days_per_animal == 0
    assert summary.trend == []


def test_month_buckets_cap_at_week_four():
    assert bucket_label("week", date(2026, 1, 1)) == "Week 1"
    assert bucket_label("week", date(2026, 1, 8)) == "Week 2"
    assert bucket_label("week", date(2026, 1, 28)) == "Week 4"
    assert bucket_label("week", date(2026, 1, 29)) == "Week 4"
    assert bucket_label("week", date(2026, 1, 31)) == "Week 4"


def test_day_range_uses_a_single_bucket():
    summary = summarize([_m("A", 2, MON), _m("A", 3, MON, MilkPeriod.EVENING)], kind="day")
    assert [(b.label, b.total) for b in summary.trend] == [("Today", 5)]


def test_animal_stats_for_the_filtered_tag():
    measurements = [_m("A", 10, MON), _m("A", 5, TUE), _m("A", 1, TUE, MilkPeriod.EVENING)]

    summary = summarize(measurements, kind="week", animal_tag="a")

    assert summary.animal.animal_tag == "A"
    assert summary.animal.active_days == 2
    assert summary.animal.total_quantity == 16
