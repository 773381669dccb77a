import math
from datetime import datetime

import pytest

from services.processing.aggregate import (
    StatsSummary,
    build_activities_data,
    chart_series,
    filter_period,
    monthly_series,
    months_before,
    total_stats,
    weekly_series,
    yearly_series,
)
from services.processing.normalize import normalize_rows
from tests.fixtures.build_fixture_csv import activity_row

NOW = datetime(2025, 5, 10, 12, 0)


def _records(rows):
    return normalize_rows(rows)


def _fixture_records():
    return _records(
        [
            activity_row("April 13, 2025, 10:30:00 AM", "10", "3600", "200"),
            activity_row("2025-04-20 07:00:00", "25", "10800", "1200"),
            activity_row("3/2/2025, 6:45:00 PM", "21.1", "5400", "150", name="Spring Race 21K"),
            activity_row("December 30, 2024, 9:00:00 AM", "60", "7200", "500"),
            activity_row("June 1, 2023, 6:00:00 AM", "15", "14400", "1500"),
        ]
    )


def test_empty_totals_are_zero():
    stats = total_stats([])
    assert stats == StatsSummary()
    for value in vars(stats).values():
        assert not (isinstance(value, float) and math.isnan(value))


def test_best_pace_ignores_unknown():
    records = _records(
        [
            activity_row("2025-01-01 08:00:00", "5", elapsed="0"),
            activity_row("2025-01-02 08:00:00", "5", elapsed="0"),
            activity_row("2025-01-03 08:00:00", "10", elapsed=str(4.5 * 60 * 10)),
            activity_row("2025-01-04 08:00:00", "10", elapsed=str(3.9 * 60 * 10)),
        ]
    )
    assert sorted(r.pace_min_per_km for r in records) == pytest.approx([0, 0, 3.9, 4.5])
    assert total_stats(records).best_pace_min_per_km == pytest.approx(3.9)


def test_total_stats_values():
    stats = total_stats(_fixture_records())
    assert stats.total_activities == 5
    assert stats.total_distance_km == pytest.approx(131.1)
    assert stats.total_elevation_m == pytest.approx(3550)
    assert stats.longest_distance_km == 60
    assert stats.avg_distance_km == pytest.approx(131.1 / 5)
    assert stats.avg_pace_min_per_km == pytest.approx(41400 / 60 / 131.1)


def test_twelve_activities_over_three_years():
    rows = [
        activity_row(f"{year}-{month:02d}-15 08:00:00", "5")
        for year in (2022, 2023, 2024)
        for month in (1, 4, 7, 10)
    ]
    records = _records(rows)
    years = yearly_series(records)
    assert [b.year for b in years] == [2022, 2023, 2024]
    assert sum(b.activity_count for b in years) == 12


def test_yearly_distance_sums_to_total():
    records = _fixture_records()
    years = yearly_series(records)
    assert [b.year for b in years] == sorted(b.year for b in years)
    assert sum(b.distance_km for b in years) == pytest.approx(total_stats(records).total_distance_km)
    assert years[-1].stats.total_activities == 3


def test_same_month_rows_share_a_bucket():
    records = _records(
        [
            activity_row("2025-03-03 08:00:00", "5"),
            activity_row("2025-03-20 08:00:00", "7"),
        ]
    )
    months = monthly_series(records)
    assert len(months) == 1
    assert months[0].distance_km == 12
    assert months[0].activity_count == 2
    assert months[0].key == "2025-03"


def test_monthly_keys_unique_and_sum_to_year():
    records = _fixture_records()
    months = monthly_series(records)
    keys = [(m.year, m.month) for m in months]
    assert len(keys) == len(set(keys))
    assert keys == sorted(keys)
    for year in yearly_series(records):
        in_year = [m for m in months if m.year == year.year]
        assert sum(m.distance_km for m in in_year) == pytest.approx(year.distance_km)


def test_weekly_buckets_use_iso_year_and_week():
    weeks = weekly_series(_fixture_records())
    assert [w.key for w in weeks] == ["2023-W22", "2025-W01", "2025-W09", "2025-W15", "2025-W16"]


def test_weekly_buckets_stay_separate_across_year_boundaries():
    records = _records(
        [
            activity_row("2024-01-02 08:00:00", "5"),
            activity_row("2024-12-30 08:00:00", "7"),
            activity_row("2021-01-01 08:00:00", "3"),
            activity_row("2021-01-05 08:00:00", "4"),
        ]
    )
    weeks = weekly_series(records)
    assert [(w.key, w.distance_km, w.activity_count) for w in weeks] == [
        ("2020-W53", 3, 1),
        ("2021-W01", 4, 1),
        ("2024-W01", 5, 1),
        ("2025-W01", 7, 1),
    ]


def test_activities_data_projection():
    data = build_activities_data(_fixture_records())
    assert len(data.activities) == 5
    assert [r.name for r in data.races] == ["Spring Race 21K"]
    assert set(data.activities_by_type) == {"Run"}
    assert len(data.yearly_chart_data) == 3
    assert len(data.monthly_progression) == 4


def test_months_before_clamps_day():
    assert months_before(datetime(2025, 3, 31), 1) == datetime(2025, 2, 28)
    assert months_before(datetime(2025, 2, 10), 3) == datetime(2024, 11, 10)


@pytest.mark.parametrize(
    "period, expected",
    [("all", 5), ("year", 3), ("6months", 4), ("3months", 3)],
)
def test_filter_period(period, expected):
    assert len(filter_period(_fixture_records(), period, NOW)) == expected


def test_chart_series_views():
    records = _fixture_records()
    yearly = chart_series(records, "6months", "yearly", NOW)
    assert [b.year for b in yearly] == [2024, 2025]

    monthly = chart_series(records, "3months", "monthly", NOW)
    assert [b.key for b in monthly] == ["2025-03", "2025-04"]

    weekly = chart_series(records, "year", "weekly", NOW, weeks_window=2)
    assert [b.key for b in weekly] == ["2025-W15", "2025-W16"]

    assert len(chart_series(records, "all", "monthly", NOW, months_window=2)) == 2


def test_chart_series_rejects_unknown_values():
    with pytest.raises(ValueError):
        chart_series([], "decade", "yearly", NOW)
    with pytest.raises(ValueError):
        chart_series([], "all", "daily", NOW)
