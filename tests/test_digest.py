import math

import pytest

from services.planning.digest import format_duration, format_pace, summarize_training_data
from services.processing.aggregate import build_activities_data
from services.processing.pipeline import process
from tests.fixtures.build_fixture_csv import build_fixture_csv


@pytest.mark.parametrize(
    "pace, expected",
    [
        (0, "N/A"),
        (5.5, "5:30/km"),
        (6.0, "6:00/km"),
        (4.99, "4:59/km"),
        (-1, "N/A"),
        (math.inf, "N/A"),
        (math.nan, "N/A"),
    ],
)
def test_format_pace(pace, expected):
    assert format_pace(pace) == expected


def test_format_duration():
    assert format_duration(0) == "0m"
    assert format_duration(59 * 60) == "59m"
    assert format_duration(3660) == "1h 1m"
    assert format_duration(7200) == "2h 0m"


def test_digest_of_empty_data():
    digest = summarize_training_data(build_activities_data([]))
    assert digest.overview.total_activities == 0
    assert digest.overview.total_distance_km == "0"
    assert digest.overview.data_timespan == "Unknown to present"
    assert digest.yearly_stats == {}
    assert digest.peak_months == []
    assert digest.long_activities == []
    assert digest.consistency_by_month == []


def test_digest_of_fixture_export():
    digest = summarize_training_data(process(build_fixture_csv()).data)

    assert digest.overview.total_activities == 5
    assert digest.overview.total_distance_km == "131"
    assert digest.overview.total_elevation_m == "3550"
    assert digest.overview.data_timespan == "2023 to 2025"

    assert sorted(digest.yearly_stats) == [2023, 2024, 2025]
    assert digest.yearly_stats[2024].total_distance_km == "60"
    assert digest.yearly_stats[2024].avg_pace == "2:00/km"

    assert digest.peak_months == [
        "December 2024 (60km, 500m elevation)",
        "April 2025 (35km, 1400m elevation)",
        "March 2025 (21km, 150m elevation)",
    ]

    longest = digest.long_activities[0]
    assert longest.date == "2024-12-30"
    assert longest.distance_km == "60.0"
    assert longest.duration == "2h 0m"
    assert len(digest.long_activities) == 5

    assert digest.consistency_by_month[0] == "Jun 2023: 1 activities, 15km"
    assert digest.consistency_by_month[-1] == "Apr 2025: 2 activities, 35km"
