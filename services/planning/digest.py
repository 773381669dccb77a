"""Compress aggregates into a bounded, prompt-ready training digest."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List

from services.processing.aggregate import ActivitiesData

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_ABBR = tuple(name[:3] for name in MONTH_NAMES)

PEAK_MONTHS = 3
LONG_ACTIVITIES = 10
CONSISTENCY_MONTHS = 24


@dataclass(frozen=True)
class DigestOverview:
    total_activities: int
    total_distance_km: str
    total_elevation_m: str
    data_timespan: str


@dataclass(frozen=True)
class YearDigest:
    total_distance_km: str
    total_activities: int
    total_elevation_m: str
    avg_pace: str


@dataclass(frozen=True)
class LongActivity:
    date: str
    distance_km: str
    elevation_m: str
    duration: str
    pace: str


@dataclass(frozen=True)
class TrainingDigest:
    overview: DigestOverview
    yearly_stats: Dict[int, YearDigest] = field(default_factory=dict)
    peak_months: List[str] = field(default_factory=list)
    long_activities: List[LongActivity] = field(default_factory=list)
    consistency_by_month: List[str] = field(default_factory=list)


def format_pace(pace_min_per_km: float) -> str:
    """5.5 -> "5:30/km"; zero, negative or non-finite paces are "N/A"."""
    if not pace_min_per_km or not math.isfinite(pace_min_per_km) or pace_min_per_km < 0:
        return "N/A"
    mins = math.floor(pace_min_per_km)
    secs = math.floor((pace_min_per_km - mins) * 60)
    return f"{mins}:{secs:02d}/km"


def format_duration(seconds: float) -> str:
    hrs = int(seconds // 3600)
    mins = int((seconds % 3600) // 60)
    if hrs > 0:
        return f"{hrs}h {mins}m"
    return f"{mins}m"


def summarize_training_data(data: ActivitiesData) -> TrainingDigest:
    totals = data.total_stats
    months = data.monthly_progression
    timespan = (
        f"{months[0].year} to {months[-1].year}" if months else "Unknown to present"
    )
    overview = DigestOverview(
        total_activities=totals.total_activities,
        total_distance_km=f"{totals.total_distance_km:.0f}",
        total_elevation_m=f"{totals.total_elevation_m:.0f}",
        data_timespan=timespan,
    )

    yearly_stats = {
        bucket.year: YearDigest(
            total_distance_km=f"{bucket.distance_km:.0f}",
            total_activities=bucket.activity_count,
            total_elevation_m=f"{bucket.elevation_m:.0f}",
            avg_pace=format_pace(bucket.avg_pace_min_per_km),
        )
        for bucket in data.yearly_chart_data
    }

    peak_months = [
        f"{MONTH_NAMES[m.month]} {m.year} ({m.distance_km:.0f}km, {m.elevation_m:.0f}m elevation)"
        for m in sorted(months, key=lambda m: m.distance_km, reverse=True)[:PEAK_MONTHS]
    ]

    long_activities = [
        LongActivity(
            date=r.timestamp.date().isoformat() if r.timestamp else "Unknown date",
            distance_km=f"{r.distance_km:.1f}",
            elevation_m=f"{r.elevation_m:.0f}",
            duration=format_duration(r.duration_secs),
            pace=format_pace(r.pace_min_per_km),
        )
        for r in sorted(data.activities, key=lambda r: r.distance_km, reverse=True)[:LONG_ACTIVITIES]
    ]

    consistency = [
        f"{MONTH_ABBR[m.month]} {m.year}: {m.activity_count} activities, {m.distance_km:.0f}km"
        for m in months[-CONSISTENCY_MONTHS:]
    ]

    return TrainingDigest(
        overview=overview,
        yearly_stats=yearly_stats,
        peak_months=peak_months,
        long_activities=long_activities,
        consistency_by_month=consistency,
    )
