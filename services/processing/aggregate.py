"""Pure projections over the admitted working set: totals, calendar buckets, races."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .normalize import ActivityRecord

PERIODS = ("all", "year", "6months", "3months")
VIEWS = ("yearly", "monthly", "weekly")
_PERIOD_MONTHS = {"6months": 6, "3months": 3}


@dataclass(frozen=True)
class StatsSummary:
    total_activities: int = 0
    total_distance_km: float = 0.0
    total_duration_secs: float = 0.0
    total_elevation_m: float = 0.0
    avg_distance_km: float = 0.0
    avg_duration_secs: float = 0.0
    avg_pace_min_per_km: float = 0.0
    best_pace_min_per_km: float = 0.0
    longest_distance_km: float = 0.0


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int  # 0-11
    distance_km: float
    activity_count: int
    elevation_m: float
    duration_secs: float

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month + 1:02d}"

    @property
    def avg_pace_min_per_km(self) -> float:
        return self.duration_secs / 60 / self.distance_km if self.distance_km > 0 else 0.0


@dataclass(frozen=True)
class WeekBucket:
    iso_year: int
    iso_week: int
    distance_km: float
    activity_count: int
    elevation_m: float
    duration_secs: float

    @property
    def key(self) -> str:
        return f"{self.iso_year}-W{self.iso_week:02d}"

    @property
    def avg_pace_min_per_km(self) -> float:
        return self.duration_secs / 60 / self.distance_km if self.distance_km > 0 else 0.0


@dataclass(frozen=True)
class YearBucket:
    year: int
    distance_km: float
    activity_count: int
    elevation_m: float
    duration_secs: float
    stats: StatsSummary

    @property
    def key(self) -> str:
        return str(self.year)

    @property
    def avg_pace_min_per_km(self) -> float:
        return self.stats.avg_pace_min_per_km


Bucket = Union[YearBucket, MonthBucket, WeekBucket]


@dataclass(frozen=True)
class ActivitiesData:
    activities: Tuple[ActivityRecord, ...]
    total_stats: StatsSummary
    races: Tuple[ActivityRecord, ...]
    activities_by_type: Dict[str, List[ActivityRecord]] = field(default_factory=dict)
    yearly_chart_data: List[YearBucket] = field(default_factory=list)
    monthly_progression: List[MonthBucket] = field(default_factory=list)


def total_stats(records: Sequence[ActivityRecord]) -> StatsSummary:
    count = len(records)
    distance = duration = elevation = longest = 0.0
    best_pace: Optional[float] = None
    for r in records:
        distance += r.distance_km
        duration += r.duration_secs
        elevation += r.elevation_m
        if r.distance_km > longest:
            longest = r.distance_km
        # Zero pace means unknown and never counts as a best.
        if r.pace_min_per_km > 0 and (best_pace is None or r.pace_min_per_km < best_pace):
            best_pace = r.pace_min_per_km
    return StatsSummary(
        total_activities=count,
        total_distance_km=distance,
        total_duration_secs=duration,
        total_elevation_m=elevation,
        avg_distance_km=distance / count if count else 0.0,
        avg_duration_secs=duration / count if count else 0.0,
        avg_pace_min_per_km=duration / 60 / distance if distance > 0 else 0.0,
        best_pace_min_per_km=best_pace or 0.0,
        longest_distance_km=longest,
    )


def _group_by(records: Sequence[ActivityRecord], attr: str) -> Dict[str, List[ActivityRecord]]:
    groups: Dict[str, List[ActivityRecord]] = {}
    for r in records:
        value = getattr(r, attr)
        key = "null" if value is None else str(value)
        groups.setdefault(key, []).append(r)
    return groups


def group_by_year(records: Sequence[ActivityRecord]) -> Dict[str, List[ActivityRecord]]:
    return _group_by(records, "year")


def group_by_type(records: Sequence[ActivityRecord]) -> Dict[str, List[ActivityRecord]]:
    return _group_by(records, "activity_type")


def yearly_series(records: Sequence[ActivityRecord]) -> List[YearBucket]:
    out: List[YearBucket] = []
    for key, group in group_by_year(records).items():
        if key == "null":
            continue
        stats = total_stats(group)
        out.append(
            YearBucket(
                year=int(key),
                distance_km=stats.total_distance_km,
                activity_count=stats.total_activities,
                elevation_m=stats.total_elevation_m,
                duration_secs=stats.total_duration_secs,
                stats=stats,
            )
        )
    out.sort(key=lambda b: b.year)
    return out


def _accumulate(records: Sequence[ActivityRecord], key_attrs: Tuple[str, str]) -> Dict[tuple, list]:
    sums: Dict[tuple, list] = {}
    for r in records:
        key = tuple(getattr(r, a) for a in key_attrs)
        if None in key:
            continue
        acc = sums.setdefault(key, [0.0, 0, 0.0, 0.0])
        acc[0] += r.distance_km
        acc[1] += 1
        acc[2] += r.elevation_m
        acc[3] += r.duration_secs
    return sums


def monthly_series(records: Sequence[ActivityRecord]) -> List[MonthBucket]:
    sums = _accumulate(records, ("year", "month"))
    return [
        MonthBucket(year=y, month=m, distance_km=d, activity_count=n, elevation_m=e, duration_secs=s)
        for (y, m), (d, n, e, s) in sorted(sums.items())
    ]


def weekly_series(records: Sequence[ActivityRecord]) -> List[WeekBucket]:
    sums = _accumulate(records, ("iso_year", "iso_week"))
    return [
        WeekBucket(iso_year=y, iso_week=w, distance_km=d, activity_count=n, elevation_m=e, duration_secs=s)
        for (y, w), (d, n, e, s) in sorted(sums.items())
    ]


def races(records: Sequence[ActivityRecord]) -> Tuple[ActivityRecord, ...]:
    return tuple(r for r in records if r.is_race)


def build_activities_data(records: Sequence[ActivityRecord]) -> ActivitiesData:
    records = tuple(records)
    return ActivitiesData(
        activities=records,
        total_stats=total_stats(records),
        races=races(records),
        activities_by_type=group_by_type(records),
        yearly_chart_data=yearly_series(records),
        monthly_progression=monthly_series(records),
    )


def months_before(now: datetime, months: int) -> datetime:
    index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> Optional[datetime]:
    if period == "all":
        return None
    if period == "year":
        return datetime(now.year, 1, 1)
    if period in _PERIOD_MONTHS:
        return months_before(now, _PERIOD_MONTHS[period])
    raise ValueError(f"Unknown period: {period}")


def filter_period(records: Sequence[ActivityRecord], period: str, now: datetime) -> Tuple[ActivityRecord, ...]:
    if period == "year":
        return tuple(r for r in records if r.year == now.year)
    start = period_start(period, now)
    if start is None:
        return tuple(records)
    return tuple(r for r in records if r.timestamp is not None and r.timestamp >= start)


def chart_series(
    records: Sequence[ActivityRecord],
    period: str,
    view: str,
    now: datetime,
    months_window: int = 24,
    weeks_window: int = 20,
) -> List[Bucket]:
    """Series for one dashboard chart; yearly and monthly are clipped by period start."""
    start = period_start(period, now)
    if view == "yearly":
        years = yearly_series(records)
        if start is None:
            return list(years)
        return [b for b in years if b.year >= start.year]
    if view == "monthly":
        months = monthly_series(records)
        if start is not None:
            first = (start.year, start.month - 1)
            months = [b for b in months if (b.year, b.month) >= first]
        return list(months[-months_window:])
    if view == "weekly":
        return list(weekly_series(filter_period(records, period, now))[-weeks_window:])
    raise ValueError(f"Unknown view: {view}")
