from dataclasses import asdict
from typing import Any, Dict, Iterable, List

from services.planning.digest import format_pace
from services.processing.aggregate import MonthBucket, StatsSummary, WeekBucket, YearBucket
from services.processing.normalize import ActivityRecord


def stats_row(stats: StatsSummary) -> Dict[str, Any]:
    return asdict(stats)


def activity_row(record: ActivityRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "description": record.description,
        "activity_type": record.activity_type,
        "timestamp": record.timestamp,
        "year": record.year,
        "month": record.month,
        "iso_year": record.iso_year,
        "iso_week": record.iso_week,
        "weekday": record.weekday,
        "distance_km": record.distance_km,
        "duration_secs": record.duration_secs,
        "elevation_m": record.elevation_m,
        "pace_min_per_km": record.pace_min_per_km,
        "pace": format_pace(record.pace_min_per_km),
        "is_race": record.is_race,
    }


def chart_point(bucket) -> Dict[str, Any]:
    row = {
        "key": bucket.key,
        "distance_km": bucket.distance_km,
        "activities": bucket.activity_count,
        "elevation_m": bucket.elevation_m,
        "duration_secs": bucket.duration_secs,
        "avg_pace_min_per_km": bucket.avg_pace_min_per_km,
    }
    if isinstance(bucket, YearBucket):
        row.update(year=bucket.year, stats=stats_row(bucket.stats))
    elif isinstance(bucket, MonthBucket):
        row.update(year=bucket.year, month=bucket.month)
    elif isinstance(bucket, WeekBucket):
        row.update(year=bucket.iso_year, week=bucket.iso_week)
    return row


def chart_points(buckets: Iterable) -> List[Dict[str, Any]]:
    return [chart_point(b) for b in buckets]


def activity_type_rows(groups: Dict[str, List[ActivityRecord]]) -> List[Dict[str, Any]]:
    rows = [
        {
            "activity_type": key,
            "count": len(records),
            "distance_km": sum(r.distance_km for r in records),
        }
        for key, records in groups.items()
    ]
    rows.sort(key=lambda r: (-r["count"], r["activity_type"]))
    return rows
