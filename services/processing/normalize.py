"""Turn raw export rows into typed, validated activity records."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional, Tuple

logger = logging.getLogger("trainlog.normalize")

# Tried in order; the first format that yields a valid date-time wins.
DATE_FORMATS = (
    "%B %d, %Y, %I:%M:%S %p",  # April 13, 2025, 10:30:00 AM
    "%Y-%m-%d %H:%M:%S",  # 2025-04-13 10:30:00
    "%m/%d/%Y, %I:%M:%S %p",  # 4/13/2025, 10:30:00 AM
)

# Ordered candidate columns per concept; two export schemas name the same value differently.
FIELD_CANDIDATES = {
    "timestamp": ("Activity Date",),
    "distance_km": ("Distance", "distance_km"),
    "duration_secs": ("Elapsed Time", "duration_secs"),
    "elevation_m": ("Elevation Gain", "elevation_gain_m"),
    "activity_type": ("Activity Type",),
    "name": ("Activity Name",),
    "description": ("Activity Description",),
    "filename": ("Filename",),
    "activity_id": ("Activity ID",),
}

DEFAULT_ACTIVITY_TYPE = "Unknown"
RACE_FILENAME_MARKER = "_race_"
RACE_NAME_MARKER = "race"

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class ActivityRecord:
    name: str
    description: str
    activity_type: str
    filename: str
    timestamp: Optional[datetime]
    year: Optional[int]
    month: Optional[int]  # 0-11
    iso_year: Optional[int]
    iso_week: Optional[int]
    weekday: Optional[int]  # Sunday=0
    distance_km: float
    duration_secs: float
    elevation_m: float
    pace_min_per_km: float
    is_race: bool

    @property
    def admitted(self) -> bool:
        return self.timestamp is not None and self.distance_km > 0


def parse_activity_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_number(value: Optional[str]) -> Optional[float]:
    """Parse the leading numeric prefix of a cell ("10.2 km" -> 10.2)."""
    if value is None:
        return None
    match = _LEADING_NUMBER.match(value.strip())
    if not match:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


def field_text(row: Mapping[str, Optional[str]], concept: str) -> Optional[str]:
    for column in FIELD_CANDIDATES[concept]:
        value = row.get(column)
        if value is not None and value.strip():
            return value
    return None


def field_number(row: Mapping[str, Optional[str]], concept: str) -> float:
    for column in FIELD_CANDIDATES[concept]:
        number = parse_number(row.get(column))
        if number is not None:
            return number if number > 0 else 0.0
    return 0.0


def compute_pace(distance_km: float, duration_secs: float) -> float:
    if distance_km > 0 and duration_secs > 0:
        return duration_secs / 60 / distance_km
    return 0.0


def detect_race(filename: str, name: str) -> bool:
    return RACE_FILENAME_MARKER in filename or RACE_NAME_MARKER in name.lower()


def normalize_row(row: Mapping[str, Optional[str]]) -> ActivityRecord:
    raw_date = field_text(row, "timestamp")
    timestamp = parse_activity_date(raw_date)
    if timestamp is None:
        logger.warning(
            "unparseable_date value=%r activity_id=%s",
            raw_date,
            field_text(row, "activity_id") or "-",
        )
        year = month = iso_year = iso_week = weekday = None
    else:
        year = timestamp.year
        month = timestamp.month - 1
        iso_year, iso_week = timestamp.isocalendar()[:2]
        weekday = timestamp.isoweekday() % 7

    distance_km = field_number(row, "distance_km")
    duration_secs = field_number(row, "duration_secs")
    elevation_m = field_number(row, "elevation_m")
    name = (field_text(row, "name") or "").strip()
    filename = field_text(row, "filename") or ""

    return ActivityRecord(
        name=name,
        description=(field_text(row, "description") or "").strip(),
        activity_type=(field_text(row, "activity_type") or DEFAULT_ACTIVITY_TYPE).strip(),
        filename=filename,
        timestamp=timestamp,
        year=year,
        month=month,
        iso_year=iso_year,
        iso_week=iso_week,
        weekday=weekday,
        distance_km=distance_km,
        duration_secs=duration_secs,
        elevation_m=elevation_m,
        pace_min_per_km=compute_pace(distance_km, duration_secs),
        is_race=detect_race(filename, name),
    )


def normalize_rows(rows: Iterable[Mapping[str, Optional[str]]]) -> Tuple[ActivityRecord, ...]:
    """Normalize every row and return the admitted working set, newest first."""
    admitted = []
    dropped = 0
    for index, row in enumerate(rows):
        record = normalize_row(row)
        if not record.admitted:
            dropped += 1
            logger.debug(
                "row_dropped index=%d has_date=%s distance_km=%s",
                index,
                record.timestamp is not None,
                record.distance_km,
            )
            continue
        admitted.append(record)
    admitted.sort(key=lambda r: r.timestamp, reverse=True)
    if dropped:
        logger.info("rows_dropped count=%d admitted=%d", dropped, len(admitted))
    return tuple(admitted)
