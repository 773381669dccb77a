from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str
    uploads: int = 0


class StatsSummaryRow(BaseModel):
    total_activities: int = 0
    total_distance_km: float = 0.0
    total_duration_secs: float = 0.0
    total_elevation_m: float = 0.0
    avg_distance_km: float = 0.0
    avg_duration_secs: float = 0.0
    avg_pace_min_per_km: float = 0.0
    best_pace_min_per_km: float = 0.0
    longest_distance_km: float = 0.0


class ActivityRow(BaseModel):
    name: str
    description: str = ""
    activity_type: str
    timestamp: Optional[datetime] = None
    year: Optional[int] = None
    month: Optional[int] = None
    iso_year: Optional[int] = None
    iso_week: Optional[int] = None
    weekday: Optional[int] = None
    distance_km: float
    duration_secs: float
    elevation_m: float
    pace_min_per_km: float
    pace: str
    is_race: bool


class ChartPoint(BaseModel):
    key: str
    distance_km: float
    activities: int
    elevation_m: float
    duration_secs: float
    avg_pace_min_per_km: float


class YearRow(ChartPoint):
    year: int
    stats: StatsSummaryRow


class MonthRow(ChartPoint):
    year: int
    month: int


class WeekRow(ChartPoint):
    year: int
    week: int


class ActivityTypeRow(BaseModel):
    activity_type: str
    count: int
    distance_km: float


class UploadResponse(BaseModel):
    upload_id: str
    filename: str
    rows_read: int
    rows_admitted: int
    rows_dropped: int
    total_stats: StatsSummaryRow
    yearly: List[YearRow] = Field(default_factory=list)
    monthly: List[MonthRow] = Field(default_factory=list)
    races: List[ActivityRow] = Field(default_factory=list)
    activity_types: List[ActivityTypeRow] = Field(default_factory=list)


class ActivitiesResponse(BaseModel):
    total: int = 0
    activities: List[ActivityRow] = Field(default_factory=list)


class WeeklyResponse(BaseModel):
    weekly: List[WeekRow] = Field(default_factory=list)


class DashboardStats(BaseModel):
    total_activities: int = 0
    total_distance_km: float = 0.0
    total_duration_secs: float = 0.0
    total_elevation_m: float = 0.0


class DashboardResponse(BaseModel):
    period: str
    view: str
    stats: DashboardStats = Field(default_factory=DashboardStats)
    chart: List[ChartPoint] = Field(default_factory=list)
    recent: List[ActivityRow] = Field(default_factory=list)


class DigestOverviewRow(BaseModel):
    total_activities: int
    total_distance_km: str
    total_elevation_m: str
    data_timespan: str


class YearDigestRow(BaseModel):
    total_distance_km: str
    total_activities: int
    total_elevation_m: str
    avg_pace: str


class LongActivityRow(BaseModel):
    date: str
    distance_km: str
    elevation_m: str
    duration: str
    pace: str


class DigestResponse(BaseModel):
    overview: DigestOverviewRow
    yearly_stats: Dict[int, YearDigestRow] = Field(default_factory=dict)
    peak_months: List[str] = Field(default_factory=list)
    long_activities: List[LongActivityRow] = Field(default_factory=list)
    consistency_by_month: List[str] = Field(default_factory=list)
