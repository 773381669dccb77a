import logging
import uuid
from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from packages.config import DASHBOARD_MONTHS, DASHBOARD_WEEKS, UPLOAD_MAX_BYTES, UPLOAD_TTL_SECONDS
from packages.request_context import upload_context
from services.ingestion.csv_import import decode_upload
from services.planning.digest import summarize_training_data
from services.processing.aggregate import (
    PERIODS,
    VIEWS,
    chart_series,
    filter_period,
    period_start,
    total_stats,
    weekly_series,
)
from services.processing.pipeline import process
from .. import store
from ..cache import get_or_set
from ..deps import get_upload
from ..schemas import ActivitiesResponse, DashboardResponse, DigestResponse, UploadResponse, WeeklyResponse
from ..utils import activity_row, activity_type_rows, chart_points, stats_row


router = APIRouter()

logger = logging.getLogger("trainlog.api")

CACHE_TTL_SECONDS = 300
MAX_ACTIVITIES_LIMIT = 200
RECENT_ACTIVITIES = 10


def _version(upload: store.StoredUpload) -> str:
    return str(upload.created_at)


def dashboard_cache_key(upload_id: str, period: str, view: str, now: datetime) -> str:
    start = period_start(period, now)
    window = start.isoformat() if start else "all"
    return f"dashboard:{upload_id}:{period}:{view}:{window}"


@router.post("/uploads", response_model=UploadResponse)
def create_upload(file: UploadFile = File(...)):
    filename = file.filename or ""
    if not filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload a CSV file exported from your activity tracker.",
        )
    data = file.file.read(UPLOAD_MAX_BYTES + 1)
    if len(data) > UPLOAD_MAX_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Upload exceeds {UPLOAD_MAX_BYTES} bytes",
        )

    upload_id = uuid.uuid4().hex
    with upload_context(upload_id):
        run = process(decode_upload(data))
        upload = store.put(upload_id, filename, run, UPLOAD_TTL_SECONDS)
        logger.info("upload_stored filename=%s admitted=%d", filename, run.rows_admitted)

    result = run.data
    return {
        "upload_id": upload.upload_id,
        "filename": upload.filename,
        "rows_read": run.rows_read,
        "rows_admitted": run.rows_admitted,
        "rows_dropped": run.rows_dropped,
        "total_stats": stats_row(result.total_stats),
        "yearly": chart_points(result.yearly_chart_data),
        "monthly": chart_points(result.monthly_progression),
        "races": [activity_row(r) for r in result.races],
        "activity_types": activity_type_rows(result.activities_by_type),
    }


@router.get("/uploads/{upload_id}/activities", response_model=ActivitiesResponse)
def activities(
    activity_type: str | None = Query(None, alias="type"),
    races_only: bool = False,
    limit: int = 50,
    offset: int = 0,
    upload: store.StoredUpload = Depends(get_upload),
):
    limit = max(1, min(MAX_ACTIVITIES_LIMIT, limit))
    records = upload.run.data.activities
    if activity_type:
        records = tuple(r for r in records if r.activity_type.lower() == activity_type.lower())
    if races_only:
        records = tuple(r for r in records if r.is_race)
    page = records[max(0, offset):max(0, offset) + limit]
    return {"total": len(records), "activities": [activity_row(r) for r in page]}


@router.get("/uploads/{upload_id}/dashboard", response_model=DashboardResponse)
def dashboard(
    period: str = Query("all"),
    view: str = Query("weekly"),
    upload: store.StoredUpload = Depends(get_upload),
):
    if period not in PERIODS:
        raise HTTPException(status_code=422, detail=f"period must be one of {list(PERIODS)}")
    if view not in VIEWS:
        raise HTTPException(status_code=422, detail=f"view must be one of {list(VIEWS)}")

    now = datetime.now().replace(second=0, microsecond=0)
    cache_key = dashboard_cache_key(upload.upload_id, period, view, now)

    def compute():
        records = upload.run.data.activities
        filtered = filter_period(records, period, now)
        stats = total_stats(filtered)
        chart = chart_series(records, period, view, now, DASHBOARD_MONTHS, DASHBOARD_WEEKS)
        return {
            "period": period,
            "view": view,
            "stats": {
                "total_activities": stats.total_activities,
                "total_distance_km": stats.total_distance_km,
                "total_duration_secs": stats.total_duration_secs,
                "total_elevation_m": stats.total_elevation_m,
            },
            "chart": chart_points(chart),
            "recent": [activity_row(r) for r in filtered[:RECENT_ACTIVITIES]],
        }

    return get_or_set(cache_key, CACHE_TTL_SECONDS, _version(upload), compute)


@router.get("/uploads/{upload_id}/weekly", response_model=WeeklyResponse)
def weekly(upload: store.StoredUpload = Depends(get_upload)):
    def compute():
        return {"weekly": chart_points(weekly_series(upload.run.data.activities))}

    return get_or_set(f"weekly:{upload.upload_id}", CACHE_TTL_SECONDS, _version(upload), compute)


@router.get("/uploads/{upload_id}/digest", response_model=DigestResponse)
def digest(upload: store.StoredUpload = Depends(get_upload)):
    def compute():
        return asdict(summarize_training_data(upload.run.data))

    return get_or_set(f"digest:{upload.upload_id}", CACHE_TTL_SECONDS, _version(upload), compute)
