"""Process one uploaded export: raw text -> rows -> working set -> aggregates."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from packages.errors import StructuralParseError
from packages.metrics import inc, observe
from services.ingestion.csv_import import read_activity_rows

from .aggregate import ActivitiesData, build_activities_data
from .normalize import normalize_rows

logger = logging.getLogger("trainlog.pipeline")


@dataclass(frozen=True)
class PipelineRun:
    rows_read: int
    rows_admitted: int
    duration_sec: float
    data: ActivitiesData

    @property
    def rows_dropped(self) -> int:
        return self.rows_read - self.rows_admitted


def process(text: str) -> PipelineRun:
    """Run the full parse -> normalize -> aggregate pass.

    Raises StructuralParseError when the text is not a well-formed export; row
    level problems only reduce the admitted count.
    """
    started = time.perf_counter()
    inc("pipeline_runs_total")
    try:
        rows = read_activity_rows(text)
    except StructuralParseError as exc:
        inc("pipeline_failures_total")
        logger.warning("pipeline_structural_error line=%s %s", exc.line, exc)
        raise

    records = normalize_rows(rows)
    data = build_activities_data(records)
    duration = time.perf_counter() - started

    inc("pipeline_rows_read_total", len(rows))
    inc("pipeline_rows_admitted_total", len(records))
    inc("pipeline_rows_dropped_total", len(rows) - len(records))
    observe("pipeline_duration_seconds", duration)
    logger.info(
        "pipeline_ok rows=%d admitted=%d years=%d months=%d races=%d %.1fms",
        len(rows),
        len(records),
        len(data.yearly_chart_data),
        len(data.monthly_progression),
        len(data.races),
        duration * 1000,
    )
    return PipelineRun(
        rows_read=len(rows),
        rows_admitted=len(records),
        duration_sec=duration,
        data=data,
    )
