"""Best-effort extraction of insights and plan structure from a free-text reply.

The patterns are heuristic. Missing phases or weeks fall back to fixed defaults
and any unexpected failure returns the error placeholder instead of raising.
"""
from __future__ import annotations

import logging
import re
from typing import List

from .models import GeneratedPlan, PlanPhase, TrainingPlan, WeekSchedule

logger = logging.getLogger("trainlog.planning")

DEFAULT_PHASES = (
    PlanPhase(name="Base Building", duration="4 weeks", focus="Aerobic endurance"),
    PlanPhase(name="Build Phase", duration="6 weeks", focus="Increased intensity"),
    PlanPhase(name="Peak Phase", duration="4 weeks", focus="Race-specific training"),
    PlanPhase(name="Taper", duration="2 weeks", focus="Recovery and preparation"),
)
DEFAULT_WEEKLY_SCHEDULE = (
    WeekSchedule(week=1, details="Example weekly schedule will be generated based on your data"),
)

_SECTION_SPLIT = re.compile(r"(?=\n\s*#)")
_INSIGHTS_HEADING = re.compile(r"insights|observations|analysis", re.I)
_OVERVIEW_HEADING = re.compile(r"overview|plan summary", re.I)
_OVERVIEW_TITLE_LINE = re.compile(r".*?overview.*?\n", re.I)
_PHASES_HEADING = re.compile(r"phases|periodization", re.I)
_WEEKLY_HEADING = re.compile(r"weekly schedules?|week-by-week|weekly plan", re.I)
_INSIGHT_ITEM = re.compile(r"\n\s*(?:[-*]|\d+\.)\s")
_PHASE_ITEM = re.compile(
    r"[*-]?\s*(Phase \d+|[A-Za-z]+ Phase|[A-Za-z]+ Period):\**\s*([^:\n]+)(?::|\n)([^*\n-]*)"
)
_WEEKS = re.compile(r"(\d+)\s*weeks?", re.I)
_WEEK_ITEM = re.compile(r"Week\s*(\d+)\s*:(.*?)(?=Week\s*\d+\s*:|\Z)", re.S)

MIN_INSIGHT_CHARS = 10


def error_plan(raw_response: str) -> GeneratedPlan:
    return GeneratedPlan(
        insights=["Error parsing insights from the AI response."],
        plan=TrainingPlan(
            overview="There was an error processing the AI-generated training plan.",
            phases=[PlanPhase(name="Error", duration="N/A", focus="Please try again")],
            weekly_schedule=[WeekSchedule(week=1, details="Error generating schedule")],
        ),
        raw_response=raw_response or "No response text",
    )


def _find_section(sections: List[str], pattern: re.Pattern) -> str:
    for section in sections:
        if pattern.search(section):
            return section
    return ""


def _insights(section: str) -> List[str]:
    items = _INSIGHT_ITEM.split(section)[1:]
    return [item.strip() for item in items if len(item.strip()) > MIN_INSIGHT_CHARS]


def _overview(section: str) -> str:
    return _OVERVIEW_TITLE_LINE.sub("", section, count=1).strip()


def _phases(section: str) -> List[PlanPhase]:
    phases = []
    for match in _PHASE_ITEM.finditer(section):
        raw_duration = match.group(2).strip()
        weeks = _WEEKS.search(raw_duration)
        phases.append(
            PlanPhase(
                name=match.group(1).strip(),
                duration=f"{weeks.group(1)} weeks" if weeks else raw_duration,
                focus=match.group(3).strip(),
            )
        )
    return phases


def _weekly(section: str) -> List[WeekSchedule]:
    return [
        WeekSchedule(week=int(match.group(1)), details=re.sub(r"\s*\n+\s*", " ", match.group(2)).strip())
        for match in _WEEK_ITEM.finditer(section)
    ]


def parse_plan_response(text: str) -> GeneratedPlan:
    try:
        sections = _SECTION_SPLIT.split(text or "")
        phases = _phases(_find_section(sections, _PHASES_HEADING))
        weekly = _weekly(_find_section(sections, _WEEKLY_HEADING))
        return GeneratedPlan(
            insights=_insights(_find_section(sections, _INSIGHTS_HEADING)),
            plan=TrainingPlan(
                overview=_overview(_find_section(sections, _OVERVIEW_HEADING)),
                phases=phases or list(DEFAULT_PHASES),
                weekly_schedule=weekly or list(DEFAULT_WEEKLY_SCHEDULE),
            ),
            raw_response=text,
        )
    except Exception:
        logger.exception("plan_parse_failed chars=%d", len(text or ""))
        return error_plan(text)
