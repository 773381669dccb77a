from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field


class RaceInfo(BaseModel):
    name: str = ""
    date: Optional[dt.date] = None
    description: str = ""


class TravelPeriod(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    location: str = ""
    notes: str = ""


class TrainingPreferences(BaseModel):
    focus_areas: str = ""
    constraints: str = ""
    notes: str = ""


class PlanRequest(BaseModel):
    athlete: str = ""
    target_race: RaceInfo
    additional_races: List[RaceInfo] = Field(default_factory=list)
    travel_schedules: List[TravelPeriod] = Field(default_factory=list)
    training_preferences: TrainingPreferences = Field(default_factory=TrainingPreferences)
    plan_weeks: int = Field(16, ge=1, le=52)


class PlanPhase(BaseModel):
    name: str
    duration: str
    focus: str


class WeekSchedule(BaseModel):
    week: int
    details: str


class TrainingPlan(BaseModel):
    overview: str = ""
    phases: List[PlanPhase] = Field(default_factory=list)
    weekly_schedule: List[WeekSchedule] = Field(default_factory=list)


class GeneratedPlan(BaseModel):
    insights: List[str] = Field(default_factory=list)
    plan: TrainingPlan = Field(default_factory=TrainingPlan)
    raw_response: str = ""
