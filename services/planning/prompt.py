"""Build chat messages for plan generation from form inputs and the training digest."""
from __future__ import annotations

from typing import Dict, List

from .digest import TrainingDigest
from .models import PlanRequest

SYSTEM_PROMPT = (
    "You are an expert endurance and mountain-running coach. Generate detailed, "
    "specific periodized training plans based on the athlete's recorded training "
    "data and race goals."
)

RECENT_LONG_ACTIVITIES = 5
RECENT_CONSISTENCY_MONTHS = 6


def _race_line(label: str, form: PlanRequest) -> str:
    race = form.target_race
    when = race.date.isoformat() if race.date else "an unscheduled date"
    line = f"{label}: {race.name or 'Unnamed race'} on {when}."
    if race.description:
        line += f" {race.description}"
    return line


def _additional_races(form: PlanRequest) -> str:
    races = [r for r in form.additional_races if r.name and r.date]
    if not races:
        return "No additional races planned."
    parts = []
    for r in races:
        part = f"{r.name} on {r.date.isoformat()}"
        if r.description:
            part += f" ({r.description})"
        parts.append(part)
    return "Additional races: " + "; ".join(parts)


def _travel(form: PlanRequest) -> str:
    periods = [t for t in form.travel_schedules if t.start_date and t.end_date]
    if not periods:
        return "No travel or vacation periods to consider."
    parts = []
    for t in periods:
        part = f"{t.start_date.isoformat()} to {t.end_date.isoformat()} in {t.location or 'unspecified location'}"
        if t.notes:
            part += f" (Note: {t.notes})"
        parts.append(part)
    return "Travel/vacation periods to accommodate: " + "; ".join(parts)


def _preferences(form: PlanRequest) -> str:
    prefs = form.training_preferences
    return "\n".join(
        [
            f"Training focus areas: {prefs.focus_areas or 'Not specified'}",
            f"Time constraints: {prefs.constraints or 'Not specified'}",
            f"Additional notes: {prefs.notes or 'None'}",
        ]
    )


def render_training_data(digest: TrainingDigest) -> str:
    o = digest.overview
    lines = [
        "TRAINING DATA SUMMARY:",
        "",
        f"Overview: {o.total_activities} activities, {o.total_distance_km}km total distance, "
        f"{o.total_elevation_m}m total elevation gain from {o.data_timespan}.",
        "",
        f"Peak training months: {', '.join(digest.peak_months) or 'None'}",
        "",
        "Yearly progression:",
    ]
    for year, stats in sorted(digest.yearly_stats.items()):
        lines.append(
            f"{year}: {stats.total_distance_km}km, {stats.total_activities} activities, "
            f"{stats.total_elevation_m}m elevation, avg pace {stats.avg_pace}"
        )
    lines += ["", "Longest activities:"]
    for a in digest.long_activities[:RECENT_LONG_ACTIVITIES]:
        lines.append(f"{a.date}: {a.distance_km}km, {a.elevation_m}m elevation, {a.duration} ({a.pace})")
    lines += ["", f"Recent training consistency (last {RECENT_CONSISTENCY_MONTHS} months):"]
    lines += digest.consistency_by_month[-RECENT_CONSISTENCY_MONTHS:]
    return "\n".join(lines)


def build_prompt(form: PlanRequest, digest: TrainingDigest) -> List[Dict[str, str]]:
    athlete = form.athlete or "the athlete"
    weeks = form.plan_weeks
    user_prompt = f"""I need you to create a detailed training plan for {athlete}, preparing for the target race below.

ATHLETE INFORMATION:
{_race_line("Primary Goal Race", form)}
{_additional_races(form)}
{_travel(form)}
{_preferences(form)}

{render_training_data(digest)}

METHODOLOGY REQUIREMENTS:
- Structure the plan with distinct Base, Specific and Peak/Taper periods
- Emphasize Zone 1 and 2 aerobic base building (60-80% of total volume)
- Include vertical gain/loss work matched to the target race profile
- Progress training load gradually (no more than about 10% per week)
- Include strength training for legs and core stability
- Place back-to-back long days where the race demands multi-day effort

Based on the above information, please provide:

1. INSIGHTS: 5-7 key insights from the past training data, covering strengths, weaknesses and endurance capacity relevant to the target race.

2. TRAINING PLAN OVERVIEW: A structured plan summary.

3. TRAINING PHASES: The periodization phases, each as "<Name> Phase: <duration>: <focus>".

4. WEEKLY SCHEDULES: {weeks} weeks of training leading up to the race, each starting with "Week <n>:", including weekly distance and elevation targets, zone-specific workouts, strength sessions and recovery.

Please adapt the plan to respect the travel periods and use the additional races as preparation.

Format your response with markdown headings (#) for each numbered section."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]
