from __future__ import annotations

from datetime import date

from .models import GeneratedPlan, PlanRequest


def render_plan_export(form: PlanRequest, plan: GeneratedPlan, generated_on: date) -> str:
    race = form.target_race
    title = f"TRAINING PLAN FOR {form.athlete.upper()}" if form.athlete else "TRAINING PLAN"
    additional = "\n".join(
        f"- {r.name} on {r.date.isoformat() if r.date else 'TBD'}" for r in form.additional_races
    ) or "- None"
    insights = "\n\n".join(plan.insights)
    phases = "\n\n".join(f"{p.name} ({p.duration}): {p.focus}" for p in plan.plan.phases)
    return f"""# {title}
Generated on: {generated_on.isoformat()}

## MAIN RACE
{race.name} on {race.date.isoformat() if race.date else 'TBD'}
{race.description}

## ADDITIONAL RACES
{additional}

## INSIGHTS FROM TRAINING DATA
{insights}

## TRAINING PLAN OVERVIEW
{plan.plan.overview}

## TRAINING PHASES
{phases}

## DETAILED TRAINING PLAN
{plan.raw_response}
"""
