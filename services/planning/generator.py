from __future__ import annotations

import logging
from typing import Callable, Optional

from services.processing.aggregate import ActivitiesData

from .completion import CompletionClient
from .digest import summarize_training_data
from .models import GeneratedPlan, PlanRequest
from .plan_parser import parse_plan_response
from .prompt import build_prompt

logger = logging.getLogger("trainlog.planning")


def generate_training_plan(
    form: PlanRequest,
    data: ActivitiesData,
    client: CompletionClient,
    on_chunk: Optional[Callable[[str], None]] = None,
) -> GeneratedPlan:
    """Digest -> prompt -> completion -> parsed plan.

    UpstreamGenerationError from the client propagates unchanged; it is not retried.
    """
    digest = summarize_training_data(data)
    messages = build_prompt(form, digest)
    logger.info(
        "plan_requested activities=%d weeks=%d streaming=%s",
        digest.overview.total_activities,
        form.plan_weeks,
        on_chunk is not None,
    )
    text = client.complete(messages, on_chunk=on_chunk)
    return parse_plan_response(text)
