import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, StreamingResponse

from packages.config import PLAN_RATE_LIMIT, PLAN_RATE_WINDOW_SEC
from packages.errors import UpstreamGenerationError
from packages.request_context import upload_context
from services.planning.completion import CompletionClient
from services.planning.digest import summarize_training_data
from services.planning.export import render_plan_export
from services.planning.generator import generate_training_plan
from services.planning.models import GeneratedPlan, PlanRequest
from services.planning.prompt import build_prompt
from .. import store
from ..deps import get_completion_client, get_upload
from ..rate_limit import check_rate_limit


router = APIRouter()

logger = logging.getLogger("trainlog.api")


def _enforce_rate_limit(request: Request) -> None:
    client_ip = request.client.host if request.client else "unknown"
    if not check_rate_limit(f"plan:{client_ip}", PLAN_RATE_LIMIT, PLAN_RATE_WINDOW_SEC):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many plan requests; try again later",
        )


def _stream_plan(form: PlanRequest, upload: store.StoredUpload, client: CompletionClient) -> StreamingResponse:
    # Fail before the 200 status line is sent.
    client.ensure_configured()
    messages = build_prompt(form, summarize_training_data(upload.run.data))

    def chunks():
        try:
            yield from client.stream(messages)
        except UpstreamGenerationError as exc:
            logger.warning("plan_stream_aborted upload_id=%s %s", upload.upload_id, exc)
            yield f"\n[error] {exc.user_message}\n"

    return StreamingResponse(chunks(), media_type="text/plain")


@router.post("/uploads/{upload_id}/plan", response_model=GeneratedPlan)
def create_plan(
    form: PlanRequest,
    request: Request,
    stream: bool = False,
    upload: store.StoredUpload = Depends(get_upload),
    client: CompletionClient = Depends(get_completion_client),
):
    _enforce_rate_limit(request)
    if stream:
        return _stream_plan(form, upload, client)
    with upload_context(upload.upload_id):
        return generate_training_plan(form, upload.run.data, client)


@router.post("/uploads/{upload_id}/plan/export", response_class=PlainTextResponse)
def export_plan(
    form: PlanRequest,
    request: Request,
    upload: store.StoredUpload = Depends(get_upload),
    client: CompletionClient = Depends(get_completion_client),
):
    _enforce_rate_limit(request)
    with upload_context(upload.upload_id):
        plan = generate_training_plan(form, upload.run.data, client)
    return PlainTextResponse(
        render_plan_export(form, plan, date.today()),
        headers={"content-disposition": 'attachment; filename="training_plan.txt"'},
    )
