from datetime import date

import pytest
from openai import OpenAIError

from packages.errors import UpstreamGenerationError
from packages.metrics import counter
from services.planning.completion import CompletionClient
from services.planning.digest import summarize_training_data
from services.planning.export import render_plan_export
from services.planning.generator import generate_training_plan
from services.planning.models import PlanRequest
from services.planning.plan_parser import parse_plan_response
from services.planning.prompt import SYSTEM_PROMPT, build_prompt
from services.processing.pipeline import process
from tests.fixtures.build_fixture_csv import SAMPLE_REPLY, build_fake_openai, build_fixture_csv, plan_form


@pytest.fixture()
def data():
    return process(build_fixture_csv()).data


def _client(fake):
    return CompletionClient(api_key=None, model="test-model", client=fake)


def test_prompt_embeds_form_and_digest(data):
    form = PlanRequest.model_validate(plan_form())
    messages = build_prompt(form, summarize_training_data(data))

    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == SYSTEM_PROMPT
    user = messages[1]["content"]
    assert "Mountain 50K on 2025-09-20" in user
    assert "2025-07-01 to 2025-07-10 in Lisbon (Note: hotel gym only)" in user
    assert "Training focus areas: climbing" in user
    assert "5 activities, 131km total distance" in user
    assert "December 2024 (60km, 500m elevation)" in user
    assert "12 weeks of training" in user
    assert "Week <n>:" in user
    # Undated additional races are left out of the prompt.
    assert "No additional races planned." in user


def test_prompt_lists_dated_additional_races(data):
    form = PlanRequest.model_validate(
        plan_form(additional_races=[{"name": "Hill 20K", "date": "2025-06-01", "description": "B race"}])
    )
    user = build_prompt(form, summarize_training_data(data))[1]["content"]
    assert "Additional races: Hill 20K on 2025-06-01 (B race)" in user


def test_complete_without_streaming():
    fake = build_fake_openai(text="full reply")
    assert _client(fake).complete([{"role": "user", "content": "hi"}]) == "full reply"
    call = fake.chat.completions.calls[0]
    assert call["model"] == "test-model"
    assert call["stream"] is False


def test_complete_streams_chunks_to_callback():
    fake = build_fake_openai(chunk_size=7)
    chunks = []
    text = _client(fake).complete([{"role": "user", "content": "hi"}], on_chunk=chunks.append)
    assert text == SAMPLE_REPLY
    assert len(chunks) > 1
    assert "".join(chunks) == SAMPLE_REPLY
    assert fake.chat.completions.calls[0]["stream"] is True


def test_complete_requires_configuration():
    client = CompletionClient(api_key=None, model="test-model")
    assert not client.configured
    with pytest.raises(UpstreamGenerationError) as exc:
        client.complete([{"role": "user", "content": "hi"}])
    assert "not configured" in exc.value.user_message


def test_upstream_failure_is_wrapped():
    before = counter("completion_failures_total")
    fake = build_fake_openai(error=OpenAIError("connection reset"))
    with pytest.raises(UpstreamGenerationError) as exc:
        _client(fake).complete([{"role": "user", "content": "hi"}])
    assert exc.value.user_message.startswith("Failed to generate training plan")
    assert counter("completion_failures_total") == before + 1


def test_empty_reply_is_upstream_failure():
    with pytest.raises(UpstreamGenerationError):
        _client(build_fake_openai(text="   ")).complete([{"role": "user", "content": "hi"}])


def test_generate_training_plan(data):
    form = PlanRequest.model_validate(plan_form())
    fake = build_fake_openai()
    plan = generate_training_plan(form, data, _client(fake))
    assert [p.name for p in plan.plan.phases] == ["Base Phase", "Build Phase", "Taper Period"]
    assert len(plan.insights) == 3
    sent = fake.chat.completions.calls[0]["messages"]
    assert "Mountain 50K" in sent[1]["content"]


def test_plain_text_export():
    form = PlanRequest.model_validate(plan_form())
    plan = parse_plan_response(SAMPLE_REPLY)
    text = render_plan_export(form, plan, date(2025, 5, 10))

    assert text.startswith("# TRAINING PLAN FOR SAM\nGenerated on: 2025-05-10")
    assert "## MAIN RACE\nMountain 50K on 2025-09-20" in text
    assert "- Tune-up Half on TBD" in text
    assert "Base Phase (4 weeks): Aerobic volume" in text
    assert text.rstrip().endswith("two strength sessions")


def test_export_without_additional_races():
    form = PlanRequest.model_validate(plan_form(additional_races=[], athlete=""))
    text = render_plan_export(form, parse_plan_response(SAMPLE_REPLY), date(2025, 5, 10))
    assert text.startswith("# TRAINING PLAN\n")
    assert "## ADDITIONAL RACES\n- None" in text
