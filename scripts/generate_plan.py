import argparse
import json
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.config import LLM_API_KEY, LLM_BASE_URL, LLM_MAX_TOKENS, LLM_MODEL, LLM_TEMPERATURE, LLM_TIMEOUT_SEC
from packages.errors import StructuralParseError, UpstreamGenerationError
from packages.logging_utils import setup_logging
from services.ingestion.csv_import import decode_upload
from services.planning.completion import CompletionClient
from services.planning.export import render_plan_export
from services.planning.generator import generate_training_plan
from services.planning.models import PlanRequest
from services.processing.pipeline import process


def main():
    parser = argparse.ArgumentParser(description="Generate a training plan from an activity export.")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("request_json", type=Path, help="JSON file with the plan request (target race, etc.)")
    parser.add_argument("--out", type=Path, default=None, help="Write the plain-text export here")
    parser.add_argument("--no-stream", action="store_true", default=False)
    args = parser.parse_args()

    setup_logging()
    form = PlanRequest.model_validate(json.loads(args.request_json.read_text(encoding="utf-8")))
    try:
        run = process(decode_upload(args.csv_path.read_bytes()))
    except StructuralParseError as exc:
        raise SystemExit(f"Could not parse {args.csv_path} (line {exc.line}): {exc}")

    client = CompletionClient(
        api_key=LLM_API_KEY,
        model=LLM_MODEL,
        base_url=LLM_BASE_URL,
        temperature=LLM_TEMPERATURE,
        max_tokens=LLM_MAX_TOKENS,
        timeout=LLM_TIMEOUT_SEC,
    )
    on_chunk = None if args.no_stream else (lambda text: print(text, end="", flush=True))
    try:
        plan = generate_training_plan(form, run.data, client, on_chunk=on_chunk)
    except UpstreamGenerationError as exc:
        raise SystemExit(exc.user_message)
    print()

    export = render_plan_export(form, plan, date.today())
    if args.out:
        args.out.write_text(export, encoding="utf-8")
        print(f"Plan written to {args.out}")
    elif args.no_stream:
        print(export)


if __name__ == "__main__":
    main()
