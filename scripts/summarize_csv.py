import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.errors import StructuralParseError
from packages.logging_utils import setup_logging
from services.ingestion.csv_import import decode_upload
from services.planning.digest import format_duration, format_pace, summarize_training_data
from services.processing.aggregate import weekly_series
from services.processing.pipeline import process


def main():
    parser = argparse.ArgumentParser(description="Summarize an activity export CSV.")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("--json", action="store_true", default=False, help="Print the prompt digest as JSON")
    parser.add_argument("--weeks", type=int, default=0, help="Also print the last N weekly buckets")
    args = parser.parse_args()

    setup_logging()
    if not args.csv_path.exists():
        raise SystemExit(f"File not found: {args.csv_path}")
    try:
        run = process(decode_upload(args.csv_path.read_bytes()))
    except StructuralParseError as exc:
        raise SystemExit(f"Could not parse {args.csv_path} (line {exc.line}): {exc}")

    data = run.data
    if args.json:
        print(json.dumps(asdict(summarize_training_data(data)), indent=2))
        return

    stats = data.total_stats
    print(f"Rows: {run.rows_read} read, {run.rows_admitted} admitted, {run.rows_dropped} dropped")
    print(f"Activities: {stats.total_activities}")
    print(f"Distance: {stats.total_distance_km:.1f} km (longest {stats.longest_distance_km:.1f} km)")
    print(f"Time: {format_duration(stats.total_duration_secs)}")
    print(f"Elevation: {stats.total_elevation_m:.0f} m")
    print(f"Avg pace: {format_pace(stats.avg_pace_min_per_km)}  best: {format_pace(stats.best_pace_min_per_km)}")
    print(f"Races: {len(data.races)}")
    print("Years:")
    for year in data.yearly_chart_data:
        print(
            f"  {year.year}: {year.distance_km:.0f} km, {year.activity_count} activities, "
            f"{year.elevation_m:.0f} m, {format_pace(year.avg_pace_min_per_km)}"
        )
    if args.weeks > 0:
        print("Weeks:")
        for week in weekly_series(data.activities)[-args.weeks:]:
            print(f"  {week.key}: {week.distance_km:.1f} km, {week.activity_count} activities")


if __name__ == "__main__":
    main()
