import csv
import io
from types import SimpleNamespace

HEADER = [
    "Activity ID",
    "Activity Date",
    "Activity Name",
    "Activity Type",
    "Activity Description",
    "Elapsed Time",
    "Distance",
    "Elevation Gain",
    "Filename",
]

# 5 admitted rows over 2023-2025, one unparseable date, one zero distance.
FIXTURE_ROWS = [
    ["1", "April 13, 2025, 10:30:00 AM", "Morning Run", "Run", "", "3600", "10", "200", "activities/1.fit"],
    ["2", "2025-04-20 07:00:00", "Long Trail", "Run", "Hilly loop", "10800", "25", "1200", "activities/2.fit"],
    ["3", "3/2/2025, 6:45:00 PM", "Spring Race 21K", "Run", "", "5400", "21.1", "150", "activities/3.fit"],
    ["4", "December 30, 2024, 9:00:00 AM", "Year End Ride", "Ride", "", "7200", "60", "500", "activities/4_race_.fit"],
    ["5", "June 1, 2023, 6:00:00 AM", "Hike", "Hike", "", "14400", "15", "1500", ""],
    ["6", "not a date", "Broken", "Run", "", "1800", "5", "10", ""],
    ["7", "May 5, 2025, 5:00:00 PM", "Treadmill", "Run", "", "1800", "0", "0", ""],
]

SAMPLE_REPLY = """Here is your plan.

# 1. INSIGHTS
- Your aerobic base is solid with steady monthly volume.
- Vertical gain is low compared with the target race profile.
- Long runs above 25km are rare.

# 2. TRAINING PLAN OVERVIEW
This plan builds volume first, then adds race-specific climbing.

# 3. TRAINING PHASES
Base Phase: 4 weeks: Aerobic volume
Build Phase: 6 weeks: Vertical strength
Taper Period: 2 weeks: Freshen up

# 4. WEEKLY SCHEDULES
Week 1: Easy 40km, 1500m vert
Week 2: Easy 45km,
two strength sessions
"""


def build_fixture_csv(rows=None, header=None) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header or HEADER)
    for row in FIXTURE_ROWS if rows is None else rows:
        writer.writerow(row)
    return buf.getvalue()


def build_fixture_bytes(rows=None, header=None) -> bytes:
    return build_fixture_csv(rows, header).encode("utf-8")


def activity_row(date, distance, elapsed="3600", elevation="0", name="Run", filename=""):
    return {
        "Activity Date": date,
        "Activity Name": name,
        "Activity Type": "Run",
        "Elapsed Time": elapsed,
        "Distance": distance,
        "Elevation Gain": elevation,
        "Filename": filename,
    }


def plan_form(**overrides) -> dict:
    form = {
        "athlete": "Sam",
        "target_race": {"name": "Mountain 50K", "date": "2025-09-20", "description": "50km with 3000m climbing"},
        "additional_races": [{"name": "Tune-up Half", "date": None, "description": ""}],
        "travel_schedules": [
            {"start_date": "2025-07-01", "end_date": "2025-07-10", "location": "Lisbon", "notes": "hotel gym only"}
        ],
        "training_preferences": {"focus_areas": "climbing", "constraints": "6h per week", "notes": ""},
        "plan_weeks": 12,
    }
    form.update(overrides)
    return form


class FakeCompletions:
    """Stands in for client.chat.completions; records every create() call."""

    def __init__(self, text=SAMPLE_REPLY, error=None, chunk_size=40):
        self.text = text
        self.error = error
        self.chunk_size = chunk_size
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            return iter(self._chunks())
        message = SimpleNamespace(content=self.text)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    def _chunks(self):
        out = [SimpleNamespace(choices=[])]
        for i in range(0, len(self.text), self.chunk_size):
            delta = SimpleNamespace(content=self.text[i:i + self.chunk_size])
            out.append(SimpleNamespace(choices=[SimpleNamespace(delta=delta)]))
        return out


def build_fake_openai(text=SAMPLE_REPLY, error=None, chunk_size=40):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(text, error, chunk_size)))
