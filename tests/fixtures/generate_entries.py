#!/usr/bin/env python3
"""
Generate realistic day records for a date range.

Used by the tests, and runnable on its own to write a sample import workbook:

    uv run python tests/fixtures/generate_entries.py --start 2026-01-23 --end 2026-02-20
"""

import argparse
import random
import sys
from datetime import date, timedelta
from pathlib import Path

from faker import Faker

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from core.overtime import recompute
from core.timecalc import seconds_to_time
from models.entries import DayRecord, DayType, PayPeriod, TimeInterval

NOTES = ["Client meeting", "Training", "Release day", "Team offsite", ""]


def random_time(rng: random.Random, earliest: int, latest: int) -> str:
    """Random whole-minute time between two second offsets."""
    minutes = rng.randint(earliest // 60, latest // 60)
    return seconds_to_time(minutes * 60)


def generate_workday(day: date, rng: random.Random, fake: Faker) -> DayRecord:
    """One Regular day: check-in 08:00-09:30, check-out 16:30-19:30, usually a lunch break."""
    primary = TimeInterval(
        time_in=random_time(rng, 8 * 3600, 9 * 3600 + 1800),
        time_out=random_time(rng, 16 * 3600 + 1800, 19 * 3600 + 1800),
    )
    breaks = []
    if rng.random() < 0.7:
        breaks.append(TimeInterval(time_in="13:00:00", time_out="13:30:00"))
    if rng.random() < 0.2:
        start = rng.randint(15 * 60, 15 * 60 + 30) * 60
        breaks.append(
            TimeInterval(time_in=seconds_to_time(start), time_out=seconds_to_time(start + 900))
        )
    notes = fake.random_element(NOTES)
    return recompute(DayRecord(date=day, primary=primary, breaks=tuple(breaks), notes=notes))


def generate_records(start: date, end: date, seed: int = 0) -> list[DayRecord]:
    """
    Weekday records for every date in [start, end].

    About one weekday in ten is a vacation or sick day; weekends are skipped.
    """
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)

    records = []
    day = start
    while day <= end:
        if day.weekday() < 5:
            roll = rng.random()
            if roll < 0.05:
                records.append(recompute(DayRecord(date=day, type=DayType.VACATION)))
            elif roll < 0.1:
                records.append(recompute(DayRecord(date=day, type=DayType.SICK_LEAVE)))
            else:
                records.append(generate_workday(day, rng, fake))
        day += timedelta(days=1)
    return records


if __name__ == "__main__":
    from services.reports import export_periods
    from services.periods import new_period

    parser = argparse.ArgumentParser(description="Write a sample timesheet workbook")
    parser.add_argument("--start", type=date.fromisoformat, required=True)
    parser.add_argument("--end", type=date.fromisoformat, required=True)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--output-dir", type=Path, default=Path(__file__).parent)
    args = parser.parse_args()

    period: PayPeriod = new_period(args.start, args.end)
    records = generate_records(args.start, args.end, args.seed)
    print(f"Generated {len(records)} records for {period.label}")
    export_periods(records, [period], output_dir=args.output_dir)
