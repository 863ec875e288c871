from pathlib import Path

import pytest

from rotation_calendar.models import RotationSlot, RotationTemplate, TimeRange, TimeTable

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

DAY_NAMES = [f"Day {n}A" for n in range(1, 10)]

CSV_HEADER = "Name,Date,Start,End,Notes,Details,Type"


def make_range(start_hour, start_minute, end_hour, end_minute) -> TimeRange:
    return TimeRange(
        start_hour=start_hour,
        start_minute=start_minute,
        end_hour=end_hour,
        end_minute=end_minute,
    )


def make_csv(*rows: tuple[str, str]) -> str:
    """Calendar CSV text with the standard header and (name, date) rows."""
    lines = [CSV_HEADER]
    lines += [f'"{name}","{date}","","","","","Rotation Day"' for name, date in rows]
    return "\n".join(lines) + "\n"


@pytest.fixture
def template() -> RotationTemplate:
    """dp grade: 18 rotation days of two lessons each.

    Rotation day index d holds lessons str(d % 8 + 1) and str((d + 1) % 8 + 1),
    except index 2 ("Day 3A") which opens with a special assembly.
    """
    days = [
        [RotationSlot(id=str(d % 8 + 1)), RotationSlot(id=str((d + 1) % 8 + 1))]
        for d in range(18)
    ]
    days[2] = [RotationSlot(id="A", label="Assembly", special=True), RotationSlot(id="4")]
    return RotationTemplate(days=DAY_NAMES, grades={"dp": days})


@pytest.fixture
def timetable() -> TimeTable:
    """dp grade: two lessons Monday to Friday, nothing at weekends."""
    day = [make_range(8, 30, 9, 15), make_range(9, 20, 10, 5)]
    return TimeTable(
        days=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        grades={"dp": [day for _ in range(5)]},
    )


@pytest.fixture
def choices() -> dict[str, str]:
    return {str(n): f"Lesson {n}" for n in range(1, 9)}
