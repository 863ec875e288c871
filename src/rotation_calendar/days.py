"""Day resolution - places calendar CSV rows in the lesson rotation.

The school runs an 18-day macro-cycle built from two 9-day micro-cycles that
reuse the same day names ("Day 1A" .. "Day 9A"). A row is in the second half
of the macro-cycle once the first half has reached its last day, in which
case its rotation index is offset by 9.

CSV layout (one header line, then one line per school day):

    Name,Date,Start,End,Notes,Details,Type
    "Day 3A","01/08/2024",,,,,
"""

import csv
import io
from collections.abc import Iterable, Iterator, Sequence
from datetime import date

from rotation_calendar.errors import InvalidDateFormat, MalformedRow, UnknownRotationDay
from rotation_calendar.logging import get_logger
from rotation_calendar.models import MICRO_CYCLE_LENGTH, CalendarDay, CalendarRow

log = get_logger(__name__)

_QUOTES = "\"' \t"


def parse_rows(text: str) -> list[CalendarRow]:
    """Parse the calendar CSV into rows, skipping the header and blank lines.

    Raises:
        MalformedRow: If a line has fewer than the name and date fields.
    """
    rows: list[CalendarRow] = []
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    next(reader, None)  # header
    for fields in reader:
        if not fields or all(not f.strip() for f in fields):
            continue
        if len(fields) < 2:
            raise MalformedRow(reader.line_num, ",".join(fields))
        rows.append(CalendarRow(name=fields[0], date=fields[1], extra=fields[2:]))

    log.debug("rows_parsed", rows=len(rows))
    return rows


def parse_us_date(value: str) -> date:
    """Parse an MM/DD/YYYY date.

    Raises:
        InvalidDateFormat: On non-numeric parts, wrong part count or impossible dates.
    """
    parts = [p.strip() for p in value.split("/")]
    # isdigit() alone accepts characters like superscripts that int() rejects
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidDateFormat(value)
    month, day, year = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDateFormat(value) from None


def resolve(row: CalendarRow, day_names: Sequence[str], first_half: bool) -> CalendarDay:
    """Resolve a calendar row into a CalendarDay.

    Args:
        row: Parsed CSV row.
        day_names: Rotation-day names from the template, in cycle order.
        first_half: Whether the row falls in the first half of the macro-cycle.

    Raises:
        UnknownRotationDay: If the row's day name is not in day_names.
        InvalidDateFormat: If the row's date is not MM/DD/YYYY.
    """
    name = row.name.strip(_QUOTES)
    try:
        rotation_index = list(day_names).index(name)
    except ValueError:
        raise UnknownRotationDay(name) from None
    if not first_half:
        rotation_index += MICRO_CYCLE_LENGTH

    day = parse_us_date(row.date.strip(_QUOTES))
    return CalendarDay(
        rotation_index=rotation_index,
        weekday_index=day.weekday(),
        date=day,
    )


def ends_micro_cycle(rotation_index: int) -> bool:
    """True for the last day of either half (index 8 or 17)."""
    return rotation_index % MICRO_CYCLE_LENGTH == MICRO_CYCLE_LENGTH - 1


def resolve_days(
    rows: Iterable[CalendarRow], day_names: Sequence[str]
) -> Iterator[CalendarDay]:
    """Resolve rows in order, tracking which half of the macro-cycle applies.

    Starts in the first half and flips after every row that lands on the
    last day of a micro-cycle.
    """
    first_half = True
    for row in rows:
        day = resolve(row, day_names, first_half)
        log.debug(
            "day_resolved",
            date=day.date.isoformat(),
            rotation_index=day.rotation_index,
            weekday_index=day.weekday_index,
        )
        if ends_micro_cycle(day.rotation_index):
            first_half = not first_half
        yield day
