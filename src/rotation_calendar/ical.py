"""Utility to convert lesson occurrences to iCalendar (.ics) format.

Times are written as floating local times (YYYYMMDDThhmmss, no Z suffix and
no TZID parameter); the single VTIMEZONE block declares the school's fixed
UTC offset. Lines are CRLF-terminated, as RFC 5545 requires.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from icalendar import Calendar, Event, Timezone, TimezoneStandard, vDatetime

from rotation_calendar.logging import get_logger
from rotation_calendar.models import LessonOccurrence

log = get_logger(__name__)

ICAL_FILENAME = "calendar.ics"
ICAL_MEDIA_TYPE = "text/calendar"

_STAMP_FORMAT = "%Y%m%dT%H%M%S"


@dataclass(frozen=True)
class CalendarOptions:
    """Fixed values written into every generated calendar."""

    name: str = "Lesson Rotation"
    product_id: str = "-//Rotation Calendar//Lesson Rotation Generator//EN"
    uid_domain: str = "rotation-calendar.local"
    timezone_id: str = "Asia/Hong_Kong"
    timezone_name: str = "HKT"
    utc_offset: timedelta = timedelta(hours=8)


def format_stamp(moment: datetime) -> str:
    """Format a datetime as YYYYMMDDThhmmss."""
    return moment.strftime(_STAMP_FORMAT)


def _floating(moment: datetime, offset: timedelta) -> datetime:
    """Drop timezone info, converting aware datetimes to the declared offset first."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone(offset))
    return moment.replace(tzinfo=None, microsecond=0)


def _timezone_block(options: CalendarOptions) -> Timezone:
    tz = Timezone()
    tz.add("tzid", options.timezone_id)
    standard = TimezoneStandard()
    standard.add("dtstart", datetime(1970, 1, 1))
    standard.add("tzoffsetfrom", options.utc_offset)
    standard.add("tzoffsetto", options.utc_offset)
    standard.add("tzname", options.timezone_name)
    tz.add_component(standard)
    return tz


def _event(lesson: LessonOccurrence, stamp: datetime, counter: int, domain: str) -> Event:
    event = Event()
    # Unique within the calendar via the counter, across calendars via the stamp
    event.add("uid", f"{format_stamp(stamp)}_{counter}@{domain}")
    # Floating like DTSTART; add() would stamp a naive DTSTAMP as UTC
    event["dtstamp"] = vDatetime(stamp)
    event.add("dtstart", lesson.start.replace(tzinfo=None))
    event.add("dtend", lesson.end.replace(tzinfo=None))
    event.add("summary", lesson.label)
    event.add("categories", [f"Period {lesson.id}"])
    return event


def serialize(
    occurrences: Sequence[LessonOccurrence],
    generated_at: datetime,
    options: CalendarOptions | None = None,
) -> str:
    """Render lesson occurrences as a single iCalendar document.

    Args:
        occurrences: Lessons in the order they should appear.
        generated_at: Generation time, used for DTSTAMP and event UIDs.
        options: Calendar name, identifiers and timezone declaration.

    Returns:
        The iCalendar document with CRLF line endings.
    """
    options = options or CalendarOptions()
    stamp = _floating(generated_at, options.utc_offset)

    cal = Calendar()
    cal.add("prodid", options.product_id)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", options.name)
    cal.add("x-wr-timezone", options.timezone_id)
    cal.add_component(_timezone_block(options))

    for counter, lesson in enumerate(occurrences):
        cal.add_component(_event(lesson, stamp, counter, options.uid_domain))

    document = cal.to_ical().decode("utf-8")
    log.info("calendar_serialized", events=len(occurrences), bytes=len(document))
    return document
