"""Lesson rotation calendar generator.

Turns a school's rotating timetable (day-by-day CSV calendar, per-grade
rotation template, per-weekday lesson times) into an iCalendar export.
"""

from rotation_calendar.generator import CalendarExport, CalendarGenerator, generate_calendar
from rotation_calendar.ical import CalendarOptions, serialize
from rotation_calendar.models import (
    CalendarDay,
    CalendarRow,
    LessonOccurrence,
    RotationSlot,
    RotationTemplate,
    TimeRange,
    TimeTable,
)
from rotation_calendar.schedule import ScheduleBuilder, build_schedule

__all__ = [
    "CalendarDay",
    "CalendarExport",
    "CalendarGenerator",
    "CalendarOptions",
    "CalendarRow",
    "LessonOccurrence",
    "RotationSlot",
    "RotationTemplate",
    "ScheduleBuilder",
    "TimeRange",
    "TimeTable",
    "build_schedule",
    "generate_calendar",
    "serialize",
]
