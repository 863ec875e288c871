"""Pydantic models for rotation schedule data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
The template and time table models accept the on-disk JSON documents directly:

    {"days": ["Day 1A", ...], "pyp": [[...], ...], "myp": [...], "dp": [...]}

where every key besides "days" is a grade.
"""

from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

from rotation_calendar.errors import TemplateMismatch, UnknownGrade

# An 18-day macro-cycle is two 9-day micro-cycles back to back.
MICRO_CYCLE_LENGTH = 9

LessonChoices = Mapping[str, str]


class TimeRange(BaseModel):
    """Start and end of one lesson slot within a day."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start_hour: int = Field(alias="startHours", ge=0, le=23)
    start_minute: int = Field(alias="startMinutes", ge=0, le=59)
    end_hour: int = Field(alias="endHours", ge=0, le=23)
    end_minute: int = Field(alias="endMinutes", ge=0, le=59)

    @model_validator(mode="after")
    def check_start_before_end(self) -> "TimeRange":
        if (self.start_hour, self.start_minute) >= (self.end_hour, self.end_minute):
            raise ValueError(
                f"lesson must start before it ends "
                f"({self.start_hour:02d}:{self.start_minute:02d} >= "
                f"{self.end_hour:02d}:{self.end_minute:02d})"
            )
        return self

    @property
    def start(self) -> time:
        return time(self.start_hour, self.start_minute)

    @property
    def end(self) -> time:
        return time(self.end_hour, self.end_minute)

    def bounds(self, day: date) -> tuple[datetime, datetime]:
        """Combine a calendar date with this range into start/end datetimes."""
        return datetime.combine(day, self.start), datetime.combine(day, self.end)


class RotationSlot(BaseModel):
    """One lesson position of a rotation day."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str  # Lesson identifier, e.g. "3" or "A"
    label: str = ""  # Fixed label, only used when special
    special: bool = False  # Label comes from configuration, not user choice
    fixed_time: TimeRange | None = Field(default=None, alias="fixedTime")


class CalendarRow(BaseModel):
    """A single data line of the school calendar CSV.

    CSV headers are Name, Date, Start, End, Notes, Details, Type; only the
    first two matter for scheduling.
    """

    name: str  # Rotation-day label, e.g. "Day 3A"
    date: str  # US format MM/DD/YYYY
    extra: list[str] = Field(default_factory=list)


class CalendarDay(BaseModel):
    """A calendar date placed in the rotation."""

    model_config = ConfigDict(frozen=True)

    rotation_index: int  # 0..17 across the macro-cycle
    weekday_index: int = Field(ge=0, le=6)  # 0=Mon..6=Sun
    date: date

    @property
    def key(self) -> str:
        """Cache key shared by days with the same weekday and rotation day."""
        return f"{self.weekday_index}-{self.rotation_index}"


class LessonOccurrence(BaseModel):
    """One concrete lesson on a specific date."""

    id: str
    label: str
    start: datetime
    end: datetime


def _split_grades(data: Any) -> Any:
    """Move every non-"days" key of a raw document under "grades"."""
    if isinstance(data, Mapping) and "grades" not in data:
        data = dict(data)
        days = data.pop("days", [])
        return {"days": days, "grades": data}
    return data


class RotationTemplate(BaseModel):
    """Lessons per grade per rotation day."""

    days: list[str]
    grades: dict[str, list[list[RotationSlot]]]

    @model_validator(mode="before")
    @classmethod
    def split_grade_keys(cls, data: Any) -> Any:
        return _split_grades(data)

    def slots_for(self, grade: str, rotation_index: int) -> list[RotationSlot]:
        """Ordered slot list of one rotation day for a grade.

        Raises:
            UnknownGrade: If the template has no such grade.
            TemplateMismatch: If the rotation index has no slot list.
        """
        try:
            days = self.grades[grade]
        except KeyError:
            raise UnknownGrade(grade, sorted(self.grades)) from None
        if not 0 <= rotation_index < len(days):
            raise TemplateMismatch(
                f"Rotation template for {grade!r} has {len(days)} days, "
                f"no entry for rotation index {rotation_index}"
            )
        return days[rotation_index]

    def choice_ids(self, grade: str) -> list[str]:
        """Ids of the grade's lessons that take a user-chosen label, sorted."""
        if grade not in self.grades:
            raise UnknownGrade(grade, sorted(self.grades))
        return sorted(
            {slot.id for day in self.grades[grade] for slot in day if not slot.special}
        )


class TimeTable(BaseModel):
    """Lesson times per grade per weekday."""

    days: list[str] = Field(default_factory=list)
    grades: dict[str, list[list[TimeRange]]]

    @model_validator(mode="before")
    @classmethod
    def split_grade_keys(cls, data: Any) -> Any:
        return _split_grades(data)

    def ranges_for(self, grade: str, weekday_index: int) -> list[TimeRange]:
        """Ordered time ranges of one weekday for a grade.

        Raises:
            UnknownGrade: If the time table has no such grade.
            TemplateMismatch: If the weekday has no entry (e.g. weekends).
        """
        try:
            weekdays = self.grades[grade]
        except KeyError:
            raise UnknownGrade(grade, sorted(self.grades)) from None
        if not 0 <= weekday_index < len(weekdays):
            raise TemplateMismatch(
                f"Time table for {grade!r} has no lessons on weekday {weekday_index}"
            )
        return weekdays[weekday_index]


class LessonPrompts(RootModel[dict[str, str]]):
    """Lesson id -> prompt text shown when asking for the lesson's label."""
