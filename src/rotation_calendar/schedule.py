"""ScheduleBuilder - turns resolved calendar days into lesson occurrences.

For each day the rotation template gives the ordered lesson slots of the
rotation day and the time table gives the ordered lesson times of the
weekday. The two lists are paired position by position; a slot with its own
fixed time ignores the weekday's time at its position.

Days that share a weekday and rotation day have the same lessons at the same
times, so the resolved plan for each combination is cached and only the
concrete date changes between them.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rotation_calendar.days import resolve_days
from rotation_calendar.errors import TemplateMismatch
from rotation_calendar.logging import get_logger
from rotation_calendar.models import (
    CalendarDay,
    CalendarRow,
    LessonChoices,
    LessonOccurrence,
    RotationSlot,
    RotationTemplate,
    TimeRange,
    TimeTable,
)

log = get_logger(__name__)


@dataclass(frozen=True)
class PlannedLesson:
    """A slot with its label and time resolved, not yet tied to a date."""

    id: str
    label: str
    times: TimeRange

    def on(self, day: CalendarDay) -> LessonOccurrence:
        start, end = self.times.bounds(day.date)
        return LessonOccurrence(id=self.id, label=self.label, start=start, end=end)


def pair_slots(
    slots: Sequence[RotationSlot], ranges: Sequence[TimeRange]
) -> list[tuple[RotationSlot, TimeRange]]:
    """Pair each slot with the time it runs at.

    Raises:
        TemplateMismatch: If the slot and time lists differ in length.
    """
    if len(slots) != len(ranges):
        raise TemplateMismatch(
            f"Rotation day has {len(slots)} lessons but the weekday has "
            f"{len(ranges)} lesson times"
        )
    return [(slot, slot.fixed_time or times) for slot, times in zip(slots, ranges)]


def resolve_label(slot: RotationSlot, choices: LessonChoices) -> str:
    """Special lessons keep their own label, others use the user's choice."""
    if slot.special:
        return slot.label
    return choices.get(slot.id, "")


class ScheduleBuilder:
    """Builds the ordered lesson occurrences of one grade.

    Output order follows the input rows, and within a row the slot order of
    the rotation day.
    """

    def __init__(self, template: RotationTemplate, timetable: TimeTable, grade: str) -> None:
        self.template = template
        self.timetable = timetable
        self.grade = grade

    def plan(self, day: CalendarDay, choices: LessonChoices) -> list[PlannedLesson]:
        """Resolve the lessons of a day, dropping those with an empty label."""
        slots = self.template.slots_for(self.grade, day.rotation_index)
        ranges = self.timetable.ranges_for(self.grade, day.weekday_index)
        planned: list[PlannedLesson] = []
        for slot, times in pair_slots(slots, ranges):
            label = resolve_label(slot, choices)
            if not label:
                continue
            planned.append(PlannedLesson(id=slot.id, label=label, times=times))
        return planned

    def build(
        self, rows: Iterable[CalendarRow], choices: LessonChoices
    ) -> list[LessonOccurrence]:
        """Expand calendar rows into lesson occurrences.

        Raises:
            UnknownRotationDay, InvalidDateFormat: From day resolution.
            UnknownGrade, TemplateMismatch: On inconsistent configuration.
        """
        # Keyed by weekday/rotation-day; holds date-free plans only
        cache: dict[str, list[PlannedLesson]] = {}
        occurrences: list[LessonOccurrence] = []
        days = 0

        for day in resolve_days(rows, self.template.days):
            days += 1
            planned = cache.get(day.key)
            if planned is None:
                planned = self.plan(day, choices)
                cache[day.key] = planned
            else:
                log.debug("rotation_cache_hit", key=day.key, date=day.date.isoformat())
            occurrences.extend(lesson.on(day) for lesson in planned)

        log.info(
            "schedule_built",
            grade=self.grade,
            days=days,
            combinations=len(cache),
            occurrences=len(occurrences),
        )
        return occurrences


def build_schedule(
    rows: Iterable[CalendarRow],
    template: RotationTemplate,
    timetable: TimeTable,
    grade: str,
    choices: LessonChoices,
) -> list[LessonOccurrence]:
    """Build the lesson occurrences of a grade for every calendar row."""
    return ScheduleBuilder(template, timetable, grade).build(rows, choices)
