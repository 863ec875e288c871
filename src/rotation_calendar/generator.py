"""End-to-end calendar generation.

generate_calendar() is the pure core: CSV text, template, time table, grade,
choices and a timestamp in, iCalendar text out. CalendarGenerator wraps it
with the loader, prompter and sink adapters for one full run.
"""

from dataclasses import dataclass
from datetime import datetime

from rotation_calendar.config import CalendarConfig, get_config
from rotation_calendar.days import parse_rows
from rotation_calendar.ical import ICAL_FILENAME, ICAL_MEDIA_TYPE, CalendarOptions, serialize
from rotation_calendar.loaders import ResourceLoader, load_inputs
from rotation_calendar.logging import bind_run_context, get_logger
from rotation_calendar.models import LessonChoices, RotationTemplate, TimeTable
from rotation_calendar.prompts import ChoicePrompter
from rotation_calendar.schedule import build_schedule
from rotation_calendar.sinks import DocumentSink

logger = get_logger(__name__)


def generate_calendar(
    calendar_csv: str,
    template: RotationTemplate,
    timetable: TimeTable,
    grade: str,
    choices: LessonChoices,
    now: datetime,
    options: CalendarOptions | None = None,
) -> str:
    """Build the complete iCalendar document for one grade.

    Either returns the whole document or raises; nothing is emitted on error.

    Raises:
        CalendarError: Any parsing, resolution or configuration failure.
    """
    rows = parse_rows(calendar_csv)
    occurrences = build_schedule(rows, template, timetable, grade, choices)
    return serialize(occurrences, now, options)


@dataclass(frozen=True)
class CalendarExport:
    """Result of a generator run."""

    grade: str
    location: str
    document: str

    @property
    def event_count(self) -> int:
        return self.document.split("\r\n").count("BEGIN:VEVENT")


class CalendarGenerator:
    """Loads the schedule data, asks for choices, and writes calendar.ics."""

    def __init__(
        self,
        loader: ResourceLoader,
        prompter: ChoicePrompter,
        sink: DocumentSink,
        config: CalendarConfig | None = None,
    ) -> None:
        self.loader = loader
        self.prompter = prompter
        self.sink = sink
        self.config = config or get_config()

    def run(self, grade: str | None = None, now: datetime | None = None) -> CalendarExport:
        """Generate and write the calendar for a grade.

        Args:
            grade: Grade key (defaults to the configured grade).
            now: Generation time (defaults to the current local time).

        Raises:
            CalendarError: If any step fails; the sink is not called then.
        """
        grade = grade or self.config.grade
        now = now or datetime.now()
        bind_run_context(grade=grade, source=self.config.data_source)

        logger.info("generation_started")
        inputs = load_inputs(self.loader, self.config)
        lesson_ids = inputs.template.choice_ids(grade)
        choices = self.prompter.prompt(inputs.prompts, lesson_ids)
        logger.info(
            "choices_collected",
            lessons=len(lesson_ids),
            labelled=sum(1 for i in lesson_ids if choices.get(i)),
        )

        document = generate_calendar(
            inputs.calendar_csv,
            inputs.template,
            inputs.timetable,
            grade,
            choices,
            now,
            self.config.calendar_options(),
        )
        location = self.sink.write(document, ICAL_FILENAME, ICAL_MEDIA_TYPE)
        logger.info("generation_finished", location=location)
        return CalendarExport(grade=grade, location=location, document=document)
