from datetime import datetime, timedelta, timezone

from icalendar import Calendar

from rotation_calendar.ical import CalendarOptions, format_stamp, serialize
from rotation_calendar.models import LessonOccurrence

GENERATED_AT = datetime(2024, 1, 1, 12, 0, 0)


def lesson(id_, label, day, start, end):
    return LessonOccurrence(
        id=id_,
        label=label,
        start=datetime(2024, 1, day, *start),
        end=datetime(2024, 1, day, *end),
    )


def lines_with(document: str, prefix: str) -> list[str]:
    return [line for line in document.split("\r\n") if line.startswith(prefix)]


def test_empty_calendar_is_well_formed():
    document = serialize([], GENERATED_AT)

    assert document.startswith("BEGIN:VCALENDAR\r\n")
    assert document.endswith("END:VCALENDAR\r\n")
    assert "VERSION:2.0" in document
    assert "PRODID:" in document
    assert "X-WR-CALNAME:Lesson Rotation" in document
    assert document.count("BEGIN:VTIMEZONE") == 1
    assert document.count("END:VTIMEZONE") == 1
    assert "VEVENT" not in document


def test_lines_are_crlf_terminated():
    document = serialize([lesson("1", "HL Maths", 8, (8, 30), (9, 15))], GENERATED_AT)

    assert "\n" not in document.replace("\r\n", "")


def test_floating_start_and_end():
    document = serialize([lesson("1", "HL Maths", 8, (8, 30), (9, 15))], GENERATED_AT)

    assert "DTSTART:20240108T083000" in document
    assert "DTEND:20240108T091500" in document
    assert lines_with(document, "DTSTAMP:") == ["DTSTAMP:20240101T120000"]


def test_event_fields():
    document = serialize([lesson("3", "HL Physics", 8, (8, 30), (9, 15))], GENERATED_AT)

    assert lines_with(document, "UID:") == ["UID:20240101T120000_0@rotation-calendar.local"]
    assert "SUMMARY:HL Physics" in document
    assert "CATEGORIES:Period 3" in document


def test_uids_are_distinct_and_events_in_order():
    occurrences = [
        lesson("1", "First", 8, (8, 30), (9, 15)),
        lesson("2", "Second", 8, (9, 20), (10, 5)),
        lesson("1", "Third", 9, (8, 30), (9, 15)),
    ]

    document = serialize(occurrences, GENERATED_AT)

    uids = lines_with(document, "UID:")
    assert len(uids) == 3
    assert len(set(uids)) == 3
    assert lines_with(document, "SUMMARY:") == [
        "SUMMARY:First",
        "SUMMARY:Second",
        "SUMMARY:Third",
    ]


def test_fixed_offset_timezone_block():
    options = CalendarOptions(
        timezone_id="Europe/Zurich",
        timezone_name="CET",
        utc_offset=timedelta(hours=1),
    )

    document = serialize([], GENERATED_AT, options)

    assert "TZID:Europe/Zurich" in document
    assert "TZOFFSETFROM:+0100" in document
    assert "TZOFFSETTO:+0100" in document
    assert "TZNAME:CET" in document
    assert "BEGIN:DAYLIGHT" not in document


def test_aware_generation_time_uses_declared_offset():
    generated = datetime(2024, 1, 1, 4, 0, 0, tzinfo=timezone.utc)

    document = serialize([lesson("1", "HL Maths", 8, (8, 30), (9, 15))], generated)

    assert lines_with(document, "DTSTAMP:") == ["DTSTAMP:20240101T120000"]
    assert "UID:20240101T120000_0@" in document


def test_deterministic():
    occurrences = [lesson("1", "HL Maths", 8, (8, 30), (9, 15))]

    assert serialize(occurrences, GENERATED_AT) == serialize(occurrences, GENERATED_AT)


def test_parses_back():
    occurrences = [
        lesson("1", "Maths, Analysis", 8, (8, 30), (9, 15)),
        lesson("2", "English", 8, (9, 20), (10, 5)),
    ]

    cal = Calendar.from_ical(serialize(occurrences, GENERATED_AT))

    events = list(cal.walk("VEVENT"))
    assert [str(e["SUMMARY"]) for e in events] == ["Maths, Analysis", "English"]
    assert events[0].decoded("DTSTART") == datetime(2024, 1, 8, 8, 30)


def test_format_stamp():
    assert format_stamp(datetime(2024, 3, 5, 7, 4, 9)) == "20240305T070409"


def test_library_use_keeps_stdout_clean(capsys):
    serialize([lesson("1", "HL Maths", 8, (8, 30), (9, 15))], GENERATED_AT)

    assert capsys.readouterr().out == ""
