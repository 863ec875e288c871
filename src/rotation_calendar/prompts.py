"""Ways of obtaining the user's label for each lesson."""

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from rotation_calendar.errors import InvalidResource, MissingResource
from rotation_calendar.logging import get_logger
from rotation_calendar.models import LessonPrompts

log = get_logger(__name__)

_CHOICES_ADAPTER = TypeAdapter(dict[str, str])


class ChoicePrompter(Protocol):
    def prompt(self, prompts: LessonPrompts, lesson_ids: Sequence[str]) -> dict[str, str]:
        """Return lesson id -> label; an empty label drops the lesson."""
        ...


class MappingChoicePrompter:
    """Choices supplied up front."""

    def __init__(self, choices: Mapping[str, str]) -> None:
        self.choices = dict(choices)

    def prompt(self, prompts: LessonPrompts, lesson_ids: Sequence[str]) -> dict[str, str]:
        return dict(self.choices)


class JsonChoicePrompter:
    """Choices read from a JSON object of lesson id -> label."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def prompt(self, prompts: LessonPrompts, lesson_ids: Sequence[str]) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise MissingResource(str(self.path)) from None
        try:
            choices = _CHOICES_ADAPTER.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise InvalidResource(str(self.path), str(e)) from e

        unknown = sorted(set(choices) - set(lesson_ids))
        if unknown:
            log.warning("choices_unused", path=str(self.path), lesson_ids=unknown)
        return choices


class ConsoleChoicePrompter:
    """Asks for each lesson's label on the terminal.

    Leaving an answer blank skips that lesson in the calendar.
    """

    def __init__(self, input_func: Callable[[str], str] = input) -> None:
        self.input_func = input_func

    def prompt(self, prompts: LessonPrompts, lesson_ids: Sequence[str]) -> dict[str, str]:
        choices: dict[str, str] = {}
        for lesson_id in lesson_ids:
            text = prompts.root.get(lesson_id, f"Lesson {lesson_id}")
            choices[lesson_id] = self.input_func(f"{text}: ").strip()
        return choices
