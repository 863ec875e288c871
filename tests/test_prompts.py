import json

import pytest

from rotation_calendar.errors import InvalidResource, MissingResource
from rotation_calendar.models import LessonPrompts
from rotation_calendar.prompts import (
    ConsoleChoicePrompter,
    JsonChoicePrompter,
    MappingChoicePrompter,
)

PROMPTS = LessonPrompts({"1": "DP block 1", "2": "DP block 2"})


def test_mapping_prompter_returns_copy():
    source = {"1": "HL Maths"}
    choices = MappingChoicePrompter(source).prompt(PROMPTS, ["1", "2"])

    choices["2"] = "changed"

    assert source == {"1": "HL Maths"}


def test_json_prompter(tmp_path):
    path = tmp_path / "choices.json"
    path.write_text(json.dumps({"1": "HL Maths", "2": ""}), encoding="utf-8")

    assert JsonChoicePrompter(path).prompt(PROMPTS, ["1", "2"]) == {
        "1": "HL Maths",
        "2": "",
    }


def test_json_prompter_missing_file(tmp_path):
    with pytest.raises(MissingResource):
        JsonChoicePrompter(tmp_path / "nope.json").prompt(PROMPTS, ["1"])


@pytest.mark.parametrize("content", ["[1, 2]", "{bad", '{"1": 5}'])
def test_json_prompter_invalid(tmp_path, content):
    path = tmp_path / "choices.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(InvalidResource):
        JsonChoicePrompter(path).prompt(PROMPTS, ["1"])


def test_console_prompter_asks_per_lesson():
    asked = []
    answers = iter(["  HL Maths ", "", "Free"])

    def fake_input(text):
        asked.append(text)
        return next(answers)

    choices = ConsoleChoicePrompter(fake_input).prompt(PROMPTS, ["1", "2", "9"])

    assert asked == ["DP block 1: ", "DP block 2: ", "Lesson 9: "]
    assert choices == {"1": "HL Maths", "2": "", "9": "Free"}
