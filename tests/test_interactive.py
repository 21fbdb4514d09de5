from enum import Enum

import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

from declarg import Argument, CommandError, Flag, Option, ParsableCommand
from declarg.interactive import Interactor, SerialNumberValidator, non_empty_validator
from declarg.parser.command_parser import CommandParser


class FakeSession:
    """Answers prompts from a script and records what was asked."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def prompt(self, message, validator=None):
        self.prompts.append(message)
        answer = self.answers.pop(0)
        if validator is not None:
            validator.validate(Document(answer))
        return answer


class Level(Enum):
    LOW = "low"
    HIGH = "high"


class Mode(Enum):
    FAST = "fast"
    SAFE = "safe"


class Deploy(ParsableCommand):
    target: str = Argument()
    replicas: int = Option(default=1)
    level: Level = Option()
    tags: list[str] = Option()
    mode: Mode = Flag()


class Scale(ParsableCommand):
    replicas: int = Option()


def parse(arguments, answers):
    session = FakeSession(answers)
    interactor = Interactor(session=session, interactive=True)
    result = CommandParser(Deploy, interactor=interactor).parse(arguments)
    return result.command, session


def test_serial_number_validator():
    validator = SerialNumberValidator(3)
    validator.validate(Document("1 3"))
    with pytest.raises(ValidationError):
        validator.validate(Document(""))
    with pytest.raises(ValidationError):
        validator.validate(Document("x"))
    with pytest.raises(ValidationError):
        validator.validate(Document("4"))
    with pytest.raises(ValidationError):
        SerialNumberValidator(3, allow_multiple=False).validate(Document("1 2"))


def test_non_empty_validator():
    validator = non_empty_validator()
    validator.validate(Document("x"))
    with pytest.raises(ValidationError):
        validator.validate(Document("   "))


def test_prompts_for_everything_missing(capsys):
    command, session = parse([], ["prod", "2", "a b", "1"])
    assert command.target == "prod"
    assert command.level is Level.HIGH
    assert command.tags == ["a", "b"]
    assert command.mode is Mode.FAST
    assert command.replicas == 1
    assert session.prompts == [
        "? Please enter 'target': ",
        "? Please select 'level': ",
        "? Please enter 'tags': ",
        "? Please select 'mode': ",
    ]
    out = capsys.readouterr().out
    assert "1. low\n2. high\n" in out
    assert "1. --fast\n2. --safe\n" in out
    assert "You select 'a', 'b'." in out


def test_prompts_for_option_value():
    command, session = parse(
        ["prod", "--level", "low", "--tags", "x", "--fast", "--replicas"], ["3"]
    )
    assert command.replicas == 3
    assert session.prompts == ["? Please enter value for '--replicas': "]


def test_replaces_invalid_answer(capsys):
    session = FakeSession(["many", "4"])
    interactor = Interactor(session=session, interactive=True)
    command = CommandParser(Scale, interactor=interactor).parse([]).command
    assert command.replicas == 4
    assert session.prompts == ["? Please enter 'replicas': ", "? Please replace 'many': "]
    out = capsys.readouterr().out
    assert "Error: The value 'many' is invalid for '--replicas <replicas>'." in out


def test_no_prompts_without_terminal():
    interactor = Interactor(session=FakeSession([]), interactive=False)
    with pytest.raises(CommandError):
        CommandParser(Deploy, interactor=interactor).parse(["prod"])
