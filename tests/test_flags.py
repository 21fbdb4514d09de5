from enum import Enum

import pytest

from declarg import (
    ArgumentDefinitionError,
    CommandError,
    Flag,
    FlagExclusivity,
    ParsableCommand,
)
from declarg.exceptions import DuplicateExclusiveValuesError, NoValueError


class Speed(Enum):
    FAST = "fast"
    SLOW = "slow"


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"

    @classmethod
    def flag_name(cls, member):
        return ["-" + member.value[0], "--" + member.value]

    @classmethod
    def flag_help(cls, member):
        return f"Use {member.value}."


class Settings(ParsableCommand):
    color: bool = Flag(inversion="no", default=True)
    cache: bool | None = Flag(inversion="prefixed_enable_disable")
    verbose: int = Flag(name="-v")
    speed: Speed = Flag(default=Speed.FAST)
    colors: list[Color] = Flag()


class Confirm(ParsableCommand):
    force: bool = Flag(inversion="no")


class LastWins(ParsableCommand):
    speed: Speed | None = Flag(exclusivity="last")


class FirstWins(ParsableCommand):
    speed: Speed = Flag(exclusivity=FlagExclusivity.CHOOSE_FIRST)


def test_flag_defaults():
    settings = Settings.parse([])
    assert settings.color is True
    assert settings.cache is None
    assert settings.verbose == 0
    assert settings.speed is Speed.FAST
    assert settings.colors == []


def test_inverted_flags():
    settings = Settings.parse(["--no-color", "--enable-cache"])
    assert settings.color is False
    assert settings.cache is True
    assert Settings.parse(["--disable-cache"]).cache is False


def test_inverted_flag_last_occurrence_wins():
    assert Settings.parse(["--no-color", "--color"]).color is True


def test_inverted_flag_without_default_is_required():
    assert Confirm.parse(["--force"]).force is True
    assert Confirm.parse(["--no-force"]).force is False
    with pytest.raises(CommandError) as excinfo:
        Confirm.parse([])
    assert isinstance(excinfo.value.parser_error, NoValueError)
    assert str(excinfo.value) == "Missing one of: '--force', '--no-force'"


def test_counter_flag():
    assert Settings.parse(["-vvv"]).verbose == 3
    assert Settings.parse(["-v", "-v"]).verbose == 2


def test_enumerable_flag():
    assert Settings.parse(["--slow"]).speed is Speed.SLOW
    assert Settings.parse(["--slow", "--slow"]).speed is Speed.SLOW


def test_enumerable_flag_is_exclusive_by_default():
    with pytest.raises(CommandError) as excinfo:
        Settings.parse(["--fast", "--slow"])
    assert isinstance(excinfo.value.parser_error, DuplicateExclusiveValuesError)
    assert str(excinfo.value) == (
        "Value to be set with flag '--slow' had already been set with flag '--fast'"
    )


def test_repeating_enumerable_flag_with_custom_names():
    settings = Settings.parse(["-r", "--blue", "-g"])
    assert settings.colors == [Color.RED, Color.BLUE, Color.GREEN]


def test_exclusivity_choices():
    assert LastWins.parse([]).speed is None
    assert LastWins.parse(["--fast", "--slow"]).speed is Speed.SLOW
    assert FirstWins.parse(["--fast", "--slow"]).speed is Speed.FAST


def test_optional_bool_flag_needs_inversion():
    class Broken(ParsableCommand):
        maybe: bool | None = Flag()

    with pytest.raises(ArgumentDefinitionError):
        Broken.parse([])


def test_flag_must_have_a_flag_type():
    class Broken(ParsableCommand):
        name: str = Flag()

    with pytest.raises(ArgumentDefinitionError):
        Broken.parse([])
