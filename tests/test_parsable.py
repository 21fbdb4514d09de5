import pytest

from declarg import (
    Argument,
    ArgumentDeclarationError,
    ArgumentNotParsedError,
    CommandConfiguration,
    CommandError,
    DeclargError,
    Flag,
    Option,
    OptionGroup,
    ParsableArguments,
    ParsableCommand,
    ValidationError,
)
from declarg.exceptions import NoValueError, UserValidationError


class Repeat(ParsableCommand):
    configuration = CommandConfiguration(abstract="Repeats your input phrase.")

    count: int | None = Option(help="The number of times to repeat 'phrase'.")
    include_counter: bool = Flag(help="Include a counter with each repetition.")
    phrase: str = Argument(help="The phrase to repeat.")
    separator: str = "\n"

    def run(self):
        lines = []
        for number in range(1, (self.count or 2) + 1):
            prefix = f"{number}: " if self.include_counter else ""
            lines.append(f"{prefix}{self.phrase}")
        return self.separator.join(lines)


class Range(ParsableArguments):
    low: int = Option(default=0)
    high: int = Option(default=10)

    def validate(self):
        if self.low > self.high:
            raise ValidationError("'low' must not exceed 'high'.")


class Report(ParsableCommand):
    range: Range = OptionGroup(title="Range")
    files: list[str] = Argument(default_factory=list)


class Sub(ParsableCommand):
    verbose: bool = Flag()


class Parent(ParsableCommand):
    configuration = CommandConfiguration(subcommands=[Sub])


class Shared(ParsableCommand):
    shared: "Debugging" = OptionGroup()


class Debugging(ParsableCommand):
    configuration = CommandConfiguration(subcommands=[Shared])

    debug: bool = Flag()


def test_parse_defaults():
    command = Repeat.parse(["hello"])
    assert command.phrase == "hello"
    assert command.count is None
    assert command.include_counter is False
    assert command.separator == "\n"


def test_parse_all_fields():
    command = Repeat.parse(["--count", "3", "--include-counter", "hello"])
    assert command.count == 3
    assert command.include_counter is True
    assert command.run() == "1: hello\n2: hello\n3: hello"


def test_parse_missing_argument():
    with pytest.raises(CommandError) as excinfo:
        Repeat.parse([])
    assert isinstance(excinfo.value.parser_error, NoValueError)
    assert excinfo.value.command_stack == [Repeat]


def test_init_with_keywords():
    command = Repeat(phrase="hi", count=1)
    assert command.phrase == "hi"
    assert command.count == 1
    assert command.include_counter is False
    assert command.run() == "hi"


def test_init_rejects_unknown_fields():
    with pytest.raises(TypeError):
        Repeat(phrase="hi", colour="red")


def test_reading_unset_field():
    command = Repeat()
    assert command.count is None
    with pytest.raises(ArgumentNotParsedError) as excinfo:
        command.phrase
    assert "'Repeat.phrase' was read before" in str(excinfo.value)
    assert isinstance(excinfo.value, AttributeError)


def test_class_attribute_is_the_declaration():
    assert isinstance(Repeat.phrase, Argument)
    assert Repeat.field_names() == ["count", "include_counter", "phrase"]


def test_equality_and_repr():
    assert Repeat.parse(["a", "--count", "2"]) == Repeat(phrase="a", count=2)
    assert Repeat(phrase="a") != Repeat(phrase="b")
    assert repr(Repeat(phrase="a")).startswith(
        "Repeat(count=None, include_counter=False, phrase='a'"
    )


def test_option_group():
    command = Report.parse(["--low", "3", "a.txt", "--high", "5"])
    assert command.range.low == 3
    assert command.range.high == 5
    assert command.files == ["a.txt"]
    assert Report().range == Range(low=0, high=10)


def test_option_group_validation():
    with pytest.raises(CommandError) as excinfo:
        Report.parse(["--low", "20"])
    error = excinfo.value.parser_error
    assert isinstance(error, UserValidationError)
    assert isinstance(error.error, ValidationError)
    assert str(excinfo.value) == "'low' must not exceed 'high'."


def test_parsable_arguments_parse():
    assert Range.parse(["--high", "3"]) == Range(low=0, high=3)


def test_parse_rejects_subcommand_result():
    with pytest.raises(DeclargError) as excinfo:
        Parent.parse(["sub"])
    assert "parse_as_root()" in str(excinfo.value)
    assert isinstance(Parent.parse_as_root(["sub", "--verbose"]), Sub)


def test_group_of_ancestor_type_reuses_ancestor():
    command = Debugging.parse_as_root(["shared", "--debug"])
    assert isinstance(command, Shared)
    assert command.shared.debug is True


def test_duplicate_names_fail_declaration():
    class Clash(ParsableCommand):
        first: bool = Flag(name="-x")
        second: bool = Flag(name="-x")

    with pytest.raises(ArgumentDeclarationError) as excinfo:
        Clash.parse([])
    assert 'named "-x"' in str(excinfo.value)


def test_coding_keys_must_cover_argument_fields():
    class Partial(ParsableCommand):
        __coding_keys__ = ["name"]

        name: str = Argument()
        age: int = Option(default=0)

    with pytest.raises(ArgumentDeclarationError) as excinfo:
        Partial.argument_set()
    assert "Argument `age`" in str(excinfo.value)


def test_usage_string():
    assert Repeat.usage_string() == (
        "repeat [--count <count>] [--include-counter] <phrase>"
    )


def test_main_runs_and_exits_cleanly(capsys):
    class Echo(ParsableCommand):
        words: list[str] = Argument()

        def run(self):
            print(" ".join(self.words))

    with pytest.raises(SystemExit) as excinfo:
        Echo.main(["a", "b"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out == "a b\n"


def test_main_reports_usage_errors(capsys):
    with pytest.raises(SystemExit) as excinfo:
        Repeat.main(["--count", "many", "hello"])
    assert excinfo.value.code == 64
    err = capsys.readouterr().err
    assert err.startswith("Error: The value 'many' is invalid for '--count <count>'")
    assert "Usage: repeat [--count <count>] [--include-counter] <phrase>" in err
    assert "See 'repeat --help' for more information." in err


def test_main_reports_runtime_errors(capsys):
    class Broken(ParsableCommand):
        def run(self):
            raise RuntimeError("disk is full")

    with pytest.raises(SystemExit) as excinfo:
        Broken.main([])
    assert excinfo.value.code == 1
    assert "Error: disk is full" in capsys.readouterr().err
