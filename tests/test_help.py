from enum import Enum

from declarg import (
    Argument,
    ArgumentHelp,
    CommandConfiguration,
    Flag,
    HelpGenerator,
    Option,
    OptionGroup,
    ParsableArguments,
    ParsableCommand,
    ParserConfiguration,
)
from declarg.help import HelpCommand, help_names_for, version_for


class Format(Enum):
    JSON = "json"
    TEXT = "text"


class Output(ParsableArguments):
    format: Format = Option(default=Format.TEXT, help="The output format.")
    quiet: bool = Flag(help="Print nothing.")


class Repeat(ParsableCommand):
    configuration = CommandConfiguration(
        abstract="Repeats your input phrase.",
        discussion="Prints the phrase as many times as asked.",
    )

    count: int | None = Option(name=["-c", "--count"], help="The number of repetitions.")
    color: bool = Flag(inversion="no", default=True, help="Use colors.")
    secret: bool = Flag(help=ArgumentHelp.hidden("A hidden flag."))
    output: Output = OptionGroup(title="Output options")
    phrase: str = Argument(help="The phrase to repeat.")


class Hidden(ParsableCommand):
    configuration = CommandConfiguration(abstract="Not listed.", should_display=False)


class Tool(ParsableCommand):
    configuration = CommandConfiguration(
        abstract="A tool.",
        version="2.1.0",
        subcommands=[Repeat, Hidden],
        default_subcommand=Repeat,
        help_names=["-h", "--help", "-help"],
    )


def test_usage():
    generator = HelpGenerator([Repeat])
    assert generator.usage == (
        "repeat [--count <count>] [--color] [--no-color] [--format <format>] [--quiet] "
        "<phrase>"
    )
    assert generator.usage_message.startswith("Usage: repeat ")


def test_usage_with_subcommands():
    assert HelpGenerator([Tool]).usage == "tool <subcommand>"
    assert HelpGenerator([Tool, Repeat]).usage.startswith("tool repeat [--count <count>]")


def test_custom_usage():
    class Custom(ParsableCommand):
        configuration = CommandConfiguration(usage="custom <things>")

    assert Custom.usage_string() == "custom <things>"


def test_rendered_help():
    text = Repeat.help_message(columns=100)
    assert text.startswith("OVERVIEW: Repeats your input phrase.\n\n")
    assert "Prints the phrase as many times as asked." in text
    assert "USAGE: repeat " in text
    assert "ARGUMENTS:\n  <phrase>                The phrase to repeat.\n" in text
    assert "OUTPUT OPTIONS:\n" in text
    assert "--format <format>" in text
    assert "(values: json, text) (default: text)" in text
    assert "OPTIONS:\n  -c, --count <count>     The number of repetitions.\n" in text
    assert "--color/--no-color      Use colors. (default: true)" in text
    assert "-h, --help              Show help information." in text
    assert "--secret" not in text
    assert text.endswith("\n")


def test_hidden_arguments_shown_on_request():
    text = Repeat.help_message(include_hidden=True, columns=100)
    assert "--secret" in text
    assert "A hidden flag." in text


def test_subcommand_section():
    text = Tool.help_message(columns=100)
    assert "SUBCOMMANDS:\n  repeat (default)        Repeats your input phrase.\n" in text
    assert "hidden" not in text
    assert "--version               Show the version." in text
    assert "-h, --help, -help" in text
    assert "See 'tool help <subcommand>' for detailed help." in text

    hidden_text = HelpGenerator([Tool], include_hidden=True).rendered(100)
    assert "hidden                  Not listed." in hidden_text


def test_subcommand_help_uses_full_path():
    text = HelpGenerator([Tool, Repeat]).rendered(100)
    assert "USAGE: tool repeat " in text
    assert "-h, --help, -help" in text


def test_help_names_resolution():
    names = [name.synopsis for name in help_names_for([Tool, Repeat])]
    assert names == ["-h", "--help", "-help"]
    names = [name.synopsis for name in help_names_for([Repeat])]
    assert names == ["-h", "--help"]
    configuration = ParserConfiguration(help_names=["--usage"])
    names = [name.synopsis for name in help_names_for([Repeat], configuration)]
    assert names == ["--usage"]
    assert help_names_for([Tool, HelpCommand]) == []


def test_version_for():
    assert version_for([Tool, Repeat]) == "2.1.0"
    assert version_for([Repeat]) == ""


def test_long_abstract_wraps():
    class Chatty(ParsableCommand):
        name: str = Option(default="x", help="word " * 30)

    text = Chatty.help_message(columns=60)
    lines = [line for line in text.splitlines() if "word" in line]
    assert len(lines) > 1
    assert all(line.startswith(" " * 26) for line in lines[1:])
