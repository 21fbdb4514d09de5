import pytest

from declarg import (
    Argument,
    CleanExit,
    CommandConfiguration,
    CommandError,
    ExitCode,
    HelpRequested,
    MessageInfo,
    MessageKind,
    ParsableCommand,
    ParserConfiguration,
    ValidationError,
    VersionRequested,
)
from declarg.exceptions import MissingSubcommandError, UnknownOptionError
from declarg.parser.name import Name
from declarg.parser.split_arguments import SplitIndex


class Install(ParsableCommand):
    configuration = CommandConfiguration(abstract="Install a package.")

    package: str = Argument()

    def validate(self):
        if self.package == "bad":
            raise ValidationError("'bad' is not installable.")
        if self.package == "quiet":
            raise ExitCode(3)
        if self.package == "done":
            raise CleanExit("Nothing to do.")


class Pkg(ParsableCommand):
    configuration = CommandConfiguration(
        abstract="A package manager.", version="0.9", subcommands=[Install]
    )


def info_for(arguments, configuration=None):
    with pytest.raises((CommandError, HelpRequested, CleanExit)) as excinfo:
        Pkg.parse_as_root(arguments, configuration)
    return MessageInfo.from_error(excinfo.value, Pkg, configuration)


def test_help_message():
    info = info_for(["install", "--help"])
    assert info.kind is MessageKind.HELP
    assert info.should_exit_cleanly
    assert info.exit_code == ExitCode.SUCCESS
    assert info.full_text.startswith("OVERVIEW: Install a package.")
    assert "USAGE: pkg install <package>" in info.full_text


def test_version_message():
    info = info_for(["--version"])
    assert info.kind is MessageKind.HELP
    assert info.full_text == "0.9"
    assert MessageInfo.from_error(VersionRequested(""), Pkg).full_text == "Unspecified version"


def test_usage_error_message():
    info = info_for(["install", "--force", "x"])
    assert info.kind is MessageKind.VALIDATION
    assert info.exit_code.code == 64
    assert info.full_text == (
        "Error: Unknown option '--force'\n"
        "Usage: pkg install <package>\n"
        "  See 'pkg install --help' for more information."
    )


def test_validation_error_message():
    info = info_for(["install", "bad"])
    assert info.kind is MessageKind.VALIDATION
    assert info.message == "'bad' is not installable."
    assert info.exit_code.code == 64


def test_exit_code_from_validate():
    info = info_for(["install", "quiet"])
    assert info.kind is MessageKind.OTHER
    assert info.full_text == ""
    assert info.exit_code.code == 3


def test_clean_exit_from_validate():
    info = info_for(["install", "done"])
    assert info.kind is MessageKind.HELP
    assert info.full_text == "Nothing to do."


def test_configured_exit_codes():
    configuration = ParserConfiguration(validation_exit_code=2, failure_exit_code=70)
    assert info_for(["install"], configuration).exit_code.code == 2
    info = MessageInfo.from_error(RuntimeError("boom"), Pkg, configuration)
    assert info.kind is MessageKind.OTHER
    assert info.full_text == "Error: boom"
    assert info.exit_code.code == 70


def test_error_without_message_uses_type_name():
    info = MessageInfo.from_error(KeyError(), Pkg)
    assert info.message == "KeyError"
    assert info.exit_code == ExitCode.FAILURE


def test_command_error_with_partial_stack():
    error = CommandError([Install], MissingSubcommandError())
    info = MessageInfo.from_error(error, Pkg)
    assert "See 'pkg install --help'" in info.usage


def test_bare_parser_error_uses_root_usage():
    error = UnknownOptionError(SplitIndex(0), Name.long("nope"))
    info = MessageInfo.from_error(error, Pkg)
    assert info.usage.startswith("Usage: pkg <subcommand>")


def test_convenience_accessors():
    error = CommandError([Pkg, Install], UnknownOptionError(SplitIndex(1), Name.long("x")))
    assert Pkg.message(error) == "Unknown option '--x'"
    assert Pkg.full_message(error).startswith("Error: Unknown option '--x'\nUsage:")
    assert Pkg.exit_code(error) == 64
    assert Pkg.exit_code(HelpRequested()) == 0


def test_exit_prints_help_to_stdout(capsys):
    with pytest.raises(SystemExit) as excinfo:
        Pkg.main(["--help"])
    assert excinfo.value.code == 0
    captured = capsys.readouterr()
    assert captured.out.startswith("OVERVIEW: A package manager.")
    assert "SUBCOMMANDS:" in captured.out
    assert captured.err == ""


def test_exit_prints_errors_to_stderr(capsys):
    with pytest.raises(SystemExit) as excinfo:
        Pkg.main(["install"])
    assert excinfo.value.code == 64
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: Missing expected argument '<package>'")


def test_help_subcommand_through_main(capsys):
    with pytest.raises(SystemExit) as excinfo:
        Pkg.main(["help", "install"])
    assert excinfo.value.code == 0
    assert "USAGE: pkg install <package>" in capsys.readouterr().out
