# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by declarg.

Errors fall into two families. Declaration errors describe a command type whose
arguments are declared in a contradictory or ambiguous way; they are detected
before any input is read and are reported all at once. Parser errors describe
a problem with the user's input; parsing stops at the first one.

Every parser error carries the structured data it was raised with (the names,
raw strings and input positions involved) in addition to its message, so
callers can branch on it programmatically.

Exception Hierarchy:
- DeclargError
    ├── ArgumentDefinitionError
    ├── ArgumentDeclarationError
    ├── ArgumentNotParsedError
    ├── ValidationError
    ├── ExitCode
    ├── CommandError
    └── ParserError
          ├── InvalidOptionError
          ├── UnknownOptionError
          ├── AmbiguousAbbreviationError
          ├── MissingValueForOptionError
          ├── UnexpectedValueForOptionError
          ├── UnexpectedExtraValuesError
          ├── DuplicateExclusiveValuesError
          ├── NoValueError
          ├── UnableToParseValueError
          ├── MissingSubcommandError
          └── UserValidationError
"""
from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Sequence

if TYPE_CHECKING:
    from declarg.parser.input_key import InputKey
    from declarg.parser.input_origin import InputOrigin, SplitIndex
    from declarg.parser.name import Name


class DeclargError(Exception):
    """Base exception for declarg."""


class ArgumentDefinitionError(DeclargError):
    """Raised when a single argument definition is malformed."""


class DeclarationIssue:
    """One finding of the static declaration validators."""

    def __init__(self, message: str, fatal: bool = True) -> None:
        self.message = message
        self.fatal = fatal

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        kind = "failure" if self.fatal else "warning"
        return f"DeclarationIssue({kind}: {self.message!r})"


class ArgumentDeclarationError(DeclargError):
    """Raised when a command type's declared arguments fail validation.

    All fatal findings for the type are collected into `issues`.
    """

    def __init__(self, owner: type, issues: Sequence[DeclarationIssue]) -> None:
        self.owner = owner
        self.issues = list(issues)
        details = "\n".join(f"- {issue}" for issue in self.issues)
        super().__init__(f"Validation failed for '{owner.__name__}':\n\n{details}")


class ArgumentNotParsedError(DeclargError, AttributeError):
    """Raised when an argument field is read before it has been parsed or set."""

    def __init__(self, owner: str, field_name: str) -> None:
        self.owner = owner
        self.field_name = field_name
        super().__init__(
            f"'{owner}.{field_name}' was read before any value was parsed or assigned. "
            f"Use '{owner}.parse()' to populate the instance."
        )


class ValidationError(DeclargError):
    """Raised from a `validate()` hook to reject otherwise well-formed input."""


class ExitCode(DeclargError):
    """Raised to end the process with a specific exit status."""

    SUCCESS: ClassVar[ExitCode]
    FAILURE: ClassVar[ExitCode]
    VALIDATION_FAILURE: ClassVar[ExitCode]

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"Exit code {code}")

    @property
    def is_success(self) -> bool:
        return self.code == 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExitCode):
            return self.code == other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)


ExitCode.SUCCESS = ExitCode(0)
ExitCode.FAILURE = ExitCode(1)
# EX_USAGE from sysexits.h
ExitCode.VALIDATION_FAILURE = ExitCode(64)


class ParserError(DeclargError):
    """Base class for errors in user input."""


class InvalidOptionError(ParserError):
    """Raised by the splitter for tokens that cannot be an option, such as `---`."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid option: {token}")


class UnknownOptionError(ParserError):
    """Raised when an option is left over after every command level has been parsed."""

    def __init__(
        self, index: SplitIndex, name: Name, suggestion: Name | None = None
    ) -> None:
        self.index = index
        self.name = name
        self.suggestion = suggestion
        message = f"Unknown option '{name.synopsis}'"
        if suggestion is not None:
            message += f". Did you mean '{suggestion.synopsis}'?"
        super().__init__(message)


class AmbiguousAbbreviationError(ParserError):
    """Raised when an abbreviated long option matches more than one option."""

    def __init__(
        self, index: SplitIndex, name: Name, candidates: Sequence[Name]
    ) -> None:
        self.index = index
        self.name = name
        self.candidates = list(candidates)
        choices = ", ".join(f"'{candidate.synopsis}'" for candidate in self.candidates)
        super().__init__(
            f"Ambiguous option '{name.synopsis}' could match any of: {choices}"
        )


class MissingValueForOptionError(ParserError):
    """Raised when an option that takes a value is given none."""

    def __init__(
        self, origin: InputOrigin, name: Name, value_name: str | None = None
    ) -> None:
        self.origin = origin
        self.name = name
        self.value_name = value_name
        if value_name:
            super().__init__(f"Missing value for '{name.synopsis} <{value_name}>'")
        else:
            super().__init__(f"Missing value for '{name.synopsis}'")


class UnexpectedValueForOptionError(ParserError):
    """Raised when a flag is given an attached value, as in `--verbose=yes`."""

    def __init__(self, index: SplitIndex, name: Name, value: str) -> None:
        self.index = index
        self.name = name
        self.value = value
        super().__init__(
            f"The option '{name.synopsis}' does not take any value, "
            f"but '{value}' was specified."
        )


class UnexpectedExtraValuesError(ParserError):
    """Raised when input is left over that no argument claimed."""

    def __init__(self, values: Sequence[tuple[InputOrigin, str]]) -> None:
        self.values = list(values)
        if len(self.values) == 1:
            message = f"Unexpected argument '{self.values[0][1]}'"
        else:
            joined = ", ".join(f"'{value}'" for _, value in self.values)
            message = f"{len(self.values)} unexpected arguments: {joined}"
        super().__init__(message)


def _describe_flag(origin: InputOrigin, original_input: Sequence[str]) -> str:
    index = origin.first_index
    if index is None:
        return f"position {origin}"
    token = original_input[index.input_index]
    if index.sub_index is None:
        return f"flag '{token}'"
    return f"flag '{token[index.sub_index + 1]}' in '{token}'"


class DuplicateExclusiveValuesError(ParserError):
    """Raised when two mutually exclusive flags are given together."""

    def __init__(
        self,
        previous: InputOrigin,
        duplicate: InputOrigin,
        original_input: Sequence[str],
    ) -> None:
        self.previous = previous
        self.duplicate = duplicate
        self.original_input = list(original_input)
        super().__init__(
            f"Value to be set with {_describe_flag(duplicate, original_input)} "
            f"had already been set with {_describe_flag(previous, original_input)}"
        )


class NoValueError(ParserError):
    """Raised when a required argument received no value.

    `possibilities` holds the synopses of every definition that could have
    supplied the value, e.g. both cases of an exclusive flag pair.
    """

    def __init__(self, key: InputKey, possibilities: Sequence[str] = ()) -> None:
        self.key = key
        self.possibilities = list(possibilities)
        if not self.possibilities:
            message = "Missing expected argument"
        elif len(self.possibilities) == 1:
            message = f"Missing expected argument '{self.possibilities[0]}'"
        else:
            joined = "', '".join(self.possibilities)
            message = f"Missing one of: '{joined}'"
        super().__init__(message)


class UnableToParseValueError(ParserError):
    """Raised when a raw string cannot be converted to an argument's type."""

    def __init__(
        self,
        origin: InputOrigin,
        name: Name | None,
        value: str,
        key: InputKey,
        value_name: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.origin = origin
        self.name = name
        self.value = value
        self.key = key
        self.value_name = value_name
        self.original_error = original_error
        if name is not None and value_name:
            message = f"The value '{value}' is invalid for '{name.synopsis} <{value_name}>'"
        elif value_name:
            message = f"The value '{value}' is invalid for '<{value_name}>'"
        elif name is not None:
            message = f"The value '{value}' is invalid for '{name.synopsis}'"
        else:
            message = f"The value '{value}' is invalid."
        if original_error is not None and str(original_error):
            message += f": {original_error}"
        super().__init__(message)


class MissingSubcommandError(ParserError):
    """Raised when a command that only groups subcommands is invoked on its own."""

    def __init__(self) -> None:
        super().__init__("Missing required subcommand.")


class UserValidationError(ParserError):
    """Wraps an error raised from a `validate()` hook."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(str(error))


class CommandError(DeclargError):
    """A parser error annotated with the command path it occurred at."""

    def __init__(self, command_stack: Sequence[type], parser_error: ParserError) -> None:
        self.command_stack = list(command_stack)
        self.parser_error = parser_error
        super().__init__(str(parser_error))

    def __repr__(self) -> str:
        names = " ".join(command.__name__ for command in self.command_stack)
        return f"CommandError([{names}], {self.parser_error!r})"


def describe_error(error: BaseException) -> str:
    """Return the user-facing description of an arbitrary error."""
    if isinstance(error, CommandError):
        return str(error.parser_error)
    return str(error) or type(error).__name__
