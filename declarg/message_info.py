# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Turns anything raised by parsing or running a command into what the user sees.

`MessageInfo.from_error()` classifies an error into one of three kinds:

- `help`: help, version or clean-exit output. Printed to stdout, status 0.
- `validation`: a usage error. Printed to stderr as `Error: <message>`
  followed by the usage line and a pointer to `--help`; status 64.
- `other`: any other failure. Printed to stderr as `Error: <message>`;
  status 1, or the code carried by an `ExitCode`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from declarg.configuration import ParserConfiguration
from declarg.exceptions import (
    CommandError,
    ExitCode,
    ParserError,
    UserValidationError,
    ValidationError,
)
from declarg.help import HelpGenerator
from declarg.parser.command_parser import CommandTree
from declarg.signals import CleanExit, HelpRequested, VersionRequested


class MessageKind(Enum):
    HELP = "help"
    VALIDATION = "validation"
    OTHER = "other"


def _resolve_stack(root: type, command_stack: Sequence[type]) -> list[type]:
    """Expand a stack that starts below `root` into the full path from `root`."""
    if command_stack and command_stack[0] is root:
        return list(command_stack)
    if not command_stack:
        return [root]
    return CommandTree.build(root).path_to(command_stack[-1]) or list(command_stack)


@dataclass
class MessageInfo:
    kind: MessageKind
    message: str
    usage: str = ""
    exit_code: ExitCode = ExitCode.SUCCESS

    @property
    def should_exit_cleanly(self) -> bool:
        return self.kind is MessageKind.HELP

    @property
    def full_text(self) -> str:
        if self.kind is MessageKind.HELP:
            return self.message
        if self.kind is MessageKind.VALIDATION:
            error = f"Error: {self.message}\n" if self.message else ""
            return error + self.usage
        return f"Error: {self.message}" if self.message else ""

    @classmethod
    def help(cls, text: str) -> MessageInfo:
        return cls(MessageKind.HELP, text)

    @classmethod
    def from_error(
        cls,
        error: BaseException,
        root: type,
        configuration: ParserConfiguration | None = None,
    ) -> MessageInfo:
        configuration = configuration or ParserConfiguration()

        if isinstance(error, HelpRequested):
            stack = _resolve_stack(root, error.command_stack)
            generator = HelpGenerator(stack, error.include_hidden, configuration)
            return cls.help(generator.rendered())
        if isinstance(error, VersionRequested):
            return cls.help(error.version or "Unspecified version")
        if isinstance(error, CleanExit):
            return cls.help(error.message)

        if isinstance(error, CommandError):
            command_stack = _resolve_stack(root, error.command_stack)
            parser_error: ParserError = error.parser_error
        elif isinstance(error, ParserError):
            command_stack = [root]
            parser_error = error
        else:
            command_stack = [root]
            parser_error = UserValidationError(error)

        names = " ".join(command.command_name() for command in command_stack)
        usage = (
            HelpGenerator(command_stack, configuration=configuration).usage_message
            + f"\n  See '{names} --help' for more information."
        )
        validation_code = ExitCode(configuration.validation_exit_code)
        failure_code = ExitCode(configuration.failure_exit_code)

        if isinstance(parser_error, UserValidationError):
            inner = parser_error.error
            if isinstance(inner, ValidationError):
                return cls(MessageKind.VALIDATION, str(inner), usage, validation_code)
            if isinstance(inner, (CleanExit, HelpRequested)):
                return cls.from_error(inner, root, configuration)
            if isinstance(inner, ExitCode):
                return cls(MessageKind.OTHER, "", exit_code=inner)
            message = str(inner) or type(inner).__name__
            return cls(MessageKind.OTHER, message, exit_code=failure_code)

        return cls(MessageKind.VALIDATION, str(parser_error), usage, validation_code)
