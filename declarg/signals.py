# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the clean-exit signals raised while parsing.

A request for help or for the version string ends parsing early, exactly like
an error does, but it is not a failure: the text goes to standard output and
the process exits with status 0.

All signals inherit from `FlowSignal`, a subclass of `BaseException`, so they
pass through `except Exception` blocks in application code untouched.

Signals:
- CleanExit: Exit successfully, optionally printing a message.
- HelpRequested: Print help for a command (or a command path) and exit.
- VersionRequested: Print the version string and exit.
"""
from __future__ import annotations

from typing import Sequence


class FlowSignal(BaseException):
    """Base class for all flow control signals in declarg.

    These are not errors. They end parsing early without reporting a failure.
    """


class CleanExit(FlowSignal):
    """Raised to exit successfully, printing `message` if there is one."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class HelpRequested(CleanExit):
    """Raised when the user asks for help.

    `command_stack` is the path from the root command to the command whose
    help should be shown; an empty stack means the root command.
    """

    def __init__(
        self,
        command_stack: Sequence[type] = (),
        include_hidden: bool = False,
    ) -> None:
        self.command_stack = list(command_stack)
        self.include_hidden = include_hidden
        super().__init__("Help requested.")


class VersionRequested(CleanExit):
    """Raised when the user passes `--version` to a command that declares one."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(version)
