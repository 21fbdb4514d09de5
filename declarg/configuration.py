# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""configuration.py
Configuration models for commands and for the parser itself.

`CommandConfiguration` is attached to a `ParsableCommand` subclass as its
`configuration` class attribute and describes the command's name, help text,
version and subcommand tree. `ParserConfiguration` holds the settings of one
parse (abbreviations, help spellings, interactive prompting, exit codes) and
is passed explicitly through `parse()` / `main()`; nothing here is global.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from declarg.exceptions import ArgumentDefinitionError
from declarg.parser.name import Name

DEFAULT_HELP_NAMES = ["-h", "--help"]


def _validate_spellings(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    for spelling in value:
        try:
            Name.from_token(spelling)
        except ArgumentDefinitionError as error:
            raise ValueError(str(error)) from error
    return value


class CommandConfiguration(BaseModel):
    """
    Describes a command for parsing and for help output.

    Attributes:
        command_name (str | None): Name used on the command line; defaults to
            the kebab-cased class name.
        abstract (str): One-line description shown in command lists.
        usage (str | None): Replaces the generated usage line.
        discussion (str): Longer description shown in the command's own help.
        version (str): Enables `--version` when non-empty.
        should_display (bool): Whether the command is listed in its parent's help.
        subcommands (list[type]): Child `ParsableCommand` types, in display order.
        default_subcommand (type | None): Child used when no subcommand is named.
        help_names (list[str] | None): Help flag spellings for this command and
            its descendants; the parser configuration's are used when None.
        aliases (list[str]): Additional names the command answers to.
    """

    command_name: str | None = None
    abstract: str = ""
    usage: str | None = None
    discussion: str = ""
    version: str = ""
    should_display: bool = True
    subcommands: list[Any] = Field(default_factory=list)
    default_subcommand: Any = None
    help_names: list[str] | None = None
    aliases: list[str] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("help_names")
    @classmethod
    def validate_help_names(cls, value: list[str] | None) -> list[str] | None:
        return _validate_spellings(value)

    @field_validator("subcommands")
    @classmethod
    def validate_subcommands(cls, value: list[Any]) -> list[Any]:
        from declarg.parsable import ParsableCommand

        for subcommand in value:
            if not (isinstance(subcommand, type) and issubclass(subcommand, ParsableCommand)):
                raise ValueError(
                    f"Subcommand {subcommand!r} must be a ParsableCommand subclass"
                )
        return value

    @field_validator("command_name")
    @classmethod
    def validate_command_name(cls, value: str | None) -> str | None:
        if value is not None and (not value or value.startswith("-") or " " in value):
            raise ValueError(f"'{value}' is not a valid command name")
        return value

    @model_validator(mode="after")
    def validate_default_subcommand(self) -> CommandConfiguration:
        if self.default_subcommand is not None and self.default_subcommand not in self.subcommands:
            raise ValueError("default_subcommand must be one of the subcommands")
        return self

    @property
    def help_name_values(self) -> list[Name] | None:
        if self.help_names is None:
            return None
        return [Name.from_token(spelling) for spelling in self.help_names]


class ParserConfiguration(BaseModel):
    """
    Settings for one parse.

    Attributes:
        allow_abbreviations (bool): Accept unambiguous prefixes of long option names.
        help_names (list[str]): Default help flag spellings.
        prompt_for_missing (bool): Ask for missing required values on a terminal
            instead of failing.
        validation_exit_code (int): Exit status for usage errors (EX_USAGE).
        failure_exit_code (int): Exit status for any other error.
    """

    allow_abbreviations: bool = True
    help_names: list[str] = Field(default_factory=lambda: list(DEFAULT_HELP_NAMES))
    prompt_for_missing: bool = False
    validation_exit_code: int = 64
    failure_exit_code: int = 1

    model_config = ConfigDict(frozen=True)

    @field_validator("help_names")
    @classmethod
    def validate_help_names(cls, value: list[str]) -> list[str]:
        return _validate_spellings(value) or []

    @property
    def help_name_values(self) -> list[Name]:
        return [Name.from_token(spelling) for spelling in self.help_names]
