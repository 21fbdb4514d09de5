# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Renders usage and help text for a command.

`HelpGenerator` reads a command's `ArgumentSet` and configuration and produces
plain text in the usual layout:

    OVERVIEW: Repeat a phrase.

    USAGE: repeat [--count <count>] [--include-counter] <phrase>

    ARGUMENTS:
      <phrase>                The phrase to repeat.

    OPTIONS:
      --count <count>         How many times to repeat.
      --include-counter       Include a counter with each repetition.
      -h, --help              Show help information.

It never mutates or drives parsing. `HelpCommand` is the `help` subcommand
added to every command tree with subcommands: `tool help sub` shows the help
for `sub`.
"""
from __future__ import annotations

import textwrap
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from declarg.configuration import CommandConfiguration, ParserConfiguration
from declarg.console import console
from declarg.parsable import ParsableCommand
from declarg.parser.argument_definition import ArgumentDefinition, ArgumentVisibility
from declarg.parser.name import Name
from declarg.properties import Argument, ArgumentHelp, Flag
from declarg.signals import HelpRequested

HELP_INDENT = 2
LABEL_COLUMN_WIDTH = 26
MAX_SYNOPSIS_ARGUMENTS = 12


def help_names_for(
    command_stack: Sequence[type], configuration: ParserConfiguration | None = None
) -> list[Name]:
    """
    The help flag spellings in effect for the last command of `command_stack`.

    The nearest command that sets `help_names` decides; otherwise the parser
    configuration does. Spellings the command declares itself are dropped.
    """
    configuration = configuration or ParserConfiguration()
    names: list[Name] | None = None
    for command in reversed(command_stack):
        names = command.configuration.help_name_values
        if names is not None:
            break
    if names is None:
        names = configuration.help_name_values
    argument_set = command_stack[-1].argument_set()
    return [name for name in names if argument_set.first_matching(name) is None]


def version_for(command_stack: Sequence[type]) -> str:
    """The version of the nearest command on the stack that declares one."""
    for command in reversed(command_stack):
        if command.configuration.version:
            return command.configuration.version
    return ""


@dataclass
class HelpElement:
    label: str
    abstract: str = ""
    discussion: str = ""

    def rendered(self, columns: int) -> str:
        padded = " " * HELP_INDENT + self.label
        body_width = max(columns - LABEL_COLUMN_WIDTH, 20)
        lines = textwrap.wrap(self.abstract, body_width) if self.abstract else []
        indent = " " * LABEL_COLUMN_WIDTH
        if lines and len(padded) < LABEL_COLUMN_WIDTH:
            text = padded.ljust(LABEL_COLUMN_WIDTH) + lines[0] + "\n"
            text += "".join(f"{indent}{line}\n" for line in lines[1:])
        else:
            text = padded + "\n" + "".join(f"{indent}{line}\n" for line in lines)
        if self.discussion:
            discussion_indent = " " * (HELP_INDENT * 4)
            text += textwrap.fill(
                self.discussion,
                max(columns, 40),
                initial_indent=discussion_indent,
                subsequent_indent=discussion_indent,
            )
            text += "\n"
        return text


@dataclass
class HelpSection:
    title: str
    elements: list[HelpElement]

    def rendered(self, columns: int) -> str:
        if not self.elements:
            return ""
        return f"{self.title.upper()}:\n" + "".join(
            element.rendered(columns) for element in self.elements
        )


class HelpGenerator:
    """
    Builds the help text for the last command of `command_stack`.

    Args:
        command_stack (Sequence[type]): Root first; the last entry is the
            command being described.
        include_hidden (bool): Also list hidden arguments and commands.
        configuration (ParserConfiguration | None): Supplies default help names.
    """

    def __init__(
        self,
        command_stack: Sequence[type],
        include_hidden: bool = False,
        configuration: ParserConfiguration | None = None,
    ) -> None:
        if not command_stack:
            raise ValueError("HelpGenerator needs at least one command")
        self.command_stack = list(command_stack)
        self.command = self.command_stack[-1]
        self.include_hidden = include_hidden
        self.configuration = configuration or ParserConfiguration()
        self.command_configuration: CommandConfiguration = self.command.configuration

    @property
    def tool_name(self) -> str:
        return " ".join(command.command_name() for command in self.command_stack)

    @property
    def usage(self) -> str:
        if self.command_configuration.usage is not None:
            return self.command_configuration.usage
        synopsis = self.command.argument_set().synopsis()
        if not synopsis:
            text = self.tool_name
        elif len(synopsis) > MAX_SYNOPSIS_ARGUMENTS:
            text = f"{self.tool_name} <options>"
        else:
            text = f"{self.tool_name} {' '.join(synopsis)}"
        if self.command_configuration.subcommands:
            text += " <subcommand>"
        return text

    @property
    def usage_message(self) -> str:
        return f"Usage: {self.usage}"

    def _is_shown(self, definition: ArgumentDefinition) -> bool:
        minimum = ArgumentVisibility.HIDDEN if self.include_hidden else ArgumentVisibility.DEFAULT
        return definition.help.visibility.is_at_least_as_visible_as(minimum)

    def _describe(self, definition: ArgumentDefinition, merged: bool = False) -> str:
        parts = [definition.help.abstract] if definition.help.abstract else []
        if definition.help.all_values and not definition.is_nullary:
            parts.append(f"(values: {', '.join(definition.help.all_values)})")
        default = definition.help.default_value
        if default is not None and (merged or default not in ("true", "false")):
            parts.append(f"(default: {default})")
        return " ".join(parts)

    def _label(self, definition: ArgumentDefinition) -> str:
        label = definition.synopsis_for_help() or ""
        if definition.help.is_repeating and definition.is_positional:
            label += " ..."
        return label

    def sections(self) -> list[HelpSection]:
        definitions = [d for d in self.command.argument_set() if self._is_shown(d)]
        positionals: list[HelpElement] = []
        options: list[HelpElement] = []
        titled: dict[str, list[HelpElement]] = {}

        group_sizes = Counter(tuple(d.help.keys) for d in definitions)
        index = 0
        while index < len(definitions):
            definition = definitions[index]
            following = definitions[index + 1] if index + 1 < len(definitions) else None
            # An inverted pair shares one line: `--color/--no-color`.
            if (
                following is not None
                and definition.help.is_composite
                and group_sizes[tuple(definition.help.keys)] == 2
                and following.help.keys == definition.help.keys
                and following.help.abstract == definition.help.abstract
            ):
                element = HelpElement(
                    f"{self._label(definition)}/{self._label(following)}",
                    self._describe(definition, merged=True),
                    definition.help.discussion,
                )
                index += 2
            else:
                element = HelpElement(
                    self._label(definition),
                    self._describe(definition),
                    definition.help.discussion,
                )
                index += 1

            if definition.help.parent_title:
                titled.setdefault(definition.help.parent_title, []).append(element)
            elif definition.is_positional:
                positionals.append(element)
            else:
                options.append(element)

        version = self.command_configuration.version
        if version and self.command.argument_set().first_matching(Name.long("version")) is None:
            options.append(HelpElement("--version", "Show the version."))
        help_labels = ", ".join(
            name.synopsis for name in help_names_for(self.command_stack, self.configuration)
        )
        if help_labels:
            options.append(HelpElement(help_labels, "Show help information."))

        subcommands = []
        default = self.command_configuration.default_subcommand
        for subcommand in self.command_configuration.subcommands:
            if not subcommand.configuration.should_display and not self.include_hidden:
                continue
            label = subcommand.command_name()
            if subcommand is default:
                label += " (default)"
            subcommands.append(HelpElement(label, subcommand.configuration.abstract))

        return [
            HelpSection("Arguments", positionals),
            *(HelpSection(title, elements) for title, elements in titled.items()),
            HelpSection("Options", options),
            HelpSection("Subcommands", subcommands),
        ]

    def rendered(self, columns: int | None = None) -> str:
        columns = columns or console.width or 80
        abstract = self.command_configuration.abstract
        if self.command_configuration.discussion:
            abstract = f"{abstract}\n\n{self.command_configuration.discussion}".strip()
        text = ""
        if abstract:
            paragraphs = f"OVERVIEW: {abstract}".split("\n")
            text += "\n".join(textwrap.fill(line, columns) for line in paragraphs) + "\n\n"
        text += f"USAGE: {self.usage}\n\n"
        sections = [section.rendered(columns) for section in self.sections()]
        text += "\n".join(section for section in sections if section)
        if self.command_configuration.subcommands:
            text += f"\n  See '{self.tool_name} help <subcommand>' for detailed help.\n"
        return text.rstrip("\n") + "\n"


class HelpCommand(ParsableCommand):
    """The `help` subcommand: `tool help sub` shows the help for `sub`."""

    configuration = CommandConfiguration(
        command_name="help",
        abstract="Show subcommand help information.",
        help_names=[],
    )

    subcommands: list[str] = Argument(default_factory=list, help=ArgumentHelp.private())
    help: bool = Flag(name=["-h", "--help", "-help"], help=ArgumentHelp.private())

    def run(self) -> None:
        raise HelpRequested()
