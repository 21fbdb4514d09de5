# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The command tree walker.

`CommandParser` parses the input of a whole command tree. Starting at the
root it repeats, for each command level:

1. Match the level's `ArgumentSet` against the remaining input. Levels that
   have subcommands match leniently: input they do not understand is left for
   a deeper command.
2. Decode the level's instance. If decoding fails and the user asked for
   help, help wins over the error.
3. Remove the input the level used, then look at the next element. A value
   naming a child command moves the walk into that child.
4. Otherwise check for the builtin flags, then fall back to the default
   subcommand, or stop.

Whatever input is left once the walk stops is reported as an unknown option
or as unexpected arguments. Every failure is re-raised as a `CommandError`
carrying the command path it happened at.

The walker moves through the `ParseState` values:

    AWAITING_SUBCOMMAND_TOKEN -> RESOLVED_TO_LEAF
                              -> HELP_REQUESTED
                              -> VERSION_REQUESTED
                              -> PARSE_FAILED
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import TYPE_CHECKING, Any, NoReturn, Sequence

from declarg.configuration import ParserConfiguration
from declarg.exceptions import (
    ArgumentDefinitionError,
    CommandError,
    MissingValueForOptionError,
    NoValueError,
    ParserError,
    UnexpectedExtraValuesError,
    UnknownOptionError,
)
from declarg.help import HelpCommand, help_names_for, version_for
from declarg.interactive import Interactor
from declarg.logger import logger
from declarg.parser.argument_definition import ParsingStrategy
from declarg.parser.argument_matcher import ArgumentMatcher, MatchResult
from declarg.parser.argument_set import ArgumentSet
from declarg.parser.input_origin import InputOrigin
from declarg.parser.name import Name
from declarg.parser.split_arguments import SplitArguments
from declarg.signals import HelpRequested, VersionRequested

if TYPE_CHECKING:
    from declarg.parsable import ParsableArguments

HELP_HIDDEN = Name.long("help-hidden")
VERSION = Name.long("version")
SUGGESTION_CUTOFF = 0.6


class ParseState(Enum):
    AWAITING_SUBCOMMAND_TOKEN = "awaiting_subcommand_token"
    RESOLVED_TO_LEAF = "resolved_to_leaf"
    HELP_REQUESTED = "help_requested"
    VERSION_REQUESTED = "version_requested"
    PARSE_FAILED = "parse_failed"


class CommandTree:
    """A command type and the trees of its subcommands."""

    def __init__(self, element: type, parent: CommandTree | None = None) -> None:
        self.element = element
        self.parent = parent
        self.children: list[CommandTree] = []
        for subcommand in element.configuration.subcommands:
            if self._is_ancestor(subcommand):
                raise ArgumentDefinitionError(
                    f"'{subcommand.__name__}' is listed as a subcommand of itself"
                )
            self.children.append(CommandTree(subcommand, self))

    @classmethod
    def build(cls, root: type) -> CommandTree:
        """The tree rooted at `root`, with a `help` child if it has subcommands."""
        tree = cls(root)
        if not tree.is_leaf and tree.first_child(HelpCommand.command_name()) is None:
            tree.children.append(cls(HelpCommand, tree))
        return tree

    def _is_ancestor(self, element: type) -> bool:
        node: CommandTree | None = self
        while node is not None:
            if node.element is element:
                return True
            node = node.parent
        return False

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def child_names(self) -> list[str]:
        names = []
        for child in self.children:
            names.append(child.element.command_name())
            names.extend(child.element.configuration.aliases)
        return names

    def first_child(self, name: str) -> CommandTree | None:
        for child in self.children:
            configuration = child.element.configuration
            if child.element.command_name() == name or name in configuration.aliases:
                return child
        return None

    def first_child_of(self, element: type) -> CommandTree | None:
        for child in self.children:
            if child.element is element:
                return child
        return None

    def descendant_names(self) -> list[Name]:
        """Every option name declared below this node."""
        names: list[Name] = []
        for child in self.children:
            names.extend(child.element.argument_set().names())
            names.extend(child.descendant_names())
        return names

    def path_to(self, element: type) -> list[type]:
        """The breadth-first shortest path of types from this node to `element`."""
        queue: list[tuple[CommandTree, list[type]]] = [(self, [self.element])]
        while queue:
            node, path = queue.pop(0)
            if node.element is element:
                return path
            queue.extend((child, path + [child.element]) for child in node.children)
        return []

    def command_stack_for(self, names: Sequence[str]) -> list[type]:
        """
        The types named by `names`, starting at this node. Stops at the first
        name that is not a child command.
        """
        node = self
        stack = [self.element]
        for name in names:
            child = node.first_child(name)
            if child is None:
                break
            stack.append(child.element)
            node = child
        return stack

    def __repr__(self) -> str:
        return f"CommandTree({self.element.__name__}, children={len(self.children)})"


@dataclass
class ParseResult:
    command: Any
    command_stack: list[type]
    state: ParseState


def _insert_after(arguments: list[str], origin: InputOrigin, value: str) -> list[str]:
    index = origin.first_index
    position = len(arguments) if index is None else index.input_index + 1
    return arguments[:position] + [value] + arguments[position:]


class CommandParser:
    """
    Parses input against the command tree rooted at `root`.

    Args:
        root (type): The root `ParsableArguments` type.
        configuration (ParserConfiguration | None): Parser-wide settings.
        interactor (Interactor | None): Asks for missing values. Defaults to a
            terminal `Interactor` when `prompt_for_missing` is set.
    """

    def __init__(
        self,
        root: type,
        configuration: ParserConfiguration | None = None,
        interactor: Interactor | None = None,
    ) -> None:
        self.configuration = configuration or ParserConfiguration()
        self.tree = CommandTree.build(root)
        if interactor is None and self.configuration.prompt_for_missing:
            interactor = Interactor()
        self.interactor = interactor
        self.state = ParseState.AWAITING_SUBCOMMAND_TOKEN
        self.current = self.tree
        self.decoded: list[ParsableArguments] = []

    @property
    def command_stack(self) -> list[type]:
        stack = []
        node: CommandTree | None = self.current
        while node is not None:
            stack.append(node.element)
            node = node.parent
        return stack[::-1]

    @property
    def can_prompt(self) -> bool:
        return self.interactor is not None and self.interactor.is_available

    def parse(self, arguments: Sequence[str] | None = None) -> ParseResult:
        """
        Parse `arguments` (default: `sys.argv[1:]`) down to a leaf command.

        Raises:
            CommandError: If the input is invalid.
            HelpRequested / VersionRequested: If the user asked for help or the version.
        """
        arguments = list(sys.argv[1:] if arguments is None else arguments)
        while True:
            self.state = ParseState.AWAITING_SUBCOMMAND_TOKEN
            self.current = self.tree
            self.decoded = []
            logger.debug("Parsing %r against %s", arguments, self.tree.element.__name__)
            try:
                command = self._descend(SplitArguments(arguments))
            except MissingValueForOptionError as error:
                if self.interactor is None or not self.interactor.is_available:
                    self._fail(error)
                answer = self.interactor.value_for_option(error)
                arguments = _insert_after(arguments, error.origin, answer)
                logger.debug("Restarting with interactive value: %r", arguments)
                continue
            except ParserError as error:
                self._fail(error)
            except HelpRequested:
                self.state = ParseState.HELP_REQUESTED
                raise
            except VersionRequested:
                self.state = ParseState.VERSION_REQUESTED
                raise
            self.state = ParseState.RESOLVED_TO_LEAF
            logger.debug("Resolved to %r", command)
            return ParseResult(command, self.command_stack, self.state)

    def _fail(self, error: ParserError) -> NoReturn:
        self.state = ParseState.PARSE_FAILED
        logger.debug("Parse failed at %s: %s", self.current.element.__name__, error)
        raise CommandError(self.command_stack, error) from error

    # -- the walk -----------------------------------------------------------

    def _descend(self, split: SplitArguments) -> ParsableArguments:
        while True:
            deferred = self._parse_current(split)
            if self._consume_subcommand(split):
                continue
            self._check_builtin_flags(split)
            default = self.current.element.configuration.default_subcommand
            if default is not None:
                child = self.current.first_child_of(default)
                if child is None:
                    raise ArgumentDefinitionError(
                        f"Default subcommand '{default.__name__}' is not in the command tree"
                    )
                logger.debug("Falling back to default subcommand %s", default.__name__)
                self.current = child
                continue
            if deferred is not None:
                raise deferred
            return self._finish(split)

    def _parse_current(self, split: SplitArguments) -> ParserError | None:
        """Match and decode the current level; returns its deferred lenient error."""
        node = self.current
        command_type = node.element
        argument_set = command_type.argument_set()
        reserved = node.descendant_names()
        reserved += help_names_for(self.command_stack, self.configuration)
        reserved += [HELP_HIDDEN, VERSION]
        matcher = ArgumentMatcher(
            argument_set,
            allow_abbreviations=self.configuration.allow_abbreviations,
            subcommand_names=node.child_names,
            reserved_names=reserved,
        )
        result = matcher.match(split, lenient=not node.is_leaf)
        if node.is_leaf and argument_set.captures_unrecognized:
            self._capture_unrecognized(split, result, argument_set)

        while True:
            try:
                command = command_type.decode_values(
                    result.values, argument_set, ancestors=self.decoded
                )
                break
            except ParserError as error:
                self._check_builtin_flags(split)
                if (
                    isinstance(error, NoValueError)
                    and self.can_prompt
                    and self.interactor.fill_missing(error, argument_set, result.values)
                ):
                    continue
                raise result.error or error

        split.remove_all(result.used_origins)
        self.decoded.append(command)
        logger.debug("Decoded %s; remaining input: %r", command_type.__name__, split)
        return result.error

    def _capture_unrecognized(
        self, split: SplitArguments, result: MatchResult, argument_set: ArgumentSet
    ) -> None:
        remaining = split.copy()
        remaining.remove_all(result.used_origins)
        builtin = {name.synopsis for name in self._builtin_names()}
        definition = next(
            d
            for d in argument_set
            if d.is_positional and d.parsing_strategy is ParsingStrategy.ALL_UNRECOGNIZED
        )
        captured = InputOrigin()
        for origin, text in remaining.coalesced_extra_elements():
            if text in builtin:
                continue
            definition.update(origin, None, text, result.values)
            captured = captured | origin
        result.used_origins = result.used_origins | captured

    def _consume_subcommand(self, split: SplitArguments) -> bool:
        element = split.peek_next()
        if element is None or not element.is_value:
            return False
        child = self.current.first_child(split.original_input_at(element.index))
        if child is None:
            return False
        split.pop_next()
        logger.debug("Descending into subcommand %s", child.element.__name__)
        self.current = child
        return True

    # -- builtin flags ------------------------------------------------------

    def _builtin_names(self) -> list[Name]:
        names = help_names_for(self.command_stack, self.configuration)
        argument_set = self.current.element.argument_set()
        for name in (HELP_HIDDEN, VERSION):
            if argument_set.first_matching(name) is None:
                names.append(name)
        return names

    def _check_builtin_flags(self, split: SplitArguments) -> None:
        """Raise the flow signal for a help or version flag left in `split`."""
        stack = self.command_stack
        if split.contains_any(help_names_for(stack, self.configuration)):
            raise HelpRequested(stack)
        argument_set = self.current.element.argument_set()
        if argument_set.first_matching(HELP_HIDDEN) is None and split.contains_any(
            [HELP_HIDDEN]
        ):
            raise HelpRequested(stack, include_hidden=True)
        version = version_for(stack)
        if (
            version
            and argument_set.first_matching(VERSION) is None
            and split.contains_any([VERSION])
        ):
            raise VersionRequested(version)

    # -- leftovers ----------------------------------------------------------

    def _suggestion(self, name: Name) -> Name | None:
        if name.is_short:
            return None
        candidates = {
            candidate.value: candidate
            for candidate in self.current.element.argument_set().names()
            if not candidate.is_short
        }
        matches = get_close_matches(
            name.value, list(candidates), n=1, cutoff=SUGGESTION_CUTOFF
        )
        return candidates[matches[0]] if matches else None

    def _finish(self, split: SplitArguments) -> ParsableArguments:
        self._check_builtin_flags(split)
        leftovers = [element for element in split if not element.is_terminator]
        for element in leftovers:
            if element.is_option and element.argument is not None:
                name = element.argument.name
                raise UnknownOptionError(element.index, name, self._suggestion(name))
        if leftovers:
            raise UnexpectedExtraValuesError(split.coalesced_extra_elements())

        command = self.decoded[-1]
        if isinstance(command, HelpCommand):
            stack = self.tree.command_stack_for(command.subcommands)
            raise HelpRequested(stack)
        return command
