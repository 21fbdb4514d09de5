# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The matching engine: assigns split input elements to argument definitions.

`ArgumentMatcher.match()` runs over one command level's `ArgumentSet`:

1. Every definition's `initial` runs first, so defaults are in place before
   any input is applied.
2. Named pass: each option element is looked up by exact spelling, then (for
   long names, unless disabled) as an unambiguous prefix of a long name. A
   match consumes values according to the definition's `ParsingStrategy`.
   Unknown options are left in place for a deeper command or for the caller's
   leftover check.
3. Positional pass: the complete elements no option consumed are assigned to
   positional definitions in declaration order. A value naming a subcommand
   ends the pass.

The engine stops at the first error. In lenient mode, used for command levels
that have subcommands, the first error is recorded on the result instead and
matching carries on, so that input meant for a deeper command does not fail
its parent.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from declarg.exceptions import (
    AmbiguousAbbreviationError,
    MissingValueForOptionError,
    ParserError,
    UnexpectedValueForOptionError,
)
from declarg.logger import logger
from declarg.parser.argument_definition import ArgumentDefinition, ParsingStrategy
from declarg.parser.argument_set import ArgumentSet
from declarg.parser.input_origin import InputOrigin, SplitIndex
from declarg.parser.name import Name, NameKind
from declarg.parser.parsed_values import ParsedValues
from declarg.parser.split_arguments import Element, ParsedArgument, SplitArguments


@dataclass
class MatchResult:
    """The values matched at one command level, plus the first error in lenient mode."""

    values: ParsedValues
    used_origins: InputOrigin = field(default_factory=InputOrigin)
    error: ParserError | None = None

    @property
    def is_partial(self) -> bool:
        return self.error is not None


class ArgumentMatcher:
    """
    Matches split input against one `ArgumentSet`.

    Args:
        argument_set (ArgumentSet): The definitions of this command level.
        allow_abbreviations (bool): Accept unambiguous prefixes of long names.
        subcommand_names (Iterable[str]): Names of this level's child commands;
            a positional value equal to one of them ends the positional pass.
        reserved_names (Iterable[Name]): Option names declared by deeper
            commands. An exact spelling of one is never expanded as an
            abbreviation at this level.
    """

    def __init__(
        self,
        argument_set: ArgumentSet,
        allow_abbreviations: bool = True,
        subcommand_names: Iterable[str] = (),
        reserved_names: Iterable[Name] = (),
    ) -> None:
        self.argument_set = argument_set
        self.allow_abbreviations = allow_abbreviations
        self.subcommand_names = set(subcommand_names)
        self.reserved_names = set(reserved_names)

    def match(self, split: SplitArguments, lenient: bool = False) -> MatchResult:
        values = ParsedValues(split.original_input)
        result = MatchResult(values)
        for definition in self.argument_set:
            definition.initial(InputOrigin(), values)

        remaining = split.copy()
        all_used: set[SplitIndex] = set()
        captures_all = self.argument_set.captures_all

        while True:
            element = remaining.pop_next()
            if element is None:
                break
            used: set[SplitIndex] = set()
            try:
                stop = self._match_element(element, remaining, values, used, captures_all)
            except ParserError as error:
                if not lenient:
                    raise
                if result.error is None:
                    result.error = error
                logger.debug("Deferred error at %s: %s", element.index, error)
                used.clear()
                continue
            finally:
                remaining.remove_all(used)
                all_used |= used
            if stop:
                logger.debug("Capture-all positional takes over at %s", element.index)
                break

        unused = split.copy()
        unused.remove_all(all_used)
        try:
            self._match_positionals(unused, values, all_used)
        except ParserError as error:
            if not lenient:
                raise
            if result.error is None:
                result.error = error

        result.used_origins = values.used_origins() | InputOrigin(frozenset(all_used))
        return result

    # -- named pass -------------------------------------------------------

    def _match_element(
        self,
        element: Element,
        remaining: SplitArguments,
        values: ParsedValues,
        used: set[SplitIndex],
        captures_all: bool,
    ) -> bool:
        """Apply one element; True means a capture-all positional takes over from here."""
        if element.is_value:
            return captures_all
        if element.is_terminator:
            return False

        parsed = element.argument
        if parsed is None:
            return captures_all
        definition = self.lookup(parsed.name, element.index)
        if definition is None:
            # An unmatched single-dash cluster may still match through its
            # sub-elements, which follow it in the input.
            return captures_all and not parsed.subarguments

        logger.debug("Matched %s at %s to %r", parsed, element.index, definition)
        if definition.is_nullary:
            if parsed.value is not None:
                raise UnexpectedValueForOptionError(element.index, parsed.name, parsed.value)
            definition.update(InputOrigin.of(element.index), parsed.name, values)
            used.add(element.index)
            return False
        self._parse_value(definition, parsed, element.index, remaining, values, used)
        return False

    def lookup(self, name: Name, index: SplitIndex) -> ArgumentDefinition | None:
        """Resolve a spelling to its definition: exact match first, then abbreviation."""
        definition = self.argument_set.first_matching(name)
        if definition is not None:
            return definition
        if (
            not self.allow_abbreviations
            or name.kind is not NameKind.LONG
            or name in self.reserved_names
        ):
            return None

        candidates: list[Name] = []
        matched: list[ArgumentDefinition] = []
        for long_name in self.argument_set.long_names():
            if not long_name.value.startswith(name.value):
                continue
            candidate = self.argument_set.first_matching(long_name)
            if candidate is None or any(candidate is seen for seen in matched):
                continue
            candidates.append(long_name)
            matched.append(candidate)
        if len(matched) > 1:
            raise AmbiguousAbbreviationError(index, name, candidates)
        if matched:
            logger.debug("Expanded abbreviation %s to %s", name, candidates[0])
            return matched[0]
        return None

    def _parse_value(
        self,
        definition: ArgumentDefinition,
        parsed: ParsedArgument,
        index: SplitIndex,
        remaining: SplitArguments,
        values: ParsedValues,
        used: set[SplitIndex],
    ) -> None:
        origin = InputOrigin.of(index)
        strategy = definition.parsing_strategy
        used.add(index)

        def apply(value_origin: InputOrigin, value: str) -> None:
            definition.update(value_origin, parsed.name, value, values)
            used.update(value_origin.indices)

        def attached_or_joined() -> bool:
            if parsed.value is not None:
                apply(origin, parsed.value)
                return True
            if definition.allows_joined_value:
                joined = remaining.extract_joined_value(index)
                if joined is not None:
                    joined_index, value = joined
                    apply(origin.inserting(joined_index), value)
                    remaining.remove(joined_index)
                    return True
            return False

        def missing() -> MissingValueForOptionError:
            return MissingValueForOptionError(origin, parsed.name, definition.value_name)

        if strategy is ParsingStrategy.NEXT_AS_VALUE:
            if attached_or_joined():
                return
            following = remaining.pop_next_element_if_value(after=index)
            if following is None:
                raise missing()
            apply(origin.inserting(following[0]), following[1])

        elif strategy is ParsingStrategy.SCANNING_FOR_VALUE:
            if attached_or_joined():
                return
            following = remaining.pop_next_value(after=index)
            if following is None:
                raise missing()
            apply(origin.inserting(following[0]), following[1])

        elif strategy is ParsingStrategy.UNCONDITIONAL:
            if attached_or_joined():
                return
            following = remaining.pop_next_element_as_value(after=index)
            if following is None:
                raise missing()
            apply(origin.inserting(following[0]), following[1])

        elif strategy is ParsingStrategy.ALL_REMAINING_INPUT:
            # A repeated occurrence starts the collection over.
            definition.initial(InputOrigin(), values)
            attached_or_joined()
            while True:
                following = remaining.pop_next_element_as_value(after=index)
                if following is None:
                    break
                apply(origin.inserting(following[0]), following[1])

        elif strategy is ParsingStrategy.UP_TO_NEXT_OPTION:
            attached_or_joined()
            while True:
                following = remaining.pop_next_element_if_value()
                if following is None:
                    break
                apply(origin.inserting(following[0]), following[1])

        else:
            raise missing()

    # -- positional pass --------------------------------------------------

    def _match_positionals(
        self,
        unused: SplitArguments,
        values: ParsedValues,
        all_used: set[SplitIndex],
    ) -> None:
        positionals = [
            definition
            for definition in self.argument_set.positionals()
            if definition.parsing_strategy is not ParsingStrategy.ALL_UNRECOGNIZED
        ]
        if not positionals:
            return

        stack = [element for element in unused if element.index.is_complete]
        terminator = unused.terminator_index
        post_terminator: list[Element] = []
        if any(d.parsing_strategy is ParsingStrategy.POST_TERMINATOR for d in positionals):
            if terminator is not None:
                post_terminator = [e for e in stack if e.index > terminator and e.is_value]
                stack = [e for e in stack if e.index <= terminator]

        def next_origin(unconditional: bool) -> SplitIndex | None:
            if not unconditional:
                while stack and not stack[0].is_value:
                    stack.pop(0)
            if not stack:
                return None
            element = stack[0]
            if (
                element.is_value
                and element.value in self.subcommand_names
                and (terminator is None or element.index < terminator)
            ):
                return None
            stack.pop(0)
            return element.index

        for definition in positionals:
            if definition.parsing_strategy is ParsingStrategy.POST_TERMINATOR:
                for element in post_terminator:
                    self._apply_positional(definition, element.index, unused, values, all_used)
                post_terminator = []
                continue

            unconditional = definition.parsing_strategy is ParsingStrategy.ALL_REMAINING_INPUT
            while True:
                index = next_origin(unconditional)
                if index is None:
                    break
                self._apply_positional(definition, index, unused, values, all_used)
                if not definition.is_repeating_positional:
                    break

    def _apply_positional(
        self,
        definition: ArgumentDefinition,
        index: SplitIndex,
        unused: SplitArguments,
        values: ParsedValues,
        all_used: set[SplitIndex],
    ) -> None:
        raw = unused.original_input_at(index)
        logger.debug("Positional %r takes %r at %s", definition, raw, index)
        definition.update(InputOrigin.of(index), None, raw, values)
        all_used.add(index)
