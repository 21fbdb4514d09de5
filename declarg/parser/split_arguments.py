# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Splits raw command-line tokens into classified elements.

This is the lexical stage of parsing. Each token becomes one or more
`Element`s that are either an option occurrence (with its attached `=value`,
if any), a plain value, or the `--` terminator. Nothing here looks at the
declared arguments: deciding what an element means is the matcher's job.

Classification rules:
- no leading dash, or a lone `-`: a value
- `--`: the terminator; every later token is a value, whatever it looks like
- `--name` / `--name=value`: a long option
- `-n` / `-n=value`: a short option
- `-abc`: a long-with-short-prefix option `-abc`, followed by the short
  options `-a`, `-b`, `-c` as sub-elements of the same token
- `-abc=value`: a long-with-short-prefix option carrying a value
- three or more leading dashes, or an empty name before `=`: `InvalidOptionError`

The matcher consumes elements through the mutation helpers of
`SplitArguments`. Removing a cluster's sub-element also removes the complete
element of that token, and removing a complete element removes its
sub-elements, so a token is never used twice.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Sequence

from declarg.exceptions import InvalidOptionError
from declarg.parser.input_origin import InputOrigin, SplitIndex
from declarg.parser.name import Name, NameKind


@dataclass(frozen=True)
class ParsedArgument:
    """A single `-f`, `--foo` or `--foo=bar` occurrence."""

    name: Name
    value: str | None = None

    @property
    def subarguments(self) -> list[tuple[int, ParsedArgument]]:
        """The short options packed into a single-dash token such as `-abc`."""
        if self.value is not None or self.name.kind is not NameKind.LONG_WITH_SHORT_PREFIX:
            return []
        return [
            (offset, ParsedArgument(Name.short(char)))
            for offset, char in enumerate(self.name.value)
        ]

    def __str__(self) -> str:
        if self.value is None:
            return self.name.synopsis
        return f"{self.name.synopsis}={self.value}"


class ElementKind(Enum):
    OPTION = "option"
    VALUE = "value"
    TERMINATOR = "terminator"


@dataclass(frozen=True)
class Element:
    kind: ElementKind
    index: SplitIndex
    argument: ParsedArgument | None = None
    value: str | None = None

    @classmethod
    def option(cls, argument: ParsedArgument, index: SplitIndex) -> Element:
        return cls(ElementKind.OPTION, index, argument=argument)

    @classmethod
    def of_value(cls, value: str, index: SplitIndex) -> Element:
        return cls(ElementKind.VALUE, index, value=value)

    @classmethod
    def terminator(cls, index: SplitIndex) -> Element:
        return cls(ElementKind.TERMINATOR, index)

    @property
    def is_value(self) -> bool:
        return self.kind is ElementKind.VALUE

    @property
    def is_option(self) -> bool:
        return self.kind is ElementKind.OPTION

    @property
    def is_terminator(self) -> bool:
        return self.kind is ElementKind.TERMINATOR


def _parse_with_value(remainder: str, single_dash: bool) -> ParsedArgument:
    def make_name(text: str) -> Name:
        if not single_dash:
            return Name.long(text)
        if len(text) == 1:
            return Name.short(text)
        return Name.long_with_short_prefix(text)

    name, equals, value = remainder.partition("=")
    if not name:
        prefix = "-" if single_dash else "--"
        raise InvalidOptionError(f"{prefix}{remainder}")
    if not equals or (not single_dash and not value):
        return ParsedArgument(make_name(name))
    return ParsedArgument(make_name(name), value)


def parse_individual_argument(token: str, position: int) -> list[Element]:
    """Classify one raw token. See the module docstring for the rules."""
    index = SplitIndex(position)
    stripped = token.lstrip("-")
    dash_count = len(token) - len(stripped)

    if not stripped:
        if dash_count <= 1:
            return [Element.of_value(token, index)]
        if dash_count == 2:
            return [Element.terminator(index)]
        raise InvalidOptionError(token)

    if dash_count == 0:
        return [Element.of_value(token, index)]
    if dash_count == 2:
        return [Element.option(_parse_with_value(stripped, single_dash=False), index)]
    if dash_count > 2:
        raise InvalidOptionError(token)

    parsed = _parse_with_value(stripped, single_dash=True)
    if parsed.value is not None or parsed.name.is_short:
        return [Element.option(parsed, index)]
    elements = [Element.option(parsed, index)]
    for offset, sub_argument in parsed.subarguments:
        elements.append(Element.option(sub_argument, SplitIndex(position, offset)))
    return elements


class SplitArguments:
    """
    The classified, still-unconsumed input of one parse.

    Elements are kept sorted by `SplitIndex`. The original tokens are kept
    alongside so that any element can be read back verbatim, which is how an
    option-looking token is taken as a value by unconditional strategies.
    """

    def __init__(
        self,
        arguments: Sequence[str],
        elements: Iterable[Element] | None = None,
    ) -> None:
        self.original_input: list[str] = list(arguments)
        if elements is not None:
            self.elements: list[Element] = list(elements)
            return
        self.elements = []
        terminated = False
        for position, token in enumerate(self.original_input):
            if terminated:
                self.elements.append(Element.of_value(token, SplitIndex(position)))
                continue
            parsed = parse_individual_argument(token, position)
            self.elements.extend(parsed)
            terminated = any(element.is_terminator for element in parsed)

    def copy(self) -> SplitArguments:
        return SplitArguments(self.original_input, self.elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    def __bool__(self) -> bool:
        return bool(self.elements)

    @property
    def is_empty(self) -> bool:
        return not self.elements

    @property
    def terminator_index(self) -> SplitIndex | None:
        for element in self.elements:
            if element.is_terminator:
                return element.index
        return None

    def original_input_at(self, index: SplitIndex) -> str:
        return self.original_input[index.input_index]

    def _position_after(self, index: SplitIndex) -> int | None:
        for position, element in enumerate(self.elements):
            if element.index > index:
                return position
        return None

    def peek_next(self) -> Element | None:
        return self.elements[0] if self.elements else None

    def pop_next(self) -> Element | None:
        if not self.elements:
            return None
        return self.elements.pop(0)

    def pop_next_element_if_value(
        self, after: SplitIndex | None = None
    ) -> tuple[SplitIndex, str] | None:
        """
        Pop the next complete element if it is a value.

        With `after`, looks at the first complete element following that
        position, so `-fn f-value n-value` hands each packed option its value in
        order. Without it, only the first remaining element is considered.
        """
        if after is None:
            if self.elements and self.elements[0].is_value:
                element = self.elements.pop(0)
                return element.index, element.value  # type: ignore[return-value]
            return None
        start = self._position_after(after)
        if start is None:
            return None
        for position in range(start, len(self.elements)):
            element = self.elements[position]
            if not element.index.is_complete:
                continue
            if not element.is_value:
                return None
            del self.elements[position]
            return element.index, element.value  # type: ignore[return-value]
        return None

    def pop_next_value(self, after: SplitIndex) -> tuple[SplitIndex, str] | None:
        """Pop the first value anywhere after `after`, skipping over options."""
        start = self._position_after(after)
        if start is None:
            return None
        for position in range(start, len(self.elements)):
            element = self.elements[position]
            if element.is_value:
                del self.elements[position]
                return element.index, element.value  # type: ignore[return-value]
        return None

    def pop_next_element_as_value(self, after: SplitIndex) -> tuple[SplitIndex, str] | None:
        """
        Pop the next complete element whatever its kind, read back verbatim.

        For `--a --b foo`, starting after `--a`, this yields `--b` and then `foo`.
        """
        start = self._position_after(after)
        if start is None:
            return None
        for element in self.elements[start:]:
            if element.index.is_complete:
                self.remove(element.index)
                return element.index, self.original_input_at(element.index)
        return None

    def extract_joined_value(self, at: SplitIndex) -> tuple[SplitIndex, str] | None:
        """
        The characters following the short option at `at` within its cluster.

        For `-vofile.txt` and the `-o` at offset 1, this is `file.txt`. The
        returned index is the complete token, so consuming it removes the rest
        of the cluster.
        """
        if at.sub_index is None:
            return None
        token = self.original_input_at(at)
        value = token[at.sub_index + 2 :]
        if not value:
            return None
        return at.complete_index, value

    def remove(self, index: SplitIndex) -> None:
        if index.is_complete:
            self.elements = [
                element
                for element in self.elements
                if element.index.input_index != index.input_index
            ]
        else:
            complete = index.complete_index
            self.elements = [
                element
                for element in self.elements
                if element.index != index and element.index != complete
            ]

    def remove_all(self, origin: InputOrigin | Iterable[SplitIndex]) -> None:
        indices = origin.indices if isinstance(origin, InputOrigin) else origin
        for index in indices:
            self.remove(index)

    def remove_post_terminator_values(self) -> list[Element]:
        """Take out and return the values that follow the terminator."""
        terminator = self.terminator_index
        if terminator is None:
            return []
        taken = [element for element in self.elements if element.index > terminator]
        self.elements = [element for element in self.elements if element.index <= terminator]
        return taken

    def option_names(self) -> list[Name]:
        return [
            element.argument.name
            for element in self.elements
            if element.is_option and element.argument is not None
        ]

    def contains_any(self, names: Iterable[Name]) -> bool:
        wanted = set(names)
        return any(name in wanted for name in self.option_names())

    def coalesced_extra_elements(self) -> list[tuple[InputOrigin, str]]:
        """
        The remaining input as the user typed it, one entry per leftover.

        Terminators are skipped. A cluster whose complete element is gone is
        reported per leftover character, e.g. `-x` for the unmatched `x` of `-vx`.
        """
        complete_inputs = {
            element.index.input_index
            for element in self.elements
            if element.index.is_complete
        }
        extras = []
        for element in self.elements:
            if element.is_terminator:
                continue
            if element.index.is_complete:
                extras.append(
                    (InputOrigin.of(element.index), self.original_input_at(element.index))
                )
            elif element.index.input_index not in complete_inputs:
                text = (
                    str(element.argument)
                    if element.argument is not None
                    else self.original_input_at(element.index)
                )
                extras.append((InputOrigin.of(element.index), text))
        return extras

    def __repr__(self) -> str:
        parts = []
        for element in self.elements:
            if element.is_option:
                parts.append(f"[{element.index}] {element.argument}")
            elif element.is_value:
                parts.append(f"[{element.index}] {element.value!r}")
            else:
                parts.append(f"[{element.index}] --")
        return f"SplitArguments({', '.join(parts)})"
