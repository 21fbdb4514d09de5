# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgumentDefinition`, the atomic unit of parser configuration.

Each definition describes one user-settable input: how it is spelled (a list
of `Name`s, or none for a positional), how many tokens it consumes
(`ParsingStrategy`), how a match mutates the in-progress `ParsedValues`
(`update`), what happens when it is never matched (`initial`), and how it is
presented in help (`DefinitionHelp`).

Definitions are built once per command type by the `ArgumentSet` builders and
are treated as read-only afterwards. All per-parse state lives in the
`ParsedValues` passed to `update` and `initial`.

Key Components:
- ArgumentVisibility: `default` / `hidden` / `private` display levels.
- ParsingStrategy: How many tokens a match consumes.
- DefinitionKind: Positional, named, or a fixed default that is never matched.
- UpdateKind: Nullary (presence only) or unary (consumes one raw string).
- DefinitionHelp: Everything the help renderer and error messages read.
- ArgumentDefinition: The definition itself.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

from declarg.exceptions import ArgumentDefinitionError
from declarg.parser.input_key import InputKey
from declarg.parser.name import Name, NameKind
from declarg.utils import to_kebab_case

if TYPE_CHECKING:
    from declarg.parser.input_origin import InputOrigin
    from declarg.parser.parsed_values import ParsedValues


class ArgumentVisibility(Enum):
    """
    Display level of an argument or command.

    Members:
        DEFAULT: Shown in standard help.
        HIDDEN: Shown only with `--help-hidden`.
        PRIVATE: Never shown.
    """

    DEFAULT = "default"
    HIDDEN = "hidden"
    PRIVATE = "private"

    @property
    def _rank(self) -> int:
        return {"default": 2, "hidden": 1, "private": 0}[self.value]

    def is_at_least_as_visible_as(self, other: ArgumentVisibility) -> bool:
        return self._rank >= other._rank

    def __str__(self) -> str:
        return self.value


class ParsingStrategy(Enum):
    """
    How an argument consumes input once matched.

    Members:
        NEXT_AS_VALUE: The attached value, or the next element if it is a value.
        SCANNING_FOR_VALUE: The first value anywhere after the option.
        UNCONDITIONAL: The next element, read verbatim even if it looks like an option.
        UP_TO_NEXT_OPTION: Every value up to the next option.
        ALL_REMAINING_INPUT: Everything after the option, including `--`.
        POST_TERMINATOR: (positionals) Only the values after `--`.
        ALL_UNRECOGNIZED: (positionals) Whatever no other argument claimed.

    Aliases:
        - "default" → "next_as_value"
        - "remaining" → "all_remaining_input"
    """

    NEXT_AS_VALUE = "next_as_value"
    SCANNING_FOR_VALUE = "scanning_for_value"
    UNCONDITIONAL = "unconditional"
    UP_TO_NEXT_OPTION = "up_to_next_option"
    ALL_REMAINING_INPUT = "all_remaining_input"
    POST_TERMINATOR = "post_terminator"
    ALL_UNRECOGNIZED = "all_unrecognized"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "default": "next_as_value",
            "remaining": "all_remaining_input",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> ParsingStrategy:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower().replace("-", "_")
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


class DefinitionKind(Enum):
    POSITIONAL = "positional"
    NAMED = "named"
    DEFAULT = "default"


class UpdateKind(Enum):
    NULLARY = "nullary"
    UNARY = "unary"


NullaryUpdate = Callable[["InputOrigin", Union[Name, None], "ParsedValues"], None]
UnaryUpdate = Callable[["InputOrigin", Union[Name, None], str, "ParsedValues"], None]
Initial = Callable[["InputOrigin", "ParsedValues"], None]


def no_initial(origin: InputOrigin, values: ParsedValues) -> None:
    """Leave the key unset so decoding reports it as missing."""


@dataclass
class DefinitionHelp:
    """
    Help-facing description of a definition.

    Attributes:
        keys (list[InputKey]): The keys this definition can write. A flag group
            writes one key from several definitions; a definition writes one
            key unless it is composite.
        abstract (str): One-line description.
        discussion (str): Longer description shown below the abstract.
        value_name (str | None): Placeholder in `--name <value>`; defaults to
            the kebab-cased key name.
        visibility (ArgumentVisibility): Display level.
        default_value (str | None): Display form of the default.
        is_optional (bool): May be omitted.
        is_repeating (bool): May be given more than once.
        is_composite (bool): One case of a multi-definition flag group.
        all_values (list[str]): Display forms of every accepted value.
        parent_title (str): Section title inherited from an option group.
    """

    keys: list[InputKey]
    abstract: str = ""
    discussion: str = ""
    value_name: str | None = None
    visibility: ArgumentVisibility = ArgumentVisibility.DEFAULT
    default_value: str | None = None
    is_optional: bool = False
    is_repeating: bool = False
    is_composite: bool = False
    all_values: list[str] = field(default_factory=list)
    parent_title: str = ""

    @property
    def should_display(self) -> bool:
        return self.visibility is ArgumentVisibility.DEFAULT


def _sort_key(name: Name) -> tuple[int, str]:
    order = {
        NameKind.LONG_WITH_SHORT_PREFIX: 0,
        NameKind.SHORT: 1,
        NameKind.LONG: 2,
    }
    return order[name.kind], name.value


@dataclass
class ArgumentDefinition:
    """
    One argument's complete specification.

    `update` is called with `(origin, name, values)` for nullary definitions and
    `(origin, name, raw_value, values)` for unary ones; `name` is None for
    positionals. `initial` is called once per parse before any input is read.
    """

    kind: DefinitionKind
    help: DefinitionHelp
    update_kind: UpdateKind
    update: Callable[..., None]
    names: list[Name] = field(default_factory=list)
    parsing_strategy: ParsingStrategy = ParsingStrategy.NEXT_AS_VALUE
    initial: Initial = no_initial

    def __post_init__(self) -> None:
        if not self.help.keys:
            raise ArgumentDefinitionError("An argument definition needs at least one key")
        if self.kind is DefinitionKind.NAMED and not self.names:
            raise ArgumentDefinitionError(
                f"Named argument '{self.help.keys[0]}' has no names"
            )
        if self.kind is DefinitionKind.POSITIONAL:
            if self.update_kind is UpdateKind.NULLARY:
                raise ArgumentDefinitionError(
                    f"Positional argument '{self.help.keys[0]}' must take a value"
                )
            if self.names:
                raise ArgumentDefinitionError(
                    f"Positional argument '{self.help.keys[0]}' cannot have names"
                )
        positional_only = (ParsingStrategy.POST_TERMINATOR, ParsingStrategy.ALL_UNRECOGNIZED)
        if self.kind is DefinitionKind.NAMED and self.parsing_strategy in positional_only:
            raise ArgumentDefinitionError(
                f"Parsing strategy '{self.parsing_strategy}' only applies to positional arguments"
            )

    @property
    def key(self) -> InputKey:
        return self.help.keys[0]

    @property
    def is_positional(self) -> bool:
        return self.kind is DefinitionKind.POSITIONAL

    @property
    def is_named(self) -> bool:
        return self.kind is DefinitionKind.NAMED

    @property
    def is_nullary(self) -> bool:
        return self.update_kind is UpdateKind.NULLARY

    @property
    def is_repeating_positional(self) -> bool:
        return self.is_positional and self.help.is_repeating

    @property
    def allows_joined_value(self) -> bool:
        return any(name.is_short and name.allows_joined for name in self.names)

    @property
    def sorted_names(self) -> list[Name]:
        return sorted(self.names, key=_sort_key)

    @property
    def preferred_name(self) -> Name | None:
        """The spelling used in synopses: the last long name, else a short one."""
        names = self.sorted_names
        return names[-1] if names else None

    @property
    def value_name(self) -> str:
        return self.help.value_name or to_kebab_case(self.key.name)

    def unadorned_synopsis(self) -> str | None:
        if self.kind is DefinitionKind.DEFAULT:
            return None
        if self.is_positional:
            return f"<{self.value_name}>"
        name = self.preferred_name
        if name is None:
            return None
        if self.is_nullary:
            return name.synopsis
        return f"{name.synopsis} <{self.value_name}>"

    def synopsis(self) -> str | None:
        """Usage form: `[--name <value>]`, `<file> ...`, `[--verbose]`."""
        if not self.help.should_display:
            return None
        text = self.unadorned_synopsis()
        if text is None:
            return None
        if self.help.is_repeating:
            text = f"{text} ..."
        if self.help.is_optional:
            text = f"[{text}]"
        return text

    def synopsis_for_help(self) -> str | None:
        """Help-column form: every name, e.g. `-o, --output <output>`."""
        if self.kind is DefinitionKind.DEFAULT:
            return None
        if self.is_positional:
            return f"<{self.value_name}>"
        joined = ", ".join(name.synopsis for name in self.sorted_names)
        if self.is_nullary:
            return joined
        return f"{joined} <{self.value_name}>"

    def optional(self) -> ArgumentDefinition:
        return replace(self, help=replace(self.help, is_optional=True))

    def non_optional(self) -> ArgumentDefinition:
        return replace(self, help=replace(self.help, is_optional=False))

    def with_help(self, **changes: Any) -> ArgumentDefinition:
        return replace(self, help=replace(self.help, **changes))

    def __repr__(self) -> str:
        spelling = self.unadorned_synopsis() or self.key.full_path_string
        return (
            f"ArgumentDefinition({self.kind.value} {spelling}, "
            f"strategy={self.parsing_strategy.value})"
        )
