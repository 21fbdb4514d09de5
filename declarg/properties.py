# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Field declarations for `ParsableArguments` types.

Each declaration is a descriptor assigned in a class body. Its value type comes
from the field's annotation (or an explicit `type=`), and the declaration turns
into the field's `ArgumentSet` when the owning type's arguments are assembled:

    class Repeat(ParsableCommand):
        phrase: str = Argument(help="The phrase to repeat.")
        count: int | None = Option(help="How many times to repeat.")
        include_counter: bool = Flag(help="Include a counter with each repetition.")

Until a value is parsed or assigned, reading a field on an instance raises
`ArgumentNotParsedError`; reading it on the class returns the declaration.

Key Components:
- ArgumentHelp: Help text, value name and visibility of one field.
- SingleValueParsing / ArrayParsing / ArgumentArrayParsing: User-facing
  parsing strategies, each mapped to an engine `ParsingStrategy`.
- Argument: A positional argument.
- Option: A named option taking a value.
- Flag: A Boolean, tri-state, counting or enum-selecting flag.
- OptionGroup: Embeds another `ParsableArguments` type's fields.
- ParentCommand: Resolves to an already-decoded ancestor command.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import EnumMeta
from typing import TYPE_CHECKING, Any, Callable, Sequence

from declarg.exceptions import ArgumentDefinitionError, ArgumentNotParsedError, NoValueError
from declarg.parser.argument_definition import ArgumentVisibility, ParsingStrategy
from declarg.parser.argument_set import ArgumentSet, FlagCase
from declarg.parser.input_key import InputKey
from declarg.parser.name import NameElement, NameSpecification
from declarg.parser.parsed_values import ParsedValues
from declarg.parser.parser_types import MISSING, FlagExclusivity, FlagInversion, _AliasedEnum
from declarg.parser.signature import FieldShape, analyze_annotation, make_transform
from declarg.parser.utils import all_values_for

if TYPE_CHECKING:
    from declarg.parsable import ParsableArguments

NameArgument = NameSpecification | NameElement | str | Sequence[str | NameElement] | None


@dataclass
class ArgumentHelp:
    """
    Help information for one field.

    A plain string is accepted wherever an `ArgumentHelp` is, and becomes the
    abstract.
    """

    abstract: str = ""
    discussion: str = ""
    value_name: str | None = None
    visibility: ArgumentVisibility = ArgumentVisibility.DEFAULT

    @classmethod
    def hidden(cls, abstract: str = "", **kwargs: Any) -> ArgumentHelp:
        return cls(abstract, visibility=ArgumentVisibility.HIDDEN, **kwargs)

    @classmethod
    def private(cls) -> ArgumentHelp:
        return cls(visibility=ArgumentVisibility.PRIVATE)

    @classmethod
    def coerce(cls, value: ArgumentHelp | str | None) -> ArgumentHelp:
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(value)
        return value

    def as_fields(self) -> dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


class SingleValueParsing(_AliasedEnum):
    """
    How a single-valued option finds its value.

    Members:
        NEXT: The attached value, or the next input if it is not an option.
        SCANNING_FOR_VALUE: The first value anywhere after the option.
        UNCONDITIONAL: The next input, even if it starts with a dash.

    Aliases:
        - "scanning" → "scanning_for_value"
    """

    NEXT = "next"
    SCANNING_FOR_VALUE = "scanning_for_value"
    UNCONDITIONAL = "unconditional"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        return {"scanning": "scanning_for_value"}.get(value, value)

    @property
    def strategy(self) -> ParsingStrategy:
        return {
            SingleValueParsing.NEXT: ParsingStrategy.NEXT_AS_VALUE,
            SingleValueParsing.SCANNING_FOR_VALUE: ParsingStrategy.SCANNING_FOR_VALUE,
            SingleValueParsing.UNCONDITIONAL: ParsingStrategy.UNCONDITIONAL,
        }[self]


class ArrayParsing(_AliasedEnum):
    """
    How a repeating option collects values.

    Members:
        SINGLE_VALUE: One value per occurrence: `--read a --read b`.
        UNCONDITIONAL_SINGLE_VALUE: One value per occurrence, dashes and all.
        UP_TO_NEXT_OPTION: Every value up to the next option: `--read a b`.
        REMAINING: Everything after the option, options included.
    """

    SINGLE_VALUE = "single_value"
    UNCONDITIONAL_SINGLE_VALUE = "unconditional_single_value"
    UP_TO_NEXT_OPTION = "up_to_next_option"
    REMAINING = "remaining"

    @property
    def strategy(self) -> ParsingStrategy:
        return {
            ArrayParsing.SINGLE_VALUE: ParsingStrategy.NEXT_AS_VALUE,
            ArrayParsing.UNCONDITIONAL_SINGLE_VALUE: ParsingStrategy.UNCONDITIONAL,
            ArrayParsing.UP_TO_NEXT_OPTION: ParsingStrategy.UP_TO_NEXT_OPTION,
            ArrayParsing.REMAINING: ParsingStrategy.ALL_REMAINING_INPUT,
        }[self]


class ArgumentArrayParsing(_AliasedEnum):
    """
    How a repeating positional argument collects values.

    Members:
        REMAINING: Every remaining value that is not an option.
        CAPTURE_FOR_PASSTHROUGH: Everything from the first value on,
            options included, for passing to another program.
        POST_TERMINATOR: Only the values after `--`.
        ALL_UNRECOGNIZED: Whatever no other argument claimed, options included.

    Aliases:
        - "passthrough" → "capture_for_passthrough"
        - "unconditional_remaining" → "capture_for_passthrough"
    """

    REMAINING = "remaining"
    CAPTURE_FOR_PASSTHROUGH = "capture_for_passthrough"
    POST_TERMINATOR = "post_terminator"
    ALL_UNRECOGNIZED = "all_unrecognized"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "passthrough": "capture_for_passthrough",
            "unconditional_remaining": "capture_for_passthrough",
        }
        return aliases.get(value, value)

    @property
    def strategy(self) -> ParsingStrategy:
        return {
            ArgumentArrayParsing.REMAINING: ParsingStrategy.NEXT_AS_VALUE,
            ArgumentArrayParsing.CAPTURE_FOR_PASSTHROUGH: ParsingStrategy.ALL_REMAINING_INPUT,
            ArgumentArrayParsing.POST_TERMINATOR: ParsingStrategy.POST_TERMINATOR,
            ArgumentArrayParsing.ALL_UNRECOGNIZED: ParsingStrategy.ALL_UNRECOGNIZED,
        }[self]


def _resolve_strategy(parsing: Any, enum_type: type[_AliasedEnum], field: str) -> ParsingStrategy:
    if parsing is None:
        return next(iter(enum_type)).strategy  # type: ignore[attr-defined]
    if isinstance(parsing, ParsingStrategy):
        return parsing
    try:
        return enum_type(parsing).strategy  # type: ignore[attr-defined]
    except ValueError as error:
        raise ArgumentDefinitionError(f"Field '{field}': {error}") from error


class ArgumentField:
    """
    Base class of every field declaration.

    Subclasses build the field's `ArgumentSet` and read its value back out of
    the parsed values. Instance values live in the instance `__dict__` under
    the field's name.
    """

    kind = "argument"

    def __init__(self, *, help: ArgumentHelp | str | None = None, type: Any = None) -> None:
        self.help = ArgumentHelp.coerce(help)
        self.type = type
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            raise ArgumentNotParsedError(type(instance).__name__, self.name) from None

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.name] = value

    @property
    def bears_arguments(self) -> bool:
        return True

    def shape(self, annotation: Any) -> FieldShape:
        return analyze_annotation(self.type if self.type is not None else annotation)

    def argument_set(self, key: InputKey, annotation: Any) -> ArgumentSet:
        raise NotImplementedError

    def decode(
        self,
        key: InputKey,
        annotation: Any,
        values: ParsedValues,
        argument_set: ArgumentSet,
        ancestors: Sequence[Any] = (),
    ) -> Any:
        element = values.element(key)
        if element is not None:
            return element.value
        if self.shape(annotation).is_optional:
            return None
        definitions = argument_set.definitions_for_key(key)
        raise NoValueError(
            key,
            [
                definition.non_optional().synopsis() or definition.unadorned_synopsis() or ""
                for definition in definitions
            ],
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class _ValueField(ArgumentField):
    """Shared handling of defaults and transforms for `Argument` and `Option`."""

    def __init__(
        self,
        *,
        help: ArgumentHelp | str | None = None,
        default: Any = MISSING,
        default_factory: Callable[[], Any] | None = None,
        parsing: Any = None,
        transform: Callable[[str], Any] | None = None,
        type: Any = None,
    ) -> None:
        super().__init__(help=help, type=type)
        if default is not MISSING and default_factory is not None:
            raise ArgumentDefinitionError("Cannot specify both default and default_factory")
        self.default = default
        self.default_factory = default_factory
        self.parsing = parsing
        self.transform = transform

    def resolved_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def value_arguments(self, shape: FieldShape) -> dict[str, Any]:
        transform = self.transform or make_transform(shape.base_type)
        all_values = all_values_for(shape.base_type) if self.transform is None else []
        return {
            "transform": transform,
            "default": self.resolved_default(),
            "optional": shape.is_optional,
            "all_values": all_values,
            **self.help.as_fields(),
        }


class Argument(_ValueField):
    """
    A positional argument.

    `list[T]` collects every remaining value; `T | None` may be omitted.

    Args:
        help (ArgumentHelp | str | None): Help text.
        default (Any): Value used when the argument is omitted.
        default_factory (Callable | None): Builds the default, e.g. `list`.
        parsing (ArgumentArrayParsing | str | None): Collection strategy for
            `list[T]` fields; single-valued positionals take no strategy.
        transform (Callable[[str], Any] | None): Converts the raw string.
        type (Any): Overrides the annotation.
    """

    kind = "positional"

    def argument_set(self, key: InputKey, annotation: Any) -> ArgumentSet:
        shape = self.shape(annotation)
        if shape.is_list:
            strategy = _resolve_strategy(self.parsing, ArgumentArrayParsing, self.name)
        elif self.parsing is not None:
            raise ArgumentDefinitionError(
                f"Positional argument '{self.name}' takes a single value and accepts no "
                f"parsing strategy"
            )
        else:
            strategy = ParsingStrategy.NEXT_AS_VALUE
        return ArgumentSet.positional(
            key, parsing=strategy, repeating=shape.is_list, **self.value_arguments(shape)
        )


class Option(_ValueField):
    """
    A named option that takes a value: `--count 3`, `--count=3`, `-c 3`.

    `list[T]` accepts the option more than once.

    Args:
        name: The name specification; defaults to the kebab-cased long name.
        help (ArgumentHelp | str | None): Help text.
        default (Any): Value used when the option is omitted.
        default_factory (Callable | None): Builds the default, e.g. `list`.
        parsing: A `SingleValueParsing` (or `ArrayParsing` for `list[T]`).
        transform (Callable[[str], Any] | None): Converts the raw string.
        type (Any): Overrides the annotation.
    """

    kind = "option"

    def __init__(self, name: NameArgument = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.names = NameSpecification.coerce(name)

    def argument_set(self, key: InputKey, annotation: Any) -> ArgumentSet:
        shape = self.shape(annotation)
        parsing_type = ArrayParsing if shape.is_list else SingleValueParsing
        strategy = _resolve_strategy(self.parsing, parsing_type, self.name)
        return ArgumentSet.option(
            key,
            self.names,
            parsing=strategy,
            repeating=shape.is_list,
            **self.value_arguments(shape),
        )


class Flag(ArgumentField):
    """
    A flag: an argument whose presence alone carries its meaning.

    The annotation decides the kind of flag:

    - `bool`: `--verbose` sets True. With an `inversion`, `--no-verbose` (or
      `--disable-verbose`) sets False and the default may be omitted to make
      the choice required.
    - `bool | None`: Tri-state; requires an `inversion`, None when neither
      side is given.
    - `int`: Counts occurrences, so `-vvv` gives 3.
    - An `Enum`: One flag per member, named after the member (`--fast`,
      `--slow`). The enum may define `flag_name(member)` and
      `flag_help(member)` class methods to customize names and help.
    - `Enum | None` / `list[Enum]`: Optional selection / every selection.

    Args:
        name: The name specification; defaults to the kebab-cased long name.
        help (ArgumentHelp | str | None): Help text.
        default (Any): Value used when the flag is omitted.
        inversion (FlagInversion | str | None): Adds the negative spelling.
        exclusivity (FlagExclusivity | str | None): How repeated cases resolve;
            last wins for inverted pairs, and enum flags are exclusive, by default.
        type (Any): Overrides the annotation.
    """

    kind = "flag"

    def __init__(
        self,
        name: NameArgument = None,
        *,
        help: ArgumentHelp | str | None = None,
        default: Any = MISSING,
        inversion: FlagInversion | str | None = None,
        exclusivity: FlagExclusivity | str | None = None,
        type: Any = None,
    ) -> None:
        super().__init__(help=help, type=type)
        self.names = None if name is None else NameSpecification.coerce(name)
        self.default = default
        self.inversion = None if inversion is None else FlagInversion(inversion)
        self.exclusivity = None if exclusivity is None else FlagExclusivity(exclusivity)

    def argument_set(self, key: InputKey, annotation: Any) -> ArgumentSet:
        shape = self.shape(annotation)
        base = shape.base_type
        help_fields = self.help.as_fields()
        names = self.names or NameSpecification.long()

        if isinstance(base, EnumMeta):
            return self._enumerable(key, base, shape, help_fields)

        if base is int and not shape.is_list:
            return ArgumentSet.counter(key, names, **help_fields)

        if base is not bool or shape.is_list:
            raise ArgumentDefinitionError(
                f"Flag '{self.name}' must be annotated as bool, bool | None, int or an Enum"
            )

        if self.inversion is None:
            if shape.is_optional:
                raise ArgumentDefinitionError(
                    f"Flag '{self.name}' is optional and needs an inversion to be set"
                )
            default = False if self.default is MISSING else self.default
            return ArgumentSet.flag(key, names, default=default, **help_fields)

        default = self.default
        if default is MISSING and shape.is_optional:
            default = None
        return ArgumentSet.inverted_flag(
            key,
            names,
            default=default,
            inversion=self.inversion,
            exclusivity=self.exclusivity or FlagExclusivity.CHOOSE_LAST,
            **help_fields,
        )

    def _enumerable(
        self,
        key: InputKey,
        enum_type: EnumMeta,
        shape: FieldShape,
        help_fields: dict[str, Any],
    ) -> ArgumentSet:
        name_hook = getattr(enum_type, "flag_name", None)
        help_hook = getattr(enum_type, "flag_help", None)
        cases = []
        for member in enum_type:  # type: ignore[var-annotated]
            names = None
            abstract = None
            if name_hook is not None:
                custom = name_hook(member)
                names = None if custom is None else NameSpecification.coerce(custom)
            if help_hook is not None:
                custom_help = help_hook(member)
                abstract = None if custom_help is None else ArgumentHelp.coerce(custom_help).abstract
            cases.append(FlagCase(member, member.name.lower(), names, abstract))

        default = self.default
        if default is MISSING and shape.is_optional and not shape.is_list:
            default = None
        return ArgumentSet.enumerable_flag(
            key,
            cases,
            name=self.names,
            default=default,
            exclusivity=self.exclusivity or FlagExclusivity.EXCLUSIVE,
            repeating=shape.is_list,
            **help_fields,
        )


class OptionGroup(ArgumentField):
    """
    Embeds the fields of another `ParsableArguments` type.

    The group's fields are parsed at the same level as the owner's, under keys
    nested below the group field's name, and decode into an instance of the
    group type.

    Args:
        title (str): Help section title for the group's arguments.
        visibility (ArgumentVisibility): Caps the visibility of every member.
        type (Any): Overrides the annotation.
    """

    kind = "group"

    def __init__(
        self,
        title: str = "",
        *,
        visibility: ArgumentVisibility = ArgumentVisibility.DEFAULT,
        type: Any = None,
    ) -> None:
        super().__init__(type=type)
        self.title = title
        self.visibility = ArgumentVisibility(visibility)

    def group_type(self, annotation: Any) -> type[ParsableArguments]:
        from declarg.parsable import ParsableArguments

        group_type = self.type if self.type is not None else annotation
        if not (isinstance(group_type, type) and issubclass(group_type, ParsableArguments)):
            raise ArgumentDefinitionError(
                f"Option group '{self.name}' must be annotated with a ParsableArguments type"
            )
        return group_type

    def argument_set(self, key: InputKey, annotation: Any) -> ArgumentSet:
        members = self.group_type(annotation).build_argument_set(parent=key)
        adjusted = ArgumentSet()
        for definition in members:
            changes: dict[str, Any] = {}
            if self.title and not definition.help.parent_title:
                changes["parent_title"] = self.title
            if not self.visibility.is_at_least_as_visible_as(definition.help.visibility):
                changes["visibility"] = self.visibility
            adjusted.append(definition.with_help(**changes) if changes else definition)
        return adjusted

    def decode(
        self,
        key: InputKey,
        annotation: Any,
        values: ParsedValues,
        argument_set: ArgumentSet,
        ancestors: Sequence[Any] = (),
    ) -> Any:
        group_type = self.group_type(annotation)
        # A group of an ancestor command's own type shares the ancestor's values.
        for ancestor in reversed(ancestors):
            if type(ancestor) is group_type:
                return ancestor
        instance = group_type.decode_values(values, argument_set, parent=key, ancestors=ancestors)
        instance.run_validation()
        return instance


class ParentCommand(ArgumentField):
    """
    Resolves to the decoded instance of an ancestor command.

    Lets a subcommand read the options its parent command parsed. The field
    contributes no arguments of its own.
    """

    kind = "parent"

    @property
    def bears_arguments(self) -> bool:
        return False

    def argument_set(self, key: InputKey, annotation: Any) -> ArgumentSet:
        return ArgumentSet()

    def decode(
        self,
        key: InputKey,
        annotation: Any,
        values: ParsedValues,
        argument_set: ArgumentSet,
        ancestors: Sequence[Any] = (),
    ) -> Any:
        parent_type = self.type if self.type is not None else annotation
        for ancestor in reversed(ancestors):
            if isinstance(ancestor, parent_type):
                return ancestor
        raise ArgumentDefinitionError(
            f"'{getattr(parent_type, '__name__', parent_type)}' is not a parent command "
            f"of the command declaring '{self.name}'"
        )
