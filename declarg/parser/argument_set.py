# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgumentSet`, the ordered collection of argument definitions that
describes everything one command level accepts.

Sets compose: the set of a command is the concatenation of the sets produced
by each of its fields, in declaration order, with option groups contributing
their own nested sets. Composition flattens eagerly; order is preserved
because it decides positional assignment and help layout.

The builder class methods produce the sets for each kind of declaration:

    ArgumentSet.option(key, NameSpecification.long(), int, default=1)
    ArgumentSet.positional(key, str, repeating=True)
    ArgumentSet.flag(key, NameSpecification.short_and_long())
    ArgumentSet.inverted_flag(key, NameSpecification.long(), default=True)
    ArgumentSet.enumerable_flag(key, [FlagCase(Mode.FAST, "fast"), ...])
    ArgumentSet.counter(key, NameSpecification.short())

Builders capture nothing mutable: every bit of per-parse state, including
whether a flag group has already been set, is read back from the
`ParsedValues` being filled.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Sequence

from declarg.exceptions import (
    ArgumentDefinitionError,
    DuplicateExclusiveValuesError,
    ParserError,
    UnableToParseValueError,
)
from declarg.parser.argument_definition import (
    ArgumentDefinition,
    ArgumentVisibility,
    DefinitionHelp,
    DefinitionKind,
    ParsingStrategy,
    UpdateKind,
    no_initial,
)
from declarg.parser.input_key import InputKey
from declarg.parser.input_origin import InputOrigin
from declarg.parser.name import Name, NameKind, NameSpecification
from declarg.parser.parsed_values import ParsedValues
from declarg.parser.parser_types import MISSING, FlagExclusivity, FlagInversion
from declarg.parser.utils import default_value_description
from declarg.utils import to_kebab_case

Transform = Callable[[str], Any]

_ARRAY_STRATEGIES = (
    ParsingStrategy.UP_TO_NEXT_OPTION,
    ParsingStrategy.ALL_REMAINING_INPUT,
    ParsingStrategy.POST_TERMINATOR,
    ParsingStrategy.ALL_UNRECOGNIZED,
)


@dataclass(frozen=True)
class FlagCase:
    """
    One case of an enumerable flag group.

    `key_name` is the identifier the case's names are derived from (e.g. the
    kebab-cased member name); `names` overrides the group's specification for
    this case only.
    """

    value: Any
    key_name: str
    names: NameSpecification | None = None
    abstract: str | None = None


def update_flag(
    key: InputKey,
    value: Any,
    origin: InputOrigin,
    values: ParsedValues,
    exclusivity: FlagExclusivity,
) -> None:
    """
    Store one occurrence of a flag-group case, applying `exclusivity`.

    Whether the group was already set is decided from the stored element's
    origin: defaults and initial values do not count as a previous occurrence.
    """
    existing = values.element(key)
    has_updated = existing is not None and existing.origin.has_user_input
    if not has_updated or exclusivity is FlagExclusivity.CHOOSE_LAST:
        values.set(value, key, origin)
    elif exclusivity is FlagExclusivity.EXCLUSIVE:
        if existing is not None and existing.value != value:
            raise DuplicateExclusiveValuesError(
                existing.origin, origin, values.original_input
            )
        values.set(value, key, origin)
    else:
        values.update(key, origin, value, lambda current: current)


def _transforming_update(
    key: InputKey,
    transform: Transform,
    value_name: str | None,
    store: Callable[[ParsedValues, Any, InputOrigin], None],
) -> Callable[[InputOrigin, Name | None, str, ParsedValues], None]:
    def update(origin: InputOrigin, name: Name | None, raw: str, values: ParsedValues) -> None:
        try:
            value = transform(raw)
        except ParserError:
            raise
        except Exception as error:
            raise UnableToParseValueError(
                origin, name, raw, key, value_name, error
            ) from error
        store(values, value, origin)

    return update


def _store_single(key: InputKey) -> Callable[[ParsedValues, Any, InputOrigin], None]:
    def store(values: ParsedValues, value: Any, origin: InputOrigin) -> None:
        values.set(value, key, origin)

    return store


def _store_appending(key: InputKey) -> Callable[[ParsedValues, Any, InputOrigin], None]:
    def store(values: ParsedValues, value: Any, origin: InputOrigin) -> None:
        existing = values.element(key)
        if existing is None or not existing.origin.has_user_input:
            # The first user-supplied element replaces a declared default.
            values.set([value], key, origin)
        else:
            values.set(list(existing.value) + [value], key, origin)

    return store


def _setting_initial(key: InputKey, default: Any) -> Callable[[InputOrigin, ParsedValues], None]:
    if default is MISSING:
        return no_initial

    def initial(origin: InputOrigin, values: ParsedValues) -> None:
        value = list(default) if isinstance(default, list) else default
        values.set(value, key, origin)

    return initial


def _value_name(help: DefinitionHelp, key: InputKey) -> str:
    return help.value_name or to_kebab_case(key.name)


def _make_help(
    key: InputKey,
    *,
    is_optional: bool,
    is_repeating: bool = False,
    is_composite: bool = False,
    default_value: str | None = None,
    all_values: Sequence[str] = (),
    **help_fields: Any,
) -> DefinitionHelp:
    return DefinitionHelp(
        keys=[key],
        is_optional=is_optional,
        is_repeating=is_repeating,
        is_composite=is_composite,
        default_value=default_value,
        all_values=list(all_values),
        **help_fields,
    )


class ArgumentSet:
    """
    An ordered, flattened sequence of `ArgumentDefinition`s.

    Name lookup is by exact spelling; when two definitions share a spelling
    the first one wins here, and the unique-names validator reports the clash.
    """

    def __init__(
        self, content: Iterable[ArgumentDefinition | ArgumentSet] = ()
    ) -> None:
        self.content: list[ArgumentDefinition] = []
        self._name_positions: dict[Name, int] = {}
        for item in content:
            if isinstance(item, ArgumentSet):
                for definition in item:
                    self.append(definition)
            else:
                self.append(item)

    def append(self, definition: ArgumentDefinition) -> None:
        position = len(self.content)
        self.content.append(definition)
        for name in definition.names:
            self._name_positions.setdefault(name, position)

    @classmethod
    def join(cls, *sets: ArgumentSet) -> ArgumentSet:
        return cls(sets)

    def __add__(self, other: ArgumentSet) -> ArgumentSet:
        return ArgumentSet([self, other])

    def __iter__(self) -> Iterator[ArgumentDefinition]:
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)

    def __getitem__(self, index: int) -> ArgumentDefinition:
        return self.content[index]

    def __bool__(self) -> bool:
        return bool(self.content)

    def first_matching(self, name: Name) -> ArgumentDefinition | None:
        position = self._name_positions.get(name)
        return None if position is None else self.content[position]

    def positionals(self) -> list[ArgumentDefinition]:
        return [definition for definition in self.content if definition.is_positional]

    def names(self) -> list[Name]:
        return [name for definition in self.content for name in definition.names]

    def long_names(self) -> list[Name]:
        return [name for name in self.names() if name.kind is NameKind.LONG]

    def definitions_for_key(self, key: InputKey) -> list[ArgumentDefinition]:
        return [definition for definition in self.content if key in definition.help.keys]

    def keys(self) -> list[InputKey]:
        seen: list[InputKey] = []
        for definition in self.content:
            for key in definition.help.keys:
                if key not in seen:
                    seen.append(key)
        return seen

    @property
    def captures_all(self) -> bool:
        """Whether a positional swallows everything once its first value is seen."""
        return any(
            definition.is_repeating_positional
            and definition.parsing_strategy is ParsingStrategy.ALL_REMAINING_INPUT
            for definition in self.content
        )

    @property
    def captures_unrecognized(self) -> bool:
        return any(
            definition.is_positional
            and definition.parsing_strategy is ParsingStrategy.ALL_UNRECOGNIZED
            for definition in self.content
        )

    def synopsis(self) -> list[str]:
        return [text for text in (d.synopsis() for d in self.content) if text is not None]

    def __repr__(self) -> str:
        return " / ".join(repr(definition) for definition in self.content) or "ArgumentSet()"

    # -- builders ---------------------------------------------------------

    @classmethod
    def option(
        cls,
        key: InputKey,
        name: NameSpecification,
        transform: Transform,
        *,
        default: Any = MISSING,
        parsing: ParsingStrategy = ParsingStrategy.NEXT_AS_VALUE,
        repeating: bool = False,
        optional: bool = False,
        default_description: str | None = None,
        all_values: Sequence[str] = (),
        **help_fields: Any,
    ) -> ArgumentSet:
        """A named option taking one value per occurrence (or accumulating, if `repeating`)."""
        if not repeating and parsing in _ARRAY_STRATEGIES:
            raise ArgumentDefinitionError(
                f"Option '{key}' takes a single value and cannot use '{parsing}' parsing"
            )
        names = name.make_names(key)
        if default_description is None and default is not MISSING:
            default_description = default_value_description(default)
        help = _make_help(
            key,
            is_optional=optional or default is not MISSING,
            is_repeating=repeating,
            default_value=default_description,
            all_values=all_values,
            **help_fields,
        )
        store = _store_appending(key) if repeating else _store_single(key)
        definition = ArgumentDefinition(
            kind=DefinitionKind.NAMED,
            help=help,
            update_kind=UpdateKind.UNARY,
            update=_transforming_update(key, transform, _value_name(help, key), store),
            names=names,
            parsing_strategy=parsing,
            initial=_setting_initial(key, default),
        )
        return cls([definition])

    @classmethod
    def positional(
        cls,
        key: InputKey,
        transform: Transform,
        *,
        default: Any = MISSING,
        parsing: ParsingStrategy = ParsingStrategy.NEXT_AS_VALUE,
        repeating: bool = False,
        optional: bool = False,
        default_description: str | None = None,
        all_values: Sequence[str] = (),
        **help_fields: Any,
    ) -> ArgumentSet:
        """A positional argument; `repeating` collects every eligible value into a list."""
        if not repeating and parsing is not ParsingStrategy.NEXT_AS_VALUE:
            raise ArgumentDefinitionError(
                f"Positional argument '{key}' takes a single value and cannot use "
                f"'{parsing}' parsing"
            )
        if repeating and parsing in (
            ParsingStrategy.SCANNING_FOR_VALUE,
            ParsingStrategy.UNCONDITIONAL,
            ParsingStrategy.UP_TO_NEXT_OPTION,
        ):
            raise ArgumentDefinitionError(
                f"Positional argument '{key}' cannot use '{parsing}' parsing"
            )
        if default_description is None and default is not MISSING:
            default_description = default_value_description(default)
        help = _make_help(
            key,
            is_optional=optional or default is not MISSING,
            is_repeating=repeating,
            default_value=default_description,
            all_values=all_values,
            **help_fields,
        )
        store = _store_appending(key) if repeating else _store_single(key)
        definition = ArgumentDefinition(
            kind=DefinitionKind.POSITIONAL,
            help=help,
            update_kind=UpdateKind.UNARY,
            update=_transforming_update(key, transform, _value_name(help, key), store),
            parsing_strategy=parsing,
            initial=_setting_initial(key, default),
        )
        return cls([definition])

    @classmethod
    def flag(
        cls,
        key: InputKey,
        name: NameSpecification,
        *,
        default: bool | None = False,
        **help_fields: Any,
    ) -> ArgumentSet:
        """
        A plain Boolean flag: presence sets True.

        A `default` of None makes the flag required, which is only useful
        for flags that exist to be acknowledged (e.g. `--i-understand`).
        """
        def update(origin: InputOrigin, name: Name | None, values: ParsedValues) -> None:
            values.set(True, key, origin)

        help = _make_help(
            key,
            is_optional=default is not None,
            default_value="true" if default is True else None,
            **help_fields,
        )
        definition = ArgumentDefinition(
            kind=DefinitionKind.NAMED,
            help=help,
            update_kind=UpdateKind.NULLARY,
            update=update,
            names=name.make_names(key),
            initial=_setting_initial(key, MISSING if default is None else default),
        )
        return cls([definition])

    @classmethod
    def inverted_flag(
        cls,
        key: InputKey,
        name: NameSpecification,
        *,
        default: bool | None = MISSING,
        inversion: FlagInversion = FlagInversion.PREFIXED_NO,
        exclusivity: FlagExclusivity = FlagExclusivity.CHOOSE_LAST,
        **help_fields: Any,
    ) -> ArgumentSet:
        """
        A pair of flags setting one Boolean: `--foo` / `--no-foo` or
        `--enable-foo` / `--disable-foo`.

        Without a default one side must be given. A default of None leaves the
        value None when neither side is given.
        """
        positive_prefix, negative_prefix = inversion.prefixes
        if positive_prefix is None:
            enable_names = name.make_names(key)
        else:
            enable_names = name.make_prefixed_names(key, positive_prefix, include_short=True)
        disable_names = name.make_prefixed_names(key, negative_prefix, include_short=False)

        def enable(origin: InputOrigin, name: Name | None, values: ParsedValues) -> None:
            update_flag(key, True, origin, values, exclusivity)

        def disable(origin: InputOrigin, name: Name | None, values: ParsedValues) -> None:
            update_flag(key, False, origin, values, exclusivity)

        enable_help = _make_help(
            key,
            is_optional=default is not MISSING,
            is_composite=True,
            default_value=default_value_description(default) if default is not MISSING else None,
            **help_fields,
        )
        disable_help = _make_help(key, is_optional=True, is_composite=True, **help_fields)
        return cls(
            [
                ArgumentDefinition(
                    kind=DefinitionKind.NAMED,
                    help=enable_help,
                    update_kind=UpdateKind.NULLARY,
                    update=enable,
                    names=enable_names,
                    initial=_setting_initial(key, default),
                ),
                ArgumentDefinition(
                    kind=DefinitionKind.NAMED,
                    help=disable_help,
                    update_kind=UpdateKind.NULLARY,
                    update=disable,
                    names=disable_names,
                ),
            ]
        )

    @classmethod
    def enumerable_flag(
        cls,
        key: InputKey,
        cases: Sequence[FlagCase],
        *,
        name: NameSpecification | None = None,
        default: Any = MISSING,
        exclusivity: FlagExclusivity = FlagExclusivity.EXCLUSIVE,
        repeating: bool = False,
        **help_fields: Any,
    ) -> ArgumentSet:
        """
        One flag per case, all writing the same key.

        With `repeating`, every occurrence is appended and the default is an
        empty list; otherwise the cases are resolved through `exclusivity`.
        """
        if not cases:
            raise ArgumentDefinitionError(f"Flag group '{key}' has no cases")
        name = name or NameSpecification.long()
        if repeating and default is MISSING:
            default = []
        shared_abstract = help_fields.pop("abstract", "")
        default_value = default_value_description(default) if default is not MISSING else None

        append = _store_appending(key)
        definitions = []
        for case in cases:
            case_key = InputKey(case.key_name, key.path)
            spec = case.names if case.names is not None else name

            def update(
                origin: InputOrigin,
                name: Name | None,
                values: ParsedValues,
                value: Any = case.value,
            ) -> None:
                if repeating:
                    append(values, value, origin)
                else:
                    update_flag(key, value, origin, values, exclusivity)

            help = _make_help(
                key,
                is_optional=default is not MISSING,
                is_repeating=repeating,
                is_composite=True,
                default_value=default_value,
                abstract=case.abstract or shared_abstract,
                **help_fields,
            )
            definitions.append(
                ArgumentDefinition(
                    kind=DefinitionKind.NAMED,
                    help=help,
                    update_kind=UpdateKind.NULLARY,
                    update=update,
                    names=spec.make_names(case_key),
                    initial=_setting_initial(key, default),
                )
            )
        return cls(definitions)

    @classmethod
    def counter(
        cls,
        key: InputKey,
        name: NameSpecification,
        **help_fields: Any,
    ) -> ArgumentSet:
        """An integer flag counting its occurrences, e.g. `-vvv` → 3."""
        def update(origin: InputOrigin, name: Name | None, values: ParsedValues) -> None:
            values.update(key, origin, 0, lambda count: count + 1)

        help = _make_help(key, is_optional=True, is_repeating=True, **help_fields)
        definition = ArgumentDefinition(
            kind=DefinitionKind.NAMED,
            help=help,
            update_kind=UpdateKind.NULLARY,
            update=update,
            names=name.make_names(key),
            initial=_setting_initial(key, 0),
        )
        return cls([definition])

    @classmethod
    def fixed_default(cls, key: InputKey, value: Any) -> ArgumentSet:
        """A plain field that is never read from input and always holds `value`."""
        def update(origin: InputOrigin, name: Name | None, values: ParsedValues) -> None:
            values.set(value, key, InputOrigin.default_value())

        def initial(origin: InputOrigin, values: ParsedValues) -> None:
            values.set(value, key, InputOrigin.default_value())

        help = _make_help(key, is_optional=True, visibility=ArgumentVisibility.PRIVATE)
        definition = ArgumentDefinition(
            kind=DefinitionKind.DEFAULT,
            help=help,
            update_kind=UpdateKind.NULLARY,
            update=update,
            initial=initial,
        )
        return cls([definition])
