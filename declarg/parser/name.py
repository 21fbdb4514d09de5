# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the spellings that identify a named argument on the command line.

A `Name` is one concrete spelling: `--verbose`, `-verbose` or `-v`. A
`NameSpecification` is the rule set attached to an option or flag declaration
(`long`, `short`, custom spellings, or a combination) that turns the field's
identifier into the concrete list of names once the argument set is built.

Key Components:
- NameKind: The three spelling forms.
- Name: An immutable spelling; equality ignores whether a short name accepts
  a joined value.
- NameElement: One rule of a specification.
- NameSpecification: An ordered, de-duplicated collection of rules.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, Sequence

from declarg.exceptions import ArgumentDefinitionError
from declarg.utils import to_kebab_case

if TYPE_CHECKING:
    from declarg.parser.input_key import InputKey


class NameKind(Enum):
    """The spelling form of a `Name`."""

    LONG = "long"
    LONG_WITH_SHORT_PREFIX = "long_with_short_prefix"
    SHORT = "short"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Name:
    """
    One spelling of a named argument.

    Attributes:
        kind (NameKind): `--value`, `-value` or `-v`.
        value (str): The spelling without its dashes.
        allows_joined (bool): For short names, whether `-vVALUE` supplies a value.
            Not part of equality: `-o` matches `-o` whether or not it allows
            joined values.
    """

    kind: NameKind
    value: str
    allows_joined: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not self.value:
            raise ArgumentDefinitionError("A name must have at least one character")
        if self.kind is NameKind.SHORT and len(self.value) != 1:
            raise ArgumentDefinitionError(
                f"Short name '{self.value}' must be a single character"
            )

    @classmethod
    def long(cls, value: str) -> Name:
        return cls(NameKind.LONG, value)

    @classmethod
    def long_with_short_prefix(cls, value: str) -> Name:
        return cls(NameKind.LONG_WITH_SHORT_PREFIX, value)

    @classmethod
    def short(cls, char: str, allows_joined: bool = False) -> Name:
        return cls(NameKind.SHORT, char, allows_joined)

    @classmethod
    def from_token(cls, token: str) -> Name:
        """Build a name from its command-line spelling, e.g. `--help` or `-h`."""
        if token.startswith("---"):
            raise ArgumentDefinitionError(f"'{token}' is not a valid option spelling")
        if token.startswith("--") and len(token) > 2:
            return cls.long(token[2:])
        if token.startswith("-") and len(token) == 2 and token[1] != "-":
            return cls.short(token[1])
        if token.startswith("-") and len(token) > 2 and token[1] != "-":
            return cls.long_with_short_prefix(token[1:])
        raise ArgumentDefinitionError(f"'{token}' is not a valid option spelling")

    @property
    def synopsis(self) -> str:
        if self.kind is NameKind.LONG:
            return f"--{self.value}"
        return f"-{self.value}"

    @property
    def is_short(self) -> bool:
        return self.kind is NameKind.SHORT

    @property
    def is_long(self) -> bool:
        return self.kind is NameKind.LONG

    def __str__(self) -> str:
        return self.synopsis

    def __lt__(self, other: Name) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self.synopsis < other.synopsis


class ElementKind(Enum):
    LONG = "long"
    SHORT = "short"
    CUSTOM_LONG = "custom_long"
    CUSTOM_SHORT = "custom_short"


@dataclass(frozen=True)
class NameElement:
    """One name-generation rule."""

    kind: ElementKind
    custom: str | None = None
    with_short_prefix: bool = False
    allows_joined: bool = False

    def make_name(self, key: InputKey) -> Name:
        if self.kind is ElementKind.LONG:
            return Name.long(to_kebab_case(key.name))
        if self.kind is ElementKind.SHORT:
            return Name.short(key.name.lstrip("_")[0])
        if self.custom is None:
            raise ArgumentDefinitionError(f"A {self.kind.value} name needs a spelling")
        if self.kind is ElementKind.CUSTOM_LONG:
            if self.with_short_prefix:
                return Name.long_with_short_prefix(self.custom)
            return Name.long(self.custom)
        return Name.short(self.custom, self.allows_joined)

    def with_prefix(self, prefix: str) -> NameElement | None:
        """This custom long rule with `prefix-` prepended; None for any other rule."""
        if self.kind is ElementKind.CUSTOM_LONG:
            return NameElement(
                ElementKind.CUSTOM_LONG, f"{prefix}-{self.custom}", self.with_short_prefix
            )
        return None

    @classmethod
    def from_spelling(cls, spelling: str) -> NameElement:
        """Parse `--output`, `-out` or `-o` (or the keywords `long` / `short`)."""
        if spelling == "long":
            return LONG
        if spelling == "short":
            return SHORT
        name = Name.from_token(spelling)
        if name.kind is NameKind.SHORT:
            return cls(ElementKind.CUSTOM_SHORT, name.value)
        return cls(
            ElementKind.CUSTOM_LONG,
            name.value,
            with_short_prefix=name.kind is NameKind.LONG_WITH_SHORT_PREFIX,
        )


LONG = NameElement(ElementKind.LONG)
SHORT = NameElement(ElementKind.SHORT)


class NameSpecification:
    """
    An ordered, de-duplicated set of name-generation rules.

    Specifications can be built from rule elements or from raw spellings:

        NameSpecification.short_and_long()
        NameSpecification(["-o", "--output"])
        NameSpecification.custom_short("o", allows_joined=True)
    """

    def __init__(self, elements: Iterable[NameElement | str] = ()) -> None:
        ordered: list[NameElement] = []
        for element in elements:
            if isinstance(element, str):
                element = NameElement.from_spelling(element)
            if element not in ordered:
                ordered.append(element)
        self.elements: tuple[NameElement, ...] = tuple(ordered)

    @classmethod
    def coerce(
        cls, value: NameSpecification | NameElement | str | Sequence[str | NameElement] | None
    ) -> NameSpecification:
        """Accept the loose forms allowed in field declarations."""
        if value is None:
            return cls.long()
        if isinstance(value, NameSpecification):
            return value
        if isinstance(value, (NameElement, str)):
            return cls([value])
        return cls(value)

    @classmethod
    def long(cls) -> NameSpecification:
        return cls([LONG])

    @classmethod
    def short(cls) -> NameSpecification:
        return cls([SHORT])

    @classmethod
    def short_and_long(cls) -> NameSpecification:
        return cls([LONG, SHORT])

    @classmethod
    def custom_long(cls, name: str, with_short_prefix: bool = False) -> NameSpecification:
        return cls([NameElement(ElementKind.CUSTOM_LONG, name, with_short_prefix)])

    @classmethod
    def custom_short(cls, char: str, allows_joined: bool = False) -> NameSpecification:
        return cls(
            [NameElement(ElementKind.CUSTOM_SHORT, char, allows_joined=allows_joined)]
        )

    def make_names(self, key: InputKey) -> list[Name]:
        return [element.make_name(key) for element in self.elements]

    def make_prefixed_names(
        self, key: InputKey, prefix: str, include_short: bool
    ) -> list[Name]:
        """Names for one side of an inverted flag, e.g. `--no-verbose`."""
        names = []
        for element in self.elements:
            if element.kind is ElementKind.LONG:
                names.append(Name.long(f"{prefix}-{to_kebab_case(key.name)}"))
                continue
            prefixed = element.with_prefix(prefix)
            if prefixed is not None:
                names.append(prefixed.make_name(key))
            elif include_short:
                names.append(element.make_name(key))
        return names

    def __add__(self, other: NameSpecification) -> NameSpecification:
        return NameSpecification(self.elements + other.elements)

    def __iter__(self) -> Iterator[NameElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NameSpecification):
            return NotImplemented
        return self.elements == other.elements

    def __hash__(self) -> int:
        return hash(self.elements)

    def __repr__(self) -> str:
        return f"NameSpecification({list(self.elements)!r})"
