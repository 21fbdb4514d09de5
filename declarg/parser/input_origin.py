# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Types that record where a parsed value came from.

Every element produced by the splitter has a `SplitIndex`: the position of the
raw token plus, for the options inside a short-option cluster such as `-vx`,
the position of the character within the cluster. An `InputOrigin` is the set
of positions (or the `DEFAULT_VALUE` / `INTERACTIVE` markers) that produced a
value, and is what error messages use to quote the user's input back.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Iterable, Iterator, Union


@total_ordering
@dataclass(frozen=True)
class SplitIndex:
    """
    Position of a split element.

    `sub_index` is None for an element covering the complete token, and the
    character offset (after the dash) for an option within a cluster. A
    complete element sorts before the sub-elements of the same token.
    """

    input_index: int
    sub_index: int | None = None

    @property
    def is_complete(self) -> bool:
        return self.sub_index is None

    @property
    def complete_index(self) -> SplitIndex:
        return SplitIndex(self.input_index)

    def _sort_key(self) -> tuple[int, int]:
        return (self.input_index, -1 if self.sub_index is None else self.sub_index)

    def __lt__(self, other: SplitIndex) -> bool:
        if not isinstance(other, SplitIndex):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if self.sub_index is None:
            return str(self.input_index)
        return f"{self.input_index}.{self.sub_index}"


class OriginSource(Enum):
    """Origins that are not positions in the input."""

    DEFAULT_VALUE = "default_value"
    INTERACTIVE = "interactive"


OriginElement = Union[SplitIndex, OriginSource]


@dataclass(frozen=True)
class InputOrigin:
    """An immutable set of origin elements."""

    elements: frozenset[OriginElement] = frozenset()

    @classmethod
    def of(cls, *elements: OriginElement) -> InputOrigin:
        return cls(frozenset(elements))

    @classmethod
    def default_value(cls) -> InputOrigin:
        return cls.of(OriginSource.DEFAULT_VALUE)

    def inserting(self, element: OriginElement) -> InputOrigin:
        return InputOrigin(self.elements | {element})

    def union(self, other: InputOrigin | Iterable[OriginElement]) -> InputOrigin:
        if isinstance(other, InputOrigin):
            return InputOrigin(self.elements | other.elements)
        return InputOrigin(self.elements | frozenset(other))

    __or__ = union

    @property
    def indices(self) -> list[SplitIndex]:
        return sorted(e for e in self.elements if isinstance(e, SplitIndex))

    @property
    def first_index(self) -> SplitIndex | None:
        indices = self.indices
        return indices[0] if indices else None

    @property
    def is_default_value(self) -> bool:
        return self.elements == {OriginSource.DEFAULT_VALUE}

    @property
    def has_user_input(self) -> bool:
        """Whether any part of the value was typed by the user."""
        return any(
            isinstance(e, SplitIndex) or e is OriginSource.INTERACTIVE
            for e in self.elements
        )

    def __iter__(self) -> Iterator[OriginElement]:
        yield from self.indices
        yield from sorted(
            (e for e in self.elements if isinstance(e, OriginSource)),
            key=lambda source: source.value,
        )

    def __len__(self) -> int:
        return len(self.elements)

    def __bool__(self) -> bool:
        return bool(self.elements)

    def __str__(self) -> str:
        return ", ".join(str(element) for element in self)
