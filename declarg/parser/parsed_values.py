# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
The per-parse value container.

`ParsedValues` maps each `InputKey` to the value parsed for it together with
the `InputOrigin` that produced it. A fresh container is created for every
parse and discarded once the values are decoded into the command instance.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from declarg.parser.input_key import InputKey
from declarg.parser.input_origin import InputOrigin


@dataclass
class ParsedElement:
    key: InputKey
    value: Any
    origin: InputOrigin


class ParsedValues:
    """Ordered key to (value, origin) mapping with origin merging."""

    def __init__(self, original_input: Sequence[str] = ()) -> None:
        self.elements: dict[InputKey, ParsedElement] = {}
        self.original_input: list[str] = list(original_input)

    def set(self, value: Any, key: InputKey, origin: InputOrigin) -> None:
        """Store `value`, keeping every origin previously recorded for `key`."""
        existing = self.elements.get(key)
        if existing is not None:
            origin = origin | existing.origin
        self.elements[key] = ParsedElement(key, value, origin)

    def element(self, key: InputKey) -> ParsedElement | None:
        return self.elements.get(key)

    def get(self, key: InputKey, default: Any = None) -> Any:
        element = self.elements.get(key)
        return default if element is None else element.value

    def update(
        self,
        key: InputKey,
        origin: InputOrigin,
        initial: Any,
        function: Callable[[Any], Any],
    ) -> None:
        """Replace the value for `key` with `function(current)`, seeding it with `initial`."""
        existing = self.elements.get(key)
        current = initial if existing is None else existing.value
        self.set(function(current), key, origin)

    def remove(self, key: InputKey) -> None:
        self.elements.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self.elements

    def __iter__(self) -> Iterator[ParsedElement]:
        return iter(list(self.elements.values()))

    def __len__(self) -> int:
        return len(self.elements)

    def used_origins(self) -> InputOrigin:
        origin = InputOrigin()
        for element in self.elements.values():
            origin = origin | element.origin
        return origin

    def as_dict(self) -> dict[str, Any]:
        return {str(key): element.value for key, element in self.elements.items()}

    def __repr__(self) -> str:
        return f"ParsedValues({self.as_dict()!r})"
