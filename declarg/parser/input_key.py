# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `InputKey`, the identifier under which a parsed value is stored.

A field declared directly on a command has a key with an empty path. Fields
pulled in through an option group carry the group field's full path as their
parent chain, so two groups may each declare a `verbose` field without their
values colliding.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InputKey:
    """The path to a parsed field: the parent chain plus the field's own name."""

    name: str
    path: tuple[str, ...] = ()

    SEPARATOR = "."

    @classmethod
    def make(cls, name: str, parent: InputKey | None = None) -> InputKey:
        return cls(name, parent.full_path if parent else ())

    @property
    def full_path(self) -> tuple[str, ...]:
        return self.path + (self.name,)

    @property
    def full_path_string(self) -> str:
        return self.SEPARATOR.join(self.full_path)

    @classmethod
    def from_full_path_string(cls, value: str) -> InputKey:
        *path, name = value.split(cls.SEPARATOR)
        return cls(name, tuple(path))

    def __str__(self) -> str:
        return self.full_path_string
