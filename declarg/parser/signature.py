# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides utilities for introspecting the annotations of argument fields.

A field declared as `count: int = Option()` takes its value type from the
class annotation. These helpers resolve the annotations of a class and reduce
each one to a `FieldShape`: the element type to coerce raw strings to, and
whether the field is optional (`T | None`) or accumulates (`list[T]`).

Functions:
- resolve_annotations: Evaluate a class's annotations, including string ones.
- analyze_annotation: Reduce an annotation to a `FieldShape`.
- make_transform: Build the raw-string converter for an element type.
"""
from __future__ import annotations

import collections.abc
import types
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Union, get_args, get_origin, get_type_hints

from declarg.exceptions import ArgumentDefinitionError
from declarg.parser.utils import coerce_value

_LIST_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)


@dataclass(frozen=True)
class FieldShape:
    """The parts of a field annotation that decide how it is parsed."""

    base_type: Any = str
    is_optional: bool = False
    is_list: bool = False


def resolve_annotations(owner: type) -> dict[str, Any]:
    """
    Return the evaluated annotations of `owner` and its bases.

    Raises:
        ArgumentDefinitionError: If an annotation names a type that is not in scope.
    """
    try:
        return get_type_hints(owner)
    except NameError as error:
        raise ArgumentDefinitionError(
            f"Cannot resolve the annotations of '{owner.__name__}': {error}"
        ) from error


def _is_union(annotation: Any) -> bool:
    return isinstance(annotation, types.UnionType) or get_origin(annotation) is Union


def analyze_annotation(annotation: Any) -> FieldShape:
    """
    Reduce an annotation to a `FieldShape`.

    `int` → (int), `int | None` → (int, optional), `list[int]` → (int, list),
    `list[int] | None` → (int, optional, list). A bare `list` holds strings.
    Unions of several non-None types are kept whole for `coerce_value`.
    """
    if annotation is None or annotation is Any:
        return FieldShape(str)

    if _is_union(annotation):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        is_optional = len(members) < len(get_args(annotation))
        if len(members) == 1:
            inner = analyze_annotation(members[0])
            return FieldShape(inner.base_type, is_optional or inner.is_optional, inner.is_list)
        return FieldShape(Union[tuple(members)], is_optional)

    if annotation in (list, tuple):
        return FieldShape(str, is_list=True)

    origin = get_origin(annotation)
    if origin in _LIST_ORIGINS:
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        return FieldShape(args[0] if args else str, is_list=True)

    return FieldShape(annotation)


def make_transform(base_type: Any) -> Callable[[str], Any]:
    """Build the converter applied to each raw string of a field of `base_type`."""
    return partial(coerce_value, target_type=base_type)
