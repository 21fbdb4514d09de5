# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Contains value coercion and display utilities for declarg argument parsing.

This module converts raw command-line strings into the Python types declared
on argument fields, including `Enum`, `bool`, `datetime`, `Literal` and
unions, and renders default values and accepted choices for help output.

Functions:
- coerce_bool: Boolean spellings such as `yes` and `off`.
- coerce_enum: Enum members by value or by name.
- coerce_value: General-purpose coercion to a target type.
- all_values_for: The accepted spellings of an Enum or Literal type.
- default_value_description: The help-text rendering of a default value.
"""
from __future__ import annotations

import types
from datetime import datetime
from enum import Enum, EnumMeta
from pathlib import Path
from typing import Any, Literal, Union, get_args, get_origin

from dateutil import parser as date_parser

_TRUE_STRINGS = {"true", "t", "1", "yes", "y", "on"}
_FALSE_STRINGS = {"false", "f", "0", "no", "n", "off"}


def coerce_bool(value: str) -> bool:
    """
    Read a boolean from its common command-line spellings.

    `true`/`false`, `yes`/`no`, `on`/`off`, `1`/`0` and their first letters
    are accepted in any case.

    Raises:
        ValueError: If the string is not a recognised boolean spelling.
    """
    if isinstance(value, bool):
        return value
    normalized = value.strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    raise ValueError(f"'{value}' is not a boolean")


def coerce_enum(value: Any, enum_type: EnumMeta) -> Any:
    """
    Resolve a command-line token (or a raw value) to a member of `enum_type`.

    Tries to resolve by value, then by name (case-insensitively, with dashes
    accepted for underscores), then by the coerced base type of the values.

    Raises:
        ValueError: If the value cannot be resolved to a valid Enum member.
    """
    if isinstance(value, enum_type):
        return value

    for member in enum_type:  # type: ignore[var-annotated]
        if str(member.value) == value:
            return member

    if isinstance(value, str):
        normalized = value.strip().replace("-", "_")
        for member in enum_type:  # type: ignore[var-annotated]
            if member.name.lower() == normalized.lower():
                return member

    base_type = type(next(iter(enum_type)).value)
    try:
        coerced_value = base_type(value)
        return enum_type(coerced_value)
    except (ValueError, TypeError):
        values = [str(enum.value) for enum in enum_type]  # type: ignore[var-annotated]
        raise ValueError(f"'{value}' should be one of {{{', '.join(values)}}}") from None


def coerce_value(value: str, target_type: Any) -> Any:
    """
    Convert one command-line token to the declared field type.

    Unions are tried member by member; `Literal`, `Enum`, `bool` and
    `datetime` (through dateutil) have dedicated handling.
    `None` members of a union are skipped: a present value is never coerced
    to None.

    Args:
        value (str): The raw token.
        target_type (type): The annotation to convert to.

    Returns:
        Any: The coerced value.

    Raises:
        ValueError: If conversion fails or the value is invalid.
    """
    if target_type is Any or target_type is str:
        return value

    origin = get_origin(target_type)
    args = get_args(target_type)

    if origin is Literal:
        for arg in args:
            if str(arg) == value:
                return arg
        choices = ", ".join(str(arg) for arg in args)
        raise ValueError(f"'{value}' should be one of {{{choices}}}")

    if isinstance(target_type, types.UnionType) or origin is Union:
        errors = []
        for arg in args:
            if arg is type(None):
                continue
            try:
                return coerce_value(value, arg)
            except (ValueError, TypeError) as error:
                errors.append(error)
        if len(errors) == 1:
            raise errors[0]
        raise ValueError(f"'{value}' could not be coerced to any of {args}")

    if isinstance(target_type, EnumMeta):
        return coerce_enum(value, target_type)

    if target_type is bool:
        return coerce_bool(value)

    if target_type is datetime:
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError) as error:
            raise ValueError(f"'{value}' could not be parsed as a datetime") from error

    if target_type in (int, float):
        # The message already quotes the value; the builtin's text adds nothing.
        try:
            return target_type(value)
        except ValueError:
            raise ValueError() from None

    return target_type(value)


def all_values_for(target_type: Any) -> list[str]:
    """Return the accepted spellings of an Enum or Literal type, else []."""
    if isinstance(target_type, EnumMeta):
        return [str(member.value) for member in target_type]  # type: ignore[var-annotated]
    if get_origin(target_type) is Literal:
        return [str(arg) for arg in get_args(target_type)]
    if isinstance(target_type, types.UnionType) or get_origin(target_type) is Union:
        for arg in get_args(target_type):
            values = all_values_for(arg)
            if values:
                return values
    return []


def default_value_description(value: Any) -> str | None:
    """Render a default for help output; None means "do not show a default"."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return ", ".join(
            description
            for description in (default_value_description(item) for item in value)
            if description is not None
        )
    return str(value)
