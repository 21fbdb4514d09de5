# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Small enums and sentinels shared by the argument definition layer.

Contents:
- `MISSING`: Sentinel for "no default was declared", distinct from `None`.
- `FlagInversion`: How the positive and negative spellings of a Boolean flag
  are derived (`--foo` / `--no-foo` or `--enable-foo` / `--disable-foo`).
- `FlagExclusivity`: How repeated occurrences of the cases of a flag group
  are resolved.

Both enums accept config-friendly aliases:

    FlagInversion("no")     → FlagInversion.PREFIXED_NO
    FlagExclusivity("last") → FlagExclusivity.CHOOSE_LAST
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class _MissingType:
    _instance: _MissingType | None = None

    def __new__(cls) -> _MissingType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _MissingType()


class _AliasedEnum(Enum):
    @classmethod
    def _get_alias(cls, value: str) -> str:
        return value

    @classmethod
    def _missing_(cls, value: object) -> Enum:
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


class FlagInversion(_AliasedEnum):
    """
    Spelling rule for the two sides of an inverted Boolean flag.

    Members:
        PREFIXED_NO: `--foo` sets True, `--no-foo` sets False. Short names stay
            on the positive side.
        PREFIXED_ENABLE_DISABLE: `--enable-foo` sets True, `--disable-foo`
            sets False. Short names stay on the enabling side.

    Aliases:
        - "no" → "prefixed_no"
        - "enable_disable" → "prefixed_enable_disable"
    """

    PREFIXED_NO = "prefixed_no"
    PREFIXED_ENABLE_DISABLE = "prefixed_enable_disable"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "no": "prefixed_no",
            "enable_disable": "prefixed_enable_disable",
        }
        return aliases.get(value, value)

    @property
    def prefixes(self) -> tuple[str | None, str]:
        """The (positive, negative) prefixes; None means the plain name."""
        if self is FlagInversion.PREFIXED_NO:
            return None, "no"
        return "enable", "disable"


class FlagExclusivity(_AliasedEnum):
    """
    Resolution rule when more than one case of a flag group is given.

    Members:
        EXCLUSIVE: Giving two different cases is an error. Repeating the same
            case is allowed.
        CHOOSE_FIRST: The first case given wins.
        CHOOSE_LAST: The last case given wins.

    Aliases:
        - "first" → "choose_first"
        - "last" → "choose_last"
    """

    EXCLUSIVE = "exclusive"
    CHOOSE_FIRST = "choose_first"
    CHOOSE_LAST = "choose_last"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "first": "choose_first",
            "last": "choose_last",
        }
        return aliases.get(value, value)
