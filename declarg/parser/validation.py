# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Static checks over a command type's declared arguments.

These run once per type, before any input is parsed, and look only at the
assembled `ArgumentSet` (plus the type's declared field names). Each check
returns a list of `DeclarationIssue`s; `validate_argument_set()` runs all of
them, logs the warnings and raises a single `ArgumentDeclarationError`
listing every fatal finding.

Checks:
- validate_positional_ordering: no positional after a repeating positional.
- validate_unique_names: no spelling used by two definitions.
- validate_coding_keys: every argument field is one the type persists.
- validate_nonsense_flags: (warning) a plain flag defaulting to true.
"""
from __future__ import annotations

from collections import Counter
from typing import Sequence

from declarg.exceptions import ArgumentDeclarationError, DeclarationIssue
from declarg.logger import logger
from declarg.parser.argument_definition import ParsingStrategy
from declarg.parser.argument_set import ArgumentSet

_TRAILING_STRATEGIES = (ParsingStrategy.POST_TERMINATOR, ParsingStrategy.ALL_UNRECOGNIZED)


def validate_positional_ordering(argument_set: ArgumentSet) -> list[DeclarationIssue]:
    repeated = None
    for definition in argument_set.positionals():
        if repeated is None:
            if definition.is_repeating_positional:
                repeated = definition
            continue
        if definition.parsing_strategy in _TRAILING_STRATEGIES:
            continue
        return [
            DeclarationIssue(
                f"Can't have a positional argument `{definition.key.name}` following "
                f"an array of positional arguments `{repeated.key.name}`."
            )
        ]
    return []


def validate_unique_names(argument_set: ArgumentSet) -> list[DeclarationIssue]:
    counted = Counter(name.synopsis for name in argument_set.names())
    return [
        DeclarationIssue(
            f'Multiple ({count}) `Option` or `Flag` arguments are named "{synopsis}".'
        )
        for synopsis, count in counted.items()
        if count > 1
    ]


def validate_coding_keys(
    field_names: Sequence[str], coding_keys: Sequence[str] | None
) -> list[DeclarationIssue]:
    """
    Check that every argument-bearing field is among `coding_keys`.

    A type that declares no coding keys persists all of its fields.
    """
    if coding_keys is None:
        return []
    missing = [name for name in field_names if name not in coding_keys]
    if not missing:
        return []
    resolution = (
        "To resolve this error, make sure that all argument fields are listed "
        "in `__coding_keys__`."
    )
    if len(missing) > 1:
        names = ",".join(f"`{name}`" for name in missing)
        return [
            DeclarationIssue(
                f"Arguments {names} are defined without corresponding `CodingKey`s.\n\n"
                f"{resolution}"
            )
        ]
    return [
        DeclarationIssue(
            f"Argument `{missing[0]}` is defined without a corresponding `CodingKey`.\n\n"
            f"{resolution}"
        )
    ]


def validate_nonsense_flags(argument_set: ArgumentSet) -> list[DeclarationIssue]:
    names = [
        definition.unadorned_synopsis()
        for definition in argument_set
        if definition.is_named
        and definition.is_nullary
        and not definition.help.is_composite
        and definition.help.is_optional
        and definition.help.default_value == "true"
    ]
    if not names:
        return []
    affected = "\n".join(name for name in names if name)
    return [
        DeclarationIssue(
            "One or more Boolean flags is declared with an initial value of `true`. "
            "This results in the flag always being `true`, no matter whether the user "
            "specifies the flag or not.\n\n"
            "To resolve this error, change the default to `false`, provide a value "
            "for the `inversion` parameter, or remove the `Flag` declaration "
            "altogether.\n\n"
            f"Affected flag(s):\n{affected}",
            fatal=False,
        )
    ]


def validate_argument_set(
    owner: type,
    argument_set: ArgumentSet,
    field_names: Sequence[str] = (),
    coding_keys: Sequence[str] | None = None,
) -> list[DeclarationIssue]:
    """
    Run every check and report the combined result.

    Returns:
        list[DeclarationIssue]: The non-fatal findings, already logged.

    Raises:
        ArgumentDeclarationError: If any finding is fatal; lists all of them.
    """
    issues = [
        *validate_positional_ordering(argument_set),
        *validate_coding_keys(field_names, coding_keys),
        *validate_unique_names(argument_set),
        *validate_nonsense_flags(argument_set),
    ]
    failures = [issue for issue in issues if issue.fatal]
    warnings = [issue for issue in issues if not issue.fatal]
    for warning in warnings:
        logger.warning("[%s] %s", owner.__name__, warning)
    if failures:
        raise ArgumentDeclarationError(owner, failures)
    logger.debug("Validated argument declarations of %s", owner.__name__)
    return warnings
