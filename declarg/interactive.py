# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Prompts for missing input when a parse runs in a terminal.

With `ParserConfiguration(prompt_for_missing=True)`, the command parser asks
the user for what the command line left out instead of failing:

- an option given without its value (`? Please enter value for '--name': `),
- a required argument with no value (`? Please enter '<label>': `), or a
  numbered menu when the argument has a fixed set of values,
- one case of a required enumerable flag group (`? Please select '<label>': `).

Prompts only run when both stdin and stdout are terminals. Answers are
recorded with an `interactive` input origin.

Key Components:
- Interactor: Asks questions through a prompt_toolkit `PromptSession`.
- SerialNumberValidator: Accepts space-separated menu numbers in range.
"""
from __future__ import annotations

import sys
from typing import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.validation import ValidationError, Validator

from declarg.console import console
from declarg.exceptions import (
    MissingValueForOptionError,
    NoValueError,
    ParserError,
    UnableToParseValueError,
)
from declarg.logger import logger
from declarg.parser.argument_definition import ArgumentDefinition, ArgumentVisibility
from declarg.parser.argument_set import ArgumentSet
from declarg.parser.input_origin import InputOrigin, OriginSource
from declarg.parser.parsed_values import ParsedValues


def non_empty_validator() -> Validator:
    return Validator.from_callable(
        lambda text: bool(text.strip()),
        error_message="Enter a value.",
    )


class SerialNumberValidator(Validator):
    """Validates menu selections such as `1` or `1 3`."""

    def __init__(self, maximum: int, allow_multiple: bool = True) -> None:
        self.maximum = maximum
        self.allow_multiple = allow_multiple
        super().__init__()

    def validate(self, document):
        selections = document.text.split()
        if not selections:
            raise ValidationError(message="Select at least 1 item.")
        if len(selections) > 1 and not self.allow_multiple:
            raise ValidationError(message="Select a single item.")
        for selection in selections:
            if not selection.isdigit():
                raise ValidationError(message=f"'{selection}' is not a serial number.")
            if not 1 <= int(selection) <= self.maximum:
                raise ValidationError(
                    message=f"'{selection}' is not in the range 1 - {self.maximum}."
                )


class Interactor:
    """
    Asks the user for missing values.

    Args:
        session (PromptSession | None): The prompt session to read answers from.
        interactive (bool | None): Force prompting on or off. By default it is
            on when stdin and stdout are both terminals.
    """

    def __init__(
        self,
        session: PromptSession | None = None,
        interactive: bool | None = None,
    ) -> None:
        self._session = session
        self.interactive = interactive

    @property
    def session(self) -> PromptSession:
        if self._session is None:
            self._session = PromptSession()
        return self._session

    @property
    def is_available(self) -> bool:
        if self.interactive is not None:
            return self.interactive
        return sys.stdin.isatty() and sys.stdout.isatty()

    def ask(self, message: str) -> str:
        return self.session.prompt(message, validator=non_empty_validator()).strip()

    def choose(self, message: str, choices: Sequence[str], allow_multiple: bool = True) -> list[int]:
        """Show a numbered menu and return the zero-based indices picked."""
        for number, choice in enumerate(choices, start=1):
            console.print(f"{number}. {choice}", markup=False, highlight=False)
        answer = self.session.prompt(
            message,
            validator=SerialNumberValidator(len(choices), allow_multiple),
        )
        return [int(selection) - 1 for selection in answer.split()]

    def value_for_option(self, error: MissingValueForOptionError) -> str:
        return self.ask(f"? Please enter value for '{error.name.synopsis}': ")

    def fill_missing(
        self, error: NoValueError, argument_set: ArgumentSet, values: ParsedValues
    ) -> bool:
        """
        Ask for the value of `error.key` and store it in `values`.

        Returns:
            bool: True if a value was stored and decoding can be retried.
        """
        key = error.key
        definitions = [
            definition
            for definition in argument_set.definitions_for_key(key)
            if definition.help.visibility is ArgumentVisibility.DEFAULT
        ]
        if not definitions:
            return False
        label = key.name
        logger.debug("Prompting for missing '%s'", key)

        if len(definitions) > 1:
            return self._select_flag(label, definitions, values)

        definition = definitions[0]
        if definition.is_nullary:
            return False
        is_list = definition.help.is_repeating
        if definition.help.all_values:
            choices = definition.help.all_values
            picked = [
                choices[index]
                for index in self.choose(f"? Please select '{label}': ", choices, is_list)
            ]
            for raw in picked:
                self._store(definition, raw, values)
            shown = "', '".join(picked) if is_list else picked[-1]
        else:
            answer = self.ask(f"? Please enter '{label}': ")
            picked = answer.split() if is_list else [answer]
            for raw in picked:
                self._store_or_replace(definition, raw, values)
            shown = "', '".join(picked)
        console.print(f"You select '{shown}'.\n", markup=False, highlight=False)
        return True

    def _select_flag(
        self, label: str, definitions: list[ArgumentDefinition], values: ParsedValues
    ) -> bool:
        possibilities = [definition.non_optional().synopsis() or "" for definition in definitions]
        picked = self.choose(f"? Please select '{label}': ", possibilities)
        for index in picked:
            definition = definitions[index]
            try:
                definition.update(self._origin(), definition.preferred_name, values)
            except ParserError:
                console.print(
                    f"You select '{possibilities[picked[0]]}'.\n", markup=False, highlight=False
                )
                return True
        shown = "', '".join(possibilities[index] for index in picked)
        console.print(f"You select '{shown}'.\n", markup=False, highlight=False)
        return True

    @staticmethod
    def _origin() -> InputOrigin:
        return InputOrigin.of(OriginSource.INTERACTIVE)

    def _store(self, definition: ArgumentDefinition, raw: str, values: ParsedValues) -> None:
        name = definition.names[0] if definition.names else None
        definition.update(self._origin(), name, raw, values)

    def _store_or_replace(
        self, definition: ArgumentDefinition, raw: str, values: ParsedValues
    ) -> None:
        while True:
            try:
                self._store(definition, raw, values)
                return
            except UnableToParseValueError as error:
                console.print(f"Error: {error}.\n", markup=False, highlight=False)
                raw = self.ask(f"? Please replace '{error.value}': ")
