# Declarg Argument Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the base classes user types inherit from.

`ParsableArguments` collects the field declarations of a class (see
`declarg.properties`), assembles them into a validated `ArgumentSet` once per
class, and decodes parsed values back into instances. `ParsableCommand` adds a
`CommandConfiguration`, subcommands and the `run()` / `main()` entry points.

    class Repeat(ParsableCommand):
        configuration = CommandConfiguration(abstract="Repeat a phrase.")

        phrase: str = Argument(help="The phrase to repeat.")
        count: int | None = Option(help="How many times to repeat.")

        def run(self) -> None:
            for _ in range(self.count or 2):
                print(self.phrase)

    if __name__ == "__main__":
        Repeat.main()

Key Components:
- ParsableArguments: A parsable group of arguments.
- ParsableCommand: A command, possibly with subcommands.
- AsyncParsableCommand: A command whose `run()` is a coroutine.
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, NoReturn, Sequence, get_origin

from declarg.configuration import CommandConfiguration, ParserConfiguration
from declarg.console import console, error_console
from declarg.exceptions import (
    CommandError,
    DeclargError,
    MissingSubcommandError,
    ParserError,
    UserValidationError,
)
from declarg.logger import logger
from declarg.parser.argument_set import ArgumentSet
from declarg.parser.input_key import InputKey
from declarg.parser.input_origin import InputOrigin
from declarg.parser.parsed_values import ParsedValues
from declarg.parser.parser_types import MISSING
from declarg.parser.signature import resolve_annotations
from declarg.parser.validation import validate_argument_set
from declarg.properties import ArgumentField, OptionGroup
from declarg.signals import FlowSignal, HelpRequested
from declarg.utils import is_coroutine, to_kebab_case

if TYPE_CHECKING:
    from declarg.message_info import MessageInfo

_FIELDS_CACHE = "_declarg_fields"
_ARGUMENT_SET_CACHE = "_declarg_argument_set"


@dataclass
class DeclaredField:
    """
    One field of a parsable type: a declaration, or a plain annotated
    attribute whose class-level value is used as a fixed default.
    """

    name: str
    annotation: Any
    field: ArgumentField | None = None
    fixed_value: Any = MISSING

    @property
    def bears_arguments(self) -> bool:
        return self.field is not None and self.field.bears_arguments

    def argument_set(self, parent: InputKey | None) -> ArgumentSet:
        key = InputKey.make(self.name, parent)
        if self.field is None:
            return ArgumentSet.fixed_default(key, self.fixed_value)
        return self.field.argument_set(key, self.annotation)


def _is_plain_value(value: Any) -> bool:
    return not (
        callable(value)
        or isinstance(value, (property, classmethod, staticmethod, CommandConfiguration))
    )


class ParsableArguments:
    """
    A type whose fields are parsed from command-line arguments.

    Instances are produced by `parse()`, or built directly with keyword
    arguments, in which case omitted fields take their declared defaults.
    Fields without a default stay unset and raise `ArgumentNotParsedError`
    when read.
    """

    configuration: ClassVar[CommandConfiguration] = CommandConfiguration()
    __coding_keys__: ClassVar[Sequence[str] | None] = None

    def __init__(self, **values: Any) -> None:
        declared = type(self).declared_fields()
        unknown = sorted(set(values) - set(declared))
        if unknown:
            raise TypeError(
                f"{type(self).__name__}() got unexpected field(s): {', '.join(unknown)}"
            )
        defaults = ParsedValues()
        for definition in type(self).argument_set():
            definition.initial(InputOrigin(), defaults)
        for name, entry in declared.items():
            if name in values:
                setattr(self, name, values[name])
            elif isinstance(entry.field, OptionGroup):
                setattr(self, name, entry.field.group_type(entry.annotation)())
            elif entry.field is None:
                setattr(self, name, entry.fixed_value)
            elif (element := defaults.element(InputKey(name))) is not None:
                setattr(self, name, element.value)
            elif entry.bears_arguments and entry.field.shape(entry.annotation).is_optional:
                setattr(self, name, None)

    # -- declaration --------------------------------------------------------

    @classmethod
    def declared_fields(cls) -> dict[str, DeclaredField]:
        """The fields of this type in declaration order, base classes first."""
        cached = cls.__dict__.get(_FIELDS_CACHE)
        if cached is not None:
            return cached
        annotations = resolve_annotations(cls)
        declared: dict[str, DeclaredField] = {}
        for klass in reversed(cls.__mro__):
            if not (isinstance(klass, type) and issubclass(klass, ParsableArguments)):
                continue
            own_annotations = klass.__dict__.get("__annotations__", {})
            for name, value in vars(klass).items():
                if isinstance(value, ArgumentField):
                    declared[name] = DeclaredField(name, annotations.get(name), value)
                elif (
                    name in own_annotations
                    and not name.startswith("_")
                    and get_origin(annotations.get(name)) is not ClassVar
                    and annotations.get(name) is not ClassVar
                    and _is_plain_value(value)
                ):
                    declared[name] = DeclaredField(
                        name, annotations.get(name), fixed_value=value
                    )
        setattr(cls, _FIELDS_CACHE, declared)
        return declared

    @classmethod
    def field_names(cls) -> list[str]:
        """The names of the fields that read from the command line."""
        return [name for name, entry in cls.declared_fields().items() if entry.bears_arguments]

    @classmethod
    def build_argument_set(cls, parent: InputKey | None = None) -> ArgumentSet:
        """Assemble this type's definitions, with keys nested below `parent`."""
        if parent is not None:
            cls.argument_set()
        return ArgumentSet(entry.argument_set(parent) for entry in cls.declared_fields().values())

    @classmethod
    def argument_set(cls) -> ArgumentSet:
        """
        This type's `ArgumentSet`, built and validated on first use.

        Raises:
            ArgumentDeclarationError: If the declarations contradict each other.
        """
        cached = cls.__dict__.get(_ARGUMENT_SET_CACHE)
        if cached is not None:
            return cached
        argument_set = cls.build_argument_set()
        validate_argument_set(
            cls,
            argument_set,
            field_names=cls.field_names(),
            coding_keys=cls.__coding_keys__,
        )
        setattr(cls, _ARGUMENT_SET_CACHE, argument_set)
        logger.debug("Built argument set for %s: %r", cls.__name__, argument_set)
        return argument_set

    @classmethod
    def command_name(cls) -> str:
        return cls.configuration.command_name or to_kebab_case(cls.__name__)

    # -- decoding -----------------------------------------------------------

    @classmethod
    def decode_values(
        cls,
        values: ParsedValues,
        argument_set: ArgumentSet,
        parent: InputKey | None = None,
        ancestors: Sequence[Any] = (),
    ) -> ParsableArguments:
        """
        Build an instance from parsed values.

        Raises:
            NoValueError: If a required field received no value.
        """
        instance = cls.__new__(cls)
        for name, entry in cls.declared_fields().items():
            key = InputKey.make(name, parent)
            if entry.field is None:
                value = values.get(key, entry.fixed_value)
            else:
                value = entry.field.decode(key, entry.annotation, values, argument_set, ancestors)
            setattr(instance, name, value)
        return instance

    def validate(self) -> None:
        """
        Check the parsed values as a whole. Raise `ValidationError` to report
        a usage error, or `CleanExit` / `ExitCode` to stop early.
        """

    def run_validation(self) -> None:
        try:
            self.validate()
        except ParserError:
            raise
        except Exception as error:
            raise UserValidationError(error) from error

    # -- parsing ------------------------------------------------------------

    @classmethod
    def parse(
        cls,
        arguments: Sequence[str] | None = None,
        configuration: ParserConfiguration | None = None,
    ) -> ParsableArguments:
        """
        Parse a new instance of this type from `arguments` (default: `sys.argv[1:]`).

        Raises:
            CommandError: If the input is invalid.
            HelpRequested / VersionRequested: If the user asked for help or the version.
        """
        from declarg.parser.command_parser import CommandParser

        parser = CommandParser(cls, configuration)
        result = parser.parse(arguments)
        command = result.command
        try:
            command.run_validation()
        except ParserError as error:
            raise CommandError(result.command_stack, error) from error
        if not isinstance(command, cls):
            raise DeclargError(
                f"'{cls.__name__}.parse()' resolved to '{type(command).__name__}'; "
                f"use 'parse_as_root()' for commands with subcommands"
            )
        return command

    @classmethod
    def parse_or_exit(
        cls,
        arguments: Sequence[str] | None = None,
        configuration: ParserConfiguration | None = None,
    ) -> ParsableArguments:
        """Parse, or print the error (or help) and exit the process."""
        try:
            return cls.parse(arguments, configuration)
        except (DeclargError, FlowSignal) as error:
            cls.exit(error, configuration)

    # -- messages -----------------------------------------------------------

    @classmethod
    def _message_info(
        cls, error: BaseException, configuration: ParserConfiguration | None = None
    ) -> MessageInfo:
        from declarg.message_info import MessageInfo

        return MessageInfo.from_error(error, cls, configuration)

    @classmethod
    def message(cls, error: BaseException) -> str:
        """A short message for `error`."""
        return cls._message_info(error).message

    @classmethod
    def full_message(cls, error: BaseException) -> str:
        """The message for `error` with usage information, where it applies."""
        return cls._message_info(error).full_text

    @classmethod
    def exit_code(cls, error: BaseException) -> int:
        """The status `exit()` would use for `error`."""
        return cls._message_info(error).exit_code.code

    @classmethod
    def exit(
        cls,
        error: BaseException | None = None,
        configuration: ParserConfiguration | None = None,
    ) -> NoReturn:
        """
        Exit the process, reporting `error` if there is one.

        Help and version output goes to stdout with status 0; errors go to
        stderr with their exit code.
        """
        if error is None:
            sys.exit(0)
        info = cls._message_info(error, configuration)
        text = info.full_text
        if text:
            target = console if info.should_exit_cleanly else error_console
            target.print(text, markup=False, highlight=False)
        sys.exit(info.exit_code.code)

    @classmethod
    def help_message(
        cls,
        include_hidden: bool = False,
        columns: int | None = None,
        configuration: ParserConfiguration | None = None,
    ) -> str:
        from declarg.help import HelpGenerator

        return HelpGenerator(
            [cls], include_hidden=include_hidden, configuration=configuration
        ).rendered(columns)

    @classmethod
    def usage_string(cls, configuration: ParserConfiguration | None = None) -> str:
        from declarg.help import HelpGenerator

        return HelpGenerator([cls], configuration=configuration).usage

    def __repr__(self) -> str:
        parts = [
            f"{name}={self.__dict__[name]!r}"
            for name in type(self).declared_fields()
            if name in self.__dict__
        ]
        return f"{type(self).__name__}({', '.join(parts)})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        names = type(self).declared_fields()
        return all(
            self.__dict__.get(name, MISSING) == other.__dict__.get(name, MISSING)
            for name in names
        )

    __hash__ = None  # type: ignore[assignment]


class ParsableCommand(ParsableArguments):
    """
    A command: parsable arguments plus a configuration and a `run()` body.

    Subclasses list their subcommands in `configuration.subcommands`; the
    whole tree is parsed by `parse_as_root()` and executed by `main()`.
    """

    configuration: ClassVar[CommandConfiguration] = CommandConfiguration()

    @classmethod
    def parse_as_root(
        cls,
        arguments: Sequence[str] | None = None,
        configuration: ParserConfiguration | None = None,
    ) -> ParsableCommand:
        """
        Parse `arguments` against the command tree rooted at this type.

        Returns:
            ParsableCommand: The decoded leaf command, ready to `run()`.

        Raises:
            CommandError: If the input is invalid at any level.
            HelpRequested / VersionRequested: If the user asked for help or the version.
        """
        from declarg.parser.command_parser import CommandParser

        parser = CommandParser(cls, configuration)
        result = parser.parse(arguments)
        try:
            result.command.run_validation()
        except ParserError as error:
            raise CommandError(result.command_stack, error) from error
        return result.command  # type: ignore[return-value]

    def run(self) -> Any:
        """
        The command body. Commands that only group subcommands leave it
        undefined; running one reports the missing subcommand.
        """
        if type(self).configuration.subcommands:
            raise CommandError([type(self)], MissingSubcommandError())
        raise HelpRequested([type(self)])

    @classmethod
    def main(
        cls,
        arguments: Sequence[str] | None = None,
        configuration: ParserConfiguration | None = None,
    ) -> NoReturn:
        """Parse, run the selected command and exit the process."""
        try:
            command = cls.parse_as_root(arguments, configuration)
            if is_coroutine(command.run):
                asyncio.run(command.run())
            else:
                command.run()
        except (DeclargError, FlowSignal) as error:
            cls.exit(error, configuration)
        except KeyboardInterrupt:
            logger.info("[KeyboardInterrupt]. <- Exiting %s.", cls.command_name())
            sys.exit(130)
        except Exception as error:
            logger.debug("Unhandled error in %s", cls.command_name(), exc_info=True)
            cls.exit(error, configuration)
        cls.exit()


class AsyncParsableCommand(ParsableCommand):
    """
    A command whose `run()` is a coroutine.

    Parsing is synchronous; `main()` then drives `run()` with `asyncio.run`.
    """

    async def run(self) -> Any:  # type: ignore[override]
        return super().run()
