"""
Declarg Argument Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .configuration import CommandConfiguration, ParserConfiguration
from .exceptions import (
    ArgumentDeclarationError,
    ArgumentDefinitionError,
    ArgumentNotParsedError,
    CommandError,
    DeclargError,
    ExitCode,
    ParserError,
    ValidationError,
)
from .help import HelpGenerator
from .message_info import MessageInfo, MessageKind
from .parsable import AsyncParsableCommand, ParsableArguments, ParsableCommand
from .parser.argument_definition import ArgumentVisibility
from .parser.name import NameSpecification
from .parser.parser_types import FlagExclusivity, FlagInversion
from .properties import (
    Argument,
    ArgumentArrayParsing,
    ArgumentHelp,
    ArrayParsing,
    Flag,
    Option,
    OptionGroup,
    ParentCommand,
    SingleValueParsing,
)
from .signals import CleanExit, FlowSignal, HelpRequested, VersionRequested
from .utils import setup_logging
from .version import __version__

__all__ = [
    "Argument",
    "ArgumentArrayParsing",
    "ArgumentDeclarationError",
    "ArgumentDefinitionError",
    "ArgumentHelp",
    "ArgumentNotParsedError",
    "ArgumentVisibility",
    "ArrayParsing",
    "AsyncParsableCommand",
    "CleanExit",
    "CommandConfiguration",
    "CommandError",
    "DeclargError",
    "ExitCode",
    "Flag",
    "FlagExclusivity",
    "FlagInversion",
    "FlowSignal",
    "HelpGenerator",
    "HelpRequested",
    "MessageInfo",
    "MessageKind",
    "NameSpecification",
    "Option",
    "OptionGroup",
    "ParentCommand",
    "ParsableArguments",
    "ParsableCommand",
    "ParserConfiguration",
    "ParserError",
    "SingleValueParsing",
    "ValidationError",
    "VersionRequested",
    "setup_logging",
    "__version__",
]
