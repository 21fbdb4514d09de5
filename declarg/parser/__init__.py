"""
Declarg Argument Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .argument_definition import (
    ArgumentDefinition,
    ArgumentVisibility,
    DefinitionHelp,
    ParsingStrategy,
)
from .argument_matcher import ArgumentMatcher, MatchResult
from .argument_set import ArgumentSet, FlagCase
from .input_key import InputKey
from .input_origin import InputOrigin, OriginSource, SplitIndex
from .name import Name, NameKind, NameSpecification
from .parsed_values import ParsedValues
from .parser_types import FlagExclusivity, FlagInversion
from .split_arguments import SplitArguments

__all__ = [
    "ArgumentDefinition",
    "ArgumentMatcher",
    "ArgumentSet",
    "ArgumentVisibility",
    "DefinitionHelp",
    "FlagCase",
    "FlagExclusivity",
    "FlagInversion",
    "InputKey",
    "InputOrigin",
    "MatchResult",
    "Name",
    "NameKind",
    "NameSpecification",
    "OriginSource",
    "ParsedValues",
    "ParsingStrategy",
    "SplitArguments",
    "SplitIndex",
]
