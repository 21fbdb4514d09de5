from enum import Enum

import pytest

from declarg.exceptions import (
    AmbiguousAbbreviationError,
    DuplicateExclusiveValuesError,
    MissingValueForOptionError,
    UnableToParseValueError,
    UnexpectedValueForOptionError,
)
from declarg.parser.argument_definition import ParsingStrategy
from declarg.parser.argument_matcher import ArgumentMatcher
from declarg.parser.argument_set import ArgumentSet, FlagCase
from declarg.parser.input_key import InputKey
from declarg.parser.name import Name, NameSpecification
from declarg.parser.split_arguments import SplitArguments


class Speed(Enum):
    FAST = "fast"
    SLOW = "slow"


def option(name, transform=str, spec=None, **kwargs) -> ArgumentSet:
    return ArgumentSet.option(
        InputKey(name), spec or NameSpecification.short_and_long(), transform, **kwargs
    )


def positional(name, transform=str, **kwargs) -> ArgumentSet:
    return ArgumentSet.positional(InputKey(name), transform, **kwargs)


def flag(name) -> ArgumentSet:
    return ArgumentSet.flag(InputKey(name), NameSpecification.short_and_long())


def match(argument_set, arguments, **kwargs):
    matcher = ArgumentMatcher(argument_set, **kwargs)
    return matcher.match(SplitArguments(arguments))


def value(result, name):
    return result.values.get(InputKey(name))


@pytest.mark.parametrize(
    "arguments",
    [["--name", "value"], ["--name=value"], ["-n", "value"]],
)
def test_next_as_value_spellings(arguments):
    result = match(option("name"), arguments)
    assert value(result, "name") == "value"


def test_next_as_value_does_not_take_an_option():
    argument_set = ArgumentSet.join(option("name"), flag("verbose"))
    with pytest.raises(MissingValueForOptionError) as excinfo:
        match(argument_set, ["--name", "--verbose"])
    assert excinfo.value.name == Name.long("name")


def test_scanning_for_value_skips_options():
    argument_set = ArgumentSet.join(
        option("name", parsing=ParsingStrategy.SCANNING_FOR_VALUE), flag("verbose")
    )
    result = match(argument_set, ["--name", "--verbose", "value"])
    assert value(result, "name") == "value"
    assert value(result, "verbose") is True


def test_unconditional_takes_the_next_token_verbatim():
    argument_set = ArgumentSet.join(
        option("name", parsing=ParsingStrategy.UNCONDITIONAL), flag("verbose")
    )
    result = match(argument_set, ["--name", "--verbose"])
    assert value(result, "name") == "--verbose"
    assert value(result, "verbose") is False


def test_up_to_next_option_collects_values():
    argument_set = ArgumentSet.join(
        option("files", parsing=ParsingStrategy.UP_TO_NEXT_OPTION, repeating=True),
        flag("verbose"),
    )
    result = match(argument_set, ["--files", "a", "b", "--verbose", "c"])
    assert value(result, "files") == ["a", "b"]
    assert value(result, "verbose") is True


def test_all_remaining_input_option_takes_options_too():
    argument_set = ArgumentSet.join(
        option("rest", parsing=ParsingStrategy.ALL_REMAINING_INPUT, repeating=True),
        flag("verbose"),
    )
    result = match(argument_set, ["--rest", "a", "--verbose"])
    assert value(result, "rest") == ["a", "--verbose"]
    assert value(result, "verbose") is False


def test_repeated_option_accumulates_and_replaces_default():
    argument_set = option("tag", repeating=True, default=["base"])
    assert value(match(argument_set, []), "tag") == ["base"]
    result = match(argument_set, ["--tag", "a", "-t", "b"])
    assert value(result, "tag") == ["a", "b"]


def test_single_option_last_occurrence_wins():
    result = match(option("name"), ["--name", "a", "--name", "b"])
    assert value(result, "name") == "b"


def test_joined_short_value():
    argument_set = ArgumentSet.join(
        option("define", spec=NameSpecification.custom_short("D", allows_joined=True)),
        flag("verbose"),
    )
    result = match(argument_set, ["-Dfoo"])
    assert value(result, "define") == "foo"


def test_joined_value_after_flag_in_cluster():
    argument_set = ArgumentSet.join(
        flag("verbose"),
        option("output", spec=NameSpecification.custom_short("o", allows_joined=True)),
    )
    result = match(argument_set, ["-vofile.txt"])
    assert value(result, "verbose") is True
    assert value(result, "output") == "file.txt"


def test_short_cluster_sets_every_flag():
    argument_set = ArgumentSet.join(flag("all"), flag("brief"), flag("color"))
    result = match(argument_set, ["-abc"])
    assert value(result, "all") is True
    assert value(result, "brief") is True
    assert value(result, "color") is True


def test_cluster_with_trailing_value_option():
    argument_set = ArgumentSet.join(flag("all"), option("output"))
    result = match(argument_set, ["-ao", "file.txt"])
    assert value(result, "all") is True
    assert value(result, "output") == "file.txt"


def test_counter_counts_occurrences():
    argument_set = ArgumentSet.counter(InputKey("verbose"), NameSpecification.short())
    assert value(match(argument_set, ["-vvv"]), "verbose") == 3
    assert value(match(argument_set, []), "verbose") == 0


def test_flag_rejects_attached_value():
    with pytest.raises(UnexpectedValueForOptionError):
        match(flag("verbose"), ["--verbose=yes"])


def test_abbreviation_expands_unique_prefix():
    argument_set = ArgumentSet.join(flag("verbose"), option("output"))
    result = match(argument_set, ["--verb", "--out", "x"])
    assert value(result, "verbose") is True
    assert value(result, "output") == "x"


def test_ambiguous_abbreviation():
    argument_set = ArgumentSet.join(flag("verbose"), flag("version-check"))
    with pytest.raises(AmbiguousAbbreviationError) as excinfo:
        match(argument_set, ["--ver"])
    assert "--verbose" in str(excinfo.value)


def test_abbreviations_can_be_disabled():
    result = match(flag("verbose"), ["--verb"], allow_abbreviations=False)
    assert value(result, "verbose") is False
    assert len(result.used_origins) == 0


def test_reserved_names_are_not_expanded():
    result = match(flag("verbose"), ["--verb"], reserved_names=[Name.long("verb")])
    assert value(result, "verbose") is False


def test_positionals_in_declaration_order():
    argument_set = ArgumentSet.join(
        positional("source"), positional("count", int), flag("verbose")
    )
    result = match(argument_set, ["a.txt", "--verbose", "3"])
    assert value(result, "source") == "a.txt"
    assert value(result, "count") == 3


def test_repeating_positional_collects_values():
    argument_set = ArgumentSet.join(positional("files", repeating=True), flag("verbose"))
    result = match(argument_set, ["a", "--verbose", "b"])
    assert value(result, "files") == ["a", "b"]


def test_subcommand_name_ends_positional_pass():
    argument_set = positional("files", repeating=True, default=[])
    result = match(argument_set, ["a", "run", "b"], subcommand_names=["run"])
    assert value(result, "files") == ["a"]


def test_passthrough_positional_captures_from_first_value():
    argument_set = ArgumentSet.join(
        flag("verbose"),
        positional("words", repeating=True, parsing=ParsingStrategy.ALL_REMAINING_INPUT),
    )
    result = match(argument_set, ["--verbose", "run", "--x", "y"])
    assert value(result, "verbose") is True
    assert value(result, "words") == ["run", "--x", "y"]


def test_post_terminator_positional():
    argument_set = ArgumentSet.join(
        positional("file"),
        positional(
            "extras", repeating=True, default=[], parsing=ParsingStrategy.POST_TERMINATOR
        ),
    )
    result = match(argument_set, ["a", "--", "b", "c"])
    assert value(result, "file") == "a"
    assert value(result, "extras") == ["b", "c"]


def test_terminator_makes_dashed_tokens_positional():
    result = match(positional("name"), ["--", "-x"])
    assert value(result, "name") == "-x"


def test_repeating_positional_spans_terminator():
    result = match(positional("files", repeating=True), ["a", "b", "--", "--c"])
    assert value(result, "files") == ["a", "b", "--c"]


@pytest.mark.parametrize(
    "arguments, expected",
    [
        (["--", "add"], ["add"]),
        (["x", "--", "add", "y"], ["x", "add", "y"]),
        (["x", "add", "--", "y"], ["x"]),
    ],
)
def test_subcommand_name_after_terminator_is_a_value(arguments, expected):
    argument_set = positional("words", repeating=True, default=[])
    result = match(argument_set, arguments, subcommand_names=["add"])
    assert value(result, "words") == expected


def test_transform_failure_raises_unable_to_parse():
    with pytest.raises(UnableToParseValueError) as excinfo:
        match(option("count", int), ["--count", "many"])
    assert excinfo.value.value == "many"
    assert excinfo.value.key == InputKey("count")
    assert str(excinfo.value).startswith(
        "The value 'many' is invalid for '--count <count>'"
    )


def test_exclusive_flag_cases_conflict():
    argument_set = ArgumentSet.enumerable_flag(
        InputKey("speed"), [FlagCase(Speed.FAST, "fast"), FlagCase(Speed.SLOW, "slow")]
    )
    assert value(match(argument_set, ["--slow"]), "speed") is Speed.SLOW
    assert value(match(argument_set, ["--fast", "--fast"]), "speed") is Speed.FAST
    with pytest.raises(DuplicateExclusiveValuesError):
        match(argument_set, ["--fast", "--slow"])


def test_lenient_match_records_first_error_and_continues():
    argument_set = ArgumentSet.join(flag("verbose"), option("name"))
    matcher = ArgumentMatcher(argument_set)
    result = matcher.match(SplitArguments(["--verbose=1", "--name", "x"]), lenient=True)
    assert isinstance(result.error, UnexpectedValueForOptionError)
    assert result.is_partial
    assert value(result, "name") == "x"
