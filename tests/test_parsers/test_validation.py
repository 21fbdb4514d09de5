import pytest

from declarg.exceptions import ArgumentDeclarationError
from declarg.parser.argument_definition import ParsingStrategy
from declarg.parser.argument_set import ArgumentSet
from declarg.parser.input_key import InputKey
from declarg.parser.name import NameSpecification
from declarg.parser.validation import (
    validate_argument_set,
    validate_coding_keys,
    validate_nonsense_flags,
    validate_positional_ordering,
    validate_unique_names,
)


class Owner:
    pass


def positional(name, **kwargs):
    return ArgumentSet.positional(InputKey(name), str, **kwargs)


def test_positional_after_repeating_positional():
    argument_set = ArgumentSet.join(
        positional("files", repeating=True), positional("target")
    )
    issues = validate_positional_ordering(argument_set)
    assert len(issues) == 1
    assert "`target` following an array of positional arguments `files`" in str(issues[0])


def test_trailing_strategies_may_follow_repeating_positional():
    argument_set = ArgumentSet.join(
        positional("files", repeating=True),
        positional("rest", repeating=True, default=[], parsing=ParsingStrategy.POST_TERMINATOR),
    )
    assert validate_positional_ordering(argument_set) == []


def test_duplicate_names():
    argument_set = ArgumentSet.join(
        ArgumentSet.flag(InputKey("verbose"), NameSpecification.short_and_long()),
        ArgumentSet.flag(InputKey("version"), NameSpecification.short()),
    )
    issues = validate_unique_names(argument_set)
    assert [str(issue) for issue in issues] == [
        'Multiple (2) `Option` or `Flag` arguments are named "-v".'
    ]


def test_coding_keys():
    assert validate_coding_keys(["name"], None) == []
    assert validate_coding_keys(["name"], ["name", "other"]) == []

    single = validate_coding_keys(["name", "count"], ["name"])
    assert "Argument `count` is defined without" in str(single[0])

    several = validate_coding_keys(["name", "count"], [])
    assert "Arguments `name`,`count` are defined without" in str(several[0])


def test_flag_defaulting_to_true_is_a_warning():
    argument_set = ArgumentSet.flag(
        InputKey("color"), NameSpecification.long(), default=True
    )
    issues = validate_nonsense_flags(argument_set)
    assert len(issues) == 1
    assert not issues[0].fatal
    assert "--color" in str(issues[0])


def test_inverted_flag_defaulting_to_true_is_fine():
    argument_set = ArgumentSet.inverted_flag(
        InputKey("color"), NameSpecification.long(), default=True
    )
    assert validate_nonsense_flags(argument_set) == []


def test_validate_argument_set_collects_failures():
    argument_set = ArgumentSet.join(
        positional("files", repeating=True),
        positional("target"),
        ArgumentSet.flag(InputKey("all"), NameSpecification.short()),
        ArgumentSet.flag(InputKey("any"), NameSpecification.short()),
    )
    with pytest.raises(ArgumentDeclarationError) as excinfo:
        validate_argument_set(Owner, argument_set)
    assert excinfo.value.owner is Owner
    assert len(excinfo.value.issues) == 2
    assert str(excinfo.value).startswith("Validation failed for 'Owner':")


def test_validate_argument_set_returns_warnings(caplog):
    argument_set = ArgumentSet.flag(InputKey("color"), NameSpecification.long(), default=True)
    with caplog.at_level("WARNING", logger="declarg"):
        warnings = validate_argument_set(Owner, argument_set)
    assert len(warnings) == 1
    assert "[Owner]" in caplog.text
