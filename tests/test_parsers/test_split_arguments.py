import pytest

from declarg.exceptions import InvalidOptionError
from declarg.parser.input_origin import SplitIndex
from declarg.parser.name import Name
from declarg.parser.split_arguments import SplitArguments


def test_values_and_options_are_classified():
    split = SplitArguments(["file.txt", "--verbose", "-", "-o"])
    kinds = [element.kind.value for element in split]
    assert kinds == ["value", "option", "value", "option"]


def test_long_option_with_attached_value():
    split = SplitArguments(["--count=3"])
    (element,) = list(split)
    assert element.argument.name == Name.long("count")
    assert element.argument.value == "3"


def test_short_option_cluster_has_sub_elements():
    split = SplitArguments(["-abc"])
    elements = list(split)
    assert elements[0].argument.name == Name.long_with_short_prefix("abc")
    assert [e.argument.name for e in elements[1:]] == [
        Name.short("a"),
        Name.short("b"),
        Name.short("c"),
    ]
    assert [e.index for e in elements[1:]] == [
        SplitIndex(0, 0),
        SplitIndex(0, 1),
        SplitIndex(0, 2),
    ]


def test_everything_after_terminator_is_a_value():
    split = SplitArguments(["--", "--not-an-option", "-x"])
    elements = list(split)
    assert elements[0].is_terminator
    assert all(element.is_value for element in elements[1:])
    assert elements[1].value == "--not-an-option"


def test_only_the_first_terminator_is_special():
    split = SplitArguments(["--", "--"])
    elements = list(split)
    assert elements[0].is_terminator
    assert elements[1].is_value


def test_tokens_after_terminator_are_never_classified():
    split = SplitArguments(["a", "--", "---", "-vx", "--", "--out=x"])
    elements = list(split)
    assert elements[1].is_terminator
    assert [element.value for element in elements[2:]] == ["---", "-vx", "--", "--out=x"]
    assert [element.index for element in elements[2:]] == [
        SplitIndex(2),
        SplitIndex(3),
        SplitIndex(4),
        SplitIndex(5),
    ]


@pytest.mark.parametrize("token", ["---", "---foo", "--=value"])
def test_invalid_options(token):
    with pytest.raises(InvalidOptionError):
        SplitArguments([token])


def test_removing_a_sub_element_removes_its_token():
    split = SplitArguments(["-ab", "value"])
    split.remove(SplitIndex(0, 0))
    assert [element.index for element in split] == [SplitIndex(0, 1), SplitIndex(1)]


def test_removing_a_complete_element_removes_its_sub_elements():
    split = SplitArguments(["-ab", "value"])
    split.remove(SplitIndex(0))
    assert [element.index for element in split] == [SplitIndex(1)]


def test_pop_next_element_as_value_reads_options_verbatim():
    split = SplitArguments(["--a", "--b", "foo"])
    assert split.pop_next_element_as_value(after=SplitIndex(0)) == (SplitIndex(1), "--b")
    assert split.pop_next_element_as_value(after=SplitIndex(0)) == (SplitIndex(2), "foo")


def test_pop_next_value_skips_options():
    split = SplitArguments(["--a", "--b", "foo"])
    assert split.pop_next_value(after=SplitIndex(0)) == (SplitIndex(2), "foo")


def test_extract_joined_value():
    split = SplitArguments(["-vofile.txt"])
    assert split.extract_joined_value(SplitIndex(0, 1)) == (SplitIndex(0), "file.txt")


def test_coalesced_extra_elements_reports_leftover_cluster_characters():
    split = SplitArguments(["-vx", "extra"])
    split.remove(SplitIndex(0, 0))
    extras = [text for _, text in split.coalesced_extra_elements()]
    assert extras == ["-x", "extra"]


def test_option_names_and_contains_any():
    split = SplitArguments(["--help", "-v", "value"])
    assert split.option_names() == [Name.long("help"), Name.short("v")]
    assert split.contains_any([Name.short("h"), Name.long("help")])
    assert not split.contains_any([Name.long("version")])
