import pytest

from declarg.exceptions import ArgumentDefinitionError
from declarg.parser.input_key import InputKey
from declarg.parser.name import (
    ElementKind,
    Name,
    NameElement,
    NameKind,
    NameSpecification,
)


@pytest.mark.parametrize(
    "token, kind, value",
    [
        ("--output", NameKind.LONG, "output"),
        ("-o", NameKind.SHORT, "o"),
        ("-out", NameKind.LONG_WITH_SHORT_PREFIX, "out"),
    ],
)
def test_name_from_token(token, kind, value):
    name = Name.from_token(token)
    assert name.kind is kind
    assert name.value == value
    assert name.synopsis == token


@pytest.mark.parametrize("token", ["output", "---output", "-", "--"])
def test_name_from_token_rejects_bad_spellings(token):
    with pytest.raises(ArgumentDefinitionError):
        Name.from_token(token)


def test_short_name_must_be_one_character():
    with pytest.raises(ArgumentDefinitionError):
        Name.short("ab")


@pytest.mark.parametrize("kind", [ElementKind.CUSTOM_LONG, ElementKind.CUSTOM_SHORT])
def test_custom_element_without_spelling(kind):
    with pytest.raises(ArgumentDefinitionError):
        NameElement(kind).make_name(InputKey("output"))


def test_allows_joined_is_not_part_of_equality():
    assert Name.short("o", allows_joined=True) == Name.short("o")
    assert Name.long("o") != Name.short("o")


def test_default_specification_is_kebab_cased_long_name():
    key = InputKey("include_counter")
    assert NameSpecification.long().make_names(key) == [Name.long("include-counter")]


def test_short_and_long_specification():
    key = InputKey("verbose")
    assert NameSpecification.short_and_long().make_names(key) == [
        Name.long("verbose"),
        Name.short("v"),
    ]


def test_specification_from_spellings():
    spec = NameSpecification.coerce(["-o", "--output", "-out"])
    names = spec.make_names(InputKey("file"))
    assert names == [
        Name.short("o"),
        Name.long("output"),
        Name.long_with_short_prefix("out"),
    ]


def test_specification_deduplicates_elements():
    spec = NameSpecification(["long", "--name", "long"])
    assert len(spec) == 2


def test_custom_short_with_joined_values():
    spec = NameSpecification.custom_short("D", allows_joined=True)
    (name,) = spec.make_names(InputKey("define"))
    assert name.is_short
    assert name.allows_joined


def test_prefixed_names_keep_short_names_on_the_positive_side():
    spec = NameSpecification.short_and_long()
    key = InputKey("color")
    assert spec.make_prefixed_names(key, "no", include_short=False) == [Name.long("no-color")]
    assert spec.make_prefixed_names(key, "enable", include_short=True) == [
        Name.long("enable-color"),
        Name.short("c"),
    ]
