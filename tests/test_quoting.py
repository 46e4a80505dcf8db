import pytest

from jcrush.quoting import (
    encoded_length,
    fix_interpolation_boundary,
    has_unescaped_interpolation,
    quote,
    quote_candidates,
    split_interpolations,
    unescape_template,
)


def test_plain_value_prefers_single_quotes():
    assert quote("abc") == "'abc'"


def test_picks_the_notation_with_least_escaping():
    assert quote("it's") == '"it\'s"'
    assert quote('say "hi"') == "'say \"hi\"'"
    # both quote characters present: template needs no escapes
    assert quote("it's \"x\"") == "`it's \"x\"`"


def test_backslashes_are_always_escaped():
    assert quote("a\\b") == "'a\\\\b'"


def test_line_breaks():
    # raw newline is legal inside a template literal and one byte shorter
    assert quote("a\nb") == "`a\nb`"
    # CR is escaped everywhere; tie goes to single quotes
    assert quote("a\rb") == "'a\\rb'"


def test_interpolation_opener_is_only_escaped_in_templates():
    assert quote("x${y}") == "'x${y}'"
    assert quote("it's `${y}` \"").startswith("'")


@pytest.mark.parametrize("value", [
    "", "abc", "it's", "\"'`", "${a}", "a\\b\nc\rd", "café", "` `", "'''\"\"",
])
def test_quote_is_never_longer_than_alternatives(value):
    chosen = len(quote(value).encode("utf-8"))
    assert all(chosen <= len(c.encode("utf-8")) for c in quote_candidates(value))
    assert encoded_length(value) == chosen - 2


def test_ascii_safe_escapes_non_ascii():
    assert quote("café", ascii_safe=True) == "'caf\\u00e9'"
    assert quote("\U0001F600", ascii_safe=True) == "'\\ud83d\\ude00'"
    assert quote("café") == "'café'"


def test_lone_surrogates_are_escaped_in_every_notation():
    for encoded in quote_candidates("a\udc80b"):
        assert "\\udc80" in encoded
        encoded.encode("utf-8")
    assert encoded_length("\ud800") == 6


def test_unescaped_interpolation_detection():
    assert has_unescaped_interpolation("a${b}")
    assert not has_unescaped_interpolation("a\\${b}")
    assert has_unescaped_interpolation("a\\\\${b}")
    assert not has_unescaped_interpolation("$ {b}")


@pytest.mark.parametrize("value, expected", [
    ("a}foo${b}bar", "foo${b}bar"),
    ("{ab}x", "x"),
    ("foo${b}bar${c", "foo${b}bar"),
    ("foo${", "foo"),
    ("foo$", "foo"),
    ("${a}foo", "${a}foo"),
    ("plain", "plain"),
])
def test_fix_interpolation_boundary(value, expected):
    assert fix_interpolation_boundary(value) == expected


def test_split_interpolations_only_known_identifiers():
    assert split_interpolations("x${a}y${q}", {"a"}) == [
        ("x", None),
        ("${a}", "a"),
        ("y${q}", None),
    ]


def test_unescape_template():
    assert unescape_template("\\`a\\${b}\\\\") == "`a${b}\\"
