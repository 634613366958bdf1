import pytest

from bibnorm.inline import MONTHS, environment, inline, iterinline, resolve
from bibnorm.lexer import tokenize
from bibnorm.model import (
    BibtexWarning,
    Comment,
    Entry,
    Field,
    Group,
    Literal,
    MacroRef,
    Preamble,
    StringDef,
)
from bibnorm.parser import parse


def run(data, **kwargs):
    return inline(parse(tokenize(data), data), **kwargs)


def values(data, **kwargs):
    """Resolved values of the entries' fields."""
    return [dict(entry.fields) for entry in run(data, **kwargs)]


def test_default_month():
    assert values("@misc{k, month = jan}") == [{"month": (Literal("January"),)}]
    assert len(MONTHS) == 12
    assert MONTHS["dec"] == "December"


def test_macros_bind_at_definition():
    data = """
    @string{a = "X"}
    @string{b = a}
    @misc{k1, f = b, g = a}
    @string{a = "Y"}
    @misc{k2, f = b, g = a}
    """
    assert values(data) == [
        {"f": (Literal("X"),), "g": (Literal("X"),)},
        {"f": (Literal("X"),), "g": (Literal("Y"),)},
    ]


def test_bindings_in_one_string_command():
    data = '@string{a = "x", b = a # "y"}\n@misc{k, f = b}'
    assert values(data) == [{"f": (Literal("x"), Literal("y"))}]


def test_unknown_macro_is_empty():
    assert values("@misc{k, f = nosuch}") == [{"f": (Literal(""),)}]


def test_unknown_macro_warning():
    with pytest.warns(BibtexWarning, match="unknown macro `nosuch'"):
        values("@misc{k, f = nosuch}", warn_macros=True)


def test_redefined_macro_warning():
    with pytest.warns(BibtexWarning, match="string `jan' redefined"):
        values('@string{jan = "1"}', warn_macros=True)


def test_entries_before_definition():
    data = '@misc{k, f = acm}\n@string{acm = "ACM"}\n@misc{l, f = ACM}'
    assert values(data) == [{"f": (Literal(""),)}, {"f": (Literal("ACM"),)}]


def test_substitution_is_not_merged():
    assert values('@misc{k, f = "In " # jan}') == [{"f": (Literal("In "), Literal("January"))}]


def test_groups_are_not_resolved():
    expr = (Group((MacroRef("jan"),)), MacroRef("jan"))
    assert resolve(expr, environment(MONTHS)) == (
        Group((MacroRef("jan"),)),
        Literal("January"),
    )


def test_custom_environment():
    assert values("@misc{k, month = jan}", macros={"JAN": "01"}) == [{"month": (Literal("01"),)}]
    assert values("@misc{k, month = jan}", macros={}) == [{"month": (Literal(""),)}]


def test_expression_values_in_environment():
    env = environment({"x": (Literal("a"), Group((Literal("B"),)))})
    assert resolve((MacroRef("x"),), env) == (Literal("a"), Group((Literal("B"),)))


def test_output_items():
    items = [
        StringDef((("foo", (Literal("bar"),)),)),
        Comment(),
        Preamble((MacroRef("foo"),)),
        Entry("misc", "k", (Field("f", (MacroRef("foo"),)),)),
    ]
    assert inline(items) == [
        Comment(),
        Preamble((Literal("bar"),)),
        Entry("misc", "k", (Field("f", (Literal("bar"),)),)),
    ]
    # the input is not changed
    assert items[3].fields[0].value == (MacroRef("foo"),)


def test_not_an_item():
    with pytest.raises(TypeError):
        list(iterinline([("misc", "k")]))
