from bibnorm.model import Group, Literal, MacroRef
from bibnorm.normalize import flatten, merge, normalize


def test_flatten_only_top_level():
    atoms = (Group((Literal("a"), Group((Literal("b"),)))), Literal("c"))
    assert flatten(atoms) == (Literal("a"), Group((Literal("b"),)), Literal("c"))


def test_merge_adjacent_literals():
    assert merge((Literal("A"), Literal("B"))) == (Literal("AB"),)
    assert merge((Literal("A"), MacroRef("x"), Literal("B"), Literal("C"))) == (
        Literal("A"),
        MacroRef("x"),
        Literal("BC"),
    )


def test_merge_does_not_cross_groups():
    atoms = (Literal("a"), Group((Literal("b"),)), Literal("c"))
    assert merge(atoms) == atoms


def test_merge_inside_groups():
    atoms = (Group((Literal("U"), Literal("S"), Group((Literal("x"), Literal("y"))))),)
    assert merge(atoms) == (Group((Literal("US"), Group((Literal("xy"),)))),)


def test_singleton_group_is_kept():
    assert normalize((Group((Group((Literal("a"), Literal("b"))),)),)) == (
        Group((Literal("ab"),)),
    )


def test_flatten_before_merge():
    atoms = (Group((Literal("The"), Literal(" "))), Group((Literal("End"),)))
    assert normalize(atoms) == (Literal("The End"),)
    assert flatten(merge(atoms)) == (Literal("The "), Literal("End"))


def test_empty():
    assert normalize(()) == ()
    assert normalize((Group(),)) == ()
