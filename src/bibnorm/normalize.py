"""Structural normalization of field values."""

from .model import Atom, Expression, Group, Literal


def flatten(atoms: Expression) -> Expression:
    """Splice the contents of top-level groups into the expression.

    The outermost braces or quotes of a value only delimit it, so
    ``{x}`` and ``"x"`` both become ``x``.  Groups nested deeper are
    kept, since they protect their contents.

    """
    out: list[Atom] = []
    for atom in atoms:
        if isinstance(atom, Group):
            out.extend(atom.atoms)
        else:
            out.append(atom)
    return tuple(out)


def merge(atoms: Expression) -> Expression:
    """Merge adjacent literals, at every level of nesting."""
    out: list[Atom] = []
    for atom in atoms:
        if isinstance(atom, Group):
            atom = Group(merge(atom.atoms))
        elif isinstance(atom, Literal) and out and isinstance(out[-1], Literal):
            atom = Literal(out.pop().text + atom.text)
        out.append(atom)
    return tuple(out)


def normalize(atoms: Expression) -> Expression:
    """Normalize a parsed expression: flatten, then merge."""
    return merge(flatten(atoms))
