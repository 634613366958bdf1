# bibnorm -- parser for BibTeX files, derived from tidybib and biblib
#
# Copyright (c) 2023 Nicolas Tessore
# Copyright (c) 2013 Austin Clements
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.
#
"""Document model for parsed BibTeX.

Field values are *expressions*: tuples of atoms, where an atom is a
literal piece of text, a reference to a macro, or a brace-protected
group of further atoms.  Parsing produces a list of items (entries,
string definitions, preambles and comments), which the macro inliner
turns into a list without string definitions and without macro
references at the top level of any value.

"""

from dataclasses import dataclass
from typing import NamedTuple, TypeAlias


class BibtexError(ValueError):
    """Exception raised for BibTeX parsing errors."""


class BibtexWarning(Warning):
    """Warning category for BibTeX parsing."""


## ATOMS ###############################################################


@dataclass(frozen=True)
class Literal:
    """Literal text."""

    text: str


@dataclass(frozen=True)
class MacroRef:
    """Reference to a macro, by lowercase name."""

    name: str


@dataclass(frozen=True)
class Group:
    """Brace-protected span of atoms, such as ``{US}``."""

    atoms: tuple["Atom", ...] = ()


Atom: TypeAlias = Literal | MacroRef | Group

#: A field value, with ``#`` concatenation already linearised.
Expression: TypeAlias = tuple[Atom, ...]


## ITEMS ###############################################################


class Field(NamedTuple):
    """Named field of an entry."""

    name: str
    value: Expression


class Entry(NamedTuple):
    """Container for BibTeX entries."""

    entry_type: str
    key: str
    fields: tuple[Field, ...] = ()


class StringDef(NamedTuple):
    """Container for BibTeX string commands."""

    bindings: tuple[tuple[str, Expression], ...]


class Preamble(NamedTuple):
    """Container for BibTeX preamble commands."""

    value: Expression


class Comment(NamedTuple):
    """Container for BibTeX comment commands.

    This is always empty, since the body of a comment is not parsed.

    """


#: Type alias for the possible content types in a BibTeX file.
Item: TypeAlias = Entry | StringDef | Preamble | Comment


def msg_with_context(
    msg: str,
    data: str,
    start: int | None,
    stop: int,
    context: int = 10,
) -> str:
    """Add parsing context and line number to an error or warning message."""
    stop = min(stop, len(data))
    lineno = data.count("\n", 0, stop) + 1
    if start is None:
        start = stop
        while start > 0 and stop - start < context:
            start -= 1
            if data[start] == "\n":
                start += 1
                break
    if start == stop:
        while stop < len(data) and stop - start < context:
            stop += 1
            if data[stop : stop + 1] == "\n":
                break
    if stop > start:
        msg = f"{msg}: {data[start : stop]}"
    return f"{msg} (line {lineno})"
