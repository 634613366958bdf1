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
"""Reading and writing BibTeX.

The reading functions run the whole pipeline: the text is tokenized,
parsed into items with normalized field values, and the macros are
resolved.  The writing functions produce BibTeX in standard form.

"""

import re
from collections.abc import Iterable, Iterator, Mapping
from typing import TextIO

from .inline import MONTHS, iterinline
from .lexer import DIGITS_RE, tokenize
from .model import Comment, Entry, Expression, Group, Item, Literal, MacroRef, Preamble, StringDef
from .parser import Parser


## READING #############################################################


def load(
    fp: TextIO,
    /,
    *,
    macros: Mapping[str, str | Expression] = MONTHS,
    warn_macros: bool = False,
) -> list[Item]:
    """Parse BibTeX from a text file object.

    The *macros* parameter provides the initial expansions of BibTeX
    macros, which default to the English month names.  Substitutions
    are carried out in file order, so that entries see exactly the
    ``@string`` definitions that precede them.  Undefined macros expand
    to empty text, and emit a warning if *warn_macros* is set.

    """

    data = fp.read()
    try:
        filename = fp.name
    except AttributeError:
        filename = "<stream>"
    return loads(data, filename, macros=macros, warn_macros=warn_macros)


def loads(
    data: str,
    filename: str | None = None,
    /,
    *,
    macros: Mapping[str, str | Expression] = MONTHS,
    warn_macros: bool = False,
) -> list[Item]:
    """Parse BibTeX from a string."""

    if filename is None:
        filename = "<string>"
    parser = Parser(tokenize(data), data, filename)
    items = iterinline(
        parser.iterparse(),
        macros,
        filename=filename,
        warn_macros=warn_macros,
    )
    return list(items)


## WRITING #############################################################


ESCAPE_RE = re.compile(r"([{}])")

# the white space that is trimmed next to braces when reading
WHITE = " \t\r\n"


def text(expr: Expression) -> str:
    """Return the plain text of an expression, without any braces."""
    parts = []
    for atom in expr:
        if isinstance(atom, Literal):
            parts.append(atom.text)
        elif isinstance(atom, Group):
            parts.append(text(atom.atoms))
        else:
            parts.append(atom.name)
    return "".join(parts)


def _braced(expr: Expression) -> str:
    parts = []
    for atom in expr:
        if isinstance(atom, Literal):
            parts.append(ESCAPE_RE.sub(r"\\\1", atom.text))
        elif isinstance(atom, Group):
            parts.append("{" + _braced(atom.atoms) + "}")
        else:
            parts.append(atom.name)
    return "".join(parts)


def _pieces(run: list[Literal | Group]) -> list[str]:
    """Braced text, with white space at either end written in quotes.

    Reading drops white space next to the outer braces of a value, but
    keeps it inside quotes.

    """
    head = tail = ""
    if run and isinstance(run[0], Literal):
        stripped = run[0].text.lstrip(WHITE)
        head = run[0].text[: len(run[0].text) - len(stripped)]
        run = [Literal(stripped), *run[1:]]
    if run and isinstance(run[-1], Literal):
        stripped = run[-1].text.rstrip(WHITE)
        tail = run[-1].text[len(stripped) :]
        run = [*run[:-1], Literal(stripped)]
    body = _braced(tuple(run))
    pieces = []
    if head:
        pieces.append(f'"{head}"')
    if body or not (head or tail):
        pieces.append("{" + body + "}")
    if tail:
        pieces.append(f'"{tail}"')
    return pieces


def format_value(expr: Expression) -> str:
    """Format a field value as BibTeX.

    Macro references are written bare, and concatenated to the braced
    text around them with ``#``.

    """

    if len(expr) == 1 and isinstance(expr[0], Literal) and DIGITS_RE.fullmatch(expr[0].text):
        return expr[0].text

    pieces: list[str] = []
    run: list[Literal | Group] = []
    for atom in expr:
        if isinstance(atom, MacroRef):
            if run:
                pieces += _pieces(run)
                run = []
            pieces.append(atom.name)
        else:
            run.append(atom)
    if run or not pieces:
        pieces += _pieces(run)
    return " # ".join(pieces)


def format_entry(entry: Entry) -> str:
    """Format entry in standard form.

    An entry without key is written with its first field in place of
    the key, which reads back the same way.

    """

    out = f"@{entry.entry_type}{{{entry.key}"
    if not entry.fields:
        out += "}"
    else:
        lines = [f"{field.name:>13} = {format_value(field.value)}" for field in entry.fields]
        out += ("," if entry.key else "") + "\n" + ",\n".join(lines) + "\n}"
    return out


def iterdump(items: Iterable[Item], /) -> Iterator[str]:
    """Yield formatted lines of BibTeX data."""

    for item in items:
        if isinstance(item, Entry):
            yield format_entry(item)
        elif isinstance(item, StringDef):
            for name, value in item.bindings:
                yield f"@string{{{name} = {format_value(value)}}}"
        elif isinstance(item, Preamble):
            yield f"@preamble{{{format_value(item.value)}}}"
        elif isinstance(item, Comment):
            # nothing to write
            continue
        yield ""


def dump(fp: TextIO, items: Iterable[Item], /) -> None:
    """Write formatted BibTeX data to a text file object."""

    for line in iterdump(items):
        fp.write(line + "\n")


def dumps(items: Iterable[Item], /) -> str:
    """Format BibTeX data as a string."""

    return "\n".join(iterdump(items))
