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
"""Recursive-descent parser for BibTeX token streams.

The grammar, over the tokens produced by the lexer::

    document := item*
    item     := '@' Id '{' tag (',' tag)* [','] '}'
    tag      := key | Id '=' expr
    expr     := atom ('#' atom)*
    atom     := Id | Str | Space | '{' atom* '}'

Stray identifiers, numbers and commas between items are skipped.  Each
expression is normalized as soon as it has been parsed.

"""

import warnings
from typing import Iterable, Iterator

from .lexer import AT, COMMA, EOF, EQUALS, HASH, ID, LBRACE, RBRACE, SPACE, STR, Token
from .model import (
    Atom,
    BibtexError,
    BibtexWarning,
    Comment,
    Entry,
    Expression,
    Field,
    Group,
    Item,
    Literal,
    MacroRef,
    Preamble,
    StringDef,
    msg_with_context,
)
from .normalize import normalize


class Parser:
    """Parser instance for a stream of BibTeX tokens.

    The optional *data* is the source text of the tokens, which is only
    used to give context in error messages and warnings.

    """

    def __init__(
        self,
        tokens: Iterable[Token],
        data: str | None = None,
        filename: str | None = None,
    ) -> None:
        self.tokens = iter(tokens)
        self.data = data
        self.filename = filename or "<string>"
        # the current token, which is the only lookahead
        self.token = next(self.tokens, Token(EOF))

    def _advance(self) -> Token:
        """Consume the current token and return it."""
        token = self.token
        if token.kind != EOF:
            self.token = next(self.tokens, Token(EOF, "", token.pos))
        return token

    def _message(self, msg: str, token: Token) -> str:
        if self.data is None:
            return f"{msg} (offset {token.pos})"
        return msg_with_context(msg, self.data, None, token.pos + len(token.text))

    def _fail(self, expected: str, token: Token | None = None) -> BibtexError:
        """Return a BibTeX parsing error for an unexpected token."""
        if token is None:
            token = self.token
        if token.kind == EOF:
            msg = f"unexpected end of input, expected {expected}"
        else:
            msg = f"unexpected {token.kind} '{token.text}', expected {expected}"
        return BibtexError(self._message(msg, token))

    def _warn(self, msg: str, token: Token) -> None:
        """Emit a BibTeX parsing warning."""
        lineno = -1 if self.data is None else self.data.count("\n", 0, token.pos) + 1
        warnings.warn_explicit(
            self._message(msg, token),
            BibtexWarning,
            self.filename,
            lineno,
        )

    def _expect(self, kind: str, expected: str) -> Token:
        if self.token.kind != kind:
            raise self._fail(expected)
        return self._advance()

    def iterparse(self) -> Iterator[Item]:
        """Parse items until the end of the token stream."""
        while self.token.kind != EOF:
            if self.token.kind in (ID, STR, COMMA):
                self._advance()
            elif self.token.kind == AT:
                yield self._item()
            else:
                raise self._fail("@")

    def _item(self) -> Item:
        self._expect(AT, "@")
        typ = self._expect(ID, "entry type").text.lower()

        if typ == "comment":
            # the body is not parsed, and without braces, whatever
            # follows is treated like any other inter-entry noise
            if self.token.kind == LBRACE:
                self._skip_balanced()
            return Comment()

        self._expect(LBRACE, "{ after entry type")

        if typ == "preamble":
            value = self._expr()
            self._expect(RBRACE, "}")
            return Preamble(value)

        tags: list[tuple[Token, str, Expression | None]] = []
        while self.token.kind != RBRACE:
            tags.append(self._tag())
            if self.token.kind != RBRACE:
                self._expect(COMMA, ", or }")
        self._advance()

        if typ == "string":
            bindings = []
            for token, name, value in tags:
                if value is None:
                    raise self._fail("=", token)
                bindings.append((name, value))
            return StringDef(tuple(bindings))

        key = ""
        fields = []
        for i, (token, name, value) in enumerate(tags):
            if value is not None:
                fields.append(Field(name, value))
            elif i == 0:
                key = name
            else:
                self._warn(f"ignoring key `{name}' in entry `{key}'", token)
        return Entry(typ, key, tuple(fields))

    def _tag(self) -> tuple[Token, str, Expression | None]:
        """Parse a field, or a key if there is no value."""
        words: list[Token] = []
        while self.token.kind in (ID, STR):
            words.append(self._advance())
        if not words:
            raise self._fail("field name")
        if self.token.kind != EQUALS:
            # citation keys are case-sensitive and may start with digits
            key = "".join(word.text for word in words)
            for prev, word in zip(words, words[1:]):
                if prev.pos + len(prev.text) != word.pos:
                    self._warn(f"white space removed from key `{key}'", word)
                    break
            return words[0], key, None
        if words[0].kind != ID:
            raise self._fail("field name", words[0])
        if len(words) > 1:
            raise self._fail("=", words[1])
        self._advance()
        return words[0], words[0].text.lower(), self._expr()

    def _expr(self) -> Expression:
        atoms = [self._atom()]
        while self.token.kind == HASH:
            self._advance()
            atoms.append(self._atom())
        return normalize(tuple(atoms))

    def _atom(self) -> Atom:
        kind = self.token.kind
        if kind == ID:
            return MacroRef(self._advance().text.lower())
        if kind in (STR, SPACE):
            return Literal(self._advance().text)
        if kind == LBRACE:
            self._advance()
            atoms = []
            while self.token.kind != RBRACE:
                if self.token.kind == EOF:
                    raise self._fail("}")
                atoms.append(self._atom())
            self._advance()
            return Group(tuple(atoms))
        raise self._fail("string, number, or macro name")

    def _skip_balanced(self) -> None:
        """Skip a brace-balanced run of tokens."""
        self._expect(LBRACE, "{")
        level = 1
        while level > 0:
            token = self._advance()
            if token.kind == EOF:
                raise self._fail("}", token)
            elif token.kind == LBRACE:
                level += 1
            elif token.kind == RBRACE:
                level -= 1


def parse(
    tokens: Iterable[Token],
    data: str | None = None,
    filename: str | None = None,
) -> list[Item]:
    """Parse a token stream into a list of items."""
    return list(Parser(tokens, data, filename).iterparse())
