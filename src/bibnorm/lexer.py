"""Context-sensitive tokenizer for BibTeX.

The meaning of a character depends on how deeply the reader is nested
in braces, and on whether it is inside a quoted value.  At depth 0 and 1
(between entries, and inside an entry body) characters are structural:
``@``, ``=``, ``#``, ``,`` are punctuation, words are identifiers and
white space is dropped.  Inside a field value (depth 2 and more, or
inside quotes) everything is text, including white space.

Quotes are turned into braces: an opening quote at depth 1 is reported
as ``{`` and the matching closing quote as ``}``, so the parser never
sees the difference between ``"..."`` and ``{...}`` values.

"""

import re
from typing import Iterator, NamedTuple

from .model import BibtexError, msg_with_context

## TOKENS ##############################################################

AT = "At"
LBRACE = "LBrace"
RBRACE = "RBrace"
HASH = "Hash"
COMMA = "Comma"
EQUALS = "Equals"
ID = "Id"
STR = "Str"
SPACE = "Space"
EOF = "Eof"

# punctuation that is structural outside of text
PUNCTUATION = {
    "@": AT,
    "#": HASH,
    "=": EQUALS,
    ",": COMMA,
}

# BibTeX only considers space, tab, and newline to be white space (see
# lex_class), so other Unicode spaces are identifier or text characters
SPACE_RE = re.compile("[ \t\r\n]+")
DIGITS_RE = re.compile("[0-9]+")
ID_RE = re.compile('[^ \t\r\n{}@#=,"\\\\]+')


class Token(NamedTuple):
    """A token with its kind, text, and offset in the input."""

    kind: str
    text: str = ""
    pos: int = 0


class LexState(NamedTuple):
    """Brace nesting depth and quote state of the lexer."""

    nesting: int = 0
    in_quotes: bool = False

    @property
    def is_text(self) -> bool:
        """True if characters are read as text rather than structure."""
        return self.in_quotes or self.nesting >= 2

    @property
    def trims_space(self) -> bool:
        """True if white space next to the braces at this depth is dropped.

        This holds for the braces of an entry body and the outermost
        braces of a field value.
        """
        return not self.in_quotes and self.nesting <= 2


def _fail(msg: str, data: str, off: int) -> BibtexError:
    return BibtexError(msg_with_context(msg, data, None, off + 1))


def next_token(state: LexState, data: str, off: int) -> tuple[Token, LexState, int]:
    """Read the next token of *data* at offset *off*.

    Returns the token, the lexer state after the token, and the offset
    of the following character.  At the end of input, an ``Eof`` token
    is returned and the offset does not advance.

    """

    while True:
        if off >= len(data):
            return Token(EOF, "", off), state, off

        if m := SPACE_RE.match(data, off):
            end = m.end()
            # space before a closing brace that trims it is dropped too
            if not state.is_text or (data.startswith("}", end) and state.trims_space):
                off = end
                continue
            return Token(SPACE, m.group(0), off), state, end

        char = data[off]

        if char == "{":
            end = off + 1
            if state.nesting <= 1 and not state.in_quotes:
                if m := SPACE_RE.match(data, end):
                    end = m.end()
            return Token(LBRACE, char, off), state._replace(nesting=state.nesting + 1), end

        if char == "}":
            if state.nesting == 0:
                raise _fail("unexpected }", data, off)
            return Token(RBRACE, char, off), state._replace(nesting=state.nesting - 1), off + 1

        if char == '"':
            if state.in_quotes:
                if state.nesting == 0:
                    raise _fail('unexpected "', data, off)
                return Token(RBRACE, char, off), LexState(state.nesting - 1, False), off + 1
            if state.nesting == 1:
                return Token(LBRACE, char, off), LexState(2, True), off + 1
            if state.nesting >= 2:
                return Token(STR, char, off), state, off + 1
            raise _fail('unexpected "', data, off)

        if char == "\\":
            escaped = data[off + 1 : off + 2]
            if escaped in ("{", "}"):
                return Token(STR, escaped, off), state, off + 2
            return Token(STR, char, off), state, off + 1

        if char in PUNCTUATION:
            if state.is_text:
                return Token(STR, char, off), state, off + 1
            return Token(PUNCTUATION[char], char, off), state, off + 1

        # numbers are never identifiers, so cannot be macros
        if m := DIGITS_RE.match(data, off):
            return Token(STR, m.group(0), off), state, m.end()

        if m := ID_RE.match(data, off):
            kind = STR if state.is_text else ID
            return Token(kind, m.group(0), off), state, m.end()

        raise _fail(f"unexpected {char!r}", data, off)


class Lexer:
    """Single-pass iterator over the tokens of a BibTeX string.

    The last token is always ``Eof``, after which the iteration stops.
    The current lexer state is available as the *state* attribute.

    """

    def __init__(self, data: str) -> None:
        self.data = data
        self.off = 0
        self.state = LexState()
        self.done = False

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self.done:
            raise StopIteration
        token, self.state, self.off = next_token(self.state, self.data, self.off)
        if token.kind == EOF:
            self.done = True
        return token


def tokenize(data: str) -> Lexer:
    """Return a lazy token iterator for *data*, terminated by ``Eof``."""
    return Lexer(data)
