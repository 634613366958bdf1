"""Like fileinput, but for files, not lines."""

import io
import os
import sys
from typing import Iterable, Iterator, TextIO


def files(
    files: str | os.PathLike[str] | Iterable[str] | None = None,
    *,
    encoding: str | None = None,
    errors: str | None = None,
) -> Iterator[TextIO]:
    """Return an iterator over open input files.

    If *files* is not given, the names are taken from the command line.
    The name ``-``, or an empty list of names, stands for stdin.  Each
    file is closed when the iteration moves on.

    """

    _files: tuple[str, ...]
    if isinstance(files, str):
        _files = (files,)
    elif isinstance(files, os.PathLike):
        _files = (os.fspath(files),)
    else:
        if files is None:
            files = sys.argv[1:]
        _files = tuple(files) or ("-",)

    encoding = io.text_encoding(encoding)

    for filename in _files:
        if filename == "-":
            yield sys.stdin
            continue
        with open(filename, encoding=encoding, errors=errors) as file:
            yield file
