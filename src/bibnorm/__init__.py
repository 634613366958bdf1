import argparse
import sys
import warnings
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TextIO

from . import biblib, formats, inputfiles
from .inline import MONTHS
from .model import BibtexError, BibtexWarning

FORMATS = {
    "bib": biblib.dumps,
    "json": formats.to_json,
    "xml": formats.to_xml,
}


@contextmanager
def handle_warnings() -> Iterator[None]:
    """Custom handler for warnings."""

    def showwarning(
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        parts = ["[WARNING]"]
        if filename and filename[0] + filename[-1] != "<>":
            parts += [f"{filename}:"]
        parts += [str(message)]
        print(*parts, file=file or sys.stderr)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        warnings.simplefilter("always", BibtexWarning)
        warnings.showwarning = showwarning
        yield


def parser() -> argparse.ArgumentParser:
    """Return the command line parser."""
    ap = argparse.ArgumentParser(
        prog="bibnorm",
        description="Parse and normalize BibTeX files.",
    )
    ap.add_argument("files", nargs="*", help="input files (default: stdin)")
    ap.add_argument(
        "-f",
        "--format",
        choices=sorted(FORMATS),
        default="bib",
        help="output format (default: bib)",
    )
    ap.add_argument(
        "--no-months",
        action="store_true",
        help="do not predefine the month macros",
    )
    ap.add_argument(
        "-W",
        "--warn-macros",
        action="store_true",
        help="warn about undefined and redefined macros",
    )
    return ap


@handle_warnings()
def main(argv: Sequence[str] | None = None) -> int:
    args = parser().parse_args(argv)
    macros = {} if args.no_months else MONTHS
    write = FORMATS[args.format]

    # iterate all input files or stdin
    for file in inputfiles.files(args.files):
        try:
            items = biblib.load(file, macros=macros, warn_macros=args.warn_macros)
        except BibtexError as exc:
            print("[ERROR]", f"{file.name}:", exc, file=sys.stderr)
            return 1

        # output in the requested format to stdout
        print(write(items))

    # all done
    return 0


if __name__ == "__main__":
    sys.exit(main())
