"""Expansion of macro references.

Items are processed in file order with a single macro environment:
``@string`` definitions extend it as they are encountered, and entries
are resolved against the definitions that precede them.  Macros bind
to their expanded value at the point of definition.

"""

import warnings
from collections.abc import Iterable, Iterator, Mapping

from .model import (
    BibtexWarning,
    Comment,
    Entry,
    Expression,
    Field,
    Item,
    Literal,
    MacroRef,
    Preamble,
    StringDef,
)

# default macros:
# - turn month abbreviations into month names
MONTHS = {
    "jan": "January",
    "feb": "February",
    "mar": "March",
    "apr": "April",
    "may": "May",
    "jun": "June",
    "jul": "July",
    "aug": "August",
    "sep": "September",
    "oct": "October",
    "nov": "November",
    "dec": "December",
}


def environment(macros: Mapping[str, str | Expression]) -> dict[str, Expression]:
    """Create a macro environment from a mapping of names to values.

    Values can be plain strings or expressions.

    """
    env: dict[str, Expression] = {}
    for name, value in macros.items():
        if isinstance(value, str):
            value = (Literal(value),)
        env[name.lower()] = tuple(value)
    return env


def resolve(
    expr: Expression,
    env: Mapping[str, Expression],
    filename: str | None = None,
    warn_macros: bool = False,
) -> Expression:
    """Replace the top-level macro references in *expr*.

    Unknown macros expand to empty text.  Groups are returned as they
    are, and adjacent literals are not merged.

    """
    out = []
    for atom in expr:
        if isinstance(atom, MacroRef):
            try:
                out.extend(env[atom.name])
            except KeyError:
                if warn_macros:
                    _warn(f"unknown macro `{atom.name}'", filename)
                out.append(Literal(""))
        else:
            out.append(atom)
    return tuple(out)


def _warn(msg: str, filename: str | None) -> None:
    warnings.warn_explicit(msg, BibtexWarning, filename or "<string>", -1)


def iterinline(
    items: Iterable[Item],
    macros: Mapping[str, str | Expression] = MONTHS,
    *,
    filename: str | None = None,
    warn_macros: bool = False,
) -> Iterator[Item]:
    """Resolve macros in *items*, and drop the string definitions.

    The *macros* parameter is the initial macro environment, which
    defaults to the English month names.  Undefined and redefined
    macros emit a warning if *warn_macros* is set.

    """

    # mutable environment that is updated with @string definitions
    env = environment(macros)

    for item in items:
        if isinstance(item, StringDef):
            for name, value in item.bindings:
                value = resolve(value, env, filename, warn_macros)
                if warn_macros and name in env:
                    _warn(f"string `{name}' redefined", filename)
                env[name] = value
        elif isinstance(item, Entry):
            fields = tuple(
                Field(field.name, resolve(field.value, env, filename, warn_macros))
                for field in item.fields
            )
            yield item._replace(fields=fields)
        elif isinstance(item, Preamble):
            yield Preamble(resolve(item.value, env, filename, warn_macros))
        elif isinstance(item, Comment):
            yield item
        else:
            raise TypeError(f"not a BibTeX item: {item!r}")


def inline(
    items: Iterable[Item],
    macros: Mapping[str, str | Expression] = MONTHS,
    *,
    filename: str | None = None,
    warn_macros: bool = False,
) -> list[Item]:
    """Resolve macros in *items*, returning a new list."""
    return list(iterinline(items, macros, filename=filename, warn_macros=warn_macros))
