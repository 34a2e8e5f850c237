"""Identifier case conversion shared by every emitter.

All four conventions are derived from one token sequence produced by
:func:`split_words`, so a table shown as ``InvoiceLine`` in the UI, declared
as ``invoiceLine`` in TypeScript, routed at ``/invoice-line`` and stored as
``invoice_line`` is recognisably the same entity.  Each conversion is a fixed
point of itself::

    to_snake_case("Invoice Line")   -> "invoice_line"
    to_snake_case("invoice_line")   -> "invoice_line"
    to_pascal_case("invoice-line")  -> "InvoiceLine"
    to_camel_case("HTTPServer")     -> "httpServer"
"""

from __future__ import annotations

import re
from typing import NamedTuple

FALLBACK_WORD = "unnamed"
DIGIT_PREFIX = "n"

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def split_words(name: str) -> list[str]:
    """Split a human-entered name into lower-case word tokens.

    Words are separated by any run of non-alphanumeric characters, by a
    lower-case letter or digit followed by an upper-case letter, and by the
    end of an acronym (``HTTPServer`` -> ``http``, ``server``).  Tokens are
    then merged wherever PascalCase could not keep them apart:

    * a token that starts with a digit is glued onto the previous token
      (``address line 2`` -> ``address``, ``line2``);
    * a single-letter token absorbs a following token that is a single
      letter or a letter plus digits (``x y coordinate`` -> ``xy``,
      ``coordinate``), since ``XY`` reads back as one word.

    When the first token starts with a digit it is prefixed with
    ``DIGIT_PREFIX`` so every convention is a valid identifier
    (``3d model`` -> ``n3d``, ``model``).

    A name without any alphanumeric characters yields ``[FALLBACK_WORD]``.
    """
    spaced = _ACRONYM_BOUNDARY.sub(r"\1 \2", name)
    spaced = _CASE_BOUNDARY.sub(r"\1 \2", spaced)

    words: list[str] = []
    for raw in _SEPARATORS.split(spaced):
        if not raw:
            continue
        word = raw.lower()
        if not words:
            words.append(DIGIT_PREFIX + word if word[0].isdigit() else word)
        elif word[0].isdigit():
            words[-1] += word
        elif len(words[-1]) == 1 and (len(word) == 1 or word[1].isdigit()):
            words[-1] += word
        else:
            words.append(word)
    return words or [FALLBACK_WORD]


def to_pascal_case(name: str) -> str:
    """``"invoice line"`` -> ``"InvoiceLine"``."""
    return "".join(word.capitalize() for word in split_words(name))


def to_camel_case(name: str) -> str:
    """``"invoice line"`` -> ``"invoiceLine"``."""
    first, *rest = split_words(name)
    return first + "".join(word.capitalize() for word in rest)


def to_kebab_case(name: str) -> str:
    """``"Invoice Line"`` -> ``"invoice-line"``."""
    return "-".join(split_words(name))


def to_snake_case(name: str) -> str:
    """``"InvoiceLine"`` -> ``"invoice_line"``."""
    return "_".join(split_words(name))


def to_label(name: str) -> str:
    """Human-readable label, e.g. ``"due_date"`` -> ``"Due Date"``."""
    return " ".join(word.capitalize() for word in split_words(name))


class Identifiers(NamedTuple):
    """The four case conventions of a single name."""

    pascal: str
    camel: str
    kebab: str
    snake: str


def identifiers(name: str) -> Identifiers:
    """Return every case convention of *name* in one call."""
    return Identifiers(
        pascal=to_pascal_case(name),
        camel=to_camel_case(name),
        kebab=to_kebab_case(name),
        snake=to_snake_case(name),
    )
