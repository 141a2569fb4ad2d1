"""
oscript_price.aggregate — average decimal price quotations given as strings.

Each input looks like ``"<int>"`` or ``"<int>.<frac>"``. The integer parts
and the fractional parts (normalized to two digits) are summed separately and
each sum is divided by the number of inputs, truncating toward zero:

    aggregate(["10.5", "20.3"])
      integer_sum    = 10 + 20 = 30       -> 30 // 2 = 15
      fractional_sum = 50 + 30 = 80       -> 80 // 2 = 40
      -> "15.40"

Normalization of the fractional part:
  - absent              -> 0
  - shorter than 2      -> right-padded with "0"  ("5"   -> "50")
  - longer than 2       -> truncated, not rounded ("999" -> "99")

The two parts are averaged independently, so the result is not the true mean
when fractional parts carry into the integer part. Output keeps this shape and
does not zero-pad the fractional part: ``aggregate(["1.05"]) == "1.5"``.

Components parse like 32-bit signed integers: an optional sign followed by
ASCII digits, nothing else. Any malformed entry aborts the whole call with
ParseError; an empty input raises EmptyInput.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .errors import EmptyInput, ParseError
from .logging import get_logger

log = get_logger(__name__)

FRACTION_DIGITS = 2
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _parse_int(text: str, *, index: int, part: str, source: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ParseError(
            f"invalid {part} part {text!r} in result #{index}",
            context={"index": index, "input": source, "part": part},
        )
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ParseError(
            f"{part} part out of range in result #{index}",
            context={"index": index, "input": source, "part": part},
        )
    return value


def _normalize_fraction(fraction: str) -> str:
    if len(fraction) < FRACTION_DIGITS:
        return fraction + "0"
    return fraction[:FRACTION_DIGITS]


def _div_trunc(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


@dataclass(frozen=True)
class Quote:
    """One parsed input: integer part and two-digit fractional part."""

    integer: int
    fraction: int


def parse_quote(text: str, index: int = 0) -> Quote:
    """
    Split `text` on "." and parse both parts. Pieces after a second "." are
    ignored ("1.2.3" parses like "1.2").
    """
    if not isinstance(text, str):
        raise ParseError(f"result #{index} is not a string", context={"index": index})
    pieces = text.split(".")
    integer = _parse_int(pieces[0], index=index, part="integer", source=text)
    fraction = 0
    if len(pieces) > 1:
        fraction = _parse_int(_normalize_fraction(pieces[1]), index=index, part="fractional", source=text)
    return Quote(integer=integer, fraction=fraction)


@dataclass
class Accumulator:
    integer_sum: int = 0
    fractional_sum: int = 0
    count: int = 0

    def add(self, quote: Quote) -> None:
        self.integer_sum += quote.integer
        self.fractional_sum += quote.fraction
        self.count += 1

    def result(self) -> str:
        if self.count == 0:
            raise EmptyInput()
        integer = _div_trunc(self.integer_sum, self.count)
        fraction = _div_trunc(self.fractional_sum, self.count)
        return f"{integer}.{fraction}"


def aggregate(results: Iterable[str]) -> str:
    """Average `results` into one decimal string (see module docstring)."""
    acc = Accumulator()
    try:
        for index, text in enumerate(results):
            acc.add(parse_quote(text, index))
        out = acc.result()
    except (ParseError, EmptyInput) as e:
        log.debug("aggregate_failed", code=e.code, count=acc.count)
        raise
    log.debug("aggregate_computed", count=acc.count, result=out)
    return out


__all__ = ["Quote", "Accumulator", "parse_quote", "aggregate", "FRACTION_DIGITS"]
