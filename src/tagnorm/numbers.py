"""Parsing of 'N/M' style track and disc positions."""

from __future__ import annotations

import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_leading_int(text: str | None) -> int:
    """Parse the leading integer of a string, like C's atoi.

    Leading whitespace and a sign are accepted, trailing garbage is ignored.
    Anything without leading digits parses to 0.
    """
    if not text:
        return 0
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return int(match.group(1))


def parse_number_pair(text: str | None) -> tuple[int, int]:
    """Parse a position like '3/12' into (number, total).

    '5' gives (5, 0), '/12' gives (0, 12) and '' gives (0, 0). Never raises.
    """
    if not text:
        return 0, 0
    number, sep, total = text.partition("/")
    if not sep:
        return parse_leading_int(text), 0
    return parse_leading_int(number), parse_leading_int(total)
