"""Shared machinery for the tag dialect extractors."""

from __future__ import annotations

import abc
import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from tagnorm.numbers import parse_leading_int, parse_number_pair
from tagnorm.record import RecordBuilder

POSITION_FIELDS: dict[str, tuple[str, str]] = {
    "track": ("track_number", "total_tracks"),
    "disc": ("disc_number", "total_discs"),
}


class ValueKind(enum.Enum):
    """How a raw tag string is interpreted for its canonical field."""

    TEXT = "text"
    TEXT_ONCE = "text_once"
    POSITION = "position"
    INTEGER = "integer"
    FLAG = "flag"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldRule:
    """A canonical field and the tag keys it is read from, in precedence order."""

    field: str
    keys: tuple[str, ...]
    kind: ValueKind = ValueKind.TEXT


def _is_true(text: str) -> bool:
    return text == "1" or text.upper() == "TRUE"


def apply_value(builder: RecordBuilder, field: str, kind: ValueKind, text: str) -> None:
    """Interpret *text* according to *kind* and store it in *builder*."""
    if kind is ValueKind.TEXT:
        builder.set_text(field, text)
    elif kind is ValueKind.TEXT_ONCE:
        builder.set_text_once(field, text)
    elif kind is ValueKind.POSITION:
        number_field, total_field = POSITION_FIELDS[field]
        number, total = parse_number_pair(text)
        builder.set_count(number_field, number)
        builder.set_count(total_field, total)
    elif kind is ValueKind.INTEGER:
        builder.set_count(field, parse_leading_int(text))
    elif kind is ValueKind.FLAG:
        builder.set_flag(field, text == "1")
    elif kind is ValueKind.BOOLEAN:
        builder.set_flag(field, _is_true(text))
    else:
        raise ValueError(f"Unhandled value kind: {kind}")


def apply_rules(
    builder: RecordBuilder,
    rules: tuple[FieldRule, ...],
    get: Callable[[str], str | None],
) -> None:
    """Resolve each rule through the first of its keys that *get* finds."""
    for rule in rules:
        for key in rule.keys:
            text = get(key)
            if text is not None:
                apply_value(builder, rule.field, rule.kind, text)
                break


class DialectExtractor(abc.ABC):
    """Layers dialect-specific fields of an open container onto a record."""

    @abc.abstractmethod
    def extract(self, audio: Any, builder: RecordBuilder) -> None:
        """Extract from *audio*, an opened mutagen file object."""
        raise NotImplementedError


def first_of(mapping: Mapping[str, list[str]], key: str) -> str | None:
    """Return the first value stored under *key* in a str -> list mapping."""
    values = mapping.get(key)
    if not values:
        return None
    return values[0]
