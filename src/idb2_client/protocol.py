"""Line-protocol encoding.

Each point is rendered as one line::

    <measurement>,<tagkey>=<tagval>,...<space><fieldkey>=<fieldval>,...<space><timestamp>\\n

The separator comma after the measurement, and the comma after every tag
and every field, are always written, including after the last one.

Escaping inserts a single backslash before each special character:

    Element              Escaped characters
    measurement          , <space>
    tag key / value      , = <space>
    field key            , = <space>
    string field value   " \\
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from idb2_client.errors import require

if TYPE_CHECKING:
    from idb2_client.fields import FieldValue

MEASUREMENT_ESCAPES = frozenset(", ")
TAG_KEY_ESCAPES = frozenset(",= ")
TAG_VALUE_ESCAPES = frozenset(",= ")
FIELD_KEY_ESCAPES = frozenset(",= ")
STRING_VALUE_ESCAPES = frozenset('"\\')

# All-ones u64: "timestamp not set yet"
UNSET_TIMESTAMP = 2**64 - 1


def escape(text: str, chars: frozenset[str]) -> str:
    """Insert a backslash before every character of *text* found in *chars*."""
    return "".join("\\" + c if c in chars else c for c in text)


@dataclass(slots=True)
class Point:
    """One measurement write: name, tags, fields and a nanosecond timestamp."""

    measurement: str | None = None
    tags: list[tuple[str, str]] = field(default_factory=list)
    fields: list[tuple[str, FieldValue]] = field(default_factory=list)
    timestamp: int = UNSET_TIMESTAMP

    @property
    def has_measurement(self) -> bool:
        return self.measurement is not None

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp != UNSET_TIMESTAMP

    @property
    def is_empty(self) -> bool:
        """True for a point nothing has been written to yet."""
        return not (self.has_measurement or self.tags or self.fields or self.has_timestamp)

    def encode(self) -> str:
        return encode_point(self, stacklevel=2)


def encode_point(point: Point, *, stacklevel: int = 1) -> str:
    """Render *point* as a single newline-terminated line.

    *stacklevel* 1 reports precondition failures at the caller of this
    function; wrappers add one per frame they introduce.

    Raises:
        PreconditionError: measurement, fields or timestamp missing.
    """
    level = stacklevel + 1
    require(point.measurement is not None, "measurement is set", level)
    require(len(point.fields) > 0, "at least one field is set", level)
    require(point.timestamp != UNSET_TIMESTAMP, "timestamp is set", level)

    parts = [escape(point.measurement, MEASUREMENT_ESCAPES), ","]

    for key, value in point.tags:
        parts.append(f"{escape(key, TAG_KEY_ESCAPES)}={escape(value, TAG_VALUE_ESCAPES)},")

    parts.append(" ")

    for key, value in point.fields:
        parts.append(f"{escape(key, FIELD_KEY_ESCAPES)}={value.encode()},")

    parts.append(f" {point.timestamp:d}\n")
    return "".join(parts)


def encode_points(points: Iterable[Point], *, stacklevel: int = 1) -> str:
    """Concatenate the lines of *points* in order."""
    lines = []
    for p in points:
        lines.append(encode_point(p, stacklevel=stacklevel + 1))
    return "".join(lines)
