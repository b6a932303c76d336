"""Field value variants and their line-protocol renderings.

A field value is one of five variants:

    Variant       Python value            Rendered as
    StringField   str                     escaped text, no surrounding quotes
    UIntField     int, 0 <= v < 2**64     digits + "u"
    IntField      int, -2**63 <= v < 2**63  digits + "i"
    FloatField    float + printf format   fmt % value (default "%f")
    BoolField     bool                    "T" / "F"
"""

from __future__ import annotations

from dataclasses import dataclass

from idb2_client.errors import require
from idb2_client.protocol import STRING_VALUE_ESCAPES, escape

UINT64_MAX = 2**64 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

DEFAULT_FLOAT_FORMAT = "%f"


class FieldValue:
    """Base of the closed set of field value variants."""

    __slots__ = ()

    def encode(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class StringField(FieldValue):
    value: str

    def __post_init__(self) -> None:
        require(isinstance(self.value, str), "string field value is a str", stacklevel=3)

    def encode(self) -> str:
        return escape(self.value, STRING_VALUE_ESCAPES)


@dataclass(frozen=True, slots=True)
class UIntField(FieldValue):
    value: int

    def __post_init__(self) -> None:
        require(0 <= self.value <= UINT64_MAX, "unsigned field value fits in 64 bits", stacklevel=3)

    def encode(self) -> str:
        return f"{self.value:d}u"


@dataclass(frozen=True, slots=True)
class IntField(FieldValue):
    value: int

    def __post_init__(self) -> None:
        require(INT64_MIN <= self.value <= INT64_MAX, "signed field value fits in 64 bits", stacklevel=3)

    def encode(self) -> str:
        return f"{self.value:d}i"


@dataclass(frozen=True, slots=True)
class FloatField(FieldValue):
    value: float
    fmt: str = DEFAULT_FLOAT_FORMAT

    def encode(self) -> str:
        return self.fmt % self.value


@dataclass(frozen=True, slots=True)
class BoolField(FieldValue):
    value: bool

    def encode(self) -> str:
        return "T" if self.value else "F"


def field_value(value: object, fmt: str | None = None) -> FieldValue:
    """Map a plain Python value onto its field variant.

    ``int`` maps to the signed variant; use ``UIntField`` explicitly for
    unsigned values. *fmt* only applies to floats.
    """
    if isinstance(value, FieldValue):
        return value
    # bool is a subclass of int
    if isinstance(value, bool):
        return BoolField(value)
    if isinstance(value, int):
        return IntField(value)
    if isinstance(value, float):
        return FloatField(value, fmt or DEFAULT_FLOAT_FORMAT)
    if isinstance(value, str):
        return StringField(value)
    raise TypeError(f"unsupported field value type: {type(value).__name__}")
