"""Style property samples and comparison results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for integral values."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class PropertyOrigin(Enum):
    """Where a property value was read from."""

    IMPLEMENTATION = "implementation"
    REFERENCE = "reference"


class ValueClass(Enum):
    """Which comparison rule decided a result."""

    EMPTY = "empty"
    EXACT = "exact"
    COLOR = "color"
    NUMERIC = "numeric"
    FONT_FAMILY = "font_family"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ColorComponents:
    """RGBA color with 0-255 channels and a 0-1 alpha."""

    r: int
    g: int
    b: int
    a: float = 1.0

    def to_css(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {format_number(self.a)})"

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_dict(self) -> dict[str, float]:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}


@dataclass(frozen=True)
class PropertySample:
    """A single style property value from one side of a comparison."""

    name: str
    raw_value: str
    origin: PropertyOrigin
    color_components: ColorComponents | None = None


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing two raw property values.

    Attributes:
        is_match: Whether the values are considered equivalent
        normalized_left: Canonical form of the left value
        normalized_right: Canonical form of the right value
        confidence: 0.0 to 1.0, how sure the matching rule is
        value_class: Rule that produced the result
    """

    is_match: bool
    normalized_left: str
    normalized_right: str
    confidence: float
    value_class: ValueClass = ValueClass.UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_match": self.is_match,
            "normalized_left": self.normalized_left,
            "normalized_right": self.normalized_right,
            "confidence": self.confidence,
            "value_class": self.value_class.value,
        }


@dataclass(frozen=True)
class PropertyComparison:
    """A named property compared across implementation and reference."""

    name: str
    implementation: str
    reference: str
    result: ComparisonResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "implementation": self.implementation,
            "reference": self.reference,
            **self.result.to_dict(),
        }
