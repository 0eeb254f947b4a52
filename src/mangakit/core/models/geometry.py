"""
Module: geometry

Purpose:
    Rectangle, margin and point value types shared by every stage of the
    engine. Two coordinate spaces exist side by side:

    - NormalizedRect: fractions in [0, 1] of a parent rectangle
      (the page safe area for panels, the panel box for bubbles)
    - PixelRect: absolute pixel coordinates on the page

Key Classes:
    - NormalizedRect: Resolution-independent rectangle
    - PixelRect: Absolute rectangle in pixels
    - Margins: Pixel insets (top, right, bottom, left)
    - Point: Absolute pixel point

Dependencies:
    - dataclasses (std)

Used By:
    - layout.transform: Coordinate conversion
    - layout.page_renderer: Panel geometry
    - bubbles.placement: Bubble geometry
    - compositor: Drawing
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class NormalizedRect:
    """
    Rectangle expressed as fractions of a parent rectangle.

    Soft invariant: every value lies in [0, 1], x + width <= 1 and
    y + height <= 1. Violations are never rejected on construction;
    call clamped() to pull a rect back into range.

    Example:
        >>> NormalizedRect(-0.1, 0.5, 0.5, 0.8).clamped()
        NormalizedRect(x=0.0, y=0.5, width=0.5, height=0.5)
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def is_within_unit(self) -> bool:
        """Check the [0, 1] invariant without modifying anything."""
        return (
            0 <= self.x <= 1
            and 0 <= self.y <= 1
            and 0 <= self.width <= 1
            and 0 <= self.height <= 1
            and self.right <= 1
            and self.bottom <= 1
        )

    def clamped(self) -> NormalizedRect:
        """Return a copy clamped into the unit square."""
        x = _clamp(self.x, 0.0, 1.0)
        y = _clamp(self.y, 0.0, 1.0)
        width = _clamp(self.width, 0.0, 1.0 - x)
        height = _clamp(self.height, 0.0, 1.0 - y)
        return NormalizedRect(x, y, width, height)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NormalizedRect:
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True, slots=True)
class PixelRect:
    """
    Rectangle in absolute pixel coordinates.

    Width and height must be > 0 for the rect to be drawn; see
    is_renderable. Coordinates are floats so that geometry stays exact
    until the compositor rounds at draw time.

    Example:
        >>> rect = PixelRect(20, 20, 1160, 1760)
        >>> rect.right, rect.bottom
        (1180, 1780)
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def is_renderable(self) -> bool:
        """True when the rect has a positive area."""
        return self.width > 0 and self.height > 0

    def as_box(self) -> tuple[float, float, float, float]:
        """Get as (left, top, right, bottom) tuple for PIL drawing."""
        return (self.x, self.y, self.right, self.bottom)

    def inset(self, amount: float) -> PixelRect:
        """Shrink uniformly on all four sides."""
        return PixelRect(
            self.x + amount,
            self.y + amount,
            self.width - 2 * amount,
            self.height - 2 * amount,
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PixelRect:
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True, slots=True)
class Margins:
    """
    Pixel insets.

    Used at two levels: page margins define the safe area inside the
    physical page, panel margins shrink a panel inside its slot.
    """

    top: float
    right: float
    bottom: float
    left: float

    @classmethod
    def uniform(cls, value: float) -> Margins:
        return cls(value, value, value, value)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        default: Optional[Margins] = None,
    ) -> Margins:
        """
        Deserialize from dictionary.

        Missing or null sides fall back to the matching side of `default`
        (or 0 when no default is given).
        """
        base = default or cls(0, 0, 0, 0)

        def side(name: str) -> float:
            value = data.get(name)
            return float(value) if value is not None else getattr(base, name)

        return cls(
            top=side("top"),
            right=side("right"),
            bottom=side("bottom"),
            left=side("left"),
        )


@dataclass(frozen=True, slots=True)
class Point:
    """Absolute pixel point (e.g. a speech tail target)."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Point:
        return cls(x=float(data["x"]), y=float(data["y"]))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
