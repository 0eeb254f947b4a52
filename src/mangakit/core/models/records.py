"""
Module: records

Purpose:
    External input records consumed by the engine: pages, panels and
    speech bubbles as handed over by the persistence layer. Records are
    plain immutable values; every geometry field is optional because the
    renderers resolve missing values through documented fallback chains.

Key Classes:
    - Page: Page record with its panels
    - Panel: Panel record with its bubbles
    - SpeechBubble: Bubble record
    - BubbleType / PanelType / BorderStyle: Closed tag sets

Dependencies:
    - dataclasses (std)
    - core.models.geometry: NormalizedRect, PixelRect, Point

Used By:
    - layout.page_renderer: Page/panel geometry
    - bubbles.placement: Bubble geometry
    - core.utils.serialization: JSON loading

Key Naming:
    from_dict() accepts both the database column names (relative_x,
    panel_index, ...) and their camelCase API equivalents (relativeX,
    panelIndex, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from .geometry import NormalizedRect, PixelRect, Point


class BubbleType(str, Enum):
    """Bubble type. Governs shape and style, never geometry."""
    STANDARD = "standard"
    THOUGHT = "thought"
    SHOUT = "shout"
    WHISPER = "whisper"
    NARRATION = "narration"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> BubbleType:
        """
        Parse a type tag, mapping unknown tags to STANDARD.

        "dialogue" is the tag used by automatic placement sources for
        ordinary speech and is treated as STANDARD.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.STANDARD


class PanelType(str, Enum):
    STANDARD = "standard"
    SPLASH = "splash"
    INSET = "inset"
    BORDERLESS = "borderless"

    def __str__(self) -> str:
        return self.value


class BorderStyle(str, Enum):
    SOLID = "solid"
    DOUBLE = "double"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value among `keys`."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _rect_from_fields(x, y, width, height, cls):
    if x is None or y is None or width is None or height is None:
        return None
    return cls(x, y, width, height)


@dataclass(frozen=True)
class SpeechBubble:
    """
    Speech bubble record.

    Geometry is either a NormalizedRect relative to the owning panel
    (relative_* fields) or a panel-local pixel rect (x/y/width/height).
    Both may be partially or completely absent.

    Attributes:
        id: Bubble identifier
        text: Bubble text
        type: BubbleType tag
        x, y, width, height: Panel-local pixels (optional)
        relative_x, relative_y, relative_width, relative_height:
            Fractions of the panel box (optional)
        tail_target: Tail point relative to the panel box (optional)
    """

    id: str
    text: str = ""
    type: BubbleType = BubbleType.STANDARD
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    relative_x: Optional[float] = None
    relative_y: Optional[float] = None
    relative_width: Optional[float] = None
    relative_height: Optional[float] = None
    tail_target: Optional[Point] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, BubbleType):
            object.__setattr__(self, "type", BubbleType.parse(self.type))

    @property
    def relative_rect(self) -> Optional[NormalizedRect]:
        """Relative rect, or None unless all four fields are set."""
        return _rect_from_fields(
            self.relative_x, self.relative_y,
            self.relative_width, self.relative_height,
            NormalizedRect,
        )

    @property
    def absolute_rect(self) -> Optional[PixelRect]:
        """Panel-local pixel rect, or None unless all four fields are set."""
        return _rect_from_fields(self.x, self.y, self.width, self.height, PixelRect)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SpeechBubble:
        tail = _pick(data, "tail_target", "tailTarget")
        tail_target = None
        if isinstance(tail, Mapping) and tail.get("x") is not None and tail.get("y") is not None:
            tail_target = Point.from_dict(tail)
        return cls(
            id=str(data["id"]),
            text=str(data.get("text") or ""),
            type=BubbleType.parse(data.get("type")),
            x=_opt_float(data.get("x")),
            y=_opt_float(data.get("y")),
            width=_opt_float(data.get("width")),
            height=_opt_float(data.get("height")),
            relative_x=_opt_float(_pick(data, "relative_x", "relativeX")),
            relative_y=_opt_float(_pick(data, "relative_y", "relativeY")),
            relative_width=_opt_float(_pick(data, "relative_width", "relativeWidth")),
            relative_height=_opt_float(_pick(data, "relative_height", "relativeHeight")),
            tail_target=tail_target,
        )


@dataclass(frozen=True)
class Panel:
    """
    Panel record.

    panel_index defines render order; panels are always processed sorted
    ascending by it regardless of storage order.

    Attributes:
        id: Panel identifier
        panel_index: Ordering key
        relative_*: Fractions of the page safe area (optional)
        x, y, width, height: Page pixels (optional)
        z_index: Stacking order (optional)
        panel_type: PanelType (optional)
        panel_margins: Partial {top, right, bottom, left} mapping (optional)
        border_style: BorderStyle (optional)
        border_width: Border stroke width in pixels (optional)
        image_url: Panel artwork (http(s) URL, file path or data: URL)
        bubbles: Speech bubbles in authoring order
    """

    id: str
    panel_index: int
    relative_x: Optional[float] = None
    relative_y: Optional[float] = None
    relative_width: Optional[float] = None
    relative_height: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    z_index: Optional[int] = None
    panel_type: Optional[PanelType] = None
    panel_margins: Optional[Mapping[str, float]] = None
    border_style: Optional[BorderStyle] = None
    border_width: Optional[float] = None
    image_url: Optional[str] = None
    bubbles: tuple[SpeechBubble, ...] = ()

    def __post_init__(self) -> None:
        if self.panel_type is not None and not isinstance(self.panel_type, PanelType):
            object.__setattr__(self, "panel_type", PanelType(self.panel_type))
        if self.border_style is not None and not isinstance(self.border_style, BorderStyle):
            object.__setattr__(self, "border_style", BorderStyle(self.border_style))
        object.__setattr__(self, "bubbles", tuple(self.bubbles))

    @property
    def relative_rect(self) -> Optional[NormalizedRect]:
        """Relative rect, or None unless all four fields are set."""
        return _rect_from_fields(
            self.relative_x, self.relative_y,
            self.relative_width, self.relative_height,
            NormalizedRect,
        )

    @property
    def absolute_rect(self) -> Optional[PixelRect]:
        """Page pixel rect, or None unless all four fields are set."""
        return _rect_from_fields(self.x, self.y, self.width, self.height, PixelRect)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Panel:
        panel_type = _pick(data, "panel_type", "panelType")
        border_style = _pick(data, "border_style", "borderStyle")
        z_index = _pick(data, "z_index", "zIndex")
        bubbles = data.get("bubbles") or ()
        return cls(
            id=str(data["id"]),
            panel_index=int(_pick(data, "panel_index", "panelIndex") or 0),
            relative_x=_opt_float(_pick(data, "relative_x", "relativeX")),
            relative_y=_opt_float(_pick(data, "relative_y", "relativeY")),
            relative_width=_opt_float(_pick(data, "relative_width", "relativeWidth")),
            relative_height=_opt_float(_pick(data, "relative_height", "relativeHeight")),
            x=_opt_float(data.get("x")),
            y=_opt_float(data.get("y")),
            width=_opt_float(data.get("width")),
            height=_opt_float(data.get("height")),
            z_index=None if z_index is None else int(z_index),
            panel_type=None if panel_type is None else PanelType(panel_type),
            panel_margins=_pick(data, "panel_margins", "panelMargins"),
            border_style=None if border_style is None else BorderStyle(border_style),
            border_width=_opt_float(_pick(data, "border_width", "borderWidth")),
            image_url=_pick(data, "image_url", "imageUrl") or None,
            bubbles=tuple(SpeechBubble.from_dict(b) for b in bubbles),
        )


@dataclass(frozen=True)
class Page:
    """
    Page record.

    Attributes:
        id: Page identifier
        width, height: Physical page size in pixels (optional)
        layout_template_id: Layout template to resolve (optional)
        margins: Partial page margins mapping (optional)
        page_number: 1-based page number used for the page label (optional)
        panels: Panel records in storage order
    """

    id: str
    width: Optional[float] = None
    height: Optional[float] = None
    layout_template_id: Optional[str] = None
    margins: Optional[Mapping[str, float]] = None
    page_number: Optional[int] = None
    panels: tuple[Panel, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Page:
        page_number = _pick(data, "page_number", "pageNumber")
        return cls(
            id=str(data["id"]),
            width=_opt_float(data.get("width")),
            height=_opt_float(data.get("height")),
            layout_template_id=_pick(data, "layout_template_id", "layoutTemplateId") or None,
            margins=data.get("margins"),
            page_number=None if page_number is None else int(page_number),
            panels=tuple(Panel.from_dict(p) for p in data.get("panels") or ()),
        )
