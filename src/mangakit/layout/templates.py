"""
Module: layout.templates

Purpose:
    Static registry of named panel arrangements in normalized (0-1)
    coordinates relative to the page safe area. The catalog is data
    (templates.json), loaded once at import and never mutated.

Key Functions:
    - get_layout_by_id(): Lookup returning None for unknown ids
    - require_layout(): Lookup raising TemplateNotFoundError
    - list_all(): All templates in catalog order
    - get_layouts_by_panel_count() / get_layouts_by_tag(): Filters
    - get_recommended_layout(): Best template for a panel count and beat

Key Classes:
    - LayoutTemplate: Immutable template
    - PanelTemplate: One slot of a template
    - TemplateNotFoundError: Unknown template id

Dependencies:
    - json (std)
    - core.models: NormalizedRect, Margins, PanelType
    - layout.config: DEFAULT_LAYOUT_TEMPLATE_ID

Used By:
    - layout.page_renderer: Slot fallback geometry
    - cli: Template listing
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from mangakit.core.models import Margins, NormalizedRect, PanelType

from .config import DEFAULT_LAYOUT_TEMPLATE_ID

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).parent / "templates.json"


class TemplateNotFoundError(LookupError):
    """Layout template id does not resolve."""

    def __init__(self, template_id: str):
        super().__init__(f"Layout template not found: {template_id}")
        self.template_id = template_id


@dataclass(frozen=True)
class PanelTemplate:
    """
    Panel slot within a layout template.

    Attributes:
        id: Slot identifier ("p1", "p2", ...)
        rect: Slot rect relative to the page safe area
        z_index: Stacking order
        panel_type: PanelType
        margins: Pixel margins shrinking the panel inside its slot
    """

    id: str
    rect: NormalizedRect
    z_index: int
    panel_type: PanelType
    margins: Margins

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PanelTemplate:
        return cls(
            id=data["id"],
            rect=NormalizedRect.from_dict(data),
            z_index=int(data.get("zIndex", 1)),
            panel_type=PanelType(data.get("panelType", "standard")),
            margins=Margins.from_dict(data["margins"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            **self.rect.to_dict(),
            "zIndex": self.z_index,
            "panelType": self.panel_type.value,
            "margins": self.margins.to_dict(),
        }


@dataclass(frozen=True)
class LayoutTemplate:
    """
    Named arrangement of panel slots (immutable).

    Attributes:
        id: Template identifier
        name: Display name
        description: One-line description
        grid_type: Grid tag ("2x2", "custom", ...)
        panels: Ordered slots
        tags: Story-beat tags used for recommendations
        best_for: Human readable use cases
    """

    id: str
    name: str
    description: str
    grid_type: str
    panels: tuple[PanelTemplate, ...]
    tags: tuple[str, ...]
    best_for: tuple[str, ...]

    @property
    def panel_count(self) -> int:
        return len(self.panels)

    def slot(self, index: int) -> Optional[PanelTemplate]:
        """
        Slot for the panel at sorted position `index`.

        Indices past the last slot reuse the last slot, so extra panels
        overlap it rather than failing. Returns None only for a template
        without slots.
        """
        if not self.panels:
            return None
        return self.panels[min(index, len(self.panels) - 1)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LayoutTemplate:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            grid_type=data.get("gridType", "custom"),
            panels=tuple(PanelTemplate.from_dict(p) for p in data["panels"]),
            tags=tuple(data.get("tags", ())),
            best_for=tuple(data.get("bestFor", ())),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "gridType": self.grid_type,
            "panelCount": self.panel_count,
            "tags": list(self.tags),
            "bestFor": list(self.best_for),
            "panels": [p.to_dict() for p in self.panels],
        }


def _load_catalog(path: Path) -> tuple[int, tuple[LayoutTemplate, ...]]:
    """Load and check the template catalog."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    templates = tuple(LayoutTemplate.from_dict(t) for t in data["templates"])
    ids = [t.id for t in templates]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate template ids in {path.name}: {ids}")
    if DEFAULT_LAYOUT_TEMPLATE_ID not in ids:
        raise ValueError(
            f"Default template {DEFAULT_LAYOUT_TEMPLATE_ID!r} missing from {path.name}"
        )

    logger.debug(f"Loaded {len(templates)} layout templates (catalog v{data['version']})")
    return int(data["version"]), templates


CATALOG_VERSION, LAYOUT_TEMPLATES = _load_catalog(CATALOG_PATH)
_BY_ID = {t.id: t for t in LAYOUT_TEMPLATES}


def get_layout_by_id(template_id: str) -> Optional[LayoutTemplate]:
    """Get layout template by id, or None if unknown."""
    return _BY_ID.get(template_id)


def require_layout(template_id: str) -> LayoutTemplate:
    """
    Get layout template by id.

    Raises:
        TemplateNotFoundError: If the id is unknown
    """
    template = _BY_ID.get(template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)
    return template


def default_layout() -> LayoutTemplate:
    """Template used when a page names none. Always resolves."""
    return _BY_ID[DEFAULT_LAYOUT_TEMPLATE_ID]


def list_all() -> list[LayoutTemplate]:
    """Get all layout templates in catalog order."""
    return list(LAYOUT_TEMPLATES)


def get_layouts_by_panel_count(count: int) -> list[LayoutTemplate]:
    """Get templates with exactly `count` slots."""
    return [t for t in LAYOUT_TEMPLATES if t.panel_count == count]


def get_layouts_by_tag(tag: str) -> list[LayoutTemplate]:
    """Get templates carrying `tag`."""
    return [t for t in LAYOUT_TEMPLATES if tag in t.tags]


def get_recommended_layout(
    panel_count: int,
    story_beat: Optional[str] = None,
) -> LayoutTemplate:
    """
    Recommend a template for a page.

    Order of preference:
    1. Exact panel count carrying the story beat tag
    2. Exact panel count
    3. Closest panel count (catalog order breaks ties)

    Args:
        panel_count: Number of panels on the page
        story_beat: Optional tag such as "action", "dialogue",
            "establishing" or "dramatic"

    Example:
        >>> get_recommended_layout(4, "dialogue").id
        'dialogue-4panel'
    """
    exact = get_layouts_by_panel_count(panel_count)
    if story_beat:
        tagged = [t for t in exact if story_beat in t.tags]
        if tagged:
            return tagged[0]
    if exact:
        return exact[0]
    return min(LAYOUT_TEMPLATES, key=lambda t: abs(t.panel_count - panel_count))
