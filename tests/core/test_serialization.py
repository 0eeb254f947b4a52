"""
Unit Tests for Serialization Utilities

Tests for page document loading and RenderedPage JSON output.
"""

import json

import pytest

from mangakit.core.models import Page
from mangakit.core.schemas import RecordValidationError
from mangakit.core.utils import (
    deserialize_page,
    load_page_json,
    save_rendered_page_json,
    serialize_rendered_page,
)
from mangakit.layout import render_page


class TestDeserializePage:
    """Tests for deserialize_page."""

    def test_deserialize_when_valid_then_returns_page(self):
        page = deserialize_page({"id": "page", "panels": [{"id": "a", "panelIndex": 0}]})
        assert isinstance(page, Page)
        assert page.panels[0].id == "a"

    def test_deserialize_when_invalid_then_raises(self):
        with pytest.raises(RecordValidationError):
            deserialize_page({"id": "page", "width": "wide"})

    def test_deserialize_when_validation_disabled_then_skips_schema(self):
        page = deserialize_page({"id": "page", "margins": {"top": -1}}, validate=False)
        assert page.margins == {"top": -1}


class TestPageJsonFiles:
    """Tests for load_page_json and save_rendered_page_json."""

    def test_load_when_file_exists_then_returns_page(self, tmp_path):
        # Arrange
        path = tmp_path / "page.json"
        path.write_text(json.dumps({"id": "page", "layoutTemplateId": "splash-single"}))

        # Act
        page = load_page_json(path)

        # Assert
        assert page.layout_template_id == "splash-single"

    def test_load_when_file_missing_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_page_json(tmp_path / "missing.json")

    def test_save_when_called_then_writes_rendered_json(self, tmp_path, make_panel):
        # Arrange
        rendered = render_page(Page(id="page"), [make_panel(0)])
        path = tmp_path / "out" / "layout.json"

        # Act
        save_rendered_page_json(rendered, path)

        # Assert
        data = json.loads(path.read_text())
        assert data == serialize_rendered_page(rendered)
        assert data["pageId"] == "page"
        assert data["panels"][0]["absolute"]["x"] == 30.0
