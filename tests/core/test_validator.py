"""
Unit Tests for Schema Validation

Tests for validate_page and RecordValidationError.
"""

import pytest

from mangakit.core.schemas.validator import RecordValidationError, validate_page


class TestValidatePage:
    """Tests for validate_page function."""

    @pytest.fixture
    def valid_page_data(self) -> dict:
        """Create a valid page document for testing."""
        return {
            "id": "page-1",
            "width": 1200,
            "height": 1800,
            "layoutTemplateId": "dialogue-4panel",
            "margins": {"top": 20, "right": 20, "bottom": 20, "left": 20},
            "panels": [
                {
                    "id": "p1",
                    "panelIndex": 0,
                    "relative_x": 0,
                    "relative_y": 0,
                    "relative_width": 0.5,
                    "relative_height": 0.5,
                    "panel_margins": {"top": 10, "right": 5, "bottom": 5, "left": 10},
                    "borderStyle": "double",
                    "bubbles": [
                        {"id": "b1", "text": "Hello", "type": "standard", "x": 10, "y": 10},
                    ],
                },
            ],
        }

    def test_validate_when_valid_data_then_no_error(self, valid_page_data):
        validate_page(valid_page_data)

    def test_validate_when_minimal_page_then_no_error(self):
        validate_page({"id": "page"})

    def test_validate_when_missing_id_then_raises_error(self, valid_page_data):
        del valid_page_data["id"]
        with pytest.raises(RecordValidationError, match="'id' is a required property"):
            validate_page(valid_page_data)

    def test_validate_when_unknown_border_style_then_raises_with_path(self, valid_page_data):
        # Arrange
        valid_page_data["panels"][0]["borderStyle"] = "wavy"

        # Act
        with pytest.raises(RecordValidationError) as exc_info:
            validate_page(valid_page_data)

        # Assert
        assert exc_info.value.path == "panels.0.borderStyle"
        assert len(exc_info.value.errors) == 1

    def test_validate_when_negative_margin_then_raises_error(self, valid_page_data):
        valid_page_data["margins"]["top"] = -5
        with pytest.raises(RecordValidationError):
            validate_page(valid_page_data)

    def test_validate_when_bubble_geometry_wrong_type_then_raises_error(self, valid_page_data):
        valid_page_data["panels"][0]["bubbles"][0]["x"] = "left"
        with pytest.raises(RecordValidationError):
            validate_page(valid_page_data)

    def test_validate_when_not_an_object_then_raises_error(self):
        with pytest.raises(RecordValidationError, match="must be an object"):
            validate_page(["not", "a", "page"])

    def test_validate_when_unknown_bubble_type_then_accepted(self, valid_page_data):
        """Unknown bubble tags are rendered as standard, not rejected."""
        valid_page_data["panels"][0]["bubbles"][0]["type"] = "dialogue"
        validate_page(valid_page_data)
