"""
Tests for the mangakit command line.
"""

import json

import pytest
from PIL import Image

from mangakit.cli import main


@pytest.fixture
def page_file(tmp_path, sample_image):
    """Page document with two panels, one with artwork and a bubble."""
    path = tmp_path / "page.json"
    path.write_text(json.dumps({
        "id": "page-1",
        "width": 600,
        "height": 900,
        "layoutTemplateId": "dialogue-4panel",
        "panels": [
            {
                "id": "a",
                "panelIndex": 0,
                "imageUrl": str(sample_image),
                "bubbles": [{"id": "b1", "text": "Hello!", "type": "standard"}],
            },
            {"id": "b", "panelIndex": 1},
        ],
    }))
    return path


class TestTemplatesCommand:
    """Tests for `mangakit templates`."""

    def test_templates_when_listed_then_every_id_printed(self, capsys):
        assert main(["templates"]) == 0
        out = capsys.readouterr().out
        assert "dialogue-4panel" in out
        assert "grid-8panel" in out

    def test_templates_when_json_then_parseable(self, capsys):
        assert main(["templates", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data) == 6
        assert data[0]["id"] == "dialogue-4panel"


class TestLayoutCommand:
    """Tests for `mangakit layout`."""

    def test_layout_when_stdout_then_rendered_json(self, page_file, capsys):
        assert main(["layout", str(page_file)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["pageId"] == "page-1"
        assert [p["id"] for p in data["panels"]] == ["a", "b"]
        assert data["panels"][0]["bubbles"][0]["id"] == "b1"

    def test_layout_when_output_then_file_written(self, page_file, tmp_path):
        out = tmp_path / "layout.json"
        assert main(["layout", str(page_file), "-o", str(out)]) == 0
        assert json.loads(out.read_text())["width"] == 600

    def test_layout_when_unknown_template_then_exit_one(self, tmp_path, capsys):
        path = tmp_path / "page.json"
        path.write_text(json.dumps({"id": "page", "layoutTemplateId": "nope"}))
        assert main(["layout", str(path)]) == 1
        assert "nope" in capsys.readouterr().err

    def test_layout_when_invalid_json_then_exit_one(self, tmp_path, capsys):
        path = tmp_path / "page.json"
        path.write_text("{not json")
        assert main(["layout", str(path)]) == 1
        assert "not valid JSON" in capsys.readouterr().err

    def test_layout_when_schema_violation_then_exit_one(self, tmp_path, capsys):
        path = tmp_path / "page.json"
        path.write_text(json.dumps({"id": "page", "width": "wide"}))
        assert main(["layout", str(path)]) == 1
        assert "invalid page document" in capsys.readouterr().err

    def test_layout_when_file_missing_then_exit_one(self, tmp_path):
        assert main(["layout", str(tmp_path / "missing.json")]) == 1


class TestRenderCommand:
    """Tests for `mangakit render`."""

    def test_render_when_png_then_page_sized_image(self, page_file, tmp_path):
        # Arrange
        out = tmp_path / "page.png"
        thumb = tmp_path / "thumb.png"

        # Act
        code = main(["render", str(page_file), "-o", str(out), "--thumbnail", str(thumb)])

        # Assert
        assert code == 0
        with Image.open(out) as image:
            assert image.size == (600, 900)
        with Image.open(thumb) as image:
            assert image.size == (200, 300)

    def test_render_when_high_quality_then_scaled(self, page_file, tmp_path):
        out = tmp_path / "page.jpg"
        assert main(["render", str(page_file), "-o", str(out), "--quality", "high"]) == 0
        with Image.open(out) as image:
            assert image.size == (1200, 1800)

    def test_render_when_pdf_then_written(self, page_file, tmp_path):
        out = tmp_path / "page.pdf"
        assert main(["render", str(page_file), "-o", str(out), "--page-number", "3"]) == 0
        assert out.read_bytes().startswith(b"%PDF")

    def test_render_when_unsupported_suffix_then_exit_one(self, page_file, tmp_path, capsys):
        assert main(["render", str(page_file), "-o", str(tmp_path / "page.gif")]) == 1
        assert "unsupported output format" in capsys.readouterr().err
