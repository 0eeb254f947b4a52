import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import mangakit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from mangakit.core.models import Page, Panel, SpeechBubble  # noqa: E402


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple red test image on disk."""
    img = Image.new("RGB", (200, 100), color="red")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_panel():
    """Factory for Panel records with sensible defaults."""
    def _make(panel_index: int = 0, **kwargs) -> Panel:
        kwargs.setdefault("id", f"panel-{panel_index}")
        return Panel(panel_index=panel_index, **kwargs)
    return _make


@pytest.fixture
def make_bubble():
    """Factory for SpeechBubble records."""
    def _make(bubble_id: str = "b1", text: str = "Hello!", **kwargs) -> SpeechBubble:
        return SpeechBubble(id=bubble_id, text=text, **kwargs)
    return _make


@pytest.fixture
def default_page() -> Page:
    """1200x1800 page, 20px margins, dialogue-4panel."""
    return Page(
        id="page-1",
        width=1200,
        height=1800,
        layout_template_id="dialogue-4panel",
        margins={"top": 20, "right": 20, "bottom": 20, "left": 20},
    )
