"""
Unit Tests for the Bubble Style Catalog
"""

import pytest

from mangakit.bubbles.styles import BUBBLE_STYLES, BubbleShape, get_bubble_style
from mangakit.core.models import BubbleType


class TestBubbleStyles:
    """Tests for get_bubble_style and BubbleStyle."""

    def test_catalog_when_loaded_then_every_type_styled(self):
        assert set(BUBBLE_STYLES) == set(BubbleType)

    @pytest.mark.parametrize("bubble_type, shape", [
        (BubbleType.STANDARD, BubbleShape.ELLIPSE),
        (BubbleType.THOUGHT, BubbleShape.CLOUD),
        (BubbleType.SHOUT, BubbleShape.JAGGED),
        (BubbleType.WHISPER, BubbleShape.DASHED_ELLIPSE),
        (BubbleType.NARRATION, BubbleShape.RECTANGLE),
    ])
    def test_style_when_type_then_matching_shape(self, bubble_type, shape):
        assert get_bubble_style(bubble_type).shape == shape

    def test_style_when_unknown_tag_then_standard(self):
        assert get_bubble_style("dialogue") is BUBBLE_STYLES[BubbleType.STANDARD]

    def test_style_when_narration_then_no_tail(self):
        assert get_bubble_style(BubbleType.NARRATION).has_tail is False

    def test_transform_when_shout_then_uppercase(self):
        assert get_bubble_style(BubbleType.SHOUT).transform_text("Get down!") == "GET DOWN!"

    def test_transform_when_whisper_then_lowercase(self):
        assert get_bubble_style(BubbleType.WHISPER).transform_text("Psst, OVER here") == "psst, over here"

    def test_transform_when_standard_then_unchanged(self):
        assert get_bubble_style(BubbleType.STANDARD).transform_text("Hi There") == "Hi There"
