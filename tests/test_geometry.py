"""Tests for position resolution."""

import pytest
from clipgraph.core import Anchor, GeometryContext, PositionKeyword
from clipgraph.timeline.geometry import (
    NAMESPACES,
    apply_anchor,
    resolve_coordinate,
    resolve_position,
)
from clipgraph.timeline.models import PositionSpec

TEXT = GeometryContext.TEXT
OVERLAY = GeometryContext.OVERLAY


class TestCoordinates:
    """Test single coordinate conversion."""

    def test_percentage(self):
        """Test percentages become frame-relative expressions."""
        assert resolve_coordinate("50%", "w") == "(w*0.5)"
        assert resolve_coordinate("100%", "main_h") == "(main_h*1)"

    def test_pixels(self):
        """Test px suffixes are dropped."""
        assert resolve_coordinate("120px", "w") == "120"

    def test_numbers(self):
        """Test numbers render without trailing .0."""
        assert resolve_coordinate(10, "w") == "10"
        assert resolve_coordinate(10.0, "w") == "10"
        assert resolve_coordinate(12.5, "w") == "12.5"

    def test_expression_passthrough(self):
        """Test raw expressions are emitted unchanged."""
        assert resolve_coordinate("main_w-overlay_w-10", "main_w") == (
            "main_w-overlay_w-10"
        )

    def test_malformed_percentage(self):
        """Test unparseable percentages are left as-is instead of raising."""
        assert resolve_coordinate("abc%", "w") == "abc%"


class TestAnchors:
    """Test anchor adjustments."""

    @pytest.mark.parametrize(
        "anchor,expected",
        [
            (Anchor.TOP_LEFT, ("X", "Y")),
            (Anchor.TOP_CENTER, ("(X-(text_w/2))", "Y")),
            (Anchor.TOP_RIGHT, ("(X-text_w)", "Y")),
            (Anchor.CENTER_LEFT, ("X", "(Y-(text_h/2))")),
            (Anchor.CENTER, ("(X-(text_w/2))", "(Y-(text_h/2))")),
            (Anchor.CENTER_RIGHT, ("(X-text_w)", "(Y-(text_h/2))")),
            (Anchor.BOTTOM_LEFT, ("X", "(Y-text_h)")),
            (Anchor.BOTTOM_CENTER, ("(X-(text_w/2))", "(Y-text_h)")),
            (Anchor.BOTTOM_RIGHT, ("(X-text_w)", "(Y-text_h)")),
        ],
    )
    def test_text_anchor_table(self, anchor, expected):
        """Test the nine-point anchor table in text context."""
        assert apply_anchor("X", "Y", anchor, NAMESPACES[TEXT]) == expected

    def test_overlay_uses_overlay_size(self):
        """Test overlay anchors use overlay_w/overlay_h."""
        assert apply_anchor("X", "Y", Anchor.CENTER, NAMESPACES[OVERLAY]) == (
            "(X-(overlay_w/2))",
            "(Y-(overlay_h/2))",
        )


class TestResolvePosition:
    """Test full position resolution in both contexts."""

    def test_text_percentage_with_anchor(self):
        """Test centred percentage position for drawtext."""
        position = PositionSpec(x="50%", y="50%", anchor=Anchor.CENTER)
        assert resolve_position(position, TEXT) == (
            "((w*0.5)-(text_w/2))",
            "((h*0.5)-(text_h/2))",
        )

    def test_overlay_percentage_with_anchor(self):
        """Test the same position uses overlay variables for images."""
        position = PositionSpec(x="50%", y="50%", anchor=Anchor.CENTER)
        assert resolve_position(position, OVERLAY) == (
            "((main_w*0.5)-(overlay_w/2))",
            "((main_h*0.5)-(overlay_h/2))",
        )

    def test_text_keywords(self):
        """Test text keywords use a 50 px margin."""
        assert resolve_position(PositionKeyword.TOP, TEXT) == ("(w-text_w)/2", "50")
        assert resolve_position(PositionKeyword.BOTTOM, TEXT) == (
            "(w-text_w)/2",
            "h-text_h-50",
        )
        assert resolve_position(PositionKeyword.BOTTOM_RIGHT, TEXT) == (
            "w-text_w-50",
            "h-text_h-50",
        )

    def test_overlay_keywords(self):
        """Test overlay keywords use a 20 px margin."""
        assert resolve_position(PositionKeyword.TOP_RIGHT, OVERLAY) == (
            "main_w-overlay_w-20",
            "20",
        )
        assert resolve_position(PositionKeyword.CENTER, OVERLAY) == (
            "(main_w-overlay_w)/2",
            "(main_h-overlay_h)/2",
        )
        assert resolve_position(PositionKeyword.BOTTOM_LEFT, OVERLAY) == (
            "20",
            "main_h-overlay_h-20",
        )

    def test_defaults(self):
        """Test missing positions: text centred, overlay at the origin."""
        assert resolve_position(None, TEXT) == ("(w-text_w)/2", "(h-text_h)/2")
        assert resolve_position(None, OVERLAY) == ("0", "0")

    @pytest.mark.parametrize("keyword", ["middle", "top-center", ""])
    def test_unknown_keyword_text(self, keyword):
        """Test unrecognised keywords centre text."""
        assert resolve_position(keyword, TEXT) == ("(w-text_w)/2", "(h-text_h)/2")

    @pytest.mark.parametrize("keyword", ["middle", "top-center", ""])
    def test_unknown_keyword_overlay(self, keyword):
        """Test unrecognised keywords put overlays at the top-left margin."""
        assert resolve_position(keyword, OVERLAY) == ("20", "20")

    def test_plain_string_keyword(self):
        """Test a known keyword given as a plain string resolves normally."""
        assert resolve_position("top-right", OVERLAY) == ("main_w-overlay_w-20", "20")
