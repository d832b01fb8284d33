"""Tests for the style and variant codec."""

import itertools

import pytest

from fontview.core.exceptions import ArgumentError, InvalidStyleError
from fontview.fonts.style import (
    StyleCode,
    Variant,
    Weight,
    format_style,
    format_variant,
    nearest_style_key,
    nearest_weight,
    parse_style,
    parse_variant,
    style_from_subfamily,
)


class TestParseStyle:
    """Test parsing of user typed style strings."""

    @pytest.mark.parametrize(
        ("weight", "italic"), list(itertools.product(Weight, [False, True]))
    )
    def test_format_parse_round_trip(self, weight, italic):
        """Every formatted style parses back to the same code."""
        code = StyleCode(weight=weight, italic=italic)
        assert parse_style(format_style(code)) == code

    @pytest.mark.parametrize(
        ("numeric", "named"),
        [
            ("100", "thin"),
            ("200", "extra-light"),
            ("300", "light"),
            ("400", "regular"),
            ("500", "medium"),
            ("600", "semi-bold"),
            ("700", "bold"),
            ("800", "extra-bold"),
            ("900", "black"),
        ],
    )
    def test_numeric_weights_match_named_aliases(self, numeric, named):
        """Numeric CSS weights parse like their names."""
        assert parse_style(numeric) == parse_style(named)
        assert parse_style(numeric).css_weight == int(numeric)

    @pytest.mark.parametrize(
        "value",
        [
            "Bold Italic",
            "bold-italic",
            "ITALIC bold",
            "  bold   italic  ",
            "bold_italic",
            "700 Italic",
        ],
    )
    def test_italic_anywhere_any_case(self, value):
        """The italic token is found anywhere, in any case."""
        assert parse_style(value) == StyleCode(weight=Weight.BOLD, italic=True)

    @pytest.mark.parametrize("value", ["", "regular", "0", "400", "  Regular "])
    def test_regular_aliases(self, value):
        assert parse_style(value) == StyleCode()

    def test_italic_alone_is_regular_italic(self):
        assert parse_style("Italic") == StyleCode(weight=Weight.REGULAR, italic=True)

    def test_compound_weight_with_italic(self):
        """Hyphenated weights survive italic stripping."""
        assert parse_style("semi-bold italic") == StyleCode(Weight.SEMI_BOLD, True)
        assert parse_style("semibold-italic") == StyleCode(Weight.SEMI_BOLD, True)
        assert parse_style("ExtraLight Italic") == StyleCode(Weight.EXTRA_LIGHT, True)

    @pytest.mark.parametrize("value", ["heavy", "bold bold", "italicbold", "450", "oblique"])
    def test_invalid_styles(self, value):
        """Unrecognized residual text is rejected."""
        with pytest.raises(InvalidStyleError) as exc_info:
            parse_style(value)
        assert value in str(exc_info.value)

    def test_invalid_style_is_argument_error(self):
        with pytest.raises(ArgumentError):
            parse_style("wide")


class TestFormatStyle:
    """Test canonical style formatting."""

    def test_format_regular(self):
        assert format_style(StyleCode()) == "regular"

    def test_format_italic(self):
        assert format_style(StyleCode(Weight.SEMI_BOLD, italic=True)) == "semi-bold italic"

    def test_str_uses_canonical_form(self):
        assert str(StyleCode(Weight.EXTRA_BOLD)) == "extra-bold"


class TestVariant:
    """Test variant parsing and formatting."""

    @pytest.mark.parametrize("variant", list(Variant))
    def test_round_trip(self, variant):
        assert parse_variant(format_variant(variant)) is variant

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Normal", Variant.NORMAL),
            ("SUBSCRIPT", Variant.SUBSCRIPT),
            ("superscript", Variant.SUPERSCRIPT),
            ("Small-Caps", Variant.SMALL_CAPS),
            ("smallcaps", Variant.SMALL_CAPS),
        ],
    )
    def test_case_insensitive(self, value, expected):
        assert parse_variant(value) is expected

    @pytest.mark.parametrize("value", ["", "bold", "sub", "small caps"])
    def test_invalid_variant(self, value):
        with pytest.raises(InvalidStyleError):
            parse_variant(value)


class TestStyleMatching:
    """Test helpers used for catalog style selection."""

    def test_nearest_weight_snaps_to_scale(self):
        assert nearest_weight(350) is Weight.REGULAR  # ties prefer heavier
        assert nearest_weight(680) is Weight.BOLD
        assert nearest_weight(1000) is Weight.BLACK

    def test_style_from_subfamily_uses_weight_class(self):
        assert style_from_subfamily("Book", 400) == StyleCode()
        assert style_from_subfamily("Heavy Oblique", 900) == StyleCode(Weight.BLACK, True)

    def test_style_from_subfamily_keywords(self):
        assert style_from_subfamily("ExtraBold Italic") == StyleCode(Weight.EXTRA_BOLD, True)
        assert style_from_subfamily("Semi Bold") == StyleCode(Weight.SEMI_BOLD)
        assert style_from_subfamily("Regular") == StyleCode()

    def test_nearest_style_key_exact(self):
        available = {"regular": StyleCode(), "bold": StyleCode(Weight.BOLD)}
        assert nearest_style_key(StyleCode(Weight.BOLD), available) == "bold"

    def test_nearest_style_key_prefers_same_italic(self):
        available = {
            "regular": StyleCode(),
            "bold": StyleCode(Weight.BOLD),
            "italic": StyleCode(italic=True),
        }
        wanted = StyleCode(Weight.BOLD, italic=True)
        assert nearest_style_key(wanted, available) == "italic"

    def test_nearest_style_key_nearest_weight(self):
        available = {"light": StyleCode(Weight.LIGHT), "black": StyleCode(Weight.BLACK)}
        assert nearest_style_key(StyleCode(Weight.MEDIUM), available) == "light"

    def test_nearest_style_key_empty(self):
        assert nearest_style_key(StyleCode(), {}) is None
