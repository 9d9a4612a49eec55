"""Tests for the CSS stylesheet, style stack and value helpers."""

import pytest

from pageflow.exceptions import StyleError
from pageflow.models import PageStyle
from pageflow.styles import (
    ElementInfo,
    StyleStack,
    Stylesheet,
    expand_box_shorthand,
    is_bold,
    is_italic,
    parse_declarations,
    resolve_font_size,
    resolve_length,
    resolve_line_height,
    split_rules,
)
from pageflow.units import parse_length


class TestParsing:
    """Test suite for the low level CSS parsing helpers."""

    def test_parse_declarations(self):
        result = parse_declarations("color: red; margin-top : 2pt ;font-weight:bold !important")

        assert result == {"color": "red", "margin-top": "2pt", "font-weight": "bold"}

    def test_margin_shorthand_is_expanded(self):
        assert parse_declarations("margin: 1cm 2cm") == {
            "margin-top": "1cm",
            "margin-right": "2cm",
            "margin-bottom": "1cm",
            "margin-left": "2cm",
        }

    def test_longhand_after_shorthand_wins(self):
        result = parse_declarations("margin: 1cm; margin-top: 3cm")

        assert result["margin-top"] == "3cm"
        assert result["margin-bottom"] == "1cm"

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1pt", ("1pt", "1pt", "1pt", "1pt")),
            ("1pt 2pt 3pt", ("1pt", "2pt", "3pt", "2pt")),
            ("1pt 2pt 3pt 4pt", ("1pt", "2pt", "3pt", "4pt")),
        ],
    )
    def test_expand_box_shorthand(self, value, expected):
        result = expand_box_shorthand("margin", value)

        assert (result["margin-top"], result["margin-right"], result["margin-bottom"], result["margin-left"]) == expected

    def test_expand_box_shorthand_too_many_values(self):
        with pytest.raises(StyleError):
            expand_box_shorthand("margin", "1pt 2pt 3pt 4pt 5pt")

    @pytest.mark.parametrize("text", ["color red", ": red", "color:"])
    def test_malformed_declaration(self, text):
        with pytest.raises(StyleError):
            parse_declarations(text)

    def test_split_rules_strips_comments(self):
        rules = split_rules("/* header */ p { color: red } /* x { } */ h1 { }")

        assert rules == [("p", " color: red "), ("h1", " ")]

    def test_split_rules_skips_statement_at_rules(self):
        rules = split_rules('@charset "utf-8"; p { color: red }')

        assert rules == [("p", " color: red ")]

    @pytest.mark.parametrize("css", ["p { color: red", "p { color: red } }", "p color: red", "{ color: red }"])
    def test_split_rules_malformed(self, css):
        with pytest.raises(StyleError):
            split_rules(css)


class TestStylesheet:
    """Test suite for Stylesheet."""

    def test_no_page_rule(self):
        assert Stylesheet().default_page() is None

    def test_default_page(self):
        sheet = Stylesheet()
        sheet.add_css_text("@page { size: A5 landscape; margin: 2cm; margin-left: 3cm }")

        assert sheet.default_page() == PageStyle(
            papersize="A5 landscape",
            margin_top="2cm",
            margin_bottom="2cm",
            margin_left="3cm",
            margin_right="2cm",
        )

    def test_page_rule_is_cumulative(self):
        sheet = Stylesheet()
        sheet.add_css_text("@page { size: letter }")
        sheet.add_css_text("@page { margin-top: 1in }")

        page = sheet.default_page()
        assert page.papersize == "letter"
        assert page.margin_top == "1in"
        assert page.margin_bottom == ""

    def test_pseudo_page_is_not_default(self):
        sheet = Stylesheet()
        sheet.add_css_text("@page :first { size: A3 }")

        assert sheet.default_page() is None
        assert sheet.pages[":first"] == {"size": "A3"}

    def test_unsupported_at_rule_is_skipped(self):
        sheet = Stylesheet()
        sheet.add_css_text("@media print { p { color: red } } p { color: blue }")

        assert [rule.selector for rule in sheet.rules] == ["p"]

    def test_malformed_css_adds_nothing(self):
        sheet = Stylesheet()
        with pytest.raises(StyleError):
            sheet.add_css_text("p { margin-top: 1pt } h1 { color }")

        assert sheet.rules == []

    def test_specificity_then_order(self):
        sheet = Stylesheet()
        sheet.add_css_text(".note { color: green } p { color: red } p { color: blue; margin-top: 1pt }")

        plain = sheet.declarations_for(ElementInfo("p"))
        noted = sheet.declarations_for(ElementInfo("p", classes=("note",)))

        assert plain == {"color": "blue", "margin-top": "1pt"}
        assert noted["color"] == "green"

    def test_id_beats_class(self):
        sheet = Stylesheet()
        sheet.add_css_text("#intro { color: red } p.lead { color: blue }")

        element = ElementInfo("p", classes=("lead",), element_id="intro")
        assert sheet.declarations_for(element)["color"] == "red"

    def test_descendant_selector(self):
        sheet = Stylesheet()
        sheet.add_css_text("div.box p { color: red }")

        inside = sheet.declarations_for(ElementInfo("p"), [ElementInfo("div", classes=("box",)), ElementInfo("span")])
        outside = sheet.declarations_for(ElementInfo("p"), [ElementInfo("div")])

        assert inside == {"color": "red"}
        assert outside == {}

    def test_selector_list_and_universal(self):
        sheet = Stylesheet()
        sheet.add_css_text("h1, h2 { color: red } * { font-style: italic }")

        assert sheet.declarations_for(ElementInfo("h2")) == {"font-style": "italic", "color": "red"}

    def test_unsupported_selector_is_ignored(self, caplog):
        sheet = Stylesheet()
        sheet.add_css_text("p > span { color: red } a:hover { color: blue }")

        assert sheet.rules == []
        assert "unsupported selector" in caplog.text


class TestStyleStack:
    """Test suite for StyleStack."""

    def test_inherited_properties_flow_down(self):
        stack = StyleStack({"font-size": "12pt", "font-family": "Times"})

        computed = stack.push({"margin-top": "3pt", "font-weight": "bold"})
        child = stack.push({})

        assert computed["font-family"] == "Times"
        assert child == {"font-size": "12pt", "font-family": "Times", "font-weight": "bold"}

    def test_pop_restores_parent(self):
        stack = StyleStack({"font-size": "12pt"})
        stack.push({"font-size": "20pt"})
        stack.pop()

        assert stack.current == {"font-size": "12pt"}
        assert stack.depth == 0

    def test_underflow(self):
        with pytest.raises(StyleError):
            StyleStack({}).pop()


class TestValueHelpers:
    """Test suite for value resolution helpers."""

    @pytest.mark.parametrize(
        "value, expected",
        [("2em", 24.0), ("150%", 18.0), ("large", 14.0), ("larger", 14.4), ("9pt", 9.0), ("0", 0.0)],
    )
    def test_resolve_font_size(self, value, expected):
        assert resolve_font_size(value, 12.0) == pytest.approx(expected)

    def test_resolve_font_size_invalid(self):
        with pytest.raises(StyleError):
            resolve_font_size("huge", 12.0)

    def test_resolve_length(self):
        assert resolve_length("1cm", 12.0) == parse_length("1cm")
        assert resolve_length("0.5em", 12.0) == parse_length("6pt")
        assert resolve_length("auto", 12.0) is None

    def test_resolve_length_invalid(self):
        with pytest.raises(StyleError) as excinfo:
            resolve_length("1 parsec", 12.0)

        assert excinfo.value.__cause__ is not None

    @pytest.mark.parametrize(
        "value, expected",
        [("normal", 1.2), ("1.5", 1.5), ("150%", 1.5), ("2em", 2.0), ("18pt", 1.5)],
    )
    def test_resolve_line_height(self, value, expected):
        assert resolve_line_height(value, 12.0, 1.2) == pytest.approx(expected)

    def test_font_weight_and_style(self):
        assert is_bold({"font-weight": "bold"})
        assert is_bold({"font-weight": "700"})
        assert not is_bold({"font-weight": "400"})
        assert not is_bold({})
        assert is_italic({"font-style": "oblique"})
        assert not is_italic({"font-style": "normal"})
