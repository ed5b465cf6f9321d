"""Tests for span projection, overlap pruning, and marker helpers."""

from __future__ import annotations

import pytest
from selectolax.lexbor import LexborHTMLParser

from superflux_highlights.anchoring.projector import (
    marker_category,
    marker_selector,
    project_spans,
    prune_overlaps,
    strip_highlight_markers,
)
from superflux_highlights.anchoring.text_projection import extract_plain_text
from superflux_highlights.models import Highlight, ResolvedSpan

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _find_marks(html: str) -> list[dict[str, str]]:
    """Extract all highlight markers from HTML as dicts of their attributes."""
    tree = LexborHTMLParser(html)
    marks = []
    for node in tree.css("mark.highlight"):
        attrs = dict(node.attributes)
        attrs["_text"] = node.text() or ""
        marks.append(attrs)
    return marks


def _span(
    start: int, end: int, hl_id: str = "h1", color: str = "yellow"
) -> ResolvedSpan:
    return ResolvedSpan(
        start=start, end=end, highlight=Highlight(id=hl_id, text="", color=color)
    )


# ---------------------------------------------------------------------------
# Overlap pruning
# ---------------------------------------------------------------------------


class TestPruneOverlaps:
    def test_first_by_start_wins(self) -> None:
        kept = prune_overlaps([_span(4, 15, "a"), _span(10, 19, "b")])
        assert [s.highlight.id for s in kept] == ["a"]

    def test_sorted_by_start(self) -> None:
        kept = prune_overlaps([_span(10, 12, "b"), _span(0, 3, "a")])
        assert [s.highlight.id for s in kept] == ["a", "b"]

    def test_equal_start_keeps_input_order(self) -> None:
        kept = prune_overlaps([_span(4, 15, "long"), _span(4, 9, "short")])
        assert [s.highlight.id for s in kept] == ["long"]

    def test_adjacent_spans_both_kept(self) -> None:
        kept = prune_overlaps([_span(0, 5, "a"), _span(5, 8, "b")])
        assert [s.highlight.id for s in kept] == ["a", "b"]

    def test_dropping_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("DEBUG", logger="superflux_highlights"):
            prune_overlaps([_span(0, 5, "a"), _span(2, 8, "b")])
        assert "Dropping highlight b" in caplog.text


class TestResolvedSpanInvariant:
    def test_empty_span_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid span"):
            _span(3, 3)

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid span"):
            _span(-1, 2)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


class TestProjectSpans:
    def test_no_spans_returns_input(self) -> None:
        html = "<div>  <p>untouched</p></div>"
        assert project_spans(html, []) == html

    def test_mid_node_span(self) -> None:
        html = "<p>hello world today</p>"
        result = project_spans(html, [_span(6, 11, "w1", "green")])

        marks = _find_marks(result)
        assert len(marks) == 1
        assert marks[0]["_text"] == "world"
        assert marks[0]["data-highlight-id"] == "w1"
        assert marks[0]["class"] == "highlight highlight-green"
        assert extract_plain_text(result) == "hello world today"

    def test_span_across_inline_elements(self) -> None:
        """One marker per covered text node, all sharing the identifier."""
        html = "<p>alpha <b>bravo</b> <i>charlie</i> delta</p>"
        # "alpha bravo charlie delta": "bravo charlie" is chars 6-19
        result = project_spans(html, [_span(6, 19, "x")])

        marks = _find_marks(result)
        assert [m["_text"] for m in marks] == ["bravo", " ", "charlie"]
        assert {m["data-highlight-id"] for m in marks} == {"x"}

        tree = LexborHTMLParser(result)
        assert tree.css_first("b mark") is not None
        assert tree.css_first("i mark") is not None
        assert extract_plain_text(result) == "alpha bravo charlie delta"

    def test_span_across_blocks(self) -> None:
        html = "<p>first para</p><p>second para</p>"
        # "first parasecond para": "parasecond" is chars 6-16
        result = project_spans(html, [_span(6, 16, "y")])

        marks = _find_marks(result)
        assert [m["_text"] for m in marks] == ["para", "second"]
        assert len(LexborHTMLParser(result).css("p")) == 2

    def test_several_spans_in_one_node(self) -> None:
        html = "<p>one two three</p>"
        result = project_spans(html, [_span(8, 13, "b"), _span(0, 3, "a")])

        marks = _find_marks(result)
        assert [(m["data-highlight-id"], m["_text"]) for m in marks] == [
            ("a", "one"),
            ("b", "three"),
        ]

    def test_overlapping_spans_pruned(self) -> None:
        html = "<p>the quick brown fox</p>"
        result = project_spans(html, [_span(4, 15, "a"), _span(10, 19, "b")])

        marks = _find_marks(result)
        assert [m["data-highlight-id"] for m in marks] == ["a"]

    def test_attributes_outside_text_untouched(self) -> None:
        html = '<p class="lead" id="p1">some <a href="/x?a=1&amp;b=2">link</a></p>'
        result = project_spans(html, [_span(0, 4, "s")])

        tree = LexborHTMLParser(result)
        p = tree.css_first("p")
        assert p.attributes["class"] == "lead"
        assert p.attributes["id"] == "p1"
        assert tree.css_first("a").attributes["href"] == "/x?a=1&b=2"

    def test_entities_in_marked_text(self) -> None:
        html = "<p>Tom &amp; Jerry</p>"
        result = project_spans(html, [_span(4, 5, "amp")])

        marks = _find_marks(result)
        assert marks[0]["_text"] == "&"
        assert "&amp;</mark>" in result

    def test_markup_in_text_stays_text(self) -> None:
        html = "<p>a &lt;b&gt; tag</p>"
        result = project_spans(html, [_span(2, 5, "t")])

        assert _find_marks(result)[0]["_text"] == "<b>"
        assert LexborHTMLParser(result).css_first("mark b") is None

    def test_identifier_is_escaped(self) -> None:
        result = project_spans("<p>quote</p>", [_span(0, 5, 'say "hi"')])
        assert _find_marks(result)[0]["data-highlight-id"] == 'say "hi"'

    def test_already_marked_text_not_wrapped_again(self) -> None:
        html = (
            '<p>a <mark class="highlight highlight-blue" data-highlight-id="x">'
            "b</mark> c</p>"
        )
        result = project_spans(html, [_span(2, 3, "y")])

        marks = _find_marks(result)
        assert [m["data-highlight-id"] for m in marks] == ["x"]

    def test_script_text_not_wrapped(self) -> None:
        html = "<p>hi</p><script>var hi = 1;</script>"
        # "hivar hi = 1;": second "hi" lives in the script
        result = project_spans(html, [_span(6, 8, "s")])

        assert _find_marks(result) == []
        assert extract_plain_text(result) == "hivar hi = 1;"


# ---------------------------------------------------------------------------
# Marker helpers
# ---------------------------------------------------------------------------


class TestMarkerHelpers:
    def test_category_passthrough(self) -> None:
        assert marker_category("pink") == "pink"

    def test_category_sanitised(self) -> None:
        assert marker_category("light blue!") == "light-blue-"

    def test_selector(self) -> None:
        assert marker_selector("abc") == 'mark[data-highlight-id="abc"]'

    def test_selector_escapes_quotes(self) -> None:
        assert marker_selector('a"b') == 'mark[data-highlight-id="a\\"b"]'

    def test_selector_escapes_control_characters(self) -> None:
        assert marker_selector("a\nb") == 'mark[data-highlight-id="a\\a b"]'

    def test_selector_with_control_character_matches(self) -> None:
        result = project_spans("<p>quote</p>", [_span(0, 5, "a\nb")])

        tree = LexborHTMLParser(result)
        assert len(tree.css(marker_selector("a\nb"))) == 1

    def test_selector_finds_all_parts(self) -> None:
        html = "<p>alpha <b>bravo</b> charlie</p>"
        result = project_spans(html, [_span(0, 9, "multi"), _span(12, 19, "other")])

        tree = LexborHTMLParser(result)
        assert len(tree.css(marker_selector("multi"))) == 2
        assert len(tree.css(marker_selector("other"))) == 1


class TestStripHighlightMarkers:
    def test_strip_all(self) -> None:
        html = "<p>one two three</p>"
        marked = project_spans(html, [_span(0, 3, "a"), _span(8, 13, "b")])

        result = strip_highlight_markers(marked)

        assert _find_marks(result) == []
        assert extract_plain_text(result) == "one two three"

    def test_strip_one(self) -> None:
        html = "<p>one two three</p>"
        marked = project_spans(html, [_span(0, 3, "a"), _span(8, 13, "b")])

        result = strip_highlight_markers(marked, "a")

        assert [m["data-highlight-id"] for m in _find_marks(result)] == ["b"]

    def test_no_match_returns_input(self) -> None:
        html = "<p>plain</p>"
        assert strip_highlight_markers(html) == html
        assert strip_highlight_markers("") == ""

    def test_strip_id_with_newline(self) -> None:
        html = "<p>hello world</p>"
        marked = project_spans(html, [_span(0, 5, "keep"), _span(6, 11, "a\nb")])

        result = strip_highlight_markers(marked, "a\nb")

        assert [m["data-highlight-id"] for m in _find_marks(result)] == ["keep"]
        assert extract_plain_text(result) == "hello world"
