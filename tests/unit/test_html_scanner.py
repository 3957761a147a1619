"""Unit tests for the substring-scanning HTML primitives."""

from __future__ import annotations

from editorial_reviews.utils.html_scanner import (
    collapse_whitespace,
    decode_entities,
    extract_balanced_div,
    extract_script_content,
    first_tag_inner,
    iter_link_paths,
    iter_script_blocks,
    iter_tag_inner,
    strip_html_tags,
    text_after_marker,
)
from tests.conftest import page


class TestScriptBlocks:
    def test_yields_each_json_ld_block(self) -> None:
        html = page(
            '<script type="application/ld+json"> {"a": 1} </script>'
            '<p>between</p>'
            '<script type="application/ld+json">{"b": 2}</script>'
        )
        assert list(iter_script_blocks(html)) == ['{"a": 1}', '{"b": 2}']

    def test_unterminated_block_is_ignored(self) -> None:
        html = '<script type="application/ld+json">{"a": 1}' + "x" * 100
        assert list(iter_script_blocks(html)) == []

    def test_extract_script_content_by_marker(self) -> None:
        html = page(
            "<script>var a = 1;</script>"
            '<script id="state">window.__PRELOADED_STATE__ = {"x": 1};</script>'
        )
        content = extract_script_content(html, "__PRELOADED_STATE__")
        assert content == 'window.__PRELOADED_STATE__ = {"x": 1};'

    def test_extract_script_content_missing(self) -> None:
        assert extract_script_content(page("<script>var a;</script>"), "nope") is None


class TestLinksAndTags:
    def test_iter_link_paths_returns_value_and_offset(self) -> None:
        html = page('<a href="/album/one-mw1">One</a><a href="/album/two-mw2">Two</a>')
        found = list(iter_link_paths(html, "/album/"))
        assert [value for value, _ in found] == ["/album/one-mw1", "/album/two-mw2"]
        _, end = found[0]
        assert html[end:].startswith('">One')

    def test_scan_stops_when_tail_is_short(self) -> None:
        # After the first link fewer than 50 characters remain.
        html = '<a href="/p/a">A</a><a href="/p/b">B</a>'
        assert [value for value, _ in iter_link_paths(html, "/p/")] == ["/p/a"]

    def test_full_scan_reaches_links_near_the_end(self) -> None:
        html = '<a href="/p/a">A</a><a href="/p/b">B</a>'
        found = iter_link_paths(html, "/p/", stop_near_end=False)
        assert [value for value, _ in found] == ["/p/a", "/p/b"]

    def test_iter_link_paths_ignores_other_prefixes(self) -> None:
        html = page('<a href="/artist/x">X</a>')
        assert list(iter_link_paths(html, "/album/")) == []

    def test_iter_tag_inner(self) -> None:
        html = page("<h2>One</h2><h2>Two</h2>")
        assert list(iter_tag_inner(html, "<h2>", "</h2>")) == ["One", "Two"]

    def test_first_tag_inner(self) -> None:
        assert first_tag_inner("<p>a</p><p>b</p>", "<p>", "</p>") == "a"
        assert first_tag_inner("<p>open", "<p>", "</p>") is None

    def test_text_after_marker_stops_at_tag(self) -> None:
        assert text_after_marker("<p>Words by Jane Doe</p>", "Words by ") == "Jane Doe"

    def test_text_after_marker_stops_at_newline(self) -> None:
        assert text_after_marker("Words by Jane\nnext", "Words by ") == "Jane"

    def test_text_after_marker_empty_is_none(self) -> None:
        assert text_after_marker("Words by <b>x</b>", "Words by ") is None


class TestBalancedDiv:
    def test_nested_divs_are_balanced(self) -> None:
        html = (
            '<div class="body"><p>a</p><div class="inner"><p>b</p></div>'
            "<p>c</p></div><div>after</div>"
        )
        inner = extract_balanced_div(html, 'class="body"')
        assert inner == '<p>a</p><div class="inner"><p>b</p></div><p>c</p>'

    def test_missing_marker(self) -> None:
        assert extract_balanced_div("<div>x</div>", "nope") is None

    def test_unclosed_container(self) -> None:
        assert extract_balanced_div('<div class="body"><div>x</div>', 'class="body"') is None


class TestTextCleanup:
    def test_strip_html_tags(self) -> None:
        assert strip_html_tags('<p class="x">Hello <b>world</b></p>') == "Hello world"

    def test_decode_entities(self) -> None:
        text = "Tom &amp; Jerry &lt;3 &quot;hi&quot; it&#39;s &#039;x&#039; &ndash; &mdash;"
        assert decode_entities(text) == "Tom & Jerry <3 \"hi\" it's 'x' – —"

    def test_decode_is_single_pass(self) -> None:
        assert decode_entities("&amp;lt;") == "&lt;"

    def test_unknown_entity_left_alone(self) -> None:
        assert decode_entities("&hellip;") == "&hellip;"

    def test_collapse_whitespace(self) -> None:
        assert collapse_whitespace("  a \n\t b  ") == "a b"
