"""Tests for sketchsynth.core.normalizer — fence stripping and document shell."""

from __future__ import annotations

from sketchsynth.core.normalizer import is_html_document, normalize_html, strip_code_fences

FULL_DOC = "<!DOCTYPE html>\n<html>\n<body><p>hi</p></body>\n</html>"


class TestStripCodeFences:
    """Test strip_code_fences."""

    def test_html_fence(self):
        assert strip_code_fences("```html\n<p>x</p>\n```") == "<p>x</p>"

    def test_bare_fence(self):
        assert strip_code_fences("```\n<p>x</p>\n```") == "<p>x</p>"

    def test_other_language_tag(self):
        """Any language tag is removed with the fence."""
        assert strip_code_fences("```mermaid\nflowchart TD\n  A-->B\n```") == "flowchart TD\n  A-->B"

    def test_space_before_language_tag(self):
        """A space between the fence and its tag does not leave the tag behind."""
        assert strip_code_fences("``` html\n<p>x</p>\n```") == "<p>x</p>"

    def test_only_leading_fence(self):
        assert strip_code_fences("```html\n<p>x</p>") == "<p>x</p>"

    def test_only_trailing_fence(self):
        assert strip_code_fences("<p>x</p>\n```") == "<p>x</p>"

    def test_surrounding_whitespace(self):
        assert strip_code_fences("  \n```html\n<p>x</p>\n```\n  ") == "<p>x</p>"

    def test_no_fences_unchanged(self):
        assert strip_code_fences("<p>x</p>") == "<p>x</p>"


class TestNormalizeHtml:
    """Test normalize_html."""

    def test_fenced_document_not_rewrapped(self):
        """A fenced full document loses its fences and gains no shell."""
        result = normalize_html(f"```html\n{FULL_DOC}\n```")
        assert "```" not in result
        assert result == FULL_DOC
        assert result.count("<html") == 1

    def test_fragment_is_wrapped(self):
        """A bare fragment is placed inside a complete document."""
        result = normalize_html("<p>hi</p>")
        assert result.startswith("<!DOCTYPE html>")
        body = result.split("<body>", 1)[1].split("</body>", 1)[0]
        assert "<p>hi</p>" in body
        assert '<meta charset="UTF-8">' in result
        assert 'name="viewport"' in result
        assert "<title>Generated UI</title>" in result
        assert result.endswith("</html>")

    def test_html_tag_without_doctype_not_wrapped(self):
        doc = "<html><body>x</body></html>"
        assert normalize_html(doc) == doc

    def test_doctype_check_is_case_insensitive(self):
        doc = "<!doctype HTML><HTML><body>x</body></HTML>"
        assert normalize_html(doc) == doc

    def test_deterministic(self):
        raw = "```\n<div>card</div>\n```"
        assert normalize_html(raw) == normalize_html(raw)


class TestIsHtmlDocument:
    def test_detects_html_tag(self):
        assert is_html_document('<HTML lang="en">') is True

    def test_fragment(self):
        assert is_html_document("<section>x</section>") is False
