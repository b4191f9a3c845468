"""Tests for HTML escaping."""

from __future__ import annotations

import html

import pytest

from md2print.escaping import escape_html


class TestEscapeHtml:
    def test_four_characters(self) -> None:
        assert escape_html('<a href="x">&</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;"

    def test_other_characters_untouched(self) -> None:
        s = "it's ü ↩ \t\n"
        assert escape_html(s) == s

    def test_existing_entities_escaped_again(self) -> None:
        assert escape_html("&amp;") == "&amp;amp;"

    @pytest.mark.parametrize("s", ["", "plain", "a < b > c", '"&"', "&lt;", "<<&&>>"])
    def test_unescape_restores(self, s: str) -> None:
        assert html.unescape(escape_html(s)) == s
