"""Integration tests for the Converter orchestrator."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from md2print.converter import Converter
from md2print.errors import UnsupportedConstructError, VaultError
from md2print.page import PageOptions
from md2print.value_store import ThemeVariant
from md2print.vault import Appearance

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_MD = FIXTURE_DIR / "sample.md"
VAULT_DIR = FIXTURE_DIR / "vault"


class TestConverterInit:
    """Test Converter construction."""

    def test_default_options(self):
        c = Converter()
        assert c.options == PageOptions()

    def test_custom_options(self):
        c = Converter(PageOptions(font_size=12, variant=ThemeVariant.DARK))
        assert c.options.font_size == 12
        assert c.options.variant is ThemeVariant.DARK


class TestConvertText:
    """Test convert_text produces a complete page."""

    def test_simple_heading(self):
        html = Converter().convert_text("# Hello World")
        assert html.startswith("<!DOCTYPE html>")
        assert "<h1>Hello World</h1>" in html

    def test_page_structure(self):
        html = Converter().convert_text("text", title="My <Note>")
        assert "<title>My &lt;Note&gt;</title>" in html
        assert '<div class="markdown-rendered markdown-preview-view show-properties">' in html
        assert '<div class="non-meta-content"><p>text</p></div>' in html
        assert "katex.min.js" in html

    def test_default_body_classes(self):
        html = Converter().convert_text("x")
        assert '<body class="theme-light mod-linux' in html

    def test_options_in_page(self):
        options = PageOptions(font_size=14, zoom_factor=1.5, mono_font="Iosevka", h1_weight=600)
        html = Converter(options).convert_text("x")
        assert "--font-text-size: 14px;" in html
        assert "--zoom-factor: 1.5;" in html
        assert "--font-monospace-override: &quot;Iosevka&quot;;" in html
        assert "--h1-weight: 600;" in html

    def test_dark_variant(self):
        html = Converter(PageOptions(variant=ThemeVariant.DARK)).convert_text("x")
        assert '<body class="theme-dark' in html
        assert "body.theme-dark { --h1-weight" in html

    def test_unsupported_construct(self):
        with pytest.raises(UnsupportedConstructError):
            Converter().convert_text("[a][b]\n\n[b]: https://example.com\n")

    def test_sample_fixture(self):
        html = Converter().convert_text(SAMPLE_MD.read_text(encoding="utf-8"))
        assert '<div class="properties">' in html
        assert '<section class="footnotes">' in html


class TestConvertFile:
    """Test file conversion with and without a vault."""

    def test_writes_output(self, tmp_path):
        out = tmp_path / "sub" / "out.html"
        html = Converter().convert_file(SAMPLE_MD, out)
        assert out.read_text(encoding="utf-8") == html
        assert "<title>sample</title>" in html

    def test_no_output_path(self, tmp_path):
        note = tmp_path / "n.md"
        note.write_text("# N", encoding="utf-8")
        html = Converter().convert_file(note)
        assert "<h1>N</h1>" in html
        assert not (tmp_path / "n.html").exists()

    def test_vault_theme_applied(self):
        html = Converter().convert_file(VAULT_DIR / "notes" / "Note.md")
        assert "--line-width:42rem;" in html
        assert "theme-light card-layout serif-headings" in html
        assert '<div class="callout" data-callout="info">' in html

    def test_vault_fonts_used(self):
        html = Converter().convert_file(VAULT_DIR / "notes" / "Note.md")
        assert "--font-text-size: 16px;" in html
        assert "--font-monospace-override: &quot;Fira Code&quot;;" in html

    def test_options_override_vault_fonts(self):
        options = PageOptions(font_size=11, mono_font="Iosevka")
        html = Converter(options).convert_file(VAULT_DIR / "notes" / "Note.md")
        assert "--font-text-size: 11px;" in html
        assert "&quot;Iosevka&quot;" in html

    def test_no_vault_flag(self):
        html = Converter().convert_file(VAULT_DIR / "notes" / "Note.md", use_vault=False)
        assert "--line-width" not in html
        assert "body.theme-light {  }" in html
        assert "--font-text-size: 18px;" in html
        assert "&quot;Fira Code Retina&quot;" in html

    def test_broken_vault(self, tmp_path):
        shutil.copytree(VAULT_DIR, tmp_path / "vault")
        appearance = tmp_path / "vault" / ".obsidian" / "appearance.json"
        appearance.write_text("{broken", encoding="utf-8")
        with pytest.raises(VaultError):
            Converter().convert_file(tmp_path / "vault" / "notes" / "Note.md")


class TestPageOptions:
    """Test resolving page options against the vault appearance."""

    def test_defaults(self):
        options = PageOptions().resolve()
        assert options.font_size == 18
        assert options.mono_font == "Fira Code Retina"

    def test_appearance_fills_unset_fonts(self):
        appearance = Appearance(base_font_size=16, monospace_font_family="Fira Code")
        options = PageOptions(font_size=12).resolve(appearance)
        assert options.font_size == 12
        assert options.mono_font == "Fira Code"

    def test_derive_ignores_none(self):
        options = PageOptions(zoom_factor=2.0).derive(zoom_factor=None, h1_weight=600)
        assert options.zoom_factor == 2.0
        assert options.h1_weight == 600
