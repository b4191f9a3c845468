"""Tests for vault discovery and theme loading."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from md2print.errors import VaultError
from md2print.value_store import ThemeVariant
from md2print.vault import Appearance, Vault

FIXTURE_DIR = Path(__file__).parent / "fixtures"
VAULT_DIR = FIXTURE_DIR / "vault"


@pytest.fixture
def vault_copy(tmp_path):
    """A writable copy of the fixture vault."""
    target = tmp_path / "vault"
    shutil.copytree(VAULT_DIR, target)
    return target


class TestDiscovery:
    """Test finding the vault a note belongs to."""

    def test_of_file(self):
        vault = Vault.of_file(VAULT_DIR / "notes" / "Note.md")
        assert vault is not None
        assert vault.config_dir == (VAULT_DIR / ".obsidian").resolve()

    def test_outside_vault(self, tmp_path):
        note = tmp_path / "loose.md"
        note.write_text("# Loose", encoding="utf-8")
        assert Vault.of_file(note) is None


class TestAppearance:
    """Test reading appearance.json."""

    def test_fixture(self):
        appearance = Vault(VAULT_DIR / ".obsidian").appearance()
        assert appearance.css_theme == "Sample"
        assert appearance.base_font_size == 16
        assert appearance.monospace_font_family == "Fira Code"

    def test_missing_file_gives_defaults(self, tmp_path):
        assert Vault(tmp_path).appearance() == Appearance()

    def test_font_size_must_be_a_number(self):
        assert Appearance.from_dict({"baseFontSize": "big"}).base_font_size is None
        assert Appearance.from_dict({"baseFontSize": 15}).base_font_size == 15

    def test_empty_theme_name_is_default_theme(self):
        assert Appearance.from_dict({"cssTheme": ""}).css_theme is None

    def test_invalid_json(self, tmp_path):
        (tmp_path / "appearance.json").write_text("{oops", encoding="utf-8")
        with pytest.raises(VaultError):
            Vault(tmp_path).appearance()

    def test_not_an_object(self, tmp_path):
        (tmp_path / "appearance.json").write_text("[]", encoding="utf-8")
        with pytest.raises(VaultError):
            Vault(tmp_path).appearance()


class TestThemeCss:
    """Test loading the active theme and its settings."""

    def test_theme_css(self):
        css = Vault(VAULT_DIR / ".obsidian").theme_css()
        assert css is not None
        assert "@settings" in css

    def test_no_theme(self, tmp_path):
        (tmp_path / "appearance.json").write_text("{}", encoding="utf-8")
        vault = Vault(tmp_path)
        assert vault.theme_css() is None
        assert vault.style_css() is None

    def test_missing_theme_file(self, vault_copy):
        appearance = vault_copy / ".obsidian" / "appearance.json"
        appearance.write_text(json.dumps({"cssTheme": "Gone"}), encoding="utf-8")
        with pytest.raises(VaultError, match="Gone"):
            Vault(vault_copy / ".obsidian").theme_css()

    def test_style_css_light(self):
        style = Vault(VAULT_DIR / ".obsidian").style_css(ThemeVariant.LIGHT)
        assert style is not None
        assert "--accent-r:51;" in style.style_overrides
        assert "--line-width:42rem;" in style.style_overrides
        assert style.body_classes.startswith("theme-light card-layout serif-headings")

    def test_style_css_dark(self):
        style = Vault(VAULT_DIR / ".obsidian").style_css(ThemeVariant.DARK)
        assert style is not None
        assert style.style_overrides.startswith("body.theme-dark {")
        assert "--accent-r:255;--accent-g:0;--accent-b:0;" in style.style_overrides

    def test_without_settings_data(self, vault_copy):
        config = vault_copy / ".obsidian"
        (config / "plugins" / "obsidian-style-settings" / "data.json").unlink()
        style = Vault(config).style_css()
        assert style is not None
        assert style.style_overrides == "body.theme-light {  }"
