"""Access to the Obsidian vault a note lives in.

All file reads needed for theming happen here; the renderer and the CSS
synthesizer only ever see strings.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from md2print.errors import VaultError
from md2print.style_settings import StyleSettingsCss, synthesize_css
from md2print.value_store import ThemeVariant, load_value_store

logger = logging.getLogger(__name__)

CONFIG_DIR = ".obsidian"
STYLE_SETTINGS_DATA = Path("plugins") / "obsidian-style-settings" / "data.json"


@dataclass
class Appearance:
    """The parts of ``appearance.json`` used for printing."""

    css_theme: Optional[str] = None
    base_font_size: Optional[int] = None
    monospace_font_family: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Appearance:
        return cls(
            css_theme=data.get("cssTheme") or None,
            base_font_size=_font_size(data.get("baseFontSize")),
            monospace_font_family=data.get("monospaceFontFamily") or None,
        )


def _font_size(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


class Vault:
    """An Obsidian vault, identified by its ``.obsidian`` config folder."""

    def __init__(self, config_dir: Union[str, Path]) -> None:
        self.config_dir = Path(config_dir)

    def __repr__(self) -> str:
        return f"Vault({str(self.config_dir)!r})"

    @classmethod
    def of_file(cls, path: Union[str, Path]) -> Optional[Vault]:
        """Return the vault containing *path*, searching upward, or ``None``."""
        path = Path(path).resolve()
        for folder in path.parents:
            candidate = folder / CONFIG_DIR
            if candidate.is_dir():
                return cls(candidate)
        return None

    # -- configuration files ------------------------------------------------

    def appearance(self) -> Appearance:
        """Parse ``appearance.json``; a missing file means Obsidian defaults."""
        path = self.config_dir / "appearance.json"
        if not path.is_file():
            return Appearance()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise VaultError(f"Invalid {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise VaultError(f"Invalid {path}: expected a JSON object")
        return Appearance.from_dict(data)

    def theme_css(self) -> Optional[str]:
        """Return the active community theme's stylesheet, if any."""
        theme = self.appearance().css_theme
        if theme is None:
            return None
        path = self.config_dir / "themes" / theme / "theme.css"
        if not path.is_file():
            raise VaultError(f"Theme {theme!r} is active but {path} does not exist")
        return path.read_text(encoding="utf-8")

    @property
    def style_settings_path(self) -> Path:
        return self.config_dir / STYLE_SETTINGS_DATA

    def style_css(self, variant: ThemeVariant = ThemeVariant.LIGHT) -> Optional[StyleSettingsCss]:
        """Theme CSS, setting overrides and body classes for *variant*.

        Returns ``None`` when the vault uses the default theme.
        """
        theme_css = self.theme_css()
        if theme_css is None:
            logger.info("No community theme active in %s", self.config_dir)
            return None
        values = load_value_store(self.style_settings_path, variant)
        return synthesize_css(theme_css, values, variant)
