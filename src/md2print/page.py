"""Page options and the HTML page template.

Wraps the rendered note and the theme CSS into a standalone document laid
out for US Letter printing, with KaTeX loaded for math.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional

from md2print.escaping import escape_html
from md2print.renderer import RenderedDocument
from md2print.style_settings import StyleSettingsCss
from md2print.value_store import ThemeVariant
from md2print.vault import Appearance

DEFAULT_FONT_SIZE = 18
DEFAULT_MONO_FONT = "Fira Code Retina"


@dataclass
class PageOptions:
    """Print settings that are not part of the vault's theme.

    ``font_size`` and ``mono_font`` left at ``None`` are taken from the
    vault's appearance settings, or from the built-in defaults.
    """

    font_size: Optional[int] = None
    zoom_factor: float = 1.0
    mono_font: Optional[str] = None
    h1_weight: int = 800
    h2_weight: int = 800
    variant: ThemeVariant = ThemeVariant.LIGHT

    def derive(self, **overrides) -> PageOptions:
        """Return a copy with selected fields overridden.

        ``None`` values are ignored so unset command line flags keep the
        defaults.
        """
        clone = deepcopy(self)
        for k, v in overrides.items():
            if v is not None and hasattr(clone, k):
                setattr(clone, k, v)
        return clone

    def resolve(self, appearance: Optional[Appearance] = None) -> PageOptions:
        """Fill unset fonts from *appearance*, then from the defaults."""
        appearance = appearance or Appearance()
        return self.derive(
            font_size=self.font_size or appearance.base_font_size or DEFAULT_FONT_SIZE,
            mono_font=self.mono_font or appearance.monospace_font_family or DEFAULT_MONO_FONT,
        )


_PRINT_CSS = """
:root { overflow: unset; }
.markdown-preview-view { overflow: unset; }
body {
    overflow: unset;
    --file-margins: 0;
    --background-primary: #fff !important;
}
@page {
    margin: 0;
    margin-bottom: 0.65in;
    margin-top: 0.65in;
    padding: 0;
    size: 8.5in 11in;
}
@page:first { margin-top: 0 }
.non-meta-content {
    margin: 0;
    margin-left: 0.65in;
    margin-right: 0.65in;
    margin-top: 0.65in;
}
.properties ~ .non-meta-content { margin-top: var(--spacing-p); }
"""

_KATEX_HEAD = """\
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/katex@0.16.9/dist/katex.min.css" crossorigin="anonymous">
<script src="https://cdn.jsdelivr.net/npm/katex@0.16.9/dist/katex.min.js" crossorigin="anonymous"></script>"""

_FONTS_HEAD = """\
<style>
@font-face {
    font-family: 'LucideIcons';
    src: url(https://unpkg.com/lucide-static@latest/font/Lucide.ttf) format('truetype');
}
</style>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@100;200;300;400;500;600;700;800;900&display=block" rel="stylesheet">"""


def render_page(
    document: RenderedDocument,
    style: StyleSettingsCss,
    options: PageOptions,
    *,
    title: str = "",
) -> str:
    """Return the complete HTML page for one note."""
    options = options.resolve()
    variant_class = options.variant.classname
    weights = (
        f"body.{variant_class} {{ --h1-weight: {options.h1_weight};"
        f" --h2-weight: {options.h2_weight}; }}"
    )
    body_style = (
        f"--font-text-size: {options.font_size}px;"
        f" --zoom-factor: {options.zoom_factor};"
        f" --font-monospace-override: &quot;{escape_html(options.mono_font)}&quot;;"
    )

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8"/>
<title>{escape_html(title)}</title>
<style>
{style.theme_css}
</style>
<style>
{style.style_overrides}
</style>
<style>
{_PRINT_CSS}
{weights}
</style>
{_KATEX_HEAD}
{_FONTS_HEAD}
</head>
<body class="{escape_html(style.body_classes)}" style="{body_style}">
<div class="print">
<div class="markdown-rendered markdown-preview-view show-properties">
{document.to_html()}
</div>
</div>
</body>
</html>
"""
