"""High-level Markdown-to-print-HTML conversion orchestrator.

Ties together the parser, renderer, vault theming and page template into a
single public API for converting Markdown text or note files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from md2print.page import PageOptions, render_page
from md2print.parser import MarkdownParser
from md2print.renderer import HtmlRenderer
from md2print.style_settings import StyleSettingsCss, synthesize_css
from md2print.vault import Vault

logger = logging.getLogger(__name__)


class Converter:
    """Convert Markdown notes to print-ready HTML.

    Usage::

        converter = Converter()
        converter.convert_file("vault/Note.md", "Note.html")

        # or from string, without vault theming
        html = converter.convert_text("# Hello")
    """

    def __init__(self, options: Optional[PageOptions] = None) -> None:
        self.options = options or PageOptions()
        self.parser = MarkdownParser()
        self.renderer = HtmlRenderer()

    def style_for(self, vault: Optional[Vault]) -> StyleSettingsCss:
        """Theme CSS for *vault*, or the bare defaults without a theme."""
        style = vault.style_css(self.options.variant) if vault is not None else None
        if style is None:
            style = synthesize_css("", {}, self.options.variant)
        return style

    def convert_text(
        self,
        markdown_text: str,
        *,
        vault: Optional[Vault] = None,
        title: str = "",
    ) -> str:
        """Convert Markdown text to a complete HTML page.

        Args:
            markdown_text: Markdown source string.
            vault: Vault whose theme and style settings to apply.
            title: Page title.

        Returns:
            The HTML document.

        Raises:
            UnsupportedConstructError: The note uses reference-style links
                or MDX.
        """
        doc = self.parser.parse(markdown_text)
        rendered = self.renderer.render(doc)
        options = self.options.resolve(vault.appearance() if vault is not None else None)
        return render_page(rendered, self.style_for(vault), options, title=title)

    def convert_file(
        self,
        input_path: str | Path,
        output_path: str | Path | None = None,
        *,
        encoding: str = "utf-8",
        use_vault: bool = True,
    ) -> str:
        """Read a note and return (and optionally write) the HTML page.

        Args:
            input_path: Path to the input ``.md`` note.
            output_path: Where to write the page; nothing is written if None.
            encoding: Text encoding of the source file.
            use_vault: Look for the enclosing vault and apply its theme.
        """
        input_path = Path(input_path)
        md_text = input_path.read_text(encoding=encoding)

        vault = Vault.of_file(input_path) if use_vault else None
        if use_vault and vault is None:
            logger.info("%s is not inside an Obsidian vault; using default styling", input_path)

        html = self.convert_text(md_text, vault=vault, title=input_path.stem)

        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html, encoding="utf-8")
        return html
