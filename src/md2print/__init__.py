"""md2print - render Obsidian notes to print-ready HTML."""

__version__ = "0.1.0"
