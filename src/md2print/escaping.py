"""HTML escaping shared by the renderer and the front matter formatter."""

from __future__ import annotations

_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "&": "&amp;",
})


def escape_html(s: str) -> str:
    """Escape ``<``, ``>``, ``"`` and ``&``; everything else is kept as is."""
    return s.translate(_ESCAPES)
