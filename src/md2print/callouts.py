"""Callout blocks: blockquotes opening with a ``[!type] title`` marker line.

::

    > [!warning] Be careful
    > Stuff

renders as a titled box with the theme's warning icon instead of a plain
blockquote.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

from md2print.parser import ASTNode, NodeType

_MARKER_RE = re.compile(r"\[!([A-Za-z_-]+)\]([^\n]*)\n")

DEFAULT_ICON = "lucide-pencil"

_ICON_ALIASES = {
    "icon-clipboard-list": ("abstract", "summary", "tldr"),
    "icon-info": ("info",),
    "icon-check-circle-2": ("todo",),
    "icon-flame": ("important", "tip", "hint"),
    "icon-check": ("success", "check", "done"),
    "icon-help-circle": ("question", "help", "faq"),
    "icon-alert-triangle": ("warning", "caution", "attention"),
    "icon-x": ("failure", "fail", "missing"),
    "icon-zap": ("danger", "error"),
    "icon-bug": ("bug",),
    "icon-list": ("example",),
    "icon-quote": ("quote", "cite"),
}

CALLOUT_ICONS: dict[str, str] = {
    alias: icon
    for icon, aliases in _ICON_ALIASES.items()
    for alias in aliases
}


@dataclass(frozen=True)
class Callout:
    """Type and optional explicit title of one callout."""

    type: str
    title: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title if self.title else capitalize(self.type)

    @property
    def icon(self) -> str:
        return icon_for(self.type)


def capitalize(s: str) -> str:
    """Uppercase the first character and lowercase the rest."""
    return s[:1].upper() + s[1:].lower()


def icon_for(callout_type: str) -> str:
    """Return the icon class for *callout_type*, ignoring case."""
    return CALLOUT_ICONS.get(callout_type.lower(), DEFAULT_ICON)


def extract_callout(
    children: list[ASTNode],
) -> tuple[Optional[Callout], list[ASTNode]]:
    """Look for a callout marker at the start of a blockquote's children.

    The first child is followed down through first children until a TEXT
    node is reached.  If that text starts with a marker line, the marker
    line is cut off and the callout is returned together with a rewritten
    copy of *children*.  Otherwise ``(None, children)`` is returned and
    *children* is left alone.
    """
    if not children:
        return None, children

    first = children[0]

    if first.type == NodeType.TEXT:
        m = _MARKER_RE.match(first.text)
        if m is None:
            return None, children
        title = m.group(2).strip() or None
        stripped = replace(first, text=first.text[m.end():])
        return Callout(type=m.group(1), title=title), [stripped, *children[1:]]

    if not first.children:
        return None, children

    callout, inner = extract_callout(first.children)
    if callout is None:
        return None, children
    return callout, [replace(first, children=inner), *children[1:]]
