"""Markdown parser that produces the document tree for HTML rendering.

Uses mistune v3 to parse Markdown and converts the token stream into
a normalised tree of :class:`ASTNode` objects.  Front matter is cut off
the top of the note before mistune sees the text, so that it survives as
a single :attr:`NodeType.FRONTMATTER` node holding the raw block.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import mistune
from mistune.util import unikey


# ---------------------------------------------------------------------------
# AST node definitions
# ---------------------------------------------------------------------------

class NodeType(Enum):
    DOCUMENT = "document"
    FRONTMATTER = "frontmatter"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    INLINE_CODE = "inline_code"
    CODE_BLOCK = "code_block"
    INLINE_MATH = "inline_math"
    BLOCK_MATH = "block_math"
    INLINE_HTML = "inline_html"
    BLOCK_HTML = "block_html"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "horizontal_rule"
    LINK = "link"
    IMAGE = "image"
    FOOTNOTE_REF = "footnote_ref"
    FOOTNOTE_DEF = "footnote_def"
    LINE_BREAK = "line_break"
    # Constructs the renderer refuses; see md2print.errors.
    DEFINITION = "definition"
    LINK_REFERENCE = "link_reference"
    IMAGE_REFERENCE = "image_reference"
    MDX_ESM = "mdx_esm"
    MDX_JSX_FLOW = "mdx_jsx_flow"
    MDX_JSX_TEXT = "mdx_jsx_text"
    MDX_FLOW_EXPRESSION = "mdx_flow_expression"
    MDX_TEXT_EXPRESSION = "mdx_text_expression"


@dataclass
class ASTNode:
    type: NodeType
    children: list[ASTNode] = field(default_factory=list)
    text: str = ""
    # Heading
    level: int = 0
    # Code block
    language: str = ""
    # Front matter: "yaml" or "toml"
    syntax: str = ""
    # Link / Image
    url: str = ""
    title: str = ""
    alt: str = ""
    # List
    ordered: bool = False
    start: int = 1
    # List item: None for a plain item, True/False for a task item
    checked: Optional[bool] = None
    # Footnote
    footnote_id: str = ""
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------

_FENCES = {"---": "yaml", "+++": "toml"}


def split_frontmatter(content: str) -> tuple[Optional[ASTNode], str]:
    """Cut a leading ``---`` (YAML) or ``+++`` (TOML) block off *content*.

    Returns the front matter node (``None`` if there is none) and the
    remaining Markdown text.
    """
    lines = content.splitlines(keepends=True)
    if not lines:
        return None, content

    fence = lines[0].rstrip("\r\n")
    syntax = _FENCES.get(fence)
    if syntax is None:
        return None, content

    for i in range(1, len(lines)):
        if lines[i].rstrip("\r\n") == fence:
            raw = "".join(lines[1:i])
            node = ASTNode(type=NodeType.FRONTMATTER, text=raw, syntax=syntax)
            return node, "".join(lines[i + 1:])

    return None, content


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class MarkdownParser:
    """Parse Markdown text into an :class:`ASTNode` tree."""

    def __init__(self) -> None:
        self._md = mistune.create_markdown(
            escape=False,
            renderer=None,  # AST mode
            plugins=["table", "strikethrough", "footnotes", "task_lists", "math"],
        )
        # Normalised footnote key -> key as first written in the note
        self._footnote_keys: dict[str, str] = {}

    # -- public API ---------------------------------------------------------

    def parse(self, markdown_text: str) -> ASTNode:
        """Return a *DOCUMENT* ``ASTNode`` for *markdown_text*."""
        frontmatter, body = split_frontmatter(markdown_text)
        self._footnote_keys = _footnote_spellings(body)

        tokens, state = self._md.parse(body)
        children = self._convert_tokens(tokens)

        if frontmatter is not None:
            children.insert(0, frontmatter)

        # Link reference definitions never show up in the token stream;
        # mistune keeps them in the parser environment.
        ref_links = state.env.get("ref_links", {}) if state is not None else {}
        for key, ref in ref_links.items():
            children.append(ASTNode(
                type=NodeType.DEFINITION,
                label=ref.get("label", key),
                url=ref.get("url", ""),
                title=ref.get("title") or "",
            ))

        return ASTNode(type=NodeType.DOCUMENT, children=children)

    # -- token conversion ---------------------------------------------------

    def _convert_tokens(self, tokens: list[dict[str, Any]]) -> list[ASTNode]:
        nodes: list[ASTNode] = []
        for tok in tokens:
            ttype = tok.get("type", "")
            # Flatten footnotes container into individual definitions
            if ttype == "footnotes":
                for child in tok.get("children", []):
                    if child.get("type") == "footnote_item":
                        nodes.append(self._handle_footnote_item(child))
                continue
            node = self._convert_token(tok)
            if node is not None:
                nodes.append(node)
        return _merge_text(nodes)

    def _convert_token(self, tok: dict[str, Any]) -> Optional[ASTNode]:
        ttype = tok.get("type", "")
        handler = getattr(self, f"_handle_{ttype}", None)
        if handler:
            return handler(tok)
        # Fallback: treat unknown tokens as plain text if they carry text.
        raw = tok.get("raw", tok.get("text", ""))
        if raw:
            return ASTNode(type=NodeType.TEXT, text=str(raw))
        return None

    def _convert_children(self, tok: dict[str, Any]) -> list[ASTNode]:
        children = tok.get("children")
        if children is None:
            children = tok.get("text", "")
        if isinstance(children, str):
            return [ASTNode(type=NodeType.TEXT, text=children)] if children else []
        if isinstance(children, list):
            return self._convert_tokens(children)
        return []

    # -- block handlers -----------------------------------------------------

    def _handle_heading(self, tok: dict) -> ASTNode:
        return ASTNode(
            type=NodeType.HEADING,
            level=tok.get("attrs", {}).get("level", tok.get("level", 1)),
            children=self._convert_children(tok),
        )

    def _handle_paragraph(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.PARAGRAPH, children=self._convert_children(tok))

    def _handle_block_text(self, tok: dict) -> ASTNode:
        """Block text inside tight list items."""
        return self._handle_paragraph(tok)

    def _handle_thematic_break(self, _tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.HORIZONTAL_RULE)

    def _handle_block_code(self, tok: dict) -> ASTNode:
        """Fenced / indented code block."""
        attrs = tok.get("attrs", {})
        text = str(tok.get("raw", tok.get("text", "")))
        if text.endswith("\n"):
            text = text[:-1]
        info = (attrs.get("info", tok.get("info", "")) or "").strip()
        return ASTNode(
            type=NodeType.CODE_BLOCK,
            text=text,
            language=info.split()[0] if info else "",
        )

    def _handle_block_math(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.BLOCK_MATH, text=str(tok.get("raw", "")).strip())

    def _handle_block_html(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.BLOCK_HTML, text=str(tok.get("raw", "")))

    def _handle_block_quote(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.BLOCKQUOTE, children=self._convert_children(tok))

    def _handle_blank_line(self, _tok: dict) -> Optional[ASTNode]:
        return None

    # -- inline handlers ----------------------------------------------------

    def _handle_text(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.TEXT, text=str(tok.get("raw", tok.get("text", ""))))

    def _handle_strong(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.BOLD, children=self._convert_children(tok))

    def _handle_emphasis(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.ITALIC, children=self._convert_children(tok))

    def _handle_strikethrough(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.STRIKETHROUGH, children=self._convert_children(tok))

    def _handle_codespan(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.INLINE_CODE, text=str(tok.get("raw", tok.get("text", ""))))

    def _handle_inline_math(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.INLINE_MATH, text=str(tok.get("raw", "")))

    def _handle_inline_html(self, tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.INLINE_HTML, text=str(tok.get("raw", "")))

    def _handle_linebreak(self, _tok: dict) -> ASTNode:
        return ASTNode(type=NodeType.LINE_BREAK)

    def _handle_softbreak(self, _tok: dict) -> ASTNode:
        # A soft line ending stays part of the surrounding text.
        return ASTNode(type=NodeType.TEXT, text="\n")

    # -- link / image -------------------------------------------------------

    def _handle_link(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        return ASTNode(
            type=NodeType.LINK_REFERENCE if "ref" in tok else NodeType.LINK,
            url=attrs.get("url", tok.get("link", "")),
            title=attrs.get("title", "") or "",
            label=tok.get("label"),
            children=self._convert_children(tok),
        )

    def _handle_image(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        alt = attrs.get("alt", tok.get("alt", ""))
        children_raw = tok.get("children")
        if not alt and children_raw:
            alt = self._extract_text(children_raw)
        return ASTNode(
            type=NodeType.IMAGE_REFERENCE if "ref" in tok else NodeType.IMAGE,
            url=attrs.get("url", tok.get("src", "")),
            title=attrs.get("title", "") or "",
            alt=alt,
            label=tok.get("label"),
        )

    # -- lists --------------------------------------------------------------

    def _handle_list(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        return ASTNode(
            type=NodeType.LIST,
            ordered=bool(attrs.get("ordered", False)),
            start=1 if attrs.get("start") is None else attrs["start"],
            children=self._convert_children(tok),
        )

    def _handle_list_item(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        checked = bool(attrs["checked"]) if "checked" in attrs else None
        return ASTNode(
            type=NodeType.LIST_ITEM,
            checked=checked,
            children=self._convert_children(tok),
        )

    def _handle_task_list_item(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        return ASTNode(
            type=NodeType.LIST_ITEM,
            checked=bool(attrs.get("checked", False)),
            children=self._convert_children(tok),
        )

    # -- table --------------------------------------------------------------

    def _handle_table(self, tok: dict) -> ASTNode:
        rows: list[ASTNode] = []
        for child in tok.get("children", []):
            ctype = child.get("type", "")
            if ctype in ("table_head", "table_body"):
                rows.extend(self._handle_table_section(child))
            elif ctype == "table_row":
                rows.append(self._make_table_row(child.get("children", [])))
        return ASTNode(type=NodeType.TABLE, children=rows)

    def _handle_table_section(self, tok: dict) -> list[ASTNode]:
        children = tok.get("children", [])
        if not children:
            return []

        # table_head has table_cell children directly (one implicit row)
        # table_body has table_row children, each with table_cell children
        if children[0].get("type", "") == "table_cell":
            return [self._make_table_row(children)]
        return [self._make_table_row(child.get("children", [])) for child in children]

    def _make_table_row(self, cell_tokens: list[dict]) -> ASTNode:
        cells = [
            ASTNode(type=NodeType.TABLE_CELL, children=self._convert_children(cell_tok))
            for cell_tok in cell_tokens
        ]
        return ASTNode(type=NodeType.TABLE_ROW, children=cells)

    # -- footnotes ----------------------------------------------------------

    def _footnote_key(self, key: str) -> tuple[str, str]:
        """Return ``(anchor id, label)`` for a key normalised by mistune."""
        written = self._footnote_keys.get(key, key)
        return written.lower(), written

    def _handle_footnote_ref(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        key = tok.get("raw", "") or str(attrs.get("label", attrs.get("key", "")))
        footnote_id, label = self._footnote_key(str(key))
        return ASTNode(type=NodeType.FOOTNOTE_REF, footnote_id=footnote_id, label=label)

    def _handle_footnote_item(self, tok: dict) -> ASTNode:
        attrs = tok.get("attrs", {})
        key = str(attrs.get("key", attrs.get("label", "")))
        footnote_id, _ = self._footnote_key(key)
        return ASTNode(
            type=NodeType.FOOTNOTE_DEF,
            footnote_id=footnote_id,
            children=self._convert_children(tok),
        )

    # -- helpers ------------------------------------------------------------

    def _extract_text(self, children: Any) -> str:
        if isinstance(children, str):
            return children
        if isinstance(children, list):
            parts: list[str] = []
            for c in children:
                if isinstance(c, dict):
                    parts.append(c.get("raw", c.get("text", "")))
                elif isinstance(c, str):
                    parts.append(c)
            return "".join(parts)
        return ""


_FOOTNOTE_KEY_RE = re.compile(r"\[\^([^\]]+)\]")


def _footnote_spellings(text: str) -> dict[str, str]:
    """Map mistune's upper-cased footnote keys back to their first spelling."""
    spellings: dict[str, str] = {}
    for m in _FOOTNOTE_KEY_RE.finditer(text):
        spellings.setdefault(unikey(m.group(1)), m.group(1))
    return spellings


def _merge_text(nodes: list[ASTNode]) -> list[ASTNode]:
    """Join runs of adjacent TEXT nodes into one node each."""
    merged: list[ASTNode] = []
    for node in nodes:
        if (
            node.type == NodeType.TEXT
            and merged
            and merged[-1].type == NodeType.TEXT
            and not merged[-1].children
        ):
            merged[-1].text += node.text
            continue
        merged.append(node)
    return merged
