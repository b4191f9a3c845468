"""HTML renderer - converts the document tree to print-ready HTML.

This module walks an AST tree (produced by :mod:`md2print.parser`) depth
first and builds the HTML body of the note.  Footnote definitions and
front matter do not render in place: they are collected in a
:class:`RenderState` and handed back separately, so the page template can
put the properties block above the note and the footnotes below it.

Reference-style links and MDX nodes are refused with
:class:`~md2print.errors.UnsupportedConstructError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from md2print.callouts import Callout, extract_callout
from md2print.errors import UnsupportedConstructError
from md2print.escaping import escape_html
from md2print.frontmatter import format_frontmatter
from md2print.parser import ASTNode, NodeType

logger = logging.getLogger(__name__)

FN_PREFIX = "fn-link-"
FN_REFERENCE_PREFIX = "fn-ref-"

_KATEX_SCRIPT = (
    "<script>var target = document.currentScript.previousElementSibling;"
    " katex.render(target.textContent, target, "
    "{{throwOnError: false, displayMode: {display}}});</script>"
)

_REFERENCE_KINDS = {
    NodeType.DEFINITION,
    NodeType.LINK_REFERENCE,
    NodeType.IMAGE_REFERENCE,
}

_MDX_KINDS = {
    NodeType.MDX_ESM,
    NodeType.MDX_JSX_FLOW,
    NodeType.MDX_JSX_TEXT,
    NodeType.MDX_FLOW_EXPRESSION,
    NodeType.MDX_TEXT_EXPRESSION,
}


# ---------------------------------------------------------------------------
# Render state and result
# ---------------------------------------------------------------------------

@dataclass
class RenderState:
    """Side buffers filled during one :meth:`HtmlRenderer.render` call."""

    footnotes: list[str] = field(default_factory=list)
    frontmatter: list[str] = field(default_factory=list)

    def footnote_html(self) -> str:
        if not self.footnotes:
            return ""
        return f'<section class="footnotes"><hr><ol>{"".join(self.footnotes)}</ol></section>'

    def frontmatter_html(self) -> str:
        return "".join(self.frontmatter)


@dataclass
class RenderedDocument:
    """The three pieces of markup produced for one note."""

    body: str
    footnotes: str = ""
    frontmatter: str = ""

    def to_html(self) -> str:
        """Join the pieces the way the print stylesheet expects them."""
        return (
            f'{self.frontmatter}<div class="non-meta-content">'
            f"{self.body}{self.footnotes}</div>"
        )


# ---------------------------------------------------------------------------
# HtmlRenderer
# ---------------------------------------------------------------------------

class HtmlRenderer:
    """Render an :class:`~md2print.parser.ASTNode` document tree to HTML."""

    # ======================================================================
    # Public API
    # ======================================================================

    def render(self, doc: ASTNode) -> RenderedDocument:
        """Render *doc* and return body, footnote and front matter markup."""
        state = RenderState()
        body = self._render_node(doc, state)
        return RenderedDocument(
            body=body,
            footnotes=state.footnote_html(),
            frontmatter=state.frontmatter_html(),
        )

    def render_to_string(self, doc: ASTNode) -> str:
        """Render *doc* into a single HTML fragment."""
        return self.render(doc).to_html()

    # ======================================================================
    # Node dispatch
    # ======================================================================

    def _render_node(self, node: ASTNode, state: RenderState) -> str:
        if node.type in _REFERENCE_KINDS:
            raise UnsupportedConstructError(
                node.type.value,
                "references and definitions are only supported for footnotes",
            )
        if node.type in _MDX_KINDS:
            raise UnsupportedConstructError(node.type.value, "MDX is not supported")

        handler = getattr(self, f"_render_{node.type.value}")
        return handler(node, state)

    def _render_children(self, node: ASTNode, state: RenderState) -> str:
        return "".join(self._render_node(child, state) for child in node.children)

    def _wrap(self, tag: str, node: ASTNode, state: RenderState) -> str:
        return f"<{tag}>{self._render_children(node, state)}</{tag}>"

    # ======================================================================
    # Per-NodeType renderers
    # ======================================================================

    def _render_document(self, node: ASTNode, state: RenderState) -> str:
        return self._render_children(node, state)

    def _render_frontmatter(self, node: ASTNode, state: RenderState) -> str:
        if node.syntax == "toml":
            logger.warning("TOML front matter is not supported; showing it verbatim")
            return f'<pre><code class="language-toml">{escape_html(node.text)}</code></pre>'
        state.frontmatter.append(format_frontmatter(node.text))
        return ""

    def _render_heading(self, node: ASTNode, state: RenderState) -> str:
        level = max(1, min(6, node.level))
        return self._wrap(f"h{level}", node, state)

    def _render_paragraph(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("p", node, state)

    def _render_text(self, node: ASTNode, _state: RenderState) -> str:
        return escape_html(node.text)

    def _render_bold(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("strong", node, state)

    def _render_italic(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("em", node, state)

    def _render_strikethrough(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("del", node, state)

    def _render_inline_code(self, node: ASTNode, _state: RenderState) -> str:
        return f"<code>{escape_html(node.text)}</code>"

    def _render_code_block(self, node: ASTNode, _state: RenderState) -> str:
        classname = f"language-{node.language}" if node.language else ""
        return f'<pre><code class="{classname}">{escape_html(node.text)}</code></pre>'

    def _render_inline_math(self, node: ASTNode, _state: RenderState) -> str:
        script = _KATEX_SCRIPT.format(display="false")
        return f"<span>{escape_html(node.text)}</span>{script}"

    def _render_block_math(self, node: ASTNode, _state: RenderState) -> str:
        script = _KATEX_SCRIPT.format(display="true")
        return f"<div>{escape_html(node.text)}</div>{script}"

    def _render_inline_html(self, node: ASTNode, _state: RenderState) -> str:
        return node.text

    def _render_block_html(self, node: ASTNode, _state: RenderState) -> str:
        return node.text

    def _render_list(self, node: ASTNode, state: RenderState) -> str:
        tag = "ol" if node.ordered else "ul"
        return f'<{tag} start="{node.start}">{self._render_children(node, state)}</{tag}>'

    def _render_list_item(self, node: ASTNode, state: RenderState) -> str:
        if node.checked is True:
            check = '<input type="checkbox" checked>'
        elif node.checked is False:
            check = '<input type="checkbox">'
        else:
            check = ""
        return f"<li>{check}{self._render_children(node, state)}</li>"

    def _render_table(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("table", node, state)

    def _render_table_row(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("tr", node, state)

    def _render_table_cell(self, node: ASTNode, state: RenderState) -> str:
        return self._wrap("td", node, state)

    def _render_blockquote(self, node: ASTNode, state: RenderState) -> str:
        callout, children = extract_callout(node.children)
        if callout is None:
            return self._wrap("blockquote", node, state)
        content = "".join(self._render_node(child, state) for child in children)
        return self._render_callout(callout, content)

    def _render_callout(self, callout: Callout, content: str) -> str:
        return (
            f'<div class="callout" data-callout="{escape_html(callout.type)}">'
            '<div class="callout-title">'
            f'<div class="callout-icon"><i class="callout-icon-inner {callout.icon}"></i></div>'
            f'<div class="callout-title-inner">{escape_html(callout.display_title)}</div>'
            "</div>"
            f'<div class="callout-content">{content}</div>'
            "</div>"
        )

    def _render_horizontal_rule(self, _node: ASTNode, _state: RenderState) -> str:
        return "<hr>"

    def _render_line_break(self, _node: ASTNode, _state: RenderState) -> str:
        return "<br>"

    def _render_link(self, node: ASTNode, state: RenderState) -> str:
        return f'<a href="{node.url}" title="{node.title}">{self._render_children(node, state)}</a>'

    def _render_image(self, node: ASTNode, _state: RenderState) -> str:
        return f'<img src="{node.url}" alt="{node.alt}" title="{node.title}"/>'

    def _render_footnote_ref(self, node: ASTNode, _state: RenderState) -> str:
        fid = node.footnote_id
        label = node.label if node.label is not None else fid
        return (
            f'<sup><a id="{FN_REFERENCE_PREFIX}{fid}" href="#{FN_PREFIX}{fid}">'
            f"[{label}]</a></sup>"
        )

    def _render_footnote_def(self, node: ASTNode, state: RenderState) -> str:
        fid = node.footnote_id
        content = self._render_children(node, state)
        state.footnotes.append(
            f'<li id="{FN_PREFIX}{fid}" value="{fid}">{content}'
            f'<a href="#{FN_REFERENCE_PREFIX}{fid}">↩</a></li>'
        )
        return ""
