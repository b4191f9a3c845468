"""Render YAML front matter as a nested property list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml

from md2print.escaping import escape_html


@dataclass(frozen=True)
class TaggedValue:
    """A YAML value carrying an application specific ``!tag``."""

    tag: str
    value: Any

    def __hash__(self) -> int:
        # Tagged mappings and sequences may be used as mapping keys.
        try:
            return hash((self.tag, self.value))
        except TypeError:
            return hash(self.tag)


class FrontmatterLoader(yaml.SafeLoader):
    """Safe loader that keeps dates as written and tolerates custom tags."""


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _construct_tagged(loader: FrontmatterLoader, suffix: str, node: yaml.Node) -> TaggedValue:
    if isinstance(node, yaml.MappingNode):
        value: Any = loader.construct_mapping(node, deep=True)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_scalar(node)
    return TaggedValue(tag=f"!{suffix}", value=value)


FrontmatterLoader.add_multi_constructor("!", _construct_tagged)


def load_frontmatter(raw: str) -> Any:
    """Parse *raw* YAML; raises :class:`yaml.YAMLError` on bad input."""
    return yaml.load(raw, Loader=FrontmatterLoader)


def format_value(value: Any) -> str:
    """Return the HTML for one parsed front matter value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return '<input type="checkbox" checked>' if value else '<input type="checkbox">'
    if isinstance(value, (int, float)):
        return f"<code>{value}</code>"
    if isinstance(value, str):
        return escape_html(value)
    if isinstance(value, TaggedValue):
        return f"<strong>{escape_html(value.tag)}</strong>{format_value(value.value)}"
    if isinstance(value, dict):
        parts = ["<dl>"]
        for key, item in value.items():
            parts.append(f"<dt>{format_value(key)}</dt><dd>{format_value(item)}</dd>")
        parts.append("</dl>")
        return "".join(parts)
    if isinstance(value, (list, tuple)):
        items = "".join(f"<li>{format_value(item)}</li>" for item in value)
        return f"<ul>{items}</ul>"
    return escape_html(str(value))


def format_frontmatter(raw: str) -> str:
    """Render a YAML front matter block.

    Parsed front matter is wrapped in ``<div class="properties">``.  Text
    that is not valid YAML is shown verbatim in a ``<pre>`` block.
    """
    try:
        value = load_frontmatter(raw)
    except yaml.YAMLError:
        return f"<pre>{escape_html(raw)}</pre>"
    return f'<div class="properties">{format_value(value)}</div>'
