"""Theme style settings: schema extraction and CSS variable synthesis.

Obsidian themes describe their user-configurable knobs in YAML embedded in
comments of the theme stylesheet::

    /* @settings
    name: Minimal
    id: minimal-style
    settings:
        -
            id: accent-hue
            type: variable-number
    */

:func:`iter_settings_schemas` pulls those schemas out of the stylesheet and
:func:`synthesize_css` joins them with the values from the user's
:mod:`~md2print.value_store` into a CSS rule and a list of body classes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import yaml

from md2print.color import Color, format_number
from md2print.value_store import ThemeVariant, ValueStore

logger = logging.getLogger(__name__)

START_SIGIL = "/* @settings"
END_SIGIL = "*/"

DEFAULT_BODY_CLASSES = (
    "mod-linux",
    "is-frameless",
    "is-hidden-frameless",
    "obsidian-app",
    "show-view-header",
    "highlightr-realistic",
    "css-settings-manager",
    "trim-cols",
    "checkbox-circle",
    "maximize-tables",
    "tabs-default",
    "tab-stack-top",
    "minimal-tab-title-visible",
    "is-maximized",
    "is-focused",
)

VARIABLE_KINDS = frozenset({
    "variable-text",
    "variable-number",
    "variable-number-slider",
    "variable-select",
})

COLOR_KINDS = frozenset({"variable-color", "variable-themed-color"})


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class SettingDefinition:
    """One entry of a schema's ``settings`` list."""

    id: str
    kind: str
    format: Optional[str] = None


@dataclass
class SettingsSchema:
    """All settings of one ``@settings`` comment block."""

    category_id: str
    settings: list[SettingDefinition] = field(default_factory=list)


@dataclass
class StyleSettingsCss:
    """What a theme contributes to the printed page."""

    theme_css: str = ""
    style_overrides: str = ""
    body_classes: str = ""


# ---------------------------------------------------------------------------
# Comment scanning and schema parsing
# ---------------------------------------------------------------------------

def iter_comments(css: str) -> Iterator[str]:
    """Yield every ``/* ... */`` comment of *css*, delimiters included.

    Comments do not nest: the first ``*/`` after an opening ``/*`` ends it.
    An unterminated comment at the end of the text is dropped.
    """
    inside = False
    buf: list[str] = []
    i = 0
    n = len(css)
    while i < n:
        c = css[i]
        if not inside:
            if c == "/" and i + 1 < n and css[i + 1] == "*":
                inside = True
                buf = ["/*"]
                i += 2
                continue
        else:
            buf.append(c)
            if c == "/" and buf[-2] == "*":
                inside = False
                yield "".join(buf)
        i += 1


def parse_schema(content: str) -> Optional[SettingsSchema]:
    """Parse the YAML body of one ``@settings`` block.

    Returns ``None`` when the text is not YAML or has no category id and
    settings list.  Settings entries without an ``id`` or ``type`` are left
    out.
    """
    try:
        data: Any = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        logger.debug("Skipping unparseable settings block: %s", exc)
        return None

    if not isinstance(data, dict) or data.get("id") is None:
        return None
    entries = data.get("settings")
    if not isinstance(entries, list):
        return None

    schema = SettingsSchema(category_id=str(data["id"]))
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        if entry.get("id") is None or entry.get("type") is None:
            continue
        fmt = entry.get("format")
        schema.settings.append(SettingDefinition(
            id=str(entry["id"]),
            kind=str(entry["type"]),
            format=None if fmt is None else str(fmt),
        ))
    return schema


def iter_settings_schemas(css: str) -> Iterator[SettingsSchema]:
    """Yield the schemas of all parseable ``@settings`` comments in *css*."""
    for comment in iter_comments(css):
        if not comment.startswith(START_SIGIL):
            continue
        content = comment[len(START_SIGIL):-len(END_SIGIL)].strip().replace("\t", "    ")
        schema = parse_schema(content)
        if schema is not None:
            yield schema


# ---------------------------------------------------------------------------
# CSS synthesis
# ---------------------------------------------------------------------------

def css_variable(name: str, value: str) -> str:
    return f"--{name}:{value};"


def color_declarations(setting_id: str, fmt: Optional[str], value: str) -> str:
    """Declarations for a color setting in the requested *fmt*."""
    color = Color.parse(value)

    if fmt == "rgb":
        return css_variable(setting_id, color.to_rgb_string())
    if fmt == "rgb-values":
        return css_variable(setting_id, color.to_rgb_values())
    if fmt == "hsl-values":
        return css_variable(setting_id, color.to_hsl_values())
    if fmt == "rgb-split":
        r, g, b, _ = color.to_rgba8()
        return "".join([
            css_variable(f"{setting_id}-r", str(r)),
            css_variable(f"{setting_id}-g", str(g)),
            css_variable(f"{setting_id}-b", str(b)),
            css_variable(f"{setting_id}-a", format_number(color.a)),
        ])
    if fmt == "hsl-split":
        h, s, l, a = color.to_hsla()
        return "".join([
            css_variable(f"{setting_id}-h", format_number(h)),
            css_variable(f"{setting_id}-s", f"{format_number(s * 100)}%"),
            css_variable(f"{setting_id}-l", f"{format_number(l * 100)}%"),
            css_variable(f"{setting_id}-a", format_number(a)),
        ])
    # "hex", no format and unknown formats
    return css_variable(setting_id, color.to_hex_string())


def synthesize_css(
    theme_css: str,
    values: ValueStore,
    variant: ThemeVariant,
    *,
    base_classes: tuple[str, ...] = DEFAULT_BODY_CLASSES,
) -> StyleSettingsCss:
    """Turn the theme's settings schemas and the user's values into CSS.

    Settings without a stored value are skipped; the theme's own defaults
    already apply to them.
    """
    declarations: list[str] = []
    body_classes: list[str] = [variant.classname]

    for schema in iter_settings_schemas(theme_css):
        for setting in schema.settings:
            value = values.get((schema.category_id, setting.id))
            if value is None:
                continue

            if setting.kind == "class-toggle":
                if value == "true":
                    body_classes.append(setting.id)
            elif setting.kind == "class-select":
                if value:
                    body_classes.append(value)
            elif setting.kind in VARIABLE_KINDS:
                declarations.append(css_variable(setting.id, value + (setting.format or "")))
            elif setting.kind in COLOR_KINDS:
                declarations.append(color_declarations(setting.id, setting.format, value))

    body_classes.extend(base_classes)

    return StyleSettingsCss(
        theme_css=theme_css,
        style_overrides=f"body.{variant.classname} {{ {''.join(declarations)} }}",
        body_classes=" ".join(body_classes),
    )
