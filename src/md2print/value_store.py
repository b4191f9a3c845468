"""Values chosen by the user in the Style Settings plugin.

The plugin persists its state as a flat JSON object whose keys look like
``<category>@@<setting>`` or ``<category>@@<setting>@@<light|dark>``.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "@@"

ValueStore = dict[tuple[str, str], str]


class ThemeVariant(Enum):
    LIGHT = "light"
    DARK = "dark"

    @property
    def classname(self) -> str:
        return f"theme-{self.value}"


def value_to_text(value: Any) -> str:
    """Coerce a JSON value to the text used in CSS."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(value, separators=(",", ":"))


def parse_value_store(
    data: Union[str, dict[str, Any]],
    variant: ThemeVariant,
    category: Optional[str] = None,
) -> ValueStore:
    """Build the value store for *variant* from the plugin's JSON.

    *data* is either the raw JSON text or the already decoded object.
    Keys without a ``light``/``dark`` suffix count for every variant.  When
    *category* is given only that category's settings are kept.
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring unreadable style settings data: %s", exc)
            return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring style settings data: expected a JSON object")
        return {}

    result: ValueStore = {}
    for key, value in data.items():
        terms = key.split(KEY_SEPARATOR)
        if len(terms) < 2:
            continue
        category_id, setting_id = terms[0], terms[1]

        suffix = terms[2] if len(terms) > 2 else None
        if suffix == ThemeVariant.LIGHT.value:
            theme = ThemeVariant.LIGHT
        elif suffix == ThemeVariant.DARK.value:
            theme = ThemeVariant.DARK
        else:
            theme = variant

        if theme != variant:
            continue
        if category is not None and category_id != category:
            continue
        result[(category_id, setting_id)] = value_to_text(value)

    return result


def load_value_store(
    path: Union[str, Path],
    variant: ThemeVariant,
    category: Optional[str] = None,
) -> ValueStore:
    """Read the plugin's ``data.json``; a missing file gives an empty store."""
    path = Path(path)
    if not path.is_file():
        logger.info("No style settings data at %s", path)
        return {}
    return parse_value_store(path.read_text(encoding="utf-8"), variant, category)
