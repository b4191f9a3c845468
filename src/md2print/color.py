"""CSS color parsing and formatting for theme style settings.

Only the color syntaxes that show up in style-settings values are
understood: hex (``#rgb``, ``#rgba``, ``#rrggbb``, ``#rrggbbaa``),
``rgb()``/``rgba()``, ``hsl()``/``hsla()``, ``transparent`` and the CSS
named colors.  Anything else parses to transparent black.
"""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import dataclass

_FUNC_RE = re.compile(r"^(rgba?|hsla?)\((.*)\)$")

NAMED_COLORS: dict[str, str] = {
    "aliceblue": "f0f8ff", "antiquewhite": "faebd7", "aqua": "00ffff",
    "aquamarine": "7fffd4", "azure": "f0ffff", "beige": "f5f5dc",
    "bisque": "ffe4c4", "black": "000000", "blanchedalmond": "ffebcd",
    "blue": "0000ff", "blueviolet": "8a2be2", "brown": "a52a2a",
    "burlywood": "deb887", "cadetblue": "5f9ea0", "chartreuse": "7fff00",
    "chocolate": "d2691e", "coral": "ff7f50", "cornflowerblue": "6495ed",
    "cornsilk": "fff8dc", "crimson": "dc143c", "cyan": "00ffff",
    "darkblue": "00008b", "darkcyan": "008b8b", "darkgoldenrod": "b8860b",
    "darkgray": "a9a9a9", "darkgreen": "006400", "darkgrey": "a9a9a9",
    "darkkhaki": "bdb76b", "darkmagenta": "8b008b", "darkolivegreen": "556b2f",
    "darkorange": "ff8c00", "darkorchid": "9932cc", "darkred": "8b0000",
    "darksalmon": "e9967a", "darkseagreen": "8fbc8f", "darkslateblue": "483d8b",
    "darkslategray": "2f4f4f", "darkslategrey": "2f4f4f", "darkturquoise": "00ced1",
    "darkviolet": "9400d3", "deeppink": "ff1493", "deepskyblue": "00bfff",
    "dimgray": "696969", "dimgrey": "696969", "dodgerblue": "1e90ff",
    "firebrick": "b22222", "floralwhite": "fffaf0", "forestgreen": "228b22",
    "fuchsia": "ff00ff", "gainsboro": "dcdcdc", "ghostwhite": "f8f8ff",
    "gold": "ffd700", "goldenrod": "daa520", "gray": "808080",
    "green": "008000", "greenyellow": "adff2f", "grey": "808080",
    "honeydew": "f0fff0", "hotpink": "ff69b4", "indianred": "cd5c5c",
    "indigo": "4b0082", "ivory": "fffff0", "khaki": "f0e68c",
    "lavender": "e6e6fa", "lavenderblush": "fff0f5", "lawngreen": "7cfc00",
    "lemonchiffon": "fffacd", "lightblue": "add8e6", "lightcoral": "f08080",
    "lightcyan": "e0ffff", "lightgoldenrodyellow": "fafad2", "lightgray": "d3d3d3",
    "lightgreen": "90ee90", "lightgrey": "d3d3d3", "lightpink": "ffb6c1",
    "lightsalmon": "ffa07a", "lightseagreen": "20b2aa", "lightskyblue": "87cefa",
    "lightslategray": "778899", "lightslategrey": "778899", "lightsteelblue": "b0c4de",
    "lightyellow": "ffffe0", "lime": "00ff00", "limegreen": "32cd32",
    "linen": "faf0e6", "magenta": "ff00ff", "maroon": "800000",
    "mediumaquamarine": "66cdaa", "mediumblue": "0000cd", "mediumorchid": "ba55d3",
    "mediumpurple": "9370db", "mediumseagreen": "3cb371", "mediumslateblue": "7b68ee",
    "mediumspringgreen": "00fa9a", "mediumturquoise": "48d1cc", "mediumvioletred": "c71585",
    "midnightblue": "191970", "mintcream": "f5fffa", "mistyrose": "ffe4e1",
    "moccasin": "ffe4b5", "navajowhite": "ffdead", "navy": "000080",
    "oldlace": "fdf5e6", "olive": "808000", "olivedrab": "6b8e23",
    "orange": "ffa500", "orangered": "ff4500", "orchid": "da70d6",
    "palegoldenrod": "eee8aa", "palegreen": "98fb98", "paleturquoise": "afeeee",
    "palevioletred": "db7093", "papayawhip": "ffefd5", "peachpuff": "ffdab9",
    "peru": "cd853f", "pink": "ffc0cb", "plum": "dda0dd",
    "powderblue": "b0e0e6", "purple": "800080", "rebeccapurple": "663399",
    "red": "ff0000", "rosybrown": "bc8f8f", "royalblue": "4169e1",
    "saddlebrown": "8b4513", "salmon": "fa8072", "sandybrown": "f4a460",
    "seagreen": "2e8b57", "seashell": "fff5ee", "sienna": "a0522d",
    "silver": "c0c0c0", "skyblue": "87ceeb", "slateblue": "6a5acd",
    "slategray": "708090", "slategrey": "708090", "snow": "fffafa",
    "springgreen": "00ff7f", "steelblue": "4682b4", "tan": "d2b48c",
    "teal": "008080", "thistle": "d8bfd8", "tomato": "ff6347",
    "turquoise": "40e0d0", "violet": "ee82ee", "wheat": "f5deb3",
    "white": "ffffff", "whitesmoke": "f5f5f5", "yellow": "ffff00",
    "yellowgreen": "9acd32",
}


def format_number(x: float) -> str:
    """Format *x* with at most two decimals and no trailing zeros."""
    text = f"{x:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _clamp(x: float) -> float:
    return max(0.0, min(1.0, x))


def _number(text: str) -> float:
    """Parse a finite CSS number; Python spellings like ``nan`` and ``inf`` are rejected."""
    x = float(text)
    if not math.isfinite(x):
        raise ValueError(f"not a finite number: {text!r}")
    return x


def _channel(token: str) -> float:
    """An rgb() channel: ``0``-``255`` or a percentage."""
    if token.endswith("%"):
        return _clamp(_number(token[:-1]) / 100)
    return _clamp(_number(token) / 255)


def _alpha(token: str) -> float:
    if token.endswith("%"):
        return _clamp(_number(token[:-1]) / 100)
    return _clamp(_number(token))


def _hue(token: str) -> float:
    """A hue in degrees; ``deg``, ``turn``, ``grad`` and ``rad`` units accepted."""
    if token.endswith("deg"):
        degrees = _number(token[:-3])
    elif token.endswith("turn"):
        degrees = _number(token[:-4]) * 360
    elif token.endswith("grad"):
        degrees = _number(token[:-4]) * 0.9
    elif token.endswith("rad"):
        degrees = _number(token[:-3]) * 57.29577951308232
    else:
        degrees = _number(token)
    return degrees % 360


def _percent(token: str) -> float:
    return _clamp(_number(token.rstrip("%")) / 100)


@dataclass(frozen=True)
class Color:
    """An RGBA color with every component in ``[0, 1]``."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0

    # -- construction -------------------------------------------------------

    @classmethod
    def transparent(cls) -> Color:
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_hsla(cls, h: float, s: float, l: float, a: float = 1.0) -> Color:
        """Build a color from hue (degrees) and saturation/lightness in ``[0, 1]``."""
        r, g, b = colorsys.hls_to_rgb((h % 360) / 360, l, s)
        return cls(r, g, b, a)

    @classmethod
    def parse(cls, value: str) -> Color:
        """Parse a CSS color; unparseable text gives transparent black."""
        try:
            return cls._parse(value.strip().lower())
        except ValueError:
            return cls.transparent()

    @classmethod
    def _parse(cls, text: str) -> Color:
        if text == "transparent":
            return cls.transparent()
        if text in NAMED_COLORS:
            return cls._parse_hex(NAMED_COLORS[text])
        if text.startswith("#"):
            return cls._parse_hex(text[1:])

        m = _FUNC_RE.match(text)
        if m is None:
            raise ValueError(f"not a color: {text!r}")
        func, args = m.groups()
        if "/" in args:
            main, _, alpha = args.partition("/")
            tokens = main.replace(",", " ").split() + [alpha.strip()]
        else:
            tokens = args.replace(",", " ").split()
        if len(tokens) not in (3, 4):
            raise ValueError(f"expected 3 or 4 components: {text!r}")
        a = _alpha(tokens[3]) if len(tokens) == 4 else 1.0

        if func.startswith("rgb"):
            return cls(_channel(tokens[0]), _channel(tokens[1]), _channel(tokens[2]), a)
        return cls.from_hsla(_hue(tokens[0]), _percent(tokens[1]), _percent(tokens[2]), a)

    @classmethod
    def _parse_hex(cls, digits: str) -> Color:
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        if len(digits) == 6:
            digits += "ff"
        if len(digits) != 8:
            raise ValueError(f"bad hex color length: {digits!r}")
        r, g, b, a = (int(digits[i:i + 2], 16) / 255 for i in range(0, 8, 2))
        return cls(r, g, b, a)

    # -- derived components -------------------------------------------------

    def to_rgba8(self) -> tuple[int, int, int, int]:
        return tuple(round(c * 255) for c in (self.r, self.g, self.b, self.a))  # type: ignore[return-value]

    def to_hsla(self) -> tuple[float, float, float, float]:
        """Hue in degrees, saturation and lightness in ``[0, 1]``, alpha."""
        h, l, s = colorsys.rgb_to_hls(self.r, self.g, self.b)
        return h * 360, s, l, self.a

    @property
    def hue(self) -> float:
        return self.to_hsla()[0]

    @property
    def saturation(self) -> float:
        return self.to_hsla()[1]

    @property
    def lightness(self) -> float:
        return self.to_hsla()[2]

    # -- text forms ---------------------------------------------------------

    def to_hex_string(self) -> str:
        """``#rrggbb``, or ``#rrggbbaa`` when the color is not opaque."""
        r, g, b, a = self.to_rgba8()
        if a == 255:
            return f"#{r:02x}{g:02x}{b:02x}"
        return f"#{r:02x}{g:02x}{b:02x}{a:02x}"

    def to_rgb_string(self) -> str:
        r, g, b, a = self.to_rgba8()
        if a == 255:
            return f"rgb({r},{g},{b})"
        return f"rgba({r},{g},{b},{format_number(self.a)})"

    def to_rgb_values(self) -> str:
        """Space separated ``r g b`` channels in ``0``-``255``."""
        r, g, b, _ = self.to_rgba8()
        return f"{r} {g} {b}"

    def to_hsl_values(self) -> str:
        """``H S% L% A`` as used inside ``hsla(var(--x))``."""
        h, s, l, a = self.to_hsla()
        return f"{format_number(h)} {format_number(s * 100)}% {format_number(l * 100)}% {format_number(a)}"
