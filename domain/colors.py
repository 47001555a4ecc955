"""Color customization for stored SVG logos.

Colors are rewritten textually: every ``fill="..."`` and ``stroke="..."``
attribute is a candidate. The document is never parsed, so fills on
unrelated elements (``<text>`` decorations, for instance) are recolored too.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from domain.errors import MalformedInputError


_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")
_PAINT_ATTR_RE = re.compile(r'\b(fill|stroke)="([^"]*)"')

COLOR_ALIASES = {
    "black": "000000",
    "white": "ffffff",
}
MONOCHROME_HEX = {"000000", "ffffff"}

# Attribute values that are not colors; recoloring them would change shapes
_NON_COLOR_VALUES = {"none", "transparent", "currentcolor", "inherit"}


@dataclass(frozen=True)
class ColorSpec:
    hex: str  # six lowercase hex digits, no leading '#'
    monochrome: bool = False

    @property
    def css(self) -> str:
        return f"#{self.hex}"


def resolve_color(raw: str | None) -> ColorSpec | None:
    """Turn a ``color`` query value into a ColorSpec, or None when absent or invalid."""
    if raw is None:
        return None
    value = raw.strip().lower()
    if value.startswith("#"):
        value = value[1:]
    value = COLOR_ALIASES.get(value, value)
    if not _HEX_RE.match(value):
        return None
    return ColorSpec(hex=value, monochrome=value in MONOCHROME_HEX)


def decode_svg(svg_bytes: bytes) -> str:
    try:
        return svg_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"SVG is not valid UTF-8: {exc}") from exc


def _is_color_value(value: str) -> bool:
    v = value.strip().lower()
    return bool(v) and v not in _NON_COLOR_VALUES and not v.startswith("url(")


def substitute_color(svg_text: str, color: ColorSpec | None) -> str:
    if color is None:
        return svg_text
    target = color.css

    if color.monochrome:
        # Silhouette: every paint attribute collapses to one color
        return _PAINT_ATTR_RE.sub(lambda m: f'{m.group(1)}="{target}"', svg_text)

    def _replace(m: re.Match[str]) -> str:
        if not _is_color_value(m.group(2)):
            return m.group(0)
        return f'{m.group(1)}="{target}"'

    return _PAINT_ATTR_RE.sub(_replace, svg_text)


def substitute_color_bytes(svg_bytes: bytes, color: ColorSpec | None) -> bytes:
    if color is None:
        return svg_bytes
    return substitute_color(decode_svg(svg_bytes), color).encode("utf-8")


def document_colors(svg_text: str) -> list[str]:
    """Distinct fill/stroke color values in document order."""
    seen: dict[str, None] = {}
    for m in _PAINT_ATTR_RE.finditer(svg_text):
        value = m.group(2).strip()
        if _is_color_value(value):
            seen.setdefault(value, None)
    return list(seen)


def replace_color_pairs(svg_text: str, pairs: list[tuple[str, str]]) -> str:
    """Literal old→new replacements, applied in order, case-sensitive."""
    for old, new in pairs:
        svg_text = svg_text.replace(old, new)
    return svg_text
