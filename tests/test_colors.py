import pytest

from domain.colors import (
    ColorSpec,
    document_colors,
    replace_color_pairs,
    resolve_color,
    substitute_color,
    substitute_color_bytes,
)
from domain.errors import MalformedInputError


SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
    '<path fill="#4285F4" d="M0 0h5v5z"/>'
    '<path fill="#ABCDEF" stroke="#EA4335" stroke-width="2" d="M5 5h5v5z"/>'
    '<path fill="none" stroke="url(#grad)" d="M0 5h5"/>'
    "</svg>"
)


def test_resolve_color_hex_and_aliases():
    assert resolve_color("FF0000") == ColorSpec(hex="ff0000", monochrome=False)
    assert resolve_color("#00ff00") == ColorSpec(hex="00ff00", monochrome=False)
    assert resolve_color("black") == ColorSpec(hex="000000", monochrome=True)
    assert resolve_color("White") == ColorSpec(hex="ffffff", monochrome=True)
    assert resolve_color("000000").monochrome
    assert resolve_color("FFFFFF").monochrome


@pytest.mark.parametrize("raw", [None, "", "red", "fff", "#12345", "1234567", "zzzzzz"])
def test_resolve_color_invalid_is_absent(raw):
    assert resolve_color(raw) is None


def test_no_color_is_identity():
    assert substitute_color(SVG, None) is SVG
    raw = SVG.encode("utf-8")
    assert substitute_color_bytes(raw, None) is raw


def test_monochrome_replaces_every_paint_attribute():
    out = substitute_color(SVG, resolve_color("black"))
    assert out.count('fill="#000000"') == 3
    assert out.count('stroke="#000000"') == 2
    assert "#4285F4" not in out and "#EA4335" not in out and "url(#grad)" not in out
    # structure untouched
    assert 'stroke-width="2"' in out
    assert out.count("<path") == 3


def test_monochrome_is_idempotent():
    mono = resolve_color("white")
    once = substitute_color(SVG, mono)
    assert substitute_color(once, mono) == once


def test_custom_color_replaces_every_distinct_color():
    out = substitute_color(SVG, resolve_color("ff0000"))
    for old in ("#4285F4", "#ABCDEF", "#EA4335"):
        assert old not in out
    assert out.count('fill="#ff0000"') == 2
    assert out.count('stroke="#ff0000"') == 1
    # non-colors kept so cut-outs and gradients survive
    assert 'fill="none"' in out
    assert 'stroke="url(#grad)"' in out


def test_unmatched_document_is_unchanged():
    plain = '<svg xmlns="http://www.w3.org/2000/svg"><rect width="1" height="1"/></svg>'
    assert substitute_color(plain, resolve_color("ff0000")) == plain


def test_substitute_color_bytes_rejects_non_utf8():
    with pytest.raises(MalformedInputError):
        substitute_color_bytes(b"\xff\xfe<svg/>", resolve_color("ff0000"))


def test_document_colors():
    assert document_colors(SVG) == ["#4285F4", "#ABCDEF", "#EA4335"]


def test_replace_color_pairs():
    out = replace_color_pairs(SVG, [("#4285F4", "#111111"), ("#EA4335", "#222222")])
    assert 'fill="#111111"' in out
    assert 'stroke="#222222"' in out
    assert "#ABCDEF" in out
