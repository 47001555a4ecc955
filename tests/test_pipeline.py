import io

import pytest
from PIL import Image

from domain.colors import resolve_color
from domain.errors import InvalidSizeError, MalformedInputError, UnsupportedFormatError
from services.conversion.pipeline import (
    ConversionRequest,
    convert,
    convert_async,
    normalize_format,
)


def test_normalize_format():
    assert normalize_format(None) == "svg"
    assert normalize_format("PNG") == "png"
    assert normalize_format(" webp ") == "webp"
    with pytest.raises(UnsupportedFormatError):
        normalize_format("gif")


def test_svg_without_options_returns_source_bytes(two_color_svg):
    result = convert(ConversionRequest(source_bytes=two_color_svg))
    assert result.bytes == two_color_svg
    assert result.content_type == "image/svg+xml"


def test_svg_recolor(two_color_svg):
    result = convert(ConversionRequest(source_bytes=two_color_svg, color=resolve_color("ff0000")))
    text = result.bytes.decode("utf-8")
    assert 'fill="#ff0000"' in text
    assert "#4285F4" not in text


def test_red_png_end_to_end(two_color_svg):
    result = convert(
        ConversionRequest(
            source_bytes=two_color_svg,
            target_format="png",
            target_max_dimension=128,
            color=resolve_color("ff0000"),
        )
    )
    assert result.content_type == "image/png"
    assert result.bytes[:8] == b"\x89PNG\r\n\x1a\n"
    im = Image.open(io.BytesIO(result.bytes)).convert("RGBA")
    assert im.width == 128
    assert abs(im.height - 43) <= 1
    for r, g, b, a in im.getdata():
        if a:
            assert r >= 250 and g <= 5 and b <= 5


def test_oversized_request_produces_nothing(two_color_svg):
    with pytest.raises(InvalidSizeError):
        convert(ConversionRequest(source_bytes=two_color_svg, target_format="png", target_max_dimension=5000))


def test_invalid_size_rejected_even_for_svg(two_color_svg):
    with pytest.raises(InvalidSizeError):
        convert(ConversionRequest(source_bytes=two_color_svg, target_format="svg", target_max_dimension=0))


def test_recolor_of_non_utf8_source():
    with pytest.raises(MalformedInputError):
        convert(ConversionRequest(source_bytes=b"\xff\xfe", color=resolve_color("black")))


def test_unsupported_format(two_color_svg):
    with pytest.raises(UnsupportedFormatError):
        convert(ConversionRequest(source_bytes=two_color_svg, target_format="jpeg"))


@pytest.mark.asyncio
async def test_convert_async_offloads_raster(two_color_svg):
    result = await convert_async(
        ConversionRequest(source_bytes=two_color_svg, target_format="webp", target_max_dimension=64)
    )
    assert result.content_type == "image/webp"
    assert Image.open(io.BytesIO(result.bytes)).size == (64, 21)


@pytest.mark.asyncio
async def test_convert_async_propagates_errors(two_color_svg):
    with pytest.raises(InvalidSizeError):
        await convert_async(
            ConversionRequest(source_bytes=two_color_svg, target_format="png", target_max_dimension=-1)
        )
