from __future__ import annotations

import io

import cairosvg
import structlog
from cairosvg.helpers import node_format
from cairosvg.parser import Tree
from PIL import Image as PILImage

from core.config import settings
from domain.errors import ConversionFailedError, DomainError, InvalidSizeError, UnsupportedFormatError
from domain.sizes import is_valid_size


log = structlog.get_logger(__name__)

RASTER_FORMATS = ("png", "webp")
WEBP_QUALITY = 90


def fit_inside(width: float, height: float, box: int) -> tuple[int, int]:
    """Scale (width, height) so the longer side equals ``box``; enlarges small sources."""
    if width <= 0 or height <= 0:
        raise ConversionFailedError(f"SVG has no drawable area ({width}x{height})")
    scale = box / max(width, height)
    return max(1, round(width * scale)), max(1, round(height * scale))


class _Viewport:
    # What cairosvg's length helpers read off a surface: no parent box, CSS dpi
    dpi = 96
    font_size = 12
    context_width = None
    context_height = None


def intrinsic_size(svg_bytes: bytes) -> tuple[float, float]:
    """Document size in user units from width/height, falling back to the viewBox.

    Parsed only, never rendered, so fractional sizes keep their precision and
    huge canvases cost nothing.
    """
    tree = Tree(bytestring=svg_bytes)
    width, height, _ = node_format(_Viewport(), tree)
    return float(width), float(height)


def _render(svg_bytes: bytes, width: int, height: int) -> PILImage.Image:
    png = cairosvg.svg2png(bytestring=svg_bytes, output_width=width, output_height=height)
    with PILImage.open(io.BytesIO(png)) as im:
        frame = im.convert("RGBA")
    # Drop anything the decoder picked up so it is not written back out
    frame.info.clear()
    return frame


def _encode(frame: PILImage.Image, fmt: str) -> bytes:
    buf = io.BytesIO()
    if fmt == "png":
        frame.save(buf, format="PNG")
    else:
        frame.save(buf, format="WEBP", quality=WEBP_QUALITY)
    return buf.getvalue()


def rasterize(
    svg_bytes: bytes,
    fmt: str,
    max_dimension: int | None = None,
    *,
    max_size: int | None = None,
) -> bytes:
    if fmt not in RASTER_FORMATS:
        raise UnsupportedFormatError(f"Cannot rasterize to '{fmt}'. Supported: {', '.join(RASTER_FORMATS)}")
    box = settings.default_image_size if max_dimension is None else max_dimension
    upper = settings.max_image_size if max_size is None else max_size
    if not is_valid_size(box, upper):
        raise InvalidSizeError(f"Invalid size {box!r}. Must be between 1 and {upper} pixels")

    try:
        width, height = fit_inside(*intrinsic_size(svg_bytes), box)
        frame = _render(svg_bytes, width, height)
        if frame.size != (width, height):
            frame = frame.resize((width, height), PILImage.Resampling.LANCZOS)
        data = _encode(frame, fmt)
    except DomainError:
        raise
    except Exception as exc:
        log.warning("rasterize_failed", format=fmt, size=box, error=str(exc))
        raise ConversionFailedError(f"Failed to convert SVG to {fmt.upper()}: {exc}") from exc

    log.debug("rasterized", format=fmt, width=width, height=height, bytes=len(data))
    return data
