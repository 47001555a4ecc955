"""Per-request conversion: optional recolor, then optional rasterization.

Every call is independent. ``convert_async`` moves the CPU-bound part onto a
bounded thread pool so the event loop keeps serving other requests while an
image is being encoded.
"""
from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Literal

from core.config import settings
from domain.colors import ColorSpec, substitute_color_bytes
from domain.errors import InvalidSizeError, UnsupportedFormatError
from domain.sizes import is_valid_size
from services.conversion.raster import rasterize


OutputFormat = Literal["svg", "png", "webp"]

CONTENT_TYPES: dict[str, str] = {
    "svg": "image/svg+xml",
    "png": "image/png",
    "webp": "image/webp",
}
SUPPORTED_FORMATS = tuple(CONTENT_TYPES)


@dataclass(frozen=True)
class ConversionRequest:
    source_bytes: bytes
    target_format: str = "svg"
    target_max_dimension: int | None = None
    color: ColorSpec | None = None


@dataclass(frozen=True)
class ConversionResult:
    bytes: bytes
    content_type: str


def normalize_format(fmt: str | None) -> OutputFormat:
    value = (fmt or "svg").strip().lower()
    if value not in CONTENT_TYPES:
        raise UnsupportedFormatError(
            f"Invalid format '{fmt}'. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )
    return value  # type: ignore[return-value]


def convert(req: ConversionRequest, *, max_size: int | None = None) -> ConversionResult:
    fmt = normalize_format(req.target_format)
    upper = settings.max_image_size if max_size is None else max_size
    if req.target_max_dimension is not None and not is_valid_size(req.target_max_dimension, upper):
        raise InvalidSizeError(
            f"Invalid size {req.target_max_dimension!r}. Must be between 1 and {upper} pixels"
        )

    data = substitute_color_bytes(req.source_bytes, req.color)
    if fmt == "svg":
        return ConversionResult(bytes=data, content_type=CONTENT_TYPES["svg"])
    out = rasterize(data, fmt, req.target_max_dimension, max_size=upper)
    return ConversionResult(bytes=out, content_type=CONTENT_TYPES[fmt])


_executor: ThreadPoolExecutor | None = None


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=max(1, settings.conversion_workers),
            thread_name_prefix="logo-convert",
        )
    return _executor


async def convert_async(req: ConversionRequest, *, max_size: int | None = None) -> ConversionResult:
    fmt = normalize_format(req.target_format)
    if fmt == "svg":
        # Text substitution only; not worth a thread hop
        return convert(req, max_size=max_size)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_get_executor(), lambda: convert(req, max_size=max_size))


def shutdown_executor() -> None:
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=False)
        _executor = None
