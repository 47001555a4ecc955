from __future__ import annotations

import argparse
from pathlib import Path

import structlog

from core.logging import configure_logging
from domain.sizes import STANDARD_SIZES
from services.conversion.raster import RASTER_FORMATS, rasterize


log = structlog.get_logger(__name__)


def generate_all_variants(
    svg_path: Path,
    out_dir: Path,
    base_name: str,
    sizes: tuple[int, ...] = STANDARD_SIZES,
) -> dict[str, list[dict]]:
    """Write ``{base_name}-{size}.{png,webp}`` for each size; return what was written."""
    out_dir.mkdir(parents=True, exist_ok=True)
    svg_bytes = svg_path.read_bytes()
    variants: dict[str, list[dict]] = {fmt: [] for fmt in RASTER_FORMATS}
    for fmt in RASTER_FORMATS:
        for size in sizes:
            filename = f"{base_name}-{size}.{fmt}"
            path = out_dir / filename
            path.write_bytes(rasterize(svg_bytes, fmt, size))
            variants[fmt].append({"size": size, "max_dimension": size, "path": str(path), "filename": filename})
            log.info("variant_written", file=filename)
    return variants


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate PNG/WebP variants in standard sizes from an SVG logo")
    parser.add_argument("svg", type=Path)
    parser.add_argument("--out-dir", type=Path, required=True)
    parser.add_argument("--name", help="Base filename (defaults to the SVG stem)")
    parser.add_argument("--sizes", type=int, nargs="*", help="Override the standard size list")
    args = parser.parse_args()

    configure_logging()
    sizes = tuple(args.sizes) if args.sizes else STANDARD_SIZES
    variants = generate_all_variants(args.svg, args.out_dir, args.name or args.svg.stem, sizes)
    print(f"Generated {len(variants['png'])} PNG and {len(variants['webp'])} WebP variants in {args.out_dir}")


if __name__ == "__main__":
    main()
