from __future__ import annotations

import argparse
import sys
from pathlib import Path

from domain.colors import replace_color_pairs


def _pairs(values: list[str]) -> list[tuple[str, str]]:
    if len(values) % 2:
        raise ValueError("colors must come in old/new pairs")
    return list(zip(values[::2], values[1::2]))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Replace colors in an SVG file",
        epilog='example: recolor_svg.py in.svg out.svg "#4285F4" "#000000" "#EA4335" "#111111"',
    )
    parser.add_argument("input", type=Path)
    parser.add_argument("output", type=Path)
    parser.add_argument("colors", nargs="+", help="old/new color pairs")
    args = parser.parse_args(argv)

    try:
        pairs = _pairs(args.colors)
        svg = args.input.read_text(encoding="utf-8")
        args.output.write_text(replace_color_pairs(svg, pairs), encoding="utf-8")
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Replaced {len(pairs)} color(s) in {args.input} and saved to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
