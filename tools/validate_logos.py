from __future__ import annotations

import argparse
import sys
import json
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from urllib.parse import urlparse

from core.config import settings
from domain.colors import document_colors


REQUIRED_FIELDS = ("name", "title", "website", "colors", "hasSymbol", "license", "created", "updated")
DEPRECATED_FIELDS = ("category", "tags", "description", "variants", "industry")
LARGE_SVG_BYTES = 50_000

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_SVG_NS = "{http://www.w3.org/2000/svg}"


@dataclass
class ValidationReport:
    logo_id: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    info: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_date(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


def _is_datetime(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _check_structure(report: ValidationReport, logo_dir: Path) -> None:
    logo_id = report.logo_id
    files = sorted(p.name for p in logo_dir.iterdir())
    required = ["metadata.json", f"{logo_id}.svg"]
    optional = [f"{logo_id}-symbol.svg"]
    for name in required:
        if name not in files:
            report.errors.append(f"Missing required file: {name}")
    for name in (f"{logo_id}-standard.svg", f"{logo_id}-monochrome.svg"):
        if name in files:
            report.warnings.append(f"Deprecated file found: {name}")
    for name in files:
        if name not in required and name not in optional:
            report.warnings.append(f"Unexpected file in directory: {name}")
    report.info.append(f"Found {len(files)} files in directory")


def _check_colors(report: ValidationReport, colors: object) -> None:
    if isinstance(colors, dict):
        values = list(colors.values())
    elif isinstance(colors, list):
        values = colors
    else:
        report.errors.append('Metadata field "colors" must be an array or an object')
        return
    if not values:
        report.errors.append("Colors cannot be empty")
    for i, color in enumerate(values):
        if not isinstance(color, str) or not _COLOR_RE.match(color):
            report.errors.append(f"Invalid color format at index {i}: {color} (use #RRGGBB)")


def _check_metadata(report: ValidationReport, logo_dir: Path) -> None:
    path = logo_dir / "metadata.json"
    try:
        metadata = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        report.errors.append("metadata.json file not found")
        return
    except json.JSONDecodeError:
        report.errors.append("metadata.json contains invalid JSON")
        return
    if not isinstance(metadata, dict):
        report.errors.append("metadata.json must contain an object")
        return

    for name in REQUIRED_FIELDS:
        if metadata.get(name) is None:
            report.errors.append(f"Missing required metadata field: {name}")
    for name in ("name", "title"):
        if name in metadata and metadata[name] is not None and not isinstance(metadata[name], str):
            report.errors.append(f'Metadata field "{name}" must be a string')
    website = metadata.get("website")
    if website and (not isinstance(website, str) or not _is_url(website)):
        report.errors.append('Metadata field "website" must be a valid URL')
    if metadata.get("colors") is not None:
        _check_colors(report, metadata["colors"])
    if "hasSymbol" in metadata and not isinstance(metadata["hasSymbol"], bool):
        report.errors.append('Metadata field "hasSymbol" must be a boolean')
    if metadata.get("created") and not _is_date(metadata["created"]):
        report.errors.append("Invalid created format (use YYYY-MM-DD)")
    if metadata.get("updated") and not _is_datetime(metadata["updated"]):
        report.errors.append("Invalid updated format (use ISO 8601 datetime)")
    for name in DEPRECATED_FIELDS:
        if name in metadata:
            report.warnings.append(f"Deprecated field found: {name}")
    report.info.append("Metadata structure validation complete")


def _check_svg(report: ValidationReport, path: Path) -> None:
    name = path.name
    raw = path.read_bytes()
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        report.errors.append(f"{name}: Not a valid SVG file ({exc})")
        return
    if root.tag not in ("svg", f"{_SVG_NS}svg"):
        report.errors.append(f"{name}: Not a valid SVG file (root element is {root.tag})")
        return
    if not root.get("viewBox") and not (root.get("width") and root.get("height")):
        report.warnings.append(f"{name}: Missing viewBox or width/height attributes")
    if len(raw) > LARGE_SVG_BYTES:
        report.warnings.append(f"{name}: File size is large ({round(len(raw) / 1000)}KB). Consider optimization.")
    if root.find(f".//{_SVG_NS}text") is not None or root.find(".//text") is not None:
        report.warnings.append(f"{name}: Contains <text> elements; convert text to paths")
    colors = document_colors(raw.decode("utf-8", errors="replace"))
    if colors:
        report.info.append(f"{name}: colors {', '.join(colors)}")


def validate_logo(logos_dir: Path, logo_id: str) -> ValidationReport:
    report = ValidationReport(logo_id=logo_id)
    logo_dir = logos_dir / logo_id
    if not logo_dir.is_dir():
        report.errors.append(f"Logo directory does not exist: {logo_dir}")
        return report

    _check_structure(report, logo_dir)
    _check_metadata(report, logo_dir)
    svgs = sorted(logo_dir.glob("*.svg"))
    for svg in svgs:
        _check_svg(report, svg)
    if not svgs:
        report.errors.append("No SVG files found")
    else:
        report.info.append(f"Validated {len(svgs)} SVG files")
    return report


def _print_report(report: ValidationReport) -> None:
    print(f"== {report.logo_id}: {'OK' if report.ok else 'FAILED'}")
    for msg in report.errors:
        print(f"  error: {msg}")
    for msg in report.warnings:
        print(f"  warning: {msg}")
    for msg in report.info:
        print(f"  info: {msg}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate logo folders (metadata.json + SVG files)")
    parser.add_argument("ids", nargs="*", help="Logo ids to check (default: all)")
    parser.add_argument("--logos-dir", type=Path, default=Path(settings.logos_dir))
    args = parser.parse_args(argv)
    if not args.logos_dir.is_dir():
        print(f"Logos directory does not exist: {args.logos_dir}", file=sys.stderr)
        return 1

    ids = args.ids or sorted(p.name for p in args.logos_dir.iterdir() if p.is_dir() and not p.name.startswith("."))
    reports = [validate_logo(args.logos_dir, logo_id) for logo_id in ids]
    for report in reports:
        _print_report(report)
    return 0 if all(r.ok for r in reports) else 1


if __name__ == "__main__":
    raise SystemExit(main())
