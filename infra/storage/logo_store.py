from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from core.config import settings
from domain.errors import LogoNotFoundError, MalformedInputError


_ID_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]*$")
_SIZE_TAIL_RE = re.compile(r"-\d+$")

METADATA_FILE = "metadata.json"


class LogoStore:
    """Logos on disk: ``<base_dir>/<id>/metadata.json`` plus one or more SVGs."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self.base_dir = Path(base_dir if base_dir is not None else settings.logos_dir).resolve()

    def _logo_dir(self, logo_id: str) -> Path:
        if not _ID_RE.match(logo_id or ""):
            raise LogoNotFoundError(f"Logo not found: {logo_id}")
        path = self.base_dir / logo_id
        if not path.is_dir():
            raise LogoNotFoundError(f"Logo not found: {logo_id}")
        return path

    def exists(self, logo_id: str) -> bool:
        try:
            self._logo_dir(logo_id)
        except LogoNotFoundError:
            return False
        return True

    def list_ids(self) -> list[str]:
        if not self.base_dir.is_dir():
            return []
        return sorted(
            p.name for p in self.base_dir.iterdir() if p.is_dir() and not p.name.startswith(".")
        )

    def read_metadata(self, logo_id: str) -> dict[str, Any]:
        path = self._logo_dir(logo_id) / METADATA_FILE
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise LogoNotFoundError(f"No metadata for logo: {logo_id}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(f"{logo_id}/{METADATA_FILE} contains invalid JSON") from exc
        if not isinstance(data, dict):
            raise MalformedInputError(f"{logo_id}/{METADATA_FILE} must be a JSON object")
        return data

    def svg_candidates(self, logo_id: str, variant: str | None) -> list[str]:
        names = [f"{logo_id}.svg"]
        variants: list[str] = []
        if variant:
            variants.append(variant)
            # "logo-64" as in "logo-64.png" also means variant "logo"
            stripped = _SIZE_TAIL_RE.sub("", variant)
            if stripped and stripped != variant:
                variants.append(stripped)
        # {id}.svg, then {id}-{variant}.svg, then legacy {id}-company-{variant}.svg
        names += [f"{logo_id}-{v}.svg" for v in variants]
        names += [f"{logo_id}-company-{v}.svg" for v in variants]
        return list(dict.fromkeys(names))

    def resolve_svg(self, logo_id: str, variant: str | None = None) -> Path:
        logo_dir = self._logo_dir(logo_id)
        for name in self.svg_candidates(logo_id, variant):
            path = logo_dir / name
            if path.is_file():
                return path
        raise LogoNotFoundError(f"SVG file not found for {logo_id} ({variant or 'default'})")

    def read_svg(self, logo_id: str, variant: str | None = None) -> bytes:
        return self.resolve_svg(logo_id, variant).read_bytes()

    def svg_files(self, logo_id: str) -> list[str]:
        return sorted(p.name for p in self._logo_dir(logo_id).glob("*.svg") if p.is_file())

    def versions(self, logo_id: str) -> list[str]:
        out: dict[str, None] = {}
        for name in self.svg_files(logo_id):
            out.setdefault(version_name(logo_id, name), None)
        return list(out)


def version_name(logo_id: str, filename: str) -> str:
    base = filename.rsplit(".", 1)[0]
    if base == logo_id:
        return logo_id
    if base.startswith(f"{logo_id}-company-"):
        rest = base[len(logo_id) + len("-company-"):]
    elif base.startswith(f"{logo_id}-"):
        rest = base[len(logo_id) + 1:]
    else:
        rest = base.split("-", 1)[1] if "-" in base else ""
    return rest or "default"
