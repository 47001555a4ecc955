from __future__ import annotations

import re

from core.config import settings


# Used for discovery URLs and pre-generated variants; any size in range is accepted.
STANDARD_SIZES = (16, 32, 64, 128, 256, 512)

_SIZE_SUFFIX_RE = re.compile(r"-(\d+)\.(png|webp)$", re.IGNORECASE)


def is_valid_size(size: object, max_size: int | None = None) -> bool:
    upper = settings.max_image_size if max_size is None else max_size
    # bool is an int subclass; True must not pass as 1
    if isinstance(size, bool) or not isinstance(size, int):
        return False
    return 1 <= size <= upper


def parse_size_from_filename(filename: str) -> int | None:
    """Extract the trailing size from names like ``acme-128.png``."""
    match = _SIZE_SUFFIX_RE.search(filename)
    return int(match.group(1)) if match else None


def parse_size_param(raw: str | None) -> int | None:
    """Parse a ``size`` query value; ``None`` when absent or not an integer literal."""
    if raw is None or raw == "":
        return None
    raw = raw.strip()
    if not re.fullmatch(r"[+-]?\d+", raw):
        return None
    return int(raw)
