import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from infra.api.app import create_app
from infra.cache.rate_limit import MemoryCounterStore, RateLimiter
from infra.storage.logo_store import LogoStore
from services.analytics import Analytics


# 300x100, two flat colors split down the middle
TWO_COLOR_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="300" height="100" viewBox="0 0 300 100">'
    '<rect x="0" y="0" width="150" height="100" fill="#4285F4"/>'
    '<rect x="150" y="0" width="150" height="100" fill="#34A853" stroke="#EA4335" stroke-width="0"/>'
    "</svg>"
)

# 100x100 with transparent corners
CIRCLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">'
    '<circle cx="50" cy="50" r="30" fill="#112233"/>'
    "</svg>"
)

SMALL_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="5" viewBox="0 0 10 5">'
    '<rect width="10" height="5" fill="#000000"/>'
    "</svg>"
)


@pytest.fixture
def two_color_svg() -> bytes:
    return TWO_COLOR_SVG.encode("utf-8")


@pytest.fixture
def circle_svg() -> bytes:
    return CIRCLE_SVG.encode("utf-8")


@pytest.fixture
def small_svg() -> bytes:
    return SMALL_SVG.encode("utf-8")


@pytest.fixture
def logos_dir(tmp_path: Path) -> Path:
    base = tmp_path / "logos"

    acme = base / "acme"
    acme.mkdir(parents=True)
    (acme / "acme.svg").write_text(TWO_COLOR_SVG, encoding="utf-8")
    (acme / "acme-symbol.svg").write_text(CIRCLE_SVG, encoding="utf-8")
    (acme / "metadata.json").write_text(
        json.dumps(
            {
                "name": "acme",
                "title": "Acme Corp",
                "website": "https://acme.example",
                "category": "technology",
                "tags": ["rockets", "anvils"],
                "colors": {"primary": "#4285F4", "secondary": "#34A853"},
            }
        ),
        encoding="utf-8",
    )

    globex = base / "globex"
    globex.mkdir()
    (globex / "globex-company-standard.svg").write_text(SMALL_SVG, encoding="utf-8")
    (globex / "metadata.json").write_text(
        json.dumps({"name": "globex", "title": "Globex", "category": "energy", "colors": ["#000000"]}),
        encoding="utf-8",
    )

    broken = base / "broken"
    broken.mkdir()
    (broken / "broken.svg").write_text("<svg this is not xml", encoding="utf-8")
    (broken / "metadata.json").write_text(json.dumps({"name": "broken", "category": "misc"}), encoding="utf-8")

    # not a logo: hidden dir and stray file
    (base / ".cache").mkdir()
    (base / "README.txt").write_text("notes", encoding="utf-8")
    return base


@pytest.fixture
def store(logos_dir: Path) -> LogoStore:
    return LogoStore(logos_dir)


@pytest.fixture
def client(store: LogoStore) -> TestClient:
    limiter = RateLimiter(MemoryCounterStore(), limit=2)
    app = create_app(store=store, limiter=limiter, analytics=Analytics(enabled=False))
    return TestClient(app)
