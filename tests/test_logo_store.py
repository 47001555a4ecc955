import pytest

from domain.errors import LogoNotFoundError, MalformedInputError
from infra.storage.logo_store import LogoStore, version_name


def test_list_ids_skips_hidden_and_files(store):
    assert store.list_ids() == ["acme", "broken", "globex"]


def test_list_ids_missing_base(tmp_path):
    assert LogoStore(tmp_path / "nope").list_ids() == []


def test_exists(store):
    assert store.exists("acme")
    assert not store.exists("missing")
    assert not store.exists("../logos")
    assert not store.exists(".cache")


def test_read_metadata(store):
    assert store.read_metadata("acme")["title"] == "Acme Corp"


def test_read_metadata_invalid_json(store, logos_dir):
    (logos_dir / "acme" / "metadata.json").write_text("{nope", encoding="utf-8")
    with pytest.raises(MalformedInputError):
        store.read_metadata("acme")


def test_read_metadata_missing(store, logos_dir):
    (logos_dir / "acme" / "metadata.json").unlink()
    with pytest.raises(LogoNotFoundError):
        store.read_metadata("acme")


def test_svg_candidates_order(store):
    assert store.svg_candidates("acme", "symbol") == [
        "acme.svg",
        "acme-symbol.svg",
        "acme-company-symbol.svg",
    ]
    assert store.svg_candidates("acme", "logo-64") == [
        "acme.svg",
        "acme-logo-64.svg",
        "acme-logo.svg",
        "acme-company-logo-64.svg",
        "acme-company-logo.svg",
    ]
    assert store.svg_candidates("acme", None) == ["acme.svg"]


def test_resolve_prefers_primary_file(store):
    assert store.resolve_svg("acme", "symbol").name == "acme.svg"


def test_resolve_legacy_company_name(store):
    assert store.resolve_svg("globex", "standard").name == "globex-company-standard.svg"
    assert store.resolve_svg("globex", "standard-128").name == "globex-company-standard.svg"


def test_resolve_missing(store):
    with pytest.raises(LogoNotFoundError):
        store.resolve_svg("globex", "symbol")
    with pytest.raises(LogoNotFoundError):
        store.read_svg("missing")


def test_versions(store):
    assert store.versions("acme") == ["acme", "symbol"]
    assert store.versions("globex") == ["standard"]


def test_version_name():
    assert version_name("acme", "acme.svg") == "acme"
    assert version_name("acme", "acme-dark-mode.svg") == "dark-mode"
    assert version_name("acme", "acme-company-standard.svg") == "standard"
    assert version_name("acme", "other.svg") == "default"
