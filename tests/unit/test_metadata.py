from __future__ import annotations

from vendorpatch import metadata as metadata_module
from vendorpatch.metadata import DistributionMetadata, StaticMetadata, title_for


def test_static_metadata_title() -> None:
    assert title_for(StaticMetadata(name="Patcher", version="9.9.9")) == "Patcher 9.9.9"


def test_missing_distribution_falls_back() -> None:
    provider = DistributionMetadata("definitely-not-an-installed-distribution")

    assert provider.name == "Vendor Patcher"
    assert provider.version == "unknown"


def test_display_name_override() -> None:
    provider = DistributionMetadata("definitely-not-an-installed-distribution", display_name="Shop Patches")

    assert title_for(provider) == "Shop Patches unknown"


def test_version_is_loaded_once(monkeypatch) -> None:
    calls: list[str] = []

    def fake_version(name: str) -> str:
        calls.append(name)
        return "1.4.0"

    monkeypatch.setattr(metadata_module.importlib_metadata, "version", fake_version)
    provider = DistributionMetadata()

    assert provider.version == "1.4.0"
    assert provider.version == "1.4.0"
    assert calls == ["vendorpatch"]
