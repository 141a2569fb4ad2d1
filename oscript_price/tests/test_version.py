import importlib
from importlib import metadata as importlib_metadata

import oscript_price

version_mod = importlib.import_module("oscript_price.version")


def test_env_override_wins(monkeypatch) -> None:
    monkeypatch.setenv("OSCRIPT_PRICE_VERSION", "9.9.9")
    assert version_mod.compute_version() == "9.9.9"


def test_falls_back_to_dev_tag_when_not_installed(monkeypatch) -> None:
    def _missing(name):
        raise importlib_metadata.PackageNotFoundError(name)

    monkeypatch.setattr(version_mod.importlib_metadata, "version", _missing)
    assert version_mod.compute_version() == f"{version_mod.BASE_VERSION}+dev"


def test_installed_metadata_is_used(monkeypatch) -> None:
    monkeypatch.setattr(version_mod.importlib_metadata, "version", lambda name: "0.1.0" if name == "oscript-price" else "")
    assert version_mod.compute_version() == "0.1.0"


def test_package_exposes_version() -> None:
    assert oscript_price.version() == oscript_price.__version__
    assert oscript_price.__version__
