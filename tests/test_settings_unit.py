import json
from pathlib import Path

import pytest

from rowsolver import settings


def test_defaults_without_a_file(_isolated_settings: Path) -> None:
    assert not _isolated_settings.exists()
    assert settings.get_settings() == settings.DEFAULT_SETTINGS


def test_settings_get_and_save(_isolated_settings: Path) -> None:
    stored = settings.save_settings({"notation": "compact", "decimals": 4})
    assert stored["notation"] == "compact"
    assert settings.get_settings()["notation"] == "compact"
    assert settings.get_settings()["decimals"] == 4
    # untouched keys keep their defaults
    assert settings.get_settings()["variables"] == "xyz"

    on_disk = json.loads(_isolated_settings.read_text(encoding="utf-8"))
    assert on_disk["settings"]["decimals"] == 4


def test_variables_are_normalised_on_save() -> None:
    assert settings.save_settings({"variables": "ABCD"})["variables"] == "abcd"


def test_new_keys_merge_over_old_files(_isolated_settings: Path) -> None:
    _isolated_settings.parent.mkdir(parents=True)
    _isolated_settings.write_text(json.dumps({"settings": {"decimals": 3}}), encoding="utf-8")
    merged = settings.get_settings()
    assert merged["decimals"] == 3
    assert merged["left_constants"] == "move"


def test_corrupt_file_falls_back_to_defaults(_isolated_settings: Path) -> None:
    _isolated_settings.parent.mkdir(parents=True)
    _isolated_settings.write_text("{not json", encoding="utf-8")
    assert settings.get_settings() == settings.DEFAULT_SETTINGS


def test_reset_settings() -> None:
    settings.save_settings({"notation": "compact"})
    settings.reset_settings()
    assert settings.get_settings() == settings.DEFAULT_SETTINGS


@pytest.mark.parametrize(
    "bad",
    [
        {"notation": "latex"},
        {"decimals": -1},
        {"decimals": "2"},
        {"decimals": True},
        {"variables": "xx"},
        {"left_constants": "keep"},
        {"theme": "dark"},
    ],
)
def test_invalid_settings_are_rejected(bad: dict) -> None:
    with pytest.raises(ValueError):
        settings.save_settings(bad)
    assert settings.get_settings() == settings.DEFAULT_SETTINGS


@pytest.mark.parametrize(
    "content",
    [
        {"settings": {"decimals": "2"}},
        {"settings": {"variables": 5}},
        {"settings": {"notation": "latex", "decimals": 3}},
        {"settings": ["words"]},
        ["not", "a", "dict"],
    ],
)
def test_invalid_stored_settings_fall_back_to_defaults(
    _isolated_settings: Path, content
) -> None:
    _isolated_settings.parent.mkdir(parents=True, exist_ok=True)
    _isolated_settings.write_text(json.dumps(content), encoding="utf-8")
    assert settings.get_settings() == settings.DEFAULT_SETTINGS


def test_save_over_a_corrupt_store(_isolated_settings: Path) -> None:
    _isolated_settings.parent.mkdir(parents=True, exist_ok=True)
    _isolated_settings.write_text(json.dumps([1, 2]), encoding="utf-8")
    settings.save_settings({"decimals": 3})
    assert settings.get_settings()["decimals"] == 3
