import sys
from pathlib import Path

# Ensure the project root is on sys.path so `rowsolver` and `backend` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from rowsolver import settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path: Path) -> Path:
    """Point the settings store at a throwaway file for every test."""
    data_dir = tmp_path / "data"
    data_file = data_dir / "rowsolver.json"
    monkeypatch.setattr(settings, "_DATA_DIR", str(data_dir))
    monkeypatch.setattr(settings, "_DATA_FILE", str(data_file))
    return data_file
