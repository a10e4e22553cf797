"""
RowSolver — Local JSON storage for solver settings.

Data is persisted in ``<project>/data/rowsolver.json``.
"""

import json
import os

from rowsolver.parser import LEFT_CONSTANT_POLICIES, normalize_variables
from rowsolver.trace import check_notation

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "rowsolver.json")

# ── Default settings ─────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "variables": "xyz",         # alphabet; a system of n equations uses the first n
    "notation": "words",        # "words" or "compact"
    "decimals": 2,              # decimals shown for trace scalars
    "left_constants": "move",   # "move" or "ignore"
}


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _load_db() -> dict:
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                db = json.load(f)
        except (json.JSONDecodeError, OSError):
            db = None
        if isinstance(db, dict):
            return db
    return {"settings": dict(DEFAULT_SETTINGS)}


def _save_db(db: dict) -> None:
    _ensure_dir()
    with open(_DATA_FILE, "w", encoding="utf-8") as f:
        json.dump(db, f, indent=2, ensure_ascii=False)


def validate_settings(settings: dict) -> dict:
    """Return a cleaned copy of *settings*, raising ``ValueError`` on bad values."""
    cleaned = dict(DEFAULT_SETTINGS)
    cleaned.update(settings)

    unknown = set(cleaned) - set(DEFAULT_SETTINGS)
    if unknown:
        raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

    cleaned["variables"] = normalize_variables(cleaned["variables"])
    check_notation(cleaned["notation"])
    decimals = cleaned["decimals"]
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise ValueError(f"decimals must be a non-negative integer, got {decimals!r}.")
    if cleaned["left_constants"] not in LEFT_CONSTANT_POLICIES:
        raise ValueError(
            f"left_constants must be one of: {', '.join(LEFT_CONSTANT_POLICIES)}."
        )
    return cleaned


# ── Settings ─────────────────────────────────────────────────────────────

def get_settings() -> dict:
    """Return the stored settings merged over the defaults.

    A stored block that fails validation is ignored as a whole and the
    defaults are returned instead.
    """
    stored = _load_db().get("settings", {})
    if not isinstance(stored, dict):
        return dict(DEFAULT_SETTINGS)
    try:
        return validate_settings(stored)
    except (ValueError, TypeError):
        return dict(DEFAULT_SETTINGS)


def save_settings(settings: dict) -> dict:
    """Validate and persist *settings*; returns what was stored."""
    cleaned = validate_settings(settings)
    db = _load_db()
    db["settings"] = cleaned
    _save_db(db)
    return cleaned


def reset_settings() -> None:
    """Restore the defaults."""
    db = _load_db()
    db["settings"] = dict(DEFAULT_SETTINGS)
    _save_db(db)
