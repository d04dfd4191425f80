"""Bundled data lookup.

Lives in `core/` because it centralises *which* data files the app needs
(the game catalog) without tying adapters or the CLI to path details.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from core.config import get_user_config_dir

DEFAULT_CATALOG_FILENAME = "games.json"


def _project_root() -> Path:
    # core/resources_loader.py -> core -> src -> <project_root>
    return Path(__file__).resolve().parents[2]


def _data_dir() -> Path:
    """Runtime data directory.

    Rules:
    - FPS_ESTIMATOR_DATA_DIR wins when set.
    - Frozen builds (PyInstaller) use a writable per-user path.
    - In development, <project_root>/data.
    """

    override = (os.environ.get("FPS_ESTIMATOR_DATA_DIR") or "").strip()
    if override:
        return Path(override)

    if getattr(sys, "frozen", False):
        return get_user_config_dir() / "data"

    return _project_root() / "data"


def get_default_catalog_path(filename: str = DEFAULT_CATALOG_FILENAME) -> Path | None:
    """Find a catalog file in the usual places.

    Order:
    1) <data dir>/<filename>
    2) <user config dir>/data/<filename>
    3) ./<filename> (cwd)
    """

    candidates = [
        _data_dir() / filename,
        get_user_config_dir() / "data" / filename,
        Path.cwd() / filename,
    ]
    for p in candidates:
        if p.exists() and p.is_file():
            return p
    return None
