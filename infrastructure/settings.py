"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

APP_DATA_DIR = Path.home() / "AppData" / "Local" / "FeaturedManager"


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_path(self, key: str, default: str | Path) -> Path:
        """Return dotted `key` as a path with `~` and environment variables expanded."""
        raw = self.get(key) or default
        return Path(os.path.expandvars(os.path.expanduser(str(raw))))

    def get_int(self, key: str, default: int) -> int:
        """Return dotted `key` as an int, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default))
        except (TypeError, ValueError):
            return default
