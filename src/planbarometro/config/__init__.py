"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


class ConfigManager:
    """YAML-backed loader for settings files and model definitions."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        path = self._base_path / f"{name}.yaml"
        if not path.exists():
            path = path.with_suffix(".yml")
        return self.load_path(path)

    @staticmethod
    def load_path(path: str | Path) -> dict[str, Any]:
        with Path(path).open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path}: expected a YAML mapping")
        return loaded

    def available(self) -> list[str]:
        """Names of the YAML documents under the base path, sorted."""
        if not self._base_path.is_dir():
            return []
        return sorted(
            path.stem
            for path in self._base_path.iterdir()
            if path.suffix in {".yaml", ".yml"}
        )


__all__ = ["ConfigManager"]
