"""Three-tier file change tracking configuration loader.

Follows the same pattern as the other config loaders:
system defaults → user (~/.changetrail/tracking.json) → project (.changetrail/tracking.json) → CLI overrides

Each tier may be written as tracking.json or tracking.yaml; JSON wins when both exist.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from config.tracking_schema import TrackingSettings

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".changetrail"
_CONFIG_STEMS = ("tracking.json", "tracking.yaml", "tracking.yml")


class TrackingConfigLoader:
    """Three-tier tracking config loader."""

    def __init__(self, workspace_root: str | Path | None = None):
        self.workspace_root = Path(workspace_root).resolve() if workspace_root else None
        self._system_dir = Path(__file__).parent / "defaults"

    def load(self, cli_overrides: dict[str, Any] | None = None) -> TrackingSettings:
        """Load and merge tracking config from all tiers."""
        system = self._load_tier(self._system_dir)
        user = self._load_tier(Path.home() / CONFIG_DIR_NAME)
        project = self._load_tier(self.workspace_root / CONFIG_DIR_NAME) if self.workspace_root else {}

        merged = self._deep_merge(system, user, project)
        if cli_overrides:
            merged = self._deep_merge(merged, cli_overrides)

        merged = self._expand_env_vars(merged)
        return TrackingSettings(**merged)

    def _load_tier(self, directory: Path) -> dict[str, Any]:
        for name in _CONFIG_STEMS:
            path = directory / name
            if path.exists():
                return self._load_file(path)
        return {}

    @staticmethod
    def _load_file(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                if path.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError, OSError) as e:
            logger.warning(f"[TrackingConfigLoader] Ignoring unreadable config {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"[TrackingConfigLoader] Ignoring non-object config {path}")
            return {}
        return data

    def _deep_merge(self, *dicts: dict[str, Any]) -> dict[str, Any]:
        """Deep merge multiple dicts. Later dicts override earlier ones."""
        result: dict[str, Any] = {}
        for d in dicts:
            for key, value in d.items():
                if key not in result:
                    result[key] = value
                elif value is None:
                    continue
                elif isinstance(value, dict) and isinstance(result[key], dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = value
        return result

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand ${VAR} and ~ in string values."""
        if isinstance(obj, dict):
            return {k: self._expand_env_vars(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._expand_env_vars(v) for v in obj]
        if isinstance(obj, str):
            return os.path.expandvars(os.path.expanduser(obj))
        return obj


def load_tracking_settings(
    workspace_root: str | Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> TrackingSettings:
    return TrackingConfigLoader(workspace_root=workspace_root).load(cli_overrides)
