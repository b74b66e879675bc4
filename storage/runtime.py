"""Runtime wiring helpers for storage location selection."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from config.tracking_schema import TrackingSettings
from storage.container import StorageContainer

DB_PATH_ENV = "CHANGETRAIL_DB_PATH"


def build_storage_container(
    *,
    db_path: str | Path | None = None,
    settings: TrackingSettings | None = None,
    env: Mapping[str, str] | None = None,
) -> StorageContainer:
    """Build a runtime storage container from arguments, environment and config.

    Precedence: explicit db_path > CHANGETRAIL_DB_PATH > settings.storage.db_path > default.
    """
    env_map = env if env is not None else os.environ
    return StorageContainer(db_path=_resolve_db_path(db_path, settings, env_map))


def _resolve_db_path(
    db_path: str | Path | None,
    settings: TrackingSettings | None,
    env: Mapping[str, str],
) -> Path | None:
    if db_path is not None:
        return Path(db_path)

    raw = env.get(DB_PATH_ENV)
    if raw is not None:
        value = raw.strip()
        if not value:
            raise RuntimeError(f"Invalid {DB_PATH_ENV} value: {raw!r}. Expected a file path.")
        return Path(value).expanduser()

    if settings is not None and settings.storage.db_path is not None:
        return settings.storage.db_path.expanduser()
    return None
