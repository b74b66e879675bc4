"""Tests for config.tracking_loader module."""

import json

import pytest

from config.tracking_loader import TrackingConfigLoader, load_tracking_settings


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


def _write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


class TestTrackingConfigLoader:
    def test_system_defaults_only(self, home):
        settings = TrackingConfigLoader().load()

        assert settings.enabled is True
        assert settings.exclusion.markers == ["claude-sessions", "Application Support"]
        assert settings.tool_kinds.write == "tool-Write"
        assert settings.storage.db_path is None

    def test_user_overrides_system(self, home):
        _write_json(home / ".changetrail" / "tracking.json", {"exclusion": {"markers": ["user-marker"]}})

        settings = TrackingConfigLoader().load()

        assert settings.exclusion.markers == ["user-marker"]
        assert settings.tool_kinds.edit == "tool-Edit"

    def test_project_overrides_user(self, home, tmp_path):
        project = tmp_path / "project"
        _write_json(home / ".changetrail" / "tracking.json", {"enabled": False, "tool_kinds": {"write": "w"}})
        _write_json(project / ".changetrail" / "tracking.json", {"enabled": True})

        settings = TrackingConfigLoader(workspace_root=project).load()

        assert settings.enabled is True
        assert settings.tool_kinds.write == "w"

    def test_cli_overrides_win(self, home, tmp_path):
        project = tmp_path / "project"
        _write_json(project / ".changetrail" / "tracking.json", {"enabled": False})

        settings = load_tracking_settings(project, cli_overrides={"enabled": True})

        assert settings.enabled is True

    def test_yaml_tier(self, home):
        path = home / ".changetrail" / "tracking.yaml"
        path.parent.mkdir(parents=True)
        path.write_text("exclusion:\n  markers:\n    - .cache/\n", encoding="utf-8")

        assert TrackingConfigLoader().load().exclusion.markers == [".cache/"]

    def test_env_vars_expanded(self, home, monkeypatch):
        monkeypatch.setenv("TRAIL_DIR", "/data/trail")
        _write_json(home / ".changetrail" / "tracking.json", {"storage": {"db_path": "${TRAIL_DIR}/db.sqlite"}})

        settings = TrackingConfigLoader().load()

        assert str(settings.storage.db_path) == "/data/trail/db.sqlite"

    def test_unreadable_tier_is_ignored(self, home):
        path = home / ".changetrail" / "tracking.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")

        assert TrackingConfigLoader().load().enabled is True

    def test_non_object_tier_is_ignored(self, home):
        _write_json(home / ".changetrail" / "tracking.json", ["a", "b"])

        assert TrackingConfigLoader().load().exclusion.markers == ["claude-sessions", "Application Support"]
