"""Unit tests for settings utility."""

import json

import pytest

from cometline.utils.settings import (
    configure_statusline,
    get_settings_path,
    remove_statusline,
)


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("cometline.utils.settings.get_settings_path", lambda: path)
    return path


class TestConfigureStatusline:
    """Tests for configure_statusline function."""

    def test_adds_statusline_config(self, settings_file):
        """Core behavior: statusLine is correctly configured."""
        settings_file.write_text(json.dumps({}))

        success, _ = configure_statusline()

        assert success is True

        result = json.loads(settings_file.read_text())
        assert result["statusLine"] == {"type": "command", "command": "cometline", "padding": 0}

    def test_creates_missing_file(self, settings_file):
        success, _ = configure_statusline()

        assert success is True
        assert json.loads(settings_file.read_text())["statusLine"]["command"] == "cometline"

    def test_preserves_other_settings_and_backs_up(self, settings_file):
        """Critical: Don't break user's other Claude Code settings."""
        settings_file.write_text(
            json.dumps(
                {
                    "someOtherSetting": True,
                    "anotherKey": {"nested": "value"},
                    "statusLine": {"type": "command", "command": "old-command"},
                }
            )
        )

        success, message = configure_statusline()

        assert success is True
        assert "backed up" in message

        result = json.loads(settings_file.read_text())
        assert result["someOtherSetting"] is True
        assert result["anotherKey"]["nested"] == "value"
        assert result["statusLine"]["command"] == "cometline"

        backups = list(settings_file.parent.glob("settings.json.backup.*"))
        assert len(backups) == 1
        assert json.loads(backups[0].read_text())["statusLine"]["command"] == "old-command"

    def test_already_configured_is_left_alone(self, settings_file):
        configure_statusline()

        success, message = configure_statusline()

        assert success is True
        assert "already" in message
        assert list(settings_file.parent.glob("settings.json.backup.*")) == []


class TestRemoveStatusline:
    """Tests for remove_statusline function."""

    def test_removes_statusline(self, settings_file):
        """Core behavior: statusLine is removed."""
        settings_file.write_text(
            json.dumps({"theme": "dark", "statusLine": {"type": "command", "command": "cometline"}})
        )

        success, _ = remove_statusline()

        assert success is True
        assert json.loads(settings_file.read_text()) == {"theme": "dark"}

    def test_no_statusline_is_success(self, settings_file):
        settings_file.write_text(json.dumps({}))

        success, message = remove_statusline()

        assert success is True
        assert "No statusLine" in message

    def test_foreign_statusline_is_kept(self, settings_file):
        settings_file.write_text(
            json.dumps({"statusLine": {"type": "command", "command": "other-tool --fancy"}})
        )

        success, _ = remove_statusline()

        assert success is False
        assert json.loads(settings_file.read_text())["statusLine"]["command"] == "other-tool --fancy"


class TestSettingsPath:
    def test_respects_claude_config_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(tmp_path / "alt"))

        assert get_settings_path() == tmp_path / "alt" / "settings.json"
