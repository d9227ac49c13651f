"""Tests for access token resolution."""

import logging

import pytest

from config import Settings
from credentials import doctl_token, resolve_token, user_config_dir
from errors import ConfigError, ConfigNotFoundError, ConfigParseError


def write_doctl_config(root, text):
    d = root / "doctl"
    d.mkdir(parents=True, exist_ok=True)
    (d / "config.yaml").write_text(text, encoding="utf-8")
    return root


class TestDoctlToken:
    def test_default_context(self, tmp_path):
        write_doctl_config(tmp_path, "context: default\naccess-token: abc123\n")
        assert doctl_token(str(tmp_path)) == ("abc123", "default")

    def test_named_context(self, tmp_path):
        write_doctl_config(
            tmp_path,
            "context: work\n"
            "access-token: personal\n"
            "auth-contexts:\n"
            "  work: work-token\n"
            "  other: other-token\n",
        )
        assert doctl_token(str(tmp_path)) == ("work-token", "work")

    def test_unknown_context_gives_empty_token(self, tmp_path):
        write_doctl_config(tmp_path, "context: missing\nauth-contexts:\n  work: t\n")
        assert doctl_token(str(tmp_path)) == ("", "missing")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError, match="config.yaml"):
            doctl_token(str(tmp_path))

    def test_malformed_yaml(self, tmp_path):
        write_doctl_config(tmp_path, "context: [unclosed\n")
        with pytest.raises(ConfigParseError):
            doctl_token(str(tmp_path))

    def test_not_a_mapping(self, tmp_path):
        write_doctl_config(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigParseError):
            doctl_token(str(tmp_path))

    def test_wrong_field_type(self, tmp_path):
        write_doctl_config(tmp_path, "context: work\nauth-contexts: nope\n")
        with pytest.raises(ConfigParseError, match="auth-contexts"):
            doctl_token(str(tmp_path))

    def test_uses_user_config_dir(self, tmp_path, monkeypatch):
        write_doctl_config(tmp_path, "context: default\naccess-token: from-xdg\n")
        monkeypatch.setattr("credentials.user_config_dir", lambda: str(tmp_path))
        assert doctl_token() == ("from-xdg", "default")


class TestUserConfigDir:
    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setattr("credentials.sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert user_config_dir() == str(tmp_path)

    def test_home_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setattr("credentials.sys.platform", "linux")
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert user_config_dir() == str(tmp_path / ".config")

    def test_relative_xdg_is_rejected(self, monkeypatch):
        monkeypatch.setattr("credentials.sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
        with pytest.raises(ConfigNotFoundError):
            user_config_dir()

    def test_macos(self, tmp_path, monkeypatch):
        monkeypatch.setattr("credentials.sys.platform", "darwin")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert user_config_dir() == str(tmp_path / "Library" / "Application Support")

    def test_windows_appdata(self, tmp_path, monkeypatch):
        monkeypatch.setattr("credentials.sys.platform", "win32")
        monkeypatch.setenv("APPDATA", str(tmp_path))
        assert user_config_dir() == str(tmp_path)

    def test_windows_without_appdata(self, monkeypatch):
        monkeypatch.setattr("credentials.sys.platform", "win32")
        monkeypatch.delenv("APPDATA", raising=False)
        with pytest.raises(ConfigNotFoundError, match="APPDATA"):
            user_config_dir()


class TestResolveToken:
    def test_explicit_token_wins(self, tmp_path):
        write_doctl_config(tmp_path, "context: default\naccess-token: doctl\n")
        assert resolve_token(Settings(access_token="explicit"), str(tmp_path)) == "explicit"

    def test_falls_back_to_doctl(self, tmp_path, caplog):
        write_doctl_config(tmp_path, "context: default\naccess-token: doctl\n")
        with caplog.at_level(logging.INFO):
            assert resolve_token(Settings(), str(tmp_path)) == "doctl"
        assert "context=default" in caplog.text

    def test_empty_doctl_token_is_an_error(self, tmp_path):
        write_doctl_config(tmp_path, "context: missing\n")
        with pytest.raises(ConfigError, match="missing"):
            resolve_token(Settings(), str(tmp_path))

    def test_missing_doctl_config_is_fatal(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            resolve_token(Settings(), str(tmp_path))
