"""Tests for settings loading and address resolution."""

from __future__ import annotations

import pathlib

import pytest

from mongo_auth.settings import ClientSettings, SettingsError, load_settings

REPO_SETTINGS = pathlib.Path(__file__).resolve().parents[1] / "config" / "settings.yaml"


class TestResolveAddress:
    def test_explicit_values_win(self) -> None:
        assert ClientSettings().resolve_address("db1", 1234) == "db1:1234"

    def test_empty_values_use_defaults(self) -> None:
        settings = ClientSettings(default_host="db.test", default_port=28000)
        assert settings.resolve_address(None, None) == "db.test:28000"
        assert settings.resolve_address("", 0) == "db.test:28000"

    def test_builtin_defaults(self) -> None:
        assert ClientSettings().resolve_address() == "localhost:27017"

    @pytest.mark.parametrize("port", [65536, 70000, -1])
    def test_out_of_range_port_raises(self, port: int) -> None:
        with pytest.raises(SettingsError, match="between 1 and 65535"):
            ClientSettings().resolve_address("db1", port)

    def test_highest_port_accepted(self) -> None:
        assert ClientSettings().resolve_address("db1", 65535) == "db1:65535"


class TestLoadSettings:
    def test_no_path_no_env_gives_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("MONGO_AUTH_SETTINGS", raising=False)
        assert load_settings() == ClientSettings()

    def test_repo_settings_file(self) -> None:
        settings = load_settings(REPO_SETTINGS)
        assert settings == ClientSettings("localhost", 27017, True)

    def test_reads_file(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(
            "mongo:\n"
            "  default_host: db.internal\n"
            "  default_port: 28017\n"
            "  auto_reconnect: false\n"
        )
        assert load_settings(path) == ClientSettings("db.internal", 28017, False)

    def test_env_var_names_file(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        path = tmp_path / "env.yaml"
        path.write_text("mongo:\n  default_host: from-env\n")
        monkeypatch.setenv("MONGO_AUTH_SETTINGS", str(path))
        settings = load_settings()
        assert settings.default_host == "from-env"
        assert settings.default_port == 27017

    def test_empty_file_gives_defaults(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == ClientSettings()

    def test_missing_file_raises(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(SettingsError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("- a\n- b\n", "mapping"),
            ("mongo: 3\n", "'mongo' settings"),
            ("mongo:\n  default_port: '27017'\n", "default_port"),
            ("mongo:\n  default_port: true\n", "default_port"),
            ("mongo:\n  default_port: 99999\n", "default_port"),
            ("mongo:\n  default_host: 12\n", "default_host"),
            ("mongo:\n  auto_reconnect: 'yes please'\n", "auto_reconnect"),
        ],
    )
    def test_malformed_raises(self, tmp_path: pathlib.Path, content: str, message: str) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(SettingsError, match=message):
            load_settings(path)
