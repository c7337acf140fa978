"""Tests for server configuration and editor settings."""

import json

import pytest

from marlint_server.config.settings import Config, LinterSettings, get_config, reload_config


class TestConfig:
    def test_defaults_when_file_missing(self, tmp_path):
        config = Config(str(tmp_path / "missing.json"))

        assert config.logging.level == "INFO"
        assert config.linter.module_name == "marlint"
        assert config.linter.entry_point == "lint_text"
        assert config.linter.source_name == "Marlint"
        assert config.linter.manifest_name == "package.json"

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        config_file = tmp_path / "server.json"
        config_file.write_text(
            json.dumps({"logging": {"level": "DEBUG"}, "linter": {"module_name": "marlint_next"}})
        )

        config = Config(str(config_file))

        assert config.logging.level == "DEBUG"
        assert "{message}" in config.logging.format
        assert config.linter.module_name == "marlint_next"
        assert config.linter.entry_point == "lint_text"

    def test_tilde_paths_are_expanded(self, tmp_path):
        config = Config(str(tmp_path / "missing.json"))
        assert not config.logging.logs_dir.startswith("~")

    def test_invalid_file_raises(self, tmp_path):
        config_file = tmp_path / "server.json"
        config_file.write_text("{broken")

        with pytest.raises(ValueError, match="Failed to load config file"):
            Config(str(config_file))

    def test_unknown_keys_raise(self, tmp_path):
        config_file = tmp_path / "server.json"
        config_file.write_text(json.dumps({"linter": {"colour": "red"}}))

        with pytest.raises(ValueError):
            Config(str(config_file))

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "server.json"
        config_file.write_text(json.dumps({"linter": {"source_name": "Custom"}}))
        monkeypatch.setenv("MARLINT_SERVER_CONFIG", str(config_file))

        reload_config()

        assert get_config().linter.source_name == "Custom"


class TestLinterSettings:
    def test_defaults(self):
        settings = LinterSettings.from_client(None)

        assert settings.module_path is None
        assert settings.show_warnings is True
        assert settings.options == {}

    def test_from_client_payload(self, tmp_path):
        settings = LinterSettings.from_client(
            {"modulePath": str(tmp_path), "showWarnings": False, "options": {"fix": True}}
        )

        assert settings.module_path == str(tmp_path)
        assert settings.show_warnings is False
        assert settings.options == {"fix": True}

    def test_empty_module_path_is_none(self):
        assert LinterSettings.from_client({"modulePath": ""}).module_path is None

    def test_non_dict_options_are_ignored(self):
        assert LinterSettings.from_client({"options": ["fix"]}).options == {}
