"""
Tests for ConfigManager: defaults, config.yaml merging and env overrides.
"""

from pathlib import Path

import yaml

from pholight.config import DEFAULTS, ConfigManager


class TestLoad:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = ConfigManager(str(tmp_path), environ={}).load()

        assert config["web"]["host"] == "0.0.0.0"
        assert config["web"]["port"] == 3000
        assert config["web"]["ws_path"] == "/"
        assert config["auth"] == {"password_hours": 24, "exclusive_host": False}
        assert "_config_error" not in config

    def test_defaults_are_not_mutated(self, tmp_path: Path) -> None:
        config = ConfigManager(str(tmp_path), environ={}).load()
        config["web"]["port"] = 1

        assert DEFAULTS["web"]["port"] == 3000

    def test_yaml_overrides_are_merged(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text(
            "web:\n  port: 8123\nauth:\n  exclusive_host: true\n", encoding="utf-8"
        )
        config = ConfigManager(str(tmp_path), environ={}).load()

        assert config["web"]["port"] == 8123
        assert config["web"]["host"] == "0.0.0.0"
        assert config["auth"]["exclusive_host"] is True
        assert config["auth"]["password_hours"] == 24

    def test_corrupt_yaml_falls_back_to_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("web: [unclosed\n", encoding="utf-8")
        config = ConfigManager(str(tmp_path), environ={}).load()

        assert config["web"]["port"] == 3000
        assert "_config_error" in config

    def test_non_mapping_yaml_is_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        config = ConfigManager(str(tmp_path), environ={}).load()

        assert config["web"]["port"] == 3000
        assert "_config_error" in config


class TestEnvironment:
    def test_env_overrides_win_over_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("web:\n  port: 8123\n", encoding="utf-8")
        environ = {
            "PHOLIGHT_HOST": "127.0.0.1",
            "PHOLIGHT_PORT": "9000",
            "PHOLIGHT_PASSWORD_HOURS": "1.5",
            "PHOLIGHT_EXCLUSIVE_HOST": "yes",
        }
        config = ConfigManager(str(tmp_path), environ=environ).load()

        assert config["web"]["host"] == "127.0.0.1"
        assert config["web"]["port"] == 9000
        assert config["auth"]["password_hours"] == 1.5
        assert config["auth"]["exclusive_host"] is True

    def test_bad_env_values_are_ignored(self, tmp_path: Path) -> None:
        environ = {"PHOLIGHT_PORT": "three thousand", "PHOLIGHT_EXCLUSIVE_HOST": "maybe"}
        config = ConfigManager(str(tmp_path), environ=environ).load()

        assert config["web"]["port"] == 3000
        assert config["auth"]["exclusive_host"] is False

    def test_empty_env_values_are_ignored(self, tmp_path: Path) -> None:
        config = ConfigManager(str(tmp_path), environ={"PHOLIGHT_HOST": ""}).load()
        assert config["web"]["host"] == "0.0.0.0"


class TestSave:
    def test_update_writes_known_sections(self, tmp_path: Path) -> None:
        manager = ConfigManager(str(tmp_path), environ={})
        manager.update({"web": {"port": 4000}, "_internal": True})

        saved = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))
        assert saved["web"]["port"] == 4000
        assert "_internal" not in saved
        assert manager.load()["web"]["port"] == 4000

    def test_client_dir_resolves_relative_paths(self, tmp_path: Path) -> None:
        manager = ConfigManager(str(tmp_path), environ={})
        config = manager.load()

        assert manager.client_dir(config) == str(tmp_path / "client")
        config["web"]["client_dir"] = str(tmp_path / "elsewhere")
        assert manager.client_dir(config) == str(tmp_path / "elsewhere")

    def test_update_does_not_persist_env_overrides(self, tmp_path: Path) -> None:
        """Environment values apply at load time only, never to the saved file."""
        (tmp_path / "config.yaml").write_text("web:\n  port: 8123\n", encoding="utf-8")
        manager = ConfigManager(str(tmp_path), environ={"PHOLIGHT_PORT": "9999"})

        manager.update({"auth": {"exclusive_host": True}})

        saved = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))
        assert saved["web"]["port"] == 8123
        assert saved["auth"]["exclusive_host"] is True
        assert manager.load()["web"]["port"] == 9999
