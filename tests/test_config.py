"""
Configuration Tests
-------------------
YAML loading, environment overrides and ClientConfig construction.
"""

import pytest

from rajaongkir.api.client import AccountTier
from rajaongkir.core.errors import ConfigurationError
from rajaongkir.infra.config import ConfigManager, client_config_from, load_client_config


CONFIG_YAML = """
client:
  api_key: file-key
  account_tier: basic
  timeout_seconds: 12.5
  headers:
    android-key: com.example.shop
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "rajaongkir.yaml"
    path.write_text(CONFIG_YAML)
    return path


class TestConfigManager:

    def test_missing_file_is_empty(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.yaml")

        assert manager.get("client.api_key") is None
        assert manager.get("client.account_tier", "starter") == "starter"
        assert manager.get_section("client") == {}

    def test_dot_notation(self, config_file):
        manager = ConfigManager(config_file)

        assert manager.get("client.account_tier") == "basic"
        assert manager.get("client.headers.android-key") == "com.example.shop"
        assert manager.get("client.missing", "fallback") == "fallback"

    def test_get_section(self, config_file):
        section = ConfigManager(config_file).get_section("client")

        assert section["api_key"] == "file-key"

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("RAJAONGKIR_CLIENT_ACCOUNT_TIER", "pro")

        assert ConfigManager(config_file).get("client.account_tier") == "pro"

    def test_short_environment_alias(self, config_file, monkeypatch):
        monkeypatch.setenv("RAJAONGKIR_API_KEY", "env-key")

        assert ConfigManager(config_file).get("client.api_key") == "env-key"

    def test_dotted_environment_name_wins_over_alias(self, config_file, monkeypatch):
        monkeypatch.setenv("RAJAONGKIR_API_KEY", "alias-key")
        monkeypatch.setenv("RAJAONGKIR_CLIENT_API_KEY", "dotted-key")

        assert ConfigManager(config_file).get("client.api_key") == "dotted-key"

    def test_reload(self, config_file):
        manager = ConfigManager(config_file)
        config_file.write_text("client:\n  account_tier: pro\n")

        manager.reload()

        assert manager.get("client.account_tier") == "pro"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("client: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigManager(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigManager(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert ConfigManager(path).get("client.api_key") is None


class TestLoadClientConfig:

    def test_from_file(self, config_file):
        config = load_client_config(config_file)

        assert config.api_key == "file-key"
        assert config.account_tier is AccountTier.BASIC
        assert config.timeout_seconds == 12.5
        assert config.base_url == "http://api.rajaongkir.com/basic/"
        assert config.headers["android-key"] == "com.example.shop"
        assert config.headers["key"] == "file-key"

    def test_environment_only(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RAJAONGKIR_API_KEY", "env-key")
        monkeypatch.setenv("RAJAONGKIR_ACCOUNT_TIER", "pro")

        config = load_client_config()

        assert config.api_key == "env-key"
        assert config.account_tier is AccountTier.PRO
        assert config.timeout_seconds == 30.0
        assert dict(config.extra_headers) == {}

    def test_default_path_in_working_directory(self, config_file, monkeypatch):
        monkeypatch.chdir(config_file.parent)

        assert load_client_config().api_key == "file-key"

    def test_missing_api_key(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError, match="No API key"):
            load_client_config()

    def test_unknown_tier(self, tmp_path):
        path = tmp_path / "rajaongkir.yaml"
        path.write_text("client:\n  api_key: k\n  account_tier: gold\n")

        with pytest.raises(ConfigurationError, match="Unknown account tier"):
            load_client_config(path)

    @pytest.mark.parametrize("timeout", ["soon", "-1", "0"])
    def test_bad_timeout(self, tmp_path, timeout):
        path = tmp_path / "rajaongkir.yaml"
        path.write_text(f"client:\n  api_key: k\n  timeout_seconds: '{timeout}'\n")

        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            load_client_config(path)

    def test_timeout_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("RAJAONGKIR_CLIENT_TIMEOUT_SECONDS", "3")

        assert load_client_config(config_file).timeout_seconds == 3.0

    def test_headers_must_be_mapping(self, tmp_path):
        path = tmp_path / "rajaongkir.yaml"
        path.write_text("client:\n  api_key: k\n  headers: [a, b]\n")

        with pytest.raises(ConfigurationError, match="headers"):
            load_client_config(path)

    def test_explicit_values_override(self, config_file):
        config = client_config_from(
            ConfigManager(config_file),
            api_key="cli-key",
            account_tier="pro",
            extra_headers={"ios-key": "com.example.ios"},
            timeout_seconds=2,
        )

        assert config.api_key == "cli-key"
        assert config.account_tier is AccountTier.PRO
        assert config.timeout_seconds == 2.0
        assert dict(config.extra_headers) == {
            "android-key": "com.example.shop",
            "ios-key": "com.example.ios",
        }
