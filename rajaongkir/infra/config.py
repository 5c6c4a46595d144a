"""
Configuration Manager
---------------------
Loads client settings from YAML with environment variable overrides.

Example rajaongkir.yaml:

    client:
      api_key: your-api-key
      account_tier: pro
      timeout_seconds: 10
      headers:
        android-key: com.example.shop

Rules:
- Environment overrides file: client.account_tier <- RAJAONGKIR_CLIENT_ACCOUNT_TIER
- RAJAONGKIR_API_KEY / RAJAONGKIR_ACCOUNT_TIER are accepted as short forms
- Keep the API key out of version control; prefer the environment
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import os

import yaml

from rajaongkir.api.client import DEFAULT_TIMEOUT_SECONDS, ClientConfig
from rajaongkir.core.errors import ConfigurationError
from rajaongkir.infra.logging import get_logger

DEFAULT_CONFIG_PATH = "rajaongkir.yaml"
ENV_PREFIX = "RAJAONGKIR_"

# Short environment names checked after the dotted form
ENV_ALIASES: Dict[str, str] = {
    "client.api_key": "RAJAONGKIR_API_KEY",
    "client.account_tier": "RAJAONGKIR_ACCOUNT_TIER",
}


class ConfigManager:
    """
    Centralized configuration management.
    Loads configuration from YAML with environment variable overrides.
    """

    def __init__(self, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH):
        self._config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._logger = get_logger("infra.config")

        self._load_config()

    @property
    def path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not self._config_path.exists():
            # Environment-only setups are normal
            self._logger.info(f"Config file not found: {self._config_path}")
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self._config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"{self._config_path} must contain a mapping, got {type(loaded).__name__}"
            )
        self._config = loaded
        self._logger.info(f"Loaded config from {self._config_path}")

    @staticmethod
    def env_key(key: str) -> str:
        return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Supports dot notation: 'section.key'
        Environment variables override file config.
        """
        for env_key in (self.env_key(key), ENV_ALIASES.get(key)):
            if env_key:
                env_value = os.getenv(env_key)
                if env_value is not None:
                    return env_value

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section."""
        value = self._config.get(section, {})
        return value if isinstance(value, dict) else {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()


def _timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"timeout_seconds must be a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigurationError(f"timeout_seconds must be positive, got {timeout}")
    return timeout


def client_config_from(
    manager: ConfigManager,
    api_key: Optional[str] = None,
    account_tier: Optional[str] = None,
    extra_headers: Optional[Dict[str, str]] = None,
    timeout_seconds: Optional[float] = None,
) -> ClientConfig:
    """
    Build a ClientConfig from a loaded ConfigManager.

    Explicit arguments take precedence over file and environment values.
    extra_headers are merged over client.headers.
    """
    api_key = api_key or manager.get("client.api_key")
    if not api_key:
        raise ConfigurationError(
            f"No API key configured. Set client.api_key in {manager.path} "
            f"or the RAJAONGKIR_API_KEY environment variable."
        )

    headers = manager.get("client.headers", {}) or {}
    if not isinstance(headers, dict):
        raise ConfigurationError("client.headers must be a mapping of header name to value")
    headers = {str(name): str(value) for name, value in headers.items()}
    headers.update(extra_headers or {})

    if timeout_seconds is None:
        timeout_seconds = manager.get("client.timeout_seconds", DEFAULT_TIMEOUT_SECONDS)

    return ClientConfig(
        api_key=str(api_key),
        account_tier=account_tier or manager.get("client.account_tier", "starter"),
        extra_headers=headers,
        timeout_seconds=_timeout(timeout_seconds),
    )


def load_client_config(path: Optional[Union[str, Path]] = None) -> ClientConfig:
    """Load a ClientConfig from a YAML file (default rajaongkir.yaml) and the environment."""
    return client_config_from(ConfigManager(path or DEFAULT_CONFIG_PATH))
