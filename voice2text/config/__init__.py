"""Simple YAML configuration loader for Voice2Text."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "voice2text.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "relay": {
        "host": "0.0.0.0",
        "port": 3000,
        "web_root": "web",
        "default_document": "index.html",
        # Outbound TLS verification for forwarded requests only.
        "verify_upstream_tls": False,
    },
    "client": {
        "webhook_url": "",
        "relay_url": "http://localhost:3000",
        "field_name": "file",
        "async_ack_message": "Workflow was started",
        "demo_markers": ["example.com", "your-n8n-instance"],
        "demo_delay_seconds": 2.0,
    },
    "audio": {
        "sample_rate": 16000,
        "chunk_size": 1024,
        "channels": 1,
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/voice2text.log",
        "console_output": True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Voice2TextConfig:
    """Voice2Text configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, looks for voice2text.yaml
                        in the current directory and falls back to built-in defaults.
        """
        if config_path is None:
            candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
            self.config_file: Optional[Path] = candidate if candidate.exists() else None
        else:
            self.config_file = Path(config_path)
            if not self.config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        if self.config_file is None:
            logger.info("No configuration file found, using defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)
        else:
            logger.info(f"Loading configuration from: {self.config_file}")
            self.config = self._load_config()

    @classmethod
    def from_dict(cls, overrides: Dict[str, Any]) -> "Voice2TextConfig":
        """Build a configuration from defaults plus in-memory overrides."""
        config = cls.__new__(cls)
        config.config_file = None
        config.config = _merge(DEFAULT_CONFIG, overrides)
        return config

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)

            if not loaded:
                raise ValueError("Configuration file is empty")
            if not isinstance(loaded, dict):
                raise ValueError("Configuration file must contain a mapping")

            config = _merge(DEFAULT_CONFIG, loaded)

            # Resolve relative paths
            self._resolve_paths(config)

            logger.info("Configuration loaded successfully")
            return config

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ValueError(f"Failed to load configuration: {e}")

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        # Resolve web root served by the relay
        web_root = config['relay'].get('web_root')
        if web_root and not os.path.isabs(web_root):
            config['relay']['web_root'] = str(config_dir / web_root)

        # Resolve log file path
        log_path = config['logging'].get('file_path')
        if log_path and not os.path.isabs(log_path):
            config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'relay.port').

        Args:
            key_path: Dot-separated key path (e.g., 'client.webhook_url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'relay.port')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        # Set the final value
        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_web_root(self) -> Path:
        """Get the absolute directory served by the relay's static endpoint."""
        return Path(self.get('relay.web_root', 'web')).absolute()

    def get_webhook_url(self) -> str:
        """Get the configured webhook target, stripped of surrounding whitespace."""
        return str(self.get('client.webhook_url') or '').strip()
