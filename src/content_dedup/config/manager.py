import os
import json
import copy
import logging
from pathlib import Path
from typing import Any, Optional


CONFIG_ENV_VAR = 'CONTENT_DEDUP_CONFIG'

DEFAULT_CONFIG = {
    "deduplication": {
        "enabled": True,
        "similarity_threshold": 0.7,
        "signals": {
            "title_threshold": 0.7,
            "content_threshold": 0.65,
            "content_prefix_length": 200,
            "title_weight": 0.5,
            "content_weight": 0.5,
            "category_weight": 0.1,
            "tag_weight": 0.1
        },
        "merge_policy": {
            "keep_primary_title": True,
            "combine_content": False,
            "merge_tags": True,
            "merge_categories": True
        }
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8080,
        "title": "Content Dedup Server",
        "version": "1.0.0",
        "protocol_version": "2025-06-18"
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    }
}


class Config:
    """Configuration manager with JSON-based configuration layered over built-in defaults."""

    def __init__(self, config_path: Optional[str] = None, setup_logging: bool = True):
        # Set up paths relative to project root
        self.project_root = Path(__file__).parent.parent.parent.parent

        if config_path:
            self.config_path = config_path
        elif os.environ.get(CONFIG_ENV_VAR):
            self.config_path = os.environ[CONFIG_ENV_VAR]
        else:
            self.config_path = str(self.project_root / "config.json")

        self._config = self._merge_configs(self._get_default_config(), self._load_config())
        if setup_logging:
            self._setup_logging()

    def _load_config(self) -> dict:
        """Load configuration from JSON file, empty on any failure"""
        config_file = Path(self.config_path)
        if not config_file.exists():
            logging.warning(f"Configuration file not found: {self.config_path}, using defaults")
            return {}

        config = self._load_json_file(config_file)
        if config:
            logging.info(f"Configuration loaded from {self.config_path}")
        return config

    def _get_default_config(self) -> dict:
        """Fallback default configuration"""
        return copy.deepcopy(DEFAULT_CONFIG)

    def _setup_logging(self):
        """Setup logging based on configuration"""
        log_config = self._config.get('logging', {})
        handlers = [logging.StreamHandler()]

        log_file = log_config.get('file')
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))

        logging.basicConfig(
            level=getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO),
            format=log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            handlers=handlers
        )

    def _load_json_file(self, file_path: Path) -> dict:
        """Load a JSON configuration file"""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"Failed to load config file {file_path}: {e}")
            return {}
        if not isinstance(data, dict):
            logging.error(f"Config file {file_path} must contain a JSON object")
            return {}
        return data

    def _merge_configs(self, base: dict, overlay: dict) -> dict:
        """Deep merge two configuration dictionaries"""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, *keys, default=None) -> Any:
        """Get nested configuration value"""
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_deduplication_config(self) -> dict:
        """Get deduplication configuration"""
        return self.get('deduplication', default={})

    def get_server_config(self) -> dict:
        """Get server configuration"""
        return self.get('server', default={})

    def get_logging_config(self) -> dict:
        """Get logging configuration"""
        return self.get('logging', default={})
