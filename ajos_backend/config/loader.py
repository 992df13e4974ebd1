"""
Configuration loader
Supports loading configuration from TOML and YAML files, with environment variable override support
"""

import os
import re
import yaml
import toml
from typing import Dict, Any, Optional
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "AJOS_CONFIG_FILE"


class ConfigLoader:
    """Configuration loader class"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or self._get_default_config_file()
        self._config: Dict[str, Any] = {}

    def _get_default_config_file(self) -> str:
        """Get default configuration file path

        Strategy:
        1. AJOS_CONFIG_FILE environment variable, when set
        2. Otherwise ~/.config/ajos/config.toml (standard user configuration directory)
        3. If file doesn't exist, it is created from the default template during load()
        """
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            logger.info(f"Using configuration file from {CONFIG_ENV_VAR}: {env_path}")
            return env_path

        user_config_file = Path.home() / ".config" / "ajos" / "config.toml"
        logger.info(f"Using user configuration directory: {user_config_file}")
        return str(user_config_file)

    def load(self) -> Dict[str, Any]:
        """Load configuration, create default configuration if it doesn't exist"""
        config_path = Path(self.config_file)

        if not config_path.exists():
            logger.info(f"Configuration file doesn't exist: {self.config_file}")
            self._create_default_config(config_path)

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config_content = f.read()

            # Replace environment variables
            config_content = self._replace_env_vars(config_content)

            # Choose parser based on file extension
            if self.config_file.endswith(".toml"):
                self._config = toml.loads(config_content)
            else:
                self._config = yaml.safe_load(config_content) or {}

            logger.info(f"✓ Configuration file loaded successfully: {self.config_file}")
            return self._config

        except (yaml.YAMLError, toml.TomlDecodeError) as e:
            logger.error(f"Configuration file parsing error: {e}")
            raise
        except Exception as e:
            logger.error(f"Configuration loading failed: {e}")
            raise

    def _create_default_config(self, config_path: Path) -> None:
        """Create default configuration file"""
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            default_config = self._get_default_config_content(config_path.parent)

            with open(config_path, "w", encoding="utf-8") as f:
                f.write(default_config)

            logger.info(f"✓ Default configuration file created: {config_path}")

        except Exception as e:
            logger.error(f"Failed to create default configuration file: {e}")
            raise

    def _get_default_config_content(self, config_dir: Path) -> str:
        """Get default configuration content"""
        # Avoid circular imports: use path directly, don't import get_data_dir
        return f"""# AJ OS backend configuration file
# Location: {config_dir / "config.toml"}

[server]
host = "127.0.0.1"
port = 8000
debug = false
cors_origins = ["*"]

[backend]
# Hosted database REST endpoint; leave empty to run in local-only mode
url = "${{AJOS_BACKEND_URL:}}"
anon_key = "${{AJOS_BACKEND_KEY:}}"
timeout = 15.0

[storage]
# Local cache location (sqlite key-value store)
cache_path = '{config_dir / "cache.db"}'
# Retry daily entry writes without pinned/position while the backend schema lags behind
legacy_schema_fallback = true

[rate_limit]
max_requests = 100
window_seconds = 60

[insights]
system_start_date = "2026-01-12"

[llm]
api_key = "${{AJOS_GEMINI_API_KEY:}}"
model = "gemini-2.0-flash"
base_url = "https://generativelanguage.googleapis.com/v1beta"
max_retries = 0
timeout = 30.0

[logging]
level = "INFO"
logs_dir = '{config_dir / "logs"}'
max_file_size = "10MB"
backup_count = 5
"""

    def _replace_env_vars(self, content: str) -> str:
        """Replace environment variable placeholders"""

        def replace_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) else ""
            return os.getenv(var_name, default_value)

        # Match ${VAR_NAME} or ${VAR_NAME:default_value} format
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"
        return re.sub(pattern, replace_var, content)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value, supports dot-separated nested keys"""
        keys = key.split(".")
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default


# Global configuration instance
_config_instance: Optional[ConfigLoader] = None


def get_config(config_file: Optional[str] = None) -> ConfigLoader:
    """Get global configuration instance"""
    global _config_instance
    if config_file is not None:
        _config_instance = ConfigLoader(config_file)
        _config_instance.load()
    elif _config_instance is None:
        _config_instance = ConfigLoader()
        _config_instance.load()
    return _config_instance
