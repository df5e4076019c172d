"""
Configuration management for deeptag.

Provides a hierarchical configuration system with sensible defaults.
Supports both global (~/.config/deeptag/config.toml) and local
(deeptag.toml) configurations.
"""
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, asdict

from deeptag.constants import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    MAX_PAGE_CHARS,
)

# Settings exposed to the host application's settings panel
SETTINGS_SCHEMA = [
    {
        "key": "api_credential",
        "type": "string",
        "title": "DeepSeek API key",
        "description": "Enter your DeepSeek API key. It is stored locally.",
        "default": "",
    }
]


@dataclass
class DeeptagConfig:
    """
    deeptag configuration with sensible defaults.

    Configuration hierarchy (highest to lowest priority):
    1. Command-line arguments
    2. Environment variables (DEEPTAG_*)
    3. Explicit config file
    4. Local config file (./deeptag.toml or ./.deeptagrc)
    5. User config file (~/.config/deeptag/config.toml)
    6. System defaults
    """

    # Credential
    api_credential: str = field(default="")

    # Suggestion provider
    endpoint: str = field(default=DEFAULT_ENDPOINT)
    model: str = field(default=DEFAULT_MODEL)
    max_tokens: int = field(default=DEFAULT_MAX_TOKENS)
    temperature: float = field(default=DEFAULT_TEMPERATURE)
    timeout: float = field(default=0.0)  # 0 leaves the transport default

    # Extraction
    page_char_limit: int = field(default=MAX_PAGE_CHARS)

    # Advanced
    log_level: str = field(default="INFO")

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "DeeptagConfig":
        """
        Load configuration from files and environment.

        Args:
            config_file: Specific config file to load (overrides search)

        Returns:
            Merged configuration object
        """
        config = cls()

        user_config_path = Path.home() / ".config" / "deeptag" / "config.toml"
        if user_config_path.exists():
            config._merge(cls._load_toml(user_config_path))

        local_paths = [
            Path.cwd() / "deeptag.toml",
            Path.cwd() / ".deeptagrc",
            Path.cwd() / ".deeptag" / "config.toml"
        ]

        for path in local_paths:
            if path.exists():
                config._merge(cls._load_toml(path))
                break

        if config_file and config_file.exists():
            config._merge(cls._load_toml(config_file))

        config._apply_env_vars()

        return config

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        """Load TOML configuration file."""
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        """Merge configuration data into this instance."""
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def _apply_env_vars(self):
        """Apply environment variables with DEEPTAG_ prefix."""
        prefix = "DEEPTAG_"
        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()
                if hasattr(self, config_key):
                    self.set_value(config_key, value)

    def set_value(self, key: str, value: str):
        """
        Set a field from its string form, converting to the field's type.

        Raises:
            KeyError: If the key is not a configuration field
            ValueError: If the value cannot be converted
        """
        if not hasattr(self, key):
            raise KeyError(f"Unknown config key: {key}")
        current_value = getattr(self, key)
        if isinstance(current_value, bool):
            setattr(self, key, value.lower() in ("true", "1", "yes"))
        elif isinstance(current_value, int):
            setattr(self, key, int(value))
        elif isinstance(current_value, float):
            setattr(self, key, float(value))
        else:
            setattr(self, key, value)

    @property
    def request_timeout(self) -> Optional[float]:
        """Timeout to hand to the HTTP layer, None when unset."""
        return self.timeout if self.timeout and self.timeout > 0 else None

    def save(self, path: Optional[Path] = None):
        """
        Save current configuration to TOML file.

        Args:
            path: Path to save to (defaults to user config)
        """
        if path is None:
            path = Path.home() / ".config" / "deeptag" / "config.toml"

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(asdict(self), f)

    def persist(self, key: str, path: Optional[Path] = None):
        """
        Write a single setting into a TOML file, keeping its other entries.

        Values that only came from the environment or command line (such as
        an ``--api-key`` override) are not written.

        Args:
            key: Configuration field to write
            path: File to update (defaults to user config)
        """
        if not hasattr(self, key):
            raise KeyError(f"Unknown config key: {key}")
        if path is None:
            path = Path.home() / ".config" / "deeptag" / "config.toml"

        data = self._load_toml(path) if path.exists() else {}
        data[key] = getattr(self, key)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            tomli_w.dump(data, f)


# Global configuration instance
_config: Optional[DeeptagConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> DeeptagConfig:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from files
        config_file: Specific config file to load

    Returns:
        Global configuration instance
    """
    global _config
    if _config is None or reload:
        _config = DeeptagConfig.load(config_file)
    return _config


def init_config(config_file: Optional[Path] = None, **kwargs) -> DeeptagConfig:
    """
    Initialize configuration with command-line overrides.

    Args:
        config_file: Config file to load before applying overrides
        **kwargs: Configuration overrides (None values are ignored)

    Returns:
        Configured instance
    """
    config = get_config(reload=config_file is not None, config_file=config_file)

    for key, value in kwargs.items():
        if hasattr(config, key) and value is not None:
            setattr(config, key, value)

    return config
