"""
recordcrypto Configuration Management

Handles loading and validation of configuration from a TOML file.

Precedence (highest first):
- Explicit overrides (e.g. recordctl --hash-key)
- RECORDCRYPTO_HASH_KEY environment variable
- Configuration file
- Built-in defaults
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, field

import toml

from .crypto.primitives import decode_hex, HASH_KEY_MIN_SIZE, HASH_KEY_MAX_SIZE
from .errors import CryptoError


# Default configuration path
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "recordcrypto" / "config.toml"

# Environment override for the hash key
HASH_KEY_ENV = "RECORDCRYPTO_HASH_KEY"

# Hash key used when none is configured
DEFAULT_HASH_KEY = "3f6a2b9d8c41e07f5a92d3b6c8e14f0a7b2d9e6c1f48a3b05e7d2c9f6a1b8e43"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CryptoConfig:
    """Crypto backend configuration."""
    hash_key: str = DEFAULT_HASH_KEY


@dataclass
class Config:
    """
    Complete recordcrypto configuration.
    """
    crypto: CryptoConfig = field(default_factory=CryptoConfig)

    # Paths
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)

    # Logging
    log_level: str = "INFO"

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'Config':
        """
        Load configuration from file and environment.

        Args:
            config_path: Path to config file (default: ~/.config/recordcrypto/config.toml)
            environ: Environment mapping (default: os.environ)

        Returns:
            Loaded configuration

        Raises:
            ValueError: If the file exists but is not valid TOML
        """
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        env = os.environ if environ is None else environ
        config = cls()
        config.config_path = path

        if path.exists():
            try:
                data = toml.load(path)
            except toml.TomlDecodeError as e:
                raise ValueError(f"Invalid configuration file {path}: {e}") from e
            config._apply_dict(data)

        if env.get(HASH_KEY_ENV):
            config.crypto.hash_key = env[HASH_KEY_ENV]

        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary data to config."""
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()

        if "crypto" in data:
            c = data["crypto"]
            if "hash_key" in c:
                self.crypto.hash_key = str(c["hash_key"])

    @property
    def log_level_number(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        try:
            key = decode_hex(self.crypto.hash_key, "Hash key")
        except CryptoError as e:
            raise ValueError(str(e)) from e

        if not HASH_KEY_MIN_SIZE <= len(key) <= HASH_KEY_MAX_SIZE:
            raise ValueError(
                f"Hash key must be {HASH_KEY_MIN_SIZE}-{HASH_KEY_MAX_SIZE} bytes (got {len(key)})"
            )
