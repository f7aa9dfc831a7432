"""
Configuration loader for wordvec.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.exceptions import WordVecConfigError
from .core.logging import parse_level
from .query import DEFAULT_MAX_WORKERS
from .reader import DEFAULT_CHUNK_SIZE


logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")

# Environment variable -> dotted config key
ENV_OVERRIDES = {
    "WORDVEC_VECTORS_PATH": "vectors.path",
    "WORDVEC_STRICT": "vectors.strict",
    "WORDVEC_DEFAULT_K": "query.default_k",
    "WORDVEC_MAX_WORKERS": "query.max_workers",
    "WORDVEC_LOG_LEVEL": "logging.level",
    "WORDVEC_LOG_STRUCTURED": "logging.structured",
}


class WordVecConfig:
    """
    Configuration for loading vectors and running queries.

    Values come from defaults, then an optional YAML file, then
    ``WORDVEC_*`` environment variables.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (optional)

        Raises:
            WordVecConfigError: If the file is missing, unreadable or invalid
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = self._default_config()
        if self.config_path:
            _merge(self.config, self._load_config())
        self._check_sections()
        self._apply_env_overrides()
        self._validate()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise WordVecConfigError(f"Config file not found: {self.config_path}")

        logger.info(f"Loading config from: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise WordVecConfigError(f"Invalid YAML in {self.config_path}: {e}") from e
        except OSError as e:
            raise WordVecConfigError(f"Cannot read config file {self.config_path}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise WordVecConfigError(f"Config root must be a mapping: {self.config_path}")
        return config

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "vectors": {
                "path": None,
                "strict": False,
                "chunk_size": DEFAULT_CHUNK_SIZE,
            },
            "query": {
                "default_k": 10,
                "max_workers": DEFAULT_MAX_WORKERS,
            },
            "logging": {
                "level": "INFO",
                "structured": False,
            },
        }

    def _check_sections(self) -> None:
        """Reject file values that replace a section with a non-mapping."""
        for section in ("vectors", "query", "logging"):
            if not isinstance(self.config.get(section), dict):
                raise WordVecConfigError(f"{section} must be a mapping")

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        for env_name, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None or value == "":
                continue
            section, name = key.split(".")
            self.config.setdefault(section, {})[name] = value

    def _validate(self) -> None:
        """Coerce typed values and reject invalid ones."""
        vectors = self.config.setdefault("vectors", {})
        query = self.config.setdefault("query", {})
        log_config = self.config.setdefault("logging", {})

        vectors["strict"] = _to_bool(vectors.get("strict", False))
        vectors["chunk_size"] = _to_positive_int("vectors.chunk_size", vectors.get("chunk_size"))
        query["default_k"] = _to_positive_int("query.default_k", query.get("default_k"))
        query["max_workers"] = _to_positive_int("query.max_workers", query.get("max_workers"))
        log_config["structured"] = _to_bool(log_config.get("structured", False))

        try:
            parse_level(log_config.get("level", "INFO"))
        except ValueError as e:
            raise WordVecConfigError(str(e)) from e

    @property
    def vectors_path(self) -> Optional[Path]:
        path = self.get("vectors.path")
        return Path(path) if path else None

    @property
    def strict(self) -> bool:
        return self.get("vectors.strict", False)

    @property
    def chunk_size(self) -> int:
        return self.get("vectors.chunk_size", DEFAULT_CHUNK_SIZE)

    @property
    def default_k(self) -> int:
        return self.get("query.default_k", 10)

    @property
    def max_workers(self) -> int:
        return self.get("query.max_workers", DEFAULT_MAX_WORKERS)

    @property
    def log_level(self) -> int:
        return parse_level(self.get("logging.level", "INFO"))

    @property
    def structured_logs(self) -> bool:
        return self.get("logging.structured", False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge ``override`` into ``base``."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _to_positive_int(key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise WordVecConfigError(f"{key} must be an integer, got {value!r}")
    if number <= 0:
        raise WordVecConfigError(f"{key} must be positive, got {number}")
    return number
