"""
================================================================================
Web Helpers Common Utilities
================================================================================

Configuration management and logging setup shared by the UI helpers.

Exports:
    - get_config: Read a configuration value by dot-notation key
    - set_config: Override a configuration value at runtime
    - reload_config: Drop cached configuration and load it again
    - init_logger: Initialize the loguru logger with standard settings
    - ConfigurationError: Raised for unreadable configuration files

Configuration loading order (later wins):
    1. Built-in defaults
    2. YAML file ($WEB_HELPERS_CONFIG, ./config/config.yaml, repo config/)
    3. Environment-specific YAML (config/{ENV}.yaml)
    4. Environment variables using double underscores (TIMEOUTS__DEFAULT=5000)

Usage:
    from web_helpers.common import get_config, init_logger

    init_logger()
    timeout = get_config("timeouts.default", 3000)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import copy
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger


class ConfigurationError(Exception):
    """Raised when configuration loading fails."""
    pass


# ============================================================
# Configuration Management
# ============================================================

CONFIG_ENV_VAR = "WEB_HELPERS_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "format": "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
        "file": None,
        "rotation": "10 MB",
        "retention": "7 days",
    },
    "timeouts": {
        "default": 3000,
        "poll_interval": 500,
    },
    "browser": {
        "host": None,
        "unexpected_dialogs": "dismiss",
    },
    "screenshots": {
        "dir": "screenshots",
    },
}

_config: Dict[str, Any] = {}
_logger_initialized: bool = False


def _candidate_config_files() -> List[Path]:
    candidates = []
    explicit = os.getenv(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit))
    candidates.append(Path("config") / "config.yaml")
    candidates.append(Path(__file__).parent.parent.parent / "config" / "config.yaml")
    return candidates


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e


def _load_config() -> None:
    """
    Loads configuration from defaults, YAML files and environment variables.
    """
    global _config

    _config = copy.deepcopy(DEFAULT_CONFIG)

    config_file = next((p for p in _candidate_config_files() if p.exists()), None)
    if config_file is None:
        logger.debug("No configuration file found. Using defaults.")
    else:
        _config = _deep_merge(_config, _read_yaml(config_file))
        logger.debug(f"Loaded configuration from {config_file}")

        env = os.getenv("ENVIRONMENT", os.getenv("ENV", "dev"))
        env_config_path = config_file.parent / f"{env}.yaml"
        if env_config_path.exists():
            _config = _deep_merge(_config, _read_yaml(env_config_path))
            logger.debug(f"Merged environment config: {env_config_path}")

    _apply_env_overrides()


def _ensure_config_loaded() -> None:
    if not _config:
        _load_config()


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides() -> None:
    """
    Applies environment variable overrides to the configuration.

    Environment variable naming convention:
        - Use double underscore to separate nested keys
        - Example: TIMEOUTS__DEFAULT=5000 overrides timeouts.default
    """
    for key, value in os.environ.items():
        if "__" not in key:
            continue
        parts = [p.lower() for p in key.split("__") if p]
        if len(parts) < 2 or parts[0] not in DEFAULT_CONFIG:
            continue
        reference = _lookup(DEFAULT_CONFIG, parts)
        _set_nested(_config, parts, _convert_type(value, reference))


def _convert_type(value: str, reference: Any) -> Any:
    """
    Convert string value to match reference type.

    Used for environment variables which are always strings.
    """
    if reference is None:
        return value
    if isinstance(reference, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(reference, int):
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(reference, float):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _lookup(d: Dict, keys: List[str]) -> Any:
    value: Any = d
    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return None
    return value


def _set_nested(d: Dict, keys: List[str], value: Any) -> None:
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value


def get_config(key: str, default: Any = None) -> Any:
    """
    Retrieves a configuration value using a dot-separated key path.

    Args:
        key: Dot-separated key path (e.g., "timeouts.default").
        default: Default value to return if key is not found or is null.

    Returns:
        The configuration value, or the default if not found.

    Examples:
        >>> get_config("timeouts.poll_interval", 500)
        500
    """
    _ensure_config_loaded()
    value = _lookup(_config, key.split("."))
    return default if value is None else value


def set_config(key: str, value: Any) -> None:
    """
    Sets a configuration value at runtime.

    Args:
        key: Dot-separated key path.
        value: Value to set.
    """
    _ensure_config_loaded()
    _set_nested(_config, key.split("."), value)


def reload_config() -> None:
    """
    Reloads the configuration from files and environment.
    """
    global _config, _logger_initialized
    _config = {}
    _logger_initialized = False
    _load_config()
    logger.info("Configuration reloaded.")


# ============================================================
# Logging Setup
# ============================================================

def init_logger(level: Optional[str] = None, format_str: Optional[str] = None) -> None:
    """
    Initializes the loguru logger with consistent configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.

    Example:
        init_logger()  # Use configured defaults
        init_logger(level="DEBUG")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    log_level = (level or get_config("logging.level", "INFO")).upper()
    log_format = format_str or get_config("logging.format")

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    log_file = get_config("logging.file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


__all__ = [
    "ConfigurationError",
    "get_config",
    "set_config",
    "reload_config",
    "init_logger",
]
