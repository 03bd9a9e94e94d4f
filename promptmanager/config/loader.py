# promptmanager/config/loader.py
import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from loguru import logger

from .schema import AppConfig
from .paths import get_user_config_file, get_bundled_config_path

_cached_config: Optional[AppConfig] = None

def _config_source() -> Optional[Path]:
    """User (or $PROMPTMANAGER_CONFIG) file if present, else a bundled one, else None."""
    user_path = get_user_config_file()
    if user_path.exists():
        return user_path
    return get_bundled_config_path()

def _read_json(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Top-level JSON value must be an object, got {type(data).__name__}")
    return data

def load_config() -> AppConfig:
    """
    Loads the application configuration. The file is only read, never written;
    a missing, unreadable or invalid file means the built-in defaults.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    source = _config_source()
    if source is None:
        logger.info("No config file found. Using default settings.")
        _cached_config = AppConfig()
        return _cached_config

    logger.info(f"Loading configuration from: {source}")
    try:
        _cached_config = AppConfig(**_read_json(source))
    except (json.JSONDecodeError, OSError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        level = "validation" if isinstance(e, ValidationError) else "read"
        logger.error(f"Config {level} failed for {source}: {e}")
        logger.warning("Falling back to default configuration.")
        _cached_config = AppConfig()
    return _cached_config

def get_config() -> AppConfig:
    """Returns the cached configuration object, loading if necessary."""
    return _cached_config if _cached_config is not None else load_config()

def reset_config_cache() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _cached_config
    _cached_config = None
