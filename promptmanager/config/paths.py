# promptmanager/config/paths.py
import os
import sys
from pathlib import Path
from typing import Optional

APP_NAME = "PromptManager"
CONFIG_FILE_NAME = "config.json"
CONFIG_ENV_VAR = "PROMPTMANAGER_CONFIG"

def is_frozen() -> bool:
    """True inside a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False)) and hasattr(sys, "_MEIPASS")

def _config_root() -> Path:
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"

def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path

def get_user_data_dir() -> Path:
    """%APPDATA%/PromptManager on Windows, $XDG_CONFIG_HOME/PromptManager (or ~/.config) elsewhere."""
    return _ensure_dir(_config_root() / APP_NAME)

def get_user_config_file() -> Path:
    """$PROMPTMANAGER_CONFIG when set, else config.json in the user data dir."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_user_data_dir() / CONFIG_FILE_NAME

def get_user_log_dir() -> Path:
    return _ensure_dir(get_user_data_dir() / "logs")

def get_bundled_config_path() -> Optional[Path]:
    """config.json shipped with a frozen build: inside _MEIPASS first, then next to the executable."""
    if not is_frozen():
        return None
    candidates = (
        Path(sys._MEIPASS) / CONFIG_FILE_NAME, # type: ignore[attr-defined]
        Path(sys.executable).parent / CONFIG_FILE_NAME,
    )
    return next((path for path in candidates if path.exists()), None)
