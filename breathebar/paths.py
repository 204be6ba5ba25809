from __future__ import annotations

import os
import sys
from pathlib import Path

APP_DIR_NAME = "BreatheBar"
LAUNCH_AGENT_LABEL = "dev.breathebar.app"


def data_directory() -> Path:
    override = os.environ.get("BREATHEBAR_HOME")
    if override:
        return Path(override).expanduser()
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    if sys.platform == "win32":
        local_appdata = os.environ.get("LOCALAPPDATA")
        base = Path(local_appdata) if local_appdata else Path.home() / "AppData" / "Local"
        return base / APP_DIR_NAME
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_DIR_NAME.lower()


def settings_path() -> Path:
    return data_directory() / "settings.json"


def database_path() -> Path:
    return data_directory() / "breathebar.sqlite3"


def launch_agent_path() -> Path:
    return Path.home() / "Library" / "LaunchAgents" / f"{LAUNCH_AGENT_LABEL}.plist"


def ensure_directories() -> None:
    data_directory().mkdir(parents=True, exist_ok=True)
