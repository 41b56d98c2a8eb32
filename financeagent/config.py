"""Configuration loading for FinanceAgent.

Settings live in ``config.toml`` under the FinanceAgent home directory,
``~/.config/financeagent`` unless ``FINANCEAGENT_HOME`` points elsewhere.
"""

import os
from pathlib import Path
from typing import Optional

import toml

from financeagent.alerts.monitor import DEFAULT_CHECK_INTERVAL


DEFAULT_SESSION_ID = "default"


def get_home_dir() -> Path:
    """Get the directory holding config and database files."""
    override = os.environ.get("FINANCEAGENT_HOME")
    if override:
        return Path(override)
    return Path.home() / ".config" / "financeagent"


def get_config_path() -> Path:
    return get_home_dir() / "config.toml"


def get_db_path() -> Path:
    return get_home_dir() / "financeagent.db"


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration.

    Args:
        config_path: Optional explicit path. Uses the default location if
            not provided.

    Returns:
        Config dict, empty if no config file exists.

    Raises:
        toml.TomlDecodeError: If the file exists but is not valid TOML.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return {}
    return toml.load(path)


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Write a template configuration file.

    Returns:
        Path of the written file.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "openai": {
            "model": "gpt-4o",
        },
        "monitor": {
            "check_interval": DEFAULT_CHECK_INTERVAL,
        },
        "session": {
            "id": DEFAULT_SESSION_ID,
        },
    }

    with open(path, "w") as f:
        toml.dump(template, f)

    return path


def get_check_interval(config: dict) -> float:
    """Seconds between checks of one alert."""
    interval = config.get("monitor", {}).get("check_interval", DEFAULT_CHECK_INTERVAL)
    interval = float(interval)
    if interval <= 0:
        raise ValueError(f"monitor.check_interval must be positive, got {interval}")
    return interval


def get_session_id(config: dict) -> str:
    return config.get("session", {}).get("id") or DEFAULT_SESSION_ID


def get_openai_model(config: dict) -> Optional[str]:
    """Model from config, if set. ``OPENAI_MODEL`` takes precedence."""
    return os.environ.get("OPENAI_MODEL") or config.get("openai", {}).get("model")
