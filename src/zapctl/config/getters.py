"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from .env_loader import load_global_config, load_project_config


def get_config(key: str, project_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Project .env file
    3. Global config file
    4. Default value

    Args:
        key: Configuration key
        project_dir: Optional project directory
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check project .env file
    project_config = load_project_config(project_dir)
    if project_config.get(key):
        return project_config[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config and global_config[key] is not None:
        return global_config[key]

    # 4. Return default
    return default


def get_bool(key: str, project_dir: Path | None = None, default: bool = False) -> bool:
    """Get a boolean flag (1/true/yes/on)."""
    value = get_config(key, project_dir)
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def get_engine_url(project_dir: Path | None = None) -> str:
    """Get ZAP control API endpoint (default: http://localhost:8080)."""
    return get_config("ZAP_API_URL", project_dir, default="http://localhost:8080")


def get_target_url(project_dir: Path | None = None) -> str:
    """Get URL of the system under test."""
    return get_config("BASE_URL", project_dir, default="http://localhost:8080")


def get_api_key(project_dir: Path | None = None) -> str:
    """Get ZAP API key (empty when ZAP runs with the key disabled)."""
    return str(get_config("ZAP_API_KEY", project_dir, default="") or "")
