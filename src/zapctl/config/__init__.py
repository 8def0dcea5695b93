"""
Configuration management for zapctl.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Project .env file (./.env)
3. Global config file (~/.zapctl/config.yml)
4. Default values (lowest priority)
"""

from zapctl.modules.scan.settings import (
    ConfigError,
    ScanSettings,
    mask_secret,
    parse_severity,
)

from .env_loader import (
    global_config_path,
    load_env_file,
    load_global_config,
    load_project_config,
)
from .getters import (
    get_api_key,
    get_bool,
    get_config,
    get_engine_url,
    get_target_url,
)
from .settings import ENV_KEYS, load_settings

__all__ = [
    # env_loader
    "global_config_path",
    "load_env_file",
    "load_global_config",
    "load_project_config",
    # getters
    "get_api_key",
    "get_bool",
    "get_config",
    "get_engine_url",
    "get_target_url",
    # settings
    "ENV_KEYS",
    "ConfigError",
    "ScanSettings",
    "load_settings",
    "mask_secret",
    "parse_severity",
]
