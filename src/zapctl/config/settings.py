"""Build scan settings from layered configuration."""

from pathlib import Path
from typing import Any

from zapctl.modules.scan.settings import ConfigError, ScanSettings, parse_severity

from .getters import get_api_key, get_config, get_engine_url, get_target_url

ENV_KEYS = (
    "ZAP_API_URL",
    "BASE_URL",
    "ZAP_API_KEY",
    "ZAPCTL_PASSIVE_WAIT",
    "ZAPCTL_POLL_INTERVAL",
    "ZAPCTL_POLL_TIMEOUT",
    "ZAPCTL_MAX_POLLS",
    "ZAPCTL_POLL_RETRIES",
    "ZAPCTL_REQUEST_TIMEOUT",
    "ZAPCTL_NOTABLE_THRESHOLD",
    "ZAPCTL_FAIL_ON",
    "ZAPCTL_DESCRIPTION_LIMIT",
    "ZAPCTL_REPORT_PATH",
    "ZAPCTL_VERBOSE",
)


def load_settings(project_dir: Path | None = None, **overrides: Any) -> ScanSettings:
    """Build :class:`ScanSettings` from env, project .env, global config and defaults.

    Keyword ``overrides`` (typically CLI options) win over every source; ``None``
    values are ignored.
    """
    timeout = _float("ZAPCTL_REQUEST_TIMEOUT", project_dir, 30.0)
    fail_on = get_config("ZAPCTL_FAIL_ON", project_dir)
    max_polls = get_config("ZAPCTL_MAX_POLLS", project_dir)
    settings = ScanSettings(
        target=get_target_url(project_dir),
        engine_url=get_engine_url(project_dir),
        api_key=get_api_key(project_dir),
        passive_wait=_float("ZAPCTL_PASSIVE_WAIT", project_dir, 5.0),
        poll_interval=_float("ZAPCTL_POLL_INTERVAL", project_dir, 2.0),
        poll_timeout=_float("ZAPCTL_POLL_TIMEOUT", project_dir, 600.0),
        max_polls=None if max_polls is None else _to_int("ZAPCTL_MAX_POLLS", max_polls),
        poll_retries=_int("ZAPCTL_POLL_RETRIES", project_dir, 0),
        seed_timeout=timeout,
        start_timeout=timeout,
        request_timeout=timeout,
        notable_threshold=parse_severity(
            get_config("ZAPCTL_NOTABLE_THRESHOLD", project_dir, default="Medium")
        ),
        fail_on=parse_severity(fail_on) if fail_on else None,
        description_limit=_int("ZAPCTL_DESCRIPTION_LIMIT", project_dir, 100),
        report_path=Path(
            get_config("ZAPCTL_REPORT_PATH", project_dir, default="security-report.html")
        ),
    )
    return settings.with_overrides(**overrides)


def _float(key: str, project_dir: Path | None, default: float) -> float:
    value = get_config(key, project_dir, default=default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {value!r}") from None


def _int(key: str, project_dir: Path | None, default: int) -> int:
    return _to_int(key, get_config(key, project_dir, default=default))


def _to_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}") from None
