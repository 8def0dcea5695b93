"""Runtime settings for one scan orchestration run."""

from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from .models import Severity


class ConfigError(ValueError):
    """Invalid configuration value."""


@dataclass(frozen=True)
class ScanSettings:
    """Everything one scan run needs. Passed explicitly to the orchestrator."""

    target: str = "http://localhost:8080"
    engine_url: str = "http://localhost:8080"
    api_key: str = ""
    passive_wait: float = 5.0
    poll_interval: float = 2.0
    poll_timeout: float = 600.0
    max_polls: int | None = None
    poll_retries: int = 0
    seed_timeout: float = 30.0
    start_timeout: float = 30.0
    request_timeout: float = 30.0
    notable_threshold: Severity = Severity.MEDIUM
    fail_on: Severity | None = None
    description_limit: int = 100
    report_path: Path = Path("security-report.html")

    def __post_init__(self) -> None:
        _require_http_url("target", self.target)
        _require_http_url("engine_url", self.engine_url)
        if self.passive_wait < 0:
            raise ConfigError("passive_wait must be >= 0")
        for name in (
            "poll_interval",
            "poll_timeout",
            "seed_timeout",
            "start_timeout",
            "request_timeout",
        ):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0")
        if self.max_polls is not None and self.max_polls < 1:
            raise ConfigError("max_polls must be >= 1")
        if self.poll_retries < 0:
            raise ConfigError("poll_retries must be >= 0")
        if self.description_limit < 1:
            raise ConfigError("description_limit must be >= 1")
        if not isinstance(self.report_path, Path):
            object.__setattr__(self, "report_path", Path(self.report_path))

    def with_overrides(self, **overrides: Any) -> "ScanSettings":
        """Return a copy with the non-None ``overrides`` applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    def masked(self) -> dict[str, Any]:
        """Return a display dict with the API key masked."""
        data = asdict(self)
        data["api_key"] = mask_secret(self.api_key)
        data["notable_threshold"] = self.notable_threshold.label
        data["fail_on"] = self.fail_on.label if self.fail_on is not None else None
        data["report_path"] = str(self.report_path)
        return data


def parse_severity(value: Any) -> Severity:
    """Parse a severity name for configuration, raising :class:`ConfigError`."""
    if isinstance(value, Severity):
        return value
    try:
        return Severity.parse(value)
    except ValueError:
        choices = ", ".join(s.label for s in Severity)
        raise ConfigError(f"Unknown severity {value!r}. Choose one of: {choices}") from None


def mask_secret(value: str) -> str:
    if not value:
        return ""
    return value[:4] + "..." + value[-2:] if len(value) > 8 else "***"


def _require_http_url(name: str, value: str) -> None:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"{name} must be an http(s) URL, got {value!r}")
