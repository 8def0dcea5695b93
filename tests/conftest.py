"""Test configuration and fixtures for zapctl."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from zapctl.config import ENV_KEYS
from zapctl.modules.scan import ScanSettings

ENGINE_URL = "http://zap.test"
TARGET_URL = "http://example.test"


class FakeClock:
    """Monotonic clock advanced only by the paired ``sleep``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeEngine:
    """In-memory stand-in for :class:`ZAPClient`.

    ``statuses`` is consumed one per status call; the last value repeats. Any
    value that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        statuses: list[Any] | None = None,
        scan_id: Any = "42",
        alerts: list[dict[str, Any]] | Exception | None = None,
        report: bytes | Exception = b"<html>report</html>",
        seed_error: Exception | None = None,
    ) -> None:
        self.statuses = list(statuses if statuses is not None else [100])
        self.scan_id = scan_id
        self.alert_payloads = alerts if alerts is not None else []
        self.report = report
        self.seed_error = seed_error
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    async def __aenter__(self) -> "FakeEngine":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.closed = True

    async def access_url(self, url: str, timeout: float | None = None) -> None:
        self.calls.append(("access_url", url))
        if self.seed_error:
            raise self.seed_error

    async def start_active_scan(self, url: str, timeout: float | None = None) -> str:
        self.calls.append(("start_active_scan", url))
        if isinstance(self.scan_id, Exception):
            raise self.scan_id
        return self.scan_id

    async def scan_status(self, scan_id: str, timeout: float | None = None) -> int:
        self.calls.append(("scan_status", scan_id))
        value = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if isinstance(value, Exception):
            raise value
        return value

    async def alerts(self, base_url: str, timeout: float | None = None) -> list[dict[str, Any]]:
        self.calls.append(("alerts", base_url))
        if isinstance(self.alert_payloads, Exception):
            raise self.alert_payloads
        return self.alert_payloads

    async def html_report(self, timeout: float | None = None) -> bytes:
        self.calls.append(("html_report", None))
        if isinstance(self.report, Exception):
            raise self.report
        return self.report

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> Path:
    """Isolate configuration: no zapctl env vars, empty cwd and home."""
    for key in ENV_KEYS + ("HEALTH_PATH", "USER_TOKEN", "FEATURE_WITHDRAWALS"):
        monkeypatch.delenv(key, raising=False)
    home = temp_dir / "home"
    work = temp_dir / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(temp_dir: Path) -> ScanSettings:
    """Scan settings pointing at the fake engine and a temp report path."""
    return ScanSettings(
        target=TARGET_URL,
        engine_url=ENGINE_URL,
        api_key="test-key",
        passive_wait=5.0,
        poll_interval=2.0,
        poll_timeout=60.0,
        report_path=temp_dir / "security-report.html",
    )


@pytest.fixture
def sample_alerts() -> list[dict[str, Any]]:
    """Alert payloads as returned by the ZAP alerts view."""
    return [
        {
            "risk": "High",
            "name": "SQL Injection",
            "url": f"{TARGET_URL}/login",
            "description": "SQL injection may be possible. " * 10,
        },
        {
            "risk": "Low",
            "name": "Cookie No HttpOnly Flag",
            "url": f"{TARGET_URL}/",
            "description": "A cookie has been set without the HttpOnly flag.",
        },
        {
            "risk": "Medium",
            "name": "Content Security Policy Header Not Set",
            "url": f"{TARGET_URL}/",
            "description": "CSP is an added layer of security.",
        },
        {
            "risk": "Informational",
            "name": "Modern Web Application",
            "url": f"{TARGET_URL}/",
            "description": "The application appears to be a modern web application.",
        },
    ]
