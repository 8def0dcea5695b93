"""Load-test profiles handed to k6."""

from dataclasses import dataclass, field
from pathlib import Path

SCENARIO_DIR = Path(__file__).parent / "scenarios"


@dataclass(frozen=True)
class LoadStage:
    """One ramp stage: reach ``target`` virtual users over ``duration``."""

    duration: str
    target: int

    def to_flag(self) -> str:
        return f"{self.duration}:{self.target}"


@dataclass(frozen=True)
class LoadThresholds:
    """Pass/fail bounds handed to the scenario script as variables."""

    p95_ms: float | None = None
    error_rate: float | None = None

    def as_vars(self) -> dict[str, str]:
        """Script variables read by the scenario ``options.thresholds``."""
        values = {}
        if self.p95_ms is not None:
            values["P95_MS"] = f"{self.p95_ms:g}"
        if self.error_rate is not None:
            values["MAX_ERROR_RATE"] = f"{self.error_rate:g}"
        return values


@dataclass(frozen=True)
class LoadProfile:
    """A k6 scenario plus its virtual-user shape.

    Either ``vus``/``duration`` (fixed concurrency) or ``stages`` (ramp) is used.
    """

    name: str
    script: str
    description: str = ""
    vus: int | None = None
    duration: str | None = None
    stages: tuple[LoadStage, ...] = field(default_factory=tuple)
    thresholds: LoadThresholds = field(default_factory=LoadThresholds)

    @property
    def script_path(self) -> Path:
        return SCENARIO_DIR / self.script


@dataclass
class LoadTestEnv:
    """Variables passed to the scenario script with ``-e``."""

    base_url: str = "http://localhost:8080"
    health_path: str = "/health"
    user_token: str = ""
    feature_withdrawals: bool = False

    def as_vars(self) -> dict[str, str]:
        values = {
            "BASE_URL": self.base_url,
            "HEALTH_PATH": self.health_path,
            "FEATURE_WITHDRAWALS": "on" if self.feature_withdrawals else "off",
        }
        if self.user_token:
            values["USER_TOKEN"] = self.user_token
        return values


PROFILES: dict[str, LoadProfile] = {
    "smoke": LoadProfile(
        name="smoke",
        script="basic.js",
        description="10 VUs for 30s against the health endpoint",
        vus=10,
        duration="30s",
        thresholds=LoadThresholds(p95_ms=500),
    ),
    "trading": LoadProfile(
        name="trading",
        script="trading.js",
        description="Ramp to 20 VUs through the authenticated trading flow",
        stages=(
            LoadStage("30s", 10),
            LoadStage("1m", 20),
            LoadStage("30s", 0),
        ),
        thresholds=LoadThresholds(p95_ms=500, error_rate=0.01),
    ),
}
