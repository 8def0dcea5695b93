"""Data models for scan sessions, alerts and outcomes."""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

from zapctl.modules.engine.errors import EngineError, PartialArtifactError, ScanError

logger = logging.getLogger(__name__)


class Severity(IntEnum):
    """Alert risk level. Ordered so threshold comparisons are plain ``>=``."""

    INFORMATIONAL = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Parse a ZAP risk string (``High``) or risk code (``3``)."""
        text = str(value).strip().lower()
        if text in _RISK_ALIASES:
            return _RISK_ALIASES[text]
        if text.isdigit() and int(text) in range(4):
            return cls(int(text))
        raise ValueError(f"Unknown severity: {value!r}")


_RISK_ALIASES = {
    "informational": Severity.INFORMATIONAL,
    "info": Severity.INFORMATIONAL,
    "low": Severity.LOW,
    "medium": Severity.MEDIUM,
    "high": Severity.HIGH,
}


class ScanPhase(Enum):
    """Lifecycle phase of a scan session."""

    INIT = "init"
    SEEDED = "seeded"
    PASSIVE_WAIT = "passive_wait"
    SCANNING = "scanning"
    DONE = "done"
    REPORTED = "reported"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (ScanPhase.SUCCESS, ScanPhase.FAILED)


# Forward edges only; FAILED is reachable from every non-terminal phase.
_TRANSITIONS: dict[ScanPhase, tuple[ScanPhase, ...]] = {
    ScanPhase.INIT: (ScanPhase.SEEDED,),
    ScanPhase.SEEDED: (ScanPhase.PASSIVE_WAIT,),
    ScanPhase.PASSIVE_WAIT: (ScanPhase.SCANNING,),
    ScanPhase.SCANNING: (ScanPhase.DONE,),
    ScanPhase.DONE: (ScanPhase.REPORTED,),
    ScanPhase.REPORTED: (ScanPhase.SUCCESS,),
    ScanPhase.SUCCESS: (),
    ScanPhase.FAILED: (),
}


@dataclass(frozen=True)
class Alert:
    """One finding reported by the engine."""

    severity: Severity
    name: str
    url: str
    description: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "Alert":
        """Build an alert from one entry of the ZAP ``alerts`` view."""
        if not isinstance(payload, dict):
            raise EngineError(f"Alert entry is not an object: {payload!r}")
        name = str(payload.get("name") or payload.get("alert") or "").strip()
        if not name:
            raise EngineError("Alert entry has no name")
        risk = payload.get("risk", payload.get("riskcode"))
        if risk is None:
            raise EngineError(f"Alert {name!r} has no risk")
        try:
            severity = Severity.parse(risk)
        except ValueError as exc:
            raise EngineError(f"Alert {name!r}: {exc}") from None
        return cls(
            severity=severity,
            name=name,
            url=str(payload.get("url") or ""),
            description=str(payload.get("description") or ""),
        )


@dataclass
class ScanSession:
    """Mutable state of one orchestration run."""

    target: str
    engine_url: str
    api_key: str = ""
    scan_id: str | None = None
    phase: ScanPhase = ScanPhase.INIT
    progress: int = 0
    started_at: float = field(default_factory=time.monotonic)
    history: list[ScanPhase] = field(default_factory=lambda: [ScanPhase.INIT])
    failure: ScanError | None = None

    def advance(self, phase: ScanPhase) -> None:
        """Move to ``phase``, rejecting edges the lifecycle does not have."""
        if self.phase.terminal:
            raise RuntimeError(f"Session already finished in {self.phase.value}")
        if phase is not ScanPhase.FAILED and phase not in _TRANSITIONS[self.phase]:
            raise RuntimeError(f"Invalid transition {self.phase.value} -> {phase.value}")
        logger.debug("%s: %s -> %s", self.target, self.phase.value, phase.value)
        self.phase = phase
        self.history.append(phase)

    def fail(self, error: ScanError) -> None:
        """Record ``error`` and move to FAILED."""
        if error.phase is None:
            error.phase = self.phase.value
        self.failure = error
        self.advance(ScanPhase.FAILED)

    def observe_progress(self, value: int) -> int:
        """Record a progress reading, keeping the maximum seen so far."""
        value = max(0, min(100, value))
        if value < self.progress:
            logger.warning(
                "Engine reported progress regression for scan %s: %d%% -> %d%%",
                self.scan_id,
                self.progress,
                value,
            )
            return self.progress
        self.progress = value
        return value


@dataclass
class ScanReport:
    """Rendered report artifact plus the alerts active at report time."""

    alerts: list[Alert] = field(default_factory=list)
    content: bytes | None = None
    path: Path | None = None
    artifact_error: PartialArtifactError | None = None

    @property
    def artifact_available(self) -> bool:
        return self.path is not None and self.artifact_error is None


@dataclass
class AlertClassification:
    """Alerts split by a severity threshold, each side in engine order."""

    threshold: Severity
    notable: list[Alert] = field(default_factory=list)
    other: list[Alert] = field(default_factory=list)

    @property
    def counts(self) -> dict[Severity, int]:
        tally = Counter(alert.severity for alert in self.notable + self.other)
        return {severity: tally.get(severity, 0) for severity in reversed(Severity)}


@dataclass
class ScanOutcome:
    """Final result of an orchestration run."""

    session: ScanSession
    report: ScanReport | None = None
    classification: AlertClassification | None = None
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.session.phase is ScanPhase.SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
