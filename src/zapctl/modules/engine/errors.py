"""Error taxonomy for scan orchestration against the ZAP control API."""


class ScanError(RuntimeError):
    """Base class for errors raised while driving a scan.

    ``phase`` is the lifecycle phase that was active when the error occurred. It is
    filled in by the orchestrator when the error is raised below it (e.g. by the
    engine client, which has no notion of phases).
    """

    reason = "error"

    def __init__(self, message: str, phase: str | None = None):
        super().__init__(message)
        self.message = message
        self.phase = phase


class TransportError(ScanError):
    """Network or connection failure while talking to the engine."""

    reason = "transport"


class EngineError(ScanError):
    """Engine answered with a non-success status, an error payload or bad data."""

    reason = "engine"

    def __init__(self, message: str, phase: str | None = None, status_code: int | None = None):
        super().__init__(message, phase=phase)
        self.status_code = status_code


class ScanTimeoutError(ScanError):
    """Polling did not observe completion within the configured bound."""

    reason = "timeout"


class PartialArtifactError(ScanError):
    """Report fetch or write failed after alerts were retrieved. Non-fatal."""

    reason = "artifact"


class ScanCancelledError(ScanError):
    """External cancellation was observed."""

    reason = "cancelled"


class SeverityPolicyError(ScanError):
    """Alerts at or above the configured failure severity were found."""

    reason = "policy"
