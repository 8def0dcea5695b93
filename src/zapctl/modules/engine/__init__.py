"""ZAP control-API client and the scan error taxonomy."""

from .client import ZAPClient, parse_progress
from .errors import (
    EngineError,
    PartialArtifactError,
    ScanCancelledError,
    ScanError,
    ScanTimeoutError,
    SeverityPolicyError,
    TransportError,
)

__all__ = [
    "EngineError",
    "PartialArtifactError",
    "ScanCancelledError",
    "ScanError",
    "ScanTimeoutError",
    "SeverityPolicyError",
    "TransportError",
    "ZAPClient",
    "parse_progress",
]
