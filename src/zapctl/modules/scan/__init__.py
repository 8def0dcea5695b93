"""Scan orchestration against the ZAP control API."""

from .classify import classify_alerts, render_summary, summarize_alert, truncate
from .models import (
    Alert,
    AlertClassification,
    ScanOutcome,
    ScanPhase,
    ScanReport,
    ScanSession,
    Severity,
)
from .settings import ConfigError, ScanSettings
from .orchestrator import ScanOrchestrator, default_client_factory

__all__ = [
    "Alert",
    "AlertClassification",
    "ConfigError",
    "ScanOrchestrator",
    "ScanOutcome",
    "ScanPhase",
    "ScanReport",
    "ScanSession",
    "ScanSettings",
    "Severity",
    "classify_alerts",
    "default_client_factory",
    "render_summary",
    "summarize_alert",
    "truncate",
]
