"""JSON summary of a scan outcome for CI consumption."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from zapctl.modules.scan.classify import truncate
from zapctl.modules.scan.models import ScanOutcome

from .artifact import write_artifact


def build_summary_payload(outcome: ScanOutcome, description_limit: int = 100) -> dict[str, Any]:
    """Return a JSON-serializable summary of ``outcome``."""
    session = outcome.session
    report = outcome.report
    classification = outcome.classification
    failure = session.failure

    return {
        "report_metadata": {
            "generated_at": datetime.now().isoformat(),
            "tool": "zapctl",
        },
        "scan": {
            "target": session.target,
            "engine": session.engine_url,
            "scan_id": session.scan_id,
            "phase": session.phase.value,
            "progress": session.progress,
            "duration_seconds": round(outcome.duration, 3),
            "exit_code": outcome.exit_code,
        },
        "summary": {
            "total_alerts": len(report.alerts) if report else 0,
            "threshold": classification.threshold.label if classification else None,
            "notable": len(classification.notable) if classification else 0,
            "by_severity": {
                severity.label: count for severity, count in classification.counts.items()
            }
            if classification
            else {},
        },
        "notable_alerts": [
            {
                "severity": alert.severity.label,
                "name": alert.name,
                "url": alert.url,
                "description": truncate(alert.description, description_limit),
            }
            for alert in (classification.notable if classification else [])
        ],
        "artifact": {
            "path": str(report.path) if report and report.path else None,
            "error": str(report.artifact_error) if report and report.artifact_error else None,
        },
        "failure": {
            "phase": failure.phase,
            "reason": failure.reason,
            "message": failure.message,
        }
        if failure
        else None,
    }


def write_summary_json(path: Path, outcome: ScanOutcome, description_limit: int = 100) -> Path:
    """Write the JSON summary of ``outcome`` to ``path``."""
    payload = build_summary_payload(outcome, description_limit=description_limit)
    return write_artifact(path, json.dumps(payload, indent=2).encode("utf-8"))
