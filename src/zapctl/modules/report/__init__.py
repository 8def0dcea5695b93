"""Report artifact and summary output."""

from .artifact import write_artifact
from .json_report import build_summary_payload, write_summary_json

__all__ = ["build_summary_payload", "write_artifact", "write_summary_json"]
