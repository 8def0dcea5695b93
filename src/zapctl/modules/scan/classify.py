"""Alert classification and human-readable summaries."""

from collections.abc import Iterable

from .models import Alert, AlertClassification, Severity


def classify_alerts(alerts: Iterable[Alert], threshold: Severity) -> AlertClassification:
    """Split alerts into notable (severity >= threshold) and other, keeping order."""
    result = AlertClassification(threshold=threshold)
    for alert in alerts:
        if alert.severity >= threshold:
            result.notable.append(alert)
        else:
            result.other.append(alert)
    return result


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with ``...``."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def summarize_alert(alert: Alert, description_limit: int = 100) -> list[str]:
    """Return the summary lines for one alert."""
    return [
        f"- {alert.severity.label} Risk: {alert.name}",
        f"  URL: {alert.url}",
        f"  Description: {truncate(alert.description, description_limit)}",
    ]


def render_summary(classification: AlertClassification, description_limit: int = 100) -> str:
    """Render the notable alerts as plain text."""
    if not classification.notable:
        labels = [s.label for s in Severity if s >= classification.threshold]
        return f"No alerts at or above {classification.threshold.label} ({'/'.join(labels)})"

    lines = [f"{len(classification.notable)} notable alert(s):"]
    for alert in classification.notable:
        lines.extend(summarize_alert(alert, description_limit))
    return "\n".join(lines)
