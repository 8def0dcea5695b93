"""Tests for alert classification and summaries."""

from zapctl.modules.scan import (
    Alert,
    Severity,
    classify_alerts,
    render_summary,
    summarize_alert,
    truncate,
)


def _alerts() -> list[Alert]:
    return [
        Alert(Severity.LOW, "Cookie Flag", "http://example.test/"),
        Alert(Severity.HIGH, "SQLi", "http://example.test/login", "Injection"),
        Alert(Severity.INFORMATIONAL, "Modern App", "http://example.test/"),
        Alert(Severity.MEDIUM, "CSP", "http://example.test/"),
        Alert(Severity.HIGH, "XSS", "http://example.test/search"),
    ]


class TestClassifyAlerts:
    """Tests for classify_alerts."""

    def test_default_threshold_partitions_in_order(self):
        result = classify_alerts(_alerts(), Severity.MEDIUM)

        assert [a.name for a in result.notable] == ["SQLi", "CSP", "XSS"]
        assert [a.name for a in result.other] == ["Cookie Flag", "Modern App"]

    def test_high_threshold(self):
        result = classify_alerts(_alerts(), Severity.HIGH)
        assert [a.name for a in result.notable] == ["SQLi", "XSS"]

    def test_informational_threshold_keeps_everything(self):
        result = classify_alerts(_alerts(), Severity.INFORMATIONAL)
        assert len(result.notable) == 5
        assert result.other == []

    def test_counts_ordered_high_first(self):
        result = classify_alerts(_alerts(), Severity.MEDIUM)
        assert list(result.counts.items()) == [
            (Severity.HIGH, 2),
            (Severity.MEDIUM, 1),
            (Severity.LOW, 1),
            (Severity.INFORMATIONAL, 1),
        ]

    def test_empty(self):
        result = classify_alerts([], Severity.MEDIUM)
        assert result.notable == []
        assert sum(result.counts.values()) == 0


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self):
        assert truncate("short", 100) == "short"

    def test_long_text_cut_and_marked(self):
        text = "a" * 150
        assert truncate(text, 100) == "a" * 100 + "..."

    def test_exact_length_not_marked(self):
        assert truncate("b" * 100, 100) == "b" * 100

    def test_whitespace_collapsed(self):
        assert truncate("line one\n\n  line two", 100) == "line one line two"


class TestSummaries:
    """Tests for summary rendering."""

    def test_summarize_alert_lines(self):
        alert = Alert(Severity.HIGH, "SQLi", "http://example.test/login", "x" * 120)

        lines = summarize_alert(alert)

        assert lines[0] == "- High Risk: SQLi"
        assert lines[1] == "  URL: http://example.test/login"
        assert lines[2] == "  Description: " + "x" * 100 + "..."

    def test_summarize_alert_custom_limit(self):
        alert = Alert(Severity.MEDIUM, "CSP", "http://example.test/", "abcdefghij")
        assert summarize_alert(alert, description_limit=4)[2] == "  Description: abcd..."

    def test_render_summary(self):
        text = render_summary(classify_alerts(_alerts(), Severity.HIGH))

        assert text.startswith("2 notable alert(s):")
        assert "- High Risk: XSS" in text
        assert "CSP" not in text

    def test_render_summary_without_notable_alerts(self):
        text = render_summary(classify_alerts([], Severity.MEDIUM))
        assert text == "No alerts at or above Medium (Medium/High)"
