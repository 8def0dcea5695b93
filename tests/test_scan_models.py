"""Tests for scan data models and settings."""

from pathlib import Path

import pytest

from zapctl.modules.engine import EngineError, ScanTimeoutError
from zapctl.modules.scan import (
    Alert,
    ConfigError,
    ScanOutcome,
    ScanPhase,
    ScanReport,
    ScanSession,
    ScanSettings,
    Severity,
)
from zapctl.modules.scan.settings import mask_secret, parse_severity


class TestSeverity:
    """Tests for Severity parsing and ordering."""

    def test_ordering(self):
        assert Severity.INFORMATIONAL < Severity.LOW < Severity.MEDIUM < Severity.HIGH

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("High", Severity.HIGH),
            ("medium", Severity.MEDIUM),
            (" LOW ", Severity.LOW),
            ("Informational", Severity.INFORMATIONAL),
            ("info", Severity.INFORMATIONAL),
            ("3", Severity.HIGH),
            (0, Severity.INFORMATIONAL),
        ],
    )
    def test_parse(self, value, expected):
        assert Severity.parse(value) is expected

    @pytest.mark.parametrize("value", ["Critical", "4", "-1", "", None])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            Severity.parse(value)

    def test_label(self):
        assert Severity.HIGH.label == "High"
        assert Severity.INFORMATIONAL.label == "Informational"


class TestAlert:
    """Tests for building alerts from ZAP payloads."""

    def test_from_payload(self):
        alert = Alert.from_payload(
            {"risk": "High", "name": "SQLi", "url": "http://example.test/login", "description": "x"}
        )
        assert alert == Alert(Severity.HIGH, "SQLi", "http://example.test/login", "x")

    def test_from_payload_accepts_riskcode_and_alert_keys(self):
        alert = Alert.from_payload({"riskcode": "2", "alert": "CSP Header Not Set"})
        assert alert.severity is Severity.MEDIUM
        assert alert.name == "CSP Header Not Set"
        assert alert.url == ""
        assert alert.description == ""

    @pytest.mark.parametrize(
        "payload",
        [
            {"risk": "High"},
            {"name": "No risk"},
            {"name": "Odd", "risk": "Severe"},
            "not an object",
        ],
    )
    def test_from_payload_rejects_malformed(self, payload):
        with pytest.raises(EngineError):
            Alert.from_payload(payload)


class TestScanSession:
    """Tests for the session state machine."""

    def _session(self) -> ScanSession:
        return ScanSession(target="http://example.test", engine_url="http://zap.test")

    def test_starts_in_init(self):
        session = self._session()
        assert session.phase is ScanPhase.INIT
        assert session.history == [ScanPhase.INIT]
        assert session.progress == 0

    def test_forward_transitions(self):
        session = self._session()
        for phase in (
            ScanPhase.SEEDED,
            ScanPhase.PASSIVE_WAIT,
            ScanPhase.SCANNING,
            ScanPhase.DONE,
            ScanPhase.REPORTED,
            ScanPhase.SUCCESS,
        ):
            session.advance(phase)
        assert session.phase is ScanPhase.SUCCESS
        assert session.phase.terminal

    def test_skipping_a_phase_is_rejected(self):
        session = self._session()
        with pytest.raises(RuntimeError, match="Invalid transition"):
            session.advance(ScanPhase.SCANNING)

    def test_terminal_phase_is_final(self):
        session = self._session()
        session.fail(ScanTimeoutError("too slow"))
        with pytest.raises(RuntimeError, match="already finished"):
            session.advance(ScanPhase.SEEDED)

    def test_fail_records_phase_on_error(self):
        session = self._session()
        session.advance(ScanPhase.SEEDED)
        error = EngineError("boom")

        session.fail(error)

        assert session.phase is ScanPhase.FAILED
        assert session.failure is error
        assert error.phase == "seeded"

    def test_fail_keeps_explicit_phase(self):
        session = self._session()
        error = EngineError("boom", phase="scanning")
        session.fail(error)
        assert error.phase == "scanning"

    def test_progress_is_monotonic(self):
        session = self._session()
        assert session.observe_progress(40) == 40
        assert session.observe_progress(20) == 40
        assert session.observe_progress(70) == 70
        assert session.progress == 70

    def test_progress_is_clamped(self):
        session = self._session()
        assert session.observe_progress(-5) == 0
        assert session.observe_progress(250) == 100


class TestScanOutcome:
    """Tests for outcome exit codes."""

    def test_exit_codes(self):
        session = ScanSession(target="http://example.test", engine_url="http://zap.test")
        outcome = ScanOutcome(session=session)
        session.fail(EngineError("boom"))
        assert outcome.exit_code == 1
        assert not outcome.succeeded

    def test_artifact_available(self, temp_dir: Path):
        assert not ScanReport().artifact_available
        assert ScanReport(path=temp_dir / "r.html").artifact_available


class TestScanSettings:
    """Tests for ScanSettings validation."""

    def test_defaults(self):
        settings = ScanSettings()
        assert settings.passive_wait == 5.0
        assert settings.poll_interval == 2.0
        assert settings.notable_threshold is Severity.MEDIUM
        assert settings.fail_on is None
        assert settings.report_path == Path("security-report.html")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"target": "example.test"},
            {"engine_url": "ftp://zap.test"},
            {"passive_wait": -1},
            {"poll_interval": 0},
            {"poll_timeout": -5},
            {"max_polls": 0},
            {"poll_retries": -1},
            {"description_limit": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            ScanSettings(**kwargs)

    def test_report_path_coerced(self):
        settings = ScanSettings(report_path="out/report.html")
        assert settings.report_path == Path("out/report.html")

    def test_with_overrides_ignores_none(self):
        settings = ScanSettings()
        updated = settings.with_overrides(poll_interval=None, passive_wait=1.0)
        assert updated.poll_interval == 2.0
        assert updated.passive_wait == 1.0
        assert settings.passive_wait == 5.0

    def test_masked_hides_api_key(self):
        data = ScanSettings(api_key="abcdef123456").masked()
        assert data["api_key"] == "abcd...56"
        assert data["notable_threshold"] == "Medium"

    def test_parse_severity_config_error(self):
        with pytest.raises(ConfigError, match="Choose one of"):
            parse_severity("urgent")

    def test_mask_secret(self):
        assert mask_secret("") == ""
        assert mask_secret("short") == "***"
