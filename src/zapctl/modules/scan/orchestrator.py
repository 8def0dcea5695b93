"""Drive a ZAP active scan from seeding to a saved report and a pass/fail outcome."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from zapctl.modules.engine.client import ZAPClient
from zapctl.modules.engine.errors import (
    EngineError,
    PartialArtifactError,
    ScanCancelledError,
    ScanError,
    ScanTimeoutError,
    SeverityPolicyError,
    TransportError,
)
from zapctl.modules.report.artifact import write_artifact
from zapctl.utils.async_utils import cancel_on

from .classify import classify_alerts
from .models import Alert, ScanOutcome, ScanPhase, ScanReport, ScanSession
from .settings import ScanSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

ClientFactory = Callable[[ScanSettings], Any]


def default_client_factory(settings: ScanSettings) -> ZAPClient:
    return ZAPClient(
        settings.engine_url,
        api_key=settings.api_key,
        timeout=settings.request_timeout,
    )


class ScanOrchestrator:
    """Run one scan session against the engine.

    The orchestrator never raises for scan failures: every run ends in a
    :class:`ScanOutcome` whose session is SUCCESS or FAILED. Task cancellation is
    recorded on the session and re-raised.
    """

    def __init__(
        self,
        settings: ScanSettings,
        client_factory: ClientFactory | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        progress: Callable[[str], None] | None = None,
        cancel_event: asyncio.Event | None = None,
    ):
        self.settings = settings
        self._client_factory = client_factory or default_client_factory
        self._sleep = sleep
        self._clock = clock
        self._progress = progress
        self._cancel_event = cancel_event
        self.session = ScanSession(
            target=settings.target,
            engine_url=settings.engine_url,
            api_key=settings.api_key,
            started_at=clock(),
        )

    async def run(self) -> ScanOutcome:
        """Execute the full lifecycle and return the outcome."""
        outcome = ScanOutcome(session=self.session)
        self._emit(f"Starting security scan for: {self.settings.target}")
        try:
            async with self._client_factory(self.settings) as client:
                await self._seed(client)
                await self._passive_wait()
                await self._start_scan(client)
                await self._poll_until_done(client)
                outcome.report = await self._collect_report(client)
            self._finish(outcome)
        except ScanError as exc:
            self._record_failure(exc)
        except asyncio.CancelledError:
            self._record_failure(ScanCancelledError("Scan task was cancelled"))
            raise
        except Exception as exc:
            logger.exception("Unexpected error while scanning %s", self.settings.target)
            self._record_failure(ScanError(str(exc) or type(exc).__name__))
        finally:
            outcome.duration = self._clock() - self.session.started_at
        return outcome

    async def _seed(self, client: Any) -> None:
        self.session.advance(ScanPhase.SEEDED)
        await self._guard(
            client.access_url(self.settings.target, timeout=self.settings.seed_timeout)
        )
        self._emit("Target URL accessed")

    async def _passive_wait(self) -> None:
        self.session.advance(ScanPhase.PASSIVE_WAIT)
        if self.settings.passive_wait > 0:
            self._emit(f"Waiting {self.settings.passive_wait:g}s for passive scanning")
            await self._pause(self.settings.passive_wait)

    async def _start_scan(self, client: Any) -> None:
        self.session.advance(ScanPhase.SCANNING)
        scan_id = await self._guard(
            client.start_active_scan(self.settings.target, timeout=self.settings.start_timeout)
        )
        if not scan_id:
            raise EngineError("Engine did not return a scan id")
        self.session.scan_id = str(scan_id)
        self._emit(f"Active scan started with ID: {self.session.scan_id}")

    async def _poll_until_done(self, client: Any) -> None:
        settings = self.settings
        deadline = self._clock() + settings.poll_timeout
        polls = 0
        while True:
            polls += 1
            status = await self._poll_once(client, deadline)
            progress = self.session.observe_progress(status)
            self._emit(f"Scan progress: {progress}%")
            if progress >= 100:
                break

            if settings.max_polls is not None and polls >= settings.max_polls:
                raise ScanTimeoutError(
                    f"Scan {self.session.scan_id} not complete after {polls} polls "
                    f"(last progress {progress}%)"
                )
            await self._pause(min(settings.poll_interval, self._remaining(deadline)))

        self.session.advance(ScanPhase.DONE)
        self._emit("Scan completed")

    async def _poll_once(self, client: Any, deadline: float) -> int:
        """Query progress once, retrying transport failures inside the polling window."""
        attempts = self.settings.poll_retries + 1
        attempt = 0
        while True:
            attempt += 1
            remaining = self._remaining(deadline)
            try:
                return await self._guard(
                    client.scan_status(
                        self.session.scan_id,
                        timeout=min(self.settings.request_timeout, remaining),
                    )
                )
            except TransportError as exc:
                remaining = self._remaining(deadline, cause=exc)
                if attempt >= attempts:
                    raise
                logger.warning(
                    "Status request for scan %s failed (attempt %d/%d): %s",
                    self.session.scan_id,
                    attempt,
                    attempts,
                    exc,
                )
                await self._pause(min(self.settings.poll_interval, remaining))

    def _remaining(self, deadline: float, cause: BaseException | None = None) -> float:
        """Seconds left in the polling window; raises once it has run out."""
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise ScanTimeoutError(
                f"Scan {self.session.scan_id} not complete after "
                f"{self.settings.poll_timeout:g}s (last progress {self.session.progress}%)"
            ) from cause
        return remaining

    async def _collect_report(self, client: Any) -> ScanReport:
        self.session.advance(ScanPhase.REPORTED)
        payloads = await self._guard(
            client.alerts(self.settings.target, timeout=self.settings.request_timeout)
        )
        report = ScanReport(alerts=[Alert.from_payload(item) for item in payloads])
        self._emit(f"Retrieved {len(report.alerts)} alert(s)")

        try:
            report.content = await self._guard(
                client.html_report(timeout=self.settings.request_timeout)
            )
            self._check_cancelled()
            report.path = write_artifact(self.settings.report_path, report.content)
            self._emit(f"Security report saved as {report.path}")
        except (TransportError, EngineError, OSError) as exc:
            report.artifact_error = PartialArtifactError(
                f"Report artifact unavailable: {exc}", phase=ScanPhase.REPORTED.value
            )
            report.path = None
            logger.warning(
                "Report artifact for %s unavailable: %s", self.settings.target, exc
            )
        return report

    def _finish(self, outcome: ScanOutcome) -> None:
        report = outcome.report
        outcome.classification = classify_alerts(report.alerts, self.settings.notable_threshold)
        fail_on = self.settings.fail_on
        if fail_on is not None:
            failing = [a for a in report.alerts if a.severity >= fail_on]
            if failing:
                raise SeverityPolicyError(
                    f"{len(failing)} alert(s) at or above {fail_on.label} severity"
                )
        self.session.advance(ScanPhase.SUCCESS)

    def _record_failure(self, error: ScanError) -> None:
        if self.session.phase.terminal:
            return
        self.session.fail(error)
        logger.error(
            "Scan of %s failed in phase %s (%s): %s",
            self.session.target,
            error.phase,
            error.reason,
            error.message,
        )

    async def _pause(self, seconds: float) -> None:
        await self._guard(self._sleep(seconds))

    async def _guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the cancel signal fires first."""
        if self._cancel_event is not None and self._cancel_event.is_set():
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self._check_cancelled()
        if self._cancel_event is None:
            return await awaitable
        try:
            return await cancel_on(self._cancel_event, awaitable)
        except asyncio.CancelledError:
            if not self._cancel_event.is_set():
                raise
        self._check_cancelled()

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise ScanCancelledError(f"Scan of {self.settings.target} was cancelled")

    def _emit(self, message: str) -> None:
        logger.info(message)
        if self._progress:
            self._progress(message)
