"""Async client for the ZAP HTTP control API."""

import json
import logging
import math
from typing import Any

import httpx

from .errors import EngineError, TransportError

logger = logging.getLogger(__name__)

ACCESS_URL_PATH = "/JSON/core/action/accessUrl/"
ASCAN_START_PATH = "/JSON/ascan/action/scan/"
ASCAN_STATUS_PATH = "/JSON/ascan/view/status/"
ALERTS_PATH = "/JSON/core/view/alerts/"
HTML_REPORT_PATH = "/OTHER/core/other/htmlreport/"


class ZAPClient:
    """Thin async wrapper over the ZAP control endpoints used by a scan.

    Every call is a GET with the ``apikey`` query parameter. Transport failures
    surface as :class:`TransportError`; non-2xx answers, ZAP error payloads and
    unexpected JSON shapes surface as :class:`EngineError`.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def access_url(self, url: str, timeout: float | None = None) -> None:
        """Ask the engine to access (and passively analyse) ``url``."""
        await self._get_json(ACCESS_URL_PATH, {"url": url}, timeout=timeout)

    async def start_active_scan(self, url: str, timeout: float | None = None) -> str:
        """Start an active scan of ``url`` and return the engine's scan id."""
        data = await self._get_json(ASCAN_START_PATH, {"url": url}, timeout=timeout)
        scan_id = str(data.get("scan") or "").strip()
        if not scan_id:
            raise EngineError(f"Engine did not return a scan id: {_snippet(data)}")
        return scan_id

    async def scan_status(self, scan_id: str, timeout: float | None = None) -> int:
        """Return the active scan's progress percentage."""
        data = await self._get_json(ASCAN_STATUS_PATH, {"scanId": scan_id}, timeout=timeout)
        return parse_progress(data.get("status"))

    async def alerts(self, base_url: str, timeout: float | None = None) -> list[dict[str, Any]]:
        """Return raw alert entries for ``base_url`` in engine order."""
        data = await self._get_json(ALERTS_PATH, {"baseurl": base_url}, timeout=timeout)
        alerts = data.get("alerts")
        if not isinstance(alerts, list):
            raise EngineError(f"Alerts payload has no alert list: {_snippet(data)}")
        return alerts

    async def html_report(self, timeout: float | None = None) -> bytes:
        """Return the rendered HTML report bytes."""
        response = await self._get(HTML_REPORT_PATH, {}, timeout=timeout)
        return response.content

    async def _get_json(
        self, path: str, params: dict[str, str], timeout: float | None = None
    ) -> dict[str, Any]:
        response = await self._get(path, params, timeout=timeout)
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise EngineError(
                f"Engine returned non-JSON body for {path}: {response.text[:200]}",
                status_code=response.status_code,
            ) from None
        if not isinstance(data, dict):
            raise EngineError(f"Engine returned unexpected payload for {path}: {_snippet(data)}")
        if "code" in data and "message" in data:
            raise EngineError(f"Engine error {data['code']}: {data['message']}")
        return data

    async def _get(
        self, path: str, params: dict[str, str], timeout: float | None = None
    ) -> httpx.Response:
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        query = dict(params)
        query["apikey"] = self.api_key
        request_timeout = self.timeout if timeout is None else timeout
        logger.debug("GET %s%s %s", self.base_url, path, sorted(params))
        try:
            response = await self.client.get(path, params=query, timeout=request_timeout)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Request to {path} timed out after {request_timeout:.1f}s"
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(f"Cannot reach engine at {self.base_url}: {exc}") from exc

        if not response.is_success:
            raise EngineError(
                f"Engine answered {response.status_code} for {path}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response


def parse_progress(value: Any) -> int:
    """Parse a status value (``"40"``, ``40``, ``"40.5"``) into a percentage."""
    if isinstance(value, bool):
        raise EngineError(f"Scan status is not a number: {value!r}")
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value if value is not None else "").strip()
        try:
            number = float(text)
        except ValueError:
            raise EngineError(f"Scan status is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise EngineError(f"Scan status is not a number: {value!r}")
    return int(number)


def _snippet(data: Any) -> str:
    text = json.dumps(data) if isinstance(data, dict | list) else repr(data)
    return text[:200]
