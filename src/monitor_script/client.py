# client.py
# HTTP client for the New Relic Synthetics monitor script endpoint.
#
# The lifecycle controller only depends on the SyntheticsService protocol;
# SyntheticsClient is the httpx-backed implementation. No retries; every
# failure surfaces to the caller.

import logging
from typing import Protocol

import httpx

from monitor_script.models import MonitorScript

logger = logging.getLogger(__name__)

REGION_URLS = {
    "US": "https://synthetics.newrelic.com/synthetics/api",
    "EU": "https://synthetics.eu.newrelic.com/synthetics/api",
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SyntheticsAPIError(Exception):
    """Raised for any failed call to the Synthetics API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(SyntheticsAPIError):
    """Raised when the API reports the monitor id as unknown."""


# ---------------------------------------------------------------------------
# Service contract
# ---------------------------------------------------------------------------


class SyntheticsService(Protocol):
    def update_monitor_script(self, monitor_id: str, script: MonitorScript) -> None: ...

    def get_monitor_script(self, monitor_id: str) -> MonitorScript: ...


# ---------------------------------------------------------------------------
# httpx implementation
# ---------------------------------------------------------------------------


class SyntheticsClient:
    """
    Thin wrapper around the Synthetics REST API.

    Example:
        with SyntheticsClient(api_key="NRAK-...", region="EU") as client:
            script = client.get_monitor_script("d1d2...")
    """

    def __init__(
        self,
        api_key: str,
        region: str = "US",
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if base_url is None:
            try:
                base_url = REGION_URLS[region.upper()]
            except KeyError:
                raise ValueError(f"Unknown region '{region}'. Expected one of {sorted(REGION_URLS)}.") from None

        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"X-Api-Key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "SyntheticsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _request(self, method: str, monitor_id: str, **kwargs) -> httpx.Response:
        path = f"/v4/monitors/{monitor_id}/script"
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise SyntheticsAPIError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404:
            raise NotFoundError(f"Monitor '{monitor_id}' not found.", status_code=404)
        if response.is_error:
            raise SyntheticsAPIError(
                f"{method} {path} → {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        logger.debug("%s %s → %s", method, path, response.status_code)
        return response

    def update_monitor_script(self, monitor_id: str, script: MonitorScript) -> None:
        self._request("PUT", monitor_id, json=script.model_dump(by_alias=True))

    def get_monitor_script(self, monitor_id: str) -> MonitorScript:
        response = self._request("GET", monitor_id)
        try:
            return MonitorScript.model_validate(response.json())
        except ValueError as exc:
            raise SyntheticsAPIError(f"Malformed script payload for monitor '{monitor_id}': {exc}") from exc
