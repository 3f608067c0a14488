"""HTTP client for a remote ``/analyze`` endpoint."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from signal_advisor.core.models import AnalysisRecord, InputType

LOGGER = logging.getLogger(__name__)


class RemoteAnalysisError(RuntimeError):
    """Raised when the remote service rejects a payload or stays unreachable."""


class RemoteAnalyzer:
    """Send frames to a remote analysis service, retrying transient failures."""

    def __init__(
        self,
        endpoint: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_retries = max(max_retries, 0)
        self.backoff = backoff
        self._session = session or requests.Session()
        self._sleep = sleep

    def analyze(self, image_data: str, input_type: InputType = InputType.IMAGE) -> AnalysisRecord:
        payload = {"imageData": image_data, "inputType": input_type.value}
        body = self._post_with_retry(payload)
        return AnalysisRecord.model_validate(body)

    def close(self) -> None:
        self._session.close()

    def _post_with_retry(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        attempts = self.max_retries + 1
        delay = self.backoff
        for attempt in range(1, attempts + 1):
            try:
                response = self._session.post(self.endpoint, json=payload, timeout=self.timeout)
            except requests.RequestException as exc:
                LOGGER.warning("Remote analysis failed (attempt %d/%d): %s", attempt, attempts, exc)
            else:
                if response.status_code < 400:
                    LOGGER.debug("Remote analysis delivered by %s", self.endpoint)
                    return response.json()
                if response.status_code < 500:
                    raise RemoteAnalysisError(
                        f"Remote service rejected payload ({response.status_code}): {response.text}"
                    )
                LOGGER.warning(
                    "Remote analysis failed (attempt %d/%d): status %d",
                    attempt,
                    attempts,
                    response.status_code,
                )
            if attempt < attempts:
                self._sleep(delay)
                delay *= 2
        raise RemoteAnalysisError(f"Remote service {self.endpoint} unavailable after {attempts} attempts")
