"""HTTP client for the HAR analysis backend."""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from harreport.errors import TransportFailure
from harreport.schemas import AnalysisEnvelope
from src.config import settings

logger = logging.getLogger(__name__)

# Errors worth retrying (transient)
_RETRYABLE_STATUS_CODES = {502, 503, 504, 429}


def _error_text(resp: httpx.Response) -> str | None:
    """Pull a human-readable error out of a failed response body."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def _failed_envelope(resp: httpx.Response) -> AnalysisEnvelope | None:
    """Return the body as an envelope when the backend reported a failed analysis."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict) or body.get("success") is not False:
        return None
    try:
        return AnalysisEnvelope.model_validate(body)
    except ValidationError:
        return None


class AnalysisClient:
    """Client for the analysis backend — requests an analysis of one HAR file."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.analysis_api_base).rstrip("/")
        self.max_retries = settings.analysis_max_retries if max_retries is None else max_retries
        self.retry_delay = settings.analysis_retry_delay if retry_delay is None else retry_delay
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.analysis_timeout,
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self) -> AnalysisClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> httpx.Response:
        """Execute an HTTP request with exponential backoff retry on transient errors.

        Returns the last response, successful or not; raises
        ``TransportFailure`` when no response could be obtained.
        """
        for attempt in range(self.max_retries + 1):
            delay = self.retry_delay * (2 ** attempt)
            try:
                resp = await self._client.request(method, url, **kwargs)
            except (httpx.ConnectError, httpx.TimeoutException) as exc:
                if attempt < self.max_retries:
                    logger.warning(
                        "%s on %s %s, retrying in %.1fs (attempt %d/%d)",
                        type(exc).__name__, method, url,
                        delay, attempt + 1, self.max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise TransportFailure(
                    f"{type(exc).__name__} on {method} {url} "
                    f"after {self.max_retries + 1} attempts"
                ) from exc
            except httpx.HTTPError as exc:
                raise TransportFailure(f"{type(exc).__name__} on {method} {url}: {exc}") from exc

            if resp.status_code in _RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                logger.warning(
                    "Retryable %d from %s %s, retrying in %.1fs (attempt %d/%d)",
                    resp.status_code, method, url,
                    delay, attempt + 1, self.max_retries,
                )
                await asyncio.sleep(delay)
                continue
            return resp

        # Loop always returns or raises on the final attempt
        raise TransportFailure(f"No response from {method} {url}")

    async def analyze(self, file_path: str | None = None) -> AnalysisEnvelope:
        """Request an analysis of ``file_path`` and return the response envelope.

        A non-2xx response carrying a ``success: false`` envelope is returned
        as-is so the caller can surface the backend's message; any other
        non-2xx response raises ``TransportFailure``.
        """
        target = file_path or settings.default_file_path
        url = f"{self.base_url}/api/analyze"
        resp = await self._request_with_retry("POST", url, json={"file_path": target})

        if resp.is_error:
            envelope = _failed_envelope(resp)
            if envelope is not None:
                logger.info("Analysis of %s failed with %d: %s", target, resp.status_code, envelope.error)
                return envelope
            raise TransportFailure(
                _error_text(resp) or f"Analysis backend returned {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            envelope = AnalysisEnvelope.model_validate(resp.json())
        except ValueError as exc:
            # ValidationError is a ValueError too
            raise TransportFailure(
                f"Analysis backend returned an unreadable response for {target}",
                status_code=resp.status_code,
            ) from exc

        logger.info("Analysis of %s received (success=%s, cached=%s)", target, envelope.success, envelope.cached)
        return envelope
