from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from linkdash.core.config import Settings
from linkdash.core.errors import UpstreamAuthError, UpstreamRateLimitError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

AUTH_MESSAGE = "Invalid or missing API key. Please contact the administrator."


def mask_key(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    if len(value) <= 6:
        return "****"
    return f"****{value[-4:]}"


def _retry_after(response: httpx.Response, body: Any) -> Optional[int]:
    raw = response.headers.get("retry-after")
    if raw is None and isinstance(body, dict):
        raw = body.get("retryAfter", body.get("retry_after"))
    if raw is None:
        return None
    try:
        return max(0, int(float(raw)))
    except (TypeError, ValueError):
        return None


def _message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for k in ("message", "error", "detail"):
            if body.get(k):
                return str(body[k])
    return fallback


class LinkApiClient:
    """Client for the external link-issuing API (``POST {base}/links``).

    Auth and rate-limit failures are surfaced as-is; nothing is retried.
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LinkApiClient":
        return cls(settings.link_api_url, settings.link_api_key, timeout=settings.link_api_timeout_seconds)

    def close(self) -> None:
        self._client.close()

    def create_link(self, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.base_url:
            raise UpstreamUnavailableError("Link API URL not configured")
        if not self.api_key:
            logger.error("Link API key not configured")
            raise UpstreamAuthError(AUTH_MESSAGE)

        t0 = time.perf_counter()
        try:
            r = self._client.post("/links", json=payload, headers={"x-api-key": self.api_key})
        except httpx.HTTPError as e:
            logger.error("Link API request failed after %.2fs error=%r", time.perf_counter() - t0, e)
            raise UpstreamUnavailableError("Link API unreachable") from e
        elapsed = time.perf_counter() - t0

        try:
            body = r.json()
        except ValueError:
            body = None

        if r.status_code in (401, 403):
            logger.error(
                "Link API authentication error status=%d key=%s body_snippet=%r",
                r.status_code,
                mask_key(self.api_key),
                (r.text or "")[:300],
            )
            raise UpstreamAuthError(AUTH_MESSAGE)

        if r.status_code == 429:
            retry_after = _retry_after(r, body)
            logger.warning("Link API rate limit exceeded retry_after=%s", retry_after)
            raise UpstreamRateLimitError(_message(body, "Rate limit exceeded"), retry_after=retry_after)

        if r.status_code >= 400 or not isinstance(body, dict):
            logger.error(
                "Link API error status=%d after %.2fs body_snippet=%r",
                r.status_code,
                elapsed,
                (r.text or "")[:300],
            )
            raise UpstreamUnavailableError(_message(body, f"Link API returned HTTP {r.status_code}"))

        logger.info("Link created brand=%s in %.2fs", payload.get("brand"), elapsed)
        return body
