# src/rentcalc/adapters/http_client.py
from __future__ import annotations

import time
from dataclasses import dataclass, field

import requests

from rentcalc.adapters.config import config
from rentcalc.adapters.logging_utils import get_logger, log_context
from rentcalc.domain.errors import HttpFetchError

logger = get_logger(__name__)

_TRANSIENT_STATUS = (429, 502, 503, 504)


@dataclass(frozen=True)
class HttpClient:
    """
    Downloads a whole document into memory.

    max_retries=0 (the default from config) means one attempt and no backoff.
    """

    timeout_s: float = 20.0
    max_retries: int = 0
    backoff_base_s: float = 0.8
    user_agent: str = "rentcalc"
    session: requests.Session = field(default_factory=requests.Session, compare=False, repr=False)

    def get_bytes(self, url: str) -> bytes:
        headers = {"User-Agent": self.user_agent}
        last_err: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                resp = self.session.get(url, headers=headers, timeout=self.timeout_s)
            except requests.RequestException as e:
                last_err = e
                logger.warning(
                    "http_request_failed",
                    extra=log_context(url=url, attempt=attempt, error=repr(e)),
                )
            else:
                if resp.status_code in _TRANSIENT_STATUS and attempt < self.max_retries:
                    last_err = HttpFetchError(f"HTTP {resp.status_code} for {url}")
                elif resp.status_code >= 400:
                    raise HttpFetchError(f"HTTP {resp.status_code} for {url}")
                else:
                    logger.debug(
                        "http_fetched",
                        extra=log_context(url=url, bytes=len(resp.content)),
                    )
                    return resp.content

            if attempt < self.max_retries:
                time.sleep(self.backoff_base_s * (2**attempt))

        raise HttpFetchError(f"request to {url} failed: {last_err!r}") from last_err


def make_http_client() -> HttpClient:
    return HttpClient(
        timeout_s=config.HTTP_TIMEOUT_S,
        max_retries=config.HTTP_MAX_RETRIES,
        backoff_base_s=config.HTTP_BACKOFF_BASE_S,
        user_agent=config.USER_AGENT,
    )
