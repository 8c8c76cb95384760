"""Proxy-relayed page retrieval with timeout, retry and proxy rotation.

The story site is reached through public relays. Relays fail in all the
usual ways (timeouts, 5xx, empty 200 pages), so every page goes through
``ContentFetcher.fetch`` which retries across relays and only hands back a
body that passed validation.
"""

import logging
import time
from typing import Callable, Optional, Sequence
from urllib.parse import quote

import requests
from requests.compat import chardet

from .config import (
    MAX_ATTEMPTS,
    MIN_BODY_LENGTH,
    PROXY_ENDPOINTS,
    REQUEST_TIMEOUT,
    RETRY_BACKOFF,
    SESSION_HEADERS,
)
from .errors import RetrievalExhausted

log = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class EmptyResponse(Exception):
    """A relay answered with a success status but no usable page."""


class ProxyRotator:
    """Ordered relay endpoints plus the index of the one currently in use.

    One rotator belongs to one conversion run; it is never shared.
    """

    def __init__(self, endpoints: Sequence[str] = PROXY_ENDPOINTS):
        if not endpoints:
            raise ValueError("at least one proxy endpoint is required")
        self.endpoints = list(endpoints)
        self.index = 0

    def current(self) -> str:
        return self.endpoints[self.index]

    def advance(self) -> None:
        self.index = (self.index + 1) % len(self.endpoints)
        log.debug("Switched to proxy %d: %s", self.index, self.current())

    def wrap(self, target_url: str) -> str:
        """Relay URL for ``target_url`` (encoded like ``encodeURIComponent``)."""
        return self.current() + quote(target_url, safe="-_.!~*'()")


class ContentFetcher:
    def __init__(
        self,
        rotator: Optional[ProxyRotator] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        backoff: float = RETRY_BACKOFF,
        min_length: int = MIN_BODY_LENGTH,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rotator = rotator or ProxyRotator()
        # Only a session created here is closed by close().
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.backoff = backoff
        self.min_length = min_length
        self.sleep = sleep
        self.clock = clock

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _read(self, resp: requests.Response, deadline: float) -> bytes:
        """Read the whole body, giving up once ``deadline`` has passed."""
        chunks = []
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            chunks.append(chunk)
            if self.clock() > deadline:
                raise requests.Timeout(
                    f"request via {self.rotator.current()} exceeded {self.timeout}s"
                )
        return b"".join(chunks)

    def _get(self, target_url: str) -> str:
        deadline = self.clock() + self.timeout
        resp = self.session.get(
            self.rotator.wrap(target_url),
            headers=SESSION_HEADERS,
            timeout=self.timeout,
            stream=True,
        )
        try:
            resp.raise_for_status()
            content = self._read(resp, deadline)
        finally:
            resp.close()

        detected = chardet.detect(content)["encoding"] if chardet and content else None
        body = str(content, detected or resp.encoding or "utf-8", errors="replace")
        if len(body.strip()) < self.min_length:
            raise EmptyResponse(
                f"response too short ({len(body.strip())} characters) from {self.rotator.current()}"
            )
        return body

    def fetch(self, target_url: str, max_attempts: int = MAX_ATTEMPTS) -> str:
        """Return the page body for ``target_url``.

        Tries up to ``max_attempts`` times, moving to the next relay and
        waiting ``backoff`` seconds after each failure. Raises
        ``RetrievalExhausted`` once the attempts run out.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        last_error: Optional[BaseException] = None
        for attempt in range(1, max_attempts + 1):
            try:
                body = self._get(target_url)
                log.debug("Fetched %s on attempt %d (%d chars)", target_url, attempt, len(body))
                return body
            except (requests.RequestException, EmptyResponse) as e:
                last_error = e
                log.warning(
                    "Attempt %d/%d for %s via %s failed: %s",
                    attempt,
                    max_attempts,
                    target_url,
                    self.rotator.current(),
                    e,
                )
            if attempt < max_attempts:
                self.rotator.advance()
                self.sleep(self.backoff)

        raise RetrievalExhausted(target_url, max_attempts, last_error)
