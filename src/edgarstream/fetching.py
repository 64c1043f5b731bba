# src/edgarstream/fetching.py
"""
HTTP fetching utilities for edgarstream.

This module provides a small, SEC-friendly URL fetcher:
- Adds SEC-required User-Agent for sec.gov endpoints
- Enforces a minimum delay between SEC requests (default 0.11s)
- Retries throttled (429) and transient 5xx responses with backoff
- Raises StatusError for any other non-success status
"""

from __future__ import annotations

import logging
import os
import ssl
import threading
import time
from dataclasses import dataclass
from typing import Optional
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from edgarstream.errors import StatusError


_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class FetcherConfig:
    """
    Configuration for URLFetcher.

    Parameters
    ----------
    user_agent:
        User-Agent string required by SEC for requests to sec.gov.
        If None, URLFetcher reads it from the environment.
    min_interval_sec:
        Minimum time interval between SEC requests (rate limiting).
    timeout:
        Socket timeout in seconds for each request.
    max_retries:
        How many times a 429/5xx response is retried before giving up.
    backoff_factor:
        First retry waits this long; each further retry doubles it.
    max_backoff_sec:
        Upper bound for any single wait, including server Retry-After hints.
    ssl_context:
        Optional SSL context. If None, uses default verified context.
    """

    user_agent: Optional[str] = None
    min_interval_sec: float = 0.11
    timeout: Optional[float] = 30.0
    max_retries: int = 3
    backoff_factor: float = 1.0
    max_backoff_sec: float = 60.0
    ssl_context: Optional[ssl.SSLContext] = None


DEFAULT_FETCHER_CONFIG = FetcherConfig()


class URLFetcher:
    """
    A small HTTP fetcher with SEC EDGAR-specific behavior.

    Notes
    -----
    SEC asks automated tools to include a descriptive User-Agent and to respect
    fair access / rate limits. The inter-request delay is shared by every
    thread using the same fetcher.
    """

    _SEC_PREFIXES = ("https://www.sec.gov", "https://data.sec.gov")
    _USER_AGENT_ENV_VARS = ("EDGAR_USER_AGENT", "SEC_USER_AGENT")

    def __init__(self, logger: logging.Logger, config: Optional[FetcherConfig] = None):
        self._logger = logger
        self._config = config or DEFAULT_FETCHER_CONFIG
        self._user_agent = self._resolve_user_agent(self._config.user_agent)

        self._lock = threading.Lock()
        # Ensure we don't immediately sleep on the first call.
        self._prev_req_time = time.monotonic() - float(self._config.min_interval_sec)

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def _resolve_user_agent(self, user_agent: Optional[str]) -> str:
        """
        Resolve the SEC User-Agent.

        Resolution order:
        1) Explicit parameter
        2) Environment variables
        3) Fallback placeholder (override in production)
        """
        if user_agent and user_agent.strip():
            return user_agent.strip()

        for key in self._USER_AGENT_ENV_VARS:
            val = os.getenv(key)
            if val and val.strip():
                return val.strip()

        return "edgarstream (missing User-Agent; set EDGAR_USER_AGENT)"

    def _limit_request_ratio(self) -> None:
        """
        Enforce a minimum time interval between consecutive SEC requests.
        """
        with self._lock:
            min_interval = float(self._config.min_interval_sec)
            sleep_for = min_interval - (time.monotonic() - self._prev_req_time)
            if sleep_for > 0:
                time.sleep(sleep_for)
            self._prev_req_time = time.monotonic()

    def _backoff_delay(self, attempt: int, error: HTTPError) -> float:
        delay = self._config.backoff_factor * (2 ** attempt)
        retry_after = error.headers.get("Retry-After") if error.headers is not None else None
        if retry_after is not None and retry_after.strip().isdigit():
            delay = max(delay, float(retry_after))
        return min(delay, self._config.max_backoff_sec)

    def _open(self, req: Request):
        if self._config.ssl_context is not None:
            return urlopen(req, timeout=self._config.timeout, context=self._config.ssl_context)
        return urlopen(req, timeout=self._config.timeout)

    def fetch(self, url: str):
        """
        Fetch the content from the specified URL.

        Parameters
        ----------
        url:
            URL to fetch.

        Returns
        -------
        http.client.HTTPResponse
            Open response object (context-manageable). The caller must close it.

        Raises
        ------
        StatusError
            The server answered with a non-success status (after retries for
            429/5xx).
        urllib.error.URLError
            The connection itself failed.
        """
        req = Request(url)
        is_sec = url.startswith(self._SEC_PREFIXES)
        if is_sec:
            req.add_header("User-Agent", self._user_agent)

        attempt = 0
        while True:
            if is_sec:
                self._limit_request_ratio()

            try:
                resp = self._open(req)
            except HTTPError as e:
                e.close()
                if e.code not in _RETRYABLE_STATUSES or attempt >= self._config.max_retries:
                    raise StatusError(url, e.code) from e

                delay = self._backoff_delay(attempt, e)
                attempt += 1
                self._logger.warning(
                    f"HTTP {e.code} for {url}, retrying in {delay:.1f}s "
                    f"({attempt}/{self._config.max_retries})"
                )
                time.sleep(delay)
                continue

            status = getattr(resp, "status", 200)
            if not 200 <= status < 300:
                resp.close()
                raise StatusError(url, status)
            return resp
