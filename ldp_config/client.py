"""FOLIO session: credential discovery, login and authenticated requests."""

from __future__ import annotations

import logging
import os
import time
import urllib.parse
from typing import Any

import requests

from ldp_config.models import (
    DEFAULT_MAX_RETRIES,
    ENV_PASSWORD,
    ENV_TENANT,
    ENV_URL,
    ENV_USER,
    LOGGER_NAME,
    LOGIN_PATH,
    LOGIN_WITH_EXPIRY_PATH,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    TENANT_HEADER,
    TOKEN_HEADER,
    ConfigurationError,
)


class FolioSession:
    """Authenticated handle to a FOLIO gateway, with optional retry of transient failures."""

    def __init__(self, base_url: str, tenant: str, max_retries: int = DEFAULT_MAX_RETRIES):
        self.base_url = base_url.rstrip("/")
        self.tenant = tenant
        self.session = requests.Session()
        self.session.headers.update(
            {
                TENANT_HEADER: tenant,
                "Content-Type": "application/json",
                "Accept": "application/json, text/plain",
            }
        )
        self.max_retries = max_retries
        self.closed = False
        self.logger = logging.getLogger(LOGGER_NAME)

    def __enter__(self) -> FolioSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(
        self, method: str, path: str, expected_statuses: tuple[int, ...] = (), **kwargs
    ) -> requests.Response:
        """
        Make an HTTP request, retrying transient failures up to max_retries times.

        Error statuses listed in expected_statuses are still raised but not logged,
        since the caller handles them.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(
                    f"{method.upper()} {url} {_redact(kwargs.get('json', ''))} "
                    f"(attempt {attempt + 1}/{self.max_retries + 1})"
                )
                resp = self.session.request(method, url, **kwargs)

                if resp.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                    wait_time = self._calculate_backoff(resp, attempt)
                    self.logger.warning(f"Retryable error {resp.status_code}, waiting {wait_time:.1f}s before retry")
                    time.sleep(wait_time)
                    continue

                if resp.status_code >= 400 and resp.status_code not in expected_statuses:
                    self.logger.error(f"API error {resp.status_code} on {method.upper()} {path}: {resp.text[:500]}")
                resp.raise_for_status()
                return resp

            except requests.exceptions.ConnectionError as e:
                if attempt < self.max_retries:
                    wait_time = RETRY_BACKOFF_FACTOR * (2**attempt)
                    self.logger.warning(f"Connection error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                    continue
                raise

        raise RuntimeError("Unexpected retry loop exit")

    def _calculate_backoff(self, resp: requests.Response, attempt: int) -> float:
        """Calculate backoff time, respecting Retry-After header for 429s."""
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass  # Fall through to exponential backoff
        return RETRY_BACKOFF_FACTOR * (2**attempt)

    def login(self, username: str, password: str) -> None:
        """
        Log in as the given user.

        Prefers the cookie-based login-with-expiry endpoint and falls back to the
        older token login on gateways that do not provide it.
        """
        credentials = {"username": username, "password": password}
        try:
            self._request("POST", LOGIN_WITH_EXPIRY_PATH, expected_statuses=(404,), json=credentials)
            self.logger.debug(f"Logged in as {username} (cookie session)")
            return
        except requests.HTTPError as e:
            if e.response is None or e.response.status_code != 404:
                raise

        resp = self._request("POST", LOGIN_PATH, json=credentials)
        token = resp.headers.get(TOKEN_HEADER)
        if not token:
            raise requests.HTTPError(f"Login response carried no {TOKEN_HEADER} header", response=resp)
        self.session.headers[TOKEN_HEADER] = token
        self.logger.debug(f"Logged in as {username} (token)")

    def fetch(self, path: str, method: str = "GET", json: Any = None) -> Any:
        """Perform an authenticated request and return the parsed JSON body, or None if empty."""
        kwargs = {} if json is None else {"json": json}
        resp = self._request(method, path, **kwargs)
        if not resp.content:
            return None
        return resp.json()

    def put(self, path: str, data: dict) -> Any:
        return self.fetch(path, method="PUT", json=data)

    def close(self) -> None:
        """Release the connection pool and credentials. Safe to call more than once."""
        if self.closed:
            return
        self.session.headers.pop(TOKEN_HEADER, None)
        self.session.cookies.clear()
        self.session.close()
        self.closed = True
        self.logger.debug("Session closed")


def _redact(body: Any) -> Any:
    """Mask the password of a login body before it is logged."""
    if isinstance(body, dict) and "password" in body:
        return {**body, "password": "***"}
    return body


def quote_segment(value: str) -> str:
    """Percent-encode a value for use as a single path segment."""
    return urllib.parse.quote(value, safe="")


def default_setup(
    okapi_url: str | None = None,
    tenant: str | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> FolioSession:
    """Build a logged-in session from explicit settings, falling back to OKAPI_* environment variables."""
    settings = {
        ENV_URL: okapi_url or os.environ.get(ENV_URL),
        ENV_TENANT: tenant or os.environ.get(ENV_TENANT),
        ENV_USER: os.environ.get(ENV_USER),
        ENV_PASSWORD: os.environ.get(ENV_PASSWORD),
    }
    missing = [name for name, value in settings.items() if not value]
    if missing:
        raise ConfigurationError(f"Missing FOLIO connection settings: {', '.join(missing)}")

    session = FolioSession(settings[ENV_URL], settings[ENV_TENANT], max_retries=max_retries)
    try:
        session.login(settings[ENV_USER], settings[ENV_PASSWORD])
    except BaseException:
        session.close()
        raise
    return session
