"""
HTTP Client

Session wrapper shared by the CoinGecko provider and the CLI status command.
Transport failures surface as HttpError; non-2xx responses are returned
and left to the caller.
"""

from __future__ import annotations

import json as _json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import requests

if TYPE_CHECKING:
    from core.config import RuntimeConfig


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "cryptoagents/0.1"


@dataclass
class HttpResponse:
    """Status, body and timing of one completed request."""
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body; raises ValueError on invalid JSON."""
        return _json.loads(self.content)

    def raise_for_status(self) -> None:
        if not self.ok:
            raise HttpError(
                f"HTTP {self.status_code} for {self.url}",
                status_code=self.status_code,
                response=self,
            )


class HttpError(Exception):
    """Connection failure, timeout, or a rejected status via raise_for_status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    HTTP client over one lazily opened requests.Session.

    Usage:
        with HttpClient.from_config(get_default_config()) as client:
            response = client.get(f"{base_url}/ping")
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        proxy: Optional[str] = None,
    ) -> None:
        """
        Args:
            timeout: Default per-request timeout in seconds
            user_agent: Sent on every request
            proxy: Proxy URL used for both http and https
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.proxy = proxy
        self._session: Optional[requests.Session] = None

    @classmethod
    def from_config(cls, config: "RuntimeConfig") -> "HttpClient":
        """Build a client from the http section and proxy of a RuntimeConfig."""
        return cls(
            timeout=config.http.timeout,
            user_agent=config.http.user_agent,
            proxy=config.proxy,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.user_agent
            if self.proxy:
                session.proxies = {"http": self.proxy, "https": self.proxy}
            self._session = session
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Send one request.

        Raises:
            HttpError: On connection errors and timeouts (not on non-2xx status)
        """
        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise HttpError(f"{method} {url} failed: {e}") from e

        elapsed = response.elapsed.total_seconds() * 1000
        logger.debug(f"{method} {url} -> {response.status_code} in {elapsed:.0f}ms")
        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=elapsed,
        )

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        return self.request("GET", url, headers=headers, params=params, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        return self.request("POST", url, json=json, timeout=timeout)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
