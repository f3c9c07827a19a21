"""
============================================================================
PING ORCHESTRATOR - NETWORK TOOLS
============================================================================
Synchronous HTTP transport built on httpx, plus helpers that turn a
protocol and a host into a request URL.

A response with any status code is a successful transport outcome.
Only I/O level failures (refused connection, DNS failure, timeout)
raise TransportError.
============================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import httpx

from config.constants import HTTPMethods
from exceptions.probes import NetworkToolsError, TransportError
from utils.logger import get_logger


logger = get_logger("Network")

USER_AGENT = "PingOrchestrator/1.0"


# ============================================================================
# URL BUILDING
# ============================================================================

def _validated(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise NetworkToolsError(f"Malformed URL: {url}", cause=e) from e

    if not parsed.scheme or not parsed.host:
        raise NetworkToolsError(f"Malformed URL: {url}")

    return url


def build_url(url: str, params: Optional[Mapping[str, object]] = None) -> str:
    """
    Append query parameters to *url*.

    Args:
        url: Absolute URL
        params: Query parameters, encoded in the order given

    Returns:
        The URL with its query string
    """
    if params:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode(dict(params))}"
    return _validated(url)


def build_uri(protocol: str, host: str, params: Optional[Mapping[str, object]] = None) -> str:
    """
    Build "<protocol>://<host>" and validate it.

    The result is used as the identity of TCP probe results, so it is
    built the same way for writes and lookups.
    """
    if not protocol or not protocol.strip():
        raise NetworkToolsError("Protocol is empty")
    if not host or not host.strip():
        raise NetworkToolsError("Host is empty")

    return build_url(f"{protocol.strip().lower()}://{host.strip()}", params)


# ============================================================================
# TRANSPORT
# ============================================================================

@dataclass(frozen=True)
class HttpResult:
    status_code: int
    elapsed_ms: int
    body: str = ""


class HttpTransport:
    """
    Thread-safe wrapper around one ``httpx.Client``.

    Parameters
    ----------
    transport : Optional[httpx.BaseTransport]
        Replaces the network layer, e.g. ``httpx.MockTransport`` in tests.
    follow_redirects : bool
        Whether 3xx responses are followed. A redirect is a valid probe
        outcome on its own, so the default is not to.
    """

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        follow_redirects: bool = False,
        verify: bool = True,
    ):
        self._client = httpx.Client(
            transport=transport,
            follow_redirects=follow_redirects,
            verify=verify,
            headers={"User-Agent": USER_AGENT},
        )

    def request(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        method: Union[HTTPMethods, str] = HTTPMethods.GET,
        body: Optional[Union[str, bytes]] = None,
        timeout_ms: int = 5000,
    ) -> HttpResult:
        """
        Send one request and time it.

        Raises
        ------
        TransportError
            On any I/O failure, with ``timed_out`` set for timeouts.
        """
        method_name = method.value if isinstance(method, HTTPMethods) else str(method).upper()
        timeout = timeout_ms / 1000

        start_time = time.perf_counter()
        try:
            response = self._client.request(
                method=method_name,
                url=url,
                headers=headers,
                content=body if body else None,
                timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            )
        except httpx.TimeoutException as e:
            elapsed = time.perf_counter() - start_time
            logger.debug(f"[HTTP] {method_name} {url} timed out after {elapsed:.3f}s")
            raise TransportError(
                f"{method_name} {url} timed out after {timeout_ms} ms",
                url=url,
                timed_out=True,
                cause=e
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"[HTTP] {method_name} {url} failed: {e!r}")
            raise TransportError(
                f"{method_name} {url} failed: {e}",
                url=url,
                cause=e
            ) from e

        elapsed_ms = int(round((time.perf_counter() - start_time) * 1000))
        logger.debug(f"[HTTP] {method_name} {url} → {response.status_code} in {elapsed_ms} ms")

        return HttpResult(
            status_code=response.status_code,
            elapsed_ms=elapsed_ms,
            body=response.text,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
