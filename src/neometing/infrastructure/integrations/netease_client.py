"""NetEase Cloud Music weapi HTTP client.

Hey future me - this is the ONLY place that talks to music.163.com! Every
request goes through execute(), which holds one permit of the shared
semaphore while the request is in flight. That semaphore is the whole
backpressure story: more concurrent callers than permits just queue up.

The upstream wants to see an iPhone client, hence the static headers below.
Don't strip them, requests without Referer/Cookie get empty answers.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import random
from enum import Enum
from typing import Any

import httpx

from neometing.config.settings import NeteaseSettings
from neometing.infrastructure.integrations.weapi import SignedEnvelope

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Referer": "https://music.163.com/",
    "Cookie": (
        "appver=8.2.30; os=iPhone OS; osver=15.0; EVNSM=1.0.0; buildver=2206; "
        "channel=distribution; machineid=iPhone13.3"
    ),
    "User-Agent": (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Mobile/15E148 CloudMusic/0.1.1 NeteaseMusic/8.2.30"
    ),
    "Accept": "*/*",
    "Accept-Language": "zh-CN,zh;q=0.8,gl;q=0.6,zh-TW;q=0.4",
    "Connection": "keep-alive",
    "Content-Type": "application/x-www-form-urlencoded",
}

# 112.88.0.0 - 112.89.35.255
RANDOM_IP_RANGE = (1884815360, 1884890111)


def random_chinese_ip() -> str:
    """Return a random address from a mainland China block."""
    return str(ipaddress.IPv4Address(random.randrange(*RANDOM_IP_RANGE)))  # nosec B311


class RequestErrorKind(str, Enum):
    LIMIT = "limit"  # permit pool unusable
    REQ = "req"  # transport failure or unexpected response body


class RequestError(Exception):
    """A single weapi request failed."""

    def __init__(
        self,
        kind: RequestErrorKind,
        message: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.message = message
        self.original_error = original_error


class NeteaseClient:
    """Executes signed weapi requests with bounded concurrency.

    One instance (and its semaphore) is shared by every operation of a
    provider. Nothing on it is mutated after construction except the
    semaphore counter and the lazily created httpx client.
    """

    def __init__(
        self,
        settings: NeteaseSettings | None = None,
        permits: asyncio.Semaphore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: NetEase settings (timeout, pool size, random IP)
            permits: Shared permit pool; created from settings when omitted
            transport: Custom httpx transport (tests)
        """
        self.settings = settings or NeteaseSettings()
        self.permits = permits or asyncio.Semaphore(self.settings.max_concurrent_requests)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._closed = False

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=DEFAULT_HEADERS,
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client. Further execute() calls fail with LIMIT."""
        self._closed = True
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(self, endpoint: str, envelope: SignedEnvelope) -> dict[str, Any]:
        """POST one signed request and decode the JSON object it returns.

        Args:
            endpoint: Full weapi URL
            envelope: Encrypted request body

        Returns:
            Decoded JSON object

        Raises:
            RequestError: LIMIT when the client is closed, REQ on transport or
                decoding failure
        """
        if self._closed:
            raise RequestError(RequestErrorKind.LIMIT, "permit pool is closed")

        async with self.permits:
            if self._closed:
                raise RequestError(RequestErrorKind.LIMIT, "permit pool is closed")

            headers = {"X-Real-IP": random_chinese_ip()} if self.settings.random_ip else None
            try:
                response = await self._get_client().post(
                    endpoint, data=envelope.to_form(), headers=headers
                )
                data = response.json()
            except httpx.HTTPError as e:
                logger.debug("weapi request to %s failed: %s", endpoint, e)
                raise RequestError(RequestErrorKind.REQ, str(e), e) from e
            except ValueError as e:
                raise RequestError(
                    RequestErrorKind.REQ,
                    f"invalid JSON from {endpoint} (HTTP {response.status_code})",
                    e,
                ) from e

        if not isinstance(data, dict):
            raise RequestError(
                RequestErrorKind.REQ,
                f"expected JSON object from {endpoint}, got {type(data).__name__}",
            )
        return data
