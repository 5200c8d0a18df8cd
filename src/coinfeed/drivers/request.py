"""HTTP request collaborator used by drivers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

import aiohttp

from ..errors import FetchFailed

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "coinfeed/1.0"


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Structured request: method, URL and optional JSON body or query params."""

    method: str
    url: str
    json_body: Any = None
    params: dict[str, Any] | None = None


RequestTarget = Union[str, RequestDescriptor]
Request = Callable[[RequestTarget], Awaitable[Any]]


def as_descriptor(target: RequestTarget) -> RequestDescriptor:
    """A bare URL means a GET."""
    if isinstance(target, RequestDescriptor):
        return target
    return RequestDescriptor("GET", target)


class HttpRequester:
    """Fetches JSON payloads over aiohttp.

    Every failure (transport error, timeout, non-2xx status, undecodable
    body) is raised as FetchFailed. No retries are attempted.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        proxy: ProxyConfig | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.proxy = proxy or ProxyConfig()
        self.user_agent = user_agent
        self.session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            connector = aiohttp.TCPConnector()
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    async def __call__(self, target: RequestTarget) -> Any:
        descriptor = as_descriptor(target)
        session = await self._ensure_session()
        logger.debug("%s %s", descriptor.method, descriptor.url)

        try:
            async with session.request(
                descriptor.method,
                descriptor.url,
                json=descriptor.json_body,
                params=descriptor.params,
                headers=self._get_headers(),
                proxy=self.proxy.proxy_url,
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchFailed(
                        f"{descriptor.method} {descriptor.url} returned HTTP {resp.status}",
                        url=descriptor.url,
                        details={"status": resp.status},
                    )
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise FetchFailed(
                f"{descriptor.method} {descriptor.url} failed: {exc!r}",
                url=descriptor.url,
            ) from exc

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None
