"""Base class for ticker drivers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, ClassVar, Iterable, Iterator, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import CoinfeedError, FetchFailed
from .normalization import split_market_symbol
from .protocol import DriverSupports, Ticker
from .request import HttpRequester, Request, RequestTarget, as_descriptor

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseDriver(ABC):
    """Base class for all ticker drivers."""

    name: ClassVar[str] = "driver"
    supports: ClassVar[DriverSupports] = DriverSupports()

    def __init__(
        self,
        request: Request | None = None,
        *,
        markets: Iterable[str] | None = None,
        **options: Any,
    ):
        """Initialize driver.

        Args:
            request: Request collaborator; a private HttpRequester is created
                when omitted
            markets: Market ids to restrict the fetch to. Only honoured when
                the driver supports specific markets
            **options: Driver-specific options; unrecognized keys are ignored

        Raises:
            TypeError: If markets is a single string instead of a list
        """
        if isinstance(markets, str):
            raise TypeError(f"markets must be a list of market ids, not a string: {markets!r}")

        self._owns_request = request is None
        self._request: Request = request if request is not None else HttpRequester()
        self.options = options

        if markets is not None and not self.supports.specific_markets:
            logger.debug("%s does not support specific markets, returning all of them", self.name)
            markets = None
        self.markets: list[str] | None = list(markets) if markets is not None else None

    @abstractmethod
    async def fetch_tickers(self, *, deterministic: bool = False) -> list[Ticker]:
        """Fetch a snapshot of tickers."""
        ...

    @contextmanager
    def tagged_errors(self) -> Iterator[None]:
        """Attach this driver's name to any coinfeed error raised inside the block."""
        try:
            yield
        except CoinfeedError as exc:
            exc.driver = exc.driver or self.name
            raise

    async def request(self, target: RequestTarget) -> Any:
        """Issue a request through the collaborator, tagging failures with the driver name."""
        descriptor = as_descriptor(target)
        logger.debug("%s requesting %s %s", self.name, descriptor.method, descriptor.url)
        with self.tagged_errors():
            return await self._request(target)

    def decode(self, model: type[ModelT], payload: Any, *, url: str | None = None) -> ModelT:
        """Validate a decoded payload against its expected shape."""
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise FetchFailed(
                f"Unexpected payload shape for {model.__name__}: {exc.error_count()} errors",
                url=url,
                driver=self.name,
                details={"errors": exc.errors(include_url=False)},
            ) from exc

    def split_symbol(self, symbol: str, delimiter: str = "_") -> tuple[str, str]:
        with self.tagged_errors():
            return split_market_symbol(symbol, delimiter)

    def wants_market(self, market: str) -> bool:
        """Whether a market passes the caller-supplied restriction."""
        return self.markets is None or market in self.markets

    async def close(self) -> None:
        """Close connections."""
        if self._owns_request and isinstance(self._request, HttpRequester):
            await self._request.close()
