from __future__ import annotations

"""Client for the Frankfurter-style exchange rate service.

Endpoints used (all GET, JSON):
    /currencies                           -> {code: display name}
    /latest?amount=&from=&to=             -> {rates: {code: value}}
    /<start>..<end>?from=&to=             -> {rates: {date: {code: value}}}

The client performs no short-circuiting of its own: identity pairs and invalid
amounts are handled by the controllers before a request is made.
"""
from datetime import date
import logging
from typing import Any, Dict, Optional, Set

import httpx

from fxwidget.core.config import Settings
from fxwidget.core.errors import ServiceError
from fxwidget.services.http_client import get_json, make_async_client
from .series import RateSeries, rate_series

logger = logging.getLogger("fxwidget.rates")


def _rate_from(data: Dict[str, Any], target: str) -> float:
    rates = data.get("rates")
    if not isinstance(rates, dict):
        raise ServiceError("Malformed rate response: missing 'rates' object")
    value = rates.get(target)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ServiceError(f"Malformed rate response: no numeric rate for {target}")
    return float(value)


class RateClient:
    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        retries: int = 1,
        backoff: float = 0.5,
    ):
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or make_async_client(timeout)
        self._retries = retries
        self._backoff = backoff

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RateClient":
        client = make_async_client(settings.http_timeout_seconds, transport)
        inst = cls(
            settings.rates_base_url,
            client=client,
            retries=settings.http_retries,
            backoff=settings.http_backoff_seconds,
        )
        inst._owns_client = True
        return inst

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await get_json(
            self._client,
            f"{self._base_url}{path}",
            params,
            retries=self._retries,
            backoff=self._backoff,
        )

    async def list_currencies(self) -> Set[str]:
        data = await self._get("/currencies")
        return {str(code).upper() for code in data}

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        data = await self._get(
            "/latest",
            {"amount": amount, "from": from_currency, "to": to_currency},
        )
        return _rate_from(data, to_currency)

    async def latest_rate(self, from_currency: str, to_currency: str) -> float:
        """Rate for one unit of `from_currency` (amount omitted)."""
        data = await self._get("/latest", {"from": from_currency, "to": to_currency})
        return _rate_from(data, to_currency)

    async def history_rates(
        self, from_currency: str, to_currency: str, start: date, end: date
    ) -> Dict[str, Any]:
        data = await self._get(
            f"/{start.isoformat()}..{end.isoformat()}",
            {"from": from_currency, "to": to_currency},
        )
        rates = data.get("rates")
        if not isinstance(rates, dict):
            raise ServiceError("Malformed history response: missing 'rates' object")
        logger.debug(
            "history %s->%s %s..%s: %d dates", from_currency, to_currency, start, end, len(rates)
        )
        return rates

    async def history(
        self, from_currency: str, to_currency: str, start: date, end: date
    ) -> RateSeries:
        rates = await self.history_rates(from_currency, to_currency, start, end)
        return rate_series(rates, to_currency)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
