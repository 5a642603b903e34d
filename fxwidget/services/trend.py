from __future__ import annotations

"""Popular pair trend controllers.

One TrendController per pair shown in the popular pairs panel. Each instance
fetches the current unit rate and the recent history concurrently; the two
fetches write independent fields and their failures are swallowed so a card
degrades to a dash and an empty chart.
"""
import asyncio
from datetime import date
import logging
from typing import Any, Callable, Iterable, List, Optional, Protocol

from fxwidget.core.errors import ServiceError
from fxwidget.models.pairs import CurrencyPair
from fxwidget.services.conversion import history_window, utc_today
from fxwidget.services.rates.series import reduce_series
from fxwidget.services.staleness import CancellationToken

logger = logging.getLogger("fxwidget.trend")

_SWALLOWED = (ServiceError, TypeError, ValueError)


class SupportsTrend(Protocol):
    async def latest_rate(self, from_currency: str, to_currency: str) -> float: ...

    async def history_rates(
        self, from_currency: str, to_currency: str, start: date, end: date
    ) -> Any: ...


class TrendController:
    def __init__(
        self,
        pair: CurrencyPair,
        client: SupportsTrend,
        *,
        history_days: int = 30,
        today: Callable[[], date] = utc_today,
    ):
        self.pair = pair
        self._client = client
        self.history_days = history_days
        self._today = today
        self.rate: Optional[float] = None
        self.points: List[float] = []
        self._token = CancellationToken()

    async def load(self) -> None:
        token = self._token
        await asyncio.gather(
            self._load_rate(self.pair, token),
            self._load_points(self.pair, token),
        )

    async def set_pair(self, pair: CurrencyPair) -> None:
        if pair == self.pair:
            return
        self._token.cancel()
        self._token = CancellationToken()
        self.pair = pair
        self.rate = None
        self.points = []
        await self.load()

    async def _load_rate(self, pair: CurrencyPair, token: CancellationToken) -> None:
        try:
            rate = await self._client.latest_rate(pair.from_currency, pair.to_currency)
        except _SWALLOWED as e:
            logger.info("rate for %s unavailable: %s", pair.key, e)
            return
        if not token.cancelled:
            self.rate = rate

    async def _load_points(self, pair: CurrencyPair, token: CancellationToken) -> None:
        start, end = history_window(self.history_days, self._today())
        try:
            rates = await self._client.history_rates(
                pair.from_currency, pair.to_currency, start, end
            )
            points = reduce_series(rates, pair.to_currency)
        except _SWALLOWED as e:
            logger.info("trend for %s unavailable: %s", pair.key, e)
            return
        if not token.cancelled:
            self.points = points


def build_trend_controllers(
    pairs: Iterable[CurrencyPair], client: SupportsTrend, **kwargs: Any
) -> List[TrendController]:
    """One independent controller per pair, all sharing the same client."""
    return [TrendController(pair, client, **kwargs) for pair in pairs]


async def load_all(controllers: Iterable[TrendController]) -> None:
    await asyncio.gather(*(c.load() for c in controllers))
