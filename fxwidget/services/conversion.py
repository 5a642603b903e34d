from __future__ import annotations

"""Conversion controller: selection state, manual conversion and trend channel.

State container for the main converter card. Changing the amount or the
currencies never converts on its own; conversion happens only on `convert()`.
A pair change (not an amount change) refreshes the trend series on a separate
channel whose failures are logged and swallowed.

Ordering: every conversion trigger takes a sequence number and only the most
recently initiated one may write result/error/loading. Trend fetches carry a
cancellation token that is cancelled whenever the pair changes again.
"""
import asyncio
from datetime import date, datetime, timedelta, timezone
from enum import Enum
import logging
from typing import Any, Callable, List, Optional, Protocol

from fxwidget.core.errors import ServiceError
from fxwidget.models.constants import CONVERSION_ERROR
from fxwidget.services.money import parse_amount
from fxwidget.services.rates.series import reduce_series
from fxwidget.services.staleness import CancellationToken, RequestSequencer

logger = logging.getLogger("fxwidget.conversion")


class SupportsConversion(Protocol):
    async def convert(self, amount: float, from_currency: str, to_currency: str) -> float: ...

    async def history_rates(
        self, from_currency: str, to_currency: str, start: date, end: date
    ) -> Any: ...


class ConversionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def history_window(days: int, today: Optional[date] = None) -> tuple[date, date]:
    end = today or utc_today()
    return end - timedelta(days=days), end


class ConversionController:
    def __init__(
        self,
        client: SupportsConversion,
        *,
        amount: Any = 1,
        from_currency: Optional[str] = "USD",
        to_currency: Optional[str] = "EUR",
        history_days: int = 30,
        today: Callable[[], date] = utc_today,
    ):
        self._client = client
        self.amount: Any = amount
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.result: Optional[float] = None
        self.error: Optional[str] = None
        self.is_loading = False
        self._sequencer = RequestSequencer()

        self.history_days = history_days
        self._today = today
        self.history_points: List[float] = []
        self.history_loading = False
        self._history_token: Optional[CancellationToken] = None
        self._history_task: Optional[asyncio.Task] = None

    # State ----------------------------------------------------
    @property
    def status(self) -> ConversionStatus:
        if self.is_loading:
            return ConversionStatus.LOADING
        if self.error:
            return ConversionStatus.ERROR
        return ConversionStatus.IDLE

    @property
    def controls_disabled(self) -> bool:
        # Errors never lock the inputs; only an outstanding conversion does.
        return self.is_loading

    @property
    def is_identity(self) -> bool:
        return bool(self.from_currency) and self.from_currency == self.to_currency

    # Selection ------------------------------------------------
    def set_amount(self, value: Any) -> None:
        self.amount = value

    def set_from(self, code: Optional[str]) -> Optional[asyncio.Task]:
        return self.set_pair(code, self.to_currency)

    def set_to(self, code: Optional[str]) -> Optional[asyncio.Task]:
        return self.set_pair(self.from_currency, code)

    def set_pair(
        self, from_currency: Optional[str], to_currency: Optional[str]
    ) -> Optional[asyncio.Task]:
        from_currency = from_currency.upper() if from_currency else from_currency
        to_currency = to_currency.upper() if to_currency else to_currency
        if (from_currency, to_currency) == (self.from_currency, self.to_currency):
            return None
        self.from_currency = from_currency
        self.to_currency = to_currency
        self._retire_conversion()
        return self.refresh_history()

    def swap(self) -> Optional[asyncio.Task]:
        """Exchange from/to. The previous result is cleared, not recomputed."""
        self.from_currency, self.to_currency = self.to_currency, self.from_currency
        self.result = None
        self._retire_conversion()
        return self.refresh_history()

    # Conversion -----------------------------------------------
    async def convert(self) -> Optional[float]:
        seq = self._sequencer.next()
        amount = parse_amount(self.amount)
        if amount is None:
            self._settle_local(0.0)
            return 0.0
        if self.is_identity:
            self._settle_local(amount)
            return amount
        if not self.from_currency or not self.to_currency:
            self.is_loading = False
            return None

        from_currency, to_currency = self.from_currency, self.to_currency
        self.is_loading = True
        self.error = None
        try:
            value = await self._client.convert(amount, from_currency, to_currency)
        except ServiceError as e:
            if self._sequencer.is_current(seq):
                logger.warning(
                    "conversion failed: %s",
                    e,
                    extra={"pair": f"{from_currency}-{to_currency}", "seq": seq},
                )
                self.error = CONVERSION_ERROR
                self.result = None
            return None
        finally:
            if self._sequencer.is_current(seq):
                self.is_loading = False
        if not self._sequencer.is_current(seq):
            logger.debug(
                "discarding stale conversion",
                extra={"pair": f"{from_currency}-{to_currency}", "seq": seq},
            )
            return None
        self.result = value
        return value

    def _settle_local(self, value: float) -> None:
        # No network; a newer trigger also retires any outstanding request.
        self.is_loading = False
        self.error = None
        self.result = value

    def _retire_conversion(self) -> None:
        # An answer for the previous pair must not land on the new one.
        self._sequencer.next()
        self.is_loading = False

    # Trend channel --------------------------------------------
    def refresh_history(self) -> Optional[asyncio.Task]:
        if self._history_token is not None:
            self._history_token.cancel()
            self._history_token = None
        if not self.from_currency or not self.to_currency or self.is_identity:
            self.history_points = []
            self.history_loading = False
            self._history_task = None
            return None
        token = CancellationToken()
        self._history_token = token
        self.history_loading = True
        self._history_task = asyncio.create_task(
            self._load_history(self.from_currency, self.to_currency, token)
        )
        return self._history_task

    async def _load_history(
        self, from_currency: str, to_currency: str, token: CancellationToken
    ) -> None:
        start, end = history_window(self.history_days, self._today())
        try:
            rates = await self._client.history_rates(from_currency, to_currency, start, end)
            points = reduce_series(rates, to_currency)
        except (ServiceError, TypeError, ValueError) as e:
            # Non-critical: the chart degrades to empty
            logger.info("trend %s->%s unavailable: %s", from_currency, to_currency, e)
            points = []
        if token.cancelled:
            logger.debug("dropping trend for stale pair %s->%s", from_currency, to_currency)
            return
        self.history_points = points
        self.history_loading = False

    async def aclose(self) -> None:
        if self._history_token is not None:
            self._history_token.cancel()
        task = self._history_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def wait_for_history(self) -> None:
        task = self._history_task
        if task is not None and not task.done():
            await asyncio.shield(task)
