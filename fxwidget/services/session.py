from __future__ import annotations

"""Process-wide widget session.

Composition root for the converter page: the currency set (loaded once at
startup and never refreshed), the main ConversionController and one
TrendController per popular pair. Snapshot helpers turn controller state into
plain dicts shared by the JSON API and the HTML template.
"""
import asyncio
from datetime import date
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from fxwidget.core.config import Settings
from fxwidget.core.errors import ServiceError
from fxwidget.models.constants import CURRENCY_LOAD_ERROR, LOADING_LABEL, flag_for
from fxwidget.models.pairs import CurrencyPair
from fxwidget.services.conversion import ConversionController, utc_today
from fxwidget.services.money import format_amount, format_rate
from fxwidget.services.rates.client import RateClient
from fxwidget.services.sparkline import SparklinePath, plot
from fxwidget.services.trend import TrendController, build_trend_controllers, load_all

logger = logging.getLogger("fxwidget.session")


def sparkline_dict(points: List[float], width: int, height: int) -> Dict[str, Any]:
    path: SparklinePath = plot(points, width, height)
    return {
        "width": path.width,
        "height": path.height,
        "values": list(points),
        "coordinates": list(path.coordinates),
        "path": path.d,
    }


class WidgetSession:
    def __init__(
        self,
        client: RateClient,
        settings: Settings,
        *,
        today: Callable[[], date] = utc_today,
    ):
        self.client = client
        self.settings = settings
        self.currencies: Set[str] = set()
        self.currency_error: Optional[str] = None
        self.conversion = ConversionController(
            client,
            amount=settings.default_amount,
            from_currency=settings.default_from_currency,
            to_currency=settings.default_to_currency,
            history_days=settings.history_days,
            today=today,
        )
        self.popular: List[TrendController] = build_trend_controllers(
            [CurrencyPair.parse(p) for p in settings.popular_pairs],
            client,
            history_days=settings.history_days,
            today=today,
        )
        self._popular_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        await self.load_currencies()
        self.conversion.refresh_history()
        self._popular_task = asyncio.create_task(load_all(self.popular))

    async def load_currencies(self) -> None:
        try:
            self.currencies = await self.client.list_currencies()
            self.currency_error = None
            logger.info("loaded %d currencies", len(self.currencies))
        except ServiceError as e:
            logger.error("currency list unavailable: %s", e)
            self.currencies = set()
            self.currency_error = CURRENCY_LOAD_ERROR

    async def settle(self) -> None:
        """Wait for outstanding background fetches (trend and popular pairs)."""
        await self.conversion.wait_for_history()
        task = self._popular_task
        if task is not None and not task.done():
            await asyncio.shield(task)

    async def aclose(self) -> None:
        await self.conversion.aclose()
        task = self._popular_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await self.client.aclose()

    # Snapshots ------------------------------------------------
    def currency_options(self) -> List[Dict[str, str]]:
        return [{"code": c, "flag": flag_for(c)} for c in sorted(self.currencies)]

    def trend_snapshot(self) -> Dict[str, Any]:
        return sparkline_dict(
            self.conversion.history_points,
            self.settings.trend_width,
            self.settings.trend_height,
        )

    def state_snapshot(self) -> Dict[str, Any]:
        c = self.conversion
        display = LOADING_LABEL if c.is_loading else format_amount(c.result)
        return {
            "amount": c.amount,
            "from_currency": c.from_currency,
            "to_currency": c.to_currency,
            "status": c.status.value,
            "is_loading": c.is_loading,
            "controls_disabled": c.controls_disabled,
            "result": c.result,
            "result_display": display,
            "error": c.error,
            "currency_error": self.currency_error,
            "trend": self.trend_snapshot(),
        }

    def popular_snapshot(self) -> List[Dict[str, Any]]:
        cards = []
        for ctrl in self.popular:
            cards.append(
                {
                    "from_currency": ctrl.pair.from_currency,
                    "to_currency": ctrl.pair.to_currency,
                    "label": str(ctrl.pair),
                    "rate": ctrl.rate,
                    "rate_display": format_rate(ctrl.rate),
                    "sparkline": sparkline_dict(
                        ctrl.points, self.settings.mini_width, self.settings.mini_height
                    ),
                }
            )
        return cards
