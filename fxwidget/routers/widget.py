from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fxwidget.core.errors import ServiceError
from fxwidget.db.dal import Database
from fxwidget.models.widget import (
    CurrenciesOut,
    HistoryOut,
    PopularPairOut,
    SelectionIn,
    SparklineOut,
    ThemeOut,
    WidgetStateOut,
)
from fxwidget.routers.deps import get_db, get_session
from fxwidget.services.app_settings import get_ui_theme, toggle_ui_theme
from fxwidget.services.conversion import history_window
from fxwidget.services.session import WidgetSession

"""Widget JSON API.

Endpoints:
    - GET  /api/currencies      -> currency options + load error (if any)
    - GET  /api/state           -> converter snapshot
    - POST /api/selection       -> update amount / currencies (no conversion)
    - POST /api/convert         -> manual conversion trigger
    - POST /api/swap            -> exchange from/to
    - GET  /api/trend           -> main sparkline
    - GET  /api/history         -> dated series for an arbitrary pair
    - GET  /api/popular         -> popular pair cards
    - GET  /api/theme, POST /api/theme/toggle
"""

logger = logging.getLogger("fxwidget.api")

router = APIRouter(prefix="/api", tags=["widget"])


@router.get("/currencies", response_model=CurrenciesOut, summary="Available currencies")
async def list_currencies(session: WidgetSession = Depends(get_session)):
    return {"currencies": session.currency_options(), "error": session.currency_error}


@router.get("/state", response_model=WidgetStateOut, summary="Converter snapshot")
async def get_state(session: WidgetSession = Depends(get_session)):
    await session.conversion.wait_for_history()
    return session.state_snapshot()


@router.post(
    "/selection", response_model=WidgetStateOut, summary="Update amount and currencies"
)
async def update_selection(
    payload: SelectionIn, session: WidgetSession = Depends(get_session)
):
    ctrl = session.conversion
    fields = payload.model_fields_set
    if "amount" in fields:
        ctrl.set_amount(payload.amount)
    if fields & {"from_currency", "to_currency"}:
        ctrl.set_pair(
            payload.from_currency if "from_currency" in fields else ctrl.from_currency,
            payload.to_currency if "to_currency" in fields else ctrl.to_currency,
        )
    await ctrl.wait_for_history()
    return session.state_snapshot()


@router.post("/convert", response_model=WidgetStateOut, summary="Convert now")
async def convert_now(session: WidgetSession = Depends(get_session)):
    await session.conversion.convert()
    return session.state_snapshot()


@router.post("/swap", response_model=WidgetStateOut, summary="Swap currencies")
async def swap(session: WidgetSession = Depends(get_session)):
    session.conversion.swap()
    await session.conversion.wait_for_history()
    return session.state_snapshot()


@router.get("/trend", response_model=SparklineOut, summary="Trend sparkline for the pair")
async def get_trend(session: WidgetSession = Depends(get_session)):
    await session.conversion.wait_for_history()
    return session.trend_snapshot()


@router.get("/history", response_model=HistoryOut, summary="Dated rate history")
async def get_history(
    from_currency: str = Query(..., min_length=3, max_length=3),
    to_currency: str = Query(..., min_length=3, max_length=3),
    days: Optional[int] = Query(None, gt=0, le=365),
    session: WidgetSession = Depends(get_session),
):
    from_currency, to_currency = from_currency.upper(), to_currency.upper()
    start, end = history_window(days or session.settings.history_days)
    points = []
    if from_currency != to_currency:
        try:
            series = await session.client.history(from_currency, to_currency, start, end)
            points = [{"date": p.date, "rate": p.rate} for p in series if p.rate > 0]
        except ServiceError as e:
            logger.info("history %s->%s unavailable: %s", from_currency, to_currency, e)
    return {
        "from_currency": from_currency,
        "to_currency": to_currency,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "points": points,
    }


@router.get("/popular", response_model=List[PopularPairOut], summary="Popular pairs")
async def get_popular(session: WidgetSession = Depends(get_session)):
    await session.settle()
    return session.popular_snapshot()


@router.get("/theme", response_model=ThemeOut, summary="Current display theme")
async def get_theme(db: Database = Depends(get_db)):
    return {"theme": get_ui_theme(db)}


@router.post("/theme/toggle", response_model=ThemeOut, summary="Toggle light/dark")
async def toggle_theme(db: Database = Depends(get_db)):
    return {"theme": toggle_ui_theme(db)}
