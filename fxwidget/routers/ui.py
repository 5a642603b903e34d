from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from fxwidget.db.dal import Database
from fxwidget.models.constants import flag_for
from fxwidget.routers.deps import get_db, get_session
from fxwidget.services.app_settings import get_ui_theme, toggle_ui_theme
from fxwidget.services.session import WidgetSession

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _back_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


def _apply_form(
    session: WidgetSession,
    amount: Optional[str],
    from_currency: Optional[str],
    to_currency: Optional[str],
) -> None:
    ctrl = session.conversion
    if amount is not None:
        ctrl.set_amount(amount)
    if from_currency or to_currency:
        ctrl.set_pair(from_currency or ctrl.from_currency, to_currency or ctrl.to_currency)


@router.get("/", response_class=HTMLResponse)
async def ui_home(
    request: Request,
    session: WidgetSession = Depends(get_session),
    db: Database = Depends(get_db),
):
    await session.settle()
    state = session.state_snapshot()
    context = {
        "request": request,
        "theme": get_ui_theme(db),
        "state": state,
        "currencies": session.currency_options(),
        "popular": session.popular_snapshot(),
        "trend_days": session.settings.history_days,
        "from_flag": flag_for(state["from_currency"] or ""),
        "to_flag": flag_for(state["to_currency"] or ""),
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.post("/ui/selection")
async def ui_selection(
    amount: Optional[str] = Form(None),
    from_currency: Optional[str] = Form(None),
    to_currency: Optional[str] = Form(None),
    session: WidgetSession = Depends(get_session),
):
    _apply_form(session, amount, from_currency, to_currency)
    return _back_home()


@router.post("/ui/convert")
async def ui_convert(
    amount: Optional[str] = Form(None),
    from_currency: Optional[str] = Form(None),
    to_currency: Optional[str] = Form(None),
    session: WidgetSession = Depends(get_session),
):
    _apply_form(session, amount, from_currency, to_currency)
    await session.conversion.convert()
    return _back_home()


@router.post("/ui/swap")
async def ui_swap(
    amount: Optional[str] = Form(None),
    from_currency: Optional[str] = Form(None),
    to_currency: Optional[str] = Form(None),
    session: WidgetSession = Depends(get_session),
):
    # Swap what the user sees, including unsaved edits in the form
    _apply_form(session, amount, from_currency, to_currency)
    session.conversion.swap()
    return _back_home()


@router.post("/ui/theme")
async def ui_theme(db: Database = Depends(get_db)):
    toggle_ui_theme(db)
    return _back_home()
