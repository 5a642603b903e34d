import asyncio
import inspect
import pathlib
import sys
from datetime import date, timedelta
from typing import Dict, List, Optional, Set, Tuple

import httpx
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fxwidget.core.config import Settings  # noqa: E402
from fxwidget.main import create_app  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            argnames = pyfuncitem._fixtureinfo.argnames
            kwargs = {name: pyfuncitem.funcargs[name] for name in argnames}
            loop.run_until_complete(test_function(**kwargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


def business_days(start: date, count: int) -> List[str]:
    """`count` ISO weekday dates starting at `start`, skipping weekends."""
    out: List[str] = []
    day = start
    while len(out) < count:
        if day.weekday() < 5:
            out.append(day.isoformat())
        day += timedelta(days=1)
    return out


class FakeQuoteService:
    """In-memory Frankfurter look-alike served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.currencies: Dict[str, str] = {
            "USD": "United States Dollar",
            "EUR": "Euro",
            "GBP": "British Pound",
            "INR": "Indian Rupee",
            "JPY": "Japanese Yen",
        }
        self.unit_rates: Dict[Tuple[str, str], float] = {
            ("USD", "EUR"): 0.925,
            ("USD", "GBP"): 0.79,
            ("USD", "INR"): 83.1234,
            ("EUR", "USD"): 1.081,
        }
        self.history: Dict[Tuple[str, str], Dict[str, Dict[str, float]]] = {}
        self.status: Dict[str, int] = {}  # endpoint kind -> forced HTTP status
        self.corrupt: Set[str] = set()  # endpoint kinds answered with an undecodable body
        self.requests: List[httpx.Request] = []

    def set_history(self, pair: Tuple[str, str], values: List[float], start: date) -> None:
        days = business_days(start, len(values))
        self.history[pair] = {d: {pair[1]: v} for d, v in zip(days, values)}

    def calls(self, kind: str) -> List[httpx.Request]:
        return [r for r in self.requests if self._kind(r) == kind]

    def conversions(self) -> List[httpx.Request]:
        """/latest calls carrying an amount (popular pair cards omit it)."""
        return [r for r in self.calls("latest") if "amount" in r.url.params]

    @staticmethod
    def _kind(request: httpx.Request) -> str:
        path = request.url.path
        if path == "/currencies":
            return "currencies"
        if path == "/latest":
            return "latest"
        if ".." in path:
            return "history"
        return "unknown"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        kind = self._kind(request)
        forced: Optional[int] = self.status.get(kind)
        if forced is not None:
            return httpx.Response(forced, json={"message": "forced failure"})
        if kind in self.corrupt:
            return httpx.Response(
                200,
                headers={"content-encoding": "gzip", "content-type": "application/json"},
                stream=httpx.ByteStream(b"not gzip at all"),
            )
        params = request.url.params
        if kind == "currencies":
            return httpx.Response(200, json=self.currencies)
        if kind == "latest":
            pair = (params["from"], params["to"])
            rate = self.unit_rates.get(pair)
            if rate is None:
                return httpx.Response(404, json={"message": "not found"})
            amount = float(params.get("amount", 1))
            return httpx.Response(200, json={"amount": amount, "base": pair[0], "rates": {pair[1]: amount * rate}})
        if kind == "history":
            pair = (params["from"], params["to"])
            return httpx.Response(200, json={"base": pair[0], "rates": self.history.get(pair, {})})
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def quote_service() -> FakeQuoteService:
    return FakeQuoteService()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "test.sqlite3",
        http_retries=0,
        http_backoff_seconds=0,
        debug=False,
    )


@pytest.fixture
def make_client(settings, quote_service):
    """Build a TestClient wired to the fake quote service (lifespan runs on enter)."""
    from fastapi.testclient import TestClient

    def _make() -> TestClient:
        app = create_app(settings_override=settings, transport=httpx.MockTransport(quote_service.handler))
        return TestClient(app)

    return _make
