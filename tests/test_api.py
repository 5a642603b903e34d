"""End-to-end API checks through FastAPI's TestClient and a mocked quote service."""

from __future__ import annotations

from datetime import date, timedelta

import pytest


def test_health(make_client):
    with make_client() as client:
        r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_currencies_loaded_once_at_startup(make_client, quote_service):
    with make_client() as client:
        first = client.get("/api/currencies").json()
        client.get("/api/currencies")
    codes = [c["code"] for c in first["currencies"]]
    assert codes == ["EUR", "GBP", "INR", "JPY", "USD"]
    assert first["error"] is None
    assert {"code": "USD", "flag": "🇺🇸"} in first["currencies"]
    assert len(quote_service.calls("currencies")) == 1


def test_currency_list_failure_leaves_controls_usable(make_client, quote_service):
    quote_service.status["currencies"] = 500
    with make_client() as client:
        listing = client.get("/api/currencies").json()
        state = client.get("/api/state").json()
        # Inputs still accept changes after the failure
        updated = client.post("/api/selection", json={"amount": 25}).json()
    assert listing["currencies"] == []
    assert listing["error"] == "Could not load currency data. Please try again later."
    assert state["currency_error"] == listing["error"]
    assert state["controls_disabled"] is False
    assert updated["amount"] == 25


def test_convert_usd_to_eur(make_client, quote_service):
    with make_client() as client:
        client.post("/api/selection", json={"amount": 100, "from_currency": "usd", "to_currency": "EUR"})
        before = len(quote_service.conversions())
        state = client.post("/api/convert").json()
    assert state["result"] == pytest.approx(92.5)
    assert state["result_display"] == "92.50"
    assert state["status"] == "idle"
    assert state["is_loading"] is False
    assert len(quote_service.conversions()) == before + 1


def test_identity_conversion_skips_network(make_client, quote_service):
    with make_client() as client:
        client.post("/api/selection", json={"amount": 100, "to_currency": "USD"})
        before = len(quote_service.conversions())
        state = client.post("/api/convert").json()
    assert state["result"] == 100
    assert state["result_display"] == "100.00"
    assert len(quote_service.conversions()) == before


def test_invalid_amount_converts_to_zero(make_client, quote_service):
    with make_client() as client:
        client.post("/api/selection", json={"amount": "not a number"})
        before = len(quote_service.conversions())
        state = client.post("/api/convert").json()
    assert state["result"] == 0
    assert len(quote_service.conversions()) == before


def test_conversion_failure_reports_error(make_client, quote_service):
    with make_client() as client:
        client.post("/api/selection", json={"amount": 10, "to_currency": "JPY"})
        state = client.post("/api/convert").json()
    assert state["error"] == "Failed to get exchange rate."
    assert state["result"] is None
    assert state["result_display"] == "—"
    assert state["status"] == "error"
    assert state["controls_disabled"] is False


def test_selection_does_not_convert(make_client, quote_service):
    with make_client() as client:
        before = len(quote_service.conversions())
        client.post("/api/selection", json={"amount": 10, "to_currency": "GBP"})
    assert len(quote_service.conversions()) == before


def test_swap_exchanges_pair(make_client):
    with make_client() as client:
        client.post("/api/selection", json={"amount": 7})
        state = client.post("/api/swap").json()
        back = client.post("/api/swap").json()
    assert (state["from_currency"], state["to_currency"]) == ("EUR", "USD")
    assert state["amount"] == 7
    assert (back["from_currency"], back["to_currency"]) == ("USD", "EUR")


def test_trend_has_one_point_per_business_day(make_client, quote_service):
    start = date.today() - timedelta(days=30)
    values = [0.9 + i / 1000 for i in range(22)]
    quote_service.set_history(("USD", "EUR"), values, start)
    with make_client() as client:
        trend = client.get("/api/trend").json()
    assert trend["values"] == values
    assert len(trend["coordinates"]) == 22
    assert trend["path"].startswith("M 3 ")
    assert (trend["width"], trend["height"]) == (760, 80)


def test_trend_failure_is_silent(make_client, quote_service):
    quote_service.status["history"] = 500
    with make_client() as client:
        state = client.get("/api/state").json()
    assert state["trend"]["values"] == []
    assert state["trend"]["path"] == ""
    assert state["error"] is None


def test_history_endpoint_returns_dated_series(make_client, quote_service):
    quote_service.set_history(("USD", "GBP"), [0.78, 0.79, 0.8], date(2024, 3, 4))
    with make_client() as client:
        body = client.get("/api/history", params={"from_currency": "usd", "to_currency": "gbp", "days": 7}).json()
    assert [p["date"] for p in body["points"]] == ["2024-03-04", "2024-03-05", "2024-03-06"]
    assert (body["from_currency"], body["to_currency"]) == ("USD", "GBP")
    start, end = date.fromisoformat(body["start"]), date.fromisoformat(body["end"])
    assert end - start == timedelta(days=7)


def test_popular_pairs_cards(make_client, quote_service):
    quote_service.set_history(("USD", "GBP"), [0.78, 0.8], date(2024, 3, 4))
    del quote_service.unit_rates[("USD", "INR")]
    with make_client() as client:
        cards = client.get("/api/popular").json()
    by_label = {c["label"]: c for c in cards}
    assert list(by_label) == ["USD → INR", "USD → EUR", "USD → GBP"]
    assert by_label["USD → INR"]["rate"] is None
    assert by_label["USD → INR"]["rate_display"] == "—"
    assert by_label["USD → EUR"]["rate_display"] == "0.9250"
    assert by_label["USD → GBP"]["sparkline"]["values"] == [0.78, 0.8]
    assert by_label["USD → GBP"]["sparkline"]["width"] == 220


def test_theme_toggle_persists(make_client):
    with make_client() as client:
        assert client.get("/api/theme").json() == {"theme": "dark"}
        assert client.post("/api/theme/toggle").json() == {"theme": "light"}
    with make_client() as client:
        assert client.get("/api/theme").json() == {"theme": "light"}


def test_html_page_renders(make_client):
    with make_client() as client:
        r = client.get("/")
        swapped = client.post("/ui/swap", follow_redirects=False)
        page = client.get("/").text
    assert r.status_code == 200
    assert 'data-theme="dark"' in r.text
    assert "USD → EUR" in r.text
    assert swapped.status_code == 303
    assert '<option value="EUR" selected>' in page


def test_html_convert_form(make_client):
    with make_client() as client:
        client.post("/ui/convert", data={"amount": "100", "from_currency": "USD", "to_currency": "EUR"})
        state = client.get("/api/state").json()
    assert state["result_display"] == "92.50"


def test_unknown_route_returns_json_404(make_client):
    with make_client() as client:
        r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_selection_validation_error(make_client):
    with make_client() as client:
        r = client.post("/api/selection", json={"from_currency": "DOLLARS"})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_html_swap_uses_posted_form(make_client):
    with make_client() as client:
        r = client.post(
            "/ui/swap",
            data={"amount": "55", "from_currency": "USD", "to_currency": "GBP"},
            follow_redirects=False,
        )
        state = client.get("/api/state").json()
    assert r.status_code == 303
    assert (state["from_currency"], state["to_currency"]) == ("GBP", "USD")
    assert state["amount"] == "55"


def test_undecodable_conversion_reports_error(make_client, quote_service):
    quote_service.corrupt.add("latest")
    with make_client() as client:
        client.post("/api/selection", json={"amount": 10})
        state = client.post("/api/convert").json()
    assert state["error"] == "Failed to get exchange rate."
    assert state["status"] == "error"
    assert state["result"] is None


def test_undecodable_history_leaves_trend_empty(make_client, quote_service):
    quote_service.corrupt.add("history")
    with make_client() as client:
        state = client.get("/api/state").json()
    assert state["trend"]["values"] == []
    assert state["error"] is None
