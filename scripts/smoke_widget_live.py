import os, sys, tempfile, json
from fastapi.testclient import TestClient
from fxwidget.main import create_app
from fxwidget.core.config import Settings

"""Smoke script against the live quote service.

Boots the app with a throwaway preference DB, converts 100 USD -> EUR and
prints the converter snapshot plus the popular pair cards. Requires network.

NOTE: This is a lightweight diagnostic and not a formal test.
"""


def run():
    with tempfile.TemporaryDirectory() as d:
        settings = Settings(data_dir=d, db_path=os.path.join(d, "smoke.db"), debug=False)
        with TestClient(create_app(settings_override=settings)) as client:
            client.post(
                "/api/selection",
                json={"amount": 100, "from_currency": "USD", "to_currency": "EUR"},
            )
            state = client.post("/api/convert").json()
            popular = client.get("/api/popular").json()
        state["trend"] = {
            "points": len(state["trend"]["values"]),
            "path": state["trend"]["path"][:60],
        }
        print(
            json.dumps(
                {
                    "state": state,
                    "popular": [(c["label"], c["rate_display"]) for c in popular],
                },
                indent=2,
                ensure_ascii=False,
            )
        )


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    run()
