"""Domain constants for validation and display.

Kept as plain sets/dicts; the quote service decides which currencies exist.
"""

from typing import Dict, Set

THEMES: Set[str] = {"light", "dark"}
DEFAULT_THEME = "dark"

UNAVAILABLE = "—"
LOADING_LABEL = "Converting…"

CURRENCY_LOAD_ERROR = "Could not load currency data. Please try again later."
CONVERSION_ERROR = "Failed to get exchange rate."

DEFAULT_FLAG = "🌐"
CURRENCY_FLAGS: Dict[str, str] = {
    "USD": "🇺🇸",
    "EUR": "🇪🇺",
    "GBP": "🇬🇧",
    "JPY": "🇯🇵",
    "AUD": "🇦🇺",
    "CAD": "🇨🇦",
    "CHF": "🇨🇭",
    "CNY": "🇨🇳",
    "INR": "🇮🇳",
    "NZD": "🇳🇿",
    "SEK": "🇸🇪",
    "NOK": "🇳🇴",
    "DKK": "🇩🇰",
    "PLN": "🇵🇱",
    "CZK": "🇨🇿",
    "HUF": "🇭🇺",
    "RUB": "🇷🇺",
    "BRL": "🇧🇷",
    "MXN": "🇲🇽",
    "ZAR": "🇿🇦",
    "SGD": "🇸🇬",
    "HKD": "🇭🇰",
    "KRW": "🇰🇷",
    "TRY": "🇹🇷",
    "AED": "🇦🇪",
    "SAR": "🇸🇦",
}


def flag_for(code: str) -> str:
    return CURRENCY_FLAGS.get((code or "").upper(), DEFAULT_FLAG)
