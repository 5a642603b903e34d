"""Pydantic and plain domain models for the currency converter widget."""

from .constants import (
    CURRENCY_FLAGS,
    DEFAULT_THEME,
    THEMES,
)  # re-export
from .pairs import CurrencyPair
from .widget import (
    CurrenciesOut,
    HistoryOut,
    PopularPairOut,
    SelectionIn,
    SparklineOut,
    ThemeOut,
    WidgetStateOut,
)

__all__ = [
    "CURRENCY_FLAGS",
    "DEFAULT_THEME",
    "THEMES",
    "CurrencyPair",
    "CurrenciesOut",
    "HistoryOut",
    "PopularPairOut",
    "SelectionIn",
    "SparklineOut",
    "ThemeOut",
    "WidgetStateOut",
]
