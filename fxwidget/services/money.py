"""Money / rate display helpers.

Centralized so the API snapshot and the HTML page format numbers identically.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
import math
from typing import Any, Optional

from fxwidget.core.errors import InputValidationError
from fxwidget.models.constants import UNAVAILABLE


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def validate_amount(raw: Any) -> float:
    """Return `raw` as a finite, positive float or raise InputValidationError."""
    if raw is None or isinstance(raw, bool):
        raise InputValidationError("amount is required")
    try:
        value = float(raw.strip().replace(",", "")) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError) as e:
        raise InputValidationError(f"amount {raw!r} is not a number") from e
    if not math.isfinite(value) or value <= 0:
        raise InputValidationError("amount must be a finite number greater than zero")
    return value


def parse_amount(raw: Any) -> Optional[float]:
    try:
        return validate_amount(raw)
    except InputValidationError:
        return None


def format_amount(value: Optional[float]) -> str:
    """Two decimals with thousands separators (e.g. 1,234.50) or a dash."""
    if value is None:
        return UNAVAILABLE
    return f"{round2(value):,.2f}"


def format_rate(value: Optional[float]) -> str:
    if not value:
        return UNAVAILABLE
    return f"{value:.4f}"
