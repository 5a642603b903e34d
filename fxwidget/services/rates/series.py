from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping

"""Historical rate series reduction.

The quote service answers a range query with `{date: {code: rate}}`. These
helpers project that map onto a single target currency, ordered by date.
Dates are ISO `YYYY-MM-DD`, so lexical order is chronological order.
"""


@dataclass(frozen=True)
class RatePoint:
    date: str
    rate: float


RateSeries = List[RatePoint]


def rate_series(rates_by_date: Mapping[str, Any], target: str) -> RateSeries:
    """Return dated rates for `target`, ascending by date.

    Dates whose entry lacks the target (or is not a mapping) are skipped.
    """
    out: RateSeries = []
    for day in sorted(rates_by_date):
        entry = rates_by_date[day]
        if not isinstance(entry, Mapping):
            continue
        value = entry.get(target)
        if value is None:
            continue
        out.append(RatePoint(date=str(day), rate=float(value)))
    return out


def reduce_series(rates_by_date: Mapping[str, Any], target: str) -> List[float]:
    return [p.rate for p in rate_series(rates_by_date, target)]
