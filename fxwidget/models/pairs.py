from __future__ import annotations

import re
from dataclasses import dataclass

_PAIR_RE = re.compile(r"^\s*([A-Za-z]{3})\s*[:/\-]\s*([A-Za-z]{3})\s*$")


@dataclass(frozen=True)
class CurrencyPair:
    from_currency: str
    to_currency: str

    @classmethod
    def parse(cls, raw: str) -> "CurrencyPair":
        """Parse 'USD:EUR' (also 'USD/EUR', 'USD-EUR') into a pair."""
        m = _PAIR_RE.match(raw or "")
        if not m:
            raise ValueError(f"Invalid currency pair '{raw}' (expected e.g. 'USD:EUR')")
        return cls(m.group(1).upper(), m.group(2).upper())

    @property
    def key(self) -> str:
        return f"{self.from_currency}-{self.to_currency}"

    def swapped(self) -> "CurrencyPair":
        return CurrencyPair(self.to_currency, self.from_currency)

    def __str__(self) -> str:
        return f"{self.from_currency} → {self.to_currency}"
