from __future__ import annotations

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator


class SelectionIn(BaseModel):
    """Partial selection update; omitted fields keep their current value."""

    amount: Optional[Union[float, str]] = Field(
        None, description="Amount to send; non-numeric or <= 0 converts to 0"
    )
    from_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    to_currency: Optional[str] = Field(None, min_length=3, max_length=3)

    @field_validator("from_currency", "to_currency")
    @classmethod
    def upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class SparklineOut(BaseModel):
    width: int
    height: int
    values: List[float]
    coordinates: List[Tuple[float, float]]
    path: str


class WidgetStateOut(BaseModel):
    amount: Optional[Union[float, str]]
    from_currency: Optional[str]
    to_currency: Optional[str]
    status: str
    is_loading: bool
    controls_disabled: bool
    result: Optional[float]
    result_display: str
    error: Optional[str]
    currency_error: Optional[str]
    trend: SparklineOut


class PopularPairOut(BaseModel):
    from_currency: str
    to_currency: str
    label: str
    rate: Optional[float]
    rate_display: str
    sparkline: SparklineOut


class CurrencyOption(BaseModel):
    code: str
    flag: str


class CurrenciesOut(BaseModel):
    currencies: List[CurrencyOption]
    error: Optional[str]


class HistoryPointOut(BaseModel):
    date: str
    rate: float = Field(..., gt=0)


class HistoryOut(BaseModel):
    from_currency: str
    to_currency: str
    start: str
    end: str
    points: List[HistoryPointOut]


class ThemeOut(BaseModel):
    theme: str
