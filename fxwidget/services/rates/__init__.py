from .client import RateClient
from .series import RatePoint, RateSeries, rate_series, reduce_series

__all__ = ["RateClient", "RatePoint", "RateSeries", "rate_series", "reduce_series"]
