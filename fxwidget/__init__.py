"""Currency converter widget: live rates, conversion and trend sparklines."""

__version__ = "0.1.0"
