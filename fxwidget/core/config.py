from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, RATES_API_BASE_URL, HTTP_TIMEOUT_SECONDS, POPULAR_PAIRS as a JSON list).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Converter"
    debug: bool = True
    version: str = "0.1.0"

    # Data & persistence (theme preference only)
    data_dir: Path = Path("data")
    db_filename: str = "fxwidget.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Quote service
    rates_api_base_url: AnyHttpUrl = "https://api.frankfurter.app"  # type: ignore[assignment]
    http_timeout_seconds: float = Field(10.0, gt=0)
    http_retries: int = Field(1, ge=0, le=5)
    http_backoff_seconds: float = Field(0.5, ge=0)

    # Widget defaults
    default_amount: float = 1.0
    default_from_currency: str = "USD"
    default_to_currency: str = "EUR"
    history_days: int = Field(30, gt=0, le=365)
    popular_pairs: List[str] = ["USD:INR", "USD:EUR", "USD:GBP"]

    # Sparkline canvas sizes
    trend_width: int = Field(760, gt=6)
    trend_height: int = Field(80, gt=6)
    mini_width: int = Field(220, gt=6)
    mini_height: int = Field(48, gt=6)

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.default_from_currency = self.default_from_currency.upper()
        self.default_to_currency = self.default_to_currency.upper()
        # Fail fast on malformed pairs rather than at first render
        from fxwidget.models.pairs import CurrencyPair

        for raw in self.popular_pairs:
            CurrencyPair.parse(raw)

    @property
    def rates_base_url(self) -> str:
        return str(self.rates_api_base_url).rstrip("/")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
