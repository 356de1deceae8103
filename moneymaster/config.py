"""Configuration for the moneymaster API.

Values come from environment variables with sensible local-development
defaults. The exchange-rate table can be replaced with a JSON file:

    {"USD": 1, "EUR": 0.92, "INR": 83.5}

Rates are units of the currency per one USD.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

DEFAULT_EXCHANGE_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "INR": 83.5,
    "JPY": 151.2,
    "CAD": 1.36,
    "AUD": 1.52,
    "AED": 3.67,
}

CORS_ORIGINS_ENV = "MONEYMASTER_CORS_ORIGINS"
LOG_LEVEL_ENV = "MONEYMASTER_LOG_LEVEL"
RATES_FILE_ENV = "MONEYMASTER_RATES_FILE"


def load_exchange_rates(rates_path: Optional[str | Path] = None) -> Dict[str, float]:
    """Load exchange rates from JSON if a path is given, else use the defaults."""
    if not rates_path:
        return dict(DEFAULT_EXCHANGE_RATES)

    data = json.loads(Path(rates_path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not data:
        raise ValueError(f"{rates_path}: expected a non-empty JSON object of currency rates")

    rates: Dict[str, float] = {}
    for code, rate in data.items():
        rate = float(rate)
        if rate <= 0:
            raise ValueError(f"{rates_path}: rate for {code} must be positive")
        rates[str(code).upper()] = rate
    return rates


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"
    exchange_rates: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_EXCHANGE_RATES))

    @staticmethod
    def load() -> "Settings":
        raw_origins = os.getenv(CORS_ORIGINS_ENV)
        return Settings(
            cors_origins=_split_origins(raw_origins) if raw_origins else list(DEFAULT_CORS_ORIGINS),
            log_level=os.getenv(LOG_LEVEL_ENV, "INFO").upper(),
            exchange_rates=load_exchange_rates(os.getenv(RATES_FILE_ENV)),
        )
