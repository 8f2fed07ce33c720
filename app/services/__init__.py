"""Business services."""

from app.services.auto_trader import AutoTrader, QuoteSource, AnalysisCallback
from app.services.mock_quotes import (
    DEMO_PAIR,
    DEMO_QUOTES,
    RandomWalkQuoteSource,
    build_quote,
)

__all__ = [
    "AutoTrader",
    "QuoteSource",
    "AnalysisCallback",
    "DEMO_PAIR",
    "DEMO_QUOTES",
    "RandomWalkQuoteSource",
    "build_quote",
]
