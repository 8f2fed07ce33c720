"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    calculate_ema,
    calculate_rsi,
    calculate_macd,
    IndicatorCalculator,
)

__all__ = [
    "calculate_ema",
    "calculate_rsi",
    "calculate_macd",
    "IndicatorCalculator",
]
