"""Data models."""

from core.models.market import (
    Crossover,
    MACDResult,
    NEUTRAL_MACD,
    NEUTRAL_RSI,
    PriceBuffer,
    PricePoint,
    RSIResult,
    RSISignal,
    SignalStrength,
)
from core.models.signal import (
    MarketAnalysis,
    Recommendation,
    SignalAction,
    TradingSignal,
)
from core.models.quote import Quote, RoutePlan
from core.models.safety import (
    SafetyCheck,
    SafetyCheckResult,
    SafetyChecks,
    SafetyConfig,
    Severity,
)
from core.models.portfolio import (
    PaperTradingConfig,
    Portfolio,
    Position,
    Trade,
    TradeHistory,
    TradeResult,
    TradeStatus,
    TradeType,
    generate_trade_id,
)

__all__ = [
    # Market data and indicators
    "PricePoint",
    "PriceBuffer",
    "RSISignal",
    "SignalStrength",
    "Crossover",
    "RSIResult",
    "MACDResult",
    "NEUTRAL_RSI",
    "NEUTRAL_MACD",
    # Signals
    "SignalAction",
    "TradingSignal",
    "Recommendation",
    "MarketAnalysis",
    # Quotes and safety
    "Quote",
    "RoutePlan",
    "Severity",
    "SafetyConfig",
    "SafetyCheck",
    "SafetyChecks",
    "SafetyCheckResult",
    # Portfolio
    "PaperTradingConfig",
    "Position",
    "Portfolio",
    "Trade",
    "TradeType",
    "TradeStatus",
    "TradeResult",
    "TradeHistory",
    "generate_trade_id",
]
