"""Trading signal and analysis models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from core.models.market import MACDResult, RSIResult


class SignalAction(str, Enum):
    """Directional action derived from indicators."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"

    @property
    def is_buy(self) -> bool:
        return self in (SignalAction.STRONG_BUY, SignalAction.BUY)

    @property
    def is_sell(self) -> bool:
        return self in (SignalAction.STRONG_SELL, SignalAction.SELL)


class TradingSignal(BaseModel):
    """Action plus heuristic confidence and the reasons that produced it."""

    model_config = ConfigDict(frozen=True)

    action: SignalAction
    confidence: float = Field(ge=50, le=95)
    reasons: list[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    """Entry/exit levels suggested for a signal."""

    model_config = ConfigDict(frozen=True)

    action: SignalAction
    entry_price: float | None = None
    target_price: float | None = None
    stop_loss: float | None = None
    position_size: float | None = None  # Fraction of max size, 0..1


class MarketAnalysis(BaseModel):
    """Snapshot of one analysis pass over a pair's price window."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    pair: str
    price: float
    price_change_24h: float  # Percent
    rsi: RSIResult
    macd: MACDResult
    trading_signal: TradingSignal
    recommendation: Recommendation
