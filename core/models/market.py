"""Price history and indicator result models."""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class PricePoint(BaseModel):
    """A single observed price."""

    model_config = ConfigDict(frozen=True)

    timestamp: int  # Unix epoch milliseconds
    price: float = Field(gt=0)


class PriceBuffer(BaseModel):
    """Buffer for storing recent prices for indicator calculation."""

    symbol: str
    points: list[PricePoint] = Field(default_factory=list)
    max_size: int = Field(default=200, gt=0)

    def add(self, point: PricePoint) -> None:
        """Add a price point to the buffer, maintaining max size."""
        if self.points and point.timestamp <= self.points[-1].timestamp:
            # Same timestamp replaces the last point, older ones are dropped
            if point.timestamp == self.points[-1].timestamp:
                self.points[-1] = point
            else:
                logger.debug(
                    "%s: dropped out-of-order price at %d (latest %d)",
                    self.symbol,
                    point.timestamp,
                    self.points[-1].timestamp,
                )
            return

        self.points.append(point)
        if len(self.points) > self.max_size:
            self.points = self.points[-self.max_size :]

    def get_prices(self) -> list[float]:
        """Get list of prices, oldest first."""
        return [p.price for p in self.points]

    @property
    def latest(self) -> PricePoint | None:
        return self.points[-1] if self.points else None

    def __len__(self) -> int:
        return len(self.points)


class RSISignal(str, Enum):
    """RSI zone classification."""

    OVERSOLD = "OVERSOLD"
    NEUTRAL = "NEUTRAL"
    OVERBOUGHT = "OVERBOUGHT"


class SignalStrength(str, Enum):
    """How deep the RSI sits inside its zone."""

    STRONG = "STRONG"
    MODERATE = "MODERATE"
    WEAK = "WEAK"


class Crossover(str, Enum):
    """MACD / signal line crossover on the latest bar."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class RSIResult(BaseModel):
    """Relative Strength Index reading."""

    model_config = ConfigDict(frozen=True)

    value: float = Field(ge=0, le=100)
    signal: RSISignal
    strength: SignalStrength


class MACDResult(BaseModel):
    """MACD reading for the latest price."""

    model_config = ConfigDict(frozen=True)

    macd: float
    signal: float
    histogram: float
    crossover: Crossover


NEUTRAL_RSI = RSIResult(value=50.0, signal=RSISignal.NEUTRAL, strength=SignalStrength.WEAK)
NEUTRAL_MACD = MACDResult(macd=0.0, signal=0.0, histogram=0.0, crossover=Crossover.NEUTRAL)
