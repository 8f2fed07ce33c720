"""Per-pair market analyzer.

Keeps a bounded price window for one trading pair and recomputes the
indicators, signal and recommendation whenever a new price arrives.
"""

import logging
from datetime import datetime, timezone

from core.indicators import IndicatorCalculator
from core.models import MarketAnalysis, PriceBuffer, PricePoint
from core.signal_generator import generate_recommendation, generate_trading_signal

logger = logging.getLogger(__name__)

# Lookback (in samples) for the price change figure
CHANGE_LOOKBACK = 24


class MarketAnalyzer:
    """Analyze one pair from a stream of prices."""

    def __init__(
        self,
        symbol: str,
        max_history: int = 200,
        calculator: IndicatorCalculator | None = None,
    ):
        self.symbol = symbol
        self.calculator = calculator or IndicatorCalculator()
        self.buffer = PriceBuffer(symbol=symbol, max_size=max_history)

    @property
    def is_warm(self) -> bool:
        """True once the window holds enough prices for MACD."""
        return len(self.buffer) >= self.calculator.min_history

    def add_price(self, price: float, timestamp: int | None = None) -> MarketAnalysis | None:
        """
        Record a price and analyze the updated window.

        Args:
            price: Latest price
            timestamp: Epoch milliseconds (defaults to now, bumped past the
                last recorded point so rapid samples are all kept)

        Returns:
            MarketAnalysis, or None while the window is still warming up
        """
        now = datetime.now(timezone.utc)
        if timestamp is None:
            timestamp = int(now.timestamp() * 1000)
            latest = self.buffer.latest
            if latest is not None and timestamp <= latest.timestamp:
                timestamp = latest.timestamp + 1
        self.buffer.add(PricePoint(timestamp=timestamp, price=price))

        if not self.is_warm:
            logger.info(
                "%s: collecting data... (%d/%d)",
                self.symbol,
                len(self.buffer),
                self.calculator.min_history,
            )
            return None

        return self.analyze(now)

    def analyze(self, now: datetime | None = None) -> MarketAnalysis:
        """Run indicators and signal generation over the current window."""
        prices = self.buffer.get_prices()
        if not prices:
            raise ValueError(f"{self.symbol}: no prices recorded")
        current = prices[-1]

        rsi, macd = self.calculator.calculate(prices)
        signal = generate_trading_signal(rsi, macd)

        reference = prices[-CHANGE_LOOKBACK] if len(prices) > CHANGE_LOOKBACK else prices[0]
        change = (current - reference) / reference * 100

        return MarketAnalysis(
            timestamp=now or datetime.now(timezone.utc),
            pair=self.symbol,
            price=current,
            price_change_24h=change,
            rsi=rsi,
            macd=macd,
            trading_signal=signal,
            recommendation=generate_recommendation(current, signal),
        )
