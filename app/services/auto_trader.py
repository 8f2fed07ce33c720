"""Polling auto-trader running against a paper portfolio.

Each cycle fetches a quote per pair, feeds the price into the pair's
analyzer and, when the signal is confident enough, buys into or closes
the paper position. Quote fetching is injected, so this module does no
network I/O itself.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Awaitable, Callable

from app.trading_config import TradingConfig, TradingPair
from core.analyzer import MarketAnalyzer
from core.models import MarketAnalysis, Quote, TradeResult
from core.portfolio import PaperTradingManager
from core.safety import SafetyChecker

logger = logging.getLogger(__name__)

# Type aliases for injected collaborators
QuoteSource = Callable[[TradingPair, float], Awaitable[Quote]]
AnalysisCallback = Callable[[MarketAnalysis], Awaitable[None]]


class AutoTrader:
    """
    Signal-driven paper trader.

    Per pair and cycle:
    1. Fetch a probe quote for the minimum trade size and derive the price
    2. Update the analyzer window and revalue any open position
    3. Buy on BUY/STRONG_BUY, close the position on SELL/STRONG_SELL,
       provided confidence >= limits.min_confidence and the daily trade
       cap is not reached (the cap applies to buys only)

    Owns one PaperTradingManager; cycles are serialized by a lock.
    """

    def __init__(
        self,
        config: TradingConfig,
        quote_source: QuoteSource,
        manager: PaperTradingManager | None = None,
        update_interval: float = 60.0,
        error_backoff: float = 5.0,
        max_history: int = 200,
    ):
        """
        Args:
            config: Trading configuration (pairs, limits, safety)
            quote_source: Async callable returning a quote for (pair, amount)
            manager: Paper trading manager (built from config if omitted)
            update_interval: Seconds between cycles
            error_backoff: Seconds to wait after a cycle with errors
            max_history: Price window size per pair
        """
        self.config = config
        self.quote_source = quote_source
        self.manager = manager or PaperTradingManager(
            config.paper_trading, SafetyChecker(config.safety)
        )
        self.update_interval = update_interval
        self.error_backoff = error_backoff

        self._analyzers = {
            pair.symbol: MarketAnalyzer(pair.symbol, max_history=max_history)
            for pair in config.pairs
        }
        self._callbacks: list[AnalysisCallback] = []
        self._lock = asyncio.Lock()
        self._running = False

        # Daily trade cap bookkeeping
        self._trade_day: date | None = None
        self._daily_trades = 0

    def on_analysis(self, callback: AnalysisCallback) -> None:
        """Register callback for each completed analysis.

        Note: Duplicate callbacks are ignored.
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def get_analyzer(self, symbol: str) -> MarketAnalyzer:
        return self._analyzers[symbol]

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def daily_trades(self) -> int:
        return self._daily_trades

    def _today(self) -> date:
        return datetime.now(timezone.utc).date()

    def _can_trade(self) -> bool:
        today = self._today()
        if today != self._trade_day:
            self._trade_day = today
            self._daily_trades = 0
        return self._daily_trades < self.config.limits.max_daily_trades

    async def run_cycle(self) -> int:
        """Process every pair once.

        Returns:
            Number of pairs that failed
        """
        failures = 0
        async with self._lock:
            for pair in self.config.pairs:
                try:
                    await self.process_pair(pair)
                except Exception as e:
                    failures += 1
                    logger.error("Error analyzing %s: %s", pair.symbol, e)
        return failures

    async def process_pair(self, pair: TradingPair) -> MarketAnalysis | None:
        """Fetch a price for one pair, analyze it and act on the signal."""
        limits = self.config.limits
        probe = await self.quote_source(pair, limits.min_trade_size)
        price = probe.unit_cost(pair.input_decimals, pair.output_decimals)
        if price <= 0:
            raise ValueError(f"quote for {pair.symbol} has no usable price")

        analysis = self._analyzers[pair.symbol].add_price(price)
        self.manager.mark_to_market(pair.symbol, price)
        if analysis is None:
            return None

        signal = analysis.trading_signal
        logger.info(
            "%s: price=%.6f RSI=%.2f (%s) MACD hist=%.6f (%s) -> %s (%.1f%%)",
            pair.symbol,
            price,
            analysis.rsi.value,
            analysis.rsi.signal.value,
            analysis.macd.histogram,
            analysis.macd.crossover.value,
            signal.action.value,
            signal.confidence,
        )

        for callback in self._callbacks:
            await callback(analysis)

        if signal.confidence < limits.min_confidence:
            logger.debug(
                "%s: confidence too low (%.1f%% < %.1f%%)",
                pair.symbol,
                signal.confidence,
                limits.min_confidence,
            )
        elif signal.action.is_buy:
            await self._buy(pair, analysis)
        elif signal.action.is_sell:
            self._sell(pair, analysis)

        return analysis

    async def _buy(self, pair: TradingPair, analysis: MarketAnalysis) -> TradeResult | None:
        if not self._can_trade():
            logger.warning("%s: daily trade limit reached", pair.symbol)
            return None

        size = self.config.limits.position_size(analysis.trading_signal.confidence)
        quote = await self.quote_source(pair, size)
        result = self.manager.execute_trade(
            quote,
            pair.input_decimals,
            pair.output_decimals,
            pair.input_symbol,
            pair.symbol,
        )
        if result.success:
            self._daily_trades += 1
        else:
            logger.warning("%s: buy not executed: %s", pair.symbol, result.error)
        return result

    def _sell(self, pair: TradingPair, analysis: MarketAnalysis) -> TradeResult | None:
        # Exits are never capped; only buys count towards max_daily_trades
        if self.manager.get_position(pair.symbol) is None:
            logger.info("%s: no position to sell", pair.symbol)
            return None

        result = self.manager.close_position(pair.symbol, analysis.price)
        if not result.success:
            logger.warning("%s: sell not executed: %s", pair.symbol, result.error)
        return result

    async def start(self, max_cycles: int | None = None) -> None:
        """Run cycles until stop() is called or max_cycles is reached."""
        self._running = True
        logger.info(
            "Auto trader starting: %d pairs, interval %.1fs, min confidence %.0f%%",
            len(self.config.pairs),
            self.update_interval,
            self.config.limits.min_confidence,
        )

        cycles = 0
        try:
            while self._running:
                failures = await self.run_cycle()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    break
                await asyncio.sleep(self.error_backoff if failures else self.update_interval)
        finally:
            self._running = False
            logger.info("Auto trader stopped after %d cycles", cycles)

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        self._running = False
