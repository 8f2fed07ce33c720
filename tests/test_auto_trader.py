"""Tests for the polling auto-trader."""

from datetime import date

import pytest

from app.services.auto_trader import AutoTrader
from app.services.mock_quotes import build_quote
from app.trading_config import TradingConfig, TradingLimits
from core.models import MarketAnalysis, TradeType
from core.portfolio import PaperTradingManager
from core.safety import SafetyChecker


def falling(n: int) -> list[float]:
    """Accelerating decline: oversold RSI with a negative MACD histogram (BUY, 67.5%)."""
    return [200.0 - 0.05 * i * i for i in range(n)]


def rising(n: int) -> list[float]:
    """Accelerating rally: overbought RSI (SELL)."""
    return [100.0 + 0.05 * i * i for i in range(n)]


class ScriptedQuotes:
    """Quote source returning quotes at whatever price the test sets."""

    def __init__(self, price: float = 100.0):
        self.price = price
        self.amounts: list[float] = []

    async def __call__(self, pair, amount):
        self.amounts.append(amount)
        return build_quote(pair, amount, self.price)


async def run_prices(trader: AutoTrader, source: ScriptedQuotes, prices: list[float]) -> None:
    for price in prices:
        source.price = price
        await trader.run_cycle()


def make_config(min_confidence: float = 60.0, max_daily_trades: int = 10) -> TradingConfig:
    return TradingConfig(
        limits=TradingLimits(
            min_trade_size=10.0,
            max_trade_size=100.0,
            max_daily_trades=max_daily_trades,
            min_confidence=min_confidence,
        )
    )


def open_position(config: TradingConfig) -> PaperTradingManager:
    """Manager holding 0.5 SOL bought at 100 USDC."""
    manager = PaperTradingManager(config.paper_trading, SafetyChecker(config.safety))
    pair = config.pairs[0]
    opened = manager.execute_trade(
        build_quote(pair, 50.0, 100.0),
        pair.input_decimals,
        pair.output_decimals,
        pair.input_symbol,
        pair.symbol,
    )
    assert opened.success
    return manager


class TestAutoTrader:
    @pytest.fixture
    def source(self):
        return ScriptedQuotes()

    @pytest.mark.asyncio
    async def test_no_trades_during_warm_up(self, source):
        trader = AutoTrader(make_config(), source, update_interval=0)

        await run_prices(trader, source, falling(25))

        assert len(trader.get_analyzer("SOL").buffer) == 25
        assert trader.manager.get_trades() == ()
        assert source.amounts == [10.0] * 25

    @pytest.mark.asyncio
    async def test_buys_on_buy_signal(self, source):
        trader = AutoTrader(make_config(), source, update_interval=0)

        await run_prices(trader, source, falling(26))

        trades = trader.manager.get_trades()
        assert len(trades) == 1
        assert trades[0].type == TradeType.SWAP
        # 10 + 90 * 0.675
        assert trades[0].input_amount == pytest.approx(70.75)
        assert trades[0].price == pytest.approx(falling(26)[-1], rel=1e-6)
        assert trader.manager.get_position("SOL") is not None
        assert trader.daily_trades == 1

    @pytest.mark.asyncio
    async def test_respects_min_confidence(self, source):
        trader = AutoTrader(make_config(min_confidence=70.0), source, update_interval=0)

        await run_prices(trader, source, falling(40))

        assert trader.manager.get_trades() == ()

    @pytest.mark.asyncio
    async def test_respects_daily_trade_limit(self, source):
        trader = AutoTrader(make_config(max_daily_trades=3), source, update_interval=0)

        await run_prices(trader, source, falling(40))

        assert len(trader.manager.get_trades()) == 3
        assert trader.manager.get_portfolio().cash == pytest.approx(1000 - 3 * 70.75)

    @pytest.mark.asyncio
    async def test_daily_limit_resets_on_new_day(self, source):
        trader = AutoTrader(make_config(max_daily_trades=1), source, update_interval=0)
        prices = falling(28)

        await run_prices(trader, source, prices[:27])
        assert len(trader.manager.get_trades()) == 1

        trader._today = lambda: date(2099, 1, 1)
        await run_prices(trader, source, prices[27:])
        assert len(trader.manager.get_trades()) == 2

    @pytest.mark.asyncio
    async def test_sells_open_position(self, source):
        config = make_config()
        manager = open_position(config)

        trader = AutoTrader(config, source, manager=manager, update_interval=0)
        await run_prices(trader, source, rising(26))

        assert manager.get_position("SOL") is None
        last = manager.get_trades()[-1]
        assert last.type == TradeType.SELL
        assert last.profit > 0
        # Sells do not count towards the daily cap
        assert trader.daily_trades == 0

    @pytest.mark.asyncio
    async def test_sell_allowed_after_daily_limit_reached(self, source):
        config = make_config(max_daily_trades=1)
        manager = open_position(config)
        trader = AutoTrader(config, source, manager=manager, update_interval=0)
        assert trader._can_trade()
        trader._daily_trades = 1
        assert not trader._can_trade()

        await run_prices(trader, source, rising(30))

        assert manager.get_position("SOL") is None
        assert manager.get_trades()[-1].type == TradeType.SELL
        assert trader.daily_trades == 1

    @pytest.mark.asyncio
    async def test_sell_without_position_is_noop(self, source):
        trader = AutoTrader(make_config(), source, update_interval=0)

        await run_prices(trader, source, rising(30))

        assert trader.manager.get_trades() == ()

    @pytest.mark.asyncio
    async def test_revalues_position_each_cycle(self, source):
        trader = AutoTrader(make_config(min_confidence=100.0), source, update_interval=0)
        pair = trader.config.pairs[0]
        trader.manager.execute_trade(
            build_quote(pair, 50.0, 100.0),
            pair.input_decimals,
            pair.output_decimals,
            pair.input_symbol,
            pair.symbol,
        )

        await run_prices(trader, source, [110.0])

        position = trader.manager.get_position("SOL")
        assert position.current_value == pytest.approx(55.0, rel=1e-6)
        assert trader.manager.get_portfolio().total_value == pytest.approx(1005.0, rel=1e-6)

    @pytest.mark.asyncio
    async def test_quote_errors_are_counted_not_raised(self):
        async def broken(pair, amount):
            raise RuntimeError("quote service unavailable")

        trader = AutoTrader(make_config(), broken, update_interval=0)

        assert await trader.run_cycle() == 1
        assert trader.manager.get_trades() == ()

    @pytest.mark.asyncio
    async def test_analysis_callbacks(self, source):
        trader = AutoTrader(make_config(), source, update_interval=0)
        received: list[MarketAnalysis] = []

        async def callback(analysis):
            received.append(analysis)

        trader.on_analysis(callback)
        trader.on_analysis(callback)  # duplicate ignored
        await run_prices(trader, source, falling(27))

        assert len(received) == 2
        assert received[-1].pair == "SOL"
        assert received[-1].price == pytest.approx(falling(27)[-1], rel=1e-6)

    @pytest.mark.asyncio
    async def test_start_runs_max_cycles(self, source):
        trader = AutoTrader(make_config(), source, update_interval=0, error_backoff=0)

        await trader.start(max_cycles=3)

        assert source.amounts == [10.0] * 3
        assert not trader.is_running

    @pytest.mark.asyncio
    async def test_stop_from_callback(self):
        prices = iter(falling(100))

        async def source(pair, amount):
            return build_quote(pair, amount, next(prices))

        trader = AutoTrader(TradingConfig(), source, update_interval=0)
        analyses = []

        async def stop_on_first(analysis):
            analyses.append(analysis)
            trader.stop()

        trader.on_analysis(stop_on_first)
        await trader.start()

        assert len(analyses) == 1
        assert not trader.is_running
        assert len(trader.get_analyzer("SOL").buffer) == 26
