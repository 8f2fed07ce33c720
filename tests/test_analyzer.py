"""Tests for the per-pair market analyzer."""

from datetime import datetime, timezone

import pytest

from core.analyzer import MarketAnalyzer
from core.indicators import calculate_macd, calculate_rsi
from core.signal_generator import generate_recommendation, generate_trading_signal


class TestMarketAnalyzer:
    @pytest.fixture
    def analyzer(self):
        return MarketAnalyzer("SOL")

    def test_warm_up(self, analyzer):
        for i in range(25):
            assert analyzer.add_price(100.0 + i, timestamp=i) is None
        assert not analyzer.is_warm

        analysis = analyzer.add_price(125.0, timestamp=25)

        assert analysis is not None
        assert analyzer.is_warm
        assert analysis.pair == "SOL"
        assert analysis.price == 125.0

    def test_rapid_samples_without_timestamp_are_kept(self, analyzer):
        for i in range(30):
            analyzer.add_price(100.0 + i)

        assert len(analyzer.buffer) == 30
        assert analyzer.buffer.get_prices()[-1] == 129.0

    def test_analysis_contents(self, analyzer):
        prices = [100.0 + i for i in range(30)]
        analysis = None
        for i, price in enumerate(prices):
            analysis = analyzer.add_price(price, timestamp=i)

        assert analysis.rsi == calculate_rsi(prices)
        assert analysis.macd == calculate_macd(prices)
        assert analysis.trading_signal == generate_trading_signal(analysis.rsi, analysis.macd)
        assert analysis.recommendation == generate_recommendation(129.0, analysis.trading_signal)
        # 24 samples back from 129 is 106
        assert analysis.price_change_24h == pytest.approx((129 - 106) / 106 * 100)

    def test_price_change_uses_oldest_when_short(self):
        analyzer = MarketAnalyzer("SOL")
        for i in range(10):
            analyzer.add_price(100.0 + i, timestamp=i)

        analysis = analyzer.analyze()

        assert analysis.price_change_24h == pytest.approx(9.0)

    def test_history_is_bounded(self):
        analyzer = MarketAnalyzer("SOL", max_history=40)
        for i in range(100):
            analyzer.add_price(50.0 + i, timestamp=i)

        assert len(analyzer.buffer) == 40
        assert analyzer.buffer.get_prices()[0] == 110.0

    def test_analyze_uses_given_time(self, analyzer):
        analyzer.add_price(100.0, timestamp=1)
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)

        assert analyzer.analyze(now).timestamp == now

    def test_analyze_empty_raises(self, analyzer):
        with pytest.raises(ValueError, match="no prices"):
            analyzer.analyze()
