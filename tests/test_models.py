"""Tests for price buffer, quote and signal models."""

import logging

import pytest
from pydantic import ValidationError

from core.models import (
    PaperTradingConfig,
    PriceBuffer,
    PricePoint,
    Quote,
    RSIResult,
    RSISignal,
    SignalAction,
    SignalStrength,
    TradingSignal,
    generate_trade_id,
)


class TestPriceBuffer:
    """Tests for PriceBuffer."""

    def test_add_and_get_prices(self):
        buffer = PriceBuffer(symbol="SOL")
        for i in range(5):
            buffer.add(PricePoint(timestamp=1_000 + i, price=100.0 + i))

        assert len(buffer) == 5
        assert buffer.get_prices() == [100.0, 101.0, 102.0, 103.0, 104.0]
        assert buffer.latest.price == 104.0

    def test_max_size_evicts_oldest(self):
        buffer = PriceBuffer(symbol="SOL", max_size=3)
        for i in range(5):
            buffer.add(PricePoint(timestamp=i, price=10.0 + i))

        assert len(buffer) == 3
        assert buffer.get_prices() == [12.0, 13.0, 14.0]

    def test_same_timestamp_replaces_last(self):
        buffer = PriceBuffer(symbol="SOL")
        buffer.add(PricePoint(timestamp=1, price=10.0))
        buffer.add(PricePoint(timestamp=2, price=11.0))
        buffer.add(PricePoint(timestamp=2, price=12.0))

        assert buffer.get_prices() == [10.0, 12.0]

    def test_older_timestamp_ignored(self):
        buffer = PriceBuffer(symbol="SOL")
        buffer.add(PricePoint(timestamp=5, price=10.0))
        buffer.add(PricePoint(timestamp=3, price=99.0))

        assert buffer.get_prices() == [10.0]

    def test_older_timestamp_is_logged(self, caplog):
        buffer = PriceBuffer(symbol="SOL")
        buffer.add(PricePoint(timestamp=5, price=10.0))

        with caplog.at_level(logging.DEBUG, logger="core.models.market"):
            buffer.add(PricePoint(timestamp=3, price=99.0))

        assert "SOL: dropped out-of-order price at 3 (latest 5)" in caplog.text

    def test_same_timestamp_is_not_logged(self, caplog):
        buffer = PriceBuffer(symbol="SOL")
        buffer.add(PricePoint(timestamp=5, price=10.0))

        with caplog.at_level(logging.DEBUG, logger="core.models.market"):
            buffer.add(PricePoint(timestamp=5, price=11.0))

        assert "out-of-order" not in caplog.text

    def test_empty_buffer(self):
        buffer = PriceBuffer(symbol="SOL")
        assert len(buffer) == 0
        assert buffer.latest is None
        assert buffer.get_prices() == []

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            PricePoint(timestamp=1, price=0.0)


class TestQuote:
    """Tests for Quote helpers."""

    @pytest.fixture
    def quote(self):
        # Aggregators send raw amounts as strings
        return Quote.model_validate(
            {
                "input_mint": "SOL",
                "output_mint": "USDC",
                "in_amount": "100000000",
                "out_amount": "24567890",
                "slippage_bps": 50,
                "price_impact_pct": "0.000234",
                "route_plan": [
                    {"label": "Orca", "percent": 60},
                    {"label": "Raydium", "percent": 40},
                ],
            }
        )

    def test_coerces_numeric_strings(self, quote):
        assert quote.in_amount == 100_000_000
        assert quote.out_amount == 24_567_890
        assert quote.price_impact_pct == pytest.approx(0.000234)
        assert quote.swap_mode == "ExactIn"

    def test_amounts(self, quote):
        assert quote.input_amount(9) == pytest.approx(0.1)
        assert quote.output_amount(6) == pytest.approx(24.56789)
        assert quote.price_impact_percent == pytest.approx(0.0234)
        assert quote.route_count == 2

    def test_rate_and_unit_cost(self, quote):
        assert quote.rate(9, 6) == pytest.approx(245.6789)
        assert quote.unit_cost(9, 6) == pytest.approx(0.1 / 24.56789)

    def test_zero_amounts(self):
        quote = Quote(
            input_mint="SOL",
            output_mint="USDC",
            in_amount=0,
            out_amount=0,
            slippage_bps=50,
            price_impact_pct=0.0,
        )
        assert quote.rate(9, 6) == 0.0
        assert quote.unit_cost(9, 6) == 0.0
        assert quote.route_count == 0

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Quote(
                input_mint="SOL",
                output_mint="USDC",
                in_amount=-1,
                out_amount=0,
                slippage_bps=50,
                price_impact_pct=0.0,
            )


class TestSignalModels:
    def test_action_direction(self):
        assert SignalAction.STRONG_BUY.is_buy
        assert SignalAction.BUY.is_buy
        assert not SignalAction.HOLD.is_buy
        assert not SignalAction.HOLD.is_sell
        assert SignalAction.SELL.is_sell
        assert SignalAction.STRONG_SELL.is_sell

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            TradingSignal(action=SignalAction.BUY, confidence=96)
        with pytest.raises(ValidationError):
            TradingSignal(action=SignalAction.HOLD, confidence=49)

    def test_rsi_value_bounds(self):
        with pytest.raises(ValidationError):
            RSIResult(value=101, signal=RSISignal.OVERBOUGHT, strength=SignalStrength.STRONG)


class TestPortfolioModels:
    def test_trade_id_format(self):
        trade_id = generate_trade_id()
        prefix, millis, suffix = trade_id.split("-")

        assert prefix == "trade"
        assert millis.isdigit()
        assert len(suffix) == 9
        assert generate_trade_id() != trade_id

    def test_starting_balance_must_be_positive(self):
        with pytest.raises(ValidationError):
            PaperTradingConfig(starting_balance=0)
