"""Technical indicators for signal generation.

Momentum indicators computed with NumPy over a chronological price
sequence. Short histories never raise: RSI and MACD fall back to neutral
readings until enough prices exist.
"""

from typing import Sequence

import numpy as np

from core.models.market import (
    NEUTRAL_MACD,
    NEUTRAL_RSI,
    Crossover,
    MACDResult,
    RSIResult,
    RSISignal,
    SignalStrength,
)

# RSI zone thresholds
RSI_OVERSOLD = 30.0
RSI_OVERSOLD_STRONG = 20.0
RSI_OVERBOUGHT = 70.0
RSI_OVERBOUGHT_STRONG = 80.0

# Relative strength used when there were no losses in the window
RS_NO_LOSS = 100.0


def _to_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray([float(v) for v in values], dtype=np.float64)


def _ema_array(arr: np.ndarray, period: int) -> np.ndarray:
    """EMA seeded with the SMA of the first `period` values."""
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")
    if len(arr) < period:
        return np.empty(0, dtype=np.float64)

    multiplier = 2.0 / (period + 1)
    result = np.empty(len(arr) - period + 1, dtype=np.float64)
    result[0] = np.mean(arr[:period])

    for i in range(period, len(arr)):
        prev = result[i - period]
        result[i - period + 1] = (arr[i] - prev) * multiplier + prev

    return result


def calculate_ema(prices: Sequence[float], period: int) -> list[float]:
    """
    Calculate Exponential Moving Average.

    Args:
        prices: Sequence of prices, oldest first
        period: EMA period

    Returns:
        len(prices) - period + 1 EMA values (empty if not enough prices)
    """
    return _ema_array(_to_array(prices), period).tolist()


def _classify_rsi(value: float) -> tuple[RSISignal, SignalStrength]:
    if value < RSI_OVERSOLD:
        strength = SignalStrength.STRONG if value < RSI_OVERSOLD_STRONG else SignalStrength.MODERATE
        return RSISignal.OVERSOLD, strength
    if value > RSI_OVERBOUGHT:
        strength = SignalStrength.STRONG if value > RSI_OVERBOUGHT_STRONG else SignalStrength.MODERATE
        return RSISignal.OVERBOUGHT, strength
    return RSISignal.NEUTRAL, SignalStrength.WEAK


def calculate_rsi(prices: Sequence[float], period: int = 14) -> RSIResult:
    """
    Calculate Relative Strength Index with Wilder's smoothing.

    Average gain/loss are seeded with the simple mean of the first `period`
    price changes, then smoothed over the remaining changes.

    Args:
        prices: Sequence of prices, oldest first
        period: RSI period

    Returns:
        RSIResult (neutral 50 reading when fewer than period + 1 prices)
    """
    if len(prices) < period + 1:
        return NEUTRAL_RSI

    changes = np.diff(_to_array(prices))
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes > 0, 0.0, -changes)

    avg_gain = float(np.sum(gains[:period])) / period
    avg_loss = float(np.sum(losses[:period])) / period

    for i in range(period, len(changes)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    rs = RS_NO_LOSS if avg_loss == 0 else avg_gain / avg_loss
    value = float(100 - 100 / (1 + rs))

    signal, strength = _classify_rsi(value)
    return RSIResult(value=value, signal=signal, strength=strength)


def _detect_crossover(
    prev_macd: float,
    prev_signal: float,
    macd: float,
    signal: float,
) -> Crossover:
    if prev_macd <= prev_signal and macd > signal:
        return Crossover.BULLISH
    if prev_macd >= prev_signal and macd < signal:
        return Crossover.BEARISH
    return Crossover.NEUTRAL


def calculate_macd(
    prices: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    Calculate MACD, its signal line and the latest crossover.

    MACD line = EMA(fast) - EMA(slow), aligned on the slow EMA.
    Signal line = EMA(MACD line, signal_period).

    Args:
        prices: Sequence of prices, oldest first
        fast_period: Fast EMA period
        slow_period: Slow EMA period
        signal_period: Signal line EMA period

    Returns:
        MACDResult (zero / NEUTRAL when fewer than slow_period prices)

    Raises:
        ValueError: If fast_period is not smaller than slow_period
    """
    if fast_period >= slow_period:
        raise ValueError(
            f"fast_period ({fast_period}) must be smaller than slow_period ({slow_period})"
        )
    if len(prices) < slow_period:
        return NEUTRAL_MACD

    arr = _to_array(prices)
    fast_ema = _ema_array(arr, fast_period)
    slow_ema = _ema_array(arr, slow_period)

    # Fast EMA starts slow - fast bars earlier
    start = slow_period - fast_period
    macd_line = fast_ema[start : start + len(slow_ema)] - slow_ema
    signal_line = _ema_array(macd_line, signal_period)

    macd = float(macd_line[-1])
    if len(signal_line) == 0:
        # Signal line not defined yet
        return MACDResult(macd=macd, signal=macd, histogram=0.0, crossover=Crossover.NEUTRAL)

    signal = float(signal_line[-1])
    crossover = Crossover.NEUTRAL
    if len(macd_line) > 1 and len(signal_line) > 1:
        crossover = _detect_crossover(
            float(macd_line[-2]), float(signal_line[-2]), macd, signal
        )

    return MACDResult(
        macd=macd,
        signal=signal,
        histogram=macd - signal,
        crossover=crossover,
    )


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for the momentum indicators used by the signal generator."""

    def __init__(
        self,
        rsi_period: int = 14,
        macd_fast: int = 12,
        macd_slow: int = 26,
        macd_signal: int = 9,
    ):
        if macd_fast >= macd_slow:
            raise ValueError(
                f"macd_fast ({macd_fast}) must be smaller than macd_slow ({macd_slow})"
            )
        self.rsi_period = rsi_period
        self.macd_fast = macd_fast
        self.macd_slow = macd_slow
        self.macd_signal = macd_signal

    @property
    def min_history(self) -> int:
        """Prices needed before both indicators leave their defaults."""
        return max(self.rsi_period + 1, self.macd_slow)

    def calculate(self, prices: Sequence[float]) -> tuple[RSIResult, MACDResult]:
        """
        Calculate RSI and MACD for the latest price.

        Args:
            prices: Price window, oldest first

        Returns:
            Tuple of (rsi, macd)
        """
        rsi = calculate_rsi(prices, self.rsi_period)
        macd = calculate_macd(prices, self.macd_fast, self.macd_slow, self.macd_signal)
        return rsi, macd
