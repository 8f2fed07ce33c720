"""Signal generator combining RSI and MACD into a trading action.

This module is pure business logic with no I/O dependencies. Both
functions are deterministic in their inputs.
"""

import logging

from core.models import (
    Crossover,
    MACDResult,
    Recommendation,
    RSIResult,
    RSISignal,
    SignalAction,
    SignalStrength,
    TradingSignal,
)

logger = logging.getLogger(__name__)

# Score contributions
RSI_STRONG_SCORE = 2.0
RSI_MODERATE_SCORE = 1.0
MACD_CROSSOVER_SCORE = 2.0
MACD_HISTOGRAM_SCORE = 0.5

# Action thresholds on the final score
STRONG_THRESHOLD = 3.0
WEAK_THRESHOLD = 1.0

MAX_CONFIDENCE = 95.0
HOLD_CONFIDENCE = 50.0

# Recommendation levels relative to entry
TARGET_RATIO = 0.05
STOP_RATIO = 0.03


def _action_for_score(score: float) -> tuple[SignalAction, float]:
    magnitude = abs(score)
    if score >= STRONG_THRESHOLD:
        return SignalAction.STRONG_BUY, min(MAX_CONFIDENCE, 70 + magnitude * 5)
    if score >= WEAK_THRESHOLD:
        return SignalAction.BUY, 60 + magnitude * 5
    if score <= -STRONG_THRESHOLD:
        return SignalAction.STRONG_SELL, min(MAX_CONFIDENCE, 70 + magnitude * 5)
    if score <= -WEAK_THRESHOLD:
        return SignalAction.SELL, 60 + magnitude * 5
    return SignalAction.HOLD, HOLD_CONFIDENCE


def generate_trading_signal(rsi: RSIResult, macd: MACDResult) -> TradingSignal:
    """
    Combine indicator readings into an action with a confidence score.

    Scoring:
    - RSI oversold: +2 (strong) / +1, overbought: -2 (strong) / -1
    - MACD bullish crossover: +2, bearish crossover: -2
    - MACD histogram: +0.5 if positive, else -0.5

    Score >= 3 -> STRONG_BUY, >= 1 -> BUY, <= -3 -> STRONG_SELL,
    <= -1 -> SELL, otherwise HOLD.

    Args:
        rsi: RSI reading
        macd: MACD reading

    Returns:
        TradingSignal with reasons in contribution order
    """
    reasons: list[str] = []
    score = 0.0

    rsi_score = RSI_STRONG_SCORE if rsi.strength == SignalStrength.STRONG else RSI_MODERATE_SCORE
    if rsi.signal == RSISignal.OVERSOLD:
        score += rsi_score
        reasons.append(f"RSI oversold ({rsi.value:.2f})")
    elif rsi.signal == RSISignal.OVERBOUGHT:
        score -= rsi_score
        reasons.append(f"RSI overbought ({rsi.value:.2f})")

    if macd.crossover == Crossover.BULLISH:
        score += MACD_CROSSOVER_SCORE
        reasons.append("MACD bullish crossover")
    elif macd.crossover == Crossover.BEARISH:
        score -= MACD_CROSSOVER_SCORE
        reasons.append("MACD bearish crossover")

    if macd.histogram > 0:
        score += MACD_HISTOGRAM_SCORE
        reasons.append("MACD histogram positive")
    else:
        score -= MACD_HISTOGRAM_SCORE
        reasons.append("MACD histogram negative")

    action, confidence = _action_for_score(score)
    logger.debug("Signal %s (score=%+.1f, confidence=%.1f)", action.value, score, confidence)
    return TradingSignal(action=action, confidence=confidence, reasons=reasons)


def generate_recommendation(current_price: float, signal: TradingSignal) -> Recommendation:
    """
    Suggest entry, target and stop levels for a signal.

    Buys target +5% with a 3% stop below entry; sells mirror that.
    Position size is the signal confidence as a fraction.
    """
    if signal.action.is_buy:
        return Recommendation(
            action=signal.action,
            entry_price=current_price,
            target_price=current_price * (1 + TARGET_RATIO),
            stop_loss=current_price * (1 - STOP_RATIO),
            position_size=signal.confidence / 100,
        )
    if signal.action.is_sell:
        return Recommendation(
            action=signal.action,
            entry_price=current_price,
            target_price=current_price * (1 - TARGET_RATIO),
            stop_loss=current_price * (1 + STOP_RATIO),
            position_size=signal.confidence / 100,
        )
    return Recommendation(action=SignalAction.HOLD)
