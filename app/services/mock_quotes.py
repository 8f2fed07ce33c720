"""Synthetic quotes for demos and tests.

No network access: quotes are built from a price, either fixed or
following a seeded random walk.
"""

from typing import Sequence

import numpy as np

from app.trading_config import TOKENS, TradingPair
from core.models import Quote, RoutePlan


DEFAULT_ROUTES: tuple[tuple[str, float], ...] = (("Orca", 60.0), ("Raydium", 40.0))


def build_quote(
    pair: TradingPair,
    amount: float,
    price: float,
    price_impact_pct: float = 0.0002,
    slippage_bps: int = 50,
    routes: Sequence[tuple[str, float]] = DEFAULT_ROUTES,
) -> Quote:
    """
    Build a quote spending `amount` base tokens at `price` base per token.

    Args:
        pair: Pair being quoted
        amount: Input amount in human units
        price: Base currency per output token
        price_impact_pct: Price impact as a fraction
        slippage_bps: Slippage tolerance
        routes: (label, percent) route splits

    Returns:
        Quote with raw integer amounts
    """
    if price <= 0:
        raise ValueError(f"price must be positive, got {price}")

    in_amount = round(amount * 10**pair.input_decimals)
    out_amount = round(amount / price * 10**pair.output_decimals)
    return Quote(
        input_mint=pair.input_mint,
        output_mint=pair.output_mint,
        in_amount=in_amount,
        out_amount=out_amount,
        other_amount_threshold=round(out_amount * (1 - slippage_bps / 10_000)),
        slippage_bps=slippage_bps,
        price_impact_pct=price_impact_pct,
        route_plan=[RoutePlan(label=label, percent=percent) for label, percent in routes],
    )


class RandomWalkQuoteSource:
    """Async quote source whose price follows a seeded geometric random walk.

    Each call advances the pair's price by one step.
    """

    def __init__(
        self,
        start_prices: dict[str, float],
        volatility: float = 0.01,
        drift: float = 0.0,
        seed: int | None = None,
        price_impact_pct: float = 0.0002,
        slippage_bps: int = 50,
    ):
        self._prices = dict(start_prices)
        self.volatility = volatility
        self.drift = drift
        self.price_impact_pct = price_impact_pct
        self.slippage_bps = slippage_bps
        self._rng = np.random.default_rng(seed)

    def current_price(self, symbol: str) -> float:
        return self._prices[symbol]

    def _step(self, symbol: str) -> float:
        shock = self._rng.normal(self.drift, self.volatility)
        self._prices[symbol] *= float(np.exp(shock))
        return self._prices[symbol]

    async def __call__(self, pair: TradingPair, amount: float) -> Quote:
        price = self._step(pair.symbol)
        return build_quote(
            pair,
            amount,
            price,
            price_impact_pct=self.price_impact_pct,
            slippage_bps=self.slippage_bps,
        )


# =============================================================================
# Scripted demo: SOL base currency buying USDC
# =============================================================================

DEMO_PAIR = TradingPair.from_tokens("SOL", "USDC")

DEMO_QUOTES: dict[str, Quote] = {
    # 0.1 SOL -> ~24.57 USDC, split across two pools
    "sol_to_usdc": Quote(
        input_mint=TOKENS["SOL"].mint,
        output_mint=TOKENS["USDC"].mint,
        in_amount=100_000_000,
        out_amount=24_567_890,
        other_amount_threshold=24_323_211,
        slippage_bps=50,
        price_impact_pct=0.000234,
        route_plan=[
            RoutePlan(label="Orca", percent=60),
            RoutePlan(label="Raydium", percent=40),
        ],
    ),
    # 0.1 SOL -> 25 USDC after the price moved
    "sol_to_usdc_higher": Quote(
        input_mint=TOKENS["SOL"].mint,
        output_mint=TOKENS["USDC"].mint,
        in_amount=100_000_000,
        out_amount=25_000_000,
        other_amount_threshold=24_750_000,
        slippage_bps=50,
        price_impact_pct=0.000189,
        route_plan=[RoutePlan(label="Orca", percent=100)],
    ),
}
