"""Trading configuration loaded from trading.yaml.

Supports:
- Safety thresholds applied to every quote
- Paper trading session (starting balance, base currency)
- Auto-trader limits (trade size range, daily trade cap, min confidence)
- Trading pairs to monitor
- Backward compatible: no YAML file = defaults (SOL priced in USDC)
"""

import logging
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from core.models import PaperTradingConfig, SafetyConfig

logger = logging.getLogger(__name__)


class TokenInfo(BaseModel):
    """Known token mint and its decimals."""

    symbol: str
    mint: str
    decimals: int


TOKENS: dict[str, TokenInfo] = {
    "SOL": TokenInfo(
        symbol="SOL",
        mint="So11111111111111111111111111111111111111112",
        decimals=9,
    ),
    "USDC": TokenInfo(
        symbol="USDC",
        mint="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
        decimals=6,
    ),
    "USDT": TokenInfo(
        symbol="USDT",
        mint="Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
        decimals=6,
    ),
}


class TradingPair(BaseModel):
    """A pair to monitor: spend input (base) tokens to acquire output tokens."""

    symbol: str
    input_symbol: str = "USDC"
    input_mint: str = TOKENS["USDC"].mint
    input_decimals: int = 6
    output_mint: str = TOKENS["SOL"].mint
    output_decimals: int = 9

    @classmethod
    def from_tokens(cls, base: str, token: str) -> "TradingPair":
        """Build a pair from two entries of the TOKENS registry."""
        base_info = TOKENS[base]
        token_info = TOKENS[token]
        return cls(
            symbol=token_info.symbol,
            input_symbol=base_info.symbol,
            input_mint=base_info.mint,
            input_decimals=base_info.decimals,
            output_mint=token_info.mint,
            output_decimals=token_info.decimals,
        )


class TradingLimits(BaseModel):
    """Auto-trader limits, sizes in base currency units."""

    min_trade_size: float = Field(default=0.01, gt=0)
    max_trade_size: float = Field(default=1.0, gt=0)
    max_daily_trades: int = Field(default=10, ge=0)
    min_confidence: float = Field(default=70.0, ge=0, le=100)

    @model_validator(mode="after")
    def _validate(self):
        if self.min_trade_size > self.max_trade_size:
            raise ValueError(
                f"min_trade_size ({self.min_trade_size}) must not exceed "
                f"max_trade_size ({self.max_trade_size})"
            )
        return self

    def position_size(self, confidence: float) -> float:
        """Scale trade size linearly with confidence between min and max."""
        size = self.min_trade_size + (self.max_trade_size - self.min_trade_size) * confidence / 100
        return min(size, self.max_trade_size)


def _default_pairs() -> list[TradingPair]:
    return [TradingPair.from_tokens("USDC", "SOL")]


class TradingConfig(BaseModel):
    """Top-level trading.yaml configuration."""

    safety: SafetyConfig = SafetyConfig()
    paper_trading: PaperTradingConfig = PaperTradingConfig(
        starting_balance=1000.0, base_currency="USDC"
    )
    limits: TradingLimits = TradingLimits(min_trade_size=10.0, max_trade_size=100.0)
    pairs: list[TradingPair] = Field(default_factory=_default_pairs)

    @model_validator(mode="after")
    def _validate(self):
        if not self.pairs:
            raise ValueError("at least one entry in 'pairs' is required")
        symbols = [p.symbol for p in self.pairs]
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"pair symbols must be unique, got {symbols}")
        base = self.paper_trading.base_currency
        for pair in self.pairs:
            if pair.input_symbol != base:
                raise ValueError(
                    f"pair '{pair.symbol}' spends {pair.input_symbol}, "
                    f"but the paper trading base currency is {base}"
                )
        return self


_DEFAULT_PATH = Path(__file__).parent.parent / "trading.yaml"


def load_trading_config(path: Path | None = None) -> TradingConfig:
    """Load trading config from YAML file.

    Falls back to defaults if the file doesn't exist.
    """
    config_path = path or _DEFAULT_PATH

    # Load .env beside the config so environment-driven settings resolve
    env_path = config_path.parent / ".env"
    load_dotenv(env_path, override=False)

    if not config_path.exists():
        logger.info("No trading.yaml found at %s, using defaults", config_path)
        return TradingConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = TradingConfig(**raw)
    logger.info(
        "Loaded trading config: %d pairs, starting balance %.2f %s, min confidence %.0f%%",
        len(config.pairs),
        config.paper_trading.starting_balance,
        config.paper_trading.base_currency,
        config.limits.min_confidence,
    )
    return config
